"""
Pure metric computation functions.

Volume, estimated one-rep-max and the dashboard trend series derived
from them.  Warmup sets never count toward volume or strength.

All functions are pure: sessions are passed in, nothing is cached.
"""

import math
from datetime import datetime, timedelta
from typing import Sequence

from .config import (
    EPLEY_DIVISOR,
    SPLIT_DISTRIBUTION_LIMIT,
    STRENGTH_DELTA_TREND_LIMIT,
    STRENGTH_TREND_LIMIT,
)
from .models import LoggedExercise, WorkoutSession


def round_half_away(value: float) -> float:
    """
    Round to the nearest integer, halves away from zero.

    Python's round() rounds halves to even; displayed averages and
    weight targets use schoolbook rounding instead.
    """
    return math.copysign(math.floor(abs(value) + 0.5), value)


def exercise_volume(logged_exercise: LoggedExercise) -> float:
    """
    Sum of weight × reps over the working sets of one logged exercise.

    Args:
        logged_exercise: Logged exercise

    Returns:
        Volume, 0.0 if there are no working sets
    """
    return sum(s.volume for s in logged_exercise.sets if not s.is_warmup)


def total_session_volume(session: WorkoutSession) -> float:
    """
    Sum of weight × reps over all working sets in the session.

    Args:
        session: Workout session

    Returns:
        Volume, 0.0 for a session with no working sets
    """
    return sum(exercise_volume(le) for le in session.logged_exercises)


def estimated_one_rep_max(weight: float, reps: int) -> float:
    """
    Estimate 1RM using Epley formula.

    1RM = weight * (1 + reps/30)

    Args:
        weight: Load lifted
        reps: Reps performed

    Returns:
        Estimated 1RM, or 0.0 when reps <= 0
    """
    if reps <= 0:
        return 0.0
    return weight * (1 + reps / EPLEY_DIVISOR)


def session_peak_one_rep_max(session: WorkoutSession) -> float:
    """Highest Epley estimate over the session's working sets (0.0 if none)."""
    estimates = [
        estimated_one_rep_max(s.weight, s.reps)
        for le in session.logged_exercises
        for s in le.sets
        if not s.is_warmup
    ]
    return max(estimates, default=0.0)


def sort_chronological(sessions: Sequence[WorkoutSession]) -> list[WorkoutSession]:
    return sorted(sessions, key=lambda s: s.started_at)


# ---------------------------------------------------------------------------
# Dashboard series
# ---------------------------------------------------------------------------


def today_volume(sessions: Sequence[WorkoutSession], now: datetime | None = None) -> float:
    """Total working volume of sessions started on the same calendar day as *now*."""
    now = now or datetime.now()
    return sum(
        total_session_volume(s) for s in sessions if s.started_at.date() == now.date()
    )


def split_distribution(
    sessions: Sequence[WorkoutSession],
    limit: int = SPLIT_DISTRIBUTION_LIMIT,
) -> list[tuple[str, int]]:
    """
    Count splits among the most recent sessions.

    Args:
        sessions: All sessions (any order)
        limit: How many of the most recent sessions to consider

    Returns:
        (split name, count) pairs, most frequent first, ties by name
    """
    recent = sorted(sessions, key=lambda s: s.started_at, reverse=True)[:limit]
    counts: dict[str, int] = {}
    for session in recent:
        counts[session.split_name] = counts.get(session.split_name, 0) + 1
    return sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))


def strength_trend(
    sessions: Sequence[WorkoutSession],
    limit: int = STRENGTH_TREND_LIMIT,
) -> list[tuple[datetime, float]]:
    """
    Peak e1RM per session for the last *limit* sessions, oldest first.
    """
    recent = sort_chronological(sessions)[-limit:] if limit > 0 else []
    return [(s.started_at, session_peak_one_rep_max(s)) for s in recent]


def strength_delta_this_week(
    sessions: Sequence[WorkoutSession],
    now: datetime | None = None,
) -> float:
    """
    Percent change of peak e1RM over the last 7 days.

    The latest trend point inside the last 7 days is compared with a
    baseline: the first point older than 7 days, or failing that the
    second-to-last point.

    Returns:
        Percent change, 0.0 when there is not enough data
    """
    trend = strength_trend(sessions, limit=STRENGTH_DELTA_TREND_LIMIT)
    if len(trend) < 2:
        return 0.0

    now = now or datetime.now()
    week_ago = now - timedelta(days=7)
    recent = [p for p in trend if p[0] >= week_ago]
    if not recent:
        return 0.0

    latest = recent[-1][1]
    older = [p for p in trend if p[0] < week_ago]
    baseline = older[0][1] if older else trend[-2][1]
    if baseline <= 0:
        return 0.0
    return (latest - baseline) / baseline * 100


def consistency_last_7_days(
    sessions: Sequence[WorkoutSession],
    now: datetime | None = None,
) -> list[bool]:
    """
    One flag per day for the last 7 days (oldest first, today last):
    True if at least one session started that day.
    """
    now = now or datetime.now()
    days = {s.started_at.date() for s in sessions}
    return [(now - timedelta(days=offset)).date() in days for offset in range(6, -1, -1)]


def volume_series(
    sessions: Sequence[WorkoutSession],
    days: int,
    now: datetime | None = None,
) -> list[tuple[datetime, float]]:
    """
    Chronological (started_at, volume) points for sessions in the last *days* days.
    """
    now = now or datetime.now()
    cutoff = now - timedelta(days=days)
    return [
        (s.started_at, total_session_volume(s))
        for s in sort_chronological(sessions)
        if s.started_at >= cutoff
    ]
