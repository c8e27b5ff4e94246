"""
Progressive overload recommendations.

Double progression: add reps at the same weight until the rep goal is
reached, then add weight and start back at 6-8 reps.  Working-weight
targets for 5/8/10 reps come from the inverted Epley formula applied to
the best recent e1RM:

    weight(reps) = e1RM / (1 + reps/30), rounded to the nearest 5
"""

from dataclasses import dataclass, field
from typing import Literal, Sequence

from .config import (
    EPLEY_DIVISOR,
    LARGE_INCREMENT_CATEGORIES,
    LARGE_WEIGHT_INCREMENT,
    RECOMMENDATION_REPS,
    REP_GOAL,
    RESTART_REP_RANGE,
    ROUNDING_STEP,
    WEIGHT_INCREMENT,
    WORKING_SET_HISTORY_LIMIT,
)
from .models import Exercise, LoggedSet, WorkoutSession
from .stats import estimated_one_rep_max, round_half_away, sort_chronological

SuggestionAction = Literal["add_reps", "add_weight"]


@dataclass(frozen=True)
class WorkingWeightRecommendation:
    reps: int
    weight: float


@dataclass(frozen=True)
class ProgressiveSuggestion:
    message: str
    action: SuggestionAction
    target_weight: float
    target_reps: int | None                 # None when moving up in weight
    estimated_one_rm: float | None
    recommendations: list[WorkingWeightRecommendation] = field(default_factory=list)


def round_to_nearest_5(value: float) -> float:
    """round(value / 5) * 5, halves away from zero."""
    return round_half_away(value / ROUNDING_STEP) * ROUNDING_STEP


def suggested_increment(exercise: Exercise | None) -> float:
    """10 for leg/back exercises (category substring match), else 5."""
    if exercise is None:
        return WEIGHT_INCREMENT
    category = exercise.category.lower()
    if any(c in category for c in LARGE_INCREMENT_CATEGORIES):
        return LARGE_WEIGHT_INCREMENT
    return WEIGHT_INCREMENT


def estimate_one_rm(sets: Sequence[LoggedSet]) -> float | None:
    """
    Best Epley estimate over working sets with positive reps and weight.

    Returns:
        e1RM, or None when no set qualifies
    """
    estimates = [
        estimated_one_rep_max(s.weight, s.reps)
        for s in sets
        if not s.is_warmup and s.reps > 0 and s.weight > 0
    ]
    return max(estimates) if estimates else None


def weight_for_reps(one_rm: float, reps: int) -> float:
    """Inverted Epley, rounded to the nearest 5."""
    return round_to_nearest_5(one_rm / (1 + reps / EPLEY_DIVISOR))


def _fmt_weight(weight: float) -> str:
    return f"{weight:g}"


def suggestion(
    exercise: Exercise | None,
    latest_working_set: LoggedSet | None,
    recent_working_sets: Sequence[LoggedSet] = (),
) -> ProgressiveSuggestion | None:
    """
    Recommend the next working weight/reps for one exercise.

    Args:
        exercise: Exercise being trained (category drives the increment)
        latest_working_set: Most recent working set, or None
        recent_working_sets: Bounded recent history used for the e1RM

    Returns:
        ProgressiveSuggestion, or None when there is no prior working set
    """
    if latest_working_set is None:
        return None

    current_weight = latest_working_set.weight
    current_reps = latest_working_set.reps

    if current_reps < REP_GOAL:
        target_reps = min(REP_GOAL, current_reps + 1)
        target_weight = current_weight
        action: SuggestionAction = "add_reps"
        message = (
            f"Last set was {current_reps}x{_fmt_weight(current_weight)}. "
            f"Keep the same weight and aim for {target_reps} reps next set."
        )
    else:
        target_reps = None
        target_weight = round_to_nearest_5(current_weight + suggested_increment(exercise))
        action = "add_weight"
        message = (
            f"You hit {current_reps} reps at {_fmt_weight(current_weight)}. "
            f"Increase to ~{_fmt_weight(target_weight)} and work back up from "
            f"{RESTART_REP_RANGE} reps."
        )

    one_rm = estimate_one_rm([*recent_working_sets, latest_working_set])
    recommendations = (
        [WorkingWeightRecommendation(reps=r, weight=weight_for_reps(one_rm, r)) for r in RECOMMENDATION_REPS]
        if one_rm is not None
        else []
    )

    return ProgressiveSuggestion(
        message=message,
        action=action,
        target_weight=target_weight,
        target_reps=target_reps,
        estimated_one_rm=one_rm,
        recommendations=recommendations,
    )


def working_set_history(
    sessions: Sequence[WorkoutSession],
    exercise_id: str,
    limit: int = WORKING_SET_HISTORY_LIMIT,
) -> list[LoggedSet]:
    """
    Chronological working sets of one exercise across sessions.

    Sessions are ordered by start time and sets within a session by
    creation time; only the last *limit* sets are returned.
    """
    history: list[LoggedSet] = []
    for session in sort_chronological(sessions):
        for logged in session.ordered_exercises():
            if logged.exercise.id != exercise_id:
                continue
            history.extend(sorted(logged.working_sets, key=lambda s: s.created_at))
    return history[-limit:] if limit > 0 else []


def suggestion_from_history(
    exercise: Exercise,
    sessions: Sequence[WorkoutSession],
    limit: int = WORKING_SET_HISTORY_LIMIT,
) -> ProgressiveSuggestion | None:
    """Split the exercise's working-set history into latest + recent and suggest."""
    history = working_set_history(sessions, exercise.id, limit)
    if not history:
        return None
    return suggestion(exercise, history[-1], history[:-1])
