"""
Weekly session goal.

Counts sessions started within the calendar week containing a
reference date and compares the count with a weekly target.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Sequence

from .config import DEFAULT_FIRST_WEEKDAY, DEFAULT_WEEKLY_TARGET
from .models import WorkoutSession


@dataclass(frozen=True)
class WeeklyConsistencySummary:
    completed: int
    target: int

    @property
    def progress(self) -> float:
        """completed / target clamped to 1.0; 0.0 when target <= 0."""
        if self.target <= 0:
            return 0.0
        return min(1.0, self.completed / self.target)

    @property
    def remaining(self) -> int:
        return remaining_sessions(self.target, self.completed)


def week_interval(
    reference_date: datetime,
    first_weekday: int = DEFAULT_FIRST_WEEKDAY,
) -> tuple[datetime, datetime]:
    """
    Half-open [start, end) calendar week containing *reference_date*.

    Args:
        reference_date: Any moment inside the week
        first_weekday: 0 = Monday ... 6 = Sunday

    Returns:
        (start, end) where start is midnight of the week's first day
    """
    if not 0 <= first_weekday <= 6:
        raise ValueError(f"first_weekday must be 0-6, got {first_weekday}")
    offset = (reference_date.weekday() - first_weekday) % 7
    start = (reference_date - timedelta(days=offset)).replace(
        hour=0, minute=0, second=0, microsecond=0
    )
    return start, start + timedelta(days=7)


def completed_sessions_this_week(
    sessions: Sequence[WorkoutSession],
    reference_date: datetime | None = None,
    first_weekday: int = DEFAULT_FIRST_WEEKDAY,
) -> int:
    """
    Number of sessions started in the week containing *reference_date*.

    Active (not yet ended) sessions count too.
    """
    start, end = week_interval(reference_date or datetime.now(), first_weekday)
    return sum(1 for s in sessions if start <= s.started_at < end)


def remaining_sessions(target: int, completed: int) -> int:
    """Sessions still needed to hit the target; never negative."""
    return max(0, target - completed)


def weekly_consistency(
    sessions: Sequence[WorkoutSession],
    target: int = DEFAULT_WEEKLY_TARGET,
    reference_date: datetime | None = None,
    first_weekday: int = DEFAULT_FIRST_WEEKDAY,
) -> WeeklyConsistencySummary:
    completed = completed_sessions_this_week(sessions, reference_date, first_weekday)
    return WeeklyConsistencySummary(completed=completed, target=target)
