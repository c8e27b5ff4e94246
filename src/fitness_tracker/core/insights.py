"""
Rule-based training tips.

Rules are evaluated in a fixed order and each matching rule appends
one tip, so the same history always yields the same ordered list:

  1. consistency: sessions this week vs. the weekly target
  2. volume: rounded average volume of the last 4 sessions (if > 0)
  3. hygiene: some sessions were never ended

With no sessions at all a single "baseline" tip is returned instead.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Literal, Sequence

from .config import DEFAULT_FIRST_WEEKDAY, DEFAULT_WEEKLY_TARGET, RECENT_VOLUME_WINDOW
from .models import WorkoutSession
from .stats import round_half_away, sort_chronological, total_session_volume
from .weekly_goal import weekly_consistency

TipKind = Literal["baseline", "consistency", "volume", "hygiene"]


@dataclass(frozen=True)
class InsightTip:
    kind: TipKind
    title: str
    message: str


def recent_average_volume(
    sessions: Sequence[WorkoutSession],
    window: int = RECENT_VOLUME_WINDOW,
) -> float:
    """Mean session volume over the last *window* sessions (chronological)."""
    recent = sort_chronological(sessions)[-window:]
    if not recent:
        return 0.0
    return sum(total_session_volume(s) for s in recent) / len(recent)


def tips(
    sessions: Sequence[WorkoutSession],
    target: int = DEFAULT_WEEKLY_TARGET,
    reference_date: datetime | None = None,
    first_weekday: int = DEFAULT_FIRST_WEEKDAY,
) -> list[InsightTip]:
    """
    Generate tips for the given history.

    Args:
        sessions: All logged sessions (any order)
        target: Weekly session target
        reference_date: Date whose calendar week is evaluated (default: now)
        first_weekday: 0 = Monday ... 6 = Sunday

    Returns:
        Ordered list of tips (never empty)
    """
    if not sessions:
        return [
            InsightTip(
                kind="baseline",
                title="Start Your Baseline",
                message="Log your first workout to unlock consistency and coverage insights.",
            )
        ]

    items: list[InsightTip] = []

    consistency = weekly_consistency(sessions, target, reference_date, first_weekday)
    if consistency.completed < consistency.target:
        items.append(
            InsightTip(
                kind="consistency",
                title="Consistency Opportunity",
                message=(
                    f"You are {consistency.completed}/{consistency.target} sessions this week. "
                    "Add one short session to stay on track."
                ),
            )
        )
    else:
        items.append(
            InsightTip(
                kind="consistency",
                title="Consistency Strong",
                message=(
                    "You already hit your weekly session target. "
                    "Focus on quality reps and recovery today."
                ),
            )
        )

    average_volume = recent_average_volume(sessions)
    if average_volume > 0:
        items.append(
            InsightTip(
                kind="volume",
                title="Volume Trend",
                message=(
                    f"Your recent average session volume is {int(round_half_away(average_volume))}. "
                    "Keep load increases gradual for stable progress."
                ),
            )
        )

    if any(s.ended_at is None for s in sessions):
        items.append(
            InsightTip(
                kind="hygiene",
                title="Session Hygiene",
                message=(
                    "Some sessions are still active. End sessions after training "
                    "for cleaner history and better weekly analytics."
                ),
            )
        )

    return items
