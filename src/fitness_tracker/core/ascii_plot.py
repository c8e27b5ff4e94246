"""
ASCII charts for terminal progress views.

Horizontal bar charts for session volume, weekly volume and the
strength (peak e1RM) trend.
"""

from datetime import datetime, timedelta

from .config import DEFAULT_FIRST_WEEKDAY
from .models import WorkoutSession
from .stats import total_session_volume
from .weekly_goal import week_interval

BAR_CHAR = "█"


def _format_value(value: float) -> str:
    if value == int(value):
        return f"{int(value):,}"
    return f"{value:,.1f}"


def render_bars(
    rows: list[tuple[str, float]],
    width: int = 40,
    title: str = "",
    empty_message: str = "Nothing to chart yet.",
) -> str:
    """
    Render (label, value) rows as horizontal bars scaled to the largest value.

    Zero rows get an empty bar; negative values are drawn as zero.
    """
    if not rows:
        return empty_message

    peak = max(max(v for _, v in rows), 0.0)
    label_width = max(len(label) for label, _ in rows)

    out: list[str] = []
    if title:
        out.extend([title, "=" * len(title)])
    for label, value in rows:
        filled = round(max(value, 0.0) / peak * width) if peak else 0
        out.append(f"{label.ljust(label_width)} | {BAR_CHAR * filled} {_format_value(value)}".rstrip())
    return "\n".join(out)


def create_series_chart(
    points: list[tuple[datetime, float]],
    title: str,
    width: int = 40,
    empty_message: str = "No progress data. Complete workouts to see your trend over time.",
) -> str:
    """Bar chart with one bar per (date, value) point, labelled MM-DD."""
    rows = [(when.strftime("%m-%d"), value) for when, value in points]
    return render_bars(rows, width=width, title=title, empty_message=empty_message)


def _week_label(weeks_back: int) -> str:
    if weeks_back == 0:
        return "This week"
    if weeks_back == 1:
        return "Last week"
    return f"{weeks_back} weeks ago"


def create_weekly_volume_chart(
    sessions: list[WorkoutSession],
    weeks: int = 4,
    now: datetime | None = None,
    first_weekday: int = DEFAULT_FIRST_WEEKDAY,
) -> str:
    """
    Create a chart of training volume (weight × reps) per calendar week.

    The last bar is the calendar week containing *now*; earlier bars step
    back one week each. Sessions after the current week are not counted.

    Args:
        sessions: Training history
        weeks: Number of weeks to show
        now: Reference moment (default: datetime.now())
        first_weekday: 0 = Monday ... 6 = Sunday

    Returns:
        ASCII chart string
    """
    if not sessions:
        return "No training history."

    current_start, current_end = week_interval(now or datetime.now(), first_weekday)
    totals = [0.0] * weeks
    for session in sessions:
        if session.started_at >= current_end:
            continue
        session_start, _ = week_interval(session.started_at, first_weekday)
        weeks_back = (current_start - session_start).days // 7
        if weeks_back < weeks:
            totals[weeks_back] += total_session_volume(session)

    rows = [(_week_label(i), totals[i]) for i in range(weeks - 1, -1, -1)]
    return render_bars(rows, title="Weekly Volume (weight × reps)")


def create_consistency_strip(flags: list[bool], now: datetime | None = None) -> str:
    """One cell per day, oldest first: ■ trained, □ rest."""
    now = now or datetime.now()
    n = len(flags)
    days = [(now - timedelta(days=n - 1 - i)).strftime("%a")[0] for i in range(n)]
    cells = ["■" if f else "□" for f in flags]
    return " ".join(days) + "\n" + " ".join(cells)
