"""
CLI view formatters using Rich for pretty console output.

Handles table formatting and display of workout data and analytics.
"""

from datetime import datetime

from rich.console import Console
from rich.table import Table

from ..core.ascii_plot import create_consistency_strip
from ..core.catalog import Catalog
from ..core.coverage import CoverageReport
from ..core.insights import InsightTip
from ..core.models import WorkoutSession
from ..core.overload import ProgressiveSuggestion
from ..core.stats import exercise_volume, total_session_volume
from ..core.weekly_goal import WeeklyConsistencySummary

console = Console()

_TIP_STYLE: dict[str, str] = {
    "baseline": "cyan",
    "consistency": "magenta",
    "volume": "green",
    "hygiene": "yellow",
}


def progress_bar(progress: float, width: int = 20) -> str:
    """Text progress bar, e.g. '█████░░░░░ 50%'."""
    progress = max(0.0, min(1.0, progress))
    filled = int(round(progress * width))
    return "█" * filled + "░" * (width - filled) + f" {progress * 100:3.0f}%"


def _fmt_duration(session: WorkoutSession) -> str:
    if session.ended_at is None:
        return "active"
    minutes = int((session.ended_at - session.started_at).total_seconds() // 60)
    if minutes >= 60:
        return f"{minutes // 60}h {minutes % 60:02d}m"
    return f"{minutes}m"


def _fmt_weight(weight: float) -> str:
    return f"{weight:g}"


def print_coverage_report(report: CoverageReport, detail: bool = True) -> None:
    """
    Print a coverage report: one row per group, optionally per region.

    Args:
        report: Coverage report to display
        detail: Also list every region with its contributing exercises
    """
    table = Table(title=f"Coverage: {report.split_name}", show_lines=False)
    table.add_column("Muscle", style="cyan", no_wrap=True)
    table.add_column("Covered", justify="right", width=8)
    table.add_column("Progress", width=26)
    table.add_column("Sets", justify="right", width=5)
    table.add_column("Exercises")

    for group in report.groups:
        table.add_row(
            f"[bold]{group.name}[/bold]",
            f"{group.touched_regions}/{group.total_regions}",
            progress_bar(group.progress),
            "",
            "",
        )
        if not detail:
            continue
        for region in group.regions:
            mark = "[green]✓[/green]" if region.is_covered else ("[yellow]·[/yellow]" if region.touched else "")
            table.add_row(
                f"  {region.name}",
                mark,
                progress_bar(region.progress),
                str(region.working_set_count) if region.working_set_count else "",
                ", ".join(region.contributing_exercises),
            )

    console.print(table)
    console.print(f"[dim]Overall: {report.overall_progress * 100:.0f}%[/dim]")


def print_history(sessions: list[WorkoutSession], title: str = "Workout History") -> None:
    """
    Print workout history as a table.

    Args:
        sessions: Sessions to display (chronological)
        title: Table title
    """
    if not sessions:
        console.print("[yellow]No sessions recorded yet.[/yellow]")
        return

    table = Table(title=title)
    table.add_column("#", justify="right", style="dim", width=3)
    table.add_column("Date", style="cyan", no_wrap=True)
    table.add_column("Split", style="magenta")
    table.add_column("Exercises", justify="right")
    table.add_column("Working sets", justify="right")
    table.add_column("Volume", justify="right", style="green")
    table.add_column("Duration", justify="right")

    for i, session in enumerate(sessions, 1):
        working = sum(len(le.working_sets) for le in session.logged_exercises)
        table.add_row(
            str(i),
            session.started_at.strftime("%Y-%m-%d %H:%M"),
            session.split_name,
            str(len(session.logged_exercises)),
            str(working),
            f"{total_session_volume(session):.0f}",
            _fmt_duration(session),
        )

    console.print(table)


def print_session_detail(session: WorkoutSession) -> None:
    """Print every logged exercise and set of one session."""
    console.print(
        f"[bold]{session.split_name}[/bold]  "
        f"{session.started_at.strftime('%Y-%m-%d %H:%M')}  ({_fmt_duration(session)})"
    )
    if not session.logged_exercises:
        console.print("[dim]No exercises logged.[/dim]")
        return
    for logged in session.ordered_exercises():
        sets_str = ", ".join(
            f"{s.reps}@{_fmt_weight(s.weight)}" + ("w" if s.is_warmup else "") for s in logged.sets
        ) or "-"
        console.print(
            f"  {logged.exercise.name}: {sets_str}  "
            f"[dim](sets {len(logged.sets)} • volume {exercise_volume(logged):.0f})[/dim]"
        )
    if session.notes:
        console.print(f"  [dim]Notes: {session.notes}[/dim]")


def format_weekly_status(summary: WeeklyConsistencySummary) -> str:
    """Weekly goal block as Rich markup."""
    lines = [
        "[bold]This week[/bold]",
        f"  Sessions: {summary.completed}/{summary.target}  {progress_bar(summary.progress)}",
    ]
    if summary.remaining > 0:
        lines.append(f"  [yellow]{summary.remaining} more to hit your goal[/yellow]")
    else:
        lines.append("  [green]Weekly goal reached[/green]")
    return "\n".join(lines)


def print_tips(tips: list[InsightTip]) -> None:
    for tip in tips:
        style = _TIP_STYLE.get(tip.kind, "white")
        console.print(f"[bold {style}]{tip.title}[/bold {style}]")
        console.print(f"  {tip.message}")
        console.print()


def print_suggestion(exercise_name: str, suggestion: ProgressiveSuggestion | None) -> None:
    console.print(f"[bold]{exercise_name}[/bold]")
    if suggestion is None:
        console.print("[yellow]No working sets logged yet for this exercise.[/yellow]")
        return

    console.print(f"  {suggestion.message}")
    if suggestion.estimated_one_rm is not None:
        console.print(f"  [dim]Estimated 1RM: {suggestion.estimated_one_rm:.1f}[/dim]")
    if suggestion.recommendations:
        table = Table(title="Working weights", show_header=True)
        table.add_column("Reps", justify="right")
        table.add_column("Weight", justify="right", style="green")
        for rec in suggestion.recommendations:
            table.add_row(str(rec.reps), _fmt_weight(rec.weight))
        console.print(table)


def print_exercises(catalog: Catalog) -> None:
    """Print the exercise library with its curated region maps."""
    table = Table(title="Exercise Library")
    table.add_column("Exercise", style="cyan")
    table.add_column("Category", style="magenta")
    table.add_column("Equipment")
    table.add_column("Primary")
    table.add_column("Secondary", style="dim")

    group_names = {g.id: g.name for g in catalog.muscle_groups}

    def _names(exercise, role):
        out = []
        for m in exercise.muscle_maps:
            if m.role != role:
                continue
            region = catalog.region(m.region_id)
            out.append(m.region_id if region is None else f"{group_names[region.group_id]}/{region.name}")
        return ", ".join(out)

    for ex in catalog.exercises:
        table.add_row(ex.name, ex.category, ex.equipment, _names(ex, "primary"), _names(ex, "secondary"))
    console.print(table)

    console.print()
    for split in catalog.splits:
        groups = ", ".join(g.name for g in split.muscle_groups)
        console.print(f"[bold]{split.name}[/bold]: {groups}")


def print_consistency_strip(flags: list[bool], now: datetime | None = None) -> None:
    console.print(create_consistency_strip(flags, now))


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]{message}[/green]")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]Error: {message}[/red]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]Warning: {message}[/yellow]")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]{message}[/blue]")


def confirm_action(message: str) -> bool:
    """
    Prompt user for confirmation.

    Returns:
        True if confirmed, False otherwise
    """
    response = console.input(f"{message} [y/N]: ")
    return response.lower() in ("y", "yes")
