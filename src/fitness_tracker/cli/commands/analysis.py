"""Analysis commands: coverage, status, insights, suggest, dashboard, volume."""

import json
from dataclasses import asdict
from datetime import datetime
from typing import Annotated, Optional

import typer

from ...core import stats
from ...core.ascii_plot import create_series_chart, create_weekly_volume_chart
from ...core.config import PROGRESS_RANGES_DAYS
from ...core.coverage import build_report
from ...core.insights import tips
from ...core.overload import suggestion_from_history
from ...core.weekly_goal import weekly_consistency
from .. import views
from ..app import HistoryPathOption, JsonOption, app, get_catalog, get_settings, get_store, load_history_or_exit


@app.command()
def coverage(
    history_path: HistoryPathOption = None,
    session_no: Annotated[
        Optional[int],
        typer.Option("--session", "-s", help="Session # from show-history (default: active or latest)"),
    ] = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show muscle coverage for a workout.
    """
    store = get_store(history_path)
    catalog = get_catalog()
    sessions = load_history_or_exit(store, catalog)

    if not sessions:
        views.print_info("No sessions yet. Run 'start' to begin a workout.")
        return

    if session_no is not None:
        if session_no < 1 or session_no > len(sessions):
            views.print_error(f"Session # must be between 1 and {len(sessions)}")
            raise typer.Exit(1)
        session = sessions[session_no - 1]
    else:
        active = [s for s in sessions if s.is_active]
        session = active[-1] if active else sessions[-1]

    if session.workout_type is None:
        views.print_error("This session has no known split; coverage cannot be computed.")
        raise typer.Exit(1)

    report = build_report(
        session,
        session.workout_type,
        use_keyword_fallback=get_settings().keyword_fallback,
    )

    if json_out:
        data = asdict(report)
        data["overall_progress"] = round(report.overall_progress, 4)
        print(json.dumps(data, indent=2))
        return

    views.print_coverage_report(report)


@app.command()
def status(
    history_path: HistoryPathOption = None,
    target: Annotated[
        Optional[int],
        typer.Option("--target", "-t", help="Weekly session target (default: settings)"),
    ] = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show weekly session goal progress.
    """
    store = get_store(history_path)
    catalog = get_catalog()
    sessions = load_history_or_exit(store, catalog)
    settings = get_settings()

    summary = weekly_consistency(
        sessions,
        target=settings.weekly_target if target is None else target,
        first_weekday=settings.first_weekday,
    )

    if json_out:
        print(json.dumps({
            "completed": summary.completed,
            "target": summary.target,
            "remaining": summary.remaining,
            "progress": round(summary.progress, 4),
        }, indent=2))
        return

    views.console.print()
    views.console.print(views.format_weekly_status(summary))
    views.console.print()


@app.command()
def insights(
    history_path: HistoryPathOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show training tips.
    """
    store = get_store(history_path)
    catalog = get_catalog()
    sessions = load_history_or_exit(store, catalog)
    settings = get_settings()

    items = tips(sessions, target=settings.weekly_target, first_weekday=settings.first_weekday)

    if json_out:
        print(json.dumps([asdict(t) for t in items], indent=2))
        return

    views.console.print()
    views.print_tips(items)


@app.command()
def suggest(
    exercise: Annotated[
        str,
        typer.Option("--exercise", "-e", help="Exercise name from the library"),
    ],
    history_path: HistoryPathOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Recommend next working weight and reps for an exercise.
    """
    store = get_store(history_path)
    catalog = get_catalog()
    sessions = load_history_or_exit(store, catalog)

    try:
        ex = catalog.get_exercise(exercise)
    except ValueError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    result = suggestion_from_history(ex, sessions)

    if json_out:
        print(json.dumps(asdict(result) if result is not None else None, indent=2))
        return

    views.print_suggestion(ex.name, result)


@app.command()
def dashboard(
    history_path: HistoryPathOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show today's volume, weekly goal, strength trend and split mix.
    """
    store = get_store(history_path)
    catalog = get_catalog()
    sessions = load_history_or_exit(store, catalog)
    settings = get_settings()
    now = datetime.now()

    summary = weekly_consistency(
        sessions, target=settings.weekly_target, reference_date=now, first_weekday=settings.first_weekday
    )
    trend = stats.strength_trend(sessions)
    delta = stats.strength_delta_this_week(sessions, now)
    distribution = stats.split_distribution(sessions)
    last_7 = stats.consistency_last_7_days(sessions, now)
    today = stats.today_volume(sessions, now)

    if json_out:
        print(json.dumps({
            "today_volume": today,
            "weekly": {"completed": summary.completed, "target": summary.target},
            "strength_delta_pct": round(delta, 2),
            "strength_trend": [[d.isoformat(), round(v, 2)] for d, v in trend],
            "split_distribution": distribution,
            "consistency_last_7_days": last_7,
        }, indent=2))
        return

    views.console.print()
    views.console.print(f"[bold]Today's volume:[/bold] {today:.0f}")
    views.console.print(views.format_weekly_status(summary))
    views.console.print()
    views.print_consistency_strip(last_7, now)
    views.console.print()
    views.console.print(f"[bold]Strength this week:[/bold] {delta:+.1f}%")
    views.console.print(create_series_chart(trend, title="Peak e1RM per session"))
    views.console.print()
    if distribution:
        views.console.print("[bold]Recent splits[/bold]")
        for name, count in distribution:
            views.console.print(f"  {name}: {count}")


@app.command()
def volume(
    history_path: HistoryPathOption = None,
    range_: Annotated[
        Optional[str],
        typer.Option("--range", "-r", help="Per-session series over 1M, 3M, 6M or 1Y"),
    ] = None,
    weeks: Annotated[
        int,
        typer.Option("--weeks", "-w", help="Number of weeks to show"),
    ] = 4,
) -> None:
    """
    Show volume charts.
    """
    store = get_store(history_path)
    catalog = get_catalog()
    sessions = load_history_or_exit(store, catalog)

    if range_ is not None:
        key = range_.upper()
        if key not in PROGRESS_RANGES_DAYS:
            views.print_error(f"Unknown range '{range_}'. Use one of: {', '.join(PROGRESS_RANGES_DAYS)}")
            raise typer.Exit(1)
        series = stats.volume_series(sessions, PROGRESS_RANGES_DAYS[key])
        views.console.print(create_series_chart(series, title=f"Session Volume ({key})"))
        return

    views.console.print(
        create_weekly_volume_chart(sessions, weeks, first_weekday=get_settings().first_weekday)
    )
