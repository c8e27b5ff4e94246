"""Session commands: init, start, log, end, show-history, delete-record."""

import json
from datetime import datetime
from typing import Annotated, Optional

import typer

from ...core.workout_log import TrainError, WorkoutLog
from ...io.serializers import ValidationError, parse_sets_string, session_to_dict, validate_datetime
from .. import views
from ..app import HistoryPathOption, JsonOption, app, get_catalog, get_settings, get_store, load_history_or_exit

AtOption = Annotated[
    Optional[str],
    typer.Option("--at", help="Timestamp (ISO 8601) instead of now"),
]


def _parse_at(at: str | None) -> datetime | None:
    if at is None:
        return None
    try:
        return validate_datetime(at, "--at")
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)


def _menu_start() -> None:
    """Interactive start-workout helper called from the main menu."""
    catalog = get_catalog()
    for i, split in enumerate(catalog.splits, 1):
        views.console.print(f"  \\[{i}] {split.name}")
    raw = views.console.input("Split # (Enter to cancel): ").strip()
    if not raw:
        views.print_info("Cancelled.")
        return
    try:
        choice = int(raw)
    except ValueError:
        views.print_error("Enter a number")
        return
    if choice < 1 or choice > len(catalog.splits):
        views.print_error(f"Enter a number between 1 and {len(catalog.splits)}")
        return
    start(split=catalog.splits[choice - 1].name)


def _menu_log() -> None:
    """Interactive set-logging helper called from the main menu."""
    name = views.console.input("Exercise: ").strip()
    if not name:
        views.print_info("Cancelled.")
        return
    while True:
        raw = views.console.input("Sets (e.g. 10@45w, 8x3@135): ").strip()
        if not raw:
            views.print_info("Cancelled.")
            return
        try:
            parse_sets_string(raw)
        except ValidationError as e:
            views.print_error(str(e))
            continue
        break
    log(exercise=name, sets=raw)


def _menu_delete_record() -> None:
    """Interactive delete-session helper called from the main menu."""
    store = get_store(None)
    catalog = get_catalog()
    try:
        sessions = store.load_sessions(catalog)
    except (FileNotFoundError, ValidationError) as e:
        views.print_error(str(e))
        return

    if not sessions:
        views.print_info("No sessions to delete.")
        return

    views.print_history(sessions)

    while True:
        raw = views.console.input("Delete session # (Enter to cancel): ").strip()
        if not raw:
            views.print_info("Cancelled.")
            return
        try:
            record_id = int(raw)
        except ValueError:
            views.print_error("Enter a number")
            continue

        if record_id < 1 or record_id > len(sessions):
            views.print_error(f"Enter a number between 1 and {len(sessions)}")
            continue

        delete_record(record_id=record_id)
        return


@app.command()
def init(history_path: HistoryPathOption = None) -> None:
    """
    Create the history file.
    """
    store = get_store(history_path)
    if store.exists():
        views.print_info(f"History already exists: {store.history_path}")
        return
    store.init()
    views.print_success(f"Created history: {store.history_path}")


@app.command()
def start(
    split: Annotated[
        str,
        typer.Option("--split", "-s", help="Split name, e.g. Push, Pull, Lower, 'Full Body'"),
    ],
    history_path: HistoryPathOption = None,
    at: AtOption = None,
) -> None:
    """
    Start a workout for a split.
    """
    store = get_store(history_path)
    catalog = get_catalog()
    sessions = load_history_or_exit(store, catalog)

    active = [s for s in sessions if s.is_active]
    if active:
        views.print_error(
            f"A {active[-1].split_name} workout started "
            f"{active[-1].started_at:%Y-%m-%d %H:%M} is still active. Run 'end' first."
        )
        raise typer.Exit(1)

    try:
        workout_type = catalog.get_split(split)
    except ValueError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    log = WorkoutLog(use_keyword_fallback=get_settings().keyword_fallback)
    session = log.start_workout(workout_type, catalog, now=_parse_at(at))
    store.save_session(session, catalog)

    views.print_success(f"Started {workout_type.name} workout at {session.started_at:%Y-%m-%d %H:%M}")
    if log.coverage_report is not None:
        views.print_coverage_report(log.coverage_report, detail=False)


@app.command()
def log(
    exercise: Annotated[
        str,
        typer.Option("--exercise", "-e", help="Exercise name from the library"),
    ],
    sets: Annotated[
        str,
        typer.Option("--sets", help="Sets, e.g. '10@45w, 8x3@135' (w = warmup)"),
    ],
    history_path: HistoryPathOption = None,
    at: AtOption = None,
) -> None:
    """
    Log sets for an exercise in the active workout.
    """
    store = get_store(history_path)
    catalog = get_catalog()
    load_history_or_exit(store, catalog)

    session = store.active_session(catalog)
    if session is None:
        views.print_error("No active workout. Run 'start' first.")
        raise typer.Exit(1)

    try:
        parsed = parse_sets_string(sets)
        ex = catalog.get_exercise(exercise)
    except (ValidationError, ValueError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    created_at = _parse_at(at)
    workout = WorkoutLog(session, use_keyword_fallback=get_settings().keyword_fallback)
    try:
        logged = workout.ensure_exercise(ex)
        for reps, weight, is_warmup in parsed:
            workout.add_set(logged, reps, weight, is_warmup, created_at=created_at)
    except TrainError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    store.save_session(session, catalog)

    working = sum(1 for _, _, w in parsed if not w)
    views.print_success(
        f"Logged {len(parsed)} set(s) of {ex.name} ({working} working)."
    )
    if workout.coverage_report is not None:
        views.print_coverage_report(workout.coverage_report)


@app.command()
def end(
    history_path: HistoryPathOption = None,
    at: AtOption = None,
    notes: Annotated[
        Optional[str],
        typer.Option("--notes", "-n", help="Notes to attach to the session"),
    ] = None,
) -> None:
    """
    End the active workout.
    """
    store = get_store(history_path)
    catalog = get_catalog()
    load_history_or_exit(store, catalog)

    session = store.active_session(catalog)
    if session is None:
        views.print_error("No active workout to end.")
        raise typer.Exit(1)

    workout = WorkoutLog(session)
    try:
        ended = workout.end_workout(now=_parse_at(at))
    except TrainError as e:
        views.print_error(str(e))
        raise typer.Exit(1)
    if notes:
        ended.notes = notes

    store.save_session(ended, catalog)
    views.print_success(f"Ended {ended.split_name} workout.")
    views.print_session_detail(ended)


@app.command("show-history")
def show_history(
    history_path: HistoryPathOption = None,
    detail: Annotated[
        Optional[int],
        typer.Option("--detail", "-d", help="Show every set of session # (from the table)"),
    ] = None,
    json_out: JsonOption = False,
) -> None:
    """
    Display workout history.
    """
    store = get_store(history_path)
    catalog = get_catalog()
    sessions = load_history_or_exit(store, catalog)

    if json_out:
        print(json.dumps([session_to_dict(s) for s in sessions], indent=2))
        return

    if detail is not None:
        if detail < 1 or detail > len(sessions):
            views.print_error(f"Session # must be between 1 and {len(sessions)}")
            raise typer.Exit(1)
        views.print_session_detail(sessions[detail - 1])
        return

    views.print_history(sessions)


@app.command("delete-record")
def delete_record(
    record_id: Annotated[int, typer.Argument(help="Session # from show-history")],
    history_path: HistoryPathOption = None,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Delete without confirmation"),
    ] = False,
) -> None:
    """
    Delete a session by its # in show-history.
    """
    store = get_store(history_path)
    catalog = get_catalog()
    sessions = load_history_or_exit(store, catalog)

    if record_id < 1 or record_id > len(sessions):
        views.print_error(f"Session # must be between 1 and {len(sessions)}")
        raise typer.Exit(1)

    target = sessions[record_id - 1]
    label = f"{target.started_at:%Y-%m-%d %H:%M} ({target.split_name})"
    if not force and not views.confirm_action(f"Delete {label}?"):
        views.print_info("Cancelled.")
        return

    store.delete_session_at(record_id - 1, catalog)
    views.print_success(f"Deleted session #{record_id}: {label}")
