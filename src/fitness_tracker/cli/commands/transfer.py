"""Data transfer commands: export, import."""

from pathlib import Path
from typing import Annotated, Optional

import typer

from ...io.serializers import UnsupportedSchemaError, ValidationError, export_json, import_bundle
from .. import views
from ..app import HistoryPathOption, app, get_catalog, get_store, load_history_or_exit


@app.command("export")
def export_history(
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Write the bundle to this file (default: stdout)"),
    ] = None,
    history_path: HistoryPathOption = None,
) -> None:
    """
    Export all sessions as a JSON bundle.
    """
    store = get_store(history_path)
    catalog = get_catalog()
    sessions = load_history_or_exit(store, catalog)

    text = export_json(sessions)
    if output is None:
        print(text)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text + "\n", encoding="utf-8")
    views.print_success(f"Exported {len(sessions)} session(s) to {output}")


@app.command("import")
def import_history(
    source: Annotated[Path, typer.Argument(help="Export bundle JSON file")],
    history_path: HistoryPathOption = None,
) -> None:
    """
    Import sessions from a JSON bundle; sessions already present are skipped.
    """
    store = get_store(history_path)
    catalog = get_catalog()
    load_history_or_exit(store, catalog)

    if not source.exists():
        views.print_error(f"File not found: {source}")
        raise typer.Exit(1)

    try:
        imported = import_bundle(source.read_text(encoding="utf-8"), catalog)
    except UnsupportedSchemaError as e:
        views.print_error(str(e))
        raise typer.Exit(1)
    except ValidationError as e:
        views.print_error(f"Invalid bundle: {e}")
        raise typer.Exit(1)

    unknown = sorted({
        le.exercise.name
        for s in imported
        for le in s.logged_exercises
        if catalog.find_exercise(le.exercise.name) is None
    })
    if unknown:
        views.print_warning(
            "Exercises not in the library (kept, but excluded from coverage): " + ", ".join(unknown)
        )

    added = store.import_sessions(imported, catalog)
    skipped = len(imported) - added
    views.print_success(f"Imported {added} session(s)" + (f", skipped {skipped} duplicate(s)." if skipped else "."))
