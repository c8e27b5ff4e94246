"""Shared Typer app object, shared option types, and store utilities."""

from pathlib import Path
from typing import Annotated, Optional

import typer

from ..core.catalog import Catalog, load_catalog
from ..core.engine.config_loader import Settings, load_settings
from ..core.models import WorkoutSession
from ..io.history_store import HistoryStore, get_default_history_path
from ..io.serializers import ValidationError
from . import views

# Shared --history-path option type used across all commands
HistoryPathOption = Annotated[
    Optional[Path],
    typer.Option("--history-path", "-p", help="Path to history JSONL file"),
]

JsonOption = Annotated[
    bool,
    typer.Option("--json", "-j", help="Output as JSON for machine processing"),
]

app = typer.Typer(
    name="fitness-tracker",
    help="Workout logger with muscle coverage, consistency and progressive-overload analytics.",
    no_args_is_help=False,
    invoke_without_command=True,
)


def get_store(history_path: Path | None) -> HistoryStore:
    """Get history store from path or default location."""
    if history_path is None:
        history_path = get_default_history_path()
    return HistoryStore(history_path)


def get_catalog() -> Catalog:
    try:
        return load_catalog()
    except RuntimeError as e:
        views.print_error(str(e))
        raise typer.Exit(1)


def get_settings() -> Settings:
    return load_settings()


def load_history_or_exit(store: HistoryStore, catalog: Catalog) -> list[WorkoutSession]:
    """Load sessions, printing a friendly error and exiting on failure."""
    if not store.exists():
        views.print_error(f"History file not found: {store.history_path}")
        views.print_info("Run 'init' first to create the history file.")
        raise typer.Exit(1)
    try:
        return store.load_sessions(catalog)
    except (FileNotFoundError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)
