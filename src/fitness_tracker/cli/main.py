"""
CLI entry point using Typer.

Provides commands for workout logging and analytics:
- init: Create the history file
- start / log / end: Run a workout for a split
- coverage: Muscle coverage of a workout
- status: Weekly session goal
- insights / suggest: Training tips and progressive-overload targets
- dashboard / volume: Trends and charts
- export / import: JSON bundle transfer
- settings / exercises: Configuration and the exercise library
"""

import typer

from . import views
from .app import app
from .commands import analysis, sessions, settings, transfer  # noqa: F401  (registers commands)


@app.callback(invoke_without_command=True)
def main_callback(ctx: typer.Context) -> None:
    """
    Workout tracker. Run without a command for interactive mode.
    """
    if ctx.invoked_subcommand is not None:
        return

    # ── Interactive main menu ───────────────────────────────────────────────
    views.console.print()
    views.console.print("[bold cyan]fitness-tracker[/bold cyan]: workout logger and coverage analytics")
    views.console.print()

    menu = {
        "1": ("dashboard",     "Dashboard"),
        "2": ("start",         "Start a workout"),
        "3": ("log",           "Log sets"),
        "4": ("end",           "End the active workout"),
        "5": ("coverage",      "Coverage of the current workout"),
        "6": ("show-history",  "Show full history"),
        "7": ("status",        "Weekly goal"),
        "8": ("insights",      "Training tips"),
        "9": ("volume",        "Weekly volume chart"),
        "x": ("exercises",     "Exercise library"),
        "s": ("settings",      "Show settings"),
        "i": ("init",          "Create history file"),
        "d": ("delete-record", "Delete a session by #"),
        "0": ("quit",          "Quit"),
    }

    for key, (_, desc) in menu.items():
        views.console.print(f"  \\[{key}] {desc}")

    views.console.print()
    choice = views.console.input("Choose [1]: ").strip() or "1"

    if choice == "0":
        raise typer.Exit(0)

    chosen = {k: v[0] for k, v in menu.items()}.get(choice)
    if chosen is None:
        views.print_error(f"Unknown choice: {choice}")
        raise typer.Exit(1)

    if chosen == "dashboard":
        ctx.invoke(analysis.dashboard)
    elif chosen == "start":
        sessions._menu_start()
    elif chosen == "log":
        sessions._menu_log()
    elif chosen == "end":
        ctx.invoke(sessions.end)
    elif chosen == "coverage":
        ctx.invoke(analysis.coverage)
    elif chosen == "show-history":
        ctx.invoke(sessions.show_history)
    elif chosen == "status":
        ctx.invoke(analysis.status)
    elif chosen == "insights":
        ctx.invoke(analysis.insights)
    elif chosen == "volume":
        ctx.invoke(analysis.volume)
    elif chosen == "exercises":
        ctx.invoke(settings.exercises)
    elif chosen == "settings":
        ctx.invoke(settings.settings)
    elif chosen == "init":
        ctx.invoke(sessions.init)
    elif chosen == "delete-record":
        sessions._menu_delete_record()


def main() -> None:
    app()


if __name__ == "__main__":
    main()
