"""Settings and library commands: settings, exercises."""

import json
from typing import Annotated, Any, Optional

import typer

from ...core.engine.config_loader import get_user_settings_path, save_user_settings, settings_to_dict
from .. import views
from ..app import JsonOption, app, get_catalog, get_settings

_WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


@app.command()
def settings(
    weekly_target: Annotated[
        Optional[int],
        typer.Option("--weekly-target", help="Sessions per week"),
    ] = None,
    rest_seconds: Annotated[
        Optional[float],
        typer.Option("--rest-seconds", help="Rest timer in seconds (30-300)"),
    ] = None,
    first_weekday: Annotated[
        Optional[int],
        typer.Option("--first-weekday", help="First day of the week: 0=Monday ... 6=Sunday"),
    ] = None,
    keyword_fallback: Annotated[
        Optional[bool],
        typer.Option(
            "--keyword-fallback/--no-keyword-fallback",
            help="Match exercise names to regions when no curated map applies",
        ),
    ] = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show or update settings.
    """
    updates: dict[str, Any] = {}
    if weekly_target is not None:
        updates["weekly_target"] = weekly_target
    if rest_seconds is not None:
        updates["rest_seconds"] = rest_seconds
    if first_weekday is not None:
        updates["first_weekday"] = first_weekday
    if keyword_fallback is not None:
        updates["keyword_fallback"] = keyword_fallback

    if updates:
        try:
            current = save_user_settings(updates)
        except ValueError as e:
            views.print_error(str(e))
            raise typer.Exit(1)
        if not json_out:
            views.print_success(f"Saved settings to {get_user_settings_path()}")
    else:
        current = get_settings()

    if json_out:
        print(json.dumps(settings_to_dict(current), indent=2))
        return

    views.console.print(f"Weekly target:    {current.weekly_target} sessions")
    views.console.print(f"Week starts on:   {_WEEKDAYS[current.first_weekday]}")
    views.console.print(f"Rest timer:       {current.rest_seconds:g} s")
    views.console.print(f"Keyword fallback: {'on' if current.keyword_fallback else 'off'}")


@app.command()
def exercises() -> None:
    """
    List the exercise library and splits.
    """
    views.print_exercises(get_catalog())
