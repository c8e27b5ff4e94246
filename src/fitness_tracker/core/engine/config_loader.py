"""
YAML → typed settings loader.

Loads user-adjustable settings from settings.yaml (bundled with the
package) and merges user overrides from ~/.fitness-tracker/settings.yaml.

Usage:
    from fitness_tracker.core.engine.config_loader import load_settings
    settings = load_settings()
    target = settings.weekly_target

If a YAML source cannot be read it is skipped with a warning and the
Python defaults from config.py apply (no crash).
"""

from __future__ import annotations

import os
import warnings
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

import yaml

from ..config import (
    DEFAULT_FIRST_WEEKDAY,
    DEFAULT_WEEKLY_TARGET,
    REST_SECONDS_DEFAULT,
    clamp_rest_seconds,
)

SETTINGS_FILENAME = "settings.yaml"


@dataclass
class Settings:
    weekly_target: int = DEFAULT_WEEKLY_TARGET
    first_weekday: int = DEFAULT_FIRST_WEEKDAY
    rest_seconds: float = REST_SECONDS_DEFAULT
    keyword_fallback: bool = False

    def __post_init__(self) -> None:
        if self.weekly_target < 0:
            raise ValueError("weekly_target must be non-negative")
        if not 0 <= self.first_weekday <= 6:
            raise ValueError("first_weekday must be between 0 (Monday) and 6 (Sunday)")
        self.rest_seconds = clamp_rest_seconds(self.rest_seconds)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a single YAML file; warn and return {} on error."""
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        warnings.warn(f"fitness-tracker: ignoring {path} ({exc})", stacklevel=2)
        return {}
    return data if isinstance(data, dict) else {}


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge *override* into *base* (non-destructive to base)."""
    result = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(result.get(k), dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


def _coerce_number(value: Any, default: float) -> float:
    """Accept numbers and numeric strings ("120"); anything else → default."""
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return default
    return default


def _coerce_bool(value: Any, name: str, default: bool) -> bool:
    """Accept YAML booleans only; quoted strings like "false" warn and use the default."""
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    warnings.warn(
        f"fitness-tracker: {name} must be true or false, got {value!r}; using {default}.",
        stacklevel=3,
    )
    return default


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def get_bundled_settings_path() -> Path:
    # config_loader.py lives at src/fitness_tracker/core/engine/config_loader.py
    return Path(__file__).parent.parent.parent / SETTINGS_FILENAME


def get_user_settings_path() -> Path:
    """Return ~/.fitness-tracker/settings.yaml (may not exist)."""
    home = Path(os.environ.get("HOME", "~")).expanduser()
    return home / ".fitness-tracker" / SETTINGS_FILENAME


def load_settings_dict(user_path: Path | None = None) -> dict[str, Any]:
    """
    Load and merge settings from YAML sources.

    Load order (later overrides earlier):
    1. Bundled src/fitness_tracker/settings.yaml
    2. User override at ~/.fitness-tracker/settings.yaml

    Returns:
        Merged dict.  Empty dict if no YAML available.
    """
    config: dict[str, Any] = {}

    bundled = get_bundled_settings_path()
    if bundled.exists():
        config = _deep_merge(config, _load_yaml_file(bundled))

    user = user_path or get_user_settings_path()
    if user.exists():
        config = _deep_merge(config, _load_yaml_file(user))

    return config


def settings_from_dict(d: dict[str, Any]) -> Settings:
    """
    Convert a raw settings mapping to Settings.

    Unparseable numbers and non-boolean flags fall back to defaults;
    out-of-range values raise.

    Raises:
        ValueError: If weekly_target or first_weekday is out of range
    """
    return Settings(
        weekly_target=int(_coerce_number(d.get("weekly_target"), DEFAULT_WEEKLY_TARGET)),
        first_weekday=int(_coerce_number(d.get("first_weekday"), DEFAULT_FIRST_WEEKDAY)),
        rest_seconds=_coerce_number(d.get("rest_seconds"), REST_SECONDS_DEFAULT),
        keyword_fallback=_coerce_bool(d.get("keyword_fallback"), "keyword_fallback", False),
    )


def load_settings(user_path: Path | None = None) -> Settings:
    """Load merged settings; invalid user values are reported and defaults used."""
    raw = load_settings_dict(user_path)
    try:
        return settings_from_dict(raw)
    except ValueError as exc:
        warnings.warn(f"fitness-tracker: invalid settings ({exc}); using defaults.", stacklevel=2)
        return Settings()


def save_user_settings(updates: dict[str, Any], user_path: Path | None = None) -> Settings:
    """
    Merge *updates* into the user override file and return the new settings.

    Raises:
        ValueError: If the resulting settings are invalid (nothing is written)
    """
    path = user_path or get_user_settings_path()
    current = _load_yaml_file(path) if path.exists() else {}
    merged = _deep_merge(current, updates)

    settings = settings_from_dict(_deep_merge(load_settings_dict(path), updates))

    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as fh:
        yaml.safe_dump(merged, fh, sort_keys=True)
    return settings


def settings_to_dict(settings: Settings) -> dict[str, Any]:
    return asdict(settings)
