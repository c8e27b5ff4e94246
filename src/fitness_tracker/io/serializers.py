"""
JSON serialization for workout data.

Handles conversion between the session dataclasses and JSON-compatible
dicts, the schema-versioned export bundle, and parsing of set strings
typed on the command line.

Sessions reference their split and exercises by name; a catalog is
needed to turn a dict back into a session.
"""

import json
import re
from datetime import datetime
from typing import Any

from ..core.catalog import Catalog, slugify
from ..core.config import EXPORT_SCHEMA_VERSION
from ..core.models import Exercise, LoggedExercise, LoggedSet, WorkoutSession


class ValidationError(Exception):
    """Raised when data validation fails."""

    pass


class UnsupportedSchemaError(ValidationError):
    """Raised when an export bundle has an unknown schema_version."""

    def __init__(self, version: Any):
        super().__init__(
            f"Unsupported export schema version: {version!r} (expected {EXPORT_SCHEMA_VERSION})"
        )
        self.version = version


def validate_datetime(value: str, name: str = "timestamp") -> datetime:
    """
    Parse an ISO 8601 timestamp.

    Timestamps with an offset ("Z", "+02:00") are converted to naive
    local time; everything the tracker stores and compares is naive.

    Args:
        value: ISO string, e.g. "2026-02-16T18:30:00"
        name: Field name for error message

    Returns:
        Parsed naive datetime

    Raises:
        ValidationError: If the value is not a valid ISO timestamp
    """
    if not isinstance(value, str):
        raise ValidationError(f"Invalid {name}: {value!r}. Expected ISO 8601 string")
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as e:
        raise ValidationError(f"Invalid {name}: {value}") from e
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def validate_non_negative(value: int | float, name: str) -> int | float:
    """
    Validate that a value is non-negative.

    Raises:
        ValidationError: If value is negative
    """
    if value < 0:
        raise ValidationError(f"{name} must be non-negative, got {value}")
    return value


def validate_positive(value: int | float, name: str) -> int | float:
    """
    Validate that a value is positive.

    Raises:
        ValidationError: If value is not positive
    """
    if value <= 0:
        raise ValidationError(f"{name} must be positive, got {value}")
    return value


# ---------------------------------------------------------------------------
# Sets / exercises / sessions
# ---------------------------------------------------------------------------


def logged_set_to_dict(logged_set: LoggedSet) -> dict[str, Any]:
    return {
        "reps": logged_set.reps,
        "weight": logged_set.weight,
        "is_warmup": logged_set.is_warmup,
        "created_at": logged_set.created_at.isoformat(),
    }


def _require_mapping(data: Any, what: str) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise ValidationError(f"{what} record must be a JSON object, got {data!r}")
    return data


def dict_to_logged_set(data: dict[str, Any]) -> LoggedSet:
    """
    Convert dict to LoggedSet.

    Raises:
        ValidationError: If data is invalid
    """
    _require_mapping(data, "Set")
    try:
        reps = int(data["reps"])
        weight = float(data.get("weight", 0.0))
    except (KeyError, TypeError, ValueError) as e:
        raise ValidationError(f"Invalid set record: {data!r}") from e

    validate_non_negative(reps, "reps")
    validate_non_negative(weight, "weight")

    return LoggedSet(
        reps=reps,
        weight=weight,
        is_warmup=bool(data.get("is_warmup", False)),
        created_at=validate_datetime(data.get("created_at", ""), "created_at"),
    )


def logged_exercise_to_dict(logged: LoggedExercise) -> dict[str, Any]:
    return {
        "name": logged.exercise.name,
        "order_index": logged.order_index,
        "sets": [logged_set_to_dict(s) for s in logged.sets],
    }


def _resolve_exercise(name: str, catalog: Catalog) -> Exercise:
    """Catalog exercise by name, or an unmapped stand-in that keeps the name."""
    exercise = catalog.find_exercise(name)
    if exercise is not None:
        return exercise
    return Exercise(id=slugify(name), name=name)


def dict_to_logged_exercise(data: dict[str, Any], catalog: Catalog) -> LoggedExercise:
    _require_mapping(data, "Exercise")
    name = data.get("name")
    if not isinstance(name, str) or not name.strip():
        raise ValidationError(f"Invalid exercise name: {name!r}")
    try:
        order_index = int(data.get("order_index", 0))
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid order_index for {name}: {data.get('order_index')!r}") from e
    return LoggedExercise(
        order_index=order_index,
        exercise=_resolve_exercise(name, catalog),
        sets=[dict_to_logged_set(s) for s in data.get("sets") or []],
    )


def session_to_dict(session: WorkoutSession) -> dict[str, Any]:
    """
    Convert WorkoutSession to JSON-compatible dict.

    Exercises are written in display order.
    """
    return {
        "id": session.id,
        "started_at": session.started_at.isoformat(),
        "ended_at": session.ended_at.isoformat() if session.ended_at is not None else None,
        "notes": session.notes,
        "workout_type_name": session.split_name,
        "exercises": [logged_exercise_to_dict(le) for le in session.ordered_exercises()],
    }


def dict_to_session(data: dict[str, Any], catalog: Catalog) -> WorkoutSession:
    """
    Convert dict to WorkoutSession.

    Unknown split names leave the session without a split.

    Raises:
        ValidationError: If data is invalid
    """
    _require_mapping(data, "Session")
    started_at = validate_datetime(data.get("started_at", ""), "started_at")
    ended_raw = data.get("ended_at")
    ended_at = validate_datetime(ended_raw, "ended_at") if ended_raw is not None else None

    split_name = str(data.get("workout_type_name") or "")
    kwargs: dict[str, Any] = {}
    if data.get("id"):
        kwargs["id"] = str(data["id"])

    try:
        return WorkoutSession(
            started_at=started_at,
            ended_at=ended_at,
            notes=str(data.get("notes", "")),
            workout_type=catalog.find_split(split_name) if split_name else None,
            logged_exercises=[dict_to_logged_exercise(e, catalog) for e in data.get("exercises") or []],
            **kwargs,
        )
    except ValueError as e:
        raise ValidationError(str(e)) from e


def session_to_json_line(session: WorkoutSession) -> str:
    """Serialize a session to a single JSON line (no trailing newline)."""
    return json.dumps(session_to_dict(session), separators=(",", ":"))


def json_line_to_session(line: str, catalog: Catalog) -> WorkoutSession:
    """
    Deserialize a JSON line to a WorkoutSession.

    Raises:
        ValidationError: If JSON is invalid or data validation fails
    """
    try:
        data = json.loads(line.strip())
    except json.JSONDecodeError as e:
        raise ValidationError(f"Invalid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ValidationError("Session record must be a JSON object")
    return dict_to_session(data, catalog)


# ---------------------------------------------------------------------------
# Export bundle
# ---------------------------------------------------------------------------


def export_bundle(
    sessions: list[WorkoutSession],
    exported_at: datetime | None = None,
) -> dict[str, Any]:
    return {
        "schema_version": EXPORT_SCHEMA_VERSION,
        "exported_at": (exported_at or datetime.now()).isoformat(),
        "sessions": [session_to_dict(s) for s in sessions],
    }


def export_json(sessions: list[WorkoutSession], exported_at: datetime | None = None) -> str:
    """Pretty-printed, key-sorted export bundle."""
    return json.dumps(export_bundle(sessions, exported_at), indent=2, sort_keys=True)


def import_bundle(data: str | dict[str, Any], catalog: Catalog) -> list[WorkoutSession]:
    """
    Parse an export bundle back into sessions.

    Args:
        data: Bundle as JSON text or already-decoded dict
        catalog: Reference data used to resolve split/exercise names

    Raises:
        UnsupportedSchemaError: If schema_version is not supported
        ValidationError: If the bundle is malformed
    """
    if isinstance(data, str):
        try:
            data = json.loads(data)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Invalid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ValidationError("Export bundle must be a JSON object")

    version = data.get("schema_version")
    if version != EXPORT_SCHEMA_VERSION:
        raise UnsupportedSchemaError(version)

    return [dict_to_session(s, catalog) for s in data.get("sessions") or []]


# ---------------------------------------------------------------------------
# Set strings
# ---------------------------------------------------------------------------

_SET_PATTERN = re.compile(
    r"^(\d+)"                          # reps
    r"(?:\s*[xX×]\s*(\d+))?"           # optional × sets
    r"(?:\s*@\s*\+?(\d+(?:\.\d+)?))?"  # optional @ weight
    r"\s*([wW])?$"                     # optional warmup marker
)


def parse_sets_string(sets_str: str) -> list[tuple[int, float, bool]]:
    """
    Parse a sets string.

    Comma-separated groups, each one of:
        reps@weight     e.g. "8@135"      one working set
        reps@weightw    e.g. "10@45w"     one warmup set
        RxS@weight      e.g. "8x3@135"    S sets of R reps
        reps            e.g. "12"         bodyweight (weight 0)

    Args:
        sets_str: Sets string to parse

    Returns:
        List of (reps, weight, is_warmup) tuples

    Raises:
        ValidationError: If format is invalid
    """
    if not sets_str or not sets_str.strip():
        raise ValidationError("Sets string cannot be empty")

    sets: list[tuple[int, float, bool]] = []
    for part in (p.strip() for p in sets_str.split(",")):
        if not part:
            continue
        m = _SET_PATTERN.match(part)
        if m is None:
            raise ValidationError(
                f"Invalid set format: '{part}'.\n"
                "Use: reps@weight (e.g. 8@135), RxS@weight (e.g. 8x3@135),\n"
                "     add 'w' to mark a warmup (e.g. 10@45w)."
            )
        reps = int(m.group(1))
        count = int(m.group(2)) if m.group(2) else 1
        weight = float(m.group(3)) if m.group(3) else 0.0
        is_warmup = m.group(4) is not None

        validate_positive(reps, "Reps")
        validate_positive(count, "Set count")

        sets.extend((reps, weight, is_warmup) for _ in range(count))

    if not sets:
        raise ValidationError("No valid sets found in sets string")

    return sets
