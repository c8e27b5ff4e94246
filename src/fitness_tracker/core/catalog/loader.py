"""
YAML → Catalog loader.

Loads the muscle taxonomy and splits from the bundled
``src/fitness_tracker/seed/taxonomy.yaml`` and the exercise library from
``src/fitness_tracker/seed/exercises.yaml``.

User overrides: ``~/.fitness-tracker/exercises.yaml`` uses the same
shape.  An entry whose name matches a bundled exercise (case-insensitive)
is deep-merged over it, so only changed keys need to be listed; other
entries are added as new exercises.

Region references in exercise entries are either qualified
(``"Chest/Upper"``) or a bare region name that is unique across groups
(``"Quads"``).  An exercise with no resolvable region is mapped to every
region of the group named by its category, as primary.
"""

from __future__ import annotations

import os
import warnings
from pathlib import Path

import yaml

from ..models import Exercise, MuscleGroup, MuscleMap, MuscleRegion, WorkoutType
from .base import Catalog, slugify

_REQUIRED_EXERCISE_FIELDS: frozenset[str] = frozenset({"name", "category", "equipment"})


def _load_yaml_file(path: Path) -> dict:
    """Load a YAML mapping; warn and return {} when unreadable."""
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        warnings.warn(f"fitness-tracker: cannot read {path} ({exc})", stacklevel=2)
        return {}
    return data if isinstance(data, dict) else {}


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge override into base (non-destructive to base)."""
    result = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(result.get(k), dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


def get_bundled_seed_dir() -> Path:
    # loader.py lives at src/fitness_tracker/core/catalog/loader.py
    return Path(__file__).parent.parent.parent / "seed"


def get_user_dir() -> Path:
    home = Path(os.environ.get("HOME", "~")).expanduser()
    return home / ".fitness-tracker"


# ---------------------------------------------------------------------------
# Taxonomy
# ---------------------------------------------------------------------------


def taxonomy_from_dict(d: dict) -> tuple[list[MuscleGroup], list[WorkoutType]]:
    """
    Build muscle groups and splits from a taxonomy mapping.

    ``muscle_groups: all`` on a split includes every group.

    Raises:
        ValueError: On missing names or a split referencing an unknown group
    """
    groups: list[MuscleGroup] = []
    for raw in d.get("muscle_groups") or []:
        if "name" not in raw:
            raise ValueError("muscle group entry missing 'name'")
        group_id = slugify(raw["name"])
        regions = [
            MuscleRegion(id=f"{group_id}.{slugify(r)}", name=str(r), group_id=group_id)
            for r in raw.get("regions") or []
        ]
        groups.append(MuscleGroup(id=group_id, name=str(raw["name"]), regions=regions))

    by_name = {g.name.lower(): g for g in groups}
    splits: list[WorkoutType] = []
    for raw in d.get("splits") or []:
        if "name" not in raw:
            raise ValueError("split entry missing 'name'")
        refs = raw.get("muscle_groups") or []
        if refs == "all":
            included = list(groups)
        else:
            included = []
            for ref in refs:
                group = by_name.get(str(ref).lower())
                if group is None:
                    raise ValueError(f"split '{raw['name']}' references unknown group '{ref}'")
                included.append(group)
        splits.append(
            WorkoutType(
                id=slugify(raw["name"]),
                name=str(raw["name"]),
                muscle_groups=included,
                template_exercises=[str(e) for e in raw.get("template_exercises") or []],
            )
        )
    return groups, splits


# ---------------------------------------------------------------------------
# Exercises
# ---------------------------------------------------------------------------


def resolve_region_ref(ref: str, groups: list[MuscleGroup]) -> str:
    """
    Resolve "Group/Region" or a unique bare region name to a region id.

    Raises:
        ValueError: If the reference is unknown or ambiguous
    """
    ref = ref.strip()
    if "/" in ref:
        group_name, region_name = (p.strip().lower() for p in ref.split("/", 1))
        for g in groups:
            if g.name.lower() != group_name:
                continue
            for r in g.regions:
                if r.name.lower() == region_name:
                    return r.id
        raise ValueError(f"unknown region '{ref}'")

    matches = [r.id for g in groups for r in g.regions if r.name.lower() == ref.lower()]
    if not matches:
        raise ValueError(f"unknown region '{ref}'")
    if len(matches) > 1:
        raise ValueError(f"ambiguous region '{ref}' (use Group/Region)")
    return matches[0]


def exercise_from_dict(d: dict, groups: list[MuscleGroup]) -> Exercise:
    """
    Convert a raw exercise mapping to an Exercise with curated muscle maps.

    Raises:
        ValueError: If a required field is absent
    """
    missing = _REQUIRED_EXERCISE_FIELDS - set(d)
    if missing:
        raise ValueError(f"exercise missing fields: {sorted(missing)}")

    name = str(d["name"]).strip()
    maps: list[MuscleMap] = []
    seen: set[str] = set()
    for role, key in (("primary", "primary_regions"), ("secondary", "secondary_regions")):
        for ref in d.get(key) or []:
            try:
                region_id = resolve_region_ref(str(ref), groups)
            except ValueError as exc:
                warnings.warn(f"fitness-tracker: exercise '{name}': {exc}", stacklevel=2)
                continue
            if region_id in seen:
                continue
            seen.add(region_id)
            maps.append(MuscleMap(region_id=region_id, role=role))

    if not maps:
        category = str(d["category"]).lower()
        fallback = next((g for g in groups if g.name.lower() == category), None)
        if fallback is not None:
            maps = [MuscleMap(region_id=r.id, role="primary") for r in fallback.regions]

    return Exercise(
        id=slugify(name),
        name=name,
        category=str(d["category"]),
        equipment=str(d["equipment"]),
        muscle_maps=maps,
    )


def _merge_exercise_entries(bundled: list[dict], user: list[dict]) -> list[dict]:
    """Deep-merge user entries over bundled ones by case-insensitive name."""
    merged: dict[str, dict] = {}
    for entry in bundled:
        if isinstance(entry, dict) and "name" in entry:
            merged[str(entry["name"]).strip().lower()] = entry
    for entry in user:
        if not isinstance(entry, dict) or "name" not in entry:
            continue
        key = str(entry["name"]).strip().lower()
        if key in merged:
            # bundled spelling of the name wins
            merged[key] = {**_deep_merge(merged[key], entry), "name": merged[key]["name"]}
        else:
            merged[key] = entry
    return list(merged.values())


def load_catalog(
    seed_dir: Path | None = None,
    user_dir: Path | None = None,
) -> Catalog:
    """
    Load the reference catalog.

    Args:
        seed_dir: Directory holding taxonomy.yaml / exercises.yaml
            (default: bundled seed directory)
        user_dir: Directory holding a user exercises.yaml override
            (default: ~/.fitness-tracker)

    Returns:
        Catalog with groups, splits and exercises

    Raises:
        RuntimeError: If the taxonomy cannot be loaded
    """
    seed_dir = seed_dir or get_bundled_seed_dir()
    user_dir = user_dir or get_user_dir()

    taxonomy = _load_yaml_file(seed_dir / "taxonomy.yaml")
    try:
        groups, splits = taxonomy_from_dict(taxonomy)
    except ValueError as exc:
        raise RuntimeError(f"fitness-tracker: invalid taxonomy ({exc})") from exc
    if not groups:
        raise RuntimeError(
            f"fitness-tracker: no muscle groups could be loaded from {seed_dir / 'taxonomy.yaml'}."
        )

    bundled_entries = _load_yaml_file(seed_dir / "exercises.yaml").get("exercises") or []
    user_entries: list[dict] = []
    user_path = user_dir / "exercises.yaml"
    if user_path.exists():
        user_entries = _load_yaml_file(user_path).get("exercises") or []

    exercises: list[Exercise] = []
    for entry in _merge_exercise_entries(bundled_entries, user_entries):
        try:
            exercises.append(exercise_from_dict(entry, groups))
        except ValueError as exc:
            warnings.warn(
                f"fitness-tracker: skipping exercise '{entry.get('name')}' ({exc})",
                stacklevel=2,
            )

    exercises.sort(key=lambda e: e.name.lower())
    return Catalog(muscle_groups=groups, splits=splits, exercises=exercises)
