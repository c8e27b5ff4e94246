"""
Reference data container.

Catalog holds the muscle taxonomy, the splits built on it and the
exercise library with their curated region maps.  Lookups by name are
case-insensitive; everything else is keyed by id.
"""

import re
from dataclasses import dataclass, field

from ..models import Exercise, MuscleGroup, MuscleRegion, WorkoutType


def slugify(name: str) -> str:
    """'Upper Back' → 'upper_back'."""
    return re.sub(r"[^a-z0-9]+", "_", name.strip().lower()).strip("_")


@dataclass
class Catalog:
    muscle_groups: list[MuscleGroup] = field(default_factory=list)
    splits: list[WorkoutType] = field(default_factory=list)
    exercises: list[Exercise] = field(default_factory=list)

    def regions(self) -> list[MuscleRegion]:
        return [r for g in self.muscle_groups for r in g.regions]

    def region(self, region_id: str) -> MuscleRegion | None:
        for r in self.regions():
            if r.id == region_id:
                return r
        return None

    def group(self, name: str) -> MuscleGroup | None:
        key = name.strip().lower()
        for g in self.muscle_groups:
            if g.name.lower() == key:
                return g
        return None

    def find_split(self, name: str) -> WorkoutType | None:
        key = name.strip().lower()
        for split in self.splits:
            if split.name.lower() == key:
                return split
        return None

    def find_exercise(self, name: str) -> Exercise | None:
        key = name.strip().lower()
        for ex in self.exercises:
            if ex.name.lower() == key:
                return ex
        return None

    def get_split(self, name: str) -> WorkoutType:
        """
        Return the split with the given name.

        Raises:
            ValueError: If no split has that name
        """
        split = self.find_split(name)
        if split is None:
            valid = ", ".join(s.name for s in self.splits)
            raise ValueError(f"Unknown split '{name}'. Valid splits: {valid}")
        return split

    def get_exercise(self, name: str) -> Exercise:
        """
        Return the exercise with the given name.

        Raises:
            ValueError: If no exercise has that name
        """
        ex = self.find_exercise(name)
        if ex is None:
            raise ValueError(
                f"Unknown exercise '{name}'. Run 'exercises' to list the library."
            )
        return ex
