"""
Data models for fitness-tracker.

Read-only snapshot of the logged data the analytics engines consume.
The logging flow (and the history store) create and mutate these
objects; the engines only read them.  Relationships are navigated by
id: muscle maps point at region ids, splits own their groups, sessions
own their logged exercises and logged exercises own their sets.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal

ExerciseRole = Literal["primary", "secondary"]


def _new_id() -> str:
    return str(uuid.uuid4())


@dataclass
class MuscleRegion:
    """One region of a muscle group, e.g. Chest/Upper."""

    id: str          # e.g. "chest.upper"
    name: str        # e.g. "Upper" (not unique across groups)
    group_id: str    # e.g. "chest"


@dataclass
class MuscleGroup:
    """A muscle group and the ordered regions it owns."""

    id: str
    name: str
    regions: list[MuscleRegion] = field(default_factory=list)


@dataclass
class MuscleMap:
    """
    Link between an exercise and a region it trains.

    The owning exercise is implicit: maps live on ``Exercise.muscle_maps``.
    """

    region_id: str
    role: ExerciseRole = "primary"

    def __post_init__(self) -> None:
        if self.role not in ("primary", "secondary"):
            raise ValueError(f"Invalid role: {self.role!r}. Must be 'primary' or 'secondary'.")


@dataclass
class Exercise:
    """Shared reference data for one exercise."""

    id: str
    name: str
    category: str = ""
    equipment: str = ""
    muscle_maps: list[MuscleMap] = field(default_factory=list)


@dataclass
class WorkoutType:
    """
    A training split (Push, Pull, Lower, ...).

    ``muscle_groups`` are the groups whose regions the coverage engine
    scores for sessions of this split.  ``template_exercises`` holds
    exercise names that are auto-added when a workout is started.
    """

    id: str
    name: str
    muscle_groups: list[MuscleGroup] = field(default_factory=list)
    template_exercises: list[str] = field(default_factory=list)

    @property
    def region_ids(self) -> set[str]:
        """Ids of every region belonging to an included group."""
        return {r.id for g in self.muscle_groups for r in g.regions}


@dataclass
class LoggedSet:
    """A single logged set."""

    reps: int
    weight: float
    is_warmup: bool = False
    created_at: datetime = field(default_factory=datetime.now)
    id: str = field(default_factory=_new_id)

    def __post_init__(self) -> None:
        """Validate set data."""
        if self.reps < 0:
            raise ValueError("reps must be non-negative")
        if self.weight < 0:
            raise ValueError("weight must be non-negative")

    @property
    def volume(self) -> float:
        """weight × reps."""
        return self.weight * self.reps

    @property
    def is_working(self) -> bool:
        return not self.is_warmup


@dataclass
class LoggedExercise:
    """An exercise performed within a session, with its sets."""

    order_index: int
    exercise: Exercise
    sets: list[LoggedSet] = field(default_factory=list)
    id: str = field(default_factory=_new_id)

    @property
    def working_sets(self) -> list[LoggedSet]:
        """Non-warmup sets only."""
        return [s for s in self.sets if not s.is_warmup]


@dataclass
class WorkoutSession:
    """
    A workout session.

    ``ended_at`` is None while the session is still active.
    """

    started_at: datetime
    ended_at: datetime | None = None
    notes: str = ""
    workout_type: WorkoutType | None = None
    logged_exercises: list[LoggedExercise] = field(default_factory=list)
    id: str = field(default_factory=_new_id)

    def __post_init__(self) -> None:
        """Validate session data."""
        if self.ended_at is not None and self.ended_at < self.started_at:
            raise ValueError("ended_at must not be before started_at")

    @property
    def is_active(self) -> bool:
        return self.ended_at is None

    @property
    def split_name(self) -> str:
        return self.workout_type.name if self.workout_type is not None else "Unknown"

    def ordered_exercises(self) -> list[LoggedExercise]:
        """Logged exercises in display order."""
        return sorted(self.logged_exercises, key=lambda le: le.order_index)

    def find_logged_exercise(self, exercise_id: str) -> LoggedExercise | None:
        for logged in self.logged_exercises:
            if logged.exercise.id == exercise_id:
                return logged
        return None
