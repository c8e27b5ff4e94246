"""
Logging flow for the active workout.

WorkoutLog owns the mutations the analytics engines never perform:
starting a session, adding/removing exercises, adding/updating/deleting
sets and ending the session.  Write-path validation happens here, and
the coverage report is rebuilt after every mutation.
"""

from datetime import datetime

from .catalog import Catalog
from .coverage import CoverageReport, build_report
from .models import Exercise, LoggedExercise, LoggedSet, WorkoutSession, WorkoutType


class TrainError(ValueError):
    """Raised when a logging action is rejected."""


class NoActiveWorkoutError(TrainError):
    def __init__(self) -> None:
        super().__init__("No active workout. Start one first.")


class ExerciseAlreadyAddedError(TrainError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Exercise already exists in this workout: {name}")


class InvalidRepsError(TrainError):
    def __init__(self, reps: int) -> None:
        super().__init__(f"Reps must be greater than zero, got {reps}")


class InvalidWeightError(TrainError):
    def __init__(self, weight: float) -> None:
        super().__init__(f"Weight must be non-negative, got {weight}")


def _validate_set(reps: int, weight: float) -> None:
    if reps <= 0:
        raise InvalidRepsError(reps)
    if weight < 0:
        raise InvalidWeightError(weight)


class WorkoutLog:
    """
    Mutable wrapper around the active session.

    Args:
        session: An already active session to resume, or None
        use_keyword_fallback: Passed through to the coverage engine
    """

    def __init__(
        self,
        session: WorkoutSession | None = None,
        use_keyword_fallback: bool = False,
    ):
        self.use_keyword_fallback = use_keyword_fallback
        self.session: WorkoutSession | None = None
        self.coverage_report: CoverageReport | None = None
        if session is not None:
            if not session.is_active:
                raise TrainError("Session has already ended.")
            self.session = session
            self.refresh_coverage()

    @property
    def split(self) -> WorkoutType | None:
        return self.session.workout_type if self.session is not None else None

    def _require_session(self) -> WorkoutSession:
        if self.session is None:
            raise NoActiveWorkoutError()
        return self.session

    def refresh_coverage(self) -> CoverageReport | None:
        """Rebuild the coverage report from the current session state."""
        if self.session is None or self.session.workout_type is None:
            self.coverage_report = None
        else:
            self.coverage_report = build_report(
                self.session,
                self.session.workout_type,
                use_keyword_fallback=self.use_keyword_fallback,
            )
        return self.coverage_report

    def start_workout(
        self,
        split: WorkoutType,
        catalog: Catalog | None = None,
        now: datetime | None = None,
    ) -> WorkoutSession:
        """
        Start a new session for *split*.

        Template exercises of the split (resolved through *catalog*) are
        added in name order; names missing from the catalog are skipped.
        """
        if self.session is not None:
            raise TrainError("A workout is already active. End it first.")

        session = WorkoutSession(started_at=now or datetime.now(), workout_type=split)
        if catalog is not None:
            for name in sorted(split.template_exercises):
                exercise = catalog.find_exercise(name)
                if exercise is not None and session.find_logged_exercise(exercise.id) is None:
                    session.logged_exercises.append(
                        LoggedExercise(order_index=len(session.logged_exercises), exercise=exercise)
                    )

        self.session = session
        self.refresh_coverage()
        return session

    def add_exercise(self, exercise: Exercise) -> LoggedExercise:
        session = self._require_session()
        if session.find_logged_exercise(exercise.id) is not None:
            raise ExerciseAlreadyAddedError(exercise.name)
        logged = LoggedExercise(order_index=len(session.logged_exercises), exercise=exercise)
        session.logged_exercises.append(logged)
        self.refresh_coverage()
        return logged

    def ensure_exercise(self, exercise: Exercise) -> LoggedExercise:
        """Return the session's logged exercise, adding it first if needed."""
        session = self._require_session()
        existing = session.find_logged_exercise(exercise.id)
        return existing if existing is not None else self.add_exercise(exercise)

    def remove_exercise(self, exercise_id: str) -> None:
        session = self._require_session()
        session.logged_exercises = [
            le for le in session.logged_exercises if le.exercise.id != exercise_id
        ]
        self.refresh_coverage()

    def add_set(
        self,
        logged_exercise: LoggedExercise,
        reps: int,
        weight: float,
        is_warmup: bool = False,
        created_at: datetime | None = None,
    ) -> LoggedSet:
        self._require_session()
        _validate_set(reps, weight)
        logged_set = LoggedSet(
            reps=reps,
            weight=weight,
            is_warmup=is_warmup,
            created_at=created_at or datetime.now(),
        )
        logged_exercise.sets.append(logged_set)
        self.refresh_coverage()
        return logged_set

    def _find_set(self, set_id: str) -> tuple[LoggedExercise, LoggedSet]:
        session = self._require_session()
        for logged in session.logged_exercises:
            for s in logged.sets:
                if s.id == set_id:
                    return logged, s
        raise TrainError(f"Set not found: {set_id}")

    def update_set(self, set_id: str, reps: int, weight: float, is_warmup: bool) -> LoggedSet:
        _validate_set(reps, weight)
        _, logged_set = self._find_set(set_id)
        logged_set.reps = reps
        logged_set.weight = weight
        logged_set.is_warmup = is_warmup
        self.refresh_coverage()
        return logged_set

    def delete_set(self, set_id: str) -> None:
        logged, logged_set = self._find_set(set_id)
        logged.sets = [s for s in logged.sets if s.id != logged_set.id]
        self.refresh_coverage()

    def end_workout(self, now: datetime | None = None) -> WorkoutSession:
        """End the active session and clear the log."""
        session = self._require_session()
        ended_at = now or datetime.now()
        if ended_at < session.started_at:
            raise TrainError("Cannot end a workout before it started.")
        session.ended_at = ended_at
        self.session = None
        self.coverage_report = None
        return session
