"""
JSONL-based history storage for workout sessions.

Handles reading, writing, and managing the workout history file.
"""

import json
from pathlib import Path

from ..core.catalog import Catalog
from ..core.models import WorkoutSession
from .serializers import ValidationError, dict_to_session, session_to_json_line


class HistoryStore:
    """
    Manages workout history stored in JSONL format.

    One JSON object per line, one line per session, kept sorted by
    ``started_at``.  The active session (``ended_at`` null) lives in the
    same file as finished ones.
    """

    def __init__(self, history_path: str | Path):
        """
        Initialize the history store.

        Args:
            history_path: Path to the JSONL history file
        """
        self.history_path = Path(history_path)

    def exists(self) -> bool:
        """Check if the history file exists."""
        return self.history_path.exists()

    def init(self) -> None:
        """
        Initialize empty history file if it doesn't exist.

        Creates parent directories if needed.
        """
        self.history_path.parent.mkdir(parents=True, exist_ok=True)

        if not self.history_path.exists():
            self.history_path.touch()

    def load_sessions(self, catalog: Catalog) -> list[WorkoutSession]:
        """
        Load all sessions from the history file.

        Args:
            catalog: Reference data for resolving split/exercise names

        Returns:
            List of WorkoutSession, sorted by start time

        Raises:
            FileNotFoundError: If history file doesn't exist
            ValidationError: If a line cannot be parsed
        """
        if not self.history_path.exists():
            raise FileNotFoundError(
                f"History file not found: {self.history_path}. Run 'init' first."
            )

        sessions: list[WorkoutSession] = []

        with open(self.history_path, "r", encoding="utf-8") as f:
            for line_num, line in enumerate(f, 1):
                line = line.strip()
                if not line:
                    continue

                try:
                    sessions.append(dict_to_session(json.loads(line), catalog))
                except (json.JSONDecodeError, ValidationError) as e:
                    raise ValidationError(
                        f"Error parsing line {line_num} in {self.history_path}: {e}"
                    ) from e

        sessions.sort(key=lambda s: s.started_at)

        return sessions

    def active_session(self, catalog: Catalog) -> WorkoutSession | None:
        """Most recently started session that has not ended, or None."""
        active = [s for s in self.load_sessions(catalog) if s.is_active]
        return active[-1] if active else None

    def save_session(self, session: WorkoutSession, catalog: Catalog) -> None:
        """
        Insert a session, or replace the stored session with the same id.

        Args:
            session: Session to write
            catalog: Reference data for loading the existing history
        """
        if not self.history_path.exists():
            raise FileNotFoundError(
                f"History file not found: {self.history_path}. Run 'init' first."
            )

        sessions = [s for s in self.load_sessions(catalog) if s.id != session.id]
        sessions.append(session)
        sessions.sort(key=lambda s: s.started_at)
        self._write_sessions(sessions)

    def import_sessions(self, imported: list[WorkoutSession], catalog: Catalog) -> int:
        """
        Merge imported sessions into the history; ids already present are skipped.

        Returns:
            Number of sessions added
        """
        sessions = self.load_sessions(catalog)
        known = {s.id for s in sessions}
        added = [s for s in imported if s.id not in known]
        if added:
            sessions.extend(added)
            sessions.sort(key=lambda s: s.started_at)
            self._write_sessions(sessions)
        return len(added)

    def _write_sessions(self, sessions: list[WorkoutSession]) -> None:
        with open(self.history_path, "w", encoding="utf-8") as f:
            for session in sessions:
                f.write(session_to_json_line(session) + "\n")

    def delete_session_at(self, index: int, catalog: Catalog) -> WorkoutSession:
        """
        Delete the session at the given 0-based index in sorted history.

        Returns:
            The deleted session

        Raises:
            IndexError: If index is out of range
        """
        sessions = self.load_sessions(catalog)
        if index < 0 or index >= len(sessions):
            raise IndexError(f"Session index {index} out of range (0-{len(sessions) - 1})")
        removed = sessions.pop(index)
        self._write_sessions(sessions)
        return removed

    def clear_history(self) -> None:
        """
        Clear all history (dangerous - use with caution).
        """
        if self.history_path.exists():
            self.history_path.write_text("")


def get_default_history_path() -> Path:
    """Default history file: ~/.fitness-tracker/history.jsonl."""
    return Path.home() / ".fitness-tracker" / "history.jsonl"
