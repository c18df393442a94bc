"""Service for keeping finalized attempts."""

from __future__ import annotations

import logging
from threading import Lock

from evaluation_app.core.attempt import Attempt, AttemptState
from evaluation_app.core.errors import AttemptStateError

logger = logging.getLogger(__name__)

AttemptKey = tuple[str, int, int]


def _key(attempt: Attempt) -> AttemptKey:
    return (attempt.student.student_id, attempt.evaluation.id, attempt.group.group_id)


class AttemptStore:
    """Holds the latest graded attempt per (student, evaluation, group)."""

    def __init__(self) -> None:
        self._attempts: dict[AttemptKey, Attempt] = {}
        self._lock = Lock()

    def save(self, attempt: Attempt) -> None:
        """Store a graded attempt, replacing an earlier one with the same key."""
        if attempt.state is not AttemptState.GRADED:
            raise AttemptStateError("Only graded attempts can be stored.")
        key = _key(attempt)
        with self._lock:
            if key in self._attempts:
                logger.info("Replacing stored attempt for %s", key)
            self._attempts[key] = attempt

    def get(self, student_id: str, evaluation_id: int, group_id: int) -> Attempt | None:
        with self._lock:
            return self._attempts.get((student_id, evaluation_id, group_id))

    def list_by_student(self, student_id: str) -> list[Attempt]:
        with self._lock:
            return [a for key, a in self._attempts.items() if key[0] == student_id]

    def list_by_evaluation(self, evaluation_id: int) -> list[Attempt]:
        with self._lock:
            return [a for key, a in self._attempts.items() if key[1] == evaluation_id]

    def list_by_group(self, group_id: int) -> list[Attempt]:
        with self._lock:
            return [a for key, a in self._attempts.items() if key[2] == group_id]

    def list_all(self) -> list[Attempt]:
        with self._lock:
            return list(self._attempts.values())

    def average_percentage(self, evaluation_id: int) -> float:
        attempts = self.list_by_evaluation(evaluation_id)
        if not attempts:
            return 0.0
        return sum(a.percentage for a in attempts) / len(attempts)
