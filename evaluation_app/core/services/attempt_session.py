"""Service driving a running attempt against its deadline."""

from __future__ import annotations

from datetime import datetime, timedelta
import logging
import math
from typing import Callable

from evaluation_app.constants.evaluation_constants import MIN_DURATION_MINUTES
from evaluation_app.core.attempt import Attempt
from evaluation_app.core.models import Clock

logger = logging.getLogger(__name__)


class AttemptSession:
    """Manages the timed lifecycle of one attempt.

    The deadline is advisory: ``tick()`` compares the clock with it and
    finalizes the attempt once it has passed. Manual ``submit()`` and timeout
    finalization share the same single-shot path, so whichever happens first
    wins and later calls are no-ops.
    """

    def __init__(
        self,
        attempt: Attempt,
        clock: Clock = datetime.now,
        on_finalized: Callable[[Attempt], None] | None = None,
    ) -> None:
        self._attempt = attempt
        self._clock = clock
        self._on_finalized = on_finalized
        minutes = max(MIN_DURATION_MINUTES, attempt.evaluation.duration_minutes)
        self._deadline = attempt.started_at + timedelta(minutes=minutes)
        self._timed_out = False

    @property
    def attempt(self) -> Attempt:
        return self._attempt

    @property
    def deadline(self) -> datetime:
        return self._deadline

    @property
    def timed_out(self) -> bool:
        return self._timed_out

    def is_running(self) -> bool:
        return self._attempt.is_running

    def remaining_seconds(self) -> int:
        if not self.is_running():
            return 0
        remaining = (self._deadline - self._clock()).total_seconds()
        return max(0, math.ceil(remaining))

    def format_remaining(self) -> str:
        minutes, seconds = divmod(self.remaining_seconds(), 60)
        return f"{minutes:02d}:{seconds:02d}"

    def is_expired(self) -> bool:
        return self._clock() >= self._deadline

    def select(self, position: int, *indices: int) -> None:
        self._attempt.select(position, *indices)

    def submit(self) -> float | None:
        """Finalize on the student's request; returns None if already finalized."""
        if not self.is_running():
            return None
        percentage = self._finalize()
        logger.info(
            "Attempt of %s on evaluation %s submitted: %.1f%%",
            self._attempt.student.student_id,
            self._attempt.evaluation.id,
            percentage,
        )
        return percentage

    def tick(self) -> bool:
        """Finalize once the deadline has passed. Returns True when this call finalized."""
        if not self.is_running() or not self.is_expired():
            return False
        percentage = self._finalize()
        self._timed_out = True
        logger.info(
            "Attempt of %s on evaluation %s timed out: %.1f%%",
            self._attempt.student.student_id,
            self._attempt.evaluation.id,
            percentage,
        )
        return True

    def cancel(self) -> None:
        if self.is_running():
            self._attempt.cancel()
            logger.info(
                "Attempt of %s on evaluation %s cancelled",
                self._attempt.student.student_id,
                self._attempt.evaluation.id,
            )

    def _finalize(self) -> float:
        percentage = self._attempt.finalize(self._clock())
        if self._on_finalized is not None:
            self._on_finalized(self._attempt)
        return percentage
