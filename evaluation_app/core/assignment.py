"""Binding of an evaluation to a course group at a start instant."""

from __future__ import annotations

from datetime import datetime, timedelta
import logging
from typing import TYPE_CHECKING

from evaluation_app.constants.evaluation_constants import MIN_DURATION_MINUTES
from evaluation_app.core.models import Clock, CourseGroup

if TYPE_CHECKING:
    from evaluation_app.core.evaluation import Evaluation

logger = logging.getLogger(__name__)


class Assignment:
    """Schedules an evaluation for a group; the end instant follows start and duration."""

    def __init__(
        self,
        evaluation: Evaluation | None,
        group: CourseGroup | None,
        start: datetime | None,
        clock: Clock = datetime.now,
    ) -> None:
        self._evaluation = evaluation
        self._group = group
        self._start = start
        self._end: datetime | None = None
        self._clock = clock
        self.compute_end_instant()

    @property
    def evaluation(self) -> Evaluation | None:
        return self._evaluation

    @property
    def group(self) -> CourseGroup | None:
        return self._group

    @property
    def start(self) -> datetime | None:
        return self._start

    @start.setter
    def start(self, value: datetime | None) -> None:
        self._start = value
        self.compute_end_instant()

    @property
    def end(self) -> datetime | None:
        return self._end

    def compute_end_instant(self) -> datetime | None:
        """Recompute ``end`` as start plus the evaluation duration."""
        if self._evaluation is None or self._start is None:
            logger.debug("Cannot compute end instant without evaluation and start")
            self._end = None
            return None
        minutes = self._evaluation.duration_minutes
        if minutes < MIN_DURATION_MINUTES:
            self._end = None
            return None
        self._end = self._start + timedelta(minutes=minutes)
        return self._end

    def is_active_now(self) -> bool:
        """True while now is inside [start, end] and today is inside the group's window."""
        if self._start is None or self._end is None:
            return False
        now = self._clock()
        if now < self._start or now > self._end:
            return False
        if self._group is not None and not self._group.contains(now.date()):
            return False
        return True

    def can_unassign(self) -> bool:
        """Only assignments that have not started yet may be removed."""
        return self._start is not None and self._start > self._clock()

    def __repr__(self) -> str:
        name = self._evaluation.name if self._evaluation is not None else None
        group_id = self._group.group_id if self._group is not None else None
        return f"Assignment(evaluation={name!r}, group={group_id}, start={self._start}, end={self._end})"
