"""A student's single timed pass through an assigned evaluation."""

from __future__ import annotations

from datetime import datetime, timedelta
from enum import Enum, auto
import logging
import random
from typing import Sequence

from evaluation_app.core.errors import AttemptStateError
from evaluation_app.core.evaluation import Evaluation
from evaluation_app.core.models import AnswerRecord, Clock, CourseGroup, StudentRef
from evaluation_app.core.presentation import present_options
from evaluation_app.core.questions import Question

logger = logging.getLogger(__name__)


class AttemptState(Enum):
    RUNNING = auto()
    FINALIZING = auto()
    GRADED = auto()
    CANCELLED = auto()


class Attempt:
    """Answer records for one student, one evaluation and one group.

    Records correspond positionally to the question order used for this
    attempt. Grading happens on ``finalize()``, which runs once; the
    underlying ``calculate_grade()`` can be re-run and gives the same result
    for unchanged records.
    """

    def __init__(
        self,
        student: StudentRef,
        evaluation: Evaluation,
        group: CourseGroup,
        started_at: datetime,
        question_order: Sequence[Question] | None = None,
        option_orders: Sequence[Sequence[int]] | None = None,
    ) -> None:
        order = list(question_order) if question_order is not None else list(evaluation.questions)
        self._student = student
        self._evaluation = evaluation
        self._group = group
        self._started_at = started_at
        self._ended_at: datetime | None = None
        self._records = [AnswerRecord(question=question) for question in order]
        self._question_order = tuple(question.id for question in order)
        if option_orders is None:
            option_orders = [present_options(question) for question in order]
        self._option_orders = tuple(tuple(identifiers) for identifiers in option_orders)
        self._points_obtained = 0
        self._percentage = 0.0
        self._state = AttemptState.RUNNING

    @classmethod
    def begin(
        cls,
        student: StudentRef,
        evaluation: Evaluation,
        group: CourseGroup,
        clock: Clock = datetime.now,
        rng: random.Random | None = None,
    ) -> Attempt:
        """Start an attempt, fixing question order and option display order up front."""
        rng = rng if rng is not None else random.Random()
        order = evaluation.compute_presentation_order(rng)
        option_rng = rng if evaluation.randomize_options else None
        option_orders = [present_options(question, option_rng) for question in order]
        attempt = cls(student, evaluation, group, clock(), order, option_orders)
        logger.info(
            "Student %s began evaluation %s for group %s",
            student.student_id,
            evaluation.id,
            group.group_id,
        )
        return attempt

    # --- Properties ---

    @property
    def student(self) -> StudentRef:
        return self._student

    @property
    def evaluation(self) -> Evaluation:
        return self._evaluation

    @property
    def group(self) -> CourseGroup:
        return self._group

    @property
    def started_at(self) -> datetime:
        return self._started_at

    @property
    def ended_at(self) -> datetime | None:
        return self._ended_at

    @property
    def records(self) -> tuple[AnswerRecord, ...]:
        return tuple(self._records)

    @property
    def question_order(self) -> tuple[int, ...]:
        return self._question_order

    @property
    def option_orders(self) -> tuple[tuple[int, ...], ...]:
        return self._option_orders

    @property
    def points_obtained(self) -> int:
        return self._points_obtained

    @property
    def percentage(self) -> float:
        return self._percentage

    @property
    def state(self) -> AttemptState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state is AttemptState.RUNNING

    # --- Answering ---

    def record_at(self, position: int) -> AnswerRecord:
        if not 0 <= position < len(self._records):
            raise IndexError(f"Question position {position} out of range")
        return self._records[position]

    def record_for_question(self, question_id: int) -> AnswerRecord | None:
        return next((r for r in self._records if r.question.id == question_id), None)

    def select(self, position: int, *indices: int) -> None:
        """Replace the selection for the question shown at ``position``."""
        if not self.is_running:
            raise AttemptStateError(f"Cannot change answers of a {self._state.name.lower()} attempt.")
        self.record_at(position).select(*indices)

    # --- Grading ---

    def calculate_grade(self) -> float:
        """Grade every record and return the percentage of the evaluation total."""
        expected = len(self._evaluation.questions)
        if len(self._records) != expected:
            raise AttemptStateError(
                f"Attempt has {len(self._records)} answer records but evaluation has {expected} questions."
            )
        total = 0
        for record in self._records:
            points = record.question.grade(record)
            record.points_obtained = points
            record.is_exact = points == record.question.points
            total += points
        self._points_obtained = total
        self._percentage = total * 100.0 / max(1, self._evaluation.total_score)
        return self._percentage

    def finalize(self, ended_at: datetime) -> float:
        """Fix the end instant and grade; later calls return the stored percentage."""
        if self._state is AttemptState.GRADED:
            return self._percentage
        if self._state is AttemptState.CANCELLED:
            raise AttemptStateError("A cancelled attempt cannot be finalized.")

        self._state = AttemptState.FINALIZING
        try:
            self.calculate_grade()
        except AttemptStateError:
            self._state = AttemptState.RUNNING
            raise
        self._ended_at = ended_at
        self._state = AttemptState.GRADED
        return self._percentage

    def cancel(self) -> None:
        if self._state is AttemptState.GRADED:
            raise AttemptStateError("A graded attempt cannot be cancelled.")
        self._state = AttemptState.CANCELLED

    def time_used(self) -> timedelta:
        if self._ended_at is None:
            return timedelta(0)
        return self._ended_at - self._started_at

    def __repr__(self) -> str:
        return (
            f"Attempt(student={self._student.student_id!r}, evaluation={self._evaluation.id}, "
            f"group={self._group.group_id}, state={self._state.name}, percentage={self._percentage:.1f})"
        )
