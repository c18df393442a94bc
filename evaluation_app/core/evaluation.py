"""Authored evaluation: ordered questions, timing and presentation settings."""

from __future__ import annotations

from datetime import date, datetime
import logging
import random
from typing import Iterable

from evaluation_app.constants.evaluation_constants import (
    EVALUATION_INSTRUCTIONS_LENGTH,
    EVALUATION_NAME_LENGTH,
    EVALUATION_OBJECTIVE_LENGTH,
    MIN_DURATION_MINUTES,
)
from evaluation_app.core.assignment import Assignment
from evaluation_app.core.errors import AssignmentStartedError, EvaluationLockedError
from evaluation_app.core.models import Clock, CourseGroup
from evaluation_app.core.questions import Question

logger = logging.getLogger(__name__)


def _length_ok(value: str | None, bounds: tuple[int, int]) -> bool:
    if value is None:
        return False
    low, high = bounds
    return low <= len(value.strip()) <= high


class Evaluation:
    """An assessment made of ordered questions.

    Base data is validated on construction and by every setter; malformed
    values raise ``ValueError``. Question list changes report failures through
    boolean returns or silently ignore out-of-range positions, and always keep
    ``total_score`` in sync.
    """

    def __init__(
        self,
        evaluation_id: int,
        name: str,
        instructions: str,
        objectives: Iterable[str],
        duration_minutes: int,
        randomize_questions: bool = False,
        randomize_options: bool = False,
    ) -> None:
        objectives = list(objectives) if objectives is not None else []
        self._require_valid_data(name, instructions, objectives, duration_minutes)
        self._id = evaluation_id
        self._name = name.strip()
        self._instructions = instructions.strip()
        self._objectives = [objective.strip() for objective in objectives]
        self._duration_minutes = duration_minutes
        self.randomize_questions = randomize_questions
        self.randomize_options = randomize_options
        self._questions: list[Question] = []
        self._assignments: list[Assignment] = []
        self._total_score = 0

    # --- Base data validation ---

    @staticmethod
    def check_data(
        name: str | None,
        instructions: str | None,
        objectives: Iterable[str] | None,
        duration_minutes: int,
    ) -> bool:
        """Boolean form of the base-data rules, for editors that validate before building."""
        try:
            Evaluation._require_valid_data(name, instructions, list(objectives or []), duration_minutes)
        except ValueError:
            return False
        return True

    @staticmethod
    def _require_valid_data(
        name: str | None,
        instructions: str | None,
        objectives: list[str],
        duration_minutes: int,
    ) -> None:
        Evaluation._require_name(name)
        Evaluation._require_instructions(instructions)
        Evaluation._require_objectives(objectives)
        Evaluation._require_duration(duration_minutes)

    @staticmethod
    def _require_name(name: str | None) -> None:
        if not _length_ok(name, EVALUATION_NAME_LENGTH):
            raise ValueError("Evaluation name must be between 5 and 20 characters.")

    @staticmethod
    def _require_instructions(instructions: str | None) -> None:
        if not _length_ok(instructions, EVALUATION_INSTRUCTIONS_LENGTH):
            raise ValueError("Instructions must be between 5 and 400 characters.")

    @staticmethod
    def _require_objectives(objectives: list[str]) -> None:
        if not objectives:
            raise ValueError("At least one objective is required.")
        for objective in objectives:
            if not _length_ok(objective, EVALUATION_OBJECTIVE_LENGTH):
                raise ValueError(f"Objective must be between 10 and 40 characters: {objective!r}")

    @staticmethod
    def _require_duration(duration_minutes: int) -> None:
        if not isinstance(duration_minutes, int) or duration_minutes < MIN_DURATION_MINUTES:
            raise ValueError("Duration must be at least one minute.")

    def validate(self) -> bool:
        """True when base data and every question are valid."""
        if not self.check_data(self._name, self._instructions, self._objectives, self._duration_minutes):
            return False
        return all(question.validate() for question in self._questions)

    # --- Properties ---

    @property
    def id(self) -> int:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @name.setter
    def name(self, value: str) -> None:
        self._require_name(value)
        self._name = value.strip()

    @property
    def instructions(self) -> str:
        return self._instructions

    @instructions.setter
    def instructions(self, value: str) -> None:
        self._require_instructions(value)
        self._instructions = value.strip()

    @property
    def objectives(self) -> tuple[str, ...]:
        return tuple(self._objectives)

    @objectives.setter
    def objectives(self, value: Iterable[str]) -> None:
        objectives = list(value) if value is not None else []
        self._require_objectives(objectives)
        self._objectives = [objective.strip() for objective in objectives]

    @property
    def duration_minutes(self) -> int:
        return self._duration_minutes

    @duration_minutes.setter
    def duration_minutes(self, value: int) -> None:
        self._require_duration(value)
        self._duration_minutes = value
        for assignment in self._assignments:
            assignment.compute_end_instant()

    @property
    def questions(self) -> tuple[Question, ...]:
        return tuple(self._questions)

    @property
    def total_score(self) -> int:
        return self._total_score

    @property
    def assignments(self) -> tuple[Assignment, ...]:
        return tuple(self._assignments)

    # --- Questions ---

    def add_question(self, question: Question | None) -> bool:
        if not self._accepts(question):
            return False
        self._questions.append(question)
        self._recalculate_total_score()
        return True

    def replace_question(self, index: int, question: Question | None) -> bool:
        if not 0 <= index < len(self._questions):
            return False
        if not self._accepts(question, ignore_index=index):
            return False
        self._questions[index] = question
        self._recalculate_total_score()
        return True

    def remove_question(self, index: int) -> None:
        if not 0 <= index < len(self._questions):
            return
        self._questions.pop(index)
        self._recalculate_total_score()

    def move_question(self, from_index: int, to_index: int) -> None:
        """Swap two questions; out-of-range or equal positions are ignored."""
        count = len(self._questions)
        if not (0 <= from_index < count and 0 <= to_index < count) or from_index == to_index:
            return
        questions = self._questions
        questions[from_index], questions[to_index] = questions[to_index], questions[from_index]
        self._recalculate_total_score()

    def _accepts(self, question: Question | None, ignore_index: int | None = None) -> bool:
        if question is None:
            logger.info("Rejected empty question for evaluation %s", self._id)
            return False
        if not question.validate():
            logger.info("Rejected invalid question %s for evaluation %s", question.id, self._id)
            return False
        for index, existing in enumerate(self._questions):
            if index != ignore_index and existing.id == question.id:
                logger.info("Rejected duplicate question id %s for evaluation %s", question.id, self._id)
                return False
        return True

    def _recalculate_total_score(self) -> int:
        self._total_score = sum(max(0, question.points) for question in self._questions)
        return self._total_score

    def compute_presentation_order(self, rng: random.Random | None = None) -> list[Question]:
        """Copy of the questions, shuffled only when ``randomize_questions`` is set."""
        order = list(self._questions)
        if self.randomize_questions:
            (rng if rng is not None else random.Random()).shuffle(order)
        return order

    # --- Assignments ---

    def assign(self, group: CourseGroup, start: datetime, clock: Clock = datetime.now) -> Assignment:
        assignment = Assignment(self, group, start, clock=clock)
        self._assignments.append(assignment)
        return assignment

    def find_assignment(self, group_id: int) -> Assignment | None:
        return next(
            (a for a in self._assignments if a.group is not None and a.group.group_id == group_id),
            None,
        )

    def unassign(self, assignment: Assignment) -> None:
        index = next((i for i, a in enumerate(self._assignments) if a is assignment), -1)
        if index < 0:
            raise ValueError("Assignment does not belong to this evaluation.")
        if not assignment.can_unassign():
            raise AssignmentStartedError(
                f"Assignment of evaluation {self._id} has already started and cannot be removed."
            )
        self._assignments.pop(index)

    def can_unassign_all(self) -> bool:
        return all(assignment.can_unassign() for assignment in self._assignments)

    def can_modify(self, reference_date: date | None = None) -> bool:
        """False while any assigned group is still valid on ``reference_date``."""
        if not self._assignments:
            return True
        reference_date = reference_date or date.today()
        for assignment in self._assignments:
            group = assignment.group
            if group is None or group.end_date is None:
                continue
            if group.end_date >= reference_date:
                return False
        return True

    def ensure_modifiable(self, reference_date: date | None = None) -> None:
        if not self.can_modify(reference_date):
            raise EvaluationLockedError(f"Evaluation {self._id} is assigned to an active group.")

    def __repr__(self) -> str:
        return (
            f"Evaluation(id={self._id}, name={self._name!r}, duration={self._duration_minutes}, "
            f"questions={len(self._questions)}, total_score={self._total_score})"
        )
