"""Business logic for authoring, scheduling and taking evaluations."""

from __future__ import annotations

from datetime import datetime
import random
from threading import Lock
from typing import Iterable

from evaluation_app.core.assignment import Assignment
from evaluation_app.core.attempt import Attempt
from evaluation_app.core.errors import AttemptStateError
from evaluation_app.core.evaluation import Evaluation
from evaluation_app.core.ids import IdAllocator
from evaluation_app.core.models import Clock, CourseGroup, StudentRef
from evaluation_app.core.questions import Question
from evaluation_app.core.services.attempt_session import AttemptSession
from evaluation_app.core.services.attempt_store import AttemptStore
from evaluation_app.core.services.evaluation_repository import EvaluationRepository


class EvaluationManager:
    """Facade for evaluation services: Repository, Assignments and Attempts."""

    def __init__(
        self,
        clock: Clock = datetime.now,
        rng: random.Random | None = None,
        id_allocator: IdAllocator | None = None,
    ) -> None:
        self._lock = Lock()
        self._clock = clock
        self._rng = rng if rng is not None else random.Random()
        self._ids = id_allocator if id_allocator is not None else IdAllocator()

        # Services
        self._repository = EvaluationRepository()
        self._attempts = AttemptStore()

    # --- Evaluation Repository Delegation ---

    def create_evaluation(
        self,
        owner_id: str | None,
        name: str,
        instructions: str,
        objectives: Iterable[str],
        duration_minutes: int,
        randomize_questions: bool = False,
        randomize_options: bool = False,
    ) -> Evaluation:
        with self._lock:
            evaluation = Evaluation(
                self._ids.next_id(),
                name,
                instructions,
                objectives,
                duration_minutes,
                randomize_questions=randomize_questions,
                randomize_options=randomize_options,
            )
            self._repository.add(evaluation, owner_id)
            return evaluation

    def get_evaluation(self, evaluation_id: int) -> Evaluation:
        with self._lock:
            return self._repository.get(evaluation_id)

    def list_evaluations(self, owner_id: str | None = None) -> list[Evaluation]:
        with self._lock:
            if owner_id is None:
                return self._repository.list_all()
            return self._repository.list_by_owner(owner_id)

    def update_evaluation(
        self,
        evaluation_id: int,
        *,
        name: str | None = None,
        instructions: str | None = None,
        objectives: Iterable[str] | None = None,
        duration_minutes: int | None = None,
        randomize_questions: bool | None = None,
        randomize_options: bool | None = None,
    ) -> Evaluation:
        """Apply the given changes; nothing is changed when any value is invalid."""
        with self._lock:
            evaluation = self._modifiable(evaluation_id)
            new_objectives = list(objectives) if objectives is not None else None
            if not Evaluation.check_data(
                name if name is not None else evaluation.name,
                instructions if instructions is not None else evaluation.instructions,
                new_objectives if new_objectives is not None else evaluation.objectives,
                duration_minutes if duration_minutes is not None else evaluation.duration_minutes,
            ):
                raise ValueError(f"Invalid data for evaluation {evaluation_id}.")
            if name is not None:
                evaluation.name = name
            if instructions is not None:
                evaluation.instructions = instructions
            if new_objectives is not None:
                evaluation.objectives = new_objectives
            if duration_minutes is not None:
                evaluation.duration_minutes = duration_minutes
            if randomize_questions is not None:
                evaluation.randomize_questions = randomize_questions
            if randomize_options is not None:
                evaluation.randomize_options = randomize_options
            return evaluation

    def delete_evaluation(self, evaluation_id: int) -> None:
        with self._lock:
            self._modifiable(evaluation_id)
            self._repository.remove(evaluation_id)

    # --- Question Delegation ---

    def add_question(self, evaluation_id: int, question: Question) -> bool:
        with self._lock:
            return self._modifiable(evaluation_id).add_question(question)

    def replace_question(self, evaluation_id: int, index: int, question: Question) -> bool:
        with self._lock:
            return self._modifiable(evaluation_id).replace_question(index, question)

    def remove_question(self, evaluation_id: int, index: int) -> None:
        with self._lock:
            self._modifiable(evaluation_id).remove_question(index)

    def move_question(self, evaluation_id: int, from_index: int, to_index: int) -> None:
        with self._lock:
            self._modifiable(evaluation_id).move_question(from_index, to_index)

    def _modifiable(self, evaluation_id: int) -> Evaluation:
        evaluation = self._repository.get(evaluation_id)
        evaluation.ensure_modifiable(self._clock().date())
        return evaluation

    # --- Assignment Delegation ---

    def assign_to_group(self, evaluation_id: int, group: CourseGroup, start: datetime) -> Assignment:
        with self._lock:
            evaluation = self._repository.get(evaluation_id)
            if evaluation.find_assignment(group.group_id) is not None:
                raise ValueError(f"Evaluation {evaluation_id} is already assigned to group {group.group_id}.")
            return evaluation.assign(group, start, clock=self._clock)

    def unassign_from_group(self, evaluation_id: int, group_id: int) -> None:
        with self._lock:
            evaluation = self._repository.get(evaluation_id)
            assignment = evaluation.find_assignment(group_id)
            if assignment is None:
                raise KeyError(f"Evaluation {evaluation_id} is not assigned to group {group_id}")
            evaluation.unassign(assignment)

    def get_active_assignments(self, group_id: int) -> list[Assignment]:
        with self._lock:
            return [
                assignment
                for evaluation in self._repository.list_all()
                for assignment in evaluation.assignments
                if assignment.group is not None
                and assignment.group.group_id == group_id
                and assignment.is_active_now()
            ]

    # --- Attempt Delegation ---

    def begin_attempt(self, evaluation_id: int, student: StudentRef, group: CourseGroup) -> AttemptSession:
        """Start an attempt for a student of a group the evaluation is assigned to.

        A student gets one graded attempt per evaluation and group; a second
        start after it has been stored is refused.
        """
        with self._lock:
            evaluation = self._repository.get(evaluation_id)
            if evaluation.find_assignment(group.group_id) is None:
                raise KeyError(f"Evaluation {evaluation_id} is not assigned to group {group.group_id}")
            if self._attempts.get(student.student_id, evaluation_id, group.group_id) is not None:
                raise AttemptStateError(
                    f"Student {student.student_id} already completed evaluation {evaluation_id}."
                )
            attempt = Attempt.begin(student, evaluation, group, clock=self._clock, rng=self._rng)
        return AttemptSession(attempt, clock=self._clock, on_finalized=self._attempts.save)

    def get_attempt(self, student_id: str, evaluation_id: int, group_id: int) -> Attempt | None:
        return self._attempts.get(student_id, evaluation_id, group_id)

    def list_attempts_by_student(self, student_id: str) -> list[Attempt]:
        return self._attempts.list_by_student(student_id)

    def list_attempts_by_group(self, group_id: int) -> list[Attempt]:
        return self._attempts.list_by_group(group_id)

    def list_attempts_by_evaluation(self, evaluation_id: int) -> list[Attempt]:
        return self._attempts.list_by_evaluation(evaluation_id)

    def get_average_percentage(self, evaluation_id: int) -> float:
        return self._attempts.average_percentage(evaluation_id)
