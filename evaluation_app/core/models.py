"""Domain models for the evaluation engine."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum, auto
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from evaluation_app.core.questions import Question

Clock = Callable[[], datetime]


class QuestionType(Enum):
    """Type tag shared by every question variant."""

    SINGLE_CHOICE = auto()
    MULTIPLE_CHOICE = auto()
    TRUE_FALSE = auto()
    MATCHING = auto()
    WORD_SEARCH = auto()


CHOICE_TYPES = frozenset(
    {QuestionType.SINGLE_CHOICE, QuestionType.MULTIPLE_CHOICE, QuestionType.TRUE_FALSE}
)


class Direction(Enum):
    """The eight compass and diagonal directions a hidden word can run in."""

    EAST = (0, 1)
    WEST = (0, -1)
    SOUTH = (1, 0)
    NORTH = (-1, 0)
    SOUTH_EAST = (1, 1)
    SOUTH_WEST = (1, -1)
    NORTH_EAST = (-1, 1)
    NORTH_WEST = (-1, -1)

    @property
    def row_step(self) -> int:
        return self.value[0]

    @property
    def col_step(self) -> int:
        return self.value[1]


@dataclass(slots=True, frozen=True)
class AnswerOption:
    """Labeled choice of a choice question; ``order`` is its stable 1-based identifier."""

    text: str
    is_correct: bool = False
    order: int = 0


@dataclass(slots=True, frozen=True)
class TargetWord:
    """A word hidden in a word-search grid together with the clue shown to students."""

    word: str
    clue: str


@dataclass(slots=True, frozen=True)
class PlacedWord:
    """Where a target word was written into the grid."""

    word: str
    start_row: int
    start_col: int
    direction: Direction

    def cells(self) -> list[tuple[int, int]]:
        return [
            (self.start_row + self.direction.row_step * i, self.start_col + self.direction.col_step * i)
            for i in range(len(self.word))
        ]


@dataclass(slots=True)
class AnswerRecord:
    """A student's raw selections for one question within an attempt.

    ``selected_indices`` means option orders for choice questions, interleaved
    (left, right) pairs for matching questions and found target-word indices
    for word-search questions.
    """

    question: Question
    selected_indices: tuple[int, ...] = ()
    points_obtained: int = 0
    is_exact: bool = False

    def select(self, *indices: int) -> None:
        """Replace the current selection."""
        self.selected_indices = tuple(indices)

    def add_selection(self, index: int) -> None:
        self.selected_indices = self.selected_indices + (index,)

    def remove_selection(self, index: int) -> None:
        self.selected_indices = tuple(i for i in self.selected_indices if i != index)

    def clear_selection(self) -> None:
        self.selected_indices = ()


@dataclass(slots=True)
class CourseGroup:
    """Reference to a course group owned by the surrounding application."""

    group_id: int
    course_name: str = ""
    start_date: date | None = None
    end_date: date | None = None

    def contains(self, day: date) -> bool:
        """Return True when ``day`` falls inside the group's validity window."""
        if self.start_date is not None and day < self.start_date:
            return False
        if self.end_date is not None and day > self.end_date:
            return False
        return True


@dataclass(slots=True)
class StudentRef:
    """Reference to a student owned by the surrounding application."""

    student_id: str
    display_name: str = ""
