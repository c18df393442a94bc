from __future__ import annotations

from datetime import datetime, timedelta
import random

import pytest

from evaluation_app.core.evaluation import Evaluation
from evaluation_app.core.models import AnswerOption, QuestionType
from evaluation_app.core.questions import ChoiceQuestion, MatchingQuestion, WordSearchQuestion

WORDS = [
    ("PYTHON", "A language named after a comedy group"),
    ("GRID", "Rows and columns of cells"),
    ("SEARCH", "Look for something carefully"),
    ("LETTER", "A single character of the alphabet"),
    ("PUZZLE", "A game that tests ingenuity"),
    ("WORD", "A unit of written language"),
    ("CLUE", "A hint that helps solve a problem"),
    ("ANSWER", "The reply to a question"),
    ("SCORE", "Points earned in a test"),
    ("EXAM", "A formal test of knowledge"),
]


class FakeClock:
    """Controllable clock returning a fixed instant until advanced."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def rng() -> random.Random:
    return random.Random(20250110)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2025, 1, 10, 8, 0))


def make_single_choice(question_id: int = 1, points: int = 2) -> ChoiceQuestion:
    question = ChoiceQuestion(question_id, QuestionType.SINGLE_CHOICE, "Which is a prime number?", points)
    question.add_option(AnswerOption("Four", False, 1))
    question.add_option(AnswerOption("Seven", True, 2))
    question.add_option(AnswerOption("Nine", False, 3))
    return question


def make_multiple_choice(question_id: int = 2, points: int = 3) -> ChoiceQuestion:
    question = ChoiceQuestion(question_id, QuestionType.MULTIPLE_CHOICE, "Pick the even numbers", points)
    question.add_option(AnswerOption("Two", True, 1))
    question.add_option(AnswerOption("Three", False, 2))
    question.add_option(AnswerOption("Eight", True, 3))
    return question


def make_matching(question_id: int = 3, points: int = 10) -> MatchingQuestion:
    question = MatchingQuestion(question_id, "Match each country with its capital", points)
    for item in ("France", "Japan", "Kenya"):
        question.add_left_item(item)
    for item in ("Tokyo", "Nairobi", "Paris", "Lisbon"):
        question.add_right_item(item)
    question.define_association(0, 2)
    question.define_association(1, 0)
    question.define_association(2, 1)
    return question


def make_word_search(
    question_id: int = 4,
    points: int = 10,
    words: list[tuple[str, str]] | None = None,
    grid_size: int = 15,
) -> WordSearchQuestion:
    question = WordSearchQuestion(question_id, "Find the hidden words", points, grid_size)
    for word, clue in words if words is not None else WORDS:
        question.add_target_word(word, clue)
    return question


def make_evaluation(evaluation_id: int = 1, duration_minutes: int = 45, **flags: bool) -> Evaluation:
    return Evaluation(
        evaluation_id,
        "Midterm exam",
        "Answer every question before time runs out.",
        ["Recognize prime numbers", "Relate countries and capitals"],
        duration_minutes,
        **flags,
    )
