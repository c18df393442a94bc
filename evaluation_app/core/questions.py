"""Question variants that can be placed in an evaluation.

Every variant exposes the same capability set: ``points``, ``description``,
``question_type``, ``validate()`` and ``grade(record)``. ``Question`` is the
closed union of the three variants; consumers that need per-variant behaviour
match on it instead of probing with isinstance chains.

Authoring operations report malformed input through boolean return values so
that editors can surface the problem and let the author correct it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
import random
import re
from types import MappingProxyType
from typing import Mapping

from evaluation_app.constants.evaluation_constants import (
    CHOICE_MIN_OPTIONS,
    MATCHING_ITEM_LENGTH,
    MATCHING_MIN_LEFT_ITEMS,
    MIN_QUESTION_POINTS,
    TRUE_FALSE_OPTION_COUNT,
)
from evaluation_app.constants.word_search_constants import (
    BLANK_CELL,
    CLUE_LENGTH,
    DEFAULT_GRID_SIZE,
    MAX_GRID_SIZE,
    MIN_GRID_SIZE,
    MIN_WORD_COUNT,
    WORD_LENGTH,
)
from evaluation_app.core.grid_generator import GridGenerator, render_grid
from evaluation_app.core.models import (
    CHOICE_TYPES,
    AnswerOption,
    AnswerRecord,
    PlacedWord,
    QuestionType,
    TargetWord,
)

logger = logging.getLogger(__name__)

_NON_WORD_LETTERS = re.compile(r"[^A-ZÁÉÍÓÚÑ]")


def _proportional_points(points: int, hits: int, total: int) -> int:
    """round(points * hits / total), halves rounded up."""
    if total <= 0:
        return 0
    return (2 * points * hits + total) // (2 * total)


def _within(text: str, bounds: tuple[int, int]) -> bool:
    low, high = bounds
    return low <= len(text) <= high


@dataclass(slots=True)
class ChoiceQuestion:
    """Single-choice, multiple-choice or true/false question."""

    id: int
    question_type: QuestionType
    description: str
    points: int = 1
    _options: list[AnswerOption] = field(default_factory=list, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.question_type not in CHOICE_TYPES:
            raise ValueError(f"{self.question_type} is not a choice question type.")
        self.description = (self.description or "").strip()

    @property
    def options(self) -> tuple[AnswerOption, ...]:
        return tuple(self._options)

    def add_option(self, option: AnswerOption) -> bool:
        """Append an option; options without an order get the next free position."""
        if option is None or not (option.text or "").strip():
            logger.info("Rejected blank option for question %s", self.id)
            return False
        order = option.order if option.order > 0 else len(self._options) + 1
        self._options.append(AnswerOption(text=option.text.strip(), is_correct=option.is_correct, order=order))
        return True

    def correct_options(self) -> list[AnswerOption]:
        return [option for option in self._options if option.is_correct]

    def grade(self, record: AnswerRecord | None) -> int:
        """All-or-nothing grading against the orders of the correct options."""
        if record is None:
            return 0
        selected = list(record.selected_indices)
        correct = [option.order for option in self.correct_options()]

        if self.question_type is QuestionType.MULTIPLE_CHOICE:
            if not correct:
                return 0
            return self.points if set(selected) == set(correct) else 0

        if self.question_type is QuestionType.TRUE_FALSE and len(self._options) != TRUE_FALSE_OPTION_COUNT:
            return 0
        if len(correct) != 1 or len(selected) != 1:
            return 0
        return self.points if selected[0] == correct[0] else 0

    def validate(self) -> bool:
        if self.points < MIN_QUESTION_POINTS or not self.description:
            return False
        correct_count = len(self.correct_options())
        option_count = len(self._options)
        if self.question_type is QuestionType.SINGLE_CHOICE:
            return option_count >= CHOICE_MIN_OPTIONS and correct_count == 1
        if self.question_type is QuestionType.MULTIPLE_CHOICE:
            return option_count >= CHOICE_MIN_OPTIONS and correct_count >= 1
        return option_count == TRUE_FALSE_OPTION_COUNT and correct_count == 1


@dataclass(slots=True)
class MatchingQuestion:
    """Pairs left-column statements with right-column answers (right may hold distractors)."""

    id: int
    description: str
    points: int = 1
    _left_items: list[str] = field(default_factory=list, init=False, repr=False)
    _right_items: list[str] = field(default_factory=list, init=False, repr=False)
    _associations: dict[int, int] = field(default_factory=dict, init=False, repr=False)

    def __post_init__(self) -> None:
        self.description = (self.description or "").strip()

    @property
    def question_type(self) -> QuestionType:
        return QuestionType.MATCHING

    @property
    def left_items(self) -> tuple[str, ...]:
        return tuple(self._left_items)

    @property
    def right_items(self) -> tuple[str, ...]:
        return tuple(self._right_items)

    @property
    def associations(self) -> Mapping[int, int]:
        return MappingProxyType(dict(self._associations))

    def add_left_item(self, text: str) -> bool:
        return self._add_item(self._left_items, text, "left")

    def add_right_item(self, text: str) -> bool:
        return self._add_item(self._right_items, text, "right")

    def _add_item(self, items: list[str], text: str, column: str) -> bool:
        cleaned = (text or "").strip()
        if not _within(cleaned, MATCHING_ITEM_LENGTH):
            logger.info("Rejected %s item %r for matching question %s", column, cleaned, self.id)
            return False
        items.append(cleaned)
        return True

    def define_association(self, left_index: int, right_index: int) -> bool:
        """Set the correct right item for a left item, replacing any earlier choice."""
        if not 0 <= left_index < len(self._left_items):
            logger.info("Left index %d out of range for matching question %s", left_index, self.id)
            return False
        if not 0 <= right_index < len(self._right_items):
            logger.info("Right index %d out of range for matching question %s", right_index, self.id)
            return False
        self._associations[left_index] = right_index
        return True

    def generate_right_order(self, rng: random.Random) -> list[int]:
        """Shuffled right-column indices for display."""
        indices = list(range(len(self._right_items)))
        rng.shuffle(indices)
        return indices

    def grade(self, record: AnswerRecord | None) -> int:
        """Proportional credit over interleaved (left, right) pairs.

        A trailing unpaired index is ignored. Repeated left indices are each
        credited, matching how submitted records have always been scored.
        """
        if record is None or not record.selected_indices:
            return 0
        selected = record.selected_indices
        correct_pairs = 0
        for i in range(0, len(selected) - 1, 2):
            expected = self._associations.get(selected[i])
            if expected is not None and expected == selected[i + 1]:
                correct_pairs += 1
        return _proportional_points(self.points, correct_pairs, len(self._associations))

    def validate(self) -> bool:
        if len(self._left_items) < MATCHING_MIN_LEFT_ITEMS:
            return False
        if len(self._right_items) < len(self._left_items):
            return False
        if any(index not in self._associations for index in range(len(self._left_items))):
            return False
        if len(self._associations) != len(self._left_items):
            return False
        return self.points >= MIN_QUESTION_POINTS and bool(self.description)


@dataclass(slots=True)
class WordSearchQuestion:
    """Hidden-word puzzle; ``grid_size`` is clamped into the supported range."""

    id: int
    description: str
    points: int = 1
    grid_size: int = DEFAULT_GRID_SIZE
    _words: list[TargetWord] = field(default_factory=list, init=False, repr=False)
    _grid: tuple[tuple[str, ...], ...] = field(default=(), init=False, repr=False)
    _placed: list[PlacedWord] = field(default_factory=list, init=False, repr=False)

    def __post_init__(self) -> None:
        self.description = (self.description or "").strip()
        self.grid_size = max(MIN_GRID_SIZE, min(self.grid_size, MAX_GRID_SIZE))
        self._grid = tuple(tuple(BLANK_CELL for _ in range(self.grid_size)) for _ in range(self.grid_size))

    @property
    def question_type(self) -> QuestionType:
        return QuestionType.WORD_SEARCH

    @property
    def target_words(self) -> tuple[TargetWord, ...]:
        return tuple(self._words)

    @property
    def placed_words(self) -> tuple[PlacedWord, ...]:
        return tuple(self._placed)

    @property
    def grid(self) -> tuple[tuple[str, ...], ...]:
        return self._grid

    def add_target_word(self, word: str, clue: str) -> bool:
        """Add an uppercase, letters-only word with its clue."""
        if not (word or "").strip() or not (clue or "").strip():
            logger.info("Rejected empty word or clue for word search %s", self.id)
            return False
        cleaned_word = _NON_WORD_LETTERS.sub("", word.strip().upper())
        if not _within(cleaned_word, WORD_LENGTH):
            logger.info("Rejected word %r for word search %s: length", cleaned_word, self.id)
            return False
        cleaned_clue = clue.strip()
        if not _within(cleaned_clue, CLUE_LENGTH):
            logger.info("Rejected clue %r for word search %s: length", cleaned_clue, self.id)
            return False
        self._words.append(TargetWord(word=cleaned_word, clue=cleaned_clue))
        return True

    def generate_grid(self, rng: random.Random | None = None) -> bool:
        """Lay the target words into a fresh grid.

        Returns False without touching the current grid when there are too few
        words. Individual words that cannot be placed are skipped; the call only
        fails when fewer than the minimum number of words ended up in the grid.
        """
        if len(self._words) < MIN_WORD_COUNT:
            logger.info(
                "Word search %s needs at least %d words, has %d", self.id, MIN_WORD_COUNT, len(self._words)
            )
            return False

        result = GridGenerator(rng).generate([target.word for target in self._words], self.grid_size)
        self._grid = result.cells
        self._placed = list(result.placed_words)
        if result.placed_count < MIN_WORD_COUNT:
            logger.warning(
                "Word search %s placed only %d of %d words", self.id, result.placed_count, len(self._words)
            )
            return False
        return True

    def render_grid(self) -> str:
        return render_grid(self._grid)

    def grade(self, record: AnswerRecord | None) -> int:
        """Proportional credit per claimed target-word index.

        Claimed indices are trusted as reported; they are not checked against
        positions in the grid.
        """
        if record is None or not record.selected_indices:
            return 0
        total = len(self._words)
        found = {index for index in record.selected_indices if 0 <= index < total}
        return _proportional_points(self.points, len(found), total)

    def validate(self) -> bool:
        if len(self._words) < MIN_WORD_COUNT:
            return False
        if self.points < MIN_QUESTION_POINTS or not self.description:
            return False
        return len(self._placed) >= MIN_WORD_COUNT


Question = ChoiceQuestion | MatchingQuestion | WordSearchQuestion
