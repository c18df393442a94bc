"""Placement of hidden words into a square letter grid.

Each word gets a bounded number of randomized trials. A trial picks one of
the eight directions and a start cell; it succeeds when every cell on the
word's path is inside the grid and is either blank or already holds the same
letter, so words may cross on shared letters. Words that exhaust their trials
are skipped and reported back to the caller, which decides whether enough
words made it into the grid. Remaining blanks are filled with noise letters.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
import random
from typing import Sequence

from evaluation_app.constants.word_search_constants import (
    BLANK_CELL,
    FILL_ALPHABET,
    MAX_PLACEMENT_TRIALS,
)
from evaluation_app.core.models import Direction, PlacedWord

logger = logging.getLogger(__name__)

_DIRECTIONS: tuple[Direction, ...] = tuple(Direction)


@dataclass(slots=True, frozen=True)
class GeneratedGrid:
    """Result of one generation run."""

    size: int
    cells: tuple[tuple[str, ...], ...]
    placed_words: tuple[PlacedWord, ...]
    skipped_words: tuple[str, ...]

    @property
    def placed_count(self) -> int:
        return len(self.placed_words)


class GridGenerator:
    """Lays words into an N x N grid using an injected random source."""

    def __init__(
        self,
        rng: random.Random | None = None,
        max_trials: int = MAX_PLACEMENT_TRIALS,
        alphabet: str = FILL_ALPHABET,
    ) -> None:
        if max_trials < 1:
            raise ValueError("max_trials must be at least 1.")
        if not alphabet:
            raise ValueError("Fill alphabet cannot be empty.")
        self._rng = rng if rng is not None else random.Random()
        self._max_trials = max_trials
        self._alphabet = alphabet

    def generate(self, words: Sequence[str], size: int) -> GeneratedGrid:
        if size < 1:
            raise ValueError("Grid size must be a positive integer.")

        grid = [[BLANK_CELL] * size for _ in range(size)]
        placed: list[PlacedWord] = []
        skipped: list[str] = []

        placement_order = list(words)
        self._rng.shuffle(placement_order)

        for word in placement_order:
            placement = self._try_place(grid, word)
            if placement is None:
                logger.warning("Could not place word %r after %d trials", word, self._max_trials)
                skipped.append(word)
                continue
            placed.append(placement)

        self._fill_blanks(grid)
        logger.debug("Generated %dx%d grid: %d placed, %d skipped", size, size, len(placed), len(skipped))
        return GeneratedGrid(
            size=size,
            cells=tuple(tuple(row) for row in grid),
            placed_words=tuple(placed),
            skipped_words=tuple(skipped),
        )

    def _try_place(self, grid: list[list[str]], word: str) -> PlacedWord | None:
        size = len(grid)
        for _ in range(self._max_trials):
            direction = self._rng.choice(_DIRECTIONS)
            row = self._rng.randrange(size)
            col = self._rng.randrange(size)
            if _fits(grid, word, row, col, direction):
                _write(grid, word, row, col, direction)
                return PlacedWord(word=word, start_row=row, start_col=col, direction=direction)
        return None

    def _fill_blanks(self, grid: list[list[str]]) -> None:
        for row in grid:
            for col, cell in enumerate(row):
                if cell == BLANK_CELL:
                    row[col] = self._rng.choice(self._alphabet)


def _fits(grid: list[list[str]], word: str, row: int, col: int, direction: Direction) -> bool:
    size = len(grid)
    for i, letter in enumerate(word):
        r = row + direction.row_step * i
        c = col + direction.col_step * i
        if not (0 <= r < size and 0 <= c < size):
            return False
        current = grid[r][c]
        if current != BLANK_CELL and current != letter:
            return False
    return True


def _write(grid: list[list[str]], word: str, row: int, col: int, direction: Direction) -> None:
    for i, letter in enumerate(word):
        grid[row + direction.row_step * i][col + direction.col_step * i] = letter


def render_grid(cells: Sequence[Sequence[str]]) -> str:
    """Return the grid as text, one row per line with letters separated by spaces."""
    return "\n".join(" ".join(row) for row in cells)
