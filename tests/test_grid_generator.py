import logging
import random

import pytest

from conftest import WORDS
from evaluation_app.constants.word_search_constants import FILL_ALPHABET
from evaluation_app.core.grid_generator import GridGenerator, render_grid

TEN_WORDS = [word for word, _ in WORDS]


def test_ten_short_words_fit_on_fifteen_grid():
    result = GridGenerator(random.Random(7)).generate(TEN_WORDS, 15)

    assert result.placed_count == 10
    assert result.skipped_words == ()
    assert sorted(p.word for p in result.placed_words) == sorted(TEN_WORDS)


def test_grid_has_configured_size_and_no_blanks():
    result = GridGenerator(random.Random(11)).generate(TEN_WORDS, 15)

    assert result.size == 15
    assert len(result.cells) == 15
    assert all(len(row) == 15 for row in result.cells)
    assert all(cell in FILL_ALPHABET for row in result.cells for cell in row)


def test_placed_words_can_be_read_back_from_the_grid():
    result = GridGenerator(random.Random(5)).generate(TEN_WORDS, 12)

    for placed in result.placed_words:
        spelled = "".join(result.cells[row][col] for row, col in placed.cells())
        assert spelled == placed.word


def test_word_that_cannot_fit_is_skipped_and_logged(caplog):
    too_long = "ABCDEFGHIJKLMNOPQRST"
    with caplog.at_level(logging.WARNING, logger="evaluation_app.core.grid_generator"):
        result = GridGenerator(random.Random(2)).generate(["CAT", too_long], 10)

    assert result.skipped_words == (too_long,)
    assert [p.word for p in result.placed_words] == ["CAT"]
    assert too_long in caplog.text


def test_same_seed_gives_same_grid():
    first = GridGenerator(random.Random(99)).generate(TEN_WORDS, 15)
    second = GridGenerator(random.Random(99)).generate(TEN_WORDS, 15)

    assert first.cells == second.cells
    assert first.placed_words == second.placed_words


def test_render_grid_joins_rows():
    assert render_grid([("A", "B"), ("C", "D")]) == "A B\nC D"


def test_invalid_generator_settings_are_rejected():
    with pytest.raises(ValueError):
        GridGenerator(max_trials=0)
    with pytest.raises(ValueError):
        GridGenerator(alphabet="")
    with pytest.raises(ValueError):
        GridGenerator().generate(TEN_WORDS, 0)
