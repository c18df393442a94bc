"""Display ordering of the choices inside a question."""

from __future__ import annotations

import random

from evaluation_app.core.questions import (
    ChoiceQuestion,
    MatchingQuestion,
    Question,
    WordSearchQuestion,
)


def present_options(question: Question, rng: random.Random | None = None) -> list[int]:
    """Return the identifiers of the question's choices in display order.

    Choice questions yield option orders, matching questions yield right-column
    indices and word-search questions yield target-word (clue) indices. The
    identifiers are the same ones graded in answer records, so shuffling them
    for display never affects scoring. Without ``rng`` the authored order is kept.
    """
    match question:
        case ChoiceQuestion():
            identifiers = [option.order for option in question.options]
        case MatchingQuestion():
            identifiers = list(range(len(question.right_items)))
        case WordSearchQuestion():
            identifiers = list(range(len(question.target_words)))
        case _:
            raise TypeError(f"Unsupported question variant: {type(question).__name__}")

    if rng is not None:
        rng.shuffle(identifiers)
    return identifiers
