"""Evaluation-related limits shared across the core and UI layers."""

MIN_QUESTION_POINTS: int = 1
MIN_DURATION_MINUTES: int = 1

EVALUATION_NAME_LENGTH: tuple[int, int] = (5, 20)
EVALUATION_INSTRUCTIONS_LENGTH: tuple[int, int] = (5, 400)
EVALUATION_OBJECTIVE_LENGTH: tuple[int, int] = (10, 40)

MATCHING_ITEM_LENGTH: tuple[int, int] = (5, 100)
MATCHING_MIN_LEFT_ITEMS: int = 2

CHOICE_MIN_OPTIONS: int = 2
TRUE_FALSE_OPTION_COUNT: int = 2
