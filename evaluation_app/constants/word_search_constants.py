"""Word-search grid constants."""

WORD_LENGTH: tuple[int, int] = (3, 20)
CLUE_LENGTH: tuple[int, int] = (5, 100)
MIN_WORD_COUNT: int = 10

DEFAULT_GRID_SIZE: int = 15
MIN_GRID_SIZE: int = 10
MAX_GRID_SIZE: int = 30

MAX_PLACEMENT_TRIALS: int = 100
BLANK_CELL: str = " "
FILL_ALPHABET: str = "ABCDEFGHIJKLMNOPQRSTUVWXYZÁÉÍÓÚÑ"
