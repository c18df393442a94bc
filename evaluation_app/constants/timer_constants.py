"""Attempt countdown constants."""

COUNTDOWN_INTERVAL_MS: int = 1000
