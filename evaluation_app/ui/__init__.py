"""Qt components for running evaluations."""

from .attempt_countdown import AttemptCountdown

__all__ = ["AttemptCountdown"]
