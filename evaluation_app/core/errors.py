"""Illegal-state failures raised by the evaluation engine."""

from __future__ import annotations


class EvaluationStateError(RuntimeError):
    """Raised when an operation is not allowed in the current workflow state."""


class EvaluationLockedError(EvaluationStateError):
    """Raised when editing an evaluation that a still-valid group is using."""


class AssignmentStartedError(EvaluationStateError):
    """Raised when unassigning an assignment whose start instant has passed."""


class AttemptStateError(EvaluationStateError):
    """Raised when an attempt is graded or answered in an inconsistent state."""
