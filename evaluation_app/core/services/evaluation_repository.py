"""Service for managing the collection of authored evaluations."""

from __future__ import annotations

from evaluation_app.core.evaluation import Evaluation


class EvaluationRepository:
    """Stores evaluations by id together with the id of the author that owns them."""

    def __init__(self) -> None:
        self._evaluations: dict[int, Evaluation] = {}
        self._owners: dict[int, str | None] = {}

    def add(self, evaluation: Evaluation, owner_id: str | None = None) -> None:
        if evaluation.id in self._evaluations:
            raise ValueError(f"Evaluation {evaluation.id} already exists.")
        self._evaluations[evaluation.id] = evaluation
        self._owners[evaluation.id] = owner_id

    def get(self, evaluation_id: int) -> Evaluation:
        try:
            return self._evaluations[evaluation_id]
        except KeyError:
            raise KeyError(f"Evaluation {evaluation_id} not found") from None

    def list_all(self) -> list[Evaluation]:
        """Return a copy of all stored evaluations in creation order."""
        return list(self._evaluations.values())

    def list_by_owner(self, owner_id: str) -> list[Evaluation]:
        return [e for e in self._evaluations.values() if self._owners.get(e.id) == owner_id]

    def remove(self, evaluation_id: int) -> Evaluation:
        evaluation = self.get(evaluation_id)
        del self._evaluations[evaluation_id]
        del self._owners[evaluation_id]
        return evaluation
