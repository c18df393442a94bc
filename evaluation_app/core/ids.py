"""Explicit identifier allocation."""

from __future__ import annotations

from threading import Lock


class IdAllocator:
    """Hands out increasing integer identifiers starting at ``start``."""

    def __init__(self, start: int = 1) -> None:
        self._next = start
        self._lock = Lock()

    def next_id(self) -> int:
        with self._lock:
            value = self._next
            self._next += 1
            return value
