"""Qt countdown that auto-submits an attempt when its time runs out."""

from __future__ import annotations

import logging

from PySide6.QtCore import QObject, QTimer, Signal

from evaluation_app.constants.timer_constants import COUNTDOWN_INTERVAL_MS
from evaluation_app.core.errors import EvaluationStateError
from evaluation_app.core.services.attempt_session import AttemptSession

logger = logging.getLogger(__name__)


class AttemptCountdown(QObject):
    """One-second ticker on the Qt event thread for a running attempt.

    The timer is the only trigger for timeout finalization. It is stopped on
    manual submission and on cancellation so a late tick never touches a
    disposed attempt.
    """

    remaining_changed = Signal(int)
    expired = Signal(float)
    failed = Signal(str)

    def __init__(
        self,
        session: AttemptSession,
        parent: QObject | None = None,
        interval_ms: int = COUNTDOWN_INTERVAL_MS,
    ) -> None:
        super().__init__(parent)
        self._session = session
        self._timer = QTimer(self)
        self._timer.setInterval(interval_ms)
        self._timer.timeout.connect(self.handle_tick)

    @property
    def session(self) -> AttemptSession:
        return self._session

    def start(self) -> None:
        if not self._session.is_running():
            return
        self.remaining_changed.emit(self._session.remaining_seconds())
        if not self._timer.isActive():
            self._timer.start()

    def stop(self) -> None:
        if self._timer.isActive():
            self._timer.stop()

    def is_active(self) -> bool:
        return self._timer.isActive()

    def submit(self) -> float | None:
        self.stop()
        return self._session.submit()

    def cancel(self) -> None:
        self.stop()
        self._session.cancel()

    def handle_tick(self) -> None:
        if not self._session.is_running():
            self.stop()
            return
        self.remaining_changed.emit(self._session.remaining_seconds())
        try:
            finalized = self._session.tick()
        except EvaluationStateError as exc:
            self.stop()
            logger.error("Timed finalization failed: %s", exc)
            self.failed.emit(str(exc))
            return
        if finalized:
            self.stop()
            self.expired.emit(self._session.attempt.percentage)
