"""Cancellable timer handles used to drive question countdowns.

The countdown logic only talks to :class:`Scheduler`; the Qt event loop is the
production backend, and tests substitute a manually advanced clock.
"""

from __future__ import annotations

import logging
from typing import Callable, Protocol

from PySide6.QtCore import QElapsedTimer, QObject, Qt, QTimer

logger = logging.getLogger(__name__)


class ScheduledCall(Protocol):
    """Handle to pending scheduled work."""

    @property
    def is_active(self) -> bool: ...

    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Factory for one-shot and repeating callbacks."""

    def call_later(self, delay_seconds: float, callback: Callable[[], None]) -> ScheduledCall: ...

    def call_repeating(
        self, interval_seconds: float, callback: Callable[[], None]
    ) -> ScheduledCall: ...


class QtScheduledCall:
    """QTimer-backed handle.

    Repeating calls re-arm a single-shot timer against a monotonic clock so the
    n-th callback fires at ``n * interval`` after start, instead of
    accumulating event-loop latency.
    """

    def __init__(
        self,
        interval_ms: int,
        callback: Callable[[], None],
        repeating: bool,
        parent: QObject | None = None,
    ) -> None:
        self._interval_ms = max(0, interval_ms)
        self._callback = callback
        self._repeating = repeating
        self._active = False
        self._fired = 0
        self._clock = QElapsedTimer()

        self._timer = QTimer(parent)
        self._timer.setTimerType(Qt.TimerType.PreciseTimer)
        self._timer.setSingleShot(True)
        self._timer.timeout.connect(self._fire)

    @property
    def is_active(self) -> bool:
        return self._active

    def start(self) -> None:
        self._active = True
        self._fired = 0
        self._clock.start()
        self._timer.start(self._interval_ms)

    def cancel(self) -> None:
        if not self._active:
            return
        self._active = False
        self._timer.stop()
        self._release()

    def _fire(self) -> None:
        # A timeout queued before cancel() may still be delivered.
        if not self._active:
            return
        self._fired += 1
        if self._repeating:
            next_deadline_ms = (self._fired + 1) * self._interval_ms
            self._timer.start(max(0, next_deadline_ms - self._clock.elapsed()))
        else:
            self._active = False
            self._release()
        self._callback()

    def _release(self) -> None:
        # Handles are single use; drop the QTimer so it does not pile up on the parent.
        self._timer.timeout.disconnect(self._fire)
        self._timer.deleteLater()


class QtScheduler:
    """Scheduler running on the Qt event loop of the calling thread."""

    def __init__(self, parent: QObject | None = None) -> None:
        self._parent = parent

    def call_later(self, delay_seconds: float, callback: Callable[[], None]) -> QtScheduledCall:
        return self._schedule(delay_seconds, callback, repeating=False)

    def call_repeating(
        self, interval_seconds: float, callback: Callable[[], None]
    ) -> QtScheduledCall:
        return self._schedule(interval_seconds, callback, repeating=True)

    def _schedule(
        self, seconds: float, callback: Callable[[], None], repeating: bool
    ) -> QtScheduledCall:
        handle = QtScheduledCall(
            interval_ms=round(seconds * 1000),
            callback=callback,
            repeating=repeating,
            parent=self._parent,
        )
        handle.start()
        logger.debug("Scheduled %s callback (%.3fs)", "repeating" if repeating else "one-shot", seconds)
        return handle
