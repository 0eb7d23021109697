"""Countdown state machine for a single quiz question."""

from __future__ import annotations

import logging
from typing import Callable

from slidequiz.constants.quiz_constants import (
    DEFAULT_TIME_LIMIT_SECONDS,
    PRE_COUNTDOWN_SECONDS,
    TICK_INTERVAL_SECONDS,
)
from slidequiz.core.models import TimerPhase, TimerSnapshot
from slidequiz.core.scheduler import ScheduledCall, Scheduler
from slidequiz.core.scoring import calculate_awarded_points

logger = logging.getLogger(__name__)


class QuestionTimer:
    """Drives one question through pre-countdown, countdown and expiry.

    ``on_tick`` receives the elapsed countdown seconds (1, 2, ...) once per
    second; ``on_timeout`` fires once, after the final tick, when the limit is
    reached. ``on_snapshot`` receives a :class:`TimerSnapshot` on every phase
    change and tick. Nothing fires after :meth:`stop`.
    """

    def __init__(
        self,
        base_points: int,
        scheduler: Scheduler,
        on_tick: Callable[[int], None] | None = None,
        on_timeout: Callable[[], None] | None = None,
        time_limit: int | None = None,
        on_snapshot: Callable[[TimerSnapshot], None] | None = None,
    ) -> None:
        self.base_points = max(0, base_points)
        self.time_limit = self._normalize_time_limit(time_limit)
        self._scheduler = scheduler
        self._on_tick = on_tick
        self._on_timeout = on_timeout
        self._on_snapshot = on_snapshot

        self._phase: TimerPhase | None = None
        self._elapsed_seconds: int = 0
        self._handle: ScheduledCall | None = None
        self._stopped: bool = False

    @staticmethod
    def _normalize_time_limit(time_limit: int | None) -> int:
        if time_limit is None:
            return DEFAULT_TIME_LIMIT_SECONDS
        if time_limit <= 0:
            logger.warning(
                "Ignoring non-positive time limit %s; using %ss",
                time_limit,
                DEFAULT_TIME_LIMIT_SECONDS,
            )
            return DEFAULT_TIME_LIMIT_SECONDS
        return time_limit

    # --- State ---

    @property
    def phase(self) -> TimerPhase | None:
        """Current phase, or None before :meth:`start`."""
        return self._phase

    @property
    def elapsed_seconds(self) -> int:
        return self._elapsed_seconds

    @property
    def is_running(self) -> bool:
        return self._phase is not None and self._phase is not TimerPhase.EXPIRED and not self._stopped

    @property
    def remaining_seconds(self) -> int:
        if self._phase is TimerPhase.EXPIRED:
            return 0
        return max(0, self.time_limit - self._elapsed_seconds)

    @property
    def displayed_points(self) -> int:
        if self._phase is TimerPhase.EXPIRED:
            return 0
        if self._phase is TimerPhase.COUNTDOWN:
            return calculate_awarded_points(self.base_points, self._elapsed_seconds, self.time_limit)
        return self.base_points

    def snapshot(self) -> TimerSnapshot:
        return TimerSnapshot(
            remaining_seconds=self.remaining_seconds,
            displayed_points=self.displayed_points,
            phase=self._phase or TimerPhase.PRE_COUNTDOWN,
        )

    # --- Lifecycle ---

    def start(self) -> None:
        """Enter pre-countdown. Calling start on a started timer does nothing."""
        if self._phase is not None or self._stopped:
            return
        self._phase = TimerPhase.PRE_COUNTDOWN
        self._handle = self._scheduler.call_later(PRE_COUNTDOWN_SECONDS, self._begin_countdown)
        logger.debug("Timer started: %s points over %ss", self.base_points, self.time_limit)
        self._emit_snapshot()

    def stop(self) -> None:
        """Cancel pending work without firing ``on_timeout``. Idempotent."""
        if self._stopped:
            return
        self._stopped = True
        self._cancel_handle()
        logger.debug("Timer stopped at %ss elapsed", self._elapsed_seconds)

    def dispose(self) -> None:
        self.stop()

    def _cancel_handle(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _begin_countdown(self) -> None:
        if self._stopped or self._phase is not TimerPhase.PRE_COUNTDOWN:
            return
        self._phase = TimerPhase.COUNTDOWN
        self._handle = self._scheduler.call_repeating(TICK_INTERVAL_SECONDS, self._tick)
        self._emit_snapshot()

    def _tick(self) -> None:
        if self._stopped or self._phase is not TimerPhase.COUNTDOWN:
            return
        self._elapsed_seconds += 1
        if self._on_tick is not None:
            self._on_tick(self._elapsed_seconds)
        # on_tick may have stopped us
        if self._stopped:
            return
        if self._elapsed_seconds >= self.time_limit:
            self._expire()
        else:
            self._emit_snapshot()

    def _expire(self) -> None:
        self._phase = TimerPhase.EXPIRED
        self._cancel_handle()
        logger.debug("Timer expired after %ss", self._elapsed_seconds)
        self._emit_snapshot()
        if self._on_timeout is not None:
            self._on_timeout()

    def _emit_snapshot(self) -> None:
        if self._on_snapshot is not None:
            self._on_snapshot(self.snapshot())
