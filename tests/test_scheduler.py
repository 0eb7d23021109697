"""Tests for the Qt-backed scheduler under a real event loop."""

import time

import pytest
from PySide6.QtCore import QCoreApplication, QElapsedTimer, QEventLoop, QObject, QTimer

from slidequiz.core.question_timer import QuestionTimer
from slidequiz.core.scheduler import QtScheduler


@pytest.fixture
def app():
    return QCoreApplication.instance() or QCoreApplication([])


def _run_loop(loop: QEventLoop, timeout_ms: int = 3000) -> None:
    QTimer.singleShot(timeout_ms, loop.quit)
    loop.exec()


def _spin(ms: int) -> None:
    loop = QEventLoop()
    QTimer.singleShot(ms, loop.quit)
    loop.exec()


class TestQtScheduler:
    def test_repeating_call_fires_until_cancelled(self, app):
        loop = QEventLoop()
        fired = []

        def on_fire():
            fired.append(len(fired) + 1)
            if len(fired) == 3:
                handle.cancel()
                QTimer.singleShot(100, loop.quit)

        handle = QtScheduler().call_repeating(0.02, on_fire)
        _run_loop(loop)

        assert fired == [1, 2, 3]
        assert not handle.is_active

    def test_cancelled_one_shot_never_fires(self, app):
        fired = []

        handle = QtScheduler().call_later(0.02, lambda: fired.append(True))
        handle.cancel()
        _spin(150)

        assert fired == []
        assert not handle.is_active

    def test_one_shot_goes_inactive_after_firing(self, app):
        loop = QEventLoop()
        seen_active = []

        def on_fire():
            seen_active.append(handle.is_active)
            loop.quit()

        handle = QtScheduler().call_later(0.02, on_fire)
        assert handle.is_active
        _run_loop(loop)

        assert seen_active == [False]
        assert not handle.is_active
        handle.cancel()


class TestWallClockAccuracy:
    INTERVAL_MS = 50
    TOLERANCE_MS = 25

    def test_ticks_land_on_multiples_of_the_interval(self, app):
        loop = QEventLoop()
        clock = QElapsedTimer()
        stamps = []

        def on_fire():
            stamps.append(clock.elapsed())
            if len(stamps) == 6:
                handle.cancel()
                loop.quit()

        clock.start()
        handle = QtScheduler().call_repeating(self.INTERVAL_MS / 1000, on_fire)
        _run_loop(loop)

        for n, stamp in enumerate(stamps, start=1):
            assert abs(stamp - n * self.INTERVAL_MS) <= self.TOLERANCE_MS

    def test_late_tick_does_not_shift_later_ticks(self, app):
        loop = QEventLoop()
        clock = QElapsedTimer()
        stamps = []

        def on_fire():
            stamps.append(clock.elapsed())
            if len(stamps) == 1:
                # Block the loop past the next deadline.
                time.sleep(0.08)
            if len(stamps) == 5:
                handle.cancel()
                loop.quit()

        clock.start()
        handle = QtScheduler().call_repeating(self.INTERVAL_MS / 1000, on_fire)
        _run_loop(loop)

        assert stamps[1] >= 2 * self.INTERVAL_MS
        for n, stamp in enumerate(stamps[2:], start=3):
            assert abs(stamp - n * self.INTERVAL_MS) <= self.TOLERANCE_MS


class TestTimerRelease:
    def test_stopped_question_timers_leave_no_qtimers_behind(self, app):
        owner = QObject()
        scheduler = QtScheduler(parent=owner)

        for _ in range(200):
            timer = QuestionTimer(base_points=100, scheduler=scheduler, time_limit=10)
            timer.start()
            timer.stop()
        _spin(50)

        assert owner.findChildren(QTimer) == []

    def test_fired_and_cancelled_handles_are_released(self, app):
        owner = QObject()
        scheduler = QtScheduler(parent=owner)
        loop = QEventLoop()
        ticks = []

        def on_tick():
            ticks.append(True)
            if len(ticks) == 2:
                repeating.cancel()

        scheduler.call_later(0.01, lambda: None)
        repeating = scheduler.call_repeating(0.01, on_tick)
        QTimer.singleShot(100, loop.quit)
        loop.exec()
        _spin(50)

        assert len(ticks) == 2
        assert owner.findChildren(QTimer) == []
