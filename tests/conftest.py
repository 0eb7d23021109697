"""Shared fixtures for the quiz engine tests."""

from __future__ import annotations

import itertools
import random
from typing import Callable

import pytest

from slidequiz.core.models import QuizConfig, QuizQuestion
from slidequiz.core.quiz_session import QuizSession
from slidequiz.core.services.answer_store import AnswerStore
from slidequiz.core.services.score_accumulator import ScoreAccumulator
from slidequiz.core.storage import MemoryStorage


class FakeScheduledCall:
    """Handle returned by :class:`FakeScheduler`."""

    def __init__(self, due: float, interval: float | None, callback: Callable[[], None], seq: int):
        self.due = due
        self.interval = interval
        self.callback = callback
        self.seq = seq
        self._active = True

    @property
    def is_active(self) -> bool:
        return self._active

    def cancel(self) -> None:
        self._active = False


class FakeScheduler:
    """Scheduler driven by :meth:`advance` instead of a real clock."""

    def __init__(self) -> None:
        self.now = 0.0
        self._calls: list[FakeScheduledCall] = []
        self._seq = itertools.count()

    def call_later(self, delay_seconds: float, callback: Callable[[], None]) -> FakeScheduledCall:
        return self._add(delay_seconds, None, callback)

    def call_repeating(
        self, interval_seconds: float, callback: Callable[[], None]
    ) -> FakeScheduledCall:
        return self._add(interval_seconds, interval_seconds, callback)

    def _add(
        self, delay: float, interval: float | None, callback: Callable[[], None]
    ) -> FakeScheduledCall:
        call = FakeScheduledCall(self.now + delay, interval, callback, next(self._seq))
        self._calls.append(call)
        return call

    @property
    def pending(self) -> list[FakeScheduledCall]:
        return [call for call in self._calls if call.is_active]

    def advance(self, seconds: float) -> None:
        target = self.now + seconds
        while True:
            due = [call for call in self.pending if call.due <= target + 1e-9]
            if not due:
                break
            call = min(due, key=lambda c: (c.due, c.seq))
            self.now = call.due
            if call.interval is None:
                call.cancel()
            else:
                call.due += call.interval
            call.callback()
        self.now = target
        self._calls = self.pending


@pytest.fixture
def scheduler() -> FakeScheduler:
    return FakeScheduler()


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def answer_store(storage: MemoryStorage) -> AnswerStore:
    return AnswerStore(storage)


@pytest.fixture
def score_accumulator(storage: MemoryStorage) -> ScoreAccumulator:
    return ScoreAccumulator(storage)


@pytest.fixture
def sample_questions() -> list[QuizQuestion]:
    return [
        QuizQuestion(
            id="lambda-q",
            question_text="Which service runs code without provisioning servers?",
            choices=["EC2", "Lambda", "Lightsail", "Outposts"],
            correct_choice_index=1,
            base_points=100,
            time_limit_seconds=15,
        ),
        QuizQuestion(
            id="s3-q",
            question_text="Which service stores objects?",
            choices=["S3", "EBS", "EFS"],
            correct_choice_index=0,
            base_points=50,
            time_limit_seconds=10,
        ),
        QuizQuestion(
            id="bonus-q",
            question_text="Warm-up question",
            choices=["Yes", "No"],
            correct_choice_index=0,
            base_points=200,
        ),
    ]


@pytest.fixture
def make_session(
    answer_store: AnswerStore,
    score_accumulator: ScoreAccumulator,
    scheduler: FakeScheduler,
    sample_questions: list[QuizQuestion],
):
    """Build a session over the shared storage with the sample deck loaded."""

    def factory(**kwargs) -> QuizSession:
        session = QuizSession(
            answer_store=answer_store,
            score_accumulator=score_accumulator,
            scheduler=scheduler,
            config=kwargs.pop("config", QuizConfig()),
            rng=kwargs.pop("rng", random.Random(7)),
            **kwargs,
        )
        session.load_questions(sample_questions)
        return session

    return factory
