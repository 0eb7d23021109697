"""Business logic for one quiz attempt, shared between presenter and API."""

from __future__ import annotations

import logging
import random
from threading import RLock
from typing import Callable

from slidequiz.core.models import (
    AnswerState,
    PresentedQuestion,
    QuizConfig,
    QuizQuestion,
    QuizSummary,
    ScoreState,
    ShuffleOrder,
    TimerSnapshot,
)
from slidequiz.core.question_timer import QuestionTimer
from slidequiz.core.scheduler import ScheduledCall, Scheduler
from slidequiz.core.scoring import calculate_awarded_points, performance_message, score_percentage
from slidequiz.core.services.answer_store import AnswerStore
from slidequiz.core.services.score_accumulator import ScoreAccumulator
from slidequiz.core.shuffle import apply_shuffle_order, generate_shuffle_order

logger = logging.getLogger(__name__)


class _LockedScheduler:
    """Runs timer callbacks under the session lock.

    Keeps readers on other threads from seeing a timer halfway through a tick.
    """

    def __init__(self, scheduler: Scheduler, lock: RLock) -> None:
        self._scheduler = scheduler
        self._lock = lock

    def call_later(self, delay_seconds: float, callback: Callable[[], None]) -> ScheduledCall:
        return self._scheduler.call_later(delay_seconds, self._locked(callback))

    def call_repeating(
        self, interval_seconds: float, callback: Callable[[], None]
    ) -> ScheduledCall:
        return self._scheduler.call_repeating(interval_seconds, self._locked(callback))

    def _locked(self, callback: Callable[[], None]) -> Callable[[], None]:
        def run() -> None:
            with self._lock:
                callback()

        return run


class QuizSession:
    """Facade over the answer store, score accumulator and question timer.

    Only one question is timed at a time. Base points count towards
    ``total_possible`` when a question is resolved (answered, skipped or timed
    out) and only if it had no recorded answer yet, so the maximum cannot be
    inflated by revisiting a question. With ``seed_total_from_deck`` the total
    is instead set from the whole deck when questions are loaded.
    """

    def __init__(
        self,
        answer_store: AnswerStore,
        score_accumulator: ScoreAccumulator,
        scheduler: Scheduler,
        config: QuizConfig | None = None,
        rng: random.Random | None = None,
        seed_total_from_deck: bool = False,
    ) -> None:
        self._lock = RLock()

        self._answers = answer_store
        self._score = score_accumulator
        self._scheduler = _LockedScheduler(scheduler, self._lock)
        self.config = config or QuizConfig()
        self._rng = rng or random.Random()
        self._seed_total_from_deck = seed_total_from_deck

        self._questions: dict[str, QuizQuestion] = {}
        self._active_question_id: str | None = None
        self._active_timer: QuestionTimer | None = None

    # --- Deck ---

    def load_questions(self, questions: list[QuizQuestion]) -> None:
        with self._lock:
            self._stop_active_timer()
            self._questions = {}
            for question in questions:
                if question.id in self._questions:
                    raise ValueError(f"Duplicate question id {question.id!r}.")
                self._questions[question.id] = question
            if self._seed_total_from_deck:
                self.seed_total_possible()
            logger.info("Loaded %d quiz questions", len(self._questions))

    def seed_total_possible(self) -> None:
        """Set ``total_possible`` to the sum of every loaded question's base points."""
        with self._lock:
            self._score.set_total_possible(sum(q.base_points for q in self._questions.values()))

    def get_questions(self) -> list[QuizQuestion]:
        with self._lock:
            return list(self._questions.values())

    def get_question(self, question_id: str) -> QuizQuestion:
        with self._lock:
            return self._require_question(question_id)

    # --- Presentation ---

    def present_question(
        self,
        question_id: str,
        on_snapshot: Callable[[TimerSnapshot], None] | None = None,
        on_timeout: Callable[[AnswerState], None] | None = None,
    ) -> PresentedQuestion:
        """Prepare a question slide and start its timer if it is still open.

        ``on_timeout`` receives the recorded timed-out state.
        """
        with self._lock:
            question = self._require_question(question_id)
            order = self._display_order(question)
            existing = self._answers.get_answer_state(question_id)

            if self._active_question_id != question_id or existing is not None:
                self._stop_active_timer()

            if existing is None and self._active_timer is None:
                timer = QuestionTimer(
                    base_points=question.base_points,
                    scheduler=self._scheduler,
                    time_limit=question.effective_time_limit,
                    on_timeout=lambda: self._handle_timeout(question_id, on_timeout),
                    on_snapshot=on_snapshot,
                )
                self._active_question_id = question_id
                self._active_timer = timer
                timer.start()
                logger.info("Presenting question %s", question_id)

            return PresentedQuestion(
                question_id=question_id,
                question_text=question.question_text,
                display_choices=apply_shuffle_order(question.choices, order),
                shuffle_order=order,
                answer_state=existing,
                timer=self._active_timer.snapshot() if self._active_timer else None,
            )

    def submit_answer(self, question_id: str, display_index: int) -> AnswerState:
        """Grade a choice given in display order and record the outcome.

        Re-submitting for a resolved question returns the stored state
        unchanged.
        """
        with self._lock:
            question = self._require_question(question_id)
            existing = self._answers.get_answer_state(question_id)
            if existing is not None:
                return existing
            if self._active_question_id != question_id or self._active_timer is None:
                raise RuntimeError(f"Question {question_id!r} is not currently being presented.")

            order = self._display_order(question)
            if not 0 <= display_index < len(order.choice_indices):
                raise ValueError(f"Choice index {display_index} out of range.")

            elapsed = self._active_timer.elapsed_seconds
            self._stop_active_timer()

            is_correct = display_index == order.correct_index
            points = 0
            if is_correct:
                points = calculate_awarded_points(
                    question.base_points, elapsed, question.effective_time_limit
                )
            state = AnswerState.answered(display_index, is_correct, points)
            self._record(question, state)
            return state

    def skip_question(self, question_id: str) -> AnswerState:
        with self._lock:
            question = self._require_question(question_id)
            existing = self._answers.get_answer_state(question_id)
            if existing is not None:
                return existing
            if self._active_question_id == question_id:
                self._stop_active_timer()
            state = AnswerState.skipped()
            self._record(question, state)
            return state

    def _handle_timeout(
        self, question_id: str, callback: Callable[[AnswerState], None] | None
    ) -> None:
        with self._lock:
            if self._active_question_id == question_id:
                self._active_question_id = None
                self._active_timer = None
            state = self._answers.get_answer_state(question_id)
            if state is None:
                state = AnswerState.timed_out()
                self._record(self._require_question(question_id), state)
        if callback is not None:
            callback(state)

    def _record(self, question: QuizQuestion, state: AnswerState) -> None:
        self._answers.set_answer_state(question.id, state)
        if state.is_correct:
            self._score.add_points(state.points_awarded)
        if not self._seed_total_from_deck:
            self._score.add_possible_points(question.base_points)
        logger.info(
            "Question %s resolved: correct=%s skipped=%s timed_out=%s points=%d",
            question.id,
            state.is_correct,
            state.is_skipped,
            state.is_timed_out,
            state.points_awarded,
        )

    def _display_order(self, question: QuizQuestion) -> ShuffleOrder:
        if not self.config.shuffle_choices:
            return ShuffleOrder.identity(len(question.choices), question.correct_choice_index)
        order = self._answers.get_shuffle_order(question.id)
        if order is not None and len(order.choice_indices) == len(question.choices):
            return order
        order = generate_shuffle_order(len(question.choices), question.correct_choice_index, self._rng)
        self._answers.set_shuffle_order(question.id, order)
        return order

    def _stop_active_timer(self) -> None:
        if self._active_timer is not None:
            self._active_timer.stop()
        self._active_timer = None
        self._active_question_id = None

    def _require_question(self, question_id: str) -> QuizQuestion:
        try:
            return self._questions[question_id]
        except KeyError:
            raise KeyError(f"Unknown question id {question_id!r}") from None

    # --- Session state ---

    def get_answer_state(self, question_id: str) -> AnswerState | None:
        with self._lock:
            return self._answers.get_answer_state(question_id)

    def get_active_question_id(self) -> str | None:
        with self._lock:
            return self._active_question_id

    def timer_snapshot(self) -> TimerSnapshot | None:
        with self._lock:
            if self._active_timer is None:
                return None
            return self._active_timer.snapshot()

    def score_state(self) -> ScoreState:
        with self._lock:
            return self._score.snapshot()

    def summary(self) -> QuizSummary:
        with self._lock:
            snapshot = self._score.snapshot()
            answered = [
                question_id
                for question_id in self._questions
                if self._answers.has_answer_state(question_id)
            ]
            correct = sum(
                1 for question_id in answered if self._answers.get_answer_state(question_id).is_correct
            )
            percentage = score_percentage(snapshot.score, snapshot.total_possible)
            return QuizSummary(
                score=snapshot.score,
                total_possible=snapshot.total_possible,
                percentage=percentage,
                correct_answers=correct,
                total_questions=len(self._questions),
                passed=percentage >= self.config.passing_score,
                performance=performance_message(percentage),
                answered_question_ids=answered,
            )

    def can_restart(self) -> bool:
        return self.config.allow_retry

    def restart(self) -> None:
        """Drop all progress for a fresh attempt.

        Raises RuntimeError when the deck disallows retries.
        """
        with self._lock:
            if not self.config.allow_retry:
                raise RuntimeError("This quiz does not allow retries.")
            self._stop_active_timer()
            self._score.reset_score()
            self._answers.clear_all_answers()
            if self._seed_total_from_deck:
                self.seed_total_possible()
            logger.info("Quiz session restarted")

    def close(self) -> None:
        """Stop any running timer; call when the presenter goes away."""
        with self._lock:
            self._stop_active_timer()
