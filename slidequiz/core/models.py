"""Domain models for the quiz scoring and timing engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from slidequiz.constants.quiz_constants import (
    DEFAULT_PASSING_SCORE,
    DEFAULT_TIME_LIMIT_SECONDS,
    DEFAULT_TOTAL_POINTS,
)


def _require_int(data: dict[str, Any], key: str) -> int:
    value = data[key]
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"'{key}' must be an integer, got {value!r}")
    return value


def _require_bool(data: dict[str, Any], key: str) -> bool:
    value = data[key]
    if not isinstance(value, bool):
        raise TypeError(f"'{key}' must be a boolean, got {value!r}")
    return value


class TimerPhase(str, Enum):
    """Lifecycle phases of a single question countdown."""

    PRE_COUNTDOWN = "pre-countdown"
    COUNTDOWN = "countdown"
    EXPIRED = "expired"


@dataclass(slots=True, frozen=True)
class AnswerState:
    """Recorded outcome for one question."""

    selected_index: int | None
    is_correct: bool
    points_awarded: int
    is_skipped: bool = False
    is_timed_out: bool = False

    def __post_init__(self) -> None:
        if self.points_awarded < 0:
            raise ValueError("points_awarded must not be negative.")
        if not self.is_correct and self.points_awarded != 0:
            raise ValueError("Incorrect answers cannot award points.")
        if self.is_skipped and self.is_timed_out:
            raise ValueError("An answer cannot be both skipped and timed out.")
        if self.selected_index is not None and (self.is_skipped or self.is_timed_out):
            raise ValueError("Skipped or timed-out answers have no selection.")

    @classmethod
    def answered(cls, selected_index: int, is_correct: bool, points_awarded: int) -> AnswerState:
        return cls(
            selected_index=selected_index,
            is_correct=is_correct,
            points_awarded=points_awarded if is_correct else 0,
        )

    @classmethod
    def skipped(cls) -> AnswerState:
        return cls(selected_index=None, is_correct=False, points_awarded=0, is_skipped=True)

    @classmethod
    def timed_out(cls) -> AnswerState:
        return cls(selected_index=None, is_correct=False, points_awarded=0, is_timed_out=True)

    def to_dict(self) -> dict[str, Any]:
        """Serialize using the persisted (camelCase) layout."""
        return {
            "selectedIndex": self.selected_index,
            "isCorrect": self.is_correct,
            "pointsAwarded": self.points_awarded,
            "isSkipped": self.is_skipped,
            "isTimedOut": self.is_timed_out,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AnswerState:
        """Rebuild from the persisted layout.

        Raises KeyError, TypeError or ValueError when the payload does not
        describe a valid answer state.
        """
        if not isinstance(data, dict):
            raise TypeError("Answer state must be an object.")
        selected = data["selectedIndex"]
        if selected is not None:
            selected = _require_int(data, "selectedIndex")
        return cls(
            selected_index=selected,
            is_correct=_require_bool(data, "isCorrect"),
            points_awarded=_require_int(data, "pointsAwarded"),
            is_skipped=_require_bool(data, "isSkipped"),
            is_timed_out=_require_bool(data, "isTimedOut"),
        )


@dataclass(slots=True, frozen=True)
class ShuffleOrder:
    """Display order of a question's choices.

    ``choice_indices[display_position]`` is the original index of the choice
    shown at that position; ``correct_index`` is the display position of the
    originally-correct choice.
    """

    choice_indices: tuple[int, ...]
    correct_index: int

    def __post_init__(self) -> None:
        if sorted(self.choice_indices) != list(range(len(self.choice_indices))):
            raise ValueError(f"choice_indices {self.choice_indices!r} is not a permutation.")
        if not 0 <= self.correct_index < len(self.choice_indices):
            raise ValueError("correct_index is outside the choice range.")

    @classmethod
    def identity(cls, choice_count: int, correct_choice_index: int) -> ShuffleOrder:
        return cls(choice_indices=tuple(range(choice_count)), correct_index=correct_choice_index)

    def original_index(self, display_index: int) -> int:
        return self.choice_indices[display_index]

    def to_dict(self) -> dict[str, Any]:
        return {"choiceIndices": list(self.choice_indices), "correctIndex": self.correct_index}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ShuffleOrder:
        if not isinstance(data, dict):
            raise TypeError("Shuffle order must be an object.")
        raw_indices = data["choiceIndices"]
        if not isinstance(raw_indices, list):
            raise TypeError("'choiceIndices' must be a list.")
        if any(isinstance(value, bool) or not isinstance(value, int) for value in raw_indices):
            raise TypeError("'choiceIndices' must only contain integers.")
        return cls(
            choice_indices=tuple(raw_indices),
            correct_index=_require_int(data, "correctIndex"),
        )


@dataclass(slots=True, frozen=True)
class ScoreState:
    """Immutable snapshot of the running totals."""

    score: int = 0
    total_possible: int = 0


@dataclass(slots=True, frozen=True)
class TimerSnapshot:
    """Per-tick view of a question timer for the presentation layer."""

    remaining_seconds: int
    displayed_points: int
    phase: TimerPhase


@dataclass(slots=True)
class QuizQuestion:
    """Multiple-choice quiz slide as supplied by the deck."""

    id: str
    question_text: str
    choices: list[str]
    correct_choice_index: int
    base_points: int
    time_limit_seconds: int | None = None

    @property
    def effective_time_limit(self) -> int:
        if self.time_limit_seconds is None or self.time_limit_seconds <= 0:
            return DEFAULT_TIME_LIMIT_SECONDS
        return self.time_limit_seconds


@dataclass(slots=True)
class QuizConfig:
    """Deck-level options; missing values fall back to the defaults."""

    passing_score: int = DEFAULT_PASSING_SCORE
    total_points: int = DEFAULT_TOTAL_POINTS
    show_explanations: bool = True
    allow_retry: bool = True
    shuffle_choices: bool = False
    show_progress_bar: bool = True

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> QuizConfig:
        data = data or {}
        defaults = cls()
        return cls(
            passing_score=int(data.get("passingScore", defaults.passing_score)),
            total_points=int(data.get("totalPoints", defaults.total_points)),
            show_explanations=bool(data.get("showExplanations", defaults.show_explanations)),
            allow_retry=bool(data.get("allowRetry", defaults.allow_retry)),
            shuffle_choices=bool(data.get("shuffleChoices", defaults.shuffle_choices)),
            show_progress_bar=bool(data.get("showProgressBar", defaults.show_progress_bar)),
        )


@dataclass(slots=True)
class QuizSummary:
    """End-of-quiz results."""

    score: int
    total_possible: int
    percentage: int
    correct_answers: int
    total_questions: int
    passed: bool
    performance: str
    answered_question_ids: list[str] = field(default_factory=list)


@dataclass(slots=True)
class PresentedQuestion:
    """What the presentation layer needs to show a question slide."""

    question_id: str
    question_text: str
    display_choices: list[str]
    shuffle_order: ShuffleOrder
    answer_state: AnswerState | None = None
    timer: TimerSnapshot | None = None
