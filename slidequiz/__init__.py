"""Scoring and timing engine for slide-based quiz presentations."""

from .core.deck_importer import DeckImportError, ImportedDeck, load_deck_from_file
from .core.models import (
    AnswerState,
    PresentedQuestion,
    QuizConfig,
    QuizQuestion,
    QuizSummary,
    ScoreState,
    ShuffleOrder,
    TimerPhase,
    TimerSnapshot,
)
from .core.question_timer import QuestionTimer
from .core.quiz_session import QuizSession
from .core.scheduler import QtScheduler
from .core.scoring import calculate_awarded_points
from .core.services.answer_store import AnswerStore
from .core.services.score_accumulator import ScoreAccumulator
from .core.storage import MemoryStorage, QSettingsStorage

__all__ = [
    "AnswerState",
    "AnswerStore",
    "DeckImportError",
    "ImportedDeck",
    "MemoryStorage",
    "PresentedQuestion",
    "QSettingsStorage",
    "QtScheduler",
    "QuestionTimer",
    "QuizConfig",
    "QuizQuestion",
    "QuizSession",
    "QuizSummary",
    "ScoreAccumulator",
    "ScoreState",
    "ShuffleOrder",
    "TimerPhase",
    "TimerSnapshot",
    "calculate_awarded_points",
    "load_deck_from_file",
]
