"""Utilities for reading quiz questions out of a slide deck file.

Deck format (JSON; non-quiz slides are skipped):

    {
      "quizConfig": {"passingScore": 70, "shuffleChoices": true},
      "slides": [
        {"type": "content", "id": "intro", ...},
        {
          "type": "quiz",
          "id": "q1",
          "question": "Which service runs code without servers?",
          "choices": [{"text": "EC2"}, {"text": "Lambda"}],
          "correctAnswerIndex": 1,
          "points": 100,
          "timeLimit": 15            (optional, seconds)
        }
      ]
    }

Only the fields the scoring engine needs are read. Anything else in the deck
(images, icons, music, explanations) belongs to the presentation layer.
"""

from __future__ import annotations

from dataclasses import dataclass
import json
from pathlib import Path
from typing import Any

from slidequiz.core.models import QuizConfig, QuizQuestion


class DeckImportError(Exception):
    """Raised when a deck cannot be turned into quiz questions."""


@dataclass(slots=True)
class ImportedDeck:
    """Container for the quiz questions and options read from a deck."""

    source_path: Path
    questions: list[QuizQuestion]
    config: QuizConfig


def load_deck_from_file(file_path: Path) -> ImportedDeck:
    try:
        data = json.loads(file_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise DeckImportError(f"Deck file is not valid JSON: {exc}") from exc
    questions, config = parse_deck(data)
    return ImportedDeck(source_path=file_path, questions=questions, config=config)


def parse_deck(data: Any) -> tuple[list[QuizQuestion], QuizConfig]:
    if not isinstance(data, dict):
        raise DeckImportError("Deck must be a JSON object.")
    slides = data.get("slides")
    if not isinstance(slides, list):
        raise DeckImportError("Deck must contain a 'slides' list.")

    questions = [
        _parse_quiz_slide(slide, position)
        for position, slide in enumerate(slides)
        if isinstance(slide, dict) and slide.get("type") == "quiz"
    ]
    if not questions:
        raise DeckImportError("Deck did not contain any quiz slides.")

    seen: set[str] = set()
    for question in questions:
        if question.id in seen:
            raise DeckImportError(f"Quiz slide id '{question.id}' is used more than once.")
        seen.add(question.id)

    raw_config = data.get("quizConfig")
    if raw_config is not None and not isinstance(raw_config, dict):
        raise DeckImportError("'quizConfig' must be an object.")
    try:
        config = QuizConfig.from_dict(raw_config)
    except (TypeError, ValueError) as exc:
        raise DeckImportError(f"Invalid quizConfig: {exc}") from exc
    return questions, config


def _parse_quiz_slide(slide: dict[str, Any], position: int) -> QuizQuestion:
    slide_id = slide.get("id")
    if not isinstance(slide_id, str) or not slide_id.strip():
        raise DeckImportError(f"Quiz slide at position {position} is missing an id.")
    slide_id = slide_id.strip()

    raw_choices = slide.get("choices")
    if not isinstance(raw_choices, list) or not raw_choices:
        raise DeckImportError(f"Quiz slide '{slide_id}' must define at least one choice.")
    choices = [_choice_text(choice, slide_id) for choice in raw_choices]

    correct_index = _integer_field(slide, "correctAnswerIndex", slide_id)
    if not 0 <= correct_index < len(choices):
        raise DeckImportError(
            f"Quiz slide '{slide_id}' has correctAnswerIndex {correct_index} "
            f"but only {len(choices)} choices."
        )

    base_points = _integer_field(slide, "points", slide_id)
    if base_points < 0:
        raise DeckImportError(f"Quiz slide '{slide_id}' must not have negative points.")

    time_limit_seconds = None
    if slide.get("timeLimit") is not None:
        time_limit_seconds = _integer_field(slide, "timeLimit", slide_id)
        if time_limit_seconds <= 0:
            raise DeckImportError(f"Quiz slide '{slide_id}' timeLimit must be a positive integer.")

    return QuizQuestion(
        id=slide_id,
        question_text=str(slide.get("question", "")).strip(),
        choices=choices,
        correct_choice_index=correct_index,
        base_points=base_points,
        time_limit_seconds=time_limit_seconds,
    )


def _choice_text(choice: Any, slide_id: str) -> str:
    if isinstance(choice, str):
        return choice.strip()
    if isinstance(choice, dict) and isinstance(choice.get("text"), str):
        return choice["text"].strip()
    raise DeckImportError(f"Quiz slide '{slide_id}' has a choice without text.")


def _integer_field(slide: dict[str, Any], key: str, slide_id: str) -> int:
    value = slide.get(key)
    if isinstance(value, bool) or not isinstance(value, int):
        raise DeckImportError(f"Quiz slide '{slide_id}' field '{key}' must be an integer.")
    return value
