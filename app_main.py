"""Headless entry point: load a deck and serve its quiz status over HTTP.

Usage: python app_main.py path/to/deck.json
"""

from __future__ import annotations

import socket
import sys
from pathlib import Path

from PySide6.QtCore import QCoreApplication

from slidequiz.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from slidequiz.core.deck_importer import DeckImportError, load_deck_from_file
from slidequiz.core.quiz_session import QuizSession
from slidequiz.core.scheduler import QtScheduler
from slidequiz.core.services.answer_store import AnswerStore
from slidequiz.core.services.score_accumulator import ScoreAccumulator
from slidequiz.core.storage import QSettingsStorage
from slidequiz.server.api_server import start_api_server
from slidequiz.utils.logging_config import configure_logging


def _determine_status_url(port: int) -> str:
    """Best-effort determination of the local IP for the status URL."""
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
            sock.connect(("8.8.8.8", 80))
            ip_address = sock.getsockname()[0]
    except OSError:
        ip_address = "127.0.0.1"
    return f"http://{ip_address}:{port}/summary"


def main() -> None:
    """Initialize logging, restore saved progress and run the status API."""
    logger = configure_logging()
    if len(sys.argv) != 2:
        logger.error("Usage: %s DECK_JSON", Path(sys.argv[0]).name)
        sys.exit(2)

    try:
        deck = load_deck_from_file(Path(sys.argv[1]))
    except (OSError, DeckImportError) as exc:
        logger.error("Could not load deck: %s", exc)
        sys.exit(1)

    app = QCoreApplication(sys.argv)
    storage = QSettingsStorage()
    quiz_session = QuizSession(
        AnswerStore(storage),
        ScoreAccumulator(storage),
        QtScheduler(parent=app),
        config=deck.config,
    )
    quiz_session.load_questions(deck.questions)
    app.aboutToQuit.connect(quiz_session.close)

    start_api_server(quiz_session=quiz_session, host=DEFAULT_HOST, port=DEFAULT_PORT)
    logger.info("Quiz status available at %s", _determine_status_url(DEFAULT_PORT))
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
