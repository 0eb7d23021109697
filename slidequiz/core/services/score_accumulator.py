"""Service for the running score and maximum-possible totals."""

from __future__ import annotations

import logging

from slidequiz.constants.storage_constants import SCORE_KEY, TOTAL_POSSIBLE_KEY
from slidequiz.core.models import ScoreState
from slidequiz.core.scoring import calculate_awarded_points
from slidequiz.core.storage import KeyValueStorage

logger = logging.getLogger(__name__)


class ScoreAccumulator:
    """Tracks and persists ``score`` and ``total_possible``.

    Both totals only grow until :meth:`reset_score`. The accumulator does not
    know about questions, so it cannot stop a caller from counting the same
    question twice.
    """

    def __init__(self, storage: KeyValueStorage) -> None:
        self._storage = storage
        self._score: int = self._load_total(SCORE_KEY)
        self._total_possible: int = self._load_total(TOTAL_POSSIBLE_KEY)

    @property
    def score(self) -> int:
        return self._score

    @property
    def total_possible(self) -> int:
        return self._total_possible

    def snapshot(self) -> ScoreState:
        return ScoreState(score=self._score, total_possible=self._total_possible)

    def add_points(self, points: int) -> None:
        self._score += max(0, points)
        self._storage.set_item(SCORE_KEY, str(self._score))

    def add_possible_points(self, points: int) -> None:
        self._total_possible += max(0, points)
        self._storage.set_item(TOTAL_POSSIBLE_KEY, str(self._total_possible))

    def set_total_possible(self, points: int) -> None:
        """Overwrite the maximum-possible total, e.g. from the whole deck."""
        self._total_possible = max(0, points)
        self._storage.set_item(TOTAL_POSSIBLE_KEY, str(self._total_possible))

    def reset_score(self) -> None:
        self._score = 0
        self._total_possible = 0
        self._storage.remove_item(SCORE_KEY)
        self._storage.remove_item(TOTAL_POSSIBLE_KEY)
        logger.info("Score reset")

    @staticmethod
    def calculate_time_adjusted_points(base_points: int, elapsed_seconds: int, time_limit: int) -> int:
        return calculate_awarded_points(base_points, elapsed_seconds, time_limit)

    def _load_total(self, key: str) -> int:
        raw = self._storage.get_item(key)
        if raw is None:
            return 0
        try:
            value = int(raw.strip())
        except ValueError:
            logger.warning("Stored value for %r is not an integer; using 0", key)
            return 0
        if value < 0:
            logger.warning("Stored value for %r is negative; using 0", key)
            return 0
        return value
