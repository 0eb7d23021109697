"""Service for persisting per-question answer outcomes and shuffle orders."""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, TypeVar

from slidequiz.constants.storage_constants import ANSWER_STATES_KEY, SHUFFLE_ORDERS_KEY
from slidequiz.core.models import AnswerState, ShuffleOrder
from slidequiz.core.storage import KeyValueStorage

logger = logging.getLogger(__name__)

_Entry = TypeVar("_Entry", AnswerState, ShuffleOrder)


class AnswerStore:
    """Keyed answer states and shuffle orders that survive reloads.

    Both maps are loaded from storage once, on construction. Every update
    rewrites the whole map for that key synchronously. Stored data that cannot
    be parsed is treated as absent.
    """

    def __init__(self, storage: KeyValueStorage) -> None:
        self._storage = storage
        self._answer_states: dict[str, AnswerState] = self._load_map(
            ANSWER_STATES_KEY, AnswerState.from_dict
        )
        self._shuffle_orders: dict[str, ShuffleOrder] = self._load_map(
            SHUFFLE_ORDERS_KEY, ShuffleOrder.from_dict
        )

    # --- Answer states ---

    def get_answer_state(self, question_id: str) -> AnswerState | None:
        return self._answer_states.get(question_id)

    def set_answer_state(self, question_id: str, state: AnswerState) -> None:
        self._answer_states[question_id] = state
        self._persist(ANSWER_STATES_KEY, self._answer_states)

    def has_answer_state(self, question_id: str) -> bool:
        return question_id in self._answer_states

    def answered_question_ids(self) -> list[str]:
        return list(self._answer_states)

    # --- Shuffle orders ---

    def get_shuffle_order(self, question_id: str) -> ShuffleOrder | None:
        return self._shuffle_orders.get(question_id)

    def set_shuffle_order(self, question_id: str, order: ShuffleOrder) -> None:
        self._shuffle_orders[question_id] = order
        self._persist(SHUFFLE_ORDERS_KEY, self._shuffle_orders)

    # --- Reset ---

    def clear_all_answers(self) -> None:
        """Forget every answer and shuffle order, in memory and in storage."""
        self._answer_states.clear()
        self._shuffle_orders.clear()
        self._storage.remove_item(ANSWER_STATES_KEY)
        self._storage.remove_item(SHUFFLE_ORDERS_KEY)
        logger.info("Cleared all answer states and shuffle orders")

    # --- Persistence ---

    def _persist(self, key: str, entries: dict[str, AnswerState] | dict[str, ShuffleOrder]) -> None:
        payload = {question_id: entry.to_dict() for question_id, entry in entries.items()}
        self._storage.set_item(key, json.dumps(payload))

    def _load_map(self, key: str, parse: Callable[[Any], _Entry]) -> dict[str, _Entry]:
        raw = self._storage.get_item(key)
        if raw is None:
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Stored value for %r is not valid JSON; starting empty", key)
            return {}
        if not isinstance(data, dict):
            logger.warning("Stored value for %r is not an object; starting empty", key)
            return {}

        entries: dict[str, _Entry] = {}
        for question_id, payload in data.items():
            try:
                entries[question_id] = parse(payload)
            except (KeyError, TypeError, ValueError) as exc:
                logger.warning("Dropping malformed %r entry for question %r: %s", key, question_id, exc)
        return entries
