"""Tests for the storage backends."""

from slidequiz.core.models import AnswerState
from slidequiz.core.services.answer_store import AnswerStore
from slidequiz.core.services.score_accumulator import ScoreAccumulator
from slidequiz.core.storage import MemoryStorage, QSettingsStorage


class TestMemoryStorage:
    def test_set_get_remove(self):
        storage = MemoryStorage()
        storage.set_item("a", "1")
        assert storage.get_item("a") == "1"
        storage.remove_item("a")
        storage.remove_item("a")
        assert storage.get_item("a") is None
        assert storage.keys() == []


class TestQSettingsStorage:
    def test_values_survive_a_new_instance(self, tmp_path):
        path = tmp_path / "quiz-state.ini"
        storage = QSettingsStorage.from_file(path)
        storage.set_item("quiz-score", "94")
        storage.set_item("payload", '{"q1": {"choiceIndices": [1, 0], "correctIndex": 0}}')

        reopened = QSettingsStorage.from_file(path)

        assert reopened.get_item("quiz-score") == "94"
        assert reopened.get_item("payload") == '{"q1": {"choiceIndices": [1, 0], "correctIndex": 0}}'
        assert reopened.get_item("missing") is None

    def test_remove_item(self, tmp_path):
        path = tmp_path / "quiz-state.ini"
        storage = QSettingsStorage.from_file(path)
        storage.set_item("quiz-score", "10")
        storage.remove_item("quiz-score")
        assert QSettingsStorage.from_file(path).get_item("quiz-score") is None

    def test_engine_state_round_trip(self, tmp_path):
        path = tmp_path / "quiz-state.ini"
        store = AnswerStore(QSettingsStorage.from_file(path))
        store.set_answer_state("q1", AnswerState.answered(2, True, 94))
        totals = ScoreAccumulator(QSettingsStorage.from_file(path))
        totals.add_points(94)
        totals.add_possible_points(100)

        reopened = QSettingsStorage.from_file(path)

        assert AnswerStore(reopened).get_answer_state("q1") == AnswerState.answered(2, True, 94)
        assert ScoreAccumulator(reopened).score == 94
        assert ScoreAccumulator(reopened).total_possible == 100
