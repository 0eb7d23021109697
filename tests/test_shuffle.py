"""Tests for answer-choice shuffling."""

import random

import pytest

from slidequiz.core.models import ShuffleOrder
from slidequiz.core.shuffle import apply_shuffle_order, generate_shuffle_order


class TestGenerateShuffleOrder:
    def test_indices_are_a_permutation(self):
        rng = random.Random(1234)
        for choice_count in range(1, 8):
            for correct in range(choice_count):
                order = generate_shuffle_order(choice_count, correct, rng)
                assert sorted(order.choice_indices) == list(range(choice_count))

    def test_correct_index_follows_the_correct_choice(self):
        rng = random.Random(99)
        for _ in range(50):
            order = generate_shuffle_order(5, 3, rng)
            assert order.choice_indices[order.correct_index] == 3

    def test_same_seed_same_order(self):
        first = generate_shuffle_order(6, 2, random.Random(42))
        second = generate_shuffle_order(6, 2, random.Random(42))
        assert first == second

    def test_rejects_out_of_range_correct_index(self):
        with pytest.raises(ValueError):
            generate_shuffle_order(4, 4)

    def test_rejects_empty_question(self):
        with pytest.raises(ValueError):
            generate_shuffle_order(0, 0)


class TestApplyShuffleOrder:
    def test_reorders_choices(self):
        order = ShuffleOrder(choice_indices=(2, 0, 1), correct_index=1)
        assert apply_shuffle_order(["a", "b", "c"], order) == ["c", "a", "b"]
        assert order.original_index(0) == 2

    def test_length_mismatch(self):
        order = ShuffleOrder.identity(2, 0)
        with pytest.raises(ValueError):
            apply_shuffle_order(["a", "b", "c"], order)

    def test_shuffle_order_rejects_non_permutation(self):
        with pytest.raises(ValueError):
            ShuffleOrder(choice_indices=(0, 0, 1), correct_index=0)
        with pytest.raises(ValueError):
            ShuffleOrder(choice_indices=(0, 1), correct_index=2)
