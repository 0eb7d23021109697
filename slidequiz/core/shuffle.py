"""Answer-choice shuffling that remembers where the correct choice went."""

from __future__ import annotations

import random

from slidequiz.core.models import ShuffleOrder


def generate_shuffle_order(
    choice_count: int,
    correct_choice_index: int,
    rng: random.Random | None = None,
) -> ShuffleOrder:
    """Shuffle the indices ``0..choice_count-1`` and locate the correct choice."""
    if choice_count <= 0:
        raise ValueError("A question needs at least one choice to shuffle.")
    if not 0 <= correct_choice_index < choice_count:
        raise ValueError(
            f"Correct choice index {correct_choice_index} out of range for {choice_count} choices."
        )

    rng = rng or random.Random()
    indices = list(range(choice_count))
    rng.shuffle(indices)
    return ShuffleOrder(
        choice_indices=tuple(indices),
        correct_index=indices.index(correct_choice_index),
    )


def apply_shuffle_order(choices: list[str], order: ShuffleOrder) -> list[str]:
    """Return ``choices`` arranged in display order."""
    if len(choices) != len(order.choice_indices):
        raise ValueError("Shuffle order does not match the number of choices.")
    return [choices[index] for index in order.choice_indices]
