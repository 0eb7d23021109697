"""Time-decayed point calculation and end-of-quiz grading helpers."""

from __future__ import annotations

import math

from slidequiz.constants.quiz_constants import MINIMUM_AWARD_POINTS, PERFORMANCE_TIERS


def calculate_awarded_points(base_points: int, elapsed_seconds: int, time_limit: int) -> int:
    """Return the points a correct answer earns after ``elapsed_seconds``.

    Points drop by ``floor(base_points / time_limit)`` per elapsed second but
    never below ``MINIMUM_AWARD_POINTS`` while time remains. Once the limit is
    reached nothing is awarded. Questions worth less than the minimum award
    nothing at all.

    Negative inputs are clamped to zero instead of raising, since this runs
    inside the timer tick loop.
    """
    base_points = max(0, int(base_points))
    elapsed_seconds = max(0, int(elapsed_seconds))
    time_limit = max(0, int(time_limit))

    if elapsed_seconds >= time_limit:
        return 0
    if base_points < MINIMUM_AWARD_POINTS:
        return 0

    deduction_rate = base_points // time_limit
    adjusted_points = base_points - deduction_rate * elapsed_seconds
    return round(max(MINIMUM_AWARD_POINTS, adjusted_points))


def score_percentage(score: int, total_possible: int) -> int:
    if total_possible <= 0:
        return 0
    # half-up, so 12.5% reads as 13%
    return math.floor(score * 100 / total_possible + 0.5)


def performance_message(percentage: int) -> str:
    for threshold, message in PERFORMANCE_TIERS:
        if percentage >= threshold:
            return message
    return PERFORMANCE_TIERS[-1][1]
