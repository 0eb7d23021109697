"""Quiz-related constants shared across the scoring and timing layers."""

DEFAULT_TIME_LIMIT_SECONDS: int = 10
PRE_COUNTDOWN_SECONDS: int = 1
TICK_INTERVAL_SECONDS: int = 1
MINIMUM_AWARD_POINTS: int = 10

DEFAULT_PASSING_SCORE: int = 70
DEFAULT_TOTAL_POINTS: int = 1000

# (minimum percentage, message), highest first
PERFORMANCE_TIERS: tuple[tuple[int, str], ...] = (
    (90, "Outstanding!"),
    (80, "Excellent!"),
    (70, "Great Job!"),
    (60, "Good Effort!"),
    (0, "Keep Learning!"),
)
