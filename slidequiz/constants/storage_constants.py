"""Durable storage keys and settings scope for persisted quiz state."""

ANSWER_STATES_KEY: str = "quiz-answer-states"
SHUFFLE_ORDERS_KEY: str = "quiz-shuffle-orders"
SCORE_KEY: str = "quiz-score"
TOTAL_POSSIBLE_KEY: str = "quiz-total-possible"

SETTINGS_ORGANIZATION: str = "SlideQuiz"
SETTINGS_APPLICATION: str = "SlideQuizEngine"
