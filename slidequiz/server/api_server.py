"""FastAPI server that exposes a read-only view of the running quiz.

Meant for a second screen (scoreboard, presenter remote). All writes go
through the presenter, which owns the Qt event loop the timers run on.
"""

from __future__ import annotations

from threading import Thread

from fastapi import Depends, FastAPI, HTTPException
from pydantic import BaseModel
import uvicorn

from slidequiz.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from slidequiz.core.models import AnswerState, TimerPhase
from slidequiz.core.quiz_session import QuizSession


class ScoreResponse(BaseModel):
    """Running totals."""

    score: int
    total_possible: int


class TimerResponse(BaseModel):
    """Countdown of the question currently on screen, if any."""

    active: bool
    question_id: str | None = None
    remaining_seconds: int | None = None
    displayed_points: int | None = None
    phase: TimerPhase | None = None


class AnswerStateResponse(BaseModel):
    selected_index: int | None
    is_correct: bool
    points_awarded: int
    is_skipped: bool
    is_timed_out: bool

    @classmethod
    def from_state(cls, state: AnswerState) -> AnswerStateResponse:
        return cls(
            selected_index=state.selected_index,
            is_correct=state.is_correct,
            points_awarded=state.points_awarded,
            is_skipped=state.is_skipped,
            is_timed_out=state.is_timed_out,
        )


class QuestionResponse(BaseModel):
    question_id: str
    base_points: int
    time_limit_seconds: int
    answered: bool
    answer: AnswerStateResponse | None = None


class SummaryResponse(BaseModel):
    score: int
    total_possible: int
    percentage: int
    correct_answers: int
    total_questions: int
    passed: bool
    performance: str


def _get_quiz_session_dependency(quiz_session: QuizSession):
    def dependency() -> QuizSession:
        return quiz_session

    return dependency


def create_api_app(quiz_session: QuizSession) -> FastAPI:
    """Create a FastAPI application wired to the provided quiz session."""
    app = FastAPI(title="SlideQuiz Status API", version="0.1.0")
    session_dep = _get_quiz_session_dependency(quiz_session)

    @app.get("/score", response_model=ScoreResponse)
    def get_score(session: QuizSession = Depends(session_dep)) -> ScoreResponse:
        state = session.score_state()
        return ScoreResponse(score=state.score, total_possible=state.total_possible)

    @app.get("/summary", response_model=SummaryResponse)
    def get_summary(session: QuizSession = Depends(session_dep)) -> SummaryResponse:
        summary = session.summary()
        return SummaryResponse(
            score=summary.score,
            total_possible=summary.total_possible,
            percentage=summary.percentage,
            correct_answers=summary.correct_answers,
            total_questions=summary.total_questions,
            passed=summary.passed,
            performance=summary.performance,
        )

    @app.get("/timer", response_model=TimerResponse)
    def get_timer(session: QuizSession = Depends(session_dep)) -> TimerResponse:
        question_id = session.get_active_question_id()
        snapshot = session.timer_snapshot()
        if question_id is None or snapshot is None:
            return TimerResponse(active=False)
        return TimerResponse(
            active=True,
            question_id=question_id,
            remaining_seconds=snapshot.remaining_seconds,
            displayed_points=snapshot.displayed_points,
            phase=snapshot.phase,
        )

    @app.get("/questions/{question_id}", response_model=QuestionResponse)
    def get_question(
        question_id: str, session: QuizSession = Depends(session_dep)
    ) -> QuestionResponse:
        try:
            question = session.get_question(question_id)
        except KeyError as exc:
            raise HTTPException(status_code=404, detail=f"Unknown question '{question_id}'") from exc
        state = session.get_answer_state(question_id)
        return QuestionResponse(
            question_id=question.id,
            base_points=question.base_points,
            time_limit_seconds=question.effective_time_limit,
            answered=state is not None,
            answer=AnswerStateResponse.from_state(state) if state is not None else None,
        )

    return app


def start_api_server(
    quiz_session: QuizSession,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
) -> Thread:
    """Start the FastAPI server in a background daemon thread."""
    app = create_api_app(quiz_session)
    config = uvicorn.Config(app=app, host=host, port=port, log_level="info")
    server = uvicorn.Server(config)

    def run_server() -> None:
        server.run()

    thread = Thread(target=run_server, name="QuizStatusServer", daemon=True)
    thread.start()
    return thread
