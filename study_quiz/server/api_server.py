"""FastAPI server that exposes the learner endpoints."""

from __future__ import annotations

import logging
from threading import Thread

from fastapi import Depends, FastAPI, HTTPException, Query
from fastapi.responses import HTMLResponse, PlainTextResponse
from pydantic import BaseModel
import uvicorn

from study_quiz.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from study_quiz.core.errors import (
    IdentityExchangeError,
    MalformedSubmissionError,
    OfflineModeError,
    UnauthorizedError,
)
from study_quiz.core.quiz_service import QuizService
from study_quiz.core.services.session_store import start_session_sweeper
from study_quiz.server.pages import RenderedPages

logger = logging.getLogger(__name__)


class SubmissionPayload(BaseModel):
    """Progress cookie posted by the finish page."""

    sequence: list[int]
    submitted: list[str]
    correct: list[bool]


class LeaderboardEntry(BaseModel):
    identity: str
    score: float


def _get_quiz_service_dependency(quiz_service: QuizService):
    def dependency() -> QuizService:
        return quiz_service

    return dependency


def create_api_app(quiz_service: QuizService, pages: RenderedPages | None = None) -> FastAPI:
    """Create a FastAPI application wired to the provided quiz service."""
    app = FastAPI(title="Study Quiz API", version="0.1.0")
    quiz_service_dep = _get_quiz_service_dependency(quiz_service)
    if pages is None:
        pages = RenderedPages.build(quiz_service.bank, online=quiz_service.is_online())

    @app.get("/", response_class=HTMLResponse)
    def serve_start_page() -> str:
        return pages.start

    @app.get("/finish", response_class=HTMLResponse)
    def serve_finish_page() -> str:
        return pages.finish

    @app.get("/leaderboard")
    def get_leaderboard(
        limit: int = Query(10, ge=1),
        service: QuizService = Depends(quiz_service_dep),
    ) -> list[LeaderboardEntry]:
        rows = service.persister.leaderboard.get_top_scorers(limit)
        return [LeaderboardEntry(identity=row.identity, score=row.score) for row in rows]

    @app.put("/submit", response_class=PlainTextResponse)
    def submit_quiz(
        payload: SubmissionPayload,
        service: QuizService = Depends(quiz_service_dep),
    ) -> str:
        try:
            return service.submit(payload.sequence, payload.submitted, payload.correct)
        except OfflineModeError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        except MalformedSubmissionError as exc:
            logger.info("Rejected submission: %s", exc)
            raise HTTPException(status_code=400, detail=str(exc)) from exc

    @app.get("/oauth-redirect", response_class=PlainTextResponse)
    def oauth_redirect(
        code: str,
        state: str,
        service: QuizService = Depends(quiz_service_dep),
    ) -> str:
        try:
            identity, outcome = service.complete(state, code)
        except OfflineModeError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        except MalformedSubmissionError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        except UnauthorizedError as exc:
            raise HTTPException(status_code=401, detail=str(exc)) from exc
        except IdentityExchangeError as exc:
            raise HTTPException(status_code=500, detail=str(exc)) from exc

        if not outcome.ok:
            raise HTTPException(
                status_code=500,
                detail=f"Result could not be saved ({outcome.failed_sink.value}).",
            )
        return f"Thanks for taking part, {identity.display_name}!"

    @app.get("/{question_index}", response_class=HTMLResponse)
    def serve_question_page(question_index: int) -> str:
        if not 0 <= question_index < len(pages.questions):
            raise HTTPException(status_code=404, detail="Question not found.")
        return pages.questions[question_index]

    return app


def start_api_server(
    quiz_service: QuizService,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
    pages: RenderedPages | None = None,
) -> Thread:
    """Start the session sweeper and run the FastAPI server in a background daemon thread."""
    app = create_api_app(quiz_service, pages)
    start_session_sweeper(quiz_service.store)
    config = uvicorn.Config(app=app, host=host, port=port, log_level="info")
    server = uvicorn.Server(config)

    def run_server() -> None:
        server.run()

    thread = Thread(target=run_server, name="QuizApiServer", daemon=True)
    thread.start()
    return thread
