# quizwiz/routers/deps.py
from functools import lru_cache

from fastapi import HTTPException

from quizwiz.core.errors import QuizError
from quizwiz.services.evaluation_service import EvaluationService
from quizwiz.services.progress_service import ProgressService
from quizwiz.services.session_service import SessionService


# Singletons (one registry / LLM client per process); tests override these
@lru_cache
def get_evaluation_service() -> EvaluationService:
    return EvaluationService()


@lru_cache
def get_session_service() -> SessionService:
    return SessionService(evaluator=get_evaluation_service())


@lru_cache
def get_progress_service() -> ProgressService:
    return ProgressService()


def http_error(e: QuizError) -> HTTPException:
    headers = {"Retry-After": "1"} if getattr(e, "retryable", False) else None
    return HTTPException(status_code=e.status_code, detail=e.message, headers=headers)
