# quizwiz/routers/session_router.py
import logging
from typing import Optional

from fastapi import APIRouter, Depends

from quizwiz.core.errors import QuizError
from quizwiz.routers.deps import get_session_service, http_error
from quizwiz.schemas.session_schemas import (
    PauseResponse,
    ResumeResponse,
    SessionActionRequest,
    SessionDetail,
    StartSessionRequest,
    StartSessionResponse,
    SubmitAnswerRequest,
    SubmitAnswerResponse,
)
from quizwiz.services.session_service import SessionService

logger = logging.getLogger(__name__)

router = APIRouter()


# 1. Start a session from already generated questions
@router.post("/api/sessions", response_model=StartSessionResponse, status_code=201)
async def start_session(
    request: StartSessionRequest,
    service: SessionService = Depends(get_session_service),
):
    try:
        return service.start_session(
            user_id=request.user_id,
            subject=request.subject,
            topic=request.topic,
            questions=request.questions,
            mode=request.mode,
        )
    except QuizError as e:
        logger.warning(f"Start session rejected: {e}")
        raise http_error(e)


# 2. Read session state (progress bar, current question, review)
@router.get("/api/sessions/{session_id}", response_model=SessionDetail)
async def get_session_detail(
    session_id: str,
    user_id: Optional[str] = None,
    service: SessionService = Depends(get_session_service),
):
    try:
        return service.get_session_detail(session_id, user_id=user_id)
    except QuizError as e:
        raise http_error(e)


# 3. Submit one answer -> evaluate, score, advance
@router.post("/api/sessions/{session_id}/answers", response_model=SubmitAnswerResponse)
async def submit_answer(
    session_id: str,
    request: SubmitAnswerRequest,
    service: SessionService = Depends(get_session_service),
):
    try:
        return await service.submit_answer(
            session_id=session_id,
            question_id=request.question_id,
            user_answer=request.user_answer,
            hints_used=request.hints_used,
            time_ms=request.time_ms,
            user_id=request.user_id,
        )
    except QuizError as e:
        logger.warning(f"Submit answer rejected for {session_id}: {e}")
        raise http_error(e)


# 4. Pause / resume
@router.post("/api/sessions/{session_id}/pause", response_model=PauseResponse)
async def pause_session(
    session_id: str,
    request: Optional[SessionActionRequest] = None,
    service: SessionService = Depends(get_session_service),
):
    try:
        service.pause(session_id, user_id=request.user_id if request else None)
    except QuizError as e:
        raise http_error(e)
    return PauseResponse(success=True)


@router.post("/api/sessions/{session_id}/resume", response_model=ResumeResponse)
async def resume_session(
    session_id: str,
    request: Optional[SessionActionRequest] = None,
    service: SessionService = Depends(get_session_service),
):
    try:
        service.resume(session_id, user_id=request.user_id if request else None)
    except QuizError as e:
        raise http_error(e)
    return ResumeResponse(session_id=session_id)
