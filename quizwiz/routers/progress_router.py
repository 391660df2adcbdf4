# quizwiz/routers/progress_router.py
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException

from quizwiz.routers.deps import get_progress_service
from quizwiz.schemas.progress_schemas import ActiveSession, HistoryEntry, PausedSession, UserProgressResponse
from quizwiz.services.progress_service import ProgressService

router = APIRouter()


@router.get("/api/users/{user_id}/sessions/active", response_model=Optional[ActiveSession])
async def get_active_session(
    user_id: str,
    mode: Optional[str] = None,
    service: ProgressService = Depends(get_progress_service),
):
    return service.get_active_session(user_id, mode=mode)


@router.get("/api/users/{user_id}/sessions/paused", response_model=List[PausedSession])
async def list_paused_sessions(
    user_id: str,
    mode: Optional[str] = None,
    service: ProgressService = Depends(get_progress_service),
):
    return service.list_paused_sessions(user_id, mode=mode)


@router.get("/api/users/{user_id}/sessions/completed")
async def has_completed_sessions(
    user_id: str,
    mode: Optional[str] = None,
    service: ProgressService = Depends(get_progress_service),
):
    return {"has_completed_sessions": service.has_completed_sessions(user_id, mode=mode)}


@router.get("/api/users/{user_id}/history", response_model=List[HistoryEntry])
async def get_history(
    user_id: str,
    mode: Optional[str] = None,
    service: ProgressService = Depends(get_progress_service),
):
    return service.get_history(user_id, mode=mode)


@router.get("/api/users/{user_id}/progress", response_model=UserProgressResponse)
async def get_user_progress(
    user_id: str,
    service: ProgressService = Depends(get_progress_service),
):
    progress = service.get_user_progress(user_id)
    if progress is None:
        raise HTTPException(status_code=404, detail=f"No progress data found for user {user_id}")
    return progress
