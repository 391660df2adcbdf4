# quizwiz/schemas/progress_schemas.py
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel


class HistoryQuestion(BaseModel):
    id: str
    question_index: int
    type: str
    question_text: str
    correct_answer: Dict[str, Any]
    user_answer: Optional[Dict[str, Any]] = None
    is_correct: Optional[bool] = None
    hints_used: int = 0


class HistoryStats(BaseModel):
    total_answered: int
    correct_count: int
    incorrect_count: int
    accuracy: int


class HistoryEntry(BaseModel):
    id: str
    subject: str
    topic: str
    status: str
    score: int
    started_at: datetime
    ended_at: Optional[datetime] = None
    total_questions: int
    questions: List[HistoryQuestion]
    stats: HistoryStats


class PausedSession(BaseModel):
    id: str
    subject: str
    topic: str
    started_at: datetime
    total_questions: int
    current_question_index: int
    answered_count: int
    correct_count: int


class ActiveSession(BaseModel):
    session_id: str


class SkillInfo(BaseModel):
    subject: str
    topic: str
    total_questions: int
    correct_questions: int
    accuracy: int
    avg_hints_used: float


class UserProgressResponse(BaseModel):
    user_id: str
    total_score: int
    skills: List[SkillInfo]
