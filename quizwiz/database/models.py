# quizwiz/database/models.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from uuid import uuid4

from sqlalchemy import JSON, UniqueConstraint
from sqlmodel import Field, SQLModel


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ----------------------------------------------------------------------
# Helper: JSON column with a fresh default per row
# ----------------------------------------------------------------------
def json_field(default_factory: Any = dict, nullable: bool = False) -> Any:
    """Return a JSON column; works for SQLite and PostgreSQL alike."""
    if nullable:
        return Field(default=None, sa_type=JSON, nullable=True)
    return Field(default_factory=default_factory, sa_type=JSON)


# ----------------------------------------------------------------------
# Models
# ----------------------------------------------------------------------
class LearningSession(SQLModel, table=True):
    id: str = Field(default_factory=lambda: uuid4().hex, primary_key=True)
    user_id: str = Field(index=True)
    mode: Optional[str] = None  # playground | quiz
    subject: str
    topic: str
    status: str = Field(default="in_progress", index=True)
    total_questions: int = Field(default=10)
    current_question_index: int = Field(default=0)  # 0-based
    # raw running points while in progress, final points once completed
    score: int = Field(default=0)
    started_at: datetime = Field(default_factory=_utcnow)
    ended_at: Optional[datetime] = None


class Question(SQLModel, table=True):
    id: str = Field(default_factory=lambda: uuid4().hex, primary_key=True)
    session_id: str = Field(foreign_key="learningsession.id", index=True)
    subject: str
    type: str
    topic: str
    difficulty: str = Field(default="easy")
    question_text: str
    correct_answer: Dict[str, Any] = json_field(dict)
    options: Optional[List[Any]] = json_field(nullable=True)
    hints: List[str] = json_field(list)
    visual_description: Optional[str] = None
    evaluation_strategy: Optional[str] = None
    question_index: int
    created_at: datetime = Field(default_factory=_utcnow)


class Answer(SQLModel, table=True):
    __table_args__ = (UniqueConstraint("session_id", "question_id", name="uq_answer_session_question"),)

    id: str = Field(default_factory=lambda: uuid4().hex, primary_key=True)
    session_id: str = Field(foreign_key="learningsession.id", index=True)
    question_id: str = Field(foreign_key="question.id", index=True)
    user_answer: Dict[str, Any] = json_field(dict)
    is_correct: bool
    score: int = Field(default=0)  # evaluation score 0-100
    points: int = Field(default=0)  # question points added to the session
    feedback: Optional[str] = None
    hints_used: int = Field(default=0)
    time_ms: Optional[int] = None
    created_at: datetime = Field(default_factory=_utcnow)


class UserScore(SQLModel, table=True):
    user_id: str = Field(primary_key=True)
    total_score: int = Field(default=0)
    updated_at: datetime = Field(default_factory=_utcnow)


class SkillProgress(SQLModel, table=True):
    __table_args__ = (UniqueConstraint("user_id", "subject", "topic", name="uq_skill_user_subject_topic"),)

    id: str = Field(default_factory=lambda: uuid4().hex, primary_key=True)
    user_id: str = Field(index=True)
    subject: str
    topic: str
    total_questions: int = Field(default=0)
    correct_questions: int = Field(default=0)
    total_hints_used: int = Field(default=0)
    total_time_ms: int = Field(default=0)
    updated_at: datetime = Field(default_factory=_utcnow)
