# quizwiz/schemas/session_schemas.py
from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from quizwiz.schemas.answer_schemas import AnswerValue, Difficulty, EvaluationStrategy, Subject

SessionStatus = Literal["in_progress", "paused", "completed"]
Mode = Literal["playground", "quiz"]


# ----------------------------------------------------------------------
# Requests
# ----------------------------------------------------------------------
class QuestionInput(BaseModel):
    type: str
    question_text: str
    correct_answer: AnswerValue
    difficulty: Difficulty = "easy"
    topic: Optional[str] = None
    options: Optional[List[Any]] = None
    hints: List[str] = Field(min_length=4, max_length=4)
    visual_description: Optional[str] = None
    evaluation_strategy: Optional[EvaluationStrategy] = None


class StartSessionRequest(BaseModel):
    user_id: str
    subject: Subject
    topic: str
    mode: Optional[Mode] = "playground"
    questions: List[QuestionInput] = Field(min_length=1)


class SubmitAnswerRequest(BaseModel):
    question_id: str
    user_answer: AnswerValue
    hints_used: int = Field(default=0, ge=0, le=4)
    time_ms: Optional[int] = Field(default=None, ge=0)
    user_id: Optional[str] = None


class SessionActionRequest(BaseModel):
    user_id: Optional[str] = None


# ----------------------------------------------------------------------
# Responses
# ----------------------------------------------------------------------
class StartSessionResponse(BaseModel):
    session_id: str
    status: SessionStatus
    total_questions: int
    question_ids: List[str]


class SubmitAnswerResponse(BaseModel):
    answer_id: str
    is_correct: bool
    correct_answer: Dict[str, Any]
    next_question_index: int
    is_session_complete: bool
    question_score: int
    session_score: int
    evaluation_score: int
    feedback: Optional[str] = None


class PauseResponse(BaseModel):
    success: bool = True


class ResumeResponse(BaseModel):
    session_id: str


class AnswerInfo(BaseModel):
    id: str
    user_answer: Dict[str, Any]
    is_correct: bool
    score: int
    points: int
    feedback: Optional[str] = None
    hints_used: int
    time_ms: Optional[int] = None


class QuestionStatus(BaseModel):
    id: str
    question_index: int
    type: str
    topic: str
    difficulty: str
    question_text: str
    correct_answer: Dict[str, Any]
    options: Optional[List[Any]] = None
    hints: List[str]
    visual_description: Optional[str] = None
    is_answered: bool
    answer: Optional[AnswerInfo] = None


class SessionInfo(BaseModel):
    id: str
    user_id: str
    mode: Optional[str] = None
    subject: str
    topic: str
    status: SessionStatus
    score: int
    started_at: datetime
    ended_at: Optional[datetime] = None


class ProgressInfo(BaseModel):
    total: int
    current_index: int
    answered: int
    correct: int
    incorrect: int
    remaining: int
    percent_complete: int
    is_complete: bool


class SessionStats(BaseModel):
    total_hints_used: int
    total_time_ms: int
    avg_time_ms: int
    avg_hints_per_question: float
    accuracy: int


class SessionDetail(BaseModel):
    session: SessionInfo
    current_question: Optional[QuestionStatus] = None
    questions: List[QuestionStatus]
    progress: ProgressInfo
    stats: SessionStats
