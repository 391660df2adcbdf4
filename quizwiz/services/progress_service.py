# quizwiz/services/progress_service.py
from collections import defaultdict
from typing import List, Optional

from quizwiz.database.repository import LearningRepository
from quizwiz.schemas.progress_schemas import (
    ActiveSession,
    HistoryEntry,
    HistoryQuestion,
    HistoryStats,
    PausedSession,
    SkillInfo,
    UserProgressResponse,
)
from quizwiz.services.scoring_service import accuracy_percent


class ProgressService:
    def __init__(self, repository: Optional[LearningRepository] = None):
        self.repository = repository or LearningRepository()

    def get_history(self, user_id: str, mode: Optional[str] = None) -> List[HistoryEntry]:
        """All sessions of a learner, newest first, with their answered questions."""
        sessions = self.repository.list_sessions(user_id, mode=mode)
        questions, answers = self.repository.list_questions_and_answers([s.id for s in sessions])

        questions_by_session = defaultdict(list)
        for q in questions:
            questions_by_session[q.session_id].append(q)
        answers_by_session = defaultdict(list)
        for a in answers:
            answers_by_session[a.session_id].append(a)

        history = []
        for s in sessions:
            session_answers = answers_by_session[s.id]
            by_question = {a.question_id: a for a in session_answers}
            answered = len(session_answers)
            correct = sum(1 for a in session_answers if a.is_correct)
            history.append(
                HistoryEntry(
                    id=s.id,
                    subject=s.subject,
                    topic=s.topic,
                    # ended_at wins over a stale status
                    status="completed" if s.ended_at else s.status,
                    score=s.score,
                    started_at=s.started_at,
                    ended_at=s.ended_at,
                    total_questions=s.total_questions or len(questions_by_session[s.id]),
                    questions=[
                        HistoryQuestion(
                            id=q.id,
                            question_index=q.question_index,
                            type=q.type,
                            question_text=q.question_text,
                            correct_answer=q.correct_answer,
                            user_answer=by_question[q.id].user_answer if q.id in by_question else None,
                            is_correct=by_question[q.id].is_correct if q.id in by_question else None,
                            hints_used=by_question[q.id].hints_used if q.id in by_question else 0,
                        )
                        for q in questions_by_session[s.id]
                    ],
                    stats=HistoryStats(
                        total_answered=answered,
                        correct_count=correct,
                        incorrect_count=answered - correct,
                        accuracy=accuracy_percent(correct, answered),
                    ),
                )
            )
        return history

    def has_completed_sessions(self, user_id: str, mode: Optional[str] = None) -> bool:
        return self.repository.has_completed_session(user_id, mode=mode)

    def get_active_session(self, user_id: str, mode: Optional[str] = None) -> Optional[ActiveSession]:
        """Latest in-progress session, if it still has questions left."""
        sessions = self.repository.list_sessions(user_id, status="in_progress", mode=mode)
        if not sessions:
            return None
        latest = sessions[0]
        if latest.ended_at or latest.current_question_index >= latest.total_questions:
            return None
        return ActiveSession(session_id=latest.id)

    def list_paused_sessions(self, user_id: str, mode: Optional[str] = None) -> List[PausedSession]:
        sessions = self.repository.list_sessions(user_id, status="paused", mode=mode)
        _, answers = self.repository.list_questions_and_answers([s.id for s in sessions])
        answers_by_session = defaultdict(list)
        for a in answers:
            answers_by_session[a.session_id].append(a)

        return [
            PausedSession(
                id=s.id,
                subject=s.subject,
                topic=s.topic,
                started_at=s.started_at,
                total_questions=s.total_questions,
                current_question_index=s.current_question_index,
                answered_count=len(answers_by_session[s.id]),
                correct_count=sum(1 for a in answers_by_session[s.id] if a.is_correct),
            )
            for s in sessions
        ]

    def get_user_progress(self, user_id: str) -> Optional[UserProgressResponse]:
        """Total score plus per-topic skill counters; None if the learner has no data."""
        score = self.repository.get_user_score(user_id)
        skills = self.repository.list_skills(user_id)
        if score is None and not skills:
            return None

        return UserProgressResponse(
            user_id=user_id,
            total_score=score.total_score if score else 0,
            skills=[
                SkillInfo(
                    subject=s.subject,
                    topic=s.topic,
                    total_questions=s.total_questions,
                    correct_questions=s.correct_questions,
                    accuracy=accuracy_percent(s.correct_questions, s.total_questions),
                    avg_hints_used=round(s.total_hints_used / s.total_questions, 2) if s.total_questions else 0.0,
                )
                for s in skills
            ],
        )
