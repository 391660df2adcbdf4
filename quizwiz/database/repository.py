# quizwiz/database/repository.py
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, List, Optional, Tuple

from sqlalchemy import case, func, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from quizwiz.database.models import Answer, LearningSession, Question, SkillProgress, UserScore
from quizwiz.database.session import get_session


class LearningRepository:
    """
    Read/write contracts the session state machine needs. Every mutation runs
    inside transaction(); the session row is advanced with a conditional
    UPDATE so concurrent writers cannot both move the same question slot.
    """

    def __init__(self, bind: Optional[Engine] = None):
        self.bind = bind

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        with get_session(self.bind) as db:
            try:
                yield db
                db.commit()
            except Exception:
                db.rollback()
                raise

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    def get_session(self, session_id: str) -> Optional[LearningSession]:
        with get_session(self.bind) as db:
            return db.get(LearningSession, session_id)

    def get_question(self, session_id: str, question_id: str) -> Optional[Question]:
        with get_session(self.bind) as db:
            return db.exec(
                select(Question).where(Question.id == question_id, Question.session_id == session_id)
            ).first()

    def has_answer(self, session_id: str, question_id: str) -> bool:
        with get_session(self.bind) as db:
            found = db.exec(
                select(Answer.id).where(Answer.session_id == session_id, Answer.question_id == question_id)
            ).first()
            return found is not None

    def get_session_bundle(
        self, session_id: str
    ) -> Tuple[Optional[LearningSession], List[Question], List[Answer]]:
        """Session row with its questions (by index) and answers, in one read."""
        with get_session(self.bind) as db:
            session_row = db.get(LearningSession, session_id)
            if session_row is None:
                return None, [], []
            questions = db.exec(
                select(Question).where(Question.session_id == session_id).order_by(Question.question_index)
            ).all()
            answers = db.exec(
                select(Answer).where(Answer.session_id == session_id).order_by(Answer.created_at)
            ).all()
            return session_row, list(questions), list(answers)

    def list_sessions(
        self,
        user_id: str,
        status: Optional[str] = None,
        mode: Optional[str] = None,
    ) -> List[LearningSession]:
        with get_session(self.bind) as db:
            query = select(LearningSession).where(LearningSession.user_id == user_id)
            if status:
                query = query.where(LearningSession.status == status)
            if mode:
                query = query.where(LearningSession.mode == mode)
            return list(db.exec(query.order_by(LearningSession.started_at.desc())).all())

    def has_completed_session(self, user_id: str, mode: Optional[str] = None) -> bool:
        with get_session(self.bind) as db:
            query = select(LearningSession.id).where(
                LearningSession.user_id == user_id, LearningSession.ended_at.is_not(None)
            )
            if mode:
                query = query.where(LearningSession.mode == mode)
            return db.exec(query.limit(1)).first() is not None

    def list_questions_and_answers(self, session_ids: List[str]) -> Tuple[List[Question], List[Answer]]:
        if not session_ids:
            return [], []
        with get_session(self.bind) as db:
            questions = db.exec(
                select(Question).where(Question.session_id.in_(session_ids)).order_by(Question.question_index)
            ).all()
            answers = db.exec(select(Answer).where(Answer.session_id.in_(session_ids))).all()
            return list(questions), list(answers)

    def get_user_score(self, user_id: str) -> Optional[UserScore]:
        with get_session(self.bind) as db:
            return db.get(UserScore, user_id)

    def list_skills(self, user_id: str) -> List[SkillProgress]:
        with get_session(self.bind) as db:
            return list(
                db.exec(
                    select(SkillProgress)
                    .where(SkillProgress.user_id == user_id)
                    .order_by(SkillProgress.subject, SkillProgress.topic)
                ).all()
            )

    # ------------------------------------------------------------------
    # Writes (call with the Session yielded by transaction())
    # ------------------------------------------------------------------
    def create_session(self, session_row: LearningSession, questions: List[Question]) -> LearningSession:
        with self.transaction() as db:
            db.add(session_row)
            db.flush()
            db.add_all(questions)
        return session_row

    @staticmethod
    def transition_status(db: Session, session_id: str, from_status: str, values: Dict[str, Any]) -> bool:
        """Apply `values` only if the session is still in `from_status`."""
        result = db.exec(
            update(LearningSession)
            .where(LearningSession.id == session_id, LearningSession.status == from_status)
            .values(**values)
        )
        return result.rowcount == 1

    @staticmethod
    def advance_session(db: Session, session_id: str, expected_index: int, points: int) -> bool:
        """Move to the next question slot and add points, if nobody else did first."""
        result = db.exec(
            update(LearningSession)
            .where(
                LearningSession.id == session_id,
                LearningSession.status == "in_progress",
                LearningSession.current_question_index == expected_index,
            )
            .values(
                current_question_index=expected_index + 1,
                score=LearningSession.score + points,
            )
        )
        return result.rowcount == 1

    @staticmethod
    def insert_answer(db: Session, answer: Answer) -> Answer:
        db.add(answer)
        db.flush()
        return answer

    @staticmethod
    def count_answers(db: Session, session_id: str) -> Tuple[int, int]:
        """(answered, correct) for a session, as seen inside the transaction."""
        answered, correct = db.exec(
            select(
                func.count(Answer.id),
                func.coalesce(func.sum(case((Answer.is_correct == True, 1), else_=0)), 0),  # noqa: E712
            ).where(Answer.session_id == session_id)
        ).one()
        return int(answered), int(correct)

    @staticmethod
    def complete_session(db: Session, session_id: str, final_score: int) -> bool:
        result = db.exec(
            update(LearningSession)
            .where(LearningSession.id == session_id, LearningSession.status == "in_progress")
            .values(status="completed", ended_at=datetime.now(timezone.utc), score=final_score)
        )
        return result.rowcount == 1

    @staticmethod
    def add_to_user_score(db: Session, user_id: str, delta: int):
        """total_score = total_score + delta, creating the row on first use."""
        now = datetime.now(timezone.utc)
        increment = (
            update(UserScore)
            .where(UserScore.user_id == user_id)
            .values(total_score=UserScore.total_score + delta, updated_at=now)
        )
        if db.exec(increment).rowcount == 1:
            return
        try:
            with db.begin_nested():
                db.add(UserScore(user_id=user_id, total_score=delta, updated_at=now))
        except IntegrityError:
            # another completion created the row in the meantime
            db.exec(increment)

    @staticmethod
    def record_skill_progress(
        db: Session,
        user_id: str,
        subject: str,
        topic: str,
        is_correct: bool,
        hints_used: int,
        time_ms: int,
    ):
        now = datetime.now(timezone.utc)
        increment = (
            update(SkillProgress)
            .where(
                SkillProgress.user_id == user_id,
                SkillProgress.subject == subject,
                SkillProgress.topic == topic,
            )
            .values(
                total_questions=SkillProgress.total_questions + 1,
                correct_questions=SkillProgress.correct_questions + int(is_correct),
                total_hints_used=SkillProgress.total_hints_used + hints_used,
                total_time_ms=SkillProgress.total_time_ms + time_ms,
                updated_at=now,
            )
        )
        if db.exec(increment).rowcount == 1:
            return
        try:
            with db.begin_nested():
                db.add(
                    SkillProgress(
                        user_id=user_id,
                        subject=subject,
                        topic=topic,
                        total_questions=1,
                        correct_questions=int(is_correct),
                        total_hints_used=hints_used,
                        total_time_ms=time_ms,
                        updated_at=now,
                    )
                )
        except IntegrityError:
            db.exec(increment)
