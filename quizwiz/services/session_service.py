# quizwiz/services/session_service.py
import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError

from quizwiz.core.errors import (
    AnswerAlreadySubmitted,
    InvalidQuestion,
    InvalidTransition,
    QuestionNotFound,
    SessionConflict,
    SessionNotFound,
)
from quizwiz.database.models import Answer, LearningSession, Question
from quizwiz.database.repository import LearningRepository
from quizwiz.schemas.answer_schemas import SUBJECT_VARIANTS, dump_answer, parse_answer
from quizwiz.schemas.session_schemas import (
    AnswerInfo,
    ProgressInfo,
    QuestionInput,
    QuestionStatus,
    SessionDetail,
    SessionInfo,
    SessionStats,
    StartSessionResponse,
    SubmitAnswerResponse,
)
from quizwiz.services.evaluation_service import EvaluationService
from quizwiz.services.scoring_service import (
    accuracy_percent,
    check_hints,
    check_time_ms,
    finalize_score,
    score_question,
)
from quizwiz.utils.numbers import round_half_up

logger = logging.getLogger(__name__)


def _question_status(question: Question, answer: Optional[Answer]) -> QuestionStatus:
    return QuestionStatus(
        id=question.id,
        question_index=question.question_index,
        type=question.type,
        topic=question.topic,
        difficulty=question.difficulty,
        question_text=question.question_text,
        correct_answer=question.correct_answer,
        options=question.options,
        hints=question.hints,
        visual_description=question.visual_description,
        is_answered=answer is not None,
        answer=(
            AnswerInfo(
                id=answer.id,
                user_answer=answer.user_answer,
                is_correct=answer.is_correct,
                score=answer.score,
                points=answer.points,
                feedback=answer.feedback,
                hints_used=answer.hints_used,
                time_ms=answer.time_ms,
            )
            if answer
            else None
        ),
    )


class SessionService:
    """
    Learning session state machine.

        in_progress --submit (last answer)--> completed
        in_progress --pause--> paused --resume--> in_progress

    `completed` is terminal. Grading runs before any write, so no storage
    lock is held while the rubric evaluator waits on the model.
    """

    def __init__(
        self,
        repository: Optional[LearningRepository] = None,
        evaluator: Optional[EvaluationService] = None,
    ):
        self.repository = repository or LearningRepository()
        self.evaluator = evaluator or EvaluationService()

    # ---------------------------------------------------------------
    # SESSION START
    # ---------------------------------------------------------------
    def start_session(
        self,
        user_id: str,
        subject: str,
        topic: str,
        questions: List[QuestionInput],
        mode: Optional[str] = "playground",
    ) -> StartSessionResponse:
        if not questions:
            raise InvalidQuestion("A session needs at least one question")

        session_row = LearningSession(
            user_id=user_id,
            mode=mode,
            subject=subject,
            topic=topic,
            status="in_progress",
            total_questions=len(questions),
            current_question_index=0,
            score=0,
        )
        question_rows = []
        for index, q in enumerate(questions):
            if q.correct_answer.type not in SUBJECT_VARIANTS[subject]:
                raise InvalidQuestion(
                    f"Question {index}: answer type '{q.correct_answer.type}' is not valid for {subject}"
                )
            question_rows.append(
                Question(
                    session_id=session_row.id,
                    subject=subject,
                    type=q.type,
                    topic=q.topic or topic,
                    difficulty=q.difficulty,
                    question_text=q.question_text,
                    correct_answer=dump_answer(q.correct_answer),
                    options=q.options,
                    hints=list(q.hints),
                    visual_description=q.visual_description,
                    evaluation_strategy=q.evaluation_strategy,
                    question_index=index,
                )
            )

        self.repository.create_session(session_row, question_rows)
        logger.info(f"Started {subject} session {session_row.id} for {user_id} with {len(question_rows)} questions")
        return StartSessionResponse(
            session_id=session_row.id,
            status=session_row.status,
            total_questions=session_row.total_questions,
            question_ids=[q.id for q in question_rows],
        )

    def _load(self, session_id: str, user_id: Optional[str] = None) -> LearningSession:
        session_row = self.repository.get_session(session_id)
        if session_row is None or (user_id is not None and session_row.user_id != user_id):
            raise SessionNotFound(session_id)
        return session_row

    # ---------------------------------------------------------------
    # SUBMIT ANSWER
    # ---------------------------------------------------------------
    async def submit_answer(
        self,
        session_id: str,
        question_id: str,
        user_answer,
        hints_used: int = 0,
        time_ms: Optional[int] = None,
        user_id: Optional[str] = None,
    ) -> SubmitAnswerResponse:
        session_row = self._load(session_id, user_id)
        if session_row.status != "in_progress":
            raise InvalidTransition("submit an answer to", session_row.status)
        check_hints(hints_used)
        check_time_ms(time_ms)

        question = self.repository.get_question(session_id, question_id)
        if question is None:
            raise QuestionNotFound(session_id, question_id)
        if self.repository.has_answer(session_id, question_id):
            raise AnswerAlreadySubmitted(question_id)

        if isinstance(user_answer, dict):
            user_answer = parse_answer(user_answer)
        correct_answer = parse_answer(question.correct_answer)

        # 1. grade (may wait on the external model, never raises for degradation)
        result = await self.evaluator.evaluate_answer(
            subject=question.subject,
            question_type=question.type,
            correct_answer=correct_answer,
            user_answer=user_answer,
            question_text=question.question_text,
            strategy=question.evaluation_strategy,
        )
        points = score_question(result.is_correct, hints_used, question.difficulty)

        # 2. persist atomically, guarded by the index we graded against
        expected_index = session_row.current_question_index
        next_index = expected_index + 1
        is_complete = next_index >= session_row.total_questions
        session_score = session_row.score + points

        answer = Answer(
            session_id=session_id,
            question_id=question_id,
            user_answer=dump_answer(user_answer),
            is_correct=result.is_correct,
            score=result.score,
            points=points,
            feedback=result.feedback,
            hints_used=hints_used,
            time_ms=time_ms,
        )

        repo = self.repository
        try:
            with repo.transaction() as db:
                if not repo.advance_session(db, session_id, expected_index, points):
                    raise SessionConflict(session_id)
                repo.insert_answer(db, answer)

                if is_complete:
                    answered, correct = repo.count_answers(db, session_id)
                    session_score = finalize_score(session_score, correct, answered)
                    if not repo.complete_session(db, session_id, session_score):
                        raise SessionConflict(session_id)
                    repo.add_to_user_score(db, session_row.user_id, session_score)

                repo.record_skill_progress(
                    db,
                    user_id=session_row.user_id,
                    subject=question.subject,
                    topic=question.topic,
                    is_correct=result.is_correct,
                    hints_used=hints_used,
                    time_ms=time_ms or 0,
                )
        except IntegrityError:
            # unique (session_id, question_id) lost to a concurrent submission
            raise AnswerAlreadySubmitted(question_id)

        if is_complete:
            logger.info(f"Session {session_id} completed with final score {session_score}")

        return SubmitAnswerResponse(
            answer_id=answer.id,
            is_correct=result.is_correct,
            correct_answer=question.correct_answer,
            next_question_index=next_index,
            is_session_complete=is_complete,
            question_score=points,
            session_score=session_score,
            evaluation_score=result.score,
            feedback=result.feedback,
        )

    # ---------------------------------------------------------------
    # PAUSE / RESUME
    # ---------------------------------------------------------------
    def pause(self, session_id: str, user_id: Optional[str] = None) -> LearningSession:
        return self._transition(session_id, user_id, "pause", "in_progress", "paused")

    def resume(self, session_id: str, user_id: Optional[str] = None) -> LearningSession:
        return self._transition(session_id, user_id, "resume", "paused", "in_progress")

    def _transition(
        self,
        session_id: str,
        user_id: Optional[str],
        action: str,
        from_status: str,
        to_status: str,
    ) -> LearningSession:
        session_row = self._load(session_id, user_id)
        if session_row.status != from_status:
            raise InvalidTransition(action, session_row.status)

        with self.repository.transaction() as db:
            if not self.repository.transition_status(db, session_id, from_status, {"status": to_status}):
                raise SessionConflict(session_id)

        logger.info(f"Session {session_id}: {from_status} -> {to_status}")
        session_row.status = to_status
        return session_row

    # ---------------------------------------------------------------
    # READ
    # ---------------------------------------------------------------
    def get_session_detail(self, session_id: str, user_id: Optional[str] = None) -> SessionDetail:
        session_row, questions, answers = self.repository.get_session_bundle(session_id)
        if session_row is None or (user_id is not None and session_row.user_id != user_id):
            raise SessionNotFound(session_id)

        answers_by_question = {a.question_id: a for a in answers}
        question_views = [_question_status(q, answers_by_question.get(q.id)) for q in questions]

        current_index = session_row.current_question_index
        current = question_views[current_index] if current_index < len(question_views) else None

        total = session_row.total_questions or len(questions)
        answered = len(answers)
        correct = sum(1 for a in answers if a.is_correct)
        total_hints = sum(a.hints_used or 0 for a in answers)
        total_time = sum(a.time_ms or 0 for a in answers)

        return SessionDetail(
            session=SessionInfo(
                id=session_row.id,
                user_id=session_row.user_id,
                mode=session_row.mode,
                subject=session_row.subject,
                topic=session_row.topic,
                status=session_row.status,
                score=session_row.score,
                started_at=session_row.started_at,
                ended_at=session_row.ended_at,
            ),
            current_question=current,
            questions=question_views,
            progress=ProgressInfo(
                total=total,
                current_index=current_index,
                answered=answered,
                correct=correct,
                incorrect=answered - correct,
                remaining=total - answered,
                percent_complete=round_half_up(answered / total * 100) if total else 0,
                is_complete=answered >= total,
            ),
            stats=SessionStats(
                total_hints_used=total_hints,
                total_time_ms=total_time,
                avg_time_ms=round_half_up(total_time / answered) if answered else 0,
                avg_hints_per_question=round(total_hints / answered, 2) if answered else 0.0,
                accuracy=accuracy_percent(correct, answered),
            ),
        )
