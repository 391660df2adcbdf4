# quizwiz/routers/evaluator.py
from fastapi import APIRouter, Depends

from quizwiz.core.errors import QuizError
from quizwiz.routers.deps import get_evaluation_service, http_error
from quizwiz.schemas.answer_schemas import EvaluateRequest, EvaluationResult
from quizwiz.services.evaluation_service import EvaluationService

router = APIRouter()


@router.post("/api/evaluate", response_model=EvaluationResult)
async def evaluate(
    request: EvaluateRequest,
    service: EvaluationService = Depends(get_evaluation_service),
):
    """Stateless grading of one answer; nothing is persisted."""
    try:
        return await service.evaluate_answer(
            subject=request.subject,
            question_type=request.question_type,
            correct_answer=request.correct_answer,
            user_answer=request.user_answer,
            question_text=request.question_text,
            strategy=request.evaluation_strategy,
        )
    except QuizError as e:
        raise http_error(e)
