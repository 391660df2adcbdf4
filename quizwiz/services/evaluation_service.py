# quizwiz/services/evaluation_service.py
import logging
from typing import Any, Optional

from quizwiz.core import config
from quizwiz.core.errors import AnswerShapeMismatch, UnsupportedEvaluationCombination
from quizwiz.core.evaluator_registry import EvaluatorRegistry
from quizwiz.evaluators.exact_match import ExactMatchEvaluator
from quizwiz.evaluators.rubric_evaluator import RubricEvaluator
from quizwiz.evaluators.similarity import SimilarityEvaluator, SpellingEvaluator
from quizwiz.schemas.answer_schemas import SUBJECT_VARIANTS, EvaluationResult

logger = logging.getLogger(__name__)

# Route marker: english text picks its strategy per question type
ENGLISH_TEXT_POLICY = "english_text_policy"
TEXT_STRATEGIES = ("exact", "partial_credit", "spelling_strict", "spelling_lenient")


def build_registry(llm: Any = None, grading_timeout: Optional[float] = None) -> EvaluatorRegistry:
    registry = EvaluatorRegistry()
    registry.register("exact", ExactMatchEvaluator())
    registry.register("exact_science", ExactMatchEvaluator("exact_science", quote_choices=False))
    registry.register("partial_credit", SimilarityEvaluator())
    registry.register("spelling_strict", SpellingEvaluator("strict"))
    registry.register("spelling_lenient", SpellingEvaluator("lenient"))
    registry.register("ai_rubric", RubricEvaluator(llm=llm, timeout=grading_timeout))

    registry.add_route("math", "number", "exact")
    registry.add_route("science", "boolean", "exact_science")
    registry.add_route("science", "choice", "exact_science")
    registry.add_route("science", "explanation", "ai_rubric")
    registry.add_route("english", "choice", "exact")
    registry.add_route("english", "text", ENGLISH_TEXT_POLICY)
    registry.add_route("english", "correction", "ai_rubric")

    registry.check_exhaustive(SUBJECT_VARIANTS, dynamic=[ENGLISH_TEXT_POLICY])
    return registry


def resolve_text_strategy(question_type: str, strategy: Optional[str] = None) -> str:
    """English text: explicit per-question strategy, else the question-type table."""
    chosen = strategy or config.ENGLISH_TEXT_POLICY.get(question_type, config.DEFAULT_ENGLISH_TEXT_STRATEGY)
    if chosen not in TEXT_STRATEGIES:
        raise UnsupportedEvaluationCombination("english", f"text/{chosen}")
    return chosen


class EvaluationService:
    """Selects the evaluator for (subject, question type, answer shape) and runs it."""

    def __init__(self, registry: Optional[EvaluatorRegistry] = None, llm: Any = None):
        self.registry = registry or build_registry(llm=llm)

    def select_strategy(
        self,
        subject: str,
        question_type: str,
        correct_answer,
        user_answer,
        strategy: Optional[str] = None,
    ) -> str:
        if correct_answer.type != user_answer.type:
            raise AnswerShapeMismatch(correct_answer.type, user_answer.type)

        route = self.registry.route_for(subject, correct_answer.type)
        if route is None:
            raise UnsupportedEvaluationCombination(subject, correct_answer.type)
        if route == ENGLISH_TEXT_POLICY:
            return resolve_text_strategy(question_type, strategy)
        return route

    async def evaluate_answer(
        self,
        subject: str,
        question_type: str,
        correct_answer,
        user_answer,
        question_text: str = "",
        strategy: Optional[str] = None,
    ) -> EvaluationResult:
        name = self.select_strategy(subject, question_type, correct_answer, user_answer, strategy)
        result = await self.registry.get(name).evaluate(correct_answer, user_answer, question_text)
        logger.info(f"Evaluated {subject}/{correct_answer.type} with '{name}': score={result.score} correct={result.is_correct}")
        return result
