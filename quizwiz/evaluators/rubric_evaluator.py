# quizwiz/evaluators/rubric_evaluator.py
import asyncio
import json
import logging
import re
from typing import Any, Dict, Optional

from quizwiz.core import config
from quizwiz.core.llm_client import build_default_client
from quizwiz.evaluators.base_evaluator import BaseEvaluator
from quizwiz.evaluators.evaluator_prompts.rubric_prompt import (
    english_correction_prompt,
    rubric_system_prompt,
    science_explanation_prompt,
)
from quizwiz.schemas.answer_schemas import (
    CorrectionAnswer,
    EvaluationResult,
    ExplanationAnswer,
    RubricJudgment,
)
from quizwiz.utils.numbers import round_half_up

logger = logging.getLogger(__name__)

PASS_SCORE = 70
PASS_SIMILARITY = 0.7


class GradingUnavailable(Exception):
    pass


# ----------------------------------------------------------------------
# Deterministic fallbacks
# ----------------------------------------------------------------------
def jaccard_word_similarity(a: str, b: str) -> float:
    """Jaccard similarity over words longer than 2 characters."""
    words_a = {w for w in a.split() if len(w) > 2}
    words_b = {w for w in b.split() if len(w) > 2}
    union = words_a | words_b
    if not union:
        return 0.0
    return len(words_a & words_b) / len(union)


def science_explanation_fallback(
    correct_answer: ExplanationAnswer, user_answer: ExplanationAnswer
) -> EvaluationResult:
    keywords = correct_answer.keywords or []
    submitted = user_answer.value.lower()

    if not keywords:
        similarity = jaccard_word_similarity(correct_answer.value.lower(), submitted)
        is_correct = similarity >= PASS_SIMILARITY
        return EvaluationResult(
            is_correct=is_correct,
            score=round_half_up(similarity * 100),
            feedback=(
                "Good job! Your answer shows understanding."
                if is_correct
                else "Your answer could be improved. Review the concept and try again!"
            ),
        )

    matched = [k for k in keywords if k.lower() in submitted]
    score = round_half_up(len(matched) / len(keywords) * 100)
    is_correct = score >= PASS_SCORE
    return EvaluationResult(
        is_correct=is_correct,
        score=score,
        feedback=(
            "Great answer! You included the key concepts."
            if is_correct
            else f"Try to include more key concepts like: {', '.join(keywords[:3])}"
        ),
    )


def english_correction_fallback(
    correct_answer: CorrectionAnswer, user_answer: CorrectionAnswer
) -> EvaluationResult:
    is_correct = correct_answer.corrected.lower().strip() == user_answer.corrected.lower().strip()
    return EvaluationResult(
        is_correct=is_correct,
        score=100 if is_correct else 0,
        feedback="Perfect correction!" if is_correct else f'The correct sentence is: "{correct_answer.corrected}"',
    )


# ----------------------------------------------------------------------
# Evaluator
# ----------------------------------------------------------------------
class RubricEvaluator(BaseEvaluator):
    """
    AI-assisted grading for free-text science explanations and english
    corrections. The text-generation call is the only step that can fail;
    every failure is caught in evaluate() and replaced by a heuristic score.
    """

    def __init__(self, name: str = "ai_rubric", llm: Any = None, timeout: Optional[float] = None):
        super().__init__(name)
        self._llm = llm
        self._llm_resolved = llm is not None
        self.timeout = timeout if timeout is not None else config.GRADING_TIMEOUT_SECONDS
        self.system_prompt = rubric_system_prompt

    @property
    def llm(self):
        if not self._llm_resolved:
            self._llm = build_default_client()
            self._llm_resolved = True
        return self._llm

    def build_prompt(self, correct_answer, user_answer, question_text: str) -> str:
        if correct_answer.type == "explanation":
            keywords = ", ".join(correct_answer.keywords or [])
            return science_explanation_prompt.format(
                question_text=question_text,
                expected=correct_answer.value,
                keywords_line=f"Key concepts to look for: {keywords}\n" if keywords else "",
                submitted=user_answer.value,
            )
        return english_correction_prompt.format(
            question_text=question_text,
            original=correct_answer.original,
            expected=correct_answer.corrected,
            submitted=user_answer.corrected,
        )

    def fallback(self, correct_answer, user_answer) -> EvaluationResult:
        if correct_answer.type == "explanation":
            return science_explanation_fallback(correct_answer, user_answer)
        return english_correction_fallback(correct_answer, user_answer)

    async def _grade_with_llm(self, prompt: str) -> RubricJudgment:
        llm = self.llm
        if llm is None:
            raise GradingUnavailable("no text-generation client configured")
        raw = await llm.chat(system_prompt=self.system_prompt, user_prompt=prompt)
        return RubricJudgment.model_validate(self._parse_json(raw))

    @staticmethod
    def _parse_json(raw: str) -> Dict[str, Any]:
        try:
            return json.loads(raw)
        except (TypeError, json.JSONDecodeError):
            match = re.search(r"\{[\s\S]*\}", raw or "")
            if not match:
                raise GradingUnavailable(f"llm_parse_error: {raw!r:.200}")
            return json.loads(match.group(0))

    async def evaluate(self, correct_answer, user_answer, question_text: str = "") -> EvaluationResult:
        prompt = self.build_prompt(correct_answer, user_answer, question_text)
        try:
            judgment = await asyncio.wait_for(self._grade_with_llm(prompt), timeout=self.timeout)
        except (Exception, asyncio.CancelledError) as e:
            # timeout, transport error, malformed output, or cancellation
            logger.warning(f"AI grading failed for {correct_answer.type} answer ({type(e).__name__}: {e}), using fallback")
            return self.fallback(correct_answer, user_answer)

        score = round_half_up(judgment.score)
        return EvaluationResult(
            is_correct=score >= PASS_SCORE,
            score=score,
            feedback=judgment.feedback,
        )
