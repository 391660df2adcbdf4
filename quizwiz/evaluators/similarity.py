# quizwiz/evaluators/similarity.py
from typing import Literal

from quizwiz.evaluators.base_evaluator import BaseEvaluator
from quizwiz.schemas.answer_schemas import EvaluationResult, TextAnswer
from quizwiz.utils.numbers import round_half_up

PASS_SCORE = 70
ALMOST_SCORE = 40
SPELLING_TOLERANCE = {"strict": 1, "lenient": 2}
TYPO_PENALTY = 20


def levenshtein_distance(a: str, b: str) -> int:
    """Classic edit distance (insert / delete / substitute, all cost 1)."""
    if len(a) < len(b):
        a, b = b, a
    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, 1):
        current = [i]
        for j, cb in enumerate(b, 1):
            if ca == cb:
                current.append(previous[j - 1])
            else:
                current.append(1 + min(previous[j], current[j - 1], previous[j - 1]))
        previous = current
    return previous[-1]


def similarity_score(correct: str, submitted: str) -> int:
    """0..100 score from normalized edit distance; empty vs empty is a perfect match."""
    correct = correct.lower().strip()
    submitted = submitted.lower().strip()
    max_length = max(len(correct), len(submitted))
    if max_length == 0:
        return 100
    similarity = 1 - levenshtein_distance(correct, submitted) / max_length
    return round_half_up(similarity * 100)


def score_similarity(correct: str, submitted: str) -> EvaluationResult:
    """Partial credit for english free text."""
    if correct.lower().strip() == submitted.lower().strip():
        return EvaluationResult(is_correct=True, score=100)

    score = similarity_score(correct, submitted)
    if score >= PASS_SCORE:
        feedback = "Close enough! Good answer."
    elif score >= ALMOST_SCORE:
        feedback = f'Almost! The expected answer was "{correct}"'
    else:
        feedback = f'The correct answer was "{correct}"'
    return EvaluationResult(is_correct=score >= PASS_SCORE, score=score, feedback=feedback)


def score_spelling(
    correct: str,
    submitted: str,
    tolerance: Literal["strict", "lenient"] = "strict",
) -> EvaluationResult:
    """Single-word spelling: a typo earns some points but is never correct."""
    correct_norm = correct.lower().strip()
    submitted_norm = submitted.lower().strip()
    if correct_norm == submitted_norm:
        return EvaluationResult(is_correct=True, score=100)

    distance = levenshtein_distance(correct_norm, submitted_norm)
    if distance <= SPELLING_TOLERANCE[tolerance]:
        return EvaluationResult(
            is_correct=False,
            score=max(100 - distance * TYPO_PENALTY, 0),
            feedback=f'Almost! You spelled it "{submitted}" but it should be "{correct}"',
        )
    return EvaluationResult(
        is_correct=False,
        score=0,
        feedback=f'The correct spelling is "{correct}"',
    )


class SimilarityEvaluator(BaseEvaluator):
    def __init__(self, name: str = "partial_credit"):
        super().__init__(name)

    async def evaluate(self, correct_answer: TextAnswer, user_answer: TextAnswer, question_text: str = "") -> EvaluationResult:
        return score_similarity(correct_answer.value, user_answer.value)


class SpellingEvaluator(BaseEvaluator):
    def __init__(self, tolerance: Literal["strict", "lenient"] = "strict"):
        super().__init__(f"spelling_{tolerance}")
        self.tolerance = tolerance

    async def evaluate(self, correct_answer: TextAnswer, user_answer: TextAnswer, question_text: str = "") -> EvaluationResult:
        return score_spelling(correct_answer.value, user_answer.value, self.tolerance)
