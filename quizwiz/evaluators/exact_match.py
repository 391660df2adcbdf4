# quizwiz/evaluators/exact_match.py
from quizwiz.evaluators.base_evaluator import BaseEvaluator
from quizwiz.schemas.answer_schemas import (
    BooleanAnswer,
    ChoiceAnswer,
    EvaluationResult,
    NumberAnswer,
    TextAnswer,
)


def _normalize(text: str) -> str:
    return text.lower().strip()


def _binary_result(is_correct: bool, shown_answer: str) -> EvaluationResult:
    return EvaluationResult(
        is_correct=is_correct,
        score=100 if is_correct else 0,
        feedback=None if is_correct else f"The correct answer was {shown_answer}",
    )


def evaluate_number(correct_answer: NumberAnswer, user_answer: NumberAnswer) -> EvaluationResult:
    """Math answers: exact numeric match, no tolerance."""
    return _binary_result(correct_answer.value == user_answer.value, str(correct_answer.value))


def evaluate_boolean(correct_answer: BooleanAnswer, user_answer: BooleanAnswer) -> EvaluationResult:
    return _binary_result(
        correct_answer.value == user_answer.value,
        "True" if correct_answer.value else "False",
    )


def evaluate_choice(correct_answer: ChoiceAnswer, user_answer: ChoiceAnswer, quoted: bool = True) -> EvaluationResult:
    """Multiple choice; science feedback shows the option bare, english quotes it."""
    return _binary_result(
        _normalize(correct_answer.value) == _normalize(user_answer.value),
        f'"{correct_answer.value}"' if quoted else correct_answer.value,
    )


def evaluate_text(correct_answer: TextAnswer, user_answer: TextAnswer) -> EvaluationResult:
    """English text in exact mode (fill-in-the-blank)."""
    return _binary_result(
        _normalize(correct_answer.value) == _normalize(user_answer.value),
        f'"{correct_answer.value}"',
    )


class ExactMatchEvaluator(BaseEvaluator):
    """Binary correctness checks, one function per answer variant."""

    checks = {
        "number": evaluate_number,
        "boolean": evaluate_boolean,
        "choice": evaluate_choice,
        "text": evaluate_text,
    }

    def __init__(self, name: str = "exact", quote_choices: bool = True):
        super().__init__(name)
        self.quote_choices = quote_choices

    def supports(self, answer_type: str) -> bool:
        return answer_type in self.checks

    async def evaluate(self, correct_answer, user_answer, question_text: str = "") -> EvaluationResult:
        if correct_answer.type == "choice":
            return evaluate_choice(correct_answer, user_answer, quoted=self.quote_choices)
        return self.checks[correct_answer.type](correct_answer, user_answer)
