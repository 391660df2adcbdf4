# quizwiz/evaluators/base_evaluator.py
from abc import ABC, abstractmethod

from quizwiz.schemas.answer_schemas import EvaluationResult


class BaseEvaluator(ABC):
    """
    Base class for all evaluation strategies (exact, partial credit, rubric).
    Every evaluator must implement the .evaluate() method.
    """

    def __init__(self, name: str):
        self.name = name

    @abstractmethod
    async def evaluate(self, correct_answer, user_answer, question_text: str = "") -> EvaluationResult:
        """
        Judge one submitted answer.

        Parameters:
            correct_answer: the question's AnswerValue
            user_answer: the learner's AnswerValue, same variant as correct_answer
            question_text: the prompt shown to the learner (used by rubric grading)

        Returns:
            An EvaluationResult. Evaluators never raise for well-typed input.
        """
        pass

    def __repr__(self):
        return f"<Evaluator name={self.name}>"
