# quizwiz/schemas/answer_schemas.py
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, BeforeValidator, Field, StrictFloat, StrictInt, TypeAdapter

SUBJECTS = ("math", "science", "english")
DIFFICULTIES = ("easy", "medium", "hard")

Subject = Literal["math", "science", "english"]
Difficulty = Literal["easy", "medium", "hard"]
EvaluationStrategy = Literal[
    "exact", "partial_credit", "spelling_strict", "spelling_lenient", "ai_rubric"
]


# ----------------------------------------------------------------------
# Answer variants (one tag per shape)
# ----------------------------------------------------------------------
class NumberAnswer(BaseModel):
    type: Literal["number"] = "number"
    # booleans are not numbers here
    value: Union[StrictInt, StrictFloat]


class BooleanAnswer(BaseModel):
    type: Literal["boolean"] = "boolean"
    value: bool


class ChoiceAnswer(BaseModel):
    type: Literal["choice"] = "choice"
    value: str


class ExplanationAnswer(BaseModel):
    type: Literal["explanation"] = "explanation"
    value: str
    keywords: Optional[List[str]] = None


class TextAnswer(BaseModel):
    type: Literal["text"] = "text"
    value: str


class CorrectionAnswer(BaseModel):
    type: Literal["correction"] = "correction"
    original: str
    corrected: str


def _default_number_tag(raw: Any) -> Any:
    # math answers are plain {"value": n} on the wire
    if isinstance(raw, dict) and "type" not in raw:
        return {**raw, "type": "number"}
    return raw


_TaggedAnswer = Annotated[
    Union[NumberAnswer, BooleanAnswer, ChoiceAnswer, ExplanationAnswer, TextAnswer, CorrectionAnswer],
    Field(discriminator="type"),
]
AnswerValue = Annotated[_TaggedAnswer, BeforeValidator(_default_number_tag)]

answer_adapter: TypeAdapter = TypeAdapter(AnswerValue)

# Which variants each subject accepts
SUBJECT_VARIANTS: Dict[str, tuple] = {
    "math": ("number",),
    "science": ("boolean", "choice", "explanation"),
    "english": ("text", "choice", "correction"),
}


def parse_answer(raw: Any):
    """Validate a stored/wire answer dict into its AnswerValue variant."""
    return answer_adapter.validate_python(raw)


def dump_answer(answer) -> Dict[str, Any]:
    return answer.model_dump(exclude_none=True)


# ----------------------------------------------------------------------
# Evaluation result
# ----------------------------------------------------------------------
class EvaluationResult(BaseModel):
    is_correct: bool
    score: int = Field(ge=0, le=100)
    feedback: Optional[str] = None


class RubricJudgment(BaseModel):
    """Shape the text-generation model must return when grading."""

    isCorrect: bool
    score: float = Field(ge=0, le=100)
    feedback: str


class EvaluateRequest(BaseModel):
    subject: Subject
    question_type: str = ""
    question_text: str = ""
    correct_answer: AnswerValue
    user_answer: AnswerValue
    evaluation_strategy: Optional[EvaluationStrategy] = None
