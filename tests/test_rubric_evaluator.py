# tests/test_rubric_evaluator.py
import asyncio

import pytest

from quizwiz.evaluators import rubric_evaluator
from quizwiz.evaluators.rubric_evaluator import (
    RubricEvaluator,
    jaccard_word_similarity,
    science_explanation_fallback,
)
from quizwiz.schemas.answer_schemas import CorrectionAnswer, ExplanationAnswer
from tests.conftest import FakeLLM

PHOTOSYNTHESIS = ExplanationAnswer(
    value="Plants use sunlight energy in their leaves to make food",
    keywords=["sun", "energy", "leaves"],
)


@pytest.mark.asyncio
async def test_model_judgment_is_used_and_correctness_rederived():
    llm = FakeLLM(reply='{"isCorrect": false, "score": 85, "feedback": "Nice explanation"}')
    evaluator = RubricEvaluator(llm=llm, timeout=1.0)

    result = await evaluator.evaluate(
        PHOTOSYNTHESIS, ExplanationAnswer(value="The sun gives plants energy"), "How do plants eat?"
    )

    assert result.is_correct is True
    assert result.score == 85
    assert result.feedback == "Nice explanation"
    assert "How do plants eat?" in llm.calls[0]
    assert "Key concepts to look for: sun, energy, leaves" in llm.calls[0]


@pytest.mark.asyncio
async def test_json_embedded_in_prose_is_extracted():
    llm = FakeLLM(reply='Sure! {"isCorrect": true, "score": 40.4, "feedback": "Partly"} Hope this helps.')
    result = await RubricEvaluator(llm=llm).evaluate(PHOTOSYNTHESIS, ExplanationAnswer(value="food"))
    assert result.score == 40
    assert result.is_correct is False


@pytest.mark.asyncio
async def test_transport_error_falls_back_to_keywords():
    llm = FakeLLM(error=RuntimeError("connection reset"))
    result = await RubricEvaluator(llm=llm).evaluate(
        PHOTOSYNTHESIS, ExplanationAnswer(value="Plants use energy from the sun")
    )
    # 2 of 3 keywords
    assert result.score == 67
    assert result.is_correct is False
    assert result.feedback == "Try to include more key concepts like: sun, energy, leaves"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "reply",
    [
        "I cannot grade this",
        '{"isCorrect": true, "score": 150, "feedback": "Too generous"}',
        '{"score": 90}',
    ],
)
async def test_malformed_model_output_falls_back(reply):
    result = await RubricEvaluator(llm=FakeLLM(reply=reply)).evaluate(
        PHOTOSYNTHESIS, ExplanationAnswer(value="Leaves catch sun energy")
    )
    assert result.score == 100
    assert result.feedback == "Great answer! You included the key concepts."


@pytest.mark.asyncio
async def test_slow_model_times_out_to_fallback():
    llm = FakeLLM(reply='{"isCorrect": true, "score": 10, "feedback": "late"}', delay=1.0)
    result = await RubricEvaluator(llm=llm, timeout=0.05).evaluate(
        PHOTOSYNTHESIS, ExplanationAnswer(value="Leaves catch sun energy")
    )
    assert result.score == 100
    assert result.feedback != "late"


@pytest.mark.asyncio
async def test_cancelled_model_call_falls_back():
    llm = FakeLLM(error=asyncio.CancelledError())
    result = await RubricEvaluator(llm=llm).evaluate(
        CorrectionAnswer(original="She go to school", corrected="She goes to school"),
        CorrectionAnswer(original="She go to school", corrected="she goes to school "),
    )
    assert result.is_correct is True
    assert result.feedback == "Perfect correction!"


@pytest.mark.asyncio
async def test_no_client_configured_uses_fallback(monkeypatch):
    monkeypatch.setattr(rubric_evaluator, "build_default_client", lambda: None)
    result = await RubricEvaluator().evaluate(
        CorrectionAnswer(original="He don't know", corrected="He doesn't know"),
        CorrectionAnswer(original="He don't know", corrected="He do not know"),
    )
    assert result.is_correct is False
    assert result.score == 0
    assert result.feedback == 'The correct sentence is: "He doesn\'t know"'


def test_jaccard_fallback_without_keywords():
    assert jaccard_word_similarity("", "") == 0.0

    result = science_explanation_fallback(
        ExplanationAnswer(value="Water evaporates when heated by the sun"),
        ExplanationAnswer(value="water evaporates when the sun heats it"),
    )
    assert result.score == 71
    assert result.is_correct is True
    assert result.feedback == "Good job! Your answer shows understanding."
