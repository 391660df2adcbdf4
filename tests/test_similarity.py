# tests/test_similarity.py
import pytest

from quizwiz.evaluators.similarity import (
    SpellingEvaluator,
    levenshtein_distance,
    score_similarity,
    score_spelling,
    similarity_score,
)
from quizwiz.schemas.answer_schemas import TextAnswer


def test_levenshtein_distance():
    assert levenshtein_distance("kitten", "sitting") == 3
    assert levenshtein_distance("", "abc") == 3
    assert levenshtein_distance("same", "same") == 0


def test_identical_and_empty_strings_score_full():
    assert similarity_score("apple", "apple") == 100
    assert similarity_score("Apple ", "apple") == 100
    assert similarity_score("", "") == 100


def test_similarity_drops_as_edits_grow():
    correct = "abcdefghij"
    scores = [similarity_score(correct, "x" * k + correct[k:]) for k in range(len(correct) + 1)]
    assert scores == sorted(scores, reverse=True)
    assert scores[1] == 90
    assert scores[-1] == 0


def test_partial_credit_feedback_bands():
    close = score_similarity("colour", "color")
    assert close.is_correct and close.score == 83
    assert close.feedback == "Close enough! Good answer."

    almost = score_similarity("kitten", "sitting")
    assert not almost.is_correct and almost.score == 57
    assert almost.feedback == 'Almost! The expected answer was "kitten"'

    wrong = score_similarity("cat", "dog")
    assert wrong.score == 0
    assert wrong.feedback == 'The correct answer was "cat"'

    exact = score_similarity("Cat", "cat")
    assert exact.is_correct and exact.score == 100 and exact.feedback is None


def test_spelling_typo_earns_points_but_is_wrong():
    result = score_spelling("necessary", "neccessary", "strict")
    assert result.is_correct is False
    assert result.score == 80
    assert result.feedback == 'Almost! You spelled it "neccessary" but it should be "necessary"'


def test_spelling_tolerance():
    # a transposition is two edits
    strict = score_spelling("because", "becuase", "strict")
    assert strict.score == 0
    assert strict.feedback == 'The correct spelling is "because"'

    lenient = score_spelling("because", "becuase", "lenient")
    assert lenient.score == 60
    assert not lenient.is_correct


@pytest.mark.asyncio
async def test_spelling_evaluator_name_and_exact_answer():
    evaluator = SpellingEvaluator("lenient")
    assert evaluator.name == "spelling_lenient"
    result = await evaluator.evaluate(TextAnswer(value="Rhythm"), TextAnswer(value="rhythm"))
    assert result.is_correct and result.score == 100
