# quizwiz/services/scoring_service.py
from typing import Dict, Optional

from quizwiz.core.errors import InvalidHintCount, InvalidQuestion, InvalidTimeSpent
from quizwiz.utils.numbers import round_half_up

BASE_POINTS: Dict[str, int] = {"easy": 10, "medium": 20, "hard": 30}
HINT_PENALTY = 2
MAX_HINTS = 4

# (minimum accuracy %, multiplier), checked top-down
ACCURACY_STEPS = ((90, 1.5), (70, 1.2), (50, 1.0))
LOW_ACCURACY_MULTIPLIER = 0.8


def check_hints(hints_used: int):
    if not 0 <= hints_used <= MAX_HINTS:
        raise InvalidHintCount(f"hints_used must be between 0 and {MAX_HINTS}, got {hints_used}")


def check_time_ms(time_ms: Optional[int]):
    if time_ms is not None and time_ms < 0:
        raise InvalidTimeSpent(f"time_ms must be 0 or more, got {time_ms}")


def score_question(is_correct: bool, hints_used: int, difficulty: str) -> int:
    """
    Points for one answer: difficulty base minus 2 per hint, never below 1
    for a correct answer; wrong answers earn nothing.
    """
    check_hints(hints_used)
    if difficulty not in BASE_POINTS:
        raise InvalidQuestion(f"Unknown difficulty '{difficulty}'")
    if not is_correct:
        return 0
    return max(BASE_POINTS[difficulty] - HINT_PENALTY * hints_used, 1)


def accuracy_multiplier(accuracy_percent: float) -> float:
    for threshold, multiplier in ACCURACY_STEPS:
        if accuracy_percent >= threshold:
            return multiplier
    return LOW_ACCURACY_MULTIPLIER


def accuracy_percent(correct_count: int, answered_count: int) -> int:
    if answered_count <= 0:
        return 0
    return round_half_up(correct_count / answered_count * 100)


def finalize_score(raw_score: int, correct_count: int, answered_count: int) -> int:
    """Apply the accuracy multiplier once, at session completion."""
    accuracy = accuracy_percent(correct_count, answered_count)
    return round_half_up(raw_score * accuracy_multiplier(accuracy))
