# quizwiz/utils/numbers.py
import math


def round_half_up(x: float) -> int:
    """Round halves towards +infinity (2.5 -> 3), unlike Python's round()."""
    return int(math.floor(x + 0.5))
