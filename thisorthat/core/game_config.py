"""
Configuration constants for the This or That game rules.
"""
import math
import re

# Correct-answer tags stored on questions, and the answer tags players submit.
CORRECT_ANSWERS = ("mom", "dad")
OPTION_A = "A"
OPTION_B = "B"
ANSWER_CHOICES = (OPTION_A, OPTION_B)
CORRECT_TO_CHOICE = {"mom": OPTION_A, "dad": OPTION_B}

THEMES = ("default", "baby-autumn")
DEFAULT_THEME = "default"

SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
TIEBREAKER_PATTERN = re.compile(r"^-?\d+(?:\.\d+)?$")

# Answer row key used for the tiebreaker slot (question_id is NULL in storage)
TIEBREAKER_KEY = "tiebreaker"


def expected_choice(correct_answer: str) -> str:
    """Map a question's correct-answer tag to the answer tag that matches it."""
    return CORRECT_TO_CHOICE.get(correct_answer, correct_answer)


def parse_number(value):
    """Return value as a finite float, or None when it is not a number."""
    if value is None or isinstance(value, bool):
        return None
    text = str(value).strip()
    if not text:
        return None
    try:
        number = float(text)
    except ValueError:
        return None
    if not math.isfinite(number):
        return None
    return number


def is_valid_tiebreaker_guess(value: str) -> bool:
    return bool(TIEBREAKER_PATTERN.match(value.strip()))
