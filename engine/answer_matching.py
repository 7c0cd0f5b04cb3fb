"""Answer matching for typed numeric answers.

Accepts plain numbers ("12", "-3.5", "1,200") or fractions ("3/4").
Returns (is_correct, is_close) tuples.
"""
import re

DECIMALS = 3
TOLERANCE = 0.001
CLOSE_RATIO = 0.01

_FRACTION_RE = re.compile(r'^(-?\d+)\s*/\s*(-?\d+)$')


def parse_answer(text):
    """Parse typed input to a float, or None if it is not a number."""
    if text is None:
        return None
    if isinstance(text, (int, float)) and not isinstance(text, bool):
        return float(text)
    text = str(text).strip()
    if not text:
        return None

    if '/' in text:
        match = _FRACTION_RE.match(text)
        if not match:
            return None
        num, den = int(match.group(1)), int(match.group(2))
        if den == 0:
            return None
        return num / den

    return _to_number(text)


def check_answer(student_answer, correct_answer):
    """Check a typed answer against the expected value.

    Both sides are rounded to three decimals before comparing, so "1/3"
    matches 0.333. A wrong answer within 1% of a non-zero expected value
    is flagged close.
    Returns (is_correct: bool, is_close: bool).
    """
    student = parse_answer(student_answer)
    correct = parse_answer(correct_answer)
    if student is None or correct is None:
        return False, False

    s = round(student, DECIMALS)
    c = round(correct, DECIMALS)
    if abs(s - c) < TOLERANCE:
        return True, False

    if c != 0 and abs(s - c) / abs(c) < CLOSE_RATIO:
        return False, True
    return False, False


def _to_number(text):
    """Try to parse text as a number."""
    text = text.replace(',', '').strip()
    try:
        return float(text)
    except (ValueError, TypeError):
        return None
