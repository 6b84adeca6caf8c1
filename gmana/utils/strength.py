"""
Heuristic password strength scoring.
"""

import re
import string
from typing import List, NamedTuple

from .password_generator import PasswordGenerator

VERY_WEAK = "Very Weak"
WEAK = "Weak"
FAIR = "Fair"
GOOD = "Good"
STRONG = "Strong"
VERY_STRONG = "Very Strong"

# Checked from the highest threshold down
LEVEL_THRESHOLDS = (
    (90, VERY_STRONG),
    (75, STRONG),
    (60, GOOD),
    (40, FAIR),
    (20, WEAK),
)

_LOWERCASE = frozenset(string.ascii_lowercase)
_UPPERCASE = frozenset(string.ascii_uppercase)
_DIGITS = frozenset(string.digits)
_SYMBOLS = frozenset(PasswordGenerator.SYMBOLS + PasswordGenerator.EXTRA_SYMBOLS)

_REPEAT_PATTERN = re.compile(r"(.)\1{2,}")
_SEQUENCE_PATTERN = re.compile(r"123|abc|qwe", re.IGNORECASE)


class StrengthResult(NamedTuple):
    """Strength score, qualitative level and improvement hints."""
    score: int
    level: str
    feedback: List[str]


def strength_level(score: int) -> str:
    """Map a clamped score to its qualitative level."""
    for threshold, level in LEVEL_THRESHOLDS:
        if score >= threshold:
            return level
    return VERY_WEAK


def calculate_strength(password: str) -> StrengthResult:
    """
    Score a password with an additive heuristic.

    Length and character variety add points, repeated runs and common
    sequences subtract them. The final score never drops below zero.

    Args:
        password: Password to score (any string, including empty)

    Returns:
        StrengthResult with score, level and feedback
    """
    score = 0
    feedback: List[str] = []
    chars = set(password)

    # Length scoring
    if len(password) >= 12:
        score += 25
    elif len(password) >= 8:
        score += 15
    elif len(password) >= 6:
        score += 10
    else:
        feedback.append("Password should be at least 8 characters long")

    # Character variety scoring
    if chars & _LOWERCASE:
        score += 15
    else:
        feedback.append("Add lowercase letters")

    if chars & _UPPERCASE:
        score += 15
    else:
        feedback.append("Add uppercase letters")

    if chars & _DIGITS:
        score += 15
    else:
        feedback.append("Add numbers")

    if chars & _SYMBOLS:
        score += 20
    else:
        feedback.append("Add special characters")

    # Pattern penalties
    if _REPEAT_PATTERN.search(password):
        score -= 10
        feedback.append("Avoid repeating characters")

    if _SEQUENCE_PATTERN.search(password):
        score -= 15
        feedback.append("Avoid common sequences")

    score = max(0, score)

    return StrengthResult(score=score, level=strength_level(score), feedback=feedback)
