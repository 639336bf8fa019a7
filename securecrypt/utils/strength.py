import re

from securecrypt.models import PasswordStrength

MIN_LENGTH = 8

_BONUSES = (
    (re.compile(r"[A-Z]"), 0.5),
    (re.compile(r"[a-z]"), 0.5),
    (re.compile(r"[0-9]"), 0.5),
    (re.compile(r"[^A-Za-z0-9]"), 1.0),
    # Combinations of character classes
    (re.compile(r"[A-Z].*[0-9]|[0-9].*[A-Z]"), 0.5),
    (re.compile(r"[a-z].*[0-9]|[0-9].*[a-z]"), 0.5),
    (re.compile(r"[A-Z].*[^A-Za-z0-9]|[^A-Za-z0-9].*[A-Z]"), 0.5),
    (re.compile(r"[a-z].*[^A-Za-z0-9]|[^A-Za-z0-9].*[a-z]"), 0.5),
)


def evaluate_password_strength(password: str) -> PasswordStrength:
    """
    Score a password from 0 (very weak) to 4 (very strong).

    Length of 12+ and 16+ characters earns 1 and 2 points respectively;
    each character class and each pairing of classes adds a partial point.
    Passwords shorter than MIN_LENGTH always score 0. Advisory only: the
    cipher engine accepts any password.
    """
    if not password:
        return PasswordStrength(score=0, feedback="Enter a password")
    if len(password) < MIN_LENGTH:
        return PasswordStrength(score=0, feedback="Password is too short")

    score = 0.0
    if len(password) >= 16:
        score += 2
    elif len(password) >= 12:
        score += 1

    for pattern, bonus in _BONUSES:
        if pattern.search(password):
            score += bonus

    if score >= 4:
        feedback = "Very strong password"
    elif score >= 3:
        feedback = "Strong password"
    elif score >= 2:
        feedback = "Medium strength password"
    else:
        feedback = "Weak password"
    return PasswordStrength(score=min(4, int(score)), feedback=feedback)
