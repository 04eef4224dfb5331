"""
Utility helpers shared by the OTP core and the provisioning layer.
"""

import re

from core.errors import InvalidInputError

_TOKEN_SEPARATORS = re.compile(r"[\s-]+")


# ── Tokens ────────────────────────────────────────────────────────────────────

def normalize_token(token: str) -> str:
    """
    Strip whitespace and hyphens from a user-supplied token.

    Authenticator apps often show codes grouped as ``123 456`` or
    ``123-456``.
    """
    return _TOKEN_SEPARATORS.sub("", token)


def format_otp(code: str, group: int = 3) -> str:
    """
    Format an OTP code with spaces for readability.

    Example::

        >>> format_otp("123456")
        "123 456"

    Args:
        code:  Digit string.
        group: Digit grouping size.

    Returns:
        Spaced OTP string.
    """
    return " ".join(code[i : i + group] for i in range(0, len(code), group))


# ── Validation ────────────────────────────────────────────────────────────────

def validate_digits(digits: int) -> None:
    if digits < 1:
        raise InvalidInputError(f"Digits must be at least 1, got {digits}.")


def validate_step(step: int) -> None:
    if step <= 0:
        raise InvalidInputError(f"Step must be a positive number of seconds, got {step}.")


def validate_window(window: int) -> None:
    if window < 0:
        raise InvalidInputError(f"Window must not be negative, got {window}.")
