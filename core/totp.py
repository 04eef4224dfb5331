"""
TOTP (Time-based One-Time Password) implementation following RFC 6238.

Produces codes identical to Google Authenticator.
"""

import logging
import time
from typing import Optional, Union

from core import base32
from core.crypto import Algorithm, constant_time_compare
from core.errors import InvalidInputError
from core.hotp import DEFAULT_DIGITS, generate_hotp
from core.utils import validate_step, validate_window

logger = logging.getLogger(__name__)

DEFAULT_STEP = 30
DEFAULT_WINDOW = 1


def _now() -> int:
    return int(time.time())


def time_counter(timestamp: float, step: int = DEFAULT_STEP) -> int:
    """Return ``floor(timestamp / step)``."""
    validate_step(step)
    return int(timestamp // step)


def generate_totp(
    secret: str,
    timestamp: Optional[float] = None,
    step: int = DEFAULT_STEP,
    digits: int = DEFAULT_DIGITS,
    algorithm: Union[Algorithm, str] = Algorithm.SHA1,
) -> str:
    """
    Generate a TOTP code.

    Args:
        secret:    Base32-encoded secret.
        timestamp: Unix timestamp in seconds (uses the current time if None).
        step:      Time step in seconds (default 30).
        digits:    Number of digits in the OTP (default 6).
        algorithm: HMAC algorithm (default SHA1 for GA compatibility).

    Returns:
        OTP string, zero-padded to ``digits`` characters.

    Raises:
        InvalidEncodingError:      If ``secret`` is not valid Base32.
        UnsupportedAlgorithmError: If ``algorithm`` is not supported.
    """
    alg = Algorithm.parse(algorithm)
    t = timestamp if timestamp is not None else _now()
    counter = time_counter(t, step)
    return generate_hotp(base32.decode(secret), counter, digits, alg)


def remaining_seconds(step: int = DEFAULT_STEP, timestamp: Optional[float] = None) -> int:
    """Return seconds until the current TOTP window expires."""
    validate_step(step)
    t = timestamp if timestamp is not None else _now()
    return step - (int(t) % step)


def verify_totp(
    secret: str,
    token: str,
    timestamp: Optional[float] = None,
    window: int = DEFAULT_WINDOW,
    step: int = DEFAULT_STEP,
    digits: int = DEFAULT_DIGITS,
    algorithm: Union[Algorithm, str] = Algorithm.SHA1,
) -> bool:
    """
    Validate a TOTP token within ±``window`` time steps.

    The token is compared as given; callers that accept grouped input
    should pass it through :func:`core.utils.normalize_token` first.

    Args:
        secret:    Base32-encoded secret.
        token:     Token to validate.
        timestamp: Unix timestamp in seconds (uses the current time if None).
        window:    Allowed skew in steps (default 1).
        step:      Time step in seconds.
        digits:    Expected number of digits.
        algorithm: HMAC algorithm.

    Returns:
        True if the token is valid within the window.
    """
    alg = Algorithm.parse(algorithm)
    validate_window(window)
    validate_step(step)
    t = timestamp if timestamp is not None else _now()
    if t < 0:
        raise InvalidInputError(f"Timestamp must be non-negative, got {t}")

    for i in range(-window, window + 1):
        adjusted = t + i * step
        if adjusted < 0:
            # no counter exists before the epoch
            continue
        expected = generate_totp(secret, adjusted, step, digits, alg)
        if constant_time_compare(token, expected):
            logger.debug("TOTP accepted at step offset %d", i)
            return True

    logger.debug("TOTP rejected within window of %d step(s)", window)
    return False
