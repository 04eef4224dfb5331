"""
HOTP (HMAC-based One-Time Password) implementation following RFC 4226.
"""

import struct
from typing import Optional, Union

from core.crypto import Algorithm, constant_time_compare, hmac_digest
from core.errors import InvalidInputError
from core.utils import validate_digits

DEFAULT_DIGITS = 6
DEFAULT_LOOK_AHEAD = 10

_COUNTER_MASK = 0xFFFFFFFFFFFFFFFF


def counter_bytes(counter: int) -> bytes:
    """Encode ``counter`` as the 8-byte big-endian HMAC message."""
    if counter < 0:
        raise InvalidInputError(f"Counter must be non-negative, got {counter}")
    return struct.pack(">Q", counter & _COUNTER_MASK)


def truncate(digest: bytes, digits: int) -> str:
    """
    Dynamic truncation (RFC 4226 §5.3).

    Args:
        digest: HMAC output.
        digits: Number of OTP digits.

    Returns:
        Zero-padded OTP string.
    """
    offset = digest[-1] & 0x0F
    code = (
        (digest[offset] & 0x7F) << 24
        | (digest[offset + 1] & 0xFF) << 16
        | (digest[offset + 2] & 0xFF) << 8
        | (digest[offset + 3] & 0xFF)
    )
    otp = code % (10**digits)
    return str(otp).zfill(digits)


def generate_hotp(
    secret_bytes: bytes,
    counter: int,
    digits: int = DEFAULT_DIGITS,
    algorithm: Union[Algorithm, str] = Algorithm.SHA1,
) -> str:
    """
    Generate an HOTP code.

    The truncated value is a 31-bit integer (at most 2147483647), so codes
    longer than 10 digits carry no extra entropy: the leading positions are
    always zero padding.

    Args:
        secret_bytes: Raw decoded secret bytes.
        counter:      Synchronisation counter value (unsigned 64-bit).
        digits:       Number of OTP digits (at least 1).
        algorithm:    HMAC algorithm.

    Returns:
        Zero-padded OTP string.

    Raises:
        UnsupportedAlgorithmError: If ``algorithm`` is not in the closed set.
        InvalidInputError:         On digits below 1 or a negative counter.
    """
    alg = Algorithm.parse(algorithm)
    validate_digits(digits)
    digest = hmac_digest(alg, secret_bytes, counter_bytes(counter))
    return truncate(digest, digits)


def validate_hotp(
    token: str,
    secret_bytes: bytes,
    counter: int,
    digits: int = DEFAULT_DIGITS,
    algorithm: Union[Algorithm, str] = Algorithm.SHA1,
    look_ahead: int = DEFAULT_LOOK_AHEAD,
) -> Optional[int]:
    """
    Validate an HOTP token and return the synchronised counter value.

    Args:
        token:        Token to validate.
        secret_bytes: Raw secret bytes.
        counter:      Current counter.
        digits:       Expected OTP length.
        algorithm:    HMAC algorithm.
        look_ahead:   Max steps to search ahead for resync.

    Returns:
        The new counter value if valid, or None if invalid.
    """
    if look_ahead < 0:
        raise InvalidInputError(f"look_ahead must not be negative, got {look_ahead}")
    alg = Algorithm.parse(algorithm)
    for i in range(look_ahead + 1):
        expected = generate_hotp(secret_bytes, counter + i, digits, alg)
        if constant_time_compare(token, expected):
            return counter + i + 1
    return None
