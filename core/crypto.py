"""
Cryptographic primitives for the OTP core.

HMAC            : delegated to ``cryptography`` (SHA1 / SHA256 / SHA512)
Comparison      : constant-time XOR accumulation
Randomness      : ``secrets`` CSPRNG
"""

import secrets
from enum import Enum
from typing import Union

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives import hmac as crypto_hmac

from core.errors import InvalidInputError, UnsupportedAlgorithmError


# ── Algorithms ───────────────────────────────────────────────────────────────

class Algorithm(str, Enum):
    """Supported HMAC algorithms."""

    SHA1 = "SHA1"
    SHA256 = "SHA256"
    SHA512 = "SHA512"

    @classmethod
    def parse(cls, value: Union["Algorithm", str]) -> "Algorithm":
        """
        Resolve ``value`` to a member of the closed set.

        Accepts members, ``"SHA1"``, ``"SHA-1"`` and lowercase spellings.

        Raises:
            UnsupportedAlgorithmError: For anything else.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().upper().replace("-", "")
            for member in cls:
                if member.value == key:
                    return member
        raise UnsupportedAlgorithmError(
            f"Unsupported algorithm {value!r}. Supported: SHA1, SHA256, SHA512."
        )


_HASHES: dict[Algorithm, type] = {
    Algorithm.SHA1: hashes.SHA1,
    Algorithm.SHA256: hashes.SHA256,
    Algorithm.SHA512: hashes.SHA512,
}


def hmac_digest(algorithm: Union[Algorithm, str], key: bytes, message: bytes) -> bytes:
    """
    Compute ``HMAC(key, message)`` with the selected hash.

    Args:
        algorithm: Member of :class:`Algorithm` (or its name).
        key:       Raw secret bytes.
        message:   Message bytes.

    Returns:
        Digest of 20, 32 or 64 bytes.
    """
    alg = Algorithm.parse(algorithm)
    mac = crypto_hmac.HMAC(bytes(key), _HASHES[alg]())
    mac.update(bytes(message))
    return mac.finalize()


# ── Comparison ───────────────────────────────────────────────────────────────

def constant_time_compare(a: str, b: str) -> bool:
    """
    Return True if *a* == *b* without exiting early on a mismatch.

    Strings of different length return False straight away; token length is
    a public setting, so only the content is protected. For equal lengths
    every character pair is XORed and OR-accumulated before the result is
    inspected.
    """
    if len(a) != len(b):
        return False

    result = 0
    for x, y in zip(a, b):
        result |= ord(x) ^ ord(y)
    return result == 0


# ── Randomness ───────────────────────────────────────────────────────────────

def generate_secret_bytes(length: int) -> bytes:
    """Return ``length`` cryptographically random bytes."""
    if length < 1:
        raise InvalidInputError(f"Secret length must be positive, got {length}")
    return secrets.token_bytes(length)
