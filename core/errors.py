"""
Exception types raised by the OTP core.

Every error derives from :class:`ValueError` so callers that already guard
with ``except ValueError`` keep working.
"""


class OTPError(ValueError):
    """Base class for all OTP errors."""


class InvalidInputError(OTPError):
    """A required value is missing or outside its accepted range."""


class InvalidEncodingError(OTPError):
    """A Base32 string contains a character outside the alphabet."""

    def __init__(self, character: str) -> None:
        self.character = character
        super().__init__(f"Invalid Base32 character: {character!r}")


class UnsupportedAlgorithmError(OTPError):
    """The requested HMAC algorithm is not SHA1, SHA256 or SHA512."""
