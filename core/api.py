"""
Public API for secret provisioning, token generation and verification.

Each operation has one canonical form that takes an options dataclass.
Shorthand call forms (a bare secret string, a bare URL) are adapted onto
it::

    info = generate_secret("Example", "alice@example.com")
    token = generate_token(info.secret)
    verify_token(info.secret, "123 456")
    verify_token(VerifyOptions(secret=info.secret, token=token, window=2))
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from core import base32
from core.crypto import Algorithm, generate_secret_bytes
from core.errors import InvalidInputError
from core.hotp import DEFAULT_DIGITS
from core.totp import DEFAULT_STEP, DEFAULT_WINDOW, generate_totp, verify_totp
from core.utils import normalize_token
from qr.generator import generate_qr_code_base64, generate_qr_code_svg
from qr.uri import OTPAUTH_PREFIX, build_otpauth_uri

logger = logging.getLogger(__name__)

DEFAULT_SECRET_LENGTH = 20      # 160-bit secret
MIN_SECRET_LENGTH = 10          # 80 bits, RFC 4226 minimum


class QRCodeFormat(str, Enum):
    """QR code output formats."""

    BASE64 = "base64"
    SVG = "svg"


# ── Option / result types ─────────────────────────────────────────────────────

@dataclass(frozen=True)
class SecretOptions:
    issuer: str
    account_name: str
    secret_length: int = DEFAULT_SECRET_LENGTH


@dataclass(frozen=True)
class SecretInfo:
    """A freshly generated secret and its provisioning URI."""

    secret: str          # base32, no padding
    otp_auth_url: str
    issuer: str
    account_name: str


@dataclass(frozen=True)
class TokenOptions:
    secret: str
    step: int = DEFAULT_STEP
    digits: int = DEFAULT_DIGITS
    algorithm: Algorithm = Algorithm.SHA1
    timestamp: Optional[float] = None   # None means "now"


@dataclass(frozen=True)
class VerifyOptions:
    secret: str
    token: str
    window: int = DEFAULT_WINDOW
    step: int = DEFAULT_STEP
    digits: int = DEFAULT_DIGITS
    algorithm: Algorithm = Algorithm.SHA1
    timestamp: Optional[float] = None   # None means "now"


@dataclass(frozen=True)
class QRCodeOptions:
    otp_auth_url: str
    format: QRCodeFormat = QRCodeFormat.BASE64


# ── Secrets ───────────────────────────────────────────────────────────────────

def generate_secret(
    options: Union[SecretOptions, str],
    account_name: Optional[str] = None,
    secret_length: int = DEFAULT_SECRET_LENGTH,
) -> SecretInfo:
    """
    Generate a random Base32 secret and its otpauth URI.

    Args:
        options:       :class:`SecretOptions`, or the issuer name.
        account_name:  Account name when ``options`` is the issuer.
        secret_length: Secret size in bytes when ``options`` is the issuer.

    Returns:
        :class:`SecretInfo`.

    Raises:
        InvalidInputError: If issuer or account name is missing.
    """
    if not isinstance(options, SecretOptions):
        options = SecretOptions(
            issuer=options,
            account_name=account_name or "",
            secret_length=secret_length,
        )

    if not options.issuer or not options.issuer.strip():
        raise InvalidInputError("Issuer and account name are required")
    if not options.account_name or not options.account_name.strip():
        raise InvalidInputError("Issuer and account name are required")
    if options.secret_length < MIN_SECRET_LENGTH:
        logger.warning(
            "Secret length of %d bytes is below the recommended %d bytes",
            options.secret_length,
            MIN_SECRET_LENGTH,
        )

    secret = base32.encode(generate_secret_bytes(options.secret_length))
    url = build_otpauth_uri(
        account_name=options.account_name,
        secret=secret,
        issuer=options.issuer,
    )
    logger.debug("Generated %d-byte secret for issuer %r", options.secret_length, options.issuer)
    return SecretInfo(
        secret=secret,
        otp_auth_url=url,
        issuer=options.issuer,
        account_name=options.account_name,
    )


# ── Tokens ────────────────────────────────────────────────────────────────────

def _has_key(secret: str) -> bool:
    """True if ``secret`` decodes to at least one key byte."""
    return bool(secret) and len(base32.decode(secret)) > 0


def generate_token(options: Union[TokenOptions, str]) -> str:
    """
    Generate the TOTP token for a Base32 secret.

    Args:
        options: :class:`TokenOptions`, or just the secret.

    Returns:
        Token string.

    Raises:
        InvalidInputError:    If the secret is empty or decodes to no bytes.
        InvalidEncodingError: If the secret is not valid Base32.
    """
    if not isinstance(options, TokenOptions):
        options = TokenOptions(secret=options)

    if not _has_key(options.secret):
        raise InvalidInputError("Secret is required")

    return generate_totp(
        options.secret,
        timestamp=options.timestamp,
        step=options.step,
        digits=options.digits,
        algorithm=options.algorithm,
    )


def verify_token(options: Union[VerifyOptions, str], token: Optional[str] = None) -> bool:
    """
    Verify a user-supplied TOTP token.

    Spaces and hyphens in the token are ignored, so ``"123 456"`` and
    ``"123-456"`` verify like ``"123456"``.

    Args:
        options: :class:`VerifyOptions`, or the secret.
        token:   Token to check when ``options`` is the secret.

    Returns:
        True if the token matches within the window.

    Raises:
        InvalidInputError:    If the secret or token is empty.
        InvalidEncodingError: If the secret is not valid Base32.
    """
    if not isinstance(options, VerifyOptions):
        if not token:
            raise InvalidInputError("Token is required")
        options = VerifyOptions(secret=options, token=token)

    candidate = normalize_token(options.token or "")
    if not _has_key(options.secret) or not candidate:
        raise InvalidInputError("Secret and token are required")

    return verify_totp(
        options.secret,
        candidate,
        timestamp=options.timestamp,
        window=options.window,
        step=options.step,
        digits=options.digits,
        algorithm=options.algorithm,
    )


# ── QR codes ──────────────────────────────────────────────────────────────────

def generate_qr_code(
    options: Union[QRCodeOptions, str],
    format: Union[QRCodeFormat, str] = QRCodeFormat.BASE64,
) -> str:
    """
    Render an otpauth URI as a QR code.

    Args:
        options: :class:`QRCodeOptions`, or the otpauth URI.
        format:  Output format when ``options`` is the URI.

    Returns:
        SVG text, or a ``data:image/png;base64,`` URL.

    Raises:
        InvalidInputError: On an empty or non-otpauth URL, or unknown format.
    """
    if isinstance(options, QRCodeOptions):
        url, fmt = options.otp_auth_url, options.format
    else:
        url, fmt = options, format

    if not url:
        raise InvalidInputError("OTP Auth URL is required")
    if not url.startswith(OTPAUTH_PREFIX):
        raise InvalidInputError("Invalid OTP Auth URL")

    try:
        fmt = QRCodeFormat(fmt)
    except ValueError:
        raise InvalidInputError(f"Unknown QR code format {fmt!r}. Expected base64 or svg.")

    if fmt is QRCodeFormat.SVG:
        return generate_qr_code_svg(url)
    return generate_qr_code_base64(url)
