"""Tests for core.api."""

import logging
import re
import time

import pytest

from core import base32
from core.api import (
    QRCodeFormat,
    QRCodeOptions,
    SecretOptions,
    TokenOptions,
    VerifyOptions,
    generate_qr_code,
    generate_secret,
    generate_token,
    verify_token,
)
from core.crypto import Algorithm
from core.errors import InvalidEncodingError, InvalidInputError

RFC_SECRET_B32 = "GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ"


# ── Fixtures ──────────────────────────────────────────────────────────────────

@pytest.fixture()
def fixed_secret_bytes(monkeypatch: pytest.MonkeyPatch) -> None:
    """Make secret generation return the RFC 4226 key."""
    monkeypatch.setattr(
        "core.api.generate_secret_bytes", lambda length: b"12345678901234567890"[:length]
    )


@pytest.fixture()
def frozen_clock(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(time, "time", lambda: 59.0)


# ── generate_secret ───────────────────────────────────────────────────────────

def test_generate_secret_defaults() -> None:
    info = generate_secret(SecretOptions(issuer="TestApp", account_name="test@example.com"))
    assert re.fullmatch(r"[A-Z2-7]{32}", info.secret)
    assert len(base32.decode(info.secret)) == 20
    assert info.issuer == "TestApp"
    assert info.account_name == "test@example.com"
    assert info.otp_auth_url.startswith("otpauth://totp/")


def test_generate_secret_url_shape(fixed_secret_bytes: None) -> None:
    info = generate_secret("My App", "alice@example.com")
    assert info.secret == RFC_SECRET_B32
    assert info.otp_auth_url == (
        "otpauth://totp/My%20App:alice%40example.com"
        f"?secret={RFC_SECRET_B32}&issuer=My%20App"
    )


def test_generate_secret_custom_length() -> None:
    info = generate_secret("TestApp", "bob", secret_length=32)
    assert len(base32.decode(info.secret)) == 32


def test_generate_secret_unique() -> None:
    a = generate_secret("TestApp", "bob").secret
    b = generate_secret("TestApp", "bob").secret
    assert a != b


@pytest.mark.parametrize(
    "issuer,account",
    [("", "bob"), ("TestApp", ""), ("   ", "bob"), ("TestApp", None)],
)
def test_generate_secret_requires_issuer_and_account(issuer: str, account: str) -> None:
    with pytest.raises(InvalidInputError, match="required"):
        generate_secret(issuer, account)


def test_generate_secret_short_length_warns(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="core.api"):
        generate_secret("TestApp", "bob", secret_length=5)
    assert "below the recommended" in caplog.text


def test_generate_secret_zero_length_raises() -> None:
    with pytest.raises(InvalidInputError):
        generate_secret("TestApp", "bob", secret_length=0)


# ── generate_token ────────────────────────────────────────────────────────────

def test_generate_token_shorthand(frozen_clock: None) -> None:
    assert generate_token(RFC_SECRET_B32) == "287082"


def test_generate_token_options() -> None:
    token = generate_token(
        TokenOptions(secret=RFC_SECRET_B32, timestamp=1111111109, digits=8)
    )
    assert token == "07081804"


def test_generate_token_honours_zero_timestamp() -> None:
    assert generate_token(TokenOptions(secret=RFC_SECRET_B32, timestamp=0)) == "755224"


def test_generate_token_custom_step() -> None:
    # t=59 with a 60s step is counter 0
    assert generate_token(TokenOptions(secret=RFC_SECRET_B32, timestamp=59, step=60)) == "755224"


def test_generate_token_algorithm_by_name() -> None:
    secret = base32.encode(b"12345678901234567890123456789012")
    token = generate_token(
        TokenOptions(secret=secret, timestamp=59, digits=8, algorithm="SHA-256")
    )
    assert token == "46119246"


def test_generate_token_requires_secret() -> None:
    with pytest.raises(InvalidInputError, match="Secret"):
        generate_token("")


@pytest.mark.parametrize("secret", ["   ", "A", " \n\t", "a"])
def test_generate_token_rejects_secret_without_key_bytes(secret: str) -> None:
    with pytest.raises(InvalidInputError, match="Secret"):
        generate_token(TokenOptions(secret=secret, timestamp=59))


@pytest.mark.parametrize("secret", ["   ", "A"])
def test_verify_token_rejects_secret_without_key_bytes(secret: str) -> None:
    with pytest.raises(InvalidInputError, match="required"):
        verify_token(VerifyOptions(secret=secret, token="287082", timestamp=59))


@pytest.mark.parametrize("token", ["   ", "- -", "---"])
def test_verify_token_rejects_separator_only_token(token: str) -> None:
    with pytest.raises(InvalidInputError, match="required"):
        verify_token(RFC_SECRET_B32, token)


def test_generate_token_bad_secret() -> None:
    with pytest.raises(InvalidEncodingError):
        generate_token("0189")


def test_generate_token_unsupported_algorithm() -> None:
    with pytest.raises(ValueError, match="algorithm"):
        generate_token(TokenOptions(secret=RFC_SECRET_B32, algorithm="MD5"))


# ── verify_token ──────────────────────────────────────────────────────────────

def test_verify_token_shorthand(frozen_clock: None) -> None:
    assert verify_token(RFC_SECRET_B32, "287082")
    assert not verify_token(RFC_SECRET_B32, "000000")


@pytest.mark.parametrize("token", ["287 082", "287-082", " 28 70 82 ", "2-8-7 0-8-2"])
def test_verify_token_normalizes_separators(token: str) -> None:
    options = VerifyOptions(secret=RFC_SECRET_B32, token=token, timestamp=59, window=0)
    assert verify_token(options)


def test_verify_token_window() -> None:
    assert not verify_token(
        VerifyOptions(secret=RFC_SECRET_B32, token="755224", timestamp=59, window=0)
    )
    assert verify_token(
        VerifyOptions(secret=RFC_SECRET_B32, token="755224", timestamp=59, window=1)
    )


def test_verify_token_roundtrip() -> None:
    info = generate_secret("TestApp", "bob")
    token = generate_token(info.secret)
    assert verify_token(info.secret, token)


@pytest.mark.parametrize("secret,token", [(RFC_SECRET_B32, ""), (RFC_SECRET_B32, None)])
def test_verify_token_requires_token(secret: str, token: str) -> None:
    with pytest.raises(InvalidInputError, match="Token"):
        verify_token(secret, token)


def test_verify_token_requires_secret() -> None:
    with pytest.raises(InvalidInputError, match="required"):
        verify_token("", "123456")
    with pytest.raises(InvalidInputError, match="required"):
        verify_token(VerifyOptions(secret=RFC_SECRET_B32, token=""))


# ── generate_qr_code ──────────────────────────────────────────────────────────

def test_generate_qr_code_base64() -> None:
    info = generate_secret("TestApp", "bob")
    image = generate_qr_code(info.otp_auth_url)
    assert image.startswith("data:image/png;base64,")


def test_generate_qr_code_svg_options() -> None:
    info = generate_secret("TestApp", "bob")
    image = generate_qr_code(QRCodeOptions(otp_auth_url=info.otp_auth_url, format=QRCodeFormat.SVG))
    assert "<svg" in image


def test_generate_qr_code_format_by_name() -> None:
    image = generate_qr_code("otpauth://totp/bob?secret=JBSWY3DPEHPK3PXP", "svg")
    assert "<svg" in image


@pytest.mark.parametrize("url", ["", "https://example.com", "otpauth:/totp/x"])
def test_generate_qr_code_rejects_url(url: str) -> None:
    with pytest.raises(InvalidInputError):
        generate_qr_code(url)


def test_generate_qr_code_rejects_format() -> None:
    with pytest.raises(InvalidInputError, match="format"):
        generate_qr_code("otpauth://totp/bob?secret=JBSWY3DPEHPK3PXP", "gif")


def test_algorithm_default_is_sha1() -> None:
    assert TokenOptions(secret=RFC_SECRET_B32).algorithm is Algorithm.SHA1
    assert VerifyOptions(secret=RFC_SECRET_B32, token="1").window == 1
