"""
Build otpauth:// URIs as defined by the Google Authenticator Key URI Format.

Reference: https://github.com/google/google-authenticator/wiki/Key-Uri-Format
"""

import urllib.parse
from typing import Union

from core.crypto import Algorithm
from core.errors import InvalidInputError

OTPAUTH_PREFIX = "otpauth://"

# Characters JavaScript's encodeURIComponent leaves alone, on top of the
# letters, digits and "_.-~" that quote() never escapes.
_COMPONENT_SAFE = "!*'()"


def encode_component(text: str) -> str:
    """Percent-encode a label or query value (UTF-8, encodeURIComponent rules)."""
    return urllib.parse.quote(text, safe=_COMPONENT_SAFE)


def build_otpauth_uri(
    account_name: str,
    secret: str,
    issuer: str = "",
    otp_type: str = "totp",
    algorithm: Union[Algorithm, str] = Algorithm.SHA1,
    digits: int = 6,
    period: int = 30,
    counter: int = 0,
) -> str:
    """
    Build an otpauth:// URI.

    With default settings the result is exactly::

        otpauth://totp/<issuer>:<account>?secret=<secret>&issuer=<issuer>

    Non-default algorithm, digits and period follow ``issuer``; HOTP URIs
    always carry ``counter``.
    """
    if otp_type not in ("totp", "hotp"):
        raise InvalidInputError(f"Unknown OTP type '{otp_type}'. Expected totp or hotp.")
    alg = Algorithm.parse(algorithm)

    label = encode_component(account_name)
    if issuer:
        label = f"{encode_component(issuer)}:{label}"

    params = [("secret", secret.upper().replace("=", ""))]
    if issuer:
        params.append(("issuer", issuer))
    if alg is not Algorithm.SHA1:
        params.append(("algorithm", alg.value))
    if digits != 6:
        params.append(("digits", str(digits)))
    if otp_type == "totp":
        if period != 30:
            params.append(("period", str(period)))
    else:
        params.append(("counter", str(counter)))

    query = "&".join(f"{key}={encode_component(value)}" for key, value in params)
    return f"{OTPAUTH_PREFIX}{otp_type}/{label}?{query}"
