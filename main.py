"""
totp-kit – command-line entry point.

Usage
-----
    python main.py secret --issuer Example --account alice@example.com
    python main.py token JBSWY3DPEHPK3PXP
    python main.py verify JBSWY3DPEHPK3PXP "123 456" --window 2
    python main.py qr "otpauth://totp/..." --format svg --output code.svg

Or, if installed as a package:
    totp-kit
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from core.api import (
    DEFAULT_SECRET_LENGTH,
    QRCodeFormat,
    SecretOptions,
    TokenOptions,
    VerifyOptions,
    generate_qr_code,
    generate_secret,
    generate_token,
    verify_token,
)
from core.crypto import Algorithm
from core.errors import OTPError
from core.hotp import DEFAULT_DIGITS
from core.totp import DEFAULT_STEP, DEFAULT_WINDOW, remaining_seconds
from core.utils import format_otp

logger = logging.getLogger("totp_kit")

EXIT_OK = 0
EXIT_REJECTED = 1
EXIT_ERROR = 2


# ── Logging setup ─────────────────────────────────────────────────────────────

def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


# ── Sub-commands ──────────────────────────────────────────────────────────────

def _cmd_secret(args: argparse.Namespace) -> int:
    info = generate_secret(
        SecretOptions(
            issuer=args.issuer,
            account_name=args.account,
            secret_length=args.length,
        )
    )
    print(info.secret)
    print(info.otp_auth_url)
    return EXIT_OK


def _cmd_token(args: argparse.Namespace) -> int:
    token = generate_token(
        TokenOptions(
            secret=args.secret,
            step=args.step,
            digits=args.digits,
            algorithm=args.algorithm,
            timestamp=args.timestamp,
        )
    )
    print(format_otp(token) if args.grouped else token)
    if args.timestamp is None:
        logger.info("Valid for another %ds", remaining_seconds(args.step))
    return EXIT_OK


def _cmd_verify(args: argparse.Namespace) -> int:
    ok = verify_token(
        VerifyOptions(
            secret=args.secret,
            token=args.token,
            window=args.window,
            step=args.step,
            digits=args.digits,
            algorithm=args.algorithm,
            timestamp=args.timestamp,
        )
    )
    print("valid" if ok else "invalid")
    return EXIT_OK if ok else EXIT_REJECTED


def _cmd_qr(args: argparse.Namespace) -> int:
    image = generate_qr_code(args.url, args.format)
    if args.output:
        Path(args.output).write_text(image, encoding="utf-8")
        logger.info("QR code written to %s", args.output)
    else:
        print(image)
    return EXIT_OK


# ── Argument parsing ──────────────────────────────────────────────────────────

def _add_otp_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--step", type=int, default=DEFAULT_STEP, help="time step in seconds")
    parser.add_argument("--digits", type=int, default=DEFAULT_DIGITS, help="token length")
    parser.add_argument(
        "--algorithm",
        type=Algorithm.parse,
        default=Algorithm.SHA1,
        help="SHA1, SHA256 or SHA512",
    )
    parser.add_argument(
        "--timestamp", type=float, default=None, help="unix time to use instead of now"
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="totp-kit",
        description="Generate and verify RFC 6238 one-time passwords.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p_secret = sub.add_parser("secret", help="generate a new secret and otpauth URI")
    p_secret.add_argument("--issuer", required=True)
    p_secret.add_argument("--account", required=True)
    p_secret.add_argument(
        "--length", type=int, default=DEFAULT_SECRET_LENGTH, help="secret size in bytes"
    )
    p_secret.set_defaults(func=_cmd_secret)

    p_token = sub.add_parser("token", help="print the current token for a secret")
    p_token.add_argument("secret")
    p_token.add_argument("--grouped", action="store_true", help="print as '123 456'")
    _add_otp_options(p_token)
    p_token.set_defaults(func=_cmd_token)

    p_verify = sub.add_parser("verify", help="check a token against a secret")
    p_verify.add_argument("secret")
    p_verify.add_argument("token")
    p_verify.add_argument("--window", type=int, default=DEFAULT_WINDOW)
    _add_otp_options(p_verify)
    p_verify.set_defaults(func=_cmd_verify)

    p_qr = sub.add_parser("qr", help="render an otpauth URI as a QR code")
    p_qr.add_argument("url")
    p_qr.add_argument(
        "--format",
        choices=[f.value for f in QRCodeFormat],
        default=QRCodeFormat.BASE64.value,
    )
    p_qr.add_argument("--output", help="write to a file instead of stdout")
    p_qr.set_defaults(func=_cmd_qr)

    return parser


# ── Main ──────────────────────────────────────────────────────────────────────

def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    _configure_logging(args.verbose)

    try:
        return args.func(args)
    except OTPError as exc:
        logger.error("%s", exc)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
