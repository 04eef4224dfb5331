"""
RFC 4648 Base32 codec for OTP secrets.

Authenticator apps exchange secrets without ``=`` padding, so this codec
never emits padding and never accepts it. Decoding is case-insensitive and
ignores whitespace.
"""

from core.errors import InvalidEncodingError

ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567"

_LOOKUP: dict[str, int] = {ch: i for i, ch in enumerate(ALPHABET)}


def encode(data: bytes) -> str:
    """
    Encode raw bytes as unpadded uppercase Base32.

    Args:
        data: Bytes to encode.

    Returns:
        Base32 text of length ``ceil(len(data) * 8 / 5)``.
    """
    bits = 0
    value = 0
    out = []

    for byte in bytes(data):
        value = ((value << 8) | byte) & 0xFFF
        bits += 8
        while bits >= 5:
            out.append(ALPHABET[(value >> (bits - 5)) & 0x1F])
            bits -= 5

    if bits > 0:
        out.append(ALPHABET[(value << (5 - bits)) & 0x1F])

    return "".join(out)


def decode(text: str) -> bytes:
    """
    Decode Base32 text to raw bytes.

    Whitespace is stripped and the input is uppercased first. Fewer than 8
    bits left over after the last character are dropped, not rejected.

    Args:
        text: Base32 string.

    Returns:
        Decoded bytes.

    Raises:
        InvalidEncodingError: On a character outside ``A-Z2-7``.
    """
    cleaned = "".join(text.split()).upper()

    bits = 0
    value = 0
    out = bytearray()

    for ch in cleaned:
        index = _LOOKUP.get(ch)
        if index is None:
            raise InvalidEncodingError(ch)
        value = ((value << 5) | index) & 0xFFF
        bits += 5
        if bits >= 8:
            out.append((value >> (bits - 8)) & 0xFF)
            bits -= 8

    return bytes(out)
