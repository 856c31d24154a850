"""
base32.py - RFC 4648 base32 without padding.

TOTP secrets travel as base32 text (that is what authenticator apps expect),
but the HMAC always runs on the raw bytes. Encoding is the standard alphabet
with the trailing '=' padding stripped; trailing 1-4 bits are left-shifted
into one last symbol.
"""

import base64

from .errors import MalformedInput

ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567"
_LOOKUP = {ch: i for i, ch in enumerate(ALPHABET)}

# len % 8 values that no encoder can produce (1, 3 or 6 leftover symbols)
_IMPOSSIBLE_REMAINDERS = {1, 3, 6}


def encode(data: bytes) -> str:
    """
    Encode bytes to unpadded base32.

    Example: encode(b"foo") -> "MZXW6"
    """
    return base64.b32encode(bytes(data)).decode("ascii").rstrip("=")


def decode(text: str) -> bytes:
    """
    Decode base32 text back to bytes.

    - Case-insensitive; trailing '=' padding is tolerated and ignored.
    - Any other character outside A-Z / 2-7 raises MalformedInput.
    - Leftover low bits (< 8) are the encoder's zero fill and are dropped.

    Raises:
        MalformedInput: bad character or a length no encoder can produce
    """
    if not isinstance(text, str):
        raise MalformedInput("Base32 input must be text")
    body = text.rstrip("=").upper()
    if len(body) % 8 in _IMPOSSIBLE_REMAINDERS:
        raise MalformedInput(f"Invalid Base32 length: {len(body)}")

    bits = 0
    value = 0
    out = bytearray()
    for ch in body:
        idx = _LOOKUP.get(ch)
        if idx is None:
            raise MalformedInput(f"Invalid Base32 character: {ch!r}")
        value = ((value << 5) | idx) & 0xFFFF
        bits += 5
        if bits >= 8:
            out.append((value >> (bits - 8)) & 0xFF)
            bits -= 8
    return bytes(out)
