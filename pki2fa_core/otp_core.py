#!/usr/bin/env python3
"""
otp_core.py - Core library for TOTP / HOTP.

Goals:
- Pure functions only, used by the Flask routes, the CLI and the cron script.
- No argparse, no file I/O, no clock reads: the caller passes the timestamp.
- HMAC-SHA1 as in RFC 4226 / RFC 6238 (what Google Authenticator expects).

Secrets are accepted either as raw bytes or as a base32 string. The base32
form is decoded first; the HMAC itself always runs on the raw bytes.

Service flow for the provisioned seed:
    hex seed (64 chars) -> 32 raw bytes -> base32 -> TOTP(SHA-1, 30s, 6 digits)
"""

import hashlib
import hmac
import re
import struct
from typing import NamedTuple, Optional, Tuple, Union

from . import base32
from .errors import MalformedInput

# --- Config / constants ----------------------------------------------------
DEFAULT_DIGITS = 6          # standard: 6 digits
DEFAULT_TIME_STEP = 30      # TOTP step (seconds)
DEFAULT_WINDOW = 1          # +/- one step of clock skew

Secret = Union[bytes, bytearray, str]


class VerifyResult(NamedTuple):
    valid: bool
    matched_offset: Optional[int]

    def __bool__(self) -> bool:
        return self.valid


NO_MATCH = VerifyResult(False, None)


# --- RFC helpers -----------------------------------------------------------
def _secret_bytes(secret: Secret) -> bytes:
    """Raw key bytes; a str is treated as base32 text."""
    if isinstance(secret, str):
        return base32.decode(secret)
    return bytes(secret)


def int_to_bytes(i: int) -> bytes:
    """
    Counter as an 8-byte big-endian unsigned integer, as RFC 4226 requires.

    Example: int_to_bytes(1) -> b'\\x00\\x00\\x00\\x00\\x00\\x00\\x00\\x01'

    Raises:
        MalformedInput: i is negative or does not fit in 64 bits
    """
    if not 0 <= i < 2 ** 64:
        raise MalformedInput(f"Counter out of range: {i}")
    return struct.pack(">Q", i)


def dynamic_truncate(hmac_digest: bytes) -> int:
    """
    RFC 4226 dynamic truncation.

    - offset = last_byte & 0x0F
    - 4 bytes from offset, MSB of the first one cleared (0x7F)
    - returns an unsigned 31-bit integer
    """
    offset = hmac_digest[-1] & 0x0F
    code = (
        ((hmac_digest[offset] & 0x7F) << 24)
        | ((hmac_digest[offset + 1] & 0xFF) << 16)
        | ((hmac_digest[offset + 2] & 0xFF) << 8)
        | (hmac_digest[offset + 3] & 0xFF)
    )
    return code


def hotp(secret: Secret, counter: int, digits: int = DEFAULT_DIGITS) -> str:
    """
    HOTP code per RFC 4226.

    Steps:
    1. secret -> raw key bytes (base32-decoded if given as text)
    2. message = 8-byte counter (big-endian)
    3. HMAC-SHA1(key, message)
    4. dynamic truncate -> dbc
    5. otp = dbc % 10^digits, zero-padded to `digits`

    Raises:
        MalformedInput: secret given as text is not valid base32, or the
            counter is outside 0..2**64-1
    """
    key = _secret_bytes(secret)
    msg = int_to_bytes(counter)
    digest = hmac.new(key, msg, hashlib.sha1).digest()

    dbc = dynamic_truncate(digest)
    otp_val = dbc % (10 ** digits)
    return str(otp_val).zfill(digits)


def time_counter(timestamp: float, timestep: int = DEFAULT_TIME_STEP) -> int:
    """floor(timestamp / timestep)."""
    return int(timestamp // timestep)


def totp(
    secret: Secret,
    timestamp: float,
    timestep: int = DEFAULT_TIME_STEP,
    digits: int = DEFAULT_DIGITS,
) -> str:
    """TOTP code per RFC 6238: HOTP with counter = floor(timestamp / timestep)."""
    return hotp(secret, time_counter(timestamp, timestep), digits)


def remaining_seconds(timestamp: float, timestep: int = DEFAULT_TIME_STEP) -> int:
    """Seconds left in the current step, always in 1..timestep."""
    return timestep - (int(timestamp) % timestep)


# --- OTP verification helpers ---------------------------------------------
def _well_formed(code, digits: int) -> bool:
    return isinstance(code, str) and re.fullmatch(r"[0-9]{%d}" % digits, code) is not None


def verify_totp(
    secret: Secret,
    code: str,
    timestamp: float,
    window: int = DEFAULT_WINDOW,
    timestep: int = DEFAULT_TIME_STEP,
    digits: int = DEFAULT_DIGITS,
) -> VerifyResult:
    """
    Check a user-supplied TOTP code against steps -window..+window.

    A code that is not exactly `digits` ASCII digits is a plain non-match, not
    an error. Steps are tried in ascending order, negative counters skipped,
    each comparison constant-time.

    Returns:
        VerifyResult(valid, matched_offset); matched_offset is None on no match
    """
    if not _well_formed(code, digits):
        return NO_MATCH

    key = _secret_bytes(secret)
    counter = time_counter(timestamp, timestep)
    for offset in range(-window, window + 1):
        test_counter = counter + offset
        if test_counter < 0:
            continue
        expected = hotp(key, test_counter, digits)
        if hmac.compare_digest(expected, code):
            return VerifyResult(True, offset)
    return NO_MATCH


# --- Hex seed helpers (service flow) --------------------------------------
def seed_to_base32(hex_seed: str) -> str:
    """64-char hex seed -> unpadded base32 secret."""
    return base32.encode(bytes.fromhex(hex_seed))


def generate_totp_code(hex_seed: str, timestamp: float) -> Tuple[str, int]:
    """
    Current code for a provisioned seed.

    Returns:
        (code, valid_for) where valid_for is the seconds left in the period
    """
    code = totp(seed_to_base32(hex_seed), timestamp)
    return code, remaining_seconds(timestamp)


def verify_totp_code(
    hex_seed: str, code: str, timestamp: float, window: int = DEFAULT_WINDOW
) -> bool:
    """Accept `code` if it matches the seed within +/- `window` periods."""
    return verify_totp(seed_to_base32(hex_seed), code, timestamp, window=window).valid
