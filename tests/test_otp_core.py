import pyotp
import pytest

from pki2fa_core import base32, otp_core
from pki2fa_core.errors import MalformedInput

RFC_SECRET = b"12345678901234567890"

# RFC 4226 Appendix D
HOTP_VECTORS = [
    "755224", "287082", "359152", "969429", "338314",
    "254676", "287922", "162583", "399871", "520489",
]

# RFC 6238 Appendix B, SHA-1, 8 digits
TOTP_VECTORS = [
    (59, "94287082"),
    (1111111109, "07081804"),
    (1111111111, "14050471"),
    (1234567890, "89005924"),
    (2000000000, "69279037"),
    (20000000000, "65353130"),
]


@pytest.mark.parametrize("counter,expected", list(enumerate(HOTP_VECTORS)))
def test_hotp_rfc4226_vectors(counter, expected):
    assert otp_core.hotp(RFC_SECRET, counter) == expected


def test_hotp_accepts_base32_secret():
    encoded = base32.encode(RFC_SECRET)
    assert otp_core.hotp(encoded, 0) == "755224"
    assert otp_core.hotp(encoded.lower(), 1) == "287082"


def test_hotp_rejects_bad_base32_secret():
    with pytest.raises(MalformedInput):
        otp_core.hotp("NOT-BASE32!", 0)


def test_int_to_bytes_is_8_byte_big_endian():
    assert otp_core.int_to_bytes(1) == b"\x00" * 7 + b"\x01"
    assert otp_core.int_to_bytes(2**64 - 1) == b"\xff" * 8


def test_dynamic_truncate_rfc_example():
    digest = bytes.fromhex("1f8698690e02ca16618550ef7f19da8e945b555a")
    assert otp_core.dynamic_truncate(digest) == 0x50EF7F19


@pytest.mark.parametrize("timestamp,expected", TOTP_VECTORS)
def test_totp_rfc6238_vectors(timestamp, expected):
    assert otp_core.totp(RFC_SECRET, timestamp, digits=8) == expected


def test_totp_matches_pyotp(seed):
    secret_b32 = otp_core.seed_to_base32(seed)
    reference = pyotp.TOTP(secret_b32, digits=6, interval=30)
    for t in (0, 29, 30, 1_700_000_000, 1_700_000_015, 2_000_000_000):
        assert otp_core.totp(secret_b32, t) == reference.at(t)


def test_totp_is_constant_within_a_period(seed):
    secret = bytes.fromhex(seed)
    assert otp_core.totp(secret, 900) == otp_core.totp(secret, 929)
    assert otp_core.totp(secret, 900.9) == otp_core.totp(secret, 900)


@pytest.mark.parametrize("t,left", [(0, 30), (1, 29), (29, 1), (30, 30), (59.9, 1)])
def test_remaining_seconds(t, left):
    assert otp_core.remaining_seconds(t) == left


def test_verify_window_tolerance(seed):
    secret = bytes.fromhex(seed)
    t = 1_700_000_000
    code = otp_core.totp(secret, t)
    assert otp_core.verify_totp(secret, code, t + 29, window=1).valid
    assert not otp_core.verify_totp(secret, code, t + 61, window=1).valid


def test_verify_reports_matched_offset(seed):
    secret = bytes.fromhex(seed)
    t = 1_700_000_010
    code = otp_core.totp(secret, t)
    assert otp_core.verify_totp(secret, code, t) == otp_core.VerifyResult(True, 0)
    assert otp_core.verify_totp(secret, code, t + 30).matched_offset == -1
    assert otp_core.verify_totp(secret, code, t - 30).matched_offset == 1


def test_verify_window_zero_is_exact(seed):
    secret = bytes.fromhex(seed)
    code = otp_core.totp(secret, 3000)
    assert otp_core.verify_totp(secret, code, 3000, window=0)
    assert not otp_core.verify_totp(secret, code, 3030, window=0)


def test_verify_skips_negative_counters():
    result = otp_core.verify_totp(RFC_SECRET, "755224", 5, window=2)
    assert result == otp_core.VerifyResult(True, 0)


@pytest.mark.parametrize(
    "candidate",
    ["", "12345", "1234567", "12345a", " 12345", "１２３４５６", 123456, None, b"123456"],
)
def test_verify_malformed_candidate_is_plain_non_match(candidate):
    result = otp_core.verify_totp(RFC_SECRET, candidate, 0)
    assert result == otp_core.NO_MATCH
    assert not result


def test_seed_helpers_follow_service_flow(seed):
    t = 1_700_000_025
    code, valid_for = otp_core.generate_totp_code(seed, t)
    assert code == otp_core.hotp(bytes.fromhex(seed), t // 30)
    assert valid_for == 15
    assert otp_core.verify_totp_code(seed, code, t + 15)
    assert otp_core.seed_to_base32(seed) == base32.encode(bytes.fromhex(seed))


@pytest.mark.parametrize("counter", [-1, 2 ** 64])
def test_counter_out_of_range_is_malformed(counter):
    with pytest.raises(MalformedInput):
        otp_core.hotp(RFC_SECRET, counter)


def test_negative_timestamp_is_malformed():
    with pytest.raises(MalformedInput):
        otp_core.totp(RFC_SECRET, -1)


def test_largest_counter_still_works():
    assert len(otp_core.hotp(RFC_SECRET, 2 ** 64 - 1)) == 6
