import base64
import os

import pytest

from pki2fa_core import base32
from pki2fa_core.errors import MalformedInput


@pytest.mark.parametrize(
    "raw,encoded",
    [
        (b"", ""),
        (b"f", "MY"),
        (b"fo", "MZXQ"),
        (b"foo", "MZXW6"),
        (b"foob", "MZXW6YQ"),
        (b"fooba", "MZXW6YTB"),
        (b"foobar", "MZXW6YTBOI"),
    ],
)
def test_rfc4648_vectors(raw, encoded):
    assert base32.encode(raw) == encoded
    assert base32.decode(encoded) == raw


def test_round_trip_all_lengths():
    for n in range(65):
        data = os.urandom(n)
        text = base32.encode(data)
        assert "=" not in text
        assert base32.decode(text) == data
        assert text == base64.b32encode(data).decode("ascii").rstrip("=")


def test_32_byte_seed_is_52_symbols():
    assert len(base32.encode(bytes(range(32)))) == 52


def test_decode_is_case_insensitive_and_accepts_padding():
    assert base32.decode("mzxw6ytboi") == b"foobar"
    assert base32.decode("MZXW6===") == b"foo"


@pytest.mark.parametrize("bad", ["MZXW1", "MZ XW", "MZXW8", "MZ-W", "MZXÉ"])
def test_decode_rejects_characters_outside_alphabet(bad):
    with pytest.raises(MalformedInput):
        base32.decode(bad)


def test_decode_rejects_impossible_lengths():
    with pytest.raises(MalformedInput):
        base32.decode("A")
    with pytest.raises(MalformedInput):
        base32.decode("ABC")


def test_malformed_input_is_a_value_error():
    with pytest.raises(ValueError):
        base32.decode("!!")
