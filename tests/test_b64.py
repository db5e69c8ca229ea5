import base64
import os

import pytest

from emitsec.b64 import CorruptInputError, decode_key

SAMPLE = b"0TJnt4yZPL73zt35h1UTIFsYBLetyD_g"


def test_decode_matches_standard_decoder():
    decoded = decode_key(SAMPLE)
    assert decoded == base64.urlsafe_b64decode(SAMPLE)
    assert len(decoded) == 24


def test_decode_accepts_str():
    assert decode_key(SAMPLE.decode()) == decode_key(SAMPLE)


def test_decode_invalid_character():
    with pytest.raises(CorruptInputError) as info:
        decode_key(b"#")
    assert info.value.offset == 0
    assert str(info.value) == "illegal base64 data at input byte 0"


def test_decode_invalid_last_character():
    with pytest.raises(CorruptInputError) as info:
        decode_key(b"aaaaaaaaaaaaaaaaaaaaaaaaaaaaaaa*")
    assert info.value.offset == 31


def test_decode_truncated_quantum():
    with pytest.raises(CorruptInputError) as info:
        decode_key(b"aaaaa")
    assert info.value.offset == 4


def test_decode_empty():
    assert decode_key(b"") == b""


@pytest.mark.parametrize("size", [1, 2, 3, 16, 23, 24])
def test_round_trip_unpadded(size):
    raw = os.urandom(size)
    encoded = base64.urlsafe_b64encode(raw).rstrip(b"=")
    assert decode_key(encoded) == raw


@pytest.mark.parametrize("code", range(256))
def test_two_character_inputs(code):
    src = bytes([ord("A"), code])
    if chr(code).isascii() and (chr(code).isalnum() or chr(code) in "-_"):
        assert len(decode_key(src)) == 1
    else:
        with pytest.raises(CorruptInputError):
            decode_key(src)