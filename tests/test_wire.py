import base64

import pytest

from emitsec.wire import (
    WireError,
    marshal_license,
    snappy_decode,
    snappy_encode,
    unmarshal_license,
)


@pytest.mark.parametrize(
    "data",
    [
        b"",
        b"a",
        b"hello world",
        bytes(range(256)),
        b"ab" * 1000,
        b"x" * 100000,
        bytes((i * 7) % 251 for i in range(5000)),
        b"abcdefgh" * 20 + bytes(range(100)) + b"abcdefgh" * 20,
    ],
)
def test_snappy_round_trip(data):
    assert snappy_decode(snappy_encode(data)) == data


def test_short_input_is_single_literal():
    assert snappy_encode(b"hello") == b"\x05\x10hello"


def test_decode_overlapping_copy():
    assert snappy_decode(b"\x06\x04ab\x01\x02") == b"ababab"


@pytest.mark.parametrize(
    "data",
    [
        b"",
        b"\x80",
        b"\x05\x00a",
        b"\x04\x01\x05",
        b"\x01\x00ab",
        b"\x02\x08abc",
    ],
)
def test_decode_corrupt(data):
    with pytest.raises(WireError):
        snappy_decode(data)


def test_marshal_layout():
    assert marshal_license(b"", b"", 989603869, 0, 0) == bytes.fromhex("00009dd0f0d7030000")


def test_marshal_and_compress_matches_license_form():
    encoded = snappy_encode(marshal_license(b"", b"", 989603869, 0, 0))
    assert base64.urlsafe_b64encode(encoded).rstrip(b"=") == b"CSAAAJ3Q8NcDAAA"


def test_unmarshal_round_trip():
    fields = (bytes(range(32)), bytes(range(16)), 0x11248139, 0x10062B50, 1)
    assert unmarshal_license(marshal_license(*fields)) == fields


def test_unmarshal_truncated():
    with pytest.raises(WireError):
        unmarshal_license(b"\x05ab")


def test_unmarshal_missing_fields():
    with pytest.raises(WireError):
        unmarshal_license(b"\x00\x00\x01")


def test_marshal_out_of_range():
    with pytest.raises(WireError):
        marshal_license(b"", b"", 1 << 32, 0, 0)