"""Decoding of unpadded, URL-safe base64 as used by encrypted keys."""

from __future__ import annotations

_ALPHABET = b"ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789-_"
_INVALID = 0xFF
_DECODE = bytes(
    _ALPHABET.index(code) if code in _ALPHABET else _INVALID for code in range(256)
)


class CorruptInputError(ValueError):
    """Base64 input is malformed at the given byte offset."""

    def __init__(self, offset: int) -> None:
        super().__init__(f"illegal base64 data at input byte {offset}")
        self.offset = offset


def decode_key(src: bytes | bytearray | str) -> bytes:
    """Decode URL-safe base64 without padding."""
    data = src.encode("ascii", errors="replace") if isinstance(src, str) else bytes(src)
    out = bytearray()
    for start in range(0, len(data), 4):
        chunk = data[start : start + 4]
        values = []
        for offset, code in enumerate(chunk):
            value = _DECODE[code]
            if value == _INVALID:
                raise CorruptInputError(start + offset)
            values.append(value)
        if len(values) < 2:
            raise CorruptInputError(start)

        combined = 0
        for value in values + [0] * (4 - len(values)):
            combined = (combined << 6) | value
        out += combined.to_bytes(3, "big")[: len(values) - 1]
    return bytes(out)