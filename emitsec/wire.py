"""Binary layout and snappy block compression used by v2 and v3 licenses."""

from __future__ import annotations

_MASK32 = 0xFFFFFFFF
_MAX_OFFSET = 1 << 16
_MIN_MATCH = 4
_MIN_COMPRESSIBLE = 17
_MAX_VARINT_BYTES = 10

_TAG_LITERAL = 0
_TAG_COPY1 = 1
_TAG_COPY2 = 2
_TAG_COPY4 = 3


class WireError(ValueError):
    """Encoded license data is corrupt or cannot be encoded."""


def _put_uvarint(out: bytearray, value: int) -> None:
    while value >= 0x80:
        out.append((value & 0x7F) | 0x80)
        value >>= 7
    out.append(value)


def _read_uvarint(data: bytes, pos: int) -> tuple[int, int]:
    result = 0
    for shift in range(0, 7 * _MAX_VARINT_BYTES, 7):
        if pos >= len(data):
            raise WireError("wire: truncated varint")
        byte = data[pos]
        pos += 1
        result |= (byte & 0x7F) << shift
        if byte < 0x80:
            return result, pos
    raise WireError("wire: varint overflows")


def _emit_literal(out: bytearray, literal: bytes) -> None:
    n = len(literal) - 1
    if n < 60:
        out.append(n << 2 | _TAG_LITERAL)
    elif n < 1 << 8:
        out.append(60 << 2 | _TAG_LITERAL)
        out.append(n)
    elif n < 1 << 16:
        out.append(61 << 2 | _TAG_LITERAL)
        out += n.to_bytes(2, "little")
    elif n < 1 << 24:
        out.append(62 << 2 | _TAG_LITERAL)
        out += n.to_bytes(3, "little")
    else:
        out.append(63 << 2 | _TAG_LITERAL)
        out += n.to_bytes(4, "little")
    out += literal


def _emit_copy2(out: bytearray, offset: int, length: int) -> None:
    out.append((length - 1) << 2 | _TAG_COPY2)
    out += offset.to_bytes(2, "little")


def _emit_copy(out: bytearray, offset: int, length: int) -> None:
    while length >= 68:
        _emit_copy2(out, offset, 64)
        length -= 64
    if length > 64:
        _emit_copy2(out, offset, 60)
        length -= 60
    if length >= 12 or offset >= 2048:
        _emit_copy2(out, offset, length)
    else:
        out.append((offset >> 8) << 5 | (length - 4) << 2 | _TAG_COPY1)
        out.append(offset & 0xFF)


def snappy_encode(data: bytes | bytearray) -> bytes:
    """Compress ``data`` into a snappy block."""
    data = bytes(data)
    n = len(data)
    if n > _MASK32:
        raise WireError("wire: block is too large")

    out = bytearray()
    _put_uvarint(out, n)
    if n < _MIN_COMPRESSIBLE:
        if n:
            _emit_literal(out, data)
        return bytes(out)

    table: dict[bytes, int] = {}
    pos = 0
    literal_start = 0
    while pos + _MIN_MATCH <= n:
        window = data[pos : pos + _MIN_MATCH]
        candidate = table.get(window)
        table[window] = pos
        if candidate is None or pos - candidate >= _MAX_OFFSET:
            pos += 1
            continue

        length = _MIN_MATCH
        while pos + length < n and data[candidate + length] == data[pos + length]:
            length += 1
        if literal_start < pos:
            _emit_literal(out, data[literal_start:pos])
        _emit_copy(out, pos - candidate, length)
        pos += length
        literal_start = pos

    if literal_start < n:
        _emit_literal(out, data[literal_start:])
    return bytes(out)


def snappy_decode(data: bytes | bytearray) -> bytes:
    """Decompress a snappy block."""
    data = bytes(data)
    expected, pos = _read_uvarint(data, 0)
    if expected > _MASK32:
        raise WireError("wire: decoded block is too large")

    n = len(data)
    out = bytearray()
    while pos < n:
        tag = data[pos]
        kind = tag & 3

        if kind == _TAG_LITERAL:
            length = tag >> 2
            pos += 1
            if length >= 60:
                extra = length - 59
                if pos + extra > n:
                    raise WireError("wire: corrupt input")
                length = int.from_bytes(data[pos : pos + extra], "little")
                pos += extra
            length += 1
            if pos + length > n or len(out) + length > expected:
                raise WireError("wire: corrupt input")
            out += data[pos : pos + length]
            pos += length
            continue

        if kind == _TAG_COPY1:
            if pos + 2 > n:
                raise WireError("wire: corrupt input")
            length = 4 + ((tag >> 2) & 7)
            offset = (tag >> 5) << 8 | data[pos + 1]
            pos += 2
        elif kind == _TAG_COPY2:
            if pos + 3 > n:
                raise WireError("wire: corrupt input")
            length = 1 + (tag >> 2)
            offset = int.from_bytes(data[pos + 1 : pos + 3], "little")
            pos += 3
        else:
            if pos + 5 > n:
                raise WireError("wire: corrupt input")
            length = 1 + (tag >> 2)
            offset = int.from_bytes(data[pos + 1 : pos + 5], "little")
            pos += 5

        if offset <= 0 or offset > len(out) or len(out) + length > expected:
            raise WireError("wire: corrupt input")
        if offset >= length:
            start = len(out) - offset
            out += out[start : start + length]
        else:
            for _ in range(length):
                out.append(out[-offset])

    if len(out) != expected:
        raise WireError("wire: corrupt input")
    return bytes(out)


def _put_uint32(out: bytearray, value: int) -> None:
    if not 0 <= value <= _MASK32:
        raise WireError(f"wire: value {value} does not fit in 32 bits")
    _put_uvarint(out, value)


def _put_bytes(out: bytearray, value: bytes) -> None:
    _put_uvarint(out, len(value))
    out += value


def _read_bytes(data: bytes, pos: int) -> tuple[bytes, int]:
    length, pos = _read_uvarint(data, pos)
    if pos + length > len(data):
        raise WireError("wire: truncated byte field")
    return data[pos : pos + length], pos + length


def _read_uint32(data: bytes, pos: int) -> tuple[int, int]:
    value, pos = _read_uvarint(data, pos)
    return value & _MASK32, pos


def marshal_license(
    encryption_key: bytes,
    encryption_salt: bytes,
    user: int,
    sign: int,
    index: int,
) -> bytes:
    """Serialise license fields in declaration order."""
    out = bytearray()
    _put_bytes(out, bytes(encryption_key))
    _put_bytes(out, bytes(encryption_salt))
    _put_uint32(out, user)
    _put_uint32(out, sign)
    _put_uint32(out, index)
    return bytes(out)


def unmarshal_license(data: bytes | bytearray) -> tuple[bytes, bytes, int, int, int]:
    """Read license fields as (encryption_key, encryption_salt, user, sign, index)."""
    data = bytes(data)
    encryption_key, pos = _read_bytes(data, 0)
    encryption_salt, pos = _read_bytes(data, pos)
    user, pos = _read_uint32(data, pos)
    sign, pos = _read_uint32(data, pos)
    index, pos = _read_uint32(data, pos)
    return encryption_key, encryption_salt, user, sign, index