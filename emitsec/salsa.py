"""Salsa20 primitives and the XSalsa20 key cipher."""

from __future__ import annotations

import base64
import struct

from .b64 import decode_key
from .key import KEY_SIZE, Key

SIGMA = b"expand 32-byte k"

_MASK = 0xFFFFFFFF
_MASK64 = (1 << 64) - 1
_BLOCK = 64
_ENCODED_KEY_SIZE = 32

# Column round followed by row round, as (a, b, c, d) quarter-round indices.
_DOUBLE_ROUND = (
    (0, 4, 8, 12),
    (5, 9, 13, 1),
    (10, 14, 2, 6),
    (15, 3, 7, 11),
    (0, 1, 2, 3),
    (5, 6, 7, 4),
    (10, 11, 8, 9),
    (15, 12, 13, 14),
)


def _rotl(value: int, shift: int) -> int:
    return ((value << shift) | (value >> (32 - shift))) & _MASK


def _initial_state(key: bytes, block: bytes) -> list[int]:
    c = struct.unpack("<4I", SIGMA)
    k = struct.unpack("<8I", key)
    n = struct.unpack("<4I", block)
    return [
        c[0], k[0], k[1], k[2], k[3],
        c[1], n[0], n[1], n[2], n[3],
        c[2], k[4], k[5], k[6], k[7],
        c[3],
    ]


def _permute(state: list[int]) -> list[int]:
    x = list(state)
    for _ in range(10):
        for a, b, c, d in _DOUBLE_ROUND:
            x[b] ^= _rotl((x[a] + x[d]) & _MASK, 7)
            x[c] ^= _rotl((x[b] + x[a]) & _MASK, 9)
            x[d] ^= _rotl((x[c] + x[b]) & _MASK, 13)
            x[a] ^= _rotl((x[d] + x[c]) & _MASK, 18)
    return x


def _check(name: str, value: bytes, size: int) -> bytes:
    value = bytes(value)
    if len(value) != size:
        raise ValueError(f"salsa: {name} must be {size} bytes long")
    return value


def hsalsa20(key: bytes, nonce: bytes) -> bytes:
    """Derive a 32-byte sub-key from a 32-byte key and a 16-byte nonce."""
    state = _initial_state(_check("key", key, 32), _check("nonce", nonce, 16))
    x = _permute(state)
    return struct.pack("<8I", x[0], x[5], x[10], x[15], x[6], x[7], x[8], x[9])


def _core(block: bytes, key: bytes) -> bytes:
    state = _initial_state(key, block)
    mixed = _permute(state)
    return struct.pack("<16I", *((a + b) & _MASK for a, b in zip(mixed, state)))


def xor_key_stream(data: bytes, counter: bytes, key: bytes) -> bytes:
    """XOR ``data`` with the Salsa20 stream for a 16-byte counter and 32-byte key.

    The first 8 bytes of ``counter`` are the nonce, the last 8 the
    little-endian block counter.
    """
    key = _check("key", key, 32)
    counter = _check("counter", counter, 16)
    nonce = counter[:8]
    block = int.from_bytes(counter[8:], "little")
    data = bytes(data)

    out = bytearray()
    for start in range(0, len(data), _BLOCK):
        chunk = data[start : start + _BLOCK]
        stream = _core(nonce + block.to_bytes(8, "little"), key)
        out += bytes(a ^ b for a, b in zip(chunk, stream))
        block = (block + 1) & _MASK64
    return bytes(out)


class Salsa:
    """Encrypts and decrypts security keys with XSalsa20."""

    def __init__(self, key: bytes, nonce: bytes) -> None:
        key = bytes(key or b"")
        nonce = bytes(nonce or b"")
        if len(key) != 32 or len(nonce) != 24:
            raise ValueError("salsa: invalid cryptographic key")
        self._key = key
        self._nonce = nonce

    def _box(self, data: bytes) -> bytes:
        sub_key = hsalsa20(self._key, self._nonce[:16])
        counter = self._nonce[16:] + bytes(8)
        return xor_key_stream(data, counter, sub_key)

    def encrypt_key(self, key: Key | bytes) -> str:
        """Encrypt a key and return it as unpadded URL-safe base64."""
        raw = bytes(key)[:KEY_SIZE].ljust(KEY_SIZE, b"\x00")
        encrypted = self._box(raw)
        return base64.urlsafe_b64encode(encrypted).rstrip(b"=").decode("ascii")

    def decrypt_key(self, buffer: bytes | bytearray | str) -> Key:
        """Decrypt a key from its 32-character base64 form."""
        if len(buffer) != _ENCODED_KEY_SIZE:
            raise ValueError("cipher: the key provided is not valid")
        return Key(self._box(decode_key(buffer)))