"""XTEA cipher for the original key encryption scheme."""

from __future__ import annotations

import base64
import struct

from .b64 import decode_key
from .key import KEY_SIZE, Key

_ROUNDS = 32
_DELTA = 0x9E3779B9
_SUM = 0xC6EF3720  # delta * rounds
_MASK = 0xFFFFFFFF
_ENCODED_KEY_SIZE = 32


def _mix(value: int) -> int:
    return (((((value << 4) & _MASK) ^ (value >> 5)) + value) & _MASK)


def _xor_salt(data: bytes) -> bytes:
    salt = data[:2]
    body = bytes(b ^ salt[i % 2] for i, b in enumerate(data[2:KEY_SIZE]))
    return salt + body


class Xtea:
    """Encrypts and decrypts security keys with XTEA."""

    def __init__(self, value: str) -> None:
        data = decode_key(value)
        if len(value) != 22 or len(data) != 16:
            raise ValueError("xtea: invalid cryptographic key")
        self._key = struct.unpack(">4I", data)

    def _encrypt(self, data: bytes) -> bytes:
        if len(data) != KEY_SIZE:
            raise ValueError("The security key should be 24-bytes long")
        key = self._key
        out = bytearray()
        for y, z in struct.iter_unpack(">II", data):
            total = 0
            for _ in range(_ROUNDS):
                y = (y + (_mix(z) ^ ((total + key[total & 3]) & _MASK))) & _MASK
                total = (total + _DELTA) & _MASK
                z = (z + (_mix(y) ^ ((total + key[(total >> 11) & 3]) & _MASK))) & _MASK
            out += struct.pack(">II", y, z)
        return bytes(out)

    def _decrypt(self, data: bytes) -> bytes:
        key = self._key
        out = bytearray()
        for y, z in struct.iter_unpack(">II", data[:KEY_SIZE]):
            total = _SUM
            for _ in range(_ROUNDS):
                z = (z - (_mix(y) ^ ((total + key[(total >> 11) & 3]) & _MASK))) & _MASK
                total = (total - _DELTA) & _MASK
                y = (y - (_mix(z) ^ ((total + key[total & 3]) & _MASK))) & _MASK
            out += struct.pack(">II", y, z)
        return bytes(out)

    def encrypt_key(self, key: Key | bytes) -> str:
        """Encrypt a key and return it as unpadded URL-safe base64."""
        raw = bytes(key)
        if len(raw) < KEY_SIZE:
            raise ValueError("The security key should be 24-bytes long")
        encrypted = self._encrypt(_xor_salt(raw[:KEY_SIZE]))
        return base64.urlsafe_b64encode(encrypted).rstrip(b"=").decode("ascii")

    def decrypt_key(self, buffer: bytes | bytearray | str) -> Key:
        """Decrypt a key from its 32-character base64 form."""
        if len(buffer) != _ENCODED_KEY_SIZE:
            raise ValueError("cipher: the key provided is not valid")
        decrypted = self._decrypt(decode_key(buffer))
        return Key(_xor_salt(decrypted))