"""Salsa20 key cipher with the key salt mixed into the nonce."""

from __future__ import annotations

import base64

from .b64 import decode_key
from .key import KEY_SIZE, Key
from .salsa import hsalsa20, xor_key_stream

_ENCODED_KEY_SIZE = 32


class Shuffle:
    """Encrypts and decrypts security keys, shuffled by their salt."""

    def __init__(self, key: bytes, nonce: bytes) -> None:
        key = bytes(key or b"")
        nonce = bytes(nonce or b"")
        if len(key) != 32 or len(nonce) != 16:
            raise ValueError("shuffled: invalid cryptographic key")
        self._key = key
        self._nonce = nonce

    def _crypt(self, data: bytes) -> bytes:
        salt, body = data[:2], data[2:]
        nonce = bytes(b ^ salt[i % 2] for i, b in enumerate(self._nonce))
        sub_key = hsalsa20(self._key, nonce)
        return salt + xor_key_stream(body, nonce, sub_key)

    def encrypt_key(self, key: Key | bytes) -> str:
        """Encrypt a key and return it as unpadded URL-safe base64."""
        raw = bytes(key)[:KEY_SIZE].ljust(KEY_SIZE, b"\x00")
        encrypted = self._crypt(raw)
        return base64.urlsafe_b64encode(encrypted).rstrip(b"=").decode("ascii")

    def decrypt_key(self, buffer: bytes | bytearray | str) -> Key:
        """Decrypt a key from its 32-character base64 form."""
        if len(buffer) != _ENCODED_KEY_SIZE:
            raise ValueError("cipher: the key provided is not valid")
        return Key(self._crypt(decode_key(buffer)))