"""Version 2 licenses, backed by the XSalsa20 key cipher."""

from __future__ import annotations

import base64
import os
from dataclasses import dataclass

from .b64 import decode_key
from .key import Key
from .license_v1 import _new_master_key
from .salsa import Salsa
from .wire import marshal_license, snappy_decode, snappy_encode, unmarshal_license


@dataclass
class V2:
    """A v2 license."""

    encryption_key: bytes = b""
    encryption_salt: bytes = b""
    user: int = 0
    sign: int = 0
    index: int = 0

    def cipher(self) -> Salsa:
        """Return the cipher for keys under this license."""
        return Salsa(self.encryption_key, self.encryption_salt)

    def __str__(self) -> str:
        encoded = snappy_encode(
            marshal_license(
                self.encryption_key, self.encryption_salt, self.user, self.sign, self.index
            )
        )
        return base64.urlsafe_b64encode(encoded).rstrip(b"=").decode("ascii") + ":2"

    def contract(self) -> int:
        """Return the contract id of the license."""
        return self.user

    def signature(self) -> int:
        """Return the signature of the license."""
        return self.sign

    def master(self) -> int:
        """Return the secret key index."""
        return self.index

    def new_master_key(self, id: int) -> Key:
        """Generate a new master key with the given id."""
        return _new_master_key(id, self.user, self.sign)


def new_v2() -> V2:
    """Generate a new v2 license with random material."""
    return V2(
        encryption_key=os.urandom(32),
        encryption_salt=os.urandom(24),
        user=int.from_bytes(os.urandom(4), "big"),
        sign=int.from_bytes(os.urandom(4), "big"),
        index=1,
    )


def parse_v2(data: str) -> V2:
    """Decode a v2 license (without its version suffix)."""
    raw = snappy_decode(decode_key(data))
    return V2(*unmarshal_license(raw))