"""Legacy v1 licenses, backed by the XTEA key cipher."""

from __future__ import annotations

import base64
import math
import os
import secrets
import struct
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import IntEnum

from .b64 import decode_key
from .key import Key, Permission
from .xtea import Xtea

# The beginning of time for license timestamps: 2010-01-01 00:00:00 UTC.
TIME_OFFSET = 1262304000

_EPOCH = datetime.fromtimestamp(0, tz=timezone.utc)
_MASK32 = 0xFFFFFFFF
_MAX_INT16 = 32767
_RAW_SIZE = 32


class LicenseType(IntEnum):
    """Kind of deployment a license is issued for."""

    UNKNOWN = 0
    CLOUD = 1
    ON_PREMISE = 2


def _encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def _new_master_key(master_id: int, user: int, sign: int) -> Key:
    key = Key()
    key.salt = secrets.randbelow(_MAX_INT16)
    key.master = master_id
    key.contract = user
    key.signature = sign
    key.permissions = Permission.MASTER
    return key


@dataclass
class V1:
    """A legacy v1 license."""

    encryption_key: str = ""
    user: int = 0
    sign: int = 0
    expires: datetime = field(default=_EPOCH)
    license_type: int = LicenseType.UNKNOWN

    def new_master_key(self, id: int) -> Key:
        """Generate a new master key with the given id."""
        return _new_master_key(id, self.user, self.sign)

    def cipher(self) -> Xtea:
        """Return the cipher for keys under this license."""
        return Xtea(self.encryption_key)

    def __str__(self) -> str:
        try:
            key = decode_key(self.encryption_key)
        except ValueError:
            return ""

        expiry = math.floor(self.expires.timestamp())
        if expiry > 0:
            expiry -= TIME_OFFSET

        output = key[:16].ljust(16, b"\x00") + struct.pack(
            ">4I",
            self.user & _MASK32,
            self.sign & _MASK32,
            expiry & _MASK32,
            int(self.license_type) & _MASK32,
        )
        return _encode(output) + ":1"

    def contract(self) -> int:
        """Return the contract id of the license."""
        return self.user

    def signature(self) -> int:
        """Return the signature of the license."""
        return self.sign

    def master(self) -> int:
        """Return the secret key index, always 1 for v1."""
        return 1


def new_v1() -> V1:
    """Generate a new v1 license with random material."""
    return V1(
        encryption_key=_encode(os.urandom(16)),
        user=int.from_bytes(os.urandom(4), "big"),
        sign=int.from_bytes(os.urandom(4), "big"),
        expires=_EPOCH,
        license_type=LicenseType.ON_PREMISE,
    )


def parse_v1(data: str) -> V1:
    """Decode a v1 license (without its version suffix)."""
    raw = decode_key(data)
    if len(raw) < _RAW_SIZE:
        raise ValueError("license: v1 license data is too short")

    user, sign, expiry, license_type = struct.unpack(">4I", raw[16:32])
    if expiry > 0:
        expiry += TIME_OFFSET

    return V1(
        encryption_key=_encode(raw[:16]),
        user=user,
        sign=sign,
        expires=datetime.fromtimestamp(expiry, tz=timezone.utc),
        license_type=license_type,
    )