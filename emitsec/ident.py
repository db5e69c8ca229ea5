"""Process-wide unique identifiers."""

from __future__ import annotations

import base64
import hashlib
import threading
from datetime import datetime, timezone

_MASK64 = (1 << 64) - 1


class ID(int):
    """An unsigned 64-bit identifier."""

    def __new__(cls, value: int = 0) -> "ID":
        if not 0 <= value <= _MASK64:
            raise ValueError(f"ID out of range: {value}")
        return super().__new__(cls, value)

    def unique(self, prefix: int, salt: str) -> str:
        """Derive a base32 unique string from this ID, a prefix and a salt."""
        material = prefix.to_bytes(8, "big") + int(self).to_bytes(8, "big")
        derived = hashlib.pbkdf2_hmac("sha1", material, salt.encode("utf-8"), 4096, 16)
        return base64.b32encode(derived).decode("ascii").strip("=")

    def __str__(self) -> str:
        value = int(self)
        out = bytearray()
        while value >= 0x80:
            out.append((value & 0x7F) | 0x80)
            value >>= 7
        out.append(value)
        return out.hex().upper()

    def __repr__(self) -> str:
        return f"ID({int(self)})"


class IdGenerator:
    """Thread-safe generator of increasing IDs."""

    def __init__(self, start: int = 0) -> None:
        self._value = start & _MASK64
        self._lock = threading.Lock()

    def next(self) -> ID:
        """Return the next identifier."""
        with self._lock:
            self._value = (self._value + 1) & _MASK64
            return ID(self._value)


# Seeded with the time in seconds so ids differ across restarts.
_default = IdGenerator(
    int((datetime.now(timezone.utc) - datetime(2015, 1, 1, tzinfo=timezone.utc)).total_seconds())
)


def new_id() -> ID:
    """Return a new process-wide unique ID."""
    return _default.next()