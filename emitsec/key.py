"""Security keys: a 24-byte record of salt, contract, permissions and target."""

from __future__ import annotations

import math
from datetime import datetime, timezone
from enum import IntFlag

from .channel import Channel
from .hashing import of_string

KEY_SIZE = 24

# The beginning of time for key timestamps: 2010-01-01 00:00:00 UTC.
TIME_OFFSET = 1262304000

_EPOCH = datetime.fromtimestamp(0, tz=timezone.utc)
_ANY_TARGET = 1325880984  # hash of "", the target of a "#/" key
_MAX_PARTS = 23
_MASK32 = 0xFFFFFFFF


class Permission(IntFlag):
    """Access flags carried by a key."""

    NONE = 0
    MASTER = 1 << 0
    READ = 1 << 1
    WRITE = 1 << 2
    STORE = 1 << 3
    LOAD = 1 << 4
    PRESENCE = 1 << 5
    EXTEND = 1 << 6
    EXECUTE = 1 << 7
    READ_WRITE = READ | WRITE
    STORE_LOAD = STORE | LOAD
    ALL = 0xFF & ~MASTER


class TargetInvalidError(ValueError):
    """The target channel does not end with a separator."""

    def __init__(self) -> None:
        super().__init__(
            "channel should end with `/` for strict types or `/#/` for multi level wildcard"
        )


class TargetTooLongError(ValueError):
    """The target channel has more parts than a key can encode."""

    def __init__(self) -> None:
        super().__init__("channel can not have more than 23 parts")


class Key:
    """A mutable security key backed by its raw bytes."""

    __slots__ = ("_data",)

    def __init__(self, data: bytes | bytearray | memoryview | None = None) -> None:
        self._data = bytearray(KEY_SIZE) if data is None else bytearray(data)

    def __bytes__(self) -> bytes:
        return bytes(self._data)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Key):
            return self._data == other._data
        if isinstance(other, (bytes, bytearray)):
            return self._data == other
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __len__(self) -> int:
        return len(self._data)

    def __getitem__(self, index):
        return self._data[index]

    def __setitem__(self, index, value) -> None:
        self._data[index] = value

    def __repr__(self) -> str:
        return f"Key({bytes(self._data).hex()})"

    def _get(self, start: int, size: int) -> int:
        return int.from_bytes(self._data[start : start + size], "big")

    def _put(self, start: int, size: int, value: int) -> None:
        mask = (1 << (8 * size)) - 1
        self._data[start : start + size] = (int(value) & mask).to_bytes(size, "big")

    def is_empty(self) -> bool:
        """Return True when the key holds no bytes."""
        return len(self._data) == 0

    @property
    def salt(self) -> int:
        """The random salt of the key."""
        return self._get(0, 2)

    @salt.setter
    def salt(self, value: int) -> None:
        self._put(0, 2, value)

    @property
    def master(self) -> int:
        """The id of the master key this key was made from."""
        return self._get(2, 2)

    @master.setter
    def master(self, value: int) -> None:
        self._put(2, 2, value)

    @property
    def contract(self) -> int:
        """The contract id."""
        return self._get(4, 4)

    @contract.setter
    def contract(self, value: int) -> None:
        self._put(4, 4, value)

    @property
    def signature(self) -> int:
        """The signature of the contract."""
        return self._get(8, 4)

    @signature.setter
    def signature(self, value: int) -> None:
        self._put(8, 4, value)

    @property
    def permissions(self) -> Permission:
        """The permission flags."""
        return Permission(self._data[15])

    @permissions.setter
    def permissions(self, value: int) -> None:
        self._data[15] = int(value) & 0xFF

    @property
    def expires(self) -> datetime:
        """The expiry time in UTC; the epoch means the key never expires."""
        expire = self._get(20, 4)
        if expire > 0:
            expire += TIME_OFFSET
        return datetime.fromtimestamp(expire, tz=timezone.utc)

    @expires.setter
    def expires(self, value: datetime) -> None:
        expire = math.floor(value.timestamp())
        if expire > 0:
            expire -= TIME_OFFSET
        self._put(20, 4, expire & _MASK32)

    def is_expired(self) -> bool:
        """Return True when the key has an expiry in the past."""
        expiry = self.expires
        if expiry == _EPOCH:
            return False
        return expiry < datetime.now(timezone.utc)

    def is_master(self) -> bool:
        """Return True when the key is a master key."""
        return self.permissions == Permission.MASTER

    def has_permission(self, flag: int) -> bool:
        """Return True when every bit of ``flag`` is granted."""
        return (self.permissions & flag) == flag

    def set_permission(self, flag: int, value: bool) -> None:
        """Grant or revoke the bits of ``flag``."""
        if value:
            self.permissions = self.permissions | flag
        else:
            self.permissions = self.permissions & ~int(flag) & 0xFF

    def validate_channel(self, channel: Channel) -> bool:
        """Return True when ``channel`` is within this key's target."""
        topic = bytes(channel.channel)
        if not topic:
            return False

        target = self._get(16, 4)
        target_path = self._get(12, 3)

        # Keys without a depth only check the first level of the channel.
        if target_path == 0:
            return target == _ANY_TARGET or target == channel.target()

        if topic.endswith(b"/"):
            topic = topic[:-1]

        parts = topic.decode("utf-8", errors="replace").split("/")
        if parts[-1] == "#":
            parts.pop()

        max_depth = next(
            (_MAX_PARTS - i for i in range(_MAX_PARTS) if (target_path >> i) & 1), 0
        ) or len(parts)

        exact = (target_path >> 23) & 1 == 1
        if len(parts) < max_depth or (exact and len(parts) != max_depth):
            return False

        masked = []
        for idx, part in enumerate(parts):
            if idx <= 22 and (target_path >> (22 - idx)) & 1:
                if part == "+":
                    return False
                masked.append(part)
            else:
                masked.append("+")

        return of_string("/".join(masked[:max_depth])) == target

    def set_target(self, channel: str) -> None:
        """Set the channel this key grants access to."""
        if not channel.endswith("/"):
            raise TargetInvalidError()

        parts = channel.rstrip("/").split("/")
        bit_path = 1 << 23  # strict target
        if parts[-1] == "#":
            parts.pop()
            bit_path = 0

        if len(parts) > _MAX_PARTS:
            raise TargetTooLongError()

        for idx, part in enumerate(parts):
            if part not in ("+", "#"):
                bit_path |= 1 << (22 - idx)

        value = of_string("/".join(parts))
        self._put(12, 3, bit_path)
        self._put(16, 4, value)