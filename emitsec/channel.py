"""Parsing of channel strings of the form ``key/channel/?opt=value``."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import IntEnum

from .hashing import of

MIN_TIME = 1514764800  # 2018
MAX_TIME = 3029529600  # 2066

_EPOCH = datetime.fromtimestamp(0, tz=timezone.utc)
_INT64_MIN = -(1 << 63)
_INT64_MAX = (1 << 63) - 1

_SEGMENT = re.compile(rb"[#+*]|[\x24\x2d-\x3a\x41-\x7a]+")
_OPTIONS = re.compile(rb"(?:[A-Za-z0-9]+=[A-Za-z0-9]+&)*[A-Za-z0-9]+=[A-Za-z0-9]+&?")
_WILDCARDS = frozenset({b"#", b"+", b"*"})


class ChannelType(IntEnum):
    """Kind of a parsed channel."""

    INVALID = 0
    STATIC = 1
    WILDCARD = 2


@dataclass(frozen=True)
class ChannelOption:
    """A key/value option given after the ``?`` of a channel."""

    key: str
    value: str


@dataclass
class Channel:
    """A parsed channel with its key, path, hashed query and options."""

    key: bytes = b""
    channel: bytes = b""
    query: list[int] = field(default_factory=list)
    options: list[ChannelOption] = field(default_factory=list)
    channel_type: ChannelType = ChannelType.INVALID

    def target(self) -> int:
        """Return the hash of the first channel segment."""
        return self.query[0]

    def ttl(self) -> int | None:
        """Return the ``ttl`` option, or None if absent or not a number."""
        return self._int_option("ttl")

    def last(self) -> int | None:
        """Return the ``last`` option, or None if absent or not a number."""
        return self._int_option("last")

    def exclude(self) -> bool:
        """Return True when the ``me=0`` option is present."""
        return self._int_option("me") == 0

    def window(self) -> tuple[datetime, datetime]:
        """Return the ``from``/``until`` window as UTC datetimes."""
        return (
            _to_time(self._int_option("from")),
            _to_time(self._int_option("until")),
        )

    def safe_string(self) -> str:
        """Return the channel with its options but without the key."""
        text = self.channel.decode("utf-8", errors="replace")
        if not self.options:
            return text
        return text + "?" + "&".join(f"{o.key}={o.value}" for o in self.options)

    def __str__(self) -> str:
        return self.key.decode("utf-8", errors="replace") + "/" + self.safe_string()

    def _int_option(self, name: str) -> int | None:
        raw = next((o.value for o in self.options if o.key == name), None)
        if raw is None:
            return None
        try:
            value = int(raw, 10)
        except ValueError:
            return None
        if not _INT64_MIN <= value <= _INT64_MAX:
            return None
        return value


def _to_time(value: int | None) -> datetime:
    if not value or value < MIN_TIME or value > MAX_TIME:
        return _EPOCH
    return datetime.fromtimestamp(value, tz=timezone.utc)


def _find_terminator(rest: bytes) -> int | None:
    """Index of the first separator that ends the path, if any."""
    index = rest.find(b"/")
    while index != -1:
        if rest[index + 1 : index + 2] in (b"", b"?"):
            return index
        index = rest.find(b"/", index + 1)
    return None


def parse_channel(text: bytes | bytearray | str) -> Channel:
    """Parse a channel string; invalid input yields an INVALID channel."""
    data = text.encode("utf-8") if isinstance(text, str) else bytes(text)
    channel = Channel()

    key_end = data.find(b"/")
    if key_end <= 0:
        return channel
    channel.key = data[:key_end]

    rest = data[key_end + 1 :]
    end = _find_terminator(rest)
    if end is None:
        return channel

    segments = rest[:end].split(b"/")
    if not all(_SEGMENT.fullmatch(segment) for segment in segments):
        return channel

    channel.query = [of(segment) for segment in segments]
    channel.channel = rest[: end + 1]

    options = rest[end + 2 :]
    if options:
        if not _OPTIONS.fullmatch(options):
            return channel
        channel.options = [
            ChannelOption(*pair.decode("ascii").split("=", 1))
            for pair in options.rstrip(b"&").split(b"&")
        ]

    if any(segment in _WILDCARDS for segment in segments):
        channel.channel_type = ChannelType.WILDCARD
    else:
        channel.channel_type = ChannelType.STATIC
    return channel


def make_channel(key: str, channel_with_options: str) -> Channel:
    """Parse a channel from a separate key and channel string."""
    return parse_channel(f"{key}/{channel_with_options}")