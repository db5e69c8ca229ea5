"""Creation and parsing of licenses of every version."""

from __future__ import annotations

from .license_v1 import V1, parse_v1
from .license_v2 import V2, parse_v2
from .license_v3 import V3, new_v3, parse_v3

_MISSING = (
    "No license was found, please provide a valid license key through the "
    "configuration file, an EMITTER_LICENSE environment variable or a valid "
    "vault key 'secrets/emitter/license'"
)

_PARSERS = {":1": parse_v1, ":2": parse_v2, ":3": parse_v3}


class LicenseError(ValueError):
    """A license is missing or cannot be decoded."""


def new() -> tuple[str, str]:
    """Generate a new license and its encrypted master key."""
    lic = new_v3()
    secret = lic.new_master_key(1)
    master = lic.cipher().encrypt_key(secret)
    return str(lic), master


def parse(data: str) -> V1 | V2 | V3:
    """Parse a license of any version."""
    if len(data) < 5:
        raise LicenseError(_MISSING)

    parser = _PARSERS.get(data[-2:])
    payload = data[:-2] if parser else data
    try:
        return (parser or parse_v1)(payload)
    except ValueError as exc:
        raise LicenseError(str(exc)) from exc