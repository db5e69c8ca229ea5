from datetime import datetime, timezone

import pytest

from emitsec.key import Permission
from emitsec.license_v1 import V1, LicenseType, new_v1, parse_v1


def test_new_v1():
    lic = new_v1()
    assert len(lic.encryption_key) == 22
    assert lic.license_type == LicenseType.ON_PREMISE

    cipher = lic.cipher()
    master = lic.new_master_key(9)
    assert cipher.decrypt_key(cipher.encrypt_key(master)) == master

    text = str(lic)
    assert text.endswith(":1")

    out = parse_v1(text[:-2])
    assert out == lic

    assert master.master == 9
    assert master.contract == lic.user
    assert master.signature == lic.sign
    assert master.is_master()
    assert master.permissions == Permission.MASTER
    assert 0 <= master.salt < 32767


def test_parse_v1_values():
    lic = parse_v1("zT83oDV0DWY5_JysbSTPTDr8KB0AAAAAFCDVAAAAAAI")
    assert lic.contract() == 0x3AFC281D
    assert lic.signature() == 0
    assert lic.master() == 1
    assert lic == V1(
        encryption_key="zT83oDV0DWY5_JysbSTPTA",
        user=989603869,
        expires=datetime.fromtimestamp(1600000000, tz=timezone.utc),
        license_type=2,
    )


def test_parse_v1_without_expiry():
    lic = parse_v1("zT83oDV0DWY5_JysbSTPTDr8KB0AAAAAAAAAAAAAAAI9")
    assert lic == V1(
        encryption_key="zT83oDV0DWY5_JysbSTPTA",
        user=989603869,
        expires=datetime.fromtimestamp(0, tz=timezone.utc),
        license_type=2,
    )


@pytest.mark.parametrize(
    "lic, expected",
    [
        (
            V1(
                encryption_key="zT83oDV0DWY5_JysbSTPTA",
                user=989603869,
                expires=datetime.fromtimestamp(1600000000, tz=timezone.utc),
                license_type=2,
            ),
            "zT83oDV0DWY5_JysbSTPTDr8KB0AAAAAFCDVAAAAAAI:1",
        ),
        (
            V1(
                encryption_key="zT83oDV0DWY5_JysbSTPTA",
                user=989603869,
                expires=datetime.fromtimestamp(0, tz=timezone.utc),
                license_type=2,
            ),
            "zT83oDV0DWY5_JysbSTPTDr8KB0AAAAAAAAAAAAAAAI:1",
        ),
        (V1(encryption_key="zT83oDV0DWY5_JysbSTPT%"), ""),
    ],
)
def test_v1_encode(lic, expected):
    assert str(lic) == expected


def test_parse_v1_invalid_character():
    with pytest.raises(ValueError):
        parse_v1("zT83oDV0DWY5_JysbSTPTDr8KB0AAAAAAAAAAAAAAAI#")


def test_parse_v1_too_short():
    with pytest.raises(ValueError):
        parse_v1("zT83oDV0")


def test_v1_cipher_rejects_bad_key():
    with pytest.raises(ValueError):
        V1(encryption_key="short").cipher()