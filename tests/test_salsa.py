from datetime import datetime, timezone

import pytest

from emitsec.b64 import CorruptInputError
from emitsec.key import Key, Permission
from emitsec.salsa import Salsa, hsalsa20, xor_key_stream


def make_key(salt=999):
    key = Key()
    key.salt = salt
    key.master = 2
    key.contract = 123
    key.signature = 777
    key.permissions = Permission.READ_WRITE
    key.set_target("a/b/c/")
    key.expires = datetime.fromtimestamp(1497683272, tz=timezone.utc)
    return key


def zero_cipher():
    return Salsa(bytes(32), bytes(24))


def test_salsa_encrypt_and_decrypt():
    cipher = zero_cipher()
    key = make_key()

    encoded = cipher.encrypt_key(key)
    assert encoded == "uYkm3UsuorRk0tBqliO18gs5xXmXioMF"

    decoded = cipher.decrypt_key(encoded.encode("ascii"))
    assert decoded == key


def test_salsa_decrypt_accepts_str():
    cipher = zero_cipher()
    key = make_key()
    assert cipher.decrypt_key(cipher.encrypt_key(key)) == key


@pytest.mark.parametrize("encoded", ["", "aaaaaaaaaaaaaaaaaaaaaaaaaaaaaaa*"])
def test_salsa_decrypt_errors(encoded):
    with pytest.raises(ValueError):
        zero_cipher().decrypt_key(encoded.encode("ascii"))


def test_salsa_decrypt_corrupt_character():
    with pytest.raises(CorruptInputError) as info:
        zero_cipher().decrypt_key(b"aaaaaaaaaaaaaaaaaaaaaaaaaaaaaaa*")
    assert info.value.offset == 31


def test_new_salsa_happy_path():
    cipher = Salsa(bytes(32), bytes(24))
    assert cipher.decrypt_key(cipher.encrypt_key(make_key())) == make_key()


def test_new_salsa_errors():
    with pytest.raises(ValueError):
        Salsa(None, None)
    with pytest.raises(ValueError):
        Salsa(bytes(31), bytes(24))
    with pytest.raises(ValueError):
        Salsa(bytes(32), bytes(16))


def test_xor_key_stream_is_involution():
    key = bytes(range(32))
    counter = bytes(range(16))
    data = b"some plaintext that spans more than a single salsa block" * 3
    encrypted = xor_key_stream(data, counter, key)
    assert encrypted != data
    assert xor_key_stream(encrypted, counter, key) == data


def test_xor_key_stream_prefix_is_stable():
    key = bytes(range(32))
    counter = bytes(16)
    zeros = bytes(200)
    long_stream = xor_key_stream(zeros, counter, key)
    short_stream = xor_key_stream(zeros[:24], counter, key)
    assert len(long_stream) == 200
    assert long_stream[:24] == short_stream


def test_xor_key_stream_counter_advances_per_block():
    key = bytes(range(32))
    stream = xor_key_stream(bytes(128), bytes(16), key)
    next_counter = bytes(8) + (1).to_bytes(8, "little")
    assert stream[64:] == xor_key_stream(bytes(64), next_counter, key)


def test_hsalsa20_shape_and_errors():
    sub_key = hsalsa20(bytes(32), bytes(16))
    assert len(sub_key) == 32
    assert sub_key != hsalsa20(bytes(32), b"\x01" + bytes(15))
    with pytest.raises(ValueError):
        hsalsa20(bytes(16), bytes(16))
    with pytest.raises(ValueError):
        hsalsa20(bytes(32), bytes(8))