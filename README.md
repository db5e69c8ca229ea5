# emitsec

Security primitives for a publish/subscribe broker. The package covers:

- parsing of channel strings;
- compact 24-byte security keys;
- the ciphers that encrypt those keys;
- the licences that carry the cipher material.

It uses only the standard library.

## Installation

```
pip install .
```

To run the tests as well:

```
pip install ".[test]"
pytest
```

## Modules

### `emitsec.hashing`

`of(data)` returns the seeded 32-bit murmur3 hash of bytes. The result is byte-swapped, which is how channel parts are hashed. `of_string(value)` hashes the UTF-8 encoding of a string.

### `emitsec.channel`

`parse_channel(text)` parses `key/part/part/?opt=value&...`. `make_channel(key, channel_with_options)` joins its two arguments with `/` and parses the result. Both return a `Channel`, which has these fields:

- `key` and `channel`, as bytes;
- `query`, the hashes of the channel parts;
- `options`, a list of `ChannelOption(key, value)`;
- `channel_type`, a `ChannelType`: `INVALID`, `STATIC` or `WILDCARD`.

Parsing never raises. Malformed input comes back with `ChannelType.INVALID`.

A `Channel` also offers these methods:

- `target()`: the hash of the first part.
- `ttl()` and `last()`: the integer option, or `None` when it is missing or not a number.
- `exclude()`: `True` when `me=0` is given.
- `window()`: the `from`/`until` options as a pair of UTC datetimes. A value outside 2018–2066 becomes the Unix epoch.
- `safe_string()`: the channel and its options, without the key.
- `str(channel)`: the key, then `/`, then the safe string.

### `emitsec.ident`

- `ID` is an unsigned 64-bit integer.
- `str(ID(1))` gives `"01"`, the uvarint bytes in upper-case hex.
- `ID.unique(prefix, salt)` derives a base32 string with PBKDF2-SHA1.
- `IdGenerator(start)` hands out increasing IDs from `next()` and is safe to share between threads.
- `new_id()` uses a process-wide generator seeded from the current time.

### `emitsec.key`

`Key(data)` wraps the raw key bytes; it defaults to 24 zero bytes. It has these properties:

- `salt`
- `master`
- `contract`
- `signature`
- `permissions`, a `Permission` flag
- `expires`, a UTC datetime; the epoch means the key never expires

It has these methods:

- `set_target(channel)` limits the key to a channel such as `"a/+/c/"` or `"a/b/#/"`. It raises `TargetInvalidError` when the channel has no trailing `/`, and `TargetTooLongError` when it has more than 23 parts.
- `validate_channel(channel)` checks a parsed `Channel` against that target.
- `has_permission(flag)`
- `set_permission(flag, value)`
- `is_master()`
- `is_expired()`
- `is_empty()`

### `emitsec.b64`

`decode_key(src)` decodes URL-safe base64 without padding. It raises `CorruptInputError`, a `ValueError`, with the offset of the bad byte.

### `emitsec.xtea`, `emitsec.salsa` and `emitsec.shuffle`

These modules hold the three key ciphers:

| Cipher | Module | Constructed from |
|---|---|---|
| `Xtea(value)` | `emitsec.xtea` | a 22-character base64 key |
| `Salsa(key, nonce)` | `emitsec.salsa` | a 32-byte key and a 24-byte nonce (XSalsa20) |
| `Shuffle(key, nonce)` | `emitsec.shuffle` | a 32-byte key and a 16-byte nonce; the key's salt is mixed into the nonce |

Each cipher has `encrypt_key(key)`, which returns a 32-character base64 string, and `decrypt_key(buffer)`, which returns a `Key`. Bad cipher material or a malformed encrypted key raises `ValueError`.

`emitsec.salsa` also exposes the two Salsa20 primitives, `hsalsa20(key, nonce)` and `xor_key_stream(data, counter, key)`.

### `emitsec.license`, `emitsec.license_v1`, `emitsec.license_v2` and `emitsec.license_v3`

There are three licence classes:

| Class | Cipher | Stored form |
|---|---|---|
| `V1` | `Xtea` | raw base64, suffix `:1` |
| `V2` | `Salsa` | binary, snappy-compressed and base64-encoded, suffix `:2` |
| `V3` | `Shuffle` | binary, snappy-compressed and base64-encoded, suffix `:3` |

Each class has these methods:

- `cipher()`
- `contract()`
- `signature()`
- `master()`
- `new_master_key(id)`
- `str(...)`

`new_v1()`, `new_v2()` and `new_v3()` create licences with random material. `parse_v1`, `parse_v2` and `parse_v3` each decode one version from text without its suffix.

`license.new()` returns a fresh v3 licence string together with its encrypted master key. `license.parse(data)` chooses the version from the suffix; text with no suffix is read as v1. It raises `LicenseError` for missing or corrupt input.

### `emitsec.wire`

This module holds the binary layout and the snappy block codec that v2 and v3 licences use:

- `snappy_encode(data)`
- `snappy_decode(data)`
- `marshal_license(encryption_key, encryption_salt, user, sign, index)`
- `unmarshal_license(data)`

Corrupt data raises `WireError`.

## Example

```python
from emitsec.channel import parse_channel
from emitsec.key import Key, Permission
from emitsec.license import new, parse

channel = parse_channel(b"emitter/a/b/c/?ttl=30")
print(channel.channel_type, channel.ttl())   # ChannelType.STATIC 30

key = Key(bytes(24))
key.set_target("a/b/#/")
key.set_permission(Permission.READ, True)
print(key.validate_channel(channel))          # True

license_text, master = new()
lic = parse(license_text)
decrypted = lic.cipher().decrypt_key(master.encode())
print(decrypted.is_master())                  # True
```

## What this package does not do

This is a library of building blocks. It has none of the following:

- a broker or server;
- networking or cluster membership;
- message storage;
- a command-line program.

Checking a key against a ban list or a contract is left to the application that uses it.