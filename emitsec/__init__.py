"""Channel parsing, security keys, key ciphers and licences for a publish/subscribe broker."""

__version__ = "0.1.0"