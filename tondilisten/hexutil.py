"""Hex-encoded binary values and fixed-size hash parsing."""

from __future__ import annotations

import binascii
from dataclasses import dataclass

HASH256_SIZE = 32


class DbError(Exception):
    """Error raised by the database layer.

    Internal errors render with an ``Internal server error:`` prefix;
    generic errors render their message unchanged.
    """

    def __init__(self, message: str, *, internal: bool = False) -> None:
        self.message = message
        self.internal = internal
        text = f"Internal server error: {message}" if internal else message
        super().__init__(text)


def _unhex(text: str) -> bytes:
    try:
        return binascii.unhexlify(text)
    except (binascii.Error, ValueError) as exc:
        raise DbError(f"Invalid hex: {exc}", internal=True) from exc


@dataclass(frozen=True)
class Hex:
    """A binary value carried as its lower-case hex string."""

    inner: str

    def __str__(self) -> str:
        return self.inner

    def decode(self) -> bytes:
        """Return the bytes the hex string stands for."""
        return _unhex(self.inner)

    @classmethod
    def from_bytes(cls, data: bytes) -> Hex:
        """Encode raw bytes as lower-case hex."""
        return cls(bytes(data).hex())


def hash_from_hex(hex_value: str | bytes, size: int = HASH256_SIZE) -> bytes:
    """Parse a hex string (or its UTF-8 bytes) into a hash of exactly ``size`` bytes."""
    if isinstance(hex_value, (bytes, bytearray, memoryview)):
        try:
            text = bytes(hex_value).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise DbError(f"Invalid UTF-8: {exc}", internal=True) from exc
    else:
        text = hex_value
    data = _unhex(text)
    if len(data) != size:
        raise DbError(f"Expected {size} bytes, got {len(data)}", internal=True)
    return data