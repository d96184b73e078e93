# jumphash/keys.py
"""
Key Encoding - Python values to digest input bytes

Keys reach the digest as bytes. The framing follows the Rust ``Hash``
trait conventions so that a SipHash-1-3 hasher keyed like a Rust
``jumphash::JumpHasher`` assigns the same slots:

    str                  → UTF-8 bytes + b'\\xff'
    bytes-like           → u64 LE length prefix + bytes
    bool                 → b'\\x00' / b'\\x01'
    int (64-bit range)   → 8 bytes LE (two's complement when negative)
    tuple                → concatenation of element encodings

Anything else must be serialized by the caller first.
"""

from __future__ import annotations
from typing import Union, Tuple
import struct

from .constants import KEY_BYTES


Key = Union[str, bytes, bytearray, memoryview, bool, int, Tuple["Key", ...]]

STR_TERMINATOR = b"\xff"

_I64_MIN = -(1 << 63)
_U64_LIMIT = 1 << 64


def encode_int(value: int) -> bytes:
    """Encode an int as 8 little-endian bytes (i64 if negative, else u64)."""
    if value < _I64_MIN or value >= _U64_LIMIT:
        raise OverflowError(
            f"Integer key {value} does not fit in 64 bits"
        )
    return value.to_bytes(KEY_BYTES, "little", signed=value < 0)


def _encode_into(key: Key, out: bytearray) -> None:
    # bool before int: bool is an int subclass
    if isinstance(key, str):
        out += key.encode("utf-8")
        out += STR_TERMINATOR
    elif isinstance(key, (bytes, bytearray, memoryview)):
        data = bytes(key)
        out += struct.pack("<Q", len(data))
        out += data
    elif isinstance(key, bool):
        out.append(1 if key else 0)
    elif isinstance(key, int):
        out += encode_int(key)
    elif isinstance(key, tuple):
        for item in key:
            _encode_into(item, out)
    else:
        raise TypeError(
            f"Unsupported key type {type(key).__name__}; "
            f"serialize it to bytes first"
        )


def encode_key(key: Key) -> bytes:
    """
    Serialize a key to the bytes fed into the digest.

    Args:
        key: str, bytes-like, bool, 64-bit int, or a tuple of those

    Returns:
        Deterministic byte encoding of the key

    Raises:
        TypeError: Unsupported key type
        OverflowError: Integer outside [-2^63, 2^64)

    Example:
        >>> encode_key("ab")
        b'ab\\xff'
        >>> encode_key(7)
        b'\\x07\\x00\\x00\\x00\\x00\\x00\\x00\\x00'
    """
    out = bytearray()
    _encode_into(key, out)
    return bytes(out)


__all__ = [
    'Key',
    'encode_key',
    'encode_int',
]
