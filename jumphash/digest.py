# jumphash/digest.py
"""
Key Digest - keyed 64-bit hashing of key bytes

Design principles:
- The digest is a pure function of (seed, bytes)
- The seed is 128 bits, held as two 64-bit keys (k0, k1)
- Digest settings live in one immutable DigestConfig
- Every algorithm returns an unsigned 64-bit integer

Digest Configuration:
    DigestConfig is the SINGLE SOURCE OF TRUTH for digest settings.
    JumpHasher holds one and never mutates it:

        config = DigestConfig(DigestType.SIPHASH13, k0=0, k1=0)
        h = config.digest(b"test2\\xff")

    Supported algorithms:
    - xxh3:      xxhash XXH3-64, seeded with k0, k1 prefixed (default, fast)
    - xxh64:     xxhash XXH64, seeded with k0, k1 prefixed
    - siphash13: SipHash-1-3 keyed with (k0, k1), matches Rust SipHasher13
    - murmur64a: MurmurHash64A seeded with k0, k1 prefixed
    - blake2b:   keyed BLAKE2b with an 8-byte digest

    None of these is meant to resist adversaries who know the seed.
"""

from __future__ import annotations
from typing import Tuple
from dataclasses import dataclass
from enum import Enum
import hashlib
import struct

import xxhash

from .constants import MASK64, KEY_BYTES, SEED_BYTES, DEFAULT_DIGEST
from .errors import InvalidArgument


# =============================================================================
# MURMURHASH64A - Pure Python implementation
# =============================================================================

def murmur_hash64a(data: bytes, seed: int = 0) -> int:
    """
    MurmurHash64A of ``data`` with a 64-bit seed.

    Args:
        data: Bytes to hash
        seed: 64-bit seed value

    Returns:
        64-bit unsigned hash value
    """
    M = 0xc6a4a7935bd1e995
    R = 47

    length = len(data)
    h = (seed ^ (length * M)) & MASK64

    # Process 8-byte chunks
    nblocks = length // 8
    for i in range(nblocks):
        k = struct.unpack_from('<Q', data, i * 8)[0]
        k = (k * M) & MASK64
        k ^= (k >> R)
        k = (k * M) & MASK64
        h ^= k
        h = (h * M) & MASK64

    # Process remaining bytes
    tail = data[nblocks * 8:]
    remaining = len(tail)

    if remaining >= 7:
        h ^= tail[6] << 48
    if remaining >= 6:
        h ^= tail[5] << 40
    if remaining >= 5:
        h ^= tail[4] << 32
    if remaining >= 4:
        h ^= tail[3] << 24
    if remaining >= 3:
        h ^= tail[2] << 16
    if remaining >= 2:
        h ^= tail[1] << 8
    if remaining >= 1:
        h ^= tail[0]
        h = (h * M) & MASK64

    # Finalize
    h ^= (h >> R)
    h = (h * M) & MASK64
    h ^= (h >> R)

    return h


# =============================================================================
# SIPHASH-1-3 - Pure Python implementation
# =============================================================================

def _rotl(x: int, b: int) -> int:
    return ((x << b) | (x >> (64 - b))) & MASK64


def _sip_round(v0: int, v1: int, v2: int, v3: int) -> Tuple[int, int, int, int]:
    v0 = (v0 + v1) & MASK64
    v1 = _rotl(v1, 13) ^ v0
    v0 = _rotl(v0, 32)
    v2 = (v2 + v3) & MASK64
    v3 = _rotl(v3, 16) ^ v2
    v0 = (v0 + v3) & MASK64
    v3 = _rotl(v3, 21) ^ v0
    v2 = (v2 + v1) & MASK64
    v1 = _rotl(v1, 17) ^ v2
    v2 = _rotl(v2, 32)
    return v0, v1, v2, v3


def siphash13(data: bytes, k0: int = 0, k1: int = 0) -> int:
    """
    SipHash-1-3 of ``data`` keyed with (k0, k1).

    One compression round per 8-byte block, three finalization rounds.
    Produces the same value as Rust's ``siphasher::sip::SipHasher13``
    built with ``new_with_keys(k0, k1)`` and fed the same bytes.

    Args:
        data: Bytes to hash
        k0: First 64-bit key
        k1: Second 64-bit key

    Returns:
        64-bit unsigned hash value
    """
    v0 = k0 ^ 0x736f6d6570736575
    v1 = k1 ^ 0x646f72616e646f6d
    v2 = k0 ^ 0x6c7967656e657261
    v3 = k1 ^ 0x7465646279746573

    length = len(data)
    nblocks = length // 8
    for i in range(nblocks):
        m = struct.unpack_from('<Q', data, i * 8)[0]
        v3 ^= m
        v0, v1, v2, v3 = _sip_round(v0, v1, v2, v3)
        v0 ^= m

    # Last block: remaining bytes plus the length in the top byte
    b = ((length & 0xff) << 56) | int.from_bytes(data[nblocks * 8:], 'little')
    v3 ^= b
    v0, v1, v2, v3 = _sip_round(v0, v1, v2, v3)
    v0 ^= b

    v2 ^= 0xff
    for _ in range(3):
        v0, v1, v2, v3 = _sip_round(v0, v1, v2, v3)

    return v0 ^ v1 ^ v2 ^ v3


# =============================================================================
# DIGEST CONFIGURATION - SINGLE SOURCE OF TRUTH
# =============================================================================

class DigestType(Enum):
    """Supported keyed digest algorithms."""
    XXH3 = "xxh3"            # Fast, C implementation via xxhash
    XXH64 = "xxh64"          # Older xxhash 64-bit variant
    SIPHASH13 = "siphash13"  # Interop with Rust jumphash deployments
    MURMUR64A = "murmur64a"  # Pure Python MurmurHash64A
    BLAKE2B = "blake2b"      # hashlib keyed BLAKE2b, 8-byte digest


def _check_key(name: str, value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgument(f"{name} must be an int, got {type(value).__name__}")
    if not 0 <= value <= MASK64:
        raise InvalidArgument(f"{name} must be in [0, 2^64), got {value}")


@dataclass(frozen=True)
class DigestConfig:
    """
    Immutable digest configuration: algorithm plus 128-bit seed.

    Two configs are equal iff they produce identical digests for every
    input, so hashers built from equal configs agree on every slot.

    Attributes:
        digest_type: Algorithm to use (DigestType or its string value)
        k0: Low 64 bits of the seed
        k1: High 64 bits of the seed

    Example:
        >>> config = DigestConfig(DigestType.SIPHASH13, k0=0, k1=0)
        >>> config.digest(b"")
        15130871412783076140
    """
    digest_type: DigestType = DigestType(DEFAULT_DIGEST)
    k0: int = 0
    k1: int = 0

    def __post_init__(self):
        try:
            digest_type = DigestType(self.digest_type)
        except ValueError:
            raise ValueError(f"Unsupported digest type: {self.digest_type!r}") from None
        object.__setattr__(self, 'digest_type', digest_type)
        _check_key('k0', self.k0)
        _check_key('k1', self.k1)

    @classmethod
    def from_seed_bytes(cls, seed: bytes,
                        digest_type: DigestType = DigestType(DEFAULT_DIGEST)) -> DigestConfig:
        """Build a config from a 16-byte seed (k0 LE || k1 LE)."""
        if len(seed) != SEED_BYTES:
            raise InvalidArgument(f"Seed must be {SEED_BYTES} bytes, got {len(seed)}")
        k0 = int.from_bytes(seed[:KEY_BYTES], 'little')
        k1 = int.from_bytes(seed[KEY_BYTES:], 'little')
        return cls(digest_type=digest_type, k0=k0, k1=k1)

    @property
    def seed_bytes(self) -> bytes:
        """The 128-bit seed as 16 bytes (k0 LE || k1 LE)."""
        return self.k0.to_bytes(KEY_BYTES, 'little') + self.k1.to_bytes(KEY_BYTES, 'little')

    def digest(self, data: bytes) -> int:
        """
        Keyed 64-bit digest of ``data``.

        Any byte sequence is valid input, including empty.

        Returns:
            Unsigned 64-bit integer
        """
        if self.digest_type == DigestType.XXH3:
            h = xxhash.xxh3_64(seed=self.k0)
            h.update(self.k1.to_bytes(KEY_BYTES, 'little'))
            h.update(data)
            return h.intdigest()
        elif self.digest_type == DigestType.XXH64:
            h = xxhash.xxh64(seed=self.k0)
            h.update(self.k1.to_bytes(KEY_BYTES, 'little'))
            h.update(data)
            return h.intdigest()
        elif self.digest_type == DigestType.SIPHASH13:
            return siphash13(data, self.k0, self.k1)
        elif self.digest_type == DigestType.MURMUR64A:
            return murmur_hash64a(self.k1.to_bytes(KEY_BYTES, 'little') + bytes(data), self.k0)
        elif self.digest_type == DigestType.BLAKE2B:
            d = hashlib.blake2b(data, digest_size=8, key=self.seed_bytes).digest()
            return int.from_bytes(d, 'little')
        raise ValueError(f"Unsupported digest type: {self.digest_type}")

    def __repr__(self) -> str:
        # Seed stays out of reprs and logs
        return f"DigestConfig(digest_type={self.digest_type.value!r}, seed=<hidden>)"


__all__ = [
    'DigestType',
    'DigestConfig',
    'murmur_hash64a',
    'siphash13',
]
