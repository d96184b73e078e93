"""
jumphash - Jump Consistent Hashing

This package maps arbitrary keys to one of N ordered slots so that changing
N moves the minimum possible fraction of keys, with no ring or slot table:

- keys: Key encoding (Python value → bytes)
- digest: Keyed 64-bit digests (xxhash, SipHash-1-3, MurmurHash64A, BLAKE2b)
- jump: Jump consistent hash (pure-Python reference + Cython kernel)
- hasher: JumpHasher, the seeded key → slot mapper

================================================================================
PIPELINE
================================================================================

    key → encode_key → bytes → DigestConfig.digest (seeded) → u64
        → jump_hash(u64, n) → slot in [0, n)

Each JumpHasher carries its own 128-bit seed. Hashers built with different
seeds place the same key independently, so separately configured fleets do
not pile their unlucky keys onto the same slot. Hashers built with the same
explicit seed agree on every slot, across processes and machines.

================================================================================
QUICK START
================================================================================

    >>> from jumphash import JumpHasher
    >>> hasher = JumpHasher.from_seed(0x0123456789abcdef0123456789abcdef)
    >>> hasher.slot("user:42", 100)          # doctest: +SKIP
    >>> hasher.slots(["a", "b", "c"], 100)   # doctest: +SKIP

Build the compiled kernel first:
    python setup.py build_ext --inplace
"""

from .errors import InvalidArgument

from .keys import Key, encode_key

from .digest import (
    DigestType,
    DigestConfig,
    murmur_hash64a,
    siphash13,
)

from .jump import (
    check_slot_count,
    jump_hash,
    jump_hash_reference,
    jump_hash_batch,
)

from .hasher import (
    JumpHasher,
    default_hasher,
    set_default_hasher,
    slot_for_key,
)

__version__ = "1.0.0"

__all__ = [
    # Errors
    "InvalidArgument",
    # Key encoding
    "Key",
    "encode_key",
    # Digest
    "DigestType",
    "DigestConfig",
    "murmur_hash64a",
    "siphash13",
    # Jump hash
    "check_slot_count",
    "jump_hash",
    "jump_hash_reference",
    "jump_hash_batch",
    # Hasher
    "JumpHasher",
    "default_hasher",
    "set_default_hasher",
    "slot_for_key",
]
