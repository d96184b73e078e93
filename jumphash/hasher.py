# jumphash/hasher.py
"""
JumpHasher - keyed key → slot mapping

Design principles:
- A JumpHasher holds exactly one immutable DigestConfig (algorithm + seed)
- Slot counts are supplied per call and never stored
- All queries are pure: same hasher, key and n → same slot
- Instances are safe to share across threads without locking

Query Pattern:
    # Random seed (independent placement per instance)
    hasher = JumpHasher()
    slot = hasher.slot("user:42", 100)

    # Explicit seed (every process agrees on placement)
    hasher = JumpHasher.from_seed(seed_bytes)
    slots = hasher.slots(keys, 100, parallel=True)

    # Rust jumphash crate compatibility
    hasher = JumpHasher.with_keys(0, 0, digest_type=DigestType.SIPHASH13)
    hasher.slot("test2", 1000)   # 10
"""

from __future__ import annotations
from typing import Iterable, List, Optional, Union
from concurrent.futures import ThreadPoolExecutor
import logging
import os
import secrets
import threading

import numpy as np

from .constants import DEFAULT_DIGEST, KEY_BYTES, SEED_BITS, SEED_BYTES
from .digest import DigestConfig, DigestType
from .errors import InvalidArgument
from .jump import check_slot_count, jump_hash, jump_hash_batch
from .keys import Key, encode_key


logger = logging.getLogger(__name__)

BytesLike = Union[bytes, bytearray, memoryview]


class JumpHasher:
    """
    Consistent key → slot mapper with a private 128-bit seed.

    Treat instances as immutable. The seed is fixed at construction and
    never exposed through repr().
    """

    __slots__ = ('_config',)

    def __init__(self, k0: Optional[int] = None, k1: Optional[int] = None,
                 digest_type: Union[DigestType, str] = DigestType(DEFAULT_DIGEST),
                 config: Optional[DigestConfig] = None):
        """
        Create a JumpHasher.

        Args:
            k0: Low 64 bits of the seed (random if both keys are omitted)
            k1: High 64 bits of the seed (random if both keys are omitted)
            digest_type: Digest algorithm
            config: Explicit config (overrides the other params)
        """
        if config is not None:
            self._config = config
            random_seed = False
        else:
            random_seed = k0 is None and k1 is None
            if random_seed:
                k0, k1 = secrets.randbits(64), secrets.randbits(64)
            self._config = DigestConfig(
                digest_type=digest_type,
                k0=0 if k0 is None else k0,
                k1=0 if k1 is None else k1,
            )
        logger.debug("JumpHasher created: digest=%s random_seed=%s",
                     self._config.digest_type.value, random_seed)

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @classmethod
    def with_keys(cls, k0: int, k1: int,
                  digest_type: Union[DigestType, str] = DigestType(DEFAULT_DIGEST)) -> JumpHasher:
        """Deterministic hasher seeded with two 64-bit keys."""
        return cls(k0=k0, k1=k1, digest_type=digest_type)

    @classmethod
    def from_seed(cls, seed: Union[int, BytesLike],
                  digest_type: Union[DigestType, str] = DigestType(DEFAULT_DIGEST)) -> JumpHasher:
        """
        Deterministic hasher from a single 128-bit seed.

        Args:
            seed: int in [0, 2^128) (low 64 bits → k0) or 16 bytes
                  (k0 little-endian, then k1)
            digest_type: Digest algorithm

        Raises:
            InvalidArgument: seed out of range or of the wrong length

        Example:
            >>> a = JumpHasher.from_seed(b"0123456789abcdef")
            >>> b = JumpHasher.from_seed(a.seed_bytes())
            >>> a == b
            True
        """
        if isinstance(seed, (bytes, bytearray, memoryview)):
            return cls(config=DigestConfig.from_seed_bytes(bytes(seed), digest_type))
        if isinstance(seed, bool) or not isinstance(seed, int):
            raise InvalidArgument(
                f"Seed must be an int or {SEED_BYTES} bytes, got {type(seed).__name__}"
            )
        if not 0 <= seed < (1 << SEED_BITS):
            raise InvalidArgument(f"Seed must be in [0, 2^{SEED_BITS}), got {seed}")
        mask = (1 << (KEY_BYTES * 8)) - 1
        return cls(k0=seed & mask, k1=seed >> (KEY_BYTES * 8), digest_type=digest_type)

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def config(self) -> DigestConfig:
        """Get the digest configuration for this hasher."""
        return self._config

    @property
    def digest_type(self) -> DigestType:
        return self._config.digest_type

    @property
    def keys(self):
        """The seed as a (k0, k1) tuple."""
        return (self._config.k0, self._config.k1)

    def seed_bytes(self) -> bytes:
        """
        The 16-byte seed, for constructing an identical hasher elsewhere
        with from_seed().
        """
        return self._config.seed_bytes

    # -------------------------------------------------------------------------
    # Digest
    # -------------------------------------------------------------------------

    def digest(self, key: Key) -> int:
        """Encode ``key`` and return its keyed 64-bit digest."""
        return self._config.digest(encode_key(key))

    def digest_raw(self, data: BytesLike) -> int:
        """Keyed 64-bit digest of raw bytes, without key framing."""
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise TypeError(f"Expected bytes-like data, got {type(data).__name__}")
        return self._config.digest(data)

    def _digest_many(self, keys: List[Key]) -> np.ndarray:
        return np.fromiter((self.digest(k) for k in keys),
                           dtype=np.uint64, count=len(keys))

    # -------------------------------------------------------------------------
    # Slot Queries
    # -------------------------------------------------------------------------

    def slot(self, key: Key, n: int) -> int:
        """
        Slot for ``key`` out of ``n`` slots.

        Args:
            key: str, bytes-like, bool, 64-bit int, or a tuple of those
            n: Slot count (>= 1)

        Returns:
            Slot index in [0, n)

        Raises:
            InvalidArgument: n < 1
            TypeError: key type cannot be encoded
        """
        n = check_slot_count(n)
        return jump_hash(self.digest(key), n)

    def slot_for_bytes(self, data: BytesLike, n: int) -> int:
        """Slot for raw bytes, digested without key framing."""
        n = check_slot_count(n)
        return jump_hash(self.digest_raw(data), n)

    def slots(self, keys: Iterable[Key], n: int,
              parallel: bool = False, max_workers: Optional[int] = None) -> np.ndarray:
        """
        Slots for many keys.

        Keys are digested (split into one chunk per worker when ``parallel``
        is set), then all digests go through the compiled batch kernel.

        Args:
            keys: Iterable of keys
            n: Slot count (>= 1)
            parallel: If True, digest chunks in a thread pool
            max_workers: Number of parallel workers (None = CPU count)

        Returns:
            int64 array of slot indices, one per key

        Example:
            >>> hasher = JumpHasher.with_keys(1, 2)
            >>> hasher.slots(["a", "b", "c"], 10, parallel=True).shape
            (3,)
        """
        n = check_slot_count(n)
        if not isinstance(keys, list):
            keys = list(keys)
        if not keys:
            return np.empty(0, dtype=np.int64)

        if parallel:
            max_workers = max_workers or os.cpu_count() or 1
            chunk_size = -(-len(keys) // max_workers)
            chunks = [keys[i:i + chunk_size] for i in range(0, len(keys), chunk_size)]
            logger.debug("slots: %d keys in %d chunks, %d workers",
                         len(keys), len(chunks), max_workers)
            with ThreadPoolExecutor(max_workers=max_workers) as executor:
                digests = np.concatenate(list(executor.map(self._digest_many, chunks)))
        else:
            digests = self._digest_many(keys)

        return jump_hash_batch(digests, n)

    def remapped_fraction(self, keys: Iterable[Key], n_from: int, n_to: int) -> float:
        """
        Fraction of ``keys`` whose slot changes when going from ``n_from``
        to ``n_to`` slots.

        For n_to = n_from + 1 the expected value is 1 / n_to.
        """
        n_from = check_slot_count(n_from)
        n_to = check_slot_count(n_to)
        if not isinstance(keys, list):
            keys = list(keys)
        if not keys:
            return 0.0
        digests = self._digest_many(keys)
        moved = jump_hash_batch(digests, n_from) != jump_hash_batch(digests, n_to)
        return float(np.mean(moved))

    # -------------------------------------------------------------------------
    # Value semantics
    # -------------------------------------------------------------------------

    def __eq__(self, other) -> bool:
        if not isinstance(other, JumpHasher):
            return NotImplemented
        return self._config == other._config

    def __hash__(self) -> int:
        return hash(self._config)

    def __reduce__(self):
        return (self.__class__, (None, None, self._config.digest_type, self._config))

    def __repr__(self) -> str:
        return f"JumpHasher(digest_type={self._config.digest_type.value!r})"


# =============================================================================
# Process-wide default hasher
# =============================================================================

_default_hasher: Optional[JumpHasher] = None
_default_lock = threading.Lock()


def default_hasher() -> JumpHasher:
    """
    Process-wide hasher with a random seed, created on first use.

    Every call in one process returns the same instance. Separate processes
    get different seeds; use JumpHasher.from_seed() when they must agree.
    """
    global _default_hasher
    if _default_hasher is None:
        with _default_lock:
            if _default_hasher is None:
                _default_hasher = JumpHasher()
    return _default_hasher


def set_default_hasher(hasher: Optional[JumpHasher]) -> None:
    """
    Replace the process-wide hasher (None resets to a fresh random one on
    next use).

    WARNING: Changes the slot of every key routed through default_hasher().
    Use at application startup.
    """
    global _default_hasher
    if hasher is not None and not isinstance(hasher, JumpHasher):
        raise TypeError(f"Expected JumpHasher, got {type(hasher).__name__}")
    with _default_lock:
        _default_hasher = hasher


def slot_for_key(key: Key, n: int, hasher: Optional[JumpHasher] = None) -> int:
    """Slot for ``key`` using ``hasher`` or the process-wide default."""
    if hasher is None:
        hasher = default_hasher()
    return hasher.slot(key, n)


__all__ = [
    'JumpHasher',
    'default_hasher',
    'set_default_hasher',
    'slot_for_key',
]
