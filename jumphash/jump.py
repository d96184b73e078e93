# jumphash/jump.py
"""
Jump Consistent Hash - 64-bit key → slot in [0, n)

Lamping & Veach, "A Fast, Minimal Memory, Consistent Hash Algorithm"
(https://arxiv.org/abs/1406.2294).

The key seeds a 64-bit linear congruential generator. Each step draws the
next slot count at which the key would "jump"; the walk stops once that
count reaches n, and the last slot visited is the answer:

    b = -1, j = 0
    while j < n:
        b = j
        state = state * 2862933555777941757 + 1        (mod 2^64)
        j = trunc((b + 1) * (2^31 / ((state >> 33) + 1)))   (IEEE double)
    return b

Growing from n to n+1 slots moves a key only if its walk lands on slot n,
which happens with probability 1/(n+1). No ring or slot table is kept.

Two implementations share this module:
- jump_hash_reference: pure Python, masks to 64 bits after every step
- jump_hash / jump_hash_batch: compiled Cython kernel (_jump_core)

Build the extension with: python setup.py build_ext --inplace
"""

from __future__ import annotations
from typing import Iterable, Union
import logging
import operator

import numpy as np

from .constants import LCG_MULTIPLIER, JUMP_SCALE, MASK64, MAX_SLOTS
from .errors import InvalidArgument

try:
    from . import _jump_core
except ImportError:
    raise ImportError(
        "Compiled kernel (jumphash._jump_core) not available. "
        "Please build the Cython extension with: python setup.py build_ext --inplace"
    )


logger = logging.getLogger(__name__)


def check_slot_count(n) -> int:
    """
    Validate a slot count and return it as a plain int.

    Raises:
        InvalidArgument: n is not an integer, n < 1, or n > 2^63 - 1
    """
    if isinstance(n, bool):
        raise InvalidArgument(f"Slot count must be an integer, got {n!r}")
    try:
        n = operator.index(n)
    except TypeError:
        raise InvalidArgument(
            f"Slot count must be an integer, got {type(n).__name__}"
        ) from None
    if n < 1:
        raise InvalidArgument(f"Slot count must be >= 1, got {n}")
    if n > MAX_SLOTS:
        raise InvalidArgument(f"Slot count must be <= {MAX_SLOTS}, got {n}")
    return n


def jump_hash_reference(key: int, n: int) -> int:
    """
    Pure-Python jump consistent hash.

    Args:
        key: Integer key, reduced modulo 2^64
        n: Slot count (>= 1)

    Returns:
        Slot index in [0, n)
    """
    n = check_slot_count(n)
    state = operator.index(key) & MASK64
    b, j = -1, 0
    while j < n:
        b = j
        state = (state * LCG_MULTIPLIER + 1) & MASK64
        j = int((b + 1) * (JUMP_SCALE / ((state >> 33) + 1)))
    return b


def jump_hash(key: int, n: int) -> int:
    """
    Jump consistent hash using the compiled kernel.

    Identical results to jump_hash_reference().

    Args:
        key: Integer key, reduced modulo 2^64
        n: Slot count (>= 1)

    Returns:
        Slot index in [0, n)

    Raises:
        InvalidArgument: n < 1

    Example:
        >>> jump_hash(0xDEAD10CC, 666)
        361
    """
    n = check_slot_count(n)
    return _jump_core.jump_hash(operator.index(key) & MASK64, n)


def as_uint64_array(keys: Union[np.ndarray, Iterable[int]]) -> np.ndarray:
    """
    Convert integer keys to a contiguous uint64 array, wrapping modulo 2^64.

    Signed arrays are reinterpreted as two's complement, Python ints of any
    size are masked.
    """
    if not isinstance(keys, np.ndarray):
        keys = list(keys)
        return np.fromiter((operator.index(k) & MASK64 for k in keys),
                           dtype=np.uint64, count=len(keys))
    arr = keys
    if arr.ndim != 1:
        raise ValueError(f"Expected 1D array of keys, got {arr.ndim}D")
    if arr.size == 0:
        return np.empty(0, dtype=np.uint64)
    if arr.dtype.kind in ('u', 'i'):
        return np.ascontiguousarray(arr.astype(np.uint64, copy=False))
    if arr.dtype.kind == 'O':
        return np.fromiter((operator.index(k) & MASK64 for k in arr),
                           dtype=np.uint64, count=arr.size)
    raise TypeError(f"Keys must be integers, got dtype {arr.dtype}")


def jump_hash_batch(keys: Union[np.ndarray, Iterable[int]], n: int) -> np.ndarray:
    """
    Jump consistent hash for many keys at once.

    The slot count is validated before any key is processed. The loop runs
    in the compiled kernel with the GIL released.

    Args:
        keys: 1D integer array-like
        n: Slot count (>= 1)

    Returns:
        int64 array of slot indices, same length as keys

    Example:
        >>> jump_hash_batch([0, 0xDEAD10CC], 666)
        array([  0, 361])
    """
    n = check_slot_count(n)
    arr = as_uint64_array(keys)
    logger.debug("jump_hash_batch: %d keys, n=%d", arr.size, n)
    return _jump_core.jump_hash_batch(arr, n)


__all__ = [
    'check_slot_count',
    'jump_hash',
    'jump_hash_reference',
    'jump_hash_batch',
    'as_uint64_array',
]
