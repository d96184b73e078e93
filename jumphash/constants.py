# jumphash/constants.py
"""
Jump Hash Constants

This module defines constants used throughout the jumphash package:

LAYER 1: Jump Recurrence Constants (Slot Layer)
- LCG_MULTIPLIER: Multiplier of the 64-bit linear congruential step
- JUMP_SCALE: 2^31, numerator of the jump distance
- MASK64: Wraparound mask for unsigned 64-bit arithmetic
- MAX_SLOTS: Largest slot count representable as a signed 64-bit integer

LAYER 2: Key Digest Constants (Seed Layer)
- SEED_BITS / SEED_BYTES: Size of the hasher secret (two 64-bit keys)
- DEFAULT_DIGEST: Name of the digest used when none is requested
"""


# =============================================================================
# LAYER 1: Jump Recurrence Constants (Slot Layer)
# =============================================================================

LCG_MULTIPLIER = 2862933555777941757
JUMP_SCALE = float(1 << 31)
MASK64 = 0xFFFFFFFFFFFFFFFF
MAX_SLOTS = (1 << 63) - 1


# =============================================================================
# LAYER 2: Key Digest Constants (Seed Layer)
# =============================================================================

SEED_BITS = 128
SEED_BYTES = SEED_BITS // 8      # k0 || k1, little-endian
KEY_BYTES = 8                    # one 64-bit key

# Matches DigestType.XXH3.value in digest.py
DEFAULT_DIGEST = "xxh3"

assert SEED_BYTES == 2 * KEY_BYTES, "Seed must hold exactly two 64-bit keys"
