"""
Example: Growing a Shard Fleet

This example demonstrates how jump consistent hashing keeps most keys in
place when slots are added, and how seeds control agreement between
hashers.
"""

import numpy as np
from jumphash import JumpHasher, DigestType


def main():
    keys = [f"user:{i}" for i in range(100_000)]

    print("=" * 60)
    print("jumphash - Rebalancing Demo")
    print("=" * 60)
    print()

    # Example 1: How many keys move when a shard is added?
    print("Example 1: Adding shards")
    print("-" * 60)

    hasher = JumpHasher()
    for n in (10, 100, 1000):
        moved = hasher.remapped_fraction(keys, n, n + 1)
        print(f"   {n:>5} → {n + 1:<5} shards: {moved:.4%} moved "
              f"(ideal {1 / (n + 1):.4%})")

    print("\n" + "=" * 60)
    print()

    # Example 2: Load per shard
    print("Example 2: Load distribution over 16 shards")
    print("-" * 60)

    counts = np.bincount(hasher.slots(keys, 16, parallel=True), minlength=16)
    for shard, count in enumerate(counts):
        print(f"   shard {shard:>2}: {count:>6} {'#' * (count // 400)}")
    print(f"   min/max ratio: {counts.min() / counts.max():.3f}")

    print("\n" + "=" * 60)
    print()

    # Example 3: Seeds
    print("Example 3: Shared vs independent seeds")
    print("-" * 60)

    shared = JumpHasher()
    replica = JumpHasher.from_seed(shared.seed_bytes())
    independent = JumpHasher()

    sample = keys[:10_000]
    agree = np.mean(shared.slots(sample, 100) == replica.slots(sample, 100))
    differ = np.mean(shared.slots(sample, 100) != independent.slots(sample, 100))
    print(f"   same seed agreement:         {agree:.2%}")
    print(f"   independent seed divergence: {differ:.2%}")

    print("\n" + "=" * 60)
    print()

    # Example 4: Interop with the Rust jumphash crate
    print("Example 4: SipHash-1-3 compatibility mode")
    print("-" * 60)

    rust_compatible = JumpHasher.with_keys(0, 0, digest_type=DigestType.SIPHASH13)
    for key, n in (("test1", 10_000_000), ("test2", 1000), ("", 1000)):
        print(f"   slot({key!r}, {n}) = {rust_compatible.slot(key, n)}")


if __name__ == "__main__":
    main()
