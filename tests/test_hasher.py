"""
Tests for JumpHasher and the module-level conveniences
"""

import copy
import pickle
from concurrent.futures import ThreadPoolExecutor

import pytest
import numpy as np

import jumphash
from jumphash import (
    DigestType,
    InvalidArgument,
    JumpHasher,
    default_hasher,
    set_default_hasher,
    slot_for_key,
)


KEYS = [f"user:{i}" for i in range(2000)]


@pytest.fixture
def restore_default():
    previous = jumphash.hasher._default_hasher
    yield
    set_default_hasher(previous)


class TestRustCompatibility:
    """Slots must match the Rust jumphash crate with SipHash-1-3 keys (0, 0)."""

    @pytest.mark.parametrize("key,n,expected", [
        ("test1", 10000000, 8970050),
        ("test2", 1000, 10),
        ("test3", 1000, 76),
        ("test4", 1000, 161),
        ("test5", 50, 33),
        ("", 1000, 392),
        ("testz", 1, 0),
    ])
    def test_string_keys(self, key, n, expected):
        hasher = JumpHasher.with_keys(0, 0, digest_type=DigestType.SIPHASH13)
        assert hasher.slot(key, n) == expected

    def test_u64_key(self):
        hasher = JumpHasher.with_keys(0, 0, digest_type="siphash13")
        assert hasher.slot(7, 1000) == 567

    def test_byte_slice_key(self):
        hasher = JumpHasher.with_keys(0, 0, digest_type="siphash13")
        assert hasher.slot(b"ab", 1000) == 632

    def test_random_hasher_differs_from_fixed_keys(self):
        hasher = JumpHasher(digest_type=DigestType.SIPHASH13)
        assert any(hasher.slot(f"test{i}", 10000000) != 8970050 for i in range(1, 101))


class TestConstruction:
    def test_random_seed(self):
        a, b = JumpHasher(), JumpHasher()
        assert a.keys != b.keys
        assert a != b

    def test_with_keys(self):
        hasher = JumpHasher.with_keys(1, 2)
        assert hasher.keys == (1, 2)
        assert hasher.digest_type == DigestType.XXH3

    def test_single_key_defaults_other_to_zero(self):
        assert JumpHasher(k0=5).keys == (5, 0)
        assert JumpHasher(k1=5).keys == (0, 5)

    def test_from_seed_int_and_bytes_agree(self):
        seed = 0x0123456789abcdef_fedcba9876543210
        by_int = JumpHasher.from_seed(seed)
        by_bytes = JumpHasher.from_seed(seed.to_bytes(16, "little"))
        assert by_int == by_bytes
        assert by_int.keys == (0xfedcba9876543210, 0x0123456789abcdef)

    def test_seed_bytes_round_trip(self):
        original = JumpHasher()
        clone = JumpHasher.from_seed(original.seed_bytes())
        assert clone == original
        assert [clone.slot(k, 97) for k in KEYS[:200]] == [original.slot(k, 97) for k in KEYS[:200]]

    @pytest.mark.parametrize("seed", [-1, 2**128, b"too short", b"x" * 17, "seed", 1.0, True])
    def test_invalid_seed(self, seed):
        with pytest.raises(InvalidArgument):
            JumpHasher.from_seed(seed)

    def test_invalid_keys(self):
        with pytest.raises(InvalidArgument):
            JumpHasher.with_keys(-1, 0)
        with pytest.raises(InvalidArgument):
            JumpHasher.with_keys(0, 2**64)

    def test_repr_hides_seed(self):
        hasher = JumpHasher.with_keys(123456789, 987654321)
        assert "123456789" not in repr(hasher)
        assert "xxh3" in repr(hasher)


class TestValueSemantics:
    def test_equal_configs(self):
        a = JumpHasher.with_keys(1, 2, DigestType.BLAKE2B)
        b = JumpHasher.with_keys(1, 2, DigestType.BLAKE2B)
        c = JumpHasher.with_keys(1, 2, DigestType.XXH3)
        assert a == b
        assert hash(a) == hash(b)
        assert a != c
        assert len({a, b, c}) == 2

    def test_pickle(self):
        hasher = JumpHasher(digest_type=DigestType.MURMUR64A)
        restored = pickle.loads(pickle.dumps(hasher))
        assert restored == hasher
        assert restored.slot("key", 1000) == hasher.slot("key", 1000)

    def test_copy(self):
        hasher = JumpHasher()
        assert copy.copy(hasher) == hasher
        assert copy.deepcopy(hasher) == hasher


class TestSlot:
    @pytest.mark.parametrize("digest_type", list(DigestType))
    def test_deterministic_and_in_range(self, digest_type):
        hasher = JumpHasher(digest_type=digest_type)
        for key in KEYS[:300]:
            slot = hasher.slot(key, 37)
            assert 0 <= slot < 37
            assert hasher.slot(key, 37) == slot

    def test_base_case(self):
        hasher = JumpHasher()
        assert all(hasher.slot(key, 1) == 0 for key in KEYS[:200])

    @pytest.mark.parametrize("n", [0, -5, 1.5, "3"])
    def test_invalid_n(self, n):
        hasher = JumpHasher()
        with pytest.raises(InvalidArgument):
            hasher.slot("key", n)
        with pytest.raises(InvalidArgument):
            hasher.slot_for_bytes(b"key", n)

    def test_unsupported_key(self):
        with pytest.raises(TypeError):
            JumpHasher().slot(3.14, 10)

    def test_key_types(self):
        hasher = JumpHasher.with_keys(3, 4)
        for key in ("s", b"b", bytearray(b"b"), 42, -42, True, ("tenant", 7)):
            assert 0 <= hasher.slot(key, 10) < 10

    def test_slot_for_bytes_skips_framing(self):
        hasher = JumpHasher.with_keys(3, 4, DigestType.SIPHASH13)
        assert hasher.slot_for_bytes(b"test2\xff", 1000) == hasher.slot("test2", 1000)
        assert hasher.digest_raw(b"test2\xff") == hasher.digest("test2")

    def test_digest_raw_rejects_str(self):
        with pytest.raises(TypeError):
            JumpHasher().digest_raw("text")

    def test_independent_seeds_diverge(self):
        a = JumpHasher.with_keys(1, 1)
        b = JumpHasher.with_keys(2, 2)
        differing = sum(a.slot(k, 1000) != b.slot(k, 1000) for k in KEYS)
        assert differing > len(KEYS) // 2

    def test_concurrent_queries(self):
        hasher = JumpHasher()
        expected = [hasher.slot(k, 512) for k in KEYS]
        with ThreadPoolExecutor(max_workers=8) as executor:
            results = list(executor.map(lambda k: hasher.slot(k, 512), KEYS))
        assert results == expected


class TestBatch:
    def test_slots_match_slot(self):
        hasher = JumpHasher()
        slots = hasher.slots(KEYS, 250)
        assert slots.dtype == np.int64
        assert slots.tolist() == [hasher.slot(k, 250) for k in KEYS]

    def test_parallel_matches_sequential(self):
        hasher = JumpHasher()
        sequential = hasher.slots(KEYS, 250)
        parallel = hasher.slots(KEYS, 250, parallel=True, max_workers=4)
        assert np.array_equal(sequential, parallel)

    def test_parallel_more_workers_than_keys(self):
        hasher = JumpHasher()
        assert hasher.slots(KEYS[:3], 10, parallel=True, max_workers=16).tolist() == [
            hasher.slot(k, 10) for k in KEYS[:3]
        ]

    def test_empty(self):
        slots = JumpHasher().slots([], 10)
        assert slots.shape == (0,)
        assert slots.dtype == np.int64

    def test_invalid_n_before_consuming_keys(self):
        def keys():
            raise AssertionError("keys consumed")
            yield

        with pytest.raises(InvalidArgument):
            JumpHasher().slots(keys(), 0)

    def test_generator_input(self):
        hasher = JumpHasher()
        assert hasher.slots((k for k in KEYS[:10]), 5).tolist() == hasher.slots(KEYS[:10], 5).tolist()

    def test_remapped_fraction(self):
        hasher = JumpHasher()
        keys = [f"item-{i}" for i in range(20000)]
        fraction = hasher.remapped_fraction(keys, 10, 11)
        assert abs(fraction - 1 / 11) <= 0.2 / 11

    def test_remapped_fraction_same_n(self):
        assert JumpHasher().remapped_fraction(KEYS, 10, 10) == 0.0

    def test_remapped_fraction_empty(self):
        assert JumpHasher().remapped_fraction([], 10, 11) == 0.0


class TestDefaultHasher:
    def test_same_instance(self, restore_default):
        set_default_hasher(None)
        assert default_hasher() is default_hasher()

    def test_set_default(self, restore_default):
        hasher = JumpHasher.with_keys(9, 9)
        set_default_hasher(hasher)
        assert default_hasher() is hasher
        assert slot_for_key("key", 100) == hasher.slot("key", 100)

    def test_set_default_rejects_other_types(self, restore_default):
        with pytest.raises(TypeError):
            set_default_hasher("not a hasher")

    def test_explicit_hasher(self):
        hasher = JumpHasher.with_keys(5, 6)
        assert slot_for_key("key", 100, hasher=hasher) == hasher.slot("key", 100)
