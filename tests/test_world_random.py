import os
import sys

import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from world_random import WorldRandom, chunk_seed, CHUNK_X_FACTOR, CHUNK_Z_FACTOR


def _signed64(v):
    return ((v + (1 << 63)) % (1 << 64)) - (1 << 63)


def test_reference_values_match_java_util_random():
    assert WorldRandom(0).next_int() == -1155484576
    assert WorldRandom(42).next_int() == -1170105035
    assert WorldRandom(0).next_double() == pytest.approx(0.730967787376657, abs=1e-15)


def test_reseeding_restarts_the_stream():
    rand = WorldRandom(99)
    first = [rand.next_int(1000) for _ in range(20)]
    rand.set_seed(99)
    assert [rand.next_int(1000) for _ in range(20)] == first


def test_bounded_ints_stay_in_range():
    rand = WorldRandom(7)
    for bound in (1, 2, 3, 5, 16, 100, 256, 1000003):
        for _ in range(200):
            assert 0 <= rand.next_int(bound) < bound


def test_power_of_two_bound_uses_high_bits():
    a = WorldRandom(1234)
    b = WorldRandom(1234)
    for _ in range(50):
        assert a.next_int(256) == (256 * b.next_bits(31)) >> 31


def test_doubles_in_unit_interval():
    rand = WorldRandom(5)
    values = [rand.next_double() for _ in range(1000)]
    assert min(values) >= 0.0
    assert max(values) < 1.0
    assert 0.4 < sum(values) / len(values) < 0.6


@pytest.mark.parametrize("bound", [0, -1, -256])
def test_non_positive_bound_rejected(bound):
    with pytest.raises(ValueError):
        WorldRandom(0).next_int(bound)


def test_chunk_seed_formula():
    assert chunk_seed(0, 0) == 0
    assert chunk_seed(1, 0) == CHUNK_X_FACTOR
    assert chunk_seed(0, 1) == CHUNK_Z_FACTOR
    assert chunk_seed(-1, 2) == -CHUNK_X_FACTOR + 2 * CHUNK_Z_FACTOR


def test_chunk_seed_wraps_to_signed_64_bits():
    cx, cz = 1 << 40, -(1 << 41)
    expected = _signed64(cx * CHUNK_X_FACTOR + cz * CHUNK_Z_FACTOR)
    assert chunk_seed(cx, cz) == expected
    assert -(1 << 63) <= chunk_seed(cx, cz) < (1 << 63)


def test_for_chunk_matches_explicit_seed():
    a = WorldRandom.for_chunk(3, -9)
    b = WorldRandom(chunk_seed(3, -9))
    assert [a.next_int(5) for _ in range(10)] == [b.next_int(5) for _ in range(10)]
    c = WorldRandom.for_chunk(-9, 3)
    assert [WorldRandom.for_chunk(3, -9).next_int() for _ in range(3)] != [c.next_int() for _ in range(3)]
