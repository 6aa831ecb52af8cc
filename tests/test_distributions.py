import itertools
import math
import threading
from collections import Counter

import numpy as np
import pytest

from src.gamerng.config import Limits
from src.gamerng.distributions import (
    dice,
    gaussian,
    pick,
    rand_bool,
    rand_bool_weighted,
    rand_float_range,
    rand_range,
    shuffle,
    shuffle_range,
    weighted_index,
)
from src.gamerng.locking import LockedSource
from src.gamerng.pcg import PCG32


# ---------------------------------------------------------------------------
# range / float range / bool


def test_range_known_draws(fast_rng):
    assert [rand_range(fast_rng, 0, 9) for _ in range(5)] == [1, 4, 8, 1, 2]


def test_range_is_inclusive_and_swaps(fast_rng):
    seen = set()
    for _ in range(2000):
        v = rand_range(fast_rng, 5, -5)
        assert -5 <= v <= 5
        seen.add(v)
    assert seen == set(range(-5, 6))


def test_range_equal_bounds_skip_the_engine(scripted):
    rng = scripted([0])
    assert rand_range(rng, 7, 7) == 7
    with rng.hold() as src:
        assert src.calls == 0


def test_range_wider_than_32_bits(fast_rng):
    low, high = -(1 << 40), 1 << 40
    for _ in range(500):
        assert low <= rand_range(fast_rng, low, high) <= high


def test_float_range(fast_rng):
    for _ in range(1000):
        v = rand_float_range(fast_rng, 2.5, -1.0)
        assert -1.0 <= v < 2.5
    assert rand_float_range(fast_rng, 3.0, 3.0) == 3.0


def test_bool_edges(fast_rng):
    assert rand_bool(fast_rng, 0.0) is False
    assert rand_bool(fast_rng, -1.0) is False
    assert rand_bool(fast_rng, math.nan) is False
    assert rand_bool(fast_rng, math.inf) is False
    assert rand_bool(fast_rng, -math.inf) is False
    assert rand_bool(fast_rng, 1.0) is True
    assert rand_bool(fast_rng, 5.0) is True


def test_bool_frequency(fast_rng):
    hits = sum(rand_bool(fast_rng, 0.25) for _ in range(10000))
    assert abs(hits / 10000 - 0.25) < 0.02


def test_bool_weighted_edges(fast_rng):
    assert rand_bool_weighted(fast_rng, 0, 5) is False
    assert rand_bool_weighted(fast_rng, 5, 0) is True
    assert rand_bool_weighted(fast_rng, -1, -1) is False
    # halving drives the small side to zero
    assert rand_bool_weighted(fast_rng, 1 << 40, 1) is True
    assert rand_bool_weighted(fast_rng, 1, 1 << 40) is False


def test_bool_weighted_frequency(fast_rng):
    hits = sum(rand_bool_weighted(fast_rng, 3, 1) for _ in range(10000))
    assert abs(hits / 10000 - 0.75) < 0.02


# ---------------------------------------------------------------------------
# weighted / pick


def test_weighted_index_frequency(fast_rng):
    weights = [60, 25, 10, 5]
    counts = Counter(weighted_index(fast_rng, weights) for _ in range(10000))
    assert abs(counts[0] / 10000 - 0.60) < 0.03
    assert abs(counts[3] / 10000 - 0.05) < 0.02


def test_weighted_index_skips_non_positive(fast_rng):
    for _ in range(200):
        assert weighted_index(fast_rng, [0, -3, 5, 0]) == 2


def test_weighted_index_failures(fast_rng):
    assert weighted_index(fast_rng, None) == 0
    assert weighted_index(fast_rng, []) == 0
    assert weighted_index(fast_rng, [0, 0, 0]) == 0
    assert weighted_index(fast_rng, [1, 2], count=3) == 0
    assert weighted_index(fast_rng, [1 << 31, 1 << 31]) == 0


def test_weighted_index_over_limit():
    rng = LockedSource.fast(42, limits=Limits(max_weights=4))
    assert weighted_index(rng, [1] * 5) == 0
    assert 0 <= weighted_index(rng, [1] * 4) < 4


def test_weighted_index_accepts_numpy(fast_rng):
    weights = np.array([0, 0, 9], dtype=np.int64)
    assert weighted_index(fast_rng, weights) == 2


def test_pick(fast_rng):
    items = ["sword", "shield", "potion"]
    assert {pick(fast_rng, items) for _ in range(300)} == set(items)
    assert pick(fast_rng, items, count=1) == "sword"
    assert pick(fast_rng, []) == 0
    assert pick(fast_rng, None) == 0
    assert pick(fast_rng, items, count=4) == 0


# ---------------------------------------------------------------------------
# shuffle


def test_shuffle_is_a_permutation(fast_rng):
    items = list(range(50))
    assert shuffle(fast_rng, items) is True
    assert sorted(items) == list(range(50))
    assert items != list(range(50))


def test_shuffle_prefix_only(fast_rng):
    items = list(range(10))
    assert shuffle(fast_rng, items, count=4)
    assert sorted(items[:4]) == [0, 1, 2, 3]
    assert items[4:] == list(range(4, 10))


def test_shuffle_edges(fast_rng):
    assert shuffle(fast_rng, None) is False
    assert shuffle(fast_rng, []) is True
    assert shuffle(fast_rng, [1]) is True
    assert shuffle(fast_rng, [1, 2], count=3) is False


def test_shuffle_numpy_array(fast_rng):
    arr = np.arange(20)
    assert shuffle(fast_rng, arr)
    assert np.array_equal(np.sort(arr), np.arange(20))


def test_shuffle_all_orderings_equally_likely(fast_rng):
    runs = 24000
    counts = Counter()
    for _ in range(runs):
        items = [0, 1, 2, 3]
        shuffle(fast_rng, items)
        counts[tuple(items)] += 1
    assert set(counts) == set(itertools.permutations(range(4)))
    for n in counts.values():
        assert 850 <= n <= 1150


def test_shuffle_range(fast_rng):
    items = list(range(10))
    assert shuffle_range(fast_rng, items, 3, 6)
    assert items[:3] == [0, 1, 2]
    assert sorted(items[3:7]) == [3, 4, 5, 6]
    assert items[7:] == [7, 8, 9]


def test_shuffle_range_edges(fast_rng):
    items = list(range(5))
    assert shuffle_range(fast_rng, items, 2, 2) is True
    assert items == list(range(5))
    assert shuffle_range(fast_rng, items, 0, 5) is False
    assert shuffle_range(fast_rng, items, -1, 3) is False
    assert shuffle_range(fast_rng, None, 0, 1) is False
    # reversed bounds
    assert shuffle_range(fast_rng, items, 4, 0) is True
    assert sorted(items) == list(range(5))


# ---------------------------------------------------------------------------
# gaussian / dice


def test_gaussian_mean(fast_rng):
    draws = np.array([gaussian(fast_rng, 100.0, 10.0) for _ in range(20000)])
    # truncation to int lowers the mean by about one half
    assert abs(draws.mean() - 99.5) < 0.5
    assert abs(draws.std() - 10.0) < 0.5


def test_gaussian_edges(fast_rng):
    assert gaussian(fast_rng, math.nan, 1.0) == 0
    assert gaussian(fast_rng, math.inf, 1.0) == 0
    assert gaussian(fast_rng, 10.7, 0.0) == 10
    assert gaussian(fast_rng, 10.7, -2.0) == 10
    assert gaussian(fast_rng, 10.7, math.nan) == 10
    assert gaussian(fast_rng, -1000.0, 1.0) == 0


def test_gaussian_never_negative(fast_rng):
    assert min(gaussian(fast_rng, 1.0, 5.0) for _ in range(2000)) >= 0


def test_dice_range(fast_rng):
    rolls = {dice(fast_rng, 6, 3) for _ in range(3000)}
    assert rolls == set(range(3, 19))


def test_dice_edges(fast_rng):
    assert dice(fast_rng, 1, 5) == 5
    assert dice(fast_rng, 0, 1) == 0
    assert dice(fast_rng, 6, 0) == 0
    assert dice(fast_rng, -6, 2) == 0
    assert dice(fast_rng, 10001, 1) == 0
    assert dice(fast_rng, 6, 10001) == 0


# ---------------------------------------------------------------------------
# locking


def test_concurrent_draws_share_one_stream():
    rng = LockedSource.fast(42)
    results = []
    results_lock = threading.Lock()

    def worker():
        local = [rand_range(rng, 0, (1 << 32) - 1) for _ in range(1000)]
        with results_lock:
            results.extend(local)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    reference = PCG32(42)
    expected = [reference.next_u32() for _ in range(8000)]
    assert sorted(results) == sorted(expected)
    with rng.hold() as src:
        assert src.state == reference.state


@pytest.mark.slow
def test_weighted_index_large_run(fast_rng):
    weights = list(range(1, 21))
    n = 400000
    counts = np.bincount([weighted_index(fast_rng, weights) for _ in range(n)], minlength=20)
    expected = n * np.array(weights) / sum(weights)
    chi2 = float(np.sum((counts - expected) ** 2 / expected))
    # 19 degrees of freedom, p = 0.001
    assert chi2 < 43.82
