# distributions.py
"""Integer, boolean, weighted, permutation and dice draws.

Every function takes a :class:`~src.gamerng.locking.LockedSource` first and
holds its lock for the whole call. Invalid input returns the documented
failure value instead of raising.
"""
from __future__ import annotations

import math
from typing import Any, MutableSequence, Optional, Sequence

from .bits import MASK32
from .locking import LockedSource

INT32_MAX = (1 << 31) - 1
GAUSS_U1_FLOOR = 1e-10
TWO_PI = 2.0 * math.pi


def rand_range(rng: LockedSource, low: int, high: int) -> int:
    """Uniform integer in ``[low, high]`` (inclusive); bounds are reordered."""
    low, high = int(low), int(high)
    if low > high:
        low, high = high, low
    if low == high:
        return low
    with rng.hold() as src:
        return low + src.bounded_wide(high - low + 1)


def rand_float_range(rng: LockedSource, low: float, high: float) -> float:
    """Uniform float in ``[low, high)``; bounds are reordered."""
    low, high = float(low), float(high)
    if low > high:
        low, high = high, low
    if low == high:
        return low
    with rng.hold() as src:
        return low + src.next_float() * (high - low)


def rand_bool(rng: LockedSource, probability: float) -> bool:
    p = float(probability)
    if not math.isfinite(p) or p <= 0.0:
        return False
    if p >= 1.0:
        return True
    with rng.hold() as src:
        return src.next_float() < p


def rand_bool_weighted(rng: LockedSource, true_weight: int, false_weight: int) -> bool:
    """``True`` with probability ``true_weight / (true_weight + false_weight)``.

    A non-positive weight forces the other outcome. Sums past the signed
    32-bit range are halved until they fit.
    """
    t, f = int(true_weight), int(false_weight)
    if t <= 0:
        return False
    if f <= 0:
        return True
    while t + f > INT32_MAX:
        t //= 2
        f //= 2
    if t <= 0:
        return False
    if f <= 0:
        return True
    with rng.hold() as src:
        return src.bounded(t + f) < t


def weighted_index(rng: LockedSource, weights: Optional[Sequence[int]], count: Optional[int] = None) -> int:
    """Index drawn in proportion to ``weights``; non-positive weights never win.

    Returns ``0`` when there is nothing to draw from: no weights, a bad or
    over-limit ``count``, an all non-positive list, or a total that does not
    fit in 32 bits.
    """
    if weights is None:
        return 0
    n = len(weights) if count is None else int(count)
    if n <= 0 or n > len(weights) or n > rng.limits.max_weights:
        return 0
    values = [int(w) for w in weights[:n]]
    total = 0
    last_valid = 0
    for i, w in enumerate(values):
        if w > 0:
            total += w
            last_valid = i
            if total > MASK32:
                return 0
    if total == 0:
        return 0
    with rng.hold() as src:
        target = src.bounded(total)
        running = 0
        for i, w in enumerate(values):
            if w > 0:
                running += w
                if target < running:
                    return i
        return last_valid


def shuffle(rng: LockedSource, items: Optional[MutableSequence[Any]], count: Optional[int] = None) -> bool:
    """Fisher-Yates shuffle of the first ``count`` items, in place.

    ``items`` may be a list or a 1-D numpy array. Returns ``False`` for a
    missing sequence or a count beyond its length or the configured limit.
    """
    if items is None:
        return False
    n = len(items) if count is None else int(count)
    if n <= 1:
        return True
    if n > len(items) or n > rng.limits.max_shuffle:
        return False
    with rng.hold() as src:
        for i in range(n - 1, 0, -1):
            j = src.bounded(i + 1)
            items[i], items[j] = items[j], items[i]
    return True


def shuffle_range(rng: LockedSource, items: Optional[MutableSequence[Any]], start: int, end: int) -> bool:
    """Shuffle ``items[start:end + 1]`` in place (``end`` is inclusive)."""
    if items is None:
        return False
    start, end = int(start), int(end)
    if start > end:
        start, end = end, start
    if end - start < 1:
        return True
    if start < 0 or end >= len(items) or end >= rng.limits.max_shuffle:
        return False
    with rng.hold() as src:
        for i in range(end, start, -1):
            j = start + src.bounded(i - start + 1)
            items[i], items[j] = items[j], items[i]
    return True


def gaussian(rng: LockedSource, mean: float, stddev: float) -> int:
    """Box-Muller normal draw, clamped at zero and truncated to an int.

    Meant for non-negative quantities such as damage. ``stddev <= 0``
    returns ``int(mean)``; a non-finite ``mean`` returns ``0``.
    """
    mean, stddev = float(mean), float(stddev)
    if not math.isfinite(mean):
        return 0
    if not (math.isfinite(stddev) and stddev > 0.0):
        return int(mean)
    with rng.hold() as src:
        # Guard u1 away from 0 to avoid log(0)
        u1 = max(src.next_float(), GAUSS_U1_FLOOR)
        u2 = src.next_float()
        z0 = math.sqrt(-2.0 * math.log(u1)) * math.cos(TWO_PI * u2)
        result = mean + z0 * stddev
        if not math.isfinite(result):
            return 0
        return int(max(result, 0.0))


def dice(rng: LockedSource, sides: int, count: int) -> int:
    """Sum of ``count`` rolls of a ``sides``-sided die; ``0`` on bad input."""
    sides, count = int(sides), int(count)
    if sides <= 0 or count <= 0:
        return 0
    if sides > rng.limits.max_dice_sides or count > rng.limits.max_dice_count:
        return 0
    with rng.hold() as src:
        return sum(src.bounded(sides) + 1 for _ in range(count))


def pick(rng: LockedSource, items: Optional[Sequence[Any]], count: Optional[int] = None) -> Any:
    """One element of ``items[:count]``; ``0`` when there is nothing to pick."""
    if items is None:
        return 0
    n = len(items) if count is None else int(count)
    if n <= 0 or n > len(items):
        return 0
    with rng.hold() as src:
        return items[src.bounded(n)]
