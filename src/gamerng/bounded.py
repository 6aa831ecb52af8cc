# bounded.py
"""Unbiased mapping of uniform 32-bit words onto ``[0, bound)``.

Both engines share these helpers; they only need a zero-argument callable
returning independent uniform 32-bit words.
"""
from __future__ import annotations

from typing import Callable

from .bits import MASK32

WordSource = Callable[[], int]

MAX_BOUND = 1 << 32


def bounded(draw: WordSource, bound: int) -> int:
    """Lemire's multiply-shift reduction with rejection.

    ``bound`` must lie in ``[0, 2**32]``. ``bound == 0`` returns ``0`` without
    consuming a word; every other bound consumes at least one word, ``1``
    included.
    """
    if bound <= 0:
        return 0
    m = draw() * bound
    low = m & MASK32
    if low < bound:
        threshold = (MAX_BOUND - bound) % bound
        while low < threshold:
            m = draw() * bound
            low = m & MASK32
    return m >> 32


def bounded_wide(draw: WordSource, bound: int) -> int:
    """Uniform value in ``[0, bound)`` for bounds wider than 32 bits.

    Concatenates as many words as ``bound - 1`` needs, masks to its bit
    length and rejects values that land past the bound. Each attempt succeeds
    with probability above one half.
    """
    if bound <= MAX_BOUND:
        return bounded(draw, bound)
    nbits = (bound - 1).bit_length()
    nwords = (nbits + 31) // 32
    mask = (1 << nbits) - 1
    while True:
        x = 0
        for _ in range(nwords):
            x = (x << 32) | draw()
        x &= mask
        if x < bound:
            return x
