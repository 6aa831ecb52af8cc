# pcg.py
"""PCG32 (XSH-RR): 64-bit LCG state, 32-bit permuted output.

Fast and statistically solid, not cryptographic. Used for gameplay rolls.
"""
from __future__ import annotations

import time

from .bits import ror32, u32, u64
from .logger import get_rng_logger
from .source import RandomSource

logger = get_rng_logger("pcg")

MULTIPLIER = 6364136223846793005
INCREMENT = 1442695040888963407


class PCG32(RandomSource):
    name = "pcg32"

    def __init__(self, seed: int = 0):
        self.state = 0
        self.inc = 1
        self.seed(seed)

    def seed(self, seed: int = 0) -> None:
        """Reset the stream. ``seed == 0`` derives a seed from the wall clock."""
        seed = u64(seed)
        if seed == 0:
            seed = u64(time.time_ns())
            logger.debug("pcg32 seeded from clock")
        # two-step init mixes the seed through the output permutation
        self.state = 0
        self.inc = u64((INCREMENT << 1) | 1)
        self.next_u32()
        self.state = u64(self.state + seed)
        self.next_u32()

    def next_u32(self) -> int:
        old = self.state
        self.state = u64(old * MULTIPLIER + self.inc)
        xorshifted = u32(((old >> 18) ^ old) >> 27)
        rot = old >> 59
        return ror32(xorshifted, rot)
