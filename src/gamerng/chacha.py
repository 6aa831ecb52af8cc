# chacha.py
"""ChaCha20 keystream generator used for tokens and identifiers.

State layout (16 words): 4 constants, 8 key words, a 64-bit block counter in
words 12..13 and a 64-bit nonce in words 14..15. Output is consumed one word
at a time from a 64-byte block. Key and block words live in numpy buffers so
they can be overwritten in place when the engine is closed.
"""
from __future__ import annotations

import time
from typing import List, Sequence

import numpy as np

from .bits import MASK32, rol32, split64, join64, u32, u64
from .entropy import (
    EntropySource,
    EntropyUnavailableError,
    os_entropy_u64,
    time_fallback_seed,
)
from .logger import get_rng_logger
from .source import RandomSource

logger = get_rng_logger("chacha")

CONSTANTS = (0x61707865, 0x3320646e, 0x79622d32, 0x6b206574)
ROUNDS = 20
BLOCK_WORDS = 16
BLOCK_BYTES = 64
DEFAULT_RESEED_THRESHOLD = 1 << 30  # 1 GiB under a single key


# ======================================================================================
# Core permutation
# ======================================================================================

def quarter_round(a: int, b: int, c: int, d: int):
    a = (a + b) & MASK32; d ^= a; d = rol32(d, 16)
    c = (c + d) & MASK32; b ^= c; b = rol32(b, 12)
    a = (a + b) & MASK32; d ^= a; d = rol32(d, 8)
    c = (c + d) & MASK32; b ^= c; b = rol32(b, 7)
    return a, b, c, d


def chacha_block(state: Sequence[int]) -> List[int]:
    """One 20-round block: permute a copy of ``state`` and add ``state`` back."""
    if len(state) != BLOCK_WORDS:
        raise ValueError("ChaCha state must be 16 words")
    x = [int(w) for w in state]
    for _ in range(ROUNDS // 2):
        # column round
        x[0], x[4], x[8], x[12] = quarter_round(x[0], x[4], x[8], x[12])
        x[1], x[5], x[9], x[13] = quarter_round(x[1], x[5], x[9], x[13])
        x[2], x[6], x[10], x[14] = quarter_round(x[2], x[6], x[10], x[14])
        x[3], x[7], x[11], x[15] = quarter_round(x[3], x[7], x[11], x[15])
        # diagonal round
        x[0], x[5], x[10], x[15] = quarter_round(x[0], x[5], x[10], x[15])
        x[1], x[6], x[11], x[12] = quarter_round(x[1], x[6], x[11], x[12])
        x[2], x[7], x[8], x[13] = quarter_round(x[2], x[7], x[8], x[13])
        x[3], x[4], x[9], x[14] = quarter_round(x[3], x[4], x[9], x[14])
    return [(x[i] + int(state[i])) & MASK32 for i in range(BLOCK_WORDS)]


def expand_seed(seed: int, count: int = 12, *, stamp: int = 0) -> List[int]:
    """Stretch a 64-bit seed into ``count`` key/nonce words.

    This is a bespoke helper private to :class:`ChaChaRNG`: it runs the same
    block function over a scratch state built from the seed and ``stamp``
    (a high-resolution timestamp on implicit reseeds, ``0`` for explicit
    seeds). It is not a standards-based key derivation and has no other
    callers.
    """
    lo, hi = split64(seed)
    s_lo, s_hi = split64(stamp)
    temp = [
        *CONSTANTS,
        lo, hi, lo ^ 0x5A5A5A5A, hi ^ 0xA5A5A5A5,
        s_lo, s_hi, u32(s_lo ^ lo), u32(s_hi ^ hi),
        0, 0, 0, 0,
    ]
    out: List[int] = []
    while len(out) < count:
        block = chacha_block(temp)
        out.extend(block[: count - len(out)])
        temp[12] = u32(temp[12] + 1)
        if temp[12] == 0:
            temp[13] = u32(temp[13] + 1)
        block[:] = [0] * BLOCK_WORDS
    temp[:] = [0] * BLOCK_WORDS
    return out


# ======================================================================================
# Generator
# ======================================================================================

class ChaChaRNG(RandomSource):
    """ChaCha20-based CSPRNG with byte-count driven reseeding.

    ``seed == 0`` pulls the seed from ``entropy`` (the OS pool by default),
    falling back to :func:`time_fallback_seed` when that fails. Once
    ``reseed_threshold`` bytes have been produced under one key, fresh entropy
    is XORed into the key material and the state is rebuilt. A failing
    entropy source skips the reseed; generation continues under the old key.
    """

    name = "chacha20"
    cryptographic = True

    def __init__(
        self,
        seed: int = 0,
        *,
        entropy: EntropySource = os_entropy_u64,
        reseed_threshold: int = DEFAULT_RESEED_THRESHOLD,
    ) -> None:
        self._entropy = entropy
        self.reseed_threshold = int(reseed_threshold)
        self._state = np.zeros(BLOCK_WORDS, dtype=np.uint32)
        self._block = np.zeros(BLOCK_WORDS, dtype=np.uint32)
        self._position = BLOCK_WORDS
        self.counter = 0
        self.bytes_generated = 0
        self.reseed_count = 0
        self._reseed_at = self.reseed_threshold
        self._reseed_failures = 0
        self._wiped = False
        self.seed(seed)

    # -- seeding -------------------------------------------------------------
    def seed(self, seed: int = 0) -> None:
        seed = u64(seed)
        if seed == 0:
            self._install(self._implicit_seed(), stamp=time.perf_counter_ns())
            logger.debug("chacha20 seeded from system entropy")
        else:
            self._install(seed, stamp=0)
            logger.debug("chacha20 seeded explicitly")

    def _implicit_seed(self) -> int:
        try:
            return u64(self._entropy())
        except EntropyUnavailableError as exc:
            logger.warning("entropy unavailable, seeding from clocks: %s", exc)
            return time_fallback_seed()

    def _install(self, seed: int, *, stamp: int) -> None:
        words = expand_seed(seed, 12, stamp=u64(stamp))
        self._state[:4] = CONSTANTS
        self._state[4:12] = words[:8]
        self._state[12] = 0
        self._state[13] = 0
        self._state[14] = words[8]
        self._state[15] = words[9]
        words[:] = [0] * len(words)
        self._block.fill(0)
        self._position = BLOCK_WORDS
        self.counter = 0
        self.bytes_generated = 0
        self._reseed_at = self.reseed_threshold
        self._reseed_failures = 0
        self._wiped = False

    def _check_reseed(self) -> None:
        if self.bytes_generated < self._reseed_at:
            return
        try:
            fresh = u64(self._entropy())
        except EntropyUnavailableError as exc:
            # wait twice as long after each consecutive failure
            self._reseed_failures += 1
            backoff = self.reseed_threshold << min(self._reseed_failures, 32)
            self._reseed_at = self.bytes_generated + backoff
            if self._reseed_failures == 1:
                logger.warning("scheduled reseed skipped: %s", exc)
            else:
                logger.debug("reseed retry %d failed", self._reseed_failures)
            return
        current = join64(int(self._state[5]), int(self._state[4]))
        self._install(current ^ fresh, stamp=time.perf_counter_ns())
        self.reseed_count += 1
        logger.debug("chacha20 reseeded (%d so far)", self.reseed_count)

    # -- output --------------------------------------------------------------
    def _generate_block(self) -> None:
        if self._wiped:
            self.seed(0)
        self._check_reseed()
        self._block[:] = chacha_block(self._state.tolist())
        self.counter = u64(self.counter + 1)
        lo, hi = split64(self.counter)
        self._state[12] = lo
        self._state[13] = hi
        self.bytes_generated += BLOCK_BYTES
        self._position = 0

    def next_u32(self) -> int:
        if self._position >= BLOCK_WORDS:
            self._generate_block()
        word = int(self._block[self._position])
        self._position += 1
        return word

    # -- teardown ------------------------------------------------------------
    def close(self) -> None:
        """Overwrite key, nonce, counter and buffered output with zeros.

        A closed engine reseeds itself from system entropy on its next draw.
        """
        self._wipe()
        logger.debug("chacha20 state wiped")

    def _wipe(self) -> None:
        for buf in (getattr(self, "_state", None), getattr(self, "_block", None)):
            if buf is not None:
                buf.fill(0)
        self._position = BLOCK_WORDS
        self.counter = 0
        self.bytes_generated = 0
        self._wiped = True

    @property
    def closed(self) -> bool:
        return self._wiped

    def __enter__(self) -> "ChaChaRNG":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __del__(self) -> None:
        # no logging here, the interpreter may be shutting down
        self._wipe()
