# source.py
"""Capability shared by the fast and the secure engine.

Engines implement ``next_u32`` and ``seed``; everything else derives from
those two. Engines are not thread-safe on their own; wrap them in
:class:`src.gamerng.locking.LockedSource` before sharing.
"""
from __future__ import annotations

from .bits import TWO_POW_32
from .bounded import bounded, bounded_wide


class RandomSource:
    """Base class for 32-bit word generators."""

    name = "source"
    cryptographic = False

    def seed(self, seed: int = 0) -> None:
        raise NotImplementedError

    def next_u32(self) -> int:
        raise NotImplementedError

    def next_float(self) -> float:
        """Uniform float in ``[0, 1)`` from one 32-bit word."""
        return self.next_u32() / TWO_POW_32

    def bounded(self, bound: int) -> int:
        return bounded(self.next_u32, bound)

    def bounded_wide(self, bound: int) -> int:
        return bounded_wide(self.next_u32, bound)

    def next_bytes(self, n: int) -> bytes:
        # little-endian words, the tail of the last word is dropped
        out = bytearray()
        while len(out) < n:
            out.extend(self.next_u32().to_bytes(4, "little"))
        return bytes(out[:n])

    def close(self) -> None:
        """Release state. Engines holding key material override this."""
