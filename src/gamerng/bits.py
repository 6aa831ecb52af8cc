# bits.py
"""Fixed-width word helpers over Python ints."""
from __future__ import annotations

MASK32 = (1 << 32) - 1
MASK64 = (1 << 64) - 1
TWO_POW_32 = float(1 << 32)


def u32(x: int) -> int: return x & MASK32
def u64(x: int) -> int: return x & MASK64
def rol32(x: int, r: int) -> int: return u32((x << r) | (x >> (32 - r)))
def ror32(x: int, r: int) -> int: return u32((x >> r) | (x << ((-r) & 31)))


def split64(x: int) -> tuple[int, int]:
    """Return ``(low, high)`` 32-bit halves of a 64-bit word."""
    x = u64(x)
    return x & MASK32, x >> 32


def join64(low: int, high: int) -> int:
    return (u32(high) << 32) | u32(low)
