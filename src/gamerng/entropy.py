# entropy.py
"""OS entropy adapters and the last-resort clock seed."""
from __future__ import annotations

import os
import time
from typing import Callable

from .bits import u64

EntropySource = Callable[[], int]
"""Zero-argument callable returning a fresh 64-bit value.

Raises :class:`EntropyUnavailableError` when the source cannot deliver.
"""


class EntropyUnavailableError(OSError):
    """The operating system entropy pool could not be read."""


def _os_random_bytes(n: int) -> bytes:
    # getrandom where the platform has it, the portable pool otherwise
    if hasattr(os, "getrandom"):
        return os.getrandom(n)
    return os.urandom(n)


def os_entropy_u64() -> int:
    try:
        raw = _os_random_bytes(8)
    except (OSError, NotImplementedError) as exc:
        raise EntropyUnavailableError(f"system entropy unavailable: {exc}") from exc
    if len(raw) != 8:
        raise EntropyUnavailableError(f"short entropy read: {len(raw)} bytes")
    value = int.from_bytes(raw, "little")
    if value == 0:
        raise EntropyUnavailableError("entropy source returned zero")
    return value


def time_fallback_seed() -> int:
    """Mix two independent clocks plus an object address.

    Only used when the entropy pool is unreachable. The address of a fresh
    local object separates processes started within the same clock tick.
    """
    t1 = u64(time.time_ns())
    t2 = u64(time.perf_counter_ns())
    seed = t1 ^ u64(t2 << 21) ^ (t2 >> 11)
    marker = object()
    seed ^= u64(id(marker))
    return u64(seed) or 1
