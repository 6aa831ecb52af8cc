# locking.py
"""One mutex per engine.

Every public operation takes the lock for its whole body, so a multi-draw
operation sees an uninterrupted run of the stream. The lock is not
re-entrant: helpers that run under it receive the bare engine from
:meth:`LockedSource.hold` and must not call back into public operations.
"""
from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator, Optional

from .chacha import DEFAULT_RESEED_THRESHOLD, ChaChaRNG
from .config import Limits
from .entropy import EntropySource, os_entropy_u64
from .pcg import PCG32
from .source import RandomSource


class LockedSource:
    """A :class:`RandomSource` shared between threads behind a lock."""

    def __init__(self, source: RandomSource, *, limits: Optional[Limits] = None) -> None:
        self._source = source
        self._lock = threading.Lock()
        self.limits = limits or Limits()

    @classmethod
    def fast(cls, seed: int = 0, *, limits: Optional[Limits] = None) -> "LockedSource":
        return cls(PCG32(seed), limits=limits)

    @classmethod
    def secure(
        cls,
        seed: int = 0,
        *,
        entropy: EntropySource = os_entropy_u64,
        reseed_threshold: int = DEFAULT_RESEED_THRESHOLD,
        limits: Optional[Limits] = None,
    ) -> "LockedSource":
        engine = ChaChaRNG(seed, entropy=entropy, reseed_threshold=reseed_threshold)
        return cls(engine, limits=limits)

    @property
    def name(self) -> str:
        return self._source.name

    @property
    def cryptographic(self) -> bool:
        return self._source.cryptographic

    @contextmanager
    def hold(self) -> Iterator[RandomSource]:
        with self._lock:
            yield self._source

    def seed(self, seed: int = 0) -> None:
        with self._lock:
            self._source.seed(seed)

    def close(self) -> None:
        with self._lock:
            self._source.close()

    def __repr__(self) -> str:
        return f"LockedSource({self.name})"
