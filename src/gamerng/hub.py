# hub.py
"""Explicit owner of one fast and one secure generator.

Create one hub at start-up and hand ``hub.fast`` / ``hub.secure`` to the
code that draws. Each family has its own lock, so gameplay rolls never wait
on token generation and the other way round.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional

from .config import Limits, RngConfig
from .entropy import EntropySource, os_entropy_u64
from .locking import LockedSource
from .logger import get_rng_logger

logger = get_rng_logger("hub")


@dataclass
class RandomHub:
    fast: LockedSource
    secure: LockedSource

    @classmethod
    def from_config(
        cls,
        config: Optional[RngConfig] = None,
        *,
        entropy: EntropySource = os_entropy_u64,
    ) -> "RandomHub":
        cfg = config or RngConfig()
        fast = LockedSource.fast(cfg.fast_seed, limits=cfg.limits)
        secure = LockedSource.secure(
            cfg.secure_seed,
            entropy=entropy,
            reseed_threshold=cfg.reseed_threshold,
            limits=cfg.limits,
        )
        logger.debug("hub ready (reseed threshold %d bytes)", cfg.reseed_threshold)
        return cls(fast=fast, secure=secure)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "RandomHub":
        return cls.from_config(RngConfig.from_env(environ))

    @property
    def limits(self) -> Limits:
        return self.fast.limits

    def seed_fast(self, seed: int = 0) -> None:
        self.fast.seed(seed)

    def seed_secure(self, seed: int = 0) -> None:
        self.secure.seed(seed)

    def close(self) -> None:
        """Wipe the secure engine; the fast engine holds nothing secret."""
        self.fast.close()
        self.secure.close()

    def __enter__(self) -> "RandomHub":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
