# config.py
"""Limits and engine settings, optionally read from ``GAMERNG_*`` variables."""
from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from typing import Mapping, Optional

from .chacha import DEFAULT_RESEED_THRESHOLD
from .logger import get_rng_logger

logger = get_rng_logger("config")


@dataclass(frozen=True)
class Limits:
    """Fixed maxima that bound per-call work. Over-limit input fails early."""
    max_weights: int = 65536
    max_shuffle: int = 10_000_000
    max_dice_sides: int = 10000
    max_dice_count: int = 10000
    max_bytes: int = 65536
    max_pattern: int = 65536
    max_polygon_vertices: int = 128
    max_rejection_attempts: int = 10000


@dataclass
class RngConfig:
    fast_seed: int = 0                 # 0: seed from the clock
    secure_seed: int = 0               # 0: seed from system entropy
    reseed_threshold: int = DEFAULT_RESEED_THRESHOLD
    limits: Limits = field(default_factory=Limits)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "RngConfig":
        env = os.environ if environ is None else environ
        base = cls()
        limits = replace(
            base.limits,
            max_polygon_vertices=_env_int(
                env, "GAMERNG_MAX_POLYGON_VERTICES", base.limits.max_polygon_vertices, minimum=3
            ),
            max_rejection_attempts=_env_int(
                env, "GAMERNG_MAX_REJECTION_ATTEMPTS", base.limits.max_rejection_attempts, minimum=1
            ),
        )
        return cls(
            fast_seed=_env_int(env, "GAMERNG_FAST_SEED", base.fast_seed),
            secure_seed=_env_int(env, "GAMERNG_SECURE_SEED", base.secure_seed),
            reseed_threshold=_env_int(
                env, "GAMERNG_RESEED_THRESHOLD", base.reseed_threshold, minimum=64
            ),
            limits=limits,
        )


def _env_int(env: Mapping[str, str], key: str, default: int, *, minimum: int = 0) -> int:
    raw = env.get(key)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw.strip(), 0)
    except ValueError:
        logger.warning("ignoring %s=%r: not an integer", key, raw)
        return default
    if value < minimum:
        logger.warning("ignoring %s=%d: below minimum %d", key, value, minimum)
        return default
    return value
