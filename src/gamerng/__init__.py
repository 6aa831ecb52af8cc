"""Random numbers for game servers: a fast PCG32 engine for gameplay and a
ChaCha20 engine for tokens, with shared distributions and shape samplers."""
from __future__ import annotations

from .chacha import ChaChaRNG
from .config import Limits, RngConfig
from .distributions import (
    dice,
    gaussian,
    pick,
    rand_bool,
    rand_bool_weighted,
    rand_float_range,
    rand_range,
    shuffle,
    shuffle_range,
    weighted_index,
)
from .entropy import EntropyUnavailableError, os_entropy_u64
from .geometry import (
    point_in_arc,
    point_in_box,
    point_in_circle,
    point_in_ellipse,
    point_in_polygon,
    point_in_rect,
    point_in_ring,
    point_in_sphere,
    point_in_triangle,
    point_on_circle,
    point_on_sphere,
)
from .hub import RandomHub
from .locking import LockedSource
from .logger import get_rng_logger
from .pcg import PCG32
from .source import RandomSource
from .tokens import pattern_format, random_bytes, uuid_v4

__all__ = [
    "ChaChaRNG",
    "EntropyUnavailableError",
    "Limits",
    "LockedSource",
    "PCG32",
    "RandomHub",
    "RandomSource",
    "RngConfig",
    "dice",
    "gaussian",
    "get_rng_logger",
    "os_entropy_u64",
    "pattern_format",
    "pick",
    "point_in_arc",
    "point_in_box",
    "point_in_circle",
    "point_in_ellipse",
    "point_in_polygon",
    "point_in_rect",
    "point_in_ring",
    "point_in_sphere",
    "point_in_triangle",
    "point_on_circle",
    "point_on_sphere",
    "rand_bool",
    "rand_bool_weighted",
    "rand_float_range",
    "rand_range",
    "random_bytes",
    "shuffle",
    "shuffle_range",
    "uuid_v4",
    "weighted_index",
]
