# geometry.py
"""Uniform points inside or on 2D and 3D shapes.

All samplers return a coordinate tuple, or ``None`` for a degenerate shape
(non-positive radius, zero area, NaN/Inf parameters, too many vertices) or
when a rejection loop runs out of attempts. Each call holds the engine lock
across all of its draws.
"""
from __future__ import annotations

import math
from typing import Optional, Sequence, Tuple

import numpy as np

from .locking import LockedSource
from .logger import get_rng_logger
from .source import RandomSource

logger = get_rng_logger("geometry")

TWO_PI = 2.0 * math.pi
DEGENERATE_AREA2 = 1e-10  # twice the triangle area

Point2 = Tuple[float, float]
Point3 = Tuple[float, float, float]


def _finite(*values: float) -> bool:
    return all(math.isfinite(v) for v in values)


def _positive(value: float) -> bool:
    return math.isfinite(value) and value > 0.0


def _finite_point(*coords: float):
    # huge finite inputs can still overflow once offset or scaled
    return coords if _finite(*coords) else None


def _wrap_angle(angle: float) -> float:
    angle = math.fmod(angle, TWO_PI)
    if angle < 0.0:
        angle += TWO_PI
    if angle >= TWO_PI:
        angle = 0.0
    return angle


# --------------------------------------------------------------------------------------
# Draw helpers (caller holds the lock)
# --------------------------------------------------------------------------------------

def _disk_offset(src: RandomSource, radius: float) -> Point2:
    angle = src.next_float() * TWO_PI
    # sqrt keeps density uniform in area
    r = radius * math.sqrt(src.next_float())
    return r * math.cos(angle), r * math.sin(angle)


def _triangle_point(src: RandomSource, ax: float, ay: float, bx: float, by: float,
                    cx: float, cy: float) -> Point2:
    r1 = src.next_float()
    r2 = src.next_float()
    if r1 + r2 > 1.0:
        # fold the upper half of the unit square back onto the triangle
        r1 = 1.0 - r1
        r2 = 1.0 - r2
    r3 = 1.0 - r1 - r2
    return r1 * ax + r2 * bx + r3 * cx, r1 * ay + r2 * by + r3 * cy


def _axis(src: RandomSource, low: float, high: float) -> float:
    return low + src.next_float() * (high - low)


# --------------------------------------------------------------------------------------
# 2D
# --------------------------------------------------------------------------------------

def point_in_circle(rng: LockedSource, cx: float, cy: float, radius: float) -> Optional[Point2]:
    cx, cy, radius = float(cx), float(cy), float(radius)
    if not _finite(cx, cy) or not _positive(radius):
        return None
    with rng.hold() as src:
        dx, dy = _disk_offset(src, radius)
        return _finite_point(cx + dx, cy + dy)


def point_on_circle(rng: LockedSource, cx: float, cy: float, radius: float) -> Optional[Point2]:
    cx, cy, radius = float(cx), float(cy), float(radius)
    if not _finite(cx, cy) or not _positive(radius):
        return None
    with rng.hold() as src:
        angle = src.next_float() * TWO_PI
        return _finite_point(cx + radius * math.cos(angle), cy + radius * math.sin(angle))


def point_in_rect(rng: LockedSource, min_x: float, min_y: float,
                  max_x: float, max_y: float) -> Optional[Point2]:
    min_x, min_y, max_x, max_y = float(min_x), float(min_y), float(max_x), float(max_y)
    if not _finite(min_x, min_y, max_x, max_y):
        return None
    if min_x > max_x:
        min_x, max_x = max_x, min_x
    if min_y > max_y:
        min_y, max_y = max_y, min_y
    if not _finite(max_x - min_x, max_y - min_y):
        return None
    with rng.hold() as src:
        return _finite_point(_axis(src, min_x, max_x), _axis(src, min_y, max_y))


def point_in_ring(rng: LockedSource, cx: float, cy: float,
                  inner_radius: float, outer_radius: float) -> Optional[Point2]:
    """Uniform over the annulus area between the two radii."""
    cx, cy = float(cx), float(cy)
    inner, outer = float(inner_radius), float(outer_radius)
    if not _finite(cx, cy, inner) or inner < 0.0 or not _positive(outer):
        return None
    if inner >= outer:
        return None
    inner_sq = inner * inner
    outer_sq = outer * outer
    if not _finite(outer_sq - inner_sq):
        return None
    with rng.hold() as src:
        angle = src.next_float() * TWO_PI
        r = math.sqrt(inner_sq + src.next_float() * (outer_sq - inner_sq))
        return _finite_point(cx + r * math.cos(angle), cy + r * math.sin(angle))


def point_in_ellipse(rng: LockedSource, cx: float, cy: float,
                     radius_x: float, radius_y: float) -> Optional[Point2]:
    cx, cy, radius_x, radius_y = float(cx), float(cy), float(radius_x), float(radius_y)
    if not _finite(cx, cy) or not (_positive(radius_x) and _positive(radius_y)):
        return None
    with rng.hold() as src:
        ux, uy = _disk_offset(src, 1.0)
        return _finite_point(cx + radius_x * ux, cy + radius_y * uy)


def point_in_triangle(rng: LockedSource, x1: float, y1: float, x2: float, y2: float,
                      x3: float, y3: float) -> Optional[Point2]:
    coords = tuple(float(v) for v in (x1, y1, x2, y2, x3, y3))
    if not _finite(*coords):
        return None
    x1, y1, x2, y2, x3, y3 = coords
    area2 = abs((x2 - x1) * (y3 - y1) - (x3 - x1) * (y2 - y1))
    if not math.isfinite(area2) or area2 < DEGENERATE_AREA2:
        return None
    with rng.hold() as src:
        return _finite_point(*_triangle_point(src, x1, y1, x2, y2, x3, y3))


def point_in_arc(rng: LockedSource, cx: float, cy: float, radius: float,
                 start_angle: float, end_angle: float) -> Optional[Point2]:
    """Uniform point in the circular sector swept counter-clockwise from
    ``start_angle`` to ``end_angle`` (radians). The sweep wraps through zero
    when ``end_angle < start_angle``; equal angles are an empty sector.
    """
    cx, cy, radius = float(cx), float(cy), float(radius)
    start, end = float(start_angle), float(end_angle)
    if not _finite(cx, cy, start, end) or not _positive(radius):
        return None
    start = _wrap_angle(start)
    end = _wrap_angle(end)
    if end >= start:
        span = end - start
    else:
        span = (TWO_PI - start) + end
    if span <= 0.0:
        return None
    with rng.hold() as src:
        angle = start + src.next_float() * span
        if angle >= TWO_PI:
            angle -= TWO_PI
        r = radius * math.sqrt(src.next_float())
        return _finite_point(cx + r * math.cos(angle), cy + r * math.sin(angle))


def _polygon_vertices(vertices) -> Optional[np.ndarray]:
    # flat [x0, y0, x1, y1, ...] or (n, 2)
    try:
        pts = np.asarray(vertices, dtype=np.float64)
    except (TypeError, ValueError):
        return None
    if pts.ndim == 1:
        if pts.size % 2:
            return None
        pts = pts.reshape(-1, 2)
    if pts.ndim != 2 or pts.shape[1] != 2:
        return None
    return pts


def point_in_polygon(rng: LockedSource, vertices: Sequence) -> Optional[Point2]:
    """Uniform point in a simple polygon via a fan from vertex 0.

    The fan covers the polygon exactly for convex polygons and for polygons
    star-shaped around their first vertex. A fan triangle is chosen with
    probability proportional to its area, then sampled uniformly.
    """
    if vertices is None:
        return None
    pts = _polygon_vertices(vertices)
    if pts is None:
        return None
    n = len(pts)
    if n < 3 or n > rng.limits.max_polygon_vertices:
        return None
    if not np.all(np.isfinite(pts)):
        return None
    origin = pts[0]
    e1 = pts[1:-1] - origin
    e2 = pts[2:] - origin
    areas = 0.5 * np.abs(e1[:, 0] * e2[:, 1] - e2[:, 0] * e1[:, 1])
    cumulative = np.cumsum(areas)
    total = float(cumulative[-1])
    if not (math.isfinite(total) and total > 0.0):
        return None
    with rng.hold() as src:
        target = src.next_float() * total
        idx = int(np.searchsorted(cumulative, target, side="right"))
        if idx >= len(areas):
            # rounding pushed the target onto the total
            idx = int(np.flatnonzero(areas > 0.0)[-1])
        b = pts[idx + 1]
        c = pts[idx + 2]
        return _finite_point(*_triangle_point(
            src,
            float(origin[0]), float(origin[1]),
            float(b[0]), float(b[1]),
            float(c[0]), float(c[1]),
        ))


# --------------------------------------------------------------------------------------
# 3D
# --------------------------------------------------------------------------------------

def point_in_sphere(rng: LockedSource, cx: float, cy: float, cz: float,
                    radius: float) -> Optional[Point3]:
    """Uniform point in the ball: rejection for direction, cube root for radius."""
    cx, cy, cz, radius = float(cx), float(cy), float(cz), float(radius)
    if not _finite(cx, cy, cz) or not _positive(radius):
        return None
    attempts = rng.limits.max_rejection_attempts
    with rng.hold() as src:
        for _ in range(attempts):
            x = src.next_float() * 2.0 - 1.0
            y = src.next_float() * 2.0 - 1.0
            z = src.next_float() * 2.0 - 1.0
            sq = x * x + y * y + z * z
            if 0.0 < sq <= 1.0:
                scale = radius * src.next_float() ** (1.0 / 3.0) / math.sqrt(sq)
                return _finite_point(cx + x * scale, cy + y * scale, cz + z * scale)
    logger.debug("point_in_sphere gave up after %d attempts", attempts)
    return None


def point_on_sphere(rng: LockedSource, cx: float, cy: float, cz: float,
                    radius: float) -> Optional[Point3]:
    """Marsaglia (1972): uniform on the sphere surface without trig calls."""
    cx, cy, cz, radius = float(cx), float(cy), float(cz), float(radius)
    if not _finite(cx, cy, cz) or not _positive(radius):
        return None
    attempts = rng.limits.max_rejection_attempts
    with rng.hold() as src:
        for _ in range(attempts):
            u = src.next_float() * 2.0 - 1.0
            v = src.next_float() * 2.0 - 1.0
            s = u * u + v * v
            if 0.0 < s < 1.0:
                k = 2.0 * math.sqrt(1.0 - s)
                return _finite_point(
                    cx + radius * u * k,
                    cy + radius * v * k,
                    cz + radius * (1.0 - 2.0 * s),
                )
    logger.debug("point_on_sphere gave up after %d attempts", attempts)
    return None


def point_in_box(rng: LockedSource, min_x: float, min_y: float, min_z: float,
                 max_x: float, max_y: float, max_z: float) -> Optional[Point3]:
    lo = [float(min_x), float(min_y), float(min_z)]
    hi = [float(max_x), float(max_y), float(max_z)]
    if not _finite(*lo, *hi):
        return None
    for k in range(3):
        if lo[k] > hi[k]:
            lo[k], hi[k] = hi[k], lo[k]
    if not _finite(*(h - l for l, h in zip(lo, hi))):
        return None
    with rng.hold() as src:
        return _finite_point(
            _axis(src, lo[0], hi[0]),
            _axis(src, lo[1], hi[1]),
            _axis(src, lo[2], hi[2]),
        )
