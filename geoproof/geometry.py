"""Point-level numeric predicates used by hidden-figure discovery."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

import numpy as np

Point = Tuple[float, float]

_EPS = 1e-12
SLOPE_DECIMALS = 4


def _vec(a: Point, b: Point) -> np.ndarray:
    return np.asarray(b, dtype=float) - np.asarray(a, dtype=float)


def _cross2(u: np.ndarray, v: np.ndarray) -> float:
    return float(u[0] * v[1] - u[1] * v[0])


def distance(a: Point, b: Point) -> float:
    return float(np.linalg.norm(_vec(a, b)))


def midpoint(a: Point, b: Point) -> Point:
    mid = (np.asarray(a, dtype=float) + np.asarray(b, dtype=float)) * 0.5
    return float(mid[0]), float(mid[1])


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


@dataclass(frozen=True, eq=False)
class Slope:
    """Slope of the line through two points, compared after rounding.

    Vertical lines have an infinite slope regardless of direction, so ``AB``
    and ``BA`` always compare equal.
    """

    dx: float
    dy: float
    decimals: int = SLOPE_DECIMALS

    @property
    def is_vertical(self) -> bool:
        return abs(self.dx) <= _EPS

    @property
    def raw(self) -> float:
        if self.is_vertical:
            return math.inf
        return self.dy / self.dx

    @property
    def value(self) -> float:
        if self.is_vertical:
            return math.inf
        rounded = round(self.raw, self.decimals)
        return 0.0 if rounded == 0 else rounded

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Slope):
            return NotImplemented
        return self.value == other.value

    def __hash__(self) -> int:
        return hash(self.value)


def slope_of(a: Point, b: Point, decimals: int = SLOPE_DECIMALS) -> Slope:
    d = _vec(a, b)
    return Slope(float(d[0]), float(d[1]), decimals)


def y_intercept(p: Point, slope: Slope) -> Optional[float]:
    if slope.is_vertical:
        return None
    return p[1] - slope.raw * p[0]


def point_on_segment(p: Point, a: Point, b: Point, tolerance: Optional[float] = None) -> bool:
    """Sum-of-distances test; exact when ``tolerance`` is ``None``."""

    through = distance(a, p) + distance(p, b)
    length = distance(a, b)
    if tolerance is None:
        return through == length
    return abs(through - length) <= tolerance


def line_intersection(
    a0: Point,
    a1: Point,
    b0: Point,
    b1: Point,
    decimals: int = SLOPE_DECIMALS,
) -> Optional[Point]:
    """Intersection of the lines through ``a0a1`` and ``b0b1``.

    Returns ``None`` when the rounded slopes agree (parallel or coincident
    lines have no unique intersection).
    """

    sa = slope_of(a0, a1, decimals)
    sb = slope_of(b0, b1, decimals)
    if sa == sb:
        return None
    if sa.is_vertical:
        x = float(a0[0])
        y = sb.raw * x + y_intercept(b0, sb)
    elif sb.is_vertical:
        x = float(b0[0])
        y = sa.raw * x + y_intercept(a0, sa)
    else:
        ya = y_intercept(a0, sa)
        yb = y_intercept(b0, sb)
        x = (yb - ya) / (sa.raw - sb.raw)
        y = sa.raw * x + ya
    return float(x), float(y)


def segment_intersection(
    a0: Point,
    a1: Point,
    b0: Point,
    b1: Point,
    tolerance: float,
    decimals: int = SLOPE_DECIMALS,
) -> Optional[Point]:
    point = line_intersection(a0, a1, b0, b1, decimals)
    if point is None:
        return None
    if point_on_segment(point, a0, a1, tolerance) and point_on_segment(point, b0, b1, tolerance):
        return point
    return None


def same_point(a: Point, b: Point, tolerance: float) -> bool:
    return bool(np.allclose(a, b, rtol=0.0, atol=tolerance))


def triangle_area(a: Point, b: Point, c: Point) -> float:
    return abs(_cross2(_vec(a, b), _vec(a, c))) * 0.5


def triangle_contains_point(a: Point, b: Point, c: Point, p: Point) -> bool:
    """Area decomposition test with integer rounding to absorb float error."""

    parts = triangle_area(p, b, c) + triangle_area(a, p, c) + triangle_area(a, b, p)
    return round_half_up(parts) == round_half_up(triangle_area(a, b, c))


def angle_measure(a: Point, center: Point, c: Point) -> Optional[float]:
    """Angle ``a-center-c`` in radians, ``None`` for a zero-length side."""

    u = _vec(center, a)
    v = _vec(center, c)
    nu = float(np.linalg.norm(u))
    nv = float(np.linalg.norm(v))
    if nu <= _EPS or nv <= _EPS:
        return None
    cos_theta = float(np.dot(u, v)) / (nu * nv)
    return float(np.arccos(np.clip(cos_theta, -1.0, 1.0)))


def bisector_direction(a: Point, center: Point, c: Point) -> Optional[Point]:
    u = _vec(center, a)
    v = _vec(center, c)
    nu = float(np.linalg.norm(u))
    nv = float(np.linalg.norm(v))
    if nu <= _EPS or nv <= _EPS:
        return None
    d = u / nu + v / nv
    nd = float(np.linalg.norm(d))
    if nd <= _EPS:
        return None
    return float(d[0] / nd), float(d[1] / nd)


def point_on_ray(p: Point, origin: Point, direction: Point, tolerance: float) -> Optional[float]:
    """Distance of ``p`` along the ray, or ``None`` when ``p`` is off the ray."""

    w = _vec(origin, p)
    along = float(np.dot(w, direction))
    if along <= tolerance:
        return None
    if abs(_cross2(np.asarray(direction, dtype=float), w)) > tolerance:
        return None
    return along


def collinear_direction(center: Point, p: Point, q: Point, decimals: int = SLOPE_DECIMALS) -> int:
    """Compare rays ``center->p`` and ``center->q``.

    Returns ``1`` for the same direction, ``-1`` for opposite directions and
    ``0`` when the rays are not collinear.
    """

    if slope_of(center, p, decimals) != slope_of(center, q, decimals):
        return 0
    dot = float(np.dot(_vec(center, p), _vec(center, q)))
    if dot > 0:
        return 1
    if dot < 0:
        return -1
    return 0


def farthest_pair(points: Sequence[Point]) -> Tuple[int, int]:
    """Indices of the two points farthest apart; first found wins on ties."""

    if len(points) < 2:
        raise ValueError("farthest_pair needs at least two points")
    best = (0, 1)
    best_dist = -1.0
    for i in range(len(points)):
        for j in range(i + 1, len(points)):
            d = distance(points[i], points[j])
            if d > best_dist:
                best_dist = d
                best = (i, j)
    return best
