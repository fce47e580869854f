"""Named figures: vertices, segments, angles and triangles.

Composite figures are built from shared :class:`Vertex` objects and derive
their names from them, so renaming a vertex renames every figure that uses it
and renaming a composite renames its vertices.  Equality follows the
valid-name rule: two figures are equal when they are the same kind and one's
name is a valid name for the other (``AB == BA``, ``ABC == CBA`` for angles,
any permutation for triangles).
"""

from __future__ import annotations

import re
from typing import ClassVar, Dict, Hashable, List, Optional, Sequence, Tuple, Type

from .geometry import (
    Point,
    SLOPE_DECIMALS,
    Slope,
    angle_measure,
    collinear_direction,
    distance,
    farthest_pair,
    midpoint,
    point_on_segment,
    slope_of,
    triangle_area,
)

FIGURE_KINDS = ("vertex", "segment", "angle", "triangle")
NAME_LENGTHS: Dict[str, int] = {"vertex": 1, "segment": 2, "angle": 3, "triangle": 3}

DELTA = "Δ"
ANGLE_SYMBOL = "∠"
TRIANGLE_MARKERS = (DELTA, "^")
ANGLE_MARKERS = (ANGLE_SYMBOL, "<")

_NAME_RE = re.compile(r"[A-Z]+")


def name_key(kind: str, name: str) -> Hashable:
    """Canonical key shared by every valid name of a figure."""

    if kind == "vertex":
        return name
    if kind in ("segment", "triangle"):
        return frozenset(name)
    if kind == "angle":
        return name[1], frozenset((name[0], name[2]))
    raise ValueError(f"unknown figure kind {kind!r}")


def is_well_formed_name(kind: str, name: object) -> bool:
    length = NAME_LENGTHS.get(kind)
    if length is None or not isinstance(name, str) or len(name) != length:
        return False
    return _NAME_RE.fullmatch(name) is not None and len(set(name)) == length


def _check_name(kind: str, name: str) -> str:
    if not is_well_formed_name(kind, name):
        raise ValueError(f"invalid {kind} name {name!r}")
    return name


class Figure:
    kind: ClassVar[str]
    vertices: Tuple["Vertex", ...]

    @property
    def name(self) -> str:
        return "".join(vertex.name for vertex in self.vertices)

    @property
    def key(self) -> Tuple[str, Hashable]:
        return self.kind, name_key(self.kind, self.name)

    @property
    def label(self) -> str:
        return self.name

    @property
    def has_location(self) -> bool:
        return all(vertex.loc is not None for vertex in self.vertices)

    def is_valid_name(self, name: str) -> bool:
        return is_well_formed_name(self.kind, name) and name_key(self.kind, name) == name_key(
            self.kind, self.name
        )

    def rename(self, name: str) -> None:
        _check_name(self.kind, name)
        for vertex, letter in zip(self.vertices, name):
            vertex.rename(letter)

    def children(self) -> List["Figure"]:
        return list(self.vertices)

    def get_child(self, name: str) -> Optional["Figure"]:
        for child in self.children():
            if child.is_valid_name(name):
                return child
        return None

    def vertex(self, name: str) -> Optional["Vertex"]:
        for vertex in self.vertices:
            if vertex.name == name:
                return vertex
        return None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Figure):
            return NotImplemented
        return self.kind == other.kind and self.is_valid_name(other.name)

    def __hash__(self) -> int:
        return hash(self.key)

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


class Vertex(Figure):
    kind = "vertex"

    def __init__(self, name: str, loc: Optional[Sequence[float]] = None):
        self._name = _check_name(self.kind, name)
        self.loc: Optional[Point] = None if loc is None else (float(loc[0]), float(loc[1]))

    @property
    def vertices(self) -> Tuple["Vertex", ...]:  # type: ignore[override]
        return (self,)

    @property
    def name(self) -> str:
        return self._name

    def rename(self, name: str) -> None:
        self._name = _check_name(self.kind, name)

    def children(self) -> List[Figure]:
        return []


class Segment(Figure):
    kind = "segment"

    def __init__(self, v0: Vertex, v1: Vertex):
        if v0.name == v1.name:
            raise ValueError(f"segment endpoints must differ, got {v0.name!r} twice")
        self.vertices = (v0, v1)

    @property
    def locs(self) -> Optional[Tuple[Point, Point]]:
        if not self.has_location:
            return None
        return self.vertices[0].loc, self.vertices[1].loc

    def other_vertex(self, name: str) -> Optional[Vertex]:
        if self.vertex(name) is None:
            return None
        return next(v for v in self.vertices if v.name != name)

    def length(self) -> Optional[float]:
        locs = self.locs
        return None if locs is None else distance(*locs)

    def slope(self, decimals: int = SLOPE_DECIMALS) -> Optional[Slope]:
        locs = self.locs
        return None if locs is None else slope_of(locs[0], locs[1], decimals)

    def center(self) -> Optional[Point]:
        locs = self.locs
        return None if locs is None else midpoint(*locs)

    def contains_point(self, point: Point, tolerance: Optional[float] = None) -> bool:
        locs = self.locs
        if locs is None:
            return False
        return point_on_segment(point, locs[0], locs[1], tolerance)


class Angle(Figure):
    kind = "angle"

    def __init__(self, v0: Vertex, center: Vertex, v2: Vertex):
        self.vertices = (v0, center, v2)
        _check_name(self.kind, self.name)

    @property
    def center(self) -> Vertex:
        return self.vertices[1]

    @property
    def ends(self) -> Tuple[Vertex, Vertex]:
        return self.vertices[0], self.vertices[2]

    @property
    def label(self) -> str:
        return ANGLE_SYMBOL + self.name

    def measure(self) -> Optional[float]:
        if not self.has_location:
            return None
        a, c, b = (v.loc for v in self.vertices)
        return angle_measure(a, c, b)


class Triangle(Figure):
    kind = "triangle"

    def __init__(self, v0: Vertex, v1: Vertex, v2: Vertex):
        self.vertices = (v0, v1, v2)
        _check_name(self.kind, self.name)
        self.segments = (Segment(v0, v1), Segment(v1, v2), Segment(v0, v2))
        self.angles = (Angle(v1, v0, v2), Angle(v0, v1, v2), Angle(v1, v2, v0))

    @property
    def label(self) -> str:
        return DELTA + self.name

    def children(self) -> List[Figure]:
        return [*self.vertices, *self.segments, *self.angles]

    def angle_at(self, name: str) -> Optional[Angle]:
        for angle in self.angles:
            if angle.center.name == name:
                return angle
        return None

    def side_opposite(self, name: str) -> Optional[Segment]:
        if self.vertex(name) is None:
            return None
        for segment in self.segments:
            if segment.vertex(name) is None:
                return segment
        return None

    def angle_opposite(self, side: Segment) -> Optional[Angle]:
        for vertex in self.vertices:
            if side.vertex(vertex.name) is None:
                return self.angle_at(vertex.name)
        return None

    def area(self) -> Optional[float]:
        if not self.has_location:
            return None
        return triangle_area(*(v.loc for v in self.vertices))


FIGURE_TYPES: Dict[str, Type[Figure]] = {
    "vertex": Vertex,
    "segment": Segment,
    "angle": Angle,
    "triangle": Triangle,
}


def figure_from_vertices(kind: str, vertices: Sequence[Vertex]) -> Figure:
    cls = FIGURE_TYPES.get(kind)
    if cls is None:
        raise ValueError(f"unknown figure kind {kind!r}")
    if kind == "vertex":
        if len(vertices) != 1:
            raise ValueError("vertex figure takes exactly one vertex")
        return vertices[0]
    if len(vertices) != NAME_LENGTHS[kind]:
        raise ValueError(f"{kind} needs {NAME_LENGTHS[kind]} vertices, got {len(vertices)}")
    return cls(*vertices)


def figure_from_name(
    kind: str,
    name: str,
    locs: Optional[Sequence[Sequence[float]]] = None,
) -> Figure:
    """Build a free-standing figure with fresh vertices."""

    _check_name(kind, name)
    if locs is not None and len(locs) != len(name):
        raise ValueError(f"{kind} {name} needs {len(name)} locations, got {len(locs)}")
    vertices = [Vertex(letter, None if locs is None else locs[idx]) for idx, letter in enumerate(name)]
    return figure_from_vertices(kind, vertices)


# Predicates over pairs of figures


def shared_vertex(seg0: Segment, seg1: Segment) -> Optional[Vertex]:
    """The single vertex two segments share, taken from ``seg0``."""

    common = [v for v in seg0.vertices if seg1.vertex(v.name) is not None]
    return common[0] if len(common) == 1 else None


def angle_between(seg0: Segment, seg1: Segment) -> Optional[Angle]:
    shared = shared_vertex(seg0, seg1)
    if shared is None:
        return None
    return Angle(seg0.other_vertex(shared.name), shared, seg1.other_vertex(shared.name))


def implied_figure(
    seg0: Segment,
    seg1: Segment,
    decimals: int = SLOPE_DECIMALS,
) -> Optional[Figure]:
    """Compound segment or angle implied by two segments sharing one vertex.

    Equal slopes give the segment spanning the two farthest of the three
    endpoints; different slopes give the angle at the shared vertex.
    """

    shared = shared_vertex(seg0, seg1)
    if shared is None or not (seg0.has_location and seg1.has_location):
        return None
    if seg0.slope(decimals) == seg1.slope(decimals):
        points = [seg0.other_vertex(shared.name), shared, seg1.other_vertex(shared.name)]
        i, j = farthest_pair([p.loc for p in points])
        return Segment(points[i], points[j])
    return angle_between(seg0, seg1)


def _ray_pairing(a: Angle, b: Angle, decimals: int) -> Optional[Tuple[Tuple[Vertex, Vertex, int], ...]]:
    center = a.center.loc
    a0, a2 = a.ends
    b0, b2 = b.ends
    for pairs in (((a0, b0), (a2, b2)), ((a0, b2), (a2, b0))):
        matched = []
        for p, q in pairs:
            direction = collinear_direction(center, p.loc, q.loc, decimals)
            if direction == 0:
                break
            matched.append((p, q, direction))
        else:
            return tuple(matched)
    return None


def compare_angle_orientation(
    a: Angle,
    b: Angle,
    tolerance: float,
    decimals: int = SLOPE_DECIMALS,
) -> int:
    """Compare two angles by how their sides overlap.

    Codes: ``0`` identical rays, ``1`` ``a`` contains ``b``, ``-1`` ``b``
    contains ``a``, ``-2`` no shared center, ``-3`` shared center but
    unaligned or partially overlapping, ``-4`` aligned with at least one pair
    of sides pointing in opposite directions.
    """

    if a.center.name != b.center.name:
        return -2
    if not (a.has_location and b.has_location):
        return -3
    pairing = _ray_pairing(a, b, decimals)
    if pairing is None:
        return -3
    if any(direction == -1 for _, _, direction in pairing):
        return -4
    center = a.center.loc
    a_contains_b = all(point_on_segment(q.loc, center, p.loc, tolerance) for p, q, _ in pairing)
    b_contains_a = all(point_on_segment(p.loc, center, q.loc, tolerance) for p, q, _ in pairing)
    if a_contains_b and b_contains_a:
        return 0
    if a_contains_b:
        return 1
    if b_contains_a:
        return -1
    return -3


def is_vertical_pair(a: Angle, b: Angle, tolerance: float, decimals: int = SLOPE_DECIMALS) -> bool:
    if compare_angle_orientation(a, b, tolerance, decimals) != -4:
        return False
    pairing = _ray_pairing(a, b, decimals)
    return all(direction == -1 for _, _, direction in pairing)


def is_linear_pair(a: Angle, b: Angle, tolerance: float, decimals: int = SLOPE_DECIMALS) -> bool:
    if compare_angle_orientation(a, b, tolerance, decimals) != -4:
        return False
    pairing = _ray_pairing(a, b, decimals)
    return sorted(direction for _, _, direction in pairing) == [-1, 1]
