"""Turn shape and statement data into a populated :class:`Diagram`."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .ast import Program, Span
from .diagram import Diagram
from .figures import FIGURE_TYPES, NAME_LENGTHS, Vertex, figure_from_vertices
from .geometry import Point, same_point

logger = logging.getLogger(__name__)

SHAPE_KIND_ALIASES = {"point": "vertex", "points": "vertex"}


class DuplicateFigureError(ValueError):
    """Raised when the same shape is drawn twice."""


@dataclass(frozen=True)
class ShapeSpec:
    """A drawn shape: canonical name, figure kind and optional vertex coordinates."""

    name: str
    kind: str
    coords: Tuple[Point, ...] = ()


@dataclass(frozen=True)
class Statement:
    """A given or goal statement as typed by the user.

    Figure names may carry a ``^``/``Δ`` (triangle) or ``<``/``∠`` (angle)
    marker.
    """

    relation: str
    figure0: str
    figure1: Optional[str] = None
    span: Optional[Span] = field(default=None, compare=False)

    def __str__(self) -> str:
        names = self.figure0 if self.figure1 is None else f"{self.figure0} {self.figure1}"
        return f"{self.relation} {names}"


@dataclass
class Problem:
    title: Optional[str] = None
    shapes: List[ShapeSpec] = field(default_factory=list)
    givens: List[Statement] = field(default_factory=list)
    goal: Optional[Statement] = None


def compile_diagram(
    shapes: Iterable[ShapeSpec],
    *,
    diagram: Optional[Diagram] = None,
    tolerance: float = 1e-9,
) -> Diagram:
    """Register every shape, sharing one :class:`Vertex` object per name.

    Raises :class:`DuplicateFigureError` when a shape is drawn twice and
    ``ValueError`` when a vertex is placed at two different locations.
    """

    diagram = diagram if diagram is not None else Diagram()
    vertices: Dict[str, Vertex] = {v.name: v for v in diagram.figures("vertex")}  # type: ignore[misc]
    drawn = set()

    for shape in shapes:
        kind = SHAPE_KIND_ALIASES.get(shape.kind.lower(), shape.kind.lower())
        if kind not in FIGURE_TYPES:
            raise ValueError(f"unknown shape kind {shape.kind!r} for {shape.name}")
        if len(shape.name) != NAME_LENGTHS[kind]:
            raise ValueError(f"{kind} name {shape.name!r} must have {NAME_LENGTHS[kind]} letters")
        if shape.coords and len(shape.coords) != len(shape.name):
            raise ValueError(
                f"{kind} {shape.name} has {len(shape.coords)} coordinates for {len(shape.name)} vertices"
            )

        members: List[Vertex] = []
        for idx, letter in enumerate(shape.name):
            loc = shape.coords[idx] if shape.coords else None
            members.append(_vertex_for(vertices, letter, loc, tolerance))
        figure = figure_from_vertices(kind, members)

        if figure.key in drawn:
            raise DuplicateFigureError(f"{kind} {shape.name} is drawn more than once")
        drawn.add(figure.key)
        if diagram.add_figure(figure):
            logger.debug("Compiled %s %s", kind, figure.name)

    logger.info(
        "Compiled diagram with %d figures from %d shapes",
        len(diagram.figures()),
        len(drawn),
    )
    return diagram


def _vertex_for(vertices: Dict[str, Vertex], name: str, loc: Optional[Sequence[float]], tolerance: float) -> Vertex:
    vertex = vertices.get(name)
    if vertex is None:
        vertex = Vertex(name, loc)
        vertices[name] = vertex
        return vertex
    if loc is None:
        return vertex
    point = (float(loc[0]), float(loc[1]))
    if vertex.loc is None:
        vertex.loc = point
    elif not same_point(vertex.loc, point, tolerance):
        raise ValueError(f"vertex {name} placed at both {vertex.loc} and {point}")
    return vertex


def build_problem(prog: Program) -> Problem:
    """Collect shapes and statements from a validated program."""

    problem = Problem()
    coords: Dict[str, Optional[Point]] = {}
    for stmt in prog.stmts:
        kind = stmt.kind
        if kind == "problem":
            problem.title = stmt.data["title"]
        elif kind == "points":
            for name, loc in stmt.data["points"]:
                coords[name] = loc
                problem.shapes.append(ShapeSpec(name, "vertex", () if loc is None else (loc,)))
        elif kind in ("segment", "angle", "triangle"):
            ids = stmt.data["ids"]
            locs = [coords.get(name) for name in ids]
            shape_coords = tuple(locs) if all(loc is not None for loc in locs) else ()
            problem.shapes.append(ShapeSpec("".join(ids), kind, shape_coords))
        elif kind in ("given", "prove"):
            figures = stmt.data["figures"]
            statement = Statement(
                stmt.data["relation"],
                figures[0],
                figures[1] if len(figures) > 1 else None,
                span=stmt.span,
            )
            if kind == "given":
                problem.givens.append(statement)
            else:
                problem.goal = statement
    return problem
