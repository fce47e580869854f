"""Hidden-figure discovery, axiom seeding and statement ingestion.

The :class:`Preprocessor` runs once on a compiled diagram before solving:

1. segment intersections become hidden vertices and split segments into
   compound segments;
2. segments sharing one vertex become compound segments (same slope) or
   angles (different slope), repeated until nothing new appears;
3. segments lying inside longer ones mark the longer one compound;
4. angles whose three sides are all registered become triangles;
5. vertical angles and linear pairs are asserted;
6. given statements and the goal are resolved and ingested;
7. generic bisector and perpendicular relations are replaced in place by
   their specialized forms.
"""

from __future__ import annotations

import logging
from itertools import combinations
from typing import Iterable, Optional

from .compile import Statement
from .config import ProofConfig, resolve_config
from .diagram import Diagram
from .figures import (
    ANGLE_MARKERS,
    TRIANGLE_MARKERS,
    Angle,
    Figure,
    Segment,
    Triangle,
    Vertex,
    compare_angle_orientation,
    implied_figure,
    is_linear_pair,
    is_vertical_pair,
    shared_vertex,
)
from .geometry import bisector_direction, line_intersection, point_on_ray, segment_intersection
from .logging_utils import apply_debug_logging
from .relations import (
    AngleBisectorFigureRelation,
    CongruentTrianglesFigureRelation,
    FigureRelation,
    IllegalRelationError,
    PerpendicularFigureRelation,
    ProofReason,
    RelationType,
    SegmentBisectorFigureRelation,
)

logger = logging.getLogger(__name__)


class DiagramConsistencyError(RuntimeError):
    """The diagram lacks a figure that its own geometry requires."""


class StatementError(ValueError):
    """A given or goal statement could not be turned into a relation."""

    def __init__(self, statement: Statement, message: str):
        self.statement = statement
        super().__init__(message)


class UnresolvedFigureError(StatementError):
    def __init__(self, statement: Statement, name: str):
        self.name = name
        super().__init__(statement, f"cannot resolve figure {name!r} in '{statement}'")


class IllegalStatementError(StatementError):
    pass


def strip_marker(name: str) -> str:
    name = name.strip()
    if name[:1] in TRIANGLE_MARKERS or name[:1] in ANGLE_MARKERS:
        return name[1:]
    return name


def resolve_figure(diagram: Diagram, name: str) -> Optional[Figure]:
    """Resolve a possibly marked figure name against the diagram."""

    name = name.strip()
    kind = None
    if name[:1] in TRIANGLE_MARKERS:
        kind = "triangle"
    elif name[:1] in ANGLE_MARKERS:
        kind = "angle"
    return diagram.get_figure(strip_marker(name), kind)


def relation_from_statement(
    diagram: Diagram,
    statement: Statement,
    reason: Optional[ProofReason],
) -> FigureRelation:
    try:
        relation_type = RelationType(statement.relation.lower())
    except ValueError:
        raise IllegalStatementError(
            statement, f"unknown relation type {statement.relation!r} in '{statement}'"
        ) from None

    figure0 = resolve_figure(diagram, statement.figure0)
    if figure0 is None:
        raise UnresolvedFigureError(statement, statement.figure0)
    figure1 = None
    if statement.figure1 is not None:
        figure1 = resolve_figure(diagram, statement.figure1)
        if figure1 is None:
            raise UnresolvedFigureError(statement, statement.figure1)

    try:
        if (
            relation_type is RelationType.CONGRUENT
            and figure0.kind == "triangle"
            and figure1 is not None
            and figure1.kind == "triangle"
        ):
            return CongruentTrianglesFigureRelation(
                relation_type,
                figure0,
                figure1,
                reason=reason,
                correspondence=(strip_marker(statement.figure0), strip_marker(statement.figure1)),
            )
        return FigureRelation(relation_type, figure0, figure1, reason=reason)
    except IllegalRelationError as exc:
        hint = ""
        for name, figure in ((statement.figure0, figure0), (statement.figure1, figure1)):
            name = name.strip() if name is not None else ""
            if figure is not None and figure.kind == "triangle" and name[:1] not in TRIANGLE_MARKERS:
                hint = f"; {name} names a triangle, write <{name} for the angle"
                break
        raise IllegalStatementError(statement, f"{exc} in '{statement}'{hint}") from exc


def intersection_vertex(
    diagram: Diagram,
    seg0: Segment,
    seg1: Segment,
    tolerance: float,
    decimals: int,
) -> Optional[Vertex]:
    """Shared vertex of two segments, else the registered vertex where their lines meet."""

    shared = shared_vertex(seg0, seg1)
    if shared is not None:
        return diagram.get_vertex(shared.name)
    if not (seg0.has_location and seg1.has_location):
        return None
    point = line_intersection(*seg0.locs, *seg1.locs, decimals)
    if point is None:
        return None
    return diagram.vertex_at(point, tolerance)


class Preprocessor:
    def __init__(self, diagram: Diagram, config: Optional[ProofConfig] = None):
        self.diagram = diagram
        self.config = resolve_config(config)

    @property
    def tolerance(self) -> float:
        return self.config.epsilon

    @property
    def decimals(self) -> int:
        return self.config.slope_decimals

    def run(self, givens: Iterable[Statement] = (), goal: Optional[Statement] = None) -> Diagram:
        logger.info("Preprocessing %r", self.diagram)
        vertices = self.discover_hidden_vertices()
        joined = self.discover_hidden_segments_and_angles()
        overlaps = self.mark_overlapping_segments()
        if overlaps:
            joined += self.discover_hidden_segments_and_angles()
        triangles = self.discover_hidden_triangles()
        logger.info(
            "Hidden figures: %d from intersections, %d segments/angles, %d overlaps, %d triangles",
            vertices,
            joined,
            overlaps,
            triangles,
        )

        seeded = self.seed_axioms()
        ingested = self.ingest_givens(givens)
        if goal is not None:
            self.ingest_goal(goal)
        specialized = self.specialize_relations()
        logger.info(
            "Seeded %d axioms, ingested %d givens, specialized %d relations",
            seeded,
            ingested,
            specialized,
        )
        return self.diagram

    # Step 1

    def discover_hidden_vertices(self) -> int:
        added = 0
        segments = [s for s in self.diagram.figures("segment") if s.has_location]
        for seg0, seg1 in combinations(segments, 2):
            if any(seg1.vertex(v.name) is not None for v in seg0.vertices):
                continue
            point = segment_intersection(*seg0.locs, *seg1.locs, self.tolerance, self.decimals)
            if point is None:
                continue
            existing = self.diagram.vertex_at(point, self.tolerance)
            if existing is None:
                vertex = Vertex(self._fresh_vertex_name(), point)
                self.diagram.add_hidden_figure(vertex)
                logger.debug("Segments %s and %s cross at new vertex %s", seg0, seg1, vertex)
                added += 1
                added += self._split(seg0, vertex)
                added += self._split(seg1, vertex)
                continue
            for segment in (seg0, seg1):
                if segment.vertex(existing.name) is None:
                    added += self._split(segment, existing)

        for vertex in self.diagram.figures("vertex"):
            if vertex.loc is None:
                continue
            for segment in segments:
                if segment.vertex(vertex.name) is None and segment.contains_point(vertex.loc, self.tolerance):
                    added += self._split(segment, vertex)
        return added

    def _split(self, segment: Segment, vertex: Vertex) -> int:
        self.diagram.mark_compound_segment(segment)
        if not self.diagram.add_component_vertex(segment.name, vertex):
            return 0
        added = 0
        for part in self.diagram.component_segments(segment.name):
            if self.diagram.add_hidden_figure(part):
                added += 1
        return added

    def _fresh_vertex_name(self) -> str:
        for letter in self.config.vertex_names:
            if self.diagram.get_vertex(letter) is None:
                return letter
        raise DiagramConsistencyError("no unused vertex names left for hidden vertices")

    # Step 2

    def discover_hidden_segments_and_angles(self) -> int:
        total = 0
        passes = 0
        while True:
            passes += 1
            added = self._join_pass()
            total += added
            if not added:
                break
        logger.debug("Segment/angle discovery settled after %d passes", passes)
        return total

    def _join_pass(self) -> int:
        added = 0
        segments = [s for s in self.diagram.figures("segment") if s.has_location]
        for seg0, seg1 in combinations(segments, 2):
            implied = implied_figure(seg0, seg1, self.decimals)
            if implied is None:
                continue
            if isinstance(implied, Segment):
                added += self._confirm_compound(implied, seg0, seg1)
            elif self.diagram.add_hidden_figure(implied):
                added += 1

        for compound in self.diagram.compound_segments():
            for part in self.diagram.component_segments(compound.name):
                if self.diagram.add_hidden_figure(part):
                    added += 1
        return added

    def _confirm_compound(self, spanning: Segment, seg0: Segment, seg1: Segment) -> int:
        added = 1 if self.diagram.add_hidden_figure(spanning) else 0
        registered = self.diagram.registered(spanning)
        self.diagram.mark_compound_segment(registered)
        for vertex in (*seg0.vertices, *seg1.vertices):
            self.diagram.add_component_vertex(registered.name, vertex)
        return added

    # Step 3

    def mark_overlapping_segments(self) -> int:
        marked = 0
        segments = [s for s in self.diagram.figures("segment") if s.has_location]
        for longer in segments:
            for shorter in segments:
                if shorter is longer or longer.length() <= shorter.length() + self.tolerance:
                    continue
                if not all(longer.contains_point(v.loc, self.tolerance) for v in shorter.vertices):
                    continue
                changed = self.diagram.mark_compound_segment(longer)
                for vertex in shorter.vertices:
                    changed = self.diagram.add_component_vertex(longer.name, vertex) or changed
                if changed:
                    logger.debug("%s overlaps the longer segment %s", shorter, longer)
                    marked += 1
        return marked

    # Step 4

    def discover_hidden_triangles(self) -> int:
        added = 0
        for angle in self.diagram.figures("angle"):
            x, y, z = angle.vertices
            sides = (x.name + y.name, y.name + z.name, x.name + z.name)
            if not all(self.diagram.get_figure(side, "segment") is not None for side in sides):
                continue
            triangle = Triangle(x, y, z)
            area = triangle.area()
            if area is not None and area <= self.tolerance:
                logger.debug("Skipping degenerate triangle %s", triangle.label)
                continue
            if self.diagram.add_hidden_figure(triangle):
                added += 1
        return added

    # Step 5

    def seed_axioms(self) -> int:
        seeded = 0
        angles = [a for a in self.diagram.figures("angle") if a.has_location]
        for a, b in combinations(angles, 2):
            relation = self._angle_axiom(a, b)
            if relation is not None and self.diagram.add_relation(relation):
                logger.debug("Seeded %s (%s)", relation, relation.reason.text)
                seeded += 1
        return seeded

    def _angle_axiom(self, a: Angle, b: Angle) -> Optional[FigureRelation]:
        code = compare_angle_orientation(a, b, self.tolerance, self.decimals)
        if code == -4:
            if is_vertical_pair(a, b, self.tolerance, self.decimals):
                return FigureRelation(RelationType.CONGRUENT, a, b, reason=ProofReason.VERTICAL_ANGLES)
            if is_linear_pair(a, b, self.tolerance, self.decimals):
                return FigureRelation(RelationType.SUPPLEMENTARY, a, b, reason=ProofReason.LINEAR_PAIR)
        elif code in (0, 1, -1):
            return FigureRelation(RelationType.CONGRUENT, a, b, reason=ProofReason.SHARED_RAYS)
        return None

    # Step 6

    def ingest_givens(self, statements: Iterable[Statement]) -> int:
        count = 0
        for statement in statements:
            relation = relation_from_statement(self.diagram, statement, ProofReason.GIVEN)
            if self.diagram.add_relation(relation):
                count += 1
            else:
                logger.debug("Given '%s' is already known", statement)
        return count

    def ingest_goal(self, statement: Statement) -> FigureRelation:
        relation = relation_from_statement(self.diagram, statement, None)
        self.diagram.set_goal(relation)
        return relation

    # Step 7

    def specialize_relations(self) -> int:
        count = 0
        for index, relation in enumerate(self.diagram.relations):
            if type(relation) is not FigureRelation:
                continue
            if relation.relation_type is RelationType.BISECTS:
                if relation.figure1.kind == "segment":
                    special = self._specialize_segment_bisector(relation)
                else:
                    special = self._specialize_angle_bisector(relation)
            elif relation.relation_type is RelationType.PERPENDICULAR:
                special = self._specialize_perpendicular(relation)
            else:
                continue
            if special is not None:
                self.diagram.replace_relation(index, special)
                count += 1
        return count

    def _specialize_segment_bisector(self, relation: FigureRelation) -> Optional[FigureRelation]:
        center = relation.figure1.center()
        if center is None:
            return None
        vertex = self.diagram.vertex_at(center, self.tolerance)
        if vertex is None:
            raise DiagramConsistencyError(
                f"no vertex at the midpoint of {relation.figure1.name} for {relation}"
            )
        return SegmentBisectorFigureRelation.from_relation(relation, vertex.name)

    def _specialize_angle_bisector(self, relation: FigureRelation) -> Optional[FigureRelation]:
        angle = relation.figure1
        if not angle.has_location:
            return None
        a, c, b = (v.loc for v in angle.vertices)
        direction = bisector_direction(a, c, b)
        if direction is None:
            raise DiagramConsistencyError(f"{angle.label} has no bisecting direction")
        best = None
        for vertex in self.diagram.figures("vertex"):
            if vertex.loc is None or vertex.name == angle.center.name:
                continue
            along = point_on_ray(vertex.loc, c, direction, self.tolerance)
            if along is not None and (best is None or along < best[0]):
                best = (along, vertex)
        if best is None:
            raise DiagramConsistencyError(f"no vertex on the bisector of {angle.label} for {relation}")
        endpoint = best[1]
        return AngleBisectorFigureRelation.from_relation(
            relation, angle.center.name + endpoint.name, endpoint.name
        )

    def _specialize_perpendicular(self, relation: FigureRelation) -> Optional[FigureRelation]:
        seg0, seg1 = relation.figure0, relation.figure1
        vertex = intersection_vertex(self.diagram, seg0, seg1, self.tolerance, self.decimals)
        if vertex is not None:
            return PerpendicularFigureRelation.from_relation(relation, vertex.name)
        if seg0.has_location and seg1.has_location:
            point = segment_intersection(*seg0.locs, *seg1.locs, self.tolerance, self.decimals)
            if point is not None:
                raise DiagramConsistencyError(f"no vertex where {seg0} meets {seg1} for {relation}")
            logger.warning("%s: segments do not meet, keeping the generic relation", relation)
        return None


def preprocess(
    diagram: Diagram,
    givens: Iterable[Statement] = (),
    goal: Optional[Statement] = None,
    config: Optional[ProofConfig] = None,
) -> Diagram:
    return Preprocessor(diagram, config).run(givens, goal)


apply_debug_logging(globals(), logger=logger)
