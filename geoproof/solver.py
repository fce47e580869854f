"""Forward-chaining proof search over a preprocessed diagram."""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from enum import Enum
from itertools import combinations, permutations
from typing import Callable, Dict, Hashable, Iterator, List, Optional, Tuple

from .config import ProofConfig, resolve_config
from .diagram import Diagram
from .figures import Angle, Figure, Segment, Triangle, Vertex
from .logging_utils import apply_debug_logging
from .preprocess import intersection_vertex
from .printer import format_relation
from .relations import (
    AngleBisectorFigureRelation,
    CongruentTrianglesFigureRelation,
    FigureRelation,
    ProofReason,
    RelationType,
)

logger = logging.getLogger(__name__)

Derivation = Tuple[FigureRelation, ProofReason]


class SolverState(Enum):
    UNSOLVED = "unsolved"
    SOLVING = "solving"
    SOLVED = "solved"


class SolverPreconditionError(RuntimeError):
    """Raised when ``solve`` is called without a diagram or a goal."""


@dataclass
class ProofResult:
    proved: bool
    goal: FigureRelation
    traceback: List[FigureRelation] = field(default_factory=list)
    passes: int = 0
    relation_count: int = 0

    def steps(self) -> List[Tuple[str, str]]:
        """``(statement, reason)`` pairs from the root fact to the goal."""

        return [
            (format_relation(relation), relation.reason.text if relation.reason is not None else "")
            for relation in self.traceback
        ]


class ProofSolver:
    """Computes the closure of a diagram's relations and searches for its goal.

    The solver moves from ``UNSOLVED`` through ``SOLVING`` to ``SOLVED``; once
    solved, further ``solve`` calls return the cached answer until a new
    diagram is set.
    """

    def __init__(self, diagram: Optional[Diagram] = None, config: Optional[ProofConfig] = None):
        self.config = resolve_config(config)
        self._diagram = diagram
        self._state = SolverState.UNSOLVED
        self._result: Optional[ProofResult] = None
        self._partners: Dict[Hashable, List[Figure]] = {}
        self.passes = 0
        self._rules: Dict[RelationType, Callable[[FigureRelation], Iterator[Derivation]]] = {
            RelationType.PERPENDICULAR: self._perpendicular,
            RelationType.BISECTS: self._bisects,
            RelationType.MIDPOINT: self._midpoint,
            RelationType.SIMILAR: self._similar,
            RelationType.CONGRUENT: self._congruent,
            RelationType.RIGHT: self._right,
            RelationType.SUPPLEMENTARY: self._paired_angles,
            RelationType.COMPLEMENTARY: self._paired_angles,
        }

    @property
    def diagram(self) -> Optional[Diagram]:
        return self._diagram

    @property
    def state(self) -> SolverState:
        return self._state

    @property
    def result(self) -> Optional[ProofResult]:
        return self._result

    @property
    def traceback(self) -> List[FigureRelation]:
        return list(self._result.traceback) if self._result is not None else []

    def set_diagram(self, diagram: Optional[Diagram]) -> Optional[Diagram]:
        previous = self._diagram
        self._diagram = diagram
        self._state = SolverState.UNSOLVED
        self._result = None
        self.passes = 0
        return previous

    def solve(self) -> bool:
        if self._state is SolverState.SOLVED and self._result is not None:
            return self._result.proved
        if self._diagram is None:
            raise SolverPreconditionError("no diagram to solve")
        goal = self._diagram.goal
        if goal is None:
            raise SolverPreconditionError("diagram has no goal")

        self._state = SolverState.SOLVING
        logger.info("Solving for %s over %r", goal, self._diagram)
        try:
            if self.config.seed_reflexive:
                self.seed_reflexive()
            self.inflate_given()
            index = self._diagram.index_of(goal)
            traceback = self._diagram.trace(index) if index is not None else []
        except Exception:
            self._state = SolverState.UNSOLVED
            raise

        self._result = ProofResult(
            proved=index is not None,
            goal=goal,
            traceback=traceback,
            passes=self.passes,
            relation_count=len(self._diagram),
        )
        self._state = SolverState.SOLVED
        logger.info(
            "Goal %s %s after %d passes (%d relations)",
            goal,
            "proved" if self._result.proved else "not proved",
            self.passes,
            self._result.relation_count,
        )
        return self._result.proved

    def seed_reflexive(self) -> int:
        seeded = 0
        for figure in self._diagram.figures():
            if figure.kind == "vertex":
                continue
            relation = FigureRelation(RelationType.CONGRUENT, figure, figure, reason=ProofReason.REFLEXIVE)
            if self._diagram.add_relation(relation):
                seeded += 1
        return seeded

    def inflate_given(self) -> int:
        """Apply the rules until a full pass adds nothing; returns the number added."""

        total = 0
        while True:
            self.passes += 1
            added = self.inflate_once()
            logger.debug("Pass %d added %d relations", self.passes, added)
            total += added
            if not added:
                return total

    def inflate_once(self) -> int:
        self._partners = self._congruence_partners()
        added = 0
        for index in range(len(self._diagram)):
            relation = self._diagram.relation(index)
            rule = self._rules.get(relation.relation_type)
            if rule is None:
                continue
            for derived, reason in rule(relation):
                added += self._derive(derived, index, reason)
        added += self._apply_isosceles()
        added += self._apply_congruent_triangles()
        return added

    def _derive(self, relation: FigureRelation, parent: Optional[int], reason: ProofReason) -> int:
        candidate = relation.with_parent(parent, reason)
        if not self._diagram.add_relation(candidate):
            return 0
        logger.debug("Derived %s (%s) from #%s", candidate, reason.name, parent)
        return 1

    def _is_congruent(self, figure0: Figure, figure1: Figure) -> bool:
        if figure0 == figure1:
            return True
        return self._diagram.find_relation(RelationType.CONGRUENT, figure0, figure1) is not None

    def _congruence_partners(self) -> Dict[Hashable, List[Figure]]:
        partners: Dict[Hashable, List[Figure]] = defaultdict(list)
        for relation in self._diagram.relations_of_type(RelationType.CONGRUENT):
            if relation.is_reflexive or relation.figure0.kind == "triangle":
                continue
            partners[relation.figure0.key].append(relation.figure1)
            partners[relation.figure1.key].append(relation.figure0)
        return partners

    # Rules keyed by relation type

    def _perpendicular(self, relation: FigureRelation) -> Iterator[Derivation]:
        seg0, seg1 = relation.figure0, relation.figure1
        name = getattr(relation, "intersect_vertex", "")
        if name:
            vertex = self._diagram.get_vertex(name)
        else:
            vertex = intersection_vertex(
                self._diagram, seg0, seg1, self.config.epsilon, self.config.slope_decimals
            )
        if vertex is None:
            return
        for p in self._points_on(seg0):
            for q in self._points_on(seg1):
                if vertex.name in (p.name, q.name) or p.name == q.name:
                    continue
                angle = self._diagram.get_figure(p.name + vertex.name + q.name, "angle")
                if angle is not None:
                    yield FigureRelation(RelationType.RIGHT, angle), ProofReason.PERPENDICULAR

    def _points_on(self, segment: Segment) -> List[Vertex]:
        components = self._diagram.component_vertices(segment.name)
        return list(components) if components is not None else list(segment.vertices)

    def _bisects(self, relation: FigureRelation) -> Iterator[Derivation]:
        if relation.figure1.kind == "angle":
            halves = self._angle_halves(relation)
            if halves is not None:
                yield FigureRelation(RelationType.CONGRUENT, *halves), ProofReason.ANGLE_BISECTOR
            return
        vertex = self._bisector_vertex(relation)
        if vertex is None:
            logger.warning("Cannot locate where %s meets %s", relation.figure0, relation.figure1)
            return
        yield FigureRelation(RelationType.MIDPOINT, vertex, relation.figure1), ProofReason.BISECTS

    def _bisector_vertex(self, relation: FigureRelation) -> Optional[Vertex]:
        name = getattr(relation, "intersect_vertex", "")
        if name:
            return self._diagram.get_vertex(name)
        vertex = intersection_vertex(
            self._diagram,
            relation.figure0,
            relation.figure1,
            self.config.epsilon,
            self.config.slope_decimals,
        )
        if vertex is not None:
            return vertex
        return self._diagram.get_vertex(relation.figure0.vertices[1].name)

    def _angle_halves(self, relation: FigureRelation) -> Optional[Tuple[Figure, Figure]]:
        angle: Angle = relation.figure1
        center = angle.center.name
        if isinstance(relation, AngleBisectorFigureRelation):
            endpoint = relation.smallest_bisector_endpoint
        else:
            other = relation.figure0.other_vertex(center)
            if other is None:
                return None
            endpoint = other.name
        x, _, y = angle.vertices
        half0 = self._diagram.get_figure(x.name + center + endpoint, "angle")
        half1 = self._diagram.get_figure(endpoint + center + y.name, "angle")
        if half0 is None or half1 is None:
            logger.warning("Halves of %s along %s are not registered", angle.label, relation.figure0)
            return None
        return half0, half1

    def _midpoint(self, relation: FigureRelation) -> Iterator[Derivation]:
        vertex, segment = relation.figure0, relation.figure1
        a, b = segment.vertices
        if vertex.name in (a.name, b.name):
            return
        half0 = self._diagram.get_figure(a.name + vertex.name, "segment")
        half1 = self._diagram.get_figure(vertex.name + b.name, "segment")
        if half0 is None or half1 is None:
            logger.warning("Midpoint %s of %s: half segments are not registered", vertex, segment)
            return
        yield FigureRelation(RelationType.CONGRUENT, half0, half1), ProofReason.MIDPOINT

    def _similar(self, relation: FigureRelation) -> Iterator[Derivation]:
        t0: Triangle = relation.figure0
        t1: Triangle = relation.figure1
        decimals = self.config.measure_decimals
        measures0 = [angle.measure() for angle in t0.angles]
        measures1 = [angle.measure() for angle in t1.angles]
        if None in measures0 or None in measures1:
            return
        used = set()
        for angle0, m0 in zip(t0.angles, measures0):
            for idx, (angle1, m1) in enumerate(zip(t1.angles, measures1)):
                if idx in used or round(m0, decimals) != round(m1, decimals):
                    continue
                used.add(idx)
                yield FigureRelation(RelationType.CONGRUENT, angle0, angle1), ProofReason.SIMILAR_ANGLES
                break

    def _congruent(self, relation: FigureRelation) -> Iterator[Derivation]:
        if relation.is_reflexive:
            return
        f0, f1 = relation.figure0, relation.figure1
        if f0.kind == "triangle":
            yield from self._corresponding_parts(relation)
            return

        for a, b in ((f0, f1), (f1, f0)):
            for other in self._partners.get(b.key, ()):
                if other != a:
                    yield FigureRelation(RelationType.CONGRUENT, a, other), ProofReason.TRANSITIVE

        if f0.kind == "angle":
            for a, b in ((f0, f1), (f1, f0)):
                if self._diagram.find_relation(RelationType.RIGHT, a) is not None:
                    yield FigureRelation(RelationType.RIGHT, b), ProofReason.CONGRUENT_TO_RIGHT

    def _corresponding_parts(self, relation: FigureRelation) -> Iterator[Derivation]:
        t0: Triangle = relation.figure0
        t1: Triangle = relation.figure1
        if isinstance(relation, CongruentTrianglesFigureRelation):
            names0, names1 = relation.correspondence
        else:
            names0, names1 = t0.name, t1.name
        mapping = dict(zip(names0, names1))
        for side in t0.segments:
            a, b = side.vertices
            other = t1.get_child(mapping[a.name] + mapping[b.name])
            yield FigureRelation(RelationType.CONGRUENT, side, other), ProofReason.CORR_SEGMENTS
        for angle in t0.angles:
            x, c, y = angle.vertices
            other = t1.get_child(mapping[x.name] + mapping[c.name] + mapping[y.name])
            yield FigureRelation(RelationType.CONGRUENT, angle, other), ProofReason.CORR_ANGLES

    def _right(self, relation: FigureRelation) -> Iterator[Derivation]:
        angle = relation.figure0
        for other in self._diagram.relations_of_type(RelationType.RIGHT):
            if other.figure0 != angle:
                yield FigureRelation(RelationType.CONGRUENT, angle, other.figure0), ProofReason.RIGHT_ANGLES

    def _paired_angles(self, relation: FigureRelation) -> Iterator[Derivation]:
        supplementary = relation.relation_type is RelationType.SUPPLEMENTARY
        a, b = relation.figure0, relation.figure1
        if supplementary:
            for x, y in ((a, b), (b, a)):
                if self._diagram.find_relation(RelationType.RIGHT, x) is not None:
                    yield FigureRelation(RelationType.RIGHT, y), ProofReason.SUPPLEMENT_OF_RIGHT

        reason = ProofReason.CONGRUENT_SUPPLEMENTS if supplementary else ProofReason.CONGRUENT_COMPLEMENTS
        for other in self._diagram.relations_of_type(relation.relation_type):
            if other == relation:
                continue
            for shared in (a, b):
                theirs = other.partner_of(shared)
                if theirs is None:
                    continue
                mine = relation.partner_of(shared)
                if mine != theirs:
                    yield FigureRelation(RelationType.CONGRUENT, mine, theirs), reason

    # Scans over triangles

    def _apply_isosceles(self) -> int:
        added = 0
        for triangle in self._diagram.figures("triangle"):
            for s0, s1 in combinations(triangle.segments, 2):
                index = self._diagram.find_relation(RelationType.CONGRUENT, s0, s1)
                if index is None:
                    continue
                derived = FigureRelation(
                    RelationType.CONGRUENT, triangle.angle_opposite(s0), triangle.angle_opposite(s1)
                )
                added += self._derive(derived, index, ProofReason.ISOSCELES_OPP_ANGLES)
            for a0, a1 in combinations(triangle.angles, 2):
                index = self._diagram.find_relation(RelationType.CONGRUENT, a0, a1)
                if index is None:
                    continue
                derived = FigureRelation(
                    RelationType.CONGRUENT,
                    triangle.side_opposite(a0.center.name),
                    triangle.side_opposite(a1.center.name),
                )
                added += self._derive(derived, index, ProofReason.ISOSCELES_OPP_SEGMENTS)
        return added

    def _apply_congruent_triangles(self) -> int:
        """Match triangle pairs by SSS, SAS then ASA.

        The derived congruence has no parent: it rests on several relations at
        once, so its traceback starts at the congruence itself.
        """

        added = 0
        for t0, t1 in combinations(self._diagram.figures("triangle"), 2):
            if self._diagram.find_relation(RelationType.CONGRUENT, t0, t1) is not None:
                continue
            match = self._match_triangles(t0, t1)
            if match is None:
                continue
            names1, reason = match
            relation = CongruentTrianglesFigureRelation(
                RelationType.CONGRUENT, t0, t1, reason=reason, correspondence=(t0.name, names1)
            )
            if self._diagram.add_relation(relation):
                logger.debug("Triangles %s and %s congruent by %s", t0.label, t1.label, reason.name)
                added += 1
        return added

    def _match_triangles(self, t0: Triangle, t1: Triangle) -> Optional[Tuple[str, ProofReason]]:
        criteria = (
            (self._sss, ProofReason.SSS),
            (self._sas, ProofReason.SAS),
            (self._asa, ProofReason.ASA),
        )
        for criterion, reason in criteria:
            for perm in permutations(t1.name):
                names1 = "".join(perm)
                if criterion(t0, t1, dict(zip(t0.name, names1))):
                    return names1, reason
        return None

    def _side_pair(self, t0: Triangle, t1: Triangle, mapping: Dict[str, str], a: str, b: str) -> bool:
        return self._is_congruent(t0.get_child(a + b), t1.get_child(mapping[a] + mapping[b]))

    def _angle_pair(self, t0: Triangle, t1: Triangle, mapping: Dict[str, str], v: str) -> bool:
        return self._is_congruent(t0.angle_at(v), t1.angle_at(mapping[v]))

    def _sss(self, t0: Triangle, t1: Triangle, mapping: Dict[str, str]) -> bool:
        return all(self._side_pair(t0, t1, mapping, *side.name) for side in t0.segments)

    def _sas(self, t0: Triangle, t1: Triangle, mapping: Dict[str, str]) -> bool:
        for vertex in t0.vertices:
            v = vertex.name
            others = [u.name for u in t0.vertices if u.name != v]
            if not self._angle_pair(t0, t1, mapping, v):
                continue
            if all(self._side_pair(t0, t1, mapping, v, u) for u in others):
                return True
        return False

    def _asa(self, t0: Triangle, t1: Triangle, mapping: Dict[str, str]) -> bool:
        for side in t0.segments:
            a, b = side.name
            if not self._side_pair(t0, t1, mapping, a, b):
                continue
            if self._angle_pair(t0, t1, mapping, a) and self._angle_pair(t0, t1, mapping, b):
                return True
        return False


def solve_diagram(diagram: Diagram, config: Optional[ProofConfig] = None) -> ProofResult:
    solver = ProofSolver(diagram, config)
    solver.solve()
    return solver.result


apply_debug_logging(
    globals(),
    logger=logger,
    skip={
        "ProofSolver._is_congruent",
        "ProofSolver._side_pair",
        "ProofSolver._angle_pair",
        "ProofSolver._derive",
    },
)
