"""Figure and relation registry for a single proof problem."""

from __future__ import annotations

import logging
from itertools import combinations
from typing import Dict, Hashable, Iterator, List, Optional, Sequence

from .figures import FIGURE_KINDS, NAME_LENGTHS, Figure, Segment, Vertex, is_well_formed_name, name_key
from .geometry import Point, distance, same_point
from .relations import FigureRelation, RelationType

logger = logging.getLogger(__name__)


class Diagram:
    """Registry of figures and relations.

    Figures are unique by canonical key and keep their registration order.
    Relations live in an append-only list; a relation's ``parent`` is an index
    into that list and must point at an earlier entry.  No inference happens
    here.
    """

    def __init__(self) -> None:
        self._figures: Dict[Hashable, Figure] = {}
        self._hidden: Dict[str, List[Figure]] = {kind: [] for kind in FIGURE_KINDS}
        self._compound: Dict[Hashable, List[Vertex]] = {}
        self._relations: List[FigureRelation] = []
        self._relation_index: Dict[Hashable, int] = {}
        self._goal: Optional[FigureRelation] = None

    # Figures

    def add_figure(self, figure: Figure) -> bool:
        if figure.key in self._figures:
            return False
        self._figures[figure.key] = figure
        for child in figure.children():
            self.add_figure(child)
        return True

    def add_hidden_figure(self, figure: Figure) -> bool:
        if not self.add_figure(figure):
            return False
        self._hidden[figure.kind].append(figure)
        logger.debug("Registered hidden %s %s", figure.kind, figure.name)
        return True

    def contains(self, figure: Figure) -> bool:
        return figure.key in self._figures

    def registered(self, figure: Figure) -> Optional[Figure]:
        """The registered instance equal to ``figure``, if any."""

        return self._figures.get(figure.key)

    def get_figure(self, name: str, kind: Optional[str] = None) -> Optional[Figure]:
        """Look a figure up by any of its valid names.

        Without ``kind`` the name length decides; a 3-letter name resolves to
        whichever angle or triangle was registered first.
        """

        kinds = [kind] if kind is not None else [k for k in FIGURE_KINDS if NAME_LENGTHS[k] == len(name)]
        found: List[Figure] = []
        for candidate in kinds:
            if not is_well_formed_name(candidate, name):
                continue
            figure = self._figures.get((candidate, name_key(candidate, name)))
            if figure is not None:
                found.append(figure)
        if not found:
            return None
        if len(found) == 1:
            return found[0]
        order = {key: idx for idx, key in enumerate(self._figures)}
        return min(found, key=lambda f: order[f.key])

    def get_vertex(self, name: str) -> Optional[Vertex]:
        figure = self.get_figure(name, "vertex")
        return figure if isinstance(figure, Vertex) else None

    def figures(self, kind: Optional[str] = None) -> List[Figure]:
        if kind is None:
            return list(self._figures.values())
        return [f for f in self._figures.values() if f.kind == kind]

    def hidden_figures(self, kind: str) -> List[Figure]:
        return list(self._hidden[kind])

    def vertex_at(self, loc: Point, tolerance: float) -> Optional[Vertex]:
        for figure in self._figures.values():
            if isinstance(figure, Vertex) and figure.loc is not None and same_point(figure.loc, loc, tolerance):
                return figure
        return None

    # Compound segments

    def mark_compound_segment(self, segment: Segment) -> bool:
        registered = self.registered(segment)
        if registered is None:
            self.add_hidden_figure(segment)
            registered = segment
        if registered.key in self._compound:
            return False
        self._compound[registered.key] = []
        logger.debug("Marked %s as compound", registered.name)
        return True

    def is_compound_segment(self, name: str) -> bool:
        return self._segment_key(name) in self._compound

    def compound_segments(self) -> List[Segment]:
        return [self._figures[key] for key in self._compound]  # type: ignore[misc]

    def add_component_vertex(self, name: str, vertex: Vertex) -> bool:
        """Record ``vertex`` as lying on compound segment ``name``.

        Component vertices are kept ordered by distance from the segment's
        first endpoint; endpoints themselves are ignored.
        """

        key = self._segment_key(name)
        if key not in self._compound:
            raise KeyError(f"segment {name} is not compound")
        segment = self._figures[key]
        if segment.vertex(vertex.name) is not None:
            return False
        components = self._compound[key]
        if any(v.name == vertex.name for v in components):
            return False
        components.append(vertex)
        origin = segment.vertices[0].loc
        if origin is not None and all(v.loc is not None for v in components):
            components.sort(key=lambda v: distance(origin, v.loc))
        return True

    def component_vertices(self, name: str) -> Optional[List[Vertex]]:
        """Endpoints and interior vertices of a compound segment, in order."""

        key = self._segment_key(name)
        if key not in self._compound:
            return None
        segment = self._figures[key]
        first, last = segment.vertices
        return [first, *self._compound[key], last]

    def component_segments(self, name: str) -> List[Segment]:
        vertices = self.component_vertices(name)
        if vertices is None:
            return []
        whole = self._figures[self._segment_key(name)]
        segments: List[Segment] = []
        for a, b in combinations(vertices, 2):
            segment = Segment(a, b)
            if segment != whole:
                segments.append(segment)
        return segments

    def _segment_key(self, name: str) -> Hashable:
        return "segment", name_key("segment", name)

    # Relations

    @property
    def relations(self) -> Sequence[FigureRelation]:
        return tuple(self._relations)

    def __len__(self) -> int:
        return len(self._relations)

    def iter_relations(self, start: int = 0) -> Iterator[FigureRelation]:
        for idx in range(start, len(self._relations)):
            yield self._relations[idx]

    def relation(self, index: int) -> FigureRelation:
        return self._relations[index]

    def add_relation(self, relation: FigureRelation) -> bool:
        if relation.parent is not None and not 0 <= relation.parent < len(self._relations):
            raise ValueError(
                f"parent index {relation.parent} of {relation} does not refer to an earlier relation"
            )
        if not all(self.contains(f) for f in relation.figures):
            logger.debug("Rejected %s: operand not registered", relation)
            return False
        if relation.key in self._relation_index:
            return False
        self._relation_index[relation.key] = len(self._relations)
        self._relations.append(relation)
        return True

    def replace_relation(self, index: int, relation: FigureRelation) -> FigureRelation:
        """Swap the relation at ``index`` for a more specific one of the same fact."""

        old = self._relations[index]
        if old != relation:
            raise ValueError(f"cannot replace {old} with unrelated {relation}")
        self._relations[index] = relation
        return old

    def index_of(self, relation: FigureRelation) -> Optional[int]:
        return self._relation_index.get(relation.key)

    def find_relation(
        self,
        relation_type: RelationType,
        figure0: Figure,
        figure1: Optional[Figure] = None,
    ) -> Optional[int]:
        """Index of an existing relation, without constructing one."""

        k1 = figure1.key if figure1 is not None else None
        if relation_type is RelationType.CONGRUENT:
            key = (relation_type, frozenset((figure0.key, k1)))
        else:
            key = (relation_type, (figure0.key, k1))
        return self._relation_index.get(key)

    def relations_of_type(self, relation_type: RelationType) -> List[FigureRelation]:
        return [r for r in self._relations if r.relation_type is relation_type]

    # Goal and traceback

    @property
    def goal(self) -> Optional[FigureRelation]:
        return self._goal

    def set_goal(self, relation: Optional[FigureRelation]) -> Optional[FigureRelation]:
        previous = self._goal
        self._goal = relation
        return previous

    def trace(self, index: int) -> List[FigureRelation]:
        """Relations from the root down to the one at ``index``."""

        chain: List[FigureRelation] = []
        current: Optional[int] = index
        while current is not None:
            relation = self._relations[current]
            chain.append(relation)
            current = relation.parent
        chain.reverse()
        return chain

    def __repr__(self) -> str:
        return f"Diagram(figures={len(self._figures)}, relations={len(self._relations)})"
