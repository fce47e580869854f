"""Typed relations between figures and the reasons that justify them."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Hashable, Optional, Tuple

from .figures import Figure


class RelationType(str, Enum):
    CONGRUENT = "congruent"
    PARALLEL = "parallel"
    PERPENDICULAR = "perpendicular"
    BISECTS = "bisects"
    SIMILAR = "similar"
    SUPPLEMENTARY = "supplementary"
    COMPLEMENTARY = "complementary"
    RIGHT = "right"
    MIDPOINT = "midpoint"

    def __str__(self) -> str:
        return self.value


class ProofReason(Enum):
    GIVEN = "Given"
    REFLEXIVE = "Reflexive Postulate"
    SSS = "Side-Side-Side Postulate"
    SAS = "Side-Angle-Side Postulate"
    ASA = "Angle-Side-Angle Postulate"
    PERPENDICULAR = "Perpendicular segments make right angles"
    BISECTS = "A segment bisector divides a segment into two congruent halves"
    MIDPOINT = "A midpoint divides a segment into two congruent halves"
    CORR_ANGLES = "Corresponding angles of congruent triangles are congruent"
    CORR_SEGMENTS = "Corresponding segments of congruent triangles are congruent"
    ISOSCELES_OPP_ANGLES = "Angles opposite the congruent segments of an isosceles triangle are congruent"
    ISOSCELES_OPP_SEGMENTS = "Sides opposite of the base angles of an isosceles triangle are congruent"
    VERTICAL_ANGLES = "Vertical angles are congruent"
    LINEAR_PAIR = "Angles that form a linear pair are supplementary"
    SHARED_RAYS = "Angles formed by the same rays are congruent"
    ANGLE_BISECTOR = "An angle bisector divides an angle into two congruent angles"
    SIMILAR_ANGLES = "Corresponding angles of similar triangles are congruent"
    TRANSITIVE = "Transitive Property of Congruence"
    RIGHT_ANGLES = "All right angles are congruent"
    CONGRUENT_TO_RIGHT = "An angle congruent to a right angle is a right angle"
    SUPPLEMENT_OF_RIGHT = "The supplement of a right angle is a right angle"
    CONGRUENT_SUPPLEMENTS = "Supplements of the same angle are congruent"
    CONGRUENT_COMPLEMENTS = "Complements of the same angle are congruent"

    @property
    def text(self) -> str:
        return self.value


SINGLE_OPERAND_TYPES = frozenset({RelationType.RIGHT})


class IllegalRelationError(ValueError):
    """Raised when a relation type does not accept the given operand kinds."""

    def __init__(self, relation_type: RelationType, figure0: Figure, figure1: Optional[Figure]):
        self.relation_type = relation_type
        self.kinds = (figure0.kind, figure1.kind if figure1 is not None else None)
        super().__init__(
            f"illegal {relation_type.value} relation between "
            f"{self.kinds[0]} {figure0.name} and "
            f"{'nothing' if figure1 is None else f'{figure1.kind} {figure1.name}'}"
        )


def is_legal_relation(relation_type: RelationType, figure0: Figure, figure1: Optional[Figure]) -> bool:
    """Closed table of operand kinds accepted by each relation type."""

    k0 = figure0.kind
    k1 = figure1.kind if figure1 is not None else None
    if relation_type is RelationType.CONGRUENT:
        return k0 in ("segment", "angle", "triangle") and k1 == k0
    if relation_type in (RelationType.PARALLEL, RelationType.PERPENDICULAR):
        return k0 == "segment" and k1 == "segment" and figure0 != figure1
    if relation_type is RelationType.BISECTS:
        return k0 == "segment" and k1 in ("segment", "angle") and figure0 != figure1
    if relation_type is RelationType.SIMILAR:
        return k0 == "triangle" and k1 == "triangle" and figure0 != figure1
    if relation_type in (RelationType.SUPPLEMENTARY, RelationType.COMPLEMENTARY):
        return k0 == "angle" and k1 == "angle" and figure0 != figure1
    if relation_type is RelationType.RIGHT:
        return k0 == "angle" and k1 is None
    if relation_type is RelationType.MIDPOINT:
        return k0 == "vertex" and k1 == "segment"
    return False


@dataclass(frozen=True, eq=False)
class FigureRelation:
    """A typed fact about one or two figures.

    ``parent`` is the index of the relation whose rule produced this one in
    the owning diagram's relation list; roots (givens and axioms) have none.
    Equality ignores ``parent`` and ``reason`` and is symmetric only for
    ``CONGRUENT``.
    """

    relation_type: RelationType
    figure0: Figure
    figure1: Optional[Figure] = None
    parent: Optional[int] = None
    reason: Optional[ProofReason] = None

    def __post_init__(self) -> None:
        if not isinstance(self.relation_type, RelationType):
            object.__setattr__(self, "relation_type", RelationType(self.relation_type))
        if not is_legal_relation(self.relation_type, self.figure0, self.figure1):
            raise IllegalRelationError(self.relation_type, self.figure0, self.figure1)

    @property
    def key(self) -> Tuple[RelationType, Hashable]:
        k0 = self.figure0.key
        k1 = self.figure1.key if self.figure1 is not None else None
        if self.relation_type is RelationType.CONGRUENT:
            return self.relation_type, frozenset((k0, k1))
        return self.relation_type, (k0, k1)

    @property
    def figures(self) -> Tuple[Figure, ...]:
        if self.figure1 is None:
            return (self.figure0,)
        return self.figure0, self.figure1

    @property
    def is_reflexive(self) -> bool:
        return self.relation_type is RelationType.CONGRUENT and self.figure0 == self.figure1

    def involves(self, figure: Figure) -> bool:
        return any(f == figure for f in self.figures)

    def partner_of(self, figure: Figure) -> Optional[Figure]:
        """The other operand of a two-operand relation containing ``figure``."""

        if self.figure1 is None:
            return None
        if self.figure0 == figure:
            return self.figure1
        if self.figure1 == figure:
            return self.figure0
        return None

    def with_parent(self, parent: Optional[int], reason: Optional[ProofReason]) -> "FigureRelation":
        return replace(self, parent=parent, reason=reason)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FigureRelation):
            return NotImplemented
        return self.key == other.key

    def __hash__(self) -> int:
        return hash(self.key)

    def __str__(self) -> str:
        if self.figure1 is None:
            return f"{self.relation_type.value}({self.figure0.label})"
        return f"{self.relation_type.value}({self.figure0.label}, {self.figure1.label})"


@dataclass(frozen=True, eq=False)
class PerpendicularFigureRelation(FigureRelation):
    intersect_vertex: str = ""

    def __post_init__(self) -> None:
        super().__post_init__()
        if self.relation_type is not RelationType.PERPENDICULAR:
            raise IllegalRelationError(self.relation_type, self.figure0, self.figure1)

    @classmethod
    def from_relation(cls, relation: FigureRelation, intersect_vertex: str) -> "PerpendicularFigureRelation":
        return cls(
            relation.relation_type,
            relation.figure0,
            relation.figure1,
            relation.parent,
            relation.reason,
            intersect_vertex=intersect_vertex,
        )


@dataclass(frozen=True, eq=False)
class SegmentBisectorFigureRelation(FigureRelation):
    intersect_vertex: str = ""

    def __post_init__(self) -> None:
        super().__post_init__()
        if self.relation_type is not RelationType.BISECTS or self.figure1.kind != "segment":
            raise IllegalRelationError(self.relation_type, self.figure0, self.figure1)

    @classmethod
    def from_relation(cls, relation: FigureRelation, intersect_vertex: str) -> "SegmentBisectorFigureRelation":
        return cls(
            relation.relation_type,
            relation.figure0,
            relation.figure1,
            relation.parent,
            relation.reason,
            intersect_vertex=intersect_vertex,
        )


@dataclass(frozen=True, eq=False)
class AngleBisectorFigureRelation(FigureRelation):
    """Bisector of an angle; ``smallest_bisector`` runs from the angle's
    center to the nearest vertex on the bisecting ray."""

    smallest_bisector: str = ""
    smallest_bisector_endpoint: str = ""

    def __post_init__(self) -> None:
        super().__post_init__()
        if self.relation_type is not RelationType.BISECTS or self.figure1.kind != "angle":
            raise IllegalRelationError(self.relation_type, self.figure0, self.figure1)

    @classmethod
    def from_relation(
        cls,
        relation: FigureRelation,
        smallest_bisector: str,
        smallest_bisector_endpoint: str,
    ) -> "AngleBisectorFigureRelation":
        return cls(
            relation.relation_type,
            relation.figure0,
            relation.figure1,
            relation.parent,
            relation.reason,
            smallest_bisector=smallest_bisector,
            smallest_bisector_endpoint=smallest_bisector_endpoint,
        )


@dataclass(frozen=True, eq=False)
class CongruentTrianglesFigureRelation(FigureRelation):
    """Congruence of two triangles with an explicit vertex correspondence.

    ``correspondence[0][i]`` in ``figure0`` maps to ``correspondence[1][i]``
    in ``figure1``.
    """

    correspondence: Tuple[str, str] = ("", "")

    def __post_init__(self) -> None:
        super().__post_init__()
        if self.relation_type is not RelationType.CONGRUENT or self.figure0.kind != "triangle":
            raise IllegalRelationError(self.relation_type, self.figure0, self.figure1)
        if not all(self.correspondence):
            object.__setattr__(self, "correspondence", (self.figure0.name, self.figure1.name))
        names0, names1 = self.correspondence
        if not (self.figure0.is_valid_name(names0) and self.figure1.is_valid_name(names1)):
            raise ValueError(
                f"correspondence {names0}->{names1} does not match "
                f"{self.figure0.name} and {self.figure1.name}"
            )

    def pairs(self) -> Tuple[Tuple[str, str], ...]:
        """Corresponding vertex names, in ``figure0`` order."""

        return tuple(zip(*self.correspondence))
