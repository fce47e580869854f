import dataclasses

import pytest

from geoproof.figures import figure_from_name
from geoproof.relations import (
    AngleBisectorFigureRelation,
    CongruentTrianglesFigureRelation,
    FigureRelation,
    IllegalRelationError,
    PerpendicularFigureRelation,
    ProofReason,
    RelationType,
    SegmentBisectorFigureRelation,
)


def seg(name):
    return figure_from_name('segment', name)


def ang(name):
    return figure_from_name('angle', name)


def tri(name):
    return figure_from_name('triangle', name)


def vtx(name):
    return figure_from_name('vertex', name)


def test_congruent_is_symmetric():
    a = FigureRelation(RelationType.CONGRUENT, seg('AB'), seg('CD'))
    b = FigureRelation(RelationType.CONGRUENT, seg('DC'), seg('BA'))

    assert a == b
    assert hash(a) == hash(b)


def test_other_relations_keep_operand_order():
    a = FigureRelation(RelationType.BISECTS, seg('AC'), seg('FB'))
    b = FigureRelation(RelationType.BISECTS, seg('FB'), seg('AC'))

    assert a != b
    assert FigureRelation(RelationType.PARALLEL, seg('AB'), seg('CD')) != FigureRelation(
        RelationType.PARALLEL, seg('CD'), seg('AB')
    )


def test_parallel_angles_are_illegal():
    with pytest.raises(IllegalRelationError) as exc:
        FigureRelation(RelationType.PARALLEL, ang('ABC'), ang('DEF'))

    assert 'parallel' in str(exc.value)
    assert exc.value.kinds == ('angle', 'angle')


@pytest.mark.parametrize(
    'relation_type, figure0, figure1',
    [
        (RelationType.CONGRUENT, vtx('A'), vtx('B')),
        (RelationType.CONGRUENT, seg('AB'), ang('ABC')),
        (RelationType.PERPENDICULAR, seg('AB'), seg('BA')),
        (RelationType.BISECTS, ang('ABC'), seg('AB')),
        (RelationType.RIGHT, ang('ABC'), ang('DEF')),
        (RelationType.RIGHT, seg('AB'), None),
        (RelationType.MIDPOINT, seg('AB'), vtx('C')),
        (RelationType.SIMILAR, tri('ABC'), tri('CBA')),
        (RelationType.SUPPLEMENTARY, ang('ABC'), None),
    ],
)
def test_illegal_combinations_are_rejected(relation_type, figure0, figure1):
    with pytest.raises(IllegalRelationError):
        FigureRelation(relation_type, figure0, figure1)


@pytest.mark.parametrize(
    'relation_type, figure0, figure1',
    [
        (RelationType.CONGRUENT, tri('ABC'), tri('DEF')),
        (RelationType.CONGRUENT, seg('AB'), seg('AB')),
        (RelationType.BISECTS, seg('BD'), ang('ABC')),
        (RelationType.RIGHT, ang('ABC'), None),
        (RelationType.MIDPOINT, vtx('M'), seg('AB')),
        (RelationType.COMPLEMENTARY, ang('ABC'), ang('CBD')),
    ],
)
def test_legal_combinations_construct(relation_type, figure0, figure1):
    relation = FigureRelation(relation_type, figure0, figure1)

    assert relation.relation_type is relation_type
    assert relation.parent is None


def test_relation_type_accepts_token():
    relation = FigureRelation('right', ang('ABC'))

    assert relation.relation_type is RelationType.RIGHT


def test_with_parent_returns_new_relation():
    relation = FigureRelation(RelationType.RIGHT, ang('ABC'))

    derived = relation.with_parent(3, ProofReason.PERPENDICULAR)

    assert derived == relation
    assert (derived.parent, derived.reason) == (3, ProofReason.PERPENDICULAR)
    assert relation.parent is None
    with pytest.raises(dataclasses.FrozenInstanceError):
        relation.parent = 1


def test_specialized_relations_equal_their_generic_form():
    generic = FigureRelation(RelationType.BISECTS, seg('AC'), seg('FB'), reason=ProofReason.GIVEN)

    special = SegmentBisectorFigureRelation.from_relation(generic, 'C')

    assert special == generic
    assert special.intersect_vertex == 'C'
    assert special.reason is ProofReason.GIVEN
    assert special.with_parent(None, ProofReason.GIVEN).intersect_vertex == 'C'


def test_specialized_relations_check_their_type():
    with pytest.raises(IllegalRelationError):
        PerpendicularFigureRelation(RelationType.PARALLEL, seg('AB'), seg('CD'), intersect_vertex='E')
    with pytest.raises(IllegalRelationError):
        AngleBisectorFigureRelation(RelationType.BISECTS, seg('AC'), seg('FB'))


def test_congruent_triangles_correspondence():
    relation = CongruentTrianglesFigureRelation(
        RelationType.CONGRUENT, tri('ABC'), tri('DEF'), correspondence=('ABC', 'FDE')
    )

    assert relation.pairs() == (('A', 'F'), ('B', 'D'), ('C', 'E'))
    assert relation == FigureRelation(RelationType.CONGRUENT, tri('DEF'), tri('CBA'))


def test_congruent_triangles_rejects_foreign_correspondence():
    with pytest.raises(ValueError):
        CongruentTrianglesFigureRelation(
            RelationType.CONGRUENT, tri('ABC'), tri('DEF'), correspondence=('ABC', 'XYZ')
        )


def test_reason_text():
    assert ProofReason.GIVEN.text == 'Given'
    assert ProofReason.REFLEXIVE.text == 'Reflexive Postulate'
