import pytest

from geoproof.figures import (
    Angle,
    Segment,
    Triangle,
    Vertex,
    compare_angle_orientation,
    figure_from_name,
    implied_figure,
    is_linear_pair,
    is_vertical_pair,
    shared_vertex,
)


def V(name, x=None, y=None):
    return Vertex(name, None if x is None else (x, y))


def test_segment_names_are_order_insensitive():
    seg = figure_from_name('segment', 'AB')

    assert seg.is_valid_name('BA')
    assert seg == figure_from_name('segment', 'BA')
    assert hash(seg) == hash(figure_from_name('segment', 'BA'))
    assert not seg.is_valid_name('AC')


def test_angle_keeps_its_center():
    angle = figure_from_name('angle', 'ABC')

    assert angle == figure_from_name('angle', 'CBA')
    assert angle != figure_from_name('angle', 'BAC')
    assert angle.label == '∠ABC'


def test_triangle_accepts_any_permutation():
    tri = figure_from_name('triangle', 'ABC')

    for name in ('ACB', 'BAC', 'BCA', 'CAB', 'CBA'):
        assert tri.is_valid_name(name)
    assert tri.label == 'ΔABC'


def test_figures_of_different_kinds_are_not_equal():
    assert figure_from_name('angle', 'ABC') != figure_from_name('triangle', 'ABC')


@pytest.mark.parametrize(
    'kind, name',
    [('vertex', 'a'), ('vertex', 'AB'), ('segment', 'AA'), ('angle', 'AB'), ('triangle', 'AB1')],
)
def test_invalid_names_are_rejected(kind, name):
    with pytest.raises(ValueError):
        figure_from_name(kind, name)


def test_triangle_children_follow_naming_order():
    tri = figure_from_name('triangle', 'ACF')

    names = [child.name for child in tri.children()]

    assert names == ['A', 'C', 'F', 'AC', 'CF', 'AF', 'CAF', 'ACF', 'CFA']
    assert tri.get_child('FC').name == 'CF'
    assert tri.get_child('FCA').kind == 'angle'
    assert tri.get_child('XY') is None


def test_triangle_opposites():
    tri = figure_from_name('triangle', 'ABC')

    assert tri.side_opposite('A').name == 'BC'
    assert tri.angle_opposite(tri.get_child('AB')).center.name == 'C'
    assert tri.angle_at('B').name == 'ABC'


def test_renaming_vertex_renames_composites():
    a, b, c = V('A'), V('B'), V('C')
    tri = Triangle(a, b, c)

    b.rename('D')

    assert tri.name == 'ADC'
    assert tri.segments[0].name == 'AD'
    assert tri.angles[1].name == 'ADC'


def test_renaming_composite_renames_vertices():
    a, b = V('A'), V('B')
    seg = Segment(a, b)

    seg.rename('XY')

    assert (a.name, b.name) == ('X', 'Y')


def test_shared_vertex_requires_exactly_one_common_letter():
    ab = figure_from_name('segment', 'AB')

    assert shared_vertex(ab, figure_from_name('segment', 'BC')).name == 'B'
    assert shared_vertex(ab, figure_from_name('segment', 'CD')) is None
    assert shared_vertex(ab, figure_from_name('segment', 'BA')) is None


def test_collinear_segments_imply_compound_segment():
    a, b, c = V('A', 0, 0), V('B', 1, 1), V('C', 3, 3)

    implied = implied_figure(Segment(a, b), Segment(b, c))

    assert isinstance(implied, Segment)
    assert implied == figure_from_name('segment', 'AC')


def test_turning_segments_imply_angle():
    a, b, c = V('A', 0, 0), V('B', 2, 0), V('C', 2, 3)

    implied = implied_figure(Segment(a, b), Segment(b, c))

    assert isinstance(implied, Angle)
    assert implied.name == 'ABC'


def test_implied_figure_needs_locations():
    assert implied_figure(figure_from_name('segment', 'AB'), figure_from_name('segment', 'BC')) is None


def _cross():
    # Lines A-B and C-D crossing at E.
    e = V('E', 0, 0)
    return {
        'A': V('A', -2, 0),
        'B': V('B', 2, 0),
        'C': V('C', 0, 2),
        'D': V('D', 0, -2),
        'E': e,
        'P': V('P', -1, 0),
        'Q': V('Q', 0, 1),
    }


def angle(points, name):
    return Angle(points[name[0]], points[name[1]], points[name[2]])


@pytest.mark.parametrize(
    'first, second, code',
    [
        ('AEC', 'AEC', 0),
        ('AEC', 'PEQ', 1),
        ('PEQ', 'AEC', -1),
        ('AEC', 'BED', -4),
        ('AEC', 'AED', -4),
        ('AEC', 'PEC', 1),
        ('AEQ', 'PEC', -3),
        ('AEC', 'AEB', -3),
    ],
)
def test_compare_angle_orientation_codes(first, second, code):
    points = _cross()

    assert compare_angle_orientation(angle(points, first), angle(points, second), 1e-4) == code


def test_compare_angle_orientation_without_shared_center():
    a = figure_from_name('angle', 'ABC', [(0, 0), (1, 0), (1, 1)])
    b = figure_from_name('angle', 'ACB', [(0, 0), (1, 1), (1, 0)])

    assert compare_angle_orientation(a, b, 1e-4) == -2


def test_vertical_and_linear_pairs():
    points = _cross()

    assert is_vertical_pair(angle(points, 'AEC'), angle(points, 'BED'), 1e-4)
    assert not is_linear_pair(angle(points, 'AEC'), angle(points, 'BED'), 1e-4)
    assert is_linear_pair(angle(points, 'AEC'), angle(points, 'AED'), 1e-4)
    assert not is_vertical_pair(angle(points, 'AEC'), angle(points, 'AED'), 1e-4)
