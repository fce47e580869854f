import math

import pytest

from geoproof.geometry import (
    angle_measure,
    farthest_pair,
    line_intersection,
    point_on_segment,
    segment_intersection,
    slope_of,
    triangle_contains_point,
)


def test_slopes_compare_after_rounding():
    assert slope_of((0, 0), (3, 1)) == slope_of((0, 0), (3.00001, 1))
    assert slope_of((0, 0), (3, 1)) != slope_of((0, 0), (3, 1.01))


def test_vertical_slope_is_direction_independent():
    up = slope_of((1, 0), (1, 5))
    down = slope_of((2, 5), (2, -1))

    assert up.is_vertical
    assert up == down
    assert math.isinf(up.value)


def test_point_on_segment_exact_and_tolerant():
    assert point_on_segment((1, 0), (0, 0), (2, 0))
    assert not point_on_segment((1, 0.001), (0, 0), (2, 0))
    assert point_on_segment((1, 0.001), (0, 0), (2, 0), tolerance=1e-3)
    assert not point_on_segment((3, 0), (0, 0), (2, 0), tolerance=1e-3)


def test_line_intersection_general_case():
    point = line_intersection((0, 0), (2, 2), (0, 2), (2, 0))

    assert point == pytest.approx((1.0, 1.0))


@pytest.mark.parametrize(
    'a0, a1, b0, b1, expected',
    [
        ((0, -2), (0, 2), (-3, 1), (3, 1), (0.0, 1.0)),
        ((-3, 1), (3, 1), (0, -2), (0, 2), (0.0, 1.0)),
    ],
)
def test_line_intersection_with_vertical_line(a0, a1, b0, b1, expected):
    assert line_intersection(a0, a1, b0, b1) == pytest.approx(expected)


def test_parallel_and_coincident_lines_have_no_intersection():
    assert line_intersection((0, 0), (1, 1), (0, 1), (1, 2)) is None
    assert line_intersection((0, 0), (1, 1), (2, 2), (3, 3)) is None


def test_segment_intersection_requires_both_segments():
    assert segment_intersection((0, 0), (2, 2), (0, 2), (2, 0), 1e-4) == pytest.approx((1.0, 1.0))
    assert segment_intersection((0, 0), (1, 1), (0, 4), (4, 0), 1e-4) is None


def test_triangle_contains_point_uses_rounded_areas():
    a, b, c = (0, 0), (4, 0), (0, 4)

    assert triangle_contains_point(a, b, c, (1, 1))
    assert triangle_contains_point(a, b, c, (2, 2))
    assert not triangle_contains_point(a, b, c, (4, 4))


def test_angle_measure_right_angle():
    assert angle_measure((1, 0), (0, 0), (0, 1)) == pytest.approx(math.pi / 2)
    assert angle_measure((0, 0), (0, 0), (0, 1)) is None


def test_farthest_pair():
    assert farthest_pair([(0, 0), (1, 0), (3, 0)]) == (0, 2)
    assert farthest_pair([(0, 0), (1, 0), (0, 1)]) == (1, 2)
