"""Tests for straight line segments and the shared segment behaviour."""

import pytest

from curvekit.errors import InvalidSegmentError, SplitPointError
from curvekit.geom import same_vector
from curvekit.segment import Line


class TestLineConstruction:
    """Construction and basic properties."""

    def test_basic(self):
        """End points, length, direction and normal."""
        l = Line((0, 0), (3, 4))
        assert l.first_point == (0.0, 0.0)
        assert l.last_point == (3.0, 4.0)
        assert l.length == 5.0
        assert l.square_length == 25.0
        assert l.V == (3.0, 4.0)
        assert same_vector(l.direction, (0.6, 0.8))
        assert same_vector(l.normal_vector, (-0.8, 0.6))
        assert l.mid_point == (1.5, 2.0)

    def test_slope(self):
        """Slope and intercept, infinite for vertical lines."""
        l = Line((1, 1), (3, 5))
        assert l.slope == 2.0
        assert l.y_intercept == -1.0
        assert Line((1, 0), (1, 2)).slope == float('inf')

    def test_zero_length(self):
        """Coincident end points are refused."""
        with pytest.raises(InvalidSegmentError):
            Line((1, 1), (1, 1 + 1e-12))

    def test_non_finite(self):
        """Non-finite coordinates are refused."""
        with pytest.raises(ValueError):
            Line((0, 0), (float('inf'), 1))

    def test_precision_scales(self):
        """Default precision scales with the coordinates."""
        assert Line((0, 0), (1, 0)).precision == 1e-9
        assert abs(Line((0, 0), (1000, 0)).precision - 1e-6) < 1e-18
        assert Line((0, 0), (1, 0), precision=1e-3).precision == 1e-3

    def test_bounding_box(self):
        """Box spanned by the end points."""
        box = Line((2, -1), (-1, 3)).bounding_box
        assert (box.xmin, box.ymin, box.xmax, box.ymax) == (-1.0, -1.0, 2.0, 3.0)


class TestLineQueries:
    """Parameters, containment and distances."""

    def test_param_point(self):
        """Points at parameters, including beyond the ends."""
        l = Line((0, 0), (2, 2))
        assert l.param_point(0) == (0.0, 0.0)
        assert l.param_point(1) == (2.0, 2.0)
        assert l.param_point(0.25) == (0.5, 0.5)
        assert l.param_point(2.0) == (4.0, 4.0)

    def test_point_to_param(self):
        """Parameter of a point on the line."""
        l = Line((0, 0), (2, 2))
        assert abs(l.point_to_param((1.5, 1.5)) - 0.75) < 1e-12
        with pytest.raises(ValueError):
            l.point_to_param((1.0, 0.0))

    def test_is_on_segment(self):
        """Containment within precision."""
        l = Line((0, 0), (2, 2))
        assert l.is_on_segment((1.0, 1.0))
        assert l.is_on_segment((2.0, 2.0 + 1e-10))
        assert not l.is_on_segment((3.0, 3.0))
        assert not l.is_on_segment((1.0, 1.1))

    def test_distance_from(self):
        """Perpendicular or end point distance."""
        l = Line((0, 0), (2, 0))
        assert l.distance_from((1.0, 3.0)) == 3.0
        assert l.distance_from((5.0, 4.0)) == 5.0

    def test_params_at(self):
        """Parameters at given x and y values."""
        l = Line((0, 0), (2, 4))
        assert l.params_at_y(1.0) == [0.25]
        assert l.params_at_x(1.0) == [0.5]
        assert l.params_at_y(5.0) == []
        assert Line((0, 1), (2, 1)).params_at_y(1.0) == []

    def test_tangents(self):
        """Tangents and normals are constant."""
        l = Line((0, 0), (0, 3))
        assert l.tangent_at_first_point == (0.0, 1.0)
        assert l.tangent_at_last_point == (0.0, 1.0)
        assert l.normal_at(0.5) == (-1.0, 0.0)


class TestLineEditing:
    """Reverse, transforms and splitting."""

    def test_reverse(self):
        """Reversal swaps the end points."""
        l = Line((0, 0), (1, 2))
        r = l.reverse()
        assert r.first_point == (1.0, 2.0)
        assert r.last_point == (0.0, 0.0)
        assert r.precision == l.precision
        assert r.reverse().is_same(l)
        assert not r.is_same(l)

    def test_transforms(self):
        """Translate, rotate, scale and mirror return new lines."""
        l = Line((1, 0), (2, 0))
        assert l.translate(1, 2).is_same(Line((2, 2), (3, 2)))
        assert l.rotate(90).is_same(Line((0, 1), (0, 2)))
        assert l.scale(2).is_same(Line((2, 0), (4, 0)))
        assert l.mirror((0, 1)).is_same(Line((-1, 0), (-2, 0)))
        assert l.mirror().is_same(Line((-1, 0), (-2, 0)))
        # the receiver is left unchanged
        assert l.first_point == (1.0, 0.0)

    def test_split(self):
        """Split points are sorted and deduplicated."""
        l = Line((0, 0), (4, 0))
        pieces = l.split_at([(3, 0), (1, 0), (1 + 1e-12, 0)])
        assert len(pieces) == 3
        assert pieces[0].is_same(Line((0, 0), (1, 0)))
        assert pieces[1].is_same(Line((1, 0), (3, 0)))
        assert pieces[2].is_same(Line((3, 0), (4, 0)))
        for piece in pieces:
            assert piece.precision == l.precision

    def test_split_at_end_points(self):
        """End points do not split."""
        l = Line((0, 0), (4, 0))
        assert l.split_at([(0, 0), (4, 0)]) == [l]
        assert l.split_at([]) == [l]

    def test_split_off_segment(self):
        """Split points off the line raise."""
        l = Line((0, 0), (4, 0))
        with pytest.raises(SplitPointError):
            l.split_at([(2, 1)])
