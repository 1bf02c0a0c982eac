"""Tests for quadratic and cubic Bézier segments."""

import pytest

from curvekit.bezier import (CubicBezier, QuadraticBezier, de_casteljau,
                             split_control_points)
from curvekit.errors import InvalidSegmentError, SplitPointError
from curvekit.geom import dist, same_vector


class TestDeCasteljau:
    """Control polygon subdivision."""

    def test_levels(self):
        """All intermediate levels of the construction."""
        levels = de_casteljau([(0, 0), (1, 2), (2, 0)], 0.5)
        assert len(levels) == 3
        assert levels[1] == [(0.5, 1.0), (1.5, 1.0)]
        assert levels[2] == [(1.0, 1.0)]

    def test_split_control_points(self):
        """Control points of both halves."""
        left, right = split_control_points([(0, 0), (1, 2), (2, 0)], 0.5)
        assert left == [(0, 0), (0.5, 1.0), (1.0, 1.0)]
        assert right == [(1.0, 1.0), (1.5, 1.0), (2, 0)]


class TestQuadraticBezier:
    """Quadratic curves."""

    def curve(self):
        return QuadraticBezier((0, 0), (2, 0), (1, 2))

    def test_basic(self):
        """Control point, end points and mid point."""
        c = self.curve()
        assert c.degree == 2
        assert c.control_point == (1.0, 2.0)
        assert c.param_point(0) == (0.0, 0.0)
        assert c.param_point(1) == (2.0, 0.0)
        assert c.mid_point == (1.0, 1.0)

    def test_polynomial(self):
        """Power basis coefficients."""
        xs, ys = self.curve().polynomial_coefficients
        assert xs == [0.0, 2.0, 0.0]
        assert ys == [0.0, 4.0, -4.0]

    def test_degenerate(self):
        """Coincident end points are refused."""
        with pytest.raises(InvalidSegmentError):
            QuadraticBezier((1, 1), (1, 1), (2, 2))

    def test_bounding_box(self):
        """Tight box inside the hull box."""
        c = self.curve()
        box = c.bounding_box
        assert abs(box.ymax - 1.0) < 1e-12
        assert box.ymin == 0.0
        assert c.hull_bounding_box.ymax == 2.0

    def test_params_at(self):
        """Parameters at given x and y values."""
        c = self.curve()
        params = c.params_at_y(0.75)
        assert len(params) == 2
        assert abs(params[0] - 0.25) < 1e-9
        assert abs(params[1] - 0.75) < 1e-9
        assert c.params_at_y(1.5) == []
        assert len(c.params_at_x(0.5)) == 1

    def test_on_segment(self):
        """Containment and parameter lookup."""
        c = self.curve()
        p = c.param_point(0.3)
        assert c.is_on_segment(p)
        assert abs(c.point_to_param(p) - 0.3) < 1e-9
        assert not c.is_on_segment((1.0, 1.1))
        with pytest.raises(ValueError):
            c.point_to_param((1.0, 1.1))

    def test_tangent(self):
        """Derivative and unit tangent."""
        c = self.curve()
        assert same_vector(c.gradient_at(0.0), (2.0, 4.0))
        assert same_vector(c.tangent_at(0.5), (1.0, 0.0))

    def test_reverse(self):
        """Reversal keeps the shape."""
        c = self.curve()
        r = c.reverse()
        assert r.first_point == (2.0, 0.0)
        assert r.control_point == (1.0, 2.0)
        assert r.precision == c.precision
        assert same_vector(r.param_point(0.3), c.param_point(0.7))


class TestCubicBezier:
    """Cubic curves."""

    def curve(self):
        return CubicBezier((0, 0), (3, 0), (1, 2), (2, 2))

    def test_basic(self):
        """Control points and mid point."""
        c = self.curve()
        assert c.degree == 3
        assert c.first_control_point == (1.0, 2.0)
        assert c.last_control_point == (2.0, 2.0)
        assert same_vector(c.mid_point, (1.5, 1.5))

    def test_transform(self):
        """Transforms act on the control points."""
        c = self.curve().translate(1, 1)
        assert isinstance(c, CubicBezier)
        assert c.control_points == ((1.0, 1.0), (2.0, 3.0), (3.0, 3.0), (4.0, 1.0))
        m = self.curve().mirror((1, 0))
        assert same_vector(m.mid_point, (1.5, -1.5))

    def test_is_same(self):
        """Same curve only in the same direction."""
        c = self.curve()
        assert c.is_same(CubicBezier((0, 0), (3, 0), (1, 2), (2, 2)))
        assert not c.is_same(c.reverse())
        assert c.reverse().reverse().is_same(c)

    def test_split(self):
        """Split at two points given out of order."""
        c = self.curve()
        p1 = c.param_point(0.2)
        p2 = c.param_point(0.6)
        pieces = c.split_at([p2, p1])
        assert len(pieces) == 3
        assert pieces[0].last_point == p1
        assert pieces[1].first_point == p1
        assert pieces[1].last_point == p2
        assert pieces[2].first_point == p2
        assert same_vector(pieces[1].mid_point, c.param_point(0.4))
        assert same_vector(pieces[2].param_point(0.5), c.param_point(0.8))
        for piece in pieces:
            assert isinstance(piece, CubicBezier)
            assert piece.precision == c.precision

    def test_split_at_params(self):
        """Repeated and end parameters are ignored."""
        c = self.curve()
        pieces = c.split_at_params([0.5, 0.5, 0.0])
        assert len(pieces) == 2
        assert same_vector(pieces[0].last_point, (1.5, 1.5))
        assert c.split_at_params([]) == [c]

    def test_split_off_curve(self):
        """Split points off the curve raise."""
        with pytest.raises(SplitPointError):
            self.curve().split_at([(1.5, 0.0)])

    def test_three_params_at_x(self):
        """A vertical line crossing three times."""
        c = CubicBezier((0, 0), (1, 0), (2, 1), (-1, 1))
        # x(t) = 6t - 15t**2 + 10t**3 meets 0.5 three times
        assert len(c.params_at_x(0.5)) == 3
        for t in c.params_at_x(0.5):
            assert abs(c.param_point(t)[0] - 0.5) < 1e-9

    def test_bounding_box_is_tight(self):
        """The box follows the curve, not the hull."""
        c = self.curve()
        box = c.bounding_box
        assert abs(box.ymax - 1.5) < 1e-9
        assert dist((box.xmin, box.ymin), (0.0, 0.0)) < 1e-12

    def test_parameter_tolerance_scales_with_size(self):
        """Parameter slack stays the precision over the curve size."""
        c = CubicBezier((0, 0), (3000, 0), (1000, 2000), (2000, 2000))
        assert abs(c.precision - 3e-6) < 1e-15
        assert abs(c.parameter_tolerance - 1e-9) < 1e-18
        assert c.is_valid_parameter(1.0 + 1e-10)
        assert c.is_valid_parameter(-1e-10)
        assert not c.is_valid_parameter(1.0 + 1e-6)
        assert not c.is_valid_parameter(-1e-6)

    def test_large_split_keeps_close_params(self):
        """Parameters a length precision apart are still distinct cuts."""
        c = CubicBezier((0, 0), (3000, 0), (1000, 2000), (2000, 2000))
        pieces = c.split_at_params([0.5, 0.5 + 1e-6])
        assert len(pieces) == 3
