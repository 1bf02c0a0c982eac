import math

import pytest
from curvekit.geom import *

## unit tests for curvekit geom.py


class TestVectors:
    """vector construction and arithmetic"""

    def test_vect(self):
        """Vectors are float tuples and refuse non-finite values."""
        assert vect(1, 2) == (1.0, 2.0)
        assert isinstance(vect(1, 2)[0], float)
        with pytest.raises(ValueError):
            vect(float('nan'), 0)
        with pytest.raises(ValueError):
            vect(0, float('inf'))

    def test_arithmetic(self):
        """Component-wise arithmetic, dot and cross products."""
        a = (1.0, 2.0)
        b = (3.0, -1.0)
        assert add(a, b) == (4.0, 1.0)
        assert sub(a, b) == (-2.0, 3.0)
        assert scale(a, 2) == (2.0, 4.0)
        assert dot(a, b) == 1.0
        assert cross(a, b) == -7.0
        assert midpoint(a, b) == (2.0, 0.5)

    def test_lengths(self):
        """Magnitudes, distances and normalization."""
        assert mag((3.0, 4.0)) == 5.0
        assert square_mag((3.0, 4.0)) == 25.0
        assert dist((1.0, 1.0), (4.0, 5.0)) == 5.0
        assert square_dist((1.0, 1.0), (4.0, 5.0)) == 25.0
        n = normalize((3.0, 4.0))
        assert abs(n[0] - 0.6) < 1e-12
        assert abs(n[1] - 0.8) < 1e-12
        with pytest.raises(ValueError):
            normalize((0.0, 0.0))

    def test_perpendicular(self):
        """Quarter turns in both directions."""
        assert perpendicular((1.0, 0.0)) == (-0.0, 1.0)
        assert perpendicular_cw((1.0, 0.0)) == (0.0, -1.0)

    def test_polar(self):
        """Conversion to and from polar coordinates."""
        p = polar_to_cartesian(2.0, math.pi / 2)
        assert abs(p[0]) < 1e-12
        assert abs(p[1] - 2.0) < 1e-12
        r, theta = cartesian_to_polar((0.0, -3.0))
        assert r == 3.0
        assert abs(theta + math.pi / 2) < 1e-12

    def test_isgoodnum(self):
        """Only finite real numbers are good numbers."""
        assert isgoodnum(1)
        assert isgoodnum(1.5)
        assert not isgoodnum(True)
        assert not isgoodnum('1')
        assert not isgoodnum(float('nan'))


class TestComparisons:
    """tolerance-aware equality and deduplication"""

    def test_close(self):
        """Scalar comparison with the default and an explicit tolerance."""
        assert close(1.0, 1.0 + 1e-10)
        assert not close(1.0, 1.0 + 1e-8)
        assert close(1.0, 1.1, 0.2)

    def test_same_vector(self):
        """Points closer than epsilon are the same."""
        assert same_vector((1.0, 1.0), (1.0 + 5e-10, 1.0 - 5e-10))
        assert not same_vector((1.0, 1.0), (1.0, 1.0 + 1e-6))

    def test_parallel(self):
        """Parallel and anti-parallel directions."""
        assert parallel((1.0, 1.0), (2.0, 2.0))
        assert parallel((1.0, 1.0), (-3.0, -3.0))
        assert not parallel((1.0, 0.0), (1.0, 1e-3))
        assert parallel((1.0, 0.0), (1.0, 1e-3), 0.01)

    def test_remove_duplicate_points(self):
        """First occurrences are kept in order."""
        points = [(0.0, 0.0), (1.0, 1.0), (1e-12, 0.0), (1.0, 1.0 + 1e-11)]
        assert remove_duplicate_points(points) == [(0.0, 0.0), (1.0, 1.0)]
        assert remove_duplicate_points(points, 1e-13) == points

    def test_remove_duplicate_values(self):
        """Duplicate scalars are dropped."""
        assert remove_duplicate_values([1.0, 2.0, 1.0 + 1e-12, 3.0]) == [1.0, 2.0, 3.0]
        assert remove_duplicate_values([]) == []


class TestAngles:
    """angle folding and sweeps"""

    def test_unit_angle(self):
        """Angles fold into [0, 2pi)."""
        assert unit_angle(0.0) == 0.0
        assert abs(unit_angle(-math.pi / 2) - 3 * math.pi / 2) < 1e-12
        assert abs(unit_angle(5 * math.pi) - math.pi) < 1e-12
        assert 0.0 <= unit_angle(-1e-20) < pi2

    def test_angular_distance(self):
        """Sweep from one angle to another in either direction."""
        assert abs(angular_distance(0.0, math.pi / 2) - math.pi / 2) < 1e-12
        assert abs(angular_distance(0.0, math.pi / 2, clockwise=True)
                   - 3 * math.pi / 2) < 1e-12
        assert abs(angular_distance(math.pi / 2, 0.0, clockwise=True)
                   - math.pi / 2) < 1e-12
        # a full turn collapses to zero
        assert angular_distance(0.0, pi2 - 1e-12) == 0.0


class TestPrecision:
    """precision scaling with coordinate magnitude"""

    def test_small_values_keep_base(self):
        """Coordinates below one leave epsilon alone."""
        assert scaled_precision([0.1, -0.5]) == epsilon
        assert scaled_precision([]) == epsilon

    def test_large_values_scale(self):
        """Precision grows with the largest coordinate."""
        assert abs(scaled_precision([10.0, -1000.0]) - 1000 * epsilon) < 1e-20
        assert abs(scaled_precision([20.0], ellipse_epsilon) - 20 * ellipse_epsilon) < 1e-18
