"""Tests for the polynomial and Newton solvers."""

import math

import pytest

from curvekit.solvers import (find_zero_via_newton, normalize_polynomial,
                              polyder, polyval, solve_generic_polynomial,
                              solve_quadratic)


class TestPolynomialHelpers:
    """Coefficient lists in ascending powers."""

    def test_polyval(self):
        """Horner evaluation."""
        # 1 + 2x + 3x^2
        assert polyval([1.0, 2.0, 3.0], 2.0) == 17.0
        assert polyval([], 3.0) == 0.0

    def test_polyder(self):
        """Derivative coefficients."""
        assert polyder([1.0, 2.0, 3.0]) == [2.0, 6.0]
        assert polyder([5.0]) == []

    def test_normalize(self):
        """Scaling by the largest coefficient."""
        assert normalize_polynomial([2.0, -4.0, 1.0]) == [0.5, -1.0, 0.25]
        assert normalize_polynomial([0.0, 0.0]) == [0.0, 0.0]


class TestQuadratic:
    """Quadratic roots with mpmath."""

    def test_two_roots(self):
        """Two distinct real roots in ascending order."""
        roots = solve_quadratic(-6.0, 1.0, 1.0)  # (x + 3)(x - 2)
        assert len(roots) == 2
        assert abs(roots[0] + 3.0) < 1e-12
        assert abs(roots[1] - 2.0) < 1e-12

    def test_double_root(self):
        """A double root is reported once."""
        roots = solve_quadratic(1.0, -2.0, 1.0)
        assert len(roots) == 1
        assert abs(roots[0] - 1.0) < 1e-12

    def test_no_real_root(self):
        """Negative discriminant gives no roots."""
        assert solve_quadratic(1.0, 0.0, 1.0) == []

    def test_linear(self):
        """Vanishing leading coefficient falls back to the linear case."""
        assert solve_quadratic(-4.0, 2.0, 0.0) == [2.0]
        assert solve_quadratic(1.0, 0.0, 0.0) == []

    def test_cancellation(self):
        """Roots of very different magnitude keep their precision."""
        # roots 1e-8 and 1e8
        roots = solve_quadratic(1.0, -(1e8 + 1e-8), 1.0)
        assert len(roots) == 2
        assert abs(roots[0] - 1e-8) < 1e-20
        assert abs(roots[1] - 1e8) < 1e-4


class TestGenericPolynomial:
    """Companion matrix root finding."""

    def test_cubic(self):
        """Three real roots of a cubic."""
        # (x - 1)(x - 2)(x - 3)
        roots = solve_generic_polynomial([-6.0, 11.0, -6.0, 1.0])
        assert len(roots) == 3
        for root, expected in zip(roots, [1.0, 2.0, 3.0]):
            assert abs(root - expected) < 1e-9

    def test_complex_roots_are_dropped(self):
        """Only real roots are returned."""
        # (x^2 + 1)(x - 0.5)
        roots = solve_generic_polynomial([-0.5, 1.0, -0.5, 1.0])
        assert len(roots) == 1
        assert abs(roots[0] - 0.5) < 1e-9

    def test_degree_reduction(self):
        """Tiny leading coefficients are ignored."""
        # negligible leading coefficients make this a quadratic
        roots = solve_generic_polynomial([-1.0, 0.0, 1.0, 1e-15, 1e-13])
        assert len(roots) == 2
        assert abs(roots[0] + 1.0) < 1e-9
        assert abs(roots[1] - 1.0) < 1e-9

    def test_linear(self):
        """Degree one is solved directly."""
        assert solve_generic_polynomial([-3.0, 2.0]) == [1.5]

    def test_constant_has_no_roots(self):
        """Constants and empty lists have no roots."""
        assert solve_generic_polynomial([4.0]) == []
        assert solve_generic_polynomial([0.0, 0.0, 0.0]) == []
        assert solve_generic_polynomial([]) == []

    def test_quartic_roots_sorted(self):
        """Quartic roots come back sorted."""
        # (x^2 - 1)(x^2 - 4)
        roots = solve_generic_polynomial([4.0, 0.0, -5.0, 0.0, 1.0])
        assert len(roots) == 4
        assert roots == sorted(roots)
        for root, expected in zip(roots, [-2.0, -1.0, 1.0, 2.0]):
            assert abs(root - expected) < 1e-9


class TestNewton:
    """Newton iteration with explicit non-convergence."""

    def test_square_root_of_two(self):
        """Converges from a nearby start."""
        x = find_zero_via_newton(lambda x: x * x - 2, lambda x: 2 * x, 1.0)
        assert x is not None
        assert abs(x - math.sqrt(2)) < 1e-6

    def test_zero_is_a_result(self):
        """A zero at the origin is not mistaken for failure."""
        x = find_zero_via_newton(lambda x: x, lambda x: 1.0, 0.0)
        assert x == 0.0

    def test_no_convergence(self):
        """No real zero gives None."""
        # x^2 + 1 has no real zero
        x = find_zero_via_newton(lambda x: x * x + 1, lambda x: 2 * x, 0.5,
                                 max_iterations=20)
        assert x is None

    def test_zero_derivative(self):
        """A flat start point raises."""
        with pytest.raises(ZeroDivisionError):
            find_zero_via_newton(lambda x: x * x + 1, lambda x: 2 * x, 0.0)
