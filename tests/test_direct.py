"""Tests for the DIRECT global optimizer."""

import math

import numpy as np
import pytest

from curvekit.direct import DirectOptimiser, OptimisationResult, find_global_minimum


def paraboloid(x):
    return (x[0] - 0.2) ** 2 + (x[1] - 0.3) ** 2 + 2


def branin(x):
    x1 = 15 * x[0] - 5
    x2 = 15 * x[1]
    b = 5.1 / (4 * math.pi ** 2)
    c = 5 / math.pi
    r = 6
    s = 10
    t = 1 / (8 * math.pi)
    return (x2 - b * x1 ** 2 + c * x1 - r) ** 2 + s * (1 - t) * math.cos(x1) + s


class TestDirect:
    """Global minimization on the unit square."""

    def test_paraboloid(self):
        """Single minimum found to tight tolerance."""
        result = find_global_minimum(paraboloid)
        assert isinstance(result, OptimisationResult)
        assert isinstance(result.arg_min, np.ndarray)
        assert abs(result.f_min - 2) < 0.005
        assert abs(result.arg_min[0] - 0.2) < 1e-7
        assert abs(result.arg_min[1] - 0.3) < 1e-7
        assert result.iterations < 50
        assert result.tolerance <= 0.5e-8

    def test_branin(self):
        """Branin function with several global minima."""
        # three global minima, 0.397887 at each of them
        result = find_global_minimum(branin)
        assert abs(result.f_min - 0.397887) < 0.005
        assert result.iterations < 50

    def test_one_dimension(self):
        """Minimization over the unit interval."""
        result = find_global_minimum(lambda x: (x[0] - 0.7) ** 2, dimensions=1,
                                     tolerance=1e-6)
        assert result.arg_min.shape == (1,)
        assert abs(result.arg_min[0] - 0.7) < 1e-5

    def test_iteration_cap(self):
        """Stops after the maximum number of iterations."""
        result = find_global_minimum(paraboloid, max_iterations=3)
        assert result.iterations == 4
        assert result.tolerance > 0.5e-8

    def test_step_by_step(self):
        """Each iteration can only lower the minimum."""
        optimiser = DirectOptimiser(paraboloid)
        assert optimiser.f_min == paraboloid(np.array([0.5, 0.5]))
        optimiser.iterate()
        assert optimiser.f_min < paraboloid(np.array([0.5, 0.5]))
        assert optimiser.tolerance < math.sqrt(2)

    def test_no_dimensions(self):
        """Zero dimensions is an error."""
        with pytest.raises(ValueError):
            DirectOptimiser(paraboloid, dimensions=0)
