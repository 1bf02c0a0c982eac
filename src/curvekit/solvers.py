## numeric root finders used by the curvekit intersection code

## Copyright (c) 2020 Richard W. DeVaul
## Copyright (c) 2020 yapCAD contributors
## All rights reserved

# Permission is hereby granted, free of charge, to any person
# obtaining a copy of this software and associated documentation files
# (the "Software"), to deal in the Software without restriction,
# including without limitation the rights to use, copy, modify, merge,
# publish, distribute, sublicense, and/or sell copies of the Software,
# and to permit persons to whom the Software is furnished to do so,
# subject to the following conditions:
#
# The above copyright notice and this permission notice shall be
# included in all copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND,
# EXPRESS OR IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF
# MERCHANTABILITY, FITNESS FOR A PARTICULAR PURPOSE AND
# NONINFRINGEMENT. IN NO EVENT SHALL THE AUTHORS OR COPYRIGHT HOLDERS
# BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER LIABILITY, WHETHER IN AN
# ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM, OUT OF OR IN
# CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

"""Polynomial and scalar root finders.

Polynomials are given as coefficient sequences in ascending degree,
``[z0, z1, ..., zn]`` for ``z0 + z1*x + ... + zn*x**n``.
"""

from __future__ import annotations

import logging
import math
from typing import Callable, List, Optional, Sequence

import mpmath as mpm
import numpy as np

from curvekit.geom import epsilon, remove_duplicate_values

logger = logging.getLogger(__name__)

__all__ = [
    'polyval', 'polyder', 'normalize_polynomial', 'solve_quadratic',
    'solve_generic_polynomial', 'find_zero_via_newton',
]

_POLISH_STEPS = 8


def polyval(coefficients: Sequence[float], x: float) -> float:
    result = 0.0
    for c in reversed(coefficients):
        result = result * x + c
    return result


def polyder(coefficients: Sequence[float]) -> List[float]:
    return [i * c for i, c in enumerate(coefficients)][1:]


def normalize_polynomial(coefficients: Sequence[float]) -> List[float]:
    """Scale coefficients so that the largest has magnitude 1."""
    largest = max((abs(c) for c in coefficients), default=0.0)
    if largest == 0.0:
        return [0.0 for _ in coefficients]
    return [c / largest for c in coefficients]


def _reduce_degree(coefficients: Sequence[float], tolerance: float) -> List[float]:
    coeffs = [float(c) for c in coefficients]
    while coeffs and abs(coeffs[-1]) < tolerance:
        coeffs.pop()
    return coeffs


def _polish_root(coefficients: Sequence[float], x: float) -> float:
    """A few Newton steps on the polynomial, keeping only improvements."""
    derivative = polyder(coefficients)
    best = x
    best_residual = abs(polyval(coefficients, x))
    for _ in range(_POLISH_STEPS):
        if best_residual == 0.0:
            break
        slope = polyval(derivative, best)
        if slope == 0.0:
            break
        candidate = best - polyval(coefficients, best) / slope
        residual = abs(polyval(coefficients, candidate))
        if not residual < best_residual:
            break
        best, best_residual = candidate, residual
    return best


def solve_quadratic(c0: float, c1: float, c2: float,
                    tolerance: float = epsilon) -> List[float]:
    """Real roots of ``c0 + c1*x + c2*x**2``, ascending.

    A discriminant within ``tolerance`` of zero is a double root and
    returns a single value.
    """
    if abs(c2) < tolerance:
        if abs(c1) < tolerance:
            return []
        return [-c0 / c1]

    a = mpm.mpf(c2)
    b = mpm.mpf(c1)
    c = mpm.mpf(c0)
    disc = b * b - 4 * a * c
    if mpm.fabs(disc) <= tolerance * max(1.0, float(b * b)):
        return [float(-b / (2 * a))]
    if disc < 0:
        return []
    root = mpm.sqrt(disc)
    # avoid cancellation by computing the larger-magnitude root first
    q = -(b + mpm.sign(b) * root) / 2 if b != 0 else root / 2
    if q == 0:
        return [0.0]
    roots = sorted([float(q / a), float(c / q)])
    return roots


def solve_generic_polynomial(coefficients: Sequence[float],
                             tolerance: float = epsilon,
                             imaginary_tolerance: Optional[float] = None) -> List[float]:
    """Real roots of a polynomial, ascending.

    Leading coefficients whose magnitude is below ``tolerance`` are
    dropped, reducing the degree.  A polynomial reduced to a constant
    has no roots.  Linear polynomials are solved directly, higher
    degrees through the eigenvalues of their companion matrix.

    Eigenvalues whose imaginary part is below ``imaginary_tolerance``
    (relative to the root magnitude, default ``sqrt(tolerance)``) count
    as real.  Double roots come back from the eigen-decomposition as
    conjugate pairs with a small imaginary part, so the default is
    deliberately looser than ``tolerance``.  Accepted roots are polished
    with Newton steps and deduplicated.
    """
    coeffs = _reduce_degree(coefficients, tolerance)
    degree = len(coeffs) - 1
    if degree < len(coefficients) - 1:
        logger.debug('polynomial degree reduced from %d to %d',
                     len(coefficients) - 1, max(degree, 0))

    if degree <= 0:
        if not coeffs:
            logger.debug('identically zero polynomial has no isolated roots')
        return []
    if degree == 1:
        return [-coeffs[0] / coeffs[1]]

    if imaginary_tolerance is None:
        imaginary_tolerance = math.sqrt(tolerance)

    leading = coeffs[-1]
    companion = np.zeros((degree, degree))
    companion[1:, :-1] = np.eye(degree - 1)
    companion[:, -1] = [-c / leading for c in coeffs[:-1]]
    eigenvalues = np.linalg.eigvals(companion)

    roots = []
    for value in eigenvalues:
        if abs(value.imag) <= imaginary_tolerance * max(1.0, abs(value)):
            roots.append(_polish_root(coeffs, float(value.real)))

    roots.sort()
    return remove_duplicate_values(roots, tolerance)


def find_zero_via_newton(f: Callable[[float], float],
                         f_prime: Callable[[float], float],
                         x0: float,
                         precision: float = 1e-6,
                         max_iterations: int = 100) -> Optional[float]:
    """Newton iteration from ``x0``.

    Returns the first iterate with ``|f(x)| <= precision``, or ``None``
    when ``max_iterations`` steps do not reach it.  A zero derivative
    raises ``ZeroDivisionError``.
    """
    x = x0
    for _ in range(max_iterations):
        value = f(x)
        if abs(value) <= precision:
            return x
        x = x - value / f_prime(x)
    if abs(f(x)) <= precision:
        return x
    return None
