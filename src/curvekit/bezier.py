## quadratic and cubic Bézier segments for curvekit

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

"""Quadratic and cubic Bézier segments.

Control points are kept in Bernstein order, first point to last point.
The curve is parameterized over ``0 <= t <= 1``.
"""

from __future__ import annotations

from functools import cached_property
from math import comb
from typing import List, Optional, Sequence, Tuple

from curvekit import xform
from curvekit.bbox import BoundingBox, points_bbox
from curvekit.errors import InvalidSegmentError
from curvekit.geom import (Vector, dist, remove_duplicate_values, same_vector,
                           vect, vstr)
from curvekit.segment import Segment
from curvekit.solvers import (normalize_polynomial, polyder, polyval,
                              solve_generic_polynomial)

__all__ = ['BezierCurve', 'QuadraticBezier', 'CubicBezier',
           'de_casteljau', 'split_control_points']


def de_casteljau(points: Sequence[Vector], t: float) -> List[List[Vector]]:
    """All levels of the de Casteljau construction, the curve point last."""
    levels = [list(points)]
    current = list(points)
    while len(current) > 1:
        current = [((1 - t) * p[0] + t * q[0], (1 - t) * p[1] + t * q[1])
                   for p, q in zip(current[:-1], current[1:])]
        levels.append(current)
    return levels


def split_control_points(points: Sequence[Vector],
                         t: float) -> Tuple[List[Vector], List[Vector]]:
    """Control polygons of the two halves of a Bézier curve cut at ``t``."""
    levels = de_casteljau(points, t)
    left = [level[0] for level in levels]
    right = [level[-1] for level in reversed(levels)]
    return left, right


def _power_basis(values: Sequence[float]) -> List[float]:
    n = len(values) - 1
    coefficients = []
    for k in range(n + 1):
        total = sum((-1) ** (k - i) * comb(k, i) * values[i] for i in range(k + 1))
        coefficients.append(comb(n, k) * total)
    return coefficients


class BezierCurve(Segment):
    """Base of the Bézier segments; ``control_points`` includes the end points."""

    def __init__(self, control_points: Sequence[Vector],
                 precision: Optional[float] = None):
        control_points = tuple(vect(*p) for p in control_points)
        inner = [v for p in control_points[1:-1] for v in p]
        super().__init__(control_points[0], control_points[-1], precision,
                         scale_values=inner)
        self.control_points = control_points
        if same_vector(self.first_point, self.last_point, self.precision):
            raise InvalidSegmentError(
                'a Bézier segment cannot start and end at {}'.format(
                    vstr(self.first_point)))

    @classmethod
    def from_control_points(cls, points: Sequence[Vector],
                            precision: Optional[float] = None) -> 'BezierCurve':
        raise NotImplementedError

    @property
    def degree(self) -> int:
        return len(self.control_points) - 1

    @cached_property
    def polynomial_coefficients(self) -> Tuple[List[float], List[float]]:
        """``(x, y)`` coefficient lists, ascending powers of t"""
        return (_power_basis([p[0] for p in self.control_points]),
                _power_basis([p[1] for p in self.control_points]))

    def param_point(self, t: float) -> Vector:
        if t == 0.0:
            return self.first_point
        if t == 1.0:
            return self.last_point
        return de_casteljau(self.control_points, t)[-1][0]

    def gradient_at(self, t: float) -> Vector:
        xs, ys = self.polynomial_coefficients
        return (polyval(polyder(xs), t), polyval(polyder(ys), t))

    @cached_property
    def parameter_tolerance(self) -> float:
        """The precision expressed as a curve parameter."""
        return self.precision / self.hull_bounding_box.size

    def is_valid_parameter(self, t: float) -> bool:
        tolerance = self.parameter_tolerance
        return -tolerance <= t <= 1.0 + tolerance

    def _params_at(self, axis: int, value: float) -> List[float]:
        coefficients = list(self.polynomial_coefficients[axis])
        coefficients[0] -= value
        roots = solve_generic_polynomial(normalize_polynomial(coefficients))
        params = [min(1.0, max(0.0, t)) for t in roots if self.is_valid_parameter(t)]
        params.sort()
        return remove_duplicate_values(params, self.parameter_tolerance)

    def params_at_y(self, y: float) -> List[float]:
        return self._params_at(1, y)

    def params_at_x(self, x: float) -> List[float]:
        return self._params_at(0, x)

    def _closest_param(self, point: Vector) -> Tuple[Optional[float], float]:
        candidates = [0.0, 1.0] + self.params_at_y(point[1]) + self.params_at_x(point[0])
        best = None
        best_distance = float('inf')
        for t in candidates:
            d = dist(self.param_point(t), point)
            if d < best_distance:
                best, best_distance = t, d
        return best, best_distance

    def point_to_param(self, point: Vector) -> float:
        if same_vector(point, self.first_point, self.precision):
            return 0.0
        if same_vector(point, self.last_point, self.precision):
            return 1.0
        t, distance = self._closest_param(point)
        if distance > self.precision:
            raise ValueError('point {} is not on {!r}'.format(vstr(point), self))
        return t

    def is_on_segment(self, point: Vector) -> bool:
        if not self.bounding_box.contains(point, self.precision):
            return False
        if same_vector(point, self.first_point, self.precision) or \
           same_vector(point, self.last_point, self.precision):
            return True
        _, distance = self._closest_param(point)
        return distance <= self.precision

    def _compute_bounding_box(self) -> BoundingBox:
        points = [self.first_point, self.last_point]
        for axis in (0, 1):
            derivative = polyder(self.polynomial_coefficients[axis])
            for t in solve_generic_polynomial(normalize_polynomial(derivative)):
                if 0.0 < t < 1.0:
                    points.append(self.param_point(t))
        return points_bbox(points)

    @cached_property
    def hull_bounding_box(self) -> BoundingBox:
        return points_bbox(self.control_points)

    def reverse(self) -> 'BezierCurve':
        return self.from_control_points(list(reversed(self.control_points)),
                                        precision=self.precision)

    def is_same(self, other: Segment) -> bool:
        if type(other) is not type(self):
            return False
        precision = max(self.precision, other.precision)
        return all(same_vector(p, q, precision)
                   for p, q in zip(self.control_points, other.control_points))

    def transform(self, matrix: xform.Matrix) -> 'BezierCurve':
        return self.from_control_points([matrix.transform(p) for p in self.control_points])

    def split_at_params(self, params: Sequence[float]) -> List['BezierCurve']:
        """Split at parameter values, ignoring values too close to each other."""
        tolerance = self.parameter_tolerance
        pairs = [(t, self.param_point(t)) for t in sorted(params)
                 if tolerance < t < 1.0 - tolerance]
        kept = []
        for t, p in pairs:
            if kept and t - kept[-1][0] <= tolerance:
                continue
            kept.append((t, p))
        if not kept:
            return [self]
        return self._split_sorted(kept)

    def _split_sorted(self, params):
        pieces = []
        remaining = list(self.control_points)
        previous = 0.0
        for t, point in params:
            local = (t - previous) / (1.0 - previous)
            left, right = split_control_points(remaining, local)
            left[-1] = point
            right[0] = point
            pieces.append(self.from_control_points(left, precision=self.precision))
            remaining = right
            previous = t
        pieces.append(self.from_control_points(remaining, precision=self.precision))
        return pieces

    def __repr__(self):
        return '{}({})'.format(type(self).__name__,
                               ', '.join(vstr(p) for p in self.control_points))


class QuadraticBezier(BezierCurve):

    def __init__(self, first_point: Vector, last_point: Vector,
                 control_point: Vector, precision: Optional[float] = None):
        super().__init__((first_point, control_point, last_point), precision)

    @classmethod
    def from_control_points(cls, points, precision=None):
        first, control, last = points
        return cls(first, last, control, precision=precision)

    @property
    def control_point(self) -> Vector:
        return self.control_points[1]


class CubicBezier(BezierCurve):

    def __init__(self, first_point: Vector, last_point: Vector,
                 first_control_point: Vector, last_control_point: Vector,
                 precision: Optional[float] = None):
        super().__init__((first_point, first_control_point,
                          last_control_point, last_point), precision)

    @classmethod
    def from_control_points(cls, points, precision=None):
        first, c1, c2, last = points
        return cls(first, last, c1, c2, precision=precision)

    @property
    def first_control_point(self) -> Vector:
        return self.control_points[1]

    @property
    def last_control_point(self) -> Vector:
        return self.control_points[2]
