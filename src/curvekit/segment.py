## segment base class and straight line segments for curvekit

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

"""
Segments are directed, immutable planar curves running from
``first_point`` to ``last_point``.  Every segment carries a
``precision``, the distance below which two points on or near it are
considered the same.  The precision scales with the magnitude of the
segment's defining coordinates and can be overridden at construction.

``Segment`` holds the behaviour shared by all curve kinds: the
translate/rotate/scale/mirror helpers (through ``Transformable``) and
the bookkeeping of ``split_at()``.  This module also defines ``Line``;
arcs live in ``curvekit.arcs`` and Bézier curves in
``curvekit.bezier``.
"""

from __future__ import annotations

from functools import cached_property
from typing import Iterable, List, Optional, Sequence, Tuple

from curvekit import xform
from curvekit.bbox import BoundingBox, points_bbox
from curvekit.errors import InvalidSegmentError, SplitPointError
from curvekit.geom import (Vector, add, dist, dot, epsilon, normalize,
                           perpendicular, remove_duplicate_points,
                           same_vector, scale, scaled_precision, square_mag,
                           sub, vect, vstr)

__all__ = ['Transformable', 'Segment', 'Line']


class Transformable:
    """Affine-transform helpers shared by segments and strokes.

    Subclasses implement ``transform(matrix)``; every helper returns a
    new value.  Angles are in degrees.
    """

    def transform(self, matrix: xform.Matrix):
        raise NotImplementedError

    def translate(self, dx: float, dy: float = 0.0):
        return self.transform(xform.Translation((dx, dy)))

    def rotate(self, angle: float, center: Optional[Vector] = None):
        return self.transform(xform.Rotation(angle, center))

    def scale(self, factor: float, center: Optional[Vector] = None):
        return self.transform(xform.Scale(factor, center=center))

    def mirror(self, direction: Optional[Vector] = None,
               center: Optional[Vector] = None):
        """Mirror about the axis along ``direction`` through ``center``.

        Without a direction the value is reflected through ``center``
        (the origin by default).
        """
        if direction is None:
            return self.transform(xform.PointReflection(center or (0.0, 0.0)))
        return self.transform(xform.Mirror(direction, center))


class Segment(Transformable):
    """Common base of all curve kinds."""

    base_precision = epsilon

    def __init__(self, first_point: Vector, last_point: Vector,
                 precision: Optional[float] = None,
                 scale_values: Iterable[float] = ()):
        self._first_point = vect(*first_point)
        self._last_point = vect(*last_point)
        if precision is None:
            precision = scaled_precision(
                (*self._first_point, *self._last_point, *scale_values),
                self.base_precision)
        self._precision = float(precision)

    @property
    def first_point(self) -> Vector:
        return self._first_point

    @property
    def last_point(self) -> Vector:
        return self._last_point

    @property
    def precision(self) -> float:
        return self._precision

    @cached_property
    def bounding_box(self) -> BoundingBox:
        return self._compute_bounding_box()

    def _compute_bounding_box(self) -> BoundingBox:
        raise NotImplementedError

    @property
    def mid_point(self) -> Vector:
        return self.param_point(0.5)

    @property
    def tangent_at_first_point(self) -> Vector:
        return self.tangent_at(0.0)

    @property
    def tangent_at_last_point(self) -> Vector:
        return self.tangent_at(1.0)

    def tangent_at(self, t: float) -> Vector:
        return normalize(self.gradient_at(t))

    def normal_at(self, t: float) -> Vector:
        return perpendicular(self.tangent_at(t))

    def param_point(self, t: float) -> Vector:
        raise NotImplementedError

    def gradient_at(self, t: float) -> Vector:
        raise NotImplementedError

    def point_to_param(self, point: Vector) -> float:
        raise NotImplementedError

    def is_on_segment(self, point: Vector) -> bool:
        raise NotImplementedError

    def params_at_y(self, y: float) -> List[float]:
        raise NotImplementedError

    def params_at_x(self, x: float) -> List[float]:
        raise NotImplementedError

    def reverse(self) -> 'Segment':
        raise NotImplementedError

    def is_same(self, other: 'Segment') -> bool:
        raise NotImplementedError

    def overlaps(self, other: 'Segment') -> bool:
        """bounding-box overlap test"""
        precision = max(self.precision, other.precision)
        return self.bounding_box.overlaps(other.bounding_box, precision)

    ## splitting
    ## ---------

    def _split_params(self, points: Iterable[Vector]) -> List[Tuple[float, Vector]]:
        """Validate split points and pair them with their parameters.

        Points near an endpoint or near an earlier point are dropped; the
        result is sorted along the segment.
        """
        pending = []
        for p in points:
            p = vect(*p)
            if not self.is_on_segment(p):
                raise SplitPointError(self, p)
            if same_vector(p, self.first_point, self.precision) or \
               same_vector(p, self.last_point, self.precision):
                continue
            pending.append(p)
        pending = remove_duplicate_points(pending, self.precision)
        params = sorted(((self.point_to_param(p), p) for p in pending),
                        key=lambda item: item[0])
        return params

    def split_at(self, points: Iterable[Vector]) -> List['Segment']:
        """Split at ``points``, returning the pieces in order.

        Every point must lie on the segment; points within precision of
        an endpoint are ignored, so no zero-length piece is produced.
        Split points become the exact endpoints of the pieces.
        """
        params = self._split_params(points)
        if not params:
            return [self]
        return self._split_sorted(params)

    def _split_sorted(self, params: Sequence[Tuple[float, Vector]]) -> List['Segment']:
        raise NotImplementedError

    def _chain(self, params: Sequence[Tuple[float, Vector]]) -> List[Vector]:
        return [self.first_point] + [p for _, p in params] + [self.last_point]

    def __repr__(self):
        return '{}({}, {})'.format(type(self).__name__,
                                   vstr(self.first_point), vstr(self.last_point))


class Line(Segment):
    """Straight segment, parameterized over ``0 <= t <= 1``."""

    def __init__(self, first_point: Vector, last_point: Vector,
                 precision: Optional[float] = None):
        super().__init__(first_point, last_point, precision)
        if same_vector(self.first_point, self.last_point, self.precision):
            raise InvalidSegmentError(
                'zero-length line at {}'.format(vstr(self.first_point)))

    @property
    def V(self) -> Vector:
        return sub(self.last_point, self.first_point)

    @property
    def square_length(self) -> float:
        return square_mag(self.V)

    @property
    def length(self) -> float:
        return dist(self.first_point, self.last_point)

    @property
    def direction(self) -> Vector:
        return normalize(self.V)

    @property
    def normal_vector(self) -> Vector:
        return perpendicular(self.direction)

    @property
    def slope(self) -> float:
        vx, vy = self.V
        if vx == 0.0:
            return float('inf')
        return vy / vx

    @property
    def y_intercept(self) -> float:
        return self.first_point[1] - self.slope * self.first_point[0]

    def _compute_bounding_box(self) -> BoundingBox:
        return points_bbox([self.first_point, self.last_point])

    def param_point(self, t: float) -> Vector:
        if t == 0.0:
            return self.first_point
        if t == 1.0:
            return self.last_point
        return add(self.first_point, scale(self.V, t))

    def gradient_at(self, t: float) -> Vector:
        return self.V

    def is_valid_parameter(self, t: float) -> bool:
        tolerance = self.precision / self.length
        return -tolerance <= t <= 1.0 + tolerance

    def _project(self, point: Vector) -> float:
        return dot(sub(point, self.first_point), self.V) / self.square_length

    def point_to_param(self, point: Vector) -> float:
        if not self.is_on_segment(point):
            raise ValueError('point {} is not on {!r}'.format(vstr(point), self))
        return min(1.0, max(0.0, self._project(point)))

    def is_on_segment(self, point: Vector) -> bool:
        if same_vector(point, self.first_point, self.precision) or \
           same_vector(point, self.last_point, self.precision):
            return True
        t = self._project(point)
        if not self.is_valid_parameter(t):
            return False
        foot = add(self.first_point, scale(self.V, t))
        return dist(foot, point) <= self.precision

    def distance_from(self, point: Vector) -> float:
        t = min(1.0, max(0.0, self._project(point)))
        return dist(self.param_point(t), point)

    def _params_at(self, axis: int, value: float) -> List[float]:
        delta = self.V[axis]
        if abs(delta) <= self.precision:
            return []
        t = (value - self.first_point[axis]) / delta
        if not self.is_valid_parameter(t):
            return []
        return [min(1.0, max(0.0, t))]

    def params_at_y(self, y: float) -> List[float]:
        return self._params_at(1, y)

    def params_at_x(self, x: float) -> List[float]:
        return self._params_at(0, x)

    def reverse(self) -> 'Line':
        return Line(self.last_point, self.first_point, precision=self.precision)

    def is_same(self, other: Segment) -> bool:
        if not isinstance(other, Line):
            return False
        precision = max(self.precision, other.precision)
        return (same_vector(self.first_point, other.first_point, precision)
                and same_vector(self.last_point, other.last_point, precision))

    def transform(self, matrix: xform.Matrix) -> 'Line':
        return Line(matrix.transform(self.first_point),
                    matrix.transform(self.last_point))

    def _split_sorted(self, params):
        chain = self._chain(params)
        return [Line(a, b, precision=self.precision)
                for a, b in zip(chain[:-1], chain[1:])]
