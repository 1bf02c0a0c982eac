## circular and elliptical arc segments for curvekit

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
Arcs of circles and ellipses.

Both kinds are parameterized by the fraction of their sweep:
``t = 0`` is the first point, ``t = 1`` the last, and the angle at ``t``
is ``first_angle + t * angular_length`` (minus for clockwise arcs).
For an ``EllipseArc`` the angle is the eccentric anomaly in the
ellipse's own frame, where the curve is ``(a*cos(theta), b*sin(theta))``
with ``a`` the major and ``b`` the minor radius.  ``point_at_angle()``
gives direct access to the angle parameterization.

Each arc also exposes the implicit form of its underlying conic as
``ConicCoefficients``, the six coefficients of
``x2*x**2 + xy*x*y + y2*y**2 + x*x + y*y + c = 0``.
"""

from __future__ import annotations

import math
from functools import cached_property
from typing import List, NamedTuple, Optional, Tuple

import numpy as np

from curvekit import xform
from curvekit.bbox import BoundingBox, points_bbox
from curvekit.errors import InvalidSegmentError
from curvekit.geom import (Vector, angular_distance, cross, dist,
                           ellipse_epsilon, remove_duplicate_values,
                           same_vector, scaled_precision, sub, unit_angle,
                           vstr)
from curvekit.segment import Segment

__all__ = ['ConicCoefficients', 'conic_coefficients', 'Arc', 'EllipseArc',
           'three_points_arc']


class ConicCoefficients(NamedTuple):
    x2: float
    xy: float
    y2: float
    x: float
    y: float
    c: float

    def evaluate(self, p: Vector) -> float:
        px, py = p
        return (self.x2 * px * px + self.xy * px * py + self.y2 * py * py
                + self.x * px + self.y * py + self.c)

    def gradient(self, p: Vector) -> Vector:
        px, py = p
        return (2 * self.x2 * px + self.xy * py + self.x,
                self.xy * px + 2 * self.y2 * py + self.y)


def conic_coefficients(center: Vector, a: float, b: float,
                       tilt: float) -> ConicCoefficients:
    """Implicit form of the ellipse with radii ``a``, ``b`` tilted by ``tilt``.

    The equation is normalized so that the constant term is
    ``(frame-local radius)**2 - 1``; a circle of radius ``r`` gets
    ``1/r**2`` on both square terms.
    """
    x0, y0 = center
    A = math.cos(-tilt)
    B = math.sin(-tilt)
    a2 = a * a
    b2 = b * b
    return ConicCoefficients(
        x2=A * A / a2 + B * B / b2,
        xy=2 * A * B / b2 - 2 * A * B / a2,
        y2=A * A / b2 + B * B / a2,
        x=(2 * A * B * y0 - 2 * x0 * A * A) / a2
        + (-2 * x0 * B * B - 2 * A * B * y0) / b2,
        y=(2 * x0 * A * B - 2 * B * B * y0) / a2
        + (-2 * x0 * A * B - 2 * A * A * y0) / b2,
        c=(x0 * x0 * A * A - 2 * x0 * A * B * y0 + B * B * y0 * y0) / a2
        + (x0 * x0 * B * B + 2 * x0 * A * B * y0 + A * A * y0 * y0) / b2
        - 1,
    )


def _sinusoid_angles(A: float, B: float, value: float,
                     tolerance: float) -> List[float]:
    """Angles where ``A*cos(theta) + B*sin(theta) == value``."""
    amplitude = math.hypot(A, B)
    if amplitude == 0.0:
        return []
    s = value / amplitude
    if abs(s) > 1.0 + tolerance / amplitude:
        return []
    s = max(-1.0, min(1.0, s))
    phase = math.atan2(A, B)
    base = math.asin(s)
    angles = [unit_angle(base - phase), unit_angle(math.pi - base - phase)]
    return remove_duplicate_values(angles, tolerance / amplitude)


class _ConicArc(Segment):
    """Shared machinery of circular and elliptical arcs.

    Subclasses provide ``major_radius``, ``minor_radius`` and
    ``tilt_angle`` and the ``_on_curve()`` test.
    """

    center: Vector
    clockwise: bool

    def _setup_frame(self):
        self._cos_tilt = math.cos(self.tilt_angle)
        self._sin_tilt = math.sin(self.tilt_angle)

    def _to_local(self, p: Vector) -> Vector:
        dx = p[0] - self.center[0]
        dy = p[1] - self.center[1]
        return (self._cos_tilt * dx + self._sin_tilt * dy,
                -self._sin_tilt * dx + self._cos_tilt * dy)

    def _to_world(self, q: Vector) -> Vector:
        return (self.center[0] + self._cos_tilt * q[0] - self._sin_tilt * q[1],
                self.center[1] + self._sin_tilt * q[0] + self._cos_tilt * q[1])

    def point_theta(self, p: Vector) -> float:
        """eccentric anomaly of ``p`` in ``[0, 2*pi)``"""
        lx, ly = self._to_local(p)
        return unit_angle(math.atan2(ly / self.minor_radius,
                                     lx / self.major_radius))

    def point_at_angle(self, theta: float) -> Vector:
        return self._to_world((self.major_radius * math.cos(theta),
                               self.minor_radius * math.sin(theta)))

    @cached_property
    def first_angle(self) -> float:
        return self.point_theta(self.first_point)

    @cached_property
    def last_angle(self) -> float:
        return self.point_theta(self.last_point)

    @property
    def angle_precision(self) -> float:
        return self.precision / self.minor_radius

    @cached_property
    def angular_length(self) -> float:
        return angular_distance(self.first_angle, self.last_angle,
                                self.clockwise, self.angle_precision)

    @cached_property
    def coefficients(self) -> ConicCoefficients:
        return conic_coefficients(self.center, self.major_radius,
                                  self.minor_radius, self.tilt_angle)

    def param_to_angle(self, t: float) -> float:
        sweep = t * self.angular_length
        if self.clockwise:
            sweep = -sweep
        return self.first_angle + sweep

    def angle_to_param(self, theta: float) -> float:
        return angular_distance(self.first_angle, theta, self.clockwise,
                                self.angle_precision) / self.angular_length

    def is_valid_parameter(self, t: float) -> bool:
        tolerance = self.angle_precision / self.angular_length
        return -tolerance <= t <= 1.0 + tolerance

    def param_point(self, t: float) -> Vector:
        if t == 0.0:
            return self.first_point
        if t == 1.0:
            return self.last_point
        return self.point_at_angle(self.param_to_angle(t))

    def gradient_at(self, t: float) -> Vector:
        theta = self.param_to_angle(t)
        rate = -self.angular_length if self.clockwise else self.angular_length
        dx = -self.major_radius * math.sin(theta) * rate
        dy = self.minor_radius * math.cos(theta) * rate
        return (self._cos_tilt * dx - self._sin_tilt * dy,
                self._sin_tilt * dx + self._cos_tilt * dy)

    def _on_curve(self, point: Vector) -> bool:
        raise NotImplementedError

    def is_on_segment(self, point: Vector) -> bool:
        if same_vector(point, self.first_point, self.precision) or \
           same_vector(point, self.last_point, self.precision):
            return True
        if not self._on_curve(point):
            return False
        return self.is_valid_parameter(self.angle_to_param(self.point_theta(point)))

    def point_to_param(self, point: Vector) -> float:
        if same_vector(point, self.first_point, self.precision):
            return 0.0
        if same_vector(point, self.last_point, self.precision):
            return 1.0
        if not self.is_on_segment(point):
            raise ValueError('point {} is not on {!r}'.format(vstr(point), self))
        return min(1.0, max(0.0, self.angle_to_param(self.point_theta(point))))

    ## a coordinate along an axis is center + A*cos(theta) + B*sin(theta)
    def _axis_sinusoid(self, axis: int) -> Tuple[float, float]:
        a = self.major_radius
        b = self.minor_radius
        if axis == 0:
            return a * self._cos_tilt, -b * self._sin_tilt
        return a * self._sin_tilt, b * self._cos_tilt

    def _params_at(self, axis: int, value: float) -> List[float]:
        A, B = self._axis_sinusoid(axis)
        angles = _sinusoid_angles(A, B, value - self.center[axis], self.precision)
        params = []
        for theta in angles:
            t = self.angle_to_param(theta)
            if self.is_valid_parameter(t):
                params.append(min(1.0, max(0.0, t)))
        params.sort()
        return remove_duplicate_values(params, self.angle_precision)

    def params_at_y(self, y: float) -> List[float]:
        return self._params_at(1, y)

    def params_at_x(self, x: float) -> List[float]:
        return self._params_at(0, x)

    def _compute_bounding_box(self) -> BoundingBox:
        points = [self.first_point, self.last_point]
        for axis in (0, 1):
            A, B = self._axis_sinusoid(axis)
            extremum = math.atan2(B, A)
            for theta in (extremum, extremum + math.pi):
                t = self.angle_to_param(unit_angle(theta))
                if 0.0 < t < 1.0:
                    points.append(self.point_at_angle(theta))
        return points_bbox(points)

    def _transform_conic(self, matrix: xform.Matrix) -> '_ConicArc':
        """Image of the arc under a general affine map.

        The linear part applied to the ellipse's axes gives a new
        ellipse whose radii and tilt are read off a singular value
        decomposition.
        """
        first = matrix.transform(self.first_point)
        last = matrix.transform(self.last_point)
        center = matrix.transform(self.center)
        clockwise = self.clockwise != (not matrix.keeps_orientation())

        a, b, c, d = matrix.linear()
        linear = np.array([[a, b], [c, d]])
        frame = np.array([[self._cos_tilt, -self._sin_tilt],
                          [self._sin_tilt, self._cos_tilt]])
        axes = linear @ frame @ np.diag([self.major_radius, self.minor_radius])
        u, s, _ = np.linalg.svd(axes)
        major = float(s[0])
        minor = float(s[1])
        tilt = math.atan2(u[1, 0], u[0, 0])

        precision = scaled_precision((*first, *last, *center, major),
                                     Arc.base_precision)
        if abs(major - minor) <= precision:
            return Arc(first, last, center, clockwise, ignore_checks=True)
        return EllipseArc(first, last, center, major, minor, tilt,
                          clockwise, ignore_checks=True)


class Arc(_ConicArc):
    """Circular arc from ``first_point`` to ``last_point`` around ``center``.

    A full circle cannot be a single arc; build it from two or more.
    """

    def __init__(self, first_point: Vector, last_point: Vector,
                 center: Vector, clockwise: bool = False,
                 ignore_checks: bool = False,
                 precision: Optional[float] = None):
        center = (float(center[0]), float(center[1]))
        radius = dist(first_point, center)
        super().__init__(first_point, last_point, precision,
                         scale_values=(*center, radius))
        self.center = center
        self.clockwise = bool(clockwise)
        self.radius = radius
        self._setup_frame()

        if same_vector(self.first_point, self.last_point, self.precision):
            raise InvalidSegmentError('an arc cannot be a full circle')
        if not ignore_checks:
            if self.radius <= self.precision:
                raise InvalidSegmentError('degenerate arc radius')
            if abs(dist(self.last_point, self.center) - self.radius) > self.precision:
                raise InvalidSegmentError(
                    'arc end points {} and {} are not at the same distance of {}'.format(
                        vstr(self.first_point), vstr(self.last_point), vstr(self.center)))

    @property
    def major_radius(self) -> float:
        return self.radius

    @property
    def minor_radius(self) -> float:
        return self.radius

    @property
    def tilt_angle(self) -> float:
        return 0.0

    @property
    def length(self) -> float:
        return self.radius * self.angular_length

    def _on_curve(self, point: Vector) -> bool:
        return abs(dist(point, self.center) - self.radius) <= self.precision

    def distance_from(self, point: Vector) -> float:
        theta = unit_angle(math.atan2(point[1] - self.center[1],
                                      point[0] - self.center[0]))
        if self.is_valid_parameter(self.angle_to_param(theta)):
            return abs(dist(point, self.center) - self.radius)
        return min(dist(point, self.first_point), dist(point, self.last_point))

    def reverse(self) -> 'Arc':
        return Arc(self.last_point, self.first_point, self.center,
                   not self.clockwise, ignore_checks=True,
                   precision=self.precision)

    def is_same(self, other: Segment) -> bool:
        if not isinstance(other, Arc):
            return False
        precision = max(self.precision, other.precision)
        return (self.clockwise == other.clockwise
                and same_vector(self.center, other.center, precision)
                and same_vector(self.first_point, other.first_point, precision)
                and same_vector(self.last_point, other.last_point, precision))

    def transform(self, matrix: xform.Matrix) -> _ConicArc:
        if matrix.is_similarity():
            return Arc(matrix.transform(self.first_point),
                       matrix.transform(self.last_point),
                       matrix.transform(self.center),
                       self.clockwise != (not matrix.keeps_orientation()),
                       ignore_checks=True)
        return self._transform_conic(matrix)

    def _split_sorted(self, params):
        chain = self._chain(params)
        return [Arc(a, b, self.center, self.clockwise, ignore_checks=True,
                    precision=self.precision)
                for a, b in zip(chain[:-1], chain[1:])]

    def __repr__(self):
        return 'Arc({}, {}, center={}, clockwise={})'.format(
            vstr(self.first_point), vstr(self.last_point), vstr(self.center),
            self.clockwise)


class EllipseArc(_ConicArc):
    """Arc of an ellipse.

    ``major_radius`` and ``minor_radius`` may be passed in either
    order; if the second is larger they are swapped and the tilt is
    turned by a quarter turn.  ``tilt_angle`` is the direction of the
    major axis in radians, normalized to ``[0, pi)``.  Equal radii are
    refused, use an ``Arc``.
    """

    base_precision = ellipse_epsilon

    def __init__(self, first_point: Vector, last_point: Vector,
                 center: Vector, major_radius: float, minor_radius: float,
                 tilt_angle: float = 0.0, clockwise: bool = False,
                 ignore_checks: bool = False,
                 precision: Optional[float] = None):
        center = (float(center[0]), float(center[1]))
        major_radius = float(major_radius)
        minor_radius = float(minor_radius)
        if minor_radius > major_radius:
            major_radius, minor_radius = minor_radius, major_radius
            tilt_angle = tilt_angle + math.pi / 2
        super().__init__(first_point, last_point, precision,
                         scale_values=(*center, major_radius))
        self.center = center
        self.clockwise = bool(clockwise)
        self.major_radius = major_radius
        self.minor_radius = minor_radius
        self.tilt_angle = math.fmod(unit_angle(tilt_angle), math.pi)
        self._setup_frame()

        if same_vector(self.first_point, self.last_point, self.precision):
            raise InvalidSegmentError('an elliptic arc cannot be a full ellipse')
        if self.minor_radius <= self.precision:
            raise InvalidSegmentError('degenerate ellipse radius')
        if not ignore_checks:
            if abs(self.major_radius - self.minor_radius) <= self.precision:
                raise InvalidSegmentError(
                    'ellipse radii are equal, create an Arc instead')
            for p in (self.first_point, self.last_point):
                if not self._on_curve(p):
                    raise InvalidSegmentError(
                        'point {} is not on the ellipse'.format(vstr(p)))

    @cached_property
    def focal_points(self) -> Tuple[Vector, Vector]:
        c = math.sqrt(max(0.0, self.major_radius ** 2 - self.minor_radius ** 2))
        dx = c * self._cos_tilt
        dy = c * self._sin_tilt
        return ((self.center[0] + dx, self.center[1] + dy),
                (self.center[0] - dx, self.center[1] - dy))

    def _on_curve(self, point: Vector) -> bool:
        f1, f2 = self.focal_points
        return abs(dist(point, f1) + dist(point, f2)
                   - 2 * self.major_radius) <= self.precision

    def reverse(self) -> 'EllipseArc':
        return EllipseArc(self.last_point, self.first_point, self.center,
                          self.major_radius, self.minor_radius,
                          self.tilt_angle, not self.clockwise,
                          ignore_checks=True, precision=self.precision)

    def is_same(self, other: Segment) -> bool:
        if not isinstance(other, EllipseArc):
            return False
        precision = max(self.precision, other.precision)
        return (self.clockwise == other.clockwise
                and same_vector(self.center, other.center, precision)
                and abs(self.major_radius - other.major_radius) <= precision
                and abs(self.minor_radius - other.minor_radius) <= precision
                and abs(math.sin(self.tilt_angle - other.tilt_angle))
                * self.major_radius <= precision
                and same_vector(self.first_point, other.first_point, precision)
                and same_vector(self.last_point, other.last_point, precision))

    def transform(self, matrix: xform.Matrix) -> _ConicArc:
        return self._transform_conic(matrix)

    def _split_sorted(self, params):
        chain = self._chain(params)
        return [EllipseArc(a, b, self.center, self.major_radius,
                           self.minor_radius, self.tilt_angle, self.clockwise,
                           ignore_checks=True, precision=self.precision)
                for a, b in zip(chain[:-1], chain[1:])]

    def __repr__(self):
        return ('EllipseArc({}, {}, center={}, radii=({:.6g}, {:.6g}), '
                'tilt={:.6g}, clockwise={})').format(
                    vstr(self.first_point), vstr(self.last_point),
                    vstr(self.center), self.major_radius, self.minor_radius,
                    self.tilt_angle, self.clockwise)


def three_points_arc(first_point: Vector, mid_point: Vector,
                     last_point: Vector) -> Arc:
    """Circular arc from ``first_point`` through ``mid_point`` to ``last_point``."""
    ax, ay = first_point
    bx, by = mid_point
    cx, cy = last_point
    d = 2 * (ax * (by - cy) + bx * (cy - ay) + cx * (ay - by))
    orientation = cross(sub(mid_point, first_point), sub(last_point, mid_point))
    if abs(d) <= scaled_precision((ax, ay, bx, by, cx, cy)):
        raise InvalidSegmentError('cannot build an arc through collinear points')
    a2 = ax * ax + ay * ay
    b2 = bx * bx + by * by
    c2 = cx * cx + cy * cy
    center = ((a2 * (by - cy) + b2 * (cy - ay) + c2 * (ay - by)) / d,
              (a2 * (cx - bx) + b2 * (ax - cx) + c2 * (bx - ax)) / d)
    return Arc(first_point, last_point, center, clockwise=orientation < 0)
