## vector, angle and tolerance operations for curvekit

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
The curvekit.geom module provides the scalar and vector foundations of
the kernel, plus the tolerance-aware comparisons shared by the
intersection and self-intersection code.

constants
=========

``epsilon`` is the base precision of lines, arcs and Bézier curves,
``ellipse_epsilon`` the base precision of elliptical arcs.  A segment
scales its base precision by the magnitude of its coordinates, see
``scaled_precision()``.  ``pi2`` is 2*pi.

vectors
=======

Vectors are immutable tuples of two finite floats, ``(x, y)``.  Every
operation returns a new tuple.  ``vect()`` builds a vector and refuses
non-finite coordinates.

angles
======

Angles are radians unless a function says otherwise.  ``unit_angle()``
folds an angle into ``[0, 2*pi)`` and ``angular_distance()`` measures a
sweep in a given direction.

deduplication
=============

``remove_duplicate_points()`` and ``remove_duplicate_values()`` keep the
first element of every cluster of elements closer than a precision,
preserving input order.
"""

from __future__ import annotations

import math
from typing import Iterable, List, Tuple

Vector = Tuple[float, float]

epsilon = 1e-9
ellipse_epsilon = 1e-6
pi2 = 2.0 * math.pi

__all__ = [
    'Vector', 'epsilon', 'ellipse_epsilon', 'pi2',
    'isgoodnum', 'close', 'vect', 'add', 'sub', 'scale', 'dot', 'cross',
    'square_mag', 'mag', 'square_dist', 'dist', 'normalize', 'perpendicular',
    'perpendicular_cw', 'midpoint', 'polar_to_cartesian',
    'cartesian_to_polar', 'vstr', 'same_vector', 'parallel', 'unit_angle',
    'angular_distance', 'scaled_precision', 'remove_duplicate_points',
    'remove_duplicate_values',
]


## scalar operations
## -----------------

def isgoodnum(n) -> bool:
    return isinstance(n, (int, float)) and not isinstance(n, bool) \
        and math.isfinite(n)


def close(a: float, b: float, precision: float = epsilon) -> bool:
    """ are two scalars the same within precision
    """
    return abs(a - b) <= precision


## operations on vectors
## ---------------------

def vect(x, y) -> Vector:
    """Return the vector ``(x, y)``, refusing non-finite coordinates."""
    x = float(x)
    y = float(y)
    if not (math.isfinite(x) and math.isfinite(y)):
        raise ValueError(f'non-finite vector coordinates: {x}, {y}')
    return (x, y)


def add(a: Vector, b: Vector) -> Vector:
    return (a[0] + b[0], a[1] + b[1])


def sub(a: Vector, b: Vector) -> Vector:
    return (a[0] - b[0], a[1] - b[1])


def scale(a: Vector, c: float) -> Vector:
    return (a[0] * c, a[1] * c)


def dot(a: Vector, b: Vector) -> float:
    return a[0] * b[0] + a[1] * b[1]


def cross(a: Vector, b: Vector) -> float:
    """z component of the 3D cross product of two planar vectors"""
    return a[0] * b[1] - a[1] * b[0]


def square_mag(a: Vector) -> float:
    return a[0] * a[0] + a[1] * a[1]


def mag(a: Vector) -> float:
    return math.hypot(a[0], a[1])


def square_dist(a: Vector, b: Vector) -> float:
    return square_mag(sub(a, b))


def dist(a: Vector, b: Vector) -> float:  # distance between two points
    return math.hypot(a[0] - b[0], a[1] - b[1])


def normalize(a: Vector) -> Vector:
    m = mag(a)
    if m == 0.0:
        raise ValueError('cannot normalize a zero-length vector')
    return (a[0] / m, a[1] / m)


def perpendicular(a: Vector) -> Vector:
    """counter-clockwise perpendicular"""
    return (-a[1], a[0])


def perpendicular_cw(a: Vector) -> Vector:
    return (a[1], -a[0])


def midpoint(a: Vector, b: Vector) -> Vector:
    return ((a[0] + b[0]) / 2.0, (a[1] + b[1]) / 2.0)


def polar_to_cartesian(r: float, theta: float) -> Vector:
    return (r * math.cos(theta), r * math.sin(theta))


def cartesian_to_polar(p: Vector) -> Tuple[float, float]:
    return (mag(p), math.atan2(p[1], p[0]))


def vstr(a: Vector) -> str:
    return f'[{a[0]:.6g}, {a[1]:.6g}]'


## tolerance-aware comparisons
## ---------------------------

def same_vector(a: Vector, b: Vector, precision: float = epsilon) -> bool:
    return abs(a[0] - b[0]) <= precision and abs(a[1] - b[1]) <= precision


def parallel(v1: Vector, v2: Vector, precision: float = epsilon) -> bool:
    """Are two direction vectors parallel (or anti-parallel)?

    The sine of the angle between them is compared against ``precision``,
    which makes the test independent of the vectors' lengths.
    """
    v_cross = cross(v1, v2)
    return v_cross * v_cross < square_mag(v1) * square_mag(v2) * precision * precision


def unit_angle(angle: float) -> float:
    """Fold an angle in radians into ``[0, 2*pi)``."""
    folded = math.fmod(angle, pi2)
    if folded < 0:
        folded += pi2
    if folded >= pi2:
        folded = 0.0
    return folded


def angular_distance(angle1: float, angle2: float,
                     clockwise: bool = False,
                     precision: float = epsilon) -> float:
    """Sweep from ``angle1`` to ``angle2`` in the requested direction.

    The result lies in ``[0, 2*pi)``; a sweep within ``precision`` of a
    full turn is reported as 0.
    """
    relative = angle2 - angle1
    if clockwise:
        relative = -relative
    relative = math.fmod(relative, pi2)
    if relative < 0:
        relative += pi2
    if relative > pi2 - precision:
        return 0.0
    return relative


def scaled_precision(values: Iterable[float], base: float = epsilon) -> float:
    """Scale ``base`` by the largest magnitude found in ``values``.

    Floating point error grows with the magnitude of the coordinates, so
    segments far from the origin or with large radii get a coarser
    precision.  Magnitudes below 1 keep the base precision.
    """
    largest = 1.0
    for v in values:
        largest = max(largest, abs(v))
    return base * largest


## deduplication
## -------------

def remove_duplicate_points(points: Iterable[Vector],
                            precision: float = epsilon) -> List[Vector]:
    result: List[Vector] = []
    for p in points:
        if not any(same_vector(p, q, precision) for q in result):
            result.append(p)
    return result


def remove_duplicate_values(values: Iterable[float],
                            precision: float = epsilon) -> List[float]:
    result: List[float] = []
    for v in values:
        if not any(abs(v - w) <= precision for w in result):
            result.append(v)
    return result
