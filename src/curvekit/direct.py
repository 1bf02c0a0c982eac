## DIRECT global minimization over the unit hyper-cube

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
Derivative-free global minimization with the DIRECT algorithm.

Jones, D.R., Perttunen, C.D. and Stuckman, B.E., 1993. Lipschitzian
optimization without the Lipschitz constant. Journal of Optimization
Theory and Applications, 79(1), pp.157-181.

The domain is the unit hyper-cube.  It is divided into hyper-rectangles
obtained by repeated trisection; a rectangle is described by how many
times each of its sides was divided, its side along dimension ``i``
being ``3**-k[i]``.  Since the longest side is always cut first, the
total number of cuts determines the diagonal, and rectangles are
grouped by that number.  Each iteration cuts the rectangles on the
lower-right convex hull of (diagonal, best value), the ones that are
large or promising or both.
"""

from __future__ import annotations

import bisect
import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Tuple

import numpy as np

logger = logging.getLogger(__name__)

__all__ = ['OptimisationResult', 'DirectOptimiser', 'find_global_minimum']


@dataclass(frozen=True)
class _Rectangle:
    divisions: Tuple[int, ...]

    @property
    def sides(self) -> np.ndarray:
        return np.power(3.0, -np.array(self.divisions, dtype=float))

    @property
    def diagonal(self) -> float:
        return float(np.sqrt(np.sum(self.sides ** 2)))

    @property
    def bucket(self) -> int:
        return sum(self.divisions)


@dataclass
class _Interval:
    center: np.ndarray
    value: float
    rectangle: _Rectangle
    diagonal: float


@dataclass
class OptimisationResult:
    f_min: float
    arg_min: np.ndarray
    tolerance: float
    iterations: int


class DirectOptimiser:
    """Minimizes ``f`` over ``[0, 1]**dimensions``.

    ``end_tolerance`` bounds the diagonal of the rectangle holding the
    best point, ``epsilon`` is the relative improvement a rectangle must
    be able to promise to be cut.
    """

    def __init__(self, f: Callable[[np.ndarray], float], dimensions: int = 2,
                 end_tolerance: float = 1e-8, max_iterations: int = 1000,
                 epsilon: float = 1e-6):
        if dimensions < 1:
            raise ValueError('at least one dimension is needed')
        self.f = f
        self.dimensions = dimensions
        self.end_tolerance = end_tolerance
        self.max_iterations = max_iterations
        self.epsilon = epsilon

        self._buckets: Dict[int, List[_Interval]] = {}
        self._diagonals: Dict[Tuple[int, ...], float] = {}

        center = np.full(dimensions, 0.5)
        first = self._interval(center, float(f(center)), (0,) * dimensions)
        self._add(first)
        self.f_min = first.value
        self.arg_min = center
        self.tolerance = first.diagonal

    def _interval(self, center, value, divisions) -> _Interval:
        rectangle = _Rectangle(tuple(divisions))
        diagonal = self._diagonals.get(rectangle.divisions)
        if diagonal is None:
            diagonal = self._diagonals[rectangle.divisions] = rectangle.diagonal
        return _Interval(center, value, rectangle, diagonal)

    def _add(self, interval: _Interval):
        bucket = self._buckets.setdefault(interval.rectangle.bucket, [])
        bisect.insort_left(bucket, interval, key=lambda i: i.value)

    def _register(self, interval: _Interval):
        self._add(interval)
        if interval.value <= self.f_min:
            self.f_min = interval.value
            self.arg_min = interval.center
            self.tolerance = interval.diagonal

    def _hull(self) -> List[_Interval]:
        """Best interval of each bucket on the lower-right convex hull,
        from the smallest diagonal to the largest."""
        hull: List[_Interval] = []
        for index in sorted(self._buckets, reverse=True):
            bucket = self._buckets[index]
            if not bucket:
                continue
            interval = bucket[0]
            if not hull:
                hull.append(interval)
                continue

            while hull and hull[-1].value >= interval.value:
                hull.pop()

            while len(hull) >= 2:
                last = hull[-1]
                second = hull[-2]
                slope = (interval.value - second.value) / \
                    ((interval.diagonal - second.diagonal) * 2)
                comparison = second.value + \
                    ((last.diagonal - second.diagonal) / 2.0) * slope
                if comparison < last.value:
                    hull.pop()
                else:
                    break

            hull.append(interval)
        return hull

    def _negligible(self, potential: float) -> bool:
        gain = self.f_min - potential
        if self.f_min == 0.0:
            return gain < 0.0
        return gain / abs(self.f_min) < self.epsilon

    def _split(self, interval: _Interval) -> Tuple[_Interval, _Interval, _Interval]:
        divisions = list(interval.rectangle.divisions)
        axis = divisions.index(min(divisions))
        divisions[axis] += 1
        offset = 3.0 ** -divisions[axis]

        left_center = interval.center.copy()
        left_center[axis] -= offset
        right_center = interval.center.copy()
        right_center[axis] += offset

        return (self._interval(left_center, float(self.f(left_center)), divisions),
                self._interval(interval.center, interval.value, divisions),
                self._interval(right_center, float(self.f(right_center)), divisions))

    def iterate(self):
        intervals = self._hull()

        # drop the smallest rectangles while they cannot improve the minimum much
        while len(intervals) >= 2:
            i1 = intervals[0]
            i2 = intervals[1]
            k = (i2.value - i1.value) / ((i2.diagonal - i1.diagonal) / 2.0)
            potential = i1.value - (k * i2.value) / 2.0
            if self._negligible(potential):
                intervals.pop(0)
            else:
                break

        for interval in intervals:
            self._buckets[interval.rectangle.bucket].pop(0)

        for interval in intervals:
            for part in self._split(interval):
                self._register(part)

    def run(self) -> OptimisationResult:
        iterations = 0
        while self.tolerance > self.end_tolerance / 2:
            self.iterate()
            iterations += 1
            if iterations > self.max_iterations:
                logger.debug('DIRECT stopped after %d iterations, tolerance %g',
                             iterations, self.tolerance)
                break
        return OptimisationResult(self.f_min, self.arg_min, self.tolerance, iterations)


def find_global_minimum(f: Callable[[np.ndarray], float], dimensions: int = 2,
                        tolerance: float = 1e-8, max_iterations: int = 1000,
                        epsilon: float = 1e-6) -> OptimisationResult:
    """Minimize ``f`` over the unit hyper-cube, see ``DirectOptimiser``."""
    return DirectOptimiser(f, dimensions, tolerance, max_iterations, epsilon).run()
