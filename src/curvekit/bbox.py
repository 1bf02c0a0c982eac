## axis-aligned bounding boxes for curvekit

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

"""Axis-aligned bounding boxes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from curvekit.geom import Vector

__all__ = ['BoundingBox', 'points_bbox']


@dataclass(frozen=True)
class BoundingBox:
    xmin: float
    ymin: float
    xmax: float
    ymax: float

    @property
    def width(self) -> float:
        return self.xmax - self.xmin

    @property
    def height(self) -> float:
        return self.ymax - self.ymin

    @property
    def size(self) -> float:
        return max(self.width, self.height)

    @property
    def center(self) -> Vector:
        return ((self.xmin + self.xmax) / 2.0, (self.ymin + self.ymax) / 2.0)

    def contains(self, p: Vector, precision: float = 0.0) -> bool:
        return (self.xmin - precision <= p[0] <= self.xmax + precision
                and self.ymin - precision <= p[1] <= self.ymax + precision)

    def overlaps(self, other: 'BoundingBox', precision: float = 0.0) -> bool:
        return not (self.xmax + precision < other.xmin
                    or other.xmax + precision < self.xmin
                    or self.ymax + precision < other.ymin
                    or other.ymax + precision < self.ymin)

    def add_point(self, p: Vector) -> 'BoundingBox':
        return BoundingBox(min(self.xmin, p[0]), min(self.ymin, p[1]),
                           max(self.xmax, p[0]), max(self.ymax, p[1]))

    def merge(self, other: 'BoundingBox') -> 'BoundingBox':
        return BoundingBox(min(self.xmin, other.xmin), min(self.ymin, other.ymin),
                           max(self.xmax, other.xmax), max(self.ymax, other.ymax))

    def grow(self, amount: float) -> 'BoundingBox':
        return BoundingBox(self.xmin - amount, self.ymin - amount,
                           self.xmax + amount, self.ymax + amount)

    def intersection(self, other: 'BoundingBox') -> Optional['BoundingBox']:
        """Common part of two boxes, ``None`` when they are disjoint."""
        if not self.overlaps(other):
            return None
        return BoundingBox(max(self.xmin, other.xmin), max(self.ymin, other.ymin),
                           min(self.xmax, other.xmax), min(self.ymax, other.ymax))


def points_bbox(points: Iterable[Vector]) -> BoundingBox:
    points = list(points)
    if not points:
        raise ValueError('cannot bound an empty point set')
    xs = [p[0] for p in points]
    ys = [p[1] for p in points]
    return BoundingBox(min(xs), min(ys), max(xs), max(ys))
