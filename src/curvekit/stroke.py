## loops and strands: connected sequences of segments

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
Strokes are connected, non self-intersecting sequences of segments.
A ``Strand`` is open, a ``Loop`` closes back on its first point.
"""

from __future__ import annotations

from functools import cached_property
from typing import Iterable, Iterator, Sequence, Tuple

from curvekit import xform
from curvekit.bbox import BoundingBox
from curvekit.errors import InvalidStrokeError
from curvekit.geom import Vector, same_vector
from curvekit.intersect import IntersectionResult, find_intersections_and_overlaps
from curvekit.segment import Segment, Transformable
from curvekit.selfintersect import (check_self_intersections,
                                    split_at_self_intersections)

__all__ = ['Stroke', 'Strand', 'Loop']


class Stroke(Transformable):
    """Base of loops and strands.

    Construction checks that the sequence is non-empty, connected and
    free of self-intersections; ``ignore_checks`` skips this for
    sequences known to be valid.
    """

    kind = 'Stroke'
    closed = False

    def __init__(self, segments: Iterable[Segment], ignore_checks: bool = False):
        self.segments: Tuple[Segment, ...] = tuple(segments)
        if not ignore_checks:
            self._check()

    def _check(self):
        if not self.segments:
            raise InvalidStrokeError('{} must have at least one segment'.format(self.kind))
        for segment, following in zip(self.segments[:-1], self.segments[1:]):
            precision = max(segment.precision, following.precision)
            if not same_vector(segment.last_point, following.first_point, precision):
                raise InvalidStrokeError(
                    '{} segments must be connected, but {!r} and {!r} are not'.format(
                        self.kind, segment, following))
        check_self_intersections(self.segments, self.kind, self.closed)

    def __len__(self):
        return len(self.segments)

    def __iter__(self) -> Iterator[Segment]:
        return iter(self.segments)

    def __repr__(self):
        return '{}({})'.format(type(self).__name__,
                               ', '.join(repr(s) for s in self.segments))

    @property
    def first_point(self) -> Vector:
        return self.segments[0].first_point

    @property
    def last_point(self) -> Vector:
        return self.segments[-1].last_point

    @cached_property
    def bounding_box(self) -> BoundingBox:
        box = self.segments[0].bounding_box
        for segment in self.segments[1:]:
            box = box.merge(segment.bounding_box)
        return box

    def _rebuild(self, segments: Sequence[Segment]) -> 'Stroke':
        return type(self)(segments, ignore_checks=True)

    def reverse(self) -> 'Stroke':
        return self._rebuild([s.reverse() for s in reversed(self.segments)])

    def transform(self, matrix: xform.Matrix) -> 'Stroke':
        return self._rebuild([s.transform(matrix) for s in self.segments])

    def is_on_stroke(self, point: Vector) -> bool:
        return any(s.is_on_segment(point) for s in self.segments)

    def intersections(self, other: 'Stroke') -> IntersectionResult:
        """All intersections and overlaps with the segments of another stroke."""
        points = []
        overlaps = []
        for segment in self.segments:
            for other_segment in other.segments:
                result = find_intersections_and_overlaps(segment, other_segment)
                for p in result.intersections:
                    precision = max(segment.precision, other_segment.precision)
                    if not any(same_vector(p, q, precision) for q in points):
                        points.append(p)
                overlaps.extend(result.overlaps)
        return IntersectionResult(points, overlaps)

    def intersects(self, other: 'Stroke') -> bool:
        if not self.bounding_box.overlaps(other.bounding_box):
            return False
        return self.intersections(other).count > 0

    def split_at_self_intersections(self) -> 'Stroke':
        return self._rebuild(split_at_self_intersections(self.segments, self.closed))


class Strand(Stroke):
    """Open stroke."""

    kind = 'Strand'


class Loop(Stroke):
    """Closed stroke: the last segment ends where the first one starts."""

    kind = 'Loop'
    closed = True

    def _check(self):
        super()._check()
        first = self.segments[0]
        last = self.segments[-1]
        if not same_vector(first.first_point, last.last_point,
                           max(first.precision, last.precision)):
            raise InvalidStrokeError('{} must be closed'.format(self.kind))

    def contains(self, point: Vector) -> bool:
        """Is ``point`` strictly inside the loop?

        Counts the crossings of a horizontal ray going right from the
        point.  A segment end point lying on the ray counts as above
        it, so each vertex is counted once where the loop passes
        through the ray and zero or two times where it only touches it.
        Points on the loop itself are not inside.
        """
        if not self.bounding_box.contains(point):
            return False
        if self.is_on_stroke(point):
            return False

        px, py = point
        crossings = 0
        for segment in self.segments:
            for t in segment.params_at_y(py):
                hit = segment.param_point(t)
                if hit[0] <= px:
                    continue
                crossings += _ray_crossing(segment, t, py)
        return crossings % 2 == 1


def _ray_crossing(segment: Segment, t: float, y: float) -> int:
    precision = segment.precision
    if same_vector(segment.param_point(t), segment.first_point, precision) or \
       same_vector(segment.param_point(t), segment.last_point, precision):
        return 1 if _leaves_below(segment, t < 0.5, y) else 0
    if abs(segment.gradient_at(t)[1]) <= precision:
        # horizontal tangency: the segment touches the ray
        return 0
    return 1


def _leaves_below(segment: Segment, at_first: bool, y: float) -> bool:
    """Does the segment move below ``y`` from the end point it shares with the ray?"""
    gradient = segment.gradient_at(0.0 if at_first else 1.0)
    dy = gradient[1] if at_first else -gradient[1]
    if abs(dy) > segment.precision:
        return dy < 0
    return segment.mid_point[1] < y
