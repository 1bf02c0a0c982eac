## self-intersection detection and repair for sequences of segments

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
Self-intersections of an ordered sequence of segments.

Consecutive segments share their connecting end point, and that
contact is not a self-intersection.  For a closed sequence the last
and the first segment are consecutive too, and a closed sequence of
exactly two segments shares both of its end points between the same
pair.

``intersecting_segments()`` lazily enumerates the offending pairs.
``check_self_intersections()`` stops at the first one and raises,
``split_at_self_intersections()`` consumes them all and cuts the
segments so that every crossing falls on a segment boundary.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterator, List, Sequence, Tuple

from curvekit.errors import SelfIntersectionError
from curvekit.geom import Vector, same_vector
from curvekit.intersect import IntersectionResult, find_intersections_and_overlaps
from curvekit.segment import Segment

logger = logging.getLogger(__name__)

__all__ = ['intersecting_segments', 'split_at_self_intersections',
           'check_self_intersections']


def _is_connection(segments: Sequence[Segment], index: int, other_index: int,
                   result: IntersectionResult, precision: float,
                   closed: bool) -> bool:
    """Is the intersection only the contact of consecutive segments?

    ``index`` is always larger than ``other_index``.
    """
    if result.overlaps:
        return False
    segment = segments[index]
    other = segments[other_index]
    points = result.intersections
    n = len(segments)
    distance = index - other_index

    if len(points) == 1:
        p = points[0]
        if distance == 1 and same_vector(segment.first_point, p, precision):
            return True
        if closed and distance == n - 1 and \
           same_vector(segment.last_point, p, precision) and \
           same_vector(other.first_point, p, precision):
            return True

    if closed and n == 2 and len(points) == 2:
        first, second = points
        if (same_vector(segment.first_point, first, precision)
                and same_vector(segment.last_point, second, precision)) or \
           (same_vector(segment.first_point, second, precision)
                and same_vector(segment.last_point, first, precision)):
            return True

    return False


def intersecting_segments(segments: Sequence[Segment],
                          closed: bool = True
                          ) -> Iterator[Tuple[int, int, IntersectionResult]]:
    """Yield ``(index, other_index, result)`` for every intersecting pair.

    Pairs are visited in a fixed order, ``index > other_index``, and
    pruned by bounding box before any intersection is computed.
    """
    for index in range(len(segments)):
        segment = segments[index]
        for other_index in range(index):
            other = segments[other_index]
            if not segment.overlaps(other):
                continue
            precision = max(segment.precision, other.precision)
            result = find_intersections_and_overlaps(segment, other, precision)
            if result.count == 0:
                continue
            if _is_connection(segments, index, other_index, result,
                              precision, closed):
                continue
            yield index, other_index, result


def split_at_self_intersections(segments: Sequence[Segment],
                                closed: bool = True) -> List[Segment]:
    """Cut the segments at every self-intersection.

    Intersection points and the end points of overlaps become split
    points of both segments involved.  A closed sequence is rotated to
    start right after the first split, an open one keeps its start.
    Segments that need no cut are returned unchanged, so running the
    repair on its own output changes nothing.
    """
    split_points: Dict[int, List[Vector]] = {}
    for index, other_index, result in intersecting_segments(segments, closed):
        points = list(result.intersections)
        for overlap in result.overlaps:
            points.append(overlap.first_point)
            points.append(overlap.last_point)
        split_points.setdefault(index, []).extend(points)
        split_points.setdefault(other_index, []).extend(points)

    if not split_points:
        return list(segments)

    result: List[Segment] = []
    rotation = None
    for index, segment in enumerate(segments):
        if index not in split_points:
            result.append(segment)
            continue
        pieces = segment.split_at(split_points[index])
        if len(pieces) > 1:
            logger.debug('split segment %d %r into %d pieces', index, segment, len(pieces))
            if rotation is None:
                rotation = len(result) + 1
        result.extend(pieces)

    if rotation is None or not closed:
        return result
    return result[rotation:] + result[:rotation]


def check_self_intersections(segments: Sequence[Segment], kind: str = 'Stroke',
                             closed: bool = True) -> None:
    """Raise ``SelfIntersectionError`` for the first intersecting pair."""
    for index, other_index, result in intersecting_segments(segments, closed):
        raise SelfIntersectionError(kind, other_index, index,
                                    segments[other_index], segments[index],
                                    result.intersections, result.overlaps)
