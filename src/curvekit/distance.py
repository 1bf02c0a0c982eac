## distances between segments

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
Distances between segments.

``distance()`` uses closed forms for pairs of lines and circular arcs
and falls back on ``generic_distance()``, a global minimization over
both curve parameters, for every other pair.

The closed forms take the smallest of the distances at the critical
pairs of points: an end point of one segment against the other
segment, and the interior points where the common normal of both
curves runs.  Intersecting segments are at distance 0.
"""

from __future__ import annotations

import math

from curvekit.arcs import Arc
from curvekit.direct import find_global_minimum
from curvekit.geom import add, dist, normalize, scale, square_dist, sub
from curvekit.intersect import find_intersections_and_overlaps
from curvekit.segment import Line, Segment

__all__ = ['distance', 'generic_distance', 'line_line_distance',
           'line_arc_distance', 'arc_arc_distance']


def _end_point_distances(segment1: Segment, segment2: Segment):
    return [segment1.distance_from(segment2.first_point),
            segment1.distance_from(segment2.last_point),
            segment2.distance_from(segment1.first_point),
            segment2.distance_from(segment1.last_point)]


def line_line_distance(line1: Line, line2: Line) -> float:
    if find_intersections_and_overlaps(line1, line2):
        return 0.0
    return min(_end_point_distances(line1, line2))


def line_arc_distance(line: Line, arc: Arc) -> float:
    if find_intersections_and_overlaps(line, arc):
        return 0.0
    candidates = _end_point_distances(line, arc)
    # circle points whose normal is the line's normal
    for side in (1.0, -1.0):
        q = add(arc.center, scale(line.normal_vector, side * arc.radius))
        if arc.is_on_segment(q):
            candidates.append(line.distance_from(q))
    return min(candidates)


def arc_arc_distance(arc1: Arc, arc2: Arc) -> float:
    if find_intersections_and_overlaps(arc1, arc2):
        return 0.0
    candidates = _end_point_distances(arc1, arc2)
    # for concentric arcs the end point distances are enough
    if dist(arc1.center, arc2.center) > max(arc1.precision, arc2.precision):
        u = normalize(sub(arc2.center, arc1.center))
        for side1 in (1.0, -1.0):
            p1 = add(arc1.center, scale(u, side1 * arc1.radius))
            if not arc1.is_on_segment(p1):
                continue
            for side2 in (1.0, -1.0):
                p2 = add(arc2.center, scale(u, side2 * arc2.radius))
                if arc2.is_on_segment(p2):
                    candidates.append(dist(p1, p2))
    return min(candidates)


def generic_distance(segment1: Segment, segment2: Segment,
                     precision: float = 1e-9) -> float:
    """Smallest distance between two segments of any kind.

    Minimizes the squared distance between ``segment1.param_point(t1)``
    and ``segment2.param_point(t2)`` over the unit square with DIRECT.
    """
    result = find_global_minimum(
        lambda t: square_dist(segment1.param_point(float(t[0])),
                              segment2.param_point(float(t[1]))),
        dimensions=2, tolerance=precision)
    return math.sqrt(max(0.0, result.f_min))


def distance(segment1: Segment, segment2: Segment,
             precision: float = 1e-9) -> float:
    """Smallest distance between two segments.

    ``precision`` is only used by the minimization fallback.
    """
    if isinstance(segment1, Line) and isinstance(segment2, Line):
        return line_line_distance(segment1, segment2)
    if isinstance(segment1, Line) and isinstance(segment2, Arc):
        return line_arc_distance(segment1, segment2)
    if isinstance(segment1, Arc) and isinstance(segment2, Line):
        return line_arc_distance(segment2, segment1)
    if isinstance(segment1, Arc) and isinstance(segment2, Arc):
        return arc_arc_distance(segment1, segment2)
    return generic_distance(segment1, segment2, precision)
