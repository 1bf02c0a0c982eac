## pairwise segment intersections for curvekit

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
Intersections between pairs of segments.

``find_intersections_and_overlaps()`` is the entry point.  It picks an
algorithm from the kinds of the two segments, runs it with the combined
precision of the pair (the larger of the two precisions), and cleans up
the result: candidate points are snapped onto nearby end points, kept
only if they lie on both segments and not on an overlap, and
deduplicated.

Overlaps are the parts where the two curves coincide.  They are
returned as sub-segments rather than as points.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import mpmath as mpm
from numpy.polynomial import polynomial as P

from curvekit import xform
from curvekit.arcs import Arc, ConicCoefficients, EllipseArc, conic_coefficients
from curvekit.bezier import (BezierCurve, CubicBezier, QuadraticBezier,
                             split_control_points)
from curvekit.bbox import points_bbox
from curvekit.geom import (Vector, add, cross, dist, dot, epsilon, midpoint,
                           parallel, remove_duplicate_points, same_vector,
                           scale, sub)
from curvekit.segment import Line, Segment
from curvekit.solvers import normalize_polynomial, solve_generic_polynomial

logger = logging.getLogger(__name__)

__all__ = ['IntersectionResult', 'find_intersections',
           'find_intersections_and_overlaps', 'line_line_params',
           'ellipse_ellipse_points']


@dataclass
class IntersectionResult:
    intersections: List[Vector] = field(default_factory=list)
    overlaps: List[Segment] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.intersections) + len(self.overlaps)

    def __bool__(self):
        return self.count > 0


## helpers
## -------

def _common_parts(s1: Segment, s2: Segment, precision: float) -> IntersectionResult:
    """Overlaps of two segments that may share an underlying curve.

    ``s1`` is cut at the end points of ``s2``; the pieces covered by
    ``s2`` are the overlaps.  Shared end points outside the overlaps are
    isolated intersections.
    """
    boundary = [p for p in (s2.first_point, s2.last_point) if s1.is_on_segment(p)]
    overlaps = [piece for piece in s1.split_at(boundary)
                if all(s2.is_on_segment(piece.param_point(t))
                       for t in (0.25, 0.5, 0.75))]
    ends = [p for p in (s1.first_point, s1.last_point, s2.first_point, s2.last_point)
            if s1.is_on_segment(p) and s2.is_on_segment(p)]
    points = [p for p in remove_duplicate_points(ends, precision)
              if not any(o.is_on_segment(p) for o in overlaps)]
    return IntersectionResult(points, overlaps)


def _may_share_curve(s1: Segment, s2: Segment) -> bool:
    """At least two end points of one segment lie on the other."""
    on = sum(1 for p in (s2.first_point, s2.last_point) if s1.is_on_segment(p))
    on += sum(1 for p in (s1.first_point, s1.last_point) if s2.is_on_segment(p))
    return on >= 2


def line_line_params(l1: Line, l2: Line,
                     precision: float) -> Optional[Tuple[float, float]]:
    """Parameters of the crossing of the two infinite lines.

    Returns ``None`` when the lines are parallel.
    """
    V1 = l1.V
    V2 = l2.V
    if parallel(V1, V2, precision):
        return None
    diff = sub(l2.first_point, l1.first_point)
    denominator = cross(V1, V2)
    return cross(diff, V2) / denominator, cross(diff, V1) / denominator


## line - line

def _line_line(l1: Line, l2: Line, precision: float) -> IntersectionResult:
    params = line_line_params(l1, l2, precision)
    if params is None:
        offset = abs(cross(sub(l2.first_point, l1.first_point), l1.direction))
        if offset > precision:
            return IntersectionResult()
        return _common_parts(l1, l2, precision)
    t1, t2 = params
    if not (l1.is_valid_parameter(t1) and l2.is_valid_parameter(t2)):
        return IntersectionResult()
    return IntersectionResult([l1.param_point(t1)])


## line - arc / ellipse

def _line_conic(line: Line, arc, precision: float) -> IntersectionResult:
    """Map the line into the frame where the conic is the unit circle
    and solve the resulting quadratic in the line parameter."""
    a = arc.major_radius
    b = arc.minor_radius
    first = arc._to_local(line.first_point)
    last = arc._to_local(line.last_point)

    px = mpm.mpf(first[0]) / a
    py = mpm.mpf(first[1]) / b
    vx = (mpm.mpf(last[0]) - first[0]) / a
    vy = (mpm.mpf(last[1]) - first[1]) / b

    qa = vx * vx + vy * vy
    qb = 2 * (px * vx + py * vy)
    qc = px * px + py * py - 1
    discriminant = qb * qb - 4 * qa * qc
    foot = -qb / (2 * qa)

    if discriminant < 0:
        # closest approach of the line to the conic, in the unit frame
        gap = mpm.sqrt((px + foot * vx) ** 2 + (py + foot * vy) ** 2) - 1
        if float(gap) * a > precision:
            return IntersectionResult()
        logger.debug('line/conic tangency with negative discriminant %s',
                     discriminant)
        return IntersectionResult([line.param_point(float(foot))])

    root = mpm.sqrt(discriminant) / (2 * qa)
    points = [line.param_point(float(foot - root)),
              line.param_point(float(foot + root))]
    if dist(points[0], points[1]) <= precision:
        return IntersectionResult([line.param_point(float(foot))])
    return IntersectionResult(points)


## line - Bézier

def _line_bezier(line: Line, curve: BezierCurve, precision: float) -> IntersectionResult:
    """Send the line onto the x axis and look for the curve's zeros in y."""
    angle = math.degrees(math.atan2(line.V[1], line.V[0]))
    to_axis = xform.Rotation(-angle).mul(
        xform.Translation(line.first_point, inverse=True))
    back = to_axis.inverse()
    local = curve.transform(to_axis)
    points = [back.transform(local.param_point(t)) for t in local.params_at_y(0.0)]
    return IntersectionResult([p for p in points if line.is_on_segment(p)])


## arc - arc

def _arc_arc(a1: Arc, a2: Arc, precision: float) -> IntersectionResult:
    c1 = a1.center
    c2 = a2.center
    r1 = a1.radius
    r2 = a2.radius
    d = dist(c1, c2)

    if d <= precision:
        if abs(r1 - r2) <= precision:
            return _common_parts(a1, a2, precision)
        return IntersectionResult()

    if d > r1 + r2 + precision or d < abs(r1 - r2) - precision:
        return IntersectionResult()

    u = ((c2[0] - c1[0]) / d, (c2[1] - c1[1]) / d)
    along = (d * d + r1 * r1 - r2 * r2) / (2 * d)
    base = (c1[0] + along * u[0], c1[1] + along * u[1])
    h2 = r1 * r1 - along * along
    h = math.sqrt(h2) if h2 > 0 else 0.0
    # tangent circles: the chord half-length is too sensitive to rounding
    if h <= precision or abs(d - (r1 + r2)) <= precision \
       or abs(d - abs(r1 - r2)) <= precision:
        return IntersectionResult([base])
    return IntersectionResult([(base[0] - h * u[1], base[1] + h * u[0]),
                               (base[0] + h * u[1], base[1] - h * u[0])])


## conic - conic

## threshold on normalized coefficients below which the back-substitution
## is considered to have lost its x term
_DEGENERATE = 1e-6


def _normalized_conic(q: ConicCoefficients) -> ConicCoefficients:
    largest = max(abs(v) for v in q)
    return ConicCoefficients(*(v / largest for v in q))


def _refine_conic_point(q1: ConicCoefficients, q2: ConicCoefficients,
                        p: Vector, steps: int = 5) -> Vector:
    """Newton steps on the pair of conic equations, kept while they help."""
    best = p
    best_residual = max(abs(q1.evaluate(p)), abs(q2.evaluate(p)))
    for _ in range(steps):
        f1 = q1.evaluate(best)
        f2 = q2.evaluate(best)
        g1 = q1.gradient(best)
        g2 = q2.gradient(best)
        det = g1[0] * g2[1] - g1[1] * g2[0]
        if abs(det) < 1e-14:
            break
        dx = (f1 * g2[1] - f2 * g1[1]) / det
        dy = (g1[0] * f2 - g2[0] * f1) / det
        candidate = (best[0] - dx, best[1] - dy)
        residual = max(abs(q1.evaluate(candidate)), abs(q2.evaluate(candidate)))
        if not residual < best_residual:
            break
        best, best_residual = candidate, residual
    return best


def ellipse_ellipse_points(q1: ConicCoefficients, q2: ConicCoefficients,
                           precision: float) -> List[Vector]:
    """Common points of two conics, at most four.

    Writing each conic as ``a*x**2 + B(y)*x + C(y)`` with
    ``B = b*y + d`` and ``C = c*y**2 + e*y + f``, eliminating x gives
    the quartic resultant
    ``(a1*C2 - a2*C1)**2 - (a1*B2 - a2*B1)*(B1*C2 - B2*C1)``
    in y.  Each root is substituted back in the linear combination
    ``a2*Q1 - a1*Q2``; when that combination loses its x term the x
    values come from the quadratic of the first conic instead.

    The roots are found with the dimensionless tolerance ``epsilon``, so
    the conics should have coefficients of order one; ``precision``
    merges points in the coordinates the conics are written in.
    """
    q1 = _normalized_conic(q1)
    q2 = _normalized_conic(q2)
    a1, b1, c1, d1, e1, f1 = q1.x2, q1.xy, q1.y2, q1.x, q1.y, q1.c
    a2, b2, c2, d2, e2, f2 = q2.x2, q2.xy, q2.y2, q2.x, q2.y, q2.c

    B1 = [d1, b1]
    B2 = [d2, b2]
    C1 = [f1, e1, c1]
    C2 = [f2, e2, c2]
    linear_c = P.polysub(P.polymul([a1], C2), P.polymul([a2], C1))
    linear_b = P.polysub(P.polymul([a1], B2), P.polymul([a2], B1))
    resultant = P.polysub(
        P.polymul(linear_c, linear_c),
        P.polymul(linear_b, P.polysub(P.polymul(B1, C2), P.polymul(B2, C1))))

    ys = solve_generic_polynomial(normalize_polynomial(list(resultant)), epsilon)

    points = []
    for y in ys:
        denominator = P.polyval(y, linear_b)
        if abs(denominator) > _DEGENERATE:
            points.append((-P.polyval(y, linear_c) / denominator, y))
            continue

        logger.debug('conic back-substitution degenerate at y=%g', y)
        bb = b1 * y + d1
        v = -bb / (2 * a1)
        cc = c1 * y * y + e1 * y + f1
        discriminant = bb * bb / (4 * a1 * a1) - cc / a1
        if abs(discriminant) < _DEGENERATE:
            # tangency, whichever side of zero rounding left it on
            points.append((v, y))
        elif discriminant > 0:
            root = math.sqrt(discriminant)
            points.append((v + root, y))
            points.append((v - root, y))

    points = [_refine_conic_point(q1, q2, p) for p in points]
    points = remove_duplicate_points(points, precision)
    if len(points) > 4:
        points.sort(key=lambda p: abs(q1.evaluate(p)) + abs(q2.evaluate(p)))
        points = points[:4]
    return points


def _same_ellipse(e1, e2, precision: float) -> bool:
    return (same_vector(e1.center, e2.center, precision)
            and abs(e1.major_radius - e2.major_radius) <= precision
            and abs(e1.minor_radius - e2.minor_radius) <= precision
            and abs(math.sin(e1.tilt_angle - e2.tilt_angle)) * e1.major_radius
            <= precision)


class _UnitFrame:
    """Frame centred at ``origin`` with ``size`` as unit length.

    Conics of any size get coefficients of order one in it, so the
    root finder can work with a dimensionless tolerance.
    """

    def __init__(self, origin: Vector, size: float):
        self.origin = origin
        self.size = size

    def conic(self, arc) -> ConicCoefficients:
        return conic_coefficients(scale(sub(arc.center, self.origin), 1 / self.size),
                                  arc.major_radius / self.size,
                                  arc.minor_radius / self.size, arc.tilt_angle)

    def coordinates(self, values: Sequence[float], axis: int) -> List[float]:
        """power basis coefficients of one coordinate, mapped into the frame"""
        local = [v / self.size for v in values]
        local[0] -= self.origin[axis] / self.size
        return local

    def to_global(self, p: Vector) -> Vector:
        return add(self.origin, scale(p, self.size))


def _conic_conic(e1, e2: EllipseArc, precision: float) -> IntersectionResult:
    if isinstance(e1, EllipseArc) and _same_ellipse(e1, e2, precision):
        return _common_parts(e1, e2, precision)
    frame = _UnitFrame(midpoint(e1.center, e2.center),
                       max(e1.major_radius, e2.major_radius))
    points = ellipse_ellipse_points(frame.conic(e1), frame.conic(e2),
                                    precision / frame.size)
    return IntersectionResult([frame.to_global(p) for p in points])


## conic - Bézier

def _conic_bezier(arc, curve: BezierCurve, precision: float) -> IntersectionResult:
    """Substitute the curve's polynomials into the conic's implicit form.

    The result has degree 4 for quadratic and 6 for cubic curves.
    """
    frame = _UnitFrame(arc.center, arc.major_radius)
    q = _normalized_conic(frame.conic(arc))
    xs, ys = curve.polynomial_coefficients
    xs = frame.coordinates(xs, 0)
    ys = frame.coordinates(ys, 1)
    polynomial = P.polyadd(
        P.polyadd(P.polymul([q.x2], P.polymul(xs, xs)),
                  P.polymul([q.xy], P.polymul(xs, ys))),
        P.polyadd(P.polymul([q.y2], P.polymul(ys, ys)),
                  P.polyadd(P.polyadd(P.polymul([q.x], xs), P.polymul([q.y], ys)),
                            [q.c])))
    roots = solve_generic_polynomial(normalize_polynomial(list(polynomial)))
    points = [curve.param_point(min(1.0, max(0.0, t)))
              for t in roots if curve.is_valid_parameter(t)]
    return IntersectionResult(points)


## Bézier - Bézier

_MAX_DEPTH = 60
_MAX_PAIRS = 50000


def _is_flat(points: Sequence[Vector]) -> bool:
    """control points within a thousandth of the chord length of the chord"""
    chord = sub(points[-1], points[0])
    length = math.hypot(*chord)
    if length == 0.0:
        return False
    deviation = max(abs(cross(sub(p, points[0]), chord)) / length for p in points[1:-1])
    return deviation <= 1e-3 * length


def _refine_params(c1: BezierCurve, c2: BezierCurve, t1: float, t2: float,
                   steps: int = 50) -> Tuple[float, float, float]:
    """Damped Gauss-Newton on ``c1(t1) - c2(t2) = 0``.

    Converges quadratically at transversal crossings and linearly at
    tangencies.  Returns the parameters and the remaining distance.
    """
    p1 = c1.param_point(t1)
    p2 = c2.param_point(t2)
    distance = dist(p1, p2)
    for _ in range(steps):
        if distance == 0.0:
            break
        f = sub(p1, p2)
        g1 = c1.gradient_at(t1)
        g2 = c2.gradient_at(t2)
        h11 = dot(g1, g1)
        h22 = dot(g2, g2)
        h12 = -dot(g1, g2)
        damping = 1e-12 * (h11 + h22)
        r1 = -dot(g1, f)
        r2 = dot(g2, f)
        det = (h11 + damping) * (h22 + damping) - h12 * h12
        if det == 0.0:
            break
        n1 = min(1.0, max(0.0, t1 + (r1 * (h22 + damping) - h12 * r2) / det))
        n2 = min(1.0, max(0.0, t2 + ((h11 + damping) * r2 - h12 * r1) / det))
        q1 = c1.param_point(n1)
        q2 = c2.param_point(n2)
        candidate = dist(q1, q2)
        if not candidate < distance:
            break
        t1, t2, p1, p2, distance = n1, n2, q1, q2, candidate
    return t1, t2, distance


def _bezier_candidates(c1: BezierCurve, c2: BezierCurve, precision: float):
    """Subdivide both curves, keeping pairs of pieces whose hulls meet.

    Returns ``(guess, box)`` pairs: an initial parameter guess and the
    parameter ranges it came from.
    """
    size = max(c1.hull_bounding_box.size, c2.hull_bounding_box.size)
    leaf = max(precision, 1e-4 * size)

    candidates = []
    stack = [(list(c1.control_points), 0.0, 1.0, list(c2.control_points), 0.0, 1.0, 0)]
    visited = 0
    while stack:
        pts1, lo1, hi1, pts2, lo2, hi2, depth = stack.pop()
        visited += 1
        if visited > _MAX_PAIRS:
            logger.debug('Bézier subdivision stopped after %d pairs', visited)
            break
        box1 = points_bbox(pts1)
        box2 = points_bbox(pts2)
        if not box1.overlaps(box2, precision):
            continue
        box = (lo1, hi1, lo2, hi2)

        if _is_flat(pts1) and _is_flat(pts2):
            chord1 = sub(pts1[-1], pts1[0])
            chord2 = sub(pts2[-1], pts2[0])
            if not parallel(chord1, chord2, 0.05):
                diff = sub(pts2[0], pts1[0])
                denominator = cross(chord1, chord2)
                u1 = cross(diff, chord2) / denominator
                u2 = cross(diff, chord1) / denominator
                if -0.05 <= u1 <= 1.05 and -0.05 <= u2 <= 1.05:
                    u1 = min(1.0, max(0.0, u1))
                    u2 = min(1.0, max(0.0, u2))
                    candidates.append(((lo1 + u1 * (hi1 - lo1), lo2 + u2 * (hi2 - lo2)), box))
                continue

        if (box1.size <= leaf and box2.size <= leaf) or depth >= _MAX_DEPTH:
            candidates.append((((lo1 + hi1) / 2, (lo2 + hi2) / 2), box))
            continue

        if box1.size >= box2.size:
            left, right = split_control_points(pts1, 0.5)
            mid = (lo1 + hi1) / 2
            stack.append((left, lo1, mid, pts2, lo2, hi2, depth + 1))
            stack.append((right, mid, hi1, pts2, lo2, hi2, depth + 1))
        else:
            left, right = split_control_points(pts2, 0.5)
            mid = (lo2 + hi2) / 2
            stack.append((pts1, lo1, hi1, left, lo2, mid, depth + 1))
            stack.append((pts1, lo1, hi1, right, mid, hi2, depth + 1))
    return candidates


def _cluster(candidates):
    """Group candidates whose parameter boxes touch."""
    slack = 1e-12
    parent = list(range(len(candidates)))

    def find(i):
        while parent[i] != i:
            parent[i] = parent[parent[i]]
            i = parent[i]
        return i

    boxes = [box for _, box in candidates]
    order = sorted(range(len(boxes)), key=lambda i: boxes[i][0])
    for index, i in enumerate(order):
        lo1, hi1, lo2, hi2 = boxes[i]
        for j in order[index + 1:]:
            olo1, ohi1, olo2, ohi2 = boxes[j]
            if olo1 > hi1 + slack:
                break
            if olo2 <= hi2 + slack and lo2 <= ohi2 + slack:
                parent[find(j)] = find(i)

    members: Dict[int, List[int]] = {}
    for i in range(len(candidates)):
        members.setdefault(find(i), []).append(i)
    return [[candidates[i][0] for i in group] for group in members.values()]


def _bezier_bezier(c1: BezierCurve, c2: BezierCurve, precision: float) -> IntersectionResult:
    if _may_share_curve(c1, c2):
        common = _common_parts(c1, c2, precision)
        if common.overlaps:
            return common

    points = []
    for group in _cluster(_bezier_candidates(c1, c2, precision)):
        guess = min(group, key=lambda g: dist(c1.param_point(g[0]), c2.param_point(g[1])))
        t1, t2, distance = _refine_params(c1, c2, guess[0], guess[1])
        if distance <= precision:
            points.append(midpoint(c1.param_point(t1), c2.param_point(t2)))
        else:
            logger.debug('Bézier candidate at (%g, %g) did not converge', t1, t2)
    return IntersectionResult(points)


## dispatch
## --------

Algorithm = Callable[[Segment, Segment, float], IntersectionResult]

_ALGORITHMS: Dict[Tuple[type, type], Algorithm] = {}


def _register(kind1: type, kind2: type, algorithm: Algorithm):
    _ALGORITHMS[(kind1, kind2)] = algorithm
    if kind1 is not kind2:
        _ALGORITHMS[(kind2, kind1)] = lambda s1, s2, p: algorithm(s2, s1, p)


_register(Line, Line, _line_line)
_register(Line, Arc, _line_conic)
_register(Line, EllipseArc, _line_conic)
_register(Line, QuadraticBezier, _line_bezier)
_register(Line, CubicBezier, _line_bezier)
_register(Arc, Arc, _arc_arc)
_register(Arc, EllipseArc, _conic_conic)
_register(EllipseArc, EllipseArc, _conic_conic)
_register(Arc, QuadraticBezier, _conic_bezier)
_register(Arc, CubicBezier, _conic_bezier)
_register(EllipseArc, QuadraticBezier, _conic_bezier)
_register(EllipseArc, CubicBezier, _conic_bezier)
_register(QuadraticBezier, QuadraticBezier, _bezier_bezier)
_register(QuadraticBezier, CubicBezier, _bezier_bezier)
_register(CubicBezier, CubicBezier, _bezier_bezier)


def _lookup(s1: Segment, s2: Segment) -> Algorithm:
    for kind1 in type(s1).__mro__:
        for kind2 in type(s2).__mro__:
            algorithm = _ALGORITHMS.get((kind1, kind2))
            if algorithm is not None:
                return algorithm
    raise NotImplementedError('no intersection algorithm for {} and {}'.format(
        type(s1).__name__, type(s2).__name__))


def _finalize(result: IntersectionResult, s1: Segment, s2: Segment,
              precision: float) -> IntersectionResult:
    ends = (s1.first_point, s1.last_point, s2.first_point, s2.last_point)

    def on_both(p):
        return s1.is_on_segment(p) and s2.is_on_segment(p)

    points = []
    for p in result.intersections:
        snapped = next((q for q in ends if same_vector(p, q, precision)), p)
        if on_both(snapped):
            points.append(snapped)
        elif on_both(p):
            points.append(p)

    overlaps = []
    for o in result.overlaps:
        if not any(o.is_same(k) or o.is_same(k.reverse()) for k in overlaps):
            overlaps.append(o)

    points = [p for p in remove_duplicate_points(points, precision)
              if not any(o.is_on_segment(p) for o in overlaps)]
    return IntersectionResult(points, overlaps)


def find_intersections_and_overlaps(s1: Segment, s2: Segment,
                                    precision: Optional[float] = None) -> IntersectionResult:
    """Isolated intersection points and overlapping parts of two segments."""
    if precision is None:
        precision = max(s1.precision, s2.precision)
    if not s1.bounding_box.overlaps(s2.bounding_box, precision):
        return IntersectionResult()
    result = _lookup(s1, s2)(s1, s2, precision)
    return _finalize(result, s1, s2, precision)


def find_intersections(s1: Segment, s2: Segment,
                       precision: Optional[float] = None) -> List[Vector]:
    """Isolated intersection points only; overlaps are ignored."""
    return find_intersections_and_overlaps(s1, s2, precision).intersections
