# -*- coding: utf-8 -*-
"""2D curve segments, their intersections and the strokes they form."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("curvekit")
except PackageNotFoundError:  # pragma: no cover - handled when package not installed
    __version__ = "unknown"

from curvekit.errors import (GeometryError, InvalidSegmentError,
                             InvalidStrokeError, SelfIntersectionError,
                             SplitPointError)
from curvekit.bbox import BoundingBox
from curvekit.segment import Segment, Line
from curvekit.arcs import Arc, EllipseArc, three_points_arc
from curvekit.bezier import BezierCurve, QuadraticBezier, CubicBezier
from curvekit.intersect import (IntersectionResult, find_intersections,
                                find_intersections_and_overlaps)
from curvekit.selfintersect import (check_self_intersections,
                                    intersecting_segments,
                                    split_at_self_intersections)
from curvekit.stroke import Loop, Strand, Stroke
from curvekit.direct import find_global_minimum
from curvekit.distance import distance, generic_distance
