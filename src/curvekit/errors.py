"""Exceptions raised by curvekit."""

from __future__ import annotations

from typing import Sequence


class GeometryError(ValueError):
    """Base class for structurally invalid geometry."""


class InvalidSegmentError(GeometryError):
    """Segment control data is degenerate or inconsistent."""


class SplitPointError(GeometryError):
    """A requested split point does not lie on the segment."""

    def __init__(self, segment, point):
        self.segment = segment
        self.point = point
        super().__init__(f'split point {point} is not on {segment!r}')


class InvalidStrokeError(GeometryError):
    """A stroke is empty, disconnected or not closed."""


class SelfIntersectionError(GeometryError):
    """Two segments of a stroke intersect where they should not."""

    def __init__(self, kind: str, first_index: int, second_index: int,
                 first_segment, second_segment,
                 intersections: Sequence = (), overlaps: Sequence = ()):
        self.kind = kind
        self.first_index = first_index
        self.second_index = second_index
        self.first_segment = first_segment
        self.second_segment = second_segment
        self.intersections = list(intersections)
        self.overlaps = list(overlaps)
        parts = []
        if self.intersections:
            pts = ', '.join(f'({p[0]:.6g}, {p[1]:.6g})' for p in self.intersections)
            parts.append(f'at {pts}')
        if self.overlaps:
            ovs = ', '.join(repr(o) for o in self.overlaps)
            parts.append(f'overlapping on {ovs}')
        super().__init__(
            f'{kind} segments {first_index} ({first_segment!r}) and '
            f'{second_index} ({second_segment!r}) intersect '
            + ' and '.join(parts))
