"""Envelope model: per-clip gain curves made of sorted control points.

Pure Python, no Qt dependency.  Points carry a stable ``id`` so callers can
find a point again after a re-sort even when two points share coordinates.
"""

from __future__ import annotations

import itertools
import logging
from collections.abc import Iterator
from dataclasses import dataclass, field

from .constants import NEG_INF

log = logging.getLogger(__name__)

_point_ids = itertools.count(1)


def next_point_id() -> int:
    return next(_point_ids)


@dataclass
class EnvelopePoint:
    """A single gain control point, relative to its clip's start."""

    time: float  # seconds from clip start
    gain: float  # dB, or -inf for silence
    id: int = field(default_factory=next_point_id)


class EnvelopeCurve:
    """Ordered gain points for one clip.

    Points are kept sorted by time after every mutation.  The sort is
    stable, so points sharing a time stay in insertion order.
    """

    def __init__(self, points: list[EnvelopePoint] | None = None) -> None:
        self._points: list[EnvelopePoint] = list(points or [])
        self._sort()

    def _sort(self) -> None:
        self._points.sort(key=lambda p: p.time)

    # --- Read access ---

    @property
    def points(self) -> list[EnvelopePoint]:
        return list(self._points)

    def __len__(self) -> int:
        return len(self._points)

    def __iter__(self) -> Iterator[EnvelopePoint]:
        return iter(self._points)

    def __getitem__(self, index: int) -> EnvelopePoint:
        return self._points[index]

    def index_of(self, point_id: int) -> int:
        """Current index of the point with *point_id*, or -1."""
        for i, p in enumerate(self._points):
            if p.id == point_id:
                return i
        return -1

    def find(self, point_id: int) -> EnvelopePoint | None:
        idx = self.index_of(point_id)
        return self._points[idx] if idx >= 0 else None

    # --- Mutation ---

    def insert(self, point: EnvelopePoint) -> int:
        """Add *point* and return its index after sorting."""
        self._points.append(point)
        self._sort()
        log.debug("Inserted point %d at %.3fs / %s dB", point.id, point.time, point.gain)
        return self.index_of(point.id)

    def reinsert(self, point: EnvelopePoint) -> int:
        """Put back a point removed earlier, keeping its id."""
        return self.insert(point)

    def remove_at(self, index: int) -> EnvelopePoint | None:
        if 0 <= index < len(self._points):
            point = self._points.pop(index)
            log.debug("Removed point %d", point.id)
            return point
        return None

    def remove_by_id(self, point_id: int) -> EnvelopePoint | None:
        return self.remove_at(self.index_of(point_id))

    def move(self, point_id: int, time: float, gain: float) -> int:
        """Set a point's coordinates and return its new index."""
        point = self.find(point_id)
        if point is None:
            return -1
        point.time = time
        point.gain = gain
        self._sort()
        return self.index_of(point_id)

    def clear(self) -> None:
        self._points.clear()

    # --- Evaluation ---

    def gain_at(self, time: float) -> float:
        """Gain in dB the rendered curve shows at *time*.

        Before the first point the curve ramps from 0 dB at the clip start
        (or holds the first gain when that point sits at time 0).  After
        the last point it holds the last gain.  Between points it is
        linear in dB.
        """
        points = self._points
        if not points:
            return 0.0

        first = points[0]
        if time <= first.time:
            if first.time <= 0:
                return first.gain
            return _lerp(0.0, first.gain, max(0.0, time) / first.time)

        last = points[-1]
        if time >= last.time:
            return last.gain

        for p0, p1 in zip(points, points[1:]):
            if p0.time <= time <= p1.time:
                dt = p1.time - p0.time
                if dt <= 0:
                    return p1.gain
                return _lerp(p0.gain, p1.gain, (time - p0.time) / dt)
        return last.gain


def _lerp(g0: float, g1: float, t: float) -> float:
    if t <= 0:
        return g0
    if t >= 1:
        return g1
    if g0 == NEG_INF or g1 == NEG_INF:
        return NEG_INF
    return g0 + (g1 - g0) * t


@dataclass
class Clip:
    """An audio clip on a track with its gain envelope."""

    id: int
    name: str
    start_time: float  # seconds on the timeline
    duration: float  # seconds
    envelope: EnvelopeCurve = field(default_factory=EnvelopeCurve)
    selected: bool = False

    def __post_init__(self) -> None:
        if self.duration <= 0:
            raise ValueError(f"clip duration must be positive, got {self.duration}")

    @property
    def end_time(self) -> float:
        return self.start_time + self.duration


@dataclass
class Track:
    id: int
    name: str
    clips: list[Clip] = field(default_factory=list)


def format_gain(gain: float) -> str:
    """Tooltip text for a gain value, e.g. ``+0.0 dB`` or ``-∞ dB``."""
    if gain == NEG_INF:
        return "-∞ dB"
    gain += 0.0  # normalise -0.0
    sign = "+" if gain >= 0 else ""
    return f"{sign}{gain:.1f} dB"
