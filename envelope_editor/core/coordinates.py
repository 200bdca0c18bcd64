"""Time <-> x and gain (dB) <-> y transforms for a clip body.

The gain axis maps [MIN_DB, MAX_DB] onto the clip body minus a thin strip
at the bottom that stands for -inf dB.  Two shapes are available; one is
chosen per mapper and used for both directions.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum

from .constants import INFINITY_ZONE_HEIGHT, MAX_DB, MIN_DB, NEG_INF


class GainScale(Enum):
    """Shape of the gain axis."""

    LINEAR = "linear"
    CUBIC = "cubic"  # normalized**3 forward; pushes 0 dB lower in the body


class CoordinateMapper:
    """Bidirectional pixel mapping for one gain-axis shape."""

    def __init__(self, scale: GainScale = GainScale.LINEAR) -> None:
        self._scale = scale

    @property
    def scale(self) -> GainScale:
        return self._scale

    # ── Time axis ───────────────────────────────────────────

    @staticmethod
    def time_to_x(time: float, clip_left_x: float, pixels_per_second: float) -> float:
        return clip_left_x + time * pixels_per_second

    @staticmethod
    def x_to_time(x: float, clip_left_x: float, pixels_per_second: float) -> float:
        if pixels_per_second <= 0:
            raise ValueError(f"pixels_per_second must be positive, got {pixels_per_second}")
        return (x - clip_left_x) / pixels_per_second

    # ── Gain axis ───────────────────────────────────────────

    def gain_to_y(self, gain: float, top: float, height: float) -> float:
        """Map *gain* (dB) to a y coordinate; -inf lands on ``top + height``."""
        usable = _usable_height(height)
        if gain == NEG_INF or gain < MIN_DB:
            return top + height
        normalized = (min(gain, MAX_DB) - MIN_DB) / (MAX_DB - MIN_DB)
        if self._scale is GainScale.CUBIC:
            normalized = normalized ** 3
        return top + usable - normalized * usable

    def y_to_gain(self, y: float, top: float, height: float) -> float:
        """Map a y coordinate back to dB, clamped to the gain range.

        Any y below the MIN_DB line (the bottom strip, or below the body)
        yields -inf.
        """
        usable = _usable_height(height)
        # Strict: MIN_DB is drawn at top + usable and must read back as MIN_DB
        if y > top + usable:
            return NEG_INF
        normalized = (top + usable - y) / usable
        if self._scale is GainScale.CUBIC:
            # normalized >= 0 here; above the body it exceeds 1 and is clamped below
            normalized = normalized ** (1.0 / 3.0)
        gain = MIN_DB + normalized * (MAX_DB - MIN_DB)
        return max(MIN_DB, min(MAX_DB, gain))


def _usable_height(height: float) -> float:
    usable = height - INFINITY_ZONE_HEIGHT
    if usable <= 0:
        raise ValueError(f"clip body height {height} leaves no room for the gain axis")
    return usable


@dataclass(frozen=True)
class ClipGeometry:
    """Pixel rectangle of a clip body plus the clip's duration in seconds.

    Bundles what the hit tester and drag controller need so a gesture can
    map between pixels and (time, gain) without knowing the track layout.
    """

    x: float
    y: float
    width: float
    height: float
    duration: float
    mapper: CoordinateMapper = field(default_factory=CoordinateMapper)

    def __post_init__(self) -> None:
        if self.duration <= 0:
            raise ValueError(f"clip duration must be positive, got {self.duration}")
        if self.width <= 0:
            raise ValueError(f"clip width must be positive, got {self.width}")

    @property
    def pixels_per_second(self) -> float:
        return self.width / self.duration

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def time_to_x(self, time: float) -> float:
        return self.mapper.time_to_x(time, self.x, self.pixels_per_second)

    def x_to_time(self, x: float) -> float:
        return self.mapper.x_to_time(x, self.x, self.pixels_per_second)

    def gain_to_y(self, gain: float) -> float:
        return self.mapper.gain_to_y(gain, self.y, self.height)

    def y_to_gain(self, y: float) -> float:
        return self.mapper.y_to_gain(y, self.y, self.height)

    def clamp_time(self, time: float) -> float:
        return max(0.0, min(self.duration, time))

    def point_to_pixel(self, point) -> tuple[float, float]:
        """Pixel position of an envelope point."""
        return self.time_to_x(point.time), self.gain_to_y(point.gain)

    def contains_x(self, x: float) -> bool:
        return self.x <= x <= self.right


def distance(x1: float, y1: float, x2: float, y2: float) -> float:
    return math.hypot(x2 - x1, y2 - y1)
