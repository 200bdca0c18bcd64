"""Snap a dragged envelope point onto nearby sibling values."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from .constants import NEG_INF, SNAP_THRESHOLD_DB, SNAP_THRESHOLD_TIME
from .envelope import EnvelopePoint


@dataclass(frozen=True)
class SnapResult:
    time: float
    gain: float
    snapped_time: bool = False
    snapped_gain: bool = False


class SnapEngine:
    """Per-axis snapping to sibling points.

    Each axis is handled on its own: a candidate within the threshold of a
    sibling takes that sibling's exact value.  When several siblings
    qualify, the last one in iteration order wins; callers pass siblings in
    curve order, so the later point in time wins.
    """

    def __init__(
        self,
        time_threshold: float = SNAP_THRESHOLD_TIME,
        gain_threshold: float = SNAP_THRESHOLD_DB,
    ) -> None:
        self.time_threshold = time_threshold
        self.gain_threshold = gain_threshold

    def snap(self, time: float, gain: float, siblings: Iterable[EnvelopePoint]) -> SnapResult:
        snapped_time = time
        snapped_gain = gain
        hit_time = hit_gain = False

        for other in siblings:
            if abs(time - other.time) < self.time_threshold:
                snapped_time = other.time
                hit_time = True
            if _gain_close(gain, other.gain, self.gain_threshold):
                snapped_gain = other.gain
                hit_gain = True

        return SnapResult(snapped_time, snapped_gain, hit_time, hit_gain)


def _gain_close(a: float, b: float, threshold: float) -> bool:
    # -inf only matches -inf; inf - inf would be nan
    if a == NEG_INF or b == NEG_INF:
        return a == b
    return abs(a - b) < threshold
