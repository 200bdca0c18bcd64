"""Track and clip geometry on the timeline canvas."""

from __future__ import annotations

import math
from dataclasses import dataclass

from .constants import (
    CLIP_HEADER_HEIGHT,
    INITIAL_GAP,
    LEFT_PADDING,
    PIXELS_PER_SECOND,
    TRACK_GAP,
    TRACK_HEIGHT,
)
from .coordinates import ClipGeometry, CoordinateMapper
from .envelope import Clip, Track


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def contains(self, x: float, y: float) -> bool:
        # Edges count as inside
        return self.x <= x <= self.right and self.y <= y <= self.bottom


class TrackLayout:
    """Stacked track rows; each clip is a header strip above its body."""

    def __init__(
        self,
        track_height: float = TRACK_HEIGHT,
        track_gap: float = TRACK_GAP,
        initial_gap: float = INITIAL_GAP,
        pixels_per_second: float = PIXELS_PER_SECOND,
        left_padding: float = LEFT_PADDING,
        clip_header_height: float = CLIP_HEADER_HEIGHT,
        mapper: CoordinateMapper | None = None,
    ) -> None:
        if pixels_per_second <= 0:
            raise ValueError(f"pixels_per_second must be positive, got {pixels_per_second}")
        if track_height <= clip_header_height:
            raise ValueError("track_height must leave room below the clip header")
        self.track_height = track_height
        self.track_gap = track_gap
        self.initial_gap = initial_gap
        self.pixels_per_second = pixels_per_second
        self.left_padding = left_padding
        self.clip_header_height = clip_header_height
        self.mapper = mapper or CoordinateMapper()

    # ── Timeline axis ───────────────────────────────────────

    def time_to_x(self, time: float) -> float:
        return self.mapper.time_to_x(time, self.left_padding, self.pixels_per_second)

    def x_to_time(self, x: float) -> float:
        return self.mapper.x_to_time(x, self.left_padding, self.pixels_per_second)

    # ── Track rows ──────────────────────────────────────────

    def track_y(self, track_index: int) -> float:
        return self.initial_gap + track_index * (self.track_height + self.track_gap)

    def track_index_at(self, y: float) -> int:
        """Row index under *y*; may be out of range for the track list."""
        return math.floor((y - self.initial_gap) / (self.track_height + self.track_gap))

    def content_height(self, track_count: int) -> float:
        return self.initial_gap + track_count * (self.track_height + self.track_gap)

    def _row_at(self, y: float, tracks: list[Track]) -> int | None:
        idx = self.track_index_at(y)
        if 0 <= idx < len(tracks):
            top = self.track_y(idx)
            if top <= y <= top + self.track_height:
                return idx
        return None

    # ── Clips ───────────────────────────────────────────────

    def clip_rect(self, clip: Clip, track_index: int) -> Rect:
        return Rect(
            self.time_to_x(clip.start_time),
            self.track_y(track_index),
            clip.duration * self.pixels_per_second,
            self.track_height,
        )

    def header_rect(self, clip: Clip, track_index: int) -> Rect:
        rect = self.clip_rect(clip, track_index)
        return Rect(rect.x, rect.y, rect.width, self.clip_header_height)

    def body_geometry(self, clip: Clip, track_index: int) -> ClipGeometry:
        rect = self.clip_rect(clip, track_index)
        return ClipGeometry(
            x=rect.x,
            y=rect.y + self.clip_header_height,
            width=rect.width,
            height=self.track_height - self.clip_header_height,
            duration=clip.duration,
            mapper=self.mapper,
        )

    def header_hit(self, x: float, y: float, tracks: list[Track]) -> tuple[int, Clip] | None:
        row = self._row_at(y, tracks)
        if row is None:
            return None
        for clip in tracks[row].clips:
            if self.header_rect(clip, row).contains(x, y):
                return row, clip
        return None

    def clips_at(self, x: float, y: float, tracks: list[Track]) -> list[tuple[int, Clip]]:
        """Clips in the row under *y* whose horizontal span contains *x*."""
        row = self._row_at(y, tracks)
        if row is None:
            return []
        result = []
        for clip in tracks[row].clips:
            rect = self.clip_rect(clip, row)
            if rect.x <= x <= rect.right:
                result.append((row, clip))
        return result
