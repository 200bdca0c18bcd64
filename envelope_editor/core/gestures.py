"""Pointer gesture routing for the track canvas.

Pure Python, no Qt dependency.  A press starts at most one gesture (clip
move, envelope edit, or time selection); moves and the release go to that
gesture only, and the release always ends it.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from .envelope import Clip, Track
from .envelope_drag import DragController, DragOutcome
from .hit_test import HitTester, Segment
from .layout import TrackLayout

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class TimeSelection:
    start_time: float
    end_time: float


@dataclass(frozen=True)
class HoveredHeader:
    clip_id: int
    track_index: int


@dataclass(frozen=True)
class SegmentHover:
    clip_id: int
    segment: Segment


@dataclass(frozen=True)
class GainTooltip:
    x: float
    y: float
    text: str


# ── Gestures ────────────────────────────────────────────────


@dataclass(frozen=True)
class NoGesture:
    pass


@dataclass
class ClipMoveGesture:
    clip: Clip
    track_index: int
    offset_x: float  # press x relative to the clip's left edge


@dataclass
class EnvelopeGesture:
    clip: Clip
    track_index: int


@dataclass
class TimeSelectionGesture:
    start_x: float
    current_x: float
    start_track_index: int


Gesture = NoGesture | ClipMoveGesture | EnvelopeGesture | TimeSelectionGesture


class GestureDispatcher:
    """Routes pointer events on the canvas to exactly one gesture."""

    def __init__(
        self,
        tracks: list[Track] | None = None,
        layout: TrackLayout | None = None,
        drag_controller: DragController | None = None,
        hit_tester: HitTester | None = None,
        on_change: Callable[[], None] | None = None,
    ) -> None:
        self.tracks: list[Track] = tracks if tracks is not None else []
        self.layout = layout or TrackLayout()
        self._hit = hit_tester or HitTester()
        self.drag = drag_controller or DragController(hit_tester=self._hit)
        self.on_change = on_change

        self._gesture: Gesture = NoGesture()
        self._envelope_mode = False

        self.selected_tracks: list[int] = []
        self.focused_track: int | None = None
        self.time_selection: TimeSelection | None = None
        self.hovered_header: HoveredHeader | None = None
        self.hovered_segment: SegmentHover | None = None
        self.cursor = "default"
        self.tooltip: GainTooltip | None = None
        self.last_outcome: DragOutcome | None = None

    # --- Properties ---

    @property
    def gesture(self) -> Gesture:
        return self._gesture

    @property
    def envelope_mode(self) -> bool:
        return self._envelope_mode

    @envelope_mode.setter
    def envelope_mode(self, enabled: bool) -> None:
        self._envelope_mode = enabled
        if not enabled:
            self.hovered_segment = None
        self._changed()

    def toggle_envelope_mode(self) -> bool:
        self.envelope_mode = not self._envelope_mode
        return self._envelope_mode

    @property
    def hidden_ids(self) -> frozenset[int]:
        """Point ids the renderer must skip while a drag crosses them."""
        return self.drag.hidden_ids

    def add_track(self, name: str | None = None) -> Track:
        number = len(self.tracks) + 1
        track = Track(id=max((t.id for t in self.tracks), default=0) + 1, name=name or f"Track {number}")
        self.tracks.append(track)
        self._changed()
        return track

    def _changed(self) -> None:
        if self.on_change is not None:
            self.on_change()

    def _valid_track(self, index: int) -> bool:
        return 0 <= index < len(self.tracks)

    # --- Pointer events ---

    def pointer_down(self, x: float, y: float) -> Gesture:
        if not isinstance(self._gesture, NoGesture):
            # A press without a release in between; finish the old one first
            log.warning("Pointer down during %s; ending it", type(self._gesture).__name__)
            self.pointer_leave()

        clicked_track = self.layout.track_index_at(y)
        if self._valid_track(clicked_track):
            self.selected_tracks = [clicked_track]
            self.focused_track = clicked_track

        self._gesture = (
            self._begin_clip_move(x, y)
            or (self._begin_envelope_edit(x, y) if self._envelope_mode else None)
            or self._begin_time_selection(x, clicked_track)
        )
        log.debug("Pointer down at (%.1f, %.1f) -> %s", x, y, type(self._gesture).__name__)
        self._changed()
        return self._gesture

    def pointer_move(self, x: float, y: float) -> None:
        gesture = self._gesture
        if isinstance(gesture, TimeSelectionGesture):
            self._update_time_selection(gesture, x, y)
        elif isinstance(gesture, EnvelopeGesture):
            feedback = self.drag.move(x, y)
            if feedback is not None:
                self.tooltip = GainTooltip(x, y, feedback.text)
        elif isinstance(gesture, ClipMoveGesture):
            self._update_clip_move(gesture, x, y)
        else:
            if not self._update_hover(x, y):
                return
        self._changed()

    def pointer_up(self, x: float, y: float) -> None:
        released_track = self.layout.track_index_at(y)
        if self._valid_track(released_track):
            self.focused_track = released_track

        if isinstance(self._gesture, EnvelopeGesture):
            self.last_outcome = self.drag.release(x, y)
        self._end_gesture()

    def pointer_leave(self) -> None:
        """Leaving the surface ends the gesture exactly like a release."""
        if isinstance(self._gesture, EnvelopeGesture):
            self.last_outcome = self.drag.cancel()
        self.hovered_header = None
        self.hovered_segment = None
        self._end_gesture()

    def _end_gesture(self) -> None:
        if not isinstance(self._gesture, NoGesture):
            log.debug("Ended %s", type(self._gesture).__name__)
        self._gesture = NoGesture()
        self.tooltip = None
        self.cursor = "default"
        self._changed()

    # --- Gesture starts ---

    def _begin_clip_move(self, x: float, y: float) -> ClipMoveGesture | None:
        hit = self.layout.header_hit(x, y, self.tracks)
        if hit is None:
            return None
        track_index, clip = hit
        for track in self.tracks:
            for c in track.clips:
                c.selected = c is clip
        self.time_selection = TimeSelection(clip.start_time, clip.end_time)
        self.cursor = "grabbing"
        rect = self.layout.clip_rect(clip, track_index)
        return ClipMoveGesture(clip, track_index, x - rect.x)

    def _begin_envelope_edit(self, x: float, y: float) -> EnvelopeGesture | None:
        for track_index, clip in self.layout.clips_at(x, y, self.tracks):
            geometry = self.layout.body_geometry(clip, track_index)
            if self.drag.press(x, y, clip, geometry):
                self.hovered_segment = None
                return EnvelopeGesture(clip, track_index)
        return None

    def _begin_time_selection(self, x: float, track_index: int) -> TimeSelectionGesture:
        self.time_selection = None
        return TimeSelectionGesture(x, x, track_index)

    # --- Gesture updates ---

    def _update_time_selection(self, gesture: TimeSelectionGesture, x: float, y: float) -> None:
        gesture.current_x = x
        t0 = max(0.0, self.layout.x_to_time(gesture.start_x))
        t1 = max(0.0, self.layout.x_to_time(x))
        self.time_selection = TimeSelection(min(t0, t1), max(t0, t1))

        current = self.layout.track_index_at(y)
        lo = max(0, min(gesture.start_track_index, current))
        hi = min(len(self.tracks) - 1, max(gesture.start_track_index, current))
        self.selected_tracks = list(range(lo, hi + 1))

    def _update_clip_move(self, gesture: ClipMoveGesture, x: float, y: float) -> None:
        clip = gesture.clip
        clip.start_time = max(0.0, self.layout.x_to_time(x - gesture.offset_x))

        new_track = self.layout.track_index_at(y)
        if self._valid_track(new_track) and new_track != gesture.track_index:
            self.tracks[gesture.track_index].clips.remove(clip)
            self.tracks[new_track].clips.append(clip)
            gesture.track_index = new_track
            self.selected_tracks = [new_track]

        if self.time_selection is not None:
            self.time_selection = TimeSelection(clip.start_time, clip.end_time)

    def _update_hover(self, x: float, y: float) -> bool:
        """Refresh hover state and cursor; returns True when anything changed."""
        before = (self.hovered_header, self.hovered_segment, self.cursor)

        header = self.layout.header_hit(x, y, self.tracks)
        self.hovered_header = HoveredHeader(header[1].id, header[0]) if header else None
        self.hovered_segment = None

        if header is not None:
            self.cursor = "grab"
        else:
            self.cursor = "default"
            if self._envelope_mode:
                for track_index, clip in self.layout.clips_at(x, y, self.tracks):
                    geometry = self.layout.body_geometry(clip, track_index)
                    segment = self._hit.hovered_segment(x, y, clip.envelope, geometry)
                    if segment is not None:
                        self.hovered_segment = SegmentHover(clip.id, segment)
                        self.cursor = "copy"
                        break

        return before != (self.hovered_header, self.hovered_segment, self.cursor)
