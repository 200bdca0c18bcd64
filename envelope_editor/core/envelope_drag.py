"""Envelope point drag: create, move, hide crossed points, commit or delete.

Pure Python, no Qt dependency.  The controller is either ``Idle`` or
``Active`` with exactly one ``DragSession``; there is no in-between.

Points the dragged point crosses are only *hidden* while the drag is in
progress: they stay in the curve, are left out of rendering, hit testing
and snapping, and come back if the drag returns past them.  Whatever is
still hidden when the gesture ends is deleted.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum

from .constants import CLICK_DISTANCE
from .coordinates import ClipGeometry, distance
from .envelope import Clip, EnvelopePoint, format_gain
from .hit_test import HitTester
from .snap import SnapEngine

log = logging.getLogger(__name__)


class DragOutcomeKind(Enum):
    CREATED = "created"  # stationary click on the curve placed a point
    MOVED = "moved"
    DELETED = "deleted"  # stationary click on an existing point removed it


@dataclass(frozen=True)
class DragOutcome:
    kind: DragOutcomeKind
    point_id: int
    removed_ids: tuple[int, ...] = ()


@dataclass(frozen=True)
class DragFeedback:
    """Live value shown next to the cursor while dragging."""

    time: float
    gain: float

    @property
    def text(self) -> str:
        return format_gain(self.gain)


@dataclass
class DragSession:
    clip: Clip
    geometry: ClipGeometry
    point_id: int
    original_time: float
    original_gain: float
    start_x: float
    start_y: float
    is_new_point: bool = False
    last_x: float = 0.0
    last_y: float = 0.0
    hidden_ids: frozenset[int] = frozenset()
    feedback: DragFeedback | None = field(default=None)


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Active:
    session: DragSession


DragState = Idle | Active


class DragController:
    """Owns the lifecycle of one envelope point edit."""

    def __init__(
        self,
        hit_tester: HitTester | None = None,
        snap_engine: SnapEngine | None = None,
        click_distance: float = CLICK_DISTANCE,
    ) -> None:
        self._hit = hit_tester or HitTester()
        self._snap = snap_engine or SnapEngine()
        self._click_distance = click_distance
        self._state: DragState = Idle()

    # --- State ---

    @property
    def state(self) -> DragState:
        return self._state

    @property
    def is_active(self) -> bool:
        return isinstance(self._state, Active)

    @property
    def session(self) -> DragSession | None:
        return self._state.session if isinstance(self._state, Active) else None

    @property
    def hidden_ids(self) -> frozenset[int]:
        session = self.session
        return session.hidden_ids if session else frozenset()

    # --- Gesture ---

    def press(self, x: float, y: float, clip: Clip, geometry: ClipGeometry) -> bool:
        """Start editing a point under (x, y), or create one on the curve.

        Returns False, staying idle, when neither a point nor the curve is
        close enough; the caller then routes the gesture elsewhere.
        """
        if isinstance(self._state, Active):
            raise RuntimeError("an envelope drag is already in progress")

        curve = clip.envelope
        point = self._hit.point_at(x, y, curve, geometry)
        is_new = False
        if point is None:
            if not self._hit.curve_hit(x, y, curve, geometry):
                return False
            time = geometry.clamp_time(geometry.x_to_time(x))
            point = EnvelopePoint(time, geometry.y_to_gain(y))
            curve.insert(point)
            is_new = True
            log.debug("Created point %d on clip %s", point.id, clip.name)

        self._state = Active(
            DragSession(
                clip=clip,
                geometry=geometry,
                point_id=point.id,
                original_time=point.time,
                original_gain=point.gain,
                start_x=x,
                start_y=y,
                is_new_point=is_new,
                last_x=x,
                last_y=y,
            )
        )
        return True

    def move(self, x: float, y: float) -> DragFeedback | None:
        """Follow the pointer; returns the live gain, or None when idle."""
        session = self.session
        if session is None:
            return None
        session.last_x, session.last_y = x, y

        geometry = session.geometry
        curve = session.clip.envelope
        time = geometry.clamp_time(geometry.x_to_time(x))
        gain = geometry.y_to_gain(y)

        # Crossed points are judged against the raw cursor time so that a
        # point being passed over can never be snapped onto.
        lo = min(session.original_time, time)
        hi = max(session.original_time, time)
        siblings = [p for p in curve if p.id != session.point_id]
        session.hidden_ids = frozenset(p.id for p in siblings if lo < p.time < hi)

        visible = [p for p in siblings if p.id not in session.hidden_ids]
        snapped = self._snap.snap(time, gain, visible)

        curve.move(session.point_id, snapped.time, snapped.gain)
        session.feedback = DragFeedback(snapped.time, snapped.gain)
        return session.feedback

    def release(self, x: float, y: float) -> DragOutcome | None:
        """Finish the gesture at (x, y) and return to idle."""
        session = self.session
        if session is None:
            return None
        self._state = Idle()

        curve = session.clip.envelope
        moved = distance(session.start_x, session.start_y, x, y)

        if moved < self._click_distance:
            if session.is_new_point:
                return DragOutcome(DragOutcomeKind.CREATED, session.point_id)
            curve.remove_by_id(session.point_id)
            log.debug("Deleted point %d by click", session.point_id)
            return DragOutcome(DragOutcomeKind.DELETED, session.point_id, (session.point_id,))

        removed = tuple(
            p.id for p in curve.points if p.id in session.hidden_ids
        )
        for point_id in removed:
            curve.remove_by_id(point_id)
        if removed:
            log.debug("Drag of point %d removed crossed points %s", session.point_id, removed)
        return DragOutcome(DragOutcomeKind.MOVED, session.point_id, removed)

    def cancel(self) -> DragOutcome | None:
        """Pointer left the surface: release at the last known position."""
        session = self.session
        if session is None:
            return None
        return self.release(session.last_x, session.last_y)
