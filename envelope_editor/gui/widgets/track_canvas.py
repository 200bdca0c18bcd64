"""Track canvas: clips, envelopes, and pointer routing for envelope editing."""

from __future__ import annotations

from PyQt6.QtCore import QPointF, QRectF, Qt, pyqtSignal
from PyQt6.QtGui import QColor, QFont, QPainter, QPainterPath, QPen
from PyQt6.QtWidgets import QWidget

from ...core.envelope import Clip
from ...core.gestures import EnvelopeGesture, GestureDispatcher
from ...core.hit_test import build_segments
from ..theme import (
    BG_CANVAS,
    BG_TRACK_IDLE,
    BG_TRACK_SELECTED,
    CLIP_BODY,
    CLIP_HEADER,
    CLIP_HEADER_HOVER,
    ENVELOPE_FILL,
    ENVELOPE_LINE,
    ENVELOPE_POINT,
    SELECTION_OVERLAY,
    TEXT_PRIMARY,
    track_color,
)
from .gain_tooltip import GainTooltipLabel

_POINT_RADIUS = 4.0
_LINE_WIDTH = 2.0
_HOVER_LINE_WIDTH = 3.5
_CANVAS_WIDTH = 2000

_CURSORS = {
    "default": Qt.CursorShape.ArrowCursor,
    "grab": Qt.CursorShape.OpenHandCursor,
    "grabbing": Qt.CursorShape.ClosedHandCursor,
    "copy": Qt.CursorShape.DragCopyCursor,
}


class TrackCanvas(QWidget):
    """Draws the tracks and forwards pointer events to a GestureDispatcher."""

    envelope_changed = pyqtSignal()  # Emitted when an envelope edit is committed

    def __init__(
        self,
        dispatcher: GestureDispatcher | None = None,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self._dispatcher = dispatcher or GestureDispatcher()
        self._dispatcher.on_change = self._on_dispatcher_changed
        self._tooltip = GainTooltipLabel(self)

        self.setMouseTracking(True)
        self._update_size()

    @property
    def dispatcher(self) -> GestureDispatcher:
        return self._dispatcher

    def set_envelope_mode(self, enabled: bool) -> None:
        self._dispatcher.envelope_mode = enabled

    def _update_size(self) -> None:
        height = int(self._dispatcher.layout.content_height(len(self._dispatcher.tracks)))
        self.setMinimumSize(_CANVAS_WIDTH, height)

    def _on_dispatcher_changed(self) -> None:
        self.setCursor(_CURSORS.get(self._dispatcher.cursor, Qt.CursorShape.ArrowCursor))
        tip = self._dispatcher.tooltip
        if tip is None:
            self._tooltip.hide()
        else:
            self._tooltip.show_at(tip.text, tip.x, tip.y)
        self._update_size()
        self.update()

    # ── Mouse events ────────────────────────────────────────

    def mousePressEvent(self, event) -> None:  # noqa: N802
        if event.button() != Qt.MouseButton.LeftButton:
            return
        pos = event.position()
        self._dispatcher.pointer_down(pos.x(), pos.y())

    def mouseMoveEvent(self, event) -> None:  # noqa: N802
        pos = event.position()
        self._dispatcher.pointer_move(pos.x(), pos.y())

    def mouseReleaseEvent(self, event) -> None:  # noqa: N802
        if event.button() != Qt.MouseButton.LeftButton:
            return
        was_envelope = isinstance(self._dispatcher.gesture, EnvelopeGesture)
        pos = event.position()
        self._dispatcher.pointer_up(pos.x(), pos.y())
        if was_envelope:
            self.envelope_changed.emit()

    def leaveEvent(self, event) -> None:  # noqa: N802
        was_envelope = isinstance(self._dispatcher.gesture, EnvelopeGesture)
        self._dispatcher.pointer_leave()
        if was_envelope:
            self.envelope_changed.emit()
        super().leaveEvent(event)

    # ── Paint ───────────────────────────────────────────────

    def paintEvent(self, event) -> None:  # noqa: N802
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        painter.fillRect(0, 0, self.width(), self.height(), QColor(BG_CANVAS))

        d = self._dispatcher
        layout = d.layout
        for track_index, track in enumerate(d.tracks):
            selected = track_index in d.selected_tracks
            row = QRectF(0, layout.track_y(track_index), self.width(), layout.track_height)
            painter.fillRect(row, QColor(BG_TRACK_SELECTED if selected else BG_TRACK_IDLE))
            for clip in track.clips:
                self._draw_clip(painter, clip, track_index)
            if selected and d.time_selection is not None:
                x0 = layout.time_to_x(d.time_selection.start_time)
                x1 = layout.time_to_x(d.time_selection.end_time)
                overlay = QColor(SELECTION_OVERLAY)
                overlay.setAlphaF(0.15)
                painter.fillRect(QRectF(x0, row.y(), x1 - x0, row.height()), overlay)

        painter.end()

    def _draw_clip(self, painter: QPainter, clip: Clip, track_index: int) -> None:
        d = self._dispatcher
        header = d.layout.header_rect(clip, track_index)
        geometry = d.layout.body_geometry(clip, track_index)

        hovered = d.hovered_header is not None and d.hovered_header.clip_id == clip.id
        painter.fillRect(
            QRectF(geometry.x, geometry.y, geometry.width, geometry.height),
            QColor(track_color(CLIP_BODY, track_index)),
        )
        painter.fillRect(
            QRectF(header.x, header.y, header.width, header.height),
            QColor(track_color(CLIP_HEADER_HOVER if hovered else CLIP_HEADER, track_index)),
        )
        painter.setPen(QColor(TEXT_PRIMARY))
        painter.setFont(QFont("Inter", 8, QFont.Weight.Bold if clip.selected else QFont.Weight.Normal))
        painter.drawText(QPointF(header.x + 6, header.y + header.height - 6), clip.name)

        session = d.drag.session
        hidden = session.hidden_ids if session and session.clip is clip else frozenset()
        segments = build_segments(clip.envelope, geometry, hidden)

        # Fill under the envelope
        fill = QPainterPath()
        fill.moveTo(segments[0].x1, geometry.bottom)
        fill.lineTo(segments[0].x1, segments[0].y1)
        for seg in segments:
            fill.lineTo(seg.x2, seg.y2)
        fill.lineTo(segments[-1].x2, geometry.bottom)
        fill.closeSubpath()
        fill_color = QColor(track_color(ENVELOPE_FILL, track_index))
        fill_color.setAlphaF(0.6 if d.envelope_mode else 0.35)
        painter.fillPath(fill, fill_color)

        line = QPainterPath()
        line.moveTo(segments[0].x1, segments[0].y1)
        for seg in segments:
            line.lineTo(seg.x2, seg.y2)
        painter.setPen(QPen(QColor(ENVELOPE_LINE), _LINE_WIDTH))
        painter.setBrush(Qt.BrushStyle.NoBrush)
        painter.drawPath(line)

        hover = d.hovered_segment
        if hover is not None and hover.clip_id == clip.id:
            seg = hover.segment
            painter.setPen(QPen(QColor(ENVELOPE_LINE), _HOVER_LINE_WIDTH))
            painter.drawLine(QPointF(seg.x1, seg.y1), QPointF(seg.x2, seg.y2))

        if not d.envelope_mode:
            return
        painter.setPen(QPen(QColor(ENVELOPE_LINE), 1.5))
        painter.setBrush(QColor(ENVELOPE_POINT))
        for point in clip.envelope:
            if point.id in hidden:
                continue
            px, py = geometry.point_to_pixel(point)
            painter.drawEllipse(QPointF(px, py), _POINT_RADIUS, _POINT_RADIUS)
