"""Main window: toolbar with the envelope toggle above the scrolling track canvas."""

from __future__ import annotations

import logging

from PyQt6.QtCore import QByteArray
from PyQt6.QtGui import QAction, QKeySequence
from PyQt6.QtWidgets import QMainWindow, QScrollArea, QToolBar, QWidget

from ..core.config import ConfigManager, get_config
from ..core.constants import (
    PIXELS_PER_SECOND,
    SNAP_THRESHOLD_DB,
    SNAP_THRESHOLD_TIME,
    TRACK_HEIGHT,
)
from ..core.coordinates import CoordinateMapper
from ..core.demo import demo_tracks
from ..core.envelope_drag import DragController
from ..core.gestures import GestureDispatcher
from ..core.hit_test import HitTester
from ..core.layout import TrackLayout
from ..core.snap import SnapEngine
from .widgets.track_canvas import TrackCanvas

log = logging.getLogger(__name__)


def build_dispatcher(config: ConfigManager) -> GestureDispatcher:
    """Wire the editing engine from user settings."""
    mapper = CoordinateMapper(config.gain_scale())
    layout = TrackLayout(
        track_height=config.get("layout.track_height", TRACK_HEIGHT),
        pixels_per_second=config.get("layout.pixels_per_second", PIXELS_PER_SECOND),
        mapper=mapper,
    )
    hit = HitTester()
    snap = SnapEngine(
        time_threshold=config.get("editor.snap_time_threshold", SNAP_THRESHOLD_TIME),
        gain_threshold=config.get("editor.snap_gain_threshold", SNAP_THRESHOLD_DB),
    )
    dispatcher = GestureDispatcher(
        tracks=demo_tracks(),
        layout=layout,
        drag_controller=DragController(hit_tester=hit, snap_engine=snap),
        hit_tester=hit,
    )
    dispatcher.envelope_mode = bool(config.get("editor.envelope_mode", False))
    return dispatcher


class EditorWindow(QMainWindow):
    def __init__(self, config: ConfigManager | None = None, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._config = config or get_config()
        self.setWindowTitle("Envelope Editor")
        self.resize(1200, 520)

        self._canvas = TrackCanvas(build_dispatcher(self._config))
        self._canvas.envelope_changed.connect(self._on_envelope_changed)

        scroll = QScrollArea()
        scroll.setWidget(self._canvas)
        scroll.setWidgetResizable(False)
        self.setCentralWidget(scroll)

        self._build_toolbar()
        self._restore_window_state()

    @property
    def canvas(self) -> TrackCanvas:
        return self._canvas

    def _build_toolbar(self) -> None:
        toolbar = QToolBar("Tools")
        toolbar.setMovable(False)
        self.addToolBar(toolbar)

        self._envelope_action = QAction("Envelope", self)
        self._envelope_action.setCheckable(True)
        self._envelope_action.setChecked(self._canvas.dispatcher.envelope_mode)
        self._envelope_action.setShortcut(QKeySequence("E"))
        self._envelope_action.setToolTip("Edit clip gain envelopes (E)")
        self._envelope_action.toggled.connect(self._on_envelope_toggled)
        toolbar.addAction(self._envelope_action)

        toolbar.addSeparator()

        add_track = QAction("Add track", self)
        add_track.triggered.connect(self._on_add_track)
        toolbar.addAction(add_track)

    def _restore_window_state(self) -> None:
        geometry_b64 = self._config.get("window.geometry")
        if geometry_b64 is not None:
            self.restoreGeometry(QByteArray.fromBase64(geometry_b64.encode("ascii")))

    # ── Slots ───────────────────────────────────────────────

    def _on_envelope_toggled(self, checked: bool) -> None:
        self._canvas.set_envelope_mode(checked)
        self._config.set("editor.envelope_mode", checked)
        log.info("Envelope mode %s", "on" if checked else "off")

    def _on_add_track(self) -> None:
        track = self._canvas.dispatcher.add_track()
        log.info("Added %s", track.name)

    def _on_envelope_changed(self) -> None:
        outcome = self._canvas.dispatcher.last_outcome
        if outcome is not None:
            self.statusBar().showMessage(f"Envelope point {outcome.kind.value}", 2000)

    def closeEvent(self, event) -> None:  # noqa: N802
        geometry_b64 = self.saveGeometry().toBase64().data().decode("ascii")
        self._config.set("window.geometry", geometry_b64)
        super().closeEvent(event)
