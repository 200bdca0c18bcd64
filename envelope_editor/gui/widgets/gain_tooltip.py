"""Floating gain readout shown next to the cursor while dragging a point."""

from __future__ import annotations

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import QLabel, QWidget

_OFFSET_X = 10
_OFFSET_Y = -25


class GainTooltipLabel(QLabel):
    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setObjectName("gainTooltip")
        self.setAttribute(Qt.WidgetAttribute.WA_TransparentForMouseEvents)
        self.hide()

    def show_at(self, text: str, x: float, y: float) -> None:
        self.setText(text)
        self.adjustSize()
        self.move(int(x) + _OFFSET_X, int(y) + _OFFSET_Y)
        self.show()
        self.raise_()
