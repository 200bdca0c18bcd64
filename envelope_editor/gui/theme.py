"""Editor palette and application stylesheet."""

from __future__ import annotations

import ctypes
import sys

from PyQt6.QtWidgets import QApplication

# --- Surfaces ---
BG_CANVAS = "#212433"
BG_TOOLBAR = "#1A1C27"
BG_TRACK_IDLE = "#262A3A"
BG_TRACK_SELECTED = "#2F3550"
DIVIDER = "#3A3F55"

# --- Text ---
TEXT_PRIMARY = "#E8E6E3"

# --- Accents ---
ACCENT = "#4A90E2"
ENVELOPE_LINE = "#FF3B3B"
ENVELOPE_POINT = "#FFFFFF"
SELECTION_OVERLAY = "#FFFFFF"  # drawn with alpha

# Clip colours per track row; rows past the list use the last entry
CLIP_BODY = ["#6B93D6", "#9794E0", "#D38BC4", "#8B95A5"]
CLIP_HEADER = ["#4F78BF", "#7B78C9", "#B96FA9", "#6B7385"]
CLIP_HEADER_HOVER = ["#5E87CE", "#8A87D8", "#C87EB8", "#7A8294"]
ENVELOPE_FILL = ["#B3C8E6", "#D0CFE6", "#E8C7E0", "#C9CED8"]

FONT_FAMILY = '"Inter", "Segoe UI", sans-serif'
FONT_MONO = '"Cascadia Code", Consolas, monospace'


def track_color(palette: list[str], track_index: int) -> str:
    return palette[min(track_index, len(palette) - 1)]


def get_stylesheet() -> str:
    return f"""
    QMainWindow, QWidget {{
        background-color: {BG_CANVAS};
        color: {TEXT_PRIMARY};
        font-family: {FONT_FAMILY};
        font-size: 13px;
    }}
    QToolBar {{
        background-color: {BG_TOOLBAR};
        border-bottom: 1px solid {DIVIDER};
        spacing: 6px;
        padding: 4px;
    }}
    QToolButton {{
        padding: 4px 10px;
        border-radius: 4px;
    }}
    QToolButton:checked {{
        background-color: {ACCENT};
        color: {BG_TOOLBAR};
    }}
    QLabel#gainTooltip {{
        background-color: rgba(0, 0, 0, 230);
        color: white;
        border-radius: 3px;
        padding: 2px 6px;
        font-family: {FONT_MONO};
        font-size: 11px;
    }}
    """


def enable_dark_title_bar(hwnd: int) -> None:
    """Enable the Windows 10/11 dark title bar via DwmSetWindowAttribute."""
    if sys.platform != "win32":
        return
    try:
        DWMWA_USE_IMMERSIVE_DARK_MODE = 20
        ctypes.windll.dwmapi.DwmSetWindowAttribute(
            hwnd,
            DWMWA_USE_IMMERSIVE_DARK_MODE,
            ctypes.byref(ctypes.c_int(1)),
            4,
        )
    except (AttributeError, OSError):
        pass  # Older Windows without DWM dark mode


def apply_theme(app: QApplication) -> None:
    app.setStyle("Fusion")
    app.setStyleSheet(get_stylesheet())
