"""User settings stored as JSON in ``~/.envelope_editor/config.json``.

Values are addressed with dot paths, e.g. ``config.get("editor.gain_scale")``.
Whatever is on disk is layered over ``DEFAULT_CONFIG``, so settings added in
later versions always have a value.
"""

from __future__ import annotations

import copy
import json
import logging
from pathlib import Path
from typing import Any

from .constants import (
    PIXELS_PER_SECOND,
    SNAP_THRESHOLD_DB,
    SNAP_THRESHOLD_TIME,
    TRACK_HEIGHT,
)
from .coordinates import GainScale

log = logging.getLogger(__name__)

DEFAULT_CONFIG: dict[str, Any] = {
    "version": "1.0",
    "editor": {
        "envelope_mode": False,
        "gain_scale": GainScale.LINEAR.value,  # "linear" or "cubic"
        "snap_time_threshold": SNAP_THRESHOLD_TIME,  # seconds
        "snap_gain_threshold": SNAP_THRESHOLD_DB,  # dB
    },
    "layout": {
        "pixels_per_second": PIXELS_PER_SECOND,
        "track_height": TRACK_HEIGHT,
    },
    "window": {
        "geometry": None,  # base64 of QMainWindow.saveGeometry()
    },
}


def _layered(defaults: dict, overrides: dict) -> dict:
    """Copy of *defaults* with *overrides* applied, section by section."""
    result = copy.deepcopy(defaults)
    for key, value in overrides.items():
        current = result.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            result[key] = _layered(current, value)
        else:
            result[key] = value
    return result


class ConfigManager:
    """Reads, updates and persists the editor settings."""

    def __init__(self, config_dir: Path | None = None) -> None:
        self.config_dir = config_dir or Path.home() / ".envelope_editor"
        self.config_file = self.config_dir / "config.json"
        self._data: dict[str, Any] = {}
        self._load()

    # --- Persistence ---

    def _load(self) -> None:
        self.config_dir.mkdir(parents=True, exist_ok=True)
        if not self.config_file.exists():
            self._data = copy.deepcopy(DEFAULT_CONFIG)
            self._save()
            return

        try:
            stored = json.loads(self.config_file.read_text(encoding="utf-8"))
            if not isinstance(stored, dict):
                raise ValueError("top level of the settings file must be an object")
        except (json.JSONDecodeError, OSError, ValueError) as e:
            log.warning("Could not read %s (%s); using defaults", self.config_file, e)
            self._data = copy.deepcopy(DEFAULT_CONFIG)
            return
        self._data = _layered(DEFAULT_CONFIG, stored)

    def _save(self) -> None:
        try:
            text = json.dumps(self._data, indent=2, ensure_ascii=False)
            self.config_file.write_text(text, encoding="utf-8")
        except OSError as e:
            log.warning("Could not write %s: %s", self.config_file, e)

    # --- Access ---

    def get(self, key_path: str, default: Any = None) -> Any:
        """Look up a dotted key; *default* when any part is missing or null.

        Example:
            config.get("layout.pixels_per_second", 100.0)
        """
        node: Any = self._data
        for key in key_path.split("."):
            if not isinstance(node, dict) or node.get(key) is None:
                return default
            node = node[key]
        return node

    def set(self, key_path: str, value: Any) -> None:
        """Store *value* under a dotted key, creating sections as needed, then save."""
        *sections, leaf = key_path.split(".")
        node = self._data
        for key in sections:
            child = node.get(key)
            if not isinstance(child, dict):
                child = node[key] = {}
            node = child
        node[leaf] = value
        self._save()

    def get_all(self) -> dict[str, Any]:
        return copy.deepcopy(self._data)

    def reset(self) -> None:
        self._data = copy.deepcopy(DEFAULT_CONFIG)
        self._save()

    def gain_scale(self) -> GainScale:
        raw = self.get("editor.gain_scale", GainScale.LINEAR.value)
        try:
            return GainScale(raw)
        except ValueError:
            log.warning("Unknown gain scale %r, falling back to linear", raw)
            return GainScale.LINEAR


_global_config: ConfigManager | None = None


def get_config() -> ConfigManager:
    """Process-wide settings, created on first use."""
    global _global_config
    if _global_config is None:
        _global_config = ConfigManager()
    return _global_config
