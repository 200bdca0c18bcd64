"""Shared test fixtures."""

from __future__ import annotations

import os

import pytest

# Run Qt headless unless the caller chose a platform explicitly.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from envelope_editor.core.coordinates import ClipGeometry


@pytest.fixture(scope="session")
def qapp():
    """Provide a QApplication instance for the entire test session."""
    from PyQt6.QtWidgets import QApplication

    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    yield app


@pytest.fixture
def geometry():
    """A 2-second clip body at the origin: 100 px/s, 100 px of gain axis."""
    return ClipGeometry(x=0.0, y=0.0, width=200.0, height=101.0, duration=2.0)


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    """A ConfigManager in a temp dir installed as the global config."""
    from envelope_editor.core import config as config_module
    from envelope_editor.core.config import ConfigManager

    config = ConfigManager(tmp_path / "config")
    monkeypatch.setattr(config_module, "_global_config", config)
    yield config
