"""Envelope Editor: per-clip gain automation drawn over the waveform."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("envelope-editor")
except PackageNotFoundError:
    # Running from a source checkout without installed metadata
    try:
        import tomllib
        from pathlib import Path

        _toml = Path(__file__).resolve().parent.parent / "pyproject.toml"
        with open(_toml, "rb") as f:
            __version__ = tomllib.load(f)["project"]["version"]
    except (OSError, KeyError, ValueError):
        __version__ = "0.0.0-dev"
