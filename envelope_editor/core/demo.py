"""Demo session loaded on start-up."""

from __future__ import annotations

from .envelope import Clip, Track

# (track name, [(clip name, start seconds, duration seconds), ...])
_DEMO_LAYOUT = [
    ("Track 1", [("Vocals", 0.5, 2.0), ("Harmony", 3.0, 1.5)]),
    ("Track 2", [("Bass", 0.2, 1.2), ("Synth", 2.0, 2.5), ("Lead", 5.0, 1.0)]),
    ("Track 3", [("Drums", 1.0, 3.0), ("Percussion", 5.5, 1.5)]),
]


def demo_tracks() -> list[Track]:
    """Three tracks of clips with flat (empty) envelopes."""
    tracks = []
    clip_id = 1
    for track_id, (track_name, clips) in enumerate(_DEMO_LAYOUT, start=1):
        track = Track(id=track_id, name=track_name)
        for name, start, duration in clips:
            track.clips.append(Clip(clip_id, name, start, duration))
            clip_id += 1
        tracks.append(track)
    return tracks
