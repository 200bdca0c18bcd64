"""Gain range, interaction thresholds, and timeline layout constants."""

import math

# Gain domain (dB). Anything below MIN_DB is treated as silence.
MIN_DB = -60.0
MAX_DB = 12.0
NEG_INF = -math.inf

# Bottom strip of the clip body reserved for -inf dB (px)
INFINITY_ZONE_HEIGHT = 1.0

# Hit testing (px)
POINT_HIT_RADIUS = 15.0
CURVE_HIT_THRESHOLD = 16.0
CURVE_HOVER_THRESHOLD = 8.0

# A release closer than this to the press counts as a stationary click (px)
CLICK_DISTANCE = 3.0

# Snapping
SNAP_THRESHOLD_TIME = 0.05  # seconds
SNAP_THRESHOLD_DB = 6.0

# Timeline layout (px)
TRACK_HEIGHT = 114
TRACK_GAP = 2
INITIAL_GAP = 2
PIXELS_PER_SECOND = 100.0
LEFT_PADDING = 12
CLIP_HEADER_HEIGHT = 20
