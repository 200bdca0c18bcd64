"""Tests for point and curve hit testing."""

import pytest

from envelope_editor.core.constants import NEG_INF
from envelope_editor.core.coordinates import ClipGeometry, CoordinateMapper, GainScale
from envelope_editor.core.envelope import EnvelopeCurve, EnvelopePoint
from envelope_editor.core.hit_test import (
    HitTester,
    Segment,
    build_segments,
    distance_to_segment,
)


@pytest.fixture
def hit():
    return HitTester()


class TestDistanceToSegment:
    def test_perpendicular(self):
        seg = Segment(0.0, 0.0, 10.0, 0.0)
        assert distance_to_segment(5.0, 3.0, seg) == pytest.approx(3.0)

    def test_beyond_end_uses_endpoint(self):
        seg = Segment(0.0, 0.0, 10.0, 0.0)
        assert distance_to_segment(13.0, 4.0, seg) == pytest.approx(5.0)

    def test_before_start_uses_endpoint(self):
        seg = Segment(0.0, 0.0, 10.0, 0.0)
        assert distance_to_segment(-3.0, -4.0, seg) == pytest.approx(5.0)

    def test_zero_length_segment(self):
        seg = Segment(2.0, 2.0, 2.0, 2.0)
        assert distance_to_segment(5.0, 6.0, seg) == pytest.approx(5.0)

    def test_diagonal(self):
        seg = Segment(0.0, 0.0, 10.0, 10.0)
        assert distance_to_segment(10.0, 0.0, seg) == pytest.approx(50 ** 0.5)


class TestBuildSegments:
    """Tests for the rendered polyline."""

    def test_empty_curve_is_flat_unity_line(self, geometry):
        segments = build_segments(EnvelopeCurve(), geometry)
        y0 = geometry.gain_to_y(0.0)
        assert segments == [Segment(0.0, y0, 200.0, y0)]

    def test_lead_in_interior_and_trailing(self, geometry):
        a, b = EnvelopePoint(0.5, 0.0), EnvelopePoint(1.5, -6.0)
        segments = build_segments(EnvelopeCurve([a, b]), geometry)
        assert len(segments) == 3

        lead, mid, tail = segments
        assert (lead.x1, lead.y1) == (0.0, geometry.gain_to_y(0.0))
        assert (lead.x2, lead.end_id) == (50.0, a.id)
        assert (mid.start_id, mid.end_id) == (a.id, b.id)
        assert (tail.x1, tail.x2) == (150.0, 200.0)
        assert tail.y1 == tail.y2 == geometry.gain_to_y(-6.0)
        assert tail.end_id is None

    def test_no_lead_in_when_first_point_at_start(self, geometry):
        a = EnvelopePoint(0.0, -12.0)
        segments = build_segments(EnvelopeCurve([a]), geometry)
        assert len(segments) == 1
        assert segments[0].start_id == a.id
        assert segments[0].y1 == geometry.gain_to_y(-12.0)

    def test_no_trailing_when_last_point_at_end(self, geometry):
        a = EnvelopePoint(2.0, -3.0)
        segments = build_segments(EnvelopeCurve([a]), geometry)
        assert len(segments) == 1
        assert segments[0].x2 == 200.0
        assert segments[0].end_id == a.id

    def test_lead_in_ramps_from_unity(self, geometry):
        segments = build_segments(EnvelopeCurve([EnvelopePoint(1.0, -30.0)]), geometry)
        assert segments[0].y1 == geometry.gain_to_y(0.0)
        assert segments[0].y2 == geometry.gain_to_y(-30.0)

    def test_silent_point_renders_at_bottom(self, geometry):
        segments = build_segments(EnvelopeCurve([EnvelopePoint(1.0, NEG_INF)]), geometry)
        assert segments[-1].y1 == geometry.bottom

    def test_hidden_points_skipped(self, geometry):
        a, b, c = EnvelopePoint(0.5, 0.0), EnvelopePoint(1.0, -40.0), EnvelopePoint(1.5, 0.0)
        segments = build_segments(EnvelopeCurve([a, b, c]), geometry, hidden_ids={b.id})
        interior = [s for s in segments if s.start_id and s.end_id]
        assert [(s.start_id, s.end_id) for s in interior] == [(a.id, c.id)]

    def test_all_hidden_falls_back_to_unity_line(self, geometry):
        a = EnvelopePoint(1.0, -20.0)
        segments = build_segments(EnvelopeCurve([a]), geometry, hidden_ids={a.id})
        assert len(segments) == 1
        assert segments[0].y1 == geometry.gain_to_y(0.0)


class TestPointHit:
    def test_on_point(self, hit, geometry):
        p = EnvelopePoint(1.0, -6.0)
        x, y = geometry.point_to_pixel(p)
        assert hit.point_hit(x, y, p, geometry)

    def test_at_radius(self, hit, geometry):
        p = EnvelopePoint(1.0, -6.0)
        x, y = geometry.point_to_pixel(p)
        assert hit.point_hit(x + 9.0, y + 12.0, p, geometry)  # exactly 15 px

    def test_outside_radius(self, hit, geometry):
        p = EnvelopePoint(1.0, -6.0)
        x, y = geometry.point_to_pixel(p)
        assert not hit.point_hit(x + 15.5, y, p, geometry)

    def test_point_at_returns_first_in_curve_order(self, hit, geometry):
        a, b = EnvelopePoint(1.0, -6.0), EnvelopePoint(1.05, -6.0)
        curve = EnvelopeCurve([a, b])
        x, y = geometry.point_to_pixel(b)
        assert hit.point_at(x, y, curve, geometry) is a

    def test_point_at_skips_hidden(self, hit, geometry):
        a, b = EnvelopePoint(1.0, -6.0), EnvelopePoint(1.05, -6.0)
        curve = EnvelopeCurve([a, b])
        x, y = geometry.point_to_pixel(b)
        assert hit.point_at(x, y, curve, geometry, hidden_ids={a.id}) is b

    def test_point_at_miss(self, hit, geometry):
        curve = EnvelopeCurve([EnvelopePoint(1.0, -6.0)])
        assert hit.point_at(10.0, 90.0, curve, geometry) is None


class TestCurveHit:
    """Tests for the 16 px curve threshold that decides point creation."""

    def test_on_unity_line(self, hit, geometry):
        y0 = geometry.gain_to_y(0.0)
        assert hit.curve_hit(80.0, y0, EnvelopeCurve(), geometry)

    def test_within_threshold(self, hit, geometry):
        y0 = geometry.gain_to_y(0.0)
        assert hit.curve_hit(80.0, y0 + 16.0, EnvelopeCurve(), geometry)

    def test_beyond_threshold(self, hit, geometry):
        y0 = geometry.gain_to_y(0.0)
        assert not hit.curve_hit(80.0, y0 + 16.5, EnvelopeCurve(), geometry)

    def test_near_sloped_segment(self, hit, geometry):
        curve = EnvelopeCurve([EnvelopePoint(0.0, 12.0), EnvelopePoint(2.0, -60.0)])
        # Line runs from (0, 0) to (200, 100); (100, 50) is on it
        assert hit.curve_hit(100.0, 50.0, curve, geometry)
        assert not hit.curve_hit(100.0, 90.0, curve, geometry)

    def test_nearest_segment_reports_distance(self, hit, geometry):
        a = EnvelopePoint(1.0, -6.0)
        curve = EnvelopeCurve([a])
        ay = geometry.gain_to_y(-6.0)
        seg, d = hit.nearest_segment(170.0, ay + 4.0, curve, geometry)
        assert seg.start_id == a.id and seg.end_id is None
        assert d == pytest.approx(4.0)


class TestHover:
    def test_over_curve(self, hit, geometry):
        y0 = geometry.gain_to_y(0.0)
        assert hit.is_over_curve(50.0, y0 + 7.0, EnvelopeCurve(), geometry)
        assert not hit.is_over_curve(50.0, y0 + 8.0, EnvelopeCurve(), geometry)

    def test_outside_clip_is_not_over_curve(self, hit, geometry):
        y0 = geometry.gain_to_y(0.0)
        assert not hit.is_over_curve(250.0, y0, EnvelopeCurve(), geometry)

    def test_hovered_segment(self, hit, geometry):
        a, b = EnvelopePoint(0.5, 0.0), EnvelopePoint(1.5, -6.0)
        curve = EnvelopeCurve([a, b])
        y = (geometry.gain_to_y(0.0) + geometry.gain_to_y(-6.0)) / 2
        seg = hit.hovered_segment(100.0, y, curve, geometry)
        assert (seg.start_id, seg.end_id) == (a.id, b.id)

    def test_no_hovered_segment_far_away(self, hit, geometry):
        assert hit.hovered_segment(100.0, 95.0, EnvelopeCurve(), geometry) is None

    def test_hover_on_slope_into_silence(self, hit, geometry):
        """A segment ending at -inf is hoverable along its drawn slope."""
        a, b = EnvelopePoint(0.5, 0.0), EnvelopePoint(1.5, NEG_INF)
        curve = EnvelopeCurve([a, b])
        (ax, ay), (bx, by) = geometry.point_to_pixel(a), geometry.point_to_pixel(b)
        mx, my = (ax + bx) / 2, (ay + by) / 2

        assert hit.curve_hit(mx, my, curve, geometry)
        assert hit.is_over_curve(mx, my, curve, geometry)
        assert hit.hovered_segment(mx, my, curve, geometry).start_id == a.id

    def test_hover_on_cubic_segment(self, hit):
        """Under the cubic scale hover follows the straight pixel segment."""
        geometry = ClipGeometry(0.0, 0.0, 200.0, 101.0, 2.0, CoordinateMapper(GainScale.CUBIC))
        a, b = EnvelopePoint(0.0, 12.0), EnvelopePoint(2.0, -60.0)
        curve = EnvelopeCurve([a, b])
        (ax, ay), (bx, by) = geometry.point_to_pixel(a), geometry.point_to_pixel(b)
        mx, my = (ax + bx) / 2, (ay + by) / 2

        assert hit.curve_hit(mx, my, curve, geometry)
        assert hit.is_over_curve(mx, my, curve, geometry)
        seg = hit.hovered_segment(mx, my, curve, geometry)
        assert (seg.start_id, seg.end_id) == (a.id, b.id)
