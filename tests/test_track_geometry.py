import math

import pydeck as pdk

from flightview.track_geometry import (
    TrackGeometryBuilder, altitude_color, build_deck, estimate_zoom, interpolate_color
)

START = (250, 204, 21)
END = (239, 68, 68)


def make_track(n, alt_step=10.0):
    return [(8.0 + i * 0.001, 47.0 + i * 0.0005, i * alt_step) for i in range(n)]


def test_five_points_give_four_gradient_segments():
    segments = TrackGeometryBuilder().build_segments(make_track(5))
    assert len(segments) == 4
    assert segments[0].color == START
    assert segments[-1].color == END
    assert segments[1].color == interpolate_color(START, END, 1 / 3)


def test_single_segment_uses_start_color():
    segments = TrackGeometryBuilder().build_segments(make_track(2))
    assert len(segments) == 1
    assert segments[0].color == START


def test_short_track_yields_no_segments():
    builder = TrackGeometryBuilder()
    assert builder.build_segments([]) == []
    geometry = builder.build(make_track(1))
    assert geometry.is_empty
    assert geometry.start_point == geometry.end_point


def test_non_finite_positions_skipped_and_altitude_zeroed():
    track = [(8.0, 47.0, 5.0), (math.nan, 47.1, 5.0), (8.1, 47.1, math.nan), (8.2, 47.2, 7.0)]
    segments = TrackGeometryBuilder().build_segments(track)
    assert len(segments) == 2
    assert segments[0].end == (8.1, 47.1, 0.0)


def test_plan_view_flattens_altitude():
    segments = TrackGeometryBuilder().build_segments(make_track(3), is_3d=False)
    assert all(s.start[2] == 0.0 and s.end[2] == 0.0 for s in segments)
    segments_3d = TrackGeometryBuilder().build_segments(make_track(3), is_3d=True)
    assert segments_3d[-1].end[2] == 20.0


def test_viewport_pitch_and_center():
    builder = TrackGeometryBuilder()
    track = make_track(5)
    view_3d = builder.build_viewport(track, is_3d=True)
    view_2d = builder.build_viewport(track, is_3d=False)
    assert view_3d.pitch == 60
    assert view_2d.pitch == 0
    assert view_3d.bearing == 0
    assert abs(view_3d.longitude - 8.002) < 1e-9
    assert abs(view_3d.latitude - 47.001) < 1e-9
    assert builder.build_viewport([]) is None


def test_zoom_is_clamped():
    assert 10 <= estimate_zoom(make_track(5)) <= 18
    wide = [(0.0, 0.0, 0.0), (40.0, 30.0, 0.0)]
    assert estimate_zoom(wide) == 10
    assert estimate_zoom([(8.0, 47.0, 0.0)]) == 18


def test_altitude_markers_are_down_sampled():
    markers = TrackGeometryBuilder().build_altitude_markers(make_track(1700, alt_step=0.1))
    assert len(markers) == 850
    assert markers[0].color == (56, 189, 248)


def test_altitude_color_ramp():
    assert altitude_color(-5) == (56, 189, 248)
    assert altitude_color(50) == (245, 158, 11)
    assert altitude_color(500) == (239, 68, 68)


def test_build_deck_layers():
    geometry = TrackGeometryBuilder().build(make_track(10))
    deck = build_deck(geometry, theme='light')
    assert isinstance(deck, pdk.Deck)
    assert len(deck.layers) == 3
    assert 'positron' in deck.map_style
