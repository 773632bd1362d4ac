"""Tests for stop detection, left-turn detection and trip duration."""

import math
from dataclasses import replace

import pytest

from gps_fix import Fix
from track_events import (
    DetectionConfig,
    analyze_track,
    compute_trip_duration,
    detect_left_turns,
    detect_stops,
    normalize_heading_delta,
)


def make_track(speeds, headings=None, timestamps=None):
    headings = headings or [0.0] * len(speeds)
    timestamps = timestamps or [float(i) for i in range(len(speeds))]
    return [
        Fix(latitude=48.0, longitude=11.0, speed=s, heading=h, timestamp=t)
        for s, h, t in zip(speeds, headings, timestamps)
    ]


class TestDetectStops:
    """Tests for the per-point stop threshold."""

    def test_threshold(self):
        track = make_track([0.2, 0.6, 0.4, 1.0])
        assert detect_stops(track, 0.5) == [0, 2]

    def test_threshold_is_strict(self):
        assert detect_stops(make_track([0.5, 0.49]), 0.5) == [1]

    def test_empty_track(self):
        assert detect_stops([]) == []

    def test_nan_speed_is_not_a_stop(self):
        assert detect_stops(make_track([math.nan, 0.1])) == [1]


class TestNormalizeHeadingDelta:
    """Tests for heading difference wraparound."""

    def test_wraparound(self):
        assert normalize_heading_delta(350.0) == -10.0
        assert normalize_heading_delta(-350.0) == 10.0

    def test_in_range(self):
        assert normalize_heading_delta(180.0) == 180.0
        assert normalize_heading_delta(-180.0) == -180.0
        assert normalize_heading_delta(-20.0) == -20.0


class TestDetectLeftTurns:
    """Tests for the sliding-window left-turn detector."""

    def test_single_turn_flagged_once(self, turning_track):
        """Test a 50 degree left turn produces one flag, not one per sample."""
        assert detect_left_turns(turning_track(turn_samples=5)) == [8]

    def test_sustained_turn_spaced_by_window(self, turning_track):
        """Test a long turn is flagged once per window-spaced cluster."""
        turns = detect_left_turns(turning_track(turn_samples=14))
        assert turns == [8, 14]
        assert all(b - a > 5 for a, b in zip(turns, turns[1:]))

    def test_heading_wraps_through_north(self, turning_track):
        """Test turning left through 0/360 still counts as a left turn."""
        track = turning_track(turn_samples=14)
        assert any(fix.heading > 300 for fix in track)
        assert detect_left_turns(track) == [8, 14]

    def test_right_turn_ignored(self, turning_track):
        assert detect_left_turns(turning_track(turn_samples=14, step=10.0)) == []

    def test_slow_vehicle_ignored(self, turning_track):
        """Test fixes at or below 0.5 knots are never turns."""
        assert detect_left_turns(turning_track(turn_samples=14, speed=0.5)) == []

    def test_min_speed_independent_of_stop_threshold(self, turning_track):
        track = turning_track(turn_samples=5, speed=0.8)
        config = DetectionConfig(stop_threshold=1.0)
        events = analyze_track(track, config)
        assert events.turns == [8]
        assert events.stops == list(range(len(track)))

    def test_short_track(self):
        """Test tracks without a full window give no turns."""
        track = make_track([5.0] * 5, headings=[90.0, 60.0, 30.0, 0.0, 330.0])
        assert detect_left_turns(track) == []

    def test_threshold_is_inclusive(self):
        track = make_track([5.0] * 6, headings=[90.0, 90.0, 90.0, 80.0, 70.0, 60.0])
        assert detect_left_turns(track, turn_threshold=-30.0) == [5]
        assert detect_left_turns(track, turn_threshold=-31.0) == []

    def test_nan_heading_never_flags(self, turning_track):
        """Test a NaN heading inside the window suppresses the turn."""
        track = turning_track(turn_samples=5)
        assert detect_left_turns(track) == [8]

        track[7] = replace(track[7], heading=math.nan)
        assert detect_left_turns(track) == []

    def test_custom_window(self, turning_track):
        assert detect_left_turns(turning_track(turn_samples=5), window_size=3) == [8]


class TestComputeTripDuration:
    """Tests for the first/last moving fix duration."""

    def test_moving_span(self):
        track = make_track([0, 0, 2, 3, 0], timestamps=[0.0, 10.0, 20.0, 35.0, 50.0])
        trip = compute_trip_duration(track, 1.0)

        assert trip.start_index == 2
        assert trip.end_index == 3
        assert trip.duration == 15.0
        assert trip.moving
        assert trip.duration_minutes == pytest.approx(0.25)

    def test_no_movement(self):
        """Test sentinel summary when nothing reaches the moving threshold."""
        trip = compute_trip_duration(make_track([0.0, 0.5, 0.9]), 1.0)
        assert (trip.duration, trip.start_index, trip.end_index) == (0.0, 0, 2)
        assert not trip.moving

    def test_empty_track(self):
        trip = compute_trip_duration([])
        assert trip.duration == 0.0
        assert trip.start_index is None
        assert trip.end_index is None

    def test_threshold_is_inclusive(self):
        trip = compute_trip_duration(make_track([1.0, 0.0, 1.0], timestamps=[5.0, 6.0, 9.0]))
        assert (trip.start_index, trip.end_index, trip.duration) == (0, 2, 4.0)

    def test_nan_speed_is_not_moving(self):
        trip = compute_trip_duration(make_track([math.nan, 2.0], timestamps=[0.0, 4.0]))
        assert (trip.start_index, trip.end_index, trip.duration) == (1, 1, 0.0)
        assert trip.moving

    def test_midnight_rollover_not_corrected(self):
        """Test a negative duration is returned as-is."""
        track = make_track([5.0, 5.0], timestamps=[86390.0, 10.0])
        assert compute_trip_duration(track).duration == -86380.0


class TestAnalyzeTrack:
    """Tests for running all detectors together."""

    def test_sample_log(self, sample_log):
        from nmea_parser import read_gps_file

        events = analyze_track(read_gps_file(sample_log))

        assert events.stops == [0, 1]
        assert events.turns == [10]
        assert (events.trip.start_index, events.trip.end_index) == (2, 19)
        assert events.trip.duration == 17.0

    def test_empty_track(self):
        events = analyze_track([])
        assert events.stops == []
        assert events.turns == []
        assert events.trip.duration == 0.0
