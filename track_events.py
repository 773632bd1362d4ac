#!/usr/bin/env python3
"""
Kinematic events derived from a GPS track: stops, left turns and the
duration of the trip between the first and last moving fix.

All functions are pure: they take a list of Fix objects (the track, in
file order) and return new values without touching the track.
"""

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class DetectionConfig:
    """
    Thresholds used by the event detectors.

    The three speed thresholds serve different purposes and are kept
    independent of each other.

    Attributes:
        stop_threshold (float): Speed (knots) below which a fix is a stop
        turn_threshold (float): Summed heading change (degrees) at or below which a left turn is flagged
        window_size (int): Number of consecutive heading changes summed by the turn detector
        moving_threshold (float): Speed (knots) from which a fix counts as moving for the trip duration
        turn_min_speed (float): Speed (knots) a fix must exceed to be considered by the turn detector
    """
    stop_threshold: float = 0.5
    turn_threshold: float = -30.0
    window_size: int = 5
    moving_threshold: float = 1.0
    turn_min_speed: float = 0.5


@dataclass(frozen=True)
class TripSummary:
    """
    Elapsed time between the first and last moving fix.

    When no fix is moving, start_index/end_index span the whole track and
    duration is 0. For an empty track both indices are None.
    """
    duration: float
    start_index: Optional[int] = None
    end_index: Optional[int] = None
    moving: bool = False

    @property
    def duration_minutes(self):
        return self.duration / 60.0


@dataclass(frozen=True)
class TrackEvents:
    """Everything the detectors found in one track."""
    stops: list = field(default_factory=list)
    turns: list = field(default_factory=list)
    trip: TripSummary = field(default_factory=lambda: TripSummary(duration=0.0))


def detect_stops(track, stop_threshold=0.5):
    """
    Find fixes where the vehicle is effectively stationary.

    Args:
        track (list): Fix objects in file order
        stop_threshold (float): Speed in knots below which a fix is a stop

    Returns:
        list: Ascending indices of stopped fixes
    """
    return [i for i, fix in enumerate(track) if fix.speed < stop_threshold]


def normalize_heading_delta(delta):
    """
    Bring a heading difference into the (-180, 180] range.

    A single correction of 360 degrees is applied, which is enough for the
    difference of two headings that are each within [0, 360).
    """
    if delta > 180:
        return delta - 360
    if delta < -180:
        return delta + 360
    return delta


def detect_left_turns(track, turn_threshold=-30.0, window_size=5, min_speed=0.5):
    """
    Find left turns using the heading change summed over a sliding window.

    Each candidate index i needs window_size preceding fixes. The heading
    changes heading[j] - heading[j-1] for the window_size values of j
    ending at i are normalized and summed; a sum at or below turn_threshold
    marks a left turn. Fixes at or below min_speed are ignored, and a turn
    found within window_size positions of the previous one is treated as
    the same turn.

    Args:
        track (list): Fix objects in file order
        turn_threshold (float): Negative summed heading change in degrees
        window_size (int): Number of heading changes in the window
        min_speed (float): Speed in knots a fix must exceed to be checked

    Returns:
        list: Ascending indices of detected left turns
    """
    turns = []
    last_turn = None

    for i in range(window_size, len(track)):
        if track[i].speed <= min_speed:
            continue

        heading_change = sum(
            normalize_heading_delta(track[j].heading - track[j - 1].heading)
            for j in range(i - window_size + 1, i + 1)
        )

        if heading_change <= turn_threshold:
            if last_turn is not None and i - last_turn <= window_size:
                continue
            turns.append(i)
            last_turn = i

    return turns


def compute_trip_duration(track, moving_threshold=1.0):
    """
    Compute the time between the first and last moving fix.

    Timestamps are seconds since midnight UTC and are not corrected for
    day rollover, so a trip crossing midnight or an unordered log can give
    a negative duration.

    Args:
        track (list): Fix objects in file order
        moving_threshold (float): Speed in knots from which a fix is moving

    Returns:
        TripSummary: Duration in seconds and the first/last moving indices
    """
    if not track:
        return TripSummary(duration=0.0)

    moving = [i for i, fix in enumerate(track) if fix.speed >= moving_threshold]
    if not moving:
        return TripSummary(duration=0.0, start_index=0, end_index=len(track) - 1)

    start_index, end_index = moving[0], moving[-1]
    duration = track[end_index].timestamp - track[start_index].timestamp
    return TripSummary(
        duration=duration,
        start_index=start_index,
        end_index=end_index,
        moving=True,
    )


def analyze_track(track, config=None):
    """
    Run all event detectors over a track.

    Args:
        track (list): Fix objects in file order
        config (DetectionConfig, optional): Thresholds, defaults when omitted

    Returns:
        TrackEvents: Stops, left turns and trip summary
    """
    config = config or DetectionConfig()
    return TrackEvents(
        stops=detect_stops(track, config.stop_threshold),
        turns=detect_left_turns(
            track,
            turn_threshold=config.turn_threshold,
            window_size=config.window_size,
            min_speed=config.turn_min_speed,
        ),
        trip=compute_trip_duration(track, config.moving_threshold),
    )
