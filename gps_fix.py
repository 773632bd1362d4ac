"""
GPS fix record shared by the parser, the event detectors and the writers.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Fix:
    """
    One valid position/velocity sample taken from a $GPRMC sentence.

    Attributes:
        latitude (float): Decimal degrees, negative for South
        longitude (float): Decimal degrees, negative for West
        speed (float): Speed over ground in knots
        heading (float): Course over ground in degrees true
        timestamp (float): Seconds since start of the UTC day
    """
    latitude: float
    longitude: float
    speed: float
    heading: float
    timestamp: float = 0.0
