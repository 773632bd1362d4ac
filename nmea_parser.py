#!/usr/bin/env python3
"""
Parsing of NMEA $GPRMC sentences into GPS fixes.

Only the RMC (Recommended Minimum) sentence is used. Field layout
(comma separated, 0-based index in the split list):

    0 sentence id, 1 UTC time HHMMSS[.ss], 2 status (A=valid, V=invalid),
    3 latitude DDMM.MMMM, 4 N/S, 5 longitude DDDMM.MMMM, 6 E/W,
    7 speed over ground (knots), 8 course over ground (degrees true)

Numeric fields are parsed leniently: a value that cannot be read becomes
NaN instead of aborting the whole conversion.
"""

import math

from gps_fix import Fix

GPRMC_PREFIX = '$GPRMC'
MIN_GPRMC_FIELDS = 9


def parse_float(text):
    """
    Parse a numeric NMEA field.

    Args:
        text (str): Raw field text

    Returns:
        float: Parsed value, or NaN when the field is empty or not numeric
    """
    try:
        return float(text)
    except (TypeError, ValueError):
        return math.nan


def convert_gps_coordinate(coordinate_string, direction):
    """
    Convert a GPS coordinate from (D)DDMM.MMMM format to decimal degrees.

    Args:
        coordinate_string (str): Coordinate as written in the sentence, e.g. '4807.038'
        direction (str): Hemisphere letter ('N', 'S', 'E' or 'W')

    Returns:
        float: Signed decimal degrees (negative for South/West), NaN if not numeric
    """
    coordinate = parse_float(coordinate_string)
    degrees = coordinate // 100
    minutes = coordinate - degrees * 100
    decimal = degrees + minutes / 60.0

    if direction in ('S', 'W'):
        decimal = -decimal
    return decimal


def parse_time_of_day(time_string):
    """
    Convert an HHMMSS[.ss] UTC time field to seconds since midnight.

    Args:
        time_string (str): Time field of the sentence

    Returns:
        float: Seconds since start of the UTC day, 0.0 if absent or malformed
    """
    if not time_string or len(time_string) < 6:
        return 0.0

    try:
        hours = float(time_string[:2])
        minutes = float(time_string[2:4])
        seconds = float(time_string[4:])
    except ValueError:
        return 0.0

    total = hours * 3600 + minutes * 60 + seconds
    if math.isnan(total):
        return 0.0
    return total


def parse_gprmc(line):
    """
    Parse one $GPRMC sentence.

    Args:
        line (str): Sentence text, with or without the trailing newline

    Returns:
        Fix: Parsed fix, or None when the sentence is too short or has no valid fix
    """
    parts = line.rstrip('\r\n').split(',')

    # Status field must be 'A' (active/valid)
    if len(parts) < MIN_GPRMC_FIELDS or parts[2] != 'A':
        return None

    return Fix(
        latitude=convert_gps_coordinate(parts[3], parts[4]),
        longitude=convert_gps_coordinate(parts[5], parts[6]),
        speed=parse_float(parts[7]),
        heading=parse_float(parts[8]),
        timestamp=parse_time_of_day(parts[1]),
    )


def iter_gprmc_fixes(lines):
    """
    Yield fixes from an iterable of NMEA lines in their original order.

    Lines of other sentence types, blank lines and sentences without a
    valid fix are skipped.

    Args:
        lines (iterable): Text lines (an open file, a list of strings, ...)

    Yields:
        Fix: One per valid $GPRMC sentence
    """
    for line in lines:
        if not line.startswith(GPRMC_PREFIX):
            continue
        fix = parse_gprmc(line)
        if fix is not None:
            yield fix


def read_gps_file(filename):
    """
    Read a GPS log and return its valid $GPRMC fixes as a track.

    Args:
        filename (str or Path): Path to the NMEA text file

    Returns:
        list: Fix objects in file order

    Raises:
        OSError: If the file cannot be opened for reading
    """
    with open(filename, 'r', encoding='utf-8', errors='ignore') as file:
        return list(iter_gprmc_fixes(file))
