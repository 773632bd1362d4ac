#!/usr/bin/env python3
"""
This script creates an interactive OpenStreetMap view of a GPS trip
(route, stops and left turns) using the folium library.
"""

import folium
import argparse
import math
import sys

from nmea_parser import read_gps_file
from track_events import DetectionConfig, analyze_track


def _valid_location(fix):
    return not (math.isnan(fix.latitude) or math.isnan(fix.longitude))


def create_interactive_trip_map(track, events, output_filename="trip_map.html", zoom_start=15):
    """
    Creates an interactive map of a trip using folium.

    Args:
        track (list): Fix objects in file order
        events (TrackEvents): Stops, turns and trip summary for the track
        output_filename (str): The name of the HTML file to save the map
        zoom_start (int): Initial zoom level of the map

    Returns:
        folium.Map: The saved map

    Raises:
        ValueError: If the track has no fix with a usable position
    """
    route = [(fix.latitude, fix.longitude) for fix in track if _valid_location(fix)]
    if not route:
        raise ValueError("Track has no valid positions to display")

    m = folium.Map(location=route[0], zoom_start=zoom_start)
    folium.PolyLine(route, color='yellow', weight=4, tooltip='Route').add_to(m)

    for index in events.stops:
        fix = track[index]
        if not _valid_location(fix):
            continue
        folium.CircleMarker(
            location=[fix.latitude, fix.longitude],
            radius=6,
            color='red',
            fill=True,
            popup=f"Stop at point {index} ({fix.speed:.1f} knots)"
        ).add_to(m)

    for index in events.turns:
        fix = track[index]
        if not _valid_location(fix):
            continue
        folium.Marker(
            location=[fix.latitude, fix.longitude],
            popup=f"Left turn at point {index}",
            icon=folium.Icon(color='orange', icon='arrow-left')
        ).add_to(m)

    m.save(output_filename)
    print(f"Interactive map saved to {output_filename}")
    return m


def main(argv=None):
    parser = argparse.ArgumentParser(
        description='Create an interactive HTML map of a GPS trip from an NMEA log')
    parser.add_argument('gps_file', help='Path to the NMEA log file')
    parser.add_argument('-o', '--output', default='trip_map.html',
                        help='Output HTML file (default: trip_map.html)')
    args = parser.parse_args(argv)

    try:
        track = read_gps_file(args.gps_file)
        events = analyze_track(track, DetectionConfig())
        create_interactive_trip_map(track, events, args.output)
    except (OSError, ValueError) as e:
        print(f"Error: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
