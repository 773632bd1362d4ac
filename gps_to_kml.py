#!/usr/bin/env python3
"""
This script converts a GPS log of NMEA $GPRMC sentences into a KML file
that can be viewed in Google Earth or other mapping applications.

The route is drawn as a yellow line, stops are marked with red circles
and left turns with yellow circles.
"""

import xml.etree.ElementTree as ET
from xml.dom import minidom
from dataclasses import dataclass
from pathlib import Path
import argparse
import sys

from nmea_parser import read_gps_file
from track_events import DetectionConfig, TrackEvents, analyze_track

KML_NAMESPACE = 'http://www.opengis.net/kml/2.2'
CIRCLE_ICON = 'http://maps.google.com/mapfiles/kml/shapes/placemark_circle.png'

DEFAULT_INPUT_DIR = 'gps_data'
DEFAULT_OUTPUT_DIR = 'kml_output'
DEFAULT_ALTITUDE = 3.0

ROUTE_COLOR = 'ff00ffff'  # yellow (aabbggrr)
STOP_COLOR = 'ff0000ff'   # red
TURN_COLOR = 'ff00ffff'   # yellow
ROUTE_WIDTH = '4'


@dataclass(frozen=True)
class ConversionResult:
    """Outcome of one GPS log to KML conversion."""
    output_path: Path
    track: list
    events: TrackEvents


def format_coordinate(fix, altitude):
    """Format a fix as a KML 'lon,lat,alt' tuple."""
    return f"{fix.longitude:.6f},{fix.latitude:.6f},{altitude:.1f}"


def _add_icon_style(document, style_id, color):
    style = ET.SubElement(document, 'Style')
    style.set('id', style_id)

    icon_style = ET.SubElement(style, 'IconStyle')
    color_elem = ET.SubElement(icon_style, 'color')
    color_elem.text = color
    icon = ET.SubElement(icon_style, 'Icon')
    href = ET.SubElement(icon, 'href')
    href.text = CIRCLE_ICON


def _add_markers(document, track, indices, style_id, label, altitude):
    """Add one Point placemark per index, skipping indices outside the track."""
    count = 0
    for index in indices:
        if not 0 <= index < len(track):
            continue
        fix = track[index]
        count += 1

        placemark = ET.SubElement(document, 'Placemark')
        name_elem = ET.SubElement(placemark, 'name')
        name_elem.text = f"{label} {count}"

        desc_elem = ET.SubElement(placemark, 'description')
        desc_elem.text = f"Point {index}, speed {fix.speed:.1f} knots, heading {fix.heading:.1f}"

        style_url = ET.SubElement(placemark, 'styleUrl')
        style_url.text = f'#{style_id}'

        point = ET.SubElement(placemark, 'Point')
        coords = ET.SubElement(point, 'coordinates')
        coords.text = format_coordinate(fix, altitude)


def create_kml_document(track, stops, turns, altitude=DEFAULT_ALTITUDE, name="GPS Track"):
    """
    Create a KML document with the route line, stop markers and turn markers.

    Args:
        track (list): Fix objects in file order
        stops (list): Track indices of stops
        turns (list): Track indices of left turns
        altitude (float): Fixed altitude in meters for every coordinate
        name (str): Document name

    Returns:
        str: Pretty-printed KML document
    """
    kml = ET.Element('kml')
    kml.set('xmlns', KML_NAMESPACE)

    document = ET.SubElement(kml, 'Document')
    name_elem = ET.SubElement(document, 'name')
    name_elem.text = name

    # Route line style
    style = ET.SubElement(document, 'Style')
    style.set('id', 'route')
    line_style = ET.SubElement(style, 'LineStyle')
    color_elem = ET.SubElement(line_style, 'color')
    color_elem.text = ROUTE_COLOR
    width_elem = ET.SubElement(line_style, 'width')
    width_elem.text = ROUTE_WIDTH

    _add_icon_style(document, 'stop', STOP_COLOR)
    _add_icon_style(document, 'turn', TURN_COLOR)

    # Route placemark
    placemark = ET.SubElement(document, 'Placemark')
    placemark_name = ET.SubElement(placemark, 'name')
    placemark_name.text = 'Route'
    style_url = ET.SubElement(placemark, 'styleUrl')
    style_url.text = '#route'

    linestring = ET.SubElement(placemark, 'LineString')
    tessellate = ET.SubElement(linestring, 'tessellate')
    tessellate.text = '1'

    coords_elem = ET.SubElement(linestring, 'coordinates')
    coord_strings = [format_coordinate(fix, altitude) for fix in track]
    coords_elem.text = '\n' + '\n'.join(coord_strings) + '\n'

    _add_markers(document, track, stops, 'stop', 'Stop', altitude)
    _add_markers(document, track, turns, 'turn', 'Left turn', altitude)

    rough_string = ET.tostring(kml, encoding='unicode')
    reparsed = minidom.parseString(rough_string)
    return reparsed.toprettyxml(indent='  ')


def write_kml_file(kml_file, track, stops, turns, altitude=DEFAULT_ALTITUDE, name="GPS Track"):
    """
    Write the KML document for a track to disk.

    Raises:
        OSError: If the output file cannot be opened for writing
    """
    kml_content = create_kml_document(track, stops, turns, altitude, name)
    with open(kml_file, 'w', encoding='utf-8') as f:
        f.write(kml_content)


def resolve_paths(input_name, input_dir=DEFAULT_INPUT_DIR, output_dir=DEFAULT_OUTPUT_DIR):
    """
    Work out the input log path and the KML output path.

    Args:
        input_name (str): File name of the GPS log inside input_dir
        input_dir (str): Directory holding GPS logs
        output_dir (str): Directory receiving KML files

    Returns:
        tuple: (input_path, output_path) as Path objects
    """
    input_path = Path(input_dir) / input_name
    output_path = Path(output_dir) / input_path.with_suffix('.kml').name
    return input_path, output_path


def convert_gps_to_kml(input_path, output_path, config=None, altitude=DEFAULT_ALTITUDE, name=None):
    """
    Convert one GPS log to KML.

    Args:
        input_path (str or Path): NMEA log to read
        output_path (str or Path): KML file to write, its directory is created if missing
        config (DetectionConfig, optional): Detector thresholds
        altitude (float): Fixed altitude in meters
        name (str, optional): Document name, defaults to the input file stem

    Returns:
        ConversionResult: Output path, parsed track and detected events

    Raises:
        OSError: If the log cannot be read or the KML cannot be written
    """
    input_path = Path(input_path)
    output_path = Path(output_path)

    track = read_gps_file(input_path)
    events = analyze_track(track, config or DetectionConfig())

    output_path.parent.mkdir(parents=True, exist_ok=True)
    write_kml_file(output_path, track, events.stops, events.turns,
                   altitude=altitude, name=name or input_path.stem)
    return ConversionResult(output_path=output_path, track=track, events=events)


def print_summary(result):
    """Print the human-readable conversion summary."""
    trip = result.events.trip
    print(f"KML file saved to {result.output_path}")
    print(f"Track points: {len(result.track)}")
    print(f"Stop points: {len(result.events.stops)}")
    print(f"Left turns: {len(result.events.turns)}")

    if not result.track:
        print("No valid GPS fixes found.")
    elif trip.moving:
        print(f"First moving point: {trip.start_index}")
        print(f"Last moving point: {trip.end_index}")
    else:
        print("No movement detected.")
    print(f"Trip duration: {trip.duration:.1f} seconds ({trip.duration_minutes:.2f} minutes)")


def build_parser():
    defaults = DetectionConfig()
    parser = argparse.ArgumentParser(
        description='Convert a GPS log of NMEA $GPRMC sentences to KML with stop and left-turn markers',
        epilog='''
Examples:
  %(prog)s drive.txt
  %(prog)s drive.txt --input-dir logs --output-dir maps
  %(prog)s drive.txt --stop-threshold 1.0 --turn-threshold -45
        ''',
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    parser.add_argument('input_file',
                       help='GPS log file name, looked up in the input directory')

    parser.add_argument('--input-dir',
                       default=DEFAULT_INPUT_DIR,
                       help=f'Directory containing GPS logs (default: {DEFAULT_INPUT_DIR})')

    parser.add_argument('--output-dir',
                       default=DEFAULT_OUTPUT_DIR,
                       help=f'Directory for generated KML files (default: {DEFAULT_OUTPUT_DIR})')

    parser.add_argument('--stop-threshold',
                       type=float, default=defaults.stop_threshold,
                       help=f'Speed in knots below which a point is a stop (default: {defaults.stop_threshold})')

    parser.add_argument('--turn-threshold',
                       type=float, default=defaults.turn_threshold,
                       help=f'Summed heading change in degrees for a left turn (default: {defaults.turn_threshold})')

    parser.add_argument('--window-size',
                       type=int, default=defaults.window_size,
                       help=f'Heading changes summed per turn check (default: {defaults.window_size})')

    parser.add_argument('--moving-threshold',
                       type=float, default=defaults.moving_threshold,
                       help=f'Speed in knots from which a point is moving (default: {defaults.moving_threshold})')

    parser.add_argument('--altitude',
                       type=float, default=DEFAULT_ALTITUDE,
                       help=f'Fixed altitude in meters for all points (default: {DEFAULT_ALTITUDE})')

    parser.add_argument('--name',
                       help='Name of the KML document (default: input file name)')

    parser.add_argument('--version',
                       action='version',
                       version='GPS to KML Converter 1.0.0')
    return parser


def main(argv=None):
    """Main function to handle command line arguments and execute conversion."""
    args = build_parser().parse_args(argv)

    if args.window_size < 1:
        print("Error: --window-size must be at least 1.")
        return 1

    input_path, output_path = resolve_paths(args.input_file, args.input_dir, args.output_dir)
    config = DetectionConfig(
        stop_threshold=args.stop_threshold,
        turn_threshold=args.turn_threshold,
        window_size=args.window_size,
        moving_threshold=args.moving_threshold,
    )

    print(f"Processing {input_path}...")
    try:
        result = convert_gps_to_kml(input_path, output_path, config,
                                    altitude=args.altitude, name=args.name)
    except OSError as e:
        print(f"Error: {e}")
        return 1

    print_summary(result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
