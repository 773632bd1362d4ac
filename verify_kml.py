#!/usr/bin/env python3
"""
Simple KML verification script to check a generated trip KML: route
line, stop markers and left-turn markers.
"""

import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import Optional
import sys

NAMESPACES = {'kml': 'http://www.opengis.net/kml/2.2'}
REQUIRED_STYLES = ('route', 'stop', 'turn')


@dataclass
class KmlReport:
    """What was found in a KML file."""
    document_name: Optional[str] = None
    style_ids: list = field(default_factory=list)
    route_points: int = 0
    stop_markers: int = 0
    turn_markers: int = 0
    errors: list = field(default_factory=list)

    @property
    def is_valid(self):
        return not self.errors


def count_coordinates(text):
    """Count whitespace separated 'lon,lat[,alt]' tuples in a coordinates element."""
    if not text:
        return 0
    return len(text.split())


def verify_kml(kml_file):
    """
    Verify KML file structure against the trip output layout.

    Args:
        kml_file (str or Path): KML file to check

    Returns:
        KmlReport: Counts found in the file and any problems
    """
    report = KmlReport()
    try:
        tree = ET.parse(kml_file)
    except ET.ParseError as e:
        report.errors.append(f"XML Parse Error: {e}")
        return report
    except OSError as e:
        report.errors.append(f"Cannot read {kml_file}: {e}")
        return report

    root = tree.getroot()

    doc_name = root.find('kml:Document/kml:name', NAMESPACES)
    if doc_name is not None:
        report.document_name = doc_name.text

    report.style_ids = [style.get('id') for style in root.findall('.//kml:Style', NAMESPACES)]
    for style_id in REQUIRED_STYLES:
        if style_id not in report.style_ids:
            report.errors.append(f"Missing style '{style_id}'")

    route_found = False
    for placemark in root.findall('.//kml:Placemark', NAMESPACES):
        style_url = placemark.findtext('kml:styleUrl', default='', namespaces=NAMESPACES).strip()

        if style_url == '#route':
            coords = placemark.find('kml:LineString/kml:coordinates', NAMESPACES)
            if coords is None:
                report.errors.append("Route placemark has no LineString coordinates")
                continue
            route_found = True
            report.route_points = count_coordinates(coords.text)
            continue

        coords = placemark.find('kml:Point/kml:coordinates', NAMESPACES)
        if coords is None or count_coordinates(coords.text) != 1:
            name = placemark.findtext('kml:name', default='?', namespaces=NAMESPACES)
            report.errors.append(f"Marker '{name}' has no point coordinates")
            continue

        if style_url == '#stop':
            report.stop_markers += 1
        elif style_url == '#turn':
            report.turn_markers += 1

    if not route_found:
        report.errors.append("Route placemark not found")

    return report


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    if len(argv) != 1:
        print("Usage: python3 verify_kml.py <kml_file>")
        return 1

    kml_file = argv[0]
    report = verify_kml(kml_file)

    print(f"Verifying KML file: {kml_file}")
    print("=" * 50)
    if report.document_name is not None:
        print(f"Document name: {report.document_name}")
    print(f"Styles found: {', '.join(report.style_ids) or 'none'}")
    print(f"Route points: {report.route_points}")
    print(f"Stop markers: {report.stop_markers}")
    print(f"Left turn markers: {report.turn_markers}")
    print("=" * 50)

    if report.errors:
        for error in report.errors:
            print(f"❌ {error}")
        return 1

    print("✅ KML verification completed successfully!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
