#!/usr/bin/env python3
"""
This script loads a trip KML file (route, stops and left turns) and
displays it over an OpenStreetMap background using OSMnx and matplotlib.
"""

import osmnx as ox
import matplotlib.pyplot as plt
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
import argparse
import os
import sys

NAMESPACES = {'kml': 'http://www.opengis.net/kml/2.2'}


@dataclass
class KmlFeatures:
    """(longitude, latitude) tuples grouped by placemark style."""
    route: list = field(default_factory=list)
    stops: list = field(default_factory=list)
    turns: list = field(default_factory=list)

    def all_points(self):
        return self.route + self.stops + self.turns


def parse_coordinates(text):
    """
    Parse a KML coordinates string.

    Args:
        text (str): Whitespace separated 'lon,lat[,alt]' tuples

    Returns:
        list: List of (longitude, latitude) tuples
    """
    coordinates = []
    for item in (text or '').split():
        parts = item.split(',')
        if len(parts) >= 2:
            coordinates.append((float(parts[0]), float(parts[1])))
    return coordinates


def parse_kml_features(kml_file):
    """
    Parse route, stop and turn coordinates from a trip KML file.

    Args:
        kml_file (str): Path to the KML file

    Returns:
        KmlFeatures: Coordinates grouped by the placemark's styleUrl
    """
    tree = ET.parse(kml_file)
    root = tree.getroot()
    features = KmlFeatures()

    for placemark in root.iter(f"{{{NAMESPACES['kml']}}}Placemark"):
        style_url = placemark.findtext('kml:styleUrl', default='', namespaces=NAMESPACES).strip()
        coords = placemark.find('.//kml:coordinates', NAMESPACES)
        if coords is None:
            continue
        points = parse_coordinates(coords.text)

        if style_url == '#route':
            features.route.extend(points)
        elif style_url == '#stop':
            features.stops.extend(points)
        elif style_url == '#turn':
            features.turns.extend(points)

    return features


def padded_bbox(points, padding=0.1):
    """
    Bounding box around points with some padding.

    Returns:
        tuple: (west, south, east, north)
    """
    lons, lats = zip(*points)
    min_lat, max_lat = min(lats), max(lats)
    min_lon, max_lon = min(lons), max(lons)

    # Keep a small area around single-point tracks
    lat_pad = max((max_lat - min_lat) * padding, 0.001)
    lon_pad = max((max_lon - min_lon) * padding, 0.001)
    return (min_lon - lon_pad, min_lat - lat_pad, max_lon + lon_pad, max_lat + lat_pad)


def visualize_kml(kml_file, basemap=True, network_type='drive', fig_height=12, fig_width=12,
                  track_width=3, filepath=None):
    """
    Display a trip KML, optionally over an OpenStreetMap road network.

    Args:
        kml_file (str): Path to the KML file
        basemap (bool): Download and draw the OSM road network underneath
        network_type (str): OSM network type ('drive', 'walk', 'bike', 'all')
        fig_height (int): Height of the plot
        fig_width (int): Width of the plot
        track_width (int): Width of the route line
        filepath (str, optional): Path to save the plot image

    Returns:
        matplotlib.figure.Figure: The created figure, or None when the file has no coordinates
    """
    features = parse_kml_features(kml_file)
    points = features.all_points()
    if not points:
        print(f"No coordinates found in {kml_file}")
        return None

    print(f"Loaded {len(features.route)} route points, {len(features.stops)} stops "
          f"and {len(features.turns)} left turns from {kml_file}")

    if basemap:
        print("Downloading OpenStreetMap data...")
        G = ox.graph_from_bbox(padded_bbox(points), network_type=network_type)
        fig, ax = ox.plot_graph(G, figsize=(fig_width, fig_height),
                                show=False, close=False,
                                node_size=0, edge_linewidth=0.5,
                                edge_color='#999999', bgcolor='white')
    else:
        fig, ax = plt.subplots(figsize=(fig_width, fig_height))

    if features.route:
        route_lons, route_lats = zip(*features.route)
        ax.plot(route_lons, route_lats, color='gold',
                linewidth=track_width, alpha=0.9, zorder=10,
                label='Route')

    if features.stops:
        stop_lons, stop_lats = zip(*features.stops)
        ax.scatter(stop_lons, stop_lats, color='red',
                   s=60, zorder=11, label='Stop', marker='o')

    if features.turns:
        turn_lons, turn_lats = zip(*features.turns)
        ax.scatter(turn_lons, turn_lats, color='yellow', edgecolor='black',
                   s=80, zorder=12, label='Left turn', marker='o')

    ax.legend(loc='upper right', fontsize=10)
    ax.set_title(f'GPS Trip on OpenStreetMap\n{len(features.route)} points',
                 fontsize=14, pad=20)
    ax.axis('off')
    plt.tight_layout(pad=0)

    if filepath:
        plt.savefig(filepath, bbox_inches='tight', dpi=300,
                    facecolor='white', edgecolor='none')
        print(f"Visualization saved to {filepath}")
    else:
        plt.show()
    return fig


def main(argv=None):
    """Main function to handle command line arguments and execute visualization."""
    parser = argparse.ArgumentParser(
        description='Visualize a trip KML (route, stops, left turns) over OpenStreetMap data',
        epilog='''
Examples:
  %(prog)s kml_output/drive.kml
  %(prog)s kml_output/drive.kml -o drive.png
  %(prog)s kml_output/drive.kml --no-basemap
        ''',
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    parser.add_argument('kml_file',
                       help='Path to the KML file')

    parser.add_argument('-o', '--output',
                       help='Output file path for saving the visualization (PNG format)')

    parser.add_argument('--network-type',
                       choices=['drive', 'walk', 'bike', 'all', 'all_private'],
                       default='drive',
                       help='Type of OpenStreetMap network to download (default: drive)')

    parser.add_argument('--no-basemap',
                       action='store_true',
                       help='Plot the trip without downloading OpenStreetMap data')

    parser.add_argument('--width', '--track-width',
                       type=int, default=3,
                       help='Width of the route line (default: 3)')

    args = parser.parse_args(argv)

    if not os.path.exists(args.kml_file):
        print(f"Error: KML file '{args.kml_file}' not found.")
        return 1

    try:
        visualize_kml(
            kml_file=args.kml_file,
            basemap=not args.no_basemap,
            network_type=args.network_type,
            track_width=args.width,
            filepath=args.output
        )
    except ET.ParseError as e:
        print(f"Error: invalid KML file: {e}")
        return 1
    except ValueError as e:
        print(f"Error: invalid coordinates in KML file: {e}")
        return 1
    except OSError as e:
        print(f"Error: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
