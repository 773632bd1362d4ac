#!/usr/bin/env python3
"""
This script reads a GPS log of NMEA $GPRMC sentences and creates a graph
of speed over the trip, with detected stops and left turns marked.
"""

import matplotlib.pyplot as plt
import numpy as np
import argparse
import sys

from nmea_parser import read_gps_file
from track_events import DetectionConfig, analyze_track


def elapsed_seconds(track):
    """
    Seconds of each fix relative to the first fix of the track.

    Args:
        track (list): Fix objects in file order

    Returns:
        numpy.ndarray: Elapsed seconds, empty for an empty track
    """
    timestamps = np.array([fix.timestamp for fix in track], dtype=float)
    if timestamps.size == 0:
        return timestamps
    return timestamps - timestamps[0]


def plot_speed_profile(track, events, title="GPS Speed Profile", filepath=None):
    """
    Plot speed over time with stop and left-turn markers.

    Args:
        track (list): Fix objects in file order
        events (TrackEvents): Stops, turns and trip summary for the track
        title (str): Plot title
        filepath (str, optional): Path to save the plot image, shown when omitted

    Returns:
        matplotlib.figure.Figure: The created figure
    """
    times = elapsed_seconds(track)
    speeds = np.array([fix.speed for fix in track], dtype=float)

    fig, ax = plt.subplots(figsize=(12, 6))
    ax.plot(times, speeds, 'g-', linewidth=2, label='Speed (knots)')

    if events.stops:
        stops = np.array(events.stops)
        ax.scatter(times[stops], speeds[stops], color='red', s=30, zorder=5, label='Stop')

    if events.turns:
        turns = np.array(events.turns)
        ax.scatter(times[turns], speeds[turns], color='gold', edgecolor='black',
                   marker='^', s=80, zorder=6, label='Left turn')

    trip = events.trip
    if trip.moving:
        ax.axvline(times[trip.start_index], color='blue', linestyle='--', alpha=0.6, label='First moving')
        ax.axvline(times[trip.end_index], color='blue', linestyle=':', alpha=0.6, label='Last moving')

    ax.set_xlabel('Elapsed time (s)', fontsize=12)
    ax.set_ylabel('Speed (knots)', fontsize=12)
    ax.set_title(title, fontsize=14, pad=20)
    ax.grid(True, alpha=0.3)
    ax.legend(fontsize=11)

    valid_speeds = speeds[~np.isnan(speeds)]
    if valid_speeds.size:
        max_speed = np.max(valid_speeds)
        if max_speed > 0:
            ax.set_ylim(0, max_speed * 1.1)

        stats_text = (f'Max: {max_speed:.1f} kn\n'
                      f'Avg: {np.mean(valid_speeds):.1f} kn\n'
                      f'Stops: {len(events.stops)}, Left turns: {len(events.turns)}\n'
                      f'Trip: {trip.duration_minutes:.1f} min')
        ax.text(0.02, 0.98, stats_text, transform=ax.transAxes,
                fontsize=10, verticalalignment='top',
                bbox=dict(boxstyle='round', facecolor='wheat', alpha=0.8))

    plt.tight_layout()

    if filepath:
        plt.savefig(filepath, bbox_inches='tight', dpi=150,
                    facecolor='white', edgecolor='none')
        print(f"Speed graph saved to {filepath}")
    else:
        plt.show()
    return fig


def main(argv=None):
    """Main function to handle command line arguments and create the speed graph."""
    parser = argparse.ArgumentParser(
        description='Create a speed graph with stops and left turns from a GPS log',
        epilog='''
Examples:
  %(prog)s gps_data/drive.txt
  %(prog)s gps_data/drive.txt -o speed.png
        ''',
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    parser.add_argument('gps_file',
                       help='Path to the NMEA log file')

    parser.add_argument('-o', '--output',
                       help='Output file path for saving the graph (PNG format)')

    parser.add_argument('--title',
                       default='GPS Speed Profile',
                       help='Graph title (default: GPS Speed Profile)')

    args = parser.parse_args(argv)

    try:
        track = read_gps_file(args.gps_file)
    except OSError as e:
        print(f"Error: {e}")
        return 1

    if not track:
        print(f"No valid GPS fixes found in {args.gps_file}")
        return 1

    print(f"Loaded {len(track)} GPS points from {args.gps_file}")
    events = analyze_track(track, DetectionConfig())
    try:
        plot_speed_profile(track, events, title=args.title, filepath=args.output)
    except OSError as e:
        print(f"Error: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
