"""Shared fixtures for the GPS to KML tests."""

import matplotlib

matplotlib.use('Agg')

import pytest

from gps_fix import Fix


def _gprmc_line(time='123519', status='A', lat='4807.038', ns='N', lon='01131.000', ew='E',
                speed='022.4', heading='084.4'):
    return f"$GPRMC,{time},{status},{lat},{ns},{lon},{ew},{speed},{heading},230394,003.1,W*6A"


def _turning_track(turn_samples, total=20, speed=5.0, step=-10.0):
    """Straight at heading 90 for 6 fixes, then `turn_samples` heading changes of `step`."""
    track = []
    heading = 90.0
    for i in range(total):
        if 6 <= i < 6 + turn_samples:
            heading = (heading + step) % 360
        track.append(Fix(latitude=48.0 + i * 0.0001, longitude=11.5, speed=speed,
                         heading=heading, timestamp=float(i)))
    return track


@pytest.fixture
def gprmc_line():
    return _gprmc_line


@pytest.fixture
def turning_track():
    return _turning_track


@pytest.fixture
def sample_log(tmp_path):
    """A small log: a stop, a drive and a sustained left turn, with noise lines."""
    lines = [
        "$GPGGA,123519,4807.038,N,01131.000,E,1,08,0.9,545.4,M,46.9,M,,*47",
        "",
        _gprmc_line(time='120000', status='V', speed='0.0', heading='0.0'),
        "$GPRMC,120001,A,4807.038,N",
    ]
    heading = 90.0
    for i in range(20):
        speed = '0.2' if i < 2 else '10.0'
        if 8 <= i < 13:
            heading = (heading - 10.0) % 360
        lines.append(_gprmc_line(time=f"1200{i + 10:02d}", lat=f"4807.{38 + i:03d}",
                                 speed=speed, heading=f"{heading:.1f}"))
    path = tmp_path / "gps_data" / "drive.txt"
    path.parent.mkdir()
    path.write_text('\n'.join(lines) + '\n', encoding='utf-8')
    return path
