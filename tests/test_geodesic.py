import math

import pytest

from routeinfo.analyze.geodesic import EARTH_RADIUS_M, distance_m, point_distance_m
from routeinfo.analyze.models import TrackPoint


def test_identical_points_are_zero():
    assert distance_m(42.5, 23.3, 42.5, 23.3) == 0.0


def test_meridian_distance_uses_fixed_radius():
    # along a meridian the great-circle distance is R * dlat
    expected = EARTH_RADIUS_M * math.radians(0.001)
    assert distance_m(0.0, 0.0, 0.001, 0.0) == pytest.approx(expected, rel=1e-9)
    assert expected == pytest.approx(111.19, abs=0.01)


def test_one_degree_of_longitude_on_equator():
    assert distance_m(0.0, 0.0, 0.0, 1.0) == pytest.approx(111194.93, abs=0.01)


def test_symmetry():
    assert distance_m(43.0, 76.0, 44.0, 77.0) == pytest.approx(distance_m(44.0, 77.0, 43.0, 76.0))


def test_point_distance_reads_lat_lon_fields():
    p0 = TrackPoint(lon=23.0, lat=42.0, ele=0.0)
    p1 = TrackPoint(lon=23.0, lat=42.001, ele=999.0)
    assert point_distance_m(p0, p1) == distance_m(42.0, 23.0, 42.001, 23.0)
