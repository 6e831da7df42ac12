# routeinfo/analyze/geodesic.py
"""
Great-circle distance used by every stage of the analyzer.
"""

from haversine import haversine, Unit

# Spherical Earth radius (m). The haversine package's own radius differs
# slightly, so only its central angle is used.
EARTH_RADIUS_M = 6_371_000.0


def distance_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Haversine distance in meters between two (lat, lon) pairs in degrees."""
    return haversine((lat1, lon1), (lat2, lon2), unit=Unit.RADIANS) * EARTH_RADIUS_M


def point_distance_m(p0, p1) -> float:
    """Distance in meters between two TrackPoints."""
    return distance_m(p0.lat, p0.lon, p1.lat, p1.lon)
