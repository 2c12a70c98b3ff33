from __future__ import annotations
from dataclasses import dataclass
from math import asin, atan2, cos, degrees, pi, radians, sin, sqrt

"""
Geodesy on a spherical Earth.

Everything here is pure math over decimal degrees. The radius is the polar radius
(6356.7523 km) and is shared with the SQL radius predicate so distances computed
in Python and in the database agree.
"""

EARTH_RADIUS_KM = 6356.7523


@dataclass(frozen=True)
class Point:
    """A latitude/longitude pair in decimal degrees."""

    lat: float
    lng: float

    def great_circle_distance(self, other: Point) -> float:
        return great_circle_distance(self, other)

    def point_at_distance_and_bearing(self, distance_km: float, bearing_deg: float) -> Point:
        return point_at_distance_and_bearing(self, distance_km, bearing_deg)


def great_circle_distance(origin: Point, destination: Point) -> float:
    """Compute the haversine distance in kilometers between two points."""
    d_lat = radians(destination.lat - origin.lat)
    d_lng = radians(destination.lng - origin.lng)

    lat1 = radians(origin.lat)
    lat2 = radians(destination.lat)

    a = sin(d_lat / 2) ** 2 + cos(lat1) * cos(lat2) * sin(d_lng / 2) ** 2
    # Rounding can push `a` a hair past 1 for antipodal points.
    a = min(max(a, 0.0), 1.0)
    c = 2 * atan2(sqrt(a), sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def point_at_distance_and_bearing(origin: Point, distance_km: float, bearing_deg: float) -> Point:
    """Project `origin` by `distance_km` along the initial compass bearing `bearing_deg`.

    Bearing is measured clockwise from north. The returned longitude is normalized
    to (-180, 180].
    """
    angular = distance_km / EARTH_RADIUS_KM
    theta = radians(bearing_deg)

    lat1 = radians(origin.lat)
    lng1 = radians(origin.lng)

    lat2 = asin(sin(lat1) * cos(angular) + cos(lat1) * sin(angular) * cos(theta))
    lng2 = lng1 + atan2(
        sin(theta) * sin(angular) * cos(lat1),
        cos(angular) - sin(lat1) * sin(lat2),
    )
    lng2 = (lng2 + 3 * pi) % (2 * pi) - pi
    if lng2 <= -pi:
        lng2 += 2 * pi

    return Point(lat=degrees(lat2), lng=degrees(lng2))
