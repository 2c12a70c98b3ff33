"""
geopoints CLI entrypoint.

Thin wiring for quick lookups from a shell: geodesy, radius queries against the
configured SQL backend, and forward/reverse geocoding.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any

from geopoints.config.settings import get_settings
from geopoints.core.errors import GeoPointsError
from geopoints.core.geo import Point, great_circle_distance, point_at_distance_and_bearing
from geopoints.core.logging import configure_logging
from geopoints.geocoding.nominatim import NominatimGeocoder
from geopoints.mapping.sql import handle_with_sql

logger = logging.getLogger(__name__)


def _cmd_distance(args: argparse.Namespace) -> int:
    a = Point(lat=float(args.lat1), lng=float(args.lng1))
    b = Point(lat=float(args.lat2), lng=float(args.lng2))
    print(f"{great_circle_distance(a, b):.6f}")
    return 0


def _cmd_project(args: argparse.Namespace) -> int:
    origin = Point(lat=float(args.lat), lng=float(args.lng))
    dest = point_at_distance_and_bearing(origin, float(args.distance), float(args.bearing))
    print(f"{dest.lat:.6f} {dest.lng:.6f}")
    return 0


def _cmd_nearby(args: argparse.Namespace) -> int:
    origin = Point(lat=float(args.lat), lng=float(args.lng))
    with handle_with_sql() as mapper:
        rows = mapper.points_within_radius(origin, float(args.radius))

    if args.json:
        print(json.dumps(rows, ensure_ascii=False, indent=2, default=str))
        return 0

    for row in rows:
        point = mapper.point_from_row(row)
        print(f"{point.lat:.6f} {point.lng:.6f}  {great_circle_distance(origin, point):.3f} km")
    return 0


def _cmd_geocode(args: argparse.Namespace) -> int:
    geocoder = NominatimGeocoder.from_settings(get_settings())
    point = geocoder.geocode(str(args.query))
    print(f"{point.lat:.6f} {point.lng:.6f}")
    return 0


def _cmd_reverse(args: argparse.Namespace) -> int:
    geocoder = NominatimGeocoder.from_settings(get_settings())
    print(geocoder.reverse_geocode(Point(lat=float(args.lat), lng=float(args.lng))))
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the geopoints CLI."""
    parser = argparse.ArgumentParser(prog="geopoints")
    parser.add_argument("--log-level", default=None, help="Overrides GEOPOINTS_LOG_LEVEL (e.g. DEBUG)")
    sub = parser.add_subparsers(dest="command", required=True)

    dist = sub.add_parser("distance", help="Great-circle distance in km between two points.")
    dist.add_argument("lat1", type=float)
    dist.add_argument("lng1", type=float)
    dist.add_argument("lat2", type=float)
    dist.add_argument("lng2", type=float)
    dist.set_defaults(func=_cmd_distance)

    proj = sub.add_parser("project", help="Point reached from an origin after a distance along a bearing.")
    proj.add_argument("--lat", required=True, type=float)
    proj.add_argument("--lng", required=True, type=float)
    proj.add_argument("--distance", required=True, type=float, help="Kilometers")
    proj.add_argument("--bearing", required=True, type=float, help="Degrees clockwise from north")
    proj.set_defaults(func=_cmd_project)

    near = sub.add_parser("nearby", help="Rows of the configured SQL table within a radius.")
    near.add_argument("--lat", required=True, type=float)
    near.add_argument("--lng", required=True, type=float)
    near.add_argument("--radius", required=True, type=float, help="Kilometers")
    near.add_argument("--json", action="store_true", help="Output machine-readable JSON")
    near.set_defaults(func=_cmd_nearby)

    geo = sub.add_parser("geocode", help="Address text to coordinates.")
    geo.add_argument("query")
    geo.set_defaults(func=_cmd_geocode)

    rev = sub.add_parser("reverse", help="Coordinates to a one-line address.")
    rev.add_argument("--lat", required=True, type=float)
    rev.add_argument("--lng", required=True, type=float)
    rev.set_defaults(func=_cmd_reverse)
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint callable used by `python -m geopoints.cli`."""
    parser = build_parser()
    args = parser.parse_args(argv)
    func: Any = getattr(args, "func")
    try:
        configure_logging(args.log_level)
        return int(func(args))
    except GeoPointsError as exc:
        logger.error("%s failed: %s", args.command, exc)
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
