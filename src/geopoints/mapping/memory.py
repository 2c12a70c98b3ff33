"""
In-memory Mapper.

Evaluates the haversine distance for every row (no index), which makes it a
drop-in stand-in for `SQLMapper` in tests and small tools.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from geopoints.core.errors import BackendQueryError
from geopoints.core.geo import Point, great_circle_distance


class InMemoryMapper:
    """A Mapper over a list of row mappings."""

    def __init__(self, rows: Iterable[Mapping[str, Any]], *, lat_col: str = "lat", lng_col: str = "lng"):
        self._rows = [dict(r) for r in rows]
        self._lat_col = lat_col
        self._lng_col = lng_col

    def _row_point(self, row: Mapping[str, Any]) -> Point:
        try:
            return Point(lat=float(row[self._lat_col]), lng=float(row[self._lng_col]))
        except (KeyError, TypeError, ValueError) as exc:
            raise BackendQueryError(f"Row has no usable '{self._lat_col}'/'{self._lng_col}' columns") from exc

    def points_within_radius(self, origin: Point, radius_km: float) -> list[dict[str, Any]]:
        r = float(radius_km)
        return [dict(row) for row in self._rows if great_circle_distance(origin, self._row_point(row)) <= r]

    def close(self) -> None:
        self._rows = []

    def __enter__(self) -> InMemoryMapper:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
