"""Mapper interface: spatial radius queries over some data store."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from geopoints.core.geo import Point


@runtime_checkable
class Mapper(Protocol):
    """Finds stored points within a radius of an origin.

    Implementations own their backend handle and release it in `close()`.
    """

    def points_within_radius(self, origin: Point, radius_km: float) -> list[dict[str, Any]]:
        """Return every stored row whose point lies within `radius_km` of `origin`.

        Raises:
            BackendQueryError: If the backend cannot be reached or the query fails.
        """
        ...

    def close(self) -> None:
        ...
