"""Geocoder interface: address text <-> coordinates."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from geopoints.core.geo import Point


@runtime_checkable
class Geocoder(Protocol):
    """Converts between free-text addresses and Points.

    Each call is independent; implementations keep no per-call state.
    """

    def geocode(self, query: str) -> Point:
        """Return the best match for `query`.

        Raises:
            NoMatchError: If the service found nothing.
            GeocodeParseError: If the response is malformed.
            GeocoderTransportError: On network failure or a non-2xx status.
        """
        ...

    def reverse_geocode(self, point: Point) -> str:
        """Return a one-line address for `point`."""
        ...
