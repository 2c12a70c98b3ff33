"""
Error taxonomy.

All errors are recoverable at the call site. Library code raises them with the
underlying cause chained; only the CLI decides to print and exit.
"""

from __future__ import annotations


class GeoPointsError(Exception):
    """Base class for every error raised by geopoints."""


class ConfigurationError(GeoPointsError):
    """Configuration file present but malformed, or missing a required key."""


class BackendQueryError(GeoPointsError):
    """A Mapper backend failed to connect or to execute a query."""


class GeocoderError(GeoPointsError):
    """Base class for geocoding failures."""


class GeocoderTransportError(GeocoderError):
    """Network failure, timeout or non-2xx response from the geocoding service."""


class GeocodeParseError(GeocoderError):
    """The geocoding response was not the expected shape."""


class NoMatchError(GeocoderError):
    """The geocoding service returned no result for the request."""
