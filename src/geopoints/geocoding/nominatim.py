"""
Nominatim-compatible geocoding client.

Forward lookups hit `search.php` and take the first result's `lat`/`lon` strings.
Reverse lookups hit `reverse.php` and flatten the `address` object into one line.

No retries and no caching: every call is a single GET whose failures are mapped
onto the `GeocoderError` family.
"""

from __future__ import annotations

import logging
import math
from typing import Any

import httpx

from geopoints.config.settings import Settings
from geopoints.core.errors import GeocodeParseError, GeocoderTransportError, NoMatchError
from geopoints.core.geo import Point
from geopoints.core.http import DEFAULT_USER_AGENT, get_json

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://open.mapquestapi.com/nominatim/v1"

ADDRESS_FIELDS = ("road", "city", "state", "postcode", "country_code")


def parse_search_response(payload: Any) -> Point:
    """Return the first search result as a Point."""
    if not isinstance(payload, list):
        raise GeocodeParseError(f"Expected a JSON array of results, got {type(payload).__name__}")
    if not payload:
        raise NoMatchError("Geocoding returned no results")

    first = payload[0]
    if not isinstance(first, dict):
        raise GeocodeParseError("First geocoding result is not an object")
    try:
        lat = float(first["lat"])
        lng = float(first["lon"])
    except KeyError as exc:
        raise GeocodeParseError(f"Geocoding result is missing {exc.args[0]!r}") from exc
    except (TypeError, ValueError) as exc:
        raise GeocodeParseError(
            f"Non-numeric coordinates in geocoding result: lat={first.get('lat')!r} lon={first.get('lon')!r}"
        ) from exc
    if not (math.isfinite(lat) and math.isfinite(lng)):
        raise GeocodeParseError(f"Non-finite coordinates in geocoding result: lat={lat!r} lon={lng!r}")
    return Point(lat=lat, lng=lng)


def parse_reverse_response(payload: Any) -> str:
    """Flatten a reverse-geocoding response into a space separated address line."""
    if not isinstance(payload, dict):
        raise GeocodeParseError(f"Expected a JSON object, got {type(payload).__name__}")
    if "address" not in payload and "error" in payload:
        raise NoMatchError(f"Reverse geocoding found nothing: {payload['error']}")

    address = payload.get("address")
    if not isinstance(address, dict):
        raise GeocodeParseError("Reverse geocoding response has no 'address' object")

    parts: list[str] = []
    for field in ADDRESS_FIELDS:
        value = address.get(field)
        if value is None:
            continue
        text = str(value).strip()
        if text:
            parts.append(text)
    return " ".join(parts)


class NominatimGeocoder:
    """Geocoder backed by a Nominatim-style HTTP API."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        *,
        client: httpx.Client | None = None,
        user_agent: str | None = None,
        timeout_seconds: float = 15,
    ):
        self._base_url = base_url.rstrip("/")
        self._client = client
        self._user_agent = user_agent or DEFAULT_USER_AGENT
        self._timeout_seconds = float(timeout_seconds)

    @classmethod
    def from_settings(cls, settings: Settings, *, client: httpx.Client | None = None) -> NominatimGeocoder:
        return cls(
            settings.geocoder.base_url,
            client=client,
            user_agent=settings.geocoder.user_agent,
            timeout_seconds=settings.app.http_timeout_seconds,
        )

    def _request(self, path: str, params: dict[str, Any]) -> Any:
        url = f"{self._base_url}/{path}"
        logger.debug("GET %s params=%s", url, params)
        try:
            return get_json(
                url,
                params=params,
                headers={"User-Agent": self._user_agent},
                timeout_seconds=self._timeout_seconds,
                client=self._client,
            )
        except httpx.HTTPError as exc:
            logger.warning("Geocoding request to %s failed: %s", url, exc)
            raise GeocoderTransportError(f"Request to {url} failed: {exc}") from exc
        except ValueError as exc:
            raise GeocodeParseError(f"Response from {url} is not valid JSON") from exc

    def geocode(self, query: str) -> Point:
        payload = self._request("search.php", {"q": query, "format": "json"})
        point = parse_search_response(payload)
        logger.info("Geocoded %r to lat=%.6f lng=%.6f", query, point.lat, point.lng)
        return point

    def reverse_geocode(self, point: Point) -> str:
        payload = self._request("reverse.php", {"lat": point.lat, "lon": point.lng, "format": "json"})
        return parse_reverse_response(payload)
