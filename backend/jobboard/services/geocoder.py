"""Address geocoding through a MapQuest-compatible HTTP API."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

import httpx

from jobboard.core.logging import get_logger
from jobboard.domain.exceptions import UpstreamError, ValidationError

logger = get_logger(__name__)


@dataclass(frozen=True)
class GeocodedLocation:
    """First match returned by the provider for an address."""

    latitude: float
    longitude: float
    formatted_address: str
    city: Optional[str] = None
    state: Optional[str] = None
    zipcode: Optional[str] = None
    country: Optional[str] = None


class Geocoder:
    """Resolves free-form addresses and zipcodes to coordinates.

    ``transport`` is handed to ``httpx.Client`` so tests can plug in an
    ``httpx.MockTransport`` instead of reaching the provider.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        *,
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.base_url = base_url
        self.api_key = api_key
        self.timeout = timeout
        self.transport = transport

    def _get(self, params: dict[str, Any]) -> dict[str, Any]:
        with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
            response = client.get(self.base_url, params=params)
            response.raise_for_status()
            return response.json()

    def geocode(self, address: str) -> GeocodedLocation:
        try:
            payload = self._get({"key": self.api_key, "location": address, "maxResults": 1})
        except httpx.HTTPStatusError as exc:
            logger.error(
                "Geocoding request rejected",
                extra={"status_code": exc.response.status_code},
            )
            raise UpstreamError("Geocoding service rejected the request") from exc
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("Geocoding request failed", extra={"error": str(exc)})
            raise UpstreamError("Geocoding service is unavailable") from exc

        location = _first_location(payload)
        if location is None:
            raise ValidationError(f"Could not geocode address '{address}'")
        return location


def _first_location(payload: dict[str, Any]) -> Optional[GeocodedLocation]:
    for result in payload.get("results") or []:
        for match in result.get("locations") or []:
            lat_lng = match.get("latLng") or {}
            if lat_lng.get("lat") is None or lat_lng.get("lng") is None:
                continue
            city = match.get("adminArea5") or None
            state = match.get("adminArea3") or None
            zipcode = match.get("postalCode") or None
            country = match.get("adminArea1") or None
            street = match.get("street") or None
            parts = [street, city, " ".join(p for p in (state, zipcode) if p) or None, country]
            return GeocodedLocation(
                latitude=float(lat_lng["lat"]),
                longitude=float(lat_lng["lng"]),
                formatted_address=", ".join(p for p in parts if p),
                city=city,
                state=state,
                zipcode=zipcode,
                country=country,
            )
    return None
