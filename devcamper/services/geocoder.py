"""
DevCamper API — Geocoding Providers
====================================

What:  Abstract geocoder interface plus MapQuest and OpenStreetMap
       (Nominatim) implementations.
Why:   Bootcamp create/update turns the submitted `address` into a point and
       address parts; radius search turns a zipcode into a point. Callers
       depend on `Geocoder`, never on a provider.
How:   Each provider issues one GET through `httpx.AsyncClient` and maps the
       provider's JSON into a `GeocodeResult`. The provider is chosen by
       GEOCODER_PROVIDER in `build_geocoder()`.

Failure Model:
    - Transport errors and non-2xx responses → GeocodingError (503)
    - A well-formed response with no match   → ValidationError (400)
    No retries: a failed lookup fails the request.

Testing:
    Providers accept an optional httpx transport, so tests drive them with
    `httpx.MockTransport`; route tests swap the whole geocoder for a fake on
    `app.state.geocoder`.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

import httpx

from devcamper.config import Settings
from devcamper.exceptions import GeocodingError, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


@dataclass(frozen=True)
class GeocodeResult:
    latitude: float
    longitude: float
    formatted_address: Optional[str] = None
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zipcode: Optional[str] = None
    country: Optional[str] = None

    def as_columns(self) -> Dict[str, Any]:
        """Column values for `Bootcamp`'s flattened location fields."""
        return asdict(self)


def _format_address(*parts: Optional[str]) -> Optional[str]:
    joined = ", ".join(part for part in parts if part)
    return joined or None


class Geocoder(ABC):
    """
    Contract:
        - geocode() returns the best match for a free-form query
        - implementations translate their own errors into GeocodingError
        - an empty match list is the caller's problem (ValidationError)
    """

    provider: str = "abstract"

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._timeout = timeout
        self._transport = transport

    @abstractmethod
    async def geocode(self, query: str) -> GeocodeResult:
        ...

    async def _get_json(self, url: str, params: Dict[str, Any], headers: Optional[Dict[str, str]] = None) -> Any:
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.get(url, params=params, headers=headers)
                response.raise_for_status()
                return response.json()
        except httpx.HTTPStatusError as e:
            logger.error("%s geocoder returned HTTP %d", self.provider, e.response.status_code)
            raise GeocodingError(
                context={"provider": self.provider, "status_code": e.response.status_code},
            )
        except (httpx.HTTPError, ValueError) as e:
            logger.error("%s geocoder request failed: %s", self.provider, e)
            raise GeocodingError(context={"provider": self.provider, "error": str(e)})

    def _no_match(self, query: str) -> ValidationError:
        logger.info("%s geocoder found no match for %r", self.provider, query)
        return ValidationError(
            message=f"Could not find a location for '{query}'",
            field="address",
        )


class MapQuestGeocoder(Geocoder):
    """MapQuest Geocoding API v1 (requires GEOCODER_API_KEY)."""

    provider = "mapquest"
    BASE_URL = "https://www.mapquestapi.com/geocoding/v1/address"

    def __init__(self, api_key: str, **kwargs: Any):
        super().__init__(**kwargs)
        self._api_key = api_key

    async def geocode(self, query: str) -> GeocodeResult:
        payload = await self._get_json(
            self.BASE_URL,
            params={"key": self._api_key, "location": query, "maxResults": 1},
        )

        status_code = (payload.get("info") or {}).get("statuscode", 0)
        if status_code != 0:
            messages = (payload.get("info") or {}).get("messages") or []
            logger.error("MapQuest rejected request: status=%s %s", status_code, messages)
            raise GeocodingError(context={"provider": self.provider, "statuscode": status_code})

        results = payload.get("results") or []
        locations = results[0].get("locations") if results else None
        if not locations:
            raise self._no_match(query)

        loc = locations[0]
        lat_lng = loc.get("latLng") or {}
        if "lat" not in lat_lng or "lng" not in lat_lng:
            raise self._no_match(query)

        street = loc.get("street") or None
        city = loc.get("adminArea5") or None
        state = loc.get("adminArea3") or None
        zipcode = loc.get("postalCode") or None
        country = loc.get("adminArea1") or None
        return GeocodeResult(
            latitude=float(lat_lng["lat"]),
            longitude=float(lat_lng["lng"]),
            formatted_address=_format_address(
                street, city, " ".join(p for p in (state, zipcode) if p), country
            ),
            street=street,
            city=city,
            state=state,
            zipcode=zipcode,
            country=country,
        )


class NominatimGeocoder(Geocoder):
    """OpenStreetMap Nominatim search API (no key; a User-Agent is mandatory)."""

    provider = "openstreetmap"
    BASE_URL = "https://nominatim.openstreetmap.org/search"
    USER_AGENT = "devcamper-api"

    async def geocode(self, query: str) -> GeocodeResult:
        payload = await self._get_json(
            self.BASE_URL,
            params={"q": query, "format": "json", "addressdetails": 1, "limit": 1},
            headers={"User-Agent": self.USER_AGENT},
        )
        if not payload:
            raise self._no_match(query)

        place = payload[0]
        address = place.get("address") or {}
        street = " ".join(
            p for p in (address.get("house_number"), address.get("road")) if p
        ) or None
        country_code = address.get("country_code")
        return GeocodeResult(
            latitude=float(place["lat"]),
            longitude=float(place["lon"]),
            formatted_address=place.get("display_name"),
            street=street,
            city=address.get("city") or address.get("town") or address.get("village"),
            state=address.get("state"),
            zipcode=address.get("postcode"),
            country=country_code.upper() if country_code else None,
        )


def build_geocoder(settings: Settings) -> Geocoder:
    if settings.geocoder_provider == "openstreetmap":
        return NominatimGeocoder()
    return MapQuestGeocoder(api_key=settings.geocoder_api_key)
