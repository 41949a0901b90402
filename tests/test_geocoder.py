"""
DevCamper API — Geocoder Unit Tests
====================================

What:  Tests for the MapQuest and Nominatim providers.
How:   Providers are built with an `httpx.MockTransport`, so the real
       request is constructed and the canned JSON is parsed, with no network.

Test Strategy:
    ✅ Provider JSON is mapped into GeocodeResult
    ✅ Non-2xx, transport errors and bad JSON → GeocodingError
    ✅ No match → ValidationError on `address`
    ✅ build_geocoder picks the provider from settings
"""

import httpx
import pytest

from devcamper.config import Settings
from devcamper.exceptions import GeocodingError, ValidationError
from devcamper.services.geocoder import (
    MapQuestGeocoder,
    NominatimGeocoder,
    build_geocoder,
)

MAPQUEST_OK = {
    "info": {"statuscode": 0, "messages": []},
    "results": [
        {
            "locations": [
                {
                    "street": "233 Bay State Rd",
                    "adminArea5": "Boston",
                    "adminArea3": "MA",
                    "postalCode": "02215",
                    "adminArea1": "US",
                    "latLng": {"lat": 42.350598, "lng": -71.105123},
                }
            ]
        }
    ],
}

NOMINATIM_OK = [
    {
        "lat": "42.3505",
        "lon": "-71.1054",
        "display_name": "233, Bay State Road, Boston, Massachusetts, 02215, United States",
        "address": {
            "house_number": "233",
            "road": "Bay State Road",
            "city": "Boston",
            "state": "Massachusetts",
            "postcode": "02215",
            "country_code": "us",
        },
    }
]


def _transport(status_code=200, json=None, content=None, seen=None):
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        if content is not None:
            return httpx.Response(status_code, content=content)
        return httpx.Response(status_code, json=json)

    return httpx.MockTransport(handler)


class TestMapQuest:
    @pytest.mark.asyncio
    async def test_maps_first_location(self):
        seen = []
        geocoder = MapQuestGeocoder("key-123", transport=_transport(json=MAPQUEST_OK, seen=seen))

        result = await geocoder.geocode("233 Bay State Rd Boston MA 02215")

        assert result.latitude == 42.350598
        assert result.longitude == -71.105123
        assert result.city == "Boston"
        assert result.state == "MA"
        assert result.zipcode == "02215"
        assert result.country == "US"
        assert result.formatted_address == "233 Bay State Rd, Boston, MA 02215, US"

        [request] = seen
        assert request.url.host == "www.mapquestapi.com"
        assert request.url.params["key"] == "key-123"
        assert request.url.params["location"] == "233 Bay State Rd Boston MA 02215"

    @pytest.mark.asyncio
    async def test_no_locations_is_validation_error(self):
        payload = {"info": {"statuscode": 0}, "results": [{"locations": []}]}
        geocoder = MapQuestGeocoder("key", transport=_transport(json=payload))

        with pytest.raises(ValidationError) as exc_info:
            await geocoder.geocode("nowhere")
        assert exc_info.value.status_code == 400

    @pytest.mark.asyncio
    async def test_rejected_key(self):
        payload = {"info": {"statuscode": 403, "messages": ["bad key"]}, "results": []}
        geocoder = MapQuestGeocoder("bad", transport=_transport(json=payload))

        with pytest.raises(GeocodingError):
            await geocoder.geocode("Boston")

    @pytest.mark.asyncio
    async def test_http_error(self):
        geocoder = MapQuestGeocoder("key", transport=_transport(status_code=502, json={}))

        with pytest.raises(GeocodingError) as exc_info:
            await geocoder.geocode("Boston")
        assert exc_info.value.status_code == 503
        assert exc_info.value.context["status_code"] == 502

    @pytest.mark.asyncio
    async def test_bad_json(self):
        geocoder = MapQuestGeocoder("key", transport=_transport(content=b"<html>oops</html>"))

        with pytest.raises(GeocodingError):
            await geocoder.geocode("Boston")

    @pytest.mark.asyncio
    async def test_connection_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        geocoder = MapQuestGeocoder("key", transport=httpx.MockTransport(handler))

        with pytest.raises(GeocodingError):
            await geocoder.geocode("Boston")


class TestNominatim:
    @pytest.mark.asyncio
    async def test_maps_first_place(self):
        seen = []
        geocoder = NominatimGeocoder(transport=_transport(json=NOMINATIM_OK, seen=seen))

        result = await geocoder.geocode("02215")

        assert result.latitude == pytest.approx(42.3505)
        assert result.longitude == pytest.approx(-71.1054)
        assert result.street == "233 Bay State Road"
        assert result.city == "Boston"
        assert result.zipcode == "02215"
        assert result.country == "US"
        assert seen[0].headers["User-Agent"] == NominatimGeocoder.USER_AGENT

    @pytest.mark.asyncio
    async def test_empty_result(self):
        geocoder = NominatimGeocoder(transport=_transport(json=[]))

        with pytest.raises(ValidationError) as exc_info:
            await geocoder.geocode("00000")
        assert exc_info.value.context["field"] == "address"


class TestBuildGeocoder:
    def test_mapquest(self):
        settings = Settings(_env_file=None, geocoder_provider="mapquest", geocoder_api_key="k")
        assert isinstance(build_geocoder(settings), MapQuestGeocoder)

    def test_openstreetmap(self):
        settings = Settings(_env_file=None, geocoder_provider="openstreetmap")
        assert isinstance(build_geocoder(settings), NominatimGeocoder)
