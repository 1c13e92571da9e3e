import os

# Must be set before route_weather.config is imported
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ.setdefault("ORS_API_KEY", "test-key")

from types import SimpleNamespace
from typing import List

import pytest

from route_weather.routing.geocoding import GeocodingError
from route_weather.routing.models import GeocodedLocation, Route, RouteSegment, RouteStep
from route_weather.weather.models import ForecastEntry

T0 = 1_744_884_000_000  # 2025-04-17T10:00:00Z
HOUR_MS = 3_600_000


def straight_route(duration: float = 3600.0, count: int = 11) -> Route:
    """Route along a line of ``count`` coordinates split into two equal steps."""
    coordinates = [(10.0 + i * 0.1, 60.0) for i in range(count)]
    middle = (count - 1) // 2
    return Route(
        distance=50_000.0,
        duration=duration,
        coordinates=coordinates,
        segments=[
            RouteSegment(
                distance=50_000.0,
                duration=duration,
                steps=[
                    RouteStep(duration=duration / 2, way_points=(0, middle)),
                    RouteStep(duration=duration / 2, way_points=(middle, count - 1)),
                ],
            )
        ],
    )


def hourly_series(start_ms: int, temperatures: List[float], symbol: str = "cloudy") -> List[ForecastEntry]:
    return [
        ForecastEntry(time=start_ms + i * HOUR_MS, temperature=temperature, symbol_code=symbol)
        for i, temperature in enumerate(temperatures)
    ]


class FakeGeolocator:
    """Stands in for a geopy geocoder."""

    def __init__(self, places=None, error=None):
        self.places = places or {}
        self.error = error
        self.queries = []

    def geocode(self, query, exactly_one=True, limit=None):
        self.queries.append(query)
        if self.error:
            raise self.error
        matches = [
            SimpleNamespace(latitude=lat, longitude=lon, address=f"{name}, Norway")
            for name, (lat, lon) in self.places.items()
            if name.lower().startswith(query.lower())
        ]
        if exactly_one:
            return matches[0] if matches else None
        return matches[:limit] if matches else None


class FakeGeocodingService:
    """Async geocoding stand-in used by service and API tests."""

    def __init__(self, places=None, timezone="Europe/Oslo"):
        self.places = places if places is not None else {
            "Oslo": (59.9139, 10.7522),
            "Hamar": (60.7945, 11.0680),
            "Trondheim": (63.4305, 10.3951),
        }
        self.timezone = timezone
        self.calls = []

    async def geocode_all(self, addresses):
        self.calls.append(list(addresses))
        locations = []
        for address in addresses:
            if address not in self.places:
                raise GeocodingError(address)
            lat, lon = self.places[address]
            locations.append(GeocodedLocation(address=address, lat=lat, lon=lon, label=address))
        return locations

    async def autocomplete(self, query, limit=5):
        self.calls.append(query)
        return []

    def get_timezone(self, lat, lon):
        return self.timezone


class FakeRoutingClient:
    def __init__(self, route=None, error=None):
        self.route = route or straight_route()
        self.error = error
        self.locations = None
        self.closed = False

    async def get_route(self, locations):
        self.locations = locations
        if self.error:
            raise self.error
        return self.route

    async def aclose(self):
        self.closed = True


class FakeWeatherClient:
    def __init__(self, series=None, error=None):
        self.series = series if series is not None else hourly_series(T0 - 2 * HOUR_MS, [10.0] * 6)
        self.error = error
        self.requests = []
        self.closed = False

    async def get_timeseries(self, lat, lon):
        self.requests.append((lat, lon))
        if self.error:
            raise self.error
        return self.series

    async def aclose(self):
        self.closed = True


@pytest.fixture
def geocoding_service():
    return FakeGeocodingService()


@pytest.fixture
def routing_client():
    return FakeRoutingClient()


@pytest.fixture
def weather_client():
    return FakeWeatherClient()
