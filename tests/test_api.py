import pytest
from fastapi.testclient import TestClient
from fastapi_cache import FastAPICache
from fastapi_cache.backends.inmemory import InMemoryBackend

from conftest import T0, FakeGeocodingService, FakeRoutingClient, FakeWeatherClient
from route_weather.api.endpoints import get_geocoding_service, get_route_weather_service
from route_weather.main import app
from route_weather.planner.service import RouteWeatherService
from route_weather.routing.client import RoutingError
from route_weather.routing.models import Suggestion

REQUEST = {
    "start_address": "Oslo",
    "waypoints": ["Hamar"],
    "end_address": "Trondheim",
    "base_time": "2025-04-17T10:00:00Z",
    "travel_type": "departure",
}


class SuggestingGeocodingService(FakeGeocodingService):

    async def autocomplete(self, query, limit=5):
        self.calls.append(query)
        return [Suggestion(label=f"{query} sentrum", coordinates=(10.75, 59.91))]


@pytest.fixture(autouse=True)
def cache_backend():
    FastAPICache.init(InMemoryBackend(), prefix="test")
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def client():
    return TestClient(app)


def use_service(routing_client=None, weather_client=None):
    def factory():
        return RouteWeatherService(
            geocoding_service=FakeGeocodingService(),
            routing_client=routing_client or FakeRoutingClient(),
            weather_client=weather_client or FakeWeatherClient(),
        )
    app.dependency_overrides[get_route_weather_service] = factory


def test_route_weather(client):
    use_service()

    response = client.post("/api/route-weather", json=REQUEST)

    assert response.status_code == 200
    data = response.json()
    assert data["departure_time"] == T0
    assert data["route"]["duration"] == 3600.0
    assert len(data["route"]["coordinates"]) == 11
    assert [point["source"] for point in data["weather"]] == ["start", "end"]
    assert set(data["weather"][0]) >= {"lat", "lon", "time", "temperature", "symbol_code", "source"}


def test_route_weather_missing_address(client):
    use_service()

    response = client.post("/api/route-weather", json={**REQUEST, "end_address": ""})

    assert response.status_code == 400
    assert response.json()["detail"] == "Start and End addresses are required"


def test_route_weather_unknown_address(client):
    use_service()

    response = client.post("/api/route-weather", json={**REQUEST, "waypoints": ["Atlantis"]})

    assert response.status_code == 400
    assert response.json()["detail"] == "Could not find coordinates for address: Atlantis"


def test_route_weather_routing_failure(client):
    use_service(routing_client=FakeRoutingClient(error=RoutingError("Routing service error: 500")))

    response = client.post("/api/route-weather", json=REQUEST)

    assert response.status_code == 502
    assert "Routing service error" in response.json()["detail"]


def test_autocomplete_short_query(client):
    geocoding_service = SuggestingGeocodingService()
    app.dependency_overrides[get_geocoding_service] = lambda: geocoding_service

    response = client.get("/api/autocomplete", params={"q": "Os"})

    assert response.status_code == 200
    assert response.json() == {"suggestions": []}
    assert geocoding_service.calls == []


def test_autocomplete(client):
    geocoding_service = SuggestingGeocodingService()
    app.dependency_overrides[get_geocoding_service] = lambda: geocoding_service

    response = client.get("/api/autocomplete", params={"q": "Bergen"})

    assert response.status_code == 200
    assert response.json() == {
        "suggestions": [{"label": "Bergen sentrum", "coordinates": [10.75, 59.91]}]
    }


def test_messages(client):
    response = client.get("/api/messages/no")

    assert response.status_code == 200
    assert response.json()["Generic"]["arrival"] == "Ankomst"


def test_messages_unknown_locale(client):
    assert client.get("/api/messages/xx").status_code == 404


def test_root_redirects_to_negotiated_locale(client):
    response = client.get("/", headers={"Accept-Language": "nb-NO,nb;q=0.9,en;q=0.8"}, follow_redirects=False)

    assert response.status_code == 307
    assert response.headers["location"] == "/no/"


def test_localized_page(client):
    response = client.get("/es/")

    assert response.status_code == 200
    assert "text/html" in response.headers["content-type"]


def test_unknown_locale_page(client):
    assert client.get("/xx/").status_code == 404


def test_health(client):
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
