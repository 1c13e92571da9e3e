"""HTTP client for the OpenRouteService directions API."""

import logging
from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError

from route_weather.config import (
    ORS_API_KEY, ORS_BASE_URL, ORS_PROFILE, HTTP_TIMEOUT_SECONDS
)
from route_weather.routing.models import GeocodedLocation, Route, RouteSegment

logger = logging.getLogger(__name__)


class RoutingError(Exception):
    """Raised when a route cannot be calculated."""
    pass


class OpenRouteServiceClient:
    """Async client for fetching driving routes from OpenRouteService."""

    def __init__(
        self,
        api_key: str = ORS_API_KEY,
        base_url: str = ORS_BASE_URL,
        profile: str = ORS_PROFILE,
        client: Optional[httpx.AsyncClient] = None
    ):
        """Initialize the routing client.

        Args:
            api_key: OpenRouteService API key, sent in the Authorization header
            base_url: Base URL of the OpenRouteService API
            profile: Routing profile, e.g. ``driving-car``
            client: Optional preconfigured HTTP client
        """
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.profile = profile
        self.client = client or httpx.AsyncClient(timeout=HTTP_TIMEOUT_SECONDS)

    async def get_route(self, locations: List[GeocodedLocation]) -> Route:
        """Calculate a driving route through the given locations in order.

        Args:
            locations: Start, waypoints and end

        Returns:
            Parsed route with geometry and step breakdown

        Raises:
            RoutingError: If the request fails or the response is unusable
        """
        if len(locations) < 2:
            raise RoutingError("At least two locations are required to calculate a route")
        if not self.api_key:
            raise RoutingError("Routing service is not configured (ORS_API_KEY missing)")

        url = f"{self.base_url}/v2/directions/{self.profile}/geojson"
        body = {"coordinates": [[location.lon, location.lat] for location in locations]}
        headers = {
            "Authorization": self.api_key,
            "Content-Type": "application/json",
            "Accept": "application/json, application/geo+json",
        }

        logger.info(f"Requesting route through {len(locations)} locations")

        try:
            response = await self.client.post(url, json=body, headers=headers)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"HTTP error from OpenRouteService: {e.response.status_code} - {e.response.text}")
            raise RoutingError(f"Routing service error: {e.response.status_code}") from e
        except httpx.RequestError as e:
            logger.error(f"Request error to OpenRouteService: {e}")
            raise RoutingError("Routing service temporarily unavailable") from e
        except ValueError as e:
            logger.error(f"Invalid JSON from OpenRouteService: {e}")
            raise RoutingError("Invalid route data received") from e

        route = self._parse_route(data)
        logger.info(f"Route calculated: {route.distance:.0f} m, {route.duration:.0f} s, {len(route.coordinates)} coordinates")
        return route

    def _parse_route(self, data: Dict[str, Any]) -> Route:
        """Parse a GeoJSON directions response.

        Args:
            data: Raw FeatureCollection from OpenRouteService

        Returns:
            Route built from the first feature

        Raises:
            RoutingError: If the response has no route or lacks a summary
        """
        features = data.get("features") or []
        if not features:
            raise RoutingError("No route found between the given locations")

        feature = features[0]
        properties = feature.get("properties") or {}
        summary = properties.get("summary")
        geometry = feature.get("geometry") or {}

        if summary is None or geometry.get("type") != "LineString":
            logger.error(f"Route response missing summary or LineString geometry: {properties}")
            raise RoutingError("Invalid route data received")

        if "segments" not in properties:
            logger.warning("Route response has no segments, intermediate sampling will be skipped")

        try:
            return Route(
                distance=summary.get("distance", 0.0),
                duration=summary.get("duration", 0.0),
                coordinates=[(coordinate[0], coordinate[1]) for coordinate in geometry.get("coordinates", [])],
                segments=[RouteSegment(**segment) for segment in properties.get("segments", [])],
                bbox=feature.get("bbox") or data.get("bbox"),
            )
        except (ValidationError, TypeError, IndexError) as e:
            logger.error(f"Invalid route data format: {e}")
            raise RoutingError("Invalid route data received") from e

    async def aclose(self):
        """Close the async HTTP client."""
        await self.client.aclose()

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.aclose()
