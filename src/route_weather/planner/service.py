"""Route weather planning service."""

import asyncio
import logging
import zoneinfo
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from route_weather.config import MAX_WEATHER_POINTS
from route_weather.planner.models import RouteWeatherRequest, RouteWeatherResponse
from route_weather.routing.client import OpenRouteServiceClient, RoutingError
from route_weather.routing.geocoding import GeocodingService
from route_weather.routing.models import GeocodedLocation, SamplePoint
from route_weather.routing.sampling import select_points
from route_weather.weather.client import YrWeatherClient
from route_weather.weather.models import ForecastEntry, WeatherPoint
from route_weather.weather.timeline import (
    arrival_time, build_weather_point, compact_timeline, departure_time,
    resolve_forecast
)

logger = logging.getLogger(__name__)

TRAVEL_TYPES = ("departure", "arrival")


def validate_route_request(request: RouteWeatherRequest) -> Tuple[List[str], datetime]:
    """Validate a request before any upstream call is made.

    Args:
        request: Incoming request

    Returns:
        Tuple of (addresses in route order, requested date-time). The
        date-time is naive when the request did not carry a UTC offset.

    Raises:
        ValueError: If a required field is missing or malformed
    """
    start = (request.start_address or "").strip()
    end = (request.end_address or "").strip()
    if not start or not end:
        raise ValueError("Start and End addresses are required")

    has_base_time = bool(request.base_time)
    has_date_time = bool(request.travel_date and request.travel_time)
    if not (has_base_time or has_date_time) or not request.travel_type:
        raise ValueError("Travel date, time, and type are required")

    if request.travel_type not in TRAVEL_TYPES:
        raise ValueError(f"Invalid travel type '{request.travel_type}', expected 'departure' or 'arrival'")

    try:
        if has_base_time:
            requested = datetime.fromisoformat(request.base_time.replace("Z", "+00:00"))
        else:
            requested = datetime.fromisoformat(f"{request.travel_date}T{request.travel_time}")
    except ValueError as e:
        raise ValueError(f"Invalid date or time format: {e}")

    waypoints = [waypoint.strip() for waypoint in request.waypoints if waypoint and waypoint.strip()]
    return [start, *waypoints, end], requested


class RouteWeatherService:
    """Plans a route and the weather along it."""

    def __init__(
        self,
        geocoding_service: Optional[GeocodingService] = None,
        routing_client: Optional[OpenRouteServiceClient] = None,
        weather_client: Optional[YrWeatherClient] = None,
        max_points: int = MAX_WEATHER_POINTS
    ):
        """Initialize the planning service.

        Args:
            geocoding_service: Geocoding service (creates default if None)
            routing_client: Routing client (creates default if None)
            weather_client: Weather client (creates default if None)
            max_points: Maximum number of weather points sampled along a route
        """
        self.geocoding_service = geocoding_service or GeocodingService()
        self.routing_client = routing_client or OpenRouteServiceClient()
        self.weather_client = weather_client or YrWeatherClient()
        self.max_points = max_points

    async def plan(self, request: RouteWeatherRequest) -> RouteWeatherResponse:
        """Calculate a route and the weather expected along it.

        Args:
            request: Route weather request

        Returns:
            Route with the compacted weather timeline

        Raises:
            ValueError: If the request is invalid
            GeocodingError: If an address cannot be geocoded
            RoutingError: If no route can be calculated
            WeatherServiceError: If a forecast cannot be fetched
        """
        addresses, requested = validate_route_request(request)
        logger.info(f"Planning route through {len(addresses)} addresses, {request.travel_type} at {requested.isoformat()}")

        locations = await self.geocoding_service.geocode_all(addresses)
        base_time_ms, timezone_name = self._resolve_base_time(requested, locations[0])

        route = await self.routing_client.get_route(locations)
        points = select_points(route, self.max_points)
        if not points:
            raise RoutingError("Route geometry is empty")

        departure_ms = departure_time(base_time_ms, route.duration, request.travel_type)
        weather = await self._weather_along(points, departure_ms)

        return RouteWeatherResponse(
            route=route,
            weather=compact_timeline(weather),
            departure_time=departure_ms,
            arrival_time=arrival_time(departure_ms, route.duration),
            timezone=timezone_name,
        )

    def _resolve_base_time(self, requested: datetime, start: GeocodedLocation) -> Tuple[int, str]:
        """Convert the requested time to UTC milliseconds.

        Naive times are interpreted in the timezone of the start location.
        """
        if requested.tzinfo is not None:
            timezone_name = requested.tzname() or "UTC"
            aware = requested
        else:
            timezone_name = self.geocoding_service.get_timezone(start.lat, start.lon)
            aware = requested.replace(tzinfo=zoneinfo.ZoneInfo(timezone_name))

        base_time_ms = int(aware.astimezone(timezone.utc).timestamp() * 1000)
        logger.info(f"Base time {aware.isoformat()} ({timezone_name}) = {base_time_ms} ms UTC")
        return base_time_ms, timezone_name

    async def _weather_along(self, points: List[SamplePoint], departure_ms: int) -> List[WeatherPoint]:
        """Fetch forecasts for all points concurrently and pick the one at each arrival time."""
        results = await asyncio.gather(
            *(self.weather_client.get_timeseries(point.lat, point.lon) for point in points),
            return_exceptions=True
        )

        weather_points = []
        for index, (point, result) in enumerate(zip(points, results)):
            if isinstance(result, BaseException):
                raise result
            timeseries: List[ForecastEntry] = result

            point_time = arrival_time(departure_ms, point.time_offset_seconds)
            forecast = resolve_forecast(timeseries, point_time)
            if index == 0:
                source = "start"
            elif index == len(points) - 1:
                source = "end"
            else:
                source = "intermediate"

            logger.debug(f"Point {index} ({source}) at {point_time}: {forecast}")
            weather_points.append(build_weather_point(point.lat, point.lon, point_time, forecast, source))

        return weather_points

    async def aclose(self):
        """Close the upstream HTTP clients."""
        for client in (self.routing_client, self.weather_client):
            try:
                await client.aclose()
            except Exception as e:
                logger.error(f"Error closing client {client.__class__.__name__}: {e}")

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.aclose()
