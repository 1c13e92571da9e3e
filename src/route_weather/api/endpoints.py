"""API endpoints for the route weather service."""

import logging
from functools import lru_cache

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi_cache.decorator import cache
from pydantic import ValidationError

from route_weather.config import (
    AUTOCOMPLETE_MIN_QUERY_LENGTH, CACHE_EXPIRE_SECONDS, DEFAULT_LOCALE,
    LOCALES, MAX_WEATHER_POINTS
)
from route_weather.i18n import UnknownLocaleError, load_messages
from route_weather.planner.models import RouteWeatherRequest, RouteWeatherResponse
from route_weather.planner.service import RouteWeatherService
from route_weather.routing.client import RoutingError
from route_weather.routing.geocoding import GeocodingError, GeocodingService
from route_weather.weather.client import WeatherServiceError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["route-weather"])


@lru_cache(maxsize=1)
def get_geocoding_service() -> GeocodingService:
    """Dependency returning the shared geocoding service."""
    return GeocodingService()


def get_route_weather_service(
    geocoding_service: GeocodingService = Depends(get_geocoding_service)
) -> RouteWeatherService:
    """Dependency to get a route weather service instance."""
    return RouteWeatherService(geocoding_service=geocoding_service)


@router.post("/route-weather", response_model=RouteWeatherResponse)
async def plan_route_weather(
    request: RouteWeatherRequest,
    service: RouteWeatherService = Depends(get_route_weather_service)
) -> RouteWeatherResponse:
    """Calculate a route and the weather expected along it.

    Args:
        request: Addresses, requested time and whether it is a departure or arrival

    Returns:
        Route with the compacted weather timeline

    Raises:
        HTTPException: 400 for invalid input or unknown addresses,
            502 if the routing or weather service fails
    """
    try:
        async with service:
            result = await service.plan(request)

        logger.info(f"Successfully planned route with {len(result.weather)} weather points")
        return result

    except GeocodingError as e:
        logger.error(f"Geocoding failed for address '{e.address}': {e}")
        raise HTTPException(status_code=400, detail=str(e))

    except ValidationError as e:
        logger.error(f"Data validation error: {e}")
        raise HTTPException(status_code=500, detail="Internal server error: data validation failed")

    except ValueError as e:
        logger.error(f"Invalid route weather request: {e}")
        raise HTTPException(status_code=400, detail=str(e))

    except (RoutingError, WeatherServiceError) as e:
        logger.error(f"Upstream service error: {e}")
        raise HTTPException(status_code=502, detail=str(e))

    except Exception as e:
        logger.exception(f"Unexpected error planning route: {e}")
        raise HTTPException(status_code=500, detail="An internal server error occurred during calculation")


@router.get("/autocomplete")
@cache(expire=CACHE_EXPIRE_SECONDS)
async def autocomplete(
    q: str = Query("", description="Partial address"),
    geocoding_service: GeocodingService = Depends(get_geocoding_service)
) -> dict:
    """Suggest addresses for a partial query.

    Queries shorter than three characters return no suggestions.

    Returns:
        Dictionary with a ``suggestions`` list
    """
    query = q.strip()
    if len(query) < AUTOCOMPLETE_MIN_QUERY_LENGTH:
        return {"suggestions": []}

    try:
        suggestions = await geocoding_service.autocomplete(query)
    except GeocodingError as e:
        raise HTTPException(status_code=502, detail=str(e))

    return {"suggestions": [suggestion.model_dump() for suggestion in suggestions]}


@router.get("/messages/{locale}")
async def get_messages(locale: str) -> dict:
    """UI message catalogue for a locale."""
    try:
        return load_messages(locale)
    except UnknownLocaleError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/health")
async def health_check() -> dict:
    """Health check endpoint.

    Returns:
        Health status response
    """
    return {"status": "healthy", "service": "route-weather"}


@router.get("/info")
async def get_service_info() -> dict:
    """Get service information.

    Returns:
        Service information including supported locales and data sources
    """
    return {
        "service": "Route Weather Planner",
        "version": "0.1.0",
        "locales": list(LOCALES),
        "default_locale": DEFAULT_LOCALE,
        "max_weather_points": MAX_WEATHER_POINTS,
        "features": [
            "Driving routes with optional waypoints",
            "Weather forecast at the expected arrival time along the route",
            "Departure or arrival based planning",
        ],
        "data_sources": ["OpenRouteService", "MET Norway yr.no API", "OpenStreetMap Nominatim"],
    }
