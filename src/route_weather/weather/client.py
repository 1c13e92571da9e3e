"""HTTP client for yr.no weather API."""

import logging
from typing import List, Optional

import httpx
from pydantic import ValidationError

from route_weather.config import YR_API_BASE_URL, USER_AGENT, HTTP_TIMEOUT_SECONDS
from route_weather.weather.models import (
    ForecastEntry, YrForecastResponse, YrTimeseriesEntry
)

logger = logging.getLogger(__name__)


class WeatherServiceError(Exception):
    """Raised when a forecast cannot be fetched."""

    def __init__(self, lat: float, lon: float, message: str):
        self.lat = lat
        self.lon = lon
        super().__init__(f"{message} (lat={lat:.4f}, lon={lon:.4f})")


class YrWeatherClient:
    """Async client for fetching weather data from yr.no API."""

    def __init__(
        self,
        base_url: str = YR_API_BASE_URL,
        user_agent: str = USER_AGENT,
        client: Optional[httpx.AsyncClient] = None
    ):
        """Initialize the weather client.

        Args:
            base_url: Base URL for yr.no API
            user_agent: User-Agent header for API requests (required by MET Norway)
            client: Optional preconfigured HTTP client
        """
        self.base_url = base_url
        self.user_agent = user_agent
        self.client = client or httpx.AsyncClient(timeout=HTTP_TIMEOUT_SECONDS)
        self.client.headers.update({"User-Agent": self.user_agent, "Accept": "application/json"})

    async def get_timeseries(self, lat: float, lon: float) -> List[ForecastEntry]:
        """Fetch the forecast timeseries for given coordinates.

        Args:
            lat: Latitude in decimal degrees
            lon: Longitude in decimal degrees

        Returns:
            Forecast entries in the order returned by the API

        Raises:
            ValueError: If coordinates are invalid
            WeatherServiceError: If the API request fails or the response is malformed
        """
        if not (-90 <= lat <= 90) or not (-180 <= lon <= 180):
            raise ValueError(f"Invalid coordinates: lat={lat}, lon={lon}")

        params = {"lat": round(lat, 4), "lon": round(lon, 4)}
        logger.info(f"Fetching forecast for lat={params['lat']}, lon={params['lon']}")

        try:
            response = await self.client.get(self.base_url, params=params)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"HTTP error from yr.no API: {e.response.status_code} - {e.response.text}")
            raise WeatherServiceError(lat, lon, f"Weather service error: {e.response.status_code}") from e
        except httpx.RequestError as e:
            logger.error(f"Request error to yr.no API: {e}")
            raise WeatherServiceError(lat, lon, "Weather service temporarily unavailable") from e
        except ValueError as e:
            logger.error(f"Invalid JSON from yr.no API: {e}")
            raise WeatherServiceError(lat, lon, "Invalid weather data received") from e

        try:
            forecast_response = YrForecastResponse(**data)
        except (ValidationError, TypeError) as e:
            logger.error(f"Invalid API response format: {e}")
            raise WeatherServiceError(lat, lon, "Invalid weather data received") from e

        entries = self._parse_timeseries(forecast_response.properties.get("timeseries") or [])
        logger.info(f"Successfully fetched forecast with {len(entries)} timeseries entries")
        return entries

    def _parse_timeseries(self, timeseries: list) -> List[ForecastEntry]:
        """Convert raw timeseries entries, skipping malformed ones."""
        entries = []
        for raw_entry in timeseries:
            try:
                entries.append(YrTimeseriesEntry.model_validate(raw_entry).to_forecast_entry())
            except ValidationError as e:
                logger.warning(f"Skipping invalid timeseries entry: {e}")
                continue
        return entries

    async def aclose(self):
        """Close the async HTTP client."""
        await self.client.aclose()

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.aclose()
