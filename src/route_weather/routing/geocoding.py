"""Geocoding service for address lookup, autocomplete and timezones."""

import asyncio
import logging
from functools import lru_cache
from typing import List, Optional

from geopy.exc import GeocoderServiceError, GeocoderTimedOut, GeocoderUnavailable
from geopy.geocoders import Nominatim
from timezonefinder import TimezoneFinder

from route_weather.config import AUTOCOMPLETE_LIMIT, GEOCODING_USER_AGENT
from route_weather.routing.models import GeocodedLocation, Suggestion

logger = logging.getLogger(__name__)


class GeocodingError(Exception):
    """Raised when an address cannot be geocoded."""

    def __init__(self, address: str, message: Optional[str] = None):
        self.address = address
        super().__init__(message or f"Could not find coordinates for address: {address}")


class GeocodingService:
    """Service for geocoding operations and timezone detection."""

    def __init__(self, geolocator=None, timezone_finder: Optional[TimezoneFinder] = None):
        """Initialize the geocoding service.

        Args:
            geolocator: geopy geocoder (Nominatim if None)
            timezone_finder: TimezoneFinder instance (created lazily if None)
        """
        self.geolocator = geolocator or Nominatim(user_agent=GEOCODING_USER_AGENT)
        self._tf = timezone_finder
        logger.info("GeocodingService initialized")

    @property
    def tf(self) -> TimezoneFinder:
        # Loading the timezone polygons is slow, only pay for it when needed
        if self._tf is None:
            self._tf = TimezoneFinder(in_memory=True)
        return self._tf

    @lru_cache(maxsize=1000)
    def forward_geocode(self, address: str) -> GeocodedLocation:
        """Convert an address to coordinates.

        Args:
            address: Free-form address

        Returns:
            Geocoded location

        Raises:
            GeocodingError: If the address is not found or the geocoder fails
        """
        try:
            logger.info(f"Geocoding address: {address}")
            location = self.geolocator.geocode(address)
        except (GeocoderUnavailable, GeocoderTimedOut) as e:
            logger.error(f"Geocoding service unavailable for '{address}': {e}")
            raise GeocodingError(address, f"Geocoding service temporarily unavailable for address: {address}")
        except GeocoderServiceError as e:
            logger.error(f"Geocoding error for '{address}': {e}")
            raise GeocodingError(address, f"Failed to geocode address: {address}")

        if not location:
            logger.warning(f"No match for address '{address}'")
            raise GeocodingError(address)

        result = GeocodedLocation(
            address=address,
            lat=location.latitude,
            lon=location.longitude,
            label=location.address
        )
        logger.info(f"Successfully geocoded '{address}' to ({result.lat}, {result.lon})")
        return result

    async def geocode(self, address: str) -> GeocodedLocation:
        """Geocode an address without blocking the event loop."""
        return await asyncio.to_thread(self.forward_geocode, address)

    async def geocode_all(self, addresses: List[str]) -> List[GeocodedLocation]:
        """Geocode addresses concurrently.

        Args:
            addresses: Addresses in route order

        Returns:
            Locations in the same order

        Raises:
            GeocodingError: For the first address (in route order) that failed
        """
        results = await asyncio.gather(
            *(self.geocode(address) for address in addresses),
            return_exceptions=True
        )
        for result in results:
            if isinstance(result, BaseException):
                raise result
        return list(results)

    def suggest(self, query: str, limit: int = AUTOCOMPLETE_LIMIT) -> List[Suggestion]:
        """Look up address suggestions for a partial query.

        Args:
            query: Partial address
            limit: Maximum number of suggestions

        Returns:
            Suggestions, empty if nothing matched

        Raises:
            GeocodingError: If the geocoder is unavailable
        """
        try:
            locations = self.geolocator.geocode(query, exactly_one=False, limit=limit)
        except (GeocoderUnavailable, GeocoderTimedOut, GeocoderServiceError) as e:
            logger.error(f"Autocomplete lookup failed for '{query}': {e}")
            raise GeocodingError(query, "Geocoding service temporarily unavailable")

        suggestions = [
            Suggestion(label=location.address, coordinates=(location.longitude, location.latitude))
            for location in locations or []
        ]
        logger.info(f"Found {len(suggestions)} suggestions for '{query}'")
        return suggestions

    async def autocomplete(self, query: str, limit: int = AUTOCOMPLETE_LIMIT) -> List[Suggestion]:
        """Async wrapper around :meth:`suggest`."""
        return await asyncio.to_thread(self.suggest, query, limit)

    def get_timezone(self, lat: float, lon: float) -> str:
        """Get timezone for coordinates.

        Args:
            lat: Latitude
            lon: Longitude

        Returns:
            Timezone string (e.g., "Europe/Oslo") or "UTC" if not found
        """
        try:
            timezone = self.tf.timezone_at(lng=lon, lat=lat)
        except ValueError as e:
            logger.error(f"Error getting timezone for ({lat}, {lon}): {e}")
            return "UTC"

        if timezone:
            logger.info(f"Found timezone '{timezone}' for ({lat}, {lon})")
            return timezone

        logger.warning(f"No timezone found for ({lat}, {lon}), defaulting to UTC")
        return "UTC"
