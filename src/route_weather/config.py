"""Configuration settings for the route weather service."""

import os
from typing import Final, Tuple
from dotenv import load_dotenv

load_dotenv()

# Upstream APIs
YR_API_BASE_URL: Final[str] = "https://api.met.no/weatherapi/locationforecast/2.0/compact"
ORS_BASE_URL: str = os.getenv("ORS_BASE_URL", "https://api.openrouteservice.org")
ORS_PROFILE: str = os.getenv("ORS_PROFILE", "driving-car")
ORS_API_KEY: str = os.getenv("ORS_API_KEY", "")
USER_AGENT: str = os.getenv("USER_AGENT", "RouteWeatherPlanner/0.1 (user@example.com)")
GEOCODING_USER_AGENT: str = os.getenv("GEOCODING_USER_AGENT", USER_AGENT)
HTTP_TIMEOUT_SECONDS: float = float(os.getenv("HTTP_TIMEOUT_SECONDS", "30"))

# Server configuration
HOST: str = os.getenv("HOST", "0.0.0.0")
PORT: int = int(os.getenv("PORT", "8000"))
DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"

# Sampling and timeline settings
MAX_WEATHER_POINTS: int = int(os.getenv("MAX_WEATHER_POINTS", "5"))
MAX_TIMELINE_POINTS: int = int(os.getenv("MAX_TIMELINE_POINTS", "5"))
TEMPERATURE_CHANGE_THRESHOLD: float = float(os.getenv("TEMPERATURE_CHANGE_THRESHOLD", "2"))  # Celsius

# Autocomplete
AUTOCOMPLETE_MIN_QUERY_LENGTH: int = 3
AUTOCOMPLETE_LIMIT: int = int(os.getenv("AUTOCOMPLETE_LIMIT", "5"))

# Redis cache configuration
REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379")
CACHE_EXPIRE_SECONDS: int = int(os.getenv("CACHE_EXPIRE_SECONDS", "600"))
CACHE_PREFIX: str = os.getenv("CACHE_PREFIX", "route-weather")

# Rate limiting configuration
RATE_LIMIT_REQUESTS_PER_SECOND: int = int(os.getenv("RATE_LIMIT_REQUESTS_PER_SECOND", "10"))
RATE_LIMIT_REDIS_KEY_PREFIX: str = os.getenv("RATE_LIMIT_REDIS_KEY_PREFIX", "rate_limit")
RATE_LIMIT_ENABLED: bool = os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"

# Localization
LOCALES: Final[Tuple[str, ...]] = ("en", "no", "es")
DEFAULT_LOCALE: Final[str] = "en"
