"""Request and response models for route weather planning."""

from typing import List, Optional

from pydantic import BaseModel, Field

from route_weather.routing.models import Route
from route_weather.weather.models import WeatherPoint


class RouteWeatherRequest(BaseModel):
    """Route weather request.

    The requested time is either ``base_time`` (ISO-8601, with or without a
    UTC offset) or ``travel_date`` plus ``travel_time``. Times without an
    offset are local to the start location.
    """
    start_address: Optional[str] = Field(None, description="Start address")
    waypoints: List[str] = Field(default_factory=list, description="Intermediate stops, in order")
    end_address: Optional[str] = Field(None, description="Destination address")
    base_time: Optional[str] = Field(None, description="ISO-8601 date-time")
    travel_date: Optional[str] = Field(None, description="Date in YYYY-MM-DD format")
    travel_time: Optional[str] = Field(None, description="Time in HH:MM format")
    travel_type: Optional[str] = Field(None, description="'departure' or 'arrival'")


class RouteWeatherResponse(BaseModel):
    """Route and the weather expected along it."""
    route: Route = Field(..., description="Calculated route")
    weather: List[WeatherPoint] = Field(..., description="Weather timeline along the route")
    departure_time: int = Field(..., description="Departure in milliseconds since epoch (UTC)")
    arrival_time: int = Field(..., description="Arrival in milliseconds since epoch (UTC)")
    timezone: str = Field(..., description="Timezone used for times given without an offset")
