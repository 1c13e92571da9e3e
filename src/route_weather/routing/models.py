"""Data models for geocoding and routing."""

from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

# (longitude, latitude), the order used by GeoJSON and OpenRouteService
Coordinate = Tuple[float, float]


class GeocodedLocation(BaseModel):
    """An address resolved to coordinates."""
    model_config = ConfigDict(frozen=True)

    address: str = Field(..., description="Address as entered by the user")
    lat: float = Field(..., ge=-90, le=90, description="Latitude in decimal degrees")
    lon: float = Field(..., ge=-180, le=180, description="Longitude in decimal degrees")
    label: Optional[str] = Field(None, description="Display name returned by the geocoder")


class Suggestion(BaseModel):
    """Address autocomplete suggestion."""
    label: str = Field(..., description="Display text")
    coordinates: Coordinate = Field(..., description="[lon, lat] of the suggestion")


class RouteStep(BaseModel):
    """Smallest routing unit with its own duration and polyline sub-range."""
    model_config = ConfigDict(frozen=True)

    duration: float = Field(0.0, ge=0, description="Step duration in seconds")
    way_points: Tuple[int, int] = Field(..., description="Inclusive polyline index range")


class RouteSegment(BaseModel):
    """Route leg between two consecutive requested locations."""
    model_config = ConfigDict(frozen=True)

    distance: float = Field(0.0, description="Segment distance in meters")
    duration: float = Field(0.0, description="Segment duration in seconds")
    steps: List[RouteStep] = Field(default_factory=list)


class Route(BaseModel):
    """Driving route returned by the routing provider."""
    model_config = ConfigDict(frozen=True)

    distance: float = Field(..., ge=0, description="Total distance in meters")
    duration: float = Field(..., ge=0, description="Total duration in seconds")
    coordinates: List[Coordinate] = Field(..., description="Route polyline as [lon, lat] pairs")
    segments: List[RouteSegment] = Field(default_factory=list, description="Per-leg step breakdown")
    bbox: Optional[List[float]] = Field(None, description="Bounding box of the route geometry")


class SamplePoint(BaseModel):
    """Point on the route together with the elapsed time from departure."""
    model_config = ConfigDict(frozen=True)

    lon: float
    lat: float
    time_offset_seconds: float = Field(..., ge=0)

    @property
    def coordinate(self) -> Coordinate:
        return self.lon, self.lat
