"""Data models for weather forecasts along a route."""

from datetime import datetime, timezone
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

PointSource = Literal["start", "intermediate", "end"]


class ForecastEntry(BaseModel):
    """Single forecast time step, flattened from the yr.no timeseries."""
    model_config = ConfigDict(frozen=True)

    time: int = Field(..., description="Forecast time in milliseconds since epoch (UTC)")
    temperature: Optional[float] = Field(None, description="Air temperature in Celsius")
    symbol_code: Optional[str] = Field(None, description="Shortest-horizon weather symbol")
    wind_speed: Optional[float] = Field(None, description="Wind speed in m/s")
    wind_from_direction: Optional[float] = Field(None, description="Wind direction in degrees")


class ResolvedForecast(BaseModel):
    """Forecast selected for one arrival time."""
    model_config = ConfigDict(frozen=True)

    temperature: float
    symbol_code: Optional[str] = None
    wind_speed: Optional[float] = None
    wind_from_direction: Optional[float] = None


class WeatherPoint(BaseModel):
    """Point on the route with the forecast at the expected arrival time."""
    model_config = ConfigDict(frozen=True)

    lat: float = Field(..., ge=-90, le=90, description="Latitude in decimal degrees")
    lon: float = Field(..., ge=-180, le=180, description="Longitude in decimal degrees")
    time: int = Field(..., description="Arrival time in milliseconds since epoch (UTC)")
    temperature: Optional[float] = Field(None, description="Temperature in Celsius")
    symbol_code: Optional[str] = Field(None, description="Weather symbol, e.g. 'clearsky_day'")
    wind_speed: Optional[float] = Field(None, description="Wind speed in m/s")
    wind_from_direction: Optional[float] = Field(None, description="Wind direction in degrees (0-360)")
    source: PointSource = Field(..., description="Role of the point on the route")


class YrSummary(BaseModel):
    """Summary block of a yr.no forecast period."""
    symbol_code: Optional[str] = None


class YrPeriod(BaseModel):
    """Forecast period (next 1, 6 or 12 hours)."""
    summary: Optional[YrSummary] = None


class YrInstantDetails(BaseModel):
    """Instant values of a yr.no time step."""
    air_temperature: Optional[float] = None
    wind_speed: Optional[float] = None
    wind_from_direction: Optional[float] = None


class YrInstant(BaseModel):
    details: YrInstantDetails = Field(default_factory=YrInstantDetails)


class YrEntryData(BaseModel):
    instant: YrInstant = Field(default_factory=YrInstant)
    next_1_hours: Optional[YrPeriod] = None
    next_6_hours: Optional[YrPeriod] = None
    next_12_hours: Optional[YrPeriod] = None

    def symbol_code(self) -> Optional[str]:
        """Symbol code of the shortest forecast period that has one."""
        for period in (self.next_1_hours, self.next_6_hours, self.next_12_hours):
            if period and period.summary and period.summary.symbol_code:
                return period.summary.symbol_code
        return None


class YrTimeseriesEntry(BaseModel):
    """Raw timeseries entry from yr.no API."""
    time: datetime = Field(..., description="ISO timestamp")
    data: YrEntryData = Field(..., description="Weather data")

    def to_forecast_entry(self) -> ForecastEntry:
        time = self.time if self.time.tzinfo else self.time.replace(tzinfo=timezone.utc)
        details = self.data.instant.details
        return ForecastEntry(
            time=int(time.timestamp() * 1000),
            temperature=details.air_temperature,
            symbol_code=self.data.symbol_code(),
            wind_speed=details.wind_speed,
            wind_from_direction=details.wind_from_direction,
        )


class YrForecastResponse(BaseModel):
    """Raw response from yr.no Locationforecast API."""
    type: str = Field(..., description="GeoJSON type")
    geometry: dict = Field(..., description="Location geometry")
    properties: dict = Field(..., description="Forecast properties")


class ErrorResponse(BaseModel):
    """Error response model."""
    detail: str = Field(..., description="Error message")
