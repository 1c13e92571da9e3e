"""Forecast selection and weather timeline compaction."""

import logging
import math
from typing import List, Literal, Optional, Sequence

from route_weather.config import MAX_TIMELINE_POINTS, TEMPERATURE_CHANGE_THRESHOLD
from route_weather.weather.models import ForecastEntry, ResolvedForecast, WeatherPoint

logger = logging.getLogger(__name__)

TravelType = Literal["departure", "arrival"]


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def departure_time(base_time_ms: int, total_duration: float, travel_type: TravelType) -> int:
    """Departure time for a trip.

    Args:
        base_time_ms: Requested time in milliseconds since epoch (UTC)
        total_duration: Route duration in seconds
        travel_type: 'departure' when base time is the departure,
            'arrival' when it is the desired arrival

    Returns:
        Departure time in milliseconds since epoch (UTC)
    """
    if travel_type == "arrival":
        return base_time_ms - _round_half_up(total_duration * 1000)
    return base_time_ms


def arrival_time(departure_ms: int, offset_seconds: float) -> int:
    """Time at which the traveller reaches a point ``offset_seconds`` into the trip."""
    return departure_ms + _round_half_up(offset_seconds * 1000)


def _to_resolved(entry: ForecastEntry) -> Optional[ResolvedForecast]:
    if entry.temperature is None:
        return None
    return ResolvedForecast(
        temperature=entry.temperature,
        symbol_code=entry.symbol_code,
        wind_speed=entry.wind_speed,
        wind_from_direction=entry.wind_from_direction,
    )


def resolve_forecast(timeseries: Sequence[ForecastEntry], target_time_ms: int) -> Optional[ResolvedForecast]:
    """Pick the forecast valid at the target time.

    The earliest entry at or after the target wins; entries with equal times
    keep the first one seen. When no entry lies at or after the target, or the
    chosen entry carries no temperature, the last entry of the series is used.

    Args:
        timeseries: Forecast entries for one location
        target_time_ms: Arrival time in milliseconds since epoch (UTC)

    Returns:
        Resolved forecast, or None if the series is empty or has no usable
        temperature
    """
    if not timeseries:
        return None

    best_entry = None
    smallest_diff = math.inf
    for entry in timeseries:
        diff = entry.time - target_time_ms
        if 0 <= diff < smallest_diff:
            smallest_diff = diff
            best_entry = entry

    resolved = _to_resolved(best_entry) if best_entry is not None else None
    if resolved is None:
        resolved = _to_resolved(timeseries[-1])
    return resolved


def build_weather_point(
    lat: float,
    lon: float,
    time_ms: int,
    forecast: Optional[ResolvedForecast],
    source: str
) -> WeatherPoint:
    """Combine a route point and its forecast into a timeline entry."""
    return WeatherPoint(
        lat=lat,
        lon=lon,
        time=time_ms,
        temperature=forecast.temperature if forecast else None,
        symbol_code=forecast.symbol_code if forecast else None,
        wind_speed=forecast.wind_speed if forecast else None,
        wind_from_direction=forecast.wind_from_direction if forecast else None,
        source=source,
    )


def weather_changed(
    previous: WeatherPoint,
    current: WeatherPoint,
    threshold: float = TEMPERATURE_CHANGE_THRESHOLD
) -> bool:
    """Whether ``current`` is worth showing after ``previous``.

    True if the symbol differs, if only one of the two has a temperature, or
    if both have one and they differ by more than ``threshold`` degrees.
    """
    if previous.symbol_code != current.symbol_code:
        return True
    if (previous.temperature is None) != (current.temperature is None):
        return True
    if previous.temperature is not None and current.temperature is not None:
        return abs(previous.temperature - current.temperature) > threshold
    return False


def compact_timeline(
    points: Sequence[WeatherPoint],
    threshold: float = TEMPERATURE_CHANGE_THRESHOLD,
    max_points: int = MAX_TIMELINE_POINTS
) -> List[WeatherPoint]:
    """Drop intermediate points whose weather matches the last kept point.

    The first point is always kept. Intermediate points are compared with the
    most recently kept point. The last point is appended when its weather
    differs (or when only the start has been kept so far), otherwise it
    replaces the last kept point so the timeline ends at the destination.

    Args:
        points: Weather points in route order
        threshold: Temperature change in Celsius that counts as different
        max_points: Upper bound on the returned timeline length

    Returns:
        Compacted timeline in route order
    """
    if not points:
        return []

    kept = [points[0]]

    for current in points[1:-1]:
        if weather_changed(kept[-1], current, threshold):
            kept.append(current)

    if len(points) > 1:
        end_point = points[-1]
        if len(kept) == 1 or weather_changed(kept[-1], end_point, threshold):
            kept.append(end_point)
        else:
            kept[-1] = end_point

    logger.info(f"Compacted weather timeline from {len(points)} to {len(kept)} points")
    return kept[:max_points]
