import pytest

from conftest import HOUR_MS, T0, hourly_series
from route_weather.weather.models import ForecastEntry, WeatherPoint
from route_weather.weather.timeline import (
    arrival_time, compact_timeline, departure_time, resolve_forecast, weather_changed
)


def point(temperature, symbol="cloudy", source="intermediate", time=T0):
    return WeatherPoint(lat=60.0, lon=10.0, time=time, temperature=temperature, symbol_code=symbol, source=source)


def route_points(*weather):
    """Weather points tagged start/intermediate/end from (temperature, symbol) pairs."""
    points = []
    for index, (temperature, symbol) in enumerate(weather):
        if index == 0:
            source = "start"
        elif index == len(weather) - 1:
            source = "end"
        else:
            source = "intermediate"
        points.append(point(temperature, symbol, source, T0 + index * HOUR_MS))
    return points


class TestResolveForecast:

    def test_empty_series(self):
        assert resolve_forecast([], T0) is None

    @pytest.mark.parametrize("target", [T0 - 10 * HOUR_MS, T0, T0 + 10 * HOUR_MS])
    def test_single_entry_always_used(self, target):
        series = [ForecastEntry(time=T0, temperature=4.2, symbol_code="rain")]

        forecast = resolve_forecast(series, target)

        assert forecast.temperature == 4.2
        assert forecast.symbol_code == "rain"

    def test_earliest_entry_at_or_after_target(self):
        series = hourly_series(T0, [1.0, 2.0, 3.0])

        assert resolve_forecast(series, T0 + HOUR_MS // 2).temperature == 2.0
        assert resolve_forecast(series, T0 + HOUR_MS).temperature == 2.0
        assert resolve_forecast(series, T0 - HOUR_MS).temperature == 1.0

    def test_falls_back_to_last_entry(self):
        series = hourly_series(T0, [1.0, 2.0, 3.0])

        assert resolve_forecast(series, T0 + 5 * HOUR_MS).temperature == 3.0

    def test_equal_times_prefer_first_entry(self):
        series = [
            ForecastEntry(time=T0, temperature=1.0),
            ForecastEntry(time=T0, temperature=9.0),
        ]

        assert resolve_forecast(series, T0).temperature == 1.0

    def test_entry_without_temperature_falls_back_to_last(self):
        series = [
            ForecastEntry(time=T0, temperature=None, symbol_code="fog"),
            ForecastEntry(time=T0 + HOUR_MS, temperature=7.0, symbol_code="clearsky_day"),
        ]

        forecast = resolve_forecast(series, T0)

        assert forecast.temperature == 7.0
        assert forecast.symbol_code == "clearsky_day"

    def test_no_temperatures_at_all(self):
        series = [ForecastEntry(time=T0, symbol_code="fog")]

        assert resolve_forecast(series, T0) is None

    def test_symbol_is_optional(self):
        series = [ForecastEntry(time=T0, temperature=3.0, wind_speed=4.5)]

        forecast = resolve_forecast(series, T0)

        assert forecast.symbol_code is None
        assert forecast.wind_speed == 4.5


class TestDepartureTime:

    def test_departure_uses_base_time(self):
        assert departure_time(T0, 3600, "departure") == T0

    def test_arrival_times_route_backwards(self):
        departure = departure_time(T0, 5400.4, "arrival")

        assert departure == T0 - 5_400_400
        assert arrival_time(departure, 0) == departure
        assert arrival_time(departure, 5400.4) == T0

    def test_arrival_time_rounds_to_milliseconds(self):
        # 2.0625 s is exact in binary, so this checks half-up rounding of 2062.5 ms
        assert arrival_time(T0, 2.0625) == T0 + 2063


class TestWeatherChanged:

    def test_symbol_change(self):
        assert weather_changed(point(10.0, "clearsky_day"), point(10.0, "cloudy"))

    def test_temperature_threshold_is_exclusive(self):
        assert not weather_changed(point(10.0), point(12.0))
        assert weather_changed(point(10.0), point(12.5))

    def test_temperature_presence_change(self):
        assert weather_changed(point(10.0), point(None))
        assert weather_changed(point(None), point(10.0))

    def test_both_temperatures_missing(self):
        assert not weather_changed(point(None), point(None))


class TestCompactTimeline:

    def test_empty(self):
        assert compact_timeline([]) == []

    def test_single_point(self):
        points = route_points((10.0, "cloudy"))

        assert compact_timeline(points) == points

    def test_start_and_end_always_kept(self):
        points = route_points((10.0, "cloudy"), (10.0, "cloudy"))

        assert compact_timeline(points) == points

    def test_symbol_change_at_end(self):
        points = route_points((10.0, "clearsky_day"), (10.5, "clearsky_day"), (10.5, "cloudy"))

        result = compact_timeline(points)

        assert [p.source for p in result] == ["start", "end"]
        assert result[-1].symbol_code == "cloudy"

    def test_compares_with_last_kept_point(self):
        points = route_points((10.0, "cloudy"), (11.5, "cloudy"), (13.0, "cloudy"), (13.5, "cloudy"))

        result = compact_timeline(points)

        # 11.5 is dropped, 13.0 is kept (3 degrees from the start), then replaced by the end
        assert [p.source for p in result] == ["start", "end"]
        assert [p.temperature for p in result] == [10.0, 13.5]

    def test_end_replaces_similar_intermediate(self):
        points = route_points((10.0, "cloudy"), (10.0, "rain"), (10.5, "rain"))

        result = compact_timeline(points)

        assert result == [points[0], points[2]]

    def test_end_appended_when_different(self):
        points = route_points((10.0, "cloudy"), (10.0, "rain"), (10.0, "snow"))

        assert compact_timeline(points) == points

    def test_missing_temperature_is_a_change(self):
        points = route_points((10.0, "cloudy"), (None, "cloudy"), (None, "cloudy"))

        result = compact_timeline(points)

        assert [p.source for p in result] == ["start", "end"]
        assert result[-1].temperature is None

    def test_truncated_to_five(self):
        symbols = ["clearsky_day", "cloudy", "rain", "snow", "fog", "sleet", "heavyrain"]
        points = route_points(*[(10.0, symbol) for symbol in symbols])

        result = compact_timeline(points)

        assert result == points[:5]

    @pytest.mark.parametrize("weather", [
        [(10.0, "clearsky_day"), (10.5, "clearsky_day"), (10.5, "cloudy")],
        [(10.0, "cloudy"), (10.0, "rain"), (10.0, "snow"), (15.0, "snow")],
        [(10.0, "cloudy"), (10.0, "cloudy")],
    ])
    def test_idempotent(self, weather):
        once = compact_timeline(route_points(*weather))

        assert compact_timeline(once) == once
