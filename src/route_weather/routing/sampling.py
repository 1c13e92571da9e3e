"""Selection of representative points along a route."""

import logging
import math
from typing import List

from route_weather.routing.models import Coordinate, Route, SamplePoint

logger = logging.getLogger(__name__)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _point(coordinate: Coordinate, offset: float) -> SamplePoint:
    lon, lat = coordinate
    return SamplePoint(lon=lon, lat=lat, time_offset_seconds=offset)


def target_offsets(total_duration: float, max_points: int) -> List[float]:
    """Evenly spaced time offsets strictly between departure and arrival.

    Args:
        total_duration: Route duration in seconds
        max_points: Maximum number of sample points, start and end included

    Returns:
        ``max_points - 2`` offsets in seconds (empty when max_points <= 2)
    """
    count = max(0, max_points - 2)
    return [total_duration * i / (count + 1) for i in range(1, count + 1)]


def select_points(route: Route, max_points: int = 5) -> List[SamplePoint]:
    """Select points along the route at evenly spaced travel times.

    The start point is always first. Intermediate points are located by
    walking the route steps and interpolating inside the step that contains
    each target time. The end point either follows the intermediates or
    replaces the last one when the buffer is full.

    Args:
        route: Route with polyline and segment/step durations
        max_points: Maximum number of points to return

    Returns:
        Ordered list of sample points, never two equal coordinates in a row

    Raises:
        ValueError: If max_points is smaller than 1
    """
    if max_points < 1:
        raise ValueError(f"max_points must be at least 1, got {max_points}")

    coordinates = route.coordinates
    total_duration = route.duration

    if len(coordinates) < 2 or total_duration <= 0:
        points = []
        if coordinates:
            points.append(_point(coordinates[0], 0))
            if len(coordinates) > 1:
                points.append(_point(coordinates[-1], total_duration))
        return points[:max_points]

    points = [_point(coordinates[0], 0)]

    targets = target_offsets(total_duration, max_points)
    logger.debug(f"Target time offsets: {targets}")

    if targets and any(segment.steps for segment in route.segments):
        _add_intermediate_points(route, targets, points, max_points)
    elif targets:
        logger.warning("Route has no step data, skipping intermediate points")

    end_coordinate = coordinates[-1]
    if points[-1].coordinate != end_coordinate:
        if len(points) < max_points:
            points.append(_point(end_coordinate, total_duration))
        elif len(points) == max_points:
            points[-1] = _point(end_coordinate, total_duration)
            logger.debug("Replaced last intermediate point with end point")

    logger.info(f"Selected {len(points)} points along route")
    return points


def _add_intermediate_points(
    route: Route,
    targets: List[float],
    points: List[SamplePoint],
    max_points: int
) -> None:
    """Append a point for each target offset, walking the route steps in order."""
    coordinates = route.coordinates
    accumulated = 0.0
    target_index = 0

    for segment in route.segments:
        for step in segment.steps:
            start_index, end_index = step.way_points
            step_coordinates = coordinates[start_index:end_index + 1]

            while (
                step_coordinates
                and target_index < len(targets)
                and accumulated + step.duration >= targets[target_index]
            ):
                target = targets[target_index]
                fraction = 0.0
                if step.duration > 0:
                    fraction = max(0.0, min(1.0, (target - accumulated) / step.duration))

                coordinate = step_coordinates[_round_half_up(fraction * (len(step_coordinates) - 1))]
                if coordinate != points[-1].coordinate:
                    points.append(_point(coordinate, target))
                    logger.debug(f"Added intermediate point at {target:.0f}s: {coordinate}")
                else:
                    logger.debug(f"Skipping duplicate intermediate point at {target:.0f}s")

                target_index += 1
                if len(points) >= max_points - 1:
                    return

            accumulated += step.duration
            if len(points) >= max_points - 1:
                return
