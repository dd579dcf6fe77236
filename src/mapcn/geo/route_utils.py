"""Distance, bearing and polyline helpers for routes.

Distances use the haversine formula on a sphere of radius 6371 km.

``perpendicular_distance``, the per-segment interpolation in
``interpolate_along_route`` and ``truncate_route`` treat latitude/longitude
as planar Cartesian coordinates. This diverges from true geodesic behaviour
on long segments and at small zoom levels; simplification tolerances and dash
spacing are tuned against the planar model, so it is kept as is.
"""

import math
from datetime import timedelta
from typing import Sequence

from .models import GeoPoint, ORIGIN


EARTH_RADIUS_KM = 6371.0


def distance_between(a: GeoPoint, b: GeoPoint) -> float:
    """Great-circle distance between two points in kilometers."""
    lat1 = math.radians(a.latitude)
    lat2 = math.radians(b.latitude)
    d_lat = lat2 - lat1
    d_lng = math.radians(b.longitude - a.longitude)

    h = (
        math.sin(d_lat / 2) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin(d_lng / 2) ** 2
    )
    # Rounding can push h slightly outside [0, 1] for antipodal points
    h = min(1.0, max(0.0, h))
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(h))


def bearing_between(a: GeoPoint, b: GeoPoint) -> float:
    """Initial bearing from ``a`` to ``b`` in degrees, in [0, 360).

    Returns 0 when both points coincide.
    """
    lat1 = math.radians(a.latitude)
    lat2 = math.radians(b.latitude)
    d_lng = math.radians(b.longitude - a.longitude)

    y = math.sin(d_lng) * math.cos(lat2)
    x = math.cos(lat1) * math.sin(lat2) - math.sin(lat1) * math.cos(lat2) * math.cos(d_lng)

    bearing = (math.degrees(math.atan2(y, x)) + 360) % 360
    # (-tiny + 360) % 360 can round to exactly 360.0
    return 0.0 if bearing >= 360 else bearing


def point_at_distance_and_bearing(
    start: GeoPoint, distance_km: float, bearing_degrees: float
) -> GeoPoint:
    """Project a point forward along a great circle.

    Args:
        start: Starting point
        distance_km: Distance to travel in kilometers
        bearing_degrees: Initial bearing in degrees

    Returns:
        Destination point
    """
    lat1 = math.radians(start.latitude)
    lng1 = math.radians(start.longitude)
    bearing = math.radians(bearing_degrees)
    angular = distance_km / EARTH_RADIUS_KM

    lat2 = math.asin(
        math.sin(lat1) * math.cos(angular)
        + math.cos(lat1) * math.sin(angular) * math.cos(bearing)
    )
    lng2 = lng1 + math.atan2(
        math.sin(bearing) * math.sin(angular) * math.cos(lat1),
        math.cos(angular) - math.sin(lat1) * math.sin(lat2),
    )
    return GeoPoint(math.degrees(lat2), math.degrees(lng2))


def perpendicular_distance(
    point: GeoPoint, line_start: GeoPoint, line_end: GeoPoint
) -> float:
    """Distance in km from ``point`` to the line through start and end.

    The foot of the perpendicular is found in planar lat/lng space, then the
    distance to it is measured with ``distance_between``. A zero-length line
    falls back to the distance to ``line_start``.
    """
    dx = line_end.longitude - line_start.longitude
    dy = line_end.latitude - line_start.latitude

    if dx == 0 and dy == 0:
        return distance_between(point, line_start)

    t = (
        (point.longitude - line_start.longitude) * dx
        + (point.latitude - line_start.latitude) * dy
    ) / (dx * dx + dy * dy)

    nearest = GeoPoint(line_start.latitude + t * dy, line_start.longitude + t * dx)
    return distance_between(point, nearest)


def segment_distances(points: Sequence[GeoPoint]) -> list[float]:
    """Great-circle length of each consecutive segment."""
    return [distance_between(points[i], points[i + 1]) for i in range(len(points) - 1)]


def route_distance(points: Sequence[GeoPoint]) -> float:
    """Total arc length of a polyline in kilometers (0 for < 2 points)."""
    return sum(segment_distances(points))


def _lerp_point(start: GeoPoint, end: GeoPoint, fraction: float) -> GeoPoint:
    return GeoPoint(
        start.latitude + (end.latitude - start.latitude) * fraction,
        start.longitude + (end.longitude - start.longitude) * fraction,
    )


def interpolate_along_route(points: Sequence[GeoPoint], fraction: float) -> GeoPoint:
    """Point located at ``fraction`` of the route's arc length.

    Args:
        points: Route polyline
        fraction: Position along the route, 0.0 = start, 1.0 = end

    Returns:
        Interpolated point. Empty input gives (0, 0), a single point gives
        that point, fractions outside (0, 1) give the first or last point.
    """
    if not points:
        return ORIGIN
    if len(points) == 1 or fraction <= 0:
        return points[0]
    if fraction >= 1:
        return points[-1]

    distances = segment_distances(points)
    target = sum(distances) * fraction
    accumulated = 0.0

    for i, segment in enumerate(distances):
        if accumulated + segment >= target:
            if segment == 0:
                return points[i]
            return _lerp_point(points[i], points[i + 1], (target - accumulated) / segment)
        accumulated += segment

    return points[-1]


def truncate_route(points: Sequence[GeoPoint], progress: float) -> list[GeoPoint]:
    """Arc-length prefix of a route, ending at the interpolated point.

    Args:
        points: Route polyline
        progress: Fraction of the route to keep; clamped to [0, 1]

    Returns:
        New point list. All points for progress >= 1, empty for progress <= 0.
    """
    if progress >= 1.0:
        return list(points)
    if progress <= 0.0 or not points:
        return []

    result = [points[0]]
    distances = segment_distances(points)
    target = sum(distances) * progress
    accumulated = 0.0

    for i, segment in enumerate(distances):
        if accumulated + segment >= target:
            fraction = (target - accumulated) / segment if segment else 0.0
            result.append(_lerp_point(points[i], points[i + 1], fraction))
            break
        accumulated += segment
        result.append(points[i + 1])

    return result


def simplify_route(points: Sequence[GeoPoint], tolerance: float = 0.0001) -> list[GeoPoint]:
    """Simplify a polyline with the Ramer-Douglas-Peucker algorithm.

    Args:
        points: Route polyline
        tolerance: Maximum allowed deviation, in the units returned by
            ``perpendicular_distance``. Pick it for the coordinate scale in use.

    Returns:
        Simplified polyline. Always keeps the first and last point; inputs
        with fewer than 3 points are returned unchanged.
    """
    if len(points) < 3:
        return list(points)
    return _rdp_simplify(list(points), tolerance)


def _rdp_simplify(points: list[GeoPoint], epsilon: float) -> list[GeoPoint]:
    if len(points) < 3:
        return points

    first = points[0]
    last = points[-1]
    max_distance = 0.0
    max_index = 0

    for i in range(1, len(points) - 1):
        distance = perpendicular_distance(points[i], first, last)
        if distance > max_distance:
            max_distance = distance
            max_index = i

    if max_distance > epsilon:
        left = _rdp_simplify(points[: max_index + 1], epsilon)
        right = _rdp_simplify(points[max_index:], epsilon)
        return left[:-1] + right

    return [first, last]


def is_point_near_route(
    point: GeoPoint, route: Sequence[GeoPoint], max_distance_km: float
) -> bool:
    """Check whether ``point`` lies within ``max_distance_km`` of any segment line."""
    for i in range(len(route) - 1):
        if perpendicular_distance(point, route[i], route[i + 1]) <= max_distance_km:
            return True
    return False


def format_duration(duration: timedelta) -> str:
    """Human readable duration: ``"2h 5m"`` or ``"45 min"``."""
    total_minutes = int(duration.total_seconds() // 60)
    hours, minutes = divmod(total_minutes, 60)
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{total_minutes} min"
