"""Geographic models and route math for mapcn."""

from .models import GeoPoint, LatLngBounds, CameraState, TileCoord, ORIGIN
from . import route_utils
from .route_utils import (
    distance_between,
    bearing_between,
    point_at_distance_and_bearing,
    perpendicular_distance,
    interpolate_along_route,
    truncate_route,
    simplify_route,
    route_distance,
    is_point_near_route,
    format_duration,
)

__all__ = [
    "GeoPoint",
    "LatLngBounds",
    "CameraState",
    "TileCoord",
    "ORIGIN",
    "route_utils",
    "distance_between",
    "bearing_between",
    "point_at_distance_and_bearing",
    "perpendicular_distance",
    "interpolate_along_route",
    "truncate_route",
    "simplify_route",
    "route_distance",
    "is_point_near_route",
    "format_duration",
]
