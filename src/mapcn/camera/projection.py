"""Web Mercator projection helpers.

World pixel coordinates grow east (x) and south (y); at zoom ``z`` the world
is ``256 * 2**z`` pixels wide. Screen coordinates are relative to the widget
top-left, with the camera center in the middle of the viewport and the map
rotated clockwise by ``camera.rotation`` degrees around it.
"""

import math
from dataclasses import dataclass

from ..geo.models import CameraState, GeoPoint, LatLngBounds, TileCoord

TILE_SIZE = 256
MERCATOR_LAT_BOUND = 85.05112878
MAX_TILE_ZOOM = 22

Viewport = tuple[float, float]


def world_size(zoom: float) -> float:
    return TILE_SIZE * 2.0**zoom


def project(point: GeoPoint, zoom: float) -> tuple[float, float]:
    """Geographic point to world pixels at ``zoom``."""
    scale = world_size(zoom)
    latitude = max(-MERCATOR_LAT_BOUND, min(MERCATOR_LAT_BOUND, point.latitude))
    sin_lat = math.sin(math.radians(latitude))

    x = (point.longitude + 180.0) / 360.0 * scale
    y = (0.5 - math.log((1 + sin_lat) / (1 - sin_lat)) / (4 * math.pi)) * scale
    return x, y


def unproject(x: float, y: float, zoom: float) -> GeoPoint:
    """World pixels at ``zoom`` back to a geographic point."""
    scale = world_size(zoom)
    longitude = x / scale * 360.0 - 180.0
    n = math.pi - 2 * math.pi * y / scale
    latitude = math.degrees(math.atan(math.sinh(n)))
    return GeoPoint(latitude, longitude)


def _rotate(x: float, y: float, degrees: float) -> tuple[float, float]:
    if degrees == 0:
        return x, y
    angle = math.radians(degrees)
    cos_a = math.cos(angle)
    sin_a = math.sin(angle)
    return x * cos_a - y * sin_a, x * sin_a + y * cos_a


def geo_to_screen(
    point: GeoPoint, camera: CameraState, viewport: Viewport
) -> tuple[float, float]:
    """Widget pixel position of a geographic point."""
    cx, cy = project(camera.center, camera.zoom)
    px, py = project(point, camera.zoom)
    dx, dy = _rotate(px - cx, py - cy, camera.rotation)
    return viewport[0] / 2 + dx, viewport[1] / 2 + dy


def screen_to_geo(x: float, y: float, camera: CameraState, viewport: Viewport) -> GeoPoint:
    """Geographic point under a widget pixel position."""
    dx, dy = _rotate(x - viewport[0] / 2, y - viewport[1] / 2, -camera.rotation)
    cx, cy = project(camera.center, camera.zoom)
    return unproject(cx + dx, cy + dy, camera.zoom)


def km_per_pixel(camera: CameraState) -> float:
    """Ground distance covered by one screen pixel at the camera center."""
    latitude = max(-MERCATOR_LAT_BOUND, min(MERCATOR_LAT_BOUND, camera.center.latitude))
    equator_km = 2 * math.pi * 6371.0
    return equator_km * math.cos(math.radians(latitude)) / world_size(camera.zoom)


@dataclass(frozen=True)
class TilePlacement:
    """A tile and where its top-left corner lands on screen before rotation."""
    coord: TileCoord
    left: float
    top: float
    size: float


def tile_placements(camera: CameraState, viewport: Viewport) -> list[TilePlacement]:
    """Tiles covering the viewport, with unrotated screen positions.

    When the map is rotated the covered area grows to the viewport's
    circumscribed square so that no corner is left empty.
    """
    width, height = viewport
    if width <= 0 or height <= 0:
        return []

    z = max(0, min(MAX_TILE_ZOOM, math.floor(camera.zoom + 1e-9)))
    tile_size = TILE_SIZE * 2.0 ** (camera.zoom - z)
    tiles_per_side = 2**z

    if camera.rotation % 360:
        half_w = half_h = math.hypot(width, height) / 2
    else:
        half_w, half_h = width / 2, height / 2

    # Camera center in world pixels of zoom z, scaled to screen tile size
    cx, cy = project(camera.center, z)
    cx *= tile_size / TILE_SIZE
    cy *= tile_size / TILE_SIZE

    first_x = math.floor((cx - half_w) / tile_size)
    last_x = math.floor((cx + half_w) / tile_size)
    first_y = max(0, math.floor((cy - half_h) / tile_size))
    last_y = min(tiles_per_side - 1, math.floor((cy + half_h) / tile_size))

    placements = []
    for ty in range(first_y, last_y + 1):
        for tx in range(first_x, last_x + 1):
            placements.append(
                TilePlacement(
                    coord=TileCoord(z, tx % tiles_per_side, ty),
                    left=width / 2 + tx * tile_size - cx,
                    top=height / 2 + ty * tile_size - cy,
                    size=tile_size,
                )
            )
    return placements


def visible_tiles(camera: CameraState, viewport: Viewport) -> list[TileCoord]:
    """Distinct tile coordinates needed to cover the viewport."""
    seen: dict[TileCoord, None] = {}
    for placement in tile_placements(camera, viewport):
        seen.setdefault(placement.coord, None)
    return list(seen)


def fit_bounds(
    bounds: LatLngBounds,
    viewport: Viewport,
    padding: float = 50.0,
    max_zoom: float = 16.0,
) -> tuple[GeoPoint, float]:
    """Center and zoom that show ``bounds`` inside the padded viewport.

    Args:
        bounds: Box to show
        viewport: Widget size in pixels
        padding: Margin kept free on every side, in pixels
        max_zoom: Upper zoom limit

    Returns:
        ``(center, zoom)``

    Raises:
        ValueError: If the box is a single point or the padded viewport is empty
    """
    if bounds.is_degenerate:
        raise ValueError("Cannot fit a zero-size bounding box")

    available_w = viewport[0] - 2 * padding
    available_h = viewport[1] - 2 * padding
    if available_w <= 0 or available_h <= 0:
        raise ValueError(f"Viewport {viewport} too small for padding {padding}")

    x1, y1 = project(bounds.north_west, 0)
    x2, y2 = project(bounds.south_east, 0)
    box_w = abs(x2 - x1)
    box_h = abs(y2 - y1)

    # A box may be a line; only its extended side constrains the zoom
    scales = []
    if box_w > 0:
        scales.append(available_w / box_w)
    if box_h > 0:
        scales.append(available_h / box_h)

    zoom = min(math.log2(min(scales)), max_zoom)
    center = unproject((x1 + x2) / 2, (y1 + y2) / 2, 0)
    return center, zoom
