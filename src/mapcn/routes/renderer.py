"""Layered draw lists for routes.

A route is drawn back to front as border, glow, main stroke, direction
arrows and endpoint markers. Each layer is a ``RouteLayer`` holding
geographic draw commands; the widget projects and paints them.
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Sequence

from ..geo.models import GeoPoint
from ..geo.route_utils import (
    bearing_between,
    interpolate_along_route,
    is_point_near_route,
    route_distance,
    truncate_route,
)
from ..rendering.color import WHITE
from ..rendering.commands import GeoCommand, GlyphCommand, GlyphKind, PolylineCommand
from .models import MapcnRoute, RouteConfig, RouteStyle

# Dash lengths are in pattern units; multiplied by the scale they become degrees
DEFAULT_DASH_SCALE = 0.0001
DASH_EPSILON = 1e-9

GLOW_EXTRA_WIDTH = 8.0
GLOW_ALPHA_FACTOR = 0.3
ARROW_SIZE = 10.0
ARROW_ALPHA = 0.9
ARROW_BEARING_LOOKAHEAD = 0.01
ENDPOINT_SIZE = 18.0


class LayerKind(Enum):
    BORDER = "border"
    GLOW = "glow"
    MAIN = "main"
    ARROWS = "arrows"
    ENDPOINTS = "endpoints"


@dataclass(frozen=True)
class RouteLayer:
    """One drawing pass of a route."""
    kind: LayerKind
    commands: tuple[GeoCommand, ...]
    route_id: Optional[str] = None


def build_dashed_segments(
    points: Sequence[GeoPoint],
    dash_pattern: Sequence[float],
    scale: float = DEFAULT_DASH_SCALE,
) -> list[tuple[GeoPoint, ...]]:
    """Cut a polyline into dashes measured in planar degree space.

    The pattern alternates dash and gap lengths and carries over across
    vertices, so a dash may bend around a corner.

    Args:
        points: Polyline to segment
        dash_pattern: Alternating dash and gap lengths, all > 0
        scale: Degrees per pattern unit

    Returns:
        Point lists, one per visible dash
    """
    if len(points) < 2 or not dash_pattern:
        return []

    lengths = [length * scale for length in dash_pattern]
    if len(lengths) % 2:
        # Odd patterns repeat to keep dash and gap alternating
        lengths = lengths * 2

    dashes: list[tuple[GeoPoint, ...]] = []
    pattern_index = 0
    remaining = lengths[0]
    current: list[GeoPoint] = []

    for start, end in zip(points, points[1:]):
        dx = end.longitude - start.longitude
        dy = end.latitude - start.latitude
        segment_length = math.hypot(dx, dy)
        if segment_length == 0:
            continue

        unit_x = dx / segment_length
        unit_y = dy / segment_length
        position = 0.0

        while segment_length - position > DASH_EPSILON:
            step = min(remaining, segment_length - position)
            drawing = pattern_index % 2 == 0

            if drawing:
                if not current:
                    current.append(
                        GeoPoint(
                            start.latitude + unit_y * position,
                            start.longitude + unit_x * position,
                        )
                    )
                current.append(
                    GeoPoint(
                        start.latitude + unit_y * (position + step),
                        start.longitude + unit_x * (position + step),
                    )
                )

            position += step
            remaining -= step

            if remaining <= DASH_EPSILON:
                if drawing and len(current) >= 2:
                    dashes.append(tuple(current))
                current = []
                pattern_index = (pattern_index + 1) % len(lengths)
                remaining = lengths[pattern_index]

    if len(current) >= 2:
        dashes.append(tuple(current))

    return dashes


def arrow_glyphs(points: Sequence[GeoPoint], config: RouteConfig) -> list[GlyphCommand]:
    """Direction arrows evenly spaced by arc length.

    The pixel spacing is turned into kilometers with a fixed factor
    (100 px -> 1 km), so arrow density does not follow the zoom level.
    """
    spacing_km = config.arrow_spacing / 1000 * 10
    count = math.floor(route_distance(points) / spacing_km)
    color = WHITE.with_alpha(ARROW_ALPHA)

    glyphs = []
    for a in range(1, count + 1):
        fraction = a / (count + 1)
        position = interpolate_along_route(points, fraction)
        ahead = interpolate_along_route(
            points, min(1.0, fraction + ARROW_BEARING_LOOKAHEAD)
        )
        glyphs.append(
            GlyphCommand(
                kind=GlyphKind.ARROW,
                position=position,
                color=color,
                size=ARROW_SIZE,
                rotation=bearing_between(position, ahead),
            )
        )
    return glyphs


class RouteRenderer:
    """Builds route layers for the map widget."""

    def __init__(self, dash_scale: float = DEFAULT_DASH_SCALE):
        """Initialize the route renderer.

        Args:
            dash_scale: Degrees per dash pattern unit
        """
        self.dash_scale = dash_scale
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def visible_points(self, route: MapcnRoute) -> list[GeoPoint]:
        """Points to draw after applying the animation progress."""
        progress = route.config.animation_progress
        if progress is None:
            return list(route.points)
        return truncate_route(route.points, progress)

    def build_layers(self, route: MapcnRoute) -> list[RouteLayer]:
        """Draw list for one route, back to front.

        Routes with fewer than two points, or whose visible prefix has fewer
        than two points, produce no layers at all.
        """
        if not route.is_renderable:
            return []

        points = self.visible_points(route)
        if len(points) < 2:
            return []

        config = route.config
        line = tuple(points)
        layers: list[RouteLayer] = []

        def add(kind: LayerKind, commands: Iterable[GeoCommand]) -> None:
            commands = tuple(commands)
            if commands:
                layers.append(RouteLayer(kind, commands, route.id))

        # Border
        if config.border_color is not None:
            add(
                LayerKind.BORDER,
                [
                    PolylineCommand(
                        line, config.border_color, config.width + config.border_width * 2
                    )
                ],
            )

        # Glow
        if config.show_glow:
            add(
                LayerKind.GLOW,
                [
                    PolylineCommand(
                        line,
                        config.color.with_alpha(config.glow_intensity * GLOW_ALPHA_FACTOR),
                        config.width + GLOW_EXTRA_WIDTH,
                    )
                ],
            )

        # Main stroke
        add(LayerKind.MAIN, self._main_stroke(line, config))

        # Direction arrows
        if config.show_arrows:
            add(LayerKind.ARROWS, arrow_glyphs(line, config))

        # Endpoints stay on the full route
        if config.show_endpoints:
            add(
                LayerKind.ENDPOINTS,
                [
                    GlyphCommand(
                        GlyphKind.START,
                        route.points[0],
                        config.effective_start_color,
                        ENDPOINT_SIZE,
                    ),
                    GlyphCommand(
                        GlyphKind.END,
                        route.points[-1],
                        config.effective_end_color,
                        ENDPOINT_SIZE,
                    ),
                ],
            )

        return layers

    def _main_stroke(
        self, line: tuple[GeoPoint, ...], config: RouteConfig
    ) -> list[PolylineCommand]:
        if config.style == RouteStyle.DASHED:
            dashes = build_dashed_segments(
                line, config.effective_dash_pattern, self.dash_scale
            )
            return [PolylineCommand(dash, config.color, config.width) for dash in dashes]

        return [
            PolylineCommand(
                line,
                config.color,
                config.width,
                dotted=config.style == RouteStyle.DOTTED,
            )
        ]

    def build_all(self, routes: Iterable[MapcnRoute]) -> list[RouteLayer]:
        """Layers for several routes, in route order."""
        layers: list[RouteLayer] = []
        for route in routes:
            layers.extend(self.build_layers(route))
        return layers


def route_at(
    routes: Sequence[MapcnRoute], point: GeoPoint, max_distance_km: float
) -> Optional[MapcnRoute]:
    """Top-most interactive route passing within ``max_distance_km`` of a point."""
    for route in reversed(routes):
        if route.config.interactive and is_point_near_route(
            point, route.points, max_distance_km
        ):
            return route
    return None
