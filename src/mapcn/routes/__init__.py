"""Route models, serialization and layer building."""

from .models import (
    RouteStyle,
    RouteConfig,
    MapcnRoute,
    ROUTE_PRESETS,
    DEFAULT_DASH_PATTERN,
)
from .renderer import (
    RouteRenderer,
    RouteLayer,
    LayerKind,
    build_dashed_segments,
    arrow_glyphs,
    route_at,
)
from .io import load_routes, save_routes, route_to_dict, route_from_dict

__all__ = [
    "RouteStyle",
    "RouteConfig",
    "MapcnRoute",
    "ROUTE_PRESETS",
    "DEFAULT_DASH_PATTERN",
    "RouteRenderer",
    "RouteLayer",
    "LayerKind",
    "build_dashed_segments",
    "arrow_glyphs",
    "route_at",
    "load_routes",
    "save_routes",
    "route_to_dict",
    "route_from_dict",
]
