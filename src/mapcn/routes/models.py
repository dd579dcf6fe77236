"""
Route appearance configuration and route value objects.
"""

import logging
import math
from dataclasses import dataclass, field, replace
from datetime import timedelta
from enum import Enum
from typing import Any, Callable, ClassVar, Optional, Sequence

from ..geo.models import GeoPoint, LatLngBounds, ORIGIN
from ..geo.route_utils import route_distance
from ..rendering.color import Color
from ..types import UNSET, Unset

logger = logging.getLogger(__name__)

DEFAULT_ROUTE_COLOR = Color(0xFF2196F3)
DEFAULT_DASH_PATTERN: tuple[float, float] = (15.0, 8.0)

KM_TO_MILES = 0.621371
WALKING_SPEED_KMH = 5.0
CYCLING_SPEED_KMH = 15.0
DRIVING_SPEED_KMH = 50.0


class RouteStyle(Enum):
    """Visual style of the main route stroke."""
    SOLID = "solid"
    DASHED = "dashed"
    DOTTED = "dotted"
    GRADIENT = "gradient"  # drawn solid
    ANIMATED = "animated"  # drawn solid, revealed by animation_progress


@dataclass(frozen=True)
class RouteConfig:
    """How a route is drawn.

    Attributes:
        color: Main stroke color
        width: Stroke width in pixels (> 0)
        style: Main stroke style
        show_arrows: Draw direction arrows along the route
        arrow_spacing: Arrow spacing in pixels (> 0)
        show_endpoints: Draw start/end markers
        start_color: Start marker color, defaults to ``color``
        end_color: End marker color, defaults to ``color``
        show_glow: Draw a wide translucent stroke under the route
        glow_intensity: Glow strength, 0.0 - 1.0
        dash_pattern: ``(dash, gap)`` lengths for dashed routes
        border_color: Outline color, None for no outline
        border_width: Outline width on each side (>= 0)
        animation_progress: Visible fraction of the route, None for all
        interactive: Whether taps on the route are reported
    """
    color: Color = DEFAULT_ROUTE_COLOR
    width: float = 4.0
    style: RouteStyle = RouteStyle.SOLID
    show_arrows: bool = False
    arrow_spacing: float = 100.0
    show_endpoints: bool = True
    start_color: Optional[Color] = None
    end_color: Optional[Color] = None
    show_glow: bool = True
    glow_intensity: float = 0.3
    dash_pattern: Optional[tuple[float, ...]] = None
    border_color: Optional[Color] = None
    border_width: float = 1.5
    animation_progress: Optional[float] = None
    interactive: bool = True

    NAVIGATION: ClassVar["RouteConfig"]
    SUBTLE: ClassVar["RouteConfig"]
    WALKING: ClassVar["RouteConfig"]
    LIVE_TRACKING: ClassVar["RouteConfig"]

    def __post_init__(self):
        fixes: dict[str, Any] = {}

        if self.dash_pattern is not None and not isinstance(self.dash_pattern, tuple):
            object.__setattr__(self, "dash_pattern", tuple(self.dash_pattern))

        if not self.width > 0:
            fixes["width"] = 1.0
        if not self.arrow_spacing > 0:
            fixes["arrow_spacing"] = 1.0
        if not 0.0 <= self.glow_intensity <= 1.0:
            fixes["glow_intensity"] = max(0.0, min(1.0, self.glow_intensity))
        if self.border_width < 0:
            fixes["border_width"] = 0.0
        if self.dash_pattern is not None and (
            len(self.dash_pattern) < 2 or any(not v > 0 for v in self.dash_pattern)
        ):
            fixes["dash_pattern"] = None
        if self.animation_progress is not None:
            progress = self.animation_progress
            if math.isnan(progress):
                fixes["animation_progress"] = None
            elif not 0.0 <= progress <= 1.0:
                fixes["animation_progress"] = max(0.0, min(1.0, progress))

        if fixes:
            logger.warning(f"Invalid route config values corrected: {fixes}")
            for name, value in fixes.items():
                object.__setattr__(self, name, value)

    @property
    def effective_dash_pattern(self) -> tuple[float, ...]:
        """Dash pattern used for dashed rendering."""
        return self.dash_pattern or DEFAULT_DASH_PATTERN

    @property
    def effective_start_color(self) -> Color:
        return self.start_color or self.color

    @property
    def effective_end_color(self) -> Color:
        return self.end_color or self.color

    def copy_with(
        self,
        color: Color | Unset = UNSET,
        width: float | Unset = UNSET,
        style: RouteStyle | Unset = UNSET,
        show_arrows: bool | Unset = UNSET,
        arrow_spacing: float | Unset = UNSET,
        show_endpoints: bool | Unset = UNSET,
        start_color: Optional[Color] | Unset = UNSET,
        end_color: Optional[Color] | Unset = UNSET,
        show_glow: bool | Unset = UNSET,
        glow_intensity: float | Unset = UNSET,
        dash_pattern: Optional[Sequence[float]] | Unset = UNSET,
        border_color: Optional[Color] | Unset = UNSET,
        border_width: float | Unset = UNSET,
        animation_progress: Optional[float] | Unset = UNSET,
        interactive: bool | Unset = UNSET,
    ) -> "RouteConfig":
        """Return a copy with every given argument replaced.

        Arguments left at ``UNSET`` keep the current value. Passing ``None``
        to an optional field clears it.
        """
        given = {
            "color": color,
            "width": width,
            "style": style,
            "show_arrows": show_arrows,
            "arrow_spacing": arrow_spacing,
            "show_endpoints": show_endpoints,
            "start_color": start_color,
            "end_color": end_color,
            "show_glow": show_glow,
            "glow_intensity": glow_intensity,
            "dash_pattern": dash_pattern,
            "border_color": border_color,
            "border_width": border_width,
            "animation_progress": animation_progress,
            "interactive": interactive,
        }
        changes = {name: value for name, value in given.items() if value is not UNSET}
        return replace(self, **changes)


RouteConfig.NAVIGATION = RouteConfig(
    color=Color(0xFF4285F4),
    width=5.0,
    style=RouteStyle.SOLID,
    show_arrows=True,
    arrow_spacing=80,
    show_glow=True,
    glow_intensity=0.4,
    border_color=Color(0xFF1A73E8),
)

RouteConfig.SUBTLE = RouteConfig(
    color=Color(0xFF9E9E9E),
    width=3.0,
    style=RouteStyle.DASHED,
    show_arrows=False,
    show_glow=False,
    dash_pattern=(8, 4),
)

RouteConfig.WALKING = RouteConfig(
    color=Color(0xFF4CAF50),
    width=4.0,
    style=RouteStyle.DOTTED,
    show_arrows=False,
    show_endpoints=True,
    dash_pattern=(2, 4),
)

RouteConfig.LIVE_TRACKING = RouteConfig(
    color=Color(0xFF00E676),
    width=4.0,
    style=RouteStyle.GRADIENT,
    show_arrows=True,
    arrow_spacing=60,
    show_glow=True,
    glow_intensity=0.5,
)

ROUTE_PRESETS: dict[str, RouteConfig] = {
    "default": RouteConfig(),
    "navigation": RouteConfig.NAVIGATION,
    "subtle": RouteConfig.SUBTLE,
    "walking": RouteConfig.WALKING,
    "live_tracking": RouteConfig.LIVE_TRACKING,
}


def _minutes(distance_km: float, speed_kmh: float) -> timedelta:
    return timedelta(minutes=round(distance_km / speed_kmh * 60))


@dataclass(frozen=True)
class MapcnRoute:
    """A route drawn on the map.

    Derived values (distance, bounds, center...) are computed from ``points``
    on every access.
    """
    points: tuple[GeoPoint, ...]
    config: RouteConfig = field(default_factory=RouteConfig)
    id: Optional[str] = None
    label: Optional[str] = None
    metadata: Optional[dict[str, Any]] = field(default=None, compare=False)
    on_tap: Optional[Callable[["MapcnRoute"], None]] = field(
        default=None, compare=False, repr=False
    )

    def __post_init__(self):
        if not isinstance(self.points, tuple):
            object.__setattr__(self, "points", tuple(self.points))

    @classmethod
    def simple(
        cls,
        start: GeoPoint,
        end: GeoPoint,
        color: Color = DEFAULT_ROUTE_COLOR,
        width: float = 4.0,
    ) -> "MapcnRoute":
        """Two-point route with default styling."""
        return cls(points=(start, end), config=RouteConfig(color=color, width=width))

    @property
    def distance_km(self) -> float:
        return route_distance(self.points)

    @property
    def distance_meters(self) -> float:
        return self.distance_km * 1000

    @property
    def distance_miles(self) -> float:
        return self.distance_km * KM_TO_MILES

    @property
    def distance_formatted(self) -> str:
        """Distance with an automatically chosen unit."""
        km = self.distance_km
        if km < 1:
            return f"{round(km * 1000)} m"
        if km < 10:
            return f"{km:.1f} km"
        return f"{round(km)} km"

    @property
    def walking_time(self) -> timedelta:
        return _minutes(self.distance_km, WALKING_SPEED_KMH)

    @property
    def driving_time(self) -> timedelta:
        return _minutes(self.distance_km, DRIVING_SPEED_KMH)

    @property
    def cycling_time(self) -> timedelta:
        return _minutes(self.distance_km, CYCLING_SPEED_KMH)

    @property
    def bounds(self) -> LatLngBounds:
        """Bounding box of the route.

        Raises:
            ValueError: If the route has no points
        """
        return LatLngBounds.from_points(self.points)

    @property
    def center(self) -> GeoPoint:
        """Centroid of the route points."""
        if not self.points:
            return ORIGIN
        if len(self.points) == 1:
            return self.points[0]

        count = len(self.points)
        return GeoPoint(
            sum(p.latitude for p in self.points) / count,
            sum(p.longitude for p in self.points) / count,
        )

    @property
    def start_point(self) -> Optional[GeoPoint]:
        return self.points[0] if self.points else None

    @property
    def end_point(self) -> Optional[GeoPoint]:
        return self.points[-1] if self.points else None

    @property
    def is_renderable(self) -> bool:
        return len(self.points) >= 2

    def with_config(self, config: RouteConfig) -> "MapcnRoute":
        return replace(self, config=config)
