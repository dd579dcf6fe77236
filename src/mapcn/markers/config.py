"""
Marker appearance configuration and presets.
"""

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Callable, ClassVar, Optional

from ..geo.models import GeoPoint
from ..rendering.color import Color
from ..types import UNSET, Unset

logger = logging.getLogger(__name__)


class MarkerStyle(Enum):
    """Animation style for map markers."""
    PULSE = "pulse"  # classic pulsing halo (default)
    STATIC = "static"  # soft glow, no animation
    RADAR = "radar"  # rotating sweep arc
    RING = "ring"  # two expanding rings
    BREATHE = "breathe"  # smooth scale up/down


@dataclass(frozen=True)
class MarkerConfig:
    """How a marker looks and animates.

    Attributes:
        core_radius: Radius of the solid center dot (> 0)
        pulse_radius: Maximum radius of the animation (>= core_radius)
        glow_intensity: Glow strength, 0.0 - 1.0
        style: Animation style
        show_shadow: Draw a subtle drop shadow under the core
        border_width: Ring stroke width (>= 0)
    """
    core_radius: float = 6.0
    pulse_radius: float = 35.0
    glow_intensity: float = 0.4
    style: MarkerStyle = MarkerStyle.PULSE
    show_shadow: bool = True
    border_width: float = 2.5

    MINIMAL: ClassVar["MarkerConfig"]
    PROMINENT: ClassVar["MarkerConfig"]
    ELEGANT: ClassVar["MarkerConfig"]

    def __post_init__(self):
        fixes: dict[str, Any] = {}
        if self.core_radius <= 0:
            fixes["core_radius"] = 1.0
        core = fixes.get("core_radius", self.core_radius)
        if self.pulse_radius < core:
            fixes["pulse_radius"] = core
        if not 0.0 <= self.glow_intensity <= 1.0:
            fixes["glow_intensity"] = max(0.0, min(1.0, self.glow_intensity))
        if self.border_width < 0:
            fixes["border_width"] = 0.0

        if fixes:
            logger.warning(f"Invalid marker config values corrected: {fixes}")
            for name, value in fixes.items():
                object.__setattr__(self, name, value)

    def copy_with(
        self,
        core_radius: float | Unset = UNSET,
        pulse_radius: float | Unset = UNSET,
        glow_intensity: float | Unset = UNSET,
        style: MarkerStyle | Unset = UNSET,
        show_shadow: bool | Unset = UNSET,
        border_width: float | Unset = UNSET,
    ) -> "MarkerConfig":
        """Return a copy with every given argument replaced."""
        changes = {
            name: value
            for name, value in (
                ("core_radius", core_radius),
                ("pulse_radius", pulse_radius),
                ("glow_intensity", glow_intensity),
                ("style", style),
                ("show_shadow", show_shadow),
                ("border_width", border_width),
            )
            if value is not UNSET
        }
        return replace(self, **changes)


MarkerConfig.MINIMAL = MarkerConfig(
    core_radius=4,
    pulse_radius=20,
    glow_intensity=0.2,
    style=MarkerStyle.STATIC,
    show_shadow=False,
)

MarkerConfig.PROMINENT = MarkerConfig(
    core_radius=10,
    pulse_radius=50,
    glow_intensity=0.6,
    style=MarkerStyle.RADAR,
    show_shadow=True,
)

MarkerConfig.ELEGANT = MarkerConfig(
    core_radius=5,
    pulse_radius=30,
    glow_intensity=0.3,
    style=MarkerStyle.RING,
    show_shadow=True,
    border_width=3,
)

MARKER_PRESETS: dict[str, MarkerConfig] = {
    "default": MarkerConfig(),
    "minimal": MarkerConfig.MINIMAL,
    "prominent": MarkerConfig.PROMINENT,
    "elegant": MarkerConfig.ELEGANT,
}


@dataclass(frozen=True)
class MapcnMarker:
    """A marker placed on the map.

    Attributes:
        position: Geographic anchor of the marker
        color: Marker color; None uses the map accent color
        config: Appearance and animation
        label: Optional text drawn under the marker
        id: Optional identifier for lookups
        on_tap: Called with the marker when it is clicked
    """
    position: GeoPoint
    color: Optional[Color] = None
    config: MarkerConfig = field(default_factory=MarkerConfig)
    label: Optional[str] = None
    id: Optional[str] = None
    on_tap: Optional[Callable[["MapcnMarker"], None]] = field(default=None, compare=False)
