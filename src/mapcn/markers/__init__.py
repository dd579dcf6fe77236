"""Animated marker configuration and painters."""

from .config import MapcnMarker, MarkerConfig, MarkerStyle, MARKER_PRESETS
from .painter import (
    MarkerPainter,
    LoadingPainter,
    marker_extent,
    style_painter,
    pulse_commands,
    static_commands,
    radar_commands,
    ring_commands,
    breathe_commands,
    shadow_commands,
)

__all__ = [
    "MapcnMarker",
    "MarkerConfig",
    "MarkerStyle",
    "MARKER_PRESETS",
    "MarkerPainter",
    "LoadingPainter",
    "marker_extent",
    "style_painter",
    "pulse_commands",
    "static_commands",
    "radar_commands",
    "ring_commands",
    "breathe_commands",
    "shadow_commands",
]
