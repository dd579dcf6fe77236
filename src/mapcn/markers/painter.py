"""Procedural painters for animated map markers.

Each marker style is a plain function of ``(color, phase, config)`` that
returns a draw list centered on the marker anchor. ``MarkerPainter`` picks
the function for the configured style and decides whether a new frame is
needed.
"""

import math
from dataclasses import dataclass, field
from typing import Callable

from ..rendering.color import Color, BLACK, WHITE
from ..rendering.commands import (
    ArcCommand,
    CircleCommand,
    LocalCommand,
    Offset,
    PaintStyle,
)
from .config import MarkerConfig, MarkerStyle

StylePainter = Callable[[Color, float, MarkerConfig, Offset], list[LocalCommand]]

# Marker widgets are sized around the pulse radius, within sane bounds
MIN_MARKER_EXTENT = 60.0
MAX_MARKER_EXTENT = 120.0


def clamp_phase(phase: float) -> float:
    """Clamp an animation phase into [0, 1] (NaN becomes 0)."""
    if math.isnan(phase):
        return 0.0
    return max(0.0, min(1.0, phase))


def marker_extent(config: MarkerConfig) -> float:
    """Side length of the square box a marker is painted into."""
    return max(MIN_MARKER_EXTENT, min(MAX_MARKER_EXTENT, config.pulse_radius + 20))


def _offset(center: Offset, dx: float, dy: float) -> Offset:
    return (center[0] + dx, center[1] + dy)


def shadow_commands(config: MarkerConfig, center: Offset = (0.0, 0.0)) -> list[LocalCommand]:
    """Soft drop shadow slightly below and right of the core."""
    return [
        CircleCommand(
            center=_offset(center, 1, 2),
            radius=config.core_radius + 2,
            color=BLACK.with_alpha(0.15),
            blur=4,
        )
    ]


def pulse_commands(
    color: Color, phase: float, config: MarkerConfig, center: Offset = (0.0, 0.0)
) -> list[LocalCommand]:
    """Expanding, fading halo around a glowing core."""
    core = config.core_radius
    return [
        # Outer expanding halo
        CircleCommand(
            center=center,
            radius=core + config.pulse_radius * phase,
            color=color.with_alpha(config.glow_intensity * 0.5 * (1 - phase)),
        ),
        # Middle pulse layer
        CircleCommand(
            center=center,
            radius=core + config.pulse_radius * 0.5 * phase,
            color=color.with_alpha(config.glow_intensity * (1 - phase)),
        ),
        # Solid core
        CircleCommand(center=center, radius=core, color=color, blur=2),
        # Highlight
        CircleCommand(
            center=_offset(center, -core * 0.3, -core * 0.3),
            radius=core * 0.3,
            color=WHITE.with_alpha(0.6),
        ),
    ]


def static_commands(
    color: Color, phase: float, config: MarkerConfig, center: Offset = (0.0, 0.0)
) -> list[LocalCommand]:
    """Soft glow, core and white border. Ignores ``phase``."""
    core = config.core_radius
    return [
        CircleCommand(
            center=center,
            radius=core + 8,
            color=color.with_alpha(config.glow_intensity * 0.3),
            blur=8,
        ),
        CircleCommand(center=center, radius=core, color=color),
        CircleCommand(
            center=center,
            radius=core,
            color=WHITE.with_alpha(0.8),
            style=PaintStyle.STROKE,
            stroke_width=2,
        ),
    ]


def radar_commands(
    color: Color, phase: float, config: MarkerConfig, center: Offset = (0.0, 0.0)
) -> list[LocalCommand]:
    """A 60 degree sweep arc turning once per cycle over three faint rings."""
    sweep = math.pi / 3
    commands: list[LocalCommand] = [
        ArcCommand(
            center=center,
            radius=config.pulse_radius * 0.7,
            start_angle=phase * 2 * math.pi - sweep / 2,
            sweep_angle=sweep,
            color=color.with_alpha(config.glow_intensity * (1 - phase)),
            stroke_width=3,
        )
    ]

    for i in range(1, 4):
        commands.append(
            CircleCommand(
                center=center,
                radius=config.pulse_radius * 0.25 * i,
                color=color.with_alpha(0.1),
                style=PaintStyle.STROKE,
                stroke_width=1,
            )
        )

    commands.append(CircleCommand(center=center, radius=config.core_radius * 0.8, color=color))
    return commands


def _expanding_ring(
    color: Color, phase: float, config: MarkerConfig, center: Offset, alpha_scale: float
) -> CircleCommand:
    return CircleCommand(
        center=center,
        radius=config.core_radius + config.pulse_radius * phase,
        color=color.with_alpha(config.glow_intensity * (1 - phase) * alpha_scale),
        style=PaintStyle.STROKE,
        stroke_width=config.border_width * (1 - phase * 0.5),
    )


def ring_commands(
    color: Color, phase: float, config: MarkerConfig, center: Offset = (0.0, 0.0)
) -> list[LocalCommand]:
    """Two expanding rings half a cycle apart around a core with a white dot."""
    second_phase = (phase + 0.5) % 1.0
    return [
        _expanding_ring(color, phase, config, center, 1.0),
        _expanding_ring(color, second_phase, config, center, 0.7),
        CircleCommand(center=center, radius=config.core_radius, color=color),
        CircleCommand(center=center, radius=config.core_radius * 0.4, color=WHITE),
    ]


def breathe_commands(
    color: Color, phase: float, config: MarkerConfig, center: Offset = (0.0, 0.0)
) -> list[LocalCommand]:
    """Core that grows and shrinks on a sine wave."""
    breath = (math.sin(phase * 2 * math.pi) + 1) / 2
    radius = config.core_radius + config.core_radius * 0.4 * breath
    return [
        CircleCommand(
            center=center,
            radius=radius + 4,
            color=color.with_alpha(config.glow_intensity * 0.5),
            blur=4 + 4 * breath,
        ),
        CircleCommand(center=center, radius=radius, color=color),
        CircleCommand(
            center=_offset(center, -radius * 0.2, -radius * 0.2),
            radius=radius * 0.25,
            color=WHITE.with_alpha(0.4 + 0.2 * breath),
        ),
    ]


def style_painter(style: MarkerStyle) -> StylePainter:
    """Drawing function for a marker style."""
    match style:
        case MarkerStyle.PULSE:
            return pulse_commands
        case MarkerStyle.STATIC:
            return static_commands
        case MarkerStyle.RADAR:
            return radar_commands
        case MarkerStyle.RING:
            return ring_commands
        case MarkerStyle.BREATHE:
            return breathe_commands
    raise ValueError(f"Unknown marker style: {style}")


@dataclass(frozen=True)
class MarkerPainter:
    """One frame of an animated marker.

    The painter keeps no state between frames; the host compares the new
    painter with the previous one through ``should_repaint``.
    """
    color: Color
    phase: float
    config: MarkerConfig = field(default_factory=MarkerConfig)

    def commands(self, center: Offset = (0.0, 0.0)) -> list[LocalCommand]:
        """Build the draw list for this frame.

        Args:
            center: Local pixel position of the marker anchor

        Returns:
            Commands in back-to-front order
        """
        phase = clamp_phase(self.phase)
        commands: list[LocalCommand] = []

        if self.config.show_shadow:
            commands.extend(shadow_commands(self.config, center))

        commands.extend(style_painter(self.config.style)(self.color, phase, self.config, center))
        return commands

    def should_repaint(self, previous: "MarkerPainter | None") -> bool:
        """True when color, phase or config differ from the previous frame."""
        if previous is None:
            return True
        return (
            previous.phase != self.phase
            or previous.color != self.color
            or previous.config != self.config
        )


@dataclass(frozen=True)
class LoadingPainter:
    """Spinning arc shown while the first tiles load."""
    phase: float
    color: Color = WHITE.with_alpha(0.54)
    radius: float = 8.0

    def commands(self, center: Offset = (0.0, 0.0)) -> list[LocalCommand]:
        return [
            ArcCommand(
                center=center,
                radius=self.radius,
                start_angle=clamp_phase(self.phase) * 2 * math.pi,
                sweep_angle=math.pi * 1.5,
                color=self.color,
                stroke_width=2,
                round_cap=True,
            )
        ]

    def should_repaint(self, previous: "LoadingPainter | None") -> bool:
        return previous is None or previous.phase != self.phase
