"""Route glyph shapes in local pixel space.

Route renderers emit ``GlyphCommand`` records anchored to geographic points;
at paint time each glyph is expanded into plain local commands centered on
its projected anchor.
"""

import math

from .color import Color, WHITE
from .commands import (
    CircleCommand,
    GlyphCommand,
    GlyphKind,
    LocalCommand,
    Offset,
    PaintStyle,
    PathCommand,
)


def rotate_points(points: list[Offset], degrees: float, center: Offset = (0.0, 0.0)) -> tuple[Offset, ...]:
    """Rotate local points clockwise (screen y down) around ``center``."""
    angle = math.radians(degrees)
    cos_a = math.cos(angle)
    sin_a = math.sin(angle)
    cx, cy = center
    return tuple(
        (cx + x * cos_a - y * sin_a, cy + x * sin_a + y * cos_a) for x, y in points
    )


def arrow_commands(
    color: Color, size: float, rotation: float, center: Offset = (0.0, 0.0)
) -> list[LocalCommand]:
    """Chevron arrow pointing up before rotation by a bearing in degrees."""
    half = size / 2
    outline = [(0.0, -half), (half, half), (0.0, size / 4), (-half, half)]
    return [PathCommand(points=rotate_points(outline, rotation, center), color=color)]


def endpoint_commands(
    color: Color, is_start: bool, size: float, center: Offset = (0.0, 0.0)
) -> list[LocalCommand]:
    """Start or end marker: glow, white disc, colored ring and an inner icon."""
    cx, cy = center
    commands: list[LocalCommand] = [
        CircleCommand(center=center, radius=size * 0.8, color=color.with_alpha(0.3), blur=4),
        CircleCommand(center=center, radius=size * 0.6, color=WHITE),
        CircleCommand(
            center=center,
            radius=size * 0.5,
            color=color,
            style=PaintStyle.STROKE,
            stroke_width=3,
        ),
    ]

    if is_start:
        commands.append(CircleCommand(center=center, radius=size * 0.25, color=color))
    else:
        # Flag-like triangle pointing right
        commands.append(
            PathCommand(
                points=(
                    (cx - size * 0.15, cy - size * 0.3),
                    (cx + size * 0.3, cy),
                    (cx - size * 0.15, cy + size * 0.3),
                ),
                color=color,
            )
        )
    return commands


def expand_glyph(
    glyph: GlyphCommand, center: Offset, map_rotation: float = 0.0
) -> list[LocalCommand]:
    """Local commands for a glyph whose anchor projects to ``center``.

    Args:
        glyph: Glyph record from a route layer
        center: Screen position of the glyph anchor
        map_rotation: Clockwise camera rotation in degrees; arrow bearings
            are turned by it to follow the rotated route line

    Returns:
        Drawable local commands
    """
    match glyph.kind:
        case GlyphKind.ARROW:
            return arrow_commands(
                glyph.color, glyph.size, glyph.rotation + map_rotation, center
            )
        case GlyphKind.START:
            return endpoint_commands(glyph.color, True, glyph.size, center)
        case GlyphKind.END:
            return endpoint_commands(glyph.color, False, glyph.size, center)
    return []
