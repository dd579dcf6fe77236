"""Colors, draw commands and glyph shapes.

``qt_painter`` is imported on demand by the widget layer; everything else
here is usable without Qt.
"""

from .color import Color, WHITE, BLACK, TRANSPARENT
from .commands import (
    Offset,
    PaintStyle,
    GlyphKind,
    CircleCommand,
    ArcCommand,
    PathCommand,
    PolylineCommand,
    GlyphCommand,
    TextCommand,
    LocalCommand,
    GeoCommand,
    DrawCommand,
)
from .glyphs import arrow_commands, endpoint_commands, expand_glyph, rotate_points

__all__ = [
    "Color",
    "WHITE",
    "BLACK",
    "TRANSPARENT",
    "Offset",
    "PaintStyle",
    "GlyphKind",
    "CircleCommand",
    "ArcCommand",
    "PathCommand",
    "PolylineCommand",
    "GlyphCommand",
    "TextCommand",
    "LocalCommand",
    "GeoCommand",
    "DrawCommand",
    "arrow_commands",
    "endpoint_commands",
    "expand_glyph",
    "rotate_points",
]
