"""Draw command records produced by marker and route painters.

Painters build lists of these immutable records instead of drawing directly,
so each style can be checked without a render surface. ``qt_painter`` plays
them back onto a ``QPainter``.

Marker and glyph commands use local pixel coordinates relative to the anchor
point. Route polylines and glyph anchors use geographic coordinates and are
projected at paint time.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Union

from ..geo.models import GeoPoint
from .color import Color

Offset = tuple[float, float]


class PaintStyle(Enum):
    FILL = "fill"
    STROKE = "stroke"


class GlyphKind(Enum):
    """Route decorations anchored to a geographic point."""
    ARROW = "arrow"
    START = "start"
    END = "end"


@dataclass(frozen=True)
class CircleCommand:
    """Filled or stroked circle. ``blur`` is a soft-edge radius in pixels."""
    center: Offset
    radius: float
    color: Color
    style: PaintStyle = PaintStyle.FILL
    stroke_width: float = 0.0
    blur: float = 0.0


@dataclass(frozen=True)
class ArcCommand:
    """Stroked arc; angles in radians, clockwise from 3 o'clock."""
    center: Offset
    radius: float
    start_angle: float
    sweep_angle: float
    color: Color
    stroke_width: float = 1.0
    round_cap: bool = False


@dataclass(frozen=True)
class PathCommand:
    """Polygon or open path in local pixel space."""
    points: tuple[Offset, ...]
    color: Color
    closed: bool = True
    filled: bool = True
    stroke_width: float = 0.0


@dataclass(frozen=True)
class PolylineCommand:
    """Geographic polyline stroked with round caps and joins."""
    points: tuple[GeoPoint, ...]
    color: Color
    width: float
    dotted: bool = False


@dataclass(frozen=True)
class GlyphCommand:
    """Route glyph (arrow or endpoint) at a geographic anchor.

    ``rotation`` is a bearing in degrees, used by arrows only.
    """
    kind: GlyphKind
    position: GeoPoint
    color: Color
    size: float
    rotation: float = 0.0


@dataclass(frozen=True)
class TextCommand:
    """Text label centered on a local offset."""
    position: Offset
    text: str
    color: Color
    point_size: float = 10.0


LocalCommand = Union[CircleCommand, ArcCommand, PathCommand, TextCommand]
GeoCommand = Union[PolylineCommand, GlyphCommand]
DrawCommand = Union[LocalCommand, GeoCommand]
