"""Replay draw command lists onto a QPainter.

The marker and route modules only produce command records; this is the one
place that turns them into Qt drawing calls.
"""

import logging
import math
from typing import Callable, Iterable

from PySide6.QtCore import QPointF, QRectF, Qt
from PySide6.QtGui import QBrush, QColor, QPainter, QPainterPath, QPen, QRadialGradient

from ..geo.models import GeoPoint
from .commands import (
    ArcCommand,
    CircleCommand,
    DrawCommand,
    GlyphCommand,
    Offset,
    PaintStyle,
    PathCommand,
    PolylineCommand,
    TextCommand,
)
from .glyphs import expand_glyph

Projector = Callable[[GeoPoint], Offset]


class CommandPainter:
    """Draws command records with an active QPainter.

    Local commands are drawn relative to ``origin``; geographic commands are
    placed through the ``project`` callable (geo point to widget pixels).
    """

    def __init__(
        self,
        painter: QPainter,
        project: Projector | None = None,
        map_rotation: float = 0.0,
    ):
        """Initialize the command painter.

        Args:
            painter: Active painter (between begin() and end())
            project: Geo to screen projection, required for route commands
            map_rotation: Clockwise camera rotation applied by ``project``
        """
        self.painter = painter
        self.project = project
        self.map_rotation = map_rotation
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def paint(self, commands: Iterable[DrawCommand], origin: Offset = (0.0, 0.0)) -> None:
        """Draw every command in order."""
        self.painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        for command in commands:
            self.paint_command(command, origin)

    def paint_command(self, command: DrawCommand, origin: Offset = (0.0, 0.0)) -> None:
        match command:
            case CircleCommand():
                self._draw_circle(command, origin)
            case ArcCommand():
                self._draw_arc(command, origin)
            case PathCommand():
                self._draw_path(command, origin)
            case TextCommand():
                self._draw_text(command, origin)
            case PolylineCommand():
                self._draw_polyline(command)
            case GlyphCommand():
                self._draw_glyph(command)
            case _:
                self.logger.warning(f"Unknown draw command: {command!r}")

    def _draw_circle(self, command: CircleCommand, origin: Offset) -> None:
        cx = origin[0] + command.center[0]
        cy = origin[1] + command.center[1]
        color = command.color.to_qcolor()

        if command.style == PaintStyle.STROKE:
            pen = QPen(color, command.stroke_width)
            self.painter.setPen(pen)
            self.painter.setBrush(Qt.BrushStyle.NoBrush)
            self.painter.drawEllipse(QPointF(cx, cy), command.radius, command.radius)
            return

        self.painter.setPen(Qt.PenStyle.NoPen)
        if command.blur > 0:
            # Approximate a gaussian mask with a radial falloff past the radius
            outer = command.radius + command.blur
            gradient = QRadialGradient(QPointF(cx, cy), outer)
            gradient.setColorAt(0.0, color)
            gradient.setColorAt(max(0.0, (command.radius - command.blur) / outer), color)
            gradient.setColorAt(1.0, QColor(color.red(), color.green(), color.blue(), 0))
            self.painter.setBrush(QBrush(gradient))
            self.painter.drawEllipse(QPointF(cx, cy), outer, outer)
        else:
            self.painter.setBrush(QBrush(color))
            self.painter.drawEllipse(QPointF(cx, cy), command.radius, command.radius)

    def _draw_arc(self, command: ArcCommand, origin: Offset) -> None:
        cx = origin[0] + command.center[0]
        cy = origin[1] + command.center[1]
        rect = QRectF(
            cx - command.radius, cy - command.radius, command.radius * 2, command.radius * 2
        )

        pen = QPen(command.color.to_qcolor(), command.stroke_width)
        if command.round_cap:
            pen.setCapStyle(Qt.PenCapStyle.RoundCap)
        self.painter.setPen(pen)
        self.painter.setBrush(Qt.BrushStyle.NoBrush)

        # Qt angles are counter-clockwise in 1/16 degree
        start = -math.degrees(command.start_angle) * 16
        span = -math.degrees(command.sweep_angle) * 16
        self.painter.drawArc(rect, int(start), int(span))

    def _draw_path(self, command: PathCommand, origin: Offset) -> None:
        if not command.points:
            return

        path = QPainterPath()
        first = command.points[0]
        path.moveTo(origin[0] + first[0], origin[1] + first[1])
        for x, y in command.points[1:]:
            path.lineTo(origin[0] + x, origin[1] + y)
        if command.closed:
            path.closeSubpath()

        color = command.color.to_qcolor()
        if command.filled:
            self.painter.setPen(Qt.PenStyle.NoPen)
            self.painter.fillPath(path, QBrush(color))
        if command.stroke_width > 0:
            self.painter.strokePath(path, QPen(color, command.stroke_width))

    def _draw_text(self, command: TextCommand, origin: Offset) -> None:
        font = self.painter.font()
        font.setPointSizeF(command.point_size)
        self.painter.setFont(font)
        self.painter.setPen(command.color.to_qcolor())

        metrics = self.painter.fontMetrics()
        width = metrics.horizontalAdvance(command.text)
        x = origin[0] + command.position[0] - width / 2
        y = origin[1] + command.position[1] + metrics.ascent() / 2
        self.painter.drawText(QPointF(x, y), command.text)

    def _require_projection(self) -> Projector:
        if self.project is None:
            raise ValueError("Geographic commands need a projection")
        return self.project

    def _draw_polyline(self, command: PolylineCommand) -> None:
        if len(command.points) < 2:
            return

        project = self._require_projection()
        path = QPainterPath()
        x, y = project(command.points[0])
        path.moveTo(x, y)
        for point in command.points[1:]:
            x, y = project(point)
            path.lineTo(x, y)

        pen = QPen(command.color.to_qcolor(), command.width)
        pen.setCapStyle(Qt.PenCapStyle.RoundCap)
        pen.setJoinStyle(Qt.PenJoinStyle.RoundJoin)
        if command.dotted:
            pen.setStyle(Qt.PenStyle.DotLine)
        self.painter.strokePath(path, pen)

    def _draw_glyph(self, command: GlyphCommand) -> None:
        center = self._require_projection()(command.position)
        for local in expand_glyph(command, center, self.map_rotation):
            self.paint_command(local)
