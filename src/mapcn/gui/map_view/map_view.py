"""Map surface widget.

``MapView`` draws themed tiles, route layers and animated markers for one
camera, and hosts the ``CameraController`` that moves that camera.
"""

import logging
from pathlib import Path
from typing import Iterable, Optional, Sequence

import qtawesome as qta  # type: ignore
from PySide6.QtCore import QPointF, QRectF, Qt, QTimer, Signal
from PySide6.QtGui import QCloseEvent, QColor, QPainter, QPaintEvent, QShowEvent
from PySide6.QtWidgets import QToolButton, QVBoxLayout, QWidget

from ...camera.animation import FrameClock, QtFrameClock
from ...camera.controller import CameraController
from ...camera.projection import geo_to_screen, tile_placements
from ...geo.models import CameraState, GeoPoint, TileCoord
from ...markers.config import MapcnMarker
from ...markers.painter import LoadingPainter, MarkerPainter, marker_extent
from ...rendering.color import WHITE, Color
from ...rendering.commands import TextCommand
from ...rendering.qt_painter import CommandPainter
from ...routes.io import load_routes
from ...routes.models import MapcnRoute
from ...routes.renderer import RouteLayer, RouteRenderer
from ...settings import AppSettings
from ...themes import MapStyle, background_color, matrix_for_style
from ...tiles.layer import ThemedTileLayer
from ...tiles.providers import DirectoryTileProvider, PlaceholderTileProvider, TileProvider
from ...types import MapcnError
from .events import MapViewEventHandlers

DEFAULT_CENTER = GeoPoint(20.0, 0.0)
DEFAULT_ATTRIBUTION = "mapcn"
BANNER_HEIGHT = 32.0
LABEL_OFFSET = 16.0


class MapView(MapViewEventHandlers, QWidget):
    """Animated, themed map surface.

    Implements the render surface the camera controller drives. Camera calls
    made before the widget is first shown are queued by the controller and
    replayed once the first layout has happened.
    """

    map_ready = Signal()
    camera_moved = Signal(object)  # CameraState
    point_tapped = Signal(object)  # GeoPoint
    route_tapped = Signal(object)  # MapcnRoute

    def __init__(
        self,
        settings: AppSettings,
        clock: Optional[FrameClock] = None,
        tile_provider: Optional[TileProvider] = None,
        parent: Optional[QWidget] = None,
    ):
        """Initialize the map view.

        Args:
            settings: Application settings (zoom range, theme, frame interval)
            clock: Frame clock; defaults to the shared Qt frame clock
            tile_provider: Tile source; defaults to the configured tile directory
                or placeholder tiles
            parent: Parent widget
        """
        super().__init__(parent)

        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.settings = settings
        map_settings = settings.map

        self.min_zoom = map_settings.min_zoom
        self.max_zoom = map_settings.max_zoom
        initial_zoom = max(self.min_zoom, min(self.max_zoom, map_settings.initial_zoom))
        self._camera = CameraState(DEFAULT_CENTER, initial_zoom)

        if clock is None:
            qt_clock = QtFrameClock(map_settings.frame_interval_ms)
            qt_clock.set_interval(map_settings.frame_interval_ms)
            clock = qt_clock
        self.clock: FrameClock = clock
        self.controller = CameraController(self.clock, self)

        # Content
        self.routes: list[MapcnRoute] = []
        self.markers: list[MapcnMarker] = []
        self.route_renderer = RouteRenderer()
        self._route_layers: list[RouteLayer] = []

        # Theme and tiles
        self.map_style = map_settings.style
        self.accent_color = map_settings.accent_color
        self.tile_layer = ThemedTileLayer(
            tile_provider or self._default_provider(),
            matrix_for_style(self.map_style),
            on_error=self._on_tile_error,
        )
        self.attribution = DEFAULT_ATTRIBUTION

        # Marker pulse and loading spinner
        self._pulse_duration = map_settings.pulse_duration_ms / 1000.0
        self._pulse_phase = 0.0
        self._pulse_start: Optional[float] = None
        self._loading = True
        self._frame_hooked = False

        # Painters of the last frame, compared to skip unchanged frames
        self._frame_camera: Optional[CameraState] = None
        self._frame_markers: tuple[MarkerPainter, ...] = ()
        self._frame_loading: Optional[LoadingPainter] = None

        self._error_message: Optional[str] = None
        self._shown_once = False
        self._disposed = False

        # Pointer state used by the event mixin
        self._is_panning = False
        self._is_dragging = False
        self._press_x = self._press_y = 0.0
        self._pan_start_x = self._pan_start_y = 0.0

        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)
        self.setMinimumSize(200, 150)
        self._setup_controls_ui()

        self.logger.debug("Map view initialized")

    def _default_provider(self) -> TileProvider:
        directory = self.settings.map.tile_directory
        if directory is not None and directory.is_dir():
            self.logger.info(f"Using tiles from {directory}")
            return DirectoryTileProvider(directory)
        return PlaceholderTileProvider()

    def _setup_controls_ui(self) -> None:
        """Setup overlay buttons for zoom and rotation."""
        self.controls_container = QWidget(self)
        layout = QVBoxLayout(self.controls_container)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSizeConstraint(QVBoxLayout.SizeConstraint.SetFixedSize)
        layout.setSpacing(4)

        self.zoom_in_button = self._control_button("mdi.plus", "Zoom in [ + ]")
        self.zoom_in_button.clicked.connect(self.controller.zoom_in)
        layout.addWidget(self.zoom_in_button)

        self.zoom_out_button = self._control_button("mdi.minus", "Zoom out [ - ]")
        self.zoom_out_button.clicked.connect(self.controller.zoom_out)
        layout.addWidget(self.zoom_out_button)

        self.reset_rotation_button = self._control_button(
            "mdi.compass-outline", "Reset rotation [ R ]"
        )
        self.reset_rotation_button.clicked.connect(self.controller.reset_rotation)
        layout.addWidget(self.reset_rotation_button)

        # Position will be set in resizeEvent
        self.controls_container.raise_()

    def _control_button(self, icon_name: str, tooltip: str) -> QToolButton:
        button = QToolButton(self.controls_container)
        button.setFixedSize(32, 32)
        button.setToolTip(tooltip)
        button.setProperty("class", "map-control")
        button.setFocusPolicy(Qt.FocusPolicy.NoFocus)
        try:
            button.setIcon(qta.icon(icon_name, color="white"))  # type: ignore[arg-type]
        except Exception as e:
            self.logger.warning(f"Failed to load icon {icon_name}: {e}")
            button.setText(tooltip[0])
        return button

    # === RENDER SURFACE ===

    @property
    def camera(self) -> CameraState:
        return self._camera

    def set_camera(self, state: CameraState) -> None:
        """Move the camera; zoom is kept inside the widget's range."""
        zoom = max(self.min_zoom, min(self.max_zoom, state.zoom))
        if zoom != state.zoom:
            state = state.with_values(zoom=zoom)
        if state == self._camera:
            return
        self._camera = state
        self.camera_moved.emit(state)
        self.update()

    def viewport_size(self) -> tuple[float, float]:
        return float(self.width()), float(self.height())

    # === CONTENT ===

    def set_routes(self, routes: Iterable[MapcnRoute]) -> None:
        """Replace the drawn routes; later routes draw on top."""
        self.routes = list(routes)
        self._route_layers = self.route_renderer.build_all(self.routes)
        self.logger.debug(
            f"Routes set: {len(self.routes)} routes, {len(self._route_layers)} layers"
        )
        self.update()

    def add_route(self, route: MapcnRoute) -> None:
        self.set_routes([*self.routes, route])

    def clear_routes(self) -> None:
        self.set_routes([])

    def load_routes_file(self, path: Path) -> bool:
        """Load routes from a JSON file, reporting failures in the error banner.

        Returns:
            True if the file was loaded
        """
        try:
            routes = load_routes(path)
        except MapcnError as e:
            self.logger.error(f"Could not load routes: {e}")
            self.show_error(str(e))
            return False

        self.set_routes(routes)
        return True

    def set_markers(self, markers: Iterable[MapcnMarker]) -> None:
        self.markers = list(markers)
        self._update_frame_hookup()
        self.update()

    def all_points(self) -> list[GeoPoint]:
        """Every marker position and route point, for fitting the view."""
        points = [marker.position for marker in self.markers]
        for route in self.routes:
            points.extend(route.points)
        return points

    # === THEME ===

    def set_style(self, style: MapStyle, custom_matrix: Optional[Sequence[float]] = None) -> None:
        """Switch the map theme; tiles are re-themed on the next paint."""
        self.map_style = style
        self.tile_layer.set_matrix(matrix_for_style(style, custom_matrix))
        self.logger.info(f"Map style set to {style.value}")
        self.update()

    def set_accent_color(self, color: Color) -> None:
        self.accent_color = color
        self.update()

    def set_tile_provider(self, provider: TileProvider) -> None:
        self.tile_layer.set_provider(provider)
        self._loading = True
        self._update_frame_hookup()
        self.update()

    # === ERROR BANNER ===

    @property
    def error_message(self) -> Optional[str]:
        return self._error_message

    def show_error(self, message: str) -> None:
        """Show ``message`` in the dismissable banner, replacing any previous one."""
        self._error_message = message
        self.update()

    def dismiss_error(self) -> None:
        if self._error_message is not None:
            self._error_message = None
            self.update()

    def _on_tile_error(self, coord: TileCoord, error: Exception) -> None:
        self.show_error(f"Tile {coord} failed to load: {error}")

    def _banner_rect(self) -> QRectF:
        return QRectF(0, 0, self.width(), BANNER_HEIGHT)

    # === LIFECYCLE ===

    def showEvent(self, event: QShowEvent) -> None:
        """Mark the map ready after the first layout pass."""
        super().showEvent(event)
        if not self._shown_once:
            self._shown_once = True
            QTimer.singleShot(0, self._on_first_layout)  # type: ignore

    def _on_first_layout(self) -> None:
        if self._disposed:
            return
        self.logger.debug(f"Map ready with viewport {self.viewport_size()}")
        self.controller.mark_ready()
        self._update_frame_hookup()
        self.map_ready.emit()

    def closeEvent(self, event: QCloseEvent) -> None:
        self.dispose()
        super().closeEvent(event)

    def dispose(self) -> None:
        """Stop animations and release the frame clock."""
        if self._disposed:
            return
        self._disposed = True
        self.controller.dispose()
        if self._frame_hooked:
            self.clock.remove_frame_callback(self._on_frame)
            self._frame_hooked = False
        self.logger.debug("Map view disposed")

    # === FRAME UPDATES ===

    def _needs_frames(self) -> bool:
        if self._disposed or not self._shown_once:
            return False
        loading = self._loading and self.settings.map.show_loading_indicator
        return bool(self.markers) or loading

    def _update_frame_hookup(self) -> None:
        needed = self._needs_frames()
        if needed and not self._frame_hooked:
            self.clock.add_frame_callback(self._on_frame)
            self._frame_hooked = True
        elif not needed and self._frame_hooked:
            self.clock.remove_frame_callback(self._on_frame)
            self._frame_hooked = False

    def _on_frame(self, now: float) -> None:
        """Advance the repeating pulse phase; repaint only if the frame differs."""
        if self._pulse_start is None:
            self._pulse_start = now
        elapsed = now - self._pulse_start
        self._pulse_phase = (elapsed / self._pulse_duration) % 1.0

        markers, loading = self._frame_painters()
        if self._frame_changed(markers, loading):
            self.update()
        self._frame_camera = self._camera
        self._frame_markers = markers
        self._frame_loading = loading

    def _frame_painters(self) -> tuple[tuple[MarkerPainter, ...], Optional[LoadingPainter]]:
        markers = tuple(
            MarkerPainter(marker.color or self.accent_color, self._pulse_phase, marker.config)
            for marker in self.markers
        )
        loading = None
        if self._loading and self.settings.map.show_loading_indicator:
            loading = LoadingPainter(self._pulse_phase)
        return markers, loading

    def _frame_changed(
        self, markers: tuple[MarkerPainter, ...], loading: Optional[LoadingPainter]
    ) -> bool:
        if self._camera != self._frame_camera or len(markers) != len(self._frame_markers):
            return True
        if any(
            current.should_repaint(previous)
            for current, previous in zip(markers, self._frame_markers)
        ):
            return True
        if loading is None:
            return self._frame_loading is not None
        return loading.should_repaint(self._frame_loading)

    # === PAINTING ===

    def paintEvent(self, event: QPaintEvent) -> None:
        painter = QPainter(self)
        try:
            painter.setRenderHint(QPainter.RenderHint.Antialiasing)
            painter.setRenderHint(QPainter.RenderHint.SmoothPixmapTransform)
            painter.fillRect(self.rect(), background_color(self.map_style).to_qcolor())

            self._paint_tiles(painter)
            self._paint_routes(painter)
            self._paint_markers(painter)
            self._paint_attribution(painter)
            self._paint_loading(painter)
            self._paint_error_banner(painter)
        finally:
            painter.end()

    def _paint_tiles(self, painter: QPainter) -> None:
        viewport = self.viewport_size()
        placements = tile_placements(self._camera, viewport)
        drawn = 0

        painter.save()
        if self._camera.rotation % 360:
            # Tiles are placed north-up and rotated around the viewport center
            painter.translate(viewport[0] / 2, viewport[1] / 2)
            painter.rotate(self._camera.rotation)
            painter.translate(-viewport[0] / 2, -viewport[1] / 2)

        for placement in placements:
            pixmap = self.tile_layer.pixmap(placement.coord)
            if pixmap is None:
                continue
            # One extra pixel hides seams between scaled tiles
            target = QRectF(placement.left, placement.top, placement.size + 1, placement.size + 1)
            painter.drawPixmap(target, pixmap, QRectF(pixmap.rect()))
            drawn += 1
        painter.restore()

        if self._loading and (drawn or not placements):
            self._loading = False
            self._update_frame_hookup()

    def _project(self, point: GeoPoint) -> tuple[float, float]:
        return geo_to_screen(point, self._camera, self.viewport_size())

    def _paint_routes(self, painter: QPainter) -> None:
        if not self._route_layers:
            return
        command_painter = CommandPainter(painter, self._project, self._camera.rotation)
        for layer in self._route_layers:
            command_painter.paint(layer.commands)

    def _paint_markers(self, painter: QPainter) -> None:
        if not self.markers:
            return

        width, height = self.viewport_size()
        command_painter = CommandPainter(painter)
        for marker in self.markers:
            x, y = self._project(marker.position)
            extent = marker_extent(marker.config)
            if x < -extent or y < -extent or x > width + extent or y > height + extent:
                continue

            color = marker.color or self.accent_color
            marker_painter = MarkerPainter(color, self._pulse_phase, marker.config)
            command_painter.paint(marker_painter.commands((x, y)))

            if marker.label:
                label = TextCommand(
                    (x, y + marker.config.core_radius + LABEL_OFFSET),
                    marker.label,
                    WHITE,
                )
                command_painter.paint_command(label)

    def _paint_attribution(self, painter: QPainter) -> None:
        if not self.settings.map.show_attribution or not self.attribution:
            return

        text = f"© {self.attribution}"
        metrics = painter.fontMetrics()
        width = metrics.horizontalAdvance(text) + 12
        height = metrics.height() + 4
        rect = QRectF(self.width() - width, self.height() - height, width, height)

        painter.fillRect(rect, QColor(0, 0, 0, 120))
        painter.setPen(QColor(255, 255, 255, 200))
        painter.drawText(rect, Qt.AlignmentFlag.AlignCenter, text)

    def _paint_loading(self, painter: QPainter) -> None:
        if not self._loading or not self.settings.map.show_loading_indicator:
            return
        center = (self.width() / 2, self.height() / 2)
        CommandPainter(painter).paint(LoadingPainter(self._pulse_phase).commands(center))

    def _paint_error_banner(self, painter: QPainter) -> None:
        if not self._error_message:
            return

        rect = self._banner_rect()
        painter.fillRect(rect, QColor(183, 28, 28, 230))
        painter.setPen(QColor(255, 255, 255))
        text_rect = rect.adjusted(12, 0, -40, 0)
        elided = painter.fontMetrics().elidedText(
            self._error_message, Qt.TextElideMode.ElideRight, int(text_rect.width())
        )
        painter.drawText(
            text_rect, Qt.AlignmentFlag.AlignVCenter | Qt.AlignmentFlag.AlignLeft, elided
        )
        # Close mark; a click anywhere on the banner dismisses it
        painter.drawText(
            QPointF(rect.right() - 24, rect.center().y() + painter.fontMetrics().ascent() / 2),
            "×",
        )
