"""Event handlers for MapView.

Mouse drag pans the map, the wheel zooms in steps, a click without drag
hit-tests markers, the error banner and routes. Keyboard shortcuts mirror
the overlay buttons.
"""

import math

from PySide6.QtCore import QPointF, Qt
from PySide6.QtGui import QKeyEvent, QMouseEvent, QResizeEvent, QWheelEvent

from ...camera.projection import geo_to_screen, km_per_pixel, screen_to_geo
from ...routes.renderer import route_at

# Movement below this many pixels counts as a click, not a drag
CLICK_SLOP = 4.0
# Click distance to a route line, in pixels
ROUTE_HIT_PIXELS = 10.0
MIN_MARKER_HIT_RADIUS = 12.0
KEY_PAN_PIXELS = 100.0


class MapViewEventHandlers:
    """Mixin class for MapView event handling.

    Handles:
    - Mouse panning (left button drag)
    - Wheel zoom steps
    - Clicks on markers, routes and the error banner
    - Keyboard shortcuts (+/- zoom, arrows pan, R resets rotation, Esc dismisses errors)
    - Window resize (repositioning overlay buttons)
    """

    def resizeEvent(self, event: QResizeEvent) -> None:
        """Handle resize event to reposition overlay UI."""
        super().resizeEvent(event)  # type: ignore

        # Controls column in the top-right corner
        margin = 10
        self.controls_container.adjustSize()  # type: ignore
        x = self.width() - self.controls_container.width() - margin  # type: ignore
        self.controls_container.move(x, margin)  # type: ignore
        self.update()  # type: ignore

    def mousePressEvent(self, event: QMouseEvent) -> None:
        """Start a pan or a click."""
        if event.button() == Qt.MouseButton.LeftButton:
            self._is_panning = True  # type: ignore
            self._press_x = self._pan_start_x = event.position().x()  # type: ignore
            self._press_y = self._pan_start_y = event.position().y()  # type: ignore
            event.accept()
        else:
            super().mousePressEvent(event)  # type: ignore

    def mouseMoveEvent(self, event: QMouseEvent) -> None:
        """Pan the camera by the pointer movement."""
        if not self._is_panning:  # type: ignore
            super().mouseMoveEvent(event)  # type: ignore
            return

        x = event.position().x()
        y = event.position().y()
        if not self._is_dragging:  # type: ignore
            moved = math.hypot(x - self._press_x, y - self._press_y)  # type: ignore
            if moved < CLICK_SLOP:
                event.accept()
                return
            self._is_dragging = True  # type: ignore
            self.setCursor(Qt.CursorShape.ClosedHandCursor)  # type: ignore

        delta_x = x - self._pan_start_x  # type: ignore
        delta_y = y - self._pan_start_y  # type: ignore
        self._pan_start_x = x  # type: ignore
        self._pan_start_y = y  # type: ignore

        # The point now under the viewport center moves with the pointer
        width, height = self.viewport_size()  # type: ignore
        new_center = screen_to_geo(
            width / 2 - delta_x, height / 2 - delta_y, self.camera, (width, height)  # type: ignore
        )
        self.controller.jump_to(new_center)  # type: ignore
        event.accept()

    def mouseReleaseEvent(self, event: QMouseEvent) -> None:
        """Finish a pan, or handle a click when the pointer did not move."""
        if event.button() != Qt.MouseButton.LeftButton or not self._is_panning:  # type: ignore
            super().mouseReleaseEvent(event)  # type: ignore
            return

        was_dragging = self._is_dragging  # type: ignore
        self._is_panning = False  # type: ignore
        self._is_dragging = False  # type: ignore
        self.setCursor(Qt.CursorShape.ArrowCursor)  # type: ignore

        if not was_dragging:
            self._handle_click(event.position().x(), event.position().y())
        event.accept()

    def wheelEvent(self, event: QWheelEvent) -> None:
        """Zoom one step per wheel notch direction."""
        delta = event.angleDelta().y()
        if delta > 0:
            self.controller.zoom_in()  # type: ignore
        elif delta < 0:
            self.controller.zoom_out()  # type: ignore
        event.accept()

    def keyPressEvent(self, event: QKeyEvent) -> None:
        """Handle key press events for view control."""
        key = event.key()
        if key in (Qt.Key.Key_Plus, Qt.Key.Key_Equal):
            self.controller.zoom_in()  # type: ignore
        elif key == Qt.Key.Key_Minus:
            self.controller.zoom_out()  # type: ignore
        elif key == Qt.Key.Key_R:
            self.controller.reset_rotation()  # type: ignore
        elif key == Qt.Key.Key_Escape:
            self.dismiss_error()  # type: ignore
        elif key in (Qt.Key.Key_Left, Qt.Key.Key_Right, Qt.Key.Key_Up, Qt.Key.Key_Down):
            self._pan_by_key(key)
        else:
            super().keyPressEvent(event)  # type: ignore
            return
        event.accept()

    def _pan_by_key(self, key: Qt.Key) -> None:
        dx = dy = 0.0
        match key:
            case Qt.Key.Key_Left:
                dx = -KEY_PAN_PIXELS
            case Qt.Key.Key_Right:
                dx = KEY_PAN_PIXELS
            case Qt.Key.Key_Up:
                dy = -KEY_PAN_PIXELS
            case Qt.Key.Key_Down:
                dy = KEY_PAN_PIXELS

        width, height = self.viewport_size()  # type: ignore
        target = screen_to_geo(width / 2 + dx, height / 2 + dy, self.camera, (width, height))  # type: ignore
        self.controller.jump_to(target)  # type: ignore

    def _handle_click(self, x: float, y: float) -> None:
        """Dispatch a click to the banner, a marker or a route."""
        if self._error_message and self._banner_rect().contains(QPointF(x, y)):  # type: ignore
            self.dismiss_error()  # type: ignore
            return

        camera = self.camera  # type: ignore
        viewport = self.viewport_size()  # type: ignore

        # Markers are drawn above routes, so they are tested first
        for marker in reversed(self.markers):  # type: ignore
            sx, sy = geo_to_screen(marker.position, camera, viewport)
            radius = max(MIN_MARKER_HIT_RADIUS, marker.config.core_radius * 2)
            if math.hypot(x - sx, y - sy) <= radius:
                self.logger.debug(f"Marker tapped at {marker.position}")  # type: ignore
                if marker.on_tap is not None:
                    marker.on_tap(marker)
                self.point_tapped.emit(marker.position)  # type: ignore
                return

        point = screen_to_geo(x, y, camera, viewport)
        route = route_at(self.routes, point, km_per_pixel(camera) * ROUTE_HIT_PIXELS)  # type: ignore
        if route is not None:
            self.logger.debug(f"Route tapped: {route.id or route.label}")  # type: ignore
            if route.on_tap is not None:
                route.on_tap(route)
            self.route_tapped.emit(route)  # type: ignore
