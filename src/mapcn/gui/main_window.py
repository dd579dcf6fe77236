"""
Main application window for the mapcn demo.
"""

import logging
from pathlib import Path
from typing import Optional

from PySide6.QtCore import QTimer
from PySide6.QtGui import QCloseEvent
from PySide6.QtWidgets import QComboBox, QLabel, QMainWindow, QPushButton, QToolBar, QWidget

from ..camera.controller import Tour
from ..geo.models import CameraState, GeoPoint
from ..geo.route_utils import format_duration
from ..markers.config import MapcnMarker, MarkerConfig, MarkerStyle
from ..routes.models import MapcnRoute, RouteConfig
from ..settings import AppSettings
from ..themes import MapStyle, recommended_accent_color
from .map_view import MapView

DEMO_CITIES: list[tuple[str, GeoPoint]] = [
    ("London", GeoPoint(51.5074, -0.1278)),
    ("Paris", GeoPoint(48.8566, 2.3522)),
    ("Berlin", GeoPoint(52.5200, 13.4050)),
    ("Rome", GeoPoint(41.9028, 12.4964)),
    ("Madrid", GeoPoint(40.4168, -3.7038)),
]


def demo_markers() -> list[MapcnMarker]:
    """One marker per demo city, cycling through the marker presets."""
    configs = [
        MarkerConfig(),
        MarkerConfig.PROMINENT,
        MarkerConfig.ELEGANT,
        MarkerConfig(style=MarkerStyle.BREATHE),
        MarkerConfig.MINIMAL,
    ]
    return [
        MapcnMarker(position=point, config=configs[index % len(configs)], label=name, id=name.lower())
        for index, (name, point) in enumerate(DEMO_CITIES)
    ]


def demo_routes() -> list[MapcnRoute]:
    london, paris, berlin, rome, madrid = (point for _, point in DEMO_CITIES)
    return [
        MapcnRoute(
            points=(london, paris, berlin),
            config=RouteConfig.NAVIGATION,
            id="london-berlin",
            label="London - Berlin",
        ),
        MapcnRoute(
            points=(paris, madrid),
            config=RouteConfig.WALKING,
            id="paris-madrid",
            label="Paris - Madrid",
        ),
        MapcnRoute(
            points=(berlin, rome),
            config=RouteConfig.LIVE_TRACKING.copy_with(animation_progress=0.6),
            id="berlin-rome",
            label="Berlin - Rome",
        ),
    ]


class MainWindow(QMainWindow):
    """Demo window: a map, a theme switcher and camera shortcuts."""

    def __init__(
        self,
        settings: AppSettings,
        routes_file: Optional[Path] = None,
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)

        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.setObjectName("main_window")
        self.settings = settings
        self._tour: Optional[Tour] = None

        self.map_view = MapView(settings, parent=self)
        self.setCentralWidget(self.map_view)

        self.setup_toolbar()
        self.setup_status_bar()
        self.setup_demo_content(routes_file)

        self.map_view.camera_moved.connect(self._on_camera_moved)
        self.map_view.point_tapped.connect(self._on_point_tapped)
        self.map_view.route_tapped.connect(self._on_route_tapped)

        self.resize(1200, 800)
        self.setWindowTitle("mapcn")
        self.logger.info("Main window initialized")

    def setup_toolbar(self) -> None:
        toolbar = QToolBar("Map", self)
        toolbar.setMovable(False)
        self.addToolBar(toolbar)

        toolbar.addWidget(QLabel("Theme:"))
        self.style_combo = QComboBox(toolbar)
        for style in MapStyle:
            if style != MapStyle.CUSTOM:
                self.style_combo.addItem(style.value.replace("_", " ").title(), style)
        index = self.style_combo.findData(self.map_view.map_style)
        if index >= 0:
            self.style_combo.setCurrentIndex(index)
        self.style_combo.currentIndexChanged.connect(self._on_style_changed)
        toolbar.addWidget(self.style_combo)

        toolbar.addSeparator()

        self.fit_button = QPushButton("Fit all", toolbar)
        self.fit_button.clicked.connect(self.fit_all)
        toolbar.addWidget(self.fit_button)

        self.tour_button = QPushButton("Start tour", toolbar)
        self.tour_button.clicked.connect(self.toggle_tour)
        toolbar.addWidget(self.tour_button)

        self.rotate_button = QPushButton("Rotate 45°", toolbar)
        self.rotate_button.clicked.connect(self.rotate_map)
        toolbar.addWidget(self.rotate_button)

    def setup_status_bar(self) -> None:
        """Setup the status bar."""
        self.status_bar = self.statusBar()
        self.status_bar.showMessage("Ready", 5000)

        QTimer.singleShot(100, self.show_config_info)  # type: ignore

    def show_config_info(self) -> None:
        """Show configuration information in status bar."""
        self.status_bar.showMessage(
            f"Settings: {self.settings.get_settings_file_path()}", 10000
        )

    def setup_demo_content(self, routes_file: Optional[Path]) -> None:
        """Place demo markers and routes; queued camera calls run once the map is shown."""
        self.map_view.set_markers(demo_markers())

        if routes_file is None or not self.map_view.load_routes_file(routes_file):
            self.map_view.set_routes(demo_routes())

        self.fit_all()

    # === ACTIONS ===

    def fit_all(self) -> None:
        self.map_view.controller.fit_all_points(self.map_view.all_points())

    def rotate_map(self) -> None:
        rotation = (self.map_view.camera.rotation + 45.0) % 360.0
        self.map_view.controller.rotate_to(rotation)

    def toggle_tour(self) -> None:
        if self._tour is not None and not self._tour.is_done:
            self._tour.cancel()
            return

        stops = [point for _, point in DEMO_CITIES]
        self._tour = self.map_view.controller.start_tour(
            stops, on_stop_reached=self._on_stop_reached
        )
        self._tour.add_done_callback(self._on_tour_done)
        self.tour_button.setText("Stop tour")

    def _on_stop_reached(self, index: int, stop: GeoPoint) -> None:
        name = DEMO_CITIES[index][0]
        self.status_bar.showMessage(f"Tour stop {index + 1}: {name}", 3000)

    def _on_tour_done(self, tour: Tour) -> None:
        self.tour_button.setText("Start tour")
        state = "cancelled" if tour.cancelled else "finished"
        self.status_bar.showMessage(f"Tour {state} after {tour.stops_reached} stops", 5000)

    def _on_style_changed(self, index: int) -> None:
        style = self.style_combo.itemData(index)
        if not isinstance(style, MapStyle):
            return
        self.map_view.set_style(style)
        self.map_view.set_accent_color(recommended_accent_color(style))
        self.settings.map.style = style

    # === MAP SIGNALS ===

    def _on_camera_moved(self, camera: CameraState) -> None:
        self.status_bar.showMessage(
            f"{camera.center}  zoom {camera.zoom:.2f}  rotation {camera.rotation:.0f}°"
        )

    def _on_point_tapped(self, point: GeoPoint) -> None:
        self.logger.info(f"Point tapped: {point}")
        self.map_view.controller.fly_to(point, zoom=8.0)

    def _on_route_tapped(self, route: MapcnRoute) -> None:
        self.logger.info(f"Route tapped: {route.label}")
        self.status_bar.showMessage(
            f"{route.label}: {route.distance_formatted}, driving {format_duration(route.driving_time)}", 5000
        )
        self.map_view.controller.fit_all_points(route.points)

    def closeEvent(self, event: QCloseEvent) -> None:
        """Stop tours and animations before the window goes away."""
        self.map_view.dispose()
        super().closeEvent(event)
