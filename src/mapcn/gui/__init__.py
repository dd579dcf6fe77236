"""Qt widgets for mapcn: the map surface and the demo window."""

from .map_view import MapView
from .main_window import MainWindow

__all__ = ["MapView", "MainWindow"]
