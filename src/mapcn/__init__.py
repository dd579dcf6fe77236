"""
mapcn: animated, themed map surface for Qt

Glowing markers, styled routes, color-matrix map themes and animated camera
flights on top of raster map tiles.
"""

__version__ = "0.1.0"
__author__ = "mapcn Contributors"

from .types import MapcnError, RouteFormatError
from .utils.logging_config import setup_logging

# Main data models
from .geo.models import GeoPoint, LatLngBounds, CameraState, TileCoord
from .markers.config import MapcnMarker, MarkerConfig, MarkerStyle
from .routes.models import MapcnRoute, RouteConfig, RouteStyle
from .themes import MapStyle

# Camera control
from .camera.animation import AnimationEngine, Curves, ManualFrameClock, QtFrameClock
from .camera.controller import CameraController, Tour

__all__ = [
    # Errors
    'MapcnError',
    'RouteFormatError',

    # Logging
    'setup_logging',

    # Data models
    'GeoPoint',
    'LatLngBounds',
    'CameraState',
    'TileCoord',
    'MapcnMarker',
    'MarkerConfig',
    'MarkerStyle',
    'MapcnRoute',
    'RouteConfig',
    'RouteStyle',
    'MapStyle',

    # Camera control
    'AnimationEngine',
    'Curves',
    'ManualFrameClock',
    'QtFrameClock',
    'CameraController',
    'Tour',
]
