"""Map view package.

- MapView: the map surface widget (tiles, routes, markers, camera controller)
- MapViewEventHandlers: pointer, wheel and keyboard handling mixin
"""

from .events import MapViewEventHandlers
from .map_view import MapView

__all__ = ["MapView", "MapViewEventHandlers"]
