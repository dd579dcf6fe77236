"""
Map display settings for mapcn.
"""

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Optional, cast

from ..rendering.color import Color
from ..themes import MapStyle

if TYPE_CHECKING:
    from PySide6.QtCore import QSettings

logger = logging.getLogger(__name__)

DEFAULT_ACCENT_COLOR = "#00E676"


class MapSettings:
    """Manages map appearance and behaviour settings."""

    def __init__(self, settings: "QSettings"):
        self.settings = settings

    def _get_str(self, key: str, default: str = "") -> str:
        """Type-safe string retrieval from settings."""
        value = self.settings.value(key, default)
        return str(value) if value is not None else default

    def _get_bool(self, key: str, default: bool = False) -> bool:
        """Type-safe boolean retrieval from settings."""
        value = self.settings.value(key, default)
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            return value.lower() in ("true", "1", "yes")
        return bool(value) if value is not None else default

    def _get_float(self, key: str, default: float = 0.0) -> float:
        """Type-safe float retrieval from settings."""
        value = self.settings.value(key, default)
        try:
            if value is None:
                return default
            return float(cast(str | float, value))
        except (ValueError, TypeError):
            return default

    def _get_int(self, key: str, default: int = 0) -> int:
        """Type-safe integer retrieval from settings."""
        value = self.settings.value(key, default)
        try:
            if value is None:
                return default
            return int(cast(str | int, value))
        except (ValueError, TypeError):
            return default

    def _set(self, key: str, value: object) -> None:
        self.settings.setValue(key, value)
        self.settings.sync()

    # === THEME ===

    @property
    def style_name(self) -> str:
        """Raw theme name as stored."""
        return self._get_str("map/style", MapStyle.DARK.value)

    @property
    def style(self) -> MapStyle:
        """Map theme; unknown names fall back to dark."""
        name = self.style_name
        try:
            return MapStyle(name)
        except ValueError:
            logger.warning(f"Unknown map style '{name}', using dark")
            return MapStyle.DARK

    @style.setter
    def style(self, value: MapStyle) -> None:
        self._set("map/style", value.value)

    @property
    def accent_color_hex(self) -> str:
        return self._get_str("map/accent_color", DEFAULT_ACCENT_COLOR)

    @property
    def accent_color(self) -> Color:
        """Marker and highlight color."""
        try:
            return Color.from_hex(self.accent_color_hex)
        except ValueError:
            logger.warning(f"Invalid accent color '{self.accent_color_hex}', using default")
            return Color.from_hex(DEFAULT_ACCENT_COLOR)

    @accent_color.setter
    def accent_color(self, value: Color) -> None:
        self._set("map/accent_color", value.to_hex())

    # === ZOOM ===

    @property
    def min_zoom(self) -> float:
        return self._get_float("map/min_zoom", 2.0)

    @min_zoom.setter
    def min_zoom(self, value: float) -> None:
        self._set("map/min_zoom", value)

    @property
    def max_zoom(self) -> float:
        return self._get_float("map/max_zoom", 18.0)

    @max_zoom.setter
    def max_zoom(self, value: float) -> None:
        self._set("map/max_zoom", value)

    @property
    def initial_zoom(self) -> float:
        return self._get_float("map/initial_zoom", 3.0)

    @initial_zoom.setter
    def initial_zoom(self, value: float) -> None:
        self._set("map/initial_zoom", value)

    # === ANIMATION ===

    @property
    def pulse_duration_ms(self) -> int:
        """Length of one marker pulse cycle in milliseconds (min 100)."""
        return max(100, self._get_int("map/pulse_duration_ms", 2000))

    @pulse_duration_ms.setter
    def pulse_duration_ms(self, value: int) -> None:
        self._set("map/pulse_duration_ms", max(100, value))

    @property
    def frame_interval_ms(self) -> int:
        """Get frame timer interval in milliseconds (1-1000 ms)."""
        value = self._get_int("map/frame_interval_ms", 16)
        # Validate range
        return max(1, min(1000, value))

    @frame_interval_ms.setter
    def frame_interval_ms(self, value: int) -> None:
        """Set frame timer interval in milliseconds (1-1000 ms)."""
        validated = max(1, min(1000, value))
        self._set("map/frame_interval_ms", validated)

    # === TILES AND OVERLAYS ===

    @property
    def tile_directory(self) -> Optional[Path]:
        """Local ``{z}/{x}/{y}.png`` tile tree, None for placeholder tiles."""
        value = self._get_str("map/tile_directory", "")
        return Path(value) if value else None

    @tile_directory.setter
    def tile_directory(self, value: Optional[Path]) -> None:
        self._set("map/tile_directory", str(value) if value else "")

    @property
    def show_attribution(self) -> bool:
        return self._get_bool("map/show_attribution", True)

    @show_attribution.setter
    def show_attribution(self, value: bool) -> None:
        self._set("map/show_attribution", value)

    @property
    def show_loading_indicator(self) -> bool:
        return self._get_bool("map/show_loading_indicator", True)

    @show_loading_indicator.setter
    def show_loading_indicator(self, value: bool) -> None:
        self._set("map/show_loading_indicator", value)
