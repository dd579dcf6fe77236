"""
Settings validation system for mapcn.
"""

import logging
from typing import List, TYPE_CHECKING

from ..rendering.color import Color
from ..themes import MapStyle
from .types import ValidationResult

if TYPE_CHECKING:
    from .core import AppSettings

logger = logging.getLogger(__name__)


class SettingsValidator:
    """Validates configuration settings."""

    def __init__(self, settings: "AppSettings"):
        self.settings = settings

    def validate(self) -> ValidationResult:
        """Validate current configuration."""
        errors: List[str] = []
        warnings: List[str] = []
        map_settings = self.settings.map

        # Zoom range
        if map_settings.min_zoom > map_settings.max_zoom:
            errors.append(
                f"Minimum zoom {map_settings.min_zoom} is above maximum zoom {map_settings.max_zoom}"
            )
        elif not map_settings.min_zoom <= map_settings.initial_zoom <= map_settings.max_zoom:
            warnings.append(
                f"Initial zoom {map_settings.initial_zoom} is outside "
                f"[{map_settings.min_zoom}, {map_settings.max_zoom}] and will be clamped"
            )

        # Theme name
        valid_styles = {style.value for style in MapStyle}
        if map_settings.style_name not in valid_styles:
            errors.append(f"Unknown map style: {map_settings.style_name}")

        # Accent color
        try:
            Color.from_hex(map_settings.accent_color_hex)
        except ValueError:
            errors.append(f"Invalid accent color: {map_settings.accent_color_hex}")

        # Tile directory
        tile_directory = map_settings.tile_directory
        if tile_directory is not None and not tile_directory.exists():
            warnings.append(f"Tile directory does not exist: {tile_directory}")

        if errors:
            logger.warning(f"Settings validation failed: {errors}")

        return ValidationResult(
            is_valid=len(errors) == 0, errors=errors, warnings=warnings
        )
