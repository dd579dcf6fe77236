"""
Core settings management for mapcn.
"""

import logging
from pathlib import Path
from typing import Optional

from PySide6.QtCore import QSettings

from ..rendering.color import Color
from ..themes import MapStyle
from .logging import LoggingSettings
from .map import MapSettings
from .migration import SettingsMigrator
from .types import ConfigError, ConfigVersion, ValidationResult
from .validation import SettingsValidator

logger = logging.getLogger(__name__)


def open_settings_store() -> QSettings:
    """Open the user-scope INI store shared by all profiles.

    The location follows ``QSettings.setPath`` for ``IniFormat``.
    """
    return QSettings(QSettings.Format.IniFormat, QSettings.Scope.UserScope, "mapcn", "mapcn")


class AppSettings:
    """
    Application configuration backed by QSettings.

    Provides type-safe access to map and logging settings with automatic
    cross-platform storage, versioning and validation.
    """

    def __init__(self, profile: str = "default"):
        """Initialize settings for a profile.

        Args:
            profile: Settings profile name (default: "default")
        """
        self.settings = open_settings_store()
        self.profile = profile

        # Profile is a group: mapcn/mapcn/<profile>/...
        self.settings.beginGroup(profile)

        # Initialize subsystems
        self._migrator = SettingsMigrator(self.settings)
        self._validator = SettingsValidator(self)
        self._map = MapSettings(self.settings)
        self._logging = LoggingSettings(self.settings)

        # Ensure version and migrate if needed
        self._migrator.ensure_version()

        logger.debug(
            f"Settings initialized for profile '{profile}', stored at: {self.settings.fileName()}"
        )

    # === SUBSYSTEM ACCESS ===

    @property
    def map(self) -> MapSettings:
        """Access map settings subsystem."""
        return self._map

    @property
    def logging(self) -> LoggingSettings:
        """Access logging settings subsystem."""
        return self._logging

    # === VERSION AND FIRST RUN ===

    @property
    def is_first_run(self) -> bool:
        """Check if this is the first run of the application."""
        return self._get_bool("app/first_run", True)

    def set_first_run_complete(self) -> None:
        """Mark first run as complete."""
        self.settings.setValue("app/first_run", False)
        self.settings.sync()

    @property
    def version(self) -> str:
        """Get configuration version."""
        return self._get_str("app/version", ConfigVersion.CURRENT.value)

    # === HELPER METHODS ===

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

    # === MAP SETTINGS (DELEGATED) ===

    @property
    def style(self) -> MapStyle:
        return self._map.style

    @style.setter
    def style(self, value: MapStyle) -> None:
        self._map.style = value

    @property
    def accent_color(self) -> Color:
        return self._map.accent_color

    @accent_color.setter
    def accent_color(self, value: Color) -> None:
        self._map.accent_color = value

    @property
    def tile_directory(self) -> Optional[Path]:
        return self._map.tile_directory

    @tile_directory.setter
    def tile_directory(self, value: Optional[Path]) -> None:
        self._map.tile_directory = value

    # === LOGGING SETTINGS (DELEGATED) ===

    @property
    def console_logging(self) -> bool:
        """Check if console logging is enabled."""
        return self._logging.console_logging

    @console_logging.setter
    def console_logging(self, value: bool) -> None:
        self._logging.console_logging = value

    @property
    def console_log_level(self) -> str:
        return self._logging.console_log_level

    @console_log_level.setter
    def console_log_level(self, value: str) -> None:
        self._logging.console_log_level = value

    @property
    def console_use_colors(self) -> bool:
        return self._logging.console_use_colors

    @console_use_colors.setter
    def console_use_colors(self, value: bool) -> None:
        self._logging.console_use_colors = value

    @property
    def file_logging(self) -> bool:
        """Check if file logging is enabled."""
        return self._logging.file_logging

    @file_logging.setter
    def file_logging(self, value: bool) -> None:
        self._logging.file_logging = value

    @property
    def log_file_path(self) -> str:
        """Get log file path (read-only)."""
        return self._logging.log_file_path

    # === VALIDATION ===

    def validate(self) -> ValidationResult:
        """Validate current configuration."""
        return self._validator.validate()

    # === UTILITY METHODS ===

    def get_settings_file_path(self) -> str:
        """Get the file path where settings are stored."""
        return self.settings.fileName()

    def sync(self) -> None:
        """Force synchronization of settings to storage.

        Raises:
            ConfigError: If the settings storage cannot be written or parsed
        """
        self.settings.sync()
        status = self.settings.status()
        if status != QSettings.Status.NoError:
            raise ConfigError(
                f"Cannot write settings to {self.settings.fileName()}: {status.name}"
            )
