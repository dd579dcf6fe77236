"""
Settings package for mapcn.

Type-safe configuration on top of Qt's QSettings, grouped by profile.

Usage:
    from mapcn.settings import AppSettings

    settings = AppSettings()
    result = settings.validate()
"""

from .core import AppSettings, open_settings_store
from .logging import LoggingSettings
from .map import MapSettings
from .types import ConfigError, ConfigVersion, ValidationResult

__all__ = [
    "AppSettings",
    "open_settings_store",
    "ConfigVersion",
    "ConfigError",
    "ValidationResult",
    "MapSettings",
    "LoggingSettings",
]
