"""Utility helpers for mapcn."""

from .logging_config import CSVFormatter, ColoredFormatter, setup_logging

__all__ = ["setup_logging", "ColoredFormatter", "CSVFormatter"]
