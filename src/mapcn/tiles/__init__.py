"""Tile providers and the themed tile layer."""

from .providers import TileProvider, DirectoryTileProvider, PlaceholderTileProvider
from .layer import ThemedTileLayer

__all__ = [
    "TileProvider",
    "DirectoryTileProvider",
    "PlaceholderTileProvider",
    "ThemedTileLayer",
]
