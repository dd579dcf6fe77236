"""Themed tile layer: provider images, color matrix, QPixmap cache."""

import logging
from typing import Callable, Optional, Sequence

from PIL import Image
from PySide6.QtGui import QPixmap

from ..geo.models import TileCoord
from ..themes import IDENTITY, Matrix, apply_color_matrix
from .providers import TileProvider

TileErrorCallback = Callable[[TileCoord, Exception], None]


class ThemedTileLayer:
    """Turns provider tiles into themed QPixmaps.

    Converted pixmaps are kept in a dictionary keyed by tile coordinate. The
    dictionary is cleared when the theme changes or grows past its limit.
    Tiles that failed to load are remembered and not retried until the next
    ``clear_cache``.
    """

    def __init__(
        self,
        provider: TileProvider,
        matrix: Sequence[float] = IDENTITY,
        on_error: Optional[TileErrorCallback] = None,
        max_cached: int = 512,
    ):
        """Initialize the tile layer.

        Args:
            provider: Source of decoded tiles
            matrix: Color matrix applied to every tile
            on_error: Called with the coordinate and exception of a failed load
            max_cached: Pixmap dictionary size that triggers a full clear
        """
        self.provider = provider
        self.on_error = on_error
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

        self._matrix: Matrix = tuple(matrix)
        self._pixmap_cache: dict[TileCoord, QPixmap] = {}
        self._pixmap_cache_max_size = max_cached
        self._failed: set[TileCoord] = set()
        self.errors: list[str] = []

    @property
    def matrix(self) -> Matrix:
        return self._matrix

    def set_matrix(self, matrix: Sequence[float]) -> None:
        """Switch theme; cached pixmaps are dropped."""
        matrix = tuple(matrix)
        if matrix == self._matrix:
            return
        self._matrix = matrix
        self.clear_cache()

    def set_provider(self, provider: TileProvider) -> None:
        self.provider = provider
        self.clear_cache()

    def clear_cache(self) -> None:
        cache_size = len(self._pixmap_cache)
        self._pixmap_cache.clear()
        self._failed.clear()
        if cache_size > 0:
            self.logger.debug(f"Tile cache cleared ({cache_size} items)")

    @property
    def cached_count(self) -> int:
        return len(self._pixmap_cache)

    def themed_image(self, coord: TileCoord) -> Optional[Image.Image]:
        """Provider tile with the theme applied, without caching.

        Raises:
            Exception: Whatever the provider raises
        """
        image = self.provider.get_tile(coord)
        if image is None:
            return None
        return apply_color_matrix(image, self._matrix)

    def pixmap(self, coord: TileCoord) -> Optional[QPixmap]:
        """Themed pixmap for a tile; None when missing or failed.

        Load failures are reported through ``on_error`` once per tile and
        never raised.
        """
        from PIL.ImageQt import ImageQt

        # Check cache first
        if coord in self._pixmap_cache:
            return self._pixmap_cache[coord]
        if coord in self._failed:
            return None

        try:
            image = self.themed_image(coord)
        except Exception as e:
            self._failed.add(coord)
            message = f"Failed to load tile {coord}: {e}"
            self.errors.append(message)
            self.logger.warning(message)
            if self.on_error is not None:
                self.on_error(coord, e)
            return None

        if image is None:
            return None

        # Keep memory usage bounded
        if len(self._pixmap_cache) >= self._pixmap_cache_max_size:
            self._pixmap_cache.clear()
            self.logger.debug(
                f"Tile cache cleared (was {self._pixmap_cache_max_size} items)"
            )

        pixmap = QPixmap.fromImage(ImageQt(image))
        self._pixmap_cache[coord] = pixmap
        return pixmap
