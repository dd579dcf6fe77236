"""Tile sources.

A provider turns a tile coordinate into a decoded Pillow image. Fetching and
caching policy belong to the provider; the map only asks for tiles.
"""

import logging
from pathlib import Path
from typing import Optional, Protocol

from PIL import Image, ImageDraw

from ..geo.models import TileCoord
from ..camera.projection import TILE_SIZE, unproject


class TileProvider(Protocol):
    """Supplier of decoded raster tiles."""

    def get_tile(self, coord: TileCoord) -> Optional[Image.Image]:
        """Image for a tile, or None when the tile does not exist.

        May raise on read or decode failures.
        """
        ...


class DirectoryTileProvider:
    """Reads ``{z}/{x}/{y}.png`` tiles from a local directory tree."""

    def __init__(self, root: Path, extension: str = "png"):
        """Initialize the directory provider.

        Args:
            root: Directory holding one subdirectory per zoom level
            extension: Tile file extension
        """
        self.root = root
        self.extension = extension
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def tile_path(self, coord: TileCoord) -> Path:
        return self.root / str(coord.z) / str(coord.x) / f"{coord.y}.{self.extension}"

    def get_tile(self, coord: TileCoord) -> Optional[Image.Image]:
        path = self.tile_path(coord)
        if not path.exists():
            return None

        with Image.open(path) as image:
            image.load()
            return image.convert("RGBA")


class PlaceholderTileProvider:
    """Draws plain graticule tiles, for offline use and demos.

    Land and water are not known here; every tile is a flat background with
    its border, a lat/lng label and the tile address.
    """

    def __init__(
        self,
        background: tuple[int, int, int] = (232, 236, 240),
        line: tuple[int, int, int] = (170, 180, 190),
        text: tuple[int, int, int] = (90, 100, 110),
    ):
        self.background = background
        self.line = line
        self.text = text

    def get_tile(self, coord: TileCoord) -> Optional[Image.Image]:
        tiles_per_side = 2**coord.z
        if not 0 <= coord.y < tiles_per_side:
            return None

        image = Image.new("RGBA", (TILE_SIZE, TILE_SIZE), self.background + (255,))
        draw = ImageDraw.Draw(image)

        # Tile border
        draw.rectangle((0, 0, TILE_SIZE - 1, TILE_SIZE - 1), outline=self.line + (255,))

        # Center cross
        middle = TILE_SIZE // 2
        draw.line((middle - 6, middle, middle + 6, middle), fill=self.line + (255,))
        draw.line((middle, middle - 6, middle, middle + 6), fill=self.line + (255,))

        north_west = unproject(coord.x * TILE_SIZE, coord.y * TILE_SIZE, coord.z)
        draw.text((6, 6), str(coord), fill=self.text + (255,))
        draw.text(
            (6, 20),
            f"{north_west.latitude:.2f}, {north_west.longitude:.2f}",
            fill=self.text + (255,),
        )
        return image
