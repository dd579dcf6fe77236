"""
Geographic value types used across mapcn.

All models are immutable and compare by value.
"""

from dataclasses import dataclass, replace
from typing import Iterable

from ..types import UNSET, Unset


@dataclass(frozen=True)
class GeoPoint:
    """A latitude/longitude pair in degrees."""
    latitude: float
    longitude: float

    def __iter__(self):
        yield self.latitude
        yield self.longitude

    def __str__(self) -> str:
        return f"({self.latitude:.4f}, {self.longitude:.4f})"


ORIGIN = GeoPoint(0.0, 0.0)


@dataclass(frozen=True)
class LatLngBounds:
    """Axis-aligned bounding box in latitude/longitude space."""
    south: float
    west: float
    north: float
    east: float

    @classmethod
    def from_points(cls, points: Iterable[GeoPoint]) -> "LatLngBounds":
        """Build the smallest box containing all points.

        Args:
            points: Points to enclose

        Returns:
            Bounding box

        Raises:
            ValueError: If no points were given
        """
        points = list(points)
        if not points:
            raise ValueError("Cannot compute bounds of an empty point list")

        lats = [p.latitude for p in points]
        lngs = [p.longitude for p in points]
        return cls(south=min(lats), west=min(lngs), north=max(lats), east=max(lngs))

    @property
    def center(self) -> GeoPoint:
        return GeoPoint((self.south + self.north) / 2, (self.west + self.east) / 2)

    @property
    def north_west(self) -> GeoPoint:
        return GeoPoint(self.north, self.west)

    @property
    def south_east(self) -> GeoPoint:
        return GeoPoint(self.south, self.east)

    @property
    def is_degenerate(self) -> bool:
        """True when the box has no area and no length (a single point)."""
        return self.south == self.north and self.west == self.east

    def contains(self, point: GeoPoint) -> bool:
        return (
            self.south <= point.latitude <= self.north
            and self.west <= point.longitude <= self.east
        )


@dataclass(frozen=True)
class CameraState:
    """Camera position of the render surface.

    Attributes:
        center: Geographic point at the middle of the viewport
        zoom: Fractional web-map zoom level
        rotation: Map rotation in degrees
    """
    center: GeoPoint
    zoom: float
    rotation: float = 0.0

    def with_values(
        self,
        center: GeoPoint | Unset = UNSET,
        zoom: float | Unset = UNSET,
        rotation: float | Unset = UNSET,
    ) -> "CameraState":
        """Return a copy with the given fields replaced."""
        changes: dict[str, object] = {}
        if center is not UNSET:
            changes["center"] = center
        if zoom is not UNSET:
            changes["zoom"] = zoom
        if rotation is not UNSET:
            changes["rotation"] = rotation
        return replace(self, **changes)


@dataclass(frozen=True)
class TileCoord:
    """Slippy-map tile address."""
    z: int
    x: int
    y: int

    def __str__(self) -> str:
        return f"{self.z}/{self.x}/{self.y}"
