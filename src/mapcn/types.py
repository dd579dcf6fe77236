"""
Shared type definitions and exceptions for mapcn.
"""

from enum import Enum


class MapcnError(Exception):
    """Base class for errors raised by mapcn helpers."""
    pass


class RouteFormatError(MapcnError):
    """Raised when serialized route data cannot be parsed."""
    pass


class Unset(Enum):
    """Marker for "argument not given" in ``copy_with`` builders.

    ``None`` is a real value for optional fields (it clears them), so
    builders need a separate way to say "keep the current value".
    """
    UNSET = "unset"

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET = Unset.UNSET
