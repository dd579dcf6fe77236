"""Load and save routes as JSON.

File layout::

    {
      "routes": [
        {
          "id": "commute",
          "label": "Home to office",
          "preset": "navigation",
          "points": [[52.52, 13.40], [52.50, 13.45]],
          "config": {"color": "#FF4285F4", "show_arrows": true},
          "metadata": {"mode": "car"}
        }
      ]
    }

A bare list of route objects is accepted as well. ``config`` keys override
the preset; colors are ``#RRGGBB`` or ``#AARRGGBB`` strings.
"""

import logging
from pathlib import Path
from typing import Any, Iterable

import orjson

from ..geo.models import GeoPoint
from ..rendering.color import Color
from ..types import RouteFormatError
from .models import MapcnRoute, RouteConfig, RouteStyle, ROUTE_PRESETS

logger = logging.getLogger(__name__)

_COLOR_FIELDS = ("color", "start_color", "end_color", "border_color")
_FLOAT_FIELDS = (
    "width",
    "arrow_spacing",
    "glow_intensity",
    "border_width",
    "animation_progress",
)
_BOOL_FIELDS = ("show_arrows", "show_endpoints", "show_glow", "interactive")


def _parse_point(raw: Any) -> GeoPoint:
    if isinstance(raw, dict):
        return GeoPoint(float(raw["latitude"]), float(raw["longitude"]))
    latitude, longitude = raw
    return GeoPoint(float(latitude), float(longitude))


def config_to_dict(config: RouteConfig) -> dict[str, Any]:
    """JSON-ready dict with every config field."""
    data: dict[str, Any] = {}
    for name in _COLOR_FIELDS:
        color = getattr(config, name)
        data[name] = color.to_hex() if color is not None else None
    for name in _FLOAT_FIELDS + _BOOL_FIELDS:
        data[name] = getattr(config, name)
    data["style"] = config.style.value
    data["dash_pattern"] = list(config.dash_pattern) if config.dash_pattern else None
    return data


def config_from_dict(data: dict[str, Any], base: RouteConfig | None = None) -> RouteConfig:
    """Apply the keys of ``data`` on top of ``base``.

    Raises:
        RouteFormatError: If ``data`` is not an object or a value cannot be parsed
    """
    if not isinstance(data, dict):
        raise RouteFormatError(f"Route config must be an object, got {type(data).__name__}")

    changes: dict[str, Any] = {}
    try:
        for name in _COLOR_FIELDS:
            if name in data:
                value = data[name]
                if value is not None and not isinstance(value, str):
                    raise RouteFormatError(
                        f"Invalid route config: {name} must be a hex string, got {value!r}"
                    )
                changes[name] = Color.from_hex(value) if value is not None else None
        for name in _FLOAT_FIELDS:
            if name in data:
                value = data[name]
                changes[name] = float(value) if value is not None else None
        for name in _BOOL_FIELDS:
            if name in data:
                if not isinstance(data[name], bool):
                    raise RouteFormatError(
                        f"Invalid route config: {name} must be true or false, got {data[name]!r}"
                    )
                changes[name] = data[name]
        if "style" in data:
            changes["style"] = RouteStyle(data["style"])
        if "dash_pattern" in data:
            pattern = data["dash_pattern"]
            changes["dash_pattern"] = (
                tuple(float(v) for v in pattern) if pattern is not None else None
            )
    except (TypeError, ValueError) as e:
        raise RouteFormatError(f"Invalid route config: {e}") from e

    unknown = set(data) - set(changes)
    if unknown:
        logger.warning(f"Ignoring unknown route config keys: {sorted(unknown)}")

    return (base or RouteConfig()).copy_with(**changes)


def route_to_dict(route: MapcnRoute) -> dict[str, Any]:
    """Serialize a route; ``on_tap`` is not persisted."""
    data: dict[str, Any] = {
        "points": [[p.latitude, p.longitude] for p in route.points],
        "config": config_to_dict(route.config),
    }
    if route.id is not None:
        data["id"] = route.id
    if route.label is not None:
        data["label"] = route.label
    if route.metadata:
        data["metadata"] = route.metadata
    return data


def route_from_dict(data: dict[str, Any]) -> MapcnRoute:
    """Build a route from its serialized form.

    Args:
        data: Route object as found in a routes file

    Returns:
        Parsed route

    Raises:
        RouteFormatError: If required keys are missing or malformed
    """
    if not isinstance(data, dict):
        raise RouteFormatError(f"Route entry must be an object, got {type(data).__name__}")

    preset_name = data.get("preset", "default")
    if not isinstance(preset_name, str) or preset_name not in ROUTE_PRESETS:
        raise RouteFormatError(f"Unknown route preset: {preset_name}")

    try:
        points = tuple(_parse_point(raw) for raw in data["points"])
    except KeyError as e:
        raise RouteFormatError(f"Route is missing {e}") from e
    except (TypeError, ValueError) as e:
        raise RouteFormatError(f"Invalid route point: {e}") from e

    config = config_from_dict(data.get("config") or {}, ROUTE_PRESETS[preset_name])
    return MapcnRoute(
        points=points,
        config=config,
        id=data.get("id"),
        label=data.get("label"),
        metadata=data.get("metadata"),
    )


def load_routes(path: Path) -> list[MapcnRoute]:
    """Read routes from a JSON file.

    Raises:
        RouteFormatError: If the file cannot be read or parsed
    """
    try:
        with path.open("rb") as f:  # orjson works with bytes
            data = orjson.loads(f.read())
    except OSError as e:
        raise RouteFormatError(f"Cannot read routes file {path}: {e}") from e
    except orjson.JSONDecodeError as e:
        raise RouteFormatError(f"Invalid JSON in {path}: {e}") from e

    entries = data.get("routes", []) if isinstance(data, dict) else data
    if not isinstance(entries, list):
        raise RouteFormatError(f"Expected a list of routes in {path}")

    routes = [route_from_dict(entry) for entry in entries]
    logger.info(f"Loaded {len(routes)} routes from {path}")
    return routes


def save_routes(path: Path, routes: Iterable[MapcnRoute]) -> None:
    """Write routes to a JSON file, creating parent directories."""
    payload = {"routes": [route_to_dict(route) for route in routes]}
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(orjson.dumps(payload, option=orjson.OPT_INDENT_2))
    logger.debug(f"Saved {len(payload['routes'])} routes to {path}")
