"""Tests for reading and writing route files."""

import orjson
import pytest

from mapcn.geo.models import GeoPoint
from mapcn.rendering.color import Color
from mapcn.routes.io import load_routes, route_from_dict, save_routes
from mapcn.routes.models import MapcnRoute, RouteConfig, RouteStyle
from mapcn.types import MapcnError, RouteFormatError


class TestRouteFiles:
    """Test the routes JSON file format."""

    def test_save_and_load(self, tmp_path) -> None:
        """Saved routes load back with points, config and metadata."""
        route = MapcnRoute(
            points=(GeoPoint(52.52, 13.40), GeoPoint(52.50, 13.45)),
            config=RouteConfig.NAVIGATION.copy_with(animation_progress=0.25),
            id="commute",
            label="Home to office",
            metadata={"mode": "car"},
        )
        path = tmp_path / "nested" / "routes.json"
        save_routes(path, [route])

        (loaded,) = load_routes(path)
        assert loaded == route
        assert loaded.metadata == {"mode": "car"}
        assert loaded.config.border_color == RouteConfig.NAVIGATION.border_color

    def test_preset_with_overrides(self, tmp_path) -> None:
        path = tmp_path / "routes.json"
        path.write_bytes(
            orjson.dumps(
                {
                    "routes": [
                        {
                            "preset": "walking",
                            "points": [{"latitude": 1, "longitude": 2}, [3, 4]],
                            "config": {"color": "#FF0000", "width": 6},
                        }
                    ]
                }
            )
        )
        (route,) = load_routes(path)
        assert route.points == (GeoPoint(1.0, 2.0), GeoPoint(3.0, 4.0))
        assert route.config.style == RouteStyle.DOTTED
        assert route.config.color == Color(0xFFFF0000)
        assert route.config.width == 6.0

    def test_bare_list(self, tmp_path) -> None:
        path = tmp_path / "routes.json"
        path.write_bytes(orjson.dumps([{"points": [[0, 0], [1, 1]]}]))
        assert len(load_routes(path)) == 1

    def test_invalid_json(self, tmp_path) -> None:
        path = tmp_path / "routes.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(RouteFormatError):
            load_routes(path)

    def test_missing_file(self, tmp_path) -> None:
        with pytest.raises(MapcnError):
            load_routes(tmp_path / "absent.json")

    def test_routes_must_be_a_list(self, tmp_path) -> None:
        path = tmp_path / "routes.json"
        path.write_bytes(orjson.dumps({"routes": {"points": []}}))
        with pytest.raises(RouteFormatError):
            load_routes(path)


class TestRouteFromDict:
    """Test parsing single route entries."""

    def test_missing_points(self) -> None:
        with pytest.raises(RouteFormatError):
            route_from_dict({"id": "x"})

    def test_unknown_preset(self) -> None:
        with pytest.raises(RouteFormatError):
            route_from_dict({"preset": "teleport", "points": []})

    def test_bad_color(self) -> None:
        with pytest.raises(RouteFormatError):
            route_from_dict({"points": [[0, 0]], "config": {"color": "blue"}})

    def test_bad_point(self) -> None:
        with pytest.raises(RouteFormatError):
            route_from_dict({"points": [[0, 0, 0]]})

    @pytest.mark.parametrize(
        "entry",
        [
            {"points": [[0, 0]], "config": {"color": 123}},
            {"points": [[0, 0]], "config": {"end_color": ["#FFFFFF"]}},
            {"points": [[0, 0]], "config": "navigation"},
            {"points": [[0, 0]], "config": [["color", "#FFFFFF"]]},
            {"points": [[0, 0]], "config": {"show_arrows": "false"}},
            {"points": [[0, 0]], "preset": ["navigation"]},
            {"points": 5},
        ],
    )
    def test_wrong_value_types(self, entry) -> None:
        """Values of the wrong JSON type are reported as format errors."""
        with pytest.raises(RouteFormatError):
            route_from_dict(entry)

    def test_wrong_color_type_in_file(self, tmp_path) -> None:
        """A non-string color in a file fails with a format error."""
        path = tmp_path / "routes.json"
        path.write_bytes(orjson.dumps({"routes": [{"points": [[0, 0]], "config": {"color": 123}}]}))
        with pytest.raises(RouteFormatError):
            load_routes(path)

    def test_color_from_non_string(self) -> None:
        with pytest.raises(ValueError):
            Color.from_hex(123)  # type: ignore[arg-type]

    def test_null_clears_optional_field(self) -> None:
        route = route_from_dict(
            {"preset": "navigation", "points": [[0, 0], [1, 1]], "config": {"border_color": None}}
        )
        assert route.config.border_color is None
