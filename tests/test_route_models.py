"""Tests for route configuration and route values."""

from datetime import timedelta

import pytest

from mapcn.geo.models import GeoPoint, ORIGIN
from mapcn.geo.route_utils import point_at_distance_and_bearing
from mapcn.rendering.color import Color
from mapcn.routes.models import (
    DEFAULT_DASH_PATTERN,
    DEFAULT_ROUTE_COLOR,
    MapcnRoute,
    RouteConfig,
    RouteStyle,
    ROUTE_PRESETS,
)

START = GeoPoint(0.0, 0.0)


def route_of_length(km: float) -> MapcnRoute:
    return MapcnRoute(points=(START, point_at_distance_and_bearing(START, km, 90.0)))


class TestRouteConfig:
    """Test route configuration rules."""

    def test_defaults(self) -> None:
        config = RouteConfig()
        assert config.color == DEFAULT_ROUTE_COLOR
        assert config.width == 4.0
        assert config.style == RouteStyle.SOLID
        assert config.show_glow
        assert config.show_endpoints
        assert config.animation_progress is None

    def test_invalid_values_are_corrected(self) -> None:
        """Bad values are replaced with the nearest valid ones."""
        config = RouteConfig(
            width=0,
            arrow_spacing=-5,
            glow_intensity=2.0,
            border_width=-1,
            dash_pattern=(5, 0),
            animation_progress=1.5,
        )
        assert config.width == 1.0
        assert config.arrow_spacing == 1.0
        assert config.glow_intensity == 1.0
        assert config.border_width == 0.0
        assert config.dash_pattern is None
        assert config.animation_progress == 1.0

    def test_nan_progress_shows_everything(self) -> None:
        assert RouteConfig(animation_progress=float("nan")).animation_progress is None

    def test_dash_pattern_stored_as_tuple(self) -> None:
        assert RouteConfig(dash_pattern=[4, 2]).dash_pattern == (4, 2)
        assert RouteConfig().effective_dash_pattern == DEFAULT_DASH_PATTERN

    def test_copy_with_keeps_unset_and_clears_none(self) -> None:
        """UNSET keeps a value, None clears an optional one."""
        config = RouteConfig(border_color=Color(0xFF000000), start_color=Color(0xFFFF0000))
        copy = config.copy_with(border_color=None, width=6.0)
        assert copy.border_color is None
        assert copy.start_color == Color(0xFFFF0000)
        assert copy.width == 6.0
        assert config.border_color == Color(0xFF000000)

    def test_effective_endpoint_colors(self) -> None:
        config = RouteConfig(color=Color(0xFF123456), end_color=Color(0xFFABCDEF))
        assert config.effective_start_color == Color(0xFF123456)
        assert config.effective_end_color == Color(0xFFABCDEF)

    def test_presets(self) -> None:
        """Presets keep their documented look."""
        assert RouteConfig.NAVIGATION.show_arrows
        assert RouteConfig.NAVIGATION.border_color == Color(0xFF1A73E8)
        assert RouteConfig.SUBTLE.style == RouteStyle.DASHED
        assert not RouteConfig.SUBTLE.show_glow
        assert RouteConfig.WALKING.style == RouteStyle.DOTTED
        assert RouteConfig.LIVE_TRACKING.arrow_spacing == 60
        assert set(ROUTE_PRESETS) == {"default", "navigation", "subtle", "walking", "live_tracking"}


class TestMapcnRoute:
    """Test derived route values."""

    def test_points_become_tuple(self) -> None:
        route = MapcnRoute(points=[START, GeoPoint(1, 1)])
        assert isinstance(route.points, tuple)

    def test_distance_units(self) -> None:
        route = route_of_length(10.0)
        assert route.distance_km == pytest.approx(10.0)
        assert route.distance_meters == pytest.approx(10000.0)
        assert route.distance_miles == pytest.approx(6.21371)

    def test_distance_formatted(self) -> None:
        """Units switch at 1 km and decimals disappear at 10 km."""
        assert route_of_length(0.5).distance_formatted == "500 m"
        assert route_of_length(4.0).distance_formatted == "4.0 km"
        assert route_of_length(42.4).distance_formatted == "42 km"

    def test_travel_times(self) -> None:
        """Times use fixed average speeds, rounded to minutes."""
        route = route_of_length(10.0)
        assert route.walking_time == timedelta(minutes=120)
        assert route.cycling_time == timedelta(minutes=40)
        assert route.driving_time == timedelta(minutes=12)

    def test_center_is_centroid(self) -> None:
        route = MapcnRoute(points=(GeoPoint(0, 0), GeoPoint(2, 0), GeoPoint(1, 3)))
        assert route.center == GeoPoint(1.0, 1.0)
        assert MapcnRoute(points=()).center == ORIGIN
        assert MapcnRoute(points=(GeoPoint(5, 6),)).center == GeoPoint(5, 6)

    def test_endpoints_of_empty_route(self) -> None:
        route = MapcnRoute(points=())
        assert route.start_point is None
        assert route.end_point is None
        assert not route.is_renderable
        with pytest.raises(ValueError):
            _ = route.bounds

    def test_simple_route(self) -> None:
        route = MapcnRoute.simple(START, GeoPoint(1, 1), color=Color(0xFFFF0000), width=2.0)
        assert route.points == (START, GeoPoint(1, 1))
        assert route.config.color == Color(0xFFFF0000)
        assert route.config.width == 2.0

    def test_equality_ignores_metadata_and_callback(self) -> None:
        a = MapcnRoute(points=(START,), id="a", metadata={"x": 1}, on_tap=lambda r: None)
        b = MapcnRoute(points=(START,), id="a")
        assert a == b
