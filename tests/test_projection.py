"""Tests for Web Mercator projection and tile coverage."""

import pytest

from mapcn.camera.projection import (
    fit_bounds,
    geo_to_screen,
    km_per_pixel,
    project,
    screen_to_geo,
    tile_placements,
    unproject,
    visible_tiles,
)
from mapcn.geo.models import CameraState, GeoPoint, LatLngBounds, TileCoord

VIEWPORT = (800.0, 600.0)


class TestProjection:
    """Test world pixel conversions."""

    def test_origin_is_world_center(self) -> None:
        assert project(GeoPoint(0, 0), 0) == pytest.approx((128.0, 128.0))

    def test_unproject_inverts_project(self) -> None:
        point = GeoPoint(48.8566, 2.3522)
        x, y = project(point, 7.5)
        back = unproject(x, y, 7.5)
        assert back.latitude == pytest.approx(point.latitude)
        assert back.longitude == pytest.approx(point.longitude)

    def test_poles_are_clamped(self) -> None:
        assert project(GeoPoint(90, 0), 0)[1] == pytest.approx(0.0, abs=1e-6)


class TestScreenConversion:
    """Test widget pixel conversions with rotation."""

    def test_center_maps_to_viewport_center(self) -> None:
        camera = CameraState(GeoPoint(52.5, 13.4), 10.0, rotation=33.0)
        assert geo_to_screen(camera.center, camera, VIEWPORT) == pytest.approx((400.0, 300.0))

    def test_north_up_orientation(self) -> None:
        camera = CameraState(GeoPoint(0, 0), 5.0)
        x, y = geo_to_screen(GeoPoint(1, 1), camera, VIEWPORT)
        assert x > 400 and y < 300

    def test_rotation_is_clockwise(self) -> None:
        """After a 90 degree turn, east points down."""
        camera = CameraState(GeoPoint(0, 0), 5.0, rotation=90.0)
        x, y = geo_to_screen(GeoPoint(0, 1), camera, VIEWPORT)
        assert x == pytest.approx(400.0)
        assert y > 300

    def test_screen_to_geo_inverts_geo_to_screen(self) -> None:
        camera = CameraState(GeoPoint(40.0, -3.7), 8.0, rotation=30.0)
        point = GeoPoint(40.2, -3.5)
        x, y = geo_to_screen(point, camera, VIEWPORT)
        back = screen_to_geo(x, y, camera, VIEWPORT)
        assert back.latitude == pytest.approx(point.latitude)
        assert back.longitude == pytest.approx(point.longitude)

    def test_km_per_pixel_halves_per_zoom(self) -> None:
        near = km_per_pixel(CameraState(GeoPoint(0, 0), 11.0))
        far = km_per_pixel(CameraState(GeoPoint(0, 0), 10.0))
        assert far == pytest.approx(near * 2)


class TestTiles:
    """Test tile coverage."""

    def test_single_world_tile(self) -> None:
        camera = CameraState(GeoPoint(0, 0), 0.0)
        assert visible_tiles(camera, (256.0, 256.0)) == [TileCoord(0, 0, 0)]

    def test_tiles_wrap_horizontally(self) -> None:
        camera = CameraState(GeoPoint(0, 179.9), 2.0)
        for coord in visible_tiles(camera, VIEWPORT):
            assert 0 <= coord.x < 4
            assert 0 <= coord.y < 4

    def test_fractional_zoom_scales_tiles(self) -> None:
        placements = tile_placements(CameraState(GeoPoint(0, 0), 3.5), VIEWPORT)
        assert placements
        assert all(p.coord.z == 3 for p in placements)
        assert placements[0].size == pytest.approx(256 * 2**0.5)

    def test_rotation_covers_more_tiles(self) -> None:
        straight = tile_placements(CameraState(GeoPoint(20, 10), 6.0), VIEWPORT)
        rotated = tile_placements(CameraState(GeoPoint(20, 10), 6.0, rotation=45.0), VIEWPORT)
        assert len(rotated) > len(straight)

    def test_empty_viewport(self) -> None:
        assert tile_placements(CameraState(GeoPoint(0, 0), 3.0), (0.0, 600.0)) == []


class TestFitBounds:
    """Test fitting a box into the viewport."""

    def test_box_fits_inside_padding(self) -> None:
        bounds = LatLngBounds(south=48.0, west=2.0, north=53.0, east=14.0)
        center, zoom = fit_bounds(bounds, VIEWPORT, padding=50.0)
        camera = CameraState(center, zoom)

        for corner in (bounds.north_west, bounds.south_east):
            x, y = geo_to_screen(corner, camera, VIEWPORT)
            assert 50.0 - 1e-6 <= x <= 750.0 + 1e-6
            assert 50.0 - 1e-6 <= y <= 550.0 + 1e-6

    def test_max_zoom_caps_small_boxes(self) -> None:
        bounds = LatLngBounds(south=48.0, west=2.0, north=48.0001, east=2.0001)
        _, zoom = fit_bounds(bounds, VIEWPORT, max_zoom=16.0)
        assert zoom == 16.0

    def test_line_shaped_box(self) -> None:
        """A box with no height is fitted by its width."""
        bounds = LatLngBounds(south=10.0, west=0.0, north=10.0, east=5.0)
        center, _ = fit_bounds(bounds, VIEWPORT)
        assert center.longitude == pytest.approx(2.5)

    def test_degenerate_box_raises(self) -> None:
        with pytest.raises(ValueError):
            fit_bounds(LatLngBounds(1.0, 2.0, 1.0, 2.0), VIEWPORT)

    def test_viewport_too_small_raises(self) -> None:
        with pytest.raises(ValueError):
            fit_bounds(LatLngBounds(0.0, 0.0, 1.0, 1.0), (80.0, 80.0), padding=50.0)
