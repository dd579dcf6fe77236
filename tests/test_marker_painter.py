"""Tests for procedural marker painters."""

import math

import pytest

from mapcn.markers.config import MapcnMarker, MarkerConfig, MarkerStyle, MARKER_PRESETS
from mapcn.markers.painter import (
    LoadingPainter,
    MarkerPainter,
    breathe_commands,
    clamp_phase,
    marker_extent,
    pulse_commands,
    radar_commands,
    ring_commands,
    static_commands,
    style_painter,
)
from mapcn.rendering.color import Color
from mapcn.rendering.commands import ArcCommand, CircleCommand, PaintStyle
from mapcn.geo.models import GeoPoint

ACCENT = Color(0xFF00E676)


class TestMarkerConfig:
    """Test marker configuration rules."""

    def test_invalid_values_are_corrected(self) -> None:
        """Out-of-range values are clamped instead of rejected."""
        config = MarkerConfig(core_radius=-1, pulse_radius=0, glow_intensity=3, border_width=-2)
        assert config.core_radius == 1.0
        assert config.pulse_radius == 1.0
        assert config.glow_intensity == 1.0
        assert config.border_width == 0.0

    def test_copy_with_replaces_given_fields(self) -> None:
        config = MarkerConfig().copy_with(style=MarkerStyle.RADAR, core_radius=8)
        assert config.style == MarkerStyle.RADAR
        assert config.core_radius == 8
        assert config.pulse_radius == MarkerConfig().pulse_radius

    def test_presets(self) -> None:
        """Presets use the styles they are named for."""
        assert MarkerConfig.MINIMAL.style == MarkerStyle.STATIC
        assert not MarkerConfig.MINIMAL.show_shadow
        assert MarkerConfig.PROMINENT.style == MarkerStyle.RADAR
        assert MarkerConfig.ELEGANT.style == MarkerStyle.RING
        assert set(MARKER_PRESETS) == {"default", "minimal", "prominent", "elegant"}

    def test_marker_equality_ignores_callback(self) -> None:
        """Tap handlers do not take part in equality."""
        a = MapcnMarker(GeoPoint(1, 2), on_tap=lambda m: None)
        b = MapcnMarker(GeoPoint(1, 2))
        assert a == b


class TestStylePainters:
    """Test each marker style on its own."""

    def test_pulse_halo_expands_and_fades(self) -> None:
        """The halo starts at the core and is invisible at the end of a cycle."""
        config = MarkerConfig()
        start = pulse_commands(ACCENT, 0.0, config)
        end = pulse_commands(ACCENT, 1.0, config)

        assert len(start) == 4
        assert start[0].radius == config.core_radius
        assert end[0].radius == config.core_radius + config.pulse_radius
        assert end[0].color.alpha == 0

    def test_static_ignores_phase(self) -> None:
        config = MarkerConfig(style=MarkerStyle.STATIC)
        assert static_commands(ACCENT, 0.1, config) == static_commands(ACCENT, 0.9, config)
        assert len(static_commands(ACCENT, 0.0, config)) == 3

    def test_radar_sweep_follows_phase(self) -> None:
        """The arc is 60 degrees wide, centered on the phase angle."""
        config = MarkerConfig.PROMINENT
        commands = radar_commands(ACCENT, 0.25, config)

        arc = commands[0]
        assert isinstance(arc, ArcCommand)
        assert arc.sweep_angle == pytest.approx(math.pi / 3)
        assert arc.start_angle == pytest.approx(0.25 * 2 * math.pi - math.pi / 6)
        rings = [c for c in commands[1:4] if isinstance(c, CircleCommand)]
        assert all(ring.style == PaintStyle.STROKE for ring in rings)
        assert len(commands) == 5

    def test_ring_second_ring_is_half_a_cycle_ahead(self) -> None:
        config = MarkerConfig.ELEGANT
        commands = ring_commands(ACCENT, 0.0, config)
        assert len(commands) == 4
        assert commands[0].radius == config.core_radius
        assert commands[1].radius == pytest.approx(config.core_radius + config.pulse_radius * 0.5)

    def test_breathe_grows_and_shrinks(self) -> None:
        """The core is largest at a quarter cycle and smallest at three quarters."""
        config = MarkerConfig(style=MarkerStyle.BREATHE)
        big = breathe_commands(ACCENT, 0.25, config)[1].radius
        small = breathe_commands(ACCENT, 0.75, config)[1].radius
        assert big == pytest.approx(config.core_radius * 1.4)
        assert small == pytest.approx(config.core_radius)

    def test_every_style_has_a_painter(self) -> None:
        for style in MarkerStyle:
            assert style_painter(style)(ACCENT, 0.5, MarkerConfig(style=style))


class TestMarkerPainter:
    """Test the frame painter."""

    def test_should_repaint_compares_phase(self) -> None:
        """Equal frames are skipped, any phase change repaints."""
        first = MarkerPainter(ACCENT, 0.3)
        assert not MarkerPainter(ACCENT, 0.3).should_repaint(first)
        assert MarkerPainter(ACCENT, 0.3001).should_repaint(first)
        assert first.should_repaint(None)

    def test_should_repaint_on_color_or_config(self) -> None:
        first = MarkerPainter(ACCENT, 0.3)
        assert MarkerPainter(Color(0xFFFF0000), 0.3).should_repaint(first)
        assert MarkerPainter(ACCENT, 0.3, MarkerConfig.MINIMAL).should_repaint(first)

    def test_phase_is_clamped(self) -> None:
        """Phases outside [0, 1] draw like the nearest bound."""
        assert MarkerPainter(ACCENT, 1.5).commands() == MarkerPainter(ACCENT, 1.0).commands()
        assert MarkerPainter(ACCENT, -2.0).commands() == MarkerPainter(ACCENT, 0.0).commands()
        assert clamp_phase(float("nan")) == 0.0

    def test_shadow_drawn_first(self) -> None:
        with_shadow = MarkerPainter(ACCENT, 0.5, MarkerConfig(show_shadow=True)).commands()
        without = MarkerPainter(ACCENT, 0.5, MarkerConfig(show_shadow=False)).commands()
        assert len(with_shadow) == len(without) + 1
        assert with_shadow[0].color.red == 0
        assert with_shadow[1:] == without

    def test_commands_follow_center(self) -> None:
        commands = MarkerPainter(ACCENT, 0.5, MarkerConfig(show_shadow=False)).commands((10.0, 20.0))
        assert commands[0].center == (10.0, 20.0)

    def test_marker_extent_bounds(self) -> None:
        assert marker_extent(MarkerConfig(pulse_radius=10)) == 60.0
        assert marker_extent(MarkerConfig(pulse_radius=50)) == 70.0
        assert marker_extent(MarkerConfig(pulse_radius=500)) == 120.0


class TestLoadingPainter:
    """Test the loading spinner."""

    def test_three_quarter_arc(self) -> None:
        (arc,) = LoadingPainter(0.5).commands()
        assert arc.sweep_angle == pytest.approx(1.5 * math.pi)
        assert arc.start_angle == pytest.approx(math.pi)
        assert arc.round_cap

    def test_repaints_on_phase_change(self) -> None:
        assert LoadingPainter(0.1).should_repaint(LoadingPainter(0.2))
        assert not LoadingPainter(0.1).should_repaint(LoadingPainter(0.1))
