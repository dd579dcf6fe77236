"""Tests for color matrix themes."""

import pytest
from PIL import Image

from mapcn.rendering.color import Color
from mapcn.themes import (
    IDENTITY,
    MAPCN_DARK,
    MATRIX_LENGTH,
    STYLE_MATRICES,
    MapStyle,
    apply_color_matrix,
    background_color,
    combine,
    create_custom_theme,
    invert,
    matrix_for_style,
    recommended_accent_color,
)


class TestMatrices:
    """Test matrix constants and algebra."""

    def test_all_styles_have_valid_matrices(self) -> None:
        for style, matrix in STYLE_MATRICES.items():
            assert len(matrix) == MATRIX_LENGTH, style

    def test_every_style_has_an_accent(self) -> None:
        for style in MapStyle:
            assert isinstance(recommended_accent_color(style), Color)

    def test_double_inversion_is_identity(self) -> None:
        assert invert(invert(IDENTITY)) == pytest.approx(IDENTITY)

    def test_neutral_custom_theme_is_identity(self) -> None:
        assert create_custom_theme() == pytest.approx(IDENTITY)

    def test_custom_theme_grayscale(self) -> None:
        """Zero saturation gives equal rows for R, G and B."""
        matrix = create_custom_theme(saturation=0.0)
        assert matrix[0:5] == pytest.approx(matrix[5:10])
        assert matrix[5:10] == pytest.approx(matrix[10:15])

    def test_custom_theme_brightness_offset(self) -> None:
        matrix = create_custom_theme(brightness=0.5)
        assert matrix[4] == pytest.approx(127.5)

    def test_custom_theme_clamps_arguments(self) -> None:
        assert create_custom_theme(brightness=5.0) == create_custom_theme(brightness=1.0)

    def test_combine_with_identity(self) -> None:
        assert combine(IDENTITY, MAPCN_DARK) == pytest.approx(MAPCN_DARK)
        assert combine(MAPCN_DARK, IDENTITY) == pytest.approx(MAPCN_DARK)

    def test_wrong_lengths_fall_back(self) -> None:
        """Malformed matrices never raise from theme helpers."""
        assert invert((1.0, 2.0)) == MAPCN_DARK
        assert combine(IDENTITY, (1.0,)) == IDENTITY


class TestStyleLookup:
    """Test style to matrix resolution."""

    def test_builtin_styles(self) -> None:
        assert matrix_for_style(MapStyle.DARK) == MAPCN_DARK
        assert matrix_for_style(MapStyle.NORMAL) == IDENTITY

    def test_custom_matrix(self) -> None:
        custom = [0.5] * 20
        assert matrix_for_style(MapStyle.CUSTOM, custom) == tuple(custom)

    def test_bad_custom_matrix_falls_back(self) -> None:
        assert matrix_for_style(MapStyle.CUSTOM, [1.0] * 19) == MAPCN_DARK
        assert matrix_for_style(MapStyle.CUSTOM) == MAPCN_DARK

    def test_background_colors(self) -> None:
        assert background_color(MapStyle.NORMAL) == Color(0xFFFFFFFF)
        assert background_color(MapStyle.SEPIA) == Color(0xFF2D2416)
        assert background_color(MapStyle.SILVER) == Color(0xFF1A1A1A)
        assert background_color(MapStyle.MIDNIGHT) == Color(0xFF000000)


class TestApplyColorMatrix:
    """Test matrix application on Pillow images."""

    def test_identity_returns_rgba_copy(self) -> None:
        image = Image.new("RGB", (2, 2), (10, 20, 30))
        result = apply_color_matrix(image, IDENTITY)
        assert result.mode == "RGBA"
        assert result.getpixel((0, 0)) == (10, 20, 30, 255)

    def test_inversion(self) -> None:
        image = Image.new("RGBA", (2, 2), (10, 20, 30, 200))
        result = apply_color_matrix(image, invert(IDENTITY))
        assert result.getpixel((1, 1)) == (245, 235, 225, 200)

    def test_alpha_row_scales_alpha(self) -> None:
        matrix = list(IDENTITY)
        matrix[18] = 0.5
        image = Image.new("RGBA", (1, 1), (10, 20, 30, 200))
        result = apply_color_matrix(image, matrix)
        assert result.getpixel((0, 0))[3] == 100

    def test_grayscale_theme(self) -> None:
        image = Image.new("RGB", (1, 1), (200, 40, 90))
        red, green, blue, _ = apply_color_matrix(image, create_custom_theme(saturation=0.0)).getpixel((0, 0))
        assert red == green == blue

    def test_rejects_wrong_length(self) -> None:
        with pytest.raises(ValueError):
            apply_color_matrix(Image.new("RGB", (1, 1)), (1.0, 0.0))
