"""Color matrix themes for map tiles.

A theme is a row-major 4x5 affine color transform stored as a 20-element
tuple. Rows produce R, G, B and A; the first four columns weight the source
channels and the fifth is an offset in 0-255 units::

    R' = m[0]*R + m[1]*G + m[2]*B + m[3]*A + m[4]
"""

import logging
from enum import Enum
from typing import Optional, Sequence

from PIL import Image

from .rendering.color import Color

logger = logging.getLogger(__name__)

Matrix = tuple[float, ...]
MATRIX_LENGTH = 20

# Deep midnight blue; night mode, dashboards
MIDNIGHT: Matrix = (
    -1.0, 0.0, 0.0, 0.0, 255.0,
    0.0, -1.0, 0.0, 0.0, 255.0,
    0.0, 0.0, -1.0, 0.0, 255.0,
    0.0, 0.0, 0.0, 1.0, 0.0,
)

# Grayscale
SILVER: Matrix = (
    0.21, 0.72, 0.07, 0.0, 0.0,
    0.21, 0.72, 0.07, 0.0, 0.0,
    0.21, 0.72, 0.07, 0.0, 0.0,
    0.0, 0.0, 0.0, 1.0, 0.0,
)

# Purple on dark
DRACULA: Matrix = (
    0.5, 0.0, 0.0, 0.0, 30.0,
    0.0, 0.3, 0.0, 0.0, 10.0,
    0.0, 0.0, 0.9, 0.0, 40.0,
    0.0, 0.0, 0.0, 1.0, 0.0,
)

# Deep forest green
EMERALD: Matrix = (
    0.1, 0.0, 0.0, 0.0, 5.0,
    0.0, 0.5, 0.0, 0.0, 15.0,
    0.0, 0.0, 0.2, 0.0, 10.0,
    0.0, 0.0, 0.0, 1.0, 0.0,
)

# Black and silver grayscale inversion, the default dark theme
MAPCN_DARK: Matrix = (
    -0.33, -0.33, -0.33, 0.0, 255.0,
    -0.33, -0.33, -0.33, 0.0, 255.0,
    -0.33, -0.33, -0.33, 0.0, 255.0,
    0.0, 0.0, 0.0, 1.0, 0.0,
)

# Warm orange and amber
SUNSET: Matrix = (
    1.2, 0.1, 0.0, 0.0, 20.0,
    0.1, 0.6, 0.0, 0.0, 10.0,
    0.0, 0.0, 0.4, 0.0, 0.0,
    0.0, 0.0, 0.0, 1.0, 0.0,
)

# Deep blue
OCEAN: Matrix = (
    0.2, 0.1, 0.1, 0.0, 0.0,
    0.1, 0.5, 0.2, 0.0, 20.0,
    0.1, 0.2, 1.0, 0.0, 40.0,
    0.0, 0.0, 0.0, 1.0, 0.0,
)

# Vintage paper
SEPIA: Matrix = (
    0.393, 0.769, 0.189, 0.0, 0.0,
    0.349, 0.686, 0.168, 0.0, 0.0,
    0.272, 0.534, 0.131, 0.0, 0.0,
    0.0, 0.0, 0.0, 1.0, 0.0,
)

HIGH_CONTRAST: Matrix = (
    2.0, -0.5, -0.5, 0.0, -128.0,
    -0.5, 2.0, -0.5, 0.0, -128.0,
    -0.5, -0.5, 2.0, 0.0, -128.0,
    0.0, 0.0, 0.0, 1.0, 0.0,
)

IDENTITY: Matrix = (
    1.0, 0.0, 0.0, 0.0, 0.0,
    0.0, 1.0, 0.0, 0.0, 0.0,
    0.0, 0.0, 1.0, 0.0, 0.0,
    0.0, 0.0, 0.0, 1.0, 0.0,
)

_INVERT: Matrix = (
    -1.0, 0.0, 0.0, 0.0, 255.0,
    0.0, -1.0, 0.0, 0.0, 255.0,
    0.0, 0.0, -1.0, 0.0, 255.0,
    0.0, 0.0, 0.0, 1.0, 0.0,
)

# Rec. 709 luminance weights
LUMINANCE_R = 0.2126
LUMINANCE_G = 0.7152
LUMINANCE_B = 0.0722


class MapStyle(Enum):
    """Built-in map themes."""
    DARK = "dark"
    MIDNIGHT = "midnight"
    SILVER = "silver"
    DRACULA = "dracula"
    EMERALD = "emerald"
    SUNSET = "sunset"
    OCEAN = "ocean"
    SEPIA = "sepia"
    HIGH_CONTRAST = "high_contrast"
    NORMAL = "normal"  # untouched tiles
    CUSTOM = "custom"  # caller-supplied matrix


STYLE_MATRICES: dict[MapStyle, Matrix] = {
    MapStyle.DARK: MAPCN_DARK,
    MapStyle.MIDNIGHT: MIDNIGHT,
    MapStyle.SILVER: SILVER,
    MapStyle.DRACULA: DRACULA,
    MapStyle.EMERALD: EMERALD,
    MapStyle.SUNSET: SUNSET,
    MapStyle.OCEAN: OCEAN,
    MapStyle.SEPIA: SEPIA,
    MapStyle.HIGH_CONTRAST: HIGH_CONTRAST,
    MapStyle.NORMAL: IDENTITY,
}

ACCENT_COLORS: dict[MapStyle, Color] = {
    MapStyle.MIDNIGHT: Color(0xFF64B5F6),  # light blue
    MapStyle.SILVER: Color(0xFFE91E63),  # pink
    MapStyle.DRACULA: Color(0xFFBD93F9),  # purple
    MapStyle.EMERALD: Color(0xFF00E676),
    MapStyle.DARK: Color(0xFF00E676),
    MapStyle.SUNSET: Color(0xFFFFD54F),  # amber
    MapStyle.OCEAN: Color(0xFF26C6DA),  # cyan
    MapStyle.SEPIA: Color(0xFFD84315),  # deep orange
    MapStyle.HIGH_CONTRAST: Color(0xFFFFEB3B),  # yellow
    MapStyle.NORMAL: Color(0xFFF44336),  # red
    MapStyle.CUSTOM: Color(0xFF00E676),
}


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def create_custom_theme(
    brightness: float = 0.0,
    contrast: float = 1.0,
    saturation: float = 1.0,
    tint: Optional[Color] = None,
    tint_strength: float = 0.3,
) -> Matrix:
    """Build a theme from brightness, contrast, saturation and tint.

    Neutral arguments give ``IDENTITY``.

    Args:
        brightness: Offset added to every channel, -1.0 to 1.0
        contrast: Contrast factor, 0.0 to 2.0
        saturation: Saturation factor, 0.0 (grayscale) to 2.0
        tint: Optional color blended into the diagonal
        tint_strength: Tint blend factor, 0.0 to 1.0

    Returns:
        20-element color matrix
    """
    brightness = _clamp(brightness, -1.0, 1.0)
    contrast = _clamp(contrast, 0.0, 2.0)
    saturation = _clamp(saturation, 0.0, 2.0)
    tint_strength = _clamp(tint_strength, 0.0, 1.0)

    offset = (1.0 - contrast) / 2.0 * 255 + brightness * 255

    sr = (1 - saturation) * LUMINANCE_R
    sg = (1 - saturation) * LUMINANCE_G
    sb = (1 - saturation) * LUMINANCE_B
    c = contrast

    matrix = [
        (sr + saturation) * c, sg * c, sb * c, 0.0, offset,
        sr * c, (sg + saturation) * c, sb * c, 0.0, offset,
        sr * c, sg * c, (sb + saturation) * c, 0.0, offset,
        0.0, 0.0, 0.0, 1.0, 0.0,
    ]

    if tint is not None:
        inv = 1.0 - tint_strength
        diagonal_tint = (tint.r * tint_strength, tint.g * tint_strength, tint.b * tint_strength)
        for row in range(3):
            for col in range(3):
                matrix[row * 5 + col] *= inv
            matrix[row * 5 + row] += diagonal_tint[row]

    return tuple(matrix)


def _multiply(a: Sequence[float], b: Sequence[float]) -> Matrix:
    """Affine product of two 4x5 matrices: ``b`` is applied first, then ``a``."""
    result = [0.0] * MATRIX_LENGTH
    for i in range(4):
        for j in range(5):
            total = sum(a[i * 5 + k] * b[k * 5 + j] for k in range(4))
            if j == 4:
                total += a[i * 5 + 4]
            result[i * 5 + j] = total
    return tuple(result)


def invert(matrix: Sequence[float]) -> Matrix:
    """Negative of a theme. Matrices of the wrong length give ``MAPCN_DARK``."""
    if len(matrix) != MATRIX_LENGTH:
        logger.warning(f"Cannot invert a color matrix of length {len(matrix)}")
        return MAPCN_DARK
    return _multiply(matrix, _INVERT)


def combine(first: Sequence[float], second: Sequence[float]) -> Matrix:
    """Affine product ``first · second``. Wrong lengths give ``IDENTITY``."""
    if len(first) != MATRIX_LENGTH or len(second) != MATRIX_LENGTH:
        logger.warning(
            f"Cannot combine color matrices of length {len(first)} and {len(second)}"
        )
        return IDENTITY
    return _multiply(first, second)


def matrix_for_style(
    style: MapStyle, custom_matrix: Optional[Sequence[float]] = None
) -> Matrix:
    """Color matrix used to draw tiles for a style.

    ``CUSTOM`` uses ``custom_matrix``; a missing or malformed one falls back
    to ``MAPCN_DARK``.
    """
    if style == MapStyle.CUSTOM and custom_matrix is not None:
        if len(custom_matrix) != MATRIX_LENGTH:
            logger.warning(
                f"Custom color matrix must have {MATRIX_LENGTH} elements, "
                f"got {len(custom_matrix)}. Using default."
            )
            return MAPCN_DARK
        return tuple(float(v) for v in custom_matrix)

    return STYLE_MATRICES.get(style, MAPCN_DARK)


def background_color(style: MapStyle) -> Color:
    """Viewport fill behind tiles, matched to the style."""
    match style:
        case MapStyle.NORMAL:
            return Color(0xFFFFFFFF)
        case MapStyle.SEPIA:
            return Color(0xFF2D2416)
        case MapStyle.SILVER:
            return Color(0xFF1A1A1A)
        case _:
            return Color(0xFF000000)


def recommended_accent_color(style: MapStyle) -> Color:
    """Marker/route color that reads well on a style."""
    return ACCENT_COLORS[style]


def apply_color_matrix(image: Image.Image, matrix: Sequence[float]) -> Image.Image:
    """Apply a 4x5 color matrix to a Pillow image.

    The RGB rows go through Pillow's matrix conversion, which ignores the
    alpha column. The alpha row is applied when it only depends on alpha;
    otherwise alpha is kept as is.

    Args:
        image: Source tile, any mode
        matrix: 20-element color matrix

    Returns:
        New RGBA image
    """
    if len(matrix) != MATRIX_LENGTH:
        raise ValueError(f"Color matrix must have {MATRIX_LENGTH} elements")

    rgba = image.convert("RGBA")
    if tuple(matrix) == IDENTITY:
        return rgba

    alpha = rgba.getchannel("A")
    rgb_matrix = tuple(
        value
        for row in range(3)
        for value in (
            matrix[row * 5],
            matrix[row * 5 + 1],
            matrix[row * 5 + 2],
            matrix[row * 5 + 4],
        )
    )
    result = rgba.convert("RGB").convert("RGB", matrix=rgb_matrix)

    alpha_row = matrix[15:20]
    if alpha_row[0] == alpha_row[1] == alpha_row[2] == 0:
        scale, offset = alpha_row[3], alpha_row[4]
        if (scale, offset) != (1.0, 0.0):
            alpha = alpha.point(lambda v: max(0, min(255, round(v * scale + offset))))
    else:
        logger.debug("Alpha row depends on color channels; alpha left unchanged")

    result.putalpha(alpha)
    return result
