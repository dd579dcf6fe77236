"""
ARGB color value used by painters, routes and themes.

Kept free of Qt so draw lists can be built and compared without a GUI.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from PySide6.QtGui import QColor


@dataclass(frozen=True)
class Color:
    """32-bit ``0xAARRGGBB`` color."""
    value: int

    def __post_init__(self):
        object.__setattr__(self, "value", int(self.value) & 0xFFFFFFFF)

    @classmethod
    def from_argb(cls, alpha: int, red: int, green: int, blue: int) -> "Color":
        def clamp(c: int) -> int:
            return max(0, min(255, int(c)))

        return cls(
            (clamp(alpha) << 24) | (clamp(red) << 16) | (clamp(green) << 8) | clamp(blue)
        )

    @classmethod
    def from_hex(cls, text: str) -> "Color":
        """Parse ``#RRGGBB`` or ``#AARRGGBB``.

        Raises:
            ValueError: If the string is not a valid hex color
        """
        if not isinstance(text, str):
            raise ValueError(f"Invalid hex color: {text!r}")
        digits = text.strip().lstrip("#")
        if len(digits) == 6:
            digits = "FF" + digits
        if len(digits) != 8:
            raise ValueError(f"Invalid hex color: {text!r}")
        return cls(int(digits, 16))

    def to_hex(self) -> str:
        return f"#{self.value:08X}"

    @property
    def alpha(self) -> int:
        return (self.value >> 24) & 0xFF

    @property
    def red(self) -> int:
        return (self.value >> 16) & 0xFF

    @property
    def green(self) -> int:
        return (self.value >> 8) & 0xFF

    @property
    def blue(self) -> int:
        return self.value & 0xFF

    @property
    def alpha_f(self) -> float:
        return self.alpha / 255.0

    # Normalized channels (0.0 - 1.0)
    @property
    def r(self) -> float:
        return self.red / 255.0

    @property
    def g(self) -> float:
        return self.green / 255.0

    @property
    def b(self) -> float:
        return self.blue / 255.0

    def with_alpha(self, alpha: float) -> "Color":
        """Copy of this color with opacity ``alpha`` (0.0 - 1.0, clamped)."""
        alpha = max(0.0, min(1.0, alpha))
        return Color((round(alpha * 255) << 24) | (self.value & 0x00FFFFFF))

    def to_qcolor(self) -> "QColor":
        from PySide6.QtGui import QColor

        return QColor(self.red, self.green, self.blue, self.alpha)

    def __str__(self) -> str:
        return self.to_hex()


WHITE = Color(0xFFFFFFFF)
BLACK = Color(0xFF000000)
TRANSPARENT = Color(0x00000000)
