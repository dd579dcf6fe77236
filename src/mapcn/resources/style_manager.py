"""
Style management for mapcn.

Loads packaged Qt stylesheets and applies them to widgets or the whole
application.
"""

import logging
from pathlib import Path
from typing import Optional

from PySide6.QtWidgets import QApplication, QWidget


class StyleManager:
    """Manages application stylesheets."""

    def __init__(self, styles_dir: Optional[Path] = None):
        """Initialize the style manager.

        Args:
            styles_dir: Directory holding ``*.qss`` files; defaults to the packaged styles
        """
        self.styles_dir = styles_dir or Path(__file__).parent / "styles"
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self._loaded_styles: dict[str, str] = {}

    def load_style(self, style_name: str) -> Optional[str]:
        """Load a stylesheet from file.

        Args:
            style_name: Name of the style file (without .qss extension)

        Returns:
            Stylesheet content or None if not found
        """
        if style_name in self._loaded_styles:
            return self._loaded_styles[style_name]

        style_file = self.styles_dir / f"{style_name}.qss"

        if not style_file.exists():
            self.logger.warning(f"Style file not found: {style_file}")
            return None

        try:
            content = style_file.read_text(encoding="utf-8")
        except OSError as e:
            self.logger.error(f"Failed to load stylesheet {style_name}: {e}")
            return None

        self._loaded_styles[style_name] = content
        self.logger.debug(f"Loaded stylesheet: {style_name}")
        return content

    def apply_style(self, widget: QWidget, style_name: str) -> bool:
        """Apply a stylesheet to a widget; True if it was applied."""
        style_content = self.load_style(style_name)
        if style_content:
            widget.setStyleSheet(style_content)
            return True
        return False

    def apply_app_style(self, app: QApplication, style_name: str = "main") -> bool:
        """Apply a stylesheet to the entire application.

        Args:
            app: QApplication instance
            style_name: Name of the style file (default: "main")

        Returns:
            True if style was applied successfully
        """
        style_content = self.load_style(style_name)
        if not style_content:
            return False

        app.setStyleSheet(style_content)
        self.logger.info(f"Applied application stylesheet: {style_name}")
        return True


def apply_style_class(widget: QWidget, class_name: str) -> None:
    """Set the ``class`` property matched by ``[class="..."]`` QSS selectors."""
    widget.setProperty("class", class_name)
    # Force style recalculation
    widget.style().unpolish(widget)
    widget.style().polish(widget)
