"""
Main entry point for the mapcn demo application.
Usage: python -m mapcn [--routes FILE] [--style NAME] [--tiles DIR] [--profile NAME]
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from PySide6.QtWidgets import QApplication, QMessageBox

from . import __version__
from .gui.main_window import MainWindow
from .resources.style_manager import StyleManager
from .settings import AppSettings, ConfigError
from .themes import MapStyle
from .utils.logging_config import setup_logging


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="mapcn", description="Animated, themed map demo"
    )
    parser.add_argument("--routes", type=Path, help="JSON file with routes to show")
    parser.add_argument(
        "--style",
        choices=[style.value for style in MapStyle if style != MapStyle.CUSTOM],
        help="Map theme (saved to settings)",
    )
    parser.add_argument("--tiles", type=Path, help="Directory with {z}/{x}/{y}.png tiles")
    parser.add_argument("--profile", default="default", help="Settings profile name")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(argv)


def show_error_dialog(title: str, message: str, details: Optional[str] = None) -> None:
    """Show error dialog to user."""
    app = QApplication.instance()
    if not app:
        app = QApplication(sys.argv)

    msg_box = QMessageBox()
    msg_box.setIcon(QMessageBox.Icon.Critical)
    msg_box.setWindowTitle(title)
    msg_box.setText(message)

    if details:
        msg_box.setDetailedText(details)

    msg_box.exec()


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main application entry point."""
    logger = logging.getLogger(f"{__name__}.main")
    args = parse_args(argv)
    try:
        settings = AppSettings(args.profile)
        if args.style:
            settings.map.style = MapStyle(args.style)
        if args.tiles:
            settings.map.tile_directory = args.tiles
        settings.sync()

        app = QApplication(sys.argv[:1])
        app.setApplicationName("mapcn")
        app.setApplicationVersion(__version__)
        app.setOrganizationName("mapcn")

        setup_logging(settings)

        logger.info("Starting mapcn")
        logger.info(f"Configuration loaded from {settings.get_settings_file_path()}")

        # Validate settings on startup
        validation = settings.validate()
        if validation.warnings:
            logger.warning("Configuration warnings detected:")
            for warning in validation.warnings:
                logger.warning(f"  {warning}")

        if not validation.is_valid:
            logger.error("Configuration validation failed:")
            for error in validation.errors:
                logger.error(f"  {error}")
            show_error_dialog(
                "Configuration Error",
                "Configuration validation failed. Please check your settings.",
                "\n".join(validation.errors),
            )
            return 1

        app.setStyle("Fusion")
        StyleManager().apply_app_style(app, "main")

        window = MainWindow(settings, routes_file=args.routes)
        window.show()

        if settings.is_first_run:
            settings.set_first_run_complete()

        logger.info("Application started successfully")
        return app.exec()

    except ConfigError as e:
        logger.error(f"Settings error: {e}")
        show_error_dialog("Configuration Error", "Settings could not be saved.", str(e))
        return 1

    except Exception as e:
        logger.exception("Unhandled exception in main")
        show_error_dialog("Application Error", "An unexpected error occurred.", str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())
