"""
Resources for mapcn.

Packaged stylesheets and the style manager that applies them.
"""

from .style_manager import StyleManager, apply_style_class

__all__ = ["StyleManager", "apply_style_class"]
