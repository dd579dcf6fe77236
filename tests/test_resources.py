"""Tests for the stylesheet manager."""

from mapcn.resources.style_manager import StyleManager


class TestStyleManager:
    """Test QSS loading."""

    def test_loads_bundled_style(self) -> None:
        manager = StyleManager()
        style = manager.load_style("main")
        assert style is not None
        assert "map-control" in style

    def test_missing_style(self, tmp_path) -> None:
        assert StyleManager(tmp_path).load_style("absent") is None

    def test_styles_are_cached(self, tmp_path) -> None:
        (tmp_path / "custom.qss").write_text("QWidget { color: red; }", encoding="utf-8")
        manager = StyleManager(tmp_path)
        first = manager.load_style("custom")
        (tmp_path / "custom.qss").write_text("changed", encoding="utf-8")
        assert manager.load_style("custom") == first
