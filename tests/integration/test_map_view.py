"""Map widget lifecycle on an offscreen Qt platform."""

import os

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PySide6.QtWidgets import QApplication  # noqa: E402

from mapcn.camera.animation import ManualFrameClock  # noqa: E402
from mapcn.geo.models import CameraState, GeoPoint  # noqa: E402
from mapcn.tiles.providers import PlaceholderTileProvider  # noqa: E402

BERLIN = GeoPoint(52.52, 13.405)


@pytest.fixture(scope="module")
def qapp():
    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture
def view(qapp, isolated_settings):
    from mapcn.gui.map_view import MapView
    from mapcn.settings import AppSettings

    clock = ManualFrameClock()
    widget = MapView(AppSettings("view"), clock=clock, tile_provider=PlaceholderTileProvider())
    widget.resize(800, 600)
    yield widget
    widget.dispose()
    widget.deleteLater()


def wait_until_ready(app, view) -> None:
    for _ in range(20):
        app.processEvents()
        if view.controller.is_ready:
            return
    raise AssertionError("map view never became ready")


def test_camera_calls_wait_for_first_layout(qapp, view):
    ready = []
    view.map_ready.connect(lambda: ready.append(True))
    view.controller.jump_to(BERLIN, zoom=6.0)
    assert view.camera.center != BERLIN
    assert len(view.controller.pending_operations) == 1

    view.show()
    wait_until_ready(qapp, view)

    assert ready == [True]
    assert view.camera.center == BERLIN
    assert view.camera.zoom == 6.0


def test_set_camera_clamps_and_signals(view):
    moved = []
    view.camera_moved.connect(moved.append)
    view.set_camera(CameraState(BERLIN, 40.0))
    assert view.camera.zoom == view.max_zoom
    assert moved == [view.camera]

    view.set_camera(view.camera)
    assert len(moved) == 1


def test_bad_routes_file_shows_banner(view, tmp_path):
    assert not view.load_routes_file(tmp_path / "missing.json")
    assert view.error_message
    view.dismiss_error()
    assert view.error_message is None


def test_markers_drive_frames_until_disposed(qapp, view):
    from mapcn.gui.main_window import demo_markers, demo_routes

    view.set_markers(demo_markers())
    view.set_routes(demo_routes())
    view.show()
    wait_until_ready(qapp, view)

    assert view.clock.callback_count == 1
    view.clock.advance(0.5)
    assert not view.grab().isNull()

    view.dispose()
    assert view.clock.callback_count == 0


def test_all_points_covers_markers_and_routes(view):
    from mapcn.gui.main_window import demo_markers, demo_routes

    markers = demo_markers()
    routes = demo_routes()
    view.set_markers(markers)
    view.set_routes(routes)
    assert len(view.all_points()) == len(markers) + sum(len(r.points) for r in routes)


def test_unchanged_frames_do_not_repaint(qapp, view, monkeypatch):
    from mapcn.gui.main_window import demo_markers

    view.set_markers(demo_markers())
    view.show()
    wait_until_ready(qapp, view)
    view.clock.advance(0.1)

    updates = []
    monkeypatch.setattr(view, "update", lambda *args: updates.append(args))

    view.clock.run_frame()
    view.clock.run_frame()
    assert updates == []

    view.clock.advance(0.05)
    assert updates

    view.set_camera(view.camera.with_values(zoom=view.camera.zoom + 1))
    updates.clear()
    view.clock.run_frame()
    assert len(updates) == 1
    view.clock.run_frame()
    assert len(updates) == 1
