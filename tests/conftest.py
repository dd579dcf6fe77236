"""Shared fixtures for mapcn tests."""

from pathlib import Path
from typing import Iterator

import pytest

from mapcn.camera.animation import ManualFrameClock
from mapcn.camera.controller import CameraController
from mapcn.geo.models import CameraState, GeoPoint


class FakeSurface:
    """In-memory render surface recording every camera change."""

    def __init__(
        self,
        camera: CameraState = CameraState(GeoPoint(0.0, 0.0), 3.0),
        size: tuple[float, float] = (800.0, 600.0),
    ):
        self.min_zoom = 2.0
        self.max_zoom = 18.0
        self._camera = camera
        self.size = size
        self.history: list[CameraState] = []

    @property
    def camera(self) -> CameraState:
        return self._camera

    def set_camera(self, state: CameraState) -> None:
        self._camera = state
        self.history.append(state)

    def viewport_size(self) -> tuple[float, float]:
        return self.size


@pytest.fixture
def clock() -> ManualFrameClock:
    return ManualFrameClock()


@pytest.fixture
def surface() -> FakeSurface:
    return FakeSurface()


@pytest.fixture
def controller(clock: ManualFrameClock, surface: FakeSurface) -> CameraController:
    """Controller that is not ready yet."""
    return CameraController(clock, surface)


@pytest.fixture
def ready_controller(controller: CameraController) -> CameraController:
    controller.mark_ready()
    return controller


@pytest.fixture
def isolated_settings(tmp_path: Path) -> Iterator[Path]:
    """Point user-scope QSettings at ``tmp_path``; nothing is written to the home directory."""
    from PySide6.QtCore import QSettings

    from mapcn.settings import open_settings_store

    for settings_format in (QSettings.Format.IniFormat, QSettings.Format.NativeFormat):
        QSettings.setPath(settings_format, QSettings.Scope.UserScope, str(tmp_path))

    store_path = Path(open_settings_store().fileName())
    assert store_path.is_relative_to(tmp_path), f"settings escaped to {store_path}"
    yield tmp_path
