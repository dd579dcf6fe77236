"""Camera animation, control and projection."""

from .animation import (
    Curves,
    Curve,
    FrameClock,
    QtFrameClock,
    ManualFrameClock,
    AnimationChannel,
    AnimationTask,
    AnimationEngine,
)
from .controller import (
    CameraController,
    ControllerState,
    OperationKind,
    PendingOperation,
    RenderSurface,
    Tour,
)
from . import projection

__all__ = [
    "Curves",
    "Curve",
    "FrameClock",
    "QtFrameClock",
    "ManualFrameClock",
    "AnimationChannel",
    "AnimationTask",
    "AnimationEngine",
    "CameraController",
    "ControllerState",
    "OperationKind",
    "PendingOperation",
    "RenderSurface",
    "Tour",
    "projection",
]
