"""Programmatic camera control.

``CameraController`` is the public control surface of a map: fly-to, jump,
zoom steps, rotation, fitting points and guided tours. Calls made before the
render surface has finished its first layout are recorded as
``PendingOperation`` entries and replayed, in call order, exactly once when
the surface reports readiness.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional, Protocol, Sequence

from ..geo.models import CameraState, GeoPoint, LatLngBounds
from .animation import (
    AnimationChannel,
    AnimationEngine,
    Curve,
    Curves,
    FrameClock,
    TimerHandle,
)
from .projection import fit_bounds

DEFAULT_FLY_ZOOM = 5.0
DEFAULT_FLY_DURATION = 1.5
FIT_DURATION = 1.5
ZOOM_STEP_DURATION = 0.4
ZOOM_STEP_MIN = 2.0
ZOOM_STEP_MAX = 18.0
ROTATE_DURATION = 0.5


class RenderSurface(Protocol):
    """What the controller needs from the widget that shows the map."""

    min_zoom: float
    max_zoom: float

    @property
    def camera(self) -> CameraState: ...

    def set_camera(self, state: CameraState) -> None: ...

    def viewport_size(self) -> tuple[float, float]: ...


class ControllerState(Enum):
    NOT_READY = "not_ready"
    READY = "ready"


class OperationKind(Enum):
    FLY_TO = "fly_to"
    JUMP_TO = "jump_to"
    ZOOM_STEP = "zoom_step"
    ROTATE_TO = "rotate_to"
    FIT_ALL_POINTS = "fit_all_points"


def _to_plain(value: Any) -> Any:
    """JSON-friendly form of an operation parameter."""
    if isinstance(value, GeoPoint):
        return [value.latitude, value.longitude]
    if isinstance(value, (list, tuple)):
        return [_to_plain(v) for v in value]
    if callable(value):
        return getattr(value, "__name__", type(value).__name__)
    return value


@dataclass(frozen=True)
class PendingOperation:
    """A recorded camera call: what to do and with which arguments."""
    kind: OperationKind
    params: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "params": {name: _to_plain(value) for name, value in self.params.items()},
        }


class Tour:
    """A running sequence of flights with a pause at every stop.

    Each stop is visited by ``fly_to``; after ``fly_duration + stop_duration``
    seconds ``on_stop_reached(index, stop)`` is called and the next flight
    starts. Completion is observable through ``add_done_callback``.
    """

    def __init__(
        self,
        controller: "CameraController",
        stops: Sequence[GeoPoint],
        zoom: float,
        stop_duration: float,
        fly_duration: float,
        on_stop_reached: Optional[Callable[[int, GeoPoint], None]] = None,
    ):
        self.controller = controller
        self.stops = tuple(stops)
        self.zoom = zoom
        self.stop_duration = stop_duration
        self.fly_duration = fly_duration
        self.on_stop_reached = on_stop_reached
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

        self.stops_reached = 0
        self.cancelled = False
        self._done = False
        self._timer: Optional[TimerHandle] = None
        self._done_callbacks: list[Callable[["Tour"], None]] = []

    @property
    def is_done(self) -> bool:
        return self._done

    def start(self) -> "Tour":
        if not self.stops:
            self.logger.debug("Tour has no stops")
            self._finish()
        else:
            self.logger.info(f"Starting tour with {len(self.stops)} stops")
            self._visit(0)
        return self

    def add_done_callback(self, callback: Callable[["Tour"], None]) -> None:
        """Call ``callback(tour)`` on completion or cancellation.

        Called immediately if the tour is already done.
        """
        if self._done:
            callback(self)
        else:
            self._done_callbacks.append(callback)

    def cancel(self) -> None:
        if self._done:
            return
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self.cancelled = True
        self.logger.info(f"Tour cancelled after {self.stops_reached} stops")
        self._finish()

    def _visit(self, index: int) -> None:
        stop = self.stops[index]
        self.controller.fly_to(stop, zoom=self.zoom, duration=self.fly_duration)
        self._timer = self.controller.clock.call_later(
            self.fly_duration + self.stop_duration, lambda: self._arrive(index)
        )

    def _arrive(self, index: int) -> None:
        self._timer = None
        if self._done:
            return

        stop = self.stops[index]
        self.stops_reached += 1
        if self.on_stop_reached is not None:
            try:
                self.on_stop_reached(index, stop)
            except Exception as e:
                self.logger.error(f"Error in tour stop callback: {e}", exc_info=True)

        if index + 1 < len(self.stops):
            self._visit(index + 1)
        else:
            self.logger.info("Tour finished")
            self._finish()

    def _finish(self) -> None:
        self._done = True
        callbacks, self._done_callbacks = self._done_callbacks, []
        for callback in callbacks:
            try:
                callback(self)
            except Exception as e:
                self.logger.error(f"Error in tour done callback: {e}", exc_info=True)


class CameraController:
    """Camera control API for one map surface.

    The controller starts ``NOT_READY``. Until ``mark_ready`` is called, every
    mutating call is queued; ``mark_ready`` replays the queue once, in call
    order, and discards it.
    """

    def __init__(
        self,
        clock: FrameClock,
        surface: Optional[RenderSurface] = None,
        on_operation: Optional[Callable[[PendingOperation], None]] = None,
    ):
        """Initialize the camera controller.

        Args:
            clock: Frame clock for animations and tour timers
            surface: Render surface to move; may be attached later
            on_operation: Observer called with every operation as it executes
        """
        self.clock = clock
        self.surface = surface
        self.on_operation = on_operation
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

        self.engine = AnimationEngine(clock, self._apply_frame)
        self._state = ControllerState.NOT_READY
        self._pending: list[PendingOperation] = []
        self._tours: list[Tour] = []
        self._disposed = False

    def attach(self, surface: RenderSurface) -> None:
        self.surface = surface

    # Read accessors

    @property
    def state(self) -> ControllerState:
        return self._state

    @property
    def is_ready(self) -> bool:
        return self._state == ControllerState.READY

    @property
    def camera(self) -> CameraState:
        return self._require_surface().camera

    @property
    def center(self) -> GeoPoint:
        return self.camera.center

    @property
    def zoom(self) -> float:
        return self.camera.zoom

    @property
    def rotation(self) -> float:
        return self.camera.rotation

    @property
    def pending_operations(self) -> tuple[PendingOperation, ...]:
        return tuple(self._pending)

    # Readiness

    def mark_ready(self) -> None:
        """Switch to ``READY`` and run queued operations. Later calls are ignored."""
        if self._state == ControllerState.READY:
            self.logger.debug("Controller already ready")
            return

        self._state = ControllerState.READY
        pending, self._pending = self._pending, []
        if pending:
            self.logger.debug(f"Running {len(pending)} queued camera operations")
        for operation in pending:
            self._execute(operation)

    # Operations

    def fly_to(
        self,
        target: GeoPoint,
        zoom: float = DEFAULT_FLY_ZOOM,
        duration: float = DEFAULT_FLY_DURATION,
        curve: Curve = Curves.ease_in_out_cubic,
    ) -> None:
        """Animate center and zoom to ``target``; rotation is unchanged."""
        self._submit(
            PendingOperation(
                OperationKind.FLY_TO,
                {"target": target, "zoom": zoom, "duration": duration, "curve": curve},
            )
        )

    def jump_to(self, target: GeoPoint, zoom: Optional[float] = None) -> None:
        """Move the camera immediately; ``zoom=None`` keeps the current zoom."""
        self._submit(PendingOperation(OperationKind.JUMP_TO, {"target": target, "zoom": zoom}))

    def zoom_step(self, delta: float) -> None:
        """Animate a relative zoom change, clamped to [2, 18].

        The step is taken from the camera as it is when the operation runs,
        centered where the camera is at that moment. It shares the camera
        channel with flights, so a flight still in progress is replaced: a
        queued ``fly_to`` followed by ``zoom_in`` ends at the pre-flight
        center, one level in.
        """
        self._submit(PendingOperation(OperationKind.ZOOM_STEP, {"delta": delta}))

    def zoom_in(self) -> None:
        self.zoom_step(1.0)

    def zoom_out(self) -> None:
        self.zoom_step(-1.0)

    def rotate_to(self, degrees: float, duration: float = ROTATE_DURATION) -> None:
        """Animate the rotation channel only."""
        self._submit(
            PendingOperation(OperationKind.ROTATE_TO, {"degrees": degrees, "duration": duration})
        )

    def reset_rotation(self) -> None:
        """Rotate back to north-up."""
        self.rotate_to(0.0)

    def fit_all_points(
        self, points: Sequence[GeoPoint], padding: float = 50.0, max_zoom: float = 16.0
    ) -> None:
        """Fly to the smallest view showing every point.

        An empty list does nothing. A box that cannot be fitted, such as a
        single point, is logged and ignored when the operation runs.
        """
        if not points:
            self.logger.info("fit_all_points called with empty points list")
            return

        self._submit(
            PendingOperation(
                OperationKind.FIT_ALL_POINTS,
                {"points": tuple(points), "padding": padding, "max_zoom": max_zoom},
            )
        )

    def start_tour(
        self,
        stops: Sequence[GeoPoint],
        zoom: float = 10.0,
        stop_duration: float = 1.5,
        fly_duration: float = 2.0,
        on_stop_reached: Optional[Callable[[int, GeoPoint], None]] = None,
    ) -> Tour:
        """Visit stops one after another.

        Args:
            stops: Locations to visit
            zoom: Zoom level at every stop
            stop_duration: Pause at each stop, in seconds
            fly_duration: Flight time between stops, in seconds
            on_stop_reached: Called with ``(index, stop)`` after each pause

        Returns:
            The running tour
        """
        tour = Tour(self, stops, zoom, stop_duration, fly_duration, on_stop_reached)
        if not tour.stops:
            return tour.start()

        self._tours.append(tour)
        tour.add_done_callback(self._forget_tour)
        return tour.start()

    def dispose(self) -> None:
        """Drop queued operations, cancel tours and stop all animations."""
        if self._disposed:
            return
        self._disposed = True
        self._pending.clear()
        for tour in list(self._tours):
            tour.cancel()
        self.engine.dispose()
        self.logger.debug("Camera controller disposed")

    # Internals

    def _forget_tour(self, tour: Tour) -> None:
        if tour in self._tours:
            self._tours.remove(tour)

    def _require_surface(self) -> RenderSurface:
        if self.surface is None:
            raise RuntimeError("Camera controller has no render surface attached")
        return self.surface

    def _submit(self, operation: PendingOperation) -> None:
        if self._disposed:
            self.logger.warning(f"Ignoring {operation.kind.value} on disposed controller")
            return

        if self._state == ControllerState.READY:
            self._execute(operation)
        else:
            self._pending.append(operation)
            self.logger.debug(f"Queued {operation.kind.value} until map is ready")

    def _execute(self, operation: PendingOperation) -> None:
        params = operation.params
        try:
            if self.on_operation is not None:
                self.on_operation(operation)

            match operation.kind:
                case OperationKind.FLY_TO:
                    self._fly(params["target"], params["zoom"], params["duration"], params["curve"])
                case OperationKind.JUMP_TO:
                    self._jump(params["target"], params["zoom"])
                case OperationKind.ZOOM_STEP:
                    self._zoom_step(params["delta"])
                case OperationKind.ROTATE_TO:
                    self._rotate(params["degrees"], params["duration"])
                case OperationKind.FIT_ALL_POINTS:
                    self._fit(params["points"], params["padding"], params["max_zoom"])
        except Exception as e:
            self.logger.error(f"Camera operation {operation.kind.value} failed: {e}", exc_info=True)

    def _clamp_zoom(self, zoom: float) -> float:
        surface = self._require_surface()
        return max(surface.min_zoom, min(surface.max_zoom, zoom))

    def _fly(self, target: GeoPoint, zoom: float, duration: float, curve: Curve) -> None:
        start = self.camera
        end = start.with_values(center=target, zoom=self._clamp_zoom(zoom))
        self.engine.start(AnimationChannel.CAMERA, start, end, duration, curve)

    def _jump(self, target: GeoPoint, zoom: Optional[float]) -> None:
        # A jump wins over a flight in progress
        self.engine.cancel(AnimationChannel.CAMERA)
        current = self.camera
        new_zoom = current.zoom if zoom is None else self._clamp_zoom(zoom)
        self._require_surface().set_camera(current.with_values(center=target, zoom=new_zoom))

    def _zoom_step(self, delta: float) -> None:
        current = self.camera
        zoom = max(ZOOM_STEP_MIN, min(ZOOM_STEP_MAX, current.zoom + delta))
        self._fly(current.center, zoom, ZOOM_STEP_DURATION, Curves.ease_out_cubic)

    def _rotate(self, degrees: float, duration: float) -> None:
        start = self.camera
        self.engine.start(
            AnimationChannel.ROTATION,
            start,
            start.with_values(rotation=degrees),
            duration,
            Curves.ease_in_out_cubic,
        )

    def _fit(self, points: Sequence[GeoPoint], padding: float, max_zoom: float) -> None:
        try:
            bounds = LatLngBounds.from_points(points)
            center, zoom = fit_bounds(
                bounds, self._require_surface().viewport_size(), padding, max_zoom
            )
        except (ValueError, RuntimeError) as e:
            self.logger.warning(f"Cannot fit points: {e}")
            return

        self._fly(center, zoom, FIT_DURATION, Curves.ease_in_out_cubic)

    def _apply_frame(self, state: CameraState, channel: AnimationChannel) -> None:
        surface = self._require_surface()
        current = surface.camera
        if channel == AnimationChannel.CAMERA:
            surface.set_camera(current.with_values(center=state.center, zoom=state.zoom))
        else:
            surface.set_camera(current.with_values(rotation=state.rotation))
