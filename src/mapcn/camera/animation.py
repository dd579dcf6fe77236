"""Frame-driven camera animation.

Camera flights are interpolated once per frame from a ``FrameClock``. The
engine keeps at most one task per ``AnimationChannel``: center/zoom and
rotation animate independently, and a new request on a busy channel replaces
the running task.

``QtFrameClock`` drives every map widget from one shared QTimer, the same way
the widget's marker pulse is driven. ``ManualFrameClock`` advances time by
hand for tests and headless use.
"""

import heapq
import itertools
import logging
import math
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional, Protocol

from ..geo.models import CameraState, GeoPoint

Curve = Callable[[float], float]
FrameCallback = Callable[[float], None]
ApplyCallback = Callable[[CameraState, "AnimationChannel"], None]


class _CubicBezier:
    """Easing curve through (0, 0), (a, b), (c, d), (1, 1)."""

    def __init__(self, a: float, b: float, c: float, d: float):
        self.a, self.b, self.c, self.d = a, b, c, d

    @staticmethod
    def _evaluate(p1: float, p2: float, m: float) -> float:
        return 3 * p1 * (1 - m) ** 2 * m + 3 * p2 * (1 - m) * m**2 + m**3

    def __call__(self, t: float) -> float:
        if t <= 0.0:
            return 0.0
        if t >= 1.0:
            return 1.0

        # Bisect for the bezier parameter whose x matches t
        start, end = 0.0, 1.0
        while True:
            midpoint = (start + end) / 2
            estimate = self._evaluate(self.a, self.c, midpoint)
            if abs(t - estimate) < 0.001:
                return self._evaluate(self.b, self.d, midpoint)
            if estimate < t:
                start = midpoint
            else:
                end = midpoint


class Curves:
    """Easing functions mapping [0, 1] to [0, 1] with f(0)=0 and f(1)=1."""

    @staticmethod
    def linear(t: float) -> float:
        return t

    @staticmethod
    def ease_in_cubic(t: float) -> float:
        return t * t * t

    @staticmethod
    def ease_out_cubic(t: float) -> float:
        return 1 - (1 - t) ** 3

    @staticmethod
    def ease_in_out_cubic(t: float) -> float:
        if t < 0.5:
            return 4 * t * t * t
        return 1 - (-2 * t + 2) ** 3 / 2

    @staticmethod
    def ease_out_back(t: float) -> float:
        """Overshoots slightly past 1 before settling."""
        c1 = 1.70158
        c3 = c1 + 1
        return 1 + c3 * (t - 1) ** 3 + c1 * (t - 1) ** 2

    fast_out_slow_in = staticmethod(_CubicBezier(0.4, 0.0, 0.2, 1.0))


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class FrameClock(Protocol):
    """Source of time and per-frame callbacks for animations."""

    def now(self) -> float:
        """Monotonic time in seconds."""
        ...

    def add_frame_callback(self, callback: FrameCallback) -> None: ...

    def remove_frame_callback(self, callback: FrameCallback) -> None: ...

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        """Run ``callback`` once after ``delay`` seconds."""
        ...


class QtFrameClock:
    """Singleton frame clock backed by one repeating QTimer.

    The timer runs only while at least one frame callback is registered.
    """

    _instance: "QtFrameClock | None" = None

    def __new__(cls, *args, **kwargs):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self, interval_ms: int = 16):
        if self._initialized:
            return

        from PySide6.QtCore import QTimer

        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self._initialized = True

        # Single repeating timer for all frame callbacks
        self.timer = QTimer()
        self.timer.setSingleShot(False)
        self.timer.setInterval(interval_ms)
        self.timer.timeout.connect(self._on_tick)

        self._callbacks: list[FrameCallback] = []
        self._pending_timers: set["_QtTimerHandle"] = set()

        self.logger.debug(f"Frame clock initialized with interval: {interval_ms}ms")

    def now(self) -> float:
        return time.perf_counter()

    def set_interval(self, interval_ms: int) -> None:
        if self.timer.interval() != interval_ms:
            self.timer.setInterval(interval_ms)
            self.logger.debug(f"Frame interval updated to: {interval_ms}ms")

    def add_frame_callback(self, callback: FrameCallback) -> None:
        if callback in self._callbacks:
            return
        self._callbacks.append(callback)
        if not self.timer.isActive():
            self.timer.start()
            self.logger.debug("Frame timer started")

    def remove_frame_callback(self, callback: FrameCallback) -> None:
        if callback in self._callbacks:
            self._callbacks.remove(callback)

        # Stop timer if nothing is animating
        if not self._callbacks and self.timer.isActive():
            self.timer.stop()
            self.logger.debug("No frame callbacks left, timer stopped")

    def call_later(self, delay: float, callback: Callable[[], None]) -> "_QtTimerHandle":
        handle = _QtTimerHandle(self, callback)
        self._pending_timers.add(handle)
        handle.timer.start(max(0, int(delay * 1000)))
        return handle

    def _release(self, handle: "_QtTimerHandle") -> None:
        self._pending_timers.discard(handle)

    def _on_tick(self) -> None:
        now = self.now()
        for callback in list(self._callbacks):
            # A callback may remove others during this tick
            if callback not in self._callbacks:
                continue
            try:
                callback(now)
            except Exception as e:
                self.logger.error(f"Error in frame callback: {e}", exc_info=True)


class _QtTimerHandle:
    """Single-shot QTimer kept alive until it fires or is cancelled."""

    def __init__(self, clock: QtFrameClock, callback: Callable[[], None]):
        from PySide6.QtCore import QTimer

        self._clock = clock
        self._callback = callback
        self.timer = QTimer()
        self.timer.setSingleShot(True)
        self.timer.timeout.connect(self._fire)

    def _fire(self) -> None:
        self._clock._release(self)
        try:
            self._callback()
        except Exception as e:
            self._clock.logger.error(f"Error in timer callback: {e}", exc_info=True)

    def cancel(self) -> None:
        self.timer.stop()
        self._clock._release(self)


@dataclass
class _ManualTimer:
    due: float
    callback: Callable[[], None]
    cancelled: bool = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualFrameClock:
    """Deterministic frame clock advanced explicitly.

    Example:
        clock = ManualFrameClock()
        engine = AnimationEngine(clock, apply)
        engine.start(...)
        clock.advance(1.0)  # 60 frames of 1/60 s
    """

    # Absorbs float drift from summing many small steps
    TIME_EPSILON = 1e-9

    def __init__(self, start: float = 0.0):
        self._time = start
        self._callbacks: list[FrameCallback] = []
        self._timers: list[tuple[float, int, _ManualTimer]] = []
        self._sequence = itertools.count()
        self.frames = 0

    def now(self) -> float:
        return self._time

    def add_frame_callback(self, callback: FrameCallback) -> None:
        if callback not in self._callbacks:
            self._callbacks.append(callback)

    def remove_frame_callback(self, callback: FrameCallback) -> None:
        if callback in self._callbacks:
            self._callbacks.remove(callback)

    @property
    def callback_count(self) -> int:
        return len(self._callbacks)

    def call_later(self, delay: float, callback: Callable[[], None]) -> _ManualTimer:
        timer = _ManualTimer(self._time + max(0.0, delay), callback)
        heapq.heappush(self._timers, (timer.due, next(self._sequence), timer))
        return timer

    def run_frame(self) -> None:
        """Fire due timers, then every frame callback, at the current time."""
        self._fire_due_timers()
        self.frames += 1
        for callback in list(self._callbacks):
            if callback in self._callbacks:
                callback(self._time)

    def advance(self, seconds: float, step: float = 1 / 60) -> None:
        """Move time forward, running one frame per ``step``.

        Args:
            seconds: Total time to advance
            step: Frame interval in seconds
        """
        if step <= 0:
            raise ValueError("step must be positive")

        remaining = seconds
        while remaining > self.TIME_EPSILON:
            delta = min(step, remaining)
            self._time += delta
            remaining -= delta
            self.run_frame()

    def _fire_due_timers(self) -> None:
        while self._timers and self._timers[0][0] <= self._time + self.TIME_EPSILON:
            _, _, timer = heapq.heappop(self._timers)
            if not timer.cancelled:
                timer.callback()


class AnimationChannel(Enum):
    """Independently animated groups of camera fields."""
    CAMERA = "camera"  # center and zoom
    ROTATION = "rotation"


def _lerp(start: float, end: float, t: float) -> float:
    return start + (end - start) * t


@dataclass
class AnimationTask:
    """A running interpolation between two camera states."""
    channel: AnimationChannel
    start_state: CameraState
    end_state: CameraState
    duration: float
    curve: Curve
    start_time: float
    on_complete: Optional[Callable[[], None]] = None
    frame_callback: Optional[FrameCallback] = field(default=None, repr=False)

    def progress(self, now: float) -> float:
        """Linear progress in [0, 1]."""
        if self.duration <= 0:
            return 1.0
        t = (now - self.start_time) / self.duration
        if math.isnan(t):
            return 1.0
        return max(0.0, min(1.0, t))

    def value_at(self, now: float) -> CameraState:
        """Eased camera state at ``now``."""
        t = self.progress(now)
        if t >= 1.0:
            return self.end_state

        eased = self.curve(t)
        start, end = self.start_state, self.end_state
        return CameraState(
            center=GeoPoint(
                _lerp(start.center.latitude, end.center.latitude, eased),
                _lerp(start.center.longitude, end.center.longitude, eased),
            ),
            zoom=_lerp(start.zoom, end.zoom, eased),
            rotation=_lerp(start.rotation, end.rotation, eased),
        )


class AnimationEngine:
    """Runs at most one animation task per channel.

    Each frame the task's interpolated state is handed to ``apply`` together
    with its channel; the receiver decides which fields the channel owns.
    """

    def __init__(self, clock: FrameClock, apply: ApplyCallback):
        """Initialize the animation engine.

        Args:
            clock: Frame clock driving the animations
            apply: Receives ``(state, channel)`` every frame
        """
        self.clock = clock
        self.apply = apply
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

        self._tasks: dict[AnimationChannel, AnimationTask] = {}
        self._disposed = False

    def start(
        self,
        channel: AnimationChannel,
        start: CameraState,
        end: CameraState,
        duration: float,
        curve: Curve = Curves.ease_in_out_cubic,
        on_complete: Optional[Callable[[], None]] = None,
    ) -> Optional[AnimationTask]:
        """Start a task on a channel, replacing any task already running there.

        Args:
            channel: Channel to animate
            start: State at t = 0
            end: State at t = 1
            duration: Duration in seconds; <= 0 jumps to ``end`` on the next frame
            curve: Easing curve
            on_complete: Called once when the task reaches its end state

        Returns:
            The new task, or None once the engine is disposed
        """
        if self._disposed:
            self.logger.warning(f"Ignoring {channel.value} animation on disposed engine")
            return None

        self.cancel(channel)

        task = AnimationTask(
            channel=channel,
            start_state=start,
            end_state=end,
            duration=duration,
            curve=curve,
            start_time=self.clock.now(),
            on_complete=on_complete,
        )
        task.frame_callback = lambda now: self._on_frame(task, now)
        self._tasks[channel] = task
        self.clock.add_frame_callback(task.frame_callback)

        self.logger.debug(
            f"Started {channel.value} animation: {start.center} z{start.zoom:.2f} -> "
            f"{end.center} z{end.zoom:.2f} over {duration:.2f}s"
        )
        return task

    def cancel(self, channel: AnimationChannel) -> bool:
        """Stop the task on a channel without applying its end state.

        Returns:
            True if a task was running
        """
        task = self._tasks.pop(channel, None)
        if task is None:
            return False
        self._release(task)
        self.logger.debug(f"Cancelled {channel.value} animation")
        return True

    def cancel_all(self) -> None:
        for channel in list(self._tasks):
            self.cancel(channel)

    def is_animating(self, channel: Optional[AnimationChannel] = None) -> bool:
        if channel is None:
            return bool(self._tasks)
        return channel in self._tasks

    def task(self, channel: AnimationChannel) -> Optional[AnimationTask]:
        return self._tasks.get(channel)

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    def dispose(self) -> None:
        """Cancel every task and refuse new ones."""
        self.cancel_all()
        self._disposed = True
        self.logger.debug("Animation engine disposed")

    def _release(self, task: AnimationTask) -> None:
        if task.frame_callback is not None:
            self.clock.remove_frame_callback(task.frame_callback)
            task.frame_callback = None

    def _on_frame(self, task: AnimationTask, now: float) -> None:
        # Stale callback of a replaced task
        if self._tasks.get(task.channel) is not task:
            self._release(task)
            return

        state = task.value_at(now)
        try:
            self.apply(state, task.channel)
        except Exception as e:
            self.logger.warning(
                f"Dropped {task.channel.value} animation frame: {e}", exc_info=True
            )

        if task.progress(now) >= 1.0:
            del self._tasks[task.channel]
            self._release(task)
            self.logger.debug(f"Finished {task.channel.value} animation")
            if task.on_complete is not None:
                try:
                    task.on_complete()
                except Exception as e:
                    self.logger.error(f"Error in animation completion: {e}", exc_info=True)
