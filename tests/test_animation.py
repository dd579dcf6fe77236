"""Tests for easing curves, the manual clock and the animation engine."""

import pytest

from mapcn.camera.animation import (
    AnimationChannel,
    AnimationEngine,
    Curves,
    ManualFrameClock,
)
from mapcn.geo.models import CameraState, GeoPoint

START = CameraState(GeoPoint(0.0, 0.0), 3.0)
END = CameraState(GeoPoint(10.0, 20.0), 7.0)


class Recorder:
    """Collects every applied frame."""

    def __init__(self):
        self.frames: list[tuple[CameraState, AnimationChannel]] = []

    def __call__(self, state: CameraState, channel: AnimationChannel) -> None:
        self.frames.append((state, channel))

    @property
    def last(self) -> CameraState:
        return self.frames[-1][0]


class TestCurves:
    """Test easing curves."""

    @pytest.mark.parametrize(
        "curve",
        [
            Curves.linear,
            Curves.ease_in_cubic,
            Curves.ease_out_cubic,
            Curves.ease_in_out_cubic,
            Curves.ease_out_back,
            Curves.fast_out_slow_in,
        ],
    )
    def test_fixed_end_points(self, curve) -> None:
        """Every curve starts at 0 and ends at 1."""
        assert curve(0.0) == pytest.approx(0.0, abs=1e-9)
        assert curve(1.0) == pytest.approx(1.0, abs=1e-9)

    def test_ease_in_out_is_symmetric(self) -> None:
        """The in-out curve passes through its midpoint."""
        assert Curves.ease_in_out_cubic(0.5) == pytest.approx(0.5)

    def test_ease_out_back_overshoots(self) -> None:
        """ease_out_back goes past 1 before settling."""
        assert max(Curves.ease_out_back(i / 100) for i in range(101)) > 1.0


class TestManualFrameClock:
    """Test the deterministic clock."""

    def test_advance_runs_frames(self) -> None:
        """One frame runs per step."""
        clock = ManualFrameClock()
        seen: list[float] = []
        clock.add_frame_callback(seen.append)
        clock.advance(0.1, step=0.05)
        assert seen == pytest.approx([0.05, 0.1])
        assert clock.frames == 2

    def test_rejects_non_positive_step(self) -> None:
        """A zero step would never finish."""
        with pytest.raises(ValueError):
            ManualFrameClock().advance(1.0, step=0.0)

    def test_timers_fire_once_and_can_be_cancelled(self) -> None:
        """Timers fire when due; cancelled timers never fire."""
        clock = ManualFrameClock()
        fired: list[str] = []
        clock.call_later(0.5, lambda: fired.append("a"))
        cancelled = clock.call_later(0.5, lambda: fired.append("b"))
        cancelled.cancel()

        clock.advance(0.4)
        assert fired == []
        clock.advance(0.2)
        assert fired == ["a"]
        clock.advance(1.0)
        assert fired == ["a"]


class TestAnimationEngine:
    """Test channel-based camera animation."""

    def test_interpolates_over_duration(self) -> None:
        """Linear animation is halfway at half the duration."""
        clock = ManualFrameClock()
        recorder = Recorder()
        engine = AnimationEngine(clock, recorder)
        engine.start(AnimationChannel.CAMERA, START, END, 1.0, Curves.linear)

        clock.advance(0.5)
        assert recorder.last.zoom == pytest.approx(5.0, abs=0.05)
        assert recorder.last.center.latitude == pytest.approx(5.0, abs=0.1)

        clock.advance(0.6)
        assert recorder.last == END
        assert not engine.is_animating()
        assert clock.callback_count == 0

    def test_new_task_replaces_running_one(self) -> None:
        """Only the latest task on a channel keeps running."""
        clock = ManualFrameClock()
        recorder = Recorder()
        engine = AnimationEngine(clock, recorder)
        other = CameraState(GeoPoint(-10.0, -20.0), 4.0)

        engine.start(AnimationChannel.CAMERA, START, END, 1.0)
        clock.advance(0.2)
        engine.start(AnimationChannel.CAMERA, recorder.last, other, 1.0)
        assert clock.callback_count == 1

        clock.advance(1.1)
        assert recorder.last == other

    def test_channels_are_independent(self) -> None:
        """A rotation task does not cancel a camera task."""
        clock = ManualFrameClock()
        recorder = Recorder()
        engine = AnimationEngine(clock, recorder)

        engine.start(AnimationChannel.CAMERA, START, END, 1.0)
        engine.start(AnimationChannel.ROTATION, START, START.with_values(rotation=90.0), 0.5)
        assert engine.is_animating(AnimationChannel.CAMERA)
        assert engine.is_animating(AnimationChannel.ROTATION)

        clock.advance(1.1)
        channels = {channel for _, channel in recorder.frames}
        assert channels == {AnimationChannel.CAMERA, AnimationChannel.ROTATION}
        assert not engine.is_animating()

    def test_cancel_keeps_last_applied_state(self) -> None:
        """Cancelling does not jump to the end state."""
        clock = ManualFrameClock()
        recorder = Recorder()
        engine = AnimationEngine(clock, recorder)
        engine.start(AnimationChannel.CAMERA, START, END, 1.0)
        clock.advance(0.3)
        applied = len(recorder.frames)

        assert engine.cancel(AnimationChannel.CAMERA)
        assert not engine.cancel(AnimationChannel.CAMERA)
        clock.advance(1.0)
        assert len(recorder.frames) == applied
        assert recorder.last != END

    def test_zero_duration_applies_end_on_next_frame(self) -> None:
        """A task without duration finishes on its first frame."""
        clock = ManualFrameClock()
        recorder = Recorder()
        engine = AnimationEngine(clock, recorder)
        engine.start(AnimationChannel.CAMERA, START, END, 0.0)
        clock.run_frame()
        assert recorder.frames == [(END, AnimationChannel.CAMERA)]

    def test_on_complete_called_once(self) -> None:
        """Completion fires exactly once."""
        clock = ManualFrameClock()
        engine = AnimationEngine(clock, Recorder())
        completed: list[bool] = []
        engine.start(
            AnimationChannel.CAMERA, START, END, 0.2, on_complete=lambda: completed.append(True)
        )
        clock.advance(1.0)
        assert completed == [True]

    def test_failing_apply_does_not_stop_animation(self) -> None:
        """Apply errors drop the frame but the task still completes."""
        clock = ManualFrameClock()
        completed: list[bool] = []

        def apply(state: CameraState, channel: AnimationChannel) -> None:
            raise RuntimeError("surface gone")

        engine = AnimationEngine(clock, apply)
        engine.start(
            AnimationChannel.CAMERA, START, END, 0.2, on_complete=lambda: completed.append(True)
        )
        clock.advance(0.5)
        assert completed == [True]
        assert not engine.is_animating()

    def test_dispose_refuses_new_tasks(self) -> None:
        """A disposed engine stops its tasks and ignores new ones."""
        clock = ManualFrameClock()
        engine = AnimationEngine(clock, Recorder())
        engine.start(AnimationChannel.CAMERA, START, END, 1.0)
        engine.dispose()

        assert engine.is_disposed
        assert clock.callback_count == 0
        assert engine.start(AnimationChannel.CAMERA, START, END, 1.0) is None
