"""Tests for guided camera tours."""

import pytest

from mapcn.geo.models import GeoPoint

STOPS = [GeoPoint(51.5, -0.1), GeoPoint(48.9, 2.4), GeoPoint(52.5, 13.4)]


class TestTour:
    """Test tour sequencing and cancellation."""

    def test_empty_tour_finishes_immediately(self, ready_controller) -> None:
        """No stops: done at once, no stop callbacks."""
        reached: list[int] = []
        tour = ready_controller.start_tour([], on_stop_reached=lambda i, p: reached.append(i))
        done: list[bool] = []
        tour.add_done_callback(lambda t: done.append(t.cancelled))

        assert tour.is_done
        assert reached == []
        assert done == [False]

    def test_visits_stops_in_order(self, ready_controller, surface, clock) -> None:
        """Each stop is reported once, in order, after flight and pause."""
        reached: list[tuple[int, GeoPoint]] = []
        tour = ready_controller.start_tour(
            STOPS,
            stop_duration=0.5,
            fly_duration=1.0,
            on_stop_reached=lambda i, p: reached.append((i, p)),
        )

        clock.advance(1.2)
        assert reached == []
        assert surface.camera.center == STOPS[0]

        clock.advance(0.4)
        assert reached == [(0, STOPS[0])]

        clock.advance(3.3)
        assert reached == list(enumerate(STOPS))
        assert tour.is_done
        assert tour.stops_reached == 3
        assert not tour.cancelled

    def test_tour_uses_requested_zoom(self, ready_controller, surface, clock) -> None:
        ready_controller.start_tour(STOPS[:1], zoom=8.0, stop_duration=0.1, fly_duration=0.5)
        clock.advance(1.0)
        assert surface.camera.zoom == pytest.approx(8.0)

    def test_cancel_stops_further_callbacks(self, ready_controller, clock) -> None:
        """A cancelled tour reports no more stops."""
        reached: list[int] = []
        tour = ready_controller.start_tour(
            STOPS, stop_duration=0.5, fly_duration=1.0, on_stop_reached=lambda i, p: reached.append(i)
        )
        done: list[bool] = []
        tour.add_done_callback(lambda t: done.append(t.cancelled))

        clock.advance(1.6)
        tour.cancel()
        clock.advance(10.0)

        assert reached == [0]
        assert done == [True]
        assert tour.is_done

    def test_failing_callback_does_not_break_tour(self, ready_controller, clock) -> None:
        """Errors from the stop callback are logged and the tour goes on."""
        def explode(index: int, stop: GeoPoint) -> None:
            raise ValueError("boom")

        tour = ready_controller.start_tour(
            STOPS, stop_duration=0.1, fly_duration=0.2, on_stop_reached=explode
        )
        clock.advance(2.0)
        assert tour.is_done
        assert tour.stops_reached == 3

    def test_dispose_cancels_running_tour(self, ready_controller, clock) -> None:
        tour = ready_controller.start_tour(STOPS)
        ready_controller.dispose()
        assert tour.cancelled
        clock.advance(20.0)
        assert tour.stops_reached == 0
