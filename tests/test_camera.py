"""
Test suite for the selection and camera controller.

Tests cover:
- State transitions between idle, selected and following
- Eased focus transitions and their cancellation
- Exponential follow smoothing against a moving body
- Reset, stop-following and the pick no-op cases
- Orbit, zoom and pan input
"""

import numpy as np
import pytest

from solar_sim.core.camera import CameraController, ControllerState, ease_in_out, lerp
from solar_sim.core.config import CameraCfg
from solar_sim.core.model import SimState


class Locations:
    """Mutable stand-in for the simulation's live body positions."""

    def __init__(self, **positions):
        self.positions = {name: np.asarray(p, dtype=float) for name, p in positions.items()}

    def __call__(self, name):
        position = self.positions.get(name)
        return None if position is None else position.copy()


@pytest.fixture
def locations():
    return Locations(
        Sun=(0.0, 0.0, 0.0),
        Earth=(800.0, 0.0, 0.0),
        Moon=(836.0, 0.0, 0.0),
        Mars=(0.0, 0.0, 1200.0),
    )


@pytest.fixture
def state():
    return SimState()


@pytest.fixture
def controller(registry, state, locations):
    return CameraController(registry, state, locations)


def offset_of(controller):
    return controller.position - controller.target


def finish_transition(controller, step=0.1):
    for _ in range(1000):
        if controller.transition is None:
            return
        controller.update(step)
    raise AssertionError("transition never finished")


class TestInitialState:
    def test_starts_idle_at_overview(self, controller, state):
        assert controller.mode is ControllerState.IDLE
        assert state.selected_body is None
        # max(1200, 800) * 3.5
        assert controller.target == pytest.approx([0.0, 0.0, 0.0])
        assert controller.position == pytest.approx([4200.0, 2100.0, 4200.0])

    def test_overview_distance_scales_with_farthest_orbit(self, registry, state, locations):
        cfg = CameraCfg(overview_multiplier=1.0)
        small = CameraController(registry, state, locations, cfg)
        assert small.overview_distance() == 1200.0


class TestSelection:
    def test_select_does_not_move_camera(self, controller, state):
        before = controller.frame()
        assert controller.select("Earth") is True
        assert controller.mode is ControllerState.SELECTED
        assert state.is_following is False
        controller.update(0.5)
        assert controller.position == pytest.approx(before.position)
        assert controller.target == pytest.approx(before.target)

    def test_pick_focuses_and_follows(self, controller, state):
        assert controller.pick("Earth") is True
        assert state.selected_body == "Earth"
        assert controller.mode is ControllerState.FOLLOWING
        assert controller.transition is not None
        assert controller.transition.body == "Earth"

    @pytest.mark.parametrize("name", [None, "Pluto"])
    def test_pick_miss_is_a_no_op(self, controller, state, name):
        controller.pick("Mars")
        finish_transition(controller)
        before = controller.frame()
        assert controller.pick(name) is False
        assert state.selected_body == "Mars"
        assert state.is_following is True
        assert controller.position == pytest.approx(before.position)

    def test_pick_miss_while_idle(self, controller, state):
        assert controller.pick(None) is False
        assert controller.mode is ControllerState.IDLE
        assert controller.transition is None

    def test_focus_unknown(self, controller):
        assert controller.focus("Pluto") is False
        assert controller.transition is None

    def test_focus_unlocatable_body(self, controller, locations):
        del locations.positions["Mars"]
        assert controller.focus("Mars") is False
        assert controller.mode is ControllerState.IDLE


class TestFocusTransition:
    def test_view_distance(self, controller):
        assert controller.view_distance("Sun") == 10.0 * 20.0
        assert controller.view_distance("Earth") == 12.0 * 15.0
        assert controller.view_distance("Pluto") == 0.0

    def test_transition_ends_on_body_with_view_offset(self, controller, locations):
        controller.pick("Earth")
        finish_transition(controller)
        earth = locations.positions["Earth"]
        assert controller.target == pytest.approx(earth)
        assert controller.position == pytest.approx(earth + np.array([180.0, 90.0, 180.0]))
        assert controller.mode is ControllerState.FOLLOWING

    def test_halfway_is_halfway(self, controller, locations):
        start = controller.frame()
        controller.pick("Mars")
        controller.update(0.5)
        mars = locations.positions["Mars"]
        assert controller.transition.progress == pytest.approx(0.5)
        assert controller.target == pytest.approx((start.target + mars) / 2.0)

    def test_transition_tracks_moving_body(self, controller, locations):
        controller.pick("Earth")
        controller.update(0.5)
        locations.positions["Earth"] = np.array([0.0, 0.0, -800.0])
        finish_transition(controller)
        assert controller.target == pytest.approx([0.0, 0.0, -800.0])

    def test_new_focus_replaces_transition(self, controller, locations):
        controller.pick("Earth")
        controller.update(0.3)
        controller.pick("Mars")
        transition = controller.transition
        assert transition.body == "Mars"
        assert transition.elapsed == 0.0

        mars = locations.positions["Mars"]
        last_distance = float(np.linalg.norm(controller.target - mars))
        while controller.transition is not None:
            controller.update(0.05)
            distance = float(np.linalg.norm(controller.target - mars))
            assert distance <= last_distance + 1e-9
            last_distance = distance
        assert controller.target == pytest.approx(mars)
        assert controller.transition is None

    def test_ended_transition_never_snaps_back(self, controller, locations):
        controller.pick("Earth")
        controller.update(0.2)
        controller.pick("Mars")
        finish_transition(controller)
        for _ in range(20):
            controller.update(0.1)
        assert controller.target == pytest.approx(locations.positions["Mars"])


class TestFollow:
    def test_smoothing_factor(self, controller, locations):
        controller.pick("Earth")
        finish_transition(controller)
        old_target = controller.target.copy()
        locations.positions["Earth"] = np.array([790.0, 0.0, 100.0])
        controller.follow_tick()
        expected = old_target + (locations.positions["Earth"] - old_target) * 0.1
        assert controller.target == pytest.approx(expected)

    def test_offset_mode_keeps_relative_offset(self, controller, locations):
        controller.pick("Earth")
        finish_transition(controller)
        controller.rotate(0.7, -0.2)
        offset = offset_of(controller).copy()
        locations.positions["Earth"] = np.array([500.0, 0.0, 600.0])
        for _ in range(10):
            controller.update(1.0 / 60.0)
        assert offset_of(controller) == pytest.approx(offset)

    def test_converges_on_live_position(self, controller, locations):
        controller.pick("Earth")
        finish_transition(controller)
        locations.positions["Earth"] = np.array([-800.0, 0.0, 0.0])
        for _ in range(300):
            controller.update(1.0 / 60.0)
        assert controller.target == pytest.approx([-800.0, 0.0, 0.0], abs=1e-6)

    def test_look_at_mode_keeps_position(self, registry, state, locations):
        controller = CameraController(registry, state, locations, CameraCfg(follow_mode="look-at"))
        controller.pick("Earth")
        finish_transition(controller)
        position = controller.position.copy()
        locations.positions["Earth"] = np.array([700.0, 0.0, 50.0])
        controller.follow_tick()
        assert controller.position == pytest.approx(position)
        assert controller.target != pytest.approx(locations.positions["Earth"])

    def test_follow_tick_without_selection_is_a_no_op(self, controller):
        before = controller.frame()
        controller.follow_tick()
        assert controller.target == pytest.approx(before.target)

    def test_vanished_body_stops_following(self, controller, locations, state):
        controller.pick("Earth")
        finish_transition(controller)
        del locations.positions["Earth"]
        controller.update(0.1)
        assert controller.mode is ControllerState.IDLE
        assert state.selected_body is None


class TestStopAndReset:
    def test_stop_following_leaves_camera(self, controller, state):
        controller.pick("Earth")
        controller.update(0.4)
        before = controller.frame()
        controller.stop_following()
        assert controller.mode is ControllerState.IDLE
        assert controller.transition is None
        assert state.is_following is False
        controller.update(0.4)
        assert controller.position == pytest.approx(before.position)
        assert controller.target == pytest.approx(before.target)

    def test_reset_returns_to_overview(self, controller, state):
        controller.pick("Mars")
        controller.update(0.3)
        controller.reset()
        assert controller.mode is ControllerState.IDLE
        assert controller.transition is None
        assert controller.target == pytest.approx([0.0, 0.0, 0.0])
        assert controller.position == pytest.approx([4200.0, 2100.0, 4200.0])


class TestUserInput:
    def test_rotate_preserves_distance(self, controller):
        distance = controller.frame().distance
        controller.rotate(1.3, 0.4)
        assert controller.frame().distance == pytest.approx(distance)

    def test_rotate_clamps_at_pole(self, controller):
        controller.rotate(0.0, -10.0)
        offset = offset_of(controller)
        assert offset[1] < controller.frame().distance

    def test_zoom(self, controller):
        distance = controller.frame().distance
        controller.zoom(2.0)
        assert controller.frame().distance == pytest.approx(distance / 2.0)

    def test_zoom_is_clamped(self, controller):
        controller.zoom(1e12)
        assert controller.frame().distance == pytest.approx(10.0)
        controller.zoom(1e-12)
        assert controller.frame().distance == pytest.approx(500_000.0)

    def test_zoom_ignores_non_positive_factor(self, controller):
        before = controller.frame()
        controller.zoom(0.0)
        assert controller.position == pytest.approx(before.position)

    def test_zoom_out_from_overview_moves_away(self, solar_registry):
        """The full catalog's overview lies beyond the configured zoom-out limit."""
        controller = CameraController(solar_registry, SimState(), Locations(Sun=(0.0, 0.0, 0.0)))
        start = controller.frame().distance
        assert start > CameraCfg().max_distance
        controller.zoom(1.0 / 1.1)
        assert controller.frame().distance == pytest.approx(start * 1.1)
        assert controller.frame().distance <= controller.max_distance

    def test_zoom_is_monotonic_after_reset(self, solar_registry):
        state = SimState()
        controller = CameraController(solar_registry, state, Locations(Sun=(0.0, 0.0, 0.0)))
        controller.zoom(4.0)
        controller.reset()
        distance = controller.frame().distance
        for _ in range(10):
            controller.zoom(1.0 / 1.1)
            assert controller.frame().distance >= distance
            distance = controller.frame().distance
        controller.reset()
        start = controller.frame().distance
        controller.zoom(1.1)
        assert controller.frame().distance == pytest.approx(start / 1.1)

    def test_pan_moves_target_and_camera_together(self, controller):
        offset = offset_of(controller).copy()
        target = controller.target.copy()
        controller.pan(25.0, -10.0)
        assert offset_of(controller) == pytest.approx(offset)
        assert float(np.linalg.norm(controller.target - target)) == pytest.approx(np.hypot(25.0, 10.0))

    def test_auto_rotate(self, controller):
        before = controller.position.copy()
        distance = controller.frame().distance
        controller.auto_rotate = True
        controller.update(1.0)
        assert controller.position != pytest.approx(before)
        assert controller.frame().distance == pytest.approx(distance)


class TestEasing:
    def test_endpoints(self):
        assert ease_in_out(0.0) == 0.0
        assert ease_in_out(1.0) == 1.0
        assert ease_in_out(0.5) == pytest.approx(0.5)

    def test_clamped(self):
        assert ease_in_out(-1.0) == 0.0
        assert ease_in_out(3.0) == 1.0

    def test_monotonic(self):
        samples = [ease_in_out(i / 50.0) for i in range(51)]
        assert samples == sorted(samples)

    def test_lerp(self):
        assert lerp(np.zeros(3), np.array([10.0, 20.0, 30.0]), 0.25) == pytest.approx([2.5, 5.0, 7.5])
