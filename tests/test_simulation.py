"""
Test suite for the per-frame simulation driver.

Tests cover:
- Clock, orbit and spin stepping per frame
- Snapshots and orbit highlighting
- Commands refreshing positions immediately
- Run recording through RunLogger
"""

import csv
import math

import numpy as np
import pytest

from solar_sim.core.camera import ControllerState
from solar_sim.core.logging_utils import RunLogger
from solar_sim.core.model import BodyKind, SimState
from solar_sim.core.simulation import Simulation


FRAME_DT = 1.0 / 60.0


@pytest.fixture
def sim(registry):
    return Simulation(registry)


class TestAdvance:
    def test_time_moves_by_fixed_step(self, sim):
        snapshot = sim.advance(FRAME_DT)
        assert snapshot.simulated_time == pytest.approx(0.01)
        assert snapshot.frame_index == 1
        assert sim.advance(0.5).simulated_time == pytest.approx(0.02)

    def test_positions_follow_time(self, sim, registry):
        for _ in range(100):
            sim.advance(FRAME_DT)
        angle = 2.0 * math.pi * 1.0 / 365.25
        assert sim.position_of("Earth") == pytest.approx([800.0 * math.cos(angle), 0.0, 800.0 * math.sin(angle)])

    def test_paused_frames_freeze_bodies(self, sim):
        sim.advance(FRAME_DT)
        sim.toggle_playing()
        earth = sim.position_of("Earth")
        spin = sim.rotation_of("Earth")
        for _ in range(10):
            snapshot = sim.advance(FRAME_DT)
        assert snapshot.is_playing is False
        assert sim.position_of("Earth") == pytest.approx(earth)
        assert sim.rotation_of("Earth") == spin

    def test_rotation_per_played_frame(self, sim):
        for _ in range(5):
            sim.advance(FRAME_DT)
        assert sim.rotation_of("Earth") == pytest.approx(5 * 2.0 * math.pi / 1000.0)
        assert sim.rotation_of("Sun") == pytest.approx(5 * 2.0 * math.pi / 25_000.0)

    def test_unknown_body(self, sim):
        assert sim.position_of("Pluto") is None
        assert sim.rotation_of("Pluto") is None

    def test_position_copies(self, sim):
        sim.position_of("Earth")[0] = -1.0
        assert sim.position_of("Earth")[0] == pytest.approx(800.0)


class TestSnapshot:
    def test_contents(self, sim):
        sim.pick("Moon")
        snapshot = sim.advance(FRAME_DT)
        assert [b.name for b in snapshot.bodies] == ["Sun", "Earth", "Moon", "Mars"]
        assert snapshot.selected == "Moon"
        assert snapshot.following is True
        assert snapshot.body("Moon").is_selected is True
        assert snapshot.body("Earth").is_selected is False
        assert snapshot.body("Moon").kind is BodyKind.MOON
        assert snapshot.body("Pluto") is None

    @pytest.mark.parametrize(
        "name, expected",
        [("Moon", "Earth"), ("Mars", "Mars"), ("Sun", None), (None, None)],
    )
    def test_highlighted_orbit(self, sim, name, expected):
        sim.pick(name)
        assert sim.snapshot().highlighted_orbit == expected

    def test_body_info(self, sim):
        assert sim.body_info() is None
        sim.select("Mars")
        info = sim.body_info()
        assert info.name == "Mars"
        assert info.kind is BodyKind.PLANET
        assert sim.body_info("Sun").kind is BodyKind.STAR


class TestCommands:
    def test_follow_tracks_moving_planet(self, sim):
        sim.pick("Earth")
        for _ in range(240):
            sim.advance(FRAME_DT)
        assert sim.mode is ControllerState.FOLLOWING
        lag = float(np.linalg.norm(sim.camera.target - sim.position_of("Earth")))
        assert lag < 2.0

    def test_follow_converges_while_paused(self, sim):
        sim.pick("Mars")
        sim.toggle_playing()
        for _ in range(300):
            sim.advance(FRAME_DT)
        assert sim.camera.target == pytest.approx(sim.position_of("Mars"))

    def test_set_time_refreshes_positions(self, sim):
        sim.set_time(365.25 / 4.0)
        assert sim.position_of("Earth") == pytest.approx([0.0, 0.0, 800.0], abs=1e-9)

    @pytest.mark.parametrize("playing", [True, False])
    def test_set_time_keeps_play_state(self, registry, playing):
        sim = Simulation(registry, SimState(is_playing=playing))
        sim.set_time(1000.0)
        assert sim.state.is_playing is playing

    def test_non_finite_time_keeps_positions(self, sim):
        sim.set_time(100.0)
        earth = sim.position_of("Earth")
        assert sim.set_time(float("nan")) is False
        assert sim.set_time(float("inf")) is False
        assert sim.state.simulated_time == 100.0
        assert sim.position_of("Earth") == pytest.approx(earth)
        assert np.all(np.isfinite(sim.advance(FRAME_DT).body("Moon").position))

    def test_reset(self, sim):
        sim.pick("Earth")
        sim.advance(FRAME_DT)
        sim.reset()
        assert sim.mode is ControllerState.IDLE
        assert sim.snapshot().highlighted_orbit is None

    def test_stop_following(self, sim):
        sim.pick("Earth")
        sim.stop_following()
        assert sim.mode is ControllerState.IDLE

    def test_rates(self, sim):
        assert sim.set_rate(0.0) == 1.0
        assert sim.set_rate_from_slider(100.0) == pytest.approx(365.25)
        assert sim.advance(FRAME_DT).rate == pytest.approx(365.25)


class TestRecording:
    def read_rows(self, path):
        with path.open(newline="") as fh:
            return list(csv.DictReader(fh))

    def test_positions_and_events_are_logged(self, registry, tmp_path):
        with RunLogger(tmp_path, run_id="sim") as logger:
            sim = Simulation(registry, logger=logger)
            logger.write_meta(sim.recording_meta())
            sim.pick("Earth")
            for _ in range(31):
                sim.advance(FRAME_DT)
            sim.set_rate(10.0)

        rows = self.read_rows(logger.timeseries_path)
        # frames 0 and 30, four bodies each
        assert len(rows) == 8
        assert [row["body"] for row in rows[:4]] == ["Sun", "Earth", "Moon", "Mars"]
        assert float(rows[1]["x"]) == pytest.approx(800.0 * math.cos(2.0 * math.pi * 0.01 / 365.25))

        events = self.read_rows(logger.events_path)
        assert [event["type"] for event in events] == ["pick", "set_rate"]
        assert events[0]["body"] == "Earth"
        assert '"rate": 10.0' in events[1]["details"]

    def test_stop_is_logged_only_with_a_selection(self, registry, tmp_path):
        with RunLogger(tmp_path, run_id="stop") as logger:
            sim = Simulation(registry, logger=logger)
            sim.stop_following()
            sim.pick("Mars")
            sim.stop_following()
            sim.stop_following()

        events = self.read_rows(logger.events_path)
        assert [event["type"] for event in events] == ["pick", "stop"]
        assert events[1]["body"] == "Mars"

    def test_recording_meta(self, sim):
        meta = sim.recording_meta()
        assert meta["bodies"]["Moon"]["parent"] == "Earth"
        assert meta["bodies"]["Moon"]["orbit_radius"] == 36.0
        assert meta["time_step"] == 0.01
