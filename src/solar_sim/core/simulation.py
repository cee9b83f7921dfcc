"""Per-frame stepping of the solar system: clock, orbits, spin and camera."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

import numpy as np

from .camera import CameraController, CameraFrame, ControllerState
from .config import CAMERA_CFG, CameraCfg
from .formatting import BodyInfo, describe_body
from .logging_utils import RunLogger
from .model import BodyKind, SimState
from .orbits import rotation_increment, world_positions
from .registry import BodyRegistry
from .timekeeping import SimulationClock


@dataclass(frozen=True)
class BodyFrame:
    name: str
    kind: BodyKind
    position: np.ndarray
    rotation_angle: float
    is_selected: bool


@dataclass(frozen=True)
class FrameSnapshot:
    """Everything the presentation layer needs to draw one frame."""

    frame_index: int
    simulated_time: float
    is_playing: bool
    rate: float
    bodies: tuple[BodyFrame, ...]
    camera: CameraFrame
    selected: str | None
    following: bool
    highlighted_orbit: str | None

    def body(self, name: str) -> BodyFrame | None:
        for body in self.bodies:
            if body.name == name:
                return body
        return None


class Simulation:
    """Owns the shared :class:`SimState` and advances it once per frame."""

    def __init__(
        self,
        registry: BodyRegistry,
        state: SimState | None = None,
        *,
        camera_cfg: CameraCfg = CAMERA_CFG,
        logger: RunLogger | None = None,
    ) -> None:
        self.registry = registry
        self.cfg = registry.cfg
        self.state = state if state is not None else SimState(rate=self.cfg.default_rate)
        self.clock = SimulationClock(self.state, self.cfg)
        self.logger = logger
        self._rotation = {body.name: 0.0 for body in registry.all_bodies()}
        self._spin = {
            body.name: rotation_increment(body.rotation_period_days, cfg=self.cfg)
            for body in registry.all_bodies()
        }
        self._positions: dict[str, np.ndarray] = {}
        self._refresh_positions()
        self.camera = CameraController(registry, self.state, self.position_of, camera_cfg)
        self._frame_index = 0

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def position_of(self, name: str) -> np.ndarray | None:
        position = self._positions.get(name)
        if position is None:
            return None
        return position.copy()

    def rotation_of(self, name: str) -> float | None:
        return self._rotation.get(name)

    @property
    def mode(self) -> ControllerState:
        return self.camera.mode

    def highlighted_orbit(self) -> str | None:
        ref = self.registry.resolve(self.state.selected_body)
        if ref is None or ref.kind is BodyKind.STAR:
            return None
        if ref.kind is BodyKind.MOON:
            return ref.parent
        return ref.name

    def body_info(self, name: str | None = None) -> BodyInfo | None:
        return describe_body(self.registry, name if name is not None else self.state.selected_body)

    # ------------------------------------------------------------------
    # Frame step
    # ------------------------------------------------------------------
    def advance(self, frame_dt: float) -> FrameSnapshot:
        """Run one frame and return what should be drawn.

        *frame_dt* is the measured wall-clock frame time; it only paces
        camera transitions; simulated time moves by the fixed step.
        """

        if self.clock.tick() > 0.0:
            for name, spin in self._spin.items():
                self._rotation[name] += spin
            self._refresh_positions()
        self.camera.update(frame_dt)
        if self.logger is not None and self._frame_index % max(1, self.cfg.log_every_frames) == 0:
            self._log_positions()
        self._frame_index += 1
        return self.snapshot()

    def snapshot(self) -> FrameSnapshot:
        selected = self.state.selected_body
        bodies = tuple(
            BodyFrame(
                name=body.name,
                kind=self.registry.resolve(body.name).kind,
                position=self._positions[body.name].copy(),
                rotation_angle=self._rotation[body.name],
                is_selected=body.name == selected,
            )
            for body in self.registry.all_bodies()
        )
        return FrameSnapshot(
            frame_index=self._frame_index,
            simulated_time=self.state.simulated_time,
            is_playing=self.state.is_playing,
            rate=self.state.rate,
            bodies=bodies,
            camera=self.camera.frame(),
            selected=selected,
            following=self.state.is_following,
            highlighted_orbit=self.highlighted_orbit(),
        )

    def _refresh_positions(self) -> None:
        self._positions = world_positions(
            self.registry, self.state.simulated_time, spread=self.cfg.spread_orbits
        )

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------
    def pick(self, name: str | None) -> bool:
        accepted = self.camera.pick(name)
        if accepted:
            self._log_event("pick", name)
        return accepted

    def select(self, name: str | None) -> bool:
        accepted = self.camera.select(name)
        if accepted:
            self._log_event("select", name)
        return accepted

    def focus(self, name: str | None) -> bool:
        accepted = self.camera.focus(name)
        if accepted:
            self._log_event("focus", name)
        return accepted

    def stop_following(self) -> None:
        previous = self.state.selected_body
        self.camera.stop_following()
        if previous is not None:
            self._log_event("stop", previous)

    def reset(self) -> None:
        self.camera.reset()
        self._log_event("reset")

    def set_rate(self, rate: float | None) -> float:
        applied = self.clock.set_rate(rate)
        self._log_event("set_rate", details={"rate": applied})
        return applied

    def set_rate_from_slider(self, position: float, curve: str = "linear") -> float:
        applied = self.clock.set_rate_from_slider(position, curve)
        self._log_event("set_rate", details={"rate": applied, "slider": position, "curve": curve})
        return applied

    def set_time(self, simulated_time: float) -> bool:
        if not self.clock.set_time(simulated_time):
            return False
        self._refresh_positions()
        self._log_event("set_time")
        return True

    def set_date(self, moment: datetime) -> None:
        self.clock.set_date(moment)
        self._refresh_positions()
        self._log_event("set_time", details={"date": moment.isoformat()})

    def set_now(self) -> None:
        self.clock.set_now()
        self._refresh_positions()
        self._log_event("set_time")

    def toggle_playing(self) -> bool:
        playing = self.clock.toggle()
        self._log_event("play" if playing else "pause")
        return playing

    # ------------------------------------------------------------------
    # Recording
    # ------------------------------------------------------------------
    def _log_event(self, event_type: str, body: str | None = None, details: dict | None = None) -> None:
        if self.logger is None:
            return
        self.logger.log_event(self.state.simulated_time, event_type, body, details)

    def _log_positions(self) -> None:
        assert self.logger is not None
        t = self.state.simulated_time
        for body in self.registry.all_bodies():
            x, y, z = (float(v) for v in self._positions[body.name])
            self.logger.log_ts([t, body.name, x, y, z, self._rotation[body.name]])

    def recording_meta(self) -> dict:
        return {
            "start_time": self.state.simulated_time,
            "rate": self.state.rate,
            "time_step": self.cfg.time_step,
            "spread_orbits": self.cfg.spread_orbits,
            "bodies": {
                body.name: {
                    "parent": body.parent,
                    "orbit_period_days": body.orbit_period_days,
                    "rotation_period_days": body.rotation_period_days,
                    "orbit_radius": self.registry.display_orbit_radius(body.name)
                    if self.cfg.spread_orbits
                    else self.registry.orbit_radius(body.name),
                }
                for body in self.registry.all_bodies()
            },
        }


__all__ = ["BodyFrame", "FrameSnapshot", "Simulation"]
