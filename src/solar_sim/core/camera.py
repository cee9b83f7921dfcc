"""Selection state machine and camera targeting.

The controller owns the camera's look-at target and position. Focus moves
are eased over a fixed duration and advanced a frame at a time; once a
body is followed its live position is tracked with exponential smoothing.
User orbit, zoom and pan stay available in every state.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable

import numpy as np

from .config import CAMERA_CFG, CameraCfg
from .model import BodyKind, SimState
from .registry import BodyRegistry


Locator = Callable[[str], "np.ndarray | None"]

WORLD_UP = np.array([0.0, 1.0, 0.0])


def _clamp(value: float, minimum: float, maximum: float) -> float:
    return max(minimum, min(maximum, value))


def ease_in_out(t: float) -> float:
    """Quadratic ease-in-out on ``[0, 1]``."""

    t = _clamp(t, 0.0, 1.0)
    if t < 0.5:
        return 2.0 * t * t
    return 1.0 - ((-2.0 * t + 2.0) ** 2) / 2.0


def lerp(start: np.ndarray, end: np.ndarray, amount: float) -> np.ndarray:
    return start + (end - start) * amount


class ControllerState(Enum):
    IDLE = "idle"
    SELECTED = "selected"
    FOLLOWING = "following"


@dataclass(frozen=True)
class CameraFrame:
    target: np.ndarray
    position: np.ndarray

    @property
    def distance(self) -> float:
        return float(np.linalg.norm(self.position - self.target))


@dataclass
class CameraTransition:
    """An in-flight focus move towards a body that may still be moving."""

    body: str
    start_target: np.ndarray
    start_position: np.ndarray
    view_offset: np.ndarray
    duration: float
    elapsed: float = 0.0

    @property
    def progress(self) -> float:
        if self.duration <= 0.0:
            return 1.0
        return _clamp(self.elapsed / self.duration, 0.0, 1.0)

    @property
    def finished(self) -> bool:
        return self.progress >= 1.0

    def advance(self, dt: float) -> float:
        if dt > 0.0:
            self.elapsed += dt
        return ease_in_out(self.progress)


class CameraController:
    """Tracks the selected body and drives the camera.

    *locate* returns the current world position of a body by name, or
    ``None`` when the name no longer resolves.
    """

    def __init__(
        self,
        registry: BodyRegistry,
        state: SimState,
        locate: Locator,
        cfg: CameraCfg = CAMERA_CFG,
    ) -> None:
        self._registry = registry
        self._state = state
        self._locate = locate
        self._cfg = cfg
        self._target = np.zeros(3, dtype=float)
        self._position = np.zeros(3, dtype=float)
        self._transition: CameraTransition | None = None
        self.auto_rotate = False
        self._place_overview()

    @property
    def cfg(self) -> CameraCfg:
        return self._cfg

    @property
    def target(self) -> np.ndarray:
        return self._target

    @property
    def position(self) -> np.ndarray:
        return self._position

    @property
    def transition(self) -> CameraTransition | None:
        return self._transition

    @property
    def mode(self) -> ControllerState:
        if self._state.selected_body is None:
            return ControllerState.IDLE
        if self._state.is_following:
            return ControllerState.FOLLOWING
        return ControllerState.SELECTED

    def frame(self) -> CameraFrame:
        return CameraFrame(target=self._target.copy(), position=self._position.copy())

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------
    def select(self, name: str | None) -> bool:
        """Mark *name* selected without moving the camera."""

        if name is None or self._registry.get_body(name) is None:
            return False
        self._state.select(name, follow=False)
        return True

    def pick(self, name: str | None) -> bool:
        """Handle a pointer pick; a miss or an unknown name leaves everything as it was."""

        if not self.select(name):
            return False
        return self.focus(name)

    def view_distance(self, name: str) -> float:
        body = self._registry.get_body(name)
        if body is None:
            return 0.0
        ref = self._registry.resolve(name)
        if ref is not None and ref.kind is BodyKind.STAR:
            return body.radius * self._cfg.sun_view_multiplier
        return body.radius * self._cfg.body_view_multiplier

    def focus(self, name: str | None) -> bool:
        """Ease the camera towards *name* and start following it.

        A focus already in flight is replaced, never queued.
        """

        if name is None or self._registry.get_body(name) is None:
            return False
        if self._locate(name) is None:
            return False
        distance = self.view_distance(name)
        self._state.select(name, follow=True)
        self._transition = CameraTransition(
            body=name,
            start_target=self._target.copy(),
            start_position=self._position.copy(),
            view_offset=np.array([distance, distance / 2.0, distance], dtype=float),
            duration=self._cfg.focus_duration,
        )
        return True

    def stop_following(self) -> None:
        """Drop the selection and leave the camera where it is."""

        self._transition = None
        self._state.clear_selection()

    def reset(self) -> None:
        self._transition = None
        self._state.clear_selection()
        self._place_overview()

    def overview_distance(self) -> float:
        farthest = max(self._registry.max_orbit_radius(), self._registry.cfg.min_orbit_display)
        return farthest * self._cfg.overview_multiplier

    def _overview_offset(self) -> np.ndarray:
        distance = self.overview_distance()
        return np.array([distance, distance / 2.0, distance], dtype=float)

    def _place_overview(self) -> None:
        self._target[:] = 0.0
        self._position[:] = self._overview_offset()

    @property
    def max_distance(self) -> float:
        """Zoom-out limit, always leaving room beyond the overview placement."""

        overview = float(np.linalg.norm(self._overview_offset()))
        return max(self._cfg.max_distance, overview * 1.5)

    # ------------------------------------------------------------------
    # Per-frame update
    # ------------------------------------------------------------------
    def update(self, dt: float) -> None:
        if self.auto_rotate and dt > 0.0:
            self.rotate(self._cfg.auto_rotate_speed * dt, 0.0)
        if self._transition is not None:
            self._step_transition(dt)
        elif self._state.is_following:
            self.follow_tick()

    def _step_transition(self, dt: float) -> None:
        transition = self._transition
        assert transition is not None
        body_position = self._locate(transition.body)
        if body_position is None:
            self.stop_following()
            return
        amount = transition.advance(dt)
        end_position = body_position + transition.view_offset
        self._target[:] = lerp(transition.start_target, body_position, amount)
        self._position[:] = lerp(transition.start_position, end_position, amount)
        if transition.finished:
            self._transition = None

    def follow_tick(self) -> None:
        """Re-aim at the followed body's live position."""

        name = self._state.selected_body
        if name is None or not self._state.is_following:
            return
        body_position = self._locate(name)
        if body_position is None:
            self.stop_following()
            return
        new_target = lerp(self._target, body_position, self._cfg.follow_smoothing)
        if self._cfg.follow_mode == "offset":
            self._position += new_target - self._target
        self._target[:] = new_target

    # ------------------------------------------------------------------
    # User input
    # ------------------------------------------------------------------
    def _offset(self) -> np.ndarray:
        offset = self._position - self._target
        if float(np.linalg.norm(offset)) < 1e-9:
            offset = np.array([0.0, 0.0, self._cfg.min_distance])
        return offset

    def rotate(self, d_azimuth: float, d_polar: float) -> None:
        """Orbit the camera around the look-at target."""

        offset = self._offset()
        radius = float(np.linalg.norm(offset))
        polar = math.acos(_clamp(offset[1] / radius, -1.0, 1.0))
        azimuth = math.atan2(offset[2], offset[0])
        polar = _clamp(polar + d_polar, self._cfg.min_polar, math.pi - self._cfg.min_polar)
        azimuth += d_azimuth
        self._position[:] = self._target + radius * np.array(
            [
                math.sin(polar) * math.cos(azimuth),
                math.cos(polar),
                math.sin(polar) * math.sin(azimuth),
            ]
        )

    def zoom(self, factor: float) -> None:
        """Move towards the target for ``factor > 1``, away for ``factor < 1``."""

        if factor <= 0.0:
            return
        offset = self._offset()
        radius = float(np.linalg.norm(offset))
        new_radius = _clamp(radius / factor, self._cfg.min_distance, self.max_distance)
        self._position[:] = self._target + offset * (new_radius / radius)

    def pan(self, dx: float, dy: float) -> None:
        """Shift target and camera together along the view plane (world units)."""

        forward = -self._offset()
        forward /= np.linalg.norm(forward)
        right = np.cross(forward, WORLD_UP)
        norm = float(np.linalg.norm(right))
        if norm < 1e-9:
            right = np.array([1.0, 0.0, 0.0])
        else:
            right /= norm
        up = np.cross(right, forward)
        delta = right * dx + up * dy
        self._target += delta
        self._position += delta


__all__ = [
    "CameraController",
    "CameraFrame",
    "CameraTransition",
    "ControllerState",
    "ease_in_out",
    "lerp",
]
