from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable

import numpy as np

from solar_sim.core.camera import CameraFrame


@dataclass(frozen=True)
class ProjectedBody:
    name: str
    x: float
    y: float
    depth: float
    radius: float


class Projector:
    """Perspective projection from the camera frame to screen pixels."""

    def __init__(
        self,
        size: tuple[int, int],
        fov_deg: float,
        *,
        near: float = 0.1,
    ) -> None:
        self._size = size
        self._fov = math.radians(fov_deg)
        self._near = near
        self._eye = np.zeros(3, dtype=float)
        self._forward = np.array([0.0, 0.0, -1.0])
        self._right = np.array([1.0, 0.0, 0.0])
        self._up = np.array([0.0, 1.0, 0.0])

    @property
    def size(self) -> tuple[int, int]:
        return self._size

    def update_size(self, size: tuple[int, int]) -> None:
        self._size = size

    @property
    def focal_length(self) -> float:
        return (self._size[1] / 2.0) / math.tan(self._fov / 2.0)

    @property
    def forward(self) -> np.ndarray:
        return self._forward

    def look(self, camera: CameraFrame) -> None:
        forward = camera.target - camera.position
        length = float(np.linalg.norm(forward))
        if length < 1e-9:
            return
        forward = forward / length
        right = np.cross(forward, np.array([0.0, 1.0, 0.0]))
        norm = float(np.linalg.norm(right))
        if norm < 1e-9:
            right = np.array([1.0, 0.0, 0.0])
        else:
            right = right / norm
        self._eye = camera.position.astype(float).copy()
        self._forward = forward
        self._right = right
        self._up = np.cross(right, forward)

    def world_to_screen(self, point: np.ndarray) -> tuple[float, float, float] | None:
        """Screen ``(x, y, depth)`` of *point*, or ``None`` behind the near plane."""

        rel = np.asarray(point, dtype=float) - self._eye
        depth = float(rel @ self._forward)
        if depth <= self._near:
            return None
        f = self.focal_length
        width, height = self._size
        sx = width / 2.0 + float(rel @ self._right) * f / depth
        sy = height / 2.0 - float(rel @ self._up) * f / depth
        return sx, sy, depth

    def project_many(self, points: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        """Project an ``(N, 3)`` array; returns ``(N, 2)`` screen points and depths."""

        rel = np.asarray(points, dtype=float) - self._eye
        depth = rel @ self._forward
        safe = np.where(depth > self._near, depth, np.nan)
        f = self.focal_length
        width, height = self._size
        sx = width / 2.0 + (rel @ self._right) * f / safe
        sy = height / 2.0 - (rel @ self._up) * f / safe
        return np.column_stack((sx, sy)), depth

    def project_radius(self, radius: float, depth: float) -> float:
        if depth <= 0.0:
            return 0.0
        return radius * self.focal_length / depth

    def world_units_per_pixel(self, depth: float) -> float:
        return max(depth, self._near) / self.focal_length


def hit_test(
    bodies: Iterable[ProjectedBody],
    position: tuple[float, float],
    *,
    tolerance: float = 0.0,
) -> str | None:
    """Name of the body under *position* nearest the camera, or ``None``."""

    px, py = position
    best: ProjectedBody | None = None
    for body in bodies:
        if math.hypot(body.x - px, body.y - py) > body.radius + tolerance:
            continue
        if best is None or body.depth < best.depth:
            best = body
    return best.name if best is not None else None


__all__ = ["ProjectedBody", "Projector", "hit_test"]
