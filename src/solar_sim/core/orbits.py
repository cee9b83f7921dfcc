"""Circular orbit evaluation for catalog bodies.

Orbits are scripted, not integrated: a body's angle around its parent is a
linear function of simulated time, and world positions compose additively
through the parent chain. All orbits lie in the x-z plane (y is up).
"""
from __future__ import annotations

import math
from typing import TYPE_CHECKING

import numpy as np

from .config import SIM_CFG, SimCfg
from .model import CelestialBody

if TYPE_CHECKING:  # pragma: no cover
    from .registry import BodyRegistry


TWO_PI = 2.0 * math.pi


def safe_orbit_distance(
    parent_radius: float,
    desired_radius: float,
    clearance: float = SIM_CFG.min_orbital_clearance,
) -> float:
    """Return *desired_radius*, pushed out to ``parent_radius * clearance`` if needed."""

    return max(desired_radius, parent_radius * clearance)


def effective_orbit_radius(
    body: CelestialBody,
    parent: CelestialBody | None,
    cfg: SimCfg = SIM_CFG,
) -> float:
    """Orbit radius actually used for positioning *body* around *parent*.

    Planets are held at the visibility floor at least; moons are kept clear
    of their parent's display radius.
    """

    if parent is None:
        return 0.0
    if parent.is_root:
        return max(body.orbit_radius_raw, cfg.min_orbit_display)
    return safe_orbit_distance(parent.radius, body.orbit_radius_raw, cfg.moon_clearance)


def spread_offset(index: int, cfg: SimCfg = SIM_CFG) -> float:
    """Extra display radius for the *index*-th planet so floored orbits never coincide."""

    return index * cfg.orbit_spread_step + cfg.orbit_spread_base


def orbital_angle(simulated_time: float, orbit_period_days: float) -> float:
    """Unbounded orbital angle in radians; zero for bodies without a period."""

    if orbit_period_days <= 0.0:
        return 0.0
    return (simulated_time / orbit_period_days) * TWO_PI


def orbit_offset(angle: float, radius: float) -> np.ndarray:
    return np.array([math.cos(angle) * radius, 0.0, math.sin(angle) * radius], dtype=float)


def local_position(body: CelestialBody, orbit_radius: float, simulated_time: float) -> np.ndarray:
    """Position of *body* relative to its parent."""

    if body.is_root:
        return np.zeros(3, dtype=float)
    return orbit_offset(orbital_angle(simulated_time, body.orbit_period_days), orbit_radius)


def world_position(
    registry: BodyRegistry,
    name: str,
    simulated_time: float,
    *,
    spread: bool = False,
) -> np.ndarray | None:
    """World position of the body called *name*, or ``None`` if it is unknown."""

    body = registry.get_body(name)
    if body is None:
        return None
    position = np.zeros(3, dtype=float)
    while body is not None and not body.is_root:
        radius = registry.display_orbit_radius(body.name) if spread else registry.orbit_radius(body.name)
        position += local_position(body, radius, simulated_time)
        body = registry.get_body(body.parent)
    return position


def world_positions(
    registry: BodyRegistry,
    simulated_time: float,
    *,
    spread: bool = False,
) -> dict[str, np.ndarray]:
    """World positions of every body, parents evaluated before their children."""

    positions: dict[str, np.ndarray] = {}
    for body in registry.walk():
        if body.parent is None:
            positions[body.name] = np.zeros(3, dtype=float)
            continue
        radius = registry.display_orbit_radius(body.name) if spread else registry.orbit_radius(body.name)
        positions[body.name] = positions[body.parent] + local_position(body, radius, simulated_time)
    return positions


def rotation_increment(
    rotation_period_days: float,
    frame_step: float = 1.0,
    cfg: SimCfg = SIM_CFG,
) -> float:
    """Spin added to a body's rotation angle for one simulated frame.

    A negative period spins the body the other way; a zero period does not
    spin at all.
    """

    if rotation_period_days == 0.0:
        return 0.0
    return TWO_PI / (rotation_period_days * cfg.rotation_time_constant) * frame_step


__all__ = [
    "TWO_PI",
    "effective_orbit_radius",
    "local_position",
    "orbit_offset",
    "orbital_angle",
    "rotation_increment",
    "safe_orbit_distance",
    "spread_offset",
    "world_position",
    "world_positions",
]
