"""Data models for the solar system simulation state."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class Rings:
    """Decorative ring system, in display units."""

    inner_radius: float
    outer_radius: float
    color: tuple[int, int, int]


@dataclass(frozen=True)
class CelestialBody:
    """Immutable catalog entry.

    ``parent`` and ``children`` hold body names, never body objects; the
    registry owns every body and resolves the names.
    """

    name: str
    radius: float
    color: tuple[int, int, int]
    orbit_radius_raw: float
    orbit_period_days: float
    rotation_period_days: float
    description: str = ""
    parent: str | None = None
    children: tuple[str, ...] = ()
    rings: Rings | None = None
    axial_tilt_deg: float = 0.0

    @property
    def is_root(self) -> bool:
        return self.parent is None


class BodyKind(Enum):
    STAR = "star"
    PLANET = "planet"
    MOON = "moon"


@dataclass(frozen=True)
class BodyRef:
    """Resolved identity of a body: the star, a planet, or a moon of a planet."""

    kind: BodyKind
    name: str
    parent: str | None = None


@dataclass
class SimState:
    """Process-wide mutable simulation state."""

    simulated_time: float = 0.0
    is_playing: bool = True
    rate: float = 1.0
    selected_body: str | None = None
    is_following: bool = False

    def select(self, name: str, *, follow: bool) -> None:
        self.selected_body = name
        self.is_following = follow

    def clear_selection(self) -> None:
        self.selected_body = None
        self.is_following = False


__all__ = ["BodyKind", "BodyRef", "CelestialBody", "Rings", "SimState"]
