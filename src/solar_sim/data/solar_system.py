"""Catalog of the Sun, the eight planets and the Moon."""
from __future__ import annotations

from dataclasses import dataclass

from solar_sim.core.config import SIM_CFG, SimCfg
from solar_sim.core.model import CelestialBody, Rings
from solar_sim.core.orbits import safe_orbit_distance
from solar_sim.core.registry import BodyRegistry


@dataclass(frozen=True)
class BodyData:
    """Physical figures as published, before display scaling."""

    name: str
    diameter_km: float
    distance_au: float
    color: int
    orbit_period_days: float
    rotation_period_days: float
    description: str
    parent: str | None = None
    gas_giant: bool = False
    # Moons store their distance pre-scaled for visibility.
    distance_scale: float = 1.0
    radius_scale: float = 1.0
    ring_radii_km: tuple[float, float] | None = None
    ring_color: int | None = None
    axial_tilt_deg: float = 0.0


SUN = BodyData(
    name="Sun",
    diameter_km=1_391_400,
    distance_au=0.0,
    color=0xFDB813,
    orbit_period_days=0,
    rotation_period_days=25,
    description="The star at the center of our Solar System. Diameter: 1,391,400 km.",
)

BODY_DEFINITIONS: tuple[BodyData, ...] = (
    SUN,
    BodyData(
        name="Mercury",
        diameter_km=4_879,
        distance_au=0.39,
        color=0xA37B7B,
        orbit_period_days=88,
        rotation_period_days=59,
        description=(
            "The smallest and innermost planet in the Solar System. "
            "Diameter: 4,879 km. Distance from Sun: 0.39 AU."
        ),
        parent="Sun",
    ),
    BodyData(
        name="Venus",
        diameter_km=12_104,
        distance_au=0.72,
        color=0xE2B15B,
        orbit_period_days=225,
        rotation_period_days=243,
        description=(
            "The second planet from the Sun and the hottest in our Solar System. "
            "Diameter: 12,104 km. Distance from Sun: 0.72 AU."
        ),
        parent="Sun",
    ),
    BodyData(
        name="Earth",
        diameter_km=12_756,
        distance_au=1.0,
        color=0x4BA8FF,
        orbit_period_days=365.25,
        rotation_period_days=1,
        description=(
            "Our home planet and the only known planet to harbor life. "
            "Diameter: 12,756 km. Distance from Sun: 1.0 AU."
        ),
        parent="Sun",
    ),
    BodyData(
        name="Moon",
        diameter_km=12_756,
        distance_au=0.00243,
        color=0xCCCCCC,
        orbit_period_days=27.3,
        rotation_period_days=27.3,
        description=(
            "Earth's only natural satellite. Diameter: 3,474 km. "
            "Distance from Earth: 0.002430 AU (384,400 km)."
        ),
        parent="Earth",
        distance_scale=5.0,
        radius_scale=0.25,
    ),
    BodyData(
        name="Mars",
        diameter_km=6_792,
        distance_au=1.52,
        color=0xE27B58,
        orbit_period_days=687,
        rotation_period_days=1.03,
        description="The Red Planet, fourth from the Sun. Diameter: 6,792 km. Distance from Sun: 1.52 AU.",
        parent="Sun",
    ),
    BodyData(
        name="Jupiter",
        diameter_km=142_984,
        distance_au=5.2,
        color=0xE1CAA7,
        orbit_period_days=4_333,
        rotation_period_days=0.41,
        description=(
            "The largest planet in our Solar System. "
            "Diameter: 142,984 km. Distance from Sun: 5.2 AU."
        ),
        parent="Sun",
        gas_giant=True,
    ),
    BodyData(
        name="Saturn",
        diameter_km=120_536,
        distance_au=9.54,
        color=0xF5E0B5,
        orbit_period_days=10_759,
        rotation_period_days=0.45,
        description=(
            "The ringed planet, sixth from the Sun. "
            "Diameter: 120,536 km. Distance from Sun: 9.54 AU."
        ),
        parent="Sun",
        gas_giant=True,
        ring_radii_km=(74_500, 140_000),
        ring_color=0xE1CAA7,
    ),
    BodyData(
        name="Uranus",
        diameter_km=51_118,
        distance_au=19.2,
        color=0x9FE3DE,
        orbit_period_days=30_688.5,
        rotation_period_days=0.72,
        description=(
            "The seventh planet from the Sun, an ice giant with a tilted axis. "
            "Diameter: 51,118 km. Distance from Sun: 19.2 AU."
        ),
        parent="Sun",
        gas_giant=True,
        axial_tilt_deg=97.77,
    ),
    BodyData(
        name="Neptune",
        diameter_km=49_528,
        distance_au=30.06,
        color=0x5B5DDF,
        orbit_period_days=60_195,
        rotation_period_days=0.67,
        description=(
            "The eighth and most distant planet in our Solar System. "
            "Diameter: 49,528 km. Distance from Sun: 30.06 AU."
        ),
        parent="Sun",
        gas_giant=True,
    ),
)


def hex_to_rgb(value: int) -> tuple[int, int, int]:
    return ((value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF)


def display_radius(data: BodyData, cfg: SimCfg = SIM_CFG) -> float:
    half_diameter = data.diameter_km / 2.0
    if data.parent is None:
        return half_diameter * cfg.sun_size_factor
    radius = half_diameter * cfg.size_factor * data.radius_scale
    if data.parent == SUN.name:
        radius *= cfg.giant_display_scale if data.gas_giant else cfg.rocky_display_scale
    return radius


def raw_orbit_radius(data: BodyData, cfg: SimCfg = SIM_CFG) -> float:
    return data.distance_au * cfg.au_km / cfg.orbital_factor * data.distance_scale


def ring_geometry(data: BodyData, planet_radius: float, cfg: SimCfg = SIM_CFG) -> Rings | None:
    if data.ring_radii_km is None:
        return None
    inner_km, outer_km = data.ring_radii_km
    inner = safe_orbit_distance(planet_radius, inner_km * cfg.size_factor * 0.2, cfg.min_orbital_clearance)
    outer = max(outer_km * cfg.size_factor * 0.2, inner * 1.5)
    color = data.ring_color if data.ring_color is not None else data.color
    return Rings(inner_radius=inner, outer_radius=outer, color=hex_to_rgb(color))


def build_bodies(
    definitions: tuple[BodyData, ...] = BODY_DEFINITIONS,
    cfg: SimCfg = SIM_CFG,
) -> list[CelestialBody]:
    """Scale *definitions* into catalog entries, preserving their order."""

    children: dict[str, list[str]] = {data.name: [] for data in definitions}
    for data in definitions:
        if data.parent is not None and data.parent in children:
            children[data.parent].append(data.name)

    bodies: list[CelestialBody] = []
    for data in definitions:
        radius = display_radius(data, cfg)
        bodies.append(
            CelestialBody(
                name=data.name,
                radius=radius,
                color=hex_to_rgb(data.color),
                orbit_radius_raw=raw_orbit_radius(data, cfg),
                orbit_period_days=data.orbit_period_days,
                rotation_period_days=data.rotation_period_days,
                description=data.description,
                parent=data.parent,
                children=tuple(children[data.name]),
                rings=ring_geometry(data, radius, cfg),
                axial_tilt_deg=data.axial_tilt_deg,
            )
        )
    return bodies


def build_solar_system(cfg: SimCfg = SIM_CFG) -> BodyRegistry:
    return BodyRegistry(build_bodies(cfg=cfg), cfg)


__all__ = [
    "BODY_DEFINITIONS",
    "BodyData",
    "SUN",
    "build_bodies",
    "build_solar_system",
    "display_radius",
    "hex_to_rgb",
    "raw_orbit_radius",
    "ring_geometry",
]
