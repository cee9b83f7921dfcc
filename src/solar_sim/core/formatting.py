"""Display strings for body metadata, simulation rate and dates."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from .config import SIM_CFG, SimCfg
from .model import BodyKind, CelestialBody
from .registry import BodyRegistry


DAYS_PER_YEAR = 365.25


@dataclass(frozen=True)
class BodyInfo:
    name: str
    kind: BodyKind
    description: str
    orbit_period: str
    rotation_period: str
    distance: str


def format_orbit_period(days: float) -> str:
    if days <= 0.0:
        return "N/A"
    if days > 1000.0:
        return f"{days / DAYS_PER_YEAR:.1f} years ({days:.1f} days)"
    return f"{days:.1f} days"


def format_rotation_period(days: float) -> str:
    magnitude = abs(days)
    if magnitude < 1.0:
        return f"{magnitude * 24.0:.1f} hours"
    return f"{magnitude:g} days"


def format_distance(body: CelestialBody, kind: BodyKind, cfg: SimCfg = SIM_CFG) -> str:
    """AU from the Sun for planets, kilometres from the parent for moons."""

    if kind is BodyKind.STAR:
        return "0 AU"
    if kind is BodyKind.PLANET:
        distance_au = body.orbit_radius_raw * cfg.orbital_factor / cfg.au_km
        return f"{distance_au:.2f} AU"
    return f"{body.orbit_radius_raw * 1000.0:,.0f} km"


def describe_body(registry: BodyRegistry, name: str | None) -> BodyInfo | None:
    body = registry.get_body(name)
    ref = registry.resolve(name)
    if body is None or ref is None:
        return None
    return BodyInfo(
        name=body.name,
        kind=ref.kind,
        description=body.description,
        orbit_period=format_orbit_period(body.orbit_period_days),
        rotation_period=format_rotation_period(body.rotation_period_days),
        distance=format_distance(body, ref.kind, registry.cfg),
    )


def format_rate(rate: float) -> str:
    if rate >= 365.0:
        return f"{rate / DAYS_PER_YEAR:.1f} years/sec"
    return f"{rate:.1f} days/sec"


def format_date(moment: datetime) -> str:
    return f"{moment:%b} {moment.day}, {moment:%Y}, {moment:%I:%M %p}".upper()


__all__ = [
    "BodyInfo",
    "DAYS_PER_YEAR",
    "describe_body",
    "format_date",
    "format_distance",
    "format_orbit_period",
    "format_rate",
    "format_rotation_period",
]
