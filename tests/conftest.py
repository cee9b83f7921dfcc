"""Shared fixtures: a small hand-built catalog and the full solar system."""

import pytest

from solar_sim.core.config import SimCfg
from solar_sim.core.model import CelestialBody
from solar_sim.core.registry import BodyRegistry
from solar_sim.data.solar_system import build_solar_system


FLAT_CFG = SimCfg(spread_orbits=False)


def make_body(name, *, radius=1.0, raw=0.0, period=0.0, rotation=1.0, parent=None, children=()):
    return CelestialBody(
        name=name,
        radius=radius,
        color=(200, 200, 200),
        orbit_radius_raw=raw,
        orbit_period_days=period,
        rotation_period_days=rotation,
        description=f"{name} test body",
        parent=parent,
        children=tuple(children),
    )


def small_catalog():
    """Sun, Earth with a Moon, and Mars; radii chosen so the numbers are easy to check."""
    return [
        make_body("Sun", radius=10.0, rotation=25.0, children=("Earth", "Mars")),
        make_body("Earth", radius=12.0, raw=800.0, period=365.25, parent="Sun", children=("Moon",)),
        make_body("Moon", radius=1.0, raw=5.0, period=27.3, rotation=27.3, parent="Earth"),
        make_body("Mars", radius=5.0, raw=1200.0, period=687.0, rotation=1.03, parent="Sun"),
    ]


@pytest.fixture
def registry():
    return BodyRegistry(small_catalog(), FLAT_CFG)


@pytest.fixture
def spread_registry():
    return BodyRegistry(small_catalog(), SimCfg())


@pytest.fixture(scope="session")
def solar_registry():
    return build_solar_system()
