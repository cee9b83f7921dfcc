"""Display strings for the info panel and HUD."""

from datetime import datetime

import pytest

from solar_sim.core.formatting import (
    describe_body,
    format_date,
    format_orbit_period,
    format_rate,
    format_rotation_period,
)
from solar_sim.core.model import BodyKind


class TestPeriods:
    @pytest.mark.parametrize(
        "days, expected",
        [
            (0.0, "N/A"),
            (88.0, "88.0 days"),
            (687.0, "687.0 days"),
            (1000.0, "1000.0 days"),
            (4333.0, "11.9 years (4333.0 days)"),
        ],
    )
    def test_orbit_period(self, days, expected):
        assert format_orbit_period(days) == expected

    @pytest.mark.parametrize(
        "days, expected",
        [
            (0.41, "9.8 hours"),
            (1.0, "1 days"),
            (1.03, "1.03 days"),
            (243.0, "243 days"),
            (-243.0, "243 days"),
        ],
    )
    def test_rotation_period(self, days, expected):
        assert format_rotation_period(days) == expected


class TestDescribe:
    def test_planet(self, solar_registry):
        info = describe_body(solar_registry, "Jupiter")
        assert info.kind is BodyKind.PLANET
        assert info.distance == "5.20 AU"
        assert info.orbit_period == "11.9 years (4333.0 days)"
        assert info.rotation_period == "9.8 hours"
        assert info.description.startswith("The largest planet")

    def test_star(self, solar_registry):
        info = describe_body(solar_registry, "Sun")
        assert info.kind is BodyKind.STAR
        assert info.distance == "0 AU"
        assert info.orbit_period == "N/A"

    def test_moon_distance_in_km(self, solar_registry):
        info = describe_body(solar_registry, "Moon")
        assert info.kind is BodyKind.MOON
        assert info.distance == "181,764 km"

    def test_unknown(self, solar_registry):
        assert describe_body(solar_registry, "Pluto") is None
        assert describe_body(solar_registry, None) is None


@pytest.mark.parametrize(
    "rate, expected",
    [(1.0, "1.0 days/sec"), (364.0, "364.0 days/sec"), (365.25, "1.0 years/sec"), (3652.5, "10.0 years/sec")],
)
def test_rate(rate, expected):
    assert format_rate(rate) == expected


def test_date():
    assert format_date(datetime(2026, 10, 19, 15, 4)) == "OCT 19, 2026, 03:04 PM"
    assert format_date(datetime(2000, 1, 1, 0, 30)) == "JAN 1, 2000, 12:30 AM"
