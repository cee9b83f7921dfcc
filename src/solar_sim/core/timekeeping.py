"""Simulation clock, rate-slider curves and calendar conversion."""
from __future__ import annotations

import math
import time
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

from .config import SIM_CFG, SimCfg
from .model import SimState


J2000 = datetime(2000, 1, 1, 12, 0, tzinfo=timezone.utc)
SECONDS_PER_DAY = 86_400.0


@dataclass
class FrameTimer:
    """High resolution timer based on :func:`time.perf_counter`."""

    last_time: float = field(default_factory=time.perf_counter)

    def tick(self) -> float:
        now = time.perf_counter()
        dt = now - self.last_time
        self.last_time = now
        return dt


def clamp_rate(rate: float | None, cfg: SimCfg = SIM_CFG) -> float:
    """Clamp *rate* into ``[min_rate, max_rate]``; missing or bad values become ``min_rate``."""

    if rate is None:
        return cfg.min_rate
    try:
        value = float(rate)
    except (TypeError, ValueError):
        return cfg.min_rate
    if not math.isfinite(value) or value <= 0.0:
        return cfg.min_rate
    return max(cfg.min_rate, min(cfg.max_rate, value))


def _slider_fraction(position: float, cfg: SimCfg) -> float:
    span = cfg.slider_max - cfg.slider_min
    if span <= 0.0:
        return 0.0
    fraction = (position - cfg.slider_min) / span
    return max(0.0, min(1.0, fraction))


def linear_rate(position: float, cfg: SimCfg = SIM_CFG) -> float:
    """Map a slider position linearly onto ``[min_rate, linear_slider_max_rate]``."""

    fraction = _slider_fraction(position, cfg)
    return cfg.min_rate + (cfg.linear_slider_max_rate - cfg.min_rate) * fraction


def exponential_rate(position: float, cfg: SimCfg = SIM_CFG) -> float:
    """Map a slider position geometrically onto ``[min_rate, max_rate]``."""

    fraction = _slider_fraction(position, cfg)
    return cfg.min_rate * (cfg.max_rate / cfg.min_rate) ** fraction


def slider_position(rate: float, curve: str = "linear", cfg: SimCfg = SIM_CFG) -> float:
    """Inverse of the slider curves, clamped to the slider range."""

    rate = clamp_rate(rate, cfg)
    span = cfg.slider_max - cfg.slider_min
    if curve == "exponential":
        fraction = math.log(rate / cfg.min_rate) / math.log(cfg.max_rate / cfg.min_rate)
    else:
        top = cfg.linear_slider_max_rate - cfg.min_rate
        fraction = (rate - cfg.min_rate) / top if top > 0.0 else 0.0
    fraction = max(0.0, min(1.0, fraction))
    return cfg.slider_min + span * fraction


RATE_CURVES = {
    "linear": linear_rate,
    "exponential": exponential_rate,
}


def days_since_j2000(moment: datetime) -> float:
    """Simulated-time value for a calendar moment; naive datetimes are local time."""

    if moment.tzinfo is None:
        moment = moment.astimezone()
    return (moment - J2000).total_seconds() / SECONDS_PER_DAY


def datetime_from_days(days: float) -> datetime:
    return J2000 + timedelta(seconds=days * SECONDS_PER_DAY)


class SimulationClock:
    """Advances ``SimState.simulated_time`` by a fixed step per played frame.

    The step does not depend on the measured frame time: a stuttering frame
    rate slows the simulation down rather than making planets jump.
    """

    def __init__(self, state: SimState, cfg: SimCfg = SIM_CFG) -> None:
        self._state = state
        self._cfg = cfg
        state.rate = clamp_rate(state.rate, cfg)

    @property
    def state(self) -> SimState:
        return self._state

    @property
    def time(self) -> float:
        return self._state.simulated_time

    @property
    def rate(self) -> float:
        return self._state.rate

    @property
    def is_playing(self) -> bool:
        return self._state.is_playing

    def step_size(self) -> float:
        return self._state.rate * self._cfg.time_step

    def tick(self, frames: int = 1) -> float:
        """Advance by *frames* fixed steps if playing; return the simulated days added."""

        if not self._state.is_playing or frames <= 0:
            return 0.0
        delta = self.step_size() * frames
        self._state.simulated_time += delta
        return delta

    def set_rate(self, rate: float | None) -> float:
        self._state.rate = clamp_rate(rate, self._cfg)
        return self._state.rate

    def set_rate_from_slider(self, position: float, curve: str = "linear") -> float:
        mapping = RATE_CURVES.get(curve, linear_rate)
        return self.set_rate(mapping(position, self._cfg))

    def set_time(self, simulated_time: float) -> bool:
        """Jump to *simulated_time*; non-finite values leave the time unchanged."""

        value = float(simulated_time)
        if not math.isfinite(value):
            return False
        self._state.simulated_time = value
        return True

    def set_date(self, moment: datetime) -> None:
        self.set_time(days_since_j2000(moment))

    def set_now(self) -> None:
        self.set_date(datetime.now(timezone.utc))

    def current_date(self) -> datetime:
        return datetime_from_days(self._state.simulated_time)

    def play(self) -> None:
        self._state.is_playing = True

    def pause(self) -> None:
        self._state.is_playing = False

    def toggle(self) -> bool:
        self._state.is_playing = not self._state.is_playing
        return self._state.is_playing


__all__ = [
    "FrameTimer",
    "J2000",
    "RATE_CURVES",
    "SimulationClock",
    "clamp_rate",
    "datetime_from_days",
    "days_since_j2000",
    "exponential_rate",
    "linear_rate",
    "slider_position",
]
