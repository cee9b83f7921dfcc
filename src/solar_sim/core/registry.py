"""Read-only catalog of celestial bodies indexed by name."""
from __future__ import annotations

import math
from typing import Iterable, Iterator

from .config import SIM_CFG, SimCfg
from .model import BodyKind, BodyRef, CelestialBody
from .orbits import effective_orbit_radius, spread_offset


class CatalogError(ValueError):
    """Raised when a body catalog violates the registry invariants."""


class BodyRegistry:
    """Arena of bodies keyed by name.

    Orbit radii are derived once here, so per-frame code never divides by
    a missing period or re-derives display geometry.
    """

    def __init__(self, bodies: Iterable[CelestialBody], cfg: SimCfg = SIM_CFG) -> None:
        self._cfg = cfg
        self._order: list[CelestialBody] = []
        self._bodies: dict[str, CelestialBody] = {}
        for body in bodies:
            if body.name in self._bodies:
                raise CatalogError(f"duplicate body name {body.name!r}")
            self._bodies[body.name] = body
            self._order.append(body)
        self._root = self._validate()

        self._orbit_radius: dict[str, float] = {}
        self._display_orbit_radius: dict[str, float] = {}
        self._refs: dict[str, BodyRef] = {}
        self._index = {body.name: idx for idx, body in enumerate(self._order)}
        planet_index = {name: idx for idx, name in enumerate(self._root.children)}
        for body in self._order:
            parent = self.get_body(body.parent)
            radius = effective_orbit_radius(body, parent, cfg)
            self._orbit_radius[body.name] = radius
            if body.name in planet_index and cfg.spread_orbits:
                radius += spread_offset(planet_index[body.name], cfg)
            self._display_orbit_radius[body.name] = radius
            self._refs[body.name] = self._make_ref(body)

    def _validate(self) -> CelestialBody:
        roots = [body for body in self._order if body.parent is None]
        if len(roots) != 1:
            raise CatalogError(f"expected exactly one root body, found {len(roots)}")
        root = roots[0]
        if root.orbit_period_days != 0:
            raise CatalogError(f"root body {root.name!r} must have an orbit period of 0")

        for body in self._order:
            if not body.radius > 0.0:
                raise CatalogError(f"body {body.name!r} needs a positive display radius")
            if body is not root:
                period = body.orbit_period_days
                if period is None or not math.isfinite(period) or period <= 0.0:
                    raise CatalogError(f"body {body.name!r} needs a positive orbit period")
                parent = self._bodies.get(body.parent)
                if parent is None:
                    raise CatalogError(f"body {body.name!r} orbits unknown parent {body.parent!r}")
                if body.name not in parent.children:
                    raise CatalogError(
                        f"{parent.name!r} does not list {body.name!r} among its children"
                    )
            for child_name in body.children:
                child = self._bodies.get(child_name)
                if child is None or child.parent != body.name:
                    raise CatalogError(
                        f"child {child_name!r} of {body.name!r} does not name it as parent"
                    )

        reachable = sum(1 for _ in self._walk_from(root))
        if reachable != len(self._order):
            raise CatalogError("some bodies are not reachable from the root body")
        return root

    def _walk_from(self, body: CelestialBody) -> Iterator[CelestialBody]:
        yield body
        for child_name in body.children:
            yield from self._walk_from(self._bodies[child_name])

    def _make_ref(self, body: CelestialBody) -> BodyRef:
        if body.parent is None:
            return BodyRef(BodyKind.STAR, body.name)
        if body.parent == self._root.name:
            return BodyRef(BodyKind.PLANET, body.name)
        return BodyRef(BodyKind.MOON, body.name, body.parent)

    @property
    def cfg(self) -> SimCfg:
        return self._cfg

    def __len__(self) -> int:
        return len(self._order)

    def __contains__(self, name: object) -> bool:
        return name in self._bodies

    def get_body(self, name: str | None) -> CelestialBody | None:
        if name is None:
            return None
        return self._bodies.get(name)

    def all_bodies(self) -> tuple[CelestialBody, ...]:
        """Bodies in registration order."""

        return tuple(self._order)

    def walk(self) -> Iterator[CelestialBody]:
        """Bodies depth-first from the root, each parent before its children."""

        return self._walk_from(self._root)

    def root_body(self) -> CelestialBody:
        return self._root

    def index_of(self, name: str) -> int | None:
        return self._index.get(name)

    def resolve(self, name: str | None) -> BodyRef | None:
        if name is None:
            return None
        return self._refs.get(name)

    def children_of(self, name: str) -> tuple[CelestialBody, ...]:
        body = self.get_body(name)
        if body is None:
            return ()
        return tuple(self._bodies[child] for child in body.children)

    def orbit_radius(self, name: str) -> float:
        """Effective orbit radius around the parent (0 for the root)."""

        return self._orbit_radius[name]

    def display_orbit_radius(self, name: str) -> float:
        """Effective orbit radius plus the planet spread offset, when enabled."""

        return self._display_orbit_radius[name]

    def max_orbit_radius(self) -> float:
        radii = [self._display_orbit_radius[b.name] for b in self._order if b.parent is not None]
        return max(radii, default=0.0)


__all__ = ["BodyRegistry", "CatalogError"]
