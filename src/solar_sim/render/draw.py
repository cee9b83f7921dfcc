from __future__ import annotations

import math
import random
from typing import Iterable, Sequence, TYPE_CHECKING

import numpy as np
import pygame

from .assets import Color, get_text_surface, shade
from .projection import Projector

if TYPE_CHECKING:  # pragma: no cover
    from solar_sim.core.config import RenderCfg
    from solar_sim.core.model import Rings


def generate_starfield(
    num_stars: int,
    *,
    size: tuple[int, int],
    rng: random.Random | None = None,
) -> list[dict[str, object]]:
    rng = rng or random.Random()
    width, height = size
    stars: list[dict[str, object]] = []
    for _ in range(num_stars):
        x = rng.uniform(0, width)
        y = rng.uniform(0, height)
        radius = rng.choice([1, 1, 1, 2])
        alpha = rng.randint(110, 230)
        base = rng.randint(200, 255)
        color = (
            max(0, base - rng.randint(0, 25)),
            max(0, base - rng.randint(0, 15)),
            base,
        )
        star_surface = pygame.Surface((radius * 2, radius * 2), pygame.SRCALPHA)
        pygame.draw.circle(star_surface, (*color, alpha), (radius, radius), radius)
        stars.append({"pos": (x, y), "surface": star_surface, "radius": radius})
    return stars


def draw_starfield(
    surface: pygame.Surface,
    starfield: Iterable[dict[str, object]],
    view_direction: np.ndarray,
    *,
    render_cfg: RenderCfg,
) -> None:
    """Scroll the star layer with the camera heading so rotation reads as motion."""

    width, height = surface.get_size()
    azimuth = math.atan2(view_direction[2], view_direction[0])
    elevation = math.asin(max(-1.0, min(1.0, float(view_direction[1]))))
    offset_x = azimuth / math.pi * width * render_cfg.starfield_parallax
    offset_y = elevation / math.pi * height * render_cfg.starfield_parallax
    for star in starfield:
        base_x, base_y = star["pos"]  # type: ignore[index]
        star_surface = star["surface"]  # type: ignore[index]
        radius = star["radius"]  # type: ignore[index]
        sx = int((base_x - offset_x) % width)
        sy = int((base_y + offset_y) % height)
        surface.blit(star_surface, (sx - radius, sy - radius))


def circle_points(center: np.ndarray, radius: float, segments: int) -> np.ndarray:
    """Closed circle of *radius* around *center* in the x-z plane, ``(segments + 1, 3)``."""

    theta = np.linspace(0.0, 2.0 * math.pi, segments + 1)
    points = np.empty((segments + 1, 3), dtype=float)
    points[:, 0] = center[0] + np.cos(theta) * radius
    points[:, 1] = center[1]
    points[:, 2] = center[2] + np.sin(theta) * radius
    return points


def visible_runs(screen: np.ndarray, depth: np.ndarray) -> list[list[tuple[float, float]]]:
    """Split projected points into runs that lie entirely in front of the camera."""

    runs: list[list[tuple[float, float]]] = []
    current: list[tuple[float, float]] = []
    for (sx, sy), d in zip(screen, depth):
        if d > 0.0 and math.isfinite(sx) and math.isfinite(sy):
            current.append((float(sx), float(sy)))
        elif current:
            runs.append(current)
            current = []
    if current:
        runs.append(current)
    return runs


def draw_orbit_line(
    surface: pygame.Surface,
    color: Color,
    points: Sequence[tuple[float, float]],
    width: int,
) -> None:
    if len(points) < 2:
        return
    if width <= 1:
        pygame.draw.aalines(surface, color, False, points)
    else:
        pygame.draw.lines(surface, color, False, points, width)
        pygame.draw.aalines(surface, color, False, points)


def draw_orbit_path(
    surface: pygame.Surface,
    projector: Projector,
    center: np.ndarray,
    radius: float,
    color: tuple[int, int, int],
    *,
    highlighted: bool,
    render_cfg: RenderCfg,
) -> None:
    if radius <= 0.0:
        return
    points = circle_points(center, radius, render_cfg.orbit_segments)
    screen, depth = projector.project_many(points)
    alpha = render_cfg.orbit_highlight_alpha if highlighted else render_cfg.orbit_alpha
    width = render_cfg.orbit_highlight_width if highlighted else render_cfg.orbit_line_width
    for run in visible_runs(screen, depth):
        draw_orbit_line(surface, (*color, alpha), run, width)


def draw_rings(
    surface: pygame.Surface,
    projector: Projector,
    center: np.ndarray,
    rings: Rings,
    *,
    render_cfg: RenderCfg,
    bands: int = 6,
) -> None:
    for idx in range(bands):
        fraction = idx / max(1, bands - 1)
        radius = rings.inner_radius + (rings.outer_radius - rings.inner_radius) * fraction
        points = circle_points(center, radius, render_cfg.orbit_segments // 2)
        screen, depth = projector.project_many(points)
        color = (*shade(rings.color, 0.75 + 0.25 * fraction), render_cfg.ring_alpha)
        for run in visible_runs(screen, depth):
            draw_orbit_line(surface, color, run, 2)


def draw_body(
    surface: pygame.Surface,
    position: tuple[int, int],
    radius: int,
    color: tuple[int, int, int],
    rotation_angle: float,
    *,
    tilt_deg: float = 0.0,
    selected: bool = False,
    glow: bool = False,
    render_cfg: RenderCfg,
) -> None:
    radius = max(render_cfg.min_body_pixels, radius)
    if glow:
        glow_radius = int(radius * 1.5)
        glow_surface = pygame.Surface((glow_radius * 2, glow_radius * 2), pygame.SRCALPHA)
        pygame.draw.circle(glow_surface, (*color, 100), (glow_radius, glow_radius), glow_radius)
        surface.blit(glow_surface, glow_surface.get_rect(center=position))
    pygame.draw.circle(surface, shade(color, 0.55), position, radius)
    pygame.draw.circle(surface, color, position, max(1, int(radius * 0.85)))

    # Spin marker: a point on the equator swept by the rotation angle.
    if radius >= 4:
        tilt = math.radians(tilt_deg)
        along = math.cos(rotation_angle) * radius * 0.6
        mx = position[0] + along * math.cos(tilt)
        my = position[1] + along * math.sin(tilt)
        if math.sin(rotation_angle) > 0.0:
            pygame.draw.circle(surface, shade(color, 0.4), (int(mx), int(my)), max(1, radius // 6))

    if selected:
        pygame.draw.circle(surface, render_cfg.selection_color, position, radius + 4, 2)


def draw_label(
    surface: pygame.Surface,
    font: pygame.font.Font,
    text: str,
    position: tuple[int, int],
    radius: int,
    *,
    render_cfg: RenderCfg,
) -> None:
    label_surf = get_text_surface(font, text, render_cfg.label_text_color)
    rect = label_surf.get_rect()
    rect.midbottom = (position[0], position[1] - radius - render_cfg.label_offset_pixels)
    surface.blit(label_surf, rect)
