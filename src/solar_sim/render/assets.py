from __future__ import annotations

from collections import OrderedDict
from typing import Iterable

import pygame


Color = tuple[int, int, int] | tuple[int, int, int, int]

DEFAULT_FONT_NAMES = ("Segoe UI", "Helvetica Neue", "DejaVu Sans", "Arial")

_TEXT_SURFACE_CACHE_MAX_SIZE = 256
_TEXT_SURFACE_CACHE: OrderedDict[tuple[int, str, Color], pygame.Surface] = OrderedDict()


def get_text_surface(font: pygame.font.Font, text: str, color: Color) -> pygame.Surface:
    """Return a cached rendered surface for the given font, text and color.

    Labels and panel lines are re-rendered every frame with mostly the same
    text, so surfaces are kept in a small LRU cache. Callers must treat the
    returned surface as immutable.
    """

    key = (id(font), text, color)
    cached = _TEXT_SURFACE_CACHE.get(key)
    if cached is not None:
        _TEXT_SURFACE_CACHE.move_to_end(key)
        return cached
    rendered = font.render(text, True, color)
    _TEXT_SURFACE_CACHE[key] = rendered
    if len(_TEXT_SURFACE_CACHE) > _TEXT_SURFACE_CACHE_MAX_SIZE:
        _TEXT_SURFACE_CACHE.popitem(last=False)
    return rendered


def load_font(
    size: int,
    *,
    bold: bool = False,
    preferred_names: Iterable[str] = DEFAULT_FONT_NAMES,
) -> pygame.font.Font:
    names = list(preferred_names)
    for name in names:
        try:
            match = pygame.font.match_font(name, bold=bold)
        except Exception:
            match = None
        if match:
            return pygame.font.Font(match, size)
    fallback = names[0] if names else None
    return pygame.font.SysFont(fallback, size, bold=bold)


def shade(color: tuple[int, int, int], factor: float) -> tuple[int, int, int]:
    """Scale an RGB colour towards black (factor < 1) or white (factor > 1)."""

    if factor <= 1.0:
        return tuple(int(c * max(0.0, factor)) for c in color)  # type: ignore[return-value]
    mix = min(1.0, factor - 1.0)
    return tuple(int(c + (255 - c) * mix) for c in color)  # type: ignore[return-value]
