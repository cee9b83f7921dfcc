"""Rendering helpers for the solar system simulator."""

from .assets import get_text_surface, load_font, shade
from .draw import (
    circle_points,
    draw_body,
    draw_label,
    draw_orbit_line,
    draw_orbit_path,
    draw_rings,
    draw_starfield,
    generate_starfield,
    visible_runs,
)
from .projection import ProjectedBody, Projector, hit_test
from .ui import Button, ButtonVisualStyle, Slider, TextEntry, build_text_panel, wrap_text

__all__ = [
    "Button",
    "ButtonVisualStyle",
    "ProjectedBody",
    "Projector",
    "Slider",
    "TextEntry",
    "build_text_panel",
    "circle_points",
    "draw_body",
    "draw_label",
    "draw_orbit_line",
    "draw_orbit_path",
    "draw_rings",
    "draw_starfield",
    "generate_starfield",
    "get_text_surface",
    "hit_test",
    "load_font",
    "shade",
    "visible_runs",
    "wrap_text",
]
