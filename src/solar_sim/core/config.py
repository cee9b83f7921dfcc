"""Configuration dataclasses for the solar system simulation."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SimCfg:
    # Catalog scaling: display units are kilometres divided by orbital_factor.
    orbital_factor: float = 10_000.0
    au_km: float = 149.6e6
    min_orbit_display: float = 800.0
    size_factor: float = 0.05
    sun_size_factor: float = 0.005
    rocky_display_scale: float = 2.0
    giant_display_scale: float = 1.5
    min_orbital_clearance: float = 1.2
    moon_clearance: float = 3.0
    spread_orbits: bool = True
    orbit_spread_base: float = 50.0
    orbit_spread_step: float = 50.0
    # Simulated days added per frame per unit of rate.
    time_step: float = 0.01
    rotation_time_constant: float = 1_000.0
    default_rate: float = 1.0
    min_rate: float = 1.0
    max_rate: float = 3_652.5
    slider_min: float = 0.0
    slider_max: float = 100.0
    linear_slider_max_rate: float = 365.25
    log_every_frames: int = 30


@dataclass(frozen=True)
class CameraCfg:
    fov_deg: float = 60.0
    near: float = 0.1
    min_distance: float = 10.0
    max_distance: float = 500_000.0
    focus_duration: float = 1.0
    follow_smoothing: float = 0.1
    sun_view_multiplier: float = 20.0
    body_view_multiplier: float = 15.0
    overview_multiplier: float = 3.5
    # "offset" keeps the user's relative camera offset while following,
    # "look-at" only re-aims the target.
    follow_mode: str = "offset"
    rotate_speed: float = 0.005
    zoom_step: float = 1.1
    min_polar: float = 0.01
    auto_rotate_speed: float = 0.1


@dataclass(frozen=True)
class RenderCfg:
    width: int = 1280
    height: int = 800
    background_color: tuple[int, int, int] = (0, 0, 0)
    hud_text_color: tuple[int, int, int] = (234, 241, 255)
    hud_muted_color: tuple[int, int, int] = (180, 198, 228)
    panel_background_color: tuple[int, int, int, int] = (12, 18, 30, int(255 * 0.7))
    orbit_alpha: int = int(255 * 0.5)
    orbit_highlight_alpha: int = 255
    orbit_line_width: int = 1
    orbit_highlight_width: int = 3
    orbit_segments: int = 128
    ring_alpha: int = int(255 * 0.7)
    selection_color: tuple[int, int, int] = (255, 255, 0)
    label_text_color: tuple[int, int, int] = (234, 241, 255)
    label_offset_pixels: int = 6
    min_body_pixels: int = 2
    pick_tolerance_pixels: int = 4
    num_stars: int = 600
    starfield_parallax: float = 0.35
    button_color: tuple[int, int, int, int] = (8, 32, 64, int(255 * 0.78))
    button_hover_color: tuple[int, int, int, int] = (18, 52, 94, int(255 * 0.88))
    button_text_color: tuple[int, int, int] = (234, 241, 255)
    button_border_color: tuple[int, int, int, int] = (88, 140, 255, int(255 * 0.55))
    button_radius: int = 10
    stop_button_color: tuple[int, int, int, int] = (231, 76, 60, 230)
    slider_track_color: tuple[int, int, int, int] = (60, 80, 110, 200)
    slider_fill_color: tuple[int, int, int, int] = (88, 140, 255, 230)
    slider_knob_color: tuple[int, int, int] = (234, 241, 255)
    fps_text_alpha: int = int(255 * 0.6)
    double_click_ms: int = 350
    max_frame_dt: float = 0.1


SIM_CFG = SimCfg()
CAMERA_CFG = CameraCfg()
RENDER_CFG = RenderCfg()


__all__ = ["CAMERA_CFG", "RENDER_CFG", "SIM_CFG", "CameraCfg", "RenderCfg", "SimCfg"]
