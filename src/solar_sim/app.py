# src/solar_sim/app.py
"""
Solar System Viewer
===================

Interactive view of the Sun, the planets and the Moon on scripted circular
orbits. Click a body to fly to it and follow it; drag to orbit the camera,
right-drag to pan, scroll to zoom.

Keys: Space play/pause, R reset view, Escape stop following, L labels,
A auto-rotate, N jump to now, D set the date, F11 fullscreen.
"""
from __future__ import annotations

import argparse
import dataclasses
import json
import sys
from datetime import datetime
from pathlib import Path

import pygame

from solar_sim.core.config import CAMERA_CFG, RENDER_CFG, SIM_CFG
from solar_sim.core.formatting import format_date, format_rate
from solar_sim.core.logging_utils import RunLogger
from solar_sim.core.model import BodyKind, SimState
from solar_sim.core.registry import BodyRegistry
from solar_sim.core.simulation import BodyFrame, FrameSnapshot, Simulation
from solar_sim.core.timekeeping import RATE_CURVES, FrameTimer, slider_position
from solar_sim.data.solar_system import build_solar_system
from solar_sim.render import (
    Button,
    ButtonVisualStyle,
    ProjectedBody,
    Projector,
    Slider,
    TextEntry,
    build_text_panel,
    draw_body,
    draw_label,
    draw_orbit_path,
    draw_rings,
    draw_starfield,
    generate_starfield,
    get_text_surface,
    hit_test,
    load_font,
)


SETTINGS_DIR = Path.home() / ".solar_sim"
SETTINGS_PATH = SETTINGS_DIR / "settings.json"

CLICK_MOVE_TOLERANCE = 4


def load_user_settings(path: Path = SETTINGS_PATH) -> dict[str, object]:
    """Return persisted display preferences if the JSON file is readable."""

    try:
        with path.open("r", encoding="utf-8") as fh:
            data = json.load(fh)
    except (OSError, json.JSONDecodeError):
        return {}
    if isinstance(data, dict):
        return data
    return {}


def save_user_settings(settings: dict[str, object], path: Path = SETTINGS_PATH) -> None:
    """Persist display preferences, ignoring filesystem errors."""

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as fh:
            json.dump(settings, fh, indent=2, sort_keys=True)
    except OSError:
        # Preferences are optional; shutting down matters more.
        pass


def parse_date(text: str) -> datetime:
    """Parse ``YYYY-MM-DD`` or ``YYYY-MM-DDTHH:MM`` (a trailing ``Z`` means UTC)."""

    value = text.strip()
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Interactive solar system viewer.")
    parser.add_argument("--date", help="start date/time, e.g. 2024-03-20 or 2024-03-20T14:30")
    parser.add_argument("--rate", type=float, help="simulation rate in days per second")
    parser.add_argument("--paused", action="store_true", help="start paused")
    parser.add_argument("--curve", choices=sorted(RATE_CURVES), help="rate slider curve")
    parser.add_argument(
        "--follow-mode",
        choices=["offset", "look-at"],
        default=CAMERA_CFG.follow_mode,
        help="keep the camera offset while following, or only re-aim it",
    )
    parser.add_argument("--record", action="store_true", help="record the run to CSV files")
    parser.add_argument("--runs-dir", default="data/runs", help="directory for recorded runs")
    return parser


def print_layout(registry: BodyRegistry) -> None:
    root = registry.root_body()
    print(f"{root.name} at origin, radius {root.radius:.1f}")
    for body in registry.all_bodies():
        if body.parent is None:
            continue
        print(
            f"{body.name} orbits {body.parent} at {registry.display_orbit_radius(body.name):.1f}"
            f" (radius {body.radius:.1f})"
        )


def draw_scene(
    surface: pygame.Surface,
    orbit_layer: pygame.Surface,
    snapshot: FrameSnapshot,
    registry: BodyRegistry,
    projector: Projector,
    label_font: pygame.font.Font,
    *,
    show_labels: bool,
) -> list[ProjectedBody]:
    """Draw orbits, bodies and labels; return the projected bodies for picking."""

    positions = {frame.name: frame.position for frame in snapshot.bodies}
    orbit_layer.fill((0, 0, 0, 0))
    for body in registry.all_bodies():
        if body.parent is None:
            continue
        draw_orbit_path(
            orbit_layer,
            projector,
            positions[body.parent],
            registry.display_orbit_radius(body.name),
            body.color,
            highlighted=body.name == snapshot.highlighted_orbit,
            render_cfg=RENDER_CFG,
        )
    surface.blit(orbit_layer, (0, 0))

    projected: list[tuple[ProjectedBody, BodyFrame]] = []
    for frame in snapshot.bodies:
        screen_pos = projector.world_to_screen(frame.position)
        if screen_pos is None:
            continue
        body = registry.get_body(frame.name)
        sx, sy, depth = screen_pos
        radius = projector.project_radius(body.radius, depth)
        projected.append((ProjectedBody(frame.name, sx, sy, depth, radius), frame))

    # Painter's order: farthest first.
    projected.sort(key=lambda item: item[0].depth, reverse=True)
    for proj, frame in projected:
        body = registry.get_body(proj.name)
        center = (int(proj.x), int(proj.y))
        radius_px = int(proj.radius)
        if body.rings is not None:
            draw_rings(surface, projector, frame.position, body.rings, render_cfg=RENDER_CFG)
        draw_body(
            surface,
            center,
            radius_px,
            body.color,
            frame.rotation_angle,
            tilt_deg=body.axial_tilt_deg,
            selected=frame.is_selected,
            glow=frame.kind is BodyKind.STAR,
            render_cfg=RENDER_CFG,
        )
        if show_labels:
            draw_label(
                surface,
                label_font,
                body.name,
                center,
                max(radius_px, RENDER_CFG.min_body_pixels),
                render_cfg=RENDER_CFG,
            )
    return [proj for proj, _ in projected]


def main(argv: list[str] | None = None) -> None:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    start_date: datetime | None = None
    if args.date:
        try:
            start_date = parse_date(args.date)
        except ValueError:
            parser.error(f"invalid --date value: {args.date!r}")

    user_settings = load_user_settings()
    curve = args.curve or user_settings.get("rate_curve")
    if curve not in RATE_CURVES:
        curve = "linear"
    show_labels = bool(user_settings.get("show_labels", True))
    fullscreen_enabled = bool(user_settings.get("fullscreen", False))

    camera_cfg = dataclasses.replace(CAMERA_CFG, follow_mode=args.follow_mode)
    registry = build_solar_system(SIM_CFG)
    logger = RunLogger(args.runs_dir) if args.record else None
    state = SimState(
        is_playing=not args.paused,
        rate=args.rate if args.rate is not None else SIM_CFG.default_rate,
    )
    sim = Simulation(registry, state, camera_cfg=camera_cfg, logger=logger)
    if start_date is not None:
        sim.set_date(start_date)
    else:
        sim.set_now()
    if logger is not None:
        logger.write_meta(sim.recording_meta())
        print(f"Recording run to {logger.run_dir}")
    print_layout(registry)

    pygame.init()
    pygame.display.set_caption("Solar System")
    windowed_size = (RENDER_CFG.width, RENDER_CFG.height)

    def create_surface(full: bool) -> pygame.Surface:
        if full:
            return pygame.display.set_mode((0, 0), pygame.FULLSCREEN)
        return pygame.display.set_mode(windowed_size, pygame.RESIZABLE)

    try:
        screen = create_surface(fullscreen_enabled)
    except pygame.error:
        fullscreen_enabled = False
        screen = create_surface(False)

    font = load_font(16)
    small_font = load_font(13)
    title_font = load_font(18, bold=True)
    clock = pygame.time.Clock()
    frame_timer = FrameTimer()
    projector = Projector(screen.get_size(), camera_cfg.fov_deg, near=camera_cfg.near)
    starfield = generate_starfield(RENDER_CFG.num_stars, size=screen.get_size())
    overlay_size = (-1, -1)
    orbit_layer = pygame.Surface(screen.get_size(), pygame.SRCALPHA)
    projected_bodies: list[ProjectedBody] = []

    button_style = ButtonVisualStyle(
        base_color=RENDER_CFG.button_color,
        hover_color=RENDER_CFG.button_hover_color,
        text_color=RENDER_CFG.button_text_color,
        radius=RENDER_CFG.button_radius,
        border_color=RENDER_CFG.button_border_color,
        border_width=1,
    )
    stop_style = dataclasses.replace(
        button_style, base_color=RENDER_CFG.stop_button_color, hover_color=RENDER_CFG.stop_button_color
    )

    def toggle_labels() -> None:
        nonlocal show_labels
        show_labels = not show_labels

    def toggle_auto_rotate() -> None:
        sim.camera.auto_rotate = not sim.camera.auto_rotate

    def toggle_fullscreen_mode() -> None:
        nonlocal screen, fullscreen_enabled
        try:
            screen = create_surface(not fullscreen_enabled)
        except pygame.error:
            return
        fullscreen_enabled = not fullscreen_enabled

    def on_slider(value: float) -> None:
        sim.set_rate_from_slider(value, curve)

    def apply_date(text: str) -> bool:
        try:
            moment = parse_date(text)
        except ValueError:
            return False
        sim.set_date(moment)
        return True

    def open_date_entry() -> None:
        date_entry.open(sim.clock.current_date().astimezone().strftime("%Y-%m-%d %H:%M"))

    def quit_app() -> None:
        save_user_settings(
            {
                "show_labels": show_labels,
                "rate_curve": curve,
                "fullscreen": fullscreen_enabled,
            }
        )
        pygame.quit()
        sys.exit()

    button_width = 110
    button_height = 34
    button_gap = 8
    control_buttons = [
        Button(
            (0, 0, button_width, button_height),
            "Pause",
            sim.toggle_playing,
            lambda: "Pause" if sim.state.is_playing else "Play",
            style=button_style,
        ),
        Button((0, 0, button_width, button_height), "Reset", sim.reset, style=button_style),
        Button((0, 0, button_width, button_height), "Now", sim.set_now, style=button_style),
        Button((0, 0, button_width, button_height), "Set Date", open_date_entry, style=button_style),
        Button(
            (0, 0, button_width, button_height),
            "Labels",
            toggle_labels,
            lambda: "Labels: On" if show_labels else "Labels: Off",
            style=button_style,
        ),
    ]
    stop_button = Button((0, 0, 130, 30), "Stop Following", sim.stop_following, style=stop_style)
    speed_slider = Slider(
        (0, 0, 220, 6),
        SIM_CFG.slider_min,
        SIM_CFG.slider_max,
        slider_position(sim.state.rate, curve),
        on_slider,
    )
    date_entry = TextEntry((20, 68, 320, 34), apply_date, max_length=25)

    def update_layout(size: tuple[int, int]) -> None:
        width, height = size
        y = height - button_height - 20
        for idx, btn in enumerate(control_buttons):
            btn.rect.update(20 + idx * (button_width + button_gap), y, button_width, button_height)
        speed_slider.rect.update(20, y - 34, 220, 6)
        stop_button.rect.update(width - 150, 48, 130, 30)

    press_pos: tuple[int, int] | None = None
    drag_button: int | None = None
    drag_last: tuple[int, int] | None = None
    moved = False
    last_click_ms = -10_000

    # ========= LOOP =========
    try:
        while True:
            current_size = screen.get_size()
            if current_size != overlay_size:
                overlay_size = current_size
                projector.update_size(current_size)
                orbit_layer = pygame.Surface(current_size, pygame.SRCALPHA)
                starfield = generate_starfield(RENDER_CFG.num_stars, size=current_size)
                update_layout(current_size)

            stop_button.visible = sim.state.is_following
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    quit_app()
                if date_entry.handle_event(event):
                    continue
                if event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        sim.stop_following()
                    elif event.key == pygame.K_r:
                        sim.reset()
                    elif event.key == pygame.K_SPACE:
                        sim.toggle_playing()
                    elif event.key == pygame.K_l:
                        toggle_labels()
                    elif event.key == pygame.K_a:
                        toggle_auto_rotate()
                    elif event.key == pygame.K_n:
                        sim.set_now()
                    elif event.key == pygame.K_d:
                        open_date_entry()
                    elif event.key == pygame.K_F11:
                        toggle_fullscreen_mode()
                    continue

                if speed_slider.handle_event(event):
                    continue
                if stop_button.handle_event(event):
                    continue
                if any(btn.handle_event(event) for btn in control_buttons):
                    continue

                if event.type == pygame.MOUSEBUTTONDOWN and event.button in (1, 3):
                    press_pos = event.pos
                    drag_button = event.button
                    drag_last = event.pos
                    moved = False
                elif event.type == pygame.MOUSEMOTION and drag_button is not None and drag_last is not None:
                    dx = event.pos[0] - drag_last[0]
                    dy = event.pos[1] - drag_last[1]
                    drag_last = event.pos
                    if press_pos is not None and (
                        abs(event.pos[0] - press_pos[0]) > CLICK_MOVE_TOLERANCE
                        or abs(event.pos[1] - press_pos[1]) > CLICK_MOVE_TOLERANCE
                    ):
                        moved = True
                    if drag_button == 1:
                        sim.camera.rotate(dx * camera_cfg.rotate_speed, -dy * camera_cfg.rotate_speed)
                    else:
                        units = projector.world_units_per_pixel(sim.camera.frame().distance)
                        sim.camera.pan(-dx * units, dy * units)
                elif event.type == pygame.MOUSEBUTTONUP and event.button == drag_button:
                    if event.button == 1 and not moved:
                        now_ms = pygame.time.get_ticks()
                        if now_ms - last_click_ms <= RENDER_CFG.double_click_ms:
                            sim.reset()
                        else:
                            sim.pick(
                                hit_test(
                                    projected_bodies,
                                    event.pos,
                                    tolerance=RENDER_CFG.pick_tolerance_pixels,
                                )
                            )
                        last_click_ms = now_ms
                    drag_button = None
                    drag_last = None
                    press_pos = None
                elif event.type == pygame.MOUSEWHEEL and event.y != 0:
                    sim.camera.zoom(camera_cfg.zoom_step ** event.y)

            frame_dt = min(frame_timer.tick(), RENDER_CFG.max_frame_dt)
            snapshot = sim.advance(frame_dt)
            projector.look(snapshot.camera)

            screen.fill(RENDER_CFG.background_color)
            draw_starfield(screen, starfield, projector.forward, render_cfg=RENDER_CFG)
            projected_bodies = draw_scene(
                screen,
                orbit_layer,
                snapshot,
                registry,
                projector,
                small_font,
                show_labels=show_labels,
            )

            # --- HUD ---
            width, height = screen.get_size()
            date_text = format_date(sim.clock.current_date().astimezone())
            screen.blit(get_text_surface(title_font, date_text, RENDER_CFG.hud_text_color), (20, 16))
            current_text = "CURRENT: " + format_date(datetime.now().astimezone())
            screen.blit(get_text_surface(small_font, current_text, RENDER_CFG.hud_muted_color), (20, 42))

            speed_text = f"Speed: {format_rate(snapshot.rate)}"
            speed_surf = get_text_surface(small_font, speed_text, RENDER_CFG.hud_text_color)
            screen.blit(speed_surf, (speed_slider.rect.left, speed_slider.rect.top - 24))
            speed_slider.draw(
                screen,
                track_color=RENDER_CFG.slider_track_color,
                fill_color=RENDER_CFG.slider_fill_color,
                knob_color=RENDER_CFG.slider_knob_color,
            )
            mouse_pos = pygame.mouse.get_pos()
            for btn in control_buttons:
                btn.draw(screen, font, mouse_pos)

            info = sim.body_info()
            if info is not None:
                panel = build_text_panel(
                    small_font,
                    [
                        (info.name, RENDER_CFG.hud_text_color),
                        (info.description, RENDER_CFG.hud_muted_color),
                        (f"Orbital period: {info.orbit_period}", RENDER_CFG.hud_text_color),
                        (f"Rotation period: {info.rotation_period}", RENDER_CFG.hud_text_color),
                        (f"Distance: {info.distance}", RENDER_CFG.hud_text_color),
                    ],
                    background_color=RENDER_CFG.panel_background_color,
                    max_width=300,
                )
                screen.blit(panel, panel.get_rect(topright=(width - 20, 90)))

            if snapshot.following and snapshot.selected is not None:
                follow_surf = get_text_surface(font, f"Following: {snapshot.selected}", RENDER_CFG.hud_text_color)
                screen.blit(follow_surf, follow_surf.get_rect(topright=(width - 20, 20)))
                stop_button.draw(screen, small_font, mouse_pos)

            date_entry.draw(
                screen,
                font,
                background_color=RENDER_CFG.panel_background_color,
                text_color=RENDER_CFG.hud_text_color,
                border_color=RENDER_CFG.button_border_color,
                error_color=RENDER_CFG.stop_button_color,
                prompt="Date: ",
            )

            fps_text = get_text_surface(small_font, f"FPS: {clock.get_fps():.1f}", RENDER_CFG.hud_muted_color)
            fps_text = fps_text.copy()
            fps_text.set_alpha(RENDER_CFG.fps_text_alpha)
            screen.blit(fps_text, fps_text.get_rect(bottomright=(width - 16, height - 16)))

            pygame.display.flip()
            clock.tick(60)
    finally:
        if logger is not None:
            logger.close()


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        pygame.quit()
        sys.exit()
