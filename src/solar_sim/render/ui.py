from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Sequence

import pygame

from .assets import Color, get_text_surface


@dataclass(frozen=True)
class ButtonVisualStyle:
    base_color: Color
    hover_color: Color
    text_color: tuple[int, int, int]
    radius: int
    border_color: Color | None = None
    border_width: int = 0


class Button:
    """Simple rectangular button with hover feedback and callbacks."""

    def __init__(
        self,
        rect: tuple[int, int, int, int],
        text: str,
        callback: Callable[[], None],
        text_getter: Callable[[], str] | None = None,
        *,
        style: ButtonVisualStyle | None = None,
    ) -> None:
        self.rect = pygame.Rect(rect)
        self.visible = True
        self._text = text
        self._callback = callback
        self._text_getter = text_getter
        self._style = style

    def get_text(self) -> str:
        if self._text_getter is not None:
            return self._text_getter()
        return self._text

    def draw(
        self,
        surface: pygame.Surface,
        font: pygame.font.Font,
        mouse_pos: tuple[int, int] | None = None,
        *,
        style: ButtonVisualStyle | None = None,
    ) -> None:
        if not self.visible:
            return
        if mouse_pos is None:
            mouse_pos = pygame.mouse.get_pos()
        hovered = self.rect.collidepoint(mouse_pos)
        effective_style = style or self._style
        if effective_style is None:
            raise ValueError("Button style must be provided")
        color = effective_style.hover_color if hovered else effective_style.base_color
        button_surface = pygame.Surface(self.rect.size, pygame.SRCALPHA)
        pygame.draw.rect(
            button_surface,
            color,
            button_surface.get_rect(),
            border_radius=effective_style.radius,
        )
        if effective_style.border_color is not None and effective_style.border_width > 0:
            pygame.draw.rect(
                button_surface,
                effective_style.border_color,
                button_surface.get_rect(),
                effective_style.border_width,
                border_radius=effective_style.radius,
            )
        surface.blit(button_surface, self.rect.topleft)
        text_surf = get_text_surface(font, self.get_text(), effective_style.text_color)
        surface.blit(text_surf, text_surf.get_rect(center=self.rect.center))

    def handle_event(self, event: pygame.event.Event) -> bool:
        if not self.visible:
            return False
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.rect.collidepoint(event.pos):
                self._callback()
                return True
        return False


class Slider:
    """Horizontal slider reporting positions in ``[minimum, maximum]``."""

    def __init__(
        self,
        rect: tuple[int, int, int, int],
        minimum: float,
        maximum: float,
        value: float,
        on_change: Callable[[float], None],
    ) -> None:
        self.rect = pygame.Rect(rect)
        self.minimum = minimum
        self.maximum = maximum
        self.value = value
        self._on_change = on_change
        self._dragging = False

    @property
    def fraction(self) -> float:
        span = self.maximum - self.minimum
        if span <= 0:
            return 0.0
        return max(0.0, min(1.0, (self.value - self.minimum) / span))

    def _value_at(self, x: int) -> float:
        fraction = (x - self.rect.left) / max(1, self.rect.width)
        fraction = max(0.0, min(1.0, fraction))
        return self.minimum + (self.maximum - self.minimum) * fraction

    def _update(self, x: int) -> None:
        value = self._value_at(x)
        if value != self.value:
            self.value = value
            self._on_change(value)

    def handle_event(self, event: pygame.event.Event) -> bool:
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.rect.inflate(0, 12).collidepoint(event.pos):
                self._dragging = True
                self._update(event.pos[0])
                return True
        elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
            was_dragging = self._dragging
            self._dragging = False
            return was_dragging
        elif event.type == pygame.MOUSEMOTION and self._dragging:
            self._update(event.pos[0])
            return True
        return False

    def draw(
        self,
        surface: pygame.Surface,
        *,
        track_color: Color,
        fill_color: Color,
        knob_color: tuple[int, int, int],
    ) -> None:
        track = pygame.Surface(self.rect.size, pygame.SRCALPHA)
        pygame.draw.rect(track, track_color, track.get_rect(), border_radius=self.rect.height // 2)
        fill_width = int(self.rect.width * self.fraction)
        if fill_width > 0:
            pygame.draw.rect(
                track,
                fill_color,
                pygame.Rect(0, 0, fill_width, self.rect.height),
                border_radius=self.rect.height // 2,
            )
        surface.blit(track, self.rect.topleft)
        knob_x = self.rect.left + fill_width
        pygame.draw.circle(surface, knob_color, (knob_x, self.rect.centery), self.rect.height)


class TextEntry:
    """Single-line text field that swallows key presses while open.

    Return hands the text to ``on_submit``; the field closes when the callback
    accepts it and stays open with ``error`` set otherwise. Escape cancels.
    """

    def __init__(
        self,
        rect: tuple[int, int, int, int],
        on_submit: Callable[[str], bool],
        *,
        max_length: int = 32,
    ) -> None:
        self.rect = pygame.Rect(rect)
        self.max_length = max_length
        self.text = ""
        self.active = False
        self.error = False
        self._on_submit = on_submit

    def open(self, initial_text: str = "") -> None:
        self.text = initial_text[: self.max_length]
        self.active = True
        self.error = False

    def close(self) -> None:
        self.active = False
        self.error = False

    def handle_event(self, event: pygame.event.Event) -> bool:
        if not self.active:
            return False
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if not self.rect.collidepoint(event.pos):
                self.close()
            return True
        if event.type != pygame.KEYDOWN:
            return False
        if event.key in (pygame.K_RETURN, pygame.K_KP_ENTER):
            if self._on_submit(self.text.strip()):
                self.close()
            else:
                self.error = True
        elif event.key == pygame.K_ESCAPE:
            self.close()
        elif event.key == pygame.K_BACKSPACE:
            self.text = self.text[:-1]
            self.error = False
        else:
            char = getattr(event, "unicode", "")
            if char and char.isprintable() and len(self.text) < self.max_length:
                self.text += char
                self.error = False
        return True

    def draw(
        self,
        surface: pygame.Surface,
        font: pygame.font.Font,
        *,
        background_color: Color,
        text_color: tuple[int, int, int],
        border_color: Color,
        error_color: Color,
        prompt: str = "",
    ) -> None:
        if not self.active:
            return
        box = pygame.Surface(self.rect.size, pygame.SRCALPHA)
        pygame.draw.rect(box, background_color, box.get_rect(), border_radius=8)
        pygame.draw.rect(
            box,
            error_color if self.error else border_color,
            box.get_rect(),
            2,
            border_radius=8,
        )
        surface.blit(box, self.rect.topleft)
        text_surf = get_text_surface(font, f"{prompt}{self.text}_", text_color)
        surface.blit(text_surf, text_surf.get_rect(midleft=(self.rect.left + 12, self.rect.centery)))


def build_text_panel(
    font: pygame.font.Font,
    lines: Sequence[tuple[str, tuple[int, int, int]]],
    *,
    background_color: Color,
    padding: tuple[int, int] = (14, 14),
    max_width: int | None = None,
) -> pygame.Surface:
    if not lines:
        raise ValueError("lines must not be empty")
    wrapped: list[tuple[str, tuple[int, int, int]]] = []
    for text, color in lines:
        if max_width is None:
            wrapped.append((text, color))
        else:
            wrapped.extend((part, color) for part in wrap_text(text, font, max_width))
    padding_x, padding_y = padding
    line_height = font.get_linesize()
    width = max(font.size(text)[0] for text, _ in wrapped) + padding_x * 2
    height = line_height * len(wrapped) + padding_y * 2
    panel_surface = pygame.Surface((width, height), pygame.SRCALPHA)
    pygame.draw.rect(
        panel_surface,
        background_color,
        panel_surface.get_rect(),
        border_radius=12,
    )
    for idx, (text, color) in enumerate(wrapped):
        if not text:
            continue
        text_surf = get_text_surface(font, text, color)
        panel_surface.blit(text_surf, (padding_x, padding_y + idx * line_height))
    return panel_surface


def wrap_text(text: str, font: pygame.font.Font, max_width: int) -> list[str]:
    words = text.split()
    if not words:
        return [""]
    lines: list[str] = []
    current = words[0]
    for word in words[1:]:
        candidate = f"{current} {word}"
        if font.size(candidate)[0] <= max_width:
            current = candidate
        else:
            lines.append(current)
            current = word
    lines.append(current)
    return lines
