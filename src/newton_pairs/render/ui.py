from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Sequence, TYPE_CHECKING

import pygame

from .assets import Color, get_text_surface

if TYPE_CHECKING:  # pragma: no cover
    from newton_pairs.core.config import RenderCfg


@dataclass(frozen=True)
class ButtonVisualStyle:
    base_color: Color
    hover_color: Color
    text_color: tuple[int, int, int]
    radius: int
    border_color: Color | None = None
    border_width: int = 0
    active_color: Color | None = None
    disabled_text_color: tuple[int, int, int] | None = None

    @classmethod
    def from_cfg(cls, render_cfg: "RenderCfg") -> "ButtonVisualStyle":
        return cls(
            base_color=render_cfg.button_color,
            hover_color=render_cfg.button_hover_color,
            text_color=render_cfg.button_text_color,
            radius=render_cfg.button_radius,
            border_color=render_cfg.button_border_color,
            border_width=1,
            active_color=render_cfg.button_border_color,
            disabled_text_color=render_cfg.panel_muted_color,
        )


def _rounded_card(
    size: tuple[int, int],
    fill: Color,
    radius: int,
    border: Color | None = None,
    border_width: int = 0,
) -> pygame.Surface:
    card = pygame.Surface(size, pygame.SRCALPHA)
    bounds = card.get_rect()
    pygame.draw.rect(card, fill, bounds, border_radius=radius)
    if border is not None and border_width > 0:
        pygame.draw.rect(card, border, bounds, border_width, border_radius=radius)
    return card


class Button:
    """Rectangular panel button; ``active`` marks toggles that are on."""

    def __init__(
        self,
        rect: tuple[int, int, int, int],
        text: str,
        callback: Callable[[], None],
        text_getter: Callable[[], str] | None = None,
        *,
        style: ButtonVisualStyle | None = None,
        active: Callable[[], bool] | None = None,
        enabled: Callable[[], bool] | None = None,
    ) -> None:
        self.rect = pygame.Rect(rect)
        self._text = text
        self._callback = callback
        self._text_getter = text_getter
        self._active = active
        self._enabled = enabled
        self._style = style

    def get_text(self) -> str:
        return self._text_getter() if self._text_getter is not None else self._text

    @property
    def is_active(self) -> bool:
        return bool(self._active and self._active())

    @property
    def is_enabled(self) -> bool:
        return self._enabled is None or bool(self._enabled())

    def fill_color(self, style: ButtonVisualStyle, mouse_pos: tuple[int, int]) -> Color:
        if self.is_active and style.active_color is not None:
            return style.active_color
        if self.is_enabled and self.rect.collidepoint(mouse_pos):
            return style.hover_color
        return style.base_color

    def draw(
        self,
        surface: pygame.Surface,
        font: pygame.font.Font,
        mouse_pos: tuple[int, int] | None = None,
        *,
        style: ButtonVisualStyle | None = None,
    ) -> None:
        style = style or self._style
        if style is None:
            raise ValueError("Button style must be provided")
        if mouse_pos is None:
            mouse_pos = pygame.mouse.get_pos()
        card = _rounded_card(
            self.rect.size,
            self.fill_color(style, mouse_pos),
            style.radius,
            style.border_color,
            style.border_width,
        )
        surface.blit(card, self.rect.topleft)
        label_color = style.text_color
        if not self.is_enabled and style.disabled_text_color is not None:
            label_color = style.disabled_text_color
        label = get_text_surface(font, self.get_text(), label_color)
        surface.blit(label, label.get_rect(center=self.rect.center))

    def handle_event(self, event: pygame.event.Event) -> bool:
        """Run the callback on a left click inside the button; True if it fired."""

        if event.type != pygame.MOUSEBUTTONDOWN or event.button != 1:
            return False
        if not self.rect.collidepoint(event.pos) or not self.is_enabled:
            return False
        self._callback()
        return True


def build_text_panel(
    font: pygame.font.Font,
    lines: Sequence[tuple[str, tuple[int, int, int]]],
    *,
    background_color: Color,
    padding: tuple[int, int] = (14, 14),
    min_width: int = 0,
) -> pygame.Surface:
    """Card with one rendered line per entry; empty strings leave a gap."""

    if not lines:
        raise ValueError("lines must not be empty")
    pad_x, pad_y = padding
    line_height = font.get_linesize()
    widest = max(font.size(text)[0] for text, _ in lines)
    panel = _rounded_card(
        (max(min_width, widest + pad_x * 2), line_height * len(lines) + pad_y * 2),
        background_color,
        12,
    )
    y = pad_y
    for text, color in lines:
        if text:
            panel.blit(get_text_surface(font, text, color), (pad_x, y))
        y += line_height
    return panel


__all__ = ["Button", "ButtonVisualStyle", "build_text_panel"]
