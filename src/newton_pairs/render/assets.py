from __future__ import annotations

from collections import OrderedDict
from typing import Callable, Hashable, Iterable

import pygame


Color = tuple[int, int, int] | tuple[int, int, int, int]


class SurfaceCache:
    """LRU cache for generated surfaces such as gradients and shaded discs."""

    def __init__(self, max_size: int = 64) -> None:
        self._max_size = max(1, max_size)
        self._entries: OrderedDict[Hashable, pygame.Surface] = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: Hashable, factory: Callable[[], pygame.Surface]) -> pygame.Surface:
        cached = self._entries.get(key)
        if cached is not None:
            self._entries.move_to_end(key)
            return cached
        surface = factory()
        self._entries[key] = surface
        if len(self._entries) > self._max_size:
            self._entries.popitem(last=False)
        return surface

    def clear(self) -> None:
        self._entries.clear()


_TEXT_SURFACE_CACHE_MAX_SIZE = 256
_TEXT_SURFACE_CACHE: OrderedDict[tuple[int, str, Color], pygame.Surface] = OrderedDict()


def get_text_surface(font: pygame.font.Font, text: str, color: Color) -> pygame.Surface:
    """Return a cached rendered surface for the given font, text and color."""

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


def load_font(preferred_names: Iterable[str], size: int, *, bold: bool = False) -> pygame.font.Font:
    names = list(preferred_names)
    for name in names:
        match = pygame.font.match_font(name, bold=bold)
        if match:
            return pygame.font.Font(match, size)
    # pygame's bundled default font
    font = pygame.font.Font(None, int(size * 1.3))
    font.set_bold(bold)
    return font
