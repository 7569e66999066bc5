"""Offscreen drawing surface for one scene host."""
from __future__ import annotations

import pygame

from newton_pairs.core.model import FrameSize


class SceneCanvas:
    """Logical-size surface scaled by the device pixel ratio when presented.

    Scenes always draw in logical pixels. With a ratio above 1 the backing
    surface is larger and the logical drawing is smoothly scaled into it.
    """

    def __init__(self, size: FrameSize, pixel_ratio: float = 1.0) -> None:
        self.pixel_ratio = max(1.0, float(pixel_ratio))
        self._surface: pygame.Surface | None = None
        self.size = size
        self.resize(size)

    @property
    def surface(self) -> pygame.Surface | None:
        return self._surface

    @property
    def backing_size(self) -> tuple[int, int]:
        return (
            int(round(self.size.width * self.pixel_ratio)),
            int(round(self.size.height * self.pixel_ratio)),
        )

    def resize(self, size: FrameSize) -> None:
        self.size = size
        self._surface = pygame.Surface(size.as_tuple())

    def release(self) -> None:
        self._surface = None

    def present(self, target: pygame.Surface, topleft: tuple[int, int]) -> None:
        if self._surface is None:
            return
        if self.pixel_ratio == 1.0:
            target.blit(self._surface, topleft)
            return
        target.blit(pygame.transform.smoothscale(self._surface, self.backing_size), topleft)


__all__ = ["SceneCanvas"]
