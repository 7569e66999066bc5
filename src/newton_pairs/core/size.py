"""Tracks the scene host's size and publishes clamped frame sizes."""
from __future__ import annotations

import logging
from typing import Callable, Protocol

from .config import RENDER_CFG
from .model import FrameSize

logger = logging.getLogger(__name__)

SizeListener = Callable[[FrameSize], None]


class SizedHost(Protocol):
    width: int
    height: int


class SurfaceSizeTracker:
    """Observe a host rect (anything with ``width``/``height``) and clamp its size.

    Listeners are called only when the clamped size actually changes and must
    treat the call as a reset signal for scale-relative geometry.
    """

    def __init__(
        self,
        initial: tuple[int, int] = RENDER_CFG.default_frame_size,
        *,
        minimum: int = RENDER_CFG.min_frame_size,
    ) -> None:
        self._minimum = minimum
        self._size = FrameSize.from_observed(*initial, minimum=minimum)
        self._listeners: list[SizeListener] = []

    @property
    def size(self) -> FrameSize:
        return self._size

    def subscribe(self, listener: SizeListener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: SizeListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def observe(self, host: SizedHost | None) -> FrameSize:
        if host is None:
            return self._size
        return self.observe_size(host.width, host.height)

    def observe_size(self, width: float, height: float) -> FrameSize:
        new_size = FrameSize.from_observed(width, height, minimum=self._minimum)
        if new_size == self._size:
            return self._size
        logger.debug("frame size %s -> %s", self._size.as_tuple(), new_size.as_tuple())
        self._size = new_size
        for listener in list(self._listeners):
            listener(new_size)
        return new_size


__all__ = ["SurfaceSizeTracker"]
