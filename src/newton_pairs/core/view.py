"""Diagram/explore toggle owned by each simulation instance."""
from __future__ import annotations

import logging
from typing import Callable

from .model import ViewMode

logger = logging.getLogger(__name__)

ModeListener = Callable[[ViewMode, ViewMode], None]


class ViewModeController:
    """Holds the current :class:`ViewMode` and notifies listeners on change."""

    def __init__(self, mode: ViewMode | str = ViewMode.DIAGRAM) -> None:
        self._mode = ViewMode.parse(mode)
        self._listeners: list[ModeListener] = []

    @property
    def mode(self) -> ViewMode:
        return self._mode

    @property
    def is_diagram(self) -> bool:
        return self._mode is ViewMode.DIAGRAM

    def subscribe(self, listener: ModeListener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: ModeListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def set_mode(self, mode: ViewMode | str) -> bool:
        """Switch to ``mode``; returns ``False`` when nothing changed."""

        new_mode = ViewMode.parse(mode)
        if new_mode is self._mode:
            return False
        previous = self._mode
        self._mode = new_mode
        logger.debug("view mode %s -> %s", previous.value, new_mode.value)
        for listener in list(self._listeners):
            listener(previous, new_mode)
        return True

    def toggle(self) -> ViewMode:
        self.set_mode(ViewMode.EXPLORE if self.is_diagram else ViewMode.DIAGRAM)
        return self._mode


__all__ = ["ViewModeController"]
