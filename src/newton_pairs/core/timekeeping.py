"""Frame timing and the cooperative per-frame scheduler."""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Protocol

from .config import SCHEDULER_CFG, SchedulerCfg

logger = logging.getLogger(__name__)

TickCallback = Callable[[float], None]


@dataclass
class FrameTimer:
    """High resolution timer based on :func:`time.perf_counter`."""

    last_time: float = field(default_factory=time.perf_counter)

    def tick(self) -> float:
        now = time.perf_counter()
        dt = now - self.last_time
        self.last_time = now
        return dt


class Pacer(Protocol):
    def wait(self) -> float:
        """Block until the next frame and return the elapsed seconds."""


class ClockPacer:
    """Paces frames with :class:`pygame.time.Clock` at the configured rate."""

    def __init__(self, cfg: SchedulerCfg = SCHEDULER_CFG) -> None:
        import pygame

        self._clock = pygame.time.Clock()
        self._timer = FrameTimer()
        self._cfg = cfg

    @property
    def fps(self) -> float:
        return self._clock.get_fps()

    def wait(self) -> float:
        self._clock.tick(self._cfg.frame_rate)
        return self._timer.tick()


class ScheduledLoop:
    """Handle for one "repeat until cancelled" registration."""

    def __init__(self, callback: TickCallback, name: str) -> None:
        self._callback = callback
        self.name = name
        self.active = True
        self.ticks = 0

    def cancel(self) -> None:
        if self.active:
            self.active = False
            logger.debug("loop %s cancelled after %d ticks", self.name, self.ticks)

    def run(self, dt: float) -> None:
        if not self.active:
            return
        self._callback(dt)
        self.ticks += 1


class FrameScheduler:
    """Runs every active loop once per frame, then yields to the pacer.

    Single threaded: loops run one after another, and a loop cancelled by an
    earlier callback in the same frame does not run again.
    """

    def __init__(self, pacer: Pacer | None = None, cfg: SchedulerCfg = SCHEDULER_CFG) -> None:
        self._pacer = pacer
        self._cfg = cfg
        self._loops: list[ScheduledLoop] = []

    @property
    def pacer(self) -> Pacer:
        if self._pacer is None:
            self._pacer = ClockPacer(self._cfg)
        return self._pacer

    @property
    def active_loops(self) -> list[ScheduledLoop]:
        return [loop for loop in self._loops if loop.active]

    def repeat(self, callback: TickCallback, name: str = "loop") -> ScheduledLoop:
        loop = ScheduledLoop(callback, name)
        self._loops.append(loop)
        logger.debug("loop %s scheduled", name)
        return loop

    def cancel(self, loop: ScheduledLoop | None) -> None:
        if loop is not None:
            loop.cancel()

    def cancel_all(self) -> None:
        for loop in self._loops:
            loop.cancel()
        self._loops.clear()

    def run_frame(self, dt: float | None = None) -> float:
        """Run one frame; with ``dt`` given the pacer is skipped."""

        if dt is None:
            dt = self.pacer.wait()
        dt = max(0.0, min(dt, self._cfg.max_frame_delta))
        for loop in list(self._loops):
            loop.run(dt)
        self._loops = [loop for loop in self._loops if loop.active]
        return dt


__all__ = ["ClockPacer", "FrameScheduler", "FrameTimer", "Pacer", "ScheduledLoop"]
