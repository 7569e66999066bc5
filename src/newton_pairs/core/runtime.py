"""Mounting a simulation onto the scheduler and the size tracker."""
from __future__ import annotations

import logging
from typing import Callable, Protocol

from .model import FrameSize
from .size import SurfaceSizeTracker
from .timekeeping import FrameScheduler, ScheduledLoop

logger = logging.getLogger(__name__)


class Simulation(Protocol):
    kind: str
    size: FrameSize

    def advance(self, dt: float) -> object: ...

    def resize(self, size: FrameSize) -> None: ...

    def cancel_pending(self) -> None: ...


DrawCallback = Callable[[object, Simulation], None]
SurfaceProvider = Callable[[], object | None]
TickObserver = Callable[[Simulation, float], None]


class SimulationRuntime:
    """One mounted simulation instance and its single tick loop.

    Each tick advances the simulation and then redraws it. The loop is
    cancelled on unmount and on every frame size change; a resize restarts it
    against the new size once the simulation has reset its geometry.
    """

    def __init__(
        self,
        simulation: Simulation,
        draw: DrawCallback,
        surface_provider: SurfaceProvider,
        scheduler: FrameScheduler,
        tracker: SurfaceSizeTracker,
        *,
        on_tick: TickObserver | None = None,
    ) -> None:
        self.simulation = simulation
        self._draw = draw
        self._surface_provider = surface_provider
        self._scheduler = scheduler
        self._tracker = tracker
        self._on_tick = on_tick
        self._loop: ScheduledLoop | None = None
        self.skipped_ticks = 0

    @property
    def mounted(self) -> bool:
        return self._loop is not None and self._loop.active

    @property
    def loop(self) -> ScheduledLoop | None:
        return self._loop

    def mount(self) -> None:
        if self.mounted:
            return
        self._tracker.subscribe(self._on_resize)
        if self.simulation.size != self._tracker.size:
            self.simulation.resize(self._tracker.size)
        self._start_loop()
        logger.debug("%s mounted at %s", self.simulation.kind, self._tracker.size.as_tuple())

    def unmount(self) -> None:
        self._tracker.unsubscribe(self._on_resize)
        self._scheduler.cancel(self._loop)
        self._loop = None
        self.simulation.cancel_pending()
        logger.debug("%s unmounted", self.simulation.kind)

    def _start_loop(self) -> None:
        self._loop = self._scheduler.repeat(self._tick, name=self.simulation.kind)

    def _on_resize(self, size: FrameSize) -> None:
        self._scheduler.cancel(self._loop)
        self.simulation.cancel_pending()
        self.simulation.resize(size)
        self._start_loop()

    def _tick(self, dt: float) -> None:
        surface = self._surface_provider()
        if surface is None:
            self.skipped_ticks += 1
            logger.debug("%s tick skipped: no drawing surface", self.simulation.kind)
            return
        self.simulation.advance(dt)
        self._draw(surface, self.simulation)
        if self._on_tick is not None:
            self._on_tick(self.simulation, dt)


__all__ = ["Simulation", "SimulationRuntime"]
