"""Earth-Moon orbit state for the non-contact example."""
from __future__ import annotations

import logging
import math
from typing import Callable

from .config import ORBIT_CFG, OrbitCfg
from .model import FrameSize, OrbitParams, OrbitState, ViewMode
from .physics import accelerations, angular_speed, gravity_force
from .view import ViewModeController

logger = logging.getLogger(__name__)

OrbitEventListener = Callable[[str, dict], None]


def step_orbit(
    state: OrbitState,
    params: OrbitParams,
    mode: ViewMode,
    cfg: OrbitCfg = ORBIT_CFG,
) -> OrbitState:
    """Advance the orbit one tick.

    The angle only moves in explore mode while running. Elapsed time keeps
    counting in diagram mode so the pair highlight can still pulse.
    """

    if state.paused:
        return state
    angle = state.angle
    if mode is ViewMode.EXPLORE:
        angle += angular_speed(params.separation, cfg)
    return OrbitState(angle=angle, elapsed=state.elapsed + cfg.elapsed_step, paused=False)


class OrbitSimulation:
    """Owns orbit parameters, angular state and view mode for one mounted scene."""

    kind = "gravity"

    def __init__(
        self,
        size: FrameSize,
        params: OrbitParams | None = None,
        *,
        view: ViewModeController | None = None,
        cfg: OrbitCfg = ORBIT_CFG,
    ) -> None:
        self.cfg = cfg
        self.params = params or OrbitParams(
            cfg.default_primary_mass, cfg.default_secondary_mass, cfg.default_separation
        )
        self.view = view or ViewModeController()
        self.size = size
        self.state = OrbitState()
        self.ticks = 0
        self._listeners: list[OrbitEventListener] = []
        self.view.subscribe(self._on_mode_change)

    @property
    def view_mode(self) -> ViewMode:
        return self.view.mode

    @property
    def angle(self) -> float:
        return self.state.angle

    @property
    def paused(self) -> bool:
        return self.state.paused

    @property
    def gravity(self) -> float:
        p = self.params
        return gravity_force(p.primary_mass, p.secondary_mass, p.separation, self.cfg)

    @property
    def accelerations(self) -> tuple[float, float]:
        p = self.params
        return accelerations(p.primary_mass, p.secondary_mass, p.separation, self.cfg)

    @property
    def primary_radius(self) -> float:
        return self.cfg.primary_radius_base + self.params.primary_mass * self.cfg.primary_radius_per_mass

    @property
    def secondary_radius(self) -> float:
        return (
            self.cfg.secondary_radius_base
            + self.params.secondary_mass * self.cfg.secondary_radius_per_mass
        )

    def center(self) -> tuple[float, float]:
        return self.size.width * 0.5, self.size.height * 0.5

    def secondary_position(self) -> tuple[float, float]:
        cx, cy = self.center()
        r = self.params.separation
        if self.view.is_diagram:
            return cx + r, cy
        return cx + math.cos(self.state.angle) * r, cy + math.sin(self.state.angle) * r

    def add_listener(self, listener: OrbitEventListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: OrbitEventListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _emit(self, event: str, **details) -> None:
        for listener in list(self._listeners):
            listener(event, details)

    # --------------------------------------------------------------- commands
    def set_primary_mass(self, mass: float) -> None:
        p = self.params
        self.params = OrbitParams.clamped(mass, p.secondary_mass, p.separation, self.cfg)

    def set_secondary_mass(self, mass: float) -> None:
        p = self.params
        self.params = OrbitParams.clamped(p.primary_mass, mass, p.separation, self.cfg)

    def set_separation(self, separation: float) -> None:
        p = self.params
        self.params = OrbitParams.clamped(p.primary_mass, p.secondary_mass, separation, self.cfg)

    def apply_params(self, params: OrbitParams, *, source: str | None = None) -> bool:
        self.params = OrbitParams.clamped(
            params.primary_mass, params.secondary_mass, params.separation, self.cfg
        )
        if source is not None:
            p = self.params
            self._emit(
                "params",
                source=source,
                primary_mass=p.primary_mass,
                secondary_mass=p.secondary_mass,
                separation=p.separation,
            )
        return True

    def pause(self) -> None:
        if not self.state.paused:
            self.state = OrbitState(self.state.angle, self.state.elapsed, paused=True)
            self._emit("pause")

    def resume(self) -> None:
        if self.state.paused:
            self.state = OrbitState(self.state.angle, self.state.elapsed, paused=False)
            self._emit("resume")

    def toggle_pause(self) -> bool:
        if self.state.paused:
            self.resume()
        else:
            self.pause()
        return self.state.paused

    def reset(self) -> None:
        """Restore default parameters and the initial angle."""

        cfg = self.cfg
        self.params = OrbitParams(
            cfg.default_primary_mass, cfg.default_secondary_mass, cfg.default_separation
        )
        self.state = OrbitState()
        logger.debug("orbit simulation reset")
        self._emit("reset")

    def cancel_pending(self) -> None:
        """Nothing is ever deferred in the orbit example."""

    def resize(self, size: FrameSize) -> None:
        # Positions are derived from the centre each tick, so the angle survives.
        self.size = size
        self._emit("resize", width=size.width, height=size.height)

    def set_view_mode(self, mode: ViewMode | str) -> bool:
        return self.view.set_mode(mode)

    def _on_mode_change(self, previous: ViewMode, mode: ViewMode) -> None:
        self._emit("mode", previous=previous.value, mode=mode.value)

    # ------------------------------------------------------------------- tick
    def advance(self, dt: float) -> OrbitState:
        self.state = step_orbit(self.state, self.params, self.view.mode, self.cfg)
        self.ticks += 1
        return self.state

    def snapshot(self) -> dict[str, object]:
        accel_primary, accel_secondary = self.accelerations
        return {
            "primary_mass": self.params.primary_mass,
            "secondary_mass": self.params.secondary_mass,
            "separation": self.params.separation,
            "angle": self.state.angle,
            "elapsed": self.state.elapsed,
            "force": self.gravity,
            "accel_primary": accel_primary,
            "accel_secondary": accel_secondary,
            "paused": int(self.state.paused),
        }


__all__ = ["OrbitSimulation", "step_orbit"]
