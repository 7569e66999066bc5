"""Hammer-and-nail strike state machine.

A strike runs ``idle -> descending -> contact -> rising -> idle``. The impact
force is sampled once on entering contact, and an optional hold freezes the
scene at the moment of interaction before the nail is driven in. In diagram
mode the machine is pinned to the contact pose so the force pair is always
visible.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from .config import CONTACT_CFG, ContactCfg
from .model import (
    ContactParams,
    ContactPhase,
    ContactState,
    FrameSize,
    ImpactResult,
    ViewMode,
)
from .physics import contact_force, penetration_depth
from .view import ViewModeController

logger = logging.getLogger(__name__)

ContactEventListener = Callable[[str, dict], None]


@dataclass(frozen=True)
class ContactGeometry:
    """Scale-relative layout of the contact scene for one frame size."""

    width: float
    height: float
    scale: float
    ground_y: float
    target_x: float
    target_height: float
    striker_head_height: float
    rest_y: float
    diagram_striker_y: float
    target_rest_y: float

    @classmethod
    def from_size(cls, size: FrameSize, cfg: ContactCfg = CONTACT_CFG) -> "ContactGeometry":
        scale = size.height / cfg.reference_height
        ground_y = size.height * cfg.ground_ratio
        target_height = cfg.target_height * scale
        return cls(
            width=float(size.width),
            height=float(size.height),
            scale=scale,
            ground_y=ground_y,
            target_x=size.width * 0.5,
            target_height=target_height,
            striker_head_height=cfg.striker_head_height * scale,
            rest_y=ground_y - cfg.rest_offset * scale,
            diagram_striker_y=ground_y - cfg.diagram_offset * scale,
            target_rest_y=ground_y - target_height,
        )

    def contact_y(self, target_y: float, cfg: ContactCfg = CONTACT_CFG) -> float:
        """Striker position at which its face meets the target head."""

        return target_y - self.striker_head_height * cfg.striker_contact_ratio

    def max_target_y(self, cfg: ContactCfg = CONTACT_CFG) -> float:
        return self.ground_y - cfg.ground_clearance * self.scale


def initial_contact_state() -> ContactState:
    return ContactState()


def step_contact(
    state: ContactState,
    params: ContactParams,
    geometry: ContactGeometry,
    mode: ViewMode,
    dt: float,
    cfg: ContactCfg = CONTACT_CFG,
) -> ContactState:
    """Advance the strike by one tick and return the new state.

    ``dt`` is the wall-clock frame time and only drains the contact hold;
    all motion advances by fixed per-tick steps.
    """

    if not state.initialized:
        state = state.evolve(
            striker_y=geometry.rest_y,
            target_y=geometry.target_rest_y,
            initialized=True,
        )

    if mode is ViewMode.DIAGRAM:
        return state.evolve(
            phase=ContactPhase.CONTACT,
            striker_y=geometry.diagram_striker_y,
            target_y=geometry.target_rest_y,
            contact_frame_count=0,
            hold_remaining=0.0,
            force=contact_force(params.mass, params.speed, cfg),
        )

    scale = geometry.scale
    if state.phase is ContactPhase.DESCENDING:
        contact_y = geometry.contact_y(state.target_y, cfg)
        striker_y = state.striker_y + params.speed * cfg.descent_rate * scale
        if striker_y < contact_y:
            return state.evolve(striker_y=striker_y)
        force = contact_force(params.mass, params.speed, cfg)
        depth = penetration_depth(force, scale, cfg)
        return state.evolve(
            phase=ContactPhase.CONTACT,
            striker_y=contact_y,
            contact_frame_count=0,
            force=force,
            hold_target_y=min(geometry.max_target_y(cfg), state.target_y + depth),
            hold_remaining=max(0.0, cfg.hold_duration),
        )

    if state.phase is ContactPhase.CONTACT:
        if state.hold_remaining > 0.0:
            return state.evolve(hold_remaining=max(0.0, state.hold_remaining - max(0.0, dt)))
        frames = state.contact_frame_count + 1
        striker_y, target_y = state.striker_y, state.target_y
        if target_y < state.hold_target_y:
            target_y += cfg.sink_step * scale
            striker_y += cfg.sink_step * scale
        if frames > cfg.contact_frame_limit:
            return state.evolve(
                phase=ContactPhase.RISING,
                contact_frame_count=frames,
                striker_y=striker_y,
                target_y=target_y,
            )
        return state.evolve(contact_frame_count=frames, striker_y=striker_y, target_y=target_y)

    if state.phase is ContactPhase.RISING:
        striker_y = state.striker_y - cfg.rise_step * scale
        if striker_y <= geometry.rest_y:
            return state.evolve(phase=ContactPhase.IDLE, striker_y=geometry.rest_y)
        return state.evolve(striker_y=striker_y)

    return state


class ContactSimulation:
    """Owns the strike state, its parameters and view mode for one mounted scene."""

    kind = "contact"

    def __init__(
        self,
        size: FrameSize,
        params: ContactParams | None = None,
        *,
        view: ViewModeController | None = None,
        cfg: ContactCfg = CONTACT_CFG,
    ) -> None:
        self.cfg = cfg
        self.params = params or ContactParams(cfg.default_mass, cfg.default_speed)
        self.view = view or ViewModeController()
        self.size = size
        self.geometry = ContactGeometry.from_size(size, cfg)
        self.state = initial_contact_state()
        self.ticks = 0
        self._listeners: list[ContactEventListener] = []
        self.view.subscribe(self._on_mode_change)

    # ------------------------------------------------------------------ state
    @property
    def phase(self) -> ContactPhase:
        return self.state.phase

    @property
    def impact(self) -> ImpactResult:
        return ImpactResult.of(self.state)

    @property
    def view_mode(self) -> ViewMode:
        return self.view.mode

    @property
    def is_striking(self) -> bool:
        return self.state.phase is not ContactPhase.IDLE and not self.view.is_diagram

    @property
    def holding(self) -> bool:
        return self.state.holding and not self.view.is_diagram

    def add_listener(self, listener: ContactEventListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: ContactEventListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _emit(self, event: str, **details) -> None:
        for listener in list(self._listeners):
            listener(event, details)

    # --------------------------------------------------------------- commands
    def set_mass(self, mass: float) -> None:
        self.params = ContactParams.clamped(mass, self.params.speed, self.cfg)

    def set_speed(self, speed: float) -> None:
        self.params = ContactParams.clamped(self.params.mass, speed, self.cfg)

    def apply_params(self, params: ContactParams, *, source: str | None = None) -> bool:
        """Replace both parameters; ignored while a strike is in progress."""

        if self.is_striking:
            return False
        self.params = ContactParams.clamped(params.mass, params.speed, self.cfg)
        if source is not None:
            self._emit("params", source=source, mass=self.params.mass, speed=self.params.speed)
        return True

    def strike(self) -> bool:
        if self.view.is_diagram or self.state.phase is not ContactPhase.IDLE:
            logger.debug("strike ignored in phase %s", self.state.phase.value)
            return False
        self.state = self.state.evolve(
            phase=ContactPhase.DESCENDING,
            force=0,
            hold_remaining=0.0,
            contact_frame_count=0,
        )
        self._emit("strike", mass=self.params.mass, speed=self.params.speed)
        self._emit("phase", previous=ContactPhase.IDLE.value, phase=ContactPhase.DESCENDING.value)
        return True

    def continue_after_contact(self) -> bool:
        """End a pending hold early."""

        if not self.state.holding:
            return False
        self.state = self.state.evolve(hold_remaining=0.0)
        self._emit("hold_released")
        return True

    def reset(self) -> None:
        """Cancel any pending hold and return to idle with fresh geometry."""

        self.state = initial_contact_state()
        logger.debug("contact simulation reset")
        self._emit("reset")

    def cancel_pending(self) -> None:
        if self.state.hold_remaining > 0.0:
            self.state = self.state.evolve(hold_remaining=0.0)
            logger.debug("pending contact hold cancelled")

    def resize(self, size: FrameSize) -> None:
        self.size = size
        self.geometry = ContactGeometry.from_size(size, self.cfg)
        self.state = initial_contact_state()
        self._emit("resize", width=size.width, height=size.height)

    def set_view_mode(self, mode: ViewMode | str) -> bool:
        return self.view.set_mode(mode)

    def _on_mode_change(self, previous: ViewMode, mode: ViewMode) -> None:
        # Leaving the pinned diagram pose starts explore from rest.
        if previous is ViewMode.DIAGRAM:
            self.state = initial_contact_state()
        self._emit("mode", previous=previous.value, mode=mode.value)

    # ------------------------------------------------------------------- tick
    def advance(self, dt: float) -> ContactState:
        previous = self.state.phase
        self.state = step_contact(
            self.state, self.params, self.geometry, self.view.mode, dt, self.cfg
        )
        self.ticks += 1
        if self.state.phase is not previous:
            logger.debug("contact phase %s -> %s", previous.value, self.state.phase.value)
            self._emit("phase", previous=previous.value, phase=self.state.phase.value)
        return self.state

    def snapshot(self) -> dict[str, object]:
        impact = self.impact
        return {
            "mass": self.params.mass,
            "speed": self.params.speed,
            "phase": self.state.phase.value,
            "striker_y": self.state.striker_y,
            "target_y": self.state.target_y,
            "force": impact.force_magnitude,
            "active": int(impact.active),
            "holding": int(self.holding),
        }


__all__ = [
    "ContactGeometry",
    "ContactSimulation",
    "initial_contact_state",
    "step_contact",
]
