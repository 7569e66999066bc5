"""Data models for the contact and orbit simulation state."""
from __future__ import annotations

import math
from dataclasses import dataclass, replace
from enum import Enum

from .config import CONTACT_CFG, ORBIT_CFG, RENDER_CFG, ContactCfg, OrbitCfg


def _clamp_int(value: float, bounds: tuple[int, int]) -> int:
    lo, hi = bounds
    return int(max(lo, min(hi, round(value))))


class ViewMode(Enum):
    """Presentation mode shared by the simulations and their renderers."""

    DIAGRAM = "diagram"
    EXPLORE = "explore"

    @classmethod
    def parse(cls, value: "ViewMode | str") -> "ViewMode":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValueError(f"Unknown view mode: {value!r}") from None


class ContactPhase(Enum):
    IDLE = "idle"
    DESCENDING = "descending"
    CONTACT = "contact"
    RISING = "rising"


@dataclass(frozen=True)
class FrameSize:
    """Drawing surface dimensions, never smaller than the configured minimum."""

    width: int
    height: int

    @classmethod
    def from_observed(
        cls, width: float, height: float, minimum: int = RENDER_CFG.min_frame_size
    ) -> "FrameSize":
        return cls(
            width=max(minimum, int(math.floor(width))),
            height=max(minimum, int(math.floor(height))),
        )

    def as_tuple(self) -> tuple[int, int]:
        return self.width, self.height


@dataclass(frozen=True)
class ContactParams:
    mass: int = CONTACT_CFG.default_mass
    speed: int = CONTACT_CFG.default_speed

    @classmethod
    def clamped(cls, mass: float, speed: float, cfg: ContactCfg = CONTACT_CFG) -> "ContactParams":
        return cls(mass=_clamp_int(mass, cfg.mass_range), speed=_clamp_int(speed, cfg.speed_range))


@dataclass(frozen=True)
class ContactState:
    """Strike state; positions are in scene pixels for the current frame size."""

    phase: ContactPhase = ContactPhase.IDLE
    striker_y: float = 0.0
    target_y: float = 0.0
    contact_frame_count: int = 0
    hold_target_y: float = 0.0
    hold_remaining: float = 0.0
    force: int = 0
    initialized: bool = False

    @property
    def holding(self) -> bool:
        return self.phase is ContactPhase.CONTACT and self.hold_remaining > 0.0

    def evolve(self, **changes) -> "ContactState":
        return replace(self, **changes)


@dataclass(frozen=True)
class ImpactResult:
    force_magnitude: int = 0
    active: bool = False

    @classmethod
    def of(cls, state: ContactState) -> "ImpactResult":
        return cls(force_magnitude=state.force, active=state.phase is ContactPhase.CONTACT)


@dataclass(frozen=True)
class OrbitParams:
    primary_mass: int = ORBIT_CFG.default_primary_mass
    secondary_mass: int = ORBIT_CFG.default_secondary_mass
    separation: int = ORBIT_CFG.default_separation

    @classmethod
    def clamped(
        cls,
        primary_mass: float,
        secondary_mass: float,
        separation: float,
        cfg: OrbitCfg = ORBIT_CFG,
    ) -> "OrbitParams":
        return cls(
            primary_mass=_clamp_int(primary_mass, cfg.mass_range),
            secondary_mass=_clamp_int(secondary_mass, cfg.mass_range),
            separation=_clamp_int(separation, cfg.separation_range),
        )


@dataclass(frozen=True)
class OrbitState:
    angle: float = 0.0
    elapsed: float = 0.0
    paused: bool = False


@dataclass
class DisplayOptions:
    """Renderer-only toggles; physics never reads these."""

    show_orbit_path: bool = True
    show_acceleration: bool = False
    highlight_pair: bool = False


__all__ = [
    "ContactParams",
    "ContactPhase",
    "ContactState",
    "DisplayOptions",
    "FrameSize",
    "ImpactResult",
    "OrbitParams",
    "OrbitState",
    "ViewMode",
]
