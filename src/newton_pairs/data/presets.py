"""Preset parameter sets for the two interaction examples."""
from __future__ import annotations

from dataclasses import dataclass

from newton_pairs.core.model import ContactParams, OrbitParams


@dataclass(frozen=True)
class ContactPreset:
    key: str
    name: str
    mass: int
    speed: int
    description: str

    def params(self) -> ContactParams:
        return ContactParams.clamped(self.mass, self.speed)


@dataclass(frozen=True)
class OrbitPreset:
    key: str
    name: str
    primary_mass: int
    secondary_mass: int
    separation: int
    description: str

    def params(self) -> OrbitParams:
        return OrbitParams.clamped(self.primary_mass, self.secondary_mass, self.separation)


CONTACT_PRESET_DEFINITIONS: tuple[ContactPreset, ...] = (
    ContactPreset(
        key="textbook",
        name="Textbook",
        mass=5,
        speed=5,
        description="The worked example: 5 kg hammer at 5 m/s (550 N).",
    ),
    ContactPreset(
        key="tap",
        name="Light tap",
        mass=2,
        speed=2,
        description="Barely drives the nail; both arrows stay short.",
    ),
    ContactPreset(
        key="heavy",
        name="Heavy blow",
        mass=10,
        speed=10,
        description="Largest force the controls allow (2200 N).",
    ),
    ContactPreset(
        key="fast_light",
        name="Fast light hammer",
        mass=2,
        speed=10,
        description="Same force as a slow heavy hammer, arriving faster.",
    ),
    ContactPreset(
        key="slow_heavy",
        name="Slow heavy hammer",
        mass=10,
        speed=2,
        description="Same force as a fast light hammer, arriving slower.",
    ),
)

ORBIT_PRESET_DEFINITIONS: tuple[OrbitPreset, ...] = (
    OrbitPreset(
        key="textbook",
        name="Textbook",
        primary_mass=6,
        secondary_mass=3,
        separation=220,
        description="Earth twice as massive as the Moon at 220 px.",
    ),
    OrbitPreset(
        key="equal",
        name="Equal masses",
        primary_mass=5,
        secondary_mass=5,
        separation=220,
        description="Equal forces and, now, equal accelerations.",
    ),
    OrbitPreset(
        key="heavy_primary",
        name="Heavy Earth",
        primary_mass=10,
        secondary_mass=1,
        separation=220,
        description="Ten times the mass, the same pull on each body.",
    ),
    OrbitPreset(
        key="close",
        name="Close pair",
        primary_mass=6,
        secondary_mass=3,
        separation=120,
        description="Shortest separation: strongest force, fastest orbit.",
    ),
    OrbitPreset(
        key="distant",
        name="Distant pair",
        primary_mass=6,
        secondary_mass=3,
        separation=350,
        description="Largest separation: weakest force, slowest orbit.",
    ),
)

CONTACT_PRESETS: dict[str, ContactPreset] = {p.key: p for p in CONTACT_PRESET_DEFINITIONS}
ORBIT_PRESETS: dict[str, OrbitPreset] = {p.key: p for p in ORBIT_PRESET_DEFINITIONS}
CONTACT_PRESET_ORDER: list[str] = [p.key for p in CONTACT_PRESET_DEFINITIONS]
ORBIT_PRESET_ORDER: list[str] = [p.key for p in ORBIT_PRESET_DEFINITIONS]
DEFAULT_PRESET_KEY = "textbook"
PRESET_FLASH_DURATION = 2.0


def preset_for(kind: str, index: int) -> ContactPreset | OrbitPreset:
    """Return the preset at display position ``index`` for ``kind``."""

    if kind == "contact":
        return CONTACT_PRESETS[CONTACT_PRESET_ORDER[index]]
    if kind == "gravity":
        return ORBIT_PRESETS[ORBIT_PRESET_ORDER[index]]
    raise ValueError(f"Unknown simulation kind: {kind!r}")


__all__ = [
    "CONTACT_PRESET_DEFINITIONS",
    "CONTACT_PRESET_ORDER",
    "CONTACT_PRESETS",
    "ContactPreset",
    "DEFAULT_PRESET_KEY",
    "ORBIT_PRESET_DEFINITIONS",
    "ORBIT_PRESET_ORDER",
    "ORBIT_PRESETS",
    "OrbitPreset",
    "PRESET_FLASH_DURATION",
    "preset_for",
]
