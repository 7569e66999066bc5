"""Force and kinematics helpers for the two interaction examples.

All values are teaching-scale relative units. The contact force grows with
mass and swing speed, the gravitational pull follows ``m1 * m2 / r**2`` with a
display floor, and accelerations are only ever derived for display.
"""
from __future__ import annotations

from .config import CONTACT_CFG, ORBIT_CFG, ContactCfg, OrbitCfg


def clamp(value: float, lo: float, hi: float) -> float:
    """Clamp *value* between *lo* and *hi*."""

    return max(lo, min(hi, value))


def contact_force(mass: float, speed: float, cfg: ContactCfg = CONTACT_CFG) -> int:
    """Impact force of the striker on the target."""

    return int(round(mass * speed * cfg.impact_constant))


def penetration_depth(force: float, scale: float, cfg: ContactCfg = CONTACT_CFG) -> float:
    """How far the target is driven in by an impact of ``force``."""

    return min(cfg.depth_cap * scale, force / cfg.depth_divisor)


def gravity_force(
    primary_mass: float,
    secondary_mass: float,
    separation: float,
    cfg: OrbitCfg = ORBIT_CFG,
) -> float:
    """Mutual attraction between the two bodies, never below the display floor."""

    if separation <= 0.0:
        return cfg.force_floor
    force = cfg.gravitational_constant * primary_mass * secondary_mass / (separation * separation)
    return max(cfg.force_floor, force)


def acceleration(force: float, mass: float) -> float:
    """Newton's second law, ``a = F / m``."""

    if mass <= 0.0:
        raise ValueError("mass must be positive")
    return force / mass


def accelerations(
    primary_mass: float,
    secondary_mass: float,
    separation: float,
    cfg: OrbitCfg = ORBIT_CFG,
) -> tuple[float, float]:
    """Accelerations of (primary, secondary) produced by the same gravitational force."""

    force = gravity_force(primary_mass, secondary_mass, separation, cfg)
    return acceleration(force, primary_mass), acceleration(force, secondary_mass)


def angular_speed(separation: float, cfg: OrbitCfg = ORBIT_CFG) -> float:
    """Per-tick angle increment; closer bodies orbit faster.

    Hand tuned for legibility, not derived from the gravitational force.
    """

    return cfg.base_angular_speed + (cfg.distance_reference / separation) * cfg.distance_gain


__all__ = [
    "acceleration",
    "accelerations",
    "angular_speed",
    "clamp",
    "contact_force",
    "gravity_force",
    "penetration_depth",
]
