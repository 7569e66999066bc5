"""Geometry of action-reaction arrow pairs.

Both arrows of a pair are built from a single length computed once from the
shared magnitude, and arrow B always points opposite to arrow A. Neither
arrow's length is ever derived on its own.
"""
from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np


def _clamp(value: float, minimum: float, maximum: float) -> float:
    return max(minimum, min(maximum, value))


def _unit(direction: np.ndarray) -> np.ndarray:
    norm = float(np.linalg.norm(direction))
    if norm <= 0.0:
        raise ValueError("direction must be non-zero")
    return direction / norm


@dataclass(frozen=True)
class ArrowScale:
    """Maps a force magnitude to an on-screen arrow length in pixels."""

    factor: float
    cap: float
    offset: float = 0.0

    def length(self, magnitude: float) -> float:
        return _clamp(self.offset + magnitude * self.factor, 0.0, max(0.0, self.cap))


@dataclass(frozen=True)
class ForceVectorPair:
    origin_a: np.ndarray
    end_a: np.ndarray
    origin_b: np.ndarray
    end_b: np.ndarray
    magnitude: float
    length: float

    def lengths(self) -> tuple[float, float]:
        return (
            float(np.linalg.norm(self.end_a - self.origin_a)),
            float(np.linalg.norm(self.end_b - self.origin_b)),
        )

    def direction_a(self) -> np.ndarray:
        return self.end_a - self.origin_a

    def direction_b(self) -> np.ndarray:
        return self.end_b - self.origin_b


def force_pair(
    magnitude: float,
    anchor_a: tuple[float, float],
    direction_a: tuple[float, float],
    anchor_b: tuple[float, float],
    scale: ArrowScale,
) -> ForceVectorPair:
    """Build the pair: arrow A along ``direction_a``, arrow B opposite it."""

    unit = _unit(np.asarray(direction_a, dtype=float))
    length = scale.length(magnitude)
    origin_a = np.asarray(anchor_a, dtype=float)
    origin_b = np.asarray(anchor_b, dtype=float)
    return ForceVectorPair(
        origin_a=origin_a,
        end_a=origin_a + unit * length,
        origin_b=origin_b,
        end_b=origin_b - unit * length,
        magnitude=float(magnitude),
        length=length,
    )


def arrow_head(
    start: tuple[float, float] | np.ndarray,
    end: tuple[float, float] | np.ndarray,
    head_length: float,
    head_angle_deg: float,
) -> list[tuple[float, float]]:
    """Triangle ``[tip, left, right]`` for an arrow from ``start`` to ``end``."""

    sx, sy = float(start[0]), float(start[1])
    ex, ey = float(end[0]), float(end[1])
    angle = math.atan2(ey - sy, ex - sx)
    spread = math.radians(head_angle_deg)
    left = (
        ex - head_length * math.cos(angle - spread),
        ey - head_length * math.sin(angle - spread),
    )
    right = (
        ex - head_length * math.cos(angle + spread),
        ey - head_length * math.sin(angle + spread),
    )
    return [(ex, ey), left, right]


def label_anchor(
    start: tuple[float, float] | np.ndarray,
    end: tuple[float, float] | np.ndarray,
    distance: float = 18.0,
) -> tuple[float, float]:
    """Point just beyond the arrow tip along its direction."""

    sx, sy = float(start[0]), float(start[1])
    ex, ey = float(end[0]), float(end[1])
    angle = math.atan2(ey - sy, ex - sx)
    return ex + math.cos(angle) * distance, ey + math.sin(angle) * distance


__all__ = ["ArrowScale", "ForceVectorPair", "arrow_head", "force_pair", "label_anchor"]
