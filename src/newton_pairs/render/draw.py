from __future__ import annotations

import math
import random
from typing import Iterable, Sequence, TYPE_CHECKING

import numpy as np
import pygame

from .assets import Color, SurfaceCache, get_text_surface
from .vectors import ForceVectorPair, arrow_head, label_anchor

if TYPE_CHECKING:  # pragma: no cover
    from newton_pairs.core.config import RenderCfg

GradientStops = Sequence[tuple[float, tuple[int, int, int]]]

_SURFACES = SurfaceCache(max_size=96)


def _clamp(value: float, minimum: float, maximum: float) -> float:
    return max(minimum, min(maximum, value))


def _point(p: Sequence[float]) -> tuple[int, int]:
    return int(round(float(p[0]))), int(round(float(p[1])))


def _is_translucent(color: Color) -> bool:
    return len(color) == 4 and color[3] < 255


def blend(color: tuple[int, int, int], background: tuple[int, int, int], alpha: float) -> tuple[int, int, int]:
    """Opaque equivalent of ``color`` at ``alpha`` over ``background``."""

    alpha = _clamp(alpha, 0.0, 1.0)
    return tuple(int(round(c * alpha + b * (1.0 - alpha))) for c, b in zip(color, background))  # type: ignore[return-value]


def gradient_colors(stops: GradientStops, steps: int) -> np.ndarray:
    """Interpolate ``steps`` RGB rows across the gradient ``stops``."""

    positions = np.array([pos for pos, _ in stops], dtype=float)
    channels = np.array([color for _, color in stops], dtype=float)
    t = np.linspace(0.0, 1.0, max(1, steps))
    rows = np.stack([np.interp(t, positions, channels[:, i]) for i in range(3)], axis=1)
    return np.clip(np.rint(rows), 0, 255).astype(int)


def gradient_surface(size: tuple[int, int], stops: GradientStops, *, horizontal: bool = False) -> pygame.Surface:
    width, height = max(1, int(size[0])), max(1, int(size[1]))
    key = ("linear", width, height, tuple(stops), horizontal)

    def build() -> pygame.Surface:
        surface = pygame.Surface((width, height))
        span = width if horizontal else height
        for i, color in enumerate(gradient_colors(stops, span)):
            rgb = tuple(int(c) for c in color)
            if horizontal:
                pygame.draw.line(surface, rgb, (i, 0), (i, height - 1))
            else:
                pygame.draw.line(surface, rgb, (0, i), (width - 1, i))
        return surface

    return _SURFACES.get(key, build)


def draw_gradient_rect(
    surface: pygame.Surface,
    rect: pygame.Rect | tuple[float, float, float, float],
    stops: GradientStops,
    *,
    horizontal: bool = False,
) -> None:
    rect = pygame.Rect(
        int(round(rect[0])), int(round(rect[1])), max(1, int(round(rect[2]))), max(1, int(round(rect[3])))
    )
    surface.blit(gradient_surface(rect.size, stops, horizontal=horizontal), rect.topleft)


def radial_background(
    size: tuple[int, int],
    center: tuple[float, float],
    inner_radius: float,
    outer_radius: float,
    inner_color: tuple[int, int, int],
    outer_color: tuple[int, int, int],
) -> pygame.Surface:
    width, height = int(size[0]), int(size[1])
    key = ("radial", width, height, _point(center), int(inner_radius), int(outer_radius), inner_color, outer_color)

    def build() -> pygame.Surface:
        surface = pygame.Surface((width, height))
        surface.fill(outer_color)
        cx, cy = _point(center)
        corners = [(0, 0), (width, 0), (0, height), (width, height)]
        reach = max(math.hypot(x - cx, y - cy) for x, y in corners)
        radius = int(min(reach, outer_radius))
        span = max(1.0, outer_radius - inner_radius)
        for r in range(radius, 0, -3):
            t = _clamp((r - inner_radius) / span, 0.0, 1.0)
            color = blend(outer_color, inner_color, t)
            pygame.draw.circle(surface, color, (cx, cy), r)
        return surface

    return _SURFACES.get(key, build)


def draw_translucent_rect(surface: pygame.Surface, color: Color, rect: tuple[float, float, float, float]) -> None:
    x, y, w, h = (int(round(v)) for v in rect)
    if w <= 0 or h <= 0:
        return
    if not _is_translucent(color):
        pygame.draw.rect(surface, color[:3], (x, y, w, h))
        return
    layer = pygame.Surface((w, h), pygame.SRCALPHA)
    layer.fill(color)
    surface.blit(layer, (x, y))


def draw_translucent_circle(
    surface: pygame.Surface,
    color: Color,
    center: Sequence[float],
    radius: float,
    width: int = 0,
) -> None:
    r = int(round(radius))
    if r <= 0:
        return
    cx, cy = _point(center)
    if not _is_translucent(color):
        pygame.draw.circle(surface, color[:3], (cx, cy), r, width)
        return
    pad = width + 1
    layer = pygame.Surface((2 * (r + pad), 2 * (r + pad)), pygame.SRCALPHA)
    pygame.draw.circle(layer, color, (r + pad, r + pad), r, width)
    surface.blit(layer, (cx - r - pad, cy - r - pad))


def draw_translucent_line(
    surface: pygame.Surface,
    color: Color,
    start: Sequence[float],
    end: Sequence[float],
    width: int = 1,
) -> None:
    p0, p1 = _point(start), _point(end)
    if not _is_translucent(color):
        pygame.draw.line(surface, color[:3], p0, p1, width)
        return
    pad = width + 1
    left, top = min(p0[0], p1[0]) - pad, min(p0[1], p1[1]) - pad
    w = abs(p0[0] - p1[0]) + 2 * pad + 1
    h = abs(p0[1] - p1[1]) + 2 * pad + 1
    layer = pygame.Surface((w, h), pygame.SRCALPHA)
    pygame.draw.line(layer, color, (p0[0] - left, p0[1] - top), (p1[0] - left, p1[1] - top), width)
    surface.blit(layer, (left, top))


def draw_glow(
    surface: pygame.Surface,
    position: Sequence[float],
    radius: float,
    intensity: float,
    *,
    color: tuple[int, int, int],
    outer_alpha: int = 90,
    inner_alpha: int = 150,
    radius_factor: float = 0.6,
) -> None:
    if intensity <= 0.0 or radius <= 0:
        return
    intensity = _clamp(intensity, 0.0, 1.0)
    glow_radius = max(2, int(radius * (1.0 + radius_factor * intensity)))
    glow_surface = pygame.Surface((glow_radius * 2, glow_radius * 2), pygame.SRCALPHA)
    center = glow_radius
    outer = int(outer_alpha * intensity)
    inner = int(inner_alpha * intensity)
    if outer > 0:
        pygame.draw.circle(glow_surface, (*color, outer), (center, center), glow_radius)
    if inner > 0:
        pygame.draw.circle(
            glow_surface,
            (*color, inner),
            (center, center),
            max(1, int(glow_radius * 0.8)),
        )
    glow_rect = glow_surface.get_rect(center=_point(position))
    surface.blit(glow_surface, glow_rect)


def shaded_disc(radius: int, stops: GradientStops, highlight: float = 0.35) -> pygame.Surface:
    """Sphere-like disc: concentric circles drifting toward an upper-left highlight."""

    radius = max(1, int(radius))
    key = ("disc", radius, tuple(stops), highlight)

    def build() -> pygame.Surface:
        size = radius * 2 + 2
        disc = pygame.Surface((size, size), pygame.SRCALPHA)
        center = np.array([radius + 1, radius + 1], dtype=float)
        focus = center - radius * highlight
        colors = gradient_colors(stops, radius)
        for i in range(radius, 0, -1):
            t = i / radius
            pos = focus + (center - focus) * t
            color = tuple(int(c) for c in colors[i - 1])
            pygame.draw.circle(disc, color, _point(pos), i)
        return disc

    return _SURFACES.get(key, build)


def draw_disc(
    surface: pygame.Surface,
    position: Sequence[float],
    radius: float,
    *,
    color: tuple[int, int, int] | None = None,
    stops: GradientStops | None = None,
) -> None:
    r = int(round(radius))
    if r <= 0:
        return
    if stops is None:
        pygame.draw.circle(surface, color or (255, 255, 255), _point(position), r)
        return
    disc = shaded_disc(r, stops)
    surface.blit(disc, disc.get_rect(center=_point(position)))


def draw_arrow(
    surface: pygame.Surface,
    start: Sequence[float],
    end: Sequence[float],
    color: Color,
    *,
    width: int,
    head_length: float,
    head_angle_deg: float,
) -> None:
    draw_translucent_line(surface, color, start, end, width)
    head = [_point(p) for p in arrow_head(start, end, head_length, head_angle_deg)]
    if not _is_translucent(color):
        pygame.draw.polygon(surface, color[:3], head)
        return
    xs = [p[0] for p in head]
    ys = [p[1] for p in head]
    left, top = min(xs) - 1, min(ys) - 1
    layer = pygame.Surface((max(xs) - left + 2, max(ys) - top + 2), pygame.SRCALPHA)
    pygame.draw.polygon(layer, color, [(x - left, y - top) for x, y in head])
    surface.blit(layer, (left, top))


def draw_label(
    surface: pygame.Surface,
    font: pygame.font.Font,
    text: str,
    position: Sequence[float],
    color: tuple[int, int, int],
    *,
    anchor: str = "midleft",
) -> pygame.Rect:
    text_surf = get_text_surface(font, text, color)
    rect = text_surf.get_rect(**{anchor: _point(position)})
    surface.blit(text_surf, rect)
    return rect


def draw_force_pair(
    surface: pygame.Surface,
    pair: ForceVectorPair,
    *,
    color_a: Color,
    color_b: Color,
    render_cfg: RenderCfg,
    font: pygame.font.Font | None = None,
    labels: tuple[str, str] | None = None,
    width: int | None = None,
) -> None:
    """Draw both arrows of ``pair``; labels go just past each arrow tip."""

    line_width = width or render_cfg.arrow_line_width
    for origin, end, color in (
        (pair.origin_a, pair.end_a, color_a),
        (pair.origin_b, pair.end_b, color_b),
    ):
        draw_arrow(
            surface,
            origin,
            end,
            color,
            width=line_width,
            head_length=render_cfg.arrow_head_length,
            head_angle_deg=render_cfg.arrow_head_angle_deg,
        )
    if font is None or not labels:
        return
    for (origin, end, color), text in zip(
        ((pair.origin_a, pair.end_a, color_a), (pair.origin_b, pair.end_b, color_b)), labels
    ):
        if text:
            draw_label(surface, font, text, label_anchor(origin, end), color[:3], anchor="center")


def draw_dashed_circle(
    surface: pygame.Surface,
    center: Sequence[float],
    radius: float,
    color: Color,
    *,
    dash: tuple[int, int] = (6, 10),
    width: int = 1,
) -> None:
    if radius <= 0:
        return
    cx, cy = float(center[0]), float(center[1])
    r = float(radius)
    pad = width + 2
    size = int(2 * (r + pad))
    layer = pygame.Surface((size, size), pygame.SRCALPHA)
    origin = r + pad
    circumference = 2.0 * math.pi * r
    dash_len, gap_len = dash
    period = max(1, dash_len + gap_len)
    s = 0.0
    while s < circumference:
        a0 = s / r
        a1 = min(s + dash_len, circumference) / r
        p0 = (origin + math.cos(a0) * r, origin + math.sin(a0) * r)
        p1 = (origin + math.cos(a1) * r, origin + math.sin(a1) * r)
        pygame.draw.line(layer, color, _point(p0), _point(p1), width)
        s += period
    surface.blit(layer, (int(round(cx - origin)), int(round(cy - origin))))


def generate_starfield(
    num_stars: int,
    *,
    size: tuple[int, int],
    rng: random.Random | None = None,
) -> list[dict[str, object]]:
    rng = rng or random.Random()
    width, height = size
    stars: list[dict[str, object]] = []
    for _ in range(num_stars):
        x = rng.uniform(0, width)
        y = rng.uniform(0, height)
        radius = rng.uniform(0.4, 2.0)
        alpha = int(255 * rng.uniform(0.2, 0.9))
        pixel_radius = max(1, int(round(radius)))
        stars.append({"pos": (x, y), "radius": pixel_radius, "alpha": alpha})
    return stars


def draw_starfield(
    surface: pygame.Surface,
    starfield: Iterable[dict[str, object]],
    *,
    render_cfg: RenderCfg,
) -> None:
    for star in starfield:
        x, y = star["pos"]  # type: ignore[misc]
        radius = star["radius"]  # type: ignore[assignment]
        alpha = star["alpha"]  # type: ignore[assignment]
        draw_translucent_circle(surface, (*render_cfg.star_color, alpha), (x, y), radius)


def draw_diagram_frame(surface: pygame.Surface, background: tuple[int, int, int], *, render_cfg: RenderCfg) -> None:
    width, height = surface.get_size()
    surface.fill(background)
    margin = render_cfg.diagram_frame_margin
    frame_color = blend(render_cfg.diagram_frame_color[:3], background, render_cfg.diagram_frame_color[3] / 255)
    pygame.draw.rect(surface, frame_color, (margin, margin, width - 2 * margin, height - 2 * margin), 2)
