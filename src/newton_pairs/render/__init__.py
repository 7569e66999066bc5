"""Rendering helpers for the force-pair scenes."""

from .assets import (
    SurfaceCache,
    get_text_surface,
    load_font,
)
from .canvas import SceneCanvas
from .draw import (
    draw_arrow,
    draw_diagram_frame,
    draw_force_pair,
    draw_starfield,
    generate_starfield,
)
from .scenes import ContactRenderer, OrbitRenderer
from .ui import (
    Button,
    ButtonVisualStyle,
    build_text_panel,
)
from .vectors import ArrowScale, ForceVectorPair, force_pair

__all__ = [
    "ArrowScale",
    "Button",
    "ButtonVisualStyle",
    "ContactRenderer",
    "ForceVectorPair",
    "OrbitRenderer",
    "SceneCanvas",
    "SurfaceCache",
    "build_text_panel",
    "draw_arrow",
    "draw_diagram_frame",
    "draw_force_pair",
    "draw_starfield",
    "force_pair",
    "generate_starfield",
    "get_text_surface",
    "load_font",
]
