"""Core rendering module.

Components:
    ray: Ray data structure and float64 vector utilities
    shading: Sphere and floor lighting with per-step truncation
    integrator: Depth-bounded reflection tracer
    renderer: FrameRenderer, one BGRA frame per call

Note: integrator and renderer are NOT imported here, since they depend on
the scene package. Import them directly, e.g.:
    from src.ray3d.core.renderer import FrameRenderer
"""

from .ray import (
    Ray,
    dot,
    length_squared,
    normalize,
    ray_at,
    reflect,
    reflect_horizontal,
    vec3,
)

__all__ = [
    "Ray",
    "ray_at",
    "vec3",
    "dot",
    "length_squared",
    "normalize",
    "reflect",
    "reflect_horizontal",
]
