"""Local shading for floor and sphere hits.

Colors are float64 vectors that always hold whole numbers in [0, 255]. Every
multiply or blend is followed by a floor, so truncation error accumulates
across reflection bounces exactly as in the integer reference renderer.

Sphere shading:

    diffuse = clamp(dot(normal, light), 0.2, 1.0)    (0.2 if shadowed)
    base    = floor(color * (0.3 + diffuse * 0.7))

Floor shading:

    base = floor(cell_color * factor)      factor = 0.8 lit, 0.3 shadowed

The reflected color is then blended in by :func:`blend`.
"""

import taichi as ti

from src.ray3d.core.ray import dot, vec3

# Ambient share of the sphere lighting term
AMBIENT = 0.3

# Diffuse share of the sphere lighting term
DIFFUSE_WEIGHT = 0.7

# Lower clamp of the sphere diffuse factor, also the shadowed value
MIN_DIFFUSE = 0.2
MAX_DIFFUSE = 1.0


@ti.func
def truncate(color: vec3) -> vec3:
    """Drop the fractional part of every channel (channels are non-negative)."""
    return ti.floor(color)


@ti.func
def diffuse_factor(normal: vec3, light_direction: vec3, shadowed: ti.i32) -> ti.f64:
    """Clamped Lambert factor; shadows replace it with the ambient floor."""
    diffuse = ti.max(MIN_DIFFUSE, ti.min(MAX_DIFFUSE, dot(normal, light_direction)))
    if shadowed == 1:
        diffuse = MIN_DIFFUSE
    return diffuse


@ti.func
def sphere_base_color(
    color: vec3,
    normal: vec3,
    light_direction: vec3,
    shadowed: ti.i32,
) -> vec3:
    """Direct lighting of a sphere surface point.

    Args:
        color: The sphere's base color.
        normal: Outward unit normal at the hit point.
        light_direction: Direction toward the light.
        shadowed: 1 if another sphere blocks the light.

    Returns:
        The truncated shaded color.
    """
    diffuse = diffuse_factor(normal, light_direction, shadowed)
    return truncate(color * (AMBIENT + diffuse * DIFFUSE_WEIGHT))


@ti.func
def floor_base_color(
    light_color: vec3,
    dark_color: vec3,
    parity: ti.i32,
    lit_factor: ti.f64,
    shadow_factor: ti.f64,
    shadowed: ti.i32,
) -> vec3:
    """Direct lighting of a floor point.

    Args:
        light_color: Color of even cells.
        dark_color: Color of odd cells.
        parity: Checker parity of the hit point (see checker_parity).
        lit_factor: Multiplier for lit points.
        shadow_factor: Multiplier for shadowed points.
        shadowed: 1 if a sphere blocks the light.

    Returns:
        The truncated shaded color.
    """
    cell = light_color
    if parity == 1:
        cell = dark_color

    factor = lit_factor
    if shadowed == 1:
        factor = shadow_factor

    return truncate(cell * factor)


@ti.func
def blend(base: vec3, reflected: vec3, base_weight: ti.f64, reflection_weight: ti.f64) -> vec3:
    """Truncated weighted sum of a surface color and its reflection."""
    return truncate(base * base_weight + reflected * reflection_weight)
