"""Depth-bounded Whitted-style reflection tracer.

Conceptually the tracer is the recursive function

    trace(ray, depth):
        if depth > MAX_DEPTH: return background
        hit = closest hit of ray
        miss        -> background
        floor       -> blend(floor shading, trace(mirror ray, depth + 1), 0.3, 0.7)
        sphere      -> sphere shading, blended with trace(mirror ray, depth + 1)
                       by the sphere reflectivity when it is non-zero

Taichi functions cannot recurse, so ``trace`` runs it in two passes:

1. Walk down the reflection chain for at most TRACE_LEVELS levels, storing
   each level's shaded base color, blend weights and outcome.
2. Fold the stored levels back up from the deepest one, starting from the
   background color that a reflection beyond MAX_DEPTH would return.

Both loops are unrolled at compile time (``ti.static``), so the per-level
storage lives in registers.
"""

import taichi as ti

from src.ray3d.core.ray import reflect, reflect_horizontal, vec3
from src.ray3d.core.shading import blend, floor_base_color, sphere_base_color
from src.ray3d.geometry.floor import checker_parity
from src.ray3d.scene.intersection import SurfaceKind

# Deepest level that is shaded; a reflection requested here sees the background
MAX_DEPTH = 2

# Number of levels that can perform an intersection query
TRACE_LEVELS = MAX_DEPTH + 1

# Outcome of one trace level
LEVEL_MISS = 0
LEVEL_OPAQUE = 1
LEVEL_REFLECTIVE = 2


@ti.func
def trace(scene: ti.template(), origin: vec3, direction: vec3):
    """Trace a ray through the scene.

    Args:
        scene: A SceneBuffers instance holding the uploaded scene.
        origin: Ray origin.
        direction: Ray direction (unit length for camera rays).

    Returns:
        A tuple (color, levels): the truncated RGB color as a vec3 of whole
        numbers, and how many levels performed an intersection query
        (1 to TRACE_LEVELS).
    """
    background = scene.background[None]

    bases = ti.Matrix.zero(ti.f64, TRACE_LEVELS, 3)
    base_weights = ti.Vector.zero(ti.f64, TRACE_LEVELS)
    reflection_weights = ti.Vector.zero(ti.f64, TRACE_LEVELS)
    outcomes = ti.Vector.zero(ti.i32, TRACE_LEVELS)

    ray_origin = origin
    ray_direction = direction
    levels = 0
    active = 1

    # Pass 1: walk down the reflection chain
    for level in ti.static(range(TRACE_LEVELS)):
        if active == 1:
            levels += 1
            rec = scene.intersect(ray_origin, ray_direction)

            if rec.kind == int(SurfaceKind.NONE):
                outcomes[level] = LEVEL_MISS
                active = 0

            elif rec.kind == int(SurfaceKind.FLOOR):
                shadowed = scene.in_shadow(rec.point)
                base = floor_base_color(
                    scene.floor_light_color[None],
                    scene.floor_dark_color[None],
                    checker_parity(rec.point),
                    scene.floor_lit_factor[None],
                    scene.floor_shadow_factor[None],
                    shadowed,
                )
                for c in ti.static(range(3)):
                    bases[level, c] = base[c]
                base_weights[level] = scene.floor_base_weight[None]
                reflection_weights[level] = scene.floor_reflection_weight[None]
                outcomes[level] = LEVEL_REFLECTIVE

                ray_origin = rec.point
                ray_direction = reflect_horizontal(ray_direction)

            else:
                i = rec.sphere_index
                shadowed = scene.in_shadow(rec.point)
                base = sphere_base_color(
                    scene.sphere_colors[i],
                    rec.normal,
                    scene.light_direction[None],
                    shadowed,
                )
                for c in ti.static(range(3)):
                    bases[level, c] = base[c]

                reflectivity = scene.sphere_reflectivity[i]
                if reflectivity > 0.0:
                    base_weights[level] = 1.0 - reflectivity
                    reflection_weights[level] = reflectivity
                    outcomes[level] = LEVEL_REFLECTIVE

                    ray_origin = rec.point
                    ray_direction = reflect(ray_direction, rec.normal)
                else:
                    outcomes[level] = LEVEL_OPAQUE
                    active = 0

    # Pass 2: fold from the deepest level back to the primary ray
    color = background
    for k in ti.static(range(TRACE_LEVELS)):
        level = ti.static(TRACE_LEVELS - 1 - k)
        if level < levels:
            base = vec3(bases[level, 0], bases[level, 1], bases[level, 2])
            if outcomes[level] == LEVEL_MISS:
                color = background
            elif outcomes[level] == LEVEL_OPAQUE:
                color = base
            else:
                color = blend(
                    base,
                    color,
                    base_weights[level],
                    reflection_weights[level],
                )

    return color, levels
