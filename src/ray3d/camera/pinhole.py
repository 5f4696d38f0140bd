"""Fixed pinhole camera for primary ray generation.

The camera sits at the origin looking down -z with +y up. The image plane is
z = -1; its vertical extent is [-1, 1] and its horizontal extent is scaled by
the aspect ratio, so pixels are square at every window size:

    u = (2x / w - 1) * (w / h)       left to right
    v = -(2y / h - 1)                top to bottom (row 0 is the top row)
    direction = normalize(u, v, -1)

There are no camera controls; resolution is the only input.

Example:
    >>> @ti.kernel
    ... def render(width: ti.i32, height: ti.i32):
    ...     for y, x in ti.ndrange(height, width):
    ...         direction = get_ray_direction(x, y, width, height)
"""

import taichi as ti

from src.ray3d.core.ray import Ray, normalize, vec3


@ti.func
def camera_origin() -> vec3:
    """The camera position."""
    return vec3(0.0, 0.0, 0.0)


@ti.func
def get_ray_direction(pixel_x: ti.i32, pixel_y: ti.i32, width: ti.i32, height: ti.i32) -> vec3:
    """Unit direction of the primary ray through a pixel.

    Args:
        pixel_x: Column, 0 = left.
        pixel_y: Row, 0 = top.
        width: Image width in pixels (positive).
        height: Image height in pixels (positive).

    Returns:
        The normalized ray direction.
    """
    w = ti.cast(width, ti.f64)
    h = ti.cast(height, ti.f64)
    aspect = w / h

    u = (2.0 * ti.cast(pixel_x, ti.f64) / w - 1.0) * aspect
    v = -(2.0 * ti.cast(pixel_y, ti.f64) / h - 1.0)

    return normalize(vec3(u, v, -1.0))


@ti.func
def get_ray(pixel_x: ti.i32, pixel_y: ti.i32, width: ti.i32, height: ti.i32) -> Ray:
    """Primary ray through a pixel, starting at the camera origin."""
    return Ray(
        origin=camera_origin(),
        direction=get_ray_direction(pixel_x, pixel_y, width, height),
    )
