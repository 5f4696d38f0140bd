"""Bounded checkerboard floor plane.

The floor is the horizontal plane y = height, clipped to a square window
around (center_x, center_z). Hit points outside the window are misses and
fall through to the background, which gives the floor a visible edge.

Only descending rays (direction.y < 0) can hit the floor; a ray travelling
parallel to or away from the plane never reaches it.
"""

import taichi as ti

from src.ray3d.core.ray import Ray, ray_at, vec3
from src.ray3d.geometry.sphere import HitRecord, miss_record


@ti.dataclass
class Floor:
    """A bounded horizontal plane.

    Attributes:
        height: The y coordinate of the plane.
        center_x: x coordinate of the center of the visible window.
        center_z: z coordinate of the center of the visible window.
        half_extent: Hits need |x - center_x| < half_extent and
            |z - center_z| < half_extent.
    """

    height: ti.f64
    center_x: ti.f64
    center_z: ti.f64
    half_extent: ti.f64


@ti.func
def intersect_floor(
    ray_origin: vec3,
    ray_direction: vec3,
    floor: Floor,
    t_min: ti.f64,
    t_max: ti.f64,
) -> HitRecord:
    """Test for ray-floor intersection.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The ray direction.
        floor: The floor to test.
        t_min: Hits must satisfy t > t_min.
        t_max: Hits must satisfy t < t_max.

    Returns:
        A HitRecord with normal (0, 1, 0).
    """
    result = miss_record()

    if ray_direction.y < 0.0:
        t = (floor.height - ray_origin.y) / ray_direction.y
        if t > t_min and t < t_max:
            point = ray_at(Ray(origin=ray_origin, direction=ray_direction), t)
            inside_x = ti.abs(point.x - floor.center_x) < floor.half_extent
            inside_z = ti.abs(point.z - floor.center_z) < floor.half_extent
            if inside_x and inside_z:
                result = HitRecord(
                    hit=1,
                    t=t,
                    point=point,
                    normal=vec3(0.0, 1.0, 0.0),
                )

    return result


@ti.func
def checker_parity(point: vec3) -> ti.i32:
    """Parity of floor(x) + floor(z): 0 for light cells, 1 for dark cells.

    Uses a bitwise AND so negative cell indices give 0/1 as well.
    """
    cell_x = ti.cast(ti.floor(point.x), ti.i32)
    cell_z = ti.cast(ti.floor(point.z), ti.i32)
    return (cell_x + cell_z) & 1
