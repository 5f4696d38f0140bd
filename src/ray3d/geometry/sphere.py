"""Sphere primitive with near-root ray-sphere intersection.

The intersection solves the full quadratic

    a*t^2 + b*t + c = 0
    a = dot(d, d)
    b = 2 * dot(o - center, d)
    c = dot(o - center, o - center) - radius^2

and only ever takes the smaller root t = (-b - sqrt(b^2 - 4ac)) / 2a. The
spheres are opaque and always viewed from outside, so the far root (the back
face) is never needed. A ray that starts inside a sphere therefore does not
hit it, which is what keeps reflection rays leaving a sphere surface from
hitting the same sphere again.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from src.ray3d.geometry.sphere import Sphere, intersect_sphere, vec3
    >>> sphere = Sphere(center=vec3(0.0, 0.0, -5.0), radius=1.0)
    >>> # Use intersect_sphere within a Taichi kernel
"""

import taichi as ti

from src.ray3d.core.ray import Ray, dot, ray_at, vec3

# Hits at or below this distance are treated as self-intersection
T_EPSILON = 0.001

# Quadratic coefficient below which the ray direction is degenerate
DEGENERATE_EPSILON = 1e-12


@ti.dataclass
class Sphere:
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere.
        radius: The radius of the sphere (positive).
    """

    center: vec3
    radius: ti.f64


@ti.dataclass
class HitRecord:
    """Record of a ray-primitive intersection.

    Attributes:
        hit: 1 if the ray hit the primitive, 0 otherwise.
        t: Ray parameter of the hit. Only valid if hit == 1.
        point: Hit point origin + t * direction. Only valid if hit == 1.
        normal: Outward unit surface normal. Only valid if hit == 1.
    """

    hit: ti.i32
    t: ti.f64
    point: vec3
    normal: vec3


@ti.func
def miss_record() -> HitRecord:
    """Create a HitRecord indicating no intersection."""
    return HitRecord(
        hit=0,
        t=0.0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
    )


@ti.func
def sphere_near_root(
    ray_origin: vec3,
    ray_direction: vec3,
    sphere: Sphere,
) -> ti.f64:
    """Return the smaller root of the ray-sphere quadratic.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The ray direction. Need not be unit length.
        sphere: The sphere to test.

    Returns:
        The near root t, or -1.0 when the discriminant is negative or the
        direction is degenerate (a close to zero). Callers compare the
        result against their own t interval.
    """
    oc = ray_origin - sphere.center

    a = dot(ray_direction, ray_direction)
    b = 2.0 * dot(oc, ray_direction)
    c = dot(oc, oc) - sphere.radius * sphere.radius

    t = -1.0
    if a > DEGENERATE_EPSILON:
        discriminant = b * b - 4.0 * a * c
        if discriminant >= 0.0:
            t = (-b - ti.sqrt(discriminant)) / (2.0 * a)
    return t


@ti.func
def intersect_sphere(
    ray_origin: vec3,
    ray_direction: vec3,
    sphere: Sphere,
    t_min: ti.f64,
    t_max: ti.f64,
) -> HitRecord:
    """Test for ray-sphere intersection on the near root.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The ray direction.
        sphere: The sphere to test.
        t_min: Hits must satisfy t > t_min.
        t_max: Hits must satisfy t < t_max (the closest hit so far).

    Returns:
        A HitRecord; the normal is (point - center) / radius.
    """
    result = miss_record()

    t = sphere_near_root(ray_origin, ray_direction, sphere)
    if t > t_min and t < t_max:
        point = ray_at(Ray(origin=ray_origin, direction=ray_direction), t)
        result = HitRecord(
            hit=1,
            t=t,
            point=point,
            normal=(point - sphere.center) / sphere.radius,
        )

    return result


@ti.func
def sphere_blocks(
    ray_origin: vec3,
    ray_direction: vec3,
    sphere: Sphere,
    t_max: ti.f64,
) -> ti.i32:
    """Any-hit query used for shadow rays.

    Returns:
        1 if the near root lies in (T_EPSILON, t_max), 0 otherwise.
    """
    blocked = 0
    t = sphere_near_root(ray_origin, ray_direction, sphere)
    if t > T_EPSILON and t < t_max:
        blocked = 1
    return blocked
