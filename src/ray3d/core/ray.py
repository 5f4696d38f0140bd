"""Ray data structure and float64 vector utilities.

All functions here are Taichi functions (``@ti.func``) meant to be inlined
into the frame kernel. Vectors are 3-component float64.

The dot product is written out component by component, in x, y, z order,
so every intersection and shading expression sums in the same order the
reference renderer does.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> origin = vec3(0.0, 0.0, 0.0)
    >>> direction = vec3(0.0, 0.0, -1.0)
    >>> ray = Ray(origin=origin, direction=direction)
    >>> point = ray_at(ray, 5.0)  # inside a kernel
"""

import taichi as ti

# 3D float64 vector type
vec3 = ti.types.vector(3, ti.f64)


@ti.dataclass
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray.
        direction: The direction of the ray. Primary and reflection rays
            are unit length or very close to it.
    """

    origin: vec3
    direction: vec3


@ti.func
def ray_at(ray: Ray, t: ti.f64) -> vec3:
    """Compute the point ray.origin + t * ray.direction."""
    return ray.origin + t * ray.direction


@ti.func
def dot(a: vec3, b: vec3) -> ti.f64:
    """Dot product, summed in x, y, z order."""
    return a.x * b.x + a.y * b.y + a.z * b.z


@ti.func
def length_squared(v: vec3) -> ti.f64:
    """Squared Euclidean length of a vector."""
    return dot(v, v)


@ti.func
def normalize(v: vec3) -> vec3:
    """Scale a vector to unit length.

    Divides by the length rather than multiplying by a reciprocal square
    root. Callers never pass zero vectors (camera rays always have z = -1,
    floor reflections keep a non-zero y).
    """
    return v / ti.sqrt(length_squared(v))


@ti.func
def reflect(incident: vec3, normal: vec3) -> vec3:
    """Mirror an incident direction about a unit normal: d - 2(d.n)n."""
    return incident - 2.0 * dot(incident, normal) * normal


@ti.func
def reflect_horizontal(incident: vec3) -> vec3:
    """Mirror a direction about the +y plane normal and renormalize.

    Equivalent to :func:`reflect` with normal (0, 1, 0), but computed as a
    sign flip of the y component.
    """
    return normalize(vec3(incident.x, -incident.y, incident.z))
