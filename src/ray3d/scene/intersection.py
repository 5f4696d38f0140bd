"""Scene-level intersection and shadow queries.

SceneBuffers holds one uploaded SceneDescription in Taichi fields and
provides the two queries the integrator needs:

- ``intersect``: closest hit across the floor and every sphere
- ``in_shadow``: any sphere between a point and the directional light

Sphere data is stored Structure-of-Arrays, preallocated to ``max_spheres``
so uploading a new scene never reallocates fields or recompiles kernels.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from src.ray3d.scene.intersection import SceneBuffers
    >>> from src.ray3d.scene.orbit import create_orbit_scene
    >>> buffers = SceneBuffers()
    >>> buffers.upload(create_orbit_scene(0.0))
    >>> # Call buffers.intersect(...) within a Taichi kernel
"""

from enum import IntEnum

import taichi as ti

from src.ray3d.core.ray import vec3
from src.ray3d.errors import SceneError
from src.ray3d.geometry.floor import Floor, intersect_floor
from src.ray3d.geometry.sphere import T_EPSILON, Sphere, intersect_sphere, sphere_blocks
from src.ray3d.scene.model import SceneDescription

# Maximum number of spheres a SceneBuffers instance can hold
MAX_SPHERES = 16

# Upper bound for the closest-hit search
T_MAX = 1e30


class SurfaceKind(IntEnum):
    """Tag of the primitive a ray hit."""

    NONE = 0
    FLOOR = 1
    SPHERE = 2


@ti.dataclass
class SceneHitRecord:
    """Record of a ray-scene intersection.

    Attributes:
        kind: A SurfaceKind value. NONE means the ray escaped.
        t: Ray parameter of the closest hit.
        point: Hit point.
        normal: Outward unit surface normal.
        sphere_index: Index of the hit sphere, -1 unless kind is SPHERE.
    """

    kind: ti.i32
    t: ti.f64
    point: vec3
    normal: vec3
    sphere_index: ti.i32


@ti.data_oriented
class SceneBuffers:
    """Taichi-side copy of one scene description.

    Attributes:
        max_spheres: Capacity of the sphere arrays.
    """

    def __init__(self, max_spheres: int = MAX_SPHERES) -> None:
        self.max_spheres = max_spheres

        # Spheres
        self.num_spheres = ti.field(dtype=ti.i32, shape=())
        self.sphere_centers = ti.Vector.field(3, dtype=ti.f64, shape=max_spheres)
        self.sphere_radii = ti.field(dtype=ti.f64, shape=max_spheres)
        self.sphere_colors = ti.Vector.field(3, dtype=ti.f64, shape=max_spheres)
        self.sphere_reflectivity = ti.field(dtype=ti.f64, shape=max_spheres)

        # Floor
        self.floor_enabled = ti.field(dtype=ti.i32, shape=())
        self.floor_height = ti.field(dtype=ti.f64, shape=())
        self.floor_center_x = ti.field(dtype=ti.f64, shape=())
        self.floor_center_z = ti.field(dtype=ti.f64, shape=())
        self.floor_half_extent = ti.field(dtype=ti.f64, shape=())
        self.floor_light_color = ti.Vector.field(3, dtype=ti.f64, shape=())
        self.floor_dark_color = ti.Vector.field(3, dtype=ti.f64, shape=())
        self.floor_lit_factor = ti.field(dtype=ti.f64, shape=())
        self.floor_shadow_factor = ti.field(dtype=ti.f64, shape=())
        self.floor_base_weight = ti.field(dtype=ti.f64, shape=())
        self.floor_reflection_weight = ti.field(dtype=ti.f64, shape=())

        # Light and environment
        self.light_direction = ti.Vector.field(3, dtype=ti.f64, shape=())
        self.shadow_distance = ti.field(dtype=ti.f64, shape=())
        self.background = ti.Vector.field(3, dtype=ti.f64, shape=())

    # =========================================================================
    # Upload (Python scope)
    # =========================================================================

    def upload(self, scene: SceneDescription) -> None:
        """Copy a scene description into the fields.

        Args:
            scene: The scene to render next.

        Raises:
            SceneError: If the scene has more spheres than max_spheres.
        """
        count = scene.sphere_count
        if count > self.max_spheres:
            raise SceneError(
                f"Scene has {count} spheres, but the buffers hold at most {self.max_spheres}"
            )

        for i, sphere in enumerate(scene.spheres):
            self.sphere_centers[i] = list(sphere.center)
            self.sphere_radii[i] = sphere.radius
            self.sphere_colors[i] = list(sphere.color)
            self.sphere_reflectivity[i] = sphere.reflectivity
        self.num_spheres[None] = count

        floor = scene.floor
        if floor is None:
            self.floor_enabled[None] = 0
        else:
            self.floor_enabled[None] = 1
            self.floor_height[None] = floor.height
            self.floor_center_x[None] = floor.center[0]
            self.floor_center_z[None] = floor.center[1]
            self.floor_half_extent[None] = floor.half_extent
            self.floor_light_color[None] = list(floor.light_color)
            self.floor_dark_color[None] = list(floor.dark_color)
            self.floor_lit_factor[None] = floor.lit_factor
            self.floor_shadow_factor[None] = floor.shadow_factor
            self.floor_base_weight[None] = floor.base_weight
            self.floor_reflection_weight[None] = floor.reflection_weight

        self.light_direction[None] = list(scene.light.direction)
        self.shadow_distance[None] = scene.light.shadow_distance
        self.background[None] = list(scene.background)

    def get_sphere_count(self) -> int:
        """Get the number of spheres currently uploaded."""
        return int(self.num_spheres[None])

    # =========================================================================
    # Queries (Taichi scope)
    # =========================================================================

    @ti.func
    def floor(self) -> Floor:
        """The uploaded floor as a Floor struct."""
        return Floor(
            height=self.floor_height[None],
            center_x=self.floor_center_x[None],
            center_z=self.floor_center_z[None],
            half_extent=self.floor_half_extent[None],
        )

    @ti.func
    def sphere(self, i: ti.i32) -> Sphere:
        """Sphere i as a Sphere struct."""
        return Sphere(center=self.sphere_centers[i], radius=self.sphere_radii[i])

    @ti.func
    def intersect(self, ray_origin: vec3, ray_direction: vec3) -> SceneHitRecord:
        """Find the closest hit with t > T_EPSILON.

        The floor is tested first, then the spheres in order; each test only
        accepts hits nearer than the best so far, so the result is the
        globally nearest hit regardless of order.

        Args:
            ray_origin: The starting point of the ray.
            ray_direction: The ray direction.

        Returns:
            A SceneHitRecord; kind is SurfaceKind.NONE if nothing was hit.
        """
        closest_t = T_MAX
        result = SceneHitRecord(
            kind=int(SurfaceKind.NONE),
            t=0.0,
            point=vec3(0.0, 0.0, 0.0),
            normal=vec3(0.0, 0.0, 0.0),
            sphere_index=-1,
        )

        if self.floor_enabled[None] == 1:
            rec = intersect_floor(ray_origin, ray_direction, self.floor(), T_EPSILON, closest_t)
            if rec.hit == 1:
                closest_t = rec.t
                result = SceneHitRecord(
                    kind=int(SurfaceKind.FLOOR),
                    t=rec.t,
                    point=rec.point,
                    normal=rec.normal,
                    sphere_index=-1,
                )

        for i in range(self.num_spheres[None]):
            rec = intersect_sphere(ray_origin, ray_direction, self.sphere(i), T_EPSILON, closest_t)
            if rec.hit == 1:
                closest_t = rec.t
                result = SceneHitRecord(
                    kind=int(SurfaceKind.SPHERE),
                    t=rec.t,
                    point=rec.point,
                    normal=rec.normal,
                    sphere_index=i,
                )

        return result

    @ti.func
    def in_shadow(self, point: vec3) -> ti.i32:
        """Test whether any sphere blocks the light from a point.

        The floor never casts shadows. Only occluders with
        T_EPSILON < t < shadow_distance count.

        Returns:
            1 if the point is shadowed, 0 otherwise.
        """
        light_direction = self.light_direction[None]
        max_distance = self.shadow_distance[None]

        shadowed = 0
        for i in range(self.num_spheres[None]):
            if shadowed == 0:
                shadowed = sphere_blocks(point, light_direction, self.sphere(i), max_distance)

        return shadowed
