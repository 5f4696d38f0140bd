"""Tests for SceneBuffers: upload, closest-hit and shadow queries.

The queries are Taichi functions, so most tests go through the renderer's
single-ray probes, which run them in small kernels.
"""

import math

import pytest

LIGHT = (0.577, 0.577, 0.577)


def _occluded_scene(point, distance=3.0, floor=True):
    """A scene with one small sphere on the light ray from ``point``."""
    from src.ray3d.scene.model import FloorInfo, SceneDescription, SphereInfo

    center = tuple(p + distance * l for p, l in zip(point, LIGHT))
    return SceneDescription(
        spheres=(SphereInfo(center=center, radius=0.5, color=(255, 255, 255)),),
        floor=FloorInfo() if floor else None,
    )


class TestSceneBuffers:
    """Tests for uploading scene descriptions."""

    def test_upload_counts_spheres(self):
        from src.ray3d.scene.intersection import SceneBuffers
        from src.ray3d.scene.orbit import create_orbit_scene

        buffers = SceneBuffers(max_spheres=4)
        buffers.upload(create_orbit_scene(0.0))
        assert buffers.get_sphere_count() == 3
        assert buffers.floor_enabled[None] == 1

    def test_upload_without_floor(self):
        from src.ray3d.scene.intersection import SceneBuffers
        from src.ray3d.scene.model import SceneDescription

        buffers = SceneBuffers(max_spheres=1)
        buffers.upload(SceneDescription(floor=None))
        assert buffers.get_sphere_count() == 0
        assert buffers.floor_enabled[None] == 0

    def test_too_many_spheres(self):
        from src.ray3d.errors import SceneError
        from src.ray3d.scene.intersection import SceneBuffers
        from src.ray3d.scene.orbit import create_orbit_scene

        buffers = SceneBuffers(max_spheres=2)
        with pytest.raises(SceneError):
            buffers.upload(create_orbit_scene(0.0))


class TestClosestHit:
    """Tests for the closest-hit query across floor and spheres."""

    def test_camera_ray_hits_central_sphere(self, renderer):
        from src.ray3d.scene.intersection import SurfaceKind

        rec = renderer.intersect((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert rec.hit
        assert rec.kind == SurfaceKind.SPHERE
        assert rec.sphere_index == 0
        assert abs(rec.t - 4.0) < 1e-9
        assert rec.normal == pytest.approx((0.0, 0.0, 1.0), abs=1e-9)

    def test_orbiter_in_front_at_quarter_turn(self, renderer):
        """At angle pi/2 the green sphere sits between camera and center."""
        from src.ray3d.scene.intersection import SurfaceKind
        from src.ray3d.scene.orbit import create_orbit_scene

        scene = create_orbit_scene(math.pi / 2)
        rec = renderer.intersect((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), scene)
        assert rec.kind == SurfaceKind.SPHERE
        assert rec.sphere_index == 1
        assert abs(rec.t - 2.2) < 1e-9

    def test_downward_ray_hits_floor(self, renderer):
        from src.ray3d.scene.intersection import SurfaceKind

        d = (0.0, -1.0 / math.sqrt(2.0), -1.0 / math.sqrt(2.0))
        rec = renderer.intersect((0.0, 0.0, 0.0), d)
        assert rec.kind == SurfaceKind.FLOOR
        assert rec.sphere_index == -1
        assert rec.point == pytest.approx((0.0, -2.0, -2.0), abs=1e-9)
        assert rec.normal == (0.0, 1.0, 0.0)

    def test_sphere_in_front_of_floor_wins(self, renderer):
        """The nearest hit wins even though the floor is tested first."""
        from src.ray3d.scene.intersection import SurfaceKind
        from src.ray3d.scene.model import SceneDescription, SphereInfo

        scene = SceneDescription(
            spheres=(SphereInfo(center=(0.0, -1.0, -3.0), radius=0.5, color=(255, 0, 0)),),
        )
        n = math.sqrt(10.0)
        rec = renderer.intersect((0.0, 0.0, 0.0), (0.0, -1.0 / n, -3.0 / n), scene)
        assert rec.kind == SurfaceKind.SPHERE
        assert rec.sphere_index == 0
        assert abs(rec.t - (n - 0.5)) < 1e-9

    def test_floor_in_front_of_sphere_wins(self, renderer):
        from src.ray3d.scene.intersection import SurfaceKind
        from src.ray3d.scene.model import SceneDescription, SphereInfo

        # Sphere below the floor plane, inside the floor bounds
        scene = SceneDescription(
            spheres=(SphereInfo(center=(0.0, -4.0, -5.0), radius=1.0, color=(255, 0, 0)),),
        )
        rec = renderer.intersect((0.0, 0.0, -5.0), (0.0, -1.0, 0.0), scene)
        assert rec.kind == SurfaceKind.FLOOR
        assert abs(rec.t - 2.0) < 1e-12

    def test_floor_outside_bounds_is_a_miss(self, renderer, floor_only_scene):
        from src.ray3d.scene.intersection import SurfaceKind

        rec = renderer.intersect((0.0, 0.0, 0.0), (0.0, -1.0, -20.0), floor_only_scene)
        assert rec.kind == SurfaceKind.NONE
        assert not rec.hit

    def test_disabled_floor_is_never_hit(self, renderer):
        from src.ray3d.scene.intersection import SurfaceKind
        from src.ray3d.scene.model import SceneDescription

        rec = renderer.intersect((0.0, 0.0, -5.0), (0.0, -1.0, 0.0), SceneDescription(floor=None))
        assert rec.kind == SurfaceKind.NONE

    def test_zero_direction_is_a_miss(self, renderer):
        from src.ray3d.scene.intersection import SurfaceKind

        rec = renderer.intersect((0.0, 0.0, 0.0), (0.0, 0.0, 0.0))
        assert rec.kind == SurfaceKind.NONE


class TestShadow:
    """Tests for the shadow query."""

    def test_occluder_casts_shadow(self, renderer):
        point = (0.5, -2.0, -2.5)
        assert renderer.in_shadow(point, _occluded_scene(point)) is True

    def test_no_occluder_no_shadow(self, renderer, floor_only_scene):
        assert renderer.in_shadow((0.5, -2.0, -2.5), floor_only_scene) is False

    def test_occluder_beyond_shadow_distance(self, renderer):
        point = (0.5, -2.0, -2.5)
        assert renderer.in_shadow(point, _occluded_scene(point, distance=12.0)) is False

    def test_floor_never_casts_shadows(self, renderer, floor_only_scene):
        """A point under the floor plane still sees the light."""
        assert renderer.in_shadow((0.0, -3.0, -5.0), floor_only_scene) is False

    def test_orbit_scene_center_front_is_lit(self, renderer):
        assert renderer.in_shadow((0.0, 0.0, -4.0)) is False
