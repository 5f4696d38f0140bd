"""Byte-exact comparison of rendered frames with a pure-Python tracer.

The tracer below restates the shading rules with plain float64 arithmetic
and ``math.floor`` after every multiply or blend, evaluating every
expression in the same order as the Taichi functions. Any change to where
truncation happens, or to the order of the float operations, shows up as
differing pixels.
"""

import math

import numpy as np
import pytest

T_EPSILON = 0.001
T_MAX = 1e30
MAX_DEPTH = 2


def _dot(a, b):
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]


def _normalize(v):
    length = math.sqrt(_dot(v, v))
    return (v[0] / length, v[1] / length, v[2] / length)


def _ray_at(origin, direction, t):
    return tuple(o + t * d for o, d in zip(origin, direction))


def _near_root(origin, direction, center, radius):
    oc = tuple(o - c for o, c in zip(origin, center))
    a = _dot(direction, direction)
    b = 2.0 * _dot(oc, direction)
    c = _dot(oc, oc) - radius * radius

    t = -1.0
    if a > 1e-12:
        discriminant = b * b - 4.0 * a * c
        if discriminant >= 0.0:
            t = (-b - math.sqrt(discriminant)) / (2.0 * a)
    return t


def _intersect(scene, origin, direction):
    """Closest hit as (kind, point, normal, sphere), kind None on a miss."""
    closest_t = T_MAX
    hit = (None, None, None, None)

    floor = scene.floor
    if floor is not None and direction[1] < 0.0:
        t = (floor.height - origin[1]) / direction[1]
        if T_EPSILON < t < closest_t:
            point = _ray_at(origin, direction, t)
            if (
                abs(point[0] - floor.center[0]) < floor.half_extent
                and abs(point[2] - floor.center[1]) < floor.half_extent
            ):
                closest_t = t
                hit = ("floor", point, (0.0, 1.0, 0.0), None)

    for sphere in scene.spheres:
        t = _near_root(origin, direction, sphere.center, sphere.radius)
        if T_EPSILON < t < closest_t:
            closest_t = t
            point = _ray_at(origin, direction, t)
            normal = tuple((p - c) / sphere.radius for p, c in zip(point, sphere.center))
            hit = ("sphere", point, normal, sphere)

    return hit


def _in_shadow(scene, point):
    light = scene.light
    for sphere in scene.spheres:
        t = _near_root(point, light.direction, sphere.center, sphere.radius)
        if T_EPSILON < t < light.shadow_distance:
            return True
    return False


def _blend(base, reflected, base_weight, reflection_weight):
    return tuple(
        float(math.floor(b * base_weight + r * reflection_weight))
        for b, r in zip(base, reflected)
    )


def _trace(scene, origin, direction, depth=0):
    background = tuple(float(c) for c in scene.background)
    if depth > MAX_DEPTH:
        return background

    kind, point, normal, sphere = _intersect(scene, origin, direction)
    if kind is None:
        return background

    shadowed = _in_shadow(scene, point)

    if kind == "floor":
        floor = scene.floor
        parity = (math.floor(point[0]) + math.floor(point[2])) & 1
        cell = floor.dark_color if parity == 1 else floor.light_color
        factor = floor.shadow_factor if shadowed else floor.lit_factor
        base = tuple(float(math.floor(float(c) * factor)) for c in cell)

        mirrored = _normalize((direction[0], -direction[1], direction[2]))
        reflected = _trace(scene, point, mirrored, depth + 1)
        return _blend(base, reflected, floor.base_weight, floor.reflection_weight)

    diffuse = max(0.2, min(1.0, _dot(normal, scene.light.direction)))
    if shadowed:
        diffuse = 0.2
    factor = 0.3 + diffuse * 0.7
    base = tuple(float(math.floor(float(c) * factor)) for c in sphere.color)

    if sphere.reflectivity > 0.0:
        k = 2.0 * _dot(direction, normal)
        mirrored = tuple(d - k * n for d, n in zip(direction, normal))
        reflected = _trace(scene, point, mirrored, depth + 1)
        return _blend(base, reflected, 1.0 - sphere.reflectivity, sphere.reflectivity)
    return base


def _reference_frame(scene, width, height):
    frame = np.empty((height, width, 4), dtype=np.uint8)
    w = float(width)
    h = float(height)
    aspect = w / h

    for y in range(height):
        for x in range(width):
            u = (2.0 * x / w - 1.0) * aspect
            v = -(2.0 * y / h - 1.0)
            direction = _normalize((u, v, -1.0))
            r, g, b = (
                int(min(max(c, 0.0), 255.0)) for c in _trace(scene, (0.0, 0.0, 0.0), direction)
            )
            frame[y, x] = (b, g, r, 255)
    return frame


class TestReferenceFrames:
    """Rendered frames must equal the reference tracer byte for byte."""

    @pytest.mark.parametrize(
        "width, height, angle",
        [(64, 48, 0.0), (64, 48, 2.7), (50, 70, 4.0)],
    )
    def test_orbit_frame(self, renderer, width, height, angle):
        from src.ray3d.scene.orbit import create_orbit_scene

        frame = renderer.render(width, height, angle)
        expected = _reference_frame(create_orbit_scene(angle), width, height)

        np.testing.assert_array_equal(frame, expected)

    def test_shadowed_scene(self, renderer):
        """A sphere hovering over the floor casts a shadow into view."""
        from src.ray3d.scene.model import SceneDescription, SphereInfo

        scene = SceneDescription(
            spheres=(
                SphereInfo(center=(0.5, -1.0, -4.0), radius=0.6, color=(220, 180, 40), reflectivity=0.4),
                SphereInfo(center=(-1.5, -1.2, -6.0), radius=0.8, color=(40, 90, 210)),
            ),
        )
        frame = renderer.render_scene(scene, 48, 36)
        expected = _reference_frame(scene, 48, 36)

        np.testing.assert_array_equal(frame, expected)

    def test_reference_matches_hand_values(self):
        """The center of the default scene blends (179, 70, 70) with the background."""
        from src.ray3d.scene.orbit import create_orbit_scene

        color = _trace(create_orbit_scene(0.0), (0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert color == (74.0, 49.0, 63.0)
