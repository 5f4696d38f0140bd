"""The animated orbit scene.

Three spheres above the checkerboard floor: a large red sphere fixed at the
orbit center and two smaller spheres (green and blue) circling it on
opposite sides of a horizontal orbit. The only free parameter per frame is
the orbit angle.

The angle is derived by the host from wall-clock time:

    angle = (elapsed_seconds * 1.5) mod 2*pi

which gives a full orbit every 2*pi / 1.5 ~ 4.19 seconds.

Example:
    >>> from src.ray3d.scene.orbit import create_orbit_scene
    >>> scene = create_orbit_scene(0.0)
    >>> [s.center for s in scene.spheres]
    [(0.0, 0.0, -5.0), (-2.0, 0.0, -5.0), (2.0, 0.0, -5.0)]
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from src.ray3d.scene.model import Color, FloorInfo, LightInfo, SceneDescription, SphereInfo

TWO_PI = 2.0 * math.pi

# Radians per second of animation time
DEFAULT_ANGULAR_SPEED = 1.5


@dataclass
class OrbitSceneParams:
    """Parameters of the orbit scene.

    All defaults match the reference scene; changing them is only useful
    for experiments and tests.

    Attributes:
        orbit_center: Position of the fixed central sphere.
        orbit_radius: Distance of the orbiting spheres from the center.
        center_radius: Radius of the central sphere.
        orbiter_radius: Radius of each orbiting sphere.
        center_color: RGB color of the central sphere (red).
        left_color: RGB color of the sphere starting at -x (green).
        right_color: RGB color of the sphere starting at +x (blue).
        center_reflectivity: Reflectivity of the central sphere.
        orbiter_reflectivity: Reflectivity of each orbiting sphere.
        angular_speed: Radians per second used by :func:`animation_angle`.
    """

    orbit_center: tuple[float, float, float] = (0.0, 0.0, -5.0)
    orbit_radius: float = 2.0
    center_radius: float = 1.0
    orbiter_radius: float = 0.8
    center_color: Color = (255, 100, 100)
    left_color: Color = (100, 200, 100)
    right_color: Color = (100, 150, 255)
    center_reflectivity: float = 0.7
    orbiter_reflectivity: float = 0.6
    angular_speed: float = DEFAULT_ANGULAR_SPEED


def wrap_angle(angle: float) -> float:
    """Wrap an angle into [0, 2*pi).

    ``angle + 2*pi`` wraps back to exactly ``angle`` whenever that sum is
    representable, which keeps the scene bit-identical across whole orbits.
    """
    return angle % TWO_PI


def orbit_positions(
    angle: float,
    params: OrbitSceneParams | None = None,
) -> tuple[tuple[float, float, float], tuple[float, float, float]]:
    """Positions of the two orbiting spheres at a given angle.

    Returns:
        (left, right) centers. Left is (-r cos a, y, z + r sin a) and right
        is the point opposite it on the orbit.
    """
    if params is None:
        params = OrbitSceneParams()

    angle = wrap_angle(angle)
    cos_a = math.cos(angle)
    sin_a = math.sin(angle)

    cx, cy, cz = params.orbit_center
    r = params.orbit_radius

    left = (cx - r * cos_a, cy, cz + r * sin_a)
    right = (cx + r * cos_a, cy, cz - r * sin_a)
    return left, right


def create_orbit_scene(
    angle: float = 0.0,
    params: OrbitSceneParams | None = None,
) -> SceneDescription:
    """Create the orbit scene for one animation angle.

    Args:
        angle: Orbit angle in radians. Any real value is accepted.
        params: Optional scene parameters. Defaults to OrbitSceneParams().

    Returns:
        A SceneDescription with spheres ordered center, left, right, the
        default floor and the default light.
    """
    if params is None:
        params = OrbitSceneParams()

    left, right = orbit_positions(angle, params)

    spheres = (
        SphereInfo(
            center=params.orbit_center,
            radius=params.center_radius,
            color=params.center_color,
            reflectivity=params.center_reflectivity,
        ),
        SphereInfo(
            center=left,
            radius=params.orbiter_radius,
            color=params.left_color,
            reflectivity=params.orbiter_reflectivity,
        ),
        SphereInfo(
            center=right,
            radius=params.orbiter_radius,
            color=params.right_color,
            reflectivity=params.orbiter_reflectivity,
        ),
    )

    return SceneDescription(spheres=spheres, floor=FloorInfo(), light=LightInfo())


def animation_angle(elapsed_ms: float, angular_speed: float = DEFAULT_ANGULAR_SPEED) -> float:
    """Map elapsed host time to the orbit angle.

    Args:
        elapsed_ms: Milliseconds since the animation started.
        angular_speed: Radians per second.

    Returns:
        (elapsed_ms / 1000 * angular_speed) mod 2*pi.
    """
    elapsed_s = elapsed_ms / 1000.0
    return (elapsed_s * angular_speed) % TWO_PI


def orbit_period(angular_speed: float = DEFAULT_ANGULAR_SPEED) -> float:
    """Seconds per full orbit."""
    return TWO_PI / angular_speed
