"""Scene module: description, the orbit scene and Taichi-side buffers.

Components:
    model: Immutable host-side scene description (spheres, floor, light)
    orbit: The animated three-sphere orbit scene and its time mapping
    intersection: SceneBuffers with closest-hit and shadow queries
"""

from .model import (
    BACKGROUND_COLOR,
    FloorInfo,
    LightInfo,
    SceneDescription,
    SphereInfo,
)
from .orbit import (
    DEFAULT_ANGULAR_SPEED,
    TWO_PI,
    OrbitSceneParams,
    animation_angle,
    create_orbit_scene,
    orbit_period,
    orbit_positions,
    wrap_angle,
)
from .intersection import MAX_SPHERES, SceneBuffers, SceneHitRecord, SurfaceKind

__all__ = [
    # Model
    "SceneDescription",
    "SphereInfo",
    "FloorInfo",
    "LightInfo",
    "BACKGROUND_COLOR",
    # Orbit scene
    "OrbitSceneParams",
    "create_orbit_scene",
    "orbit_positions",
    "animation_angle",
    "orbit_period",
    "wrap_angle",
    "DEFAULT_ANGULAR_SPEED",
    "TWO_PI",
    # Intersection
    "SceneBuffers",
    "SceneHitRecord",
    "SurfaceKind",
    "MAX_SPHERES",
]
