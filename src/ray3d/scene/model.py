"""Host-side scene description.

A SceneDescription is an immutable value: spheres, an optional floor, the
directional light and the background color. The renderer uploads one into
its Taichi fields at the start of every render call, so nothing about a
previous frame survives into the next one.

Colors are 8-bit RGB triples; shading keeps them as whole numbers in float64
and truncates after every multiply.

Example:
    >>> from src.ray3d.scene.model import SceneDescription, SphereInfo
    >>> scene = SceneDescription(
    ...     spheres=(SphereInfo(center=(0.0, 0.0, -5.0), radius=1.0, color=(255, 0, 0)),),
    ... )
    >>> scene.floor.height
    -2.0
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from src.ray3d.errors import SceneError

Vec3 = tuple[float, float, float]
Color = tuple[int, int, int]

BACKGROUND_COLOR: Color = (30, 40, 60)


def _check_color(name: str, color: Color) -> None:
    if len(color) != 3 or any(not 0 <= channel <= 255 for channel in color):
        raise SceneError(f"{name} must be three channels in [0, 255], got {color!r}")


@dataclass(frozen=True)
class SphereInfo:
    """A sphere in the scene.

    Attributes:
        center: Center point (x, y, z).
        radius: Radius, strictly positive.
        color: Base RGB color.
        reflectivity: Blend weight of the mirror reflection, in [0, 1].
            Zero disables the reflection ray for this sphere.
    """

    center: Vec3
    radius: float
    color: Color
    reflectivity: float = 0.0

    def __post_init__(self) -> None:
        if not math.isfinite(self.radius) or self.radius <= 0.0:
            raise SceneError(f"Sphere radius must be positive, got {self.radius!r}")
        if not 0.0 <= self.reflectivity <= 1.0:
            raise SceneError(
                f"Sphere reflectivity must be in [0, 1], got {self.reflectivity!r}"
            )
        _check_color("Sphere color", self.color)


@dataclass(frozen=True)
class FloorInfo:
    """The bounded checkerboard floor.

    Attributes:
        height: y coordinate of the plane.
        center: (x, z) center of the visible square.
        half_extent: Half the side length of the visible square.
        light_color: Color of even-parity cells.
        dark_color: Color of odd-parity cells.
        lit_factor: Cell color multiplier when the point sees the light.
        shadow_factor: Cell color multiplier when the point is shadowed.
        base_weight: Weight of the shaded cell color in the reflection blend.
        reflection_weight: Weight of the reflected color in the blend.
    """

    height: float = -2.0
    center: tuple[float, float] = (0.0, -5.0)
    half_extent: float = 10.0
    light_color: Color = (200, 200, 200)
    dark_color: Color = (100, 100, 100)
    lit_factor: float = 0.8
    shadow_factor: float = 0.3
    base_weight: float = 0.3
    reflection_weight: float = 0.7

    def __post_init__(self) -> None:
        if self.half_extent <= 0.0:
            raise SceneError(f"Floor half extent must be positive, got {self.half_extent!r}")
        _check_color("Floor light color", self.light_color)
        _check_color("Floor dark color", self.dark_color)


@dataclass(frozen=True)
class LightInfo:
    """The single directional light.

    Attributes:
        direction: Direction toward the light. Used as-is for both the
            diffuse term and the shadow ray, without renormalizing.
        shadow_distance: Occluders are only counted for t below this.
    """

    direction: Vec3 = (0.577, 0.577, 0.577)
    shadow_distance: float = 10.0


@dataclass(frozen=True)
class SceneDescription:
    """Everything the renderer needs to shade one frame.

    Attributes:
        spheres: The spheres, in intersection order.
        floor: The floor, or None for a scene without one.
        light: The directional light.
        background: Color of rays that escape the scene.
    """

    spheres: tuple[SphereInfo, ...] = ()
    floor: FloorInfo | None = FloorInfo()
    light: LightInfo = LightInfo()
    background: Color = BACKGROUND_COLOR

    def __post_init__(self) -> None:
        # Accept lists from callers but store a tuple
        object.__setattr__(self, "spheres", tuple(self.spheres))
        _check_color("Background color", self.background)

    @property
    def sphere_count(self) -> int:
        """Number of spheres in the scene."""
        return len(self.spheres)
