"""Frame renderer: one complete BGRA frame per call.

FrameRenderer ties the pieces together. For every call it builds (or takes)
a scene description, uploads it into its SceneBuffers and runs a single
Taichi kernel whose outermost loop covers every (row, column) of the frame.
Each pixel runs camera ray generation, the reflection tracer and the final
clamp to bytes independently, so the kernel is data-parallel across CPU
threads.

The renderer keeps no per-resolution state. Rendering at a new size is just
a render call with new dimensions; kernels take the output as an external
array and are compiled once.

Besides the frame kernel the renderer exposes single-ray probes (``trace``,
``intersect``, ``in_shadow``, ``primary_ray``) that run the same Taichi
functions on one ray. They exist for tests and debugging tools.

Example:
    >>> from src.ray3d.config import initialize_taichi
    >>> initialize_taichi("cpu")
    'cpu'
    >>> from src.ray3d.core.renderer import FrameRenderer
    >>> renderer = FrameRenderer()
    >>> frame = renderer.render(640, 480, angle=0.0)
    >>> frame.shape, frame.dtype
    ((480, 640, 4), dtype('uint8'))
"""

import logging
import time
from dataclasses import dataclass
from typing import Any

import numpy as np
import numpy.typing as npt
import taichi as ti

from src.ray3d.camera.pinhole import get_ray, get_ray_direction
from src.ray3d.core.integrator import trace
from src.ray3d.core.ray import vec3
from src.ray3d.errors import InvalidDimensionsError
from src.ray3d.scene.intersection import MAX_SPHERES, SceneBuffers, SurfaceKind
from src.ray3d.scene.model import SceneDescription
from src.ray3d.scene.orbit import OrbitSceneParams, create_orbit_scene

logger = logging.getLogger(__name__)

# Bytes per pixel in the output buffer (B, G, R, A)
CHANNELS = 4

Vec3 = tuple[float, float, float]


@dataclass(frozen=True)
class TraceResult:
    """Result of tracing one ray.

    Attributes:
        color: Final RGB color, each channel an int in [0, 255].
        levels: Number of trace levels that ran an intersection query.
    """

    color: tuple[int, int, int]
    levels: int


@dataclass(frozen=True)
class IntersectionResult:
    """Closest hit of one ray, read back to the host.

    Attributes:
        kind: What was hit.
        t: Ray parameter of the hit (0.0 on a miss).
        point: Hit point.
        normal: Outward unit normal.
        sphere_index: Index into the scene's spheres, -1 unless a sphere was hit.
    """

    kind: SurfaceKind
    t: float
    point: Vec3
    normal: Vec3
    sphere_index: int

    @property
    def hit(self) -> bool:
        """Whether the ray hit anything."""
        return self.kind != SurfaceKind.NONE


def _check_dimensions(width: Any, height: Any) -> tuple[int, int]:
    """Validate frame dimensions.

    Raises:
        InvalidDimensionsError: Unless both are positive integers (bool is
            rejected even though it is an int subclass).
    """
    for value in (width, height):
        if isinstance(value, bool) or not isinstance(value, (int, np.integer)) or value <= 0:
            raise InvalidDimensionsError(width, height)
    return int(width), int(height)


def _as_frame_array(buffer: Any, width: int, height: int) -> npt.NDArray[np.uint8]:
    """View a caller-supplied destination as a (height, width, 4) uint8 array.

    Accepts a NumPy array of exactly that shape and dtype (C-contiguous and
    writable), or any writable object supporting the buffer protocol with
    exactly width * height * 4 bytes.

    Raises:
        ValueError: If the destination does not fit the frame.
    """
    shape = (height, width, CHANNELS)

    if isinstance(buffer, np.ndarray):
        if buffer.shape != shape or buffer.dtype != np.uint8:
            raise ValueError(
                f"Destination array must be uint8 with shape {shape}, "
                f"got {buffer.dtype} with shape {buffer.shape}"
            )
        if not buffer.flags.c_contiguous or not buffer.flags.writeable:
            raise ValueError("Destination array must be C-contiguous and writable")
        return buffer

    try:
        view = memoryview(buffer)
    except TypeError as exc:
        raise ValueError(
            f"Destination must be a NumPy array or a writable buffer, got {type(buffer).__name__}"
        ) from exc

    if view.readonly:
        raise ValueError("Destination buffer is read-only")

    expected = width * height * CHANNELS
    if view.nbytes != expected:
        raise ValueError(f"Destination buffer holds {view.nbytes} bytes, expected {expected}")

    return np.frombuffer(buffer, dtype=np.uint8, count=expected).reshape(shape)


@ti.data_oriented
class FrameRenderer:
    """Renders the orbit scene (or any SceneDescription) into BGRA frames.

    Taichi must be initialized before construction. One instance owns one
    set of scene buffers, so it must not be shared between threads.

    Attributes:
        params: Parameters of the orbit scene used by :meth:`render`.
        scene: The Taichi-side scene buffers, overwritten on every call.
    """

    def __init__(
        self,
        params: OrbitSceneParams | None = None,
        *,
        max_spheres: int = MAX_SPHERES,
    ) -> None:
        self.params = params if params is not None else OrbitSceneParams()
        self.scene = SceneBuffers(max_spheres)

        # Probe outputs
        self._probe_color = ti.Vector.field(3, dtype=ti.f64, shape=())
        self._probe_levels = ti.field(dtype=ti.i32, shape=())
        self._probe_kind = ti.field(dtype=ti.i32, shape=())
        self._probe_t = ti.field(dtype=ti.f64, shape=())
        self._probe_point = ti.Vector.field(3, dtype=ti.f64, shape=())
        self._probe_normal = ti.Vector.field(3, dtype=ti.f64, shape=())
        self._probe_index = ti.field(dtype=ti.i32, shape=())
        self._probe_shadow = ti.field(dtype=ti.i32, shape=())
        self._probe_direction = ti.Vector.field(3, dtype=ti.f64, shape=())

    # =========================================================================
    # Kernels
    # =========================================================================

    @ti.kernel
    def _render_kernel(
        self,
        out: ti.types.ndarray(dtype=ti.u8, ndim=3),
        width: ti.i32,
        height: ti.i32,
    ):
        for y, x in ti.ndrange(height, width):
            ray = get_ray(x, y, width, height)
            color, levels = trace(self.scene, ray.origin, ray.direction)
            color = ti.min(ti.max(color, 0.0), 255.0)

            out[y, x, 0] = ti.cast(ti.cast(color[2], ti.i32), ti.u8)
            out[y, x, 1] = ti.cast(ti.cast(color[1], ti.i32), ti.u8)
            out[y, x, 2] = ti.cast(ti.cast(color[0], ti.i32), ti.u8)
            out[y, x, 3] = ti.cast(255, ti.u8)

    @ti.kernel
    def _trace_kernel(
        self,
        ox: ti.f64,
        oy: ti.f64,
        oz: ti.f64,
        dx: ti.f64,
        dy: ti.f64,
        dz: ti.f64,
    ):
        color, levels = trace(self.scene, vec3(ox, oy, oz), vec3(dx, dy, dz))
        self._probe_color[None] = color
        self._probe_levels[None] = levels

    @ti.kernel
    def _intersect_kernel(
        self,
        ox: ti.f64,
        oy: ti.f64,
        oz: ti.f64,
        dx: ti.f64,
        dy: ti.f64,
        dz: ti.f64,
    ):
        rec = self.scene.intersect(vec3(ox, oy, oz), vec3(dx, dy, dz))
        self._probe_kind[None] = rec.kind
        self._probe_t[None] = rec.t
        self._probe_point[None] = rec.point
        self._probe_normal[None] = rec.normal
        self._probe_index[None] = rec.sphere_index

    @ti.kernel
    def _shadow_kernel(self, px: ti.f64, py: ti.f64, pz: ti.f64):
        self._probe_shadow[None] = self.scene.in_shadow(vec3(px, py, pz))

    @ti.kernel
    def _primary_ray_kernel(self, x: ti.i32, y: ti.i32, width: ti.i32, height: ti.i32):
        self._probe_direction[None] = get_ray_direction(x, y, width, height)

    # =========================================================================
    # Frames
    # =========================================================================

    def render(self, width: int, height: int, angle: float = 0.0) -> npt.NDArray[np.uint8]:
        """Render the orbit scene at one animation angle.

        Args:
            width: Frame width in pixels, a positive int.
            height: Frame height in pixels, a positive int.
            angle: Orbit angle in radians (any real value).

        Returns:
            A new uint8 array of shape (height, width, 4) holding B, G, R, 255
            per pixel, rows top to bottom.

        Raises:
            InvalidDimensionsError: If width or height is not a positive int.
        """
        width, height = _check_dimensions(width, height)
        return self.render_scene(create_orbit_scene(angle, self.params), width, height)

    def render_into(
        self,
        buffer: Any,
        width: int,
        height: int,
        angle: float = 0.0,
    ) -> npt.NDArray[np.uint8]:
        """Render the orbit scene into a caller-owned buffer.

        Args:
            buffer: A (height, width, 4) uint8 C-contiguous array, or any
                writable buffer of exactly width * height * 4 bytes.
            width: Frame width in pixels.
            height: Frame height in pixels.
            angle: Orbit angle in radians.

        Returns:
            A (height, width, 4) array viewing the caller's memory.

        Raises:
            InvalidDimensionsError: If width or height is not a positive int.
            ValueError: If the buffer does not match the frame size.
        """
        width, height = _check_dimensions(width, height)
        out = _as_frame_array(buffer, width, height)
        return self.render_scene(create_orbit_scene(angle, self.params), width, height, out=out)

    def render_scene(
        self,
        scene: SceneDescription,
        width: int,
        height: int,
        out: npt.NDArray[np.uint8] | None = None,
    ) -> npt.NDArray[np.uint8]:
        """Render an arbitrary scene description.

        Args:
            scene: The scene to render.
            width: Frame width in pixels.
            height: Frame height in pixels.
            out: Optional destination, validated like :meth:`render_into`.

        Returns:
            The filled BGRA frame (``out`` itself when given).
        """
        width, height = _check_dimensions(width, height)
        if out is None:
            out = np.empty((height, width, CHANNELS), dtype=np.uint8)
        else:
            out = _as_frame_array(out, width, height)

        self.scene.upload(scene)

        start = time.perf_counter()
        self._render_kernel(out, width, height)
        elapsed_ms = (time.perf_counter() - start) * 1000.0
        logger.debug("Rendered %dx%d frame in %.1f ms", width, height, elapsed_ms)

        return out

    # =========================================================================
    # Single-ray probes
    # =========================================================================

    def _upload_probe_scene(self, scene: SceneDescription | None) -> None:
        if scene is None:
            scene = create_orbit_scene(0.0, self.params)
        self.scene.upload(scene)

    def trace(
        self,
        origin: Vec3,
        direction: Vec3,
        scene: SceneDescription | None = None,
    ) -> TraceResult:
        """Trace one ray and return its color before byte conversion.

        Args:
            origin: Ray origin.
            direction: Ray direction.
            scene: Scene to trace against. Defaults to the orbit scene at
                angle 0.

        Returns:
            The traced color and the number of levels used.
        """
        self._upload_probe_scene(scene)
        self._trace_kernel(*map(float, origin), *map(float, direction))

        color = self._probe_color.to_numpy()
        return TraceResult(
            color=(int(color[0]), int(color[1]), int(color[2])),
            levels=int(self._probe_levels[None]),
        )

    def intersect(
        self,
        origin: Vec3,
        direction: Vec3,
        scene: SceneDescription | None = None,
    ) -> IntersectionResult:
        """Find the closest hit of one ray."""
        self._upload_probe_scene(scene)
        self._intersect_kernel(*map(float, origin), *map(float, direction))

        point = self._probe_point.to_numpy()
        normal = self._probe_normal.to_numpy()
        return IntersectionResult(
            kind=SurfaceKind(int(self._probe_kind[None])),
            t=float(self._probe_t[None]),
            point=(float(point[0]), float(point[1]), float(point[2])),
            normal=(float(normal[0]), float(normal[1]), float(normal[2])),
            sphere_index=int(self._probe_index[None]),
        )

    def in_shadow(self, point: Vec3, scene: SceneDescription | None = None) -> bool:
        """Whether a sphere blocks the light from a point."""
        self._upload_probe_scene(scene)
        self._shadow_kernel(*map(float, point))
        return bool(self._probe_shadow[None])

    def primary_ray(self, x: int, y: int, width: int, height: int) -> Vec3:
        """Unit direction of the camera ray through pixel (x, y).

        Raises:
            InvalidDimensionsError: If width or height is not a positive int.
        """
        width, height = _check_dimensions(width, height)
        self._primary_ray_kernel(int(x), int(y), width, height)

        direction = self._probe_direction.to_numpy()
        return (float(direction[0]), float(direction[1]), float(direction[2]))

    def __repr__(self) -> str:
        """Return a string representation of the renderer."""
        return f"FrameRenderer(max_spheres={self.scene.max_spheres})"
