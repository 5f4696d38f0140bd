"""Animated orbit ray tracer built on Taichi.

Renders three spheres orbiting above a bounded checkerboard floor, lit by a
single directional light, into BGRA pixel buffers. Frames are a pure
function of (width, height, angle); hosts supply the size and the clock and
present the result.

Subpackages:
    core: Vector utilities, shading, the reflection tracer and the frame renderer
    geometry: Sphere and floor primitives with intersection functions
    scene: Scene description, the orbit scene and the Taichi scene buffers
    camera: Fixed pinhole camera
    preview: Animation clock, export, static display and interactive window
"""

__version__ = "0.1.0"
