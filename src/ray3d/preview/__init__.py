"""Preview module: hosts that present rendered frames.

Components:
    clock: Monotonic animation clock
    export: BGRA conversion and PNG export
    display: Matplotlib-based static display
    interactive: Taichi GGUI window tracking the window size

Example:
    >>> from src.ray3d.preview import save_png, show_frame
    >>> frame = renderer.render(640, 480, angle=0.0)
    >>> show_frame(frame)
    >>> save_png(frame, "orbit.png")
"""

from src.ray3d.preview.clock import AnimationClock
from src.ray3d.preview.display import show_frame
from src.ray3d.preview.export import bgra_to_float_rgb, bgra_to_rgb, save_png
from src.ray3d.preview.interactive import (
    InteractivePreview,
    frame_to_display_array,
    usable_size,
)

__all__ = [
    "AnimationClock",
    # Interactive preview
    "InteractivePreview",
    "frame_to_display_array",
    "usable_size",
    # Display
    "show_frame",
    # Export
    "bgra_to_rgb",
    "bgra_to_float_rgb",
    "save_png",
]
