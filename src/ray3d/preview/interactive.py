"""Interactive preview window using Taichi GGUI.

The window is a thin host around FrameRenderer: every frame it reads the
current client size and the animation clock, renders a complete frame at
that size and presents it. A size change only drops and reallocates the
display field; the renderer itself keeps no per-resolution state.

Controls:
    - ESC or closing the window quits
    - "Export PNG" button saves the current frame

Example:
    >>> from src.ray3d.config import initialize_taichi
    >>> initialize_taichi("cpu")
    'cpu'
    >>> from src.ray3d.core.renderer import FrameRenderer
    >>> from src.ray3d.preview.interactive import InteractivePreview
    >>>
    >>> preview = InteractivePreview(FrameRenderer(), 800, 600)
    >>> preview.run()  # Blocks until the window is closed
"""

from __future__ import annotations

import logging
import os
from datetime import datetime
from typing import TYPE_CHECKING

import numpy as np
import taichi as ti

from src.ray3d.preview.clock import AnimationClock
from src.ray3d.preview.export import bgra_to_float_rgb, save_png

if TYPE_CHECKING:
    import numpy.typing as npt

    from src.ray3d.core.renderer import FrameRenderer

logger = logging.getLogger(__name__)


def frame_to_display_array(frame: npt.NDArray[np.uint8]) -> npt.NDArray[np.float32]:
    """Convert a BGRA frame to the layout of a GGUI image field.

    Taichi fields use (x, y) indexing with the origin at the bottom-left,
    while frames are (row, column) with row 0 at the top.

    Args:
        frame: Array of shape (H, W, 4) with dtype uint8.

    Returns:
        Float32 RGB array of shape (W, H, 3) in [0, 1].
    """
    image = bgra_to_float_rgb(frame)
    return np.ascontiguousarray(np.transpose(np.flipud(image), (1, 0, 2)))


def usable_size(shape: tuple[int, int]) -> bool:
    """Whether a window client size can be rendered (minimized windows report 0)."""
    return shape[0] > 0 and shape[1] > 0


class InteractivePreview:
    """Animated orbit preview in a resizable Taichi GGUI window.

    Attributes:
        renderer: The FrameRenderer producing frames.
        width: Current frame width in pixels.
        height: Current frame height in pixels.
        display_image: Taichi field holding the presented image, shape
            (width, height). Reallocated whenever the size changes.
    """

    def __init__(
        self,
        renderer: FrameRenderer,
        width: int,
        height: int,
        *,
        title: str = "Ray3D - Orbit",
        clock: AnimationClock | None = None,
    ) -> None:
        """Create the preview.

        Args:
            renderer: The FrameRenderer producing frames.
            width: Initial window width in pixels.
            height: Initial window height in pixels.
            title: Window title.
            clock: Animation clock (default starts a new one at run()).

        Note:
            The window is created lazily on first use to support headless
            checks.
        """
        self.renderer = renderer
        self.width = width
        self.height = height
        self._title = title
        self._clock = clock

        self._window: ti.ui.Window | None = None
        self._canvas: ti.ui.Canvas | None = None
        self._last_frame: npt.NDArray[np.uint8] | None = None
        self._frame_count = 0

        self.display_image: ti.MatrixField = self._allocate_display(width, height)

    @staticmethod
    def _allocate_display(width: int, height: int) -> ti.MatrixField:
        return ti.Vector.field(3, dtype=ti.f32, shape=(width, height))

    def _initialize_window(self) -> None:
        if self._window is not None:
            return

        self._window = ti.ui.Window(
            name=self._title,
            res=(self.width, self.height),
            vsync=True,
        )
        self._canvas = self._window.get_canvas()

    @property
    def window(self) -> ti.ui.Window:
        """Get the Taichi GGUI window, initializing if needed."""
        if self._window is None:
            self._initialize_window()
        assert self._window is not None
        return self._window

    @property
    def canvas(self) -> ti.ui.Canvas:
        """Get the canvas for rendering."""
        if self._canvas is None:
            self._initialize_window()
        assert self._canvas is not None
        return self._canvas

    @property
    def frame_count(self) -> int:
        """Number of frames presented so far."""
        return self._frame_count

    def is_running(self) -> bool:
        """Check if the window is still open."""
        return self.window.running

    def resize(self, width: int, height: int) -> bool:
        """Adopt a new client size.

        Args:
            width: New width in pixels.
            height: New height in pixels.

        Returns:
            True if the size changed and the display field was reallocated.
            Zero-sized (minimized) and unchanged sizes are ignored.
        """
        if not usable_size((width, height)) or (width, height) == (self.width, self.height):
            return False

        logger.info("Resize %dx%d -> %dx%d", self.width, self.height, width, height)
        self.width = width
        self.height = height
        self.display_image = self._allocate_display(width, height)
        return True

    def update_frame(self, frame: npt.NDArray[np.uint8]) -> None:
        """Copy a BGRA frame into the display field.

        Raises:
            ValueError: If the frame size doesn't match the current size.
        """
        expected_shape = (self.height, self.width, 4)
        if frame.shape != expected_shape:
            raise ValueError(
                f"Frame shape {frame.shape} doesn't match expected {expected_shape}"
            )

        self.display_image.from_numpy(frame_to_display_array(frame))
        self._last_frame = frame

    def show_frame(self) -> None:
        """Present the display field."""
        self.canvas.set_image(self.display_image)
        self.window.show()
        self._frame_count += 1

    def _handle_events(self) -> None:
        for event in self.window.get_events(ti.ui.PRESS):
            if event.key == ti.ui.ESCAPE:
                self.close()

    def render_frame(self) -> None:
        """Render and present one frame at the window's current size."""
        self._handle_events()
        if not self.is_running():
            return

        self.resize(*self.window.get_window_shape())

        assert self._clock is not None
        frame = self.renderer.render(self.width, self.height, self._clock.angle())
        self.update_frame(frame)
        self._draw_gui_panel()
        self.show_frame()

    def run(self) -> None:
        """Run the animation loop until the window is closed or ESC is pressed."""
        self._initialize_window()
        if self._clock is None:
            self._clock = AnimationClock()

        logger.info("Preview started at %dx%d", self.width, self.height)
        while self.is_running():
            self.render_frame()
        logger.info("Preview closed after %d frames", self._frame_count)

    def close(self) -> None:
        """Close the preview window."""
        if self._window is not None:
            self._window.running = False

    def _draw_gui_panel(self) -> None:
        with self.window.GUI.sub_window("Orbit", 0.02, 0.02, 0.22, 0.12) as gui:
            gui.text(f"{self.width}x{self.height}")
            if gui.button("Export PNG"):
                self._export_png()

    def _export_png(self) -> None:
        """Export the last presented frame to a timestamped PNG file."""
        if self._last_frame is None:
            print("Error: No frame available for export")
            return

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        filename = f"orbit_{timestamp}.png"
        save_png(self._last_frame, filename)
        print(f"Exported: {filename} ({self.width}x{self.height})")

    @staticmethod
    def is_display_available() -> bool:
        """Check if a display is available for GUI rendering.

        Returns:
            True if a display is available, False for headless environments.
        """
        display = os.environ.get("DISPLAY")
        wayland = os.environ.get("WAYLAND_DISPLAY")

        if os.name == "nt":
            return True

        # macOS always has a display unless reached over SSH without forwarding
        if os.uname().sysname == "Darwin":
            return not (os.environ.get("SSH_CONNECTION") and not display)

        return bool(display or wayland)
