"""Conversion and export of rendered BGRA frames.

Frames come out of the renderer as uint8 arrays of shape (H, W, 4) in
B, G, R, A byte order, which is what native blit APIs expect. These helpers
reorder them for libraries that want RGB.

Supported formats:
    - PNG (8-bit RGB via Pillow)

Example:
    >>> from src.ray3d.preview.export import save_png
    >>> frame = renderer.render(640, 480, angle=0.0)
    >>> save_png(frame, "orbit.png")
"""

from __future__ import annotations

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage


def _check_frame(frame: npt.NDArray[np.uint8]) -> None:
    if frame.ndim != 3 or frame.shape[2] != 4 or frame.dtype != np.uint8:
        raise ValueError(
            f"Expected a uint8 BGRA frame of shape (H, W, 4), "
            f"got {frame.dtype} with shape {frame.shape}"
        )


def bgra_to_rgb(frame: npt.NDArray[np.uint8]) -> npt.NDArray[np.uint8]:
    """Reorder a BGRA frame into a contiguous RGB array.

    Args:
        frame: Array of shape (H, W, 4) with dtype uint8.

    Returns:
        A new array of shape (H, W, 3) with dtype uint8.

    Raises:
        ValueError: If the frame is not a uint8 (H, W, 4) array.
    """
    _check_frame(frame)
    return np.ascontiguousarray(frame[:, :, 2::-1])


def bgra_to_float_rgb(frame: npt.NDArray[np.uint8]) -> npt.NDArray[np.float32]:
    """Convert a BGRA frame to float32 RGB in [0, 1] for display."""
    return bgra_to_rgb(frame).astype(np.float32) / 255.0


def save_png(frame: npt.NDArray[np.uint8], filepath: str) -> None:
    """Save a BGRA frame as an RGB PNG file.

    The alpha channel is always 255 and is dropped.

    Args:
        frame: Array of shape (H, W, 4) with dtype uint8.
        filepath: Output file path (should end in .png).
    """
    pil_image = PILImage.fromarray(bgra_to_rgb(frame), mode="RGB")
    pil_image.save(filepath)
