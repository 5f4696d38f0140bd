"""Matplotlib-based static display of rendered frames.

Example:
    >>> from src.ray3d.preview.display import show_frame
    >>> frame = renderer.render(640, 480, angle=0.0)
    >>> show_frame(frame, title="Orbit")
"""

from __future__ import annotations

import numpy as np
import numpy.typing as npt

from src.ray3d.preview.export import bgra_to_rgb


def show_frame(
    frame: npt.NDArray[np.uint8],
    *,
    title: str | None = None,
    figsize: tuple[float, float] | None = None,
    block: bool = True,
) -> None:
    """Display a BGRA frame in a Matplotlib figure.

    Args:
        frame: Array of shape (H, W, 4) with dtype uint8.
        title: Figure title (default shows the frame size).
        figsize: Figure size in inches. Defaults to 8 inches wide with the
            frame's aspect ratio.
        block: Whether to block execution until the figure is closed.
    """
    import matplotlib.pyplot as plt

    image = bgra_to_rgb(frame)
    height, width = image.shape[:2]

    if figsize is None:
        figsize = (8.0, 8.0 * height / width)

    fig, ax = plt.subplots(1, 1, figsize=figsize)

    # uint8 RGB is shown as-is, no normalization
    ax.imshow(image, interpolation="nearest")
    ax.axis("off")
    ax.set_title(title if title is not None else f"Orbit - {width}x{height}")

    plt.tight_layout()
    plt.show(block=block)
