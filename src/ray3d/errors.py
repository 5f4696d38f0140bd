"""Exception types raised by the renderer.

Both concrete errors also derive from ValueError, so callers that already
guard against bad arguments with ``except ValueError`` keep working.
"""


class RenderError(Exception):
    """Base class for renderer errors."""


class InvalidDimensionsError(RenderError, ValueError):
    """Raised when a frame is requested with a non-positive width or height.

    The check happens before any kernel launch, so no partial buffer is ever
    produced.
    """

    def __init__(self, width: object, height: object) -> None:
        self.width = width
        self.height = height
        super().__init__(
            f"Frame dimensions must be positive integers, got {width!r}x{height!r}"
        )


class SceneError(RenderError, ValueError):
    """Raised for an invalid scene description."""
