"""Monotonic animation clock.

Hosts drive the animation from wall-clock time: the angle of a frame is a
function of the milliseconds elapsed since the clock started, never of the
previous frame.
"""

from __future__ import annotations

import time
from collections.abc import Callable

from src.ray3d.scene.orbit import DEFAULT_ANGULAR_SPEED, animation_angle


class AnimationClock:
    """Elapsed-time source for the orbit animation.

    Attributes:
        angular_speed: Radians per second.

    Example:
        >>> clock = AnimationClock()
        >>> frame = renderer.render(640, 480, clock.angle())
    """

    def __init__(
        self,
        angular_speed: float = DEFAULT_ANGULAR_SPEED,
        *,
        time_source: Callable[[], float] = time.perf_counter,
    ) -> None:
        """Start the clock.

        Args:
            angular_speed: Radians per second.
            time_source: Monotonic clock in seconds. Tests pass a fake.
        """
        self.angular_speed = angular_speed
        self._time_source = time_source
        self._start = time_source()

    def reset(self) -> None:
        """Restart the clock at zero elapsed time."""
        self._start = self._time_source()

    def elapsed_ms(self) -> float:
        """Milliseconds since the clock started."""
        return (self._time_source() - self._start) * 1000.0

    def angle(self) -> float:
        """Orbit angle for the current time, in [0, 2*pi)."""
        return animation_angle(self.elapsed_ms(), self.angular_speed)
