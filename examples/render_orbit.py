#!/usr/bin/env python3
"""Render frames of the orbit scene to PNG files.

Renders one frame (or a short sequence) of the three-sphere orbit scene and
saves it through Pillow. The animation angle is taken from --angle, or
derived from --elapsed-ms the same way the interactive window derives it
from its clock.

Usage:
    python -m examples.render_orbit [options]

Options:
    --width WIDTH         Image width in pixels (default: 640)
    --height HEIGHT       Image height in pixels (default: 480)
    --angle RADIANS       Orbit angle; overrides --elapsed-ms
    --elapsed-ms MS       Animation time of the first frame (default: 0)
    --frames N            Number of frames to render (default: 1)
    --fps FPS             Frame rate of a sequence (default: 30)
    --output OUTPUT       Output file path (default: orbit.png)
    --arch ARCH           Taichi backend (default: $RAY3D_ARCH or cpu)
    --quiet               Suppress progress output
    --verbose             Enable debug logging

Sequences insert the frame number before the suffix: orbit_000.png,
orbit_001.png, ...

Example:
    python -m examples.render_orbit --width 320 --height 240 --frames 30
"""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path

# Ensure the project root is in the Python path for direct execution
_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

from src.ray3d.config import (  # noqa: E402
    available_arches,
    configure_logging,
    initialize_taichi,
)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render frames of the orbit scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=640,
        help="Image width in pixels (default: 640)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=480,
        help="Image height in pixels (default: 480)",
    )
    parser.add_argument(
        "--angle",
        type=float,
        default=None,
        help="Orbit angle in radians; overrides --elapsed-ms",
    )
    parser.add_argument(
        "--elapsed-ms",
        type=float,
        default=0.0,
        help="Animation time of the first frame in milliseconds (default: 0)",
    )
    parser.add_argument(
        "--frames",
        type=int,
        default=1,
        help="Number of frames to render (default: 1)",
    )
    parser.add_argument(
        "--fps",
        type=float,
        default=30.0,
        help="Frame rate used to space a sequence (default: 30)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="orbit.png",
        help="Output file path (default: orbit.png)",
    )
    parser.add_argument(
        "--arch",
        choices=available_arches(),
        default=None,
        help="Taichi backend (default: $RAY3D_ARCH or cpu)",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser.parse_args(argv)


def frame_path(output_path: str, index: int, total: int) -> Path:
    """Output path of frame ``index`` in a sequence of ``total`` frames."""
    path = Path(output_path)
    if total == 1:
        return path
    return path.with_name(f"{path.stem}_{index:03d}{path.suffix}")


def frame_angles(
    num_frames: int,
    *,
    angle: float | None = None,
    elapsed_ms: float = 0.0,
    fps: float = 30.0,
) -> list[float]:
    """Orbit angle of every frame.

    With a fixed angle the sequence starts there and advances by the
    angular speed per frame interval, exactly as elapsed time would.
    """
    from src.ray3d.scene.orbit import DEFAULT_ANGULAR_SPEED, animation_angle, wrap_angle

    if num_frames <= 0:
        raise ValueError(f"Frame count must be positive, got {num_frames}")
    if fps <= 0:
        raise ValueError(f"Frame rate must be positive, got {fps}")

    interval_ms = 1000.0 / fps
    if angle is None:
        return [animation_angle(elapsed_ms + i * interval_ms) for i in range(num_frames)]

    step = interval_ms / 1000.0 * DEFAULT_ANGULAR_SPEED
    return [wrap_angle(angle + i * step) for i in range(num_frames)]


def render_orbit(
    width: int = 640,
    height: int = 480,
    *,
    angle: float | None = None,
    elapsed_ms: float = 0.0,
    num_frames: int = 1,
    fps: float = 30.0,
    output_path: str = "orbit.png",
    quiet: bool = False,
) -> list[Path]:
    """Render orbit frames and save them to files.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
        angle: Orbit angle of the first frame, or None to use elapsed_ms.
        elapsed_ms: Animation time of the first frame.
        num_frames: Number of frames to render.
        fps: Frame rate spacing the sequence.
        output_path: Output file path (PNG).
        quiet: If True, suppress progress output.

    Returns:
        Paths of the saved image files.
    """
    # Lazy imports to allow Taichi initialization first
    from src.ray3d.core.renderer import FrameRenderer
    from src.ray3d.preview.export import save_png

    angles = frame_angles(num_frames, angle=angle, elapsed_ms=elapsed_ms, fps=fps)
    renderer = FrameRenderer()

    if not quiet:
        print(f"Rendering {num_frames} frame(s) at {width}x{height}...")

    start_time = time.time()
    saved: list[Path] = []

    for index, frame_angle in enumerate(angles):
        frame = renderer.render(width, height, frame_angle)
        output_file = frame_path(output_path, index, num_frames)
        save_png(frame, str(output_file))
        saved.append(output_file)

        if not quiet:
            print(
                f"\r  Frame {index + 1}/{num_frames} (angle {frame_angle:.3f} rad)",
                end="",
                flush=True,
            )

    if not quiet:
        print()  # Newline after progress
        total_time = time.time() - start_time
        print(f"Saved to: {saved[0].absolute()}" + (" ..." if len(saved) > 1 else ""))
        print(f"Total time: {total_time:.2f}s")

    return saved


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    if args.verbose:
        configure_logging(verbose=True)

    try:
        backend = initialize_taichi(args.arch)
        if not args.quiet:
            print(f"Using {backend.upper()} backend")

        render_orbit(
            width=args.width,
            height=args.height,
            angle=args.angle,
            elapsed_ms=args.elapsed_ms,
            num_frames=args.frames,
            fps=args.fps,
            output_path=args.output,
            quiet=args.quiet,
        )
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
