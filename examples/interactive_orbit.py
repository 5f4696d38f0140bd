#!/usr/bin/env python3
"""Interactive orbit animation in a resizable window.

Opens a Taichi GGUI window and re-renders the orbit scene every frame at
the window's current size, with the orbit angle taken from a monotonic
clock (one full orbit every ~4.19 seconds).

Usage:
    python -m examples.interactive_orbit [--width W] [--height H] [--arch ARCH]

Controls:
    - Resize the window: the next frame is rendered at the new size
    - Export PNG: Save the current frame with a timestamp
    - ESC or close the window to exit
"""

from __future__ import annotations

import argparse
import sys
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
    parser = argparse.ArgumentParser(description="Interactive orbit animation.")
    parser.add_argument(
        "--width",
        type=int,
        default=800,
        help="Initial window width in pixels (default: 800)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=600,
        help="Initial window height in pixels (default: 600)",
    )
    parser.add_argument(
        "--arch",
        choices=available_arches(),
        default=None,
        help="Taichi backend (default: $RAY3D_ARCH or cpu)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the interactive orbit animation.

    Returns:
        Exit code (0 for success, non-zero for error).
    """
    args = parse_args(argv)
    configure_logging(verbose=args.verbose)

    # Initialize Taichi first (before importing modules that use ti.kernel)
    try:
        backend = initialize_taichi(args.arch)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    print(f"Taichi backend: {backend}")

    # Import after Taichi initialization
    from src.ray3d.core.renderer import FrameRenderer
    from src.ray3d.preview.interactive import InteractivePreview

    if not InteractivePreview.is_display_available():
        print("Error: No display available. Cannot run interactive preview.")
        print("This script requires a graphical display environment.")
        return 1

    print(f"Creating interactive preview window ({args.width}x{args.height})...")
    preview = InteractivePreview(FrameRenderer(), args.width, args.height)

    print("Starting animation...")
    print("  - Resize the window to re-render at the new size")
    print("  - Click 'Export PNG' to save the current frame")
    print("  - Press ESC or close the window to exit")
    print()

    try:
        preview.run()
    except KeyboardInterrupt:
        print("\nInterrupted by user.")
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        preview.close()
        print("Preview window closed.")

    return 0


if __name__ == "__main__":
    sys.exit(main())
