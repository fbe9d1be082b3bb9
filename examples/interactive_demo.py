#!/usr/bin/env python3
"""Interactive progressive preview of the demo scene.

Opens a Taichi GGUI window that adds one pass per frame, so noise fades while
the window is open. The control panel adjusts exposure and exports the
current image to a timestamped PNG.

Usage:
    python -m examples.interactive_demo [--width W] [--height H] [--samples N]

Shading runs on the CPU; keep the window small and the sample count low for
a responsive preview.
"""

from __future__ import annotations

import argparse
import sys

import taichi as ti

from marchtrace.core.config import DEFAULT_CONFIG
from marchtrace.core.progressive import ProgressiveRenderer
from marchtrace.preview.interactive import InteractivePreview
from marchtrace.scene.demo import create_demo_scene


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(description="Interactive marchtrace preview.")
    parser.add_argument("--width", type=int, default=160, help="Window width (default: 160)")
    parser.add_argument("--height", type=int, default=120, help="Window height (default: 120)")
    parser.add_argument(
        "--samples", type=int, default=4, help="Samples per primary ray (default: 4)"
    )
    parser.add_argument(
        "--bounces", type=int, default=3, help="Bounce budget per primary ray (default: 3)"
    )
    parser.add_argument("--workers", type=int, default=None, help="Worker processes")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the interactive preview.

    Returns:
        Exit code (0 for success, non-zero for error).
    """
    args = parse_args(argv)

    # The window only needs the CPU backend; shading never runs in Taichi
    ti.init(arch=ti.cpu)

    if not InteractivePreview.is_display_available():
        print("Error: No display available. Cannot run interactive preview.")
        print("This script requires a graphical display environment.")
        return 1

    config = DEFAULT_CONFIG.with_overrides(samples=args.samples, max_bounces=args.bounces)
    renderer = ProgressiveRenderer(
        create_demo_scene(), args.width, args.height, config=config, workers=args.workers
    )
    preview = InteractivePreview(args.width, args.height)

    print(f"Creating interactive preview window ({args.width}x{args.height})...")
    print("  - Drag 'Exposure' to brighten or darken the image")
    print("  - Click 'Export PNG' to save current render")
    print("  - Close window to exit")
    print()

    try:
        preview.run_progressive(renderer)
    except KeyboardInterrupt:
        print("\nInterrupted by user.")
    finally:
        preview.close()
        print("Preview window closed.")

    return 0


if __name__ == "__main__":
    sys.exit(main())
