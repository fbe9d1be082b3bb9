#!/usr/bin/env python3
"""Render the demo scene to a PNG.

This script renders the demo scene (marched ground, torus and box next to
traced spheres and a ceiling light) with progressive accumulation and saves
the tone-mapped result.

Usage:
    python -m examples.render_demo [options]

Options:
    --width WIDTH       Image width in pixels (default: 160)
    --height HEIGHT     Image height in pixels (default: 120)
    --passes PASSES     Frames to accumulate (default: 4)
    --samples SAMPLES   Stochastic samples per primary ray (default: 16)
    --bounces BOUNCES   Bounce budget per primary ray (default: 4)
    --workers WORKERS   Worker processes (default: CPU count)
    --seed SEED         Seed for reproducible output (default: random)
    --output OUTPUT     Output file path (default: demo.png)
    --verbose           Log renderer details
    --quiet             Suppress progress output

Example:
    python -m examples.render_demo --width 320 --height 240 --passes 8 --seed 1
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path

from marchtrace.core.config import DEFAULT_CONFIG, MAX_BOUNCES, SAMPLES
from marchtrace.core.progressive import ProgressiveRenderer
from marchtrace.preview.export import save_png
from marchtrace.scene.demo import create_demo_scene


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render the marchtrace demo scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=160,
        help="Image width in pixels (default: 160)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=120,
        help="Image height in pixels (default: 120)",
    )
    parser.add_argument(
        "--passes",
        type=int,
        default=4,
        help="Frames to accumulate (default: 4)",
    )
    parser.add_argument(
        "--samples",
        type=int,
        default=SAMPLES,
        help=f"Stochastic samples per primary ray (default: {SAMPLES})",
    )
    parser.add_argument(
        "--bounces",
        type=int,
        default=MAX_BOUNCES,
        help=f"Bounce budget per primary ray (default: {MAX_BOUNCES})",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Worker processes (default: CPU count)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for reproducible output (default: random)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="demo.png",
        help="Output file path (default: demo.png)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log renderer details",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    return parser.parse_args(argv)


def render_demo(
    width: int = 160,
    height: int = 120,
    num_passes: int = 4,
    samples: int = SAMPLES,
    bounces: int = MAX_BOUNCES,
    workers: int | None = None,
    seed: int | None = None,
    output_path: str = "demo.png",
    quiet: bool = False,
) -> Path:
    """Render the demo scene and save it to a file.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
        num_passes: Number of frames to accumulate.
        samples: Stochastic samples per primary ray.
        bounces: Bounce budget per primary ray.
        workers: Worker processes per pass.
        seed: Seed for reproducible output.
        output_path: Output file path (PNG).
        quiet: If True, suppress progress output.

    Returns:
        Path to the saved image file.
    """
    config = DEFAULT_CONFIG.with_overrides(samples=samples, max_bounces=bounces)

    if not quiet:
        print(f"Creating demo scene ({width}x{height})...")

    scene = create_demo_scene()
    renderer = ProgressiveRenderer(
        scene, width, height, config=config, seed=seed, workers=workers
    )

    if not quiet:
        print(f"Rendering {num_passes} passes ({samples} samples, {bounces} bounces)...")

    start_time = time.time()

    def progress_callback(current: int, target: int) -> None:
        if not quiet:
            elapsed = time.time() - start_time
            progress_pct = (current / target) * 100 if target > 0 else 0
            seconds_per_pass = elapsed / current if current > 0 else 0
            print(
                f"\r  Progress: {current}/{target} passes "
                f"({progress_pct:.1f}%) - {seconds_per_pass:.2f} s/pass",
                end="",
                flush=True,
            )

    renderer.render(num_passes, callback=progress_callback)

    if not quiet:
        print()

    output_file = Path(output_path)
    save_png(renderer, str(output_file), tone_map="reinhard", gamma=2.2)

    total_time = time.time() - start_time
    if not quiet:
        print(f"Saved to: {output_file.absolute()}")
        print(f"Total time: {total_time:.2f}s")

    return output_file


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    try:
        render_demo(
            width=args.width,
            height=args.height,
            num_passes=args.passes,
            samples=args.samples,
            bounces=args.bounces,
            workers=args.workers,
            seed=args.seed,
            output_path=args.output,
            quiet=args.quiet,
        )
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
