"""Pixel and frame rendering.

render() is the single-pixel entry point: it maps a pixel-space coordinate to
a primary ray and shades it. render_frame() evaluates every pixel of an image,
splitting rows into chunks that a multiprocessing pool renders in parallel.
Pixels are independent, so workers never synchronize; each returns its own
rows and the parent assembles the image.

Every row draws from its own random stream spawned from one
``numpy.random.SeedSequence``, so a seeded frame is identical whatever the
number of workers.

Example:
    >>> from marchtrace.core.render import render_frame
    >>> from marchtrace.scene.demo import create_demo_scene
    >>> image = render_frame(create_demo_scene(), 64, 48, seed=1, workers=4)
    >>> image.shape
    (48, 64, 3)
"""

from __future__ import annotations

import logging
import multiprocessing as mp
import os
import time
from collections.abc import Sequence

import numpy as np
import numpy.typing as npt

from marchtrace.camera.pinhole import generate_ray
from marchtrace.core.config import DEFAULT_CONFIG, RenderConfig
from marchtrace.core.integrator import Integrator
from marchtrace.core.ray import Vec3
from marchtrace.scene.scene import Scene

logger = logging.getLogger(__name__)

# Row chunks handed to each worker, for load balancing
CHUNKS_PER_WORKER = 4


def render(
    scene: Scene,
    uv: Sequence[float],
    resolution: Sequence[int],
    *,
    rng: np.random.Generator | None = None,
    config: RenderConfig = DEFAULT_CONFIG,
) -> Vec3:
    """Render one radiance sample for a pixel-space coordinate.

    Args:
        scene: The scene to render.
        uv: Pixel-space coordinate (x to the right, y up).
        resolution: Image (width, height) in pixels, both positive.
        rng: Random source; a fresh generator when None.
        config: Budgets and solver tunables. Primary rays use
            ``config.max_bounces`` and ``config.samples``.

    Returns:
        Linear, unclamped RGB radiance. Tone mapping, gamma correction and
        image assembly are left to the caller.
    """
    ray = generate_ray(scene.camera, uv, resolution)
    integrator = Integrator(scene, config, rng=rng)
    return integrator.radiance(ray, config.max_bounces, config.samples)


def _render_rows(
    task: tuple[Scene, RenderConfig, int, int, int, list[np.random.SeedSequence]],
) -> tuple[int, npt.NDArray[np.float64]]:
    """Render a contiguous block of image rows (row 0 is the top)."""
    scene, config, width, height, start, seeds = task
    block = np.zeros((len(seeds), width, 3), dtype=np.float64)

    for offset, seed in enumerate(seeds):
        integrator = Integrator(scene, config, rng=np.random.default_rng(seed))
        y = height - 1 - (start + offset) + 0.5
        for x in range(width):
            ray = generate_ray(scene.camera, (x + 0.5, y), (width, height))
            block[offset, x] = integrator.radiance(ray, config.max_bounces, config.samples)

    return start, block


def render_frame(
    scene: Scene,
    width: int,
    height: int,
    *,
    config: RenderConfig = DEFAULT_CONFIG,
    seed: int | np.random.SeedSequence | None = None,
    workers: int | None = None,
) -> npt.NDArray[np.float64]:
    """Render a full image.

    Args:
        scene: The scene to render. It must be picklable when more than one
            worker is used.
        width: Image width in pixels.
        height: Image height in pixels.
        config: Budgets and solver tunables.
        seed: Seed for the per-row random streams; fresh entropy when None.
        workers: Worker processes (default: CPU count). With 1 the frame is
            rendered in the calling process.

    Returns:
        Linear radiance array of shape (height, width, 3), row 0 at the top.

    Raises:
        ValueError: If the dimensions or the worker count are not positive.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
    if workers is None:
        workers = os.cpu_count() or 1
    if workers < 1:
        raise ValueError(f"workers must be at least 1, got {workers}")

    seed_seq = seed if isinstance(seed, np.random.SeedSequence) else np.random.SeedSequence(seed)
    row_seeds = seed_seq.spawn(height)

    rows_per_chunk = max(1, height // (workers * CHUNKS_PER_WORKER))
    tasks = [
        (scene, config, width, height, start, row_seeds[start : start + rows_per_chunk])
        for start in range(0, height, rows_per_chunk)
    ]

    logger.info(
        "Rendering %dx%d frame: %d chunks, %d workers, %d bounces, %d samples",
        width,
        height,
        len(tasks),
        workers,
        config.max_bounces,
        config.samples,
    )
    start_time = time.perf_counter()

    if workers == 1 or len(tasks) == 1:
        results = [_render_rows(task) for task in tasks]
    else:
        with mp.Pool(min(workers, len(tasks))) as pool:
            results = pool.map(_render_rows, tasks)

    image = np.zeros((height, width, 3), dtype=np.float64)
    for start, block in results:
        image[start : start + block.shape[0]] = block

    logger.info("Frame rendered in %.2fs", time.perf_counter() - start_time)
    return image
