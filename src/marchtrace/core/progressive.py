"""Progressive renderer for iterative frame accumulation.

This module provides a convenient wrapper around render_frame() that supports:
- Progressive rendering that refines over time
- Batch rendering (multiple passes in one call)
- Progress callbacks for UI updates
- Easy reset and re-render functionality

Each pass renders a full frame with fresh random streams and folds it into a
running average, so noise drops as passes accumulate.

Example:
    >>> from marchtrace.core.progressive import ProgressiveRenderer
    >>> from marchtrace.scene.demo import create_demo_scene
    >>>
    >>> renderer = ProgressiveRenderer(create_demo_scene(), 128, 96, seed=3)
    >>> renderer.render(4)  # Accumulate 4 passes
    >>> image = renderer.get_image_numpy(gamma=2.2)
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Generator

import numpy as np
import numpy.typing as npt

from marchtrace.core.config import DEFAULT_CONFIG, RenderConfig
from marchtrace.core.render import render_frame
from marchtrace.scene.scene import Scene

logger = logging.getLogger(__name__)

# Type alias for progress callback
# Callback receives (current_passes, total_target_passes)
ProgressCallback = Callable[[int, int], None]


class ProgressiveRenderer:
    """A progressive renderer that accumulates frames over time.

    Attributes:
        scene: The scene being rendered.
        config: Budgets and solver tunables for every pass.
        workers: Worker processes per pass (None for CPU count).
    """

    def __init__(
        self,
        scene: Scene,
        width: int,
        height: int,
        *,
        config: RenderConfig = DEFAULT_CONFIG,
        seed: int | None = None,
        workers: int | None = None,
    ) -> None:
        """Initialize the progressive renderer.

        Args:
            scene: The scene to render.
            width: Image width in pixels.
            height: Image height in pixels.
            config: Budgets and solver tunables.
            seed: Seed for the sequence of passes; fresh entropy when None.
            workers: Worker processes per pass.

        Raises:
            ValueError: If the dimensions are not positive.
        """
        self.scene = scene
        self.config = config
        self.workers = workers
        self._seed = np.random.SeedSequence(seed)
        self.resize(width, height)

    @property
    def width(self) -> int:
        """Get the image width."""
        return self._width

    @property
    def height(self) -> int:
        """Get the image height."""
        return self._height

    @property
    def sample_count(self) -> int:
        """Get the number of accumulated passes."""
        return self._passes

    def reset(self) -> None:
        """Clear the accumulator without changing the image dimensions."""
        self._buffer = np.zeros((self._height, self._width, 3), dtype=np.float64)
        self._passes = 0

    def resize(self, width: int, height: int) -> None:
        """Resize the render target and reset the accumulator.

        Raises:
            ValueError: If the dimensions are not positive.
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
        self._width = width
        self._height = height
        self.reset()

    def accumulate(self, frame: npt.NDArray[np.float64]) -> None:
        """Fold one rendered frame into the running average.

        Raises:
            ValueError: If the frame shape doesn't match (height, width, 3).
        """
        expected_shape = (self._height, self._width, 3)
        if frame.shape != expected_shape:
            raise ValueError(f"Frame shape {frame.shape} doesn't match expected {expected_shape}")

        # Running average: avg_n = avg_{n-1} + (x_n - avg_{n-1}) / n
        self._passes += 1
        self._buffer += (frame - self._buffer) / self._passes

    def _render_pass(self) -> None:
        (pass_seed,) = self._seed.spawn(1)
        frame = render_frame(
            self.scene,
            self._width,
            self._height,
            config=self.config,
            seed=pass_seed,
            workers=self.workers,
        )
        self.accumulate(frame)
        logger.debug("Accumulated pass %d", self._passes)

    def render(
        self,
        num_passes: int = 1,
        callback: ProgressCallback | None = None,
    ) -> None:
        """Render passes progressively with an optional progress callback.

        Can be called multiple times to continue refining the image.

        Args:
            num_passes: Number of frames to add.
            callback: Optional function called after each pass with
                (current_total_passes, target_total_passes).

        Example:
            >>> def progress(current, target):
            ...     print(f"Progress: {current}/{target} passes")
            >>> renderer.render(8, callback=progress)
        """
        for current, target in self.render_progressive(num_passes):
            if callback is not None:
                callback(current, target)

    def render_progressive(self, num_passes: int = 1) -> Generator[tuple[int, int], None, None]:
        """Render passes progressively, yielding progress after each one.

        This is a generator-based alternative to render() with callbacks,
        useful for driving a preview window between passes.

        Yields:
            Tuple of (current_total_passes, target_total_passes).
        """
        if num_passes <= 0:
            return

        target = self._passes + num_passes
        while self._passes < target:
            self._render_pass()
            yield (self._passes, target)

    def get_image(self) -> npt.NDArray[np.float64]:
        """Get a copy of the raw linear accumulation buffer."""
        return self._buffer.copy()

    def get_image_numpy(self, gamma: float = 1.0) -> npt.NDArray[np.float32]:
        """Get the rendered image clamped to [0, 1], optionally gamma corrected.

        Args:
            gamma: Gamma correction value. Default 1.0 (linear).
                Use 2.2 for sRGB display.

        Returns:
            NumPy array of shape (height, width, 3) with dtype float32.
        """
        from marchtrace.preview.display import apply_gamma

        return apply_gamma(self._buffer, gamma=gamma)

    def get_image_uint8(self, gamma: float = 2.2) -> npt.NDArray[np.uint8]:
        """Get the rendered image as an 8-bit array, gamma corrected."""
        from marchtrace.preview.export import image_to_uint8

        return image_to_uint8(self._buffer, tone_map="none", gamma=gamma)

    def save_image(self, filepath: str, gamma: float = 2.2) -> None:
        """Save the rendered image to a file without tone mapping.

        Args:
            filepath: Path to save the image (e.g., "output.png").
            gamma: Gamma correction value. Default 2.2 for sRGB.
        """
        from marchtrace.preview.export import save_png_from_array

        save_png_from_array(self._buffer, filepath, tone_map="none", gamma=gamma)

    def __repr__(self) -> str:
        """Return a string representation of the renderer state."""
        return (
            f"ProgressiveRenderer(width={self.width}, height={self.height}, "
            f"passes={self.sample_count})"
        )
