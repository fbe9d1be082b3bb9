"""PNG export for rendered frames.

Frames are written as 8-bit sRGB PNGs through Pillow, after the tone mapping
and gamma pipeline in marchtrace.preview.display.

Example:
    >>> from marchtrace.core.render import render_frame
    >>> from marchtrace.preview.export import save_png_from_array
    >>> from marchtrace.scene.demo import create_demo_scene
    >>>
    >>> image = render_frame(create_demo_scene(), 160, 120, seed=0)
    >>> save_png_from_array(image, "demo.png", tone_map="reinhard")
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

from marchtrace.preview.display import ToneMapMethod, process_image_for_display

if TYPE_CHECKING:
    from marchtrace.core.progressive import ProgressiveRenderer

logger = logging.getLogger(__name__)


def image_to_uint8(
    image: npt.NDArray[np.floating],
    *,
    tone_map: ToneMapMethod = "none",
    gamma: float = 2.2,
    exposure: float = 1.0,
) -> npt.NDArray[np.uint8]:
    """Convert a linear radiance image to 8-bit display values.

    Args:
        image: Linear radiance array of shape (H, W, 3).
        tone_map: Tone mapping method ("none", "reinhard", or "exposure").
        gamma: Gamma correction value (default 2.2 for sRGB).
        exposure: Exposure for the "exposure" operator.

    Returns:
        Array of shape (H, W, 3) with dtype uint8.
    """
    processed = process_image_for_display(
        image,
        tone_map=tone_map,
        gamma=gamma,
        exposure=exposure,
    )
    return (processed * 255).astype(np.uint8)


def save_png_from_array(
    image: npt.NDArray[np.floating],
    filepath: str,
    *,
    tone_map: ToneMapMethod = "none",
    gamma: float = 2.2,
    exposure: float = 1.0,
) -> None:
    """Save a linear radiance array as an 8-bit sRGB PNG.

    Args:
        image: Linear radiance array of shape (H, W, 3), row 0 at the top.
        filepath: Output file path (should end in .png).
        tone_map: Tone mapping method.
        gamma: Gamma correction value.
        exposure: Exposure for the "exposure" operator.

    Raises:
        ValueError: If the image is not of shape (H, W, 3).
    """
    if image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(f"Expected an (H, W, 3) image, got shape {image.shape}")

    image_uint8 = image_to_uint8(image, tone_map=tone_map, gamma=gamma, exposure=exposure)
    PILImage.fromarray(image_uint8, mode="RGB").save(filepath)
    logger.info("Saved %dx%d image to %s", image.shape[1], image.shape[0], filepath)


def save_png(
    renderer: ProgressiveRenderer,
    filepath: str,
    *,
    tone_map: ToneMapMethod = "none",
    gamma: float = 2.2,
    exposure: float = 1.0,
) -> None:
    """Save a progressive renderer's accumulated image as a PNG.

    The unclamped linear buffer is exported, so tone mapping sees the full
    range of emitted radiance.

    Example:
        >>> renderer.render(16)
        >>> save_png(renderer, "output.png", tone_map="reinhard", gamma=2.2)
    """
    save_png_from_array(
        renderer.get_image(),
        filepath,
        tone_map=tone_map,
        gamma=gamma,
        exposure=exposure,
    )


def compute_rmse(
    image_a: npt.NDArray[np.floating],
    image_b: npt.NDArray[np.floating],
) -> float:
    """Compute the root mean squared error between two images.

    Raises:
        ValueError: If image shapes don't match.
    """
    if image_a.shape != image_b.shape:
        raise ValueError(f"Image shapes must match: {image_a.shape} vs {image_b.shape}")

    diff = image_a.astype(np.float64) - image_b.astype(np.float64)
    return float(np.sqrt(np.mean(diff**2)))
