"""Tone mapping and Matplotlib preview for rendered frames.

Radiance out of the integrator is linear and unbounded: emissive surfaces
carry ``color * emission`` straight into the image. Everything here maps
that into displayable [0, 1] values.

Example:
    >>> from marchtrace.core.progressive import ProgressiveRenderer
    >>> from marchtrace.preview.display import show_preview
    >>> from marchtrace.scene.demo import create_demo_scene
    >>>
    >>> renderer = ProgressiveRenderer(create_demo_scene(), 160, 120, seed=0)
    >>> renderer.render(8)
    >>> show_preview(renderer, tone_map="reinhard")
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal

import numpy as np
import numpy.typing as npt

if TYPE_CHECKING:
    from marchtrace.core.progressive import ProgressiveRenderer


# Type alias for tone mapping options
ToneMapMethod = Literal["none", "reinhard", "exposure"]


def tone_map_reinhard(image: npt.NDArray[np.floating]) -> npt.NDArray[np.float32]:
    """Apply Reinhard tone mapping: L / (1 + L).

    Args:
        image: Linear radiance array of shape (H, W, 3).

    Returns:
        Tone mapped image in [0, 1).
    """
    image = np.maximum(image, 0.0)
    return (image / (1.0 + image)).astype(np.float32)


def tone_map_exposure(
    image: npt.NDArray[np.floating],
    exposure: float = 1.0,
) -> npt.NDArray[np.float32]:
    """Apply exposure tone mapping: 1 - exp(-L * exposure).

    Args:
        image: Linear radiance array of shape (H, W, 3).
        exposure: Higher values brighten the image.

    Returns:
        Tone mapped image in [0, 1).
    """
    image = np.maximum(image, 0.0)
    return (1.0 - np.exp(-image * exposure)).astype(np.float32)


def apply_gamma(
    image: npt.NDArray[np.floating],
    gamma: float = 2.2,
) -> npt.NDArray[np.float32]:
    """Encode a linear [0, 1] image for display as ``image ** (1 / gamma)``.

    Values are clamped to [0, 1] first, so out-of-range radiance never turns
    into NaN.
    """
    if gamma <= 0.0:
        raise ValueError(f"gamma must be positive, got {gamma}")
    image = np.clip(image, 0.0, 1.0)
    if gamma == 1.0:
        return image.astype(np.float32)
    return np.power(image, 1.0 / gamma).astype(np.float32)


def process_image_for_display(
    image: npt.NDArray[np.floating],
    tone_map: ToneMapMethod = "none",
    gamma: float = 2.2,
    exposure: float = 1.0,
) -> npt.NDArray[np.float32]:
    """Run the display pipeline: tone map, gamma encode, clamp.

    Args:
        image: Linear radiance array of shape (H, W, 3).
        tone_map: "none" (plain clamp), "reinhard" or "exposure".
        gamma: Gamma correction value (2.2 for sRGB).
        exposure: Exposure for the "exposure" operator.

    Returns:
        Display-ready float32 image in [0, 1].

    Raises:
        ValueError: If ``tone_map`` is not a known method.
    """
    if tone_map == "reinhard":
        result = tone_map_reinhard(image)
    elif tone_map == "exposure":
        result = tone_map_exposure(image, exposure)
    elif tone_map == "none":
        result = np.asarray(image, dtype=np.float32)
    else:
        raise ValueError(f"Unknown tone mapping method: {tone_map}")

    return apply_gamma(result, gamma)


def show_preview(
    renderer: ProgressiveRenderer,
    *,
    tone_map: ToneMapMethod = "reinhard",
    gamma: float = 2.2,
    exposure: float = 1.0,
    title: str | None = None,
    figsize: tuple[float, float] = (8, 6),
    block: bool = True,
) -> None:
    """Display the accumulated render in a Matplotlib figure.

    The raw linear buffer is used so tone mapping sees unclamped emission.
    The default title shows the accumulated pass count.

    Args:
        renderer: The ProgressiveRenderer to display.
        tone_map: Tone mapping method.
        gamma: Gamma correction value.
        exposure: Exposure for the "exposure" operator.
        title: Custom title.
        figsize: Figure size in inches (width, height).
        block: Whether to block until the figure is closed.
    """
    import matplotlib.pyplot as plt

    display_image = process_image_for_display(
        renderer.get_image(),
        tone_map=tone_map,
        gamma=gamma,
        exposure=exposure,
    )

    fig, ax = plt.subplots(1, 1, figsize=figsize)
    ax.imshow(display_image)
    ax.axis("off")

    if title is None:
        title = f"marchtrace - {renderer.sample_count} passes"
        if tone_map != "none":
            title += f" ({tone_map})"
    ax.set_title(title)

    plt.tight_layout()
    plt.show(block=block)


def show_comparison(
    image_a: npt.NDArray[np.floating],
    image_b: npt.NDArray[np.floating],
    *,
    labels: tuple[str, str] = ("A", "B"),
    tone_map: ToneMapMethod = "reinhard",
    gamma: float = 2.2,
    diff_scale: float = 10.0,
    figsize: tuple[float, float] = (16, 6),
    block: bool = True,
) -> float:
    """Show two linear images side by side with their amplified difference.

    Useful for checking how much noise extra passes or samples remove.

    Args:
        image_a: First linear image (H, W, 3).
        image_b: Second linear image (H, W, 3).
        labels: Titles for the two images.
        tone_map: Tone mapping method applied to both.
        gamma: Gamma correction value.
        diff_scale: Amplification of the difference panel.
        figsize: Figure size in inches.
        block: Whether to block until the figure is closed.

    Returns:
        RMSE between the two images in display space.
    """
    import matplotlib.pyplot as plt

    from marchtrace.preview.export import compute_rmse

    display_a = process_image_for_display(image_a, tone_map=tone_map, gamma=gamma)
    display_b = process_image_for_display(image_b, tone_map=tone_map, gamma=gamma)
    rmse = compute_rmse(display_a, display_b)

    diff = np.abs(display_a.astype(np.float64) - display_b.astype(np.float64))
    diff_amplified = np.clip(diff * diff_scale, 0.0, 1.0)

    fig, axes = plt.subplots(1, 3, figsize=figsize)
    panels = (
        (display_a, labels[0]),
        (display_b, labels[1]),
        (diff_amplified, f"Difference ({diff_scale}x) - RMSE: {rmse:.6f}"),
    )
    for ax, (panel, panel_title) in zip(axes, panels):
        ax.imshow(panel)
        ax.set_title(panel_title)
        ax.axis("off")

    plt.tight_layout()
    plt.show(block=block)

    return rmse
