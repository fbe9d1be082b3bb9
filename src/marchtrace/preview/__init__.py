"""Preview module for output and visualization.

Components:
    display: Tone mapping, gamma correction and Matplotlib previews
    export: PNG export via Pillow
    interactive: Taichi GGUI window that shows progressive accumulation

Rendered radiance is linear and unbounded, so every output path goes
through process_image_for_display() first.

Example:
    >>> from marchtrace.preview import save_png, show_preview
    >>> from marchtrace.core.progressive import ProgressiveRenderer
    >>> from marchtrace.scene import create_demo_scene
    >>>
    >>> renderer = ProgressiveRenderer(create_demo_scene(), 160, 120)
    >>> renderer.render(8)
    >>> show_preview(renderer, tone_map="reinhard")
    >>> save_png(renderer, "output.png", tone_map="reinhard")
"""

from marchtrace.preview.display import (
    ToneMapMethod,
    apply_gamma,
    process_image_for_display,
    show_comparison,
    show_preview,
    tone_map_exposure,
    tone_map_reinhard,
)
from marchtrace.preview.export import (
    compute_rmse,
    image_to_uint8,
    save_png,
    save_png_from_array,
)
from marchtrace.preview.interactive import InteractivePreview

__all__ = [
    # Interactive preview
    "InteractivePreview",
    # Display functions
    "show_preview",
    "show_comparison",
    # Tone mapping
    "tone_map_reinhard",
    "tone_map_exposure",
    "apply_gamma",
    "process_image_for_display",
    "ToneMapMethod",
    # Export functions
    "save_png",
    "save_png_from_array",
    "image_to_uint8",
    "compute_rmse",
]
