"""Interactive preview window using Taichi GGUI.

The window shows a ProgressiveRenderer's running average and adds one pass
per frame until it is closed, so the image sharpens while you watch. A small
control panel adjusts the display exposure and exports the current image.

Shading stays on the CPU in marchtrace.core; Taichi is only used for the
window, the canvas and the display buffer.

Example:
    >>> from marchtrace.core.progressive import ProgressiveRenderer
    >>> from marchtrace.preview.interactive import InteractivePreview
    >>> from marchtrace.scene.demo import create_demo_scene
    >>>
    >>> renderer = ProgressiveRenderer(create_demo_scene(), 320, 240, seed=0)
    >>> preview = InteractivePreview(320, 240)
    >>> preview.run_progressive(renderer)  # Blocks until the window is closed
"""

from __future__ import annotations

import logging
import os
from datetime import datetime
from typing import TYPE_CHECKING

import numpy as np
import taichi as ti

from marchtrace.preview.display import process_image_for_display

if TYPE_CHECKING:
    import numpy.typing as npt

    from marchtrace.core.progressive import ProgressiveRenderer

logger = logging.getLogger(__name__)

# Exposure slider range for the control panel
MIN_EXPOSURE = 0.1
MAX_EXPOSURE = 8.0


class InteractivePreview:
    """Interactive preview window using Taichi GGUI.

    Attributes:
        width: Window width in pixels.
        height: Window height in pixels.
        display_image: Taichi field holding the displayed RGB image.
        exposure: Exposure used to tone map the accumulated image.
    """

    def __init__(
        self,
        width: int,
        height: int,
        *,
        title: str = "marchtrace - Interactive Preview",
        exposure: float = 1.0,
    ) -> None:
        """Create the display buffer; the window itself opens lazily.

        Taichi must already be initialized (``ti.init``).

        Raises:
            ValueError: If the dimensions are not positive.
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"Window dimensions must be positive, got {width}x{height}")

        self.width = width
        self.height = height
        self.exposure = exposure
        self._title = title
        self._window: ti.ui.Window | None = None
        self._canvas: ti.ui.Canvas | None = None
        self._renderer: ProgressiveRenderer | None = None

        # Taichi fields are indexed (x, y), i.e. (width, height)
        self.display_image: ti.MatrixField = ti.Vector.field(
            3, dtype=ti.f32, shape=(width, height)
        )

    def _initialize_window(self) -> None:
        if self._window is not None:
            return

        self._window = ti.ui.Window(
            name=self._title,
            res=(self.width, self.height),
            vsync=True,
        )
        self._canvas = self._window.get_canvas()

    @property
    def window(self) -> ti.ui.Window:
        """Get the Taichi GGUI window, initializing if needed."""
        self._initialize_window()
        assert self._window is not None
        return self._window

    @property
    def canvas(self) -> ti.ui.Canvas:
        """Get the canvas for rendering."""
        self._initialize_window()
        assert self._canvas is not None
        return self._canvas

    def update_image(self, image: npt.NDArray[np.float32]) -> None:
        """Copy a display-ready image into the display buffer.

        Args:
            image: Array of shape (height, width, 3) with values in [0, 1],
                row 0 at the top.

        Raises:
            ValueError: If the image shape doesn't match (height, width, 3).
        """
        expected_shape = (self.height, self.width, 3)
        if image.shape != expected_shape:
            raise ValueError(f"Image shape {image.shape} doesn't match expected {expected_shape}")

        # NumPy rows run top-down, the canvas origin is bottom-left
        image_xy = np.ascontiguousarray(
            np.transpose(np.flipud(image), (1, 0, 2)), dtype=np.float32
        )
        self.display_image.from_numpy(image_xy)

    def update_from_renderer(self, renderer: ProgressiveRenderer) -> None:
        """Tone map a renderer's accumulated image into the display buffer."""
        image = process_image_for_display(
            renderer.get_image(),
            tone_map="exposure",
            gamma=2.2,
            exposure=self.exposure,
        )
        self.update_image(image)

    def is_running(self) -> bool:
        """Return True while the window is open."""
        return self.window.running

    def show_frame(self) -> None:
        """Present the display buffer for one frame."""
        self.canvas.set_image(self.display_image)
        self.window.show()

    def run(self) -> None:
        """Show the current display buffer until the window is closed."""
        self._initialize_window()

        while self.is_running():
            self.show_frame()

    def run_progressive(self, renderer: ProgressiveRenderer, max_passes: int | None = None) -> None:
        """Accumulate passes into the window until it is closed.

        One pass is rendered per frame. Once ``max_passes`` is reached the
        window keeps showing the final image without rendering more.

        Args:
            renderer: The renderer to drive. Its size must match the window.
            max_passes: Optional cap on accumulated passes.

        Raises:
            ValueError: If the renderer size doesn't match the window.
        """
        if (renderer.width, renderer.height) != (self.width, self.height):
            raise ValueError(
                f"Renderer size {renderer.width}x{renderer.height} doesn't match "
                f"window size {self.width}x{self.height}"
            )

        self._renderer = renderer
        self._initialize_window()

        while self.is_running():
            if max_passes is None or renderer.sample_count < max_passes:
                renderer.render(1)
            self.update_from_renderer(renderer)
            self._draw_gui_panel()
            self.show_frame()

    def _draw_gui_panel(self) -> None:
        with self.window.GUI.sub_window("Controls", 0.02, 0.02, 0.3, 0.16) as gui:
            gui.text(f"Passes: {self._renderer.sample_count if self._renderer else 0}")
            self.exposure = gui.slider_float(
                "Exposure", self.exposure, minimum=MIN_EXPOSURE, maximum=MAX_EXPOSURE
            )
            if gui.button("Export PNG"):
                self._export_png()

    def _export_png(self) -> str | None:
        """Export the accumulated image to a timestamped PNG file.

        Returns:
            The written filename, or None when no renderer is attached.
        """
        from marchtrace.preview.export import save_png

        if self._renderer is None:
            logger.warning("No renderer attached, nothing to export")
            return None

        filename = f"marchtrace_{datetime.now().strftime('%Y%m%d_%H%M%S')}.png"
        save_png(self._renderer, filename, tone_map="exposure", exposure=self.exposure)
        print(f"Exported: {filename} ({self._renderer.sample_count} passes)")
        return filename

    def close(self) -> None:
        """Stop any active loop. The window cannot be reopened afterwards."""
        if self._window is not None:
            self._window.running = False

    @staticmethod
    def is_display_available() -> bool:
        """Check whether a display is available for a GUI window.

        Returns:
            False for headless environments.
        """
        display = os.environ.get("DISPLAY")
        wayland = os.environ.get("WAYLAND_DISPLAY")

        if os.name == "nt":
            return True

        if os.uname().sysname == "Darwin":
            # SSH without X forwarding has no display
            return not (os.environ.get("SSH_CONNECTION") and not display)

        return bool(display or wayland)
