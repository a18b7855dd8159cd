"""Interactive preview window using Taichi GGUI.

InteractivePreview is a display surface backed by a ti.ui.Window: the
renderer hands it packed RGBA32 frames through set_data(), and run() drives
a loop that resizes the render target to the window, renders a frame per
iteration and draws a small settings panel:

    - last render time and accumulated frame count
    - "Accumulate" checkbox (RendererSettings.accumulate)
    - "Reset" button (restarts accumulation)
    - "Export PNG" button (timestamped PNG of the current frame)

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.gpu)
    >>> from raybounce.preview.interactive import InteractivePreview
    >>> from raybounce.scene.presets import create_default_scene
    >>>
    >>> scene, camera = create_default_scene()
    >>> preview = InteractivePreview(800, 600)
    >>> preview.run(scene, camera)
"""

from __future__ import annotations

import os
import platform
from datetime import datetime
from typing import TYPE_CHECKING

import numpy as np
import taichi as ti

from raybounce.core.integrator import unpack_rgba

if TYPE_CHECKING:
    import numpy.typing as npt

    from raybounce.camera.pinhole import PinholeCamera
    from raybounce.core.renderer import Renderer
    from raybounce.scene.model import Scene


class InteractivePreview:
    """Display surface that presents frames in a Taichi GGUI window.

    Attributes:
        display_image: Taichi field of shape (width, height) holding the RGB
            frame shown on the canvas, or None while the surface is empty.
    """

    def __init__(
        self,
        width: int,
        height: int,
        *,
        title: str = "raybounce - Interactive Preview",
    ) -> None:
        """Initialize the preview surface.

        The window itself is created lazily on first use so the surface can
        be constructed on headless machines.

        Args:
            width: Initial window width in pixels.
            height: Initial window height in pixels.
            title: Window title.
        """
        self._width = 0
        self._height = 0
        self._window_res = (width, height)
        self._title = title
        self._window: ti.ui.Window | None = None
        self._canvas: ti.ui.Canvas | None = None
        self.display_image: ti.MatrixField | None = None
        self.resize(width, height)

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    def _initialize_window(self) -> None:
        if self._window is not None:
            return

        self._window = ti.ui.Window(name=self._title, res=self._window_res, vsync=True)
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

    def resize(self, width: int, height: int) -> None:
        """Reallocate the display image for a new frame size.

        Raises:
            ValueError: If either dimension is negative.
        """
        if width < 0 or height < 0:
            raise ValueError(f"Surface dimensions must be non-negative, got {width}x{height}")

        self._width = width
        self._height = height
        if width > 0 and height > 0:
            self.display_image = ti.Vector.field(3, dtype=ti.f32, shape=(width, height))
        else:
            self.display_image = None

    def set_data(self, buffer: npt.NDArray[np.uint32]) -> None:
        """Upload a packed RGBA32 frame to the display image.

        Raises:
            ValueError: If the buffer size doesn't match the surface.
        """
        if buffer.size != self._width * self._height:
            raise ValueError(
                f"Buffer of {buffer.size} pixels doesn't match surface "
                f"{self._width}x{self._height}"
            )
        if self.display_image is None:
            return

        # Buffer rows run bottom to top, which matches Taichi's (x, y) layout
        # once transposed to (width, height)
        rgb = unpack_rgba(buffer).reshape(self._height, self._width, 4)[..., :3]
        image = np.ascontiguousarray(np.transpose(rgb, (1, 0, 2)), dtype=np.float32) / 255.0
        self.display_image.from_numpy(image)

    def is_running(self) -> bool:
        """Check if the window is still open."""
        return self.window.running

    def show_frame(self) -> None:
        """Present the current display image."""
        if self.display_image is not None:
            self.canvas.set_image(self.display_image)
        self.window.show()

    def run(
        self,
        scene: Scene,
        camera: PinholeCamera,
        renderer: Renderer | None = None,
    ) -> None:
        """Render continuously into this window until it is closed.

        The camera and render target follow the window size every frame.

        Args:
            scene: Scene to render.
            camera: Camera; resized to the window on every frame.
            renderer: Renderer presenting on this surface. A new one is
                created if omitted.

        Raises:
            ValueError: If the given renderer presents on another surface.
        """
        from raybounce.core.renderer import Renderer

        if renderer is None:
            renderer = Renderer(surface=self)
        elif renderer.surface is not self:
            raise ValueError("Renderer must present on this InteractivePreview")

        self._initialize_window()

        while self.is_running():
            width, height = self.window.get_window_shape()
            camera.resize(width, height)
            renderer.resize(width, height)

            renderer.render(scene, camera)

            self._draw_gui_panel(renderer)
            self.show_frame()

    def _draw_gui_panel(self, renderer: Renderer) -> None:
        with self.window.GUI.sub_window("Settings", 0.02, 0.02, 0.3, 0.22) as gui:
            gui.text(f"Last render: {renderer.last_render_time * 1e3:.3f}ms")
            gui.text(f"Frames: {renderer.accumulated_frames}")

            renderer.settings.accumulate = gui.checkbox(
                "Accumulate", renderer.settings.accumulate
            )

            if gui.button("Reset"):
                renderer.reset_frame_index()

            if gui.button("Export PNG"):
                self._export_png(renderer)

    def _export_png(self, renderer: Renderer) -> None:
        """Export the current frame to render_YYYYMMDD_HHMMSS.png."""
        from raybounce.preview.export import save_png

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        filename = f"render_{timestamp}.png"
        save_png(renderer, filename)
        print(f"Exported: {filename} ({renderer.accumulated_frames} frames)")

    def close(self) -> None:
        """Close the preview window."""
        if self._window is not None:
            self._window.running = False

    @staticmethod
    def is_display_available() -> bool:
        """Check if a display is available for GUI rendering.

        Returns:
            True if a display is available, False for headless environments.
        """
        display = os.environ.get("DISPLAY")
        wayland = os.environ.get("WAYLAND_DISPLAY")

        if platform.system() == "Darwin":
            # SSH session without X forwarding
            if os.environ.get("SSH_CONNECTION") and not display:
                return False
            return True

        if display or wayland:
            return True

        # Windows generally always has display
        if os.name == "nt":
            return True

        return False
