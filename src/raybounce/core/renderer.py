"""Frame dispatcher for progressive rendering.

The Renderer owns the render target: an accumulation buffer holding one
linear RGBA sum per pixel and an image buffer of packed RGBA32 display
pixels. Each render() call traces one sample per pixel, adds it to the
accumulation buffer, writes the averaged and clamped result to the image
buffer and hands that buffer to a display surface.

The frame index counts frames accumulated since the last reset and is the
averaging divisor. With accumulation enabled it grows by one per frame;
with accumulation disabled it is reset after every frame, so each frame is
an independent single-sample image.

The scene and camera are only borrowed for the duration of a render call
and are never stored on the renderer.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from raybounce.core.renderer import Renderer
    >>> from raybounce.scene.presets import create_default_scene
    >>>
    >>> scene, camera = create_default_scene()
    >>> camera.resize(320, 240)
    >>> renderer = Renderer()
    >>> renderer.resize(320, 240)
    >>> for _ in range(16):
    ...     renderer.render(scene, camera)
    >>> image = renderer.get_image_numpy()
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt
import taichi as ti

from raybounce.core.integrator import render_frame, render_single_pixel
from raybounce.preview.display import ImageSurface, buffer_to_rgba

if TYPE_CHECKING:
    from raybounce.camera.base import Camera
    from raybounce.preview.display import DisplaySurface
    from raybounce.scene.model import Scene, SceneBuffers

logger = logging.getLogger(__name__)


@dataclass
class RendererSettings:
    """User-adjustable renderer settings, read at the end of each frame.

    Attributes:
        accumulate: Average successive frames. When False, every frame is an
            independent single-sample render.
        validate_scene: Check the scene's material references and value
            ranges before each frame.
    """

    accumulate: bool = True
    validate_scene: bool = True


class Renderer:
    """Progressive renderer that accumulates one sample per pixel per frame.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        frame_index: Divisor for the next frame (1 right after a reset).
    """

    def __init__(
        self,
        surface: DisplaySurface | None = None,
        settings: RendererSettings | None = None,
    ) -> None:
        """Initialize an empty (0x0) renderer.

        Args:
            surface: Display surface that receives each completed frame.
                Defaults to a headless ImageSurface.
            settings: Renderer settings. Defaults to accumulation enabled.
        """
        self._surface = surface if surface is not None else ImageSurface()
        self._settings = settings if settings is not None else RendererSettings()

        self._width = 0
        self._height = 0
        self._image_data = np.zeros(0, dtype=np.uint32)
        self._accumulation_data = np.zeros((0, 4), dtype=np.float32)

        self._frame_index = 1
        self._accumulated_frames = 0
        self._last_render_time = 0.0

    @property
    def width(self) -> int:
        """Get the image width."""
        return self._width

    @property
    def height(self) -> int:
        """Get the image height."""
        return self._height

    @property
    def frame_index(self) -> int:
        """Get the frame index the next render() will divide by."""
        return self._frame_index

    @property
    def accumulated_frames(self) -> int:
        """Number of frames averaged into the currently displayed image."""
        return self._accumulated_frames

    @property
    def settings(self) -> RendererSettings:
        """Get the mutable renderer settings."""
        return self._settings

    @property
    def surface(self) -> DisplaySurface:
        """Get the display surface frames are handed to."""
        return self._surface

    @property
    def image_data(self) -> npt.NDArray[np.uint32]:
        """Packed RGBA32 pixels of the last frame, index x + y * width."""
        return self._image_data

    @property
    def accumulation_data(self) -> npt.NDArray[np.float32]:
        """Per-pixel running color sums, shape (width * height, 4)."""
        return self._accumulation_data

    @property
    def last_render_time(self) -> float:
        """Wall-clock seconds spent in the last render() call."""
        return self._last_render_time

    def reset_frame_index(self) -> None:
        """Restart accumulation; the next frame clears the accumulation buffer."""
        self._frame_index = 1

    def resize(self, width: int, height: int) -> None:
        """Resize the render target, discarding accumulated frames.

        Does nothing if the dimensions are unchanged. Otherwise both buffers
        are reallocated, the display surface is resized to match and the
        frame index is reset.

        Args:
            width: New image width in pixels (may be 0).
            height: New image height in pixels (may be 0).

        Raises:
            ValueError: If either dimension is negative.
        """
        if width < 0 or height < 0:
            raise ValueError(f"Image dimensions must be non-negative, got {width}x{height}")

        if width == self._width and height == self._height:
            return

        if self._surface.width != width or self._surface.height != height:
            self._surface.resize(width, height)

        pixel_count = width * height
        self._width = width
        self._height = height
        self._image_data = np.zeros(pixel_count, dtype=np.uint32)
        self._accumulation_data = np.zeros((pixel_count, 4), dtype=np.float32)
        self._accumulated_frames = 0
        self.reset_frame_index()

        logger.debug("Render target resized to %dx%d", width, height)

    def _prepare(self, scene: Scene, camera: Camera) -> tuple[SceneBuffers, np.ndarray]:
        """Validate and pack the borrowed scene and camera for a kernel launch."""
        if self._settings.validate_scene:
            scene.validate()

        directions = np.ascontiguousarray(camera.ray_directions, dtype=np.float32)
        expected_shape = (self._width * self._height, 3)
        if directions.shape != expected_shape:
            raise ValueError(
                f"Camera provides ray directions of shape {directions.shape}, "
                f"expected {expected_shape} for a {self._width}x{self._height} image"
            )

        return scene.pack(), directions

    def render(self, scene: Scene, camera: Camera) -> None:
        """Render one frame and present it on the display surface.

        Args:
            scene: Spheres and materials to render (read-only for this call).
            camera: Camera providing the position and per-pixel directions.

        Raises:
            ValueError: If the scene fails validation or the camera's ray
                directions don't match the image size.
        """
        start_time = time.perf_counter()

        buffers, directions = self._prepare(scene, camera)

        if self._frame_index == 1:
            self._accumulation_data.fill(0.0)

        if self._image_data.size > 0:
            render_frame(
                self._width,
                self._height,
                self._frame_index,
                ti.math.vec3(*camera.position),
                directions,
                buffers.positions,
                buffers.radii,
                buffers.material_indices,
                buffers.num_spheres,
                buffers.albedos,
                buffers.roughness,
                self._accumulation_data,
                self._image_data,
            )

        self._surface.set_data(self._image_data)
        self._accumulated_frames = self._frame_index

        if self._settings.accumulate:
            self._frame_index += 1
        else:
            self.reset_frame_index()

        self._last_render_time = time.perf_counter() - start_time
        logger.debug(
            "Rendered frame %d in %.3f ms", self._accumulated_frames, self._last_render_time * 1e3
        )

    def render_pixel(
        self, scene: Scene, camera: Camera, x: int, y: int
    ) -> tuple[float, float, float, float]:
        """Trace one raw sample for a single pixel without touching the buffers.

        Useful for testing and debugging individual pixels.

        Returns:
            Tuple of (R, G, B, A) color values, unclamped.

        Raises:
            ValueError: If (x, y) lies outside the image.
        """
        if not (0 <= x < self._width and 0 <= y < self._height):
            raise ValueError(
                f"Pixel ({x}, {y}) is outside the {self._width}x{self._height} image"
            )

        buffers, directions = self._prepare(scene, camera)
        color = render_single_pixel(
            x,
            y,
            self._width,
            ti.math.vec3(*camera.position),
            directions,
            buffers.positions,
            buffers.radii,
            buffers.material_indices,
            buffers.num_spheres,
            buffers.albedos,
            buffers.roughness,
        )
        return (float(color[0]), float(color[1]), float(color[2]), float(color[3]))

    def get_image_numpy(self) -> npt.NDArray[np.uint8]:
        """Get the last frame as an (H, W, 4) uint8 array, top row first."""
        return buffer_to_rgba(self._image_data, self._width, self._height)

    def save_image(self, filepath: str) -> None:
        """Save the last frame to an image file (format from the extension)."""
        from raybounce.preview.export import save_png

        save_png(self, filepath)

    def __repr__(self) -> str:
        """Return a string representation of the renderer state."""
        return (
            f"Renderer(width={self.width}, height={self.height}, "
            f"frame_index={self.frame_index}, accumulate={self._settings.accumulate})"
        )
