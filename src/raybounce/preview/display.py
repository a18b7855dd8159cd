"""Display surfaces that receive packed RGBA32 frames.

The renderer hands each completed frame to a display surface through
set_data(). A surface knows its width and height and can be resized.
ImageSurface is the headless, NumPy-backed implementation used by default;
InteractivePreview (see raybounce.preview.interactive) shows frames in a
Taichi GGUI window.

This module also provides a Matplotlib preview of a renderer's current image.

Example:
    >>> from raybounce.preview.display import ImageSurface
    >>> surface = ImageSurface()
    >>> surface.resize(4, 2)
    >>> surface.to_rgba().shape
    (2, 4, 4)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

import numpy as np
import numpy.typing as npt

from raybounce.core.integrator import unpack_rgba

if TYPE_CHECKING:
    from raybounce.core.renderer import Renderer


class DisplaySurface(Protocol):
    """Target that presents packed RGBA32 pixel buffers."""

    @property
    def width(self) -> int: ...

    @property
    def height(self) -> int: ...

    def resize(self, width: int, height: int) -> None: ...

    def set_data(self, buffer: npt.NDArray[np.uint32]) -> None: ...


def buffer_to_rgba(
    buffer: npt.NDArray[np.uint32],
    width: int,
    height: int,
) -> npt.NDArray[np.uint8]:
    """Convert a packed row-major buffer into an (H, W, 4) uint8 image.

    Row 0 of the buffer is the bottom of the image, so rows are flipped to
    put the top row first.

    Raises:
        ValueError: If the buffer size does not match width * height.
    """
    if buffer.size != width * height:
        raise ValueError(
            f"Buffer of {buffer.size} pixels doesn't match {width}x{height} image"
        )
    channels = unpack_rgba(buffer).reshape(height, width, 4)
    return np.ascontiguousarray(np.flipud(channels))


class ImageSurface:
    """Headless display surface holding the last presented frame.

    Attributes:
        frames_presented: Number of set_data() calls since creation.
    """

    def __init__(self, width: int = 0, height: int = 0) -> None:
        self._width = 0
        self._height = 0
        self._data = np.zeros(0, dtype=np.uint32)
        self.frames_presented = 0
        self.resize(width, height)

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def data(self) -> npt.NDArray[np.uint32]:
        """The last presented packed buffer (copy owned by the surface)."""
        return self._data

    def resize(self, width: int, height: int) -> None:
        """Resize the surface and blank its contents.

        Raises:
            ValueError: If either dimension is negative.
        """
        if width < 0 or height < 0:
            raise ValueError(f"Surface dimensions must be non-negative, got {width}x{height}")
        self._width = width
        self._height = height
        self._data = np.zeros(width * height, dtype=np.uint32)

    def set_data(self, buffer: npt.NDArray[np.uint32]) -> None:
        """Present a packed RGBA32 buffer of width * height pixels.

        Raises:
            ValueError: If the buffer size does not match the surface.
        """
        if buffer.size != self._width * self._height:
            raise ValueError(
                f"Buffer of {buffer.size} pixels doesn't match surface "
                f"{self._width}x{self._height}"
            )
        self._data = np.array(buffer, dtype=np.uint32, copy=True).reshape(-1)
        self.frames_presented += 1

    def to_rgba(self) -> npt.NDArray[np.uint8]:
        """Return the last frame as an (H, W, 4) uint8 image, top row first."""
        return buffer_to_rgba(self._data, self._width, self._height)


def show_preview(
    renderer: Renderer,
    *,
    title: str | None = None,
    figsize: tuple[float, float] = (8, 8),
    block: bool = True,
) -> None:
    """Display the renderer's current image as a Matplotlib figure.

    Args:
        renderer: The Renderer instance to display.
        title: Custom title (default shows the accumulated frame count).
        figsize: Figure size in inches (width, height).
        block: Whether to block execution until figure is closed.
    """
    import matplotlib.pyplot as plt

    image = renderer.get_image_numpy()

    fig, ax = plt.subplots(1, 1, figsize=figsize)
    ax.imshow(image)
    ax.axis("off")

    if title is None:
        title = f"Render Preview - {renderer.accumulated_frames} frames"
    ax.set_title(title)

    plt.tight_layout()
    plt.show(block=block)
