"""Image export utilities for rendered frames.

The renderer's image buffer already holds display-ready 8-bit channels, so
exporting is a matter of unpacking the RGBA32 words and writing them with
Pillow.

Example:
    >>> from raybounce.preview.export import save_png
    >>> save_png(renderer, "output.png")
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

from raybounce.preview.display import buffer_to_rgba

if TYPE_CHECKING:
    from raybounce.core.renderer import Renderer


def buffer_to_image(
    buffer: npt.NDArray[np.uint32],
    width: int,
    height: int,
) -> PILImage.Image:
    """Convert a packed RGBA32 buffer into a Pillow RGBA image.

    Raises:
        ValueError: If the buffer size does not match width * height, or the
            image is empty.
    """
    if width == 0 or height == 0:
        raise ValueError(f"Cannot build an image of size {width}x{height}")
    return PILImage.fromarray(buffer_to_rgba(buffer, width, height))


def save_png_from_buffer(
    buffer: npt.NDArray[np.uint32],
    width: int,
    height: int,
    filepath: str,
) -> None:
    """Save a packed RGBA32 buffer as a PNG file.

    Args:
        buffer: Packed pixels, row-major with row 0 at the bottom.
        width: Image width in pixels.
        height: Image height in pixels.
        filepath: Output file path (should end in .png).
    """
    buffer_to_image(buffer, width, height).save(filepath)


def save_png(renderer: Renderer, filepath: str) -> None:
    """Save the renderer's last frame as a PNG file.

    Example:
        >>> renderer.render(scene, camera)
        >>> save_png(renderer, "output.png")
    """
    save_png_from_buffer(renderer.image_data, renderer.width, renderer.height, filepath)
