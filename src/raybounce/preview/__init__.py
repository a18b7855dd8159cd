"""Preview module for presenting and exporting rendered frames.

Components:
    display: DisplaySurface protocol, headless ImageSurface, Matplotlib preview
    export: PNG export of packed RGBA32 frames (Pillow)
    interactive: Taichi GGUI window surface with a settings panel

The renderer hands every completed frame to a display surface. Frames are
packed RGBA32 words, row-major, with row 0 at the bottom of the image.

Example:
    >>> from raybounce.preview import ImageSurface, save_png
    >>> from raybounce.core.renderer import Renderer
    >>>
    >>> renderer = Renderer(surface=ImageSurface())
    >>> renderer.resize(256, 256)
    >>> renderer.render(scene, camera)
    >>> save_png(renderer, "output.png")

For the interactive window:
    >>> from raybounce.preview import InteractivePreview
    >>> InteractivePreview(800, 600).run(scene, camera)
"""

from raybounce.preview.display import (
    DisplaySurface,
    ImageSurface,
    buffer_to_rgba,
    show_preview,
)
from raybounce.preview.export import (
    buffer_to_image,
    save_png,
    save_png_from_buffer,
)
from raybounce.preview.interactive import InteractivePreview

__all__ = [
    # Surfaces
    "DisplaySurface",
    "ImageSurface",
    "InteractivePreview",
    # Display helpers
    "buffer_to_rgba",
    "show_preview",
    # Export functions
    "buffer_to_image",
    "save_png",
    "save_png_from_buffer",
]
