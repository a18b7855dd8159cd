"""Camera module providing primary ray directions.

Components:
    base: Camera protocol the renderer consumes
    pinhole: Pinhole (perspective) camera with a precomputed direction table

The renderer reads a camera's position and its per-pixel direction table,
indexed by x + y * width. Cameras recompute the table whenever the view or
viewport changes; the renderer never does.
"""

from .base import Camera
from .pinhole import PinholeCamera

__all__ = [
    "Camera",
    "PinholeCamera",
]
