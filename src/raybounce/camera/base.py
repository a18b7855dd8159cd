"""Camera interface consumed by the renderer.

The renderer never computes ray directions itself. A camera exposes its
position and one precomputed direction per pixel, indexed by the flattened
pixel coordinate x + y * width, and recomputes them whenever the view or the
viewport changes.
"""

from typing import Protocol

import numpy as np
import numpy.typing as npt


class Camera(Protocol):
    """Read-only view of a camera during a render call."""

    @property
    def position(self) -> tuple[float, float, float]:
        """Camera position in world space."""
        ...

    @property
    def ray_directions(self) -> npt.NDArray[np.float32]:
        """Per-pixel ray directions, float32 array of shape (width * height, 3)."""
        ...
