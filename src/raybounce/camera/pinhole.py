"""Pinhole camera with precomputed per-pixel ray directions.

The camera builds an orthonormal basis (u, v, w) from look-at parameters:
- w: points from lookat toward lookfrom (opposite view direction)
- u: points right in the image plane
- v: points up in the image plane

On resize it computes one normalized direction per pixel through the pixel
center, stored row-major with index x + y * width. Row y = 0 is the bottom
of the image.

Example:
    >>> from raybounce.camera.pinhole import PinholeCamera
    >>> camera = PinholeCamera(lookfrom=(0.0, 0.0, 6.0), lookat=(0.0, 0.0, 0.0))
    >>> camera.resize(320, 240)
    >>> camera.ray_directions.shape
    (76800, 3)
"""

import math
from dataclasses import dataclass, field

import numpy as np
import numpy.typing as npt


@dataclass
class PinholeCamera:
    """A perspective camera that precomputes its primary ray directions.

    Attributes:
        lookfrom: Camera position in world space (x, y, z).
        lookat: Point the camera is looking at in world space (x, y, z).
        vup: Up direction vector for camera orientation (typically (0, 1, 0)).
        vfov: Vertical field of view in degrees.
    """

    lookfrom: tuple[float, float, float] = (0.0, 0.0, 6.0)
    lookat: tuple[float, float, float] = (0.0, 0.0, 0.0)
    vup: tuple[float, float, float] = (0.0, 1.0, 0.0)
    vfov: float = 45.0
    _width: int = field(default=0, init=False, repr=False, compare=False)
    _height: int = field(default=0, init=False, repr=False, compare=False)
    _ray_directions: npt.NDArray[np.float32] = field(
        default_factory=lambda: np.zeros((0, 3), dtype=np.float32),
        init=False,
        repr=False,
        compare=False,
    )

    @property
    def position(self) -> tuple[float, float, float]:
        """Camera position in world space."""
        return self.lookfrom

    @property
    def ray_directions(self) -> npt.NDArray[np.float32]:
        """Per-pixel directions, float32 array of shape (width * height, 3)."""
        return self._ray_directions

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def aspect_ratio(self) -> float:
        """Viewport width divided by height (1.0 for an empty viewport)."""
        if self._height == 0:
            return 1.0
        return self._width / self._height

    def resize(self, width: int, height: int) -> None:
        """Set the viewport size and recompute ray directions if it changed.

        Raises:
            ValueError: If either dimension is negative.
        """
        if width < 0 or height < 0:
            raise ValueError(f"Viewport dimensions must be non-negative, got {width}x{height}")

        if (width, height) == (self._width, self._height):
            return

        self._width = width
        self._height = height
        self.recalculate_ray_directions()

    def move_to(
        self,
        lookfrom: tuple[float, float, float],
        lookat: tuple[float, float, float] | None = None,
    ) -> None:
        """Reposition the camera and recompute ray directions."""
        self.lookfrom = tuple(lookfrom)
        if lookat is not None:
            self.lookat = tuple(lookat)
        self.recalculate_ray_directions()

    def _basis(self) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        lookfrom = np.array(self.lookfrom, dtype=np.float64)
        lookat = np.array(self.lookat, dtype=np.float64)
        vup = np.array(self.vup, dtype=np.float64)

        # w points from lookat toward lookfrom (backward)
        w = lookfrom - lookat
        w = w / np.linalg.norm(w)

        u = np.cross(vup, w)
        u = u / np.linalg.norm(u)

        v = np.cross(w, u)
        return u, v, w

    def recalculate_ray_directions(self) -> None:
        """Recompute the per-pixel ray direction table for the current view."""
        width, height = self._width, self._height
        if width == 0 or height == 0:
            self._ray_directions = np.zeros((0, 3), dtype=np.float32)
            return

        # Viewport dimensions at unit distance
        viewport_height = 2.0 * math.tan(math.radians(self.vfov) / 2.0)
        viewport_width = self.aspect_ratio * viewport_height

        u, v, w = self._basis()
        horizontal = viewport_width * u
        vertical = viewport_height * v

        # Normalized pixel-center coordinates in [-0.5, 0.5], rows first
        xs = (np.arange(width, dtype=np.float64) + 0.5) / width - 0.5
        ys = (np.arange(height, dtype=np.float64) + 0.5) / height - 0.5
        grid_x, grid_y = np.meshgrid(xs, ys)

        directions = (
            -w[None, None, :]
            + grid_x[..., None] * horizontal[None, None, :]
            + grid_y[..., None] * vertical[None, None, :]
        )
        directions /= np.linalg.norm(directions, axis=-1, keepdims=True)

        self._ray_directions = np.ascontiguousarray(
            directions.reshape(width * height, 3), dtype=np.float32
        )

    def get_camera_info(self) -> dict[str, tuple[float, ...]]:
        """Return the camera basis and viewport for debugging."""
        u, v, w = self._basis()
        return {
            "origin": tuple(float(c) for c in self.lookfrom),
            "u": tuple(float(c) for c in u),
            "v": tuple(float(c) for c in v),
            "w": tuple(float(c) for c in w),
            "viewport": (float(self._width), float(self._height)),
        }
