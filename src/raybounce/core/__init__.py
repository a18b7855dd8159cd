"""Core rendering module.

Components:
    ray: Ray and HitPayload structures plus vector helpers
    integrator: Bounce integrator, accumulation and RGBA packing kernels
    renderer: Frame dispatcher owning the render buffers

The integrator and renderer are NOT imported here to avoid circular imports.
Import them directly:
    from raybounce.core.renderer import Renderer
"""

from .ray import (
    MISS_DISTANCE,
    HitPayload,
    Ray,
    make_ray,
    random_vec3,
    ray_at,
    reflect,
    vec3,
    vec4,
)

__all__ = [
    "Ray",
    "HitPayload",
    "MISS_DISTANCE",
    "make_ray",
    "ray_at",
    "reflect",
    "random_vec3",
    "vec3",
    "vec4",
]
