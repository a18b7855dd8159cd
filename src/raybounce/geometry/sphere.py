"""Sphere primitive and ray-sphere intersection.

The intersection solves the quadratic

    a*t^2 + b*t + c = 0

with the ray origin translated into the sphere's local frame:

    origin' = ray.origin - sphere.position
    a = dot(direction, direction)
    b = 2 * dot(origin', direction)
    c = dot(origin', origin') - radius^2

and keeps only the smaller root (-b - sqrt(b^2 - 4ac)) / 2a. A ray starting
inside a sphere therefore never reports that sphere: its smaller root is
behind the origin and the caller rejects non-positive distances.

Example:
    >>> from raybounce.geometry.sphere import Sphere
    >>> sphere = Sphere(position=(0.0, 0.0, -1.0), radius=0.5, material_index=0)
"""

from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from raybounce.core.ray import MISS_DISTANCE, vec3


@dataclass
class Sphere:
    """A sphere in the scene.

    A sphere is identified by its index in the scene's sphere sequence;
    that index is the object ID reported in hit payloads.

    Attributes:
        position: Center of the sphere in world space (x, y, z).
        radius: Radius of the sphere (positive).
        material_index: Index into the scene's material sequence.
    """

    position: tuple[float, float, float] = (0.0, 0.0, 0.0)
    radius: float = 0.5
    material_index: int = 0


@ti.func
def intersect_sphere(
    ray_origin: vec3,
    ray_direction: vec3,
    center: vec3,
    radius: ti.f32,
) -> ti.f32:
    """Return the smaller quadratic root for a ray against one sphere.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray (need not be unit).
        center: The sphere center.
        radius: The sphere radius.

    Returns:
        The smaller root t, which may be negative (behind the origin), or
        MISS_DISTANCE when there are no real roots or the direction is
        degenerate (zero length).
    """
    origin = ray_origin - center

    a = tm.dot(ray_direction, ray_direction)
    b = 2.0 * tm.dot(origin, ray_direction)
    c = tm.dot(origin, origin) - radius * radius

    discriminant = b * b - 4.0 * a * c

    t = MISS_DISTANCE
    if discriminant >= 0.0 and a > 0.0:
        t = (-b - ti.sqrt(discriminant)) / (2.0 * a)

    return t
