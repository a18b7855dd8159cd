"""Ray and hit payload structures with the vector helpers the tracer needs.

All functions here are Taichi functions (@ti.func) meant to be called from
inside kernels.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from raybounce.core.ray import make_ray, ray_at, vec3
    >>> @ti.kernel
    ... def point_on_ray() -> vec3:
    ...     ray = make_ray(vec3(0.0, 0.0, 0.0), vec3(0.0, 0.0, -1.0))
    ...     return ray_at(ray, 5.0)
"""

import taichi as ti
import taichi.math as tm

vec3 = tm.vec3
vec4 = tm.vec4

# Sentinel hit distance reported when a ray hits nothing
MISS_DISTANCE = -1.0


@ti.dataclass
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction vector of the ray (vec3). Not required to be
            normalized; reflected rays off a jittered normal generally are not.
    """

    origin: vec3
    direction: vec3


@ti.dataclass
class HitPayload:
    """Result of resolving a ray against the scene.

    Attributes:
        hit_distance: Distance along the ray to the closest hit, or
            MISS_DISTANCE (negative) when nothing was hit.
        hit_position: World-space hit point. Only valid on a hit.
        hit_normal: Unit surface normal at the hit point. Only valid on a hit.
        object_id: Index of the hit sphere in the scene. Only valid on a hit.
    """

    hit_distance: ti.f32
    hit_position: vec3
    hit_normal: vec3
    object_id: ti.i32


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create a ray from origin and direction."""
    return Ray(origin=origin, direction=direction)


@ti.func
def ray_at(ray: Ray, t: ti.f32) -> vec3:
    """Compute the point ray.origin + t * ray.direction."""
    return ray.origin + t * ray.direction


@ti.func
def reflect(incident: vec3, normal: vec3) -> vec3:
    """Reflect an incident vector about a normal.

    Computes I - 2 * dot(I, N) * N. The normal is used as given, so a
    perturbed (non-unit) normal yields a correspondingly perturbed reflection.

    Args:
        incident: The incoming direction vector.
        normal: The surface normal to reflect about.

    Returns:
        The reflected direction vector.
    """
    return incident - 2.0 * tm.dot(incident, normal) * normal


@ti.func
def random_vec3(lo: ti.f32, hi: ti.f32) -> vec3:
    """Generate a vector with each component uniform in [lo, hi).

    Uses ti.random, whose generator state is kept per thread by the Taichi
    runtime, so concurrent rows draw independent samples.
    """
    span = hi - lo
    return vec3(
        lo + span * ti.random(ti.f32),
        lo + span * ti.random(ti.f32),
        lo + span * ti.random(ti.f32),
    )
