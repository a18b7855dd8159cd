"""Scene-level ray intersection (closest hit over all spheres).

The scene arrives in kernels as NumPy-backed ndarrays (see SceneBuffers).
trace_ray scans every sphere, keeps the closest positive root, and expands
it into a full HitPayload through closest_hit. There is no acceleration
structure: each ray costs O(number of spheres).

On equal distances the sphere that comes first in the scene wins, since a
candidate must be strictly closer than the best one so far.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from raybounce.scene.intersection import trace_ray
    >>> # Use trace_ray(ray, positions, radii, num_spheres) within a kernel
"""

import taichi as ti
import taichi.math as tm

from raybounce.core.ray import MISS_DISTANCE, HitPayload, Ray, vec3
from raybounce.geometry.sphere import intersect_sphere

# Initial "closest so far" distance (largest finite f32)
FAR_DISTANCE = 3.402823e38


@ti.func
def miss(ray: Ray) -> HitPayload:
    """Build the payload for a ray that hit nothing.

    Only hit_distance is meaningful; it is set to MISS_DISTANCE.
    """
    return HitPayload(
        hit_distance=MISS_DISTANCE,
        hit_position=vec3(0.0, 0.0, 0.0),
        hit_normal=vec3(0.0, 0.0, 0.0),
        object_id=-1,
    )


@ti.func
def closest_hit(
    ray: Ray, hit_distance: ti.f32, object_id: ti.i32, positions: ti.template()
) -> HitPayload:
    """Build the full payload for the accepted closest sphere.

    The hit point is computed in the sphere's local frame, where it is also
    the vector from the center to the surface, so normalizing it gives the
    outward normal. This only holds for spheres.

    Args:
        ray: The ray that was traced.
        hit_distance: Distance along the ray to the hit.
        object_id: Index of the hit sphere.
        positions: Sphere centers (vec3 ndarray).

    Returns:
        HitPayload with world-space position and unit normal.
    """
    center = positions[object_id]
    origin = ray.origin - center

    hit_position = origin + ray.direction * hit_distance
    hit_normal = tm.normalize(hit_position)

    return HitPayload(
        hit_distance=hit_distance,
        hit_position=hit_position + center,
        hit_normal=hit_normal,
        object_id=object_id,
    )


@ti.func
def trace_ray(
    ray: Ray, positions: ti.template(), radii: ti.template(), num_spheres: ti.i32
) -> HitPayload:
    """Resolve a ray against all spheres and return the closest hit.

    Args:
        ray: The ray to trace.
        positions: Sphere centers (vec3 ndarray).
        radii: Sphere radii (f32 ndarray).
        num_spheres: Number of valid entries in positions/radii.

    Returns:
        The closest hit payload, or a miss payload (hit_distance < 0).
    """
    closest_sphere = -1
    hit_distance = FAR_DISTANCE

    for i in range(num_spheres):
        t = intersect_sphere(ray.origin, ray.direction, positions[i], radii[i])
        if t > 0.0 and t < hit_distance:
            hit_distance = t
            closest_sphere = i

    result = miss(ray)
    if closest_sphere >= 0:
        result = closest_hit(ray, hit_distance, closest_sphere, positions)

    return result
