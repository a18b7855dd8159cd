"""Bounce integrator, frame accumulation and RGBA packing.

Each pixel starts a ray at the camera along its precomputed direction and
runs a bounded reflection loop:

    1. Trace the ray against every sphere.
    2. On a miss, add SKY_COLOR * multiplier and stop.
    3. On a hit, shade with a single directional light (Lambertian cosine
       term, no shadow test), tint by the sphere's albedo and add it
       weighted by multiplier.
    4. Halve the multiplier.
    5. Reflect about the normal jittered by roughness * random_vec3(-0.5, 0.5)
       and continue from just above the surface.

The loop runs at most MAX_BOUNCES iterations. Per frame the result is added
into the accumulation buffer, divided by the frame index, clamped to [0, 1]
and packed as a little-endian RGBA32 word. Contributions are never clamped
before the final division.

The frame kernel's outermost loop runs over rows, so Taichi hands each row
to one worker; pixels within a row are processed left to right. Rows write
disjoint index ranges of the accumulation and image buffers.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from raybounce.core.renderer import Renderer
    >>> # The Renderer drives render_frame; see raybounce.core.renderer
"""

import math

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from raybounce.core.ray import make_ray, random_vec3, reflect, vec3, vec4
from raybounce.scene.intersection import trace_ray

# =============================================================================
# Integrator Constants
# =============================================================================

# Bounce iterations per pixel
MAX_BOUNCES = 5

# Color returned by rays that escape the scene
SKY_COLOR = vec3(0.6, 0.7, 0.9)

# Direction the single light travels, normalize((-1, -1, -1))
_INV_SQRT3 = 1.0 / math.sqrt(3.0)
LIGHT_DIRECTION = vec3(-_INV_SQRT3, -_INV_SQRT3, -_INV_SQRT3)

# Offset along the normal for the next ray origin
RAY_EPSILON = 1e-5

# Energy kept per bounce
MULTIPLIER_DECAY = 0.5

# Range of the per-component normal jitter scaled by roughness
JITTER_MIN = -0.5
JITTER_MAX = 0.5


# =============================================================================
# Per-Pixel Integration
# =============================================================================


@ti.func
def trace_path(
    origin: vec3,
    direction: vec3,
    positions: ti.template(),
    radii: ti.template(),
    material_indices: ti.template(),
    num_spheres: ti.i32,
    albedos: ti.template(),
    roughness: ti.template(),
):
    """Run the bounce loop for a single ray.

    Args:
        origin: Primary ray origin (camera position).
        direction: Primary ray direction.
        positions: Sphere centers (vec3 ndarray).
        radii: Sphere radii (f32 ndarray).
        material_indices: Material index per sphere (i32 ndarray).
        num_spheres: Number of valid spheres.
        albedos: Material albedos (vec3 ndarray).
        roughness: Material roughness (f32 ndarray).

    Returns:
        A tuple (color, bounces, multiplier) where color is the accumulated
        RGB, bounces the number of loop iterations run, and multiplier the
        weight left after the last hit (0.5^hits).
    """
    ray_origin = origin
    ray_direction = direction
    color = vec3(0.0, 0.0, 0.0)
    multiplier = 1.0
    bounces = 0

    # Taichi doesn't support break in ti.func loops
    active = 1

    for _ in range(MAX_BOUNCES):
        if active == 1:
            bounces += 1
            payload = trace_ray(make_ray(ray_origin, ray_direction), positions, radii, num_spheres)

            if payload.hit_distance < 0.0:
                color += SKY_COLOR * multiplier
                active = 0
            else:
                # == cos(angle) between normal and light
                light_intensity = tm.max(tm.dot(payload.hit_normal, -LIGHT_DIRECTION), 0.0)

                material_index = material_indices[payload.object_id]
                sphere_color = albedos[material_index] * light_intensity
                color += sphere_color * multiplier
                multiplier *= MULTIPLIER_DECAY

                jittered_normal = payload.hit_normal + roughness[material_index] * random_vec3(
                    JITTER_MIN, JITTER_MAX
                )
                ray_origin = payload.hit_position + payload.hit_normal * RAY_EPSILON
                ray_direction = reflect(ray_direction, jittered_normal)

    return color, bounces, multiplier


@ti.func
def per_pixel(
    x: ti.i32,
    y: ti.i32,
    width: ti.i32,
    camera_position: vec3,
    ray_directions: ti.template(),
    positions: ti.template(),
    radii: ti.template(),
    material_indices: ti.template(),
    num_spheres: ti.i32,
    albedos: ti.template(),
    roughness: ti.template(),
) -> vec4:
    """Compute one radiance sample for pixel (x, y); alpha is always 1."""
    direction = ray_directions[x + y * width]
    color, _, _ = trace_path(
        camera_position,
        direction,
        positions,
        radii,
        material_indices,
        num_spheres,
        albedos,
        roughness,
    )
    return vec4(color.x, color.y, color.z, 1.0)


# =============================================================================
# Accumulation and Packing
# =============================================================================


@ti.func
def resolve_pixel(accumulated: vec4, frame_index: ti.i32) -> vec4:
    """Average an accumulated color over frame_index frames and clamp to [0, 1]."""
    return tm.clamp(accumulated / ti.cast(frame_index, ti.f32), 0.0, 1.0)


@ti.func
def pack_rgba(color: vec4) -> ti.u32:
    """Pack a [0, 1] color into (a << 24) | (b << 16) | (g << 8) | r.

    Channels are quantized by truncation (floor(value * 255)), not rounding.
    """
    r = ti.cast(color.x * 255.0, ti.u32)
    g = ti.cast(color.y * 255.0, ti.u32)
    b = ti.cast(color.z * 255.0, ti.u32)
    a = ti.cast(color.w * 255.0, ti.u32)
    return (a << 24) | (b << 16) | (g << 8) | r


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def render_frame(
    width: ti.i32,
    height: ti.i32,
    frame_index: ti.i32,
    camera_position: vec3,
    ray_directions: ti.types.ndarray(dtype=vec3, ndim=1),
    positions: ti.types.ndarray(dtype=vec3, ndim=1),
    radii: ti.types.ndarray(dtype=ti.f32, ndim=1),
    material_indices: ti.types.ndarray(dtype=ti.i32, ndim=1),
    num_spheres: ti.i32,
    albedos: ti.types.ndarray(dtype=vec3, ndim=1),
    roughness: ti.types.ndarray(dtype=ti.f32, ndim=1),
    accumulation: ti.types.ndarray(dtype=vec4, ndim=1),
    image: ti.types.ndarray(dtype=ti.u32, ndim=1),
):
    """Render one frame, accumulate it and write packed display pixels.

    Only the outer (row) loop is parallelized; each row is processed left
    to right by a single worker.
    """
    for y in range(height):
        for x in range(width):
            index = x + y * width
            color = per_pixel(
                x,
                y,
                width,
                camera_position,
                ray_directions,
                positions,
                radii,
                material_indices,
                num_spheres,
                albedos,
                roughness,
            )
            accumulation[index] = accumulation[index] + color
            image[index] = pack_rgba(resolve_pixel(accumulation[index], frame_index))


@ti.kernel
def render_single_pixel(
    x: ti.i32,
    y: ti.i32,
    width: ti.i32,
    camera_position: vec3,
    ray_directions: ti.types.ndarray(dtype=vec3, ndim=1),
    positions: ti.types.ndarray(dtype=vec3, ndim=1),
    radii: ti.types.ndarray(dtype=ti.f32, ndim=1),
    material_indices: ti.types.ndarray(dtype=ti.i32, ndim=1),
    num_spheres: ti.i32,
    albedos: ti.types.ndarray(dtype=vec3, ndim=1),
    roughness: ti.types.ndarray(dtype=ti.f32, ndim=1),
) -> vec4:
    """Return one raw (unaccumulated) sample for a single pixel."""
    return per_pixel(
        x,
        y,
        width,
        camera_position,
        ray_directions,
        positions,
        radii,
        material_indices,
        num_spheres,
        albedos,
        roughness,
    )


# =============================================================================
# Host-side Helpers
# =============================================================================


def unpack_rgba(buffer: npt.NDArray[np.uint32]) -> npt.NDArray[np.uint8]:
    """Split packed RGBA32 words into 8-bit channels.

    Args:
        buffer: Array of packed pixels, any shape.

    Returns:
        uint8 array with a trailing axis of 4 channels (R, G, B, A).
    """
    words = np.asarray(buffer, dtype=np.uint32)
    channels = [(words >> shift) & 0xFF for shift in (0, 8, 16, 24)]
    return np.stack(channels, axis=-1).astype(np.uint8)
