"""Tests for scene-level closest-hit resolution.

Tests cover:
- Empty scene misses
- Closest of several spheres wins
- Hit position and outward normal
- Spheres behind the origin are ignored
- Tie-break on equal distances keeps the earliest sphere
"""

import numpy as np
import pytest
import taichi as ti

from raybounce.core.ray import vec3
from raybounce.scene.model import Scene


def _trace(scene, origin, direction):
    """Trace one ray against a scene and return the payload as Python values."""
    from raybounce.core.ray import make_ray
    from raybounce.scene.intersection import trace_ray

    distance = ti.field(dtype=ti.f32, shape=())
    position = ti.field(dtype=ti.math.vec3, shape=())
    normal = ti.field(dtype=ti.math.vec3, shape=())
    object_id = ti.field(dtype=ti.i32, shape=())

    @ti.kernel
    def test_kernel(
        o: vec3,
        d: vec3,
        positions: ti.types.ndarray(dtype=vec3, ndim=1),
        radii: ti.types.ndarray(dtype=ti.f32, ndim=1),
        num_spheres: ti.i32,
    ):
        payload = trace_ray(make_ray(o, d), positions, radii, num_spheres)
        distance[None] = payload.hit_distance
        position[None] = payload.hit_position
        normal[None] = payload.hit_normal
        object_id[None] = payload.object_id

    buffers = scene.pack()
    test_kernel(
        ti.math.vec3(*origin),
        ti.math.vec3(*direction),
        buffers.positions,
        buffers.radii,
        buffers.num_spheres,
    )
    return (
        float(distance[None]),
        np.array(position[None].to_numpy()),
        np.array(normal[None].to_numpy()),
        int(object_id[None]),
    )


def _scene(*spheres):
    scene = Scene()
    scene.add_material()
    for position, radius in spheres:
        scene.add_sphere(position, radius, 0)
    return scene


class TestTraceRay:
    """Tests for trace_ray."""

    def test_empty_scene_misses(self):
        """Test that a scene with no spheres always misses."""
        distance, _, _, object_id = _trace(Scene(), (0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert distance < 0.0
        assert object_id == -1

    def test_single_hit_payload(self):
        """Test distance, position and normal of a head-on hit."""
        scene = _scene(((0.0, 0.0, -3.0), 1.0))
        distance, position, normal, object_id = _trace(scene, (0.0, 0.0, 0.0), (0.0, 0.0, -1.0))

        assert distance == pytest.approx(2.0, abs=1e-5)
        np.testing.assert_allclose(position, [0.0, 0.0, -2.0], atol=1e-5)
        np.testing.assert_allclose(normal, [0.0, 0.0, 1.0], atol=1e-5)
        assert object_id == 0

    def test_closest_sphere_wins(self):
        """Test that the nearer sphere is reported regardless of order."""
        scene = _scene(((0.0, 0.0, -10.0), 1.0), ((0.0, 0.0, -4.0), 1.0))
        distance, _, _, object_id = _trace(scene, (0.0, 0.0, 0.0), (0.0, 0.0, -1.0))

        assert object_id == 1
        assert distance == pytest.approx(3.0, abs=1e-5)

    def test_sphere_behind_is_ignored(self):
        """Test that spheres behind the ray origin are not hit."""
        scene = _scene(((0.0, 0.0, 5.0), 1.0))
        distance, _, _, object_id = _trace(scene, (0.0, 0.0, 0.0), (0.0, 0.0, -1.0))

        assert distance < 0.0
        assert object_id == -1

    def test_origin_inside_sphere_sees_other_sphere(self):
        """Test that the enclosing sphere is skipped and the next one is hit."""
        scene = _scene(((0.0, 0.0, 0.0), 1.0), ((0.0, 0.0, -5.0), 1.0))
        _, _, _, object_id = _trace(scene, (0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert object_id == 1

    def test_equal_distance_keeps_first_sphere(self):
        """Test that identical spheres resolve to the lower object ID."""
        scene = _scene(((0.0, 0.0, -3.0), 1.0), ((0.0, 0.0, -3.0), 1.0))
        _, _, _, object_id = _trace(scene, (0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert object_id == 0

    def test_normal_is_unit_length_off_axis(self):
        """Test the outward normal for an oblique hit."""
        scene = _scene(((1.0, 1.0, -5.0), 2.0))
        _, position, normal, _ = _trace(scene, (0.0, 0.0, 0.0), (0.0, 0.0, -1.0))

        assert np.linalg.norm(normal) == pytest.approx(1.0, abs=1e-5)
        expected = (position - np.array([1.0, 1.0, -5.0])) / 2.0
        np.testing.assert_allclose(normal, expected, atol=1e-4)

    @pytest.mark.parametrize("radius", [0.25, 1.0, 1.5, 10.0])
    def test_ray_from_twice_radius_hits_near_side(self, radius):
        """Test a ray from (0, 0, -2r) toward a sphere of radius r at the origin."""
        scene = _scene(((0.0, 0.0, 0.0), radius))
        distance, position, normal, _ = _trace(scene, (0.0, 0.0, -2.0 * radius), (0.0, 0.0, 1.0))

        assert distance == pytest.approx(radius, rel=1e-5)
        np.testing.assert_allclose(position, [0.0, 0.0, -radius], atol=1e-4 * radius)
        np.testing.assert_allclose(normal, [0.0, 0.0, -1.0], atol=1e-5)
