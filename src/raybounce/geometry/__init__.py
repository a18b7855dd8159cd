"""Geometry module for the sphere primitive.

Components:
    sphere: Sphere description and ray-sphere intersection

Only spheres are supported. The intersection routine is a Taichi function
(@ti.func) so it can be evaluated per pixel inside render kernels.
"""

from .sphere import Sphere, intersect_sphere

__all__ = [
    "Sphere",
    "intersect_sphere",
]
