"""Scene module for the geometry/material model and ray queries.

Components:
    model: Scene, Material and the packed SceneBuffers layout
    intersection: Closest-hit intersection engine (Taichi functions)
    presets: Ready-made scenes with matching cameras

Scenes are plain Python objects owned by the caller. Before each frame the
renderer packs them into structure-of-arrays NumPy buffers that kernels read
directly.
"""

from .intersection import closest_hit, miss, trace_ray
from .model import Material, Scene, SceneBuffers
from .presets import (
    PRESETS,
    create_default_scene,
    create_mirror_corridor_scene,
    create_showcase_scene,
)

__all__ = [
    # Model
    "Scene",
    "Material",
    "SceneBuffers",
    # Intersection engine
    "trace_ray",
    "closest_hit",
    "miss",
    # Presets
    "PRESETS",
    "create_default_scene",
    "create_showcase_scene",
    "create_mirror_corridor_scene",
]
