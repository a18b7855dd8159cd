"""Pytest configuration for raybounce tests.

Taichi must be initialized exactly once per session, before any kernel is
compiled.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts.
    """
    ti.init(arch=ti.cpu, random_seed=42)
    yield


@pytest.fixture
def default_scene():
    """The pink-sphere-on-ground preset and its camera."""
    from raybounce.scene.presets import create_default_scene

    return create_default_scene()


@pytest.fixture
def mirror_scene():
    """Two facing perfect mirrors along the z-axis, plus camera."""
    from raybounce.scene.presets import create_mirror_corridor_scene

    return create_mirror_corridor_scene()
