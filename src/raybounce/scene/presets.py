"""Preset scenes with matching cameras.

Each factory returns a (Scene, PinholeCamera) pair. Cameras still need
resize() before rendering, once the viewport size is known.

Example:
    >>> from raybounce.scene.presets import create_default_scene
    >>> scene, camera = create_default_scene()
    >>> camera.resize(320, 240)
"""

from raybounce.camera.pinhole import PinholeCamera
from raybounce.scene.model import Scene

# =============================================================================
# Default Scene Constants
# =============================================================================

PINK_ALBEDO = (1.0, 0.0, 1.0)
GROUND_ALBEDO = (0.2, 0.3, 1.0)
GROUND_ROUGHNESS = 0.1

# Radius of the sphere standing in for a ground plane
GROUND_RADIUS = 100.0


def create_default_scene() -> tuple[Scene, PinholeCamera]:
    """Create a mirror-like pink sphere resting on a large blue ground sphere."""
    scene = Scene()
    pink = scene.add_material(albedo=PINK_ALBEDO, roughness=0.0)
    ground = scene.add_material(albedo=GROUND_ALBEDO, roughness=GROUND_ROUGHNESS)

    scene.add_sphere((0.0, 0.0, 0.0), 1.0, pink)
    scene.add_sphere((0.0, -(GROUND_RADIUS + 1.0), 0.0), GROUND_RADIUS, ground)

    camera = PinholeCamera(lookfrom=(0.0, 0.0, 6.0), lookat=(0.0, 0.0, 0.0), vfov=45.0)
    return scene, camera


def create_showcase_scene() -> tuple[Scene, PinholeCamera]:
    """Create a row of spheres going from mirror-smooth to fully rough.

    Five spheres share the ground sphere; their roughness steps from 0.0 to
    1.0 so the effect of the normal jitter can be compared side by side.
    """
    scene = Scene()
    ground = scene.add_material(albedo=(0.8, 0.8, 0.8), roughness=0.2)
    scene.add_sphere((0.0, -(GROUND_RADIUS + 0.5), 0.0), GROUND_RADIUS, ground)

    colors = [
        (0.9, 0.2, 0.2),
        (0.9, 0.6, 0.1),
        (0.2, 0.8, 0.3),
        (0.2, 0.4, 0.9),
        (0.7, 0.3, 0.9),
    ]
    for i, albedo in enumerate(colors):
        material = scene.add_material(albedo=albedo, roughness=i / (len(colors) - 1))
        scene.add_sphere((-2.4 + 1.2 * i, 0.0, 0.0), 0.5, material)

    camera = PinholeCamera(lookfrom=(0.0, 1.0, 7.0), lookat=(0.0, 0.0, 0.0), vfov=40.0)
    return scene, camera


def create_mirror_corridor_scene(separation: float = 6.0) -> tuple[Scene, PinholeCamera]:
    """Create two perfect mirror spheres facing each other along the z-axis.

    A ray fired along the axis from between them bounces back and forth
    forever, so every bounce iteration hits geometry.

    Args:
        separation: Distance between the two sphere centers.
    """
    scene = Scene()
    near = scene.add_material(albedo=(0.9, 0.9, 0.9), roughness=0.0)
    far = scene.add_material(albedo=(0.9, 0.5, 0.2), roughness=0.0)

    half = separation / 2.0
    scene.add_sphere((0.0, 0.0, -half), 1.0, near)
    scene.add_sphere((0.0, 0.0, half), 1.0, far)

    camera = PinholeCamera(lookfrom=(0.0, 0.0, 0.0), lookat=(0.0, 0.0, -1.0), vfov=30.0)
    return scene, camera


PRESETS = {
    "default": create_default_scene,
    "showcase": create_showcase_scene,
    "mirrors": create_mirror_corridor_scene,
}
