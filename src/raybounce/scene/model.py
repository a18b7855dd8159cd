"""Scene and material model consumed by the renderer.

A Scene is an ordered list of spheres plus an ordered list of materials.
Spheres refer to materials by index, and a sphere's own index is its object
ID. The renderer only borrows a scene for the duration of one render call;
mutating it between calls is the caller's business.

Before a frame is rendered the scene is packed into a structure-of-arrays
layout (SceneBuffers) that Taichi kernels read directly.

Example:
    >>> from raybounce.scene.model import Scene
    >>> scene = Scene()
    >>> pink = scene.add_material(albedo=(1.0, 0.0, 1.0), roughness=0.0)
    >>> ground = scene.add_material(albedo=(0.2, 0.3, 1.0), roughness=0.1)
    >>> scene.add_sphere((0.0, 0.0, 0.0), 1.0, pink)
    0
    >>> scene.add_sphere((0.0, -101.0, 0.0), 100.0, ground)
    1
    >>> buffers = scene.pack()
"""

from dataclasses import dataclass, field

import numpy as np
import numpy.typing as npt

from raybounce.geometry.sphere import Sphere


@dataclass
class Material:
    """Surface description for spheres.

    Attributes:
        albedo: Surface color (R, G, B), each component in [0, 1].
        roughness: How strongly reflections are perturbed, in [0, 1].
            0 = perfect mirror, 1 = strongly scattered.
    """

    albedo: tuple[float, float, float] = (1.0, 1.0, 1.0)
    roughness: float = 1.0


@dataclass(frozen=True)
class SceneBuffers:
    """Structure-of-arrays view of a scene, ready to hand to kernels.

    Every array has at least one row so that an empty scene can still be
    passed to a kernel; num_spheres and num_materials carry the real sizes.

    Attributes:
        positions: Sphere centers, float32 array of shape (N, 3).
        radii: Sphere radii, float32 array of shape (N,).
        material_indices: Material index per sphere, int32 array of shape (N,).
        albedos: Material albedos, float32 array of shape (M, 3).
        roughness: Material roughness, float32 array of shape (M,).
        num_spheres: Number of real spheres.
        num_materials: Number of real materials.
    """

    positions: npt.NDArray[np.float32]
    radii: npt.NDArray[np.float32]
    material_indices: npt.NDArray[np.int32]
    albedos: npt.NDArray[np.float32]
    roughness: npt.NDArray[np.float32]
    num_spheres: int
    num_materials: int


@dataclass
class Scene:
    """Ordered spheres and materials describing what to render.

    Attributes:
        spheres: Spheres in object-ID order.
        materials: Materials in material-index order.
    """

    spheres: list[Sphere] = field(default_factory=list)
    materials: list[Material] = field(default_factory=list)

    @property
    def sphere_count(self) -> int:
        """Number of spheres in the scene."""
        return len(self.spheres)

    @property
    def material_count(self) -> int:
        """Number of materials in the scene."""
        return len(self.materials)

    def add_material(
        self,
        albedo: tuple[float, float, float] = (1.0, 1.0, 1.0),
        roughness: float = 1.0,
    ) -> int:
        """Append a material and return its index."""
        self.materials.append(Material(albedo=tuple(albedo), roughness=roughness))
        return len(self.materials) - 1

    def add_sphere(
        self,
        position: tuple[float, float, float],
        radius: float,
        material_index: int = 0,
    ) -> int:
        """Append a sphere and return its object ID."""
        self.spheres.append(
            Sphere(position=tuple(position), radius=radius, material_index=material_index)
        )
        return len(self.spheres) - 1

    def clear(self) -> None:
        """Remove all spheres and materials."""
        self.spheres.clear()
        self.materials.clear()

    def validate(self) -> None:
        """Check the scene's referential integrity and value ranges.

        Raises:
            ValueError: If a sphere references a material index outside the
                material list, has a non-positive radius, or a material has
                roughness or albedo outside [0, 1].
        """
        material_count = len(self.materials)
        for object_id, sphere in enumerate(self.spheres):
            if not 0 <= sphere.material_index < material_count:
                raise ValueError(
                    f"Sphere {object_id} references material {sphere.material_index}, "
                    f"but the scene has {material_count} materials"
                )
            if sphere.radius <= 0.0:
                raise ValueError(
                    f"Sphere {object_id} radius must be positive, got {sphere.radius}"
                )

        for index, material in enumerate(self.materials):
            if not 0.0 <= material.roughness <= 1.0:
                raise ValueError(
                    f"Material {index} roughness must be in [0, 1], got {material.roughness}"
                )
            if any(not 0.0 <= channel <= 1.0 for channel in material.albedo):
                raise ValueError(
                    f"Material {index} albedo components must be in [0, 1], "
                    f"got {material.albedo}"
                )

    def pack(self) -> SceneBuffers:
        """Pack the scene into contiguous NumPy arrays for the kernels."""
        num_spheres = len(self.spheres)
        num_materials = len(self.materials)

        positions = np.zeros((max(num_spheres, 1), 3), dtype=np.float32)
        radii = np.zeros(max(num_spheres, 1), dtype=np.float32)
        material_indices = np.zeros(max(num_spheres, 1), dtype=np.int32)
        for i, sphere in enumerate(self.spheres):
            positions[i] = sphere.position
            radii[i] = sphere.radius
            material_indices[i] = sphere.material_index

        albedos = np.zeros((max(num_materials, 1), 3), dtype=np.float32)
        roughness = np.zeros(max(num_materials, 1), dtype=np.float32)
        for i, material in enumerate(self.materials):
            albedos[i] = material.albedo
            roughness[i] = material.roughness

        return SceneBuffers(
            positions=positions,
            radii=radii,
            material_indices=material_indices,
            albedos=albedos,
            roughness=roughness,
            num_spheres=num_spheres,
            num_materials=num_materials,
        )
