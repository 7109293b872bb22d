"""Scene manager for building sphere-and-light scenes.

This module provides a high-level scene building API on top of the Taichi
field storage in ``whitted.scene.intersection`` and the material registry in
``whitted.materials.phong``. It keeps a Python-side record of everything
added so scenes can be inspected and serialized.

The SceneManager maintains:
- A material id space shared by all spheres
- Ordered sphere and light lists (order matches the GPU-side storage)
- Dict/JSON round trips via SceneConfig

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.scene.manager import SceneManager
    >>> scene = SceneManager()
    >>> red = scene.add_material(color=(1.0, 0.0, 0.0), reflectance=0.2)
    >>> scene.add_sphere(center=(0, 0, -5), radius=1.0, material_id=red)
    >>> scene.add_light(origin=(5, 5, 0), intensity=1.0)
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import taichi.math as tm

from whitted.materials.phong import (
    MAX_MATERIALS,
    add_phong_material,
    clear_materials,
    validate_phong_params,
    get_material_count,
)
from whitted.scene.intersection import (
    MAX_LIGHTS,
    MAX_SPHERES,
    add_light,
    add_sphere,
    clear_scene,
    get_light_count,
    get_sphere_count,
)

# Type alias for 3D vectors
vec3 = tm.vec3

# Material parameter defaults, shared by add_material and from_config
MATERIAL_DEFAULTS: dict[str, float] = {
    "phong_exp": 50.0,
    "diffuse_const": 1.0,
    "ambient_const": 0.0,
    "specular_const": 1.0,
    "reflectance": 0.0,
}


@dataclass
class MaterialInfo:
    """Information about a registered material.

    Attributes:
        material_id: The material id.
        params: The material parameters as provided during creation.
    """

    material_id: int
    params: dict[str, Any]


@dataclass
class SphereInfo:
    """Information about a sphere in the scene.

    Attributes:
        sphere_index: The index in the sphere storage arrays.
        center: The center of the sphere.
        radius: The radius of the sphere.
        material_id: The material id assigned to the sphere.
    """

    sphere_index: int
    center: tuple[float, float, float]
    radius: float
    material_id: int


@dataclass
class LightInfo:
    """Information about a point light in the scene.

    Attributes:
        light_index: The index in the light storage arrays.
        origin: The position of the light.
        intensity: The scalar intensity of the light.
    """

    light_index: int
    origin: tuple[float, float, float]
    intensity: float


@dataclass
class SceneConfig:
    """Configuration for scene serialization.

    Attributes:
        materials: List of material configurations.
        spheres: List of sphere configurations.
        lights: List of light configurations.
    """

    materials: list[dict[str, Any]] = field(default_factory=list)
    spheres: list[dict[str, Any]] = field(default_factory=list)
    lights: list[dict[str, Any]] = field(default_factory=list)


def _as_triple(values: Any, name: str) -> tuple[float, float, float]:
    if len(values) != 3:
        raise ValueError(f"{name} must have 3 components, got {len(values)}")
    return (float(values[0]), float(values[1]), float(values[2]))


class SceneManager:
    """Scene manager coordinating spheres, lights, and materials.

    Attributes:
        materials: List of MaterialInfo for all registered materials.
        spheres: List of SphereInfo for all spheres in the scene.
        lights: List of LightInfo for all lights in the scene.

    Example:
        >>> scene = SceneManager()
        >>> mirror = scene.add_material((0.2, 0.2, 0.2), reflectance=0.8)
        >>> scene.add_sphere((0, 0, -5), 1.0, mirror)
        >>> scene.add_phong_sphere((2, 0, -6), 1.0, color=(0.1, 0.8, 0.1))
        >>> scene.add_light((5, 5, 0), 0.8)
    """

    def __init__(self) -> None:
        """Initialize an empty scene."""
        self.materials: list[MaterialInfo] = []
        self.spheres: list[SphereInfo] = []
        self.lights: list[LightInfo] = []
        self._clear_all()

    def _clear_all(self) -> None:
        """Clear all scene data including Taichi fields."""
        clear_scene()
        clear_materials()
        self.materials.clear()
        self.spheres.clear()
        self.lights.clear()

    def clear(self) -> None:
        """Clear the entire scene (spheres, lights and materials)."""
        self._clear_all()

    # =========================================================================
    # Materials
    # =========================================================================

    def add_material(
        self,
        color: tuple[float, float, float],
        phong_exp: float = MATERIAL_DEFAULTS["phong_exp"],
        diffuse_const: float = MATERIAL_DEFAULTS["diffuse_const"],
        ambient_const: float = MATERIAL_DEFAULTS["ambient_const"],
        specular_const: float = MATERIAL_DEFAULTS["specular_const"],
        reflectance: float = MATERIAL_DEFAULTS["reflectance"],
    ) -> int:
        """Add a Phong material to the scene.

        Args:
            color: Surface color as (R, G, B).
            phong_exp: Specular exponent (>= 0).
            diffuse_const: Diffuse weight in [0, 1].
            ambient_const: Ambient weight in [0, 1].
            specular_const: Specular weight in [0, 1].
            reflectance: Mirror reflection weight in [0, 1].

        Returns:
            The material id.

        Raises:
            RuntimeError: If the maximum number of materials is exceeded.
            ValueError: If the color is not a 3-component sequence or any
                parameter is out of range.
        """
        color = _as_triple(color, "color")
        material_id = add_phong_material(
            color,
            phong_exp=phong_exp,
            diffuse_const=diffuse_const,
            ambient_const=ambient_const,
            specular_const=specular_const,
            reflectance=reflectance,
        )

        info = MaterialInfo(
            material_id=material_id,
            params={
                "color": color,
                "phong_exp": phong_exp,
                "diffuse_const": diffuse_const,
                "ambient_const": ambient_const,
                "specular_const": specular_const,
                "reflectance": reflectance,
            },
        )
        self.materials.append(info)

        return material_id

    def get_material_count(self) -> int:
        """Get the total number of materials in the scene."""
        return get_material_count()

    def get_material_info(self, material_id: int) -> MaterialInfo | None:
        """Get information about a material by id, or None if not found."""
        if 0 <= material_id < len(self.materials):
            return self.materials[material_id]
        return None

    # =========================================================================
    # Primitives and Lights
    # =========================================================================

    def add_sphere(
        self,
        center: tuple[float, float, float],
        radius: float,
        material_id: int,
    ) -> int:
        """Add a sphere to the scene.

        Args:
            center: The center point of the sphere as (x, y, z).
            radius: The radius of the sphere (must be positive).
            material_id: The material id to assign to the sphere.

        Returns:
            The index of the added sphere.

        Raises:
            RuntimeError: If the maximum number of spheres is exceeded.
            ValueError: If material_id or radius is invalid.
        """
        if material_id < 0 or material_id >= get_material_count():
            raise ValueError(f"Invalid material_id: {material_id}")

        center_vec = vec3(center[0], center[1], center[2])
        sphere_index = add_sphere(center_vec, radius, material_id)

        info = SphereInfo(
            sphere_index=sphere_index,
            center=tuple(center),
            radius=radius,
            material_id=material_id,
        )
        self.spheres.append(info)

        return sphere_index

    def add_phong_sphere(
        self,
        center: tuple[float, float, float],
        radius: float,
        color: tuple[float, float, float],
        **material_params: float,
    ) -> tuple[int, int]:
        """Add a sphere with a new material.

        Args:
            center: The center point of the sphere as (x, y, z).
            radius: The radius of the sphere.
            color: The surface color as (R, G, B).
            **material_params: Any other add_material() keyword.

        Returns:
            Tuple of (sphere_index, material_id).
        """
        material_id = self.add_material(color, **material_params)
        sphere_index = self.add_sphere(center, radius, material_id)
        return sphere_index, material_id

    def add_light(
        self,
        origin: tuple[float, float, float],
        intensity: float,
    ) -> int:
        """Add a point light to the scene.

        Args:
            origin: The light position as (x, y, z).
            intensity: Scalar intensity (>= 0).

        Returns:
            The index of the added light.

        Raises:
            RuntimeError: If the maximum number of lights is exceeded.
            ValueError: If the intensity is negative.
        """
        origin_vec = vec3(origin[0], origin[1], origin[2])
        light_index = add_light(origin_vec, intensity)

        info = LightInfo(light_index=light_index, origin=tuple(origin), intensity=intensity)
        self.lights.append(info)

        return light_index

    # =========================================================================
    # Scene Queries
    # =========================================================================

    def get_sphere_count(self) -> int:
        """Get the number of spheres in the scene."""
        return get_sphere_count()

    def get_light_count(self) -> int:
        """Get the number of lights in the scene."""
        return get_light_count()

    # =========================================================================
    # Scene Serialization
    # =========================================================================

    def to_config(self) -> SceneConfig:
        """Export the scene to a configuration object."""
        config = SceneConfig()

        for mat in self.materials:
            mat_config = dict(mat.params)
            mat_config["color"] = list(mat_config["color"])
            config.materials.append(mat_config)

        for sphere in self.spheres:
            config.spheres.append(
                {
                    "center": list(sphere.center),
                    "radius": sphere.radius,
                    "material_id": sphere.material_id,
                }
            )

        for light in self.lights:
            config.lights.append(
                {
                    "origin": list(light.origin),
                    "intensity": light.intensity,
                }
            )

        return config

    def from_config(self, config: SceneConfig) -> None:
        """Load a scene from a configuration object.

        Every entry is checked before the current scene is touched, so an
        invalid configuration raises and leaves the scene as it was. Missing
        material parameters take their defaults.

        Args:
            config: The scene configuration to load.

        Raises:
            ValueError: If the configuration contains invalid data.
            RuntimeError: If the configuration exceeds a storage capacity.
        """
        materials = []
        for mat_config in config.materials:
            unknown = set(mat_config) - set(MATERIAL_DEFAULTS) - {"color"}
            if unknown:
                raise ValueError(f"Unknown material parameters: {sorted(unknown)}")
            color = _as_triple(mat_config.get("color", [1.0, 1.0, 1.0]), "color")
            params = {
                name: float(mat_config.get(name, default))
                for name, default in MATERIAL_DEFAULTS.items()
            }
            validate_phong_params(color, **params)
            materials.append((color, params))

        spheres = []
        for sphere_config in config.spheres:
            center = _as_triple(sphere_config.get("center", [0.0, 0.0, 0.0]), "center")
            radius = float(sphere_config.get("radius", 1.0))
            material_id = int(sphere_config.get("material_id", 0))
            if radius <= 0.0:
                raise ValueError(f"Sphere radius must be positive, got {radius}")
            if material_id < 0 or material_id >= len(materials):
                raise ValueError(f"Invalid material_id: {material_id}")
            spheres.append((center, radius, material_id))

        lights = []
        for light_config in config.lights:
            origin = _as_triple(light_config.get("origin", [0.0, 0.0, 0.0]), "origin")
            intensity = float(light_config.get("intensity", 1.0))
            if intensity < 0.0:
                raise ValueError(f"Light intensity must be non-negative, got {intensity}")
            lights.append((origin, intensity))

        for name, entries, limit in (
            ("materials", materials, MAX_MATERIALS),
            ("spheres", spheres, MAX_SPHERES),
            ("lights", lights, MAX_LIGHTS),
        ):
            if len(entries) > limit:
                raise RuntimeError(f"Maximum number of {name} ({limit}) exceeded")

        self.clear()
        for color, params in materials:
            self.add_material(color, **params)
        for center, radius, material_id in spheres:
            self.add_sphere(center, radius, material_id)
        for origin, intensity in lights:
            self.add_light(origin, intensity)

    def to_dict(self) -> dict[str, Any]:
        """Export the scene to a dictionary (for JSON serialization)."""
        config = self.to_config()
        return {
            "materials": config.materials,
            "spheres": config.spheres,
            "lights": config.lights,
        }

    def from_dict(self, data: dict[str, Any]) -> None:
        """Load a scene from a dictionary.

        Args:
            data: Dictionary with 'materials', 'spheres', 'lights' keys.
        """
        config = SceneConfig(
            materials=data.get("materials", []),
            spheres=data.get("spheres", []),
            lights=data.get("lights", []),
        )
        self.from_config(config)

    def save_json(self, filepath: str | Path) -> None:
        """Write the scene to a JSON file."""
        Path(filepath).write_text(json.dumps(self.to_dict(), indent=2))

    def load_json(self, filepath: str | Path) -> None:
        """Load the scene from a JSON file written by save_json()."""
        self.from_dict(json.loads(Path(filepath).read_text()))

    # =========================================================================
    # Capacity Information
    # =========================================================================

    @staticmethod
    def get_max_spheres() -> int:
        """Get the maximum number of spheres supported."""
        return MAX_SPHERES

    @staticmethod
    def get_max_lights() -> int:
        """Get the maximum number of lights supported."""
        return MAX_LIGHTS

    @staticmethod
    def get_max_materials() -> int:
        """Get the maximum number of materials supported."""
        return MAX_MATERIALS
