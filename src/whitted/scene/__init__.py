"""Scene module for scene storage and ray-scene queries.

Components:
    intersection: Sphere/light field storage and the nearest-hit resolver
    manager: SceneManager for building and serializing scenes
    demo: Demo scene factory
"""

from .demo import DemoSceneParams, create_demo_scene
from .intersection import (
    MAX_LIGHTS,
    MAX_SPHERES,
    SceneHitRecord,
    add_light,
    add_sphere,
    clear_scene,
    get_light_count,
    get_sphere_count,
    intersect_scene,
)
from .manager import (
    MATERIAL_DEFAULTS,
    LightInfo,
    MaterialInfo,
    SceneConfig,
    SceneManager,
    SphereInfo,
)

__all__ = [
    # Intersection module
    "SceneHitRecord",
    "add_sphere",
    "add_light",
    "clear_scene",
    "get_sphere_count",
    "get_light_count",
    "intersect_scene",
    "MAX_SPHERES",
    "MAX_LIGHTS",
    # Manager module
    "SceneManager",
    "MaterialInfo",
    "SphereInfo",
    "LightInfo",
    "SceneConfig",
    "MATERIAL_DEFAULTS",
    # Demo module
    "DemoSceneParams",
    "create_demo_scene",
]
