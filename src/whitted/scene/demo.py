"""Demo scene: reflective spheres on a large ground sphere.

The scene consists of:
- A huge grey ground sphere below the camera
- A red, a mirror-like and a blue sphere in front of the camera
- Two white point lights above and to the sides

The camera sits at the origin looking down -z with a 90 degree field of view.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.camera.pinhole import setup_camera
    >>> from whitted.scene.demo import create_demo_scene
    >>>
    >>> scene, camera = create_demo_scene()
    >>> setup_camera(camera)
"""

import math
from dataclasses import dataclass

from whitted.camera.pinhole import PinholeCamera
from whitted.scene.manager import SceneManager


@dataclass
class DemoSceneParams:
    """Parameters for the demo scene.

    Attributes:
        light_intensity: Intensity of each of the two point lights.
        mirror_reflectance: Reflectance of the center sphere.
        fov: Vertical field of view of the camera in radians.
    """

    light_intensity: float = 0.6
    mirror_reflectance: float = 0.8
    fov: float = math.pi / 2.0


def create_demo_scene(
    params: DemoSceneParams | None = None,
) -> tuple[SceneManager, PinholeCamera]:
    """Create the demo scene and its camera.

    Args:
        params: Optional scene parameters. Defaults are used if None.

    Returns:
        Tuple of (scene, camera).
    """
    if params is None:
        params = DemoSceneParams()

    scene = SceneManager()

    scene.add_phong_sphere(
        (0.0, -1001.0, -5.0),
        1000.0,
        color=(0.5, 0.5, 0.5),
        phong_exp=10.0,
        diffuse_const=0.8,
        ambient_const=0.05,
        specular_const=0.1,
        reflectance=0.2,
    )
    scene.add_phong_sphere(
        (-2.2, 0.0, -6.0),
        1.0,
        color=(0.9, 0.2, 0.2),
        phong_exp=50.0,
        diffuse_const=0.9,
        ambient_const=0.05,
        specular_const=0.6,
        reflectance=0.1,
    )
    scene.add_phong_sphere(
        (0.0, 0.0, -5.0),
        1.0,
        color=(0.2, 0.2, 0.2),
        phong_exp=200.0,
        diffuse_const=0.3,
        ambient_const=0.0,
        specular_const=1.0,
        reflectance=params.mirror_reflectance,
    )
    scene.add_phong_sphere(
        (2.2, 0.0, -6.0),
        1.0,
        color=(0.2, 0.3, 0.9),
        phong_exp=30.0,
        diffuse_const=0.9,
        ambient_const=0.05,
        specular_const=0.5,
        reflectance=0.1,
    )

    scene.add_light((-10.0, 10.0, 0.0), params.light_intensity)
    scene.add_light((10.0, 8.0, -2.0), params.light_intensity)

    camera = PinholeCamera(fov=params.fov)

    return scene, camera
