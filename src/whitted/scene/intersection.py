"""Scene storage and nearest-hit resolution.

Spheres and point lights live in Taichi fields laid out as Structure of
Arrays. The resolver scans every sphere in insertion order and keeps the
closest hit strictly inside the distance bound; there is no acceleration
structure.

The same resolver serves two queries:
    - visibility: bound is the draw distance, the hit is shaded;
    - shadow: bound is the distance to a light, only ``hit`` is inspected.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.scene.intersection import add_light, add_sphere, clear_scene
    >>> clear_scene()
    >>> add_sphere(vec3(0, 0, -5), 1.0, material_id=0)
    >>> add_light(vec3(5, 5, 0), 1.0)
    >>> # Use intersect_scene within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from whitted.core.ray import add, normalize, scale, sub
from whitted.geometry.sphere import Sphere, intersect_sphere

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class SceneHitRecord:
    """Record of a ray-scene intersection with material information.

    Attributes:
        hit: Whether the ray intersected any sphere (1 if hit, 0 if miss).
        t: Distance along the ray to the hit. Only valid if hit == 1.
        point: World-space hit point. Only valid if hit == 1.
        normal: Outward unit normal of the hit sphere at the point. Points
            away from the center even when the ray started inside.
            Only valid if hit == 1.
        material_id: Material id of the hit sphere. -1 on a miss.
    """

    hit: ti.i32
    t: ti.f32
    point: vec3
    normal: vec3
    material_id: ti.i32


# Maximum number of primitives and lights supported in the scene
MAX_SPHERES = 1024
MAX_LIGHTS = 64

# Sphere storage: Structure of Arrays layout
sphere_centers = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SPHERES)
sphere_radii = ti.field(dtype=ti.f32, shape=MAX_SPHERES)
sphere_material_ids = ti.field(dtype=ti.i32, shape=MAX_SPHERES)
num_spheres = ti.field(dtype=ti.i32, shape=())

# Point light storage
light_origins = ti.Vector.field(3, dtype=ti.f32, shape=MAX_LIGHTS)
light_intensities = ti.field(dtype=ti.f32, shape=MAX_LIGHTS)
num_lights = ti.field(dtype=ti.i32, shape=())


def clear_scene() -> None:
    """Remove all spheres and lights from the scene.

    Resets the counts to zero. The field data is overwritten as new entries
    are added.
    """
    num_spheres[None] = 0
    num_lights[None] = 0


def add_sphere(center: vec3, radius: float, material_id: int = 0) -> int:
    """Add a sphere to the scene.

    Args:
        center: The center point of the sphere.
        radius: The radius of the sphere (must be positive).
        material_id: The material id to associate with this sphere.

    Returns:
        The index of the added sphere.

    Raises:
        RuntimeError: If the maximum number of spheres is exceeded.
        ValueError: If the radius is not positive.
    """
    if radius <= 0.0:
        raise ValueError(f"Sphere radius must be positive, got {radius}")
    idx = num_spheres[None]
    if idx >= MAX_SPHERES:
        raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")
    sphere_centers[idx] = center
    sphere_radii[idx] = radius
    sphere_material_ids[idx] = material_id
    num_spheres[None] = idx + 1
    return idx


def add_light(origin: vec3, intensity: float) -> int:
    """Add a point light to the scene.

    Args:
        origin: World-space position of the light.
        intensity: Scalar intensity (must be non-negative).

    Returns:
        The index of the added light.

    Raises:
        RuntimeError: If the maximum number of lights is exceeded.
        ValueError: If the intensity is negative.
    """
    if intensity < 0.0:
        raise ValueError(f"Light intensity must be non-negative, got {intensity}")
    idx = num_lights[None]
    if idx >= MAX_LIGHTS:
        raise RuntimeError(f"Maximum number of lights ({MAX_LIGHTS}) exceeded")
    light_origins[idx] = origin
    light_intensities[idx] = intensity
    num_lights[None] = idx + 1
    return idx


def get_sphere_count() -> int:
    """Get the number of spheres in the scene."""
    return int(num_spheres[None])


def get_light_count() -> int:
    """Get the number of lights in the scene."""
    return int(num_lights[None])


@ti.func
def _make_miss_record() -> SceneHitRecord:
    """Create a SceneHitRecord indicating no intersection."""
    return SceneHitRecord(
        hit=0,
        t=0.0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        material_id=-1,
    )


@ti.func
def intersect_scene(
    ray_origin: vec3,
    ray_direction: vec3,
    max_distance: ti.f32,
) -> SceneHitRecord:
    """Find the closest sphere hit by a ray.

    Tests every sphere and keeps the smallest distance strictly below the
    current bound, which starts at max_distance. On exactly equal distances
    the sphere added first wins.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction of the ray.
        max_distance: Hits at or beyond this distance are ignored.

    Returns:
        A SceneHitRecord for the closest hit, or a miss record.
    """
    closest_t = max_distance
    closest_index = -1

    n_spheres = num_spheres[None]
    for i in range(n_spheres):
        sphere = Sphere(center=sphere_centers[i], radius=sphere_radii[i])
        rec = intersect_sphere(ray_origin, ray_direction, sphere)
        if rec.hit == 1 and rec.t < closest_t:
            closest_t = rec.t
            closest_index = i

    result = _make_miss_record()
    if closest_index >= 0:
        point = add(ray_origin, scale(ray_direction, closest_t))
        result = SceneHitRecord(
            hit=1,
            t=closest_t,
            point=point,
            normal=normalize(sub(point, sphere_centers[closest_index])),
            material_id=sphere_material_ids[closest_index],
        )

    return result
