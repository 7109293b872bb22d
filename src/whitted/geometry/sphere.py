"""Sphere primitive with geometric ray-sphere intersection.

The intersection uses the geometric formulation: project the vector from the
ray origin to the sphere center onto the ray direction, derive the squared
distance from the center to the ray's line, and compare it to the squared
radius. The two roots are then the projection minus and plus the half chord.

Root selection:
    - t0 (near root) when it lies in front of the origin;
    - otherwise t1 (far root), which happens when the origin is inside the
      sphere and the ray exits through the far side;
    - otherwise no hit, because the sphere is behind the origin.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.geometry.sphere import Sphere, intersect_sphere
    >>> # Use intersect_sphere within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from whitted.core.ray import dot, sub

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Sphere:
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere (vec3).
        radius: The radius of the sphere (positive float).
    """

    center: vec3
    radius: ti.f32


@ti.dataclass
class SphereIntersection:
    """Result of a ray-sphere intersection test.

    Attributes:
        hit: 1 if the ray intersects the sphere in front of its origin,
            0 otherwise.
        t: Distance along the ray to the selected root. Only valid if hit == 1.
    """

    hit: ti.i32
    t: ti.f32


@ti.func
def intersect_sphere(
    ray_origin: vec3,
    ray_direction: vec3,
    sphere: Sphere,
) -> SphereIntersection:
    """Test a ray against a sphere.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The ray direction. Must be unit length, since the
            projection onto it is used directly as a distance.
        sphere: The sphere to test against.

    Returns:
        A SphereIntersection. When hit == 1, t is the nearest positive root,
        or the far root if the origin lies inside the sphere.
    """
    to_center = sub(sphere.center, ray_origin)
    proj = dot(to_center, ray_direction)
    perp_sq = dot(to_center, to_center) - proj * proj
    radius_sq = sphere.radius * sphere.radius

    did_hit = 0
    hit_t = 0.0

    if perp_sq <= radius_sq:
        half_chord = ti.sqrt(radius_sq - perp_sq)
        t0 = proj - half_chord
        t1 = proj + half_chord

        if t0 > 0.0:
            did_hit = 1
            hit_t = t0
        elif t1 > 0.0:
            did_hit = 1
            hit_t = t1

    return SphereIntersection(hit=did_hit, t=hit_t)


@ti.func
def make_sphere(center: vec3, radius: ti.f32) -> Sphere:
    """Create a sphere from center and radius."""
    return Sphere(center=center, radius=radius)
