"""Ray data structure and vector algebra for Taichi kernels.

This module provides the Ray dataclass and the named vector operations the
tracer is built on. Every operation is pure and returns a new vector; vectors
are Taichi value types so there is no aliasing between callers.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.core.ray import Ray, ray_at, vec3
    >>> @ti.kernel
    ... def point_on_ray() -> vec3:
    ...     ray = Ray(origin=vec3(0.0, 0.0, 0.0), direction=vec3(0.0, 0.0, -1.0))
    ...     return ray_at(ray, 5.0)
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction vector of the ray (vec3). Intersection
            queries assume unit length; callers normalize before tracing.
    """

    origin: vec3
    direction: vec3


@ti.func
def ray_at(ray: Ray, t: ti.f32) -> vec3:
    """Compute the point along the ray at parameter t.

    Args:
        ray: The ray to evaluate.
        t: The parameter value. Positive values are in front of the origin.

    Returns:
        The point ray.origin + t * ray.direction.
    """
    return ray.origin + t * ray.direction


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create a ray from origin and direction."""
    return Ray(origin=origin, direction=direction)


# =============================================================================
# Vector Algebra
# =============================================================================


@ti.func
def dot(a: vec3, b: vec3) -> ti.f32:
    """Compute the dot product of two vectors."""
    return a.x * b.x + a.y * b.y + a.z * b.z


@ti.func
def scale(v: vec3, s: ti.f32) -> vec3:
    """Multiply every component of a vector by a scalar."""
    return vec3(v.x * s, v.y * s, v.z * s)


@ti.func
def add(a: vec3, b: vec3) -> vec3:
    """Component-wise sum of two vectors."""
    return vec3(a.x + b.x, a.y + b.y, a.z + b.z)


@ti.func
def sub(a: vec3, b: vec3) -> vec3:
    """Component-wise difference a - b."""
    return vec3(a.x - b.x, a.y - b.y, a.z - b.z)


@ti.func
def negate(v: vec3) -> vec3:
    """Flip the sign of every component."""
    return vec3(-v.x, -v.y, -v.z)


@ti.func
def magnitude(v: vec3) -> ti.f32:
    """Compute the Euclidean length of a vector.

    Args:
        v: The input vector.

    Returns:
        sqrt(dot(v, v)).
    """
    return ti.sqrt(dot(v, v))


@ti.func
def normalize(v: vec3) -> vec3:
    """Scale a vector to unit length.

    The vector must be non-zero. A zero vector divides by zero and yields
    non-finite components; callers are responsible for never passing one.

    Args:
        v: The input vector.

    Returns:
        A unit vector in the same direction as v.
    """
    return scale(v, 1.0 / magnitude(v))


@ti.func
def reflect(v: vec3, n: vec3) -> vec3:
    """Reflect a vector about a unit normal.

    Uses the mirror convention 2 * dot(v, n) * n - v: a vector pointing away
    from the surface (for example toward a light) is mirrored to the other
    side of the normal and still points away from the surface. The normal
    component is preserved and the tangential component flipped.

    Args:
        v: The vector to reflect.
        n: The surface normal (must be unit length).

    Returns:
        The reflected vector.
    """
    return sub(scale(n, 2.0 * dot(v, n)), v)
