"""Geometry module: sphere primitive and ray-sphere intersection.

Intersection routines are Taichi functions (@ti.func) called from kernels.
"""

from .sphere import Sphere, SphereIntersection, intersect_sphere, make_sphere

__all__ = [
    "Sphere",
    "SphereIntersection",
    "intersect_sphere",
    "make_sphere",
]
