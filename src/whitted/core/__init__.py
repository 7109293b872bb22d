"""Core rendering module.

Components:
    ray: Ray data structure and vector algebra
    shading: Whitted shading, render target and frame kernels
    renderer: FrameRenderer wrapper with row-band progress

All per-ray work runs inside Taichi kernels.
"""

from .ray import (
    Ray,
    add,
    dot,
    magnitude,
    make_ray,
    negate,
    normalize,
    ray_at,
    reflect,
    scale,
    sub,
    vec3,
)

# Note: shading and renderer are NOT imported here to avoid circular imports.
# Import directly from whitted.core.shading or whitted.core.renderer when needed.

__all__ = [
    "Ray",
    "ray_at",
    "make_ray",
    "vec3",
    "dot",
    "scale",
    "add",
    "sub",
    "negate",
    "magnitude",
    "normalize",
    "reflect",
]
