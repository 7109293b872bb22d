"""Pinhole camera model for primary ray generation.

The camera sits at the world origin and looks down the negative z axis. The
image plane is at z = -1; its half height is tan(fov / 2) and its half width
is that value times the aspect ratio. Pixel (0, 0) is the top-left corner of
the image, so the vertical coordinate is flipped when mapping rows onto the
plane.

For pixel (i, j) in a width x height image:

    x = tan(fov/2) * (2 * (i + 0.5) / width - 1) * (width / height)
    y = tan(fov/2) * -(2 * (j + 0.5) / height - 1)
    z = -1

and the ray direction is normalize(x, y, z). Rays go through pixel centers;
there is no jitter.

Example:
    >>> import math
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.camera.pinhole import PinholeCamera, setup_camera
    >>> setup_camera(PinholeCamera(fov=math.pi / 2))
"""

import math
from dataclasses import dataclass

import taichi as ti

from whitted.core.ray import Ray, make_ray, normalize, vec3

# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass
class PinholeCamera:
    """Configuration for the pinhole camera.

    Attributes:
        fov: Vertical field of view in radians, strictly between 0 and pi.
    """

    fov: float = math.pi / 2.0


# =============================================================================
# Taichi Fields for Camera State
# =============================================================================

# tan(fov / 2): half height of the image plane at unit distance
_fov_scale = ti.field(dtype=ti.f32, shape=())


def setup_camera(camera: PinholeCamera) -> None:
    """Initialize camera state from configuration.

    Must be called before rendering.

    Args:
        camera: Camera configuration.

    Raises:
        ValueError: If the field of view is not in (0, pi).
    """
    if not 0.0 < camera.fov < math.pi:
        raise ValueError(f"Field of view must be in (0, pi) radians, got {camera.fov}")
    _fov_scale[None] = math.tan(camera.fov / 2.0)


def get_fov_scale() -> float:
    """Get tan(fov / 2) for the current camera setup."""
    return float(_fov_scale[None])


# =============================================================================
# Ray Generation
# =============================================================================


@ti.func
def get_ray(pixel_i: ti.i32, pixel_j: ti.i32, width: ti.i32, height: ti.i32) -> Ray:
    """Generate the primary ray through the center of a pixel.

    Args:
        pixel_i: Pixel column (0 = left).
        pixel_j: Pixel row (0 = top).
        width: Image width in pixels.
        height: Image height in pixels.

    Returns:
        A Ray from the world origin with unit direction.
    """
    fw = ti.cast(width, ti.f32)
    fh = ti.cast(height, ti.f32)
    fov_scale = _fov_scale[None]

    x = fov_scale * (2.0 * (ti.cast(pixel_i, ti.f32) + 0.5) / fw - 1.0) * (fw / fh)
    y = fov_scale * -(2.0 * (ti.cast(pixel_j, ti.f32) + 0.5) / fh - 1.0)

    direction = normalize(vec3(x, y, -1.0))
    return make_ray(vec3(0.0, 0.0, 0.0), direction)

