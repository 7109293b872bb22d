"""Camera module for primary ray generation.

Components:
    pinhole: Pinhole camera at the origin looking down -z
"""

from .pinhole import PinholeCamera, get_fov_scale, get_ray, setup_camera

__all__ = [
    "PinholeCamera",
    "setup_camera",
    "get_ray",
    "get_fov_scale",
]
