"""Whitted-style shading and frame rendering.

This module implements the recursive illumination model and the frame loop
that shades one primary ray per pixel.

For a ray that hits a surface the outgoing color is:

    color * diffuse * diffuse_const
    + white * specular * specular_const
    + color * ambient_const
    + shade(reflection_ray) * reflectance

where diffuse and specular are summed over the lights that are not occluded
from the hit point. A ray that misses, or that would exceed MAX_DEPTH, returns
the sky gradient background.

Taichi functions cannot recurse. Since every hit spawns exactly one
reflection ray, the recursion is a chain and is evaluated as a loop that
carries the product of reflectances along the chain. The result is the same
as the recursive formula.

Key constants:
    MAX_DEPTH: Number of surface interactions before the background is used.
    DRAW_DISTANCE: Visibility bound for camera and reflection rays.
    SHADOW_BIAS: Offset along the normal applied to secondary ray origins.
        Without it secondary rays re-hit their own surface (shadow acne).

Example:
    >>> import math
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.camera.pinhole import PinholeCamera, setup_camera
    >>> from whitted.core.shading import render_frame, setup_render_target
    >>> from whitted.scene.demo import create_demo_scene
    >>>
    >>> scene, camera = create_demo_scene()
    >>> setup_camera(camera)
    >>> setup_render_target(500, 500)
    >>> render_frame()
"""

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from whitted.camera.pinhole import get_ray
from whitted.core.ray import (
    add,
    dot,
    magnitude,
    negate,
    normalize,
    reflect,
    scale,
    sub,
)
from whitted.materials.phong import get_material, specular_term
from whitted.scene.intersection import (
    SceneHitRecord,
    intersect_scene,
    light_intensities,
    light_origins,
    num_lights,
)

# Type alias for 3D vectors
vec3 = tm.vec3

# =============================================================================
# Rendering Constants
# =============================================================================

# Recursion limit: shade() at this depth returns the background
MAX_DEPTH = 4

# Maximum distance at which geometry is visible
DRAW_DISTANCE = 1000.0

# Offset along the surface normal for shadow and reflection ray origins
SHADOW_BIAS = 1e-3


# =============================================================================
# Render Target (Image Buffer)
# =============================================================================

# Maximum supported image dimensions (preallocated to avoid kernel recompilation)
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

# Image dimensions (actual active size)
_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())

# Color buffer indexed [column, row], row 0 at the top of the image
_color_buffer = ti.Vector.field(3, dtype=ti.f32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

# Flag to track if render target is initialized
_render_target_initialized = ti.field(dtype=ti.i32, shape=())


def setup_render_target(width: int, height: int) -> None:
    """Initialize the render target.

    Sets the active image dimensions and clears the buffer.

    Args:
        width: Image width in pixels (1..MAX_IMAGE_WIDTH).
        height: Image height in pixels (1..MAX_IMAGE_HEIGHT).

    Raises:
        ValueError: If dimensions are not positive or exceed the maximum.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )

    _image_width[None] = width
    _image_height[None] = height
    _render_target_initialized[None] = 1

    clear_render_target()


def clear_render_target() -> None:
    """Clear the color buffer to zero."""
    _color_buffer.fill(0.0)


def get_image_dimensions() -> tuple[int, int]:
    """Get the current render target dimensions.

    Returns:
        Tuple of (width, height).
    """
    return int(_image_width[None]), int(_image_height[None])


def _check_render_target_initialized() -> None:
    """Check if render target is initialized and raise if not."""
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")


# =============================================================================
# Shading
# =============================================================================


@ti.func
def background_color(direction: vec3) -> vec3:
    """Sky gradient returned for rays that miss or exceed the depth limit."""
    return vec3(direction.y, direction.y, direction.y)


@ti.func
def offset_point(point: vec3, normal: vec3) -> vec3:
    """Push a hit point off its surface along the outward normal."""
    return add(point, scale(normal, SHADOW_BIAS))


@ti.func
def light_contributions(point: vec3, normal: vec3, view_direction: vec3, phong_exp: ti.f32):
    """Gather diffuse and specular light at a surface point.

    For each light a shadow ray is cast from the biased point toward the
    light. If anything lies between them the light contributes nothing.

    Args:
        point: The hit point on the surface.
        normal: Outward unit normal at the hit point.
        view_direction: Direction of the incoming ray (camera toward surface).
        phong_exp: Specular exponent of the surface material.

    Returns:
        A tuple of (diffuse, specular) sums over all unoccluded lights.
    """
    origin = offset_point(point, normal)
    diffuse = 0.0
    specular = 0.0

    n_lights = num_lights[None]
    for k in range(n_lights):
        to_light = sub(light_origins[k], origin)
        light_distance = magnitude(to_light)
        light_dir = normalize(to_light)

        shadow = intersect_scene(origin, light_dir, light_distance)
        if shadow.hit == 0:
            intensity = light_intensities[k]
            diffuse += ti.max(0.0, dot(light_dir, normal)) * intensity
            alignment = dot(reflect(light_dir, normal), view_direction)
            specular += specular_term(alignment, phong_exp) * intensity

    return diffuse, specular


@ti.func
def shade_local(view_direction: vec3, rec: SceneHitRecord) -> vec3:
    """Compute the non-reflected part of the shading equation for a hit.

    Args:
        view_direction: Direction of the ray that produced the hit.
        rec: The hit record.

    Returns:
        Diffuse + specular + ambient color at the hit.
    """
    mat = get_material(rec.material_id)
    diffuse, specular = light_contributions(rec.point, rec.normal, view_direction, mat.phong_exp)

    white = vec3(1.0, 1.0, 1.0)
    return (
        mat.color * diffuse * mat.diffuse_const
        + white * specular * mat.specular_const
        + mat.color * mat.ambient_const
    )


@ti.func
def reflection_direction(direction: vec3, normal: vec3) -> vec3:
    """Mirror an incoming ray direction about the surface normal."""
    return normalize(negate(reflect(direction, normal)))


@ti.func
def shade(ray_origin: vec3, ray_direction: vec3) -> vec3:
    """Evaluate the Whitted shading equation for a ray at depth 0.

    Args:
        ray_origin: Origin of the ray.
        ray_direction: Unit direction of the ray.

    Returns:
        The traced color. Channels are not clamped.
    """
    origin = ray_origin
    direction = ray_direction

    color = vec3(0.0, 0.0, 0.0)
    # Product of the reflectances along the chain so far
    weight = 1.0

    # Active flag for chain continuation (Taichi doesn't support break in ti.func loops)
    active = 1

    for _ in range(MAX_DEPTH):
        if active == 1:
            rec = intersect_scene(origin, direction, DRAW_DISTANCE)

            if rec.hit == 0:
                active = 0
            else:
                color += weight * shade_local(direction, rec)
                weight *= get_material(rec.material_id).reflectance

                origin = offset_point(rec.point, rec.normal)
                direction = reflection_direction(direction, rec.normal)

    # Terminal case: either a miss or the depth limit; direction is the last ray's
    color += weight * background_color(direction)

    return color


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _render_rows(width: ti.i32, height: ti.i32, row_start: ti.i32, row_end: ti.i32):
    """Shade every pixel in rows [row_start, row_end).

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
        row_start: First row to render (inclusive).
        row_end: Last row to render (exclusive).
    """
    for i, j in ti.ndrange(width, (row_start, row_end)):
        ray = get_ray(i, j, width, height)
        _color_buffer[i, j] = shade(ray.origin, ray.direction)


@ti.kernel
def _render_single_pixel(pixel_i: ti.i32, pixel_j: ti.i32, width: ti.i32, height: ti.i32) -> vec3:
    """Shade a single pixel without touching the color buffer."""
    ray = get_ray(pixel_i, pixel_j, width, height)
    return shade(ray.origin, ray.direction)


# =============================================================================
# Public Rendering API
# =============================================================================


def render_pixel(pixel_i: int, pixel_j: int) -> tuple[float, float, float]:
    """Shade a single pixel of the current render target.

    Args:
        pixel_i: Pixel column (0 = left).
        pixel_j: Pixel row (0 = top).

    Returns:
        Tuple of (R, G, B) color values.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    color = _render_single_pixel(pixel_i, pixel_j, width, height)

    return (float(color[0]), float(color[1]), float(color[2]))


def render_rows(row_start: int, row_end: int) -> None:
    """Shade the rows [row_start, row_end) into the color buffer.

    Raises:
        RuntimeError: If render target has not been set up.
        ValueError: If the row range is outside the image.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    if not 0 <= row_start <= row_end <= height:
        raise ValueError(f"Row range [{row_start}, {row_end}) outside image of height {height}")

    _render_rows(width, height, row_start, row_end)


def render_frame() -> None:
    """Shade every pixel of the render target once.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    _, height = get_image_dimensions()
    render_rows(0, height)


def get_image_numpy() -> npt.NDArray[np.float32]:
    """Get the rendered image as a NumPy array.

    Values are returned as traced: they are not clamped, so bright specular
    highlights may exceed 1.

    Returns:
        NumPy array of shape (height, width, 3), row 0 at the top.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()

    full_image = _color_buffer.to_numpy()
    image = full_image[:width, :height, :]

    # Transpose from (width, height, 3) to (height, width, 3) for standard image format
    image = np.transpose(image, (1, 0, 2))

    return np.ascontiguousarray(image, dtype=np.float32)


def get_pixels() -> npt.NDArray[np.float32]:
    """Get the rendered colors as a row-major sequence.

    Returns:
        NumPy array of shape (width * height, 3); index row * width + column.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    return get_image_numpy().reshape(-1, 3)
