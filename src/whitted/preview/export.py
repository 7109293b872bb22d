"""Image export utilities for rendered frames.

The renderer emits unclamped linear colors. Every exporter goes through
``quantize``, which clamps each channel to [0, 1] and maps it to 8 bits with
floor(c * 255).

Supported formats:
    - PNG (8-bit RGB via Pillow)
    - PPM (plain-text ``P3``)

Example:
    >>> from whitted.core.renderer import FrameRenderer
    >>> from whitted.preview.export import save_png
    >>>
    >>> renderer = FrameRenderer(500, 500)
    >>> renderer.render()
    >>> save_png(renderer, "render.png")
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

if TYPE_CHECKING:
    from whitted.core.renderer import FrameRenderer


def quantize(image: npt.NDArray[np.floating]) -> npt.NDArray[np.uint8]:
    """Clamp colors to [0, 1] and quantize to 8 bits.

    Args:
        image: Linear image array of shape (..., 3). Any float dtype.

    Returns:
        uint8 array of the same shape, floor(clip(c, 0, 1) * 255) per channel.
    """
    clamped = np.clip(np.asarray(image, dtype=np.float64), 0.0, 1.0)
    return np.floor(clamped * 255.0).astype(np.uint8)


def save_png(renderer: FrameRenderer, filepath: str) -> None:
    """Save the rendered frame as an 8-bit PNG.

    Args:
        renderer: The FrameRenderer whose frame to save.
        filepath: Output file path (should end in .png).
    """
    save_png_from_array(renderer.get_image_numpy(), filepath)


def save_png_from_array(image: npt.NDArray[np.float32], filepath: str) -> None:
    """Save a (H, W, 3) linear image array as an 8-bit PNG."""
    pil_image = PILImage.fromarray(quantize(image))
    pil_image.save(filepath)


def save_ppm(renderer: FrameRenderer, filepath: str) -> None:
    """Save the rendered frame as a plain-text PPM (P3) file."""
    save_ppm_from_array(renderer.get_image_numpy(), filepath)


def save_ppm_from_array(image: npt.NDArray[np.float32], filepath: str) -> None:
    """Save a (H, W, 3) linear image array as a plain-text PPM (P3) file.

    The header is ``P3``, the width and height, and the maximum value 255,
    followed by one ``r g b`` line per pixel in row-major order.

    Args:
        image: Linear image array of shape (H, W, 3).
        filepath: Output file path.

    Raises:
        ValueError: If the array is not (H, W, 3).
    """
    if image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(f"Expected an image of shape (H, W, 3), got {image.shape}")

    height, width, _ = image.shape
    pixels = quantize(image).reshape(-1, 3)

    with open(filepath, "w", encoding="ascii") as f:
        f.write(f"P3\n{width} {height}\n255\n")
        np.savetxt(f, pixels, fmt="%d", delimiter=" ")


def compute_rmse(
    image_a: npt.NDArray[np.floating],
    image_b: npt.NDArray[np.floating],
) -> float:
    """Compute root mean squared error between two images.

    Args:
        image_a: First image array.
        image_b: Second image array (must have same shape as image_a).

    Returns:
        RMSE value (lower is more similar).

    Raises:
        ValueError: If image shapes don't match.
    """
    if image_a.shape != image_b.shape:
        raise ValueError(
            f"Image shapes must match: {image_a.shape} vs {image_b.shape}"
        )

    diff = image_a.astype(np.float64) - image_b.astype(np.float64)
    return float(np.sqrt(np.mean(diff**2)))
