"""Frame renderer wrapping the shading kernels.

This module provides a convenient wrapper around the render target functions
that supports:
- Rendering a whole frame in one call
- Rendering in row bands with progress callbacks for UI updates
- Reading the result back as float or 8-bit arrays

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.camera.pinhole import setup_camera
    >>> from whitted.core.renderer import FrameRenderer
    >>> from whitted.scene.demo import create_demo_scene
    >>>
    >>> scene, camera = create_demo_scene()
    >>> setup_camera(camera)
    >>>
    >>> renderer = FrameRenderer(500, 500)
    >>> renderer.render()
    >>> image = renderer.get_image_numpy()
"""

from __future__ import annotations

from collections.abc import Callable, Generator

import numpy as np
import numpy.typing as npt

from whitted.core.shading import (
    clear_render_target,
    get_image_numpy,
    get_pixels,
    render_rows,
    setup_render_target,
)

# Type alias for progress callback
# Callback receives (rows_done, total_rows)
ProgressCallback = Callable[[int, int], None]


class FrameRenderer:
    """Render a full frame, optionally in row bands.

    The renderer keeps its own width/height and delegates to the global
    render target (Taichi fields).

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
    """

    def __init__(self, width: int, height: int) -> None:
        """Initialize the renderer.

        Args:
            width: Image width in pixels (max 2048).
            height: Image height in pixels (max 2048).

        Raises:
            ValueError: If dimensions are invalid.
        """
        self._width = width
        self._height = height
        self._rows_done = 0
        setup_render_target(width, height)

    @property
    def width(self) -> int:
        """Get the image width."""
        return self._width

    @property
    def height(self) -> int:
        """Get the image height."""
        return self._height

    @property
    def rows_done(self) -> int:
        """Number of rows shaded since the last reset."""
        return self._rows_done

    @property
    def is_complete(self) -> bool:
        """Whether every row has been shaded."""
        return self._rows_done >= self._height

    def reset(self) -> None:
        """Clear the color buffer without changing the dimensions."""
        clear_render_target()
        self._rows_done = 0

    def resize(self, width: int, height: int) -> None:
        """Resize the render target and clear it.

        Raises:
            ValueError: If dimensions are invalid.
        """
        setup_render_target(width, height)
        self._width = width
        self._height = height
        self._rows_done = 0

    def render(
        self,
        rows_per_batch: int | None = None,
        callback: ProgressCallback | None = None,
    ) -> None:
        """Render the frame.

        Args:
            rows_per_batch: Rows to shade per kernel launch. None renders the
                whole frame in one launch.
            callback: Optional callback called after each batch with
                (rows_done, height).

        Example:
            >>> def progress(done, total):
            ...     print(f"Rows: {done}/{total}")
            >>> renderer.render(rows_per_batch=50, callback=progress)
        """
        for rows_done, total in self.render_progressive(rows_per_batch):
            if callback is not None:
                callback(rows_done, total)

    def render_progressive(
        self,
        rows_per_batch: int | None = None,
    ) -> Generator[tuple[int, int], None, None]:
        """Render the frame, yielding progress after each batch.

        Always starts from the top row, so rendering twice produces the same
        buffer.

        Args:
            rows_per_batch: Rows to shade per kernel launch. None renders the
                whole frame in one launch.

        Yields:
            Tuple of (rows_done, height).

        Raises:
            ValueError: If rows_per_batch is not positive.
        """
        batch = self._height if rows_per_batch is None else rows_per_batch
        if batch <= 0:
            raise ValueError(f"rows_per_batch must be positive, got {rows_per_batch}")

        self._rows_done = 0
        while self._rows_done < self._height:
            row_end = min(self._rows_done + batch, self._height)
            render_rows(self._rows_done, row_end)
            self._rows_done = row_end
            yield (self._rows_done, self._height)

    def get_image_numpy(self) -> npt.NDArray[np.float32]:
        """Get the rendered image, unclamped.

        Returns:
            NumPy array of shape (height, width, 3) with dtype float32.
        """
        return get_image_numpy()

    def get_pixels(self) -> npt.NDArray[np.float32]:
        """Get the rendered colors as a row-major (width * height, 3) array."""
        return get_pixels()

    def get_image_uint8(self) -> npt.NDArray[np.uint8]:
        """Get the rendered image clamped and quantized to 8 bits."""
        from whitted.preview.export import quantize

        return quantize(self.get_image_numpy())

    def save_image(self, filepath: str) -> None:
        """Save the rendered image, PPM for ``.ppm`` paths and PNG otherwise."""
        from whitted.preview.export import save_png_from_array, save_ppm_from_array

        if filepath.lower().endswith(".ppm"):
            save_ppm_from_array(self.get_image_numpy(), filepath)
        else:
            save_png_from_array(self.get_image_numpy(), filepath)

    def __repr__(self) -> str:
        """Return a string representation of the renderer state."""
        return (
            f"FrameRenderer(width={self.width}, height={self.height}, "
            f"rows_done={self.rows_done})"
        )
