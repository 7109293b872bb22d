"""Preview module for output and visualization.

Components:
    export: 8-bit quantization, PNG and PPM export
    display: Matplotlib-based preview

Example:
    >>> from whitted.preview import save_png, show_preview
    >>> from whitted.core.renderer import FrameRenderer
    >>>
    >>> renderer = FrameRenderer(500, 500)
    >>> renderer.render()
    >>> save_png(renderer, "output.png")
"""

from whitted.preview.display import (
    process_image_for_display,
    show_preview,
)
from whitted.preview.export import (
    compute_rmse,
    quantize,
    save_png,
    save_png_from_array,
    save_ppm,
    save_ppm_from_array,
)

__all__ = [
    # Display functions
    "show_preview",
    "process_image_for_display",
    # Export functions
    "quantize",
    "save_png",
    "save_png_from_array",
    "save_ppm",
    "save_ppm_from_array",
    "compute_rmse",
]
