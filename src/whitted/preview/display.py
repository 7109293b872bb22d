"""Matplotlib-based preview display for rendered frames.

Example:
    >>> from whitted.core.renderer import FrameRenderer
    >>> from whitted.preview.display import show_preview
    >>>
    >>> renderer = FrameRenderer(500, 500)
    >>> renderer.render()
    >>> show_preview(renderer)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt

if TYPE_CHECKING:
    from whitted.core.renderer import FrameRenderer


def process_image_for_display(
    image: npt.NDArray[np.float32],
    gamma: float = 1.0,
) -> npt.NDArray[np.float32]:
    """Map a rendered frame to the [0, 1] range Matplotlib expects.

    Rendered colors are already display values and are not clamped by the
    renderer, so the sky below the horizon is negative and bright highlights
    exceed 1. Both are clipped here, matching what the exporters write. A
    gamma other than 1.0 brightens (gamma > 1) or darkens (gamma < 1) the
    clipped values as ``c ** (1 / gamma)``.

    Args:
        image: Rendered image array of shape (H, W, 3). Not modified.
        gamma: Display gamma. 1.0 shows the frame as exported.

    Returns:
        New float32 image in the [0, 1] range.
    """
    result = np.clip(image, 0.0, 1.0)
    if gamma != 1.0:
        result = np.power(result, 1.0 / gamma)
    return result.astype(np.float32)


def show_preview(
    renderer: FrameRenderer,
    *,
    gamma: float = 1.0,
    title: str | None = None,
    figsize: tuple[float, float] = (8, 8),
    block: bool = True,
) -> None:
    """Display the current frame as a Matplotlib figure.

    Args:
        renderer: The FrameRenderer instance to display.
        gamma: Gamma correction value.
        title: Custom title (default shows the image size).
        figsize: Figure size in inches (width, height).
        block: Whether to block execution until figure is closed.
    """
    import matplotlib.pyplot as plt

    display_image = process_image_for_display(renderer.get_image_numpy(), gamma=gamma)

    fig, ax = plt.subplots(1, 1, figsize=figsize)

    ax.imshow(display_image)
    ax.axis("off")

    if title is None:
        title = f"Render Preview - {renderer.width}x{renderer.height}"
    ax.set_title(title)

    plt.tight_layout()
    plt.show(block=block)
