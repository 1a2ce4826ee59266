"""Matplotlib-based preview display for rendered images.

Features:
    - Static preview window for a finished render
    - Side-by-side comparison with an amplified difference view

Example:
    >>> from pathtracer.preview.display import show_preview
    >>> from pathtracer.core.scheduler import render_image
    >>>
    >>> image = render_image(camera, scene, 300, 200)
    >>> show_preview(image, title="Random spheres")
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from pathtracer.preview.export import compute_rmse, image_to_rgb_array

if TYPE_CHECKING:
    from pathtracer.core.image import Image


def show_preview(
    image: Image,
    *,
    title: str | None = None,
    figsize: tuple[float, float] = (8, 8),
    block: bool = True,
) -> None:
    """Display a rendered image as a Matplotlib figure.

    Args:
        image: The rendered image.
        title: Custom title (default shows the image dimensions).
        figsize: Figure size in inches (width, height).
        block: Whether to block execution until figure is closed.
    """
    import matplotlib.pyplot as plt

    fig, ax = plt.subplots(1, 1, figsize=figsize)
    ax.imshow(image_to_rgb_array(image))
    ax.axis("off")
    ax.set_title(title if title is not None else f"Render Preview - {image.width}x{image.height}")

    plt.tight_layout()
    plt.show(block=block)


def show_comparison(
    image_a: Image,
    image_b: Image,
    *,
    labels: tuple[str, str] = ("A", "B"),
    diff_scale: float = 10.0,
    figsize: tuple[float, float] = (16, 6),
    block: bool = True,
) -> float:
    """Display two renders side by side with their amplified difference.

    Returns:
        RMSE between the two images, in byte units.
    """
    import matplotlib.pyplot as plt

    rmse = compute_rmse(image_a, image_b)

    display_a = image_to_rgb_array(image_a)
    display_b = image_to_rgb_array(image_b)
    diff = np.abs(display_a.astype(np.float64) - display_b.astype(np.float64)) / 255.0
    diff_amplified = np.clip(diff * diff_scale, 0.0, 1.0)

    fig, axes = plt.subplots(1, 3, figsize=figsize)

    axes[0].imshow(display_a)
    axes[0].set_title(labels[0])
    axes[0].axis("off")

    axes[1].imshow(display_b)
    axes[1].set_title(labels[1])
    axes[1].axis("off")

    axes[2].imshow(diff_amplified)
    axes[2].set_title(f"Difference ({diff_scale}x) - RMSE: {rmse:.3f}")
    axes[2].axis("off")

    plt.tight_layout()
    plt.show(block=block)

    return rmse
