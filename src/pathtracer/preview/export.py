"""Image export utilities for rendered images.

This module converts the framebuffer (bottom-up rows of B, G, R bytes) into
the representations expected by Pillow and Matplotlib, and saves rendered
images to files.

Supported formats:
    - BMP (the framebuffer's native bottom-up BGR layout)
    - PNG, or anything else Pillow can write, chosen by file extension

Example:
    >>> from pathtracer.preview.export import save_image
    >>> from pathtracer.core.scheduler import render_image
    >>>
    >>> image = render_image(camera, scene, 300, 200)
    >>> save_image(image, "spheres.bmp")
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

if TYPE_CHECKING:
    from pathtracer.core.image import Image


def to_pil_image(image: Image) -> PILImage.Image:
    """Convert a rendered image into a Pillow RGB image.

    The buffer is decoded with the raw "BGR" mode and a negative orientation,
    so bottom-up rows come out top-to-bottom without an intermediate copy.

    Args:
        image: The rendered image.

    Returns:
        An RGB Pillow image of the same dimensions.
    """
    return PILImage.frombytes(
        "RGB", (image.width, image.height), image.to_bytes(), "raw", "BGR", 0, -1
    )


def image_to_rgb_array(image: Image) -> npt.NDArray[np.uint8]:
    """Convert a rendered image to a top-to-bottom RGB uint8 array.

    Returns:
        Array of shape (height, width, 3), row 0 being the top image row,
        ready for Matplotlib's imshow.
    """
    return np.ascontiguousarray(image.pixels[::-1, :, ::-1])


def save_image(image: Image, filepath: str | os.PathLike[str]) -> None:
    """Save a rendered image; the format follows the file extension.

    Args:
        image: The rendered image.
        filepath: Output file path (e.g. "output.bmp" or "output.png").
    """
    to_pil_image(image).save(filepath)


def compute_rmse(
    image_a: Image | npt.NDArray[np.generic],
    image_b: Image | npt.NDArray[np.generic],
) -> float:
    """Compute root mean squared error between two images.

    Args:
        image_a: First image, as a rendered Image or an array.
        image_b: Second image (must have the same shape as image_a).

    Returns:
        RMSE value in byte units for Images (lower is more similar).

    Raises:
        ValueError: If image shapes don't match.
    """
    a = _as_array(image_a)
    b = _as_array(image_b)
    if a.shape != b.shape:
        raise ValueError(f"Image shapes must match: {a.shape} vs {b.shape}")

    diff = a.astype(np.float64) - b.astype(np.float64)
    return float(np.sqrt(np.mean(diff**2)))


def _as_array(image: Image | npt.NDArray[np.generic]) -> npt.NDArray[np.generic]:
    if isinstance(image, np.ndarray):
        return image
    return image.pixels
