"""Preview module for output and visualization.

Components:
    export: Pillow conversion and file export (BMP, PNG)
    display: Matplotlib-based static preview
    live: Progress observer and live Matplotlib preview of a running render

Example:
    >>> from pathtracer.preview import save_image, show_preview
    >>> image = render_image(camera, scene, 300, 200)
    >>> save_image(image, "output.png")
    >>> show_preview(image)
"""

from pathtracer.preview.display import show_comparison, show_preview
from pathtracer.preview.export import compute_rmse, image_to_rgb_array, save_image, to_pil_image
from pathtracer.preview.live import LivePreview

__all__ = [
    # Live preview
    "LivePreview",
    # Display functions
    "show_preview",
    "show_comparison",
    # Export functions
    "to_pil_image",
    "save_image",
    "image_to_rgb_array",
    "compute_rmse",
]
