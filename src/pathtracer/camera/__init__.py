"""Camera module for view and ray generation.

Components:
    thin_lens: Thin-lens camera with depth of field (aperture 0 is a pinhole)

Camera responsibilities:
    - Transform (u, v) image coordinates to world-space rays
    - Sample the lens disk for depth of field
    - Support look-at positioning with up vector
"""

from .thin_lens import Camera, ThinLensCamera, setup_camera

__all__ = [
    "Camera",
    "ThinLensCamera",
    "setup_camera",
]
