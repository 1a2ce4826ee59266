"""Thin-lens camera model with depth of field.

The camera builds an orthonormal basis from the view parameters:
- forward: points from lookfrom toward lookat
- right: forward x vup, normalized
- up: right x forward

The viewport is placed on the focus plane, at the distance from lookfrom
to lookat, and every viewport vector is scaled by that distance. Rays start
at a point sampled on the lens disk and aim at the unperturbed point on the
focus plane, so geometry on that plane stays sharp while everything else
blurs with the aperture.

Normalized image coordinates:
    u in [0, 1]: left to right across image
    v in [0, 1]: bottom to top across image

Example:
    >>> from pathtracer.camera.thin_lens import ThinLensCamera, setup_camera
    >>>
    >>> config = ThinLensCamera(
    ...     lookfrom=(13.0, 2.0, 3.0),
    ...     lookat=(0.0, 0.0, 0.0),
    ...     vup=(0.0, 1.0, 0.0),
    ...     vfov=20.0,
    ...     aspect_ratio=3.0 / 2.0,
    ...     aperture=0.1,
    ... )
    >>> camera = setup_camera(config)
    >>> ray = camera.get_ray(0.5, 0.5, rng)  # Ray through image center
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from pathtracer.core.ray import Ray, Vec3, cross, length, random_in_unit_disk

# Degenerate-basis threshold for the view and up vectors
_BASIS_EPSILON = 1e-8


@dataclass(frozen=True)
class ThinLensCamera:
    """Configuration for a thin-lens (depth of field) camera.

    Attributes:
        lookfrom: Camera position in world space (x, y, z).
        lookat: Point the camera is looking at; also sets the focus distance.
        vup: Up direction vector for camera orientation (typically (0, 1, 0)).
        vfov: Vertical field of view in degrees.
        aspect_ratio: Width divided by height of the output image.
        aperture: Lens diameter. 0 gives a pinhole camera.
    """

    lookfrom: tuple[float, float, float]
    lookat: tuple[float, float, float]
    vup: tuple[float, float, float] = (0.0, 1.0, 0.0)
    vfov: float = 90.0
    aspect_ratio: float = 1.0
    aperture: float = 0.0


class Camera:
    """Immutable snapshot of a precomputed viewport and lens basis.

    Changing any input requires constructing a new camera.
    """

    def __init__(
        self,
        origin: Vec3,
        target: Vec3,
        up: Vec3,
        vfov: float,
        aspect_ratio: float,
        aperture: float,
    ) -> None:
        """Derive the camera basis.

        Args:
            origin: Eye position.
            target: Look-at point; the focus plane passes through it.
            up: Approximate up direction.
            vfov: Vertical field of view in degrees, in (0, 180).
            aspect_ratio: Viewport width over height (> 0).
            aperture: Lens diameter (>= 0).

        Raises:
            ValueError: If the view direction has zero length, the up vector
                is parallel to it, or a scalar parameter is out of range.
        """
        if not 0.0 < vfov < 180.0:
            raise ValueError(f"Vertical field of view must be in (0, 180) degrees, got {vfov}")
        if not aspect_ratio > 0.0:
            raise ValueError(f"Aspect ratio must be positive, got {aspect_ratio}")
        if aperture < 0.0:
            raise ValueError(f"Aperture must be non-negative, got {aperture}")

        origin = np.asarray(origin, dtype=np.float64)
        view = np.asarray(target, dtype=np.float64) - origin
        focus_distance = length(view)
        if focus_distance < _BASIS_EPSILON:
            raise ValueError("Camera lookfrom and lookat coincide; view direction is undefined")

        forward = view / focus_distance
        right = cross(forward, np.asarray(up, dtype=np.float64))
        right_length = length(right)
        if right_length < _BASIS_EPSILON:
            raise ValueError(f"Camera up vector {up} is parallel to the view direction")
        right = right / right_length
        up_unit = cross(right, forward)

        h = math.tan(math.radians(vfov) / 2.0)
        viewport_height = 2.0 * h
        viewport_width = aspect_ratio * viewport_height

        self._origin = origin
        self._right = right
        self._up = up_unit
        self._forward = forward
        self._viewport_center = focus_distance * forward
        self._horizontal = focus_distance * viewport_width * right
        self._vertical = focus_distance * viewport_height * up_unit
        self._lens_radius = aperture / 2.0
        self._focus_distance = focus_distance

    @classmethod
    def from_config(cls, config: ThinLensCamera) -> Camera:
        """Build a camera from its configuration dataclass."""
        return cls(
            config.lookfrom,
            config.lookat,
            config.vup,
            config.vfov,
            config.aspect_ratio,
            config.aperture,
        )

    @property
    def origin(self) -> Vec3:
        return self._origin

    @property
    def lens_radius(self) -> float:
        return self._lens_radius

    @property
    def focus_distance(self) -> float:
        return self._focus_distance

    def get_ray(self, u: float, v: float, rng: np.random.Generator) -> Ray:
        """Generate a ray through normalized image coordinates (u, v).

        Args:
            u: Horizontal coordinate (0 = left edge, 1 = right edge).
            v: Vertical coordinate (0 = bottom edge, 1 = top edge).
            rng: Random generator used to sample the lens disk. Not drawn
                from when the aperture is zero.

        Returns:
            A ray from a point on the lens toward the focus-plane point.
        """
        direction = (
            self._viewport_center + (u - 0.5) * self._horizontal + (v - 0.5) * self._vertical
        )
        if self._lens_radius == 0.0:
            return Ray(self._origin, direction)

        disk = self._lens_radius * random_in_unit_disk(rng)
        offset = self._right * disk[0] + self._up * disk[1]
        return Ray(self._origin + offset, direction - offset)

    def get_camera_info(self) -> dict[str, tuple[float, float, float]]:
        """Get the derived camera vectors for debugging."""
        return {
            "origin": tuple(self._origin.tolist()),
            "right": tuple(self._right.tolist()),
            "up": tuple(self._up.tolist()),
            "forward": tuple(self._forward.tolist()),
            "viewport_center": tuple(self._viewport_center.tolist()),
            "horizontal": tuple(self._horizontal.tolist()),
            "vertical": tuple(self._vertical.tolist()),
        }

    def __repr__(self) -> str:
        return (
            f"Camera(origin={self._origin.tolist()}, forward={self._forward.tolist()}, "
            f"focus_distance={self._focus_distance}, lens_radius={self._lens_radius})"
        )


def setup_camera(config: ThinLensCamera) -> Camera:
    """Compute the camera basis and viewport from configuration.

    Args:
        config: Camera configuration with position, orientation, FOV and aperture.

    Returns:
        The immutable Camera snapshot used for ray generation.

    Raises:
        ValueError: If the configuration describes a degenerate camera.
    """
    return Camera.from_config(config)
