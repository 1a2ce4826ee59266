"""Lambertian (ideal diffuse) material implementation.

Scattered directions are the surface normal plus a uniformly random unit
vector, which distributes outgoing rays with a cosine-weighted density
around the normal. The attenuation is the albedo, and diffuse surfaces
never absorb a ray outright.

Example:
    >>> from pathtracer.materials.lambertian import Lambertian
    >>> red = Lambertian(vec3(0.8, 0.1, 0.1))
    >>> scattered = red.scatter(ray, hit, rng)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from pathtracer.core.ray import Ray, Vec3, near_zero, random_unit_vector
from pathtracer.materials.base import Material, Scattered, validate_albedo

if TYPE_CHECKING:
    from pathtracer.geometry.hittable import HitRecord


class Lambertian(Material):
    """Lambertian (ideal diffuse) material.

    Attributes:
        albedo: The diffuse reflectance color (RGB, each component in [0, 1]).
    """

    def __init__(self, albedo: Vec3) -> None:
        """Create a Lambertian material.

        Raises:
            ValueError: If any albedo component is outside [0, 1].
        """
        self.albedo = validate_albedo(albedo)

    def scatter(self, ray: Ray, hit: HitRecord, rng: np.random.Generator) -> Scattered:
        scatter_direction = hit.normal + random_unit_vector(rng)

        # Perturbation exactly opposite the normal cancels it out
        if near_zero(scatter_direction):
            scatter_direction = hit.normal

        return Scattered(attenuation=self.albedo, ray=Ray(hit.point, scatter_direction))

    def __repr__(self) -> str:
        return f"Lambertian(albedo={self.albedo.tolist()})"
