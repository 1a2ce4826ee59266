"""Metal (specular reflective) material implementation.

This module implements the metal model, which reflects the incident ray
about the surface normal and perturbs the reflection by a random unit
vector scaled by the roughness. Perfect metals (roughness=0) produce
mirror-like reflections.

The reflection formula is:
    R = I - 2(I . N)N

Example:
    >>> from pathtracer.materials.metal import Metal
    >>> gold = Metal(vec3(0.8, 0.6, 0.2), roughness=0.3)
    >>> scattered = gold.scatter(ray, hit, rng)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from pathtracer.core.ray import Ray, Vec3, near_zero, random_unit_vector, reflect
from pathtracer.materials.base import Material, Scattered, validate_albedo

if TYPE_CHECKING:
    from pathtracer.geometry.hittable import HitRecord


class Metal(Material):
    """Metal (specular reflective) material.

    Attributes:
        albedo: The reflective color (RGB, each component in [0, 1]).
        roughness: The surface roughness/fuzziness in [0, 1].
            0 = perfect mirror, 1 = maximum fuzziness.
    """

    def __init__(self, albedo: Vec3, roughness: float = 0.0) -> None:
        """Create a metal material.

        Args:
            albedo: The reflective color as an (R, G, B) sequence.
            roughness: The surface roughness. Values outside [0, 1] are
                clamped to that range.

        Raises:
            ValueError: If any albedo component is outside [0, 1].
        """
        self.albedo = validate_albedo(albedo)
        self.roughness = min(max(float(roughness), 0.0), 1.0)

    def scatter(self, ray: Ray, hit: HitRecord, rng: np.random.Generator) -> Scattered:
        reflected = reflect(ray.direction, hit.normal)
        scattered_direction = reflected + self.roughness * random_unit_vector(rng)

        # Fully rough perturbation can cancel the reflection
        if near_zero(scattered_direction):
            scattered_direction = reflected

        # Metal attenuation is simply the albedo
        return Scattered(attenuation=self.albedo, ray=Ray(hit.point, scattered_direction))

    def __repr__(self) -> str:
        return f"Metal(albedo={self.albedo.tolist()}, roughness={self.roughness})"
