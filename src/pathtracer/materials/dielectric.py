"""Dielectric (glass/water) material implementation.

This module implements a dielectric model that refracts light according to
Snell's law and reflects it with a probability given by Schlick's
approximation of the Fresnel equations.

Key physics:
    - Snell's law: n1 * sin(theta1) = n2 * sin(theta2)
    - Total internal reflection when eta * sin(theta) > 1
    - Schlick: R(theta) = R0 + (1 - R0)(1 - cos(theta))^5,
      R0 = ((1 - eta) / (1 + eta))^2

Common IOR values:
    - Air: 1.0
    - Water: 1.33
    - Glass: 1.5
    - Diamond: 2.4

Example:
    >>> from pathtracer.materials.dielectric import Dielectric
    >>> glass = Dielectric(1.5)
    >>> scattered = glass.scatter(ray, hit, rng)
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

import numpy as np

from pathtracer.core.ray import Ray, dot, reflect, reflectance, refract, vec3
from pathtracer.materials.base import Material, Scattered

if TYPE_CHECKING:
    from pathtracer.geometry.hittable import HitRecord

# Clear glass absorbs nothing
WHITE = vec3(1.0, 1.0, 1.0)


class Dielectric(Material):
    """Dielectric (refractive) material.

    Attributes:
        refraction_index: Index of refraction of the material (> 0).
    """

    def __init__(self, refraction_index: float = 1.5) -> None:
        """Create a dielectric material.

        Raises:
            ValueError: If the refraction index is not positive.
        """
        if not refraction_index > 0.0:
            raise ValueError(
                f"Index of refraction = {refraction_index} must be positive."
            )
        self.refraction_index = float(refraction_index)

    def refraction_ratio(self, front_face: bool) -> float:
        """Ratio of indices across the surface for the given side."""
        return 1.0 / self.refraction_index if front_face else self.refraction_index

    def scatter(self, ray: Ray, hit: HitRecord, rng: np.random.Generator) -> Scattered:
        ratio = self.refraction_ratio(hit.front_face)

        cos_theta = min(-dot(ray.direction, hit.normal), 1.0)
        sin_theta = math.sqrt(max(0.0, 1.0 - cos_theta * cos_theta))

        # Total internal reflection: no refracted solution exists
        cannot_refract = ratio * sin_theta > 1.0

        if cannot_refract or reflectance(cos_theta, ratio) > rng.random():
            direction = reflect(ray.direction, hit.normal)
        else:
            direction = refract(ray.direction, hit.normal, ratio)

        return Scattered(attenuation=WHITE, ray=Ray(hit.point, direction))

    def __repr__(self) -> str:
        return f"Dielectric(refraction_index={self.refraction_index})"
