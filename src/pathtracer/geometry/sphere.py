"""Sphere primitive with ray-sphere intersection.

The intersection solves |O + tD - C|^2 = r^2 using the half-b form of the
quadratic formula, where the factors of two cancel:

    a = D . D
    h = D . (O - C)        (half of the traditional b)
    c = |O - C|^2 - r^2
    t = (-h -/+ sqrt(h^2 - a*c)) / a

Example:
    >>> from pathtracer.geometry.sphere import Sphere
    >>> from pathtracer.materials import Lambertian
    >>> sphere = Sphere(vec3(0, 0, -1), 0.5, Lambertian(vec3(0.5, 0.5, 0.5)))
    >>> record = sphere.hit(ray, 0.001, 1000.0)
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

import numpy as np

from pathtracer.core.ray import Ray, Vec3, dot
from pathtracer.geometry.hittable import HitRecord, Hittable

if TYPE_CHECKING:
    from pathtracer.materials.base import Material


class Sphere(Hittable):
    """A sphere defined by center point, radius and material.

    Immutable after construction. The radius is assumed positive and is not
    validated.

    Attributes:
        center: The center point of the sphere.
        radius: The radius of the sphere.
        material: The shared material of the sphere surface.
    """

    __slots__ = ("center", "radius", "material")

    def __init__(self, center: Vec3, radius: float, material: Material) -> None:
        self.center = np.asarray(center, dtype=np.float64)
        self.radius = float(radius)
        self.material = material

    def hit(self, ray: Ray, t_min: float, t_max: float) -> HitRecord | None:
        """Test for ray-sphere intersection.

        The smaller root is tested first; the larger root only if the
        smaller one falls outside [t_min, t_max].
        """
        oc = ray.origin - self.center
        a = dot(ray.direction, ray.direction)
        half_b = dot(oc, ray.direction)
        c = dot(oc, oc) - self.radius * self.radius

        discriminant = half_b * half_b - a * c
        if discriminant < 0.0:
            return None

        sqrt_d = math.sqrt(discriminant)
        root = (-half_b - sqrt_d) / a
        if not t_min <= root <= t_max:
            root = (-half_b + sqrt_d) / a
            if not t_min <= root <= t_max:
                return None

        point = ray.at(root)
        outward_normal = (point - self.center) / self.radius
        return HitRecord.from_outward_normal(root, point, outward_normal, ray, self.material)

    def __repr__(self) -> str:
        return f"Sphere(center={self.center.tolist()}, radius={self.radius}, material={self.material!r})"
