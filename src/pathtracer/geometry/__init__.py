"""Geometry module for shape primitives and ray intersection.

This module provides geometric primitives and intersection algorithms:

Components:
    hittable: HitRecord, the Hittable contract and the closest-hit list
    sphere: Sphere primitive with ray-sphere intersection

Ray-object intersection follows the pattern:
    record = shape.hit(ray, t_min, t_max)  # HitRecord or None
"""

from .hittable import HitRecord, Hittable, HittableList
from .sphere import Sphere

__all__ = [
    "HitRecord",
    "Hittable",
    "HittableList",
    "Sphere",
]
