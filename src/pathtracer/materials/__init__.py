"""Materials module for surface scattering models.

Components:
    base: Material contract, Scattered result and albedo validation
    lambertian: Ideal diffuse reflection
    metal: Specular reflection with optional roughness
    dielectric: Glass-like materials with refraction (Schlick Fresnel)

Each material provides ``scatter(ray, hit, rng)`` returning a Scattered
(attenuation + outgoing ray) or None when the ray is absorbed.
"""

from .base import Material, Scattered, validate_albedo
from .dielectric import Dielectric
from .lambertian import Lambertian
from .metal import Metal

__all__ = [
    "Material",
    "Scattered",
    "validate_albedo",
    "Lambertian",
    "Metal",
    "Dielectric",
]
