"""Material contract shared by every surface model.

A material decides, given an incident ray and a hit record, whether the
ray scatters and, if so, in which direction and with what color
attenuation. Returning None means the ray was absorbed.

Materials are immutable and shared by reference across every primitive
that uses them.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from pathtracer.core.ray import Ray, Vec3

if TYPE_CHECKING:
    from pathtracer.geometry.hittable import HitRecord


@dataclass(frozen=True, slots=True, eq=False)
class Scattered:
    """Result of a successful scatter event.

    Attributes:
        attenuation: Linear RGB color multiplied into the path throughput.
        ray: The outgoing ray, starting at the hit point.
    """

    attenuation: Vec3
    ray: Ray


class Material(ABC):
    """Base class for surface materials."""

    @abstractmethod
    def scatter(self, ray: Ray, hit: HitRecord, rng: np.random.Generator) -> Scattered | None:
        """Scatter an incident ray at a surface hit.

        Args:
            ray: The incident ray.
            hit: The hit record for the surface being scattered from.
            rng: The random generator owned by the calling job.

        Returns:
            The attenuation and scattered ray, or None if the ray was absorbed.
        """


def validate_albedo(albedo: Vec3) -> Vec3:
    """Check an albedo color for energy conservation.

    Args:
        albedo: The reflectance color as an (R, G, B) sequence.

    Returns:
        The albedo as a float64 vector.

    Raises:
        ValueError: If any albedo component is outside [0, 1].
    """
    albedo = np.asarray(albedo, dtype=np.float64)
    if albedo.shape != (3,):
        raise ValueError(f"Albedo must have 3 components, got shape {albedo.shape}")
    for i, component in enumerate(albedo):
        if component < 0.0 or component > 1.0:
            raise ValueError(
                f"Albedo component {i} = {component} is outside [0, 1]. "
                "This would violate energy conservation."
            )
    return albedo
