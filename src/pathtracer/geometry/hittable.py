"""Hit records and the Hittable contract.

Every piece of geometry implements ``hit(ray, t_min, t_max)``, returning
the nearest intersection with parameter t in [t_min, t_max] or None.
``HittableList`` composes an unordered collection of hittables and returns
the closest hit among all members.

Example:
    >>> from pathtracer.geometry import HittableList, Sphere
    >>> world = HittableList()
    >>> world.add(Sphere(vec3(0, 0, -1), 0.5, material))
    >>> record = world.hit(ray, 0.001, 1000.0)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING

from pathtracer.core.ray import Ray, Vec3, dot

if TYPE_CHECKING:
    from pathtracer.materials.base import Material


@dataclass(frozen=True, slots=True, eq=False)
class HitRecord:
    """Record of a ray-surface intersection.

    Attributes:
        t: The parameter value along the ray where intersection occurred.
        point: The 3D point where the ray intersected the surface.
        normal: The unit surface normal, always facing against the
            incoming ray.
        front_face: Whether the ray hit the outside of the surface, i.e.
            the raw outward normal already opposed the ray direction.
        material: The material of the surface that was hit (shared, never
            copied per primitive).
    """

    t: float
    point: Vec3
    normal: Vec3
    front_face: bool
    material: Material

    @classmethod
    def from_outward_normal(
        cls,
        t: float,
        point: Vec3,
        outward_normal: Vec3,
        ray: Ray,
        material: Material,
    ) -> HitRecord:
        """Build a hit record, orienting the normal against the ray.

        Args:
            t: Ray parameter of the hit.
            point: Hit point.
            outward_normal: Unit geometric normal pointing out of the surface.
            ray: The incoming ray.
            material: Material of the hit surface.
        """
        front_face = dot(ray.direction, outward_normal) < 0.0
        normal = outward_normal if front_face else -outward_normal
        return cls(t=t, point=point, normal=normal, front_face=front_face, material=material)


class Hittable(ABC):
    """Anything a ray can intersect."""

    @abstractmethod
    def hit(self, ray: Ray, t_min: float, t_max: float) -> HitRecord | None:
        """Find the nearest intersection with t in [t_min, t_max].

        Args:
            ray: The ray to test.
            t_min: Minimum t value to consider a valid hit. Must exclude
                values near zero to avoid self-intersection.
            t_max: Maximum t value to consider a valid hit.

        Returns:
            The nearest HitRecord, or None if nothing is hit in range.
        """


class HittableList(Hittable):
    """An insertion-ordered, unindexed collection of hittables.

    ``hit`` scans every member once, shrinking the upper bound of the
    search to the closest t found so far, so the result is the nearest hit
    regardless of insertion order.
    """

    def __init__(self, objects: list[Hittable] | None = None) -> None:
        self._objects: list[Hittable] = list(objects) if objects else []

    def add(self, obj: Hittable) -> None:
        """Append a hittable to the collection."""
        self._objects.append(obj)

    def __len__(self) -> int:
        return len(self._objects)

    def __iter__(self) -> Iterator[Hittable]:
        return iter(self._objects)

    def hit(self, ray: Ray, t_min: float, t_max: float) -> HitRecord | None:
        closest = t_max
        result = None
        for obj in self._objects:
            record = obj.hit(ray, t_min, closest)
            if record is not None:
                closest = record.t
                result = record
        return result
