"""Scene container for geometry and material pairs.

The Scene owns an insertion-ordered collection of hittable primitives and
answers nearest-hit queries with a single linear scan. It is built on one
thread, then handed to the render workers read-only: while any render holds
the scene through ``read_only()``, ``add`` raises instead of mutating the
collection under the readers.

Example:
    >>> from pathtracer.scene.scene import new_scene
    >>> from pathtracer.materials import Lambertian, Metal
    >>> scene = new_scene()
    >>> ground = Lambertian((0.5, 0.5, 0.5))
    >>> scene.add_sphere((0, -1000, 0), 1000, ground)
    >>> scene.add_sphere((4, 1, 0), 1, Metal((0.7, 0.6, 0.5), 0.0))
    >>> with scene.read_only():
    ...     record = scene.hit(ray, 0.001, 1000.0)
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING

from pathtracer.geometry.hittable import HitRecord, Hittable, HittableList
from pathtracer.geometry.sphere import Sphere

if TYPE_CHECKING:
    from pathtracer.core.ray import Ray, Vec3
    from pathtracer.materials.base import Material


class Scene:
    """Append-only collection of primitives with nearest-hit queries.

    Attributes:
        objects: The underlying closest-hit list of primitives.
    """

    def __init__(self) -> None:
        """Initialize an empty scene."""
        self.objects = HittableList()
        self._readers = 0
        self._lock = threading.Lock()

    def add(self, obj: Hittable) -> None:
        """Append a primitive (carrying its material) to the scene.

        Raises:
            RuntimeError: If a render currently holds the scene read-only.
        """
        with self._lock:
            if self._readers:
                raise RuntimeError("Cannot modify the scene while a render is in progress")
            self.objects.add(obj)

    def add_sphere(self, center: Vec3, radius: float, material: Material) -> Sphere:
        """Create a sphere with a shared material and add it to the scene.

        Args:
            center: The center of the sphere.
            radius: The radius of the sphere (should be positive).
            material: The material, shared by reference with other primitives.

        Returns:
            The sphere that was added.
        """
        sphere = Sphere(center, radius, material)
        self.add(sphere)
        return sphere

    @contextmanager
    def read_only(self) -> Iterator[Scene]:
        """Hold the scene read-only for the duration of a render.

        Nested and concurrent holds are allowed; mutation is rejected until
        every hold has been released.
        """
        with self._lock:
            self._readers += 1
        try:
            yield self
        finally:
            with self._lock:
                self._readers -= 1

    @property
    def is_read_only(self) -> bool:
        """Whether a render currently holds the scene."""
        return self._readers > 0

    def hit(self, ray: Ray, t_min: float, t_max: float) -> HitRecord | None:
        """Return the nearest hit among all primitives, or None."""
        return self.objects.hit(ray, t_min, t_max)

    def __len__(self) -> int:
        return len(self.objects)

    def __iter__(self) -> Iterator[Hittable]:
        return iter(self.objects)

    def __repr__(self) -> str:
        return f"Scene(objects={len(self.objects)})"


def new_scene() -> Scene:
    """Create an empty scene."""
    return Scene()
