"""Scene module for scene management.

Components:
    scene: Scene container with nearest-hit queries and read-only handoff
    random_spheres: The random spheres showcase scene

Scene data is organized as an unordered linear list of primitives; each
primitive holds a shared reference to its material.
"""

from .random_spheres import create_random_spheres_scene
from .scene import Scene, new_scene

__all__ = [
    "Scene",
    "new_scene",
    "create_random_spheres_scene",
]
