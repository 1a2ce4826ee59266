"""Random spheres scene configuration.

This module provides a factory function for the classic "many spheres"
showcase scene:

- A huge gray diffuse sphere acting as the ground plane
- A 22 x 22 grid of small spheres with random jitter, each one diffuse
  (80%), metal (15%) or glass (5%)
- Three large spheres: glass in the middle, brown diffuse on the left and
  a mirror metal on the right
- A camera at (13, 2, 3) looking toward the origin, focused 10 units away

The layout is driven by its own seeded generator, so the same seed always
produces the same scene.

Example:
    >>> from pathtracer.scene.random_spheres import create_random_spheres_scene
    >>> from pathtracer.camera import setup_camera
    >>>
    >>> scene, camera_config = create_random_spheres_scene(seed=0)
    >>> camera = setup_camera(camera_config)
"""

from __future__ import annotations

import numpy as np

from pathtracer.camera.thin_lens import ThinLensCamera
from pathtracer.core.ray import length_squared, vec3
from pathtracer.materials import Dielectric, Lambertian, Metal
from pathtracer.scene.scene import Scene

# =============================================================================
# Scene Constants
# =============================================================================

GROUND_ALBEDO = (0.5, 0.5, 0.5)
GLASS_IOR = 1.5

# Small spheres are placed on the integer grid [-GRID_EXTENT, GRID_EXTENT)
GRID_EXTENT = 11
SMALL_RADIUS = 0.2

# Material mix thresholds for the small spheres
DIFFUSE_PROBABILITY = 0.8
METAL_PROBABILITY = 0.15

# Small spheres too close to this point would intersect the metal sphere
CLEARANCE_POINT = (4.0, 0.2, 0.0)
CLEARANCE = 0.9

CAMERA_LOOKFROM = (13.0, 2.0, 3.0)
CAMERA_LOOKAT = (0.0, 0.0, 0.0)
CAMERA_VFOV = 20.0
CAMERA_APERTURE = 0.1
FOCUS_DISTANCE = 10.0


def create_random_spheres_scene(
    seed: int = 0,
    aspect_ratio: float = 3.0 / 2.0,
) -> tuple[Scene, ThinLensCamera]:
    """Create the random spheres scene and its camera configuration.

    Args:
        seed: Seed for the scene layout generator.
        aspect_ratio: Aspect ratio of the intended output image.

    Returns:
        Tuple of (scene, camera_config).
    """
    rng = np.random.default_rng(seed)
    scene = Scene()

    scene.add_sphere(vec3(0.0, -1000.0, 0.0), 1000.0, Lambertian(GROUND_ALBEDO))

    clearance_point = vec3(*CLEARANCE_POINT)
    for a in range(-GRID_EXTENT, GRID_EXTENT):
        for b in range(-GRID_EXTENT, GRID_EXTENT):
            choose_mat, jitter_a, jitter_b = rng.random(3)
            center = vec3(a + 0.9 * jitter_a, SMALL_RADIUS, b + 0.9 * jitter_b)

            if length_squared(center - clearance_point) <= CLEARANCE * CLEARANCE:
                continue

            if choose_mat < DIFFUSE_PROBABILITY:
                material = Lambertian(rng.random(3))
            elif choose_mat < DIFFUSE_PROBABILITY + METAL_PROBABILITY:
                material = Metal(rng.random(3), rng.random())
            else:
                material = Dielectric(GLASS_IOR)
            scene.add_sphere(center, SMALL_RADIUS, material)

    scene.add_sphere(vec3(0.0, 1.0, 0.0), 1.0, Dielectric(GLASS_IOR))
    scene.add_sphere(vec3(-4.0, 1.0, 0.0), 1.0, Lambertian((0.4, 0.2, 0.1)))
    scene.add_sphere(vec3(4.0, 1.0, 0.0), 1.0, Metal((0.7, 0.6, 0.5), 0.0))

    # Move the look-at point along the view ray so the focus plane sits
    # FOCUS_DISTANCE away from the camera
    lookfrom = vec3(*CAMERA_LOOKFROM)
    view = vec3(*CAMERA_LOOKAT) - lookfrom
    lookat = lookfrom + FOCUS_DISTANCE * view / np.sqrt(length_squared(view))

    camera = ThinLensCamera(
        lookfrom=CAMERA_LOOKFROM,
        lookat=tuple(lookat.tolist()),
        vup=(0.0, 1.0, 0.0),
        vfov=CAMERA_VFOV,
        aspect_ratio=aspect_ratio,
        aperture=CAMERA_APERTURE,
    )
    return scene, camera
