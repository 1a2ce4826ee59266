"""Pytest configuration for path tracer tests.

This module provides shared fixtures for all test modules: random
generators, a pinhole camera looking down -Z, and small scenes.
"""

import numpy as np
import pytest

from pathtracer.camera import ThinLensCamera, setup_camera
from pathtracer.core.ray import make_rng, vec3
from pathtracer.geometry import HitRecord
from pathtracer.materials import Lambertian
from pathtracer.scene import Scene


@pytest.fixture
def rng():
    """A deterministic random generator."""
    return make_rng(42)


@pytest.fixture
def gray():
    """A mid-gray diffuse material."""
    return Lambertian((0.5, 0.5, 0.5))


@pytest.fixture
def pinhole_config():
    """A pinhole camera at the origin looking down -Z."""
    return ThinLensCamera(
        lookfrom=(0.0, 0.0, 0.0),
        lookat=(0.0, 0.0, -1.0),
        vup=(0.0, 1.0, 0.0),
        vfov=90.0,
        aspect_ratio=1.0,
        aperture=0.0,
    )


@pytest.fixture
def pinhole_camera(pinhole_config):
    """The Camera snapshot of ``pinhole_config``."""
    return setup_camera(pinhole_config)


@pytest.fixture
def empty_scene():
    """A scene with no primitives."""
    return Scene()


@pytest.fixture
def sphere_scene(gray):
    """A unit sphere at (0, 0, -3) in front of the pinhole camera."""
    scene = Scene()
    scene.add_sphere(vec3(0.0, 0.0, -3.0), 1.0, gray)
    return scene


@pytest.fixture
def make_hit():
    """Factory for hit records on a surface at the origin."""

    def _make_hit(material, normal=(0.0, 1.0, 0.0), front_face=True, point=(0.0, 0.0, 0.0)):
        return HitRecord(
            t=1.0,
            point=np.asarray(point, dtype=np.float64),
            normal=np.asarray(normal, dtype=np.float64),
            front_face=front_face,
            material=material,
        )

    return _make_hit
