"""Offline Monte Carlo path tracer.

This package renders scenes of spheres with diffuse, metallic and glass
materials through a thin-lens camera, splitting the work across a pool of
worker threads. It supports:
- Depth-bounded path tracing with a sky gradient background
- Lambertian, metal (fuzzy reflection) and dielectric (glass) materials
- Depth of field through a thin-lens camera
- Tile or sample sharding with order-independent merging

Subpackages:
    core: Vector utilities, framebuffer model, integrator and scheduler
    geometry: Hittable contract and sphere primitive
    materials: Material scatter models
    camera: Thin-lens camera with ray generation
    scene: Scene container and preset scenes
    preview: Image export and preview utilities
"""

__version__ = "0.1.0"
