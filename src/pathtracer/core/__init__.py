"""Core rendering module.

This module contains the fundamental building blocks for path tracing:

Components:
    ray: Ray data structure, vector utilities and random sampling helpers
    image: Region, Image framebuffer, render targets and sample accumulation
    integrator: Monte Carlo path tracing (RenderSettings, Renderer)
    scheduler: Tile- and sample-sharded parallel rendering

Vectors and colors are float64 NumPy arrays. Every random draw goes through
an explicit numpy.random.Generator keyed on the render seed and the pixel
sample, so renders are reproducible regardless of how work is split.
"""

from .image import Image, Region, RenderTarget, SampleAccumulator, color_to_bytes
from .ray import (
    Ray,
    cross,
    dot,
    length,
    length_squared,
    lerp,
    make_rng,
    near_zero,
    normalize,
    random_in_unit_disk,
    random_in_unit_sphere,
    random_unit_vector,
    reflect,
    reflectance,
    refract,
    vec3,
)

# Note: integrator and scheduler are NOT imported here to avoid circular imports.
# Import directly from pathtracer.core.integrator or pathtracer.core.scheduler.

__all__ = [
    "Ray",
    "vec3",
    "dot",
    "cross",
    "length",
    "length_squared",
    "normalize",
    "near_zero",
    "lerp",
    "reflect",
    "refract",
    "reflectance",
    "make_rng",
    "random_in_unit_sphere",
    "random_unit_vector",
    "random_in_unit_disk",
    "Image",
    "Region",
    "RenderTarget",
    "SampleAccumulator",
    "color_to_bytes",
]
