"""Ray data structure and vector utilities for Monte Carlo ray tracing.

This module provides the fundamental Ray class and the vector utility
functions used throughout the path tracer. Vectors and colors are plain
3-element NumPy arrays; every random draw goes through an explicit
``numpy.random.Generator`` so that each job owns its own stream.

Example:
    >>> from pathtracer.core.ray import Ray, vec3, make_rng
    >>> ray = Ray(vec3(0.0, 0.0, 0.0), vec3(0.0, 0.0, -2.0))
    >>> ray.direction  # normalized at construction
    array([ 0.,  0., -1.])
    >>> point = ray.at(5.0)  # Point 5 units along the ray
    >>> rng = make_rng(42, 3, 7)
"""

from __future__ import annotations

import math

import numpy as np
import numpy.typing as npt

# Type alias for 3D vectors (and linear RGB colors)
Vec3 = npt.NDArray[np.float64]


def vec3(x: float, y: float, z: float) -> Vec3:
    """Create a 3D vector."""
    return np.array((x, y, z), dtype=np.float64)


class Ray:
    """A ray with an origin point and a unit direction vector.

    The direction is normalized once, at construction, and never
    re-checked afterwards.

    Attributes:
        origin: The starting point of the ray.
        direction: The unit-length direction of the ray.
    """

    __slots__ = ("origin", "direction")

    def __init__(self, origin: Vec3, direction: Vec3) -> None:
        """Create a ray.

        Args:
            origin: The starting point of the ray.
            direction: The direction vector. Need not be unit length.

        Raises:
            ValueError: If the direction has zero length.
        """
        direction = np.asarray(direction, dtype=np.float64)
        norm = length(direction)
        if norm == 0.0 or not math.isfinite(norm):
            raise ValueError(f"Ray direction must be a finite non-zero vector, got {direction}")
        self.origin = np.asarray(origin, dtype=np.float64)
        self.direction = direction / norm

    def at(self, t: float) -> Vec3:
        """Compute the point along the ray at parameter t."""
        return self.origin + t * self.direction

    def __repr__(self) -> str:
        return f"Ray(origin={self.origin.tolist()}, direction={self.direction.tolist()})"


# =============================================================================
# Vector Utility Functions
# =============================================================================


def dot(a: Vec3, b: Vec3) -> float:
    """Compute the dot product of two vectors."""
    return float(a[0] * b[0] + a[1] * b[1] + a[2] * b[2])


def cross(a: Vec3, b: Vec3) -> Vec3:
    """Compute the cross product a x b."""
    return vec3(
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    )


def length_squared(v: Vec3) -> float:
    """Compute the squared length of a vector.

    Cheaper than length() when only comparing magnitudes.
    """
    return dot(v, v)


def length(v: Vec3) -> float:
    """Compute the Euclidean length of a vector."""
    return math.sqrt(length_squared(v))


def normalize(v: Vec3) -> Vec3:
    """Normalize a vector to unit length.

    Args:
        v: The input vector. Must not be zero-length.

    Returns:
        A unit vector in the same direction as v.
    """
    return v / length(v)


def near_zero(v: Vec3) -> bool:
    """Check if a vector is near zero in all components.

    Used to detect degenerate scatter directions.
    """
    s = 1e-8
    return abs(v[0]) < s and abs(v[1]) < s and abs(v[2]) < s


def lerp(t: float, a: Vec3, b: Vec3) -> Vec3:
    """Linearly interpolate from a (t=0) to b (t=1)."""
    return (1.0 - t) * a + t * b


def reflect(incident: Vec3, normal: Vec3) -> Vec3:
    """Reflect an incident vector about a normal.

    Computes v - 2(v . n)n. The normal should be unit length.

    Args:
        incident: The incoming direction vector (pointing toward the surface).
        normal: The surface normal (should be normalized).

    Returns:
        The reflected direction vector.
    """
    return incident - 2.0 * dot(incident, normal) * normal


def refract(incident: Vec3, normal: Vec3, eta: float) -> Vec3:
    """Refract a unit incident vector through a surface (Snell's law).

    The result is the sum of the component perpendicular to the normal,
    eta * (v + cos_theta * n), and the parallel component
    -sqrt(|1 - |perp|^2|) * n. Callers are expected to have ruled out
    total internal reflection beforehand.

    Args:
        incident: The incoming direction vector (normalized).
        normal: The surface normal, facing against the incident ray.
        eta: The ratio of refractive indices (n_incident / n_transmitted).

    Returns:
        The refracted direction vector.
    """
    cos_theta = min(-dot(incident, normal), 1.0)
    perpendicular = eta * (incident + cos_theta * normal)
    parallel = -math.sqrt(abs(1.0 - length_squared(perpendicular))) * normal
    return perpendicular + parallel


def reflectance(cosine: float, ref_idx: float) -> float:
    """Compute Fresnel reflectance using Schlick's approximation.

    Args:
        cosine: Cosine of the angle between incident direction and normal.
        ref_idx: Ratio of refractive indices.

    Returns:
        R0 + (1 - R0)(1 - cosine)^5 with R0 = ((1 - ref_idx) / (1 + ref_idx))^2.
    """
    r0 = ((1.0 - ref_idx) / (1.0 + ref_idx)) ** 2
    return r0 + (1.0 - r0) * (1.0 - cosine) ** 5


# =============================================================================
# Random Sampling Utilities for Monte Carlo
# =============================================================================


def make_rng(seed: int, *keys: int) -> np.random.Generator:
    """Create an independent random generator for a seed and optional keys.

    The same (seed, *keys) always yields the same stream, and streams for
    different keys are statistically independent.

    Example:
        >>> rng = make_rng(0, 12, 34, 5)  # seed, x, y, sample index
    """
    return np.random.default_rng([seed, *keys])


def random_in_unit_sphere(rng: np.random.Generator) -> Vec3:
    """Generate a random point inside the unit sphere.

    Uses rejection sampling over the [-1, 1)^3 cube.
    """
    while True:
        p = rng.uniform(-1.0, 1.0, 3)
        if length_squared(p) < 1.0:
            return p


def random_unit_vector(rng: np.random.Generator) -> Vec3:
    """Generate a random unit vector uniformly distributed on the sphere."""
    while True:
        p = random_in_unit_sphere(rng)
        # Points at the exact center cannot be normalized
        if not near_zero(p):
            return normalize(p)


def random_in_unit_disk(rng: np.random.Generator) -> Vec3:
    """Generate a random point inside the unit disk in the xy-plane.

    Used for lens sampling (depth of field).

    Returns:
        A random point (x, y, 0) with x^2 + y^2 < 1.
    """
    while True:
        x, y = rng.uniform(-1.0, 1.0, 2)
        if x * x + y * y < 1.0:
            return vec3(x, y, 0.0)
