"""Unit tests for the ray and vector utility module.

Tests cover:
- Ray construction and normalization
- Ray point evaluation
- Vector operations (dot, cross, length, normalize, lerp)
- Reflection, refraction and Schlick reflectance
- Random sampling helpers and seeded generators
"""

import math

import numpy as np
import pytest

from pathtracer.core.ray import (
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


class TestRay:
    """Tests for the Ray class."""

    def test_direction_is_normalized(self):
        """Test that the direction is normalized at construction."""
        ray = Ray(vec3(1.0, 2.0, 3.0), vec3(0.0, 0.0, -5.0))
        np.testing.assert_allclose(ray.direction, [0.0, 0.0, -1.0])
        np.testing.assert_allclose(ray.origin, [1.0, 2.0, 3.0])

    def test_accepts_sequences(self):
        """Test that plain tuples are converted to arrays."""
        ray = Ray((0, 0, 0), (3, 4, 0))
        np.testing.assert_allclose(ray.direction, [0.6, 0.8, 0.0])

    def test_at(self):
        """Test point evaluation along the ray."""
        ray = Ray(vec3(1.0, 0.0, 0.0), vec3(0.0, 2.0, 0.0))
        np.testing.assert_allclose(ray.at(2.5), [1.0, 2.5, 0.0])
        np.testing.assert_allclose(ray.at(0.0), ray.origin)

    def test_zero_direction_rejected(self):
        """Test that a zero-length direction raises ValueError."""
        with pytest.raises(ValueError, match="non-zero"):
            Ray(vec3(0.0, 0.0, 0.0), vec3(0.0, 0.0, 0.0))

    def test_nan_direction_rejected(self):
        """Test that a non-finite direction raises ValueError."""
        with pytest.raises(ValueError):
            Ray(vec3(0.0, 0.0, 0.0), vec3(math.nan, 0.0, 1.0))


class TestVectorOperations:
    """Tests for the vector helpers."""

    def test_dot(self):
        assert dot(vec3(1.0, 2.0, 3.0), vec3(4.0, -5.0, 6.0)) == pytest.approx(12.0)

    def test_cross_of_axes(self):
        """Test the right-handed cross product of the basis vectors."""
        np.testing.assert_allclose(cross(vec3(1, 0, 0), vec3(0, 1, 0)), [0, 0, 1])
        np.testing.assert_allclose(cross(vec3(0, 1, 0), vec3(0, 0, 1)), [1, 0, 0])

    def test_cross_is_perpendicular(self):
        a = vec3(1.0, 2.0, 3.0)
        b = vec3(-2.0, 0.5, 4.0)
        c = cross(a, b)
        assert dot(c, a) == pytest.approx(0.0, abs=1e-12)
        assert dot(c, b) == pytest.approx(0.0, abs=1e-12)

    def test_length(self):
        v = vec3(3.0, 4.0, 12.0)
        assert length_squared(v) == pytest.approx(169.0)
        assert length(v) == pytest.approx(13.0)

    def test_normalize(self):
        assert length(normalize(vec3(5.0, -2.0, 1.0))) == pytest.approx(1.0)

    def test_near_zero(self):
        assert near_zero(vec3(1e-9, -1e-9, 0.0))
        assert not near_zero(vec3(1e-9, 1e-7, 0.0))

    def test_lerp_endpoints(self):
        a = vec3(1.0, 1.0, 1.0)
        b = vec3(0.5, 0.7, 1.0)
        np.testing.assert_allclose(lerp(0.0, a, b), a)
        np.testing.assert_allclose(lerp(1.0, a, b), b)
        np.testing.assert_allclose(lerp(0.5, a, b), [0.75, 0.85, 1.0])


class TestReflectRefract:
    """Tests for reflect, refract and Schlick reflectance."""

    def test_reflect_45_degrees(self):
        """Test reflection of a 45 degree ray about +Y."""
        s = 1.0 / math.sqrt(2.0)
        result = reflect(vec3(s, -s, 0.0), vec3(0.0, 1.0, 0.0))
        np.testing.assert_allclose(result, [s, s, 0.0])

    def test_refract_normal_incidence_passes_straight(self):
        result = refract(vec3(0.0, -1.0, 0.0), vec3(0.0, 1.0, 0.0), 1.0 / 1.5)
        np.testing.assert_allclose(result, [0.0, -1.0, 0.0], atol=1e-12)

    def test_refract_obeys_snell(self):
        """Test that sin(theta_t) = eta * sin(theta_i)."""
        theta = math.radians(30.0)
        incident = vec3(math.sin(theta), -math.cos(theta), 0.0)
        eta = 1.0 / 1.5
        result = refract(incident, vec3(0.0, 1.0, 0.0), eta)
        assert length(result) == pytest.approx(1.0)
        assert result[0] == pytest.approx(eta * math.sin(theta))
        assert result[1] < 0.0

    def test_reflectance_at_normal_incidence(self):
        """Test that Schlick reduces to R0 at normal incidence."""
        r0 = ((1.0 - 1.5) / (1.0 + 1.5)) ** 2
        assert reflectance(1.0, 1.5) == pytest.approx(r0)

    def test_reflectance_at_grazing_angle(self):
        assert reflectance(0.0, 1.5) == pytest.approx(1.0)


class TestRandomSampling:
    """Tests for seeded generators and random direction helpers."""

    def test_same_keys_same_stream(self):
        a = make_rng(7, 1, 2, 3).random(5)
        b = make_rng(7, 1, 2, 3).random(5)
        np.testing.assert_array_equal(a, b)

    def test_different_keys_different_stream(self):
        a = make_rng(7, 1, 2, 3).random(5)
        b = make_rng(7, 2, 1, 3).random(5)
        assert not np.array_equal(a, b)

    def test_random_in_unit_sphere(self, rng):
        for _ in range(200):
            assert length_squared(random_in_unit_sphere(rng)) < 1.0

    def test_random_unit_vector(self, rng):
        for _ in range(200):
            assert length(random_unit_vector(rng)) == pytest.approx(1.0)

    def test_random_in_unit_disk(self, rng):
        for _ in range(200):
            p = random_in_unit_disk(rng)
            assert p[2] == 0.0
            assert p[0] ** 2 + p[1] ** 2 < 1.0
