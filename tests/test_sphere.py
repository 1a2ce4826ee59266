"""Unit tests for sphere intersection and the closest-hit list.

Tests cover:
- Hits from outside and inside the sphere
- Misses and tangent rays
- Range limits [t_min, t_max] (inclusive)
- Normal orientation and front_face
- Closest-hit selection regardless of insertion order
"""

import numpy as np
import pytest

from pathtracer.core.ray import Ray, length, vec3
from pathtracer.geometry import HitRecord, HittableList, Sphere


def _ray_down_z():
    return Ray(vec3(0.0, 0.0, 0.0), vec3(0.0, 0.0, -1.0))


class TestSphereHit:
    """Tests for Sphere.hit."""

    def test_hit_from_outside(self, gray):
        """Test the nearest root is returned with an outward normal."""
        sphere = Sphere(vec3(0.0, 0.0, -3.0), 1.0, gray)
        record = sphere.hit(_ray_down_z(), 0.001, 1000.0)

        assert record is not None
        assert record.t == pytest.approx(2.0)
        np.testing.assert_allclose(record.point, [0.0, 0.0, -2.0])
        np.testing.assert_allclose(record.normal, [0.0, 0.0, 1.0])
        assert record.front_face is True
        assert record.material is gray

    def test_hit_from_inside(self, gray):
        """Test the far root is used and the normal faces the ray."""
        sphere = Sphere(vec3(0.0, 0.0, 0.0), 2.0, gray)
        record = sphere.hit(_ray_down_z(), 0.001, 1000.0)

        assert record is not None
        assert record.t == pytest.approx(2.0)
        assert record.front_face is False
        np.testing.assert_allclose(record.normal, [0.0, 0.0, 1.0])

    def test_miss(self, gray):
        sphere = Sphere(vec3(0.0, 5.0, -3.0), 1.0, gray)
        assert sphere.hit(_ray_down_z(), 0.001, 1000.0) is None

    def test_behind_ray_is_miss(self, gray):
        sphere = Sphere(vec3(0.0, 0.0, 3.0), 1.0, gray)
        assert sphere.hit(_ray_down_z(), 0.001, 1000.0) is None

    def test_t_max_excludes_far_hits(self, gray):
        sphere = Sphere(vec3(0.0, 0.0, -3.0), 1.0, gray)
        assert sphere.hit(_ray_down_z(), 0.001, 1.5) is None

    def test_range_is_inclusive(self, gray):
        """Test that a root exactly at t_max is accepted."""
        sphere = Sphere(vec3(0.0, 0.0, -3.0), 1.0, gray)
        record = sphere.hit(_ray_down_z(), 0.001, 2.0)
        assert record is not None
        assert record.t == pytest.approx(2.0)

    def test_near_root_outside_range_uses_far_root(self, gray):
        sphere = Sphere(vec3(0.0, 0.0, -3.0), 1.0, gray)
        record = sphere.hit(_ray_down_z(), 2.5, 1000.0)
        assert record is not None
        assert record.t == pytest.approx(4.0)

    def test_normal_is_unit_length(self, gray):
        sphere = Sphere(vec3(0.3, -0.2, -4.0), 1.5, gray)
        ray = Ray(vec3(0.0, 0.0, 0.0), vec3(0.1, 0.05, -1.0))
        record = sphere.hit(ray, 0.001, 1000.0)
        assert record is not None
        assert length(record.normal) == pytest.approx(1.0)


class TestHitRecord:
    """Tests for HitRecord.from_outward_normal."""

    def test_front_face_keeps_normal(self, gray):
        ray = _ray_down_z()
        record = HitRecord.from_outward_normal(
            1.0, vec3(0, 0, -1), vec3(0.0, 0.0, 1.0), ray, gray
        )
        assert record.front_face
        np.testing.assert_allclose(record.normal, [0.0, 0.0, 1.0])

    def test_back_face_flips_normal(self, gray):
        ray = _ray_down_z()
        record = HitRecord.from_outward_normal(
            1.0, vec3(0, 0, -1), vec3(0.0, 0.0, -1.0), ray, gray
        )
        assert not record.front_face
        np.testing.assert_allclose(record.normal, [0.0, 0.0, 1.0])


class TestHittableList:
    """Tests for closest-hit selection."""

    def test_empty_list_misses(self):
        assert HittableList().hit(_ray_down_z(), 0.001, 1000.0) is None

    @pytest.mark.parametrize("near_first", [True, False])
    def test_closest_hit_regardless_of_order(self, gray, near_first):
        near = Sphere(vec3(0.0, 0.0, -3.0), 1.0, gray)
        far = Sphere(vec3(0.0, 0.0, -10.0), 1.0, gray)
        world = HittableList([near, far] if near_first else [far, near])

        record = world.hit(_ray_down_z(), 0.001, 1000.0)
        assert record is not None
        assert record.t == pytest.approx(2.0)

    def test_len_and_iter(self, gray):
        world = HittableList()
        sphere = Sphere(vec3(0.0, 0.0, -3.0), 1.0, gray)
        world.add(sphere)
        assert len(world) == 1
        assert list(world) == [sphere]
