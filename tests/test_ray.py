"""Unit tests for rays and the reflect/refract/Schlick helpers.

Tests cover:
- Ray point evaluation
- Mirror reflection about a normal
- Snell's law refraction and the straight-through case
- Schlick's Fresnel approximation
"""

import math

import pytest

from pathtracer.core.ray import Ray, reflect, refract, schlick_reflectance
from pathtracer.core.vector import Vector3


class TestRay:
    """Tests for Ray."""

    def test_at(self):
        ray = Ray(Vector3(1.0, 2.0, 3.0), Vector3(0.0, 0.0, -2.0))
        assert ray.at(0.0) == Vector3(1.0, 2.0, 3.0)
        assert ray.at(1.5) == Vector3(1.0, 2.0, 0.0)

    def test_ray_is_immutable(self):
        ray = Ray(Vector3.zero(), Vector3(1.0, 0.0, 0.0))
        with pytest.raises(AttributeError):
            ray.origin = Vector3(1.0, 1.0, 1.0)


class TestReflect:
    """Tests for reflect()."""

    def test_reflect_45_degrees(self):
        incident = Vector3(1.0, -1.0, 0.0)
        normal = Vector3(0.0, 1.0, 0.0)
        assert reflect(incident, normal) == Vector3(1.0, 1.0, 0.0)

    def test_reflect_head_on(self):
        assert reflect(Vector3(0.0, 0.0, -1.0), Vector3(0.0, 0.0, 1.0)) == Vector3(0.0, 0.0, 1.0)


class TestRefract:
    """Tests for refract()."""

    def test_equal_indices_pass_straight_through(self):
        incident = Vector3(1.0, -1.0, 0.0).unit()
        refracted = refract(incident, Vector3(0.0, 1.0, 0.0), 1.0)
        assert abs(refracted.x - incident.x) < 1e-12
        assert abs(refracted.y - incident.y) < 1e-12

    def test_snells_law(self):
        """sin(theta_t) = eta_ratio * sin(theta_i) for air into glass."""
        theta_i = math.radians(45.0)
        incident = Vector3(math.sin(theta_i), -math.cos(theta_i), 0.0)
        eta_ratio = 1.0 / 1.5

        refracted = refract(incident, Vector3(0.0, 1.0, 0.0), eta_ratio)

        assert abs(refracted.length() - 1.0) < 1e-9
        assert abs(refracted.x - eta_ratio * math.sin(theta_i)) < 1e-9
        assert refracted.y < 0.0


class TestSchlick:
    """Tests for schlick_reflectance()."""

    def test_normal_incidence_equals_r0(self):
        r0 = ((1.0 - 1.5) / (1.0 + 1.5)) ** 2
        assert schlick_reflectance(1.0, 1.5) == pytest.approx(r0)
        assert schlick_reflectance(1.0, 1.0 / 1.5) == pytest.approx(r0)

    def test_grazing_incidence_reflects_everything(self):
        assert schlick_reflectance(0.0, 1.5) == pytest.approx(1.0)

    def test_monotonic_in_angle(self):
        values = [schlick_reflectance(c, 1.5) for c in (1.0, 0.8, 0.5, 0.2)]
        assert values == sorted(values)
