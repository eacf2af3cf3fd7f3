"""Tests for the Scene container and its nearest-hit query."""

import itertools
import math

from pathtracer.core.interval import Interval
from pathtracer.core.ray import Ray
from pathtracer.core.vector import Vector3
from pathtracer.geometry.sphere import Sphere
from pathtracer.materials import Dielectric, Lambertian, Metal
from pathtracer.scene.world import Scene

RAY_T = Interval(0.001, math.inf)


def _row_of_spheres():
    red = Lambertian(Vector3(0.9, 0.1, 0.1))
    green = Lambertian(Vector3(0.1, 0.9, 0.1))
    glass = Dielectric(1.5)
    return [
        Sphere(Vector3(0.0, 0.0, -5.0), 1.0, red),
        Sphere(Vector3(0.0, 0.0, -2.0), 0.5, green),
        Sphere(Vector3(0.0, 0.0, -9.0), 2.0, glass),
    ]


class TestSceneContainer:
    """Tests for adding and listing members."""

    def test_empty_scene_never_hits(self):
        scene = Scene()
        assert len(scene) == 0
        assert scene.hit(Ray(Vector3.zero(), Vector3(0.0, 0.0, -1.0)), RAY_T) is None

    def test_add_extend_clear(self):
        spheres = _row_of_spheres()
        scene = Scene()
        scene.add(spheres[0])
        scene.extend(spheres[1:])
        assert scene.objects == tuple(spheres)
        assert list(scene) == spheres
        scene.clear()
        assert len(scene) == 0

    def test_materials_are_distinct_by_value(self):
        scene = Scene(
            [
                Sphere(Vector3(0.0, 0.0, -1.0), 0.5, Lambertian(Vector3(0.5, 0.5, 0.5))),
                Sphere(Vector3(1.0, 0.0, -1.0), 0.5, Metal(Vector3(0.8, 0.8, 0.8), 0.3)),
                Sphere(Vector3(2.0, 0.0, -1.0), 0.5, Lambertian(Vector3(0.5, 0.5, 0.5))),
            ]
        )
        materials = scene.materials()
        assert len(materials) == 2
        assert isinstance(materials[0], Lambertian)
        assert isinstance(materials[1], Metal)


class TestSceneHit:
    """Tests for the nearest-hit query."""

    def test_returns_nearest_hit(self):
        scene = Scene(_row_of_spheres())
        rec = scene.hit(Ray(Vector3.zero(), Vector3(0.0, 0.0, -1.0)), RAY_T)
        assert rec is not None
        assert abs(rec.t - 1.5) < 1e-12
        assert rec.material == Lambertian(Vector3(0.1, 0.9, 0.1))

    def test_nearest_hit_independent_of_order(self):
        ray = Ray(Vector3(0.1, 0.05, 0.0), Vector3(0.0, 0.0, -1.0))
        expected = Scene(_row_of_spheres()).hit(ray, RAY_T)
        assert expected is not None
        for order in itertools.permutations(_row_of_spheres()):
            rec = Scene(order).hit(ray, RAY_T)
            assert rec is not None
            assert rec.t == expected.t
            assert rec.material == expected.material

    def test_respects_interval(self):
        scene = Scene(_row_of_spheres())
        rec = scene.hit(Ray(Vector3.zero(), Vector3(0.0, 0.0, -1.0)), Interval(3.0, math.inf))
        assert rec is not None
        assert abs(rec.t - 4.0) < 1e-12
