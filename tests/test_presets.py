"""Tests for the built-in scene presets."""

import pytest

from pathtracer.camera import Camera, CameraConfig
from pathtracer.core.sampling import RandomSource
from pathtracer.core.vector import Vector3
from pathtracer.geometry.sphere import Sphere
from pathtracer.materials import Dielectric, Lambertian, Metal
from pathtracer.scene.presets import (
    CLEARING_POINT,
    CLEARING_RADIUS,
    GRID_MAX,
    GRID_MIN,
    PRESETS,
    SMALL_RADIUS,
    build_preset,
    random_spheres_scene,
    single_sphere_scene,
    three_spheres_scene,
)


class TestRandomSpheresScene:
    """Tests for the random spheres cover scene."""

    def test_layout(self):
        scene, _ = random_spheres_scene(RandomSource(1))
        spheres = scene.objects
        max_small = (GRID_MAX - GRID_MIN) ** 2

        assert 4 < len(spheres) <= 1 + max_small + 3
        assert spheres[0] == Sphere(
            Vector3(0.0, -1000.0, -1.0), 1000.0, Lambertian(Vector3(0.5, 0.5, 0.5))
        )
        big = spheres[-3:]
        assert isinstance(big[0].material, Dielectric)
        assert isinstance(big[1].material, Lambertian)
        assert isinstance(big[2].material, Metal)
        assert big[1].center == Vector3(-4.0, 1.0, 0.0)

    def test_small_spheres_avoid_clearing(self):
        scene, _ = random_spheres_scene(RandomSource(2))
        for sphere in scene.objects[1:-3]:
            assert sphere.radius == SMALL_RADIUS
            assert sphere.center.y == SMALL_RADIUS
            assert (sphere.center - CLEARING_POINT).length() > CLEARING_RADIUS

    def test_material_mix(self):
        scene, _ = random_spheres_scene(RandomSource(3))
        small = [s.material for s in scene.objects[1:-3]]
        diffuse = sum(isinstance(m, Lambertian) for m in small)
        assert diffuse > len(small) // 2
        assert any(isinstance(m, Metal) for m in small)
        metals = [m for m in small if isinstance(m, Metal)]
        for m in metals:
            assert 0.0 <= m.fuzz < 0.5
            assert all(0.0 <= c < 1.0 for c in m.albedo)
        # Metal albedo spans the whole unit range, not just the bright half
        assert min(min(m.albedo) for m in metals) < 0.5

    def test_same_seed_same_scene(self):
        a, _ = random_spheres_scene(RandomSource(7))
        b, _ = random_spheres_scene(RandomSource(7))
        assert a.objects == b.objects

    def test_camera(self):
        _, config = random_spheres_scene(RandomSource(1))
        camera = Camera(config)
        assert config.vfov == 20.0
        assert config.lookfrom == (13.0, 2.0, 3.0)
        assert config.defocus_angle == 0.6
        assert camera.image_height == 405


class TestFixedScenes:
    """Tests for the deterministic presets."""

    def test_three_spheres(self):
        scene, config = three_spheres_scene()
        assert len(scene) == 5
        assert len(scene.materials()) == 4
        # The inner glass sphere is hollow
        assert scene.objects[3].radius < 0.0
        assert scene.objects[3].material == scene.objects[2].material
        Camera(config)

    def test_single_sphere(self):
        scene, config = single_sphere_scene(albedo=(0.2, 0.4, 0.6))
        assert len(scene) == 1
        assert scene.objects[0].material == Lambertian(Vector3(0.2, 0.4, 0.6))
        assert isinstance(config, CameraConfig)


class TestBuildPreset:
    """Tests for preset lookup by name."""

    @pytest.mark.parametrize("name", sorted(PRESETS))
    def test_every_preset_builds(self, name):
        scene, config = build_preset(name, RandomSource(0))
        assert len(scene) > 0
        Camera(config)

    def test_unknown_preset(self):
        with pytest.raises(ValueError, match="Unknown scene preset"):
            build_preset("cornell", RandomSource(0))
