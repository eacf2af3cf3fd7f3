"""Unit tests for the thin-lens camera.

Tests cover:
- Camera configuration defaults and serialization
- Derived geometry (image height, pixel grid, basis)
- Validation of degenerate configurations
- Ray generation with and without defocus blur
- Pixel color mapping and full renders
"""

import math
from dataclasses import replace

import numpy as np
import pytest

from pathtracer.camera import Camera, CameraConfig
from pathtracer.core.sampling import RandomSource
from pathtracer.core.vector import Vector3
from pathtracer.scene.presets import single_sphere_scene


class TestCameraConfig:
    """Tests for CameraConfig."""

    def test_defaults(self):
        config = CameraConfig()
        assert config.aspect_ratio == 1.0
        assert config.image_width == 100
        assert config.vfov == 90.0
        assert config.lookfrom == (0.0, 0.0, 0.0)
        assert config.lookat == (0.0, 0.0, -1.0)
        assert config.vup == (0.0, 1.0, 0.0)
        assert config.focus_dist == 10.0
        assert config.defocus_angle == 0.0
        assert config.samples_per_pixel == 10

    def test_dict_round_trip(self):
        config = CameraConfig(image_width=64, lookfrom=(13.0, 2.0, 3.0), defocus_angle=0.6)
        data = config.to_dict()
        assert data["lookfrom"] == [13.0, 2.0, 3.0]
        assert CameraConfig.from_dict(data) == config

    def test_from_dict_rejects_unknown_keys(self):
        with pytest.raises(ValueError, match="Unknown camera settings"):
            CameraConfig.from_dict({"image_width": 10, "fov": 45})

    def test_from_dict_rejects_short_vectors(self):
        with pytest.raises(ValueError):
            CameraConfig.from_dict({"lookat": [0.0, 1.0]})


class TestCameraGeometry:
    """Tests for the derived viewing geometry."""

    def test_image_height(self):
        assert Camera(CameraConfig(aspect_ratio=16.0 / 9.0, image_width=400)).image_height == 225
        assert Camera(CameraConfig(aspect_ratio=16.0 / 9.0, image_width=64)).image_height == 36

    def test_image_height_at_least_one(self):
        assert Camera(CameraConfig(aspect_ratio=1000.0, image_width=10)).image_height == 1

    def test_pixel_grid(self):
        """Default camera: 20x20 viewport at z = -10, 0.2 units per pixel."""
        camera = Camera()
        assert camera.center == Vector3(0.0, 0.0, 0.0)
        assert abs(camera.pixel_delta_u.x - 0.2) < 1e-9
        assert abs(camera.pixel_delta_v.y + 0.2) < 1e-9
        p = camera.pixel00_loc
        assert abs(p.x + 9.9) < 1e-9
        assert abs(p.y - 9.9) < 1e-9
        assert abs(p.z + 10.0) < 1e-9

    def test_orthonormal_basis(self):
        camera = Camera(CameraConfig(lookfrom=(13.0, 2.0, 3.0), lookat=(0.0, 0.0, 0.0)))
        for a, b in [(camera.u, camera.v), (camera.v, camera.w), (camera.u, camera.w)]:
            assert abs(a.dot(b)) < 1e-12
        for axis in (camera.u, camera.v, camera.w):
            assert abs(axis.length() - 1.0) < 1e-12


class TestCameraValidation:
    """Tests for rejected configurations."""

    @pytest.mark.parametrize(
        "changes",
        [
            {"image_width": 0},
            {"aspect_ratio": 0.0},
            {"aspect_ratio": math.inf},
            {"samples_per_pixel": 0},
            {"focus_dist": 0.0},
            {"vfov": 0.0},
            {"vfov": 180.0},
            {"vfov": math.nan},
            {"focus_dist": math.nan},
            {"focus_dist": math.inf},
            {"defocus_angle": math.nan},
            {"defocus_angle": math.inf},
            {"defocus_angle": 180.0},
            {"lookfrom": (math.nan, 0.0, 0.0)},
            {"lookat": (0.0, math.inf, -1.0)},
            {"vup": (0.0, 1.0, -math.inf)},
        ],
    )
    def test_rejects_out_of_range(self, changes):
        with pytest.raises(ValueError):
            Camera(replace(CameraConfig(), **changes))

    def test_negative_defocus_angle_is_pinhole(self, rng):
        camera = Camera(CameraConfig(defocus_angle=-1.0))
        assert camera.get_ray(0, 0, rng).origin == camera.center

    def test_rejects_lookat_equal_lookfrom(self):
        with pytest.raises(ValueError, match="must differ"):
            Camera(CameraConfig(lookfrom=(1.0, 1.0, 1.0), lookat=(1.0, 1.0, 1.0)))

    def test_rejects_vup_parallel_to_view(self):
        with pytest.raises(ValueError, match="parallel"):
            Camera(CameraConfig(lookfrom=(0.0, 5.0, 0.0), lookat=(0.0, 0.0, 0.0)))


class TestCameraRays:
    """Tests for Camera.get_ray()."""

    def test_pinhole_rays_start_at_center(self, rng):
        camera = Camera()
        for _ in range(20):
            assert camera.get_ray(3, 7, rng).origin == camera.center

    def test_jitter_stays_inside_pixel(self, rng):
        camera = Camera()
        for _ in range(50):
            ray = camera.get_ray(0, 0, rng)
            target = ray.origin + ray.direction
            assert -10.0 <= target.x <= -9.8
            assert 9.8 <= target.y <= 10.0

    def test_defocus_origins_lie_on_disk(self, rng):
        config = CameraConfig(focus_dist=2.0, defocus_angle=10.0)
        camera = Camera(config)
        radius = 2.0 * math.tan(math.radians(5.0))
        origins = [camera.get_ray(50, 50, rng).origin for _ in range(100)]
        assert all(abs(o.z) < 1e-12 for o in origins)
        assert all(o.length() < radius + 1e-12 for o in origins)
        assert any(o.length() > 0.0 for o in origins)


class TestCameraRender:
    """Tests for color mapping and rendering."""

    def test_to_rgb8(self):
        assert Camera.to_rgb8(Vector3(0.25, 1.0, 4.0)) == (127, 255, 255)
        assert Camera.to_rgb8(Vector3(0.0, -1.0, math.nan)) == (0, 0, 0)

    def test_render_shape_and_progress(self, rng):
        scene, config = single_sphere_scene()
        camera = Camera(replace(config, image_width=12, samples_per_pixel=2))
        progress = []

        image = camera.render(scene, rng, progress.append)

        assert image.shape == (12, 12, 3)
        assert image.dtype == np.uint8
        assert len(progress) == 12
        assert progress == sorted(progress)
        assert progress[-1] == 100

    def test_seeded_renders_are_reproducible(self):
        scene, config = single_sphere_scene()
        camera = Camera(replace(config, image_width=8, samples_per_pixel=2))
        a = camera.render(scene, RandomSource(3))
        b = camera.render(scene, RandomSource(3))
        np.testing.assert_array_equal(a, b)

    def test_render_linear_matches_render(self):
        scene, config = single_sphere_scene()
        camera = Camera(replace(config, image_width=6, samples_per_pixel=2))
        linear = camera.render_linear(scene, RandomSource(4))
        image = camera.render(scene, RandomSource(4))
        expected = np.array(
            [[Camera.to_rgb8(Vector3(*linear[y, x])) for x in range(6)] for y in range(6)],
            dtype=np.uint8,
        )
        np.testing.assert_array_equal(image, expected)

    def test_sky_rows_are_bluer_at_top(self, rng):
        scene, config = single_sphere_scene()
        camera = Camera(replace(config, image_width=16, samples_per_pixel=4))
        image = camera.render(scene, rng)
        # Red fades as the sky turns blue toward the zenith
        assert image[0, 0, 0] < image[15, 0, 0]
