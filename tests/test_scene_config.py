"""Tests for scene serialization and JSON scene files."""

import json
import math
from pathlib import Path

import pytest

from pathtracer.camera import CameraConfig
from pathtracer.core.interval import Interval
from pathtracer.core.sampling import RandomSource
from pathtracer.core.vector import Vector3
from pathtracer.materials import Dielectric, Lambertian, Metal
from pathtracer.scene.config import (
    SceneConfig,
    load_scene_file,
    material_from_dict,
    material_to_dict,
    save_scene_file,
    scene_from_config,
    scene_to_config,
)
from pathtracer.scene.presets import random_spheres_scene, three_spheres_scene
from pathtracer.scene.world import Scene


class TestMaterialConversion:
    """Tests for material dictionaries."""

    def test_round_trip_each_type(self):
        for material in (
            Lambertian(Vector3(0.1, 0.2, 0.3)),
            Metal(Vector3(0.8, 0.6, 0.2), 0.25),
            Dielectric(1.33),
        ):
            assert material_from_dict(material_to_dict(material)) == material

    def test_type_is_case_insensitive(self):
        assert material_from_dict({"type": "Dielectric", "ir": 2.4}) == Dielectric(2.4)

    def test_unknown_type(self):
        with pytest.raises(ValueError, match="Unknown material type"):
            material_from_dict({"type": "emissive"})

    def test_invalid_parameters(self):
        with pytest.raises(ValueError):
            material_from_dict({"type": "lambertian", "albedo": [2.0, 0.0, 0.0]})
        with pytest.raises(ValueError):
            material_from_dict({"type": "dielectric", "ir": -1.0})


class TestSceneConversion:
    """Tests for scene_to_config() and scene_from_config()."""

    def test_shared_materials_share_an_index(self):
        scene, _ = three_spheres_scene()
        config = scene_to_config(scene)
        assert len(config.materials) == 4
        assert config.spheres[2]["material"] == config.spheres[3]["material"]

    def test_round_trip(self):
        scene, camera = random_spheres_scene(RandomSource(5))
        loaded, loaded_camera = scene_from_config(
            SceneConfig.from_dict(scene_to_config(scene, camera).to_dict())
        )
        assert loaded.objects == scene.objects
        assert loaded_camera == camera

    def test_camera_is_optional(self):
        scene, _ = three_spheres_scene()
        config = scene_to_config(scene)
        assert "camera" not in config.to_dict()
        _, camera = scene_from_config(config)
        assert camera is None

    def test_bad_material_index(self):
        config = SceneConfig(
            materials=[{"type": "dielectric"}],
            spheres=[{"center": [0, 0, -1], "radius": 0.5, "material": 3}],
        )
        with pytest.raises(ValueError, match="references material"):
            scene_from_config(config)

    def test_non_sphere_cannot_be_serialized(self):
        class Plane:
            material = Lambertian(Vector3(0.5, 0.5, 0.5))

            def hit(self, ray, ray_t: Interval):
                return None

        with pytest.raises(TypeError, match="Only spheres"):
            scene_to_config(Scene([Plane()]))


class TestSceneFiles:
    """Tests for load_scene_file() and save_scene_file()."""

    def test_save_and_load(self, tmp_path: Path):
        scene, camera = three_spheres_scene()
        path = tmp_path / "scene.json"

        save_scene_file(path, scene, camera)
        loaded, loaded_camera = load_scene_file(path)

        assert loaded.objects == scene.objects
        assert loaded_camera == camera
        data = json.loads(path.read_text())
        assert set(data) == {"materials", "spheres", "camera"}

    def test_hand_written_file(self, tmp_path: Path):
        path = tmp_path / "scene.json"
        path.write_text(
            json.dumps(
                {
                    "materials": [{"type": "metal", "albedo": [0.7, 0.7, 0.7]}],
                    "spheres": [{"center": [0, 0, -1], "radius": 0.5, "material": 0}],
                    "camera": {"image_width": 32, "vfov": 40},
                }
            )
        )
        scene, camera = load_scene_file(path)
        assert scene.objects[0].material == Metal(Vector3(0.7, 0.7, 0.7), 0.0)
        assert camera.image_width == 32
        assert math.isclose(camera.vfov, 40.0)

    def test_invalid_json(self, tmp_path: Path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        with pytest.raises(ValueError, match="not valid JSON"):
            load_scene_file(path)

    def test_top_level_must_be_object(self, tmp_path: Path):
        path = tmp_path / "list.json"
        path.write_text("[]")
        with pytest.raises(ValueError, match="JSON object"):
            load_scene_file(path)
