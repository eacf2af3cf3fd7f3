"""Scene serialization to and from JSON scene files.

A scene file holds a material table, spheres that reference materials by
index, and an optional camera section:

    {
      "materials": [
        {"type": "lambertian", "albedo": [0.5, 0.5, 0.5]},
        {"type": "metal", "albedo": [0.8, 0.6, 0.2], "fuzz": 0.1},
        {"type": "dielectric", "ir": 1.5}
      ],
      "spheres": [
        {"center": [0, -100.5, -1], "radius": 100, "material": 0},
        {"center": [1, 0, -1], "radius": 0.5, "material": 1}
      ],
      "camera": {"image_width": 400, "aspect_ratio": 1.7778}
    }

Spheres sharing a material by value share one table entry.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from pathtracer.camera.camera import CameraConfig
from pathtracer.core.vector import Vector3
from pathtracer.geometry.sphere import Sphere
from pathtracer.materials import Dielectric, Lambertian, Material, MaterialType, Metal
from pathtracer.scene.world import Scene

logger = logging.getLogger(__name__)


@dataclass
class SceneConfig:
    """Configuration for scene serialization.

    Attributes:
        materials: List of material configurations.
        spheres: List of sphere configurations referencing materials by index.
        camera: Optional camera settings (see CameraConfig.to_dict()).
    """

    materials: list[dict[str, Any]] = field(default_factory=list)
    spheres: list[dict[str, Any]] = field(default_factory=list)
    camera: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        """Export to a dictionary (for JSON serialization)."""
        data: dict[str, Any] = {"materials": self.materials, "spheres": self.spheres}
        if self.camera is not None:
            data["camera"] = self.camera
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SceneConfig:
        """Load from a dictionary with 'materials', 'spheres', 'camera' keys."""
        return cls(
            materials=list(data.get("materials", [])),
            spheres=list(data.get("spheres", [])),
            camera=data.get("camera"),
        )


# =============================================================================
# Material Conversion
# =============================================================================


def material_to_dict(material: Material) -> dict[str, Any]:
    """Export a material to its configuration dictionary."""
    mat_type = material.material_type
    if mat_type == MaterialType.LAMBERTIAN:
        return {"type": "lambertian", "albedo": list(material.albedo)}
    if mat_type == MaterialType.METAL:
        return {"type": "metal", "albedo": list(material.albedo), "fuzz": material.fuzz}
    return {"type": "dielectric", "ir": material.ir}


def material_from_dict(mat_config: dict[str, Any]) -> Material:
    """Build a material from its configuration dictionary.

    Raises:
        ValueError: If the material type is unknown or a parameter is invalid.
    """
    mat_type = str(mat_config.get("type", "")).lower()
    if mat_type == "lambertian":
        albedo = Vector3.from_iterable(mat_config.get("albedo", [0.5, 0.5, 0.5]))
        return Lambertian(albedo)
    if mat_type == "metal":
        albedo = Vector3.from_iterable(mat_config.get("albedo", [0.8, 0.8, 0.8]))
        return Metal(albedo, float(mat_config.get("fuzz", 0.0)))
    if mat_type == "dielectric":
        return Dielectric(float(mat_config.get("ir", 1.5)))
    raise ValueError(f"Unknown material type: {mat_type!r}")


# =============================================================================
# Scene Conversion
# =============================================================================


def scene_to_config(scene: Scene, camera: CameraConfig | None = None) -> SceneConfig:
    """Export a scene (and optionally its camera) to a configuration object.

    Raises:
        TypeError: If the scene contains something other than spheres.
    """
    materials = scene.materials()
    config = SceneConfig(materials=[material_to_dict(m) for m in materials])

    for obj in scene:
        if not isinstance(obj, Sphere):
            raise TypeError(f"Only spheres can be serialized, got {type(obj).__name__}")
        config.spheres.append(
            {
                "center": list(obj.center),
                "radius": obj.radius,
                "material": materials.index(obj.material),
            }
        )

    if camera is not None:
        config.camera = camera.to_dict()
    return config


def scene_from_config(config: SceneConfig) -> tuple[Scene, CameraConfig | None]:
    """Build a scene from a configuration object.

    Args:
        config: The scene configuration to load.

    Returns:
        A tuple of (Scene, CameraConfig or None if the file has no camera).

    Raises:
        ValueError: If the configuration contains invalid data.
    """
    # Load materials first (needed for spheres)
    materials = [material_from_dict(m) for m in config.materials]

    scene = Scene()
    for i, sphere_config in enumerate(config.spheres):
        index = sphere_config.get("material", 0)
        if not isinstance(index, int) or not 0 <= index < len(materials):
            raise ValueError(
                f"Sphere {i} references material {index!r}, "
                f"but the scene defines {len(materials)} materials"
            )
        center = Vector3.from_iterable(sphere_config.get("center", [0.0, 0.0, 0.0]))
        radius = float(sphere_config.get("radius", 1.0))
        scene.add(Sphere(center, radius, materials[index]))

    camera = CameraConfig.from_dict(config.camera) if config.camera is not None else None
    return scene, camera


def load_scene_file(path: str | Path) -> tuple[Scene, CameraConfig | None]:
    """Load a scene from a JSON file.

    Raises:
        ValueError: If the file is not valid JSON or holds invalid data.
    """
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Scene file {path} is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ValueError(f"Scene file {path} must contain a JSON object")

    scene, camera = scene_from_config(SceneConfig.from_dict(data))
    logger.info("Loaded %d spheres from %s", len(scene), path)
    return scene, camera


def save_scene_file(
    path: str | Path,
    scene: Scene,
    camera: CameraConfig | None = None,
) -> None:
    """Save a scene (and optionally its camera) to a JSON file."""
    path = Path(path)
    config = scene_to_config(scene, camera)
    path.write_text(json.dumps(config.to_dict(), indent=2), encoding="utf-8")
    logger.info("Saved %d spheres to %s", len(scene), path)
