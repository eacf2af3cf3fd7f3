"""Scene module for scene construction and serialization.

Components:
    world: Scene container with the nearest-hit query
    presets: Built-in scenes (random spheres, three spheres, single sphere)
    config: SceneConfig and JSON scene files

A scene is built once before rendering and never modified while a render
is in progress.
"""

from .config import (
    SceneConfig,
    load_scene_file,
    material_from_dict,
    material_to_dict,
    save_scene_file,
    scene_from_config,
    scene_to_config,
)
from .presets import (
    PRESETS,
    build_preset,
    random_spheres_scene,
    single_sphere_scene,
    three_spheres_scene,
)
from .world import Scene

__all__ = [
    # World
    "Scene",
    # Presets
    "PRESETS",
    "build_preset",
    "random_spheres_scene",
    "three_spheres_scene",
    "single_sphere_scene",
    # Scene files
    "SceneConfig",
    "scene_to_config",
    "scene_from_config",
    "material_to_dict",
    "material_from_dict",
    "load_scene_file",
    "save_scene_file",
]
