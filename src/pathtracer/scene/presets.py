"""Built-in scene presets.

Each preset returns a (Scene, CameraConfig) pair: the world plus the camera
it was composed for. Command-line options can override the camera afterward.

Presets:
    random: The classic cover scene, a field of small random spheres around
        three large ones (diffuse, glass, metal) on a huge ground sphere.
    three-spheres: Diffuse, hollow glass and metal spheres side by side.
    single: One diffuse sphere in front of the camera under the sky.

Example:
    >>> from pathtracer.core.sampling import RandomSource
    >>> from pathtracer.scene.presets import build_preset
    >>> scene, camera_config = build_preset("random", RandomSource(seed=1))
    >>> camera_config.vfov
    20.0
"""

from __future__ import annotations

from collections.abc import Callable

from pathtracer.camera.camera import CameraConfig
from pathtracer.core.sampling import RandomSource
from pathtracer.core.vector import Vector3
from pathtracer.geometry.sphere import Sphere
from pathtracer.materials import Dielectric, Lambertian, Material, Metal
from pathtracer.scene.world import Scene

# =============================================================================
# Random Spheres Constants
# =============================================================================

# One small sphere per unit cell for a, b in [GRID_MIN, GRID_MAX)
GRID_MIN = -11
GRID_MAX = 11
SMALL_RADIUS = 0.2

# Material mix of the small spheres
DIFFUSE_PROBABILITY = 0.8
METAL_PROBABILITY = 0.15

# Small spheres closer than this to the clearing point are skipped
CLEARING_POINT = Vector3(4.0, 0.2, 0.0)
CLEARING_RADIUS = 0.9

GROUND_ALBEDO = Vector3(0.5, 0.5, 0.5)
GLASS_IOR = 1.5


# =============================================================================
# Preset Factories
# =============================================================================


def _random_small_material(choose_mat: float, rng: RandomSource) -> Material:
    if choose_mat < DIFFUSE_PROBABILITY:
        albedo = Vector3.random(rng) * Vector3.random(rng)
        return Lambertian(albedo)
    if choose_mat < DIFFUSE_PROBABILITY + METAL_PROBABILITY:
        albedo = Vector3.random(rng)
        fuzz = rng.uniform(0.0, 0.5)
        return Metal(albedo, fuzz)
    return Dielectric(GLASS_IOR)


def random_spheres_scene(rng: RandomSource) -> tuple[Scene, CameraConfig]:
    """Create the random spheres cover scene.

    Args:
        rng: Random source for sphere placement and materials. A seeded
            source always produces the same scene.

    Returns:
        A tuple of (Scene, CameraConfig) with the wide 16:9 camera at
        (13, 2, 3) looking at the origin with a slight defocus blur.
    """
    scene = Scene()
    scene.add(Sphere(Vector3(0.0, -1000.0, -1.0), 1000.0, Lambertian(GROUND_ALBEDO)))

    for a in range(GRID_MIN, GRID_MAX):
        for b in range(GRID_MIN, GRID_MAX):
            choose_mat = rng.random()
            center = Vector3(a + 0.9 * rng.random(), SMALL_RADIUS, b + 0.9 * rng.random())
            if (center - CLEARING_POINT).length() > CLEARING_RADIUS:
                material = _random_small_material(choose_mat, rng)
                scene.add(Sphere(center, SMALL_RADIUS, material))

    scene.add(Sphere(Vector3(0.0, 1.0, 0.0), 1.0, Dielectric(GLASS_IOR)))
    scene.add(Sphere(Vector3(-4.0, 1.0, 0.0), 1.0, Lambertian(Vector3(0.4, 0.2, 0.1))))
    scene.add(Sphere(Vector3(4.0, 1.0, 0.0), 1.0, Metal(Vector3(0.7, 0.6, 0.5), 0.0)))

    camera = CameraConfig(
        aspect_ratio=16.0 / 9.0,
        image_width=720,
        vfov=20.0,
        lookfrom=(13.0, 2.0, 3.0),
        lookat=(0.0, 0.0, 0.0),
        vup=(0.0, 1.0, 0.0),
        focus_dist=10.0,
        defocus_angle=0.6,
        samples_per_pixel=500,
    )
    return scene, camera


def three_spheres_scene() -> tuple[Scene, CameraConfig]:
    """Create a small scene with one sphere of each material.

    The glass sphere on the left holds a slightly smaller sphere with a
    negative radius, whose inward normals make it a hollow bubble.

    Returns:
        A tuple of (Scene, CameraConfig).
    """
    ground = Lambertian(Vector3(0.8, 0.8, 0.0))
    center = Lambertian(Vector3(0.1, 0.2, 0.5))
    glass = Dielectric(GLASS_IOR)
    metal = Metal(Vector3(0.8, 0.6, 0.2), 0.1)

    scene = Scene(
        [
            Sphere(Vector3(0.0, -100.5, -1.0), 100.0, ground),
            Sphere(Vector3(0.0, 0.0, -1.0), 0.5, center),
            Sphere(Vector3(-1.0, 0.0, -1.0), 0.5, glass),
            Sphere(Vector3(-1.0, 0.0, -1.0), -0.4, glass),
            Sphere(Vector3(1.0, 0.0, -1.0), 0.5, metal),
        ]
    )
    camera = CameraConfig(
        aspect_ratio=16.0 / 9.0,
        image_width=400,
        vfov=90.0,
        lookfrom=(0.0, 0.0, 0.0),
        lookat=(0.0, 0.0, -1.0),
        focus_dist=1.0,
        samples_per_pixel=100,
    )
    return scene, camera


def single_sphere_scene(
    albedo: tuple[float, float, float] = (0.5, 0.5, 0.5),
) -> tuple[Scene, CameraConfig]:
    """Create a scene with one diffuse sphere of radius 0.5 at (0, 0, -1).

    Args:
        albedo: Diffuse color of the sphere.

    Returns:
        A tuple of (Scene, CameraConfig) looking down -z from the origin.
    """
    scene = Scene([Sphere(Vector3(0.0, 0.0, -1.0), 0.5, Lambertian(Vector3(*albedo)))])
    camera = CameraConfig(
        aspect_ratio=1.0,
        image_width=100,
        vfov=90.0,
        lookfrom=(0.0, 0.0, 0.0),
        lookat=(0.0, 0.0, -1.0),
        focus_dist=1.0,
        samples_per_pixel=10,
    )
    return scene, camera


PresetFactory = Callable[[RandomSource], tuple[Scene, CameraConfig]]

PRESETS: dict[str, PresetFactory] = {
    "random": random_spheres_scene,
    "three-spheres": lambda rng: three_spheres_scene(),
    "single": lambda rng: single_sphere_scene(),
}


def build_preset(name: str, rng: RandomSource) -> tuple[Scene, CameraConfig]:
    """Build a preset scene by name.

    Raises:
        ValueError: If name is not a registered preset.
    """
    if name not in PRESETS:
        raise ValueError(f"Unknown scene preset: {name!r}. Choose from {sorted(PRESETS)}")
    return PRESETS[name](rng)
