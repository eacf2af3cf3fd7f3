"""Depth-limited Monte Carlo color integrator.

This module estimates the color carried back along a single camera ray. At
every surface hit the material either absorbs the ray (black) or scatters it
with an attenuation; a ray that escapes the scene picks up the sky gradient.
There are no emitters other than the sky.

Two equivalent forms are provided:
    - ray_color(): iterative loop carrying a throughput accumulator, used by
      the camera. Result = product of attenuations * background, or black.
    - ray_color_recursive(): the literal recursive definition, kept for
      cross-checking.

Both forms consume the random source in the same order, so for the same
seeded source they return the same color.

Example:
    >>> from pathtracer.core.integrator import ray_color, MAX_DEPTH
    >>> from pathtracer.core.ray import Ray
    >>> from pathtracer.core.sampling import RandomSource
    >>> from pathtracer.core.vector import Vector3
    >>> from pathtracer.scene.world import Scene
    >>> ray = Ray(Vector3(0.0, 0.0, 0.0), Vector3(0.0, 1.0, 0.0))
    >>> ray_color(ray, MAX_DEPTH, Scene(), RandomSource(seed=1))
    Vector3(x=0.5, y=0.7, z=1.0)
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from pathtracer.core.interval import Interval
from pathtracer.core.ray import Ray
from pathtracer.core.vector import Vector3

if TYPE_CHECKING:
    from pathtracer.core.sampling import RandomSource
    from pathtracer.geometry.hittable import Hittable

# =============================================================================
# Rendering Constants
# =============================================================================

# Maximum ray bounces (path length)
MAX_DEPTH = 50

# Hit distance bounds; T_MIN keeps scattered rays from re-hitting their origin
T_MIN = 0.001
T_MAX = math.inf

# Sky gradient endpoints (horizon white to zenith blue)
SKY_WHITE = Vector3(1.0, 1.0, 1.0)
SKY_BLUE = Vector3(0.5, 0.7, 1.0)


def background_color(ray: Ray) -> Vector3:
    """Sky color seen along an escaping ray.

    Blends linearly from white (looking straight down) to light blue (looking
    straight up) using the y component of the unit direction.

    Args:
        ray: The escaping ray.

    Returns:
        The sky color, or black for a zero-length direction.
    """
    unit_direction = ray.direction.unit()
    if unit_direction is None:
        return Vector3.zero()
    a = 0.5 * (unit_direction.y + 1.0)
    return (1.0 - a) * SKY_WHITE + a * SKY_BLUE


def ray_color(ray: Ray, depth: int, scene: Hittable, rng: RandomSource) -> Vector3:
    """Estimate the color carried along a ray.

    Args:
        ray: The ray to trace.
        depth: Remaining bounce budget. Zero or less returns black.
        scene: The hittable world to intersect against.
        rng: Random source consumed by material scattering.

    Returns:
        Linear RGB color (unclamped).
    """
    throughput = Vector3(1.0, 1.0, 1.0)
    current = ray
    ray_t = Interval(T_MIN, T_MAX)

    for _ in range(depth):
        rec = scene.hit(current, ray_t)
        if rec is None:
            return throughput * background_color(current)

        result = rec.material.scatter(current, rec, rng)
        if result is None:
            return Vector3.zero()

        throughput = throughput * result.attenuation
        current = result.scattered

    # Bounce budget exhausted
    return Vector3.zero()


def ray_color_recursive(ray: Ray, depth: int, scene: Hittable, rng: RandomSource) -> Vector3:
    """Recursive form of ray_color()."""
    if depth <= 0:
        return Vector3.zero()

    rec = scene.hit(ray, Interval(T_MIN, T_MAX))
    if rec is None:
        return background_color(ray)

    result = rec.material.scatter(ray, rec, rng)
    if result is None:
        return Vector3.zero()
    return result.attenuation * ray_color_recursive(result.scattered, depth - 1, scene, rng)
