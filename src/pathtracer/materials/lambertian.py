"""Lambertian (ideal diffuse) material.

The scatter direction is the surface normal plus a random unit vector, which
produces a cosine-weighted distribution about the normal. When the random
vector nearly cancels the normal the normal itself is used instead, so the
scattered ray never has a degenerate direction.

Example:
    >>> from pathtracer.core.vector import Vector3
    >>> from pathtracer.materials.lambertian import Lambertian
    >>> gray = Lambertian(Vector3(0.5, 0.5, 0.5))
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

from pathtracer.core.ray import Ray
from pathtracer.core.vector import Vector3
from pathtracer.materials.material import MaterialType, ScatterResult, validate_albedo

if TYPE_CHECKING:
    from pathtracer.core.sampling import RandomSource
    from pathtracer.geometry.hittable import HitRecord


@dataclass(frozen=True, slots=True)
class Lambertian:
    """Lambertian (ideal diffuse) material properties.

    Attributes:
        albedo: The diffuse reflectance color (RGB, each component in [0, 1]).
    """

    material_type: ClassVar[MaterialType] = MaterialType.LAMBERTIAN

    albedo: Vector3

    def __post_init__(self) -> None:
        validate_albedo(self.albedo)

    def scatter(self, ray_in: Ray, rec: HitRecord, rng: RandomSource) -> ScatterResult | None:
        """Scatter diffusely about the surface normal.

        Args:
            ray_in: The incoming ray (unused; diffuse scattering ignores it).
            rec: The hit record at the surface.
            rng: Random source for the scatter direction.

        Returns:
            ScatterResult with attenuation = albedo, or None if the random
            unit vector could not be formed.
        """
        random_direction = Vector3.random_unit_vector(rng)
        if random_direction is None:
            return None

        scatter_direction = rec.normal + random_direction

        # Catch degenerate scatter direction
        if scatter_direction.near_zero():
            scatter_direction = rec.normal

        return ScatterResult(self.albedo, Ray(rec.p, scatter_direction))
