"""Dielectric (glass/water) material.

A dielectric either reflects or refracts every incoming ray; it never
absorbs and never tints (attenuation is white).

    ratio = 1 / ir  on the front face (entering the material)
            ir      on the back face (leaving it)

Reflection is forced when Snell's law has no solution (total internal
reflection, ratio * sin_theta > 1). Otherwise the ray reflects with
probability given by Schlick's approximation and refracts the rest of the
time. The random draw only happens when refraction is possible.

Example:
    >>> from pathtracer.materials.dielectric import Dielectric
    >>> glass = Dielectric(1.5)
    >>> air_bubble = Dielectric(1.0 / 1.33)
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

from pathtracer.core.ray import Ray, reflect, refract, schlick_reflectance
from pathtracer.core.vector import Vector3
from pathtracer.materials.material import (
    MaterialType,
    ScatterResult,
    validate_refraction_index,
)

if TYPE_CHECKING:
    from pathtracer.core.sampling import RandomSource
    from pathtracer.geometry.hittable import HitRecord

# Refraction index of common glass
GLASS_IOR = 1.5


@dataclass(frozen=True, slots=True)
class Dielectric:
    """Dielectric material properties.

    Attributes:
        ir: Index of refraction relative to the surrounding medium
            (1.0 = air, 1.5 = glass, 2.4 = diamond).
    """

    material_type: ClassVar[MaterialType] = MaterialType.DIELECTRIC

    ir: float = GLASS_IOR

    def __post_init__(self) -> None:
        validate_refraction_index(self.ir)

    def scatter(self, ray_in: Ray, rec: HitRecord, rng: RandomSource) -> ScatterResult | None:
        """Reflect or refract the incoming ray.

        Args:
            ray_in: The incoming ray.
            rec: The hit record at the surface.
            rng: Random source for the Fresnel choice.

        Returns:
            ScatterResult with white attenuation, or None if the incoming
            direction has zero length.
        """
        unit_direction = ray_in.direction.unit()
        if unit_direction is None:
            return None

        refraction_ratio = 1.0 / self.ir if rec.front_face else self.ir
        cos_theta = min((-unit_direction).dot(rec.normal), 1.0)
        sin_theta = math.sqrt(max(0.0, 1.0 - cos_theta * cos_theta))

        cannot_refract = refraction_ratio * sin_theta > 1.0
        if cannot_refract or rng.uniform(0.0, 1.0) < schlick_reflectance(
            cos_theta, refraction_ratio
        ):
            direction = reflect(unit_direction, rec.normal)
        else:
            direction = refract(unit_direction, rec.normal, refraction_ratio)

        return ScatterResult(Vector3(1.0, 1.0, 1.0), Ray(rec.p, direction))
