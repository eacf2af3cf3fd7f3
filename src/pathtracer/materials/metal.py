"""Metal (specular reflective) material.

Mirror reflection of the unit incoming direction, perturbed by a random unit
vector scaled by the fuzz factor. Fuzz 0 is a perfect mirror.

The scattered ray is always returned, even when the fuzzed direction dips
below the surface.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

from pathtracer.core.ray import Ray, reflect
from pathtracer.core.vector import Vector3
from pathtracer.materials.material import MaterialType, ScatterResult, validate_albedo

if TYPE_CHECKING:
    from pathtracer.core.sampling import RandomSource
    from pathtracer.geometry.hittable import HitRecord


@dataclass(frozen=True, slots=True)
class Metal:
    """Metal material properties.

    Attributes:
        albedo: The specular reflectance color (RGB, each component in [0, 1]).
        fuzz: Perturbation radius of the reflected direction. Not clamped;
            values above 1 simply scatter more widely.
    """

    material_type: ClassVar[MaterialType] = MaterialType.METAL

    albedo: Vector3
    fuzz: float = 0.0

    def __post_init__(self) -> None:
        validate_albedo(self.albedo)

    def scatter(self, ray_in: Ray, rec: HitRecord, rng: RandomSource) -> ScatterResult | None:
        """Reflect the incoming ray with optional fuzz.

        Args:
            ray_in: The incoming ray.
            rec: The hit record at the surface.
            rng: Random source for the fuzz perturbation.

        Returns:
            ScatterResult with attenuation = albedo, or None if the incoming
            direction has zero length.
        """
        unit_direction = ray_in.direction.unit()
        if unit_direction is None:
            return None
        fuzz_direction = Vector3.random_unit_vector(rng)
        if fuzz_direction is None:
            return None

        reflected = reflect(unit_direction, rec.normal)
        return ScatterResult(self.albedo, Ray(rec.p, reflected + self.fuzz * fuzz_direction))
