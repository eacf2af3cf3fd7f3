"""Ray data structure and direction utilities.

This module provides the Ray value type and the direction helpers used by the
material scattering models:

    - reflect(): mirror a direction about a surface normal
    - refract(): bend a unit direction through a surface (Snell's law)
    - schlick_reflectance(): Fresnel reflectance approximation

Example:
    >>> from pathtracer.core.ray import Ray
    >>> from pathtracer.core.vector import Vector3
    >>> ray = Ray(Vector3(0.0, 0.0, 0.0), Vector3(0.0, 0.0, -1.0))
    >>> ray.at(5.0)
    Vector3(x=0.0, y=0.0, z=-5.0)
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from pathtracer.core.vector import Vector3


@dataclass(frozen=True, slots=True)
class Ray:
    """A ray with an origin point and direction vector.

    Rays are created fresh per camera sample and per scatter event and are
    never shared between paths.

    Attributes:
        origin: The starting point of the ray.
        direction: The direction vector. Not required to be normalized.
    """

    origin: Vector3
    direction: Vector3

    def at(self, t: float) -> Vector3:
        """Compute the point origin + t * direction."""
        return self.origin + t * self.direction


def reflect(incident: Vector3, normal: Vector3) -> Vector3:
    """Reflect an incident vector about a normal.

    Args:
        incident: The incoming direction (pointing toward the surface).
        normal: The unit surface normal.

    Returns:
        incident - 2 * (incident . normal) * normal
    """
    return incident - 2.0 * incident.dot(normal) * normal


def refract(incident: Vector3, normal: Vector3, eta_ratio: float) -> Vector3:
    """Refract a unit direction through a surface.

    Splits the refracted ray into components perpendicular and parallel to
    the normal. The absolute value under the square root keeps the result
    finite at the total internal reflection boundary; callers decide whether
    refraction is possible before calling.

    Args:
        incident: The unit incoming direction.
        normal: The unit surface normal, opposing the incoming direction.
        eta_ratio: Ratio of refractive indices (n_incident / n_transmitted).

    Returns:
        The refracted direction.
    """
    cos_theta = min((-incident).dot(normal), 1.0)
    r_out_perp = eta_ratio * (incident + cos_theta * normal)
    r_out_parallel = normal * -math.sqrt(abs(1.0 - r_out_perp.length_squared()))
    return r_out_perp + r_out_parallel


def schlick_reflectance(cosine: float, refraction_ratio: float) -> float:
    """Compute Fresnel reflectance using Schlick's approximation.

    Args:
        cosine: Cosine of the angle between the incident direction and normal.
        refraction_ratio: Ratio of refractive indices.

    Returns:
        r0 + (1 - r0) * (1 - cosine)^5 with r0 = ((1 - ratio) / (1 + ratio))^2.
        At cosine == 1 this is exactly r0.
    """
    r0 = (1.0 - refraction_ratio) / (1.0 + refraction_ratio)
    r0 = r0 * r0
    return r0 + (1.0 - r0) * (1.0 - cosine) ** 5
