"""Ray intersection protocol and hit records.

Anything that can be hit by a ray (a single sphere, or the whole scene)
implements the Hittable protocol:

    rec = obj.hit(ray, ray_t)

which returns the closest HitRecord whose distance lies strictly inside
ray_t, or None on a miss.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from pathtracer.core.interval import Interval
from pathtracer.core.ray import Ray
from pathtracer.core.vector import Vector3

if TYPE_CHECKING:
    from pathtracer.materials import Material


@dataclass(frozen=True, slots=True)
class HitRecord:
    """Record of a ray-surface intersection.

    Attributes:
        p: The intersection point.
        normal: Unit surface normal, always facing against the incoming ray.
        t: The ray parameter at the intersection.
        front_face: True if the ray hit the outside of the surface.
        material: The material of the surface that was hit.
    """

    p: Vector3
    normal: Vector3
    t: float
    front_face: bool
    material: Material

    @classmethod
    def from_outward_normal(
        cls,
        ray: Ray,
        t: float,
        p: Vector3,
        outward_normal: Vector3,
        material: Material,
    ) -> HitRecord:
        """Build a record, orienting the normal against the ray.

        Args:
            ray: The incoming ray.
            t: The ray parameter at the hit.
            p: The hit point.
            outward_normal: Unit normal pointing out of the surface.
            material: The surface material.

        Returns:
            A HitRecord with front_face set from the ray direction and the
            normal flipped when the ray hit the inside.
        """
        front_face = ray.direction.dot(outward_normal) < 0.0
        normal = outward_normal if front_face else -outward_normal
        return cls(p=p, normal=normal, t=t, front_face=front_face, material=material)


class Hittable(Protocol):
    """Protocol for objects that can be intersected by rays."""

    def hit(self, ray: Ray, ray_t: Interval) -> HitRecord | None:
        """Return the nearest hit with t strictly inside ray_t, or None."""
        ...
