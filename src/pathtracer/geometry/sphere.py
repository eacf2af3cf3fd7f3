"""Sphere primitive with analytic ray-sphere intersection.

The intersection solves the half-b form of the quadratic

    |origin + t * direction - center|^2 = radius^2

    a      = |direction|^2
    half_b = (origin - center) . direction
    c      = |origin - center|^2 - radius^2

and accepts the near root first, falling back to the far root, each tested
strictly against the query interval.

A negative radius is allowed: the geometry is identical but the outward
normal points inward, which turns a glass sphere into a hollow bubble.

Example:
    >>> from pathtracer.core.interval import Interval
    >>> from pathtracer.core.ray import Ray
    >>> from pathtracer.core.vector import Vector3
    >>> from pathtracer.geometry.sphere import Sphere
    >>> from pathtracer.materials import Lambertian
    >>> sphere = Sphere(Vector3(0.0, 0.0, -1.0), 0.5, Lambertian(Vector3(0.5, 0.5, 0.5)))
    >>> ray = Ray(Vector3(0.0, 0.0, 0.0), Vector3(0.0, 0.0, -1.0))
    >>> sphere.hit(ray, Interval(0.001, float("inf"))).t
    0.5
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from pathtracer.core.interval import Interval
from pathtracer.core.ray import Ray
from pathtracer.core.vector import Vector3
from pathtracer.geometry.hittable import HitRecord

if TYPE_CHECKING:
    from pathtracer.materials import Material


@dataclass(frozen=True, slots=True)
class Sphere:
    """A sphere defined by center point, radius and material.

    Attributes:
        center: The center point of the sphere.
        radius: The sphere radius. Negative values flip the normals.
        material: The surface material, shared by value.
    """

    center: Vector3
    radius: float
    material: Material

    def hit(self, ray: Ray, ray_t: Interval) -> HitRecord | None:
        """Test for ray-sphere intersection.

        Args:
            ray: The ray to test.
            ray_t: Valid hit distances (strict bounds).

        Returns:
            The nearest HitRecord inside ray_t, or None on a miss. A zero
            direction or a zero radius is treated as a miss.
        """
        oc = ray.origin - self.center
        a = ray.direction.length_squared()
        if a == 0.0:
            return None
        half_b = oc.dot(ray.direction)
        c = oc.length_squared() - self.radius * self.radius

        discriminant = half_b * half_b - a * c
        if discriminant < 0.0:
            return None
        sqrtd = math.sqrt(discriminant)

        # Nearest root that lies in the acceptable range
        root = (-half_b - sqrtd) / a
        if not ray_t.surrounds(root):
            root = (-half_b + sqrtd) / a
            if not ray_t.surrounds(root):
                return None

        p = ray.at(root)
        outward_normal = (p - self.center).divide(self.radius)
        if outward_normal is None:
            return None
        return HitRecord.from_outward_normal(ray, root, p, outward_normal, self.material)
