"""Geometry module for ray intersection.

Components:
    hittable: HitRecord and the Hittable protocol
    sphere: Sphere primitive with analytic ray-sphere intersection

Spheres are the only primitive. Intersection follows the pattern:
    rec = shape.hit(ray, ray_t)   # HitRecord or None
"""

from .hittable import HitRecord, Hittable
from .sphere import Sphere

__all__ = [
    "HitRecord",
    "Hittable",
    "Sphere",
]
