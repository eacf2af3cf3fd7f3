"""Materials module for light scattering models.

Components:
    material: MaterialType tags, ScatterResult and parameter validation
    lambertian: Ideal diffuse reflection
    metal: Specular reflection with optional fuzz
    dielectric: Glass-like materials with refraction (Schlick Fresnel)

Each material is an immutable value stored directly on the spheres that use
it and provides:
    - scatter(ray_in, rec, rng): a ScatterResult, or None when absorbed
    - material_type: its MaterialType tag
"""

from .dielectric import GLASS_IOR, Dielectric
from .lambertian import Lambertian
from .material import (
    MaterialType,
    ScatterResult,
    validate_albedo,
    validate_refraction_index,
)
from .metal import Metal

# The closed set of material variants
Material = Lambertian | Metal | Dielectric

__all__ = [
    "Material",
    "MaterialType",
    "ScatterResult",
    "validate_albedo",
    "validate_refraction_index",
    "Lambertian",
    "Metal",
    "Dielectric",
    "GLASS_IOR",
]
