"""Material scattering functions for Taichi kernels.

Each scatter function mirrors the corresponding reference material in
pathtracer.materials and returns a tuple

    (scattered_direction, attenuation, did_scatter)

where did_scatter is 0 when the ray is absorbed. scatter_material()
dispatches on the MaterialType stored in the scene's material table.
"""

import taichi as ti
import taichi.math as tm

from pathtracer.accel.scene import material_albedos, material_fuzz, material_ir, material_types
from pathtracer.accel.vecmath import (
    near_zero,
    random_unit_vector,
    reflect,
    refract,
    schlick_reflectance,
    unit_or_zero,
    vec3,
)
from pathtracer.materials import MaterialType


@ti.func
def scatter_lambertian(albedo: vec3, normal: vec3):
    """Scatter diffusely: normal plus a random unit vector.

    Falls back to the normal when the sum is degenerate.

    Returns:
        A tuple of (scattered_direction, attenuation, did_scatter).
    """
    random_direction, ok = random_unit_vector()
    scattered_direction = normal + random_direction

    # Catch degenerate scatter direction
    if near_zero(scattered_direction):
        scattered_direction = normal

    return scattered_direction, albedo, ok


@ti.func
def scatter_metal(albedo: vec3, fuzz: ti.f32, incident_direction: vec3, normal: vec3):
    """Reflect the unit incoming direction, perturbed by fuzz.

    Returns:
        A tuple of (scattered_direction, attenuation, did_scatter). The ray is
        only absorbed when the incoming direction has zero length.
    """
    unit_direction, ok = unit_or_zero(incident_direction)
    fuzz_direction, fuzz_ok = random_unit_vector()
    scattered_direction = reflect(unit_direction, normal) + fuzz * fuzz_direction
    did_scatter = 0
    if ok == 1 and fuzz_ok == 1:
        did_scatter = 1
    return scattered_direction, albedo, did_scatter


@ti.func
def scatter_dielectric(ir: ti.f32, incident_direction: vec3, normal: vec3, front_face: ti.i32):
    """Reflect or refract through a dielectric surface.

    Reflection is forced under total internal reflection; otherwise the ray
    reflects with Schlick probability. The random draw only happens when
    refraction is possible.

    Returns:
        A tuple of (scattered_direction, attenuation, did_scatter).
        Attenuation is white.
    """
    # Dielectrics don't absorb light - attenuation is white
    attenuation = vec3(1.0, 1.0, 1.0)

    refraction_ratio = 1.0 / ir
    if front_face == 0:
        refraction_ratio = ir

    unit_direction, ok = unit_or_zero(incident_direction)
    cos_theta = tm.min(tm.dot(-unit_direction, normal), 1.0)
    sin_theta = ti.sqrt(tm.max(0.0, 1.0 - cos_theta * cos_theta))

    should_reflect = 0
    if refraction_ratio * sin_theta > 1.0:
        should_reflect = 1
    elif ti.random(ti.f32) < schlick_reflectance(cos_theta, refraction_ratio):
        should_reflect = 1

    scattered_direction = vec3(0.0, 0.0, 0.0)
    if should_reflect == 1:
        scattered_direction = reflect(unit_direction, normal)
    else:
        scattered_direction = refract(unit_direction, normal, refraction_ratio)

    return scattered_direction, attenuation, ok


@ti.func
def scatter_material(
    material_id: ti.i32,
    incident_direction: vec3,
    normal: vec3,
    front_face: ti.i32,
):
    """Dispatch to the scatter function of a material table entry.

    Args:
        material_id: Index into the material table.
        incident_direction: The incoming ray direction (any length).
        normal: The unit surface normal, facing against the ray.
        front_face: 1 if hit front face, 0 if back face.

    Returns:
        A tuple of (scattered_direction, attenuation, did_scatter).
    """
    mat_type = material_types[material_id]

    # Default values
    scattered_direction = vec3(0.0, 0.0, 0.0)
    attenuation = vec3(0.0, 0.0, 0.0)
    did_scatter = 0

    if mat_type == int(MaterialType.LAMBERTIAN):
        scattered_direction, attenuation, did_scatter = scatter_lambertian(
            material_albedos[material_id], normal
        )

    elif mat_type == int(MaterialType.METAL):
        scattered_direction, attenuation, did_scatter = scatter_metal(
            material_albedos[material_id],
            material_fuzz[material_id],
            incident_direction,
            normal,
        )

    elif mat_type == int(MaterialType.DIELECTRIC):
        scattered_direction, attenuation, did_scatter = scatter_dielectric(
            material_ir[material_id], incident_direction, normal, front_face
        )

    return scattered_direction, attenuation, did_scatter
