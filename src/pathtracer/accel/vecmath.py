"""Vector and random sampling utilities for Taichi kernels.

Every function here is a ti.func and mirrors a helper of the reference
renderer (pathtracer.core). Degenerate results are reported with an
explicit ok flag instead of None, since Taichi functions cannot return
optional values.
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Component magnitude below which a vector counts as degenerate
NEAR_ZERO_EPSILON = 1e-8

# Rejection sampling attempts before giving up
MAX_REJECTION_ATTEMPTS = 100


@ti.func
def length_squared(v: vec3) -> ti.f32:
    """Compute the squared length of a vector."""
    return tm.dot(v, v)


@ti.func
def near_zero(v: vec3) -> ti.i32:
    """Return 1 if every component is below 1e-8 in magnitude, 0 otherwise."""
    s = NEAR_ZERO_EPSILON
    return ti.abs(v.x) < s and ti.abs(v.y) < s and ti.abs(v.z) < s


@ti.func
def unit_or_zero(v: vec3):
    """Normalize a vector, flagging zero-length input.

    Returns:
        A tuple (unit_vector, ok). ok is 0 and the vector is zero when v has
        zero length.
    """
    length = tm.length(v)
    result = vec3(0.0, 0.0, 0.0)
    ok = 0
    if length > 0.0:
        result = v / length
        ok = 1
    return result, ok


@ti.func
def reflect(incident: vec3, normal: vec3) -> vec3:
    """Reflect an incident vector about a unit normal."""
    return incident - 2.0 * tm.dot(incident, normal) * normal


@ti.func
def refract(incident: vec3, normal: vec3, eta_ratio: ti.f32) -> vec3:
    """Refract a unit direction through a surface (perpendicular/parallel split).

    Args:
        incident: The unit incoming direction.
        normal: The unit surface normal, opposing the incoming direction.
        eta_ratio: Ratio of refractive indices (n_incident / n_transmitted).

    Returns:
        The refracted direction.
    """
    cos_theta = tm.min(tm.dot(-incident, normal), 1.0)
    r_out_perp = eta_ratio * (incident + cos_theta * normal)
    r_out_parallel = -ti.sqrt(ti.abs(1.0 - length_squared(r_out_perp))) * normal
    return r_out_perp + r_out_parallel


@ti.func
def schlick_reflectance(cosine: ti.f32, refraction_ratio: ti.f32) -> ti.f32:
    """Compute Fresnel reflectance using Schlick's approximation."""
    r0 = (1.0 - refraction_ratio) / (1.0 + refraction_ratio)
    r0 = r0 * r0
    return r0 + (1.0 - r0) * ((1.0 - cosine) ** 5)


# =============================================================================
# Random Sampling Utilities for Monte Carlo
# =============================================================================


@ti.func
def random_in_unit_sphere() -> vec3:
    """Generate a random point inside the unit sphere by rejection sampling."""
    p = vec3(0.0, 0.0, 0.0)
    found = False
    for _ in range(MAX_REJECTION_ATTEMPTS):
        if not found:
            p = vec3(
                ti.random(ti.f32) * 2.0 - 1.0,
                ti.random(ti.f32) * 2.0 - 1.0,
                ti.random(ti.f32) * 2.0 - 1.0,
            )
            if length_squared(p) < 1.0:
                found = True
    return p


@ti.func
def random_unit_vector():
    """Generate a random unit vector on the sphere.

    Returns:
        A tuple (direction, ok); ok is 0 in the measure-zero case where the
        rejection sample is exactly the origin.
    """
    return unit_or_zero(random_in_unit_sphere())


@ti.func
def random_in_unit_disk() -> vec3:
    """Generate a random point (x, y, 0) inside the unit disk."""
    p = vec3(0.0, 0.0, 0.0)
    found = False
    for _ in range(MAX_REJECTION_ATTEMPTS):
        if not found:
            p = vec3(
                ti.random(ti.f32) * 2.0 - 1.0,
                ti.random(ti.f32) * 2.0 - 1.0,
                0.0,
            )
            if p.x * p.x + p.y * p.y < 1.0:
                found = True
    return p
