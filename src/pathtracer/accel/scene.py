"""Scene storage and ray-scene intersection for Taichi kernels.

The scene is stored in preallocated Taichi fields using a Structure of Arrays
layout: spheres hold a center, radius and material index, and materials form
a table of tagged variants (MaterialType plus albedo, fuzz and refraction
index; unused parameters stay at neutral values).

upload_scene() copies a pathtracer.scene.Scene into these fields, sharing one
table entry between spheres whose materials are equal by value.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from pathtracer.accel.scene import upload_scene
    >>> from pathtracer.scene.presets import three_spheres_scene
    >>> scene, _ = three_spheres_scene()
    >>> upload_scene(scene)
    (5, 4)
"""

import logging

import taichi as ti
import taichi.math as tm

from pathtracer.accel.vecmath import vec3
from pathtracer.geometry.sphere import Sphere
from pathtracer.materials import Dielectric, Lambertian, Metal
from pathtracer.scene.world import Scene

logger = logging.getLogger(__name__)


@ti.dataclass
class SceneHitRecord:
    """Record of a ray-scene intersection with material information.

    Attributes:
        hit: Whether the ray intersected any sphere (1 if hit, 0 if miss).
        t: The ray parameter at the intersection. Only valid if hit == 1.
        point: The intersection point. Only valid if hit == 1.
        normal: The unit surface normal, facing against the incoming ray.
            Only valid if hit == 1.
        front_face: 1 if the ray hit the outside of the surface, 0 otherwise.
        material_id: Index into the material table. -1 on a miss.
    """

    hit: ti.i32
    t: ti.f32
    point: vec3
    normal: vec3
    front_face: ti.i32
    material_id: ti.i32


# Maximum number of spheres and materials supported in the scene
MAX_SPHERES = 1024
MAX_MATERIALS = 1024

# Sphere storage: Structure of Arrays layout for GPU efficiency
sphere_centers = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SPHERES)
sphere_radii = ti.field(dtype=ti.f32, shape=MAX_SPHERES)
sphere_material_ids = ti.field(dtype=ti.i32, shape=MAX_SPHERES)
num_spheres = ti.field(dtype=ti.i32, shape=())

# Material table: material_types[i] stores the MaterialType of entry i
material_types = ti.field(dtype=ti.i32, shape=MAX_MATERIALS)
material_albedos = ti.Vector.field(3, dtype=ti.f32, shape=MAX_MATERIALS)
material_fuzz = ti.field(dtype=ti.f32, shape=MAX_MATERIALS)
material_ir = ti.field(dtype=ti.f32, shape=MAX_MATERIALS)
num_materials = ti.field(dtype=ti.i32, shape=())


def clear_scene() -> None:
    """Clear all spheres and materials.

    Resets the counts to zero. The field data is overwritten by the next
    upload.
    """
    num_spheres[None] = 0
    num_materials[None] = 0


def upload_scene(scene: Scene) -> tuple[int, int]:
    """Copy a scene into the Taichi fields, replacing the previous one.

    Args:
        scene: The scene to upload. Every member must be a Sphere.

    Returns:
        Tuple of (number of spheres, number of distinct materials).

    Raises:
        TypeError: If the scene contains something other than spheres.
        RuntimeError: If the maximum number of spheres or materials is exceeded.
    """
    spheres = list(scene)
    for obj in spheres:
        if not isinstance(obj, Sphere):
            raise TypeError(f"Only spheres can be rendered in parallel, got {type(obj).__name__}")
    if len(spheres) > MAX_SPHERES:
        raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")

    materials = scene.materials()
    if len(materials) > MAX_MATERIALS:
        raise RuntimeError(f"Maximum number of materials ({MAX_MATERIALS}) exceeded")

    clear_scene()

    for material_id, material in enumerate(materials):
        material_types[material_id] = int(material.material_type)
        albedo = (1.0, 1.0, 1.0)
        fuzz = 0.0
        ir = 1.0
        if isinstance(material, (Lambertian, Metal)):
            albedo = material.albedo.to_tuple()
        if isinstance(material, Metal):
            fuzz = material.fuzz
        if isinstance(material, Dielectric):
            ir = material.ir
        material_albedos[material_id] = list(albedo)
        material_fuzz[material_id] = fuzz
        material_ir[material_id] = ir

    for idx, sphere in enumerate(spheres):
        sphere_centers[idx] = list(sphere.center)
        sphere_radii[idx] = sphere.radius
        sphere_material_ids[idx] = materials.index(sphere.material)

    num_materials[None] = len(materials)
    num_spheres[None] = len(spheres)

    logger.info("Uploaded %d spheres and %d materials", len(spheres), len(materials))
    return len(spheres), len(materials)


def get_sphere_count() -> int:
    """Get the number of spheres in the scene."""
    return int(num_spheres[None])


def get_material_count() -> int:
    """Get the number of entries in the material table."""
    return int(num_materials[None])


@ti.func
def _make_miss_record() -> SceneHitRecord:
    """Create a SceneHitRecord indicating no intersection."""
    return SceneHitRecord(
        hit=0,
        t=0.0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        front_face=0,
        material_id=-1,
    )


@ti.func
def hit_sphere(
    ray_origin: vec3,
    ray_direction: vec3,
    center: vec3,
    radius: ti.f32,
    material_id: ti.i32,
    t_min: ti.f32,
    t_max: ti.f32,
) -> SceneHitRecord:
    """Test for ray-sphere intersection.

    Solves a*t^2 + 2*half_b*t + c = 0 with
        a = dot(direction, direction)
        half_b = dot(origin - center, direction)
        c = |origin - center|^2 - radius^2
    and accepts the near root, then the far root, strictly inside
    (t_min, t_max). A zero direction or zero radius never hits.

    Returns:
        A SceneHitRecord. Check the hit field to determine if an
        intersection occurred.
    """
    oc = ray_origin - center
    a = tm.dot(ray_direction, ray_direction)
    half_b = tm.dot(oc, ray_direction)
    c = tm.dot(oc, oc) - radius * radius
    discriminant = half_b * half_b - a * c

    # Initialize result fields (Taichi requires outer-scope declaration)
    result = _make_miss_record()

    if a > 0.0 and radius != 0.0 and discriminant >= 0.0:
        sqrtd = ti.sqrt(discriminant)

        # Nearest root that lies in the acceptable range
        root = (-half_b - sqrtd) / a
        valid = (root > t_min) and (root < t_max)
        if not valid:
            root = (-half_b + sqrtd) / a
            valid = (root > t_min) and (root < t_max)

        if valid:
            point = ray_origin + root * ray_direction
            outward_normal = (point - center) / radius
            front_face = 1
            normal = outward_normal
            if tm.dot(ray_direction, outward_normal) >= 0.0:
                front_face = 0
                normal = -outward_normal
            result = SceneHitRecord(
                hit=1,
                t=root,
                point=point,
                normal=normal,
                front_face=front_face,
                material_id=material_id,
            )

    return result


@ti.func
def intersect_scene(
    ray_origin: vec3,
    ray_direction: vec3,
    t_min: ti.f32,
    t_max: ti.f32,
) -> SceneHitRecord:
    """Test ray against all spheres in the scene.

    Each sphere is tested with the upper bound tightened to the closest hit
    found so far.

    Returns:
        A SceneHitRecord for the closest intersection, or a miss record.
    """
    closest_t = t_max
    result = _make_miss_record()

    for i in range(num_spheres[None]):
        rec = hit_sphere(
            ray_origin,
            ray_direction,
            sphere_centers[i],
            sphere_radii[i],
            sphere_material_ids[i],
            t_min,
            closest_t,
        )
        if rec.hit == 1:
            closest_t = rec.t
            result = rec

    return result
