"""Path tracing kernel with progressive sample accumulation.

This module holds the camera and render target state as Taichi fields and
implements the per-pixel path tracer:

    - Jittered camera rays with defocus blur, matching pathtracer.camera
    - Iterative path loop carrying a throughput accumulator
    - Material dispatch through the scene's material table
    - Sky gradient for escaping rays, black when the depth budget runs out
    - Running-mean accumulation, one sample per pixel per kernel launch

The render target is indexed [x, y] with y = 0 at the top of the image, the
same orientation as the reference camera.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from pathtracer.accel.integrator import (
    ...     render_image, setup_camera, setup_render_target, get_linear_image_numpy
    ... )
    >>> from pathtracer.accel.scene import upload_scene
    >>> from pathtracer.camera import Camera
    >>> from pathtracer.scene.presets import single_sphere_scene
    >>>
    >>> scene, config = single_sphere_scene()
    >>> camera = Camera(config)
    >>> upload_scene(scene)
    (1, 1)
    >>> setup_camera(camera)
    >>> setup_render_target(camera.image_width, camera.image_height)
    >>> render_image(num_samples=16)
    >>> get_linear_image_numpy().shape
    (100, 100, 3)
"""

import logging

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from pathtracer.accel.materials import scatter_material
from pathtracer.accel.scene import intersect_scene
from pathtracer.accel.vecmath import random_in_unit_disk, vec3
from pathtracer.camera.camera import Camera
from pathtracer.core.integrator import MAX_DEPTH, SKY_BLUE, SKY_WHITE, T_MIN

logger = logging.getLogger(__name__)

# =============================================================================
# Rendering Constants
# =============================================================================

# Upper hit distance; f32 stand-in for the reference's infinity
T_MAX = 1e30

_SKY_WHITE = vec3(*SKY_WHITE)
_SKY_BLUE = vec3(*SKY_BLUE)

# =============================================================================
# Camera State
# =============================================================================

_camera_center = ti.Vector.field(3, dtype=ti.f32, shape=())
_pixel00_loc = ti.Vector.field(3, dtype=ti.f32, shape=())
_pixel_delta_u = ti.Vector.field(3, dtype=ti.f32, shape=())
_pixel_delta_v = ti.Vector.field(3, dtype=ti.f32, shape=())
_defocus_disk_u = ti.Vector.field(3, dtype=ti.f32, shape=())
_defocus_disk_v = ti.Vector.field(3, dtype=ti.f32, shape=())
_defocus_enabled = ti.field(dtype=ti.i32, shape=())


def setup_camera(camera: Camera) -> None:
    """Copy the derived geometry of a camera into the camera fields.

    Args:
        camera: A constructed (and therefore validated) camera.
    """
    _camera_center[None] = list(camera.center)
    _pixel00_loc[None] = list(camera.pixel00_loc)
    _pixel_delta_u[None] = list(camera.pixel_delta_u)
    _pixel_delta_v[None] = list(camera.pixel_delta_v)
    _defocus_disk_u[None] = list(camera.defocus_disk_u)
    _defocus_disk_v[None] = list(camera.defocus_disk_v)
    _defocus_enabled[None] = 1 if camera.defocus_angle > 0.0 else 0
    logger.debug("Camera uploaded: %r", camera)


# =============================================================================
# Render Target (Image Buffer)
# =============================================================================

# Maximum supported image dimensions (preallocated to avoid kernel recompilation)
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

# Image dimensions (actual active size)
_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())

# Running mean of linear color per pixel (preallocated to max size)
_color_buffer = ti.Vector.field(3, dtype=ti.f32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

# Sample count per pixel (preallocated to max size)
_sample_count = ti.field(dtype=ti.i32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

# Flag to track if render target is initialized
_render_target_initialized = ti.field(dtype=ti.i32, shape=())


def setup_render_target(width: int, height: int) -> None:
    """Initialize the render target buffers.

    Sets the active image dimensions and clears the buffers.

    Args:
        width: Image width in pixels (1 to MAX_IMAGE_WIDTH).
        height: Image height in pixels (1 to MAX_IMAGE_HEIGHT).

    Raises:
        ValueError: If dimensions are not positive or exceed the maximum
            supported size.
    """
    if width < 1 or height < 1:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )

    _image_width[None] = width
    _image_height[None] = height
    _render_target_initialized[None] = 1

    clear_render_target()


def clear_render_target() -> None:
    """Clear the render target buffers to zero."""
    _color_buffer.fill(0.0)
    _sample_count.fill(0)


def get_image_dimensions() -> tuple[int, int]:
    """Get the current render target dimensions as (width, height)."""
    return int(_image_width[None]), int(_image_height[None])


def _check_render_target_initialized() -> None:
    """Check if render target is initialized and raise if not."""
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")


# =============================================================================
# Path Tracing Core
# =============================================================================


@ti.func
def get_ray(pixel_x: ti.i32, pixel_y: ti.i32):
    """Generate a jittered camera ray through a pixel.

    Args:
        pixel_x: Pixel column (0 = left).
        pixel_y: Pixel row (0 = top).

    Returns:
        A tuple of (origin, direction).
    """
    offset_x = ti.random(ti.f32) - 0.5
    offset_y = ti.random(ti.f32) - 0.5
    pixel_sample = (
        _pixel00_loc[None]
        + (ti.cast(pixel_x, ti.f32) + offset_x) * _pixel_delta_u[None]
        + (ti.cast(pixel_y, ti.f32) + offset_y) * _pixel_delta_v[None]
    )

    origin = _camera_center[None]
    if _defocus_enabled[None] == 1:
        p = random_in_unit_disk()
        origin = _camera_center[None] + p.x * _defocus_disk_u[None] + p.y * _defocus_disk_v[None]

    return origin, pixel_sample - origin


@ti.func
def background_color(direction: vec3) -> vec3:
    """Sky gradient from white (down) to light blue (up); black for a zero direction."""
    result = vec3(0.0, 0.0, 0.0)
    length = tm.length(direction)
    if length > 0.0:
        a = 0.5 * (direction.y / length + 1.0)
        result = (1.0 - a) * _SKY_WHITE + a * _SKY_BLUE
    return result


@ti.func
def ray_color(origin: vec3, direction: vec3, max_depth: ti.i32) -> vec3:
    """Trace a single path through the scene.

    Args:
        origin: Ray origin.
        direction: Ray direction (any nonzero length).
        max_depth: Bounce budget. The path is black if it is exhausted.

    Returns:
        Product of attenuations times the sky color, or black when the
        path is absorbed or runs out of bounces.
    """
    result = vec3(0.0, 0.0, 0.0)
    throughput = vec3(1.0, 1.0, 1.0)
    ray_origin = origin
    ray_direction = direction

    # Active flag for path continuation (Taichi doesn't support break in ti.func loops)
    active = 1

    for _ in range(max_depth):
        if active == 1:
            rec = intersect_scene(ray_origin, ray_direction, T_MIN, T_MAX)

            if rec.hit == 0:
                # Ray escaped - pick up the sky
                result = throughput * background_color(ray_direction)
                active = 0
            else:
                scattered_direction, attenuation, did_scatter = scatter_material(
                    rec.material_id, ray_direction, rec.normal, rec.front_face
                )

                if did_scatter == 0:
                    # Ray was absorbed
                    active = 0
                else:
                    throughput *= attenuation
                    ray_origin = rec.point
                    ray_direction = scattered_direction

    return result


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _render_one_spp(width: ti.i32, height: ti.i32, max_depth: ti.i32):
    """Render one sample per pixel and fold it into the running mean."""
    for i, j in ti.ndrange(width, height):
        origin, direction = get_ray(i, j)
        color = ray_color(origin, direction, max_depth)

        # Replace NaN/Inf with zero
        for c in ti.static(range(3)):
            if tm.isnan(color[c]) or tm.isinf(color[c]):
                color[c] = 0.0

        _sample_count[i, j] += 1
        n = _sample_count[i, j]

        # Running average: avg_n = avg_{n-1} + (x_n - avg_{n-1}) / n
        _color_buffer[i, j] += (color - _color_buffer[i, j]) / ti.cast(n, ti.f32)


# =============================================================================
# Public Rendering API
# =============================================================================


def render_image(num_samples: int = 1, max_depth: int = MAX_DEPTH) -> None:
    """Render the specified number of samples per pixel.

    Samples accumulate into the color buffer, so this can be called
    repeatedly to refine the image.

    Args:
        num_samples: Number of samples to render per pixel.
        max_depth: Bounce budget per sample.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    for _ in range(num_samples):
        _render_one_spp(width, height, max_depth)


def get_total_samples() -> int:
    """Get the number of samples per pixel rendered so far.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()
    return int(_sample_count[0, 0])


def get_linear_image_numpy() -> npt.NDArray[np.float64]:
    """Get the mean linear colors as a NumPy array.

    Returns:
        float64 array of shape (height, width, 3), row 0 at the top, before
        gamma correction and unclamped.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    full_image = _color_buffer.to_numpy()

    # Buffer is [x, y]; y already grows downward so only a transpose is needed
    image = full_image[:width, :height, :]
    image = np.transpose(image, (1, 0, 2))

    return image.astype(np.float64)
