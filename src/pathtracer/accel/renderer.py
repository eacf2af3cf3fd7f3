"""Parallel progressive renderer.

This module wraps the accel integrator in a class that supports:
- Uploading a reference Scene and Camera to the Taichi fields
- Progressive rendering that refines over time
- Batch rendering (multiple SPP in one call)
- Progress callbacks and a generator form for UI updates

The Taichi fields are module-level state, so only one ParallelRenderer
should be active at a time; constructing a new one replaces the uploaded
scene and camera.

Example:
    >>> from pathtracer.accel import init_backend
    >>> init_backend(arch="cpu", seed=42)
    >>> from pathtracer.accel.renderer import ParallelRenderer
    >>> from pathtracer.camera import Camera
    >>> from pathtracer.scene.presets import three_spheres_scene
    >>>
    >>> scene, config = three_spheres_scene()
    >>> renderer = ParallelRenderer(Camera(config), scene)
    >>> renderer.render(100)  # Render 100 SPP
    >>> image = renderer.get_image_uint8()
"""

import logging
from collections.abc import Callable, Generator

import numpy as np
import numpy.typing as npt

from pathtracer.accel.integrator import (
    clear_render_target,
    get_linear_image_numpy,
    get_total_samples,
    render_image,
    setup_camera,
    setup_render_target,
)
from pathtracer.accel.scene import upload_scene
from pathtracer.camera.camera import Camera
from pathtracer.preview.export import linear_to_uint8
from pathtracer.scene.world import Scene

logger = logging.getLogger(__name__)

# Type alias for progress callback
# Callback receives (current_samples, total_target_samples)
ProgressCallback = Callable[[int, int], None]


class ParallelRenderer:
    """A progressive Taichi renderer for one scene and camera.

    Attributes:
        camera: The camera being rendered.
        width: Image width in pixels.
        height: Image height in pixels.
        max_depth: Bounce budget per sample.
    """

    def __init__(self, camera: Camera, scene: Scene, max_depth: int | None = None) -> None:
        """Upload the scene and camera and allocate the render target.

        Args:
            camera: A constructed camera; its image size sets the target size.
            scene: A scene made only of spheres.
            max_depth: Bounce budget per sample. Defaults to camera.max_depth.

        Raises:
            TypeError: If the scene contains something other than spheres.
            RuntimeError: If the scene exceeds the field capacities.
            ValueError: If the image exceeds the maximum render target size.
        """
        self.camera = camera
        self.max_depth = camera.max_depth if max_depth is None else max_depth
        self._num_spheres, self._num_materials = upload_scene(scene)
        setup_camera(camera)
        setup_render_target(camera.image_width, camera.image_height)

    @property
    def width(self) -> int:
        """Get the image width."""
        return self.camera.image_width

    @property
    def height(self) -> int:
        """Get the image height."""
        return self.camera.image_height

    @property
    def sample_count(self) -> int:
        """Get the current number of accumulated samples per pixel."""
        return get_total_samples()

    def reset(self) -> None:
        """Clear the accumulator for a fresh render of the same scene."""
        clear_render_target()

    def render(
        self,
        num_samples: int | None = None,
        batch_size: int = 1,
        callback: ProgressCallback | None = None,
    ) -> None:
        """Render samples progressively with optional progress callback.

        Args:
            num_samples: Samples per pixel to add. Defaults to the camera's
                samples_per_pixel.
            batch_size: Number of samples to render before each callback.
            callback: Optional callback called after each batch with
                (current_total_samples, target_total_samples).
        """
        for current, target in self.render_progressive(num_samples, batch_size):
            if callback is not None:
                callback(current, target)

    def render_progressive(
        self,
        num_samples: int | None = None,
        batch_size: int = 1,
    ) -> Generator[tuple[int, int], None, None]:
        """Render samples progressively, yielding progress after each batch.

        Args:
            num_samples: Samples per pixel to add. Defaults to the camera's
                samples_per_pixel.
            batch_size: Number of samples to render before each yield.

        Yields:
            Tuple of (current_total_samples, target_total_samples).
        """
        if num_samples is None:
            num_samples = self.camera.samples_per_pixel
        if num_samples <= 0:
            return
        batch_size = max(1, batch_size)

        start_samples = self.sample_count
        target_samples = start_samples + num_samples
        logger.info(
            "Rendering %dx%d, %d spheres, %d spp (max depth %d)",
            self.width,
            self.height,
            self._num_spheres,
            num_samples,
            self.max_depth,
        )

        remaining = num_samples
        while remaining > 0:
            batch = min(batch_size, remaining)
            render_image(batch, self.max_depth)
            remaining -= batch
            yield (self.sample_count, target_samples)

        logger.info("Render finished at %d spp", self.sample_count)

    def get_linear_image(self) -> npt.NDArray[np.float64]:
        """Get the mean linear colors, shape (height, width, 3), row 0 at top."""
        return get_linear_image_numpy()

    def get_image_uint8(self) -> npt.NDArray[np.uint8]:
        """Get the render as 8-bit pixels (gamma 2, clamp, truncate)."""
        return linear_to_uint8(self.get_linear_image())

    def __repr__(self) -> str:
        """Return a string representation of the renderer state."""
        return (
            f"ParallelRenderer(width={self.width}, height={self.height}, "
            f"samples={self.sample_count})"
        )
