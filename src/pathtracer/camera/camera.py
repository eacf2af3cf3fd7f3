"""Thin-lens camera model for perspective ray generation.

This module implements the camera that generates primary rays for the
reference renderer. The camera supports:
- Look-at positioning (lookfrom, lookat, vup)
- Vertical field of view specification
- Arbitrary aspect ratios
- Jittered sampling for anti-aliasing
- Defocus blur (depth of field) from a thin-lens disk

The camera builds an orthonormal basis (u, v, w) from the view parameters:
- w: points from lookat toward lookfrom (opposite view direction)
- u: points right in the image plane
- v: points up in the image plane

The viewport lies on the focus plane, focus_dist in front of the camera.
Pixel (0, 0) is the top-left corner of the image; y grows downward.

Example:
    >>> from pathtracer.camera import Camera, CameraConfig
    >>> from pathtracer.core.sampling import RandomSource
    >>> from pathtracer.scene.presets import single_sphere_scene
    >>>
    >>> config = CameraConfig(aspect_ratio=16.0 / 9.0, image_width=64, samples_per_pixel=4)
    >>> camera = Camera(config)
    >>> camera.image_height
    36
    >>> scene, _ = single_sphere_scene()
    >>> image = camera.render(scene, RandomSource(seed=7))
    >>> image.shape
    (36, 64, 3)
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Iterator
from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Any

import numpy as np

from pathtracer.core.integrator import MAX_DEPTH, ray_color
from pathtracer.core.interval import Interval
from pathtracer.core.ray import Ray
from pathtracer.core.vector import Vector3

if TYPE_CHECKING:
    from pathtracer.core.sampling import RandomSource
    from pathtracer.geometry.hittable import Hittable

logger = logging.getLogger(__name__)

# Displayable intensity range, applied after gamma correction
_INTENSITY = Interval(0.0, 1.0)

ProgressCallback = Callable[[int], None]


# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass
class CameraConfig:
    """Configuration for a thin-lens (perspective) camera.

    Attributes:
        aspect_ratio: Width divided by height of the output image.
        image_width: Output image width in pixels.
        vfov: Vertical field of view in degrees, in (0, 180).
        lookfrom: Camera position in world space (x, y, z).
        lookat: Point the camera is looking at in world space (x, y, z).
        vup: Up direction vector for camera orientation.
        focus_dist: Distance from lookfrom to the plane of perfect focus.
        defocus_angle: Cone angle in degrees of rays through each pixel.
            0 gives a pinhole camera with no blur.
        samples_per_pixel: Number of jittered samples averaged per pixel.
    """

    aspect_ratio: float = 1.0
    image_width: int = 100
    vfov: float = 90.0
    lookfrom: tuple[float, float, float] = (0.0, 0.0, 0.0)
    lookat: tuple[float, float, float] = (0.0, 0.0, -1.0)
    vup: tuple[float, float, float] = (0.0, 1.0, 0.0)
    focus_dist: float = 10.0
    defocus_angle: float = 0.0
    samples_per_pixel: int = 10

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dictionary."""
        data = asdict(self)
        for key in ("lookfrom", "lookat", "vup"):
            data[key] = list(data[key])
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CameraConfig:
        """Build a config from a dictionary, using defaults for missing keys.

        Raises:
            ValueError: If the dictionary contains unknown keys or a vector
                entry does not hold exactly 3 values.
        """
        known = set(cls.__dataclass_fields__)
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown camera settings: {sorted(unknown)}")

        kwargs: dict[str, Any] = dict(data)
        for key in ("lookfrom", "lookat", "vup"):
            if key in kwargs:
                kwargs[key] = Vector3.from_iterable(kwargs[key]).to_tuple()
        return cls(**kwargs)


class Camera:
    """Immutable camera with all derived viewing geometry.

    Construction validates the configuration and derives the geometry once;
    rendering never raises on configuration problems.

    Attributes:
        config: The configuration the camera was built from.
        image_width: Output width in pixels.
        image_height: Output height in pixels, round(width / aspect), at least 1.
        samples_per_pixel: Samples averaged per pixel.
        max_depth: Default bounce budget per sample.
    """

    def __init__(self, config: CameraConfig | None = None) -> None:
        """Derive camera geometry from a configuration.

        Args:
            config: Camera configuration. Defaults to CameraConfig().

        Raises:
            ValueError: If any configuration value is out of range, the camera
                looks at its own position, or vup is parallel to the view
                direction.
        """
        self.config = config if config is not None else CameraConfig()
        self._validate(self.config)

        cfg = self.config
        self.image_width = int(cfg.image_width)
        self.image_height = max(1, int(round(cfg.image_width / cfg.aspect_ratio)))
        self.samples_per_pixel = int(cfg.samples_per_pixel)
        self.max_depth = MAX_DEPTH
        self.defocus_angle = float(cfg.defocus_angle)

        lookfrom = Vector3.from_iterable(cfg.lookfrom)
        lookat = Vector3.from_iterable(cfg.lookat)
        vup = Vector3.from_iterable(cfg.vup)

        # Viewport dimensions on the focus plane
        theta = math.radians(cfg.vfov)
        h = math.tan(theta / 2.0)
        viewport_height = 2.0 * h * cfg.focus_dist
        viewport_width = viewport_height * (self.image_width / self.image_height)

        # Orthonormal camera basis
        w = (lookfrom - lookat).unit()
        if w is None:
            raise ValueError(f"lookfrom and lookat must differ, both are {cfg.lookfrom}")
        u = vup.cross(w).unit()
        if u is None or vup.cross(w).near_zero():
            raise ValueError(f"vup {cfg.vup} is parallel to the view direction")
        v = w.cross(u)

        # Viewport edges; viewport_v points down the image
        self.viewport_u = viewport_width * u
        self.viewport_v = -viewport_height * v
        self.pixel_delta_u = self.viewport_u / self.image_width
        self.pixel_delta_v = self.viewport_v / self.image_height

        viewport_upper_left = (
            lookfrom - cfg.focus_dist * w - self.viewport_u / 2.0 - self.viewport_v / 2.0
        )
        self.pixel00_loc = viewport_upper_left + 0.5 * (self.pixel_delta_u + self.pixel_delta_v)

        # Defocus disk basis
        defocus_radius = cfg.focus_dist * math.tan(math.radians(cfg.defocus_angle / 2.0))
        self.defocus_disk_u = u * defocus_radius
        self.defocus_disk_v = v * defocus_radius

        self.center = lookfrom
        self.u = u
        self.v = v
        self.w = w

        logger.debug(
            "Camera %dx%d, vfov=%.1f, focus_dist=%.3f, defocus_angle=%.3f, pixel00=%s",
            self.image_width,
            self.image_height,
            cfg.vfov,
            cfg.focus_dist,
            cfg.defocus_angle,
            self.pixel00_loc,
        )

    @staticmethod
    def _validate(cfg: CameraConfig) -> None:
        if cfg.image_width < 1:
            raise ValueError(f"image_width must be at least 1, got {cfg.image_width}")
        if cfg.aspect_ratio <= 0.0 or not math.isfinite(cfg.aspect_ratio):
            raise ValueError(f"aspect_ratio must be positive, got {cfg.aspect_ratio}")
        if cfg.samples_per_pixel < 1:
            raise ValueError(
                f"samples_per_pixel must be at least 1, got {cfg.samples_per_pixel}"
            )
        if not (cfg.focus_dist > 0.0 and math.isfinite(cfg.focus_dist)):
            raise ValueError(f"focus_dist must be positive and finite, got {cfg.focus_dist}")
        if not 0.0 < cfg.vfov < 180.0:
            raise ValueError(f"vfov must be in (0, 180) degrees, got {cfg.vfov}")
        # Zero or negative angles give a pinhole camera
        if not (math.isfinite(cfg.defocus_angle) and cfg.defocus_angle < 180.0):
            raise ValueError(
                f"defocus_angle must be finite and below 180 degrees, got {cfg.defocus_angle}"
            )
        for key in ("lookfrom", "lookat", "vup"):
            value = getattr(cfg, key)
            if not all(math.isfinite(c) for c in value):
                raise ValueError(f"{key} must have finite components, got {value}")

    # =========================================================================
    # Ray Generation
    # =========================================================================

    def get_ray(self, x: int, y: int, rng: RandomSource) -> Ray:
        """Generate a jittered ray through pixel (x, y).

        The sample point is uniform within the pixel square. With a positive
        defocus angle the ray starts at a random point on the defocus disk,
        otherwise at the camera center.

        Args:
            x: Pixel column (0 = left).
            y: Pixel row (0 = top).
            rng: Random source for jitter and lens sampling.

        Returns:
            A ray toward the sampled point on the focus plane.
        """
        offset_x = rng.uniform(0.0, 1.0) - 0.5
        offset_y = rng.uniform(0.0, 1.0) - 0.5
        pixel_sample = (
            self.pixel00_loc
            + (x + offset_x) * self.pixel_delta_u
            + (y + offset_y) * self.pixel_delta_v
        )

        origin = self.center if self.defocus_angle <= 0.0 else self._defocus_disk_sample(rng)
        return Ray(origin, pixel_sample - origin)

    def _defocus_disk_sample(self, rng: RandomSource) -> Vector3:
        p = Vector3.random_in_unit_disk(rng)
        return self.center + p.x * self.defocus_disk_u + p.y * self.defocus_disk_v

    # =========================================================================
    # Rendering
    # =========================================================================

    def sample_pixel(
        self,
        x: int,
        y: int,
        scene: Hittable,
        rng: RandomSource,
        max_depth: int = MAX_DEPTH,
    ) -> Vector3:
        """Mean linear color of samples_per_pixel samples through pixel (x, y)."""
        total = Vector3.zero()
        for _ in range(self.samples_per_pixel):
            total = total + ray_color(self.get_ray(x, y, rng), max_depth, scene, rng)
        return total / self.samples_per_pixel

    @staticmethod
    def to_rgb8(color: Vector3) -> tuple[int, int, int]:
        """Map a linear color to 8-bit sRGB-ish values.

        Applies gamma 2 (square root), clamps to [0, 1], scales by 255 and
        truncates. Negative and NaN components map to 0.
        """
        channels = []
        for c in color:
            gamma = math.sqrt(c) if c > 0.0 else 0.0
            channels.append(int(255.0 * _INTENSITY.clamp(gamma)))
        return channels[0], channels[1], channels[2]

    def iter_pixels(
        self,
        scene: Hittable,
        rng: RandomSource,
        progress: ProgressCallback | None = None,
        max_depth: int = MAX_DEPTH,
    ) -> Iterator[tuple[int, int, tuple[int, int, int]]]:
        """Render pixel by pixel in row-major order.

        Args:
            scene: The world to render.
            rng: Random source for all sampling.
            progress: Optional callback receiving the integer percentage of
                scanlines completed, called after each scanline.
            max_depth: Bounce budget per sample.

        Yields:
            (x, y, (r, g, b)) for every pixel, top row first.
        """
        for y in range(self.image_height):
            for x in range(self.image_width):
                color = self.sample_pixel(x, y, scene, rng, max_depth)
                yield x, y, self.to_rgb8(color)
            if progress is not None:
                progress((y + 1) * 100 // self.image_height)

    def render_linear(
        self,
        scene: Hittable,
        rng: RandomSource,
        progress: ProgressCallback | None = None,
        max_depth: int = MAX_DEPTH,
    ) -> np.ndarray:
        """Render mean linear colors before gamma correction.

        Returns:
            float64 array of shape (image_height, image_width, 3).
        """
        image = np.zeros((self.image_height, self.image_width, 3), dtype=np.float64)
        logger.info(
            "Rendering %dx%d at %d spp (max depth %d)",
            self.image_width,
            self.image_height,
            self.samples_per_pixel,
            max_depth,
        )
        for y in range(self.image_height):
            for x in range(self.image_width):
                image[y, x] = self.sample_pixel(x, y, scene, rng, max_depth).to_tuple()
            if progress is not None:
                progress((y + 1) * 100 // self.image_height)
        logger.info("Render finished")
        return image

    def render(
        self,
        scene: Hittable,
        rng: RandomSource,
        progress: ProgressCallback | None = None,
        max_depth: int = MAX_DEPTH,
    ) -> np.ndarray:
        """Render the scene to an 8-bit image.

        Returns:
            uint8 array of shape (image_height, image_width, 3), row 0 at top.
        """
        image = np.zeros((self.image_height, self.image_width, 3), dtype=np.uint8)
        logger.info(
            "Rendering %dx%d at %d spp (max depth %d)",
            self.image_width,
            self.image_height,
            self.samples_per_pixel,
            max_depth,
        )
        for x, y, rgb in self.iter_pixels(scene, rng, progress, max_depth):
            image[y, x] = rgb
        logger.info("Render finished")
        return image

    def __repr__(self) -> str:
        return (
            f"Camera({self.image_width}x{self.image_height}, "
            f"spp={self.samples_per_pixel}, center={self.center})"
        )
