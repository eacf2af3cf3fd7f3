"""Camera module for view and ray generation.

Components:
    camera: CameraConfig and the thin-lens Camera

Camera responsibilities:
    - Derive viewport geometry once from look-at parameters
    - Apply anti-aliasing jitter for sub-pixel sampling
    - Sample the defocus disk for depth of field
    - Average samples per pixel and map linear color to 8-bit

Pixel coordinates:
    x in [0, width): left to right across image
    y in [0, height): top to bottom across image
"""

from .camera import Camera, CameraConfig, ProgressCallback

__all__ = [
    "Camera",
    "CameraConfig",
    "ProgressCallback",
]
