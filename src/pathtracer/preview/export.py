"""Image export utilities for rendered images.

This module converts mean linear colors to 8-bit pixels and saves them with
Pillow. The conversion is the same one the reference camera applies per
pixel: gamma 2 (square root), clamp to [0, 1], scale by 255, truncate.

Example:
    >>> import numpy as np
    >>> from pathtracer.preview.export import linear_to_uint8
    >>> linear_to_uint8(np.array([[[0.25, 1.0, 4.0]]]))
    array([[[127, 255, 255]]], dtype=uint8)
"""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

logger = logging.getLogger(__name__)


def linear_to_uint8(image: npt.NDArray[np.floating]) -> npt.NDArray[np.uint8]:
    """Convert a linear float image to 8-bit with gamma 2.

    Args:
        image: Linear image array of shape (H, W, 3).

    Returns:
        uint8 array of the same shape. Negative and NaN values map to 0.
    """
    linear = np.nan_to_num(np.asarray(image, dtype=np.float64), nan=0.0, posinf=1.0, neginf=0.0)
    gamma = np.sqrt(np.maximum(linear, 0.0))
    return (255.0 * np.clip(gamma, 0.0, 1.0)).astype(np.uint8)


def save_png(image: npt.NDArray[np.uint8], filepath: str | Path) -> Path:
    """Save an 8-bit RGB image as a PNG file.

    Args:
        image: uint8 array of shape (H, W, 3), row 0 at the top.
        filepath: Output file path (should end in .png).

    Returns:
        The path the image was written to.

    Raises:
        ValueError: If the array is not an (H, W, 3) uint8 image.
    """
    if image.dtype != np.uint8 or image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(
            f"Expected a (H, W, 3) uint8 image, got {image.shape} {image.dtype}"
        )

    path = Path(filepath)
    pil_image = PILImage.fromarray(image)
    pil_image.save(path)
    logger.info("Saved %dx%d image to %s", image.shape[1], image.shape[0], path)
    return path


def save_png_from_linear(image: npt.NDArray[np.floating], filepath: str | Path) -> Path:
    """Gamma-correct a linear image and save it as a PNG file."""
    return save_png(linear_to_uint8(image), filepath)


def compute_rmse(
    image_a: npt.NDArray[np.generic],
    image_b: npt.NDArray[np.generic],
) -> float:
    """Compute root mean squared error between two images.

    Args:
        image_a: First image array.
        image_b: Second image array (must have same shape as image_a).

    Returns:
        RMSE value (lower is more similar).

    Raises:
        ValueError: If image shapes don't match.
    """
    if image_a.shape != image_b.shape:
        raise ValueError(f"Image shapes must match: {image_a.shape} vs {image_b.shape}")

    diff = image_a.astype(np.float64) - image_b.astype(np.float64)
    return float(np.sqrt(np.mean(diff**2)))
