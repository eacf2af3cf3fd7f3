"""Matplotlib-based preview display for rendered images.

Example:
    >>> from pathtracer.preview.display import show_image
    >>> show_image(image, title="Random spheres - 500 SPP")
"""

from __future__ import annotations

import numpy as np
import numpy.typing as npt

from pathtracer.preview.export import compute_rmse, linear_to_uint8


def _as_display_image(image: npt.NDArray[np.generic]) -> npt.NDArray[np.uint8]:
    # Float images are treated as linear color and gamma corrected
    if image.dtype == np.uint8:
        return image
    return linear_to_uint8(image)


def show_image(
    image: npt.NDArray[np.generic],
    *,
    title: str | None = None,
    figsize: tuple[float, float] = (8, 4.5),
    block: bool = True,
) -> None:
    """Display a rendered image in a Matplotlib figure.

    Args:
        image: uint8 image, or linear float image of shape (H, W, 3).
        title: Optional figure title.
        figsize: Figure size in inches (width, height).
        block: Whether to block execution until figure is closed.
    """
    import matplotlib.pyplot as plt

    fig, ax = plt.subplots(1, 1, figsize=figsize)
    ax.imshow(_as_display_image(image))
    ax.axis("off")
    if title is not None:
        ax.set_title(title)

    plt.tight_layout()
    plt.show(block=block)


def show_comparison(
    image_a: npt.NDArray[np.generic],
    image_b: npt.NDArray[np.generic],
    *,
    labels: tuple[str, str] = ("A", "B"),
    diff_scale: float = 10.0,
    figsize: tuple[float, float] = (16, 6),
    block: bool = True,
) -> float:
    """Display two renders side by side with their amplified difference.

    Useful for checking the parallel backend against the reference renderer.

    Args:
        image_a: First image (uint8 or linear float).
        image_b: Second image, same shape as image_a.
        labels: Labels for the two images.
        diff_scale: Scale factor for difference amplification.
        figsize: Figure size in inches.
        block: Whether to block execution until figure is closed.

    Returns:
        RMSE between the two images in display space (0-255 scale).
    """
    import matplotlib.pyplot as plt

    display_a = _as_display_image(image_a)
    display_b = _as_display_image(image_b)
    rmse = compute_rmse(display_a, display_b)

    diff = np.abs(display_a.astype(np.float64) - display_b.astype(np.float64)) / 255.0
    diff_amplified = np.clip(diff * diff_scale, 0.0, 1.0)

    fig, axes = plt.subplots(1, 3, figsize=figsize)

    axes[0].imshow(display_a)
    axes[0].set_title(labels[0])
    axes[0].axis("off")

    axes[1].imshow(display_b)
    axes[1].set_title(labels[1])
    axes[1].axis("off")

    axes[2].imshow(diff_amplified)
    axes[2].set_title(f"Difference ({diff_scale}x) - RMSE: {rmse:.3f}")
    axes[2].axis("off")

    plt.tight_layout()
    plt.show(block=block)

    return rmse
