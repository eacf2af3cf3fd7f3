"""Preview module for output and visualization.

Components:
    export: Linear-to-8-bit conversion and PNG export (Pillow)
    display: Matplotlib-based static preview and side-by-side comparison

Example:
    >>> from pathtracer.preview import save_png, show_image
    >>> save_png(image, "render.png")
    >>> show_image(image, title="render.png")
"""

from pathtracer.preview.display import show_comparison, show_image
from pathtracer.preview.export import (
    compute_rmse,
    linear_to_uint8,
    save_png,
    save_png_from_linear,
)

__all__ = [
    # Display functions
    "show_image",
    "show_comparison",
    # Export functions
    "linear_to_uint8",
    "save_png",
    "save_png_from_linear",
    "compute_rmse",
]
