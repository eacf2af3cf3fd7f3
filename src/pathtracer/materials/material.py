"""Shared material types.

Every material variant exposes

    scatter(ray_in, rec, rng) -> ScatterResult | None

where None means the ray was absorbed. The set of variants is closed; each
one carries a MaterialType tag so the parallel backend can dispatch on an
integer instead of a Python type.
"""

from __future__ import annotations

import math
from enum import IntEnum
from typing import NamedTuple

from pathtracer.core.ray import Ray
from pathtracer.core.vector import Vector3


class MaterialType(IntEnum):
    """Enumeration of supported material types.

    Used for material dispatch in the parallel path tracer to determine which
    scattering function to call.
    """

    LAMBERTIAN = 0
    METAL = 1
    DIELECTRIC = 2


class ScatterResult(NamedTuple):
    """Outcome of a scatter event that was not absorbed.

    Attributes:
        attenuation: Per-channel color multiplier for this bounce.
        scattered: The outgoing ray, starting at the hit point.
    """

    attenuation: Vector3
    scattered: Ray


def validate_albedo(albedo: Vector3) -> None:
    """Check that every albedo component lies in [0, 1].

    Raises:
        ValueError: If any albedo component is outside [0, 1].
    """
    for i, component in enumerate(albedo):
        if not 0.0 <= component <= 1.0:
            raise ValueError(
                f"Albedo component {i} = {component} is outside [0, 1]. "
                "This would violate energy conservation."
            )


def validate_refraction_index(ir: float) -> None:
    """Check that a refraction index is positive and finite.

    Raises:
        ValueError: If ir is not a positive finite number.
    """
    if not math.isfinite(ir) or ir <= 0.0:
        raise ValueError(f"Index of refraction must be positive and finite, got {ir}")
