"""Core rendering module.

This module contains the pure-Python building blocks of the reference
renderer:

Components:
    vector: Vector3 value type for points, directions and colors
    ray: Ray value type plus reflect/refract/Schlick helpers
    interval: Tri-state interval bounding valid hit distances
    sampling: Explicit, seedable uniform random source
    integrator: Depth-limited Monte Carlo color integrator

Geometric degeneracies are reported as None rather than exceptions so the
rendering path never raises on a single bad sample.
"""

from .integrator import (
    MAX_DEPTH,
    SKY_BLUE,
    SKY_WHITE,
    T_MAX,
    T_MIN,
    background_color,
    ray_color,
    ray_color_recursive,
)
from .interval import FLOAT_MAX, FLOAT_MIN, Interval, IntervalKind
from .ray import Ray, reflect, refract, schlick_reflectance
from .sampling import RandomSource
from .vector import NEAR_ZERO_EPSILON, Vector3, cross, dot

__all__ = [
    "Vector3",
    "NEAR_ZERO_EPSILON",
    "dot",
    "cross",
    "Ray",
    "reflect",
    "refract",
    "schlick_reflectance",
    "Interval",
    "IntervalKind",
    "FLOAT_MAX",
    "FLOAT_MIN",
    "RandomSource",
    "MAX_DEPTH",
    "T_MIN",
    "T_MAX",
    "SKY_WHITE",
    "SKY_BLUE",
    "background_color",
    "ray_color",
    "ray_color_recursive",
]
