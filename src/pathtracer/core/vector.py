"""Three-component vector type for points, directions and colors.

This module provides the Vector3 value type used throughout the reference
renderer. The same type represents positions, directions and linear RGB
colors (components in [0, 1] before gamma correction, unclamped elsewhere).

Degenerate operations never raise inside the rendering path:
    - divide() returns None when the divisor is exactly zero
    - unit() returns None for a zero-length vector

The random constructors draw from an explicit RandomSource so that renders
are reproducible for a seeded source.

Example:
    >>> from pathtracer.core.vector import Vector3
    >>> v = Vector3(3.0, 4.0, 0.0)
    >>> v.length()
    5.0
    >>> v.unit()
    Vector3(x=0.6, y=0.8, z=0.0)
    >>> Vector3.zero().unit() is None
    True
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathtracer.core.sampling import RandomSource

# Component magnitude below which a vector counts as degenerate
NEAR_ZERO_EPSILON = 1e-8


@dataclass(frozen=True, slots=True)
class Vector3:
    """An immutable 3D vector.

    Attributes:
        x: First component (red channel for colors).
        y: Second component (green channel for colors).
        z: Third component (blue channel for colors).
    """

    x: float
    y: float
    z: float

    @classmethod
    def zero(cls) -> Vector3:
        """Return the zero vector (black for colors)."""
        return cls(0.0, 0.0, 0.0)

    @classmethod
    def from_iterable(cls, values: Iterable[float]) -> Vector3:
        """Build a vector from any 3-element iterable.

        Raises:
            ValueError: If the iterable does not hold exactly 3 values.
        """
        items = [float(v) for v in values]
        if len(items) != 3:
            raise ValueError(f"Expected 3 components, got {len(items)}: {items}")
        return cls(items[0], items[1], items[2])

    # =========================================================================
    # Arithmetic
    # =========================================================================

    def __add__(self, other: Vector3) -> Vector3:
        return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vector3) -> Vector3:
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __neg__(self) -> Vector3:
        return Vector3(-self.x, -self.y, -self.z)

    def __mul__(self, other: Vector3 | float) -> Vector3:
        if isinstance(other, Vector3):
            return Vector3(self.x * other.x, self.y * other.y, self.z * other.z)
        return Vector3(self.x * other, self.y * other, self.z * other)

    def __rmul__(self, other: float) -> Vector3:
        return Vector3(self.x * other, self.y * other, self.z * other)

    def divide(self, t: float) -> Vector3 | None:
        """Divide every component by a scalar.

        Args:
            t: The divisor.

        Returns:
            The scaled vector, or None when t is exactly zero.
        """
        if t == 0.0:
            return None
        return Vector3(self.x / t, self.y / t, self.z / t)

    def __truediv__(self, t: float) -> Vector3:
        result = self.divide(t)
        if result is None:
            raise ZeroDivisionError("Vector3 division by zero")
        return result

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z

    def to_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)

    # =========================================================================
    # Products and norms
    # =========================================================================

    def dot(self, other: Vector3) -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: Vector3) -> Vector3:
        return Vector3(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def length_squared(self) -> float:
        return self.x * self.x + self.y * self.y + self.z * self.z

    def length(self) -> float:
        return math.sqrt(self.length_squared())

    def unit(self) -> Vector3 | None:
        """Normalize to unit length.

        Returns:
            A unit vector in the same direction, or None if this vector has
            zero length (e.g. a dielectric ray exactly along a tangent).
        """
        return self.divide(self.length())

    def sqrt(self) -> Vector3:
        """Componentwise square root, used as the gamma-2 tone curve."""
        return Vector3(math.sqrt(self.x), math.sqrt(self.y), math.sqrt(self.z))

    def near_zero(self) -> bool:
        """Return True if every component is below 1e-8 in magnitude."""
        s = NEAR_ZERO_EPSILON
        return abs(self.x) < s and abs(self.y) < s and abs(self.z) < s

    # =========================================================================
    # Random constructors
    # =========================================================================

    @classmethod
    def random(cls, rng: RandomSource, low: float = 0.0, high: float = 1.0) -> Vector3:
        """Vector with each component uniform in [low, high)."""
        return cls(rng.uniform(low, high), rng.uniform(low, high), rng.uniform(low, high))

    @classmethod
    def random_in_unit_sphere(cls, rng: RandomSource) -> Vector3:
        """Uniform point strictly inside the unit ball.

        Uses rejection sampling: draws points in the [-1, 1) cube until one
        lands inside the ball.
        """
        while True:
            p = cls.random(rng, -1.0, 1.0)
            if p.length_squared() < 1.0:
                return p

    @classmethod
    def random_unit_vector(cls, rng: RandomSource) -> Vector3 | None:
        """Random direction on the unit sphere.

        Returns:
            The normalized rejection sample, or None in the measure-zero case
            where the sample is exactly the origin.
        """
        return cls.random_in_unit_sphere(rng).unit()

    @classmethod
    def random_on_hemisphere(cls, normal: Vector3, rng: RandomSource) -> Vector3 | None:
        """Random unit direction in the hemisphere around a normal."""
        on_unit_sphere = cls.random_unit_vector(rng)
        if on_unit_sphere is None:
            return None
        if on_unit_sphere.dot(normal) > 0.0:
            return on_unit_sphere
        return -on_unit_sphere

    @classmethod
    def random_in_unit_disk(cls, rng: RandomSource) -> Vector3:
        """Uniform point inside the unit disk in the z = 0 plane (lens sampling)."""
        while True:
            p = cls(rng.uniform(-1.0, 1.0), rng.uniform(-1.0, 1.0), 0.0)
            if p.length_squared() < 1.0:
                return p


def dot(a: Vector3, b: Vector3) -> float:
    """Dot product of two vectors."""
    return a.dot(b)


def cross(a: Vector3, b: Vector3) -> Vector3:
    """Cross product a x b."""
    return a.cross(b)
