"""Scalar intervals bounding valid ray hit distances.

An Interval is in one of three states:

    EMPTY     contains nothing
    UNIVERSE  contains every value
    BOUNDED   the range (min, max) for strict membership tests

The integrator queries the scene with Interval(0.001, inf) so that a ray
leaving a surface does not re-hit it because of floating-point error, and the
scene tightens the upper bound each time a nearer hit is found.

For the degenerate states min/max report the numeric extremes (Empty is the
"swapped" pair FLOAT_MAX, -FLOAT_MAX), so tightening code never special-cases
them.

Example:
    >>> from pathtracer.core.interval import Interval
    >>> ray_t = Interval(0.001, float("inf"))
    >>> ray_t.surrounds(0.001), ray_t.surrounds(2.0)
    (False, True)
    >>> ray_t.with_max(1.5).surrounds(2.0)
    False
"""

from __future__ import annotations

import math
import sys
from enum import IntEnum

FLOAT_MAX = sys.float_info.max
FLOAT_MIN = -sys.float_info.max


class IntervalKind(IntEnum):
    """The three interval states."""

    EMPTY = 0
    UNIVERSE = 1
    BOUNDED = 2


def _is_lowest(value: float) -> bool:
    return value == FLOAT_MIN or value == -math.inf


def _is_highest(value: float) -> bool:
    return value == FLOAT_MAX or value == math.inf


class Interval:
    """A tri-state scalar range.

    Interval(min, max) builds a bounded range and collapses to the canonical
    Universe for (lowest, highest) and to the canonical Empty for
    (highest, lowest). Any other pair, including ones with min > max, stays
    BOUNDED and simply surrounds nothing.
    """

    __slots__ = ("_kind", "_min", "_max")

    def __init__(self, min: float, max: float) -> None:
        if _is_lowest(min) and _is_highest(max):
            self._kind = IntervalKind.UNIVERSE
        elif _is_highest(min) and _is_lowest(max):
            self._kind = IntervalKind.EMPTY
        else:
            self._kind = IntervalKind.BOUNDED
        self._min = float(min)
        self._max = float(max)

    @classmethod
    def empty(cls) -> Interval:
        return cls(FLOAT_MAX, FLOAT_MIN)

    @classmethod
    def universe(cls) -> Interval:
        return cls(FLOAT_MIN, FLOAT_MAX)

    @property
    def kind(self) -> IntervalKind:
        return self._kind

    @property
    def is_empty(self) -> bool:
        return self._kind == IntervalKind.EMPTY

    @property
    def min(self) -> float:
        """Lower bound; FLOAT_MIN for Universe and FLOAT_MAX for Empty."""
        if self._kind == IntervalKind.UNIVERSE:
            return FLOAT_MIN
        if self._kind == IntervalKind.EMPTY:
            return FLOAT_MAX
        return self._min

    @property
    def max(self) -> float:
        """Upper bound; FLOAT_MAX for Universe and FLOAT_MIN for Empty."""
        if self._kind == IntervalKind.UNIVERSE:
            return FLOAT_MAX
        if self._kind == IntervalKind.EMPTY:
            return FLOAT_MIN
        return self._max

    def surrounds(self, x: float) -> bool:
        """Strict membership test: min < x < max."""
        if self._kind == IntervalKind.UNIVERSE:
            return True
        if self._kind == IntervalKind.EMPTY:
            return False
        return self._min < x < self._max

    def contains(self, x: float) -> bool:
        """Closed membership test: min <= x <= max."""
        if self._kind == IntervalKind.UNIVERSE:
            return True
        if self._kind == IntervalKind.EMPTY:
            return False
        return self._min <= x <= self._max

    def clamp(self, x: float) -> float:
        """Clamp x into [min, max]."""
        if x < self.min:
            return self.min
        if x > self.max:
            return self.max
        return x

    def with_max(self, new_max: float) -> Interval:
        """Return a copy with the upper bound replaced, keeping the lower bound."""
        return Interval(self.min, new_max)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Interval):
            return NotImplemented
        return self._kind == other._kind and self.min == other.min and self.max == other.max

    def __hash__(self) -> int:
        return hash((self._kind, self.min, self.max))

    def __repr__(self) -> str:
        if self._kind == IntervalKind.UNIVERSE:
            return "Interval.universe()"
        if self._kind == IntervalKind.EMPTY:
            return "Interval.empty()"
        return f"Interval({self._min!r}, {self._max!r})"
