"""Uniform random source for Monte Carlo sampling.

Every sampling decision in the reference renderer (pixel jitter, lens
sampling, diffuse and fuzzy scattering, the dielectric reflect/refract
choice) draws from a RandomSource passed explicitly by the caller. There is
no process-wide generator: a seeded source makes a render reproducible, and
spawn() hands out independent streams for parallel workers.

Example:
    >>> from pathtracer.core.sampling import RandomSource
    >>> rng = RandomSource(seed=42)
    >>> 0.0 <= rng.uniform(0.0, 1.0) < 1.0
    True
"""

from __future__ import annotations

import numpy as np


class RandomSource:
    """A uniform random number source backed by numpy's Generator.

    Attributes:
        seed: The seed the source was created with (None for OS entropy).
    """

    def __init__(
        self,
        seed: int | None = None,
        *,
        seed_sequence: np.random.SeedSequence | None = None,
    ) -> None:
        """Create a random source.

        Args:
            seed: Optional integer seed. None draws fresh OS entropy.
            seed_sequence: Optional numpy SeedSequence, used by spawn().
                Takes precedence over seed.
        """
        self.seed = seed
        self._seed_sequence = (
            seed_sequence if seed_sequence is not None else np.random.SeedSequence(seed)
        )
        self._generator = np.random.default_rng(self._seed_sequence)

    def uniform(self, low: float = 0.0, high: float = 1.0) -> float:
        """Draw a float uniformly from the half-open interval [low, high)."""
        return float(self._generator.uniform(low, high))

    def random(self) -> float:
        """Draw a float uniformly from [0, 1)."""
        return float(self._generator.random())

    def spawn(self, n: int) -> list[RandomSource]:
        """Create n statistically independent child sources.

        Args:
            n: Number of child streams.

        Returns:
            A list of RandomSource instances, one per worker.
        """
        return [
            RandomSource(self.seed, seed_sequence=child)
            for child in self._seed_sequence.spawn(n)
        ]

    def __repr__(self) -> str:
        return f"RandomSource(seed={self.seed})"
