from typing import Protocol

import noise


class NoiseSource(Protocol):
    def sample(self, x: float) -> float:
        """Continuous, deterministic value in [0, 1] for parameter x."""
        ...


class PerlinNoise:
    """1D Perlin noise rescaled from [-1, 1] to [0, 1]."""

    def __init__(self, octaves=1, base=0):
        self.octaves = octaves
        self.base = base

    def sample(self, x):
        value = noise.pnoise1(float(x), octaves=self.octaves, base=self.base)
        return min(1.0, max(0.0, (value + 1.0) / 2.0))


class ConstantNoise:
    """Always returns the same value. Handy for tests and fixed-mood runs."""

    def __init__(self, value=0.5):
        if not 0.0 <= value <= 1.0:
            raise ValueError(f"noise value must be in [0, 1], got {value}")
        self.value = value

    def sample(self, x):
        return self.value
