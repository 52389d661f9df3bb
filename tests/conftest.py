import sys
from pathlib import Path

import pytest

from murmuration.config import FlockParams

# experiments/ holds scripts rather than an installed package
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


class FixedNoise:
    """Noise source returning a fixed value, independent of the clock."""

    def __init__(self, value):
        self.value = value
        self.samples = []

    def sample(self, x):
        self.samples.append(x)
        return self.value


@pytest.fixture
def far_predator_params():
    # With FixedNoise(1.0) the predator sits in the far corner of this world
    return FlockParams(half_width=1e6, half_height=1e6)


@pytest.fixture
def fixed_noise():
    return FixedNoise
