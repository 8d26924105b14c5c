import os
import sys

import numpy as np
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def noise_template(rng):
    """40x40 uint8 noise: no rotational symmetry, so every angle has one clear match."""
    return rng.integers(0, 256, size=(40, 40), dtype=np.uint8)
