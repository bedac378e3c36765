"""
pytest configuration and shared fixtures.
"""

import pytest
import numpy as np

from pydense import Matrix, Xor64
from pydense.core.config import borrow_checking


@pytest.fixture(autouse=True)
def _borrow_checking_on():
    """Every test starts with borrow checking enabled, whatever the environment says."""
    with borrow_checking(True):
        yield


@pytest.fixture
def gen():
    """Seeded xorshift generator for reproducible matrices."""
    return Xor64()


@pytest.fixture
def rng():
    """Seeded numpy generator for reference arrays."""
    return np.random.default_rng(42)


@pytest.fixture
def eye3():
    return Matrix(3, 3).fill_identity()


@pytest.fixture
def seq_2x4():
    """2x4 matrix holding 0..7 in row-major order."""
    return Matrix(2, 4).fill_by(lambda r, c: r * 4 + c)


@pytest.fixture
def random_4x4(gen):
    return Matrix(4, 4).fill_random(gen)
