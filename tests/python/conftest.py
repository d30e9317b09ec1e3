"""
Pytest configuration and shared fixtures for algebra tests.
"""

import pytest
import numpy as np
from pathlib import Path
import sys

# Add src to path for imports
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root / "src"))

from algebra.matrix import Matrix, LockGranularity, LockConfig, get_config


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture(autouse=True)
def reset_config():
    """Restore default configuration around every test."""
    get_config().reset()
    yield
    get_config().reset()


@pytest.fixture(params=[LockGranularity.ELEMENT, LockGranularity.OPERATION],
                ids=["element", "operation"])
def granularity(request):
    """Run a test once per lock granularity."""
    with get_config().local(locking=LockConfig(granularity=request.param)):
        yield request.param


@pytest.fixture
def matrix_a():
    """2x2 matrix.

    Matrix:
    [[1, 2],
     [3, 4]]
    """
    return Matrix.from_list([[1.0, 2.0], [3.0, 4.0]])


@pytest.fixture
def matrix_b():
    """2x2 matrix.

    Matrix:
    [[5, 6],
     [7, 8]]
    """
    return Matrix.from_list([[5.0, 6.0], [7.0, 8.0]])


@pytest.fixture
def matrix_2x3():
    """2x3 matrix with distinct values."""
    return Matrix.from_list([
        [1.0, 2.0, 3.0],
        [4.0, 5.0, 6.0],
    ])


@pytest.fixture
def random_matrix():
    """Random 5x7 matrix."""
    rng = np.random.default_rng(42)
    return Matrix.from_numpy(rng.standard_normal((5, 7)))


# =============================================================================
# Helper Functions
# =============================================================================

def assert_matrix_equal(m, expected, rtol=1e-12, atol=1e-12):
    """Assert matrix values match a nested list or array."""
    expected = np.asarray(expected, dtype=np.float64)
    assert m.dimensions() == expected.shape
    np.testing.assert_allclose(m.to_numpy(), expected, rtol=rtol, atol=atol)
