"""
Pytest configuration and shared fixtures for lina tests.
"""

import sys
from fractions import Fraction
from pathlib import Path

import numpy as np
import pytest

# Add src to path for imports
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root / "src"))

from lina import ElementAlgebra, MatrixBuilder, VectorBuilder, get_config, set_parallelism  # noqa: E402


# Try to import scipy
try:
    import scipy.sparse as sp  # noqa: F401
    HAS_SCIPY = True
except ImportError:
    HAS_SCIPY = False


# =============================================================================
# Custom Element Algebra
# =============================================================================

class RationalAlgebra(ElementAlgebra):
    """Exact rationals, used to check that nothing assumes float elements."""

    name = 'rational'

    def coerce(self, value):
        return Fraction(value)

    def add(self, a, b):
        return a + b

    def subtract(self, a, b):
        return a - b

    def multiply(self, a, b):
        return a * b

    def divide(self, a, b):
        return a / b

    def absolute(self, a):
        return float(abs(a))

    def conjugate(self, a):
        return a


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture(scope="session")
def requires_scipy():
    """Skip test if scipy is not available."""
    if not HAS_SCIPY:
        pytest.skip("scipy not available")


@pytest.fixture
def mbuild():
    """float64 matrix builder."""
    return MatrixBuilder('float64')


@pytest.fixture
def vbuild():
    """float64 vector builder."""
    return VectorBuilder('float64')


@pytest.fixture
def cbuild():
    """complex128 matrix builder."""
    return MatrixBuilder('complex128')


@pytest.fixture
def rational():
    return RationalAlgebra()


@pytest.fixture
def sample_rows():
    """
    3x4 test matrix:
    [[1, 0, 2, 0],
     [0, 3, 0, 4],
     [5, 0, 0, 6]]
    """
    return [
        [1.0, 0.0, 2.0, 0.0],
        [0.0, 3.0, 0.0, 4.0],
        [5.0, 0.0, 0.0, 6.0],
    ]


@pytest.fixture
def square_rows():
    return [
        [2.0, 0.0, 1.0],
        [0.0, 3.0, 0.0],
        [4.0, 0.0, 5.0],
    ]


@pytest.fixture(params=['dense', 'sparse', 'diagonal'])
def square_of_each_kind(request, mbuild):
    """3x3 matrix of every storage kind with the same diagonal 1, 2, 3."""
    if request.param == 'dense':
        return mbuild.dense_of_array([[1, 4, 0], [0, 2, 0], [7, 0, 3]])
    if request.param == 'sparse':
        return mbuild.sparse_of_array([[1, 0, 0], [0, 2, 5], [0, 0, 3]])
    return mbuild.diagonal_of_diagonal(3, 3, [1, 2, 3])


@pytest.fixture
def parallel_always():
    """Force map_slices onto the thread pool for every size."""
    config = get_config()
    saved = (config.parallel_threshold, config.max_workers)
    set_parallelism(threshold=1, max_workers=4)
    yield
    set_parallelism(threshold=saved[0], max_workers=saved[1])


# =============================================================================
# Helper Functions
# =============================================================================

def assert_matrix_equal(matrix, expected, rtol=1e-7, atol=1e-12):
    """Assert a Matrix matches a 2-D array-like cell by cell."""
    expected = np.asarray(expected)
    assert matrix.shape == expected.shape
    np.testing.assert_allclose(np.array(matrix.to_array(), dtype=expected.dtype),
                               expected, rtol=rtol, atol=atol)


def assert_vector_equal(vector, expected, rtol=1e-7, atol=1e-12):
    """Assert a Vector matches a 1-D array-like element by element."""
    expected = np.asarray(expected)
    assert vector.count == len(expected)
    np.testing.assert_allclose(np.array(vector.to_list(), dtype=expected.dtype),
                               expected, rtol=rtol, atol=atol)
