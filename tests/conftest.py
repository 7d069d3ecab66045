"""
pytest configuration and shared fixtures.
"""

import pytest
import numpy as np

from pysubspace.core.compute.random import (
    NormalSource,
    ShuffleSource,
    set_normal_source,
    set_shuffle_source,
)
from pysubspace.core.trace import get_verbosity, set_verbosity
from pysubspace.matrix import from_array
from pysubspace.matrix.backends import CPULinalgBackend, set_backend


@pytest.fixture(autouse=True)
def cpu_backend():
    """Run every test against the CPU reference backend."""
    backend = CPULinalgBackend()
    set_backend(backend)
    yield backend
    set_backend(None)


@pytest.fixture(autouse=True)
def restore_process_state():
    """Undo verbosity and random-source changes made by a test."""
    verbosity = get_verbosity()
    yield
    set_verbosity(verbosity)
    set_normal_source(None)
    set_shuffle_source(None)


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def shuffle_source():
    """Reproducible shuffle source."""
    return ShuffleSource(seed=7)


@pytest.fixture
def normal_source():
    """Fresh fixed-seed normal source."""
    return NormalSource()


@pytest.fixture
def data_matrix(rng):
    """10 x 4 well-conditioned data matrix (rows are samples)."""
    return from_array(rng.standard_normal((10, 4)), label='X')


@pytest.fixture
def spd_matrix(rng):
    """5 x 5 symmetric positive definite matrix."""
    A = rng.standard_normal((5, 5))
    return from_array(A @ A.T + 5.0 * np.eye(5), label='S')
