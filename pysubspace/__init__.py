"""
PySubspace: dense-matrix engine for subspace-learning face recognition.

Column-major matrices with optional GPU mirrors and the linear algebra
that PCA/LDA/ICA training and nearest-neighbor recognition are built
from: products, covariance, standard and generalized symmetric
eigendecomposition, inversion, matrix square root and column distances.

Submodules:
    matrix: Matrix type and all operations
    core: Exceptions, validation, result/abort policy, config, tracing
"""

import logging

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

from pysubspace.core.config import EngineConfig
from pysubspace.core.trace import Verbosity, get_verbosity, set_verbosity
from pysubspace.core.result import Result, attempt, abort_on_error
from pysubspace.matrix.backends import configure, get_backend, set_backend
from pysubspace.matrix import *  # noqa: F401,F403
from pysubspace.matrix import __all__ as _matrix_all

set_verbosity(EngineConfig.from_env().verbosity)

__all__ = [
    "__version__",
    "EngineConfig",
    "Verbosity",
    "get_verbosity",
    "set_verbosity",
    "Result",
    "attempt",
    "abort_on_error",
    "configure",
    "get_backend",
    "set_backend",
    *_matrix_all,
]
