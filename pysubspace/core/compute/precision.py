"""
Numerical precision constants and utilities.

The element type of every matrix is fixed for the lifetime of the
process. It is read once from the ``PYSUBSPACE_PRECISION`` environment
variable at import time ('single' or 'double', default 'single') and is
never a per-call parameter.
"""

import os
import numpy as np

from pysubspace.core.exceptions import ValidationError


_PRECISIONS = {
    'single': np.float32,
    'float32': np.float32,
    'double': np.float64,
    'float64': np.float64,
}


def _precision_from_env() -> type:
    value = os.environ.get('PYSUBSPACE_PRECISION', 'single').strip().lower()
    if value not in _PRECISIONS:
        raise ValidationError(
            f"PYSUBSPACE_PRECISION must be one of {sorted(_PRECISIONS)}, got {value!r}"
        )
    return _PRECISIONS[value]


# Element type of all matrix buffers
PRECISION: type = _precision_from_env()

# Eigenvalues below this are dropped by the standard eigensolver
EIGENVALUE_EPSILON: float = 1e-8

# Tolerance for accepting a matrix as symmetric
SYMMETRY_RTOL: float = 1e-4 if PRECISION == np.float32 else 1e-10
SYMMETRY_ATOL: float = 1e-5 if PRECISION == np.float32 else 1e-12


def machine_epsilon(dtype: np.dtype | type = PRECISION) -> float:
    """
    Get machine epsilon for a given dtype.

    Args:
        dtype: NumPy dtype or type

    Returns:
        Machine epsilon for the dtype
    """
    return float(np.finfo(dtype).eps)


def precision_name(dtype: np.dtype | type = PRECISION) -> str:
    """Short name used in backend identifiers ('fp32' or 'fp64')."""
    return 'fp64' if np.dtype(dtype) == np.float64 else 'fp32'
