"""
Core infrastructure for PySubspace.

This module provides shared abstractions and utilities used by the
matrix engine and its backends.

Key components:
    protocols: LinalgBackend protocol
    result: Tagged Result envelope and abort policy
    exceptions: Exception hierarchy
    validation: Precondition checks
    trace: Operation trace channel and verbosity
    config: Process-level engine settings
    compute: Device detection, precision, tolerances, random sources
"""

from pysubspace.core.protocols import LinalgBackend
from pysubspace.core.result import Result, attempt, abort_on_error
from pysubspace.core.config import EngineConfig
from pysubspace.core.trace import Verbosity, get_verbosity, set_verbosity
from pysubspace.core.exceptions import (
    PySubspaceError,
    ValidationError,
    DimensionError,
    IndexRangeError,
    FormatError,
    NumericalError,
    SingularMatrixError,
    NotPositiveDefiniteError,
    ConvergenceError,
)

__all__ = [
    # Protocols
    "LinalgBackend",
    # Result
    "Result",
    "attempt",
    "abort_on_error",
    # Config and diagnostics
    "EngineConfig",
    "Verbosity",
    "get_verbosity",
    "set_verbosity",
    # Exceptions
    "PySubspaceError",
    "ValidationError",
    "DimensionError",
    "IndexRangeError",
    "FormatError",
    "NumericalError",
    "SingularMatrixError",
    "NotPositiveDefiniteError",
    "ConvergenceError",
]
