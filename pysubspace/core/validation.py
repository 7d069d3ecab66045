"""
Precondition checks for matrix operations.

These validators follow the "fail fast, fail loud" principle. They raise
immediately with clear error messages rather than silently correcting
or making assumptions about caller intent. Every check runs before any
backend kernel is dispatched.

Checks are duck-typed against the matrix interface (``label``, ``rows``,
``cols``, ``data``) so this module has no import dependency on
pysubspace.matrix.

Design principles:
    - No default handling of edge cases
    - Clear, actionable error messages with actual values
    - Each function validates ONE thing
    - Matrix labels included in all error messages
"""

from __future__ import annotations

from typing import Any
import numpy as np

from pysubspace.core.exceptions import (
    ValidationError,
    DimensionError,
    IndexRangeError,
)
from pysubspace.core.compute.precision import SYMMETRY_ATOL, SYMMETRY_RTOL


def _shape(M: Any) -> str:
    return f"{M.label} [{M.rows}, {M.cols}]"


def check_shape(rows: int, cols: int) -> None:
    """
    Verify a requested shape describes a non-empty matrix.

    Raises:
        DimensionError: If rows < 1 or cols < 1
    """
    if rows < 1 or cols < 1:
        raise DimensionError(
            f"matrix shape must be at least [1, 1], got [{rows}, {cols}]"
        )


def check_same_shape(A: Any, B: Any) -> None:
    """
    Verify two matrices have identical shape.

    Raises:
        DimensionError: If the shapes differ
    """
    if A.rows != B.rows or A.cols != B.cols:
        raise DimensionError(
            f"shape mismatch: {_shape(A)} vs {_shape(B)}"
        )


def check_same_rows(A: Any, B: Any) -> None:
    """
    Verify two matrices have the same number of rows.

    Raises:
        DimensionError: If row counts differ
    """
    if A.rows != B.rows:
        raise DimensionError(
            f"row count mismatch: {_shape(A)} vs {_shape(B)}"
        )


def check_same_cols(A: Any, B: Any) -> None:
    """
    Verify two matrices have the same number of columns.

    Raises:
        DimensionError: If column counts differ
    """
    if A.cols != B.cols:
        raise DimensionError(
            f"column count mismatch: {_shape(A)} vs {_shape(B)}"
        )


def check_square(M: Any) -> None:
    """
    Verify a matrix is square.

    Raises:
        DimensionError: If rows != cols
    """
    if M.rows != M.cols:
        raise DimensionError(f"{_shape(M)}: expected a square matrix")


def check_symmetric(M: Any) -> None:
    """
    Verify a square matrix is symmetric within rounding tolerance.

    The tolerance scales with the largest magnitude in the matrix so
    that products like ``A^T * A`` computed in single precision pass.

    Raises:
        DimensionError: If M is not square
        ValidationError: If M differs from its transpose
    """
    check_square(M)
    data = M.data
    scale = float(np.max(np.abs(data))) if data.size else 0.0
    if not np.allclose(data, data.T, rtol=SYMMETRY_RTOL, atol=SYMMETRY_ATOL * max(scale, 1.0)):
        deviation = float(np.max(np.abs(data - data.T)))
        raise ValidationError(
            f"{_shape(M)}: expected a symmetric matrix "
            f"(max |M - M^T| = {deviation:.3e})"
        )


def check_vector(M: Any) -> None:
    """
    Verify a matrix is a row or column vector.

    Raises:
        DimensionError: If neither dimension equals 1
    """
    if M.rows != 1 and M.cols != 1:
        raise DimensionError(f"{_shape(M)}: expected a row or column vector")


def check_column_vector(a: Any, rows: int) -> None:
    """
    Verify a matrix is a column vector of the given length.

    Raises:
        DimensionError: If a is not ``rows x 1``
    """
    if a.cols != 1 or a.rows != rows:
        raise DimensionError(
            f"{_shape(a)}: expected a column vector [{rows}, 1]"
        )


def check_row_vector(a: Any, cols: int) -> None:
    """
    Verify a matrix is a row vector of the given length.

    Raises:
        DimensionError: If a is not ``1 x cols``
    """
    if a.rows != 1 or a.cols != cols:
        raise DimensionError(
            f"{_shape(a)}: expected a row vector [1, {cols}]"
        )


def check_index(index: int, bound: int, name: str) -> None:
    """
    Verify ``0 <= index < bound``.

    Raises:
        IndexRangeError: If the index is out of range
    """
    if not 0 <= index < bound:
        raise IndexRangeError(
            f"{name}: index {index} out of range [0, {bound})",
            index=index,
            bound=bound,
        )


def check_range(start: int, stop: int, bound: int, name: str) -> None:
    """
    Verify a non-empty half-open range ``0 <= start < stop <= bound``.

    Raises:
        IndexRangeError: If the range is empty or out of bounds
    """
    if not 0 <= start < stop <= bound:
        raise IndexRangeError(
            f"{name}: range [{start}, {stop}) invalid for bound {bound}",
            index=start,
            bound=bound,
        )
