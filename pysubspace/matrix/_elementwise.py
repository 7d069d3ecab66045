"""
Elementwise, reduction and structural operators.

In-place operators mutate their first argument's host buffer and return
None: add, subtract, scalar_multiply, elementwise_apply,
subtract_columns, subtract_rows, assign_column, assign_row,
shuffle_columns. A device mirror is left untouched (and therefore stale)
until the caller syncs again.

All other operators return a new matrix and leave their operands alone.
"""

from __future__ import annotations

from typing import Callable
import numpy as np

from pysubspace.core import trace
from pysubspace.core.compute.random import ShuffleSource, get_shuffle_source
from pysubspace.core.validation import (
    check_column_vector,
    check_index,
    check_row_vector,
    check_same_cols,
    check_same_rows,
    check_same_shape,
    check_vector,
)
from pysubspace.matrix.backends.cpu import axpy, scal
from pysubspace.matrix.matrix import Matrix, zeros


def add(A: Matrix, B: Matrix) -> None:
    """A <- A + B."""
    check_same_shape(A, B)
    axpy(1.0, B.data, A.data)
    trace.record('add', A, A, B, symbol='+')


def subtract(A: Matrix, B: Matrix) -> None:
    """A <- A - B."""
    check_same_shape(A, B)
    axpy(-1.0, B.data, A.data)
    trace.record('subtract', A, A, B, symbol='-')


def scalar_multiply(M: Matrix, c: float) -> None:
    """M <- c * M."""
    scal(c, M.data)
    trace.record('scalar_multiply', M, f"{c:g}", M, symbol='*')


def elementwise_apply(M: Matrix, f: Callable[[float], float] | np.ufunc) -> None:
    """
    M[i, j] <- f(M[i, j]) for every element.

    NumPy ufuncs are applied vectorized; any other callable is called
    once per element in column-major order.
    """
    data = M.data
    if isinstance(f, np.ufunc):
        data[...] = f(data)
    else:
        flat = data.reshape(-1, order='F')
        flat[:] = np.fromiter((f(float(x)) for x in flat), dtype=data.dtype, count=flat.size)
    trace.record('elementwise_apply', M, getattr(f, '__name__', 'f'), M)


def mean_column(M: Matrix, label: str = 'mu') -> Matrix:
    """Column vector (rows x 1) of means across the columns of M."""
    a = zeros(M.rows, 1, label)
    a.data[:, 0] = np.mean(M.data, axis=1)
    trace.record('mean_column', a, M)
    return a


def mean_row(M: Matrix, label: str = 'mu') -> Matrix:
    """Row vector (1 x cols) of means across the rows of M."""
    a = zeros(1, M.cols, label)
    a.data[0, :] = np.mean(M.data, axis=0)
    trace.record('mean_row', a, M)
    return a


def subtract_columns(M: Matrix, a: Matrix) -> None:
    """
    Subtract column vector a from every column of M.

    Raises:
        DimensionError: If a is not M.rows x 1
    """
    check_column_vector(a, M.rows)
    M.data[...] -= a.data
    trace.record('subtract_columns', M, M, a, symbol='-')


def subtract_rows(M: Matrix, a: Matrix) -> None:
    """
    Subtract row vector a from every row of M.

    Raises:
        DimensionError: If a is not 1 x M.cols
    """
    check_row_vector(a, M.cols)
    M.data[...] -= a.data
    trace.record('subtract_rows', M, M, a, symbol='-')


def diagonalize(v: Matrix, label: str = 'D') -> Matrix:
    """
    Square matrix with the elements of v on its diagonal.

    Raises:
        DimensionError: If v is not a row or column vector
    """
    check_vector(v)
    n = max(v.rows, v.cols)
    D = zeros(n, n, label)
    np.fill_diagonal(D.data, v.data.reshape(-1, order='F'))
    trace.record('diagonalize', D, v)
    return D


def assign_column(A: Matrix, i: int, B: Matrix, j: int) -> None:
    """
    A[:, i] <- B[:, j].

    Raises:
        DimensionError: If A and B have different row counts
        IndexRangeError: If i or j is out of range
    """
    check_same_rows(A, B)
    check_index(i, A.cols, f"{A.label} column")
    check_index(j, B.cols, f"{B.label} column")
    A.data[:, i] = B.data[:, j]
    trace.record('assign_column', A, f"{A.label}[:, {i}]", f"{B.label}[:, {j}]")


def assign_row(A: Matrix, i: int, B: Matrix, j: int) -> None:
    """
    A[i, :] <- B[j, :].

    Raises:
        DimensionError: If A and B have different column counts
        IndexRangeError: If i or j is out of range
    """
    check_same_cols(A, B)
    check_index(i, A.rows, f"{A.label} row")
    check_index(j, B.rows, f"{B.label} row")
    A.data[i, :] = B.data[j, :]
    trace.record('assign_row', A, f"{A.label}[{i}, :]", f"{B.label}[{j}, :]")


def shuffle_columns(M: Matrix, *, source: ShuffleSource | None = None) -> None:
    """
    Uniformly permute the columns of M in place (Fisher–Yates).

    Args:
        source: Integer source; defaults to the process-wide shuffle source.
    """
    src = source if source is not None else get_shuffle_source()
    data = M.data
    for i in range(M.cols - 1, 0, -1):
        j = src.randint(0, i)
        if i != j:
            data[:, [i, j]] = data[:, [j, i]]
    trace.record('shuffle_columns', M, M)
