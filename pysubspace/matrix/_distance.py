"""
Distances between column vectors.

Each metric compares column i of A with column j of B (A and B may be
the same matrix) and follows the convention that smaller means more
similar, which the nearest-neighbor classifier relies on. Every metric
is symmetric: d(A, i, B, j) == d(B, j, A, i) exactly.
"""

from __future__ import annotations

from typing import Callable
import numpy as np

from pysubspace.core import trace
from pysubspace.core.exceptions import ValidationError
from pysubspace.core.validation import check_index, check_same_rows
from pysubspace.matrix.matrix import Matrix


DistanceFunc = Callable[[Matrix, int, Matrix, int], float]


def _columns(A: Matrix, i: int, B: Matrix, j: int) -> tuple[np.ndarray, np.ndarray]:
    check_same_rows(A, B)
    check_index(i, A.cols, f"{A.label} column")
    check_index(j, B.cols, f"{B.label} column")
    return (
        A.data[:, i].astype(np.float64),
        B.data[:, j].astype(np.float64),
    )


def _operands(A: Matrix, i: int, B: Matrix, j: int) -> tuple[str, str]:
    return f"{trace.describe(A)} : {i}", f"{trace.describe(B)} : {j}"


def dist_l1(A: Matrix, i: int, B: Matrix, j: int) -> float:
    """Taxicab distance: sum |a_k - b_k|."""
    a, b = _columns(A, i, B, j)
    d = float(np.sum(np.abs(a - b)))
    if trace.enabled():
        trace.record('dist_l1', 'd', *_operands(A, i, B, j), value=d)
    return d


def dist_l2(A: Matrix, i: int, B: Matrix, j: int) -> float:
    """Euclidean distance: sqrt(sum (a_k - b_k)^2)."""
    a, b = _columns(A, i, B, j)
    d = float(np.sqrt(np.sum((a - b) ** 2)))
    if trace.enabled():
        trace.record('dist_l2', 'd', *_operands(A, i, B, j), value=d)
    return d


def dist_cos(A: Matrix, i: int, B: Matrix, j: int) -> float:
    """
    Negated cosine similarity: -(a . b) / (|a| |b|).

    Ranges over [-1, 1]; -1 for parallel vectors, 0 for orthogonal ones.
    A zero vector yields NaN.
    """
    a, b = _columns(A, i, B, j)
    ab = np.sum(a * b)
    norms = np.sqrt(np.sum(a * a)) * np.sqrt(np.sum(b * b))
    with np.errstate(divide='ignore', invalid='ignore'):
        d = float(-ab / norms)
    if trace.enabled():
        trace.record('dist_cos', 'd', *_operands(A, i, B, j), value=d)
    return d


DISTANCE_FUNCS: dict[str, DistanceFunc] = {
    'L1': dist_l1,
    'L2': dist_l2,
    'COS': dist_cos,
}


def distance(metric: str, A: Matrix, i: int, B: Matrix, j: int) -> float:
    """
    Dispatch to a metric by name ('L1', 'L2', 'COS', case-insensitive).

    Raises:
        ValidationError: If the metric is unknown
    """
    try:
        func = DISTANCE_FUNCS[metric.upper()]
    except KeyError:
        raise ValidationError(
            f"Unknown distance metric: {metric!r}. "
            f"Must be one of {sorted(DISTANCE_FUNCS)}."
        ) from None
    return func(A, i, B, j)
