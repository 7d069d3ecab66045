"""
Linear-solver primitives and backend dispatch.

Provides product(), inverse(), eigen(), generalized_eigen(), sqrtm(),
norm(), transpose() and covariance().

Preconditions are checked here, before dispatch. Heavy kernels run on
the active backend (see pysubspace.matrix.backends) or on the one passed
as ``backend=``. On a device-mirroring backend, operands must already be
synced to the device and every returned matrix comes back with a fresh
mirror, so results can feed the next call directly.
"""

from __future__ import annotations

import logging
from typing import Any
import numpy as np
from numpy.typing import NDArray

from pysubspace.core import trace
from pysubspace.core.capabilities import CAPABILITY_DEVICE_MIRROR
from pysubspace.core.compute.precision import EIGENVALUE_EPSILON, PRECISION
from pysubspace.core.exceptions import DimensionError, NumericalError
from pysubspace.core.protocols import LinalgBackend
from pysubspace.core.validation import (
    check_same_shape,
    check_square,
    check_symmetric,
    check_vector,
)
from pysubspace.matrix._elementwise import (
    elementwise_apply,
    mean_row,
    scalar_multiply,
    subtract_rows,
)
from pysubspace.matrix.backends import get_backend
from pysubspace.matrix.matrix import Matrix, copy, release, sync_to_device

logger = logging.getLogger(__name__)


def _resolve(backend: LinalgBackend | None) -> LinalgBackend:
    return backend if backend is not None else get_backend()


def _wrap(values: NDArray[np.floating[Any]], label: str, be: LinalgBackend) -> Matrix:
    """Matrix owning a column-major copy of a kernel result."""
    M = Matrix(np.array(values, dtype=PRECISION, order='F', ndmin=2), label)
    if be.supports(CAPABILITY_DEVICE_MIRROR):
        sync_to_device(M, backend=be)
    return M


def _diagonal(w: NDArray[np.floating[Any]], label: str, be: LinalgBackend) -> Matrix:
    return _wrap(np.diag(w), label, be)


def _op(M: Matrix, transposed: bool) -> str:
    suffix = '^T' if transposed else ''
    return f"{M.label}{suffix} [{M.rows}, {M.cols}]"


def product(
    A: Matrix,
    B: Matrix,
    transpose_a: bool = False,
    transpose_b: bool = False,
    *,
    label: str = 'C',
    backend: LinalgBackend | None = None,
) -> Matrix:
    """
    C = op(A) * op(B), op being the identity or the transpose per flag.

    Returns:
        Matrix of shape (rows of op(A), cols of op(B))

    Raises:
        DimensionError: If the inner dimensions of op(A) and op(B) differ
    """
    inner_a = A.rows if transpose_a else A.cols
    inner_b = B.cols if transpose_b else B.rows
    if inner_a != inner_b:
        raise DimensionError(
            f"product: inner dimensions differ: "
            f"{_op(A, transpose_a)} * {_op(B, transpose_b)}"
        )

    be = _resolve(backend)
    C = _wrap(be.gemm(A, B, transpose_a, transpose_b), label, be)
    trace.record('product', C, _op(A, transpose_a), _op(B, transpose_b), symbol='*')
    return C


def transpose(
    M: Matrix,
    *,
    label: str | None = None,
    backend: LinalgBackend | None = None,
) -> Matrix:
    """
    Explicit transposed copy.

    Rarely needed: product() takes transpose flags directly.
    """
    be = _resolve(backend)
    T = _wrap(M.data.T, label or f"{M.label}^T", be)
    trace.record('transpose', T, M)
    return T


def inverse(
    M: Matrix,
    *,
    label: str | None = None,
    backend: LinalgBackend | None = None,
) -> Matrix:
    """
    Inverse via LU factorization and explicit inversion from the factors.

    Raises:
        DimensionError: If M is not square
        SingularMatrixError: If the backend reports M as singular
    """
    check_square(M)
    be = _resolve(backend)
    M_inv = _wrap(be.inverse(M), label or f"{M.label}^-1", be)
    trace.record('inverse', M_inv, M)
    return M_inv


def eigen(
    M: Matrix,
    *,
    backend: LinalgBackend | None = None,
) -> tuple[Matrix, Matrix]:
    """
    Eigendecomposition of a symmetric matrix.

    Eigenpairs with eigenvalue below EIGENVALUE_EPSILON (1e-8) are
    discarded: near-zero and negative eigenvalues of a covariance matrix
    are rounding artifacts. V may therefore have fewer columns than M.

    Returns:
        (V, D): eigenvectors as columns of V (n x k) and the matching
        eigenvalues in ascending order on the diagonal of D (k x k)

    Raises:
        DimensionError: If M is not square
        ValidationError: If M is not symmetric
        ConvergenceError: If the eigensolver does not converge
        NumericalError: If every eigenvalue falls below the threshold
    """
    check_symmetric(M)
    be = _resolve(backend)
    w, V = be.eigh(M)

    keep = w >= EIGENVALUE_EPSILON
    n_kept = int(np.count_nonzero(keep))
    if n_kept == 0:
        raise NumericalError(
            f"{M.label}: no eigenvalue is at least {EIGENVALUE_EPSILON:g} "
            f"(largest {float(w[-1]):.3e})",
            routine='syevd',
        )
    if n_kept < w.size:
        logger.debug(
            "eigen(%s): dropped %d of %d eigenpairs below %g",
            M.label, w.size - n_kept, w.size, EIGENVALUE_EPSILON,
        )

    V_kept = _wrap(V[:, keep], 'V', be)
    D = _diagonal(w[keep], 'D', be)
    trace.record('eigen', f"{trace.describe(V_kept)}, {trace.describe(D)}", M)
    return V_kept, D


def generalized_eigen(
    A: Matrix,
    B: Matrix,
    *,
    backend: LinalgBackend | None = None,
) -> tuple[Matrix, Matrix]:
    """
    Solve the generalized symmetric-definite problem A x = λ B x.

    B is assumed positive definite; the backend reports it if not.
    Unlike eigen(), no eigenpairs are discarded: small generalized
    eigenvalues are meaningful to the callers.

    Returns:
        (V, D): B-orthonormal eigenvectors as columns of V (n x n) and the
        eigenvalues in ascending order on the diagonal of D (n x n)

    Raises:
        DimensionError: If A or B is not square, or their sizes differ
        ValidationError: If A or B is not symmetric
        NotPositiveDefiniteError: If B is not positive definite
        ConvergenceError: If the eigensolver does not converge
    """
    check_symmetric(A)
    check_symmetric(B)
    check_same_shape(A, B)
    be = _resolve(backend)
    w, V = be.eigh_generalized(A, B)

    V_m = _wrap(V, 'V', be)
    D = _diagonal(w, 'D', be)
    trace.record(
        'generalized_eigen',
        f"{trace.describe(V_m)}, {trace.describe(D)}",
        A, B,
    )
    return V_m, D


def sqrtm(
    M: Matrix,
    *,
    label: str | None = None,
    backend: LinalgBackend | None = None,
) -> Matrix:
    """
    Principal square root of a symmetric matrix: V * sqrt(D) * V^T.

    Built on eigen(), so eigenpairs below the threshold are dropped and
    the result is the root of M's projection onto the retained eigenspace.
    """
    be = _resolve(backend)
    V, D = eigen(M, backend=be)
    elementwise_apply(D, np.sqrt)
    sync_to_device(D, backend=be)

    VD = product(V, D, backend=be)
    R = product(VD, V, False, True, label=label or f"sqrtm({M.label})", backend=be)

    release(V)
    release(D)
    release(VD)
    return R


def norm(v: Matrix, *, backend: LinalgBackend | None = None) -> float:
    """
    Euclidean norm of a row or column vector.

    Raises:
        DimensionError: If v is not a vector
    """
    check_vector(v)
    be = _resolve(backend)
    value = be.nrm2(v)
    trace.record('norm', 'n', v, value=value)
    return value


def covariance(
    M: Matrix,
    *,
    label: str = 'C',
    backend: LinalgBackend | None = None,
) -> Matrix:
    """
    Covariance: center the rows of M, then C = A^T * A / max(rows - 1, 1).

    Rows of M are the samples and columns the variables, so C is
    cols x cols. Symmetric positive semi-definite up to rounding.
    """
    be = _resolve(backend)
    A = copy(M, label='A')
    mu = mean_row(A)
    subtract_rows(A, mu)
    sync_to_device(A, backend=be)

    c = M.rows - 1 if M.rows > 1 else 1
    C = product(A, A, True, False, label=label, backend=be)
    scalar_multiply(C, 1.0 / c)
    sync_to_device(C, backend=be)

    release(A)
    release(mu)
    return C
