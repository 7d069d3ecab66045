"""
CPU backend: BLAS/LAPACK through scipy's low-level wrappers.

Reference implementation. Kernels operate directly on column-major host
buffers, so no layout conversion happens on the way into Fortran.

LAPACK reports failure through an integer ``info``; it is checked after
every call and mapped onto the NumericalError hierarchy:

    info < 0   illegal argument               NumericalError
    getrf > 0  U(info, info) is exactly zero  SingularMatrixError
    syevd > 0  eigensolver did not converge   ConvergenceError
    sygvd > n  B not positive definite        NotPositiveDefiniteError
"""

from __future__ import annotations

from typing import Any, TYPE_CHECKING
import numpy as np
from numpy.typing import NDArray
from scipy.linalg import get_blas_funcs, get_lapack_funcs

from pysubspace.core.capabilities import CAPABILITY_FP64, CAPABILITY_STATUS_CODES
from pysubspace.core.compute.precision import PRECISION, precision_name
from pysubspace.core.exceptions import (
    ConvergenceError,
    NotPositiveDefiniteError,
    NumericalError,
    SingularMatrixError,
)

if TYPE_CHECKING:
    from pysubspace.matrix.matrix import Matrix


def _check_illegal(routine: str, info: int) -> None:
    if info < 0:
        raise NumericalError(
            f"{routine}: illegal value in argument {-info}",
            routine=routine,
            info=info,
        )


def _flat(a: NDArray) -> NDArray:
    # column-major buffers flatten to a view in 'F' order
    return a.reshape(-1, order='F')


def axpy(alpha: float, x: NDArray[np.floating[Any]], y: NDArray[np.floating[Any]]) -> None:
    """In place y <- alpha * x + y over whole buffers of equal shape."""
    xf, yf = _flat(x), _flat(y)
    fn = get_blas_funcs('axpy', (xf, yf))
    y[...] = fn(xf, yf, a=alpha).reshape(y.shape, order='F')


def scal(alpha: float, x: NDArray[np.floating[Any]]) -> None:
    """In place x <- alpha * x."""
    xf = _flat(x)
    fn = get_blas_funcs('scal', (xf,))
    x[...] = fn(alpha, xf).reshape(x.shape, order='F')


class CPULinalgBackend:
    """CPU reference backend using scipy's BLAS/LAPACK wrappers."""

    @property
    def name(self) -> str:
        return f'cpu_lapack_{precision_name()}'

    def supports(self, capability: str) -> bool:
        if capability == CAPABILITY_STATUS_CODES:
            return True
        if capability == CAPABILITY_FP64:
            return PRECISION == np.float64
        return False

    def to_device(self, host: NDArray[np.floating[Any]], device_buffer: Any = None) -> Any:
        # host memory is the only memory
        return None

    def to_host(self, device_buffer: Any, host: NDArray[np.floating[Any]]) -> None:
        return None

    def gemm(
        self, A: Matrix, B: Matrix, transpose_a: bool, transpose_b: bool
    ) -> NDArray[np.floating[Any]]:
        a, b = A.data, B.data
        gemm = get_blas_funcs('gemm', (a, b))
        return gemm(1.0, a, b, trans_a=int(transpose_a), trans_b=int(transpose_b))

    def inverse(self, M: Matrix) -> NDArray[np.floating[Any]]:
        """
        Explicit inverse: getrf (LU with partial pivoting) then getri.

        Raises:
            SingularMatrixError: If getrf finds an exactly zero pivot
        """
        a = np.array(M.data, dtype=PRECISION, order='F')
        getrf, getri = get_lapack_funcs(('getrf', 'getri'), (a,))

        lu, piv, info = getrf(a, overwrite_a=True)
        _check_illegal('getrf', info)
        if info > 0:
            raise SingularMatrixError(
                f"{M.label} is singular: U[{info - 1}, {info - 1}] is exactly zero",
                matrix_name=M.label,
                routine='getrf',
                info=info,
            )

        inv_a, info = getri(lu, piv, overwrite_lu=True)
        _check_illegal('getri', info)
        if info > 0:
            raise SingularMatrixError(
                f"{M.label} is singular: inversion failed at pivot {info - 1}",
                matrix_name=M.label,
                routine='getri',
                info=info,
            )
        return inv_a

    def eigh(self, M: Matrix) -> tuple[NDArray[np.floating[Any]], NDArray[np.floating[Any]]]:
        """
        Symmetric eigendecomposition via syevd (lower triangle).

        Returns:
            (w, V): eigenvalues ascending, eigenvectors as columns
        """
        a = np.array(M.data, dtype=PRECISION, order='F')
        syevd = get_lapack_funcs('syevd', (a,))

        w, v, info = syevd(a, compute_v=1, lower=1)
        _check_illegal('syevd', info)
        if info > 0:
            raise ConvergenceError(
                f"{M.label}: eigensolver failed to converge "
                f"(info={info})",
                routine='syevd',
                info=info,
            )
        return w, v

    def eigh_generalized(
        self, A: Matrix, B: Matrix
    ) -> tuple[NDArray[np.floating[Any]], NDArray[np.floating[Any]]]:
        """
        A x = λ B x via sygvd (itype=1, lower triangle).

        Eigenvectors are B-orthonormal: X^T B X = I.
        """
        a = np.array(A.data, dtype=PRECISION, order='F')
        b = np.array(B.data, dtype=PRECISION, order='F')
        n = a.shape[0]
        sygvd = get_lapack_funcs('sygvd', (a, b))

        w, v, info = sygvd(a, b, itype=1, jobz='V', uplo='L')
        _check_illegal('sygvd', info)
        if info > n:
            raise NotPositiveDefiniteError(
                f"{B.label}: leading minor of order {info - n} is not "
                f"positive definite",
                matrix_name=B.label,
                routine='sygvd',
                info=info,
            )
        if info > 0:
            raise ConvergenceError(
                f"{A.label}, {B.label}: generalized eigensolver failed "
                f"to converge (info={info})",
                routine='sygvd',
                info=info,
            )
        return w, v

    def nrm2(self, v: Matrix) -> float:
        x = _flat(v.data)
        return float(get_blas_funcs('nrm2', (x,))(x))
