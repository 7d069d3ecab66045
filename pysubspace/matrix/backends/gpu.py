"""
GPU backend using PyTorch.

Performance path for large matrices - validated against the CPU
reference. Supports CUDA (Linux/Windows) and MPS (macOS Apple Silicon).

Kernels read operands from their device mirrors. A mirror is stored as a
(cols, rows) C-contiguous tensor, which is byte-for-byte the column-major
host buffer; its transpose is the (rows, cols) view the kernels use.
Operands must be synchronized with sync_to_device() before a call;
results come back as column-major NumPy arrays.
"""

from __future__ import annotations

from typing import Any, TYPE_CHECKING
import numpy as np
from numpy.typing import NDArray

from pysubspace.core.capabilities import CAPABILITY_DEVICE_MIRROR, CAPABILITY_FP64
from pysubspace.core.compute.device import DeviceInfo, select_device
from pysubspace.core.compute.precision import PRECISION, precision_name
from pysubspace.core.exceptions import (
    ConvergenceError,
    NotPositiveDefiniteError,
    SingularMatrixError,
)

if TYPE_CHECKING:
    import torch
    from pysubspace.matrix.matrix import Matrix


class GPULinalgBackend:
    """
    GPU backend using PyTorch linear algebra.

    One instance is the process-wide accelerator handle: it is created
    lazily by get_backend() and never torn down.

    Element width follows PRECISION. MPS has no float64 support.
    """

    def __init__(self, device: DeviceInfo | None = None):
        """
        Initialize GPU backend.

        Args:
            device: Device info from select_device(). If None, requires
                a GPU to be available.
        """
        import torch

        info = device if device is not None else select_device('gpu')
        if not info.is_gpu:
            raise ValueError(
                f"GPULinalgBackend requires GPU device, got {info.device_type}"
            )
        if PRECISION == np.float64 and not info.supports_fp64:
            raise RuntimeError(
                f"{info.device_type.upper()} does not support float64. Use "
                "PYSUBSPACE_PRECISION=single or the CPU backend for double precision."
            )
        self.device_info = info
        self.device = info.to_torch()
        self.dtype = torch.float64 if PRECISION == np.float64 else torch.float32

    @property
    def name(self) -> str:
        return f'gpu_torch_{precision_name()}'

    def supports(self, capability: str) -> bool:
        if capability == CAPABILITY_DEVICE_MIRROR:
            return True
        if capability == CAPABILITY_FP64:
            return PRECISION == np.float64
        return False

    # --- host/device transfer ---

    def to_device(self, host: NDArray[np.floating[Any]], device_buffer: Any = None) -> 'torch.Tensor':
        import torch

        src = torch.from_numpy(np.ascontiguousarray(host.T))
        if device_buffer is not None and tuple(device_buffer.shape) == tuple(src.shape):
            device_buffer.copy_(src)
            return device_buffer
        return src.to(device=self.device, dtype=self.dtype)

    def to_host(self, device_buffer: 'torch.Tensor', host: NDArray[np.floating[Any]]) -> None:
        # .cpu() blocks until the device copy completes
        host.T[...] = device_buffer.detach().cpu().numpy()

    # --- kernels ---

    @staticmethod
    def _view(M: Matrix) -> 'torch.Tensor':
        return M.device_data.T

    @staticmethod
    def _to_numpy(t: 'torch.Tensor') -> NDArray[np.floating[Any]]:
        return np.asfortranarray(t.detach().cpu().numpy(), dtype=PRECISION)

    def gemm(
        self, A: Matrix, B: Matrix, transpose_a: bool, transpose_b: bool
    ) -> NDArray[np.floating[Any]]:
        a = self._view(A)
        b = self._view(B)
        if transpose_a:
            a = a.T
        if transpose_b:
            b = b.T
        return self._to_numpy(a @ b)

    def inverse(self, M: Matrix) -> NDArray[np.floating[Any]]:
        """
        Explicit inverse: LU factorization, then solve against the identity.

        Raises:
            SingularMatrixError: If the factorization finds a zero pivot
        """
        import torch

        a = self._view(M)
        LU, pivots, info = torch.linalg.lu_factor_ex(a)
        status = int(info.item())
        if status > 0:
            raise SingularMatrixError(
                f"{M.label} is singular: U[{status - 1}, {status - 1}] is exactly zero",
                matrix_name=M.label,
                routine='getrf',
                info=status,
            )
        eye = torch.eye(a.shape[0], device=a.device, dtype=a.dtype)
        return self._to_numpy(torch.linalg.lu_solve(LU, pivots, eye))

    def _eigh(self, a: 'torch.Tensor', label: str) -> tuple['torch.Tensor', 'torch.Tensor']:
        import torch

        try:
            try:
                return torch.linalg.eigh(a, UPLO='L')
            except NotImplementedError:
                # eigh not implemented on MPS, fall back to CPU
                w, v = torch.linalg.eigh(a.cpu(), UPLO='L')
                return w.to(a.device), v.to(a.device)
        except torch.linalg.LinAlgError as e:
            raise ConvergenceError(
                f"{label}: eigensolver failed to converge: {e}",
                routine='syevd',
            ) from e

    def eigh(self, M: Matrix) -> tuple[NDArray[np.floating[Any]], NDArray[np.floating[Any]]]:
        w, v = self._eigh(self._view(M), M.label)
        return self._to_numpy(w), self._to_numpy(v)

    def eigh_generalized(
        self, A: Matrix, B: Matrix
    ) -> tuple[NDArray[np.floating[Any]], NDArray[np.floating[Any]]]:
        """
        A x = λ B x by Cholesky reduction to a standard problem.

        With B = L L^T: C = L^-1 A L^-T, C y = λ y, x = L^-T y.
        Eigenvectors are B-orthonormal, matching sygvd with itype=1.
        """
        import torch

        a = self._view(A)
        b = self._view(B)
        L, info = torch.linalg.cholesky_ex(b)
        status = int(info.item())
        if status > 0:
            raise NotPositiveDefiniteError(
                f"{B.label}: leading minor of order {status} is not positive definite",
                matrix_name=B.label,
                routine='potrf',
                info=status,
            )
        # C = L^-1 A L^-T
        tmp = torch.linalg.solve_triangular(L, a, upper=False)
        C = torch.linalg.solve_triangular(L, tmp.T, upper=False).T
        C = (C + C.T) / 2

        w, y = self._eigh(C, f"{A.label}, {B.label}")
        x = torch.linalg.solve_triangular(L.T, y, upper=True)
        return self._to_numpy(w), self._to_numpy(x)

    def nrm2(self, v: Matrix) -> float:
        import torch

        return float(torch.linalg.vector_norm(v.device_data).item())
