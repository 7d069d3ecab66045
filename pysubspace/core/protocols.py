"""
Core protocols for PySubspace.

These define structural interfaces that backend implementations must
satisfy. We use Protocol (structural typing) rather than ABC (nominal
typing) so a test double or an alternative kernel library can be
injected without inheriting from anything.

Design Principles:
    - Minimal contracts: only the kernels the engine actually delegates
    - Capability-driven: use supports() for optional features
    - Kernels return NumPy arrays; wrapping into matrices is the caller's job
"""

from __future__ import annotations

from typing import Protocol, Any, runtime_checkable

import numpy as np
from numpy.typing import NDArray


@runtime_checkable
class LinalgBackend(Protocol):
    """
    Protocol for linear-algebra kernel backends.

    A backend executes the heavy numeric kernels (multiply, LU inversion,
    symmetric eigensolvers, norm) for the solver layer. Preconditions are
    checked by the caller before dispatch; the backend only reports
    failure statuses, as NumericalError subclasses.

    CPU backends read matrix host buffers. Backends that support
    CAPABILITY_DEVICE_MIRROR read the device mirror instead, which the
    caller must have synchronized explicitly.

    Backends are stateless apart from their device handle, which is
    created once and reused for the lifetime of the process.
    """

    @property
    def name(self) -> str:
        """
        Backend identifier.

        Convention: '{device}_{library}_{precision}'
        Examples: 'cpu_lapack_fp32', 'gpu_torch_fp32'
        """
        ...

    def supports(self, capability: str) -> bool:
        """
        Check if this backend supports a capability.

        Note:
            Unknown capabilities MUST return False, never raise.
        """
        ...

    def to_device(self, host: NDArray[np.floating[Any]], device_buffer: Any = None) -> Any:
        """Copy a column-major host buffer to the device, reusing device_buffer if given."""
        ...

    def to_host(self, device_buffer: Any, host: NDArray[np.floating[Any]]) -> None:
        """Copy a device buffer back into an existing host buffer."""
        ...

    def gemm(
        self, A: Any, B: Any, transpose_a: bool, transpose_b: bool
    ) -> NDArray[np.floating[Any]]:
        """op(A) * op(B)."""
        ...

    def inverse(self, M: Any) -> NDArray[np.floating[Any]]:
        """
        Explicit inverse via LU factorization.

        Raises:
            SingularMatrixError: If the factorization finds a zero pivot
        """
        ...

    def eigh(self, M: Any) -> tuple[NDArray[np.floating[Any]], NDArray[np.floating[Any]]]:
        """
        Symmetric eigendecomposition, eigenvalues ascending.

        Raises:
            ConvergenceError: If the eigensolver fails to converge
        """
        ...

    def eigh_generalized(
        self, A: Any, B: Any
    ) -> tuple[NDArray[np.floating[Any]], NDArray[np.floating[Any]]]:
        """
        Generalized symmetric-definite eigenproblem A x = λ B x, ascending.

        Raises:
            NotPositiveDefiniteError: If B is not positive definite
            ConvergenceError: If the eigensolver fails to converge
        """
        ...

    def nrm2(self, v: Any) -> float:
        """Euclidean norm of a vector."""
        ...
