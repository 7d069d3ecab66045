"""
Matrix storage and lifecycle.

A Matrix owns one column-major host buffer of PRECISION elements and,
optionally, a mirrored buffer on an accelerator. Construction goes
through the module functions below, never the class directly:

    create, identity, zeros, ones, random_normal, from_array
    copy, copy_columns, copy_rows
    release
    sync_to_device, sync_to_host

Every constructor allocates a fresh buffer, so no two matrices ever share
storage. The host and device buffers are only equal right after an
explicit sync; nothing here synchronizes implicitly.
"""

from __future__ import annotations

from typing import Any, TYPE_CHECKING
import numpy as np
from numpy.typing import ArrayLike, NDArray

from pysubspace.core import trace
from pysubspace.core.capabilities import (
    CAPABILITY_DEVICE_MIRROR,
    LOCALITY_DEVICE_MIRRORED,
    LOCALITY_HOST,
)
from pysubspace.core.compute.precision import PRECISION
from pysubspace.core.compute.random import NormalSource, get_normal_source
from pysubspace.core.exceptions import DimensionError, ValidationError
from pysubspace.core.validation import check_range, check_shape

if TYPE_CHECKING:
    from pysubspace.core.protocols import LinalgBackend


class Matrix:
    """
    Dense matrix with a column-major host buffer and optional device mirror.

    Attributes:
        label: Diagnostic name used in trace records and error messages.
            Not an identity key; two matrices may share a label.
    """

    def __init__(self, host: NDArray[np.floating[Any]], label: str):
        self.label = label
        self._host: NDArray[np.floating[Any]] | None = host
        self._device: Any = None
        self._device_backend: LinalgBackend | None = None

    def _live_host(self) -> NDArray[np.floating[Any]]:
        if self._host is None:
            raise ValidationError(f"{self.label}: matrix used after release")
        return self._host

    @property
    def rows(self) -> int:
        return self._live_host().shape[0]

    @property
    def cols(self) -> int:
        return self._live_host().shape[1]

    @property
    def shape(self) -> tuple[int, int]:
        return self._live_host().shape

    @property
    def data(self) -> NDArray[np.floating[Any]]:
        """Host buffer, shape (rows, cols), Fortran (column-major) order."""
        return self._live_host()

    @property
    def device_data(self) -> Any:
        """
        Device mirror.

        Raises:
            ValidationError: If the matrix has no device mirror
        """
        self._live_host()
        if self._device is None:
            raise ValidationError(
                f"{self.label}: no device buffer; call sync_to_device() first"
            )
        return self._device

    @property
    def locality(self) -> str:
        self._live_host()
        return LOCALITY_HOST if self._device is None else LOCALITY_DEVICE_MIRRORED

    @property
    def released(self) -> bool:
        return self._host is None

    def to_numpy(self) -> NDArray[np.floating[Any]]:
        """Independent copy of the host buffer."""
        return self._live_host().copy(order='F')

    def __repr__(self) -> str:
        if self._host is None:
            return f"Matrix({self.label!r}, released)"
        return f"Matrix({self.label!r}, rows={self.rows}, cols={self.cols}, {self.locality})"


def _allocate(rows: int, cols: int, label: str) -> Matrix:
    check_shape(rows, cols)
    return Matrix(np.empty((rows, cols), dtype=PRECISION, order='F'), label)


def create(rows: int, cols: int, label: str = 'M') -> Matrix:
    """
    Allocate a matrix with uninitialized contents.

    Raises:
        DimensionError: If rows < 1 or cols < 1
    """
    M = _allocate(rows, cols, label)
    trace.record('create', M)
    return M


def identity(rows: int, label: str = 'I') -> Matrix:
    """Square identity matrix."""
    M = _allocate(rows, rows, label)
    M.data[...] = 0
    np.fill_diagonal(M.data, 1)
    trace.record('identity', M)
    return M


def zeros(rows: int, cols: int, label: str = 'Z') -> Matrix:
    """Matrix filled with zeros."""
    M = _allocate(rows, cols, label)
    M.data[...] = 0
    trace.record('zeros', M)
    return M


def ones(rows: int, cols: int, label: str = 'J') -> Matrix:
    """Matrix filled with ones."""
    M = _allocate(rows, cols, label)
    M.data[...] = 1
    trace.record('ones', M)
    return M


def random_normal(
    rows: int,
    cols: int,
    label: str = 'R',
    *,
    source: NormalSource | None = None,
) -> Matrix:
    """
    Matrix of standard normal deviates, filled in column-major order.

    Args:
        source: Normal source to draw from. Defaults to the process-wide
            fixed-seed source, so a fresh process always yields the same
            first matrix.
    """
    M = _allocate(rows, cols, label)
    src = source if source is not None else get_normal_source()
    M.data[...] = src.fill(rows * cols).reshape((rows, cols), order='F')
    trace.record('random_normal', M)
    return M


def from_array(values: ArrayLike, label: str = 'M') -> Matrix:
    """
    Build a matrix from array-like data (copied, cast to PRECISION).

    1D input becomes a column vector.

    Raises:
        DimensionError: If the data is not 1D/2D or is empty
    """
    arr = np.asarray(values)
    if arr.ndim == 1:
        arr = arr.reshape(-1, 1)
    if arr.ndim != 2:
        raise DimensionError(f"{label}: expected 1D or 2D data, got {arr.ndim}D")
    M = _allocate(arr.shape[0], arr.shape[1], label)
    M.data[...] = arr
    trace.record('from_array', M)
    return M


def copy(M: Matrix, label: str | None = None) -> Matrix:
    """Deep copy of the host buffer. The copy has no device mirror."""
    C = Matrix(M.data.copy(order='F'), label or M.label)
    trace.record('copy', C, M)
    return C


def copy_columns(M: Matrix, start: int, stop: int, label: str | None = None) -> Matrix:
    """
    Deep copy of columns [start, stop).

    Raises:
        IndexRangeError: Unless 0 <= start < stop <= M.cols
    """
    check_range(start, stop, M.cols, f"{M.label} columns")
    C = Matrix(M.data[:, start:stop].copy(order='F'), label or M.label)
    trace.record('copy_columns', C, M, f"{start}:{stop}")
    return C


def copy_rows(M: Matrix, start: int, stop: int, label: str | None = None) -> Matrix:
    """
    Deep copy of rows [start, stop).

    Raises:
        IndexRangeError: Unless 0 <= start < stop <= M.rows
    """
    check_range(start, stop, M.rows, f"{M.label} rows")
    C = Matrix(M.data[start:stop, :].copy(order='F'), label or M.label)
    trace.record('copy_rows', C, M, f"{start}:{stop}")
    return C


def release(M: Matrix) -> None:
    """
    Free host and device storage. The matrix is unusable afterwards.

    Raises:
        ValidationError: If M was already released
    """
    M._live_host()
    trace.record('release', M)
    M._host = None
    M._device = None
    M._device_backend = None


def sync_to_device(M: Matrix, *, backend: LinalgBackend | None = None) -> None:
    """
    Copy the host buffer to the device mirror, allocating it on first use.

    A no-op when the backend has no accelerator.
    """
    from pysubspace.matrix.backends import get_backend

    be = backend if backend is not None else get_backend()
    if not be.supports(CAPABILITY_DEVICE_MIRROR):
        return
    M._device = be.to_device(M.data, M._device)
    M._device_backend = be
    trace.record('sync_to_device', M, M)


def sync_to_host(M: Matrix) -> None:
    """
    Copy the device mirror back into the host buffer.

    A no-op when the matrix has no device mirror.
    """
    host = M.data
    if M._device is None or M._device_backend is None:
        return
    M._device_backend.to_host(M._device, host)
    trace.record('sync_to_host', M, M)
