"""
Matrix serialization.

Text form (human readable, lossy at 4 decimals on write):

    <label> [<rows>, <cols>]
    v00 v01 ...
    v10 v11 ...

read_text expects only ``<rows> <cols>`` followed by the values; the
label header produced by write_text is not parsed back. The last value
of each matrix must end its line.

Binary form (exact):

    rows   int32
    cols   int32
    values rows*cols elements of PRECISION, column-major

No label, no magic number, native byte order. Several matrices may be
written back to back to one stream and read back in order.
"""

from __future__ import annotations

from collections import deque
from pathlib import Path
from typing import BinaryIO, TextIO
import numpy as np

from pysubspace.core import trace
from pysubspace.core.compute.precision import PRECISION
from pysubspace.core.exceptions import FormatError
from pysubspace.core.validation import check_shape
from pysubspace.matrix.matrix import Matrix, create


_HEADER_DTYPE = np.int32


def write_text(stream: TextIO, M: Matrix) -> None:
    """Write M with its label header, one row per line."""
    stream.write(f"{M.label} [{M.rows}, {M.cols}]\n")
    for row in M.data:
        stream.write(" ".join(f"{float(x): 8.4f}" for x in row))
        stream.write("\n")
    trace.record('write_text', M, M)


class _LineTokens:
    """Whitespace tokens of a text stream, pulled one line at a time."""

    def __init__(self, stream: TextIO):
        self._lines = iter(stream)
        self._pending: deque[str] = deque()

    def next(self) -> str:
        # StopIteration once the stream is exhausted
        while not self._pending:
            self._pending.extend(next(self._lines).split())
        return self._pending.popleft()

    @property
    def unread(self) -> int:
        """Tokens left on the line most recently read."""
        return len(self._pending)


def read_text(stream: TextIO, label: str = 'M') -> Matrix:
    """
    Read ``<rows> <cols>`` then rows*cols values in row order.

    Values may be spread over lines freely, but the last value must end
    its line. The stream is left at the start of the next line, so
    several matrices can follow each other in one stream.

    Raises:
        FormatError: If the header or values are missing or malformed, or
            if tokens follow the last value on its line
    """
    tokens = _LineTokens(stream)
    try:
        rows, cols = int(tokens.next()), int(tokens.next())
    except StopIteration:
        raise FormatError("text matrix: missing '<rows> <cols>' header") from None
    except ValueError as e:
        raise FormatError(f"text matrix: malformed header: {e}") from e
    check_shape(rows, cols)

    expected = rows * cols
    values = np.empty(expected, dtype=np.float64)
    count = 0
    try:
        for count in range(expected):
            values[count] = float(tokens.next())
    except StopIteration:
        raise FormatError(
            f"text matrix [{rows}, {cols}]: expected {expected} values, got {count}",
            expected=expected,
            actual=count,
        ) from None
    except ValueError as e:
        raise FormatError(f"text matrix [{rows}, {cols}]: {e}") from e

    if tokens.unread:
        raise FormatError(
            f"text matrix [{rows}, {cols}]: {tokens.unread} extra token(s) after "
            f"the last value; a matrix must end at a line break",
            expected=expected,
            actual=expected + tokens.unread,
        )

    M = create(rows, cols, label)
    M.data[...] = values.reshape((rows, cols))
    trace.record('read_text', M)
    return M


def write_binary(stream: BinaryIO, M: Matrix) -> None:
    """Write the int32 shape header then the column-major elements."""
    stream.write(np.array([M.rows, M.cols], dtype=_HEADER_DTYPE).tobytes())
    stream.write(M.data.astype(PRECISION, copy=False).tobytes(order='F'))
    trace.record('write_binary', M, M)


def _read_exact(stream: BinaryIO, n_bytes: int, what: str) -> bytes:
    buf = stream.read(n_bytes)
    if len(buf) != n_bytes:
        raise FormatError(
            f"binary matrix: truncated {what}: expected {n_bytes} bytes, got {len(buf)}",
            expected=n_bytes,
            actual=len(buf),
        )
    return buf


def read_binary(stream: BinaryIO, label: str = 'M') -> Matrix:
    """
    Read one matrix in binary form.

    Raises:
        FormatError: If the stream ends early
        DimensionError: If the header describes an empty matrix
    """
    header = np.frombuffer(
        _read_exact(stream, 2 * np.dtype(_HEADER_DTYPE).itemsize, 'header'),
        dtype=_HEADER_DTYPE,
    )
    rows, cols = int(header[0]), int(header[1])
    check_shape(rows, cols)

    itemsize = np.dtype(PRECISION).itemsize
    raw = _read_exact(stream, rows * cols * itemsize, 'values')

    M = create(rows, cols, label)
    M.data[...] = np.frombuffer(raw, dtype=PRECISION).reshape((rows, cols), order='F')
    trace.record('read_binary', M)
    return M


def write_file(path: str | Path, M: Matrix, *, binary: bool = True) -> None:
    """Write one matrix to a file in binary (default) or text form."""
    path = Path(path)
    if binary:
        with path.open('wb') as f:
            write_binary(f, M)
    else:
        with path.open('w') as f:
            write_text(f, M)


def read_file(path: str | Path, *, binary: bool = True, label: str | None = None) -> Matrix:
    """
    Read one matrix from a file in binary (default) or text form.

    The text reader expects the headerless ``<rows> <cols>`` form.
    """
    path = Path(path)
    name = label or path.stem
    if binary:
        with path.open('rb') as f:
            return read_binary(f, name)
    with path.open('r') as f:
        return read_text(f, name)
