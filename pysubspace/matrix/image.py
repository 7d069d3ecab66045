"""
Image interop: move pixels between image buffers and matrix columns.

An image is any array-like pixel buffer (e.g. an 8-bit grayscale
ndarray of shape (height, width) from an image decoder). Pixels are
taken in row-major (C) order, so one image becomes one column of a
data matrix with one row per pixel.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pysubspace.core import trace
from pysubspace.core.exceptions import DimensionError
from pysubspace.core.validation import check_index
from pysubspace.matrix.matrix import Matrix


def _check_pixels(M: Matrix, n_pixels: int) -> None:
    if n_pixels != M.rows:
        raise DimensionError(
            f"{M.label} [{M.rows}, {M.cols}]: image has {n_pixels} pixels, "
            f"expected {M.rows}"
        )


def image_read(M: Matrix, i: int, image: ArrayLike) -> None:
    """
    Copy an image's pixels into column i of M.

    Raises:
        DimensionError: If the pixel count differs from M.rows
        IndexRangeError: If i is out of range
    """
    pixels = np.asarray(image).reshape(-1)
    _check_pixels(M, pixels.size)
    check_index(i, M.cols, f"{M.label} column")
    M.data[:, i] = pixels
    trace.record('image_read', M, f"image [{pixels.size}] -> {M.label}[:, {i}]")


def image_write(M: Matrix, i: int, image: NDArray) -> None:
    """
    Write column i of M into an image pixel buffer, in place.

    Values are rounded and clipped to the range of integer pixel types.

    Raises:
        DimensionError: If the pixel count differs from M.rows
        IndexRangeError: If i is out of range
    """
    _check_pixels(M, image.size)
    check_index(i, M.cols, f"{M.label} column")
    column = M.data[:, i]
    if np.issubdtype(image.dtype, np.integer):
        limits = np.iinfo(image.dtype)
        column = np.clip(np.rint(column), limits.min, limits.max)
    image[...] = column.astype(image.dtype).reshape(image.shape)
    trace.record('image_write', f"image [{image.size}]", f"{M.label}[:, {i}]")
