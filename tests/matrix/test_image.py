"""
Tests for image interop.
"""

import numpy as np
import pytest

from pysubspace.core.exceptions import DimensionError, IndexRangeError
from pysubspace.matrix import create, from_array, image_read, image_write, zeros


@pytest.fixture
def face():
    """4 x 3 8-bit grayscale image."""
    return np.arange(12, dtype=np.uint8).reshape(4, 3) * 20


class TestImageRead:

    def test_pixels_in_row_major_order(self, face):
        X = zeros(12, 2, label='X')
        image_read(X, 1, face)
        np.testing.assert_array_equal(X.data[:, 1], face.reshape(-1))
        np.testing.assert_array_equal(X.data[:, 0], np.zeros(12))

    def test_pixel_count_mismatch(self, face):
        with pytest.raises(DimensionError, match="12 pixels"):
            image_read(zeros(10, 1), 0, face)

    def test_column_out_of_range(self, face):
        with pytest.raises(IndexRangeError):
            image_read(zeros(12, 1), 1, face)


class TestImageWrite:

    def test_round_trip(self, face):
        X = create(12, 1)
        image_read(X, 0, face)
        out = np.zeros_like(face)
        image_write(X, 0, out)
        np.testing.assert_array_equal(out, face)

    def test_rounds_and_clips(self):
        X = from_array([-3.0, 0.4, 0.6, 254.7, 300.0, 128.0])
        out = np.zeros((2, 3), dtype=np.uint8)
        image_write(X, 0, out)
        np.testing.assert_array_equal(out, [[0, 0, 1], [255, 255, 128]])

    def test_float_image_not_clipped(self):
        X = from_array([-0.5, 1.5])
        out = np.zeros(2, dtype=np.float64)
        image_write(X, 0, out)
        np.testing.assert_array_equal(out, [-0.5, 1.5])

    def test_non_contiguous_target(self):
        X = from_array([1.0, 2.0, 3.0, 4.0])
        canvas = np.zeros((2, 4), dtype=np.uint8)
        view = canvas[:, ::2]
        image_write(X, 0, view)
        np.testing.assert_array_equal(canvas, [[1, 0, 2, 0], [3, 0, 4, 0]])

    def test_pixel_count_mismatch(self):
        with pytest.raises(DimensionError):
            image_write(zeros(5, 1), 0, np.zeros((2, 2), dtype=np.uint8))
