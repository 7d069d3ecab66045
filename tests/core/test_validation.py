"""
Tests for precondition checks.

Validates every function in core/validation.py against real matrices.
"""

import numpy as np
import pytest

from pysubspace.core.compute.precision import machine_epsilon
from pysubspace.core.exceptions import (
    DimensionError,
    IndexRangeError,
    ValidationError,
)
from pysubspace.core.validation import (
    check_column_vector,
    check_index,
    check_range,
    check_row_vector,
    check_same_cols,
    check_same_rows,
    check_same_shape,
    check_shape,
    check_square,
    check_symmetric,
    check_vector,
)
from pysubspace.matrix import from_array, zeros


class TestShapeChecks:

    def test_check_shape_accepts_1x1(self):
        check_shape(1, 1)

    @pytest.mark.parametrize("rows,cols", [(0, 3), (3, 0), (-1, 2)])
    def test_check_shape_rejects_empty(self, rows, cols):
        with pytest.raises(DimensionError, match="at least"):
            check_shape(rows, cols)

    def test_same_shape(self):
        check_same_shape(zeros(2, 3), zeros(2, 3))

    def test_same_shape_mismatch_names_both(self):
        with pytest.raises(DimensionError, match=r"A \[2, 3\] vs B \[3, 2\]"):
            check_same_shape(zeros(2, 3, 'A'), zeros(3, 2, 'B'))

    def test_same_rows(self):
        check_same_rows(zeros(4, 1), zeros(4, 7))
        with pytest.raises(DimensionError):
            check_same_rows(zeros(4, 1), zeros(3, 1))

    def test_same_cols(self):
        check_same_cols(zeros(1, 4), zeros(7, 4))
        with pytest.raises(DimensionError):
            check_same_cols(zeros(1, 4), zeros(1, 3))

    def test_square(self):
        check_square(zeros(3, 3))
        with pytest.raises(DimensionError, match="square"):
            check_square(zeros(3, 2))


class TestSymmetric:

    def test_exact_symmetric(self):
        check_symmetric(from_array([[2.0, 1.0], [1.0, 3.0]]))

    def test_rounding_level_asymmetry_accepted(self):
        M = from_array([[2.0, 1.0], [1.0 + 2 * machine_epsilon(), 3.0]])
        check_symmetric(M)

    def test_asymmetric_rejected(self):
        with pytest.raises(ValidationError, match="symmetric"):
            check_symmetric(from_array([[1.0, 2.0], [0.0, 1.0]]))

    def test_non_square_rejected_as_dimension_error(self):
        with pytest.raises(DimensionError):
            check_symmetric(zeros(2, 3))


class TestVectorChecks:

    @pytest.mark.parametrize("rows,cols", [(1, 5), (5, 1), (1, 1)])
    def test_vector(self, rows, cols):
        check_vector(zeros(rows, cols))

    def test_non_vector(self):
        with pytest.raises(DimensionError, match="vector"):
            check_vector(zeros(2, 2))

    def test_column_vector(self):
        check_column_vector(zeros(4, 1), 4)
        with pytest.raises(DimensionError):
            check_column_vector(zeros(4, 1), 3)
        with pytest.raises(DimensionError):
            check_column_vector(zeros(1, 4), 4)

    def test_row_vector(self):
        check_row_vector(zeros(1, 4), 4)
        with pytest.raises(DimensionError):
            check_row_vector(zeros(4, 1), 4)


class TestIndexChecks:

    def test_index_in_range(self):
        check_index(0, 3, "col")
        check_index(2, 3, "col")

    @pytest.mark.parametrize("index", [-1, 3, 10])
    def test_index_out_of_range(self, index):
        with pytest.raises(IndexRangeError) as excinfo:
            check_index(index, 3, "col")
        assert excinfo.value.index == index
        assert excinfo.value.bound == 3

    def test_range_valid(self):
        check_range(0, 3, 3, "cols")
        check_range(1, 2, 3, "cols")

    @pytest.mark.parametrize("start,stop", [(2, 2), (3, 2), (-1, 2), (0, 4)])
    def test_range_invalid(self, start, stop):
        with pytest.raises(IndexRangeError):
            check_range(start, stop, 3, "cols")

    def test_released_matrix_rejected(self):
        from pysubspace.matrix import release

        M = zeros(2, 2)
        release(M)
        with pytest.raises(ValidationError, match="after release"):
            check_square(M)

    def test_checks_do_not_mutate(self):
        M = from_array(np.arange(6.0).reshape(2, 3))
        before = M.to_numpy()
        check_same_shape(M, M)
        np.testing.assert_array_equal(M.data, before)
