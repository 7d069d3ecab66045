"""
Tests for elementwise, reduction and structural operators.
"""

import math

import numpy as np
import pytest

from pysubspace.core.compute.random import ShuffleSource
from pysubspace.core.exceptions import DimensionError, IndexRangeError
from pysubspace.matrix import (
    add,
    assign_column,
    assign_row,
    diagonalize,
    elementwise_apply,
    from_array,
    mean_column,
    mean_row,
    ones,
    scalar_multiply,
    shuffle_columns,
    subtract,
    subtract_columns,
    subtract_rows,
    zeros,
)


@pytest.fixture
def grid():
    """3 x 4 matrix with distinct entries."""
    return from_array(np.arange(12.0).reshape(3, 4), label='G')


class TestArithmetic:

    def test_add(self, grid):
        add(grid, ones(3, 4))
        np.testing.assert_array_equal(grid.data, np.arange(12.0).reshape(3, 4) + 1)

    def test_subtract(self, grid):
        subtract(grid, grid)
        np.testing.assert_array_equal(grid.data, np.zeros((3, 4)))

    def test_add_keeps_column_major(self, grid):
        add(grid, ones(3, 4))
        assert grid.data.flags['F_CONTIGUOUS']

    @pytest.mark.parametrize("op", [add, subtract])
    def test_shape_mismatch(self, grid, op):
        with pytest.raises(DimensionError, match=r"G \[3, 4\]"):
            op(grid, ones(4, 3))

    def test_scalar_multiply(self, grid):
        scalar_multiply(grid, -0.5)
        np.testing.assert_array_equal(grid.data, -0.5 * np.arange(12.0).reshape(3, 4))

    def test_scalar_multiply_by_zero(self, grid):
        scalar_multiply(grid, 0.0)
        assert not grid.data.any()


class TestElementwiseApply:

    def test_ufunc(self):
        M = from_array([[1.0, 4.0], [9.0, 16.0]])
        elementwise_apply(M, np.sqrt)
        np.testing.assert_array_equal(M.data, [[1.0, 2.0], [3.0, 4.0]])

    def test_plain_callable(self):
        M = from_array([[1.0, 4.0], [9.0, 16.0]])
        elementwise_apply(M, math.sqrt)
        np.testing.assert_array_equal(M.data, [[1.0, 2.0], [3.0, 4.0]])

    def test_lambda_sees_every_element_once(self, grid):
        seen = []

        def record(x):
            seen.append(x)
            return x * 2

        elementwise_apply(grid, record)
        assert sorted(seen) == list(np.arange(12.0))
        np.testing.assert_array_equal(grid.data, 2 * np.arange(12.0).reshape(3, 4))


class TestMeans:

    def test_mean_column(self, grid):
        mu = mean_column(grid)
        assert mu.shape == (3, 1)
        np.testing.assert_allclose(mu.data[:, 0], [1.5, 5.5, 9.5])

    def test_mean_row(self, grid):
        mu = mean_row(grid)
        assert mu.shape == (1, 4)
        np.testing.assert_allclose(mu.data[0, :], [4.0, 5.0, 6.0, 7.0])

    def test_means_leave_operand(self, grid):
        before = grid.to_numpy()
        mean_column(grid)
        mean_row(grid)
        np.testing.assert_array_equal(grid.data, before)

    def test_centered_columns_have_zero_mean(self, data_matrix):
        mu = mean_column(data_matrix)
        subtract_columns(data_matrix, mu)
        np.testing.assert_allclose(data_matrix.data.mean(axis=1), 0.0, atol=1e-5)

    def test_centered_rows_have_zero_mean(self, data_matrix):
        mu = mean_row(data_matrix)
        subtract_rows(data_matrix, mu)
        np.testing.assert_allclose(data_matrix.data.mean(axis=0), 0.0, atol=1e-5)


class TestBroadcastSubtract:

    def test_subtract_columns(self, grid):
        subtract_columns(grid, from_array([1.0, 2.0, 3.0]))
        expected = np.arange(12.0).reshape(3, 4) - np.array([[1.0], [2.0], [3.0]])
        np.testing.assert_array_equal(grid.data, expected)

    def test_subtract_rows(self, grid):
        subtract_rows(grid, from_array([[1.0, 2.0, 3.0, 4.0]]))
        expected = np.arange(12.0).reshape(3, 4) - np.array([1.0, 2.0, 3.0, 4.0])
        np.testing.assert_array_equal(grid.data, expected)

    def test_subtract_columns_wrong_length(self, grid):
        with pytest.raises(DimensionError):
            subtract_columns(grid, zeros(4, 1))

    def test_subtract_rows_rejects_column(self, grid):
        with pytest.raises(DimensionError):
            subtract_rows(grid, zeros(4, 1))


class TestDiagonalize:

    @pytest.mark.parametrize("values", [[[1.0], [2.0], [3.0]], [[1.0, 2.0, 3.0]]])
    def test_from_vector(self, values):
        D = diagonalize(from_array(values))
        np.testing.assert_array_equal(D.data, np.diag([1.0, 2.0, 3.0]))

    def test_rejects_matrix(self, grid):
        with pytest.raises(DimensionError):
            diagonalize(grid)


class TestAssign:

    def test_assign_column(self, grid):
        src = from_array([[7.0, -1.0], [8.0, -2.0], [9.0, -3.0]], label='S')
        assign_column(grid, 2, src, 1)
        np.testing.assert_array_equal(grid.data[:, 2], [-1.0, -2.0, -3.0])
        np.testing.assert_array_equal(grid.data[:, 0], [0.0, 4.0, 8.0])

    def test_assign_row(self, grid):
        src = from_array([[1.0, 1.0, 1.0, 1.0], [5.0, 6.0, 7.0, 8.0]])
        assign_row(grid, 0, src, 1)
        np.testing.assert_array_equal(grid.data[0, :], [5.0, 6.0, 7.0, 8.0])

    def test_assign_column_index_out_of_range(self, grid):
        with pytest.raises(IndexRangeError):
            assign_column(grid, 4, grid, 0)

    def test_assign_column_row_mismatch(self, grid):
        with pytest.raises(DimensionError):
            assign_column(grid, 0, zeros(2, 1), 0)

    def test_assign_row_col_mismatch(self, grid):
        with pytest.raises(DimensionError):
            assign_row(grid, 0, zeros(1, 3), 0)


class TestShuffle:

    def test_preserves_columns(self, grid, shuffle_source):
        before = grid.to_numpy()
        shuffle_columns(grid, source=shuffle_source)
        before_cols = sorted(tuple(c) for c in before.T)
        after_cols = sorted(tuple(c) for c in grid.data.T)
        assert before_cols == after_cols

    def test_columns_move_intact(self, grid, shuffle_source):
        shuffle_columns(grid, source=shuffle_source)
        # column k of the original is [k, k + 4, k + 8]
        for col in grid.data.T:
            k = col[0]
            np.testing.assert_array_equal(col, [k, k + 4, k + 8])

    def test_same_seed_same_permutation(self):
        a = from_array(np.arange(20.0).reshape(2, 10))
        b = from_array(np.arange(20.0).reshape(2, 10))
        shuffle_columns(a, source=ShuffleSource(seed=3))
        shuffle_columns(b, source=ShuffleSource(seed=3))
        np.testing.assert_array_equal(a.data, b.data)

    def test_all_permutations_reachable(self):
        src = ShuffleSource(seed=11)
        seen = set()
        for _ in range(300):
            M = from_array([[0.0, 1.0, 2.0]])
            shuffle_columns(M, source=src)
            seen.add(tuple(M.data[0]))
        assert len(seen) == 6

    def test_single_column_unchanged(self, shuffle_source):
        M = from_array([1.0, 2.0])
        shuffle_columns(M, source=shuffle_source)
        np.testing.assert_array_equal(M.data[:, 0], [1.0, 2.0])
