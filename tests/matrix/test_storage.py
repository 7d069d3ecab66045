"""
Tests for matrix storage and lifecycle.
"""

import numpy as np
import pytest

from pysubspace.core.capabilities import ALL_LOCALITIES, LOCALITY_HOST
from pysubspace.core.compute.precision import PRECISION
from pysubspace.core.compute.random import NormalSource, set_normal_source
from pysubspace.core.exceptions import (
    DimensionError,
    IndexRangeError,
    ValidationError,
)
from pysubspace.matrix import (
    copy,
    copy_columns,
    copy_rows,
    create,
    from_array,
    identity,
    ones,
    random_normal,
    release,
    sync_to_device,
    sync_to_host,
    zeros,
)


class TestConstructors:

    def test_create_shape_and_layout(self):
        M = create(3, 4)
        assert M.shape == (3, 4)
        assert M.rows == 3 and M.cols == 4
        assert M.data.dtype == PRECISION
        assert M.data.flags['F_CONTIGUOUS']

    @pytest.mark.parametrize("rows,cols", [(0, 1), (1, 0)])
    def test_create_rejects_empty(self, rows, cols):
        with pytest.raises(DimensionError):
            create(rows, cols)

    def test_identity(self):
        np.testing.assert_array_equal(identity(3).data, np.eye(3))

    def test_zeros_and_ones(self):
        np.testing.assert_array_equal(zeros(2, 3).data, np.zeros((2, 3)))
        np.testing.assert_array_equal(ones(2, 3).data, np.ones((2, 3)))

    def test_from_array_copies(self):
        values = np.array([[1.0, 2.0], [3.0, 4.0]])
        M = from_array(values)
        values[0, 0] = 99.0
        assert M.data[0, 0] == 1.0
        assert M.data.flags['F_CONTIGUOUS']

    def test_from_array_1d_is_column(self):
        assert from_array([1.0, 2.0, 3.0]).shape == (3, 1)

    def test_from_array_rejects_3d(self):
        with pytest.raises(DimensionError):
            from_array(np.zeros((2, 2, 2)))

    def test_labels(self):
        assert create(1, 1).label == 'M'
        assert identity(2, label='W').label == 'W'


class TestRandomNormal:

    def test_reproducible_across_fresh_sources(self):
        set_normal_source(None)
        a = random_normal(4, 3).to_numpy()
        set_normal_source(None)
        b = random_normal(4, 3).to_numpy()
        np.testing.assert_array_equal(a, b)

    def test_filled_column_major(self):
        M = random_normal(3, 2, source=NormalSource())
        expected = NormalSource().fill(6).astype(PRECISION)
        np.testing.assert_array_equal(M.data[:, 0], expected[:3])
        np.testing.assert_array_equal(M.data[:, 1], expected[3:])

    def test_successive_matrices_differ(self, normal_source):
        a = random_normal(3, 3, source=normal_source).to_numpy()
        b = random_normal(3, 3, source=normal_source).to_numpy()
        assert not np.array_equal(a, b)

    def test_odd_count_caches_second_deviate(self, normal_source):
        random_normal(3, 1, source=normal_source)
        assert normal_source._cached is not None


class TestCopies:

    def test_copy_is_deep(self):
        M = from_array([[1.0, 2.0], [3.0, 4.0]])
        C = copy(M)
        C.data[0, 0] = -1.0
        assert M.data[0, 0] == 1.0
        assert not np.shares_memory(C.data, M.data)

    def test_copy_columns(self):
        M = from_array(np.arange(12.0).reshape(3, 4))
        C = copy_columns(M, 1, 3)
        np.testing.assert_array_equal(C.data, M.data[:, 1:3])
        assert C.data.flags['F_CONTIGUOUS']
        assert not np.shares_memory(C.data, M.data)

    def test_copy_rows(self):
        M = from_array(np.arange(12.0).reshape(3, 4))
        R = copy_rows(M, 0, 2)
        np.testing.assert_array_equal(R.data, M.data[0:2, :])
        assert R.data.flags['F_CONTIGUOUS']

    def test_copy_full_range(self):
        M = from_array(np.arange(6.0).reshape(2, 3))
        np.testing.assert_array_equal(copy_columns(M, 0, 3).data, M.data)

    @pytest.mark.parametrize("start,stop", [(2, 2), (2, 1), (-1, 1), (0, 5)])
    def test_copy_columns_invalid_range(self, start, stop):
        M = zeros(2, 4)
        with pytest.raises(IndexRangeError):
            copy_columns(M, start, stop)

    def test_copy_rows_invalid_range(self):
        with pytest.raises(IndexRangeError):
            copy_rows(zeros(2, 2), 0, 3)


class TestRelease:

    def test_release_frees_storage(self):
        M = ones(2, 2)
        release(M)
        assert M.released
        assert 'released' in repr(M)

    def test_use_after_release(self):
        M = ones(2, 2)
        release(M)
        with pytest.raises(ValidationError, match="after release"):
            M.data

    def test_double_release(self):
        M = ones(2, 2)
        release(M)
        with pytest.raises(ValidationError):
            release(M)


class TestSyncWithoutAccelerator:
    """The CPU backend has no device buffer: sync calls are no-ops."""

    def test_sync_to_device_noop(self):
        M = ones(2, 2)
        sync_to_device(M)
        assert M.locality == LOCALITY_HOST
        assert M.locality in ALL_LOCALITIES
        with pytest.raises(ValidationError, match="sync_to_device"):
            M.device_data

    def test_sync_to_host_noop(self):
        M = ones(2, 2)
        sync_to_host(M)
        np.testing.assert_array_equal(M.data, np.ones((2, 2)))

    def test_repr(self):
        assert repr(zeros(2, 3, 'Z')) == "Matrix('Z', rows=2, cols=3, host)"
