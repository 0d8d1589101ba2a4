"""
Unit tests for the growable builders and triplet helpers
"""

import numpy as np
import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'python'))

from sparsemm import (
    AllocationError,
    CCSBuilder,
    InvalidArgumentError,
    CSRBuilder,
    InvalidFormatError,
    InvalidShapeError,
    ccs_from_triplets,
    csr_from_triplets,
    random_dense,
    random_sparse_ccs,
    random_sparse_csr,
)


class TestCSRBuilder:
    """Row-by-row accumulation"""

    def test_build(self):
        b = CSRBuilder(3, 4)
        b.append(0, 5)
        b.append(3, 1)
        b.end_line()
        b.end_line()
        b.append(2, 7)
        m = b.build()

        assert m.frozen
        np.testing.assert_array_equal(m.values, [5, 1, 7])
        np.testing.assert_array_equal(m.col_index, [0, 3, 2])
        np.testing.assert_array_equal(m.row_ptr, [0, 2, 2, 3])
        m.check_format()

    def test_zero_values_dropped(self):
        b = CSRBuilder(1, 3)
        b.append(0, 0)
        b.append(1, 4)
        m = b.build()
        assert m.nnz == 1
        assert m[0, 1] == 4

    def test_empty_build(self):
        m = CSRBuilder(2, 2).build()
        assert m.nnz == 0
        np.testing.assert_array_equal(m.row_ptr, [0, 0, 0])

    def test_rejects_unsorted(self):
        b = CSRBuilder(1, 3)
        b.append(2, 1)
        with pytest.raises(InvalidFormatError):
            b.append(1, 1)
        with pytest.raises(InvalidFormatError):
            b.append(2, 1)

    def test_rejects_out_of_range(self):
        b = CSRBuilder(1, 3)
        with pytest.raises(InvalidFormatError):
            b.append(3, 1)
        with pytest.raises(InvalidFormatError):
            b.append(-1, 1)

    def test_rejects_too_many_lines(self):
        b = CSRBuilder(1, 1)
        b.end_line()
        with pytest.raises(InvalidFormatError):
            b.end_line()
        with pytest.raises(InvalidFormatError):
            b.append(0, 1)

    def test_max_nnz(self):
        b = CSRBuilder(1, 3, max_nnz=1)
        b.append(0, 1)
        with pytest.raises(AllocationError):
            b.append(1, 1)

    def test_single_use(self):
        b = CSRBuilder(1, 1)
        b.build()
        with pytest.raises(RuntimeError):
            b.build()

    def test_bad_dims(self):
        with pytest.raises(InvalidShapeError):
            CSRBuilder(0, 1)


class TestCCSBuilder:
    """Column-by-column accumulation"""

    def test_build(self):
        b = CCSBuilder(3, 2)
        b.append(1, 2)
        b.end_line()
        b.append(0, 3)
        b.append(2, 4)
        m = b.build()

        np.testing.assert_array_equal(m.row_index, [1, 0, 2])
        np.testing.assert_array_equal(m.col_ptr, [0, 1, 3])
        np.testing.assert_array_equal(m.to_dense().data, [[0, 3], [2, 0], [0, 4]])


class TestTriplets:
    """Coalescing triplet construction"""

    def test_unordered_input(self):
        m = csr_from_triplets([2, 0, 0], [1, 2, 0], [3, 2, 1], (3, 3))
        np.testing.assert_array_equal(m.values, [1, 2, 3])
        np.testing.assert_array_equal(m.col_index, [0, 2, 1])
        np.testing.assert_array_equal(m.row_ptr, [0, 2, 2, 3])
        m.check_format()

    def test_duplicates_summed(self):
        m = csr_from_triplets([0, 0, 1, 1], [1, 1, 2, 2], [1, 2, 3, 4], (3, 3))
        assert m.nnz == 2
        assert m[0, 1] == 3
        assert m[1, 2] == 7

    def test_cancelling_duplicates_dropped(self):
        m = ccs_from_triplets([0, 0, 1], [0, 0, 1], [5, -5, 2], (2, 2))
        assert m.nnz == 1
        np.testing.assert_array_equal(m.col_ptr, [0, 0, 1])
        m.check_format()

    def test_empty(self):
        m = ccs_from_triplets([], [], [], (2, 3))
        assert m.nnz == 0
        np.testing.assert_array_equal(m.col_ptr, [0, 0, 0, 0])

    def test_out_of_bounds(self):
        with pytest.raises(InvalidFormatError):
            csr_from_triplets([0, 2], [0, 0], [1, 1], (2, 2))
        with pytest.raises(InvalidFormatError):
            csr_from_triplets([0], [5], [1], (2, 2))

    def test_length_mismatch(self):
        with pytest.raises(InvalidFormatError):
            csr_from_triplets([0, 1], [0], [1, 1], (2, 2))

    def test_same_matrix_both_layouts(self):
        rows, cols, vals = [0, 1, 1, 2], [2, 0, 2, 1], [1, 2, 3, 4]
        csr = csr_from_triplets(rows, cols, vals, (3, 3))
        ccs = ccs_from_triplets(rows, cols, vals, (3, 3))
        assert csr.to_dense() == ccs.to_dense()
        assert csr.to_ccs() == ccs


class TestRandomFill:
    """Random generators"""

    def test_random_dense_range(self):
        d = random_dense(20, 10, 5, seed=1)
        assert d.shape == (20, 10)
        assert d.data.min() >= 0 and d.data.max() < 5

    def test_random_dense_reproducible(self):
        assert random_dense(3, 3, 100, seed=4) == random_dense(3, 3, 100, seed=4)

    def test_random_sparse_density(self):
        m = random_sparse_csr((10, 10), 0.25, upper=9, seed=0)
        assert m.nnz == 25
        assert m.values.min() >= 1 and m.values.max() < 9
        m.check_format()

    def test_random_sparse_ccs(self):
        m = random_sparse_ccs((6, 4), 0.5, seed=2)
        assert m.nnz == 12
        m.check_format()

    def test_bad_density(self):
        with pytest.raises(InvalidArgumentError):
            random_sparse_csr((2, 2), 1.5)

    def test_bad_upper_same_error_everywhere(self):
        with pytest.raises(InvalidArgumentError):
            random_dense(2, 2, 0)
        with pytest.raises(InvalidArgumentError):
            random_sparse_csr((2, 2), 0.5, upper=1)
        with pytest.raises(InvalidArgumentError):
            random_sparse_ccs((2, 2), 0.5, upper=0)
