"""
Tests for element access, rows/columns, block composition, reshaping,
permutation and conversion.
"""

import pytest

from lina import (
    DimensionMismatch,
    IndexOutOfRange,
    Permutation,
    StorageKind,
)

from conftest import assert_matrix_equal, assert_vector_equal


class TestElementAccess:
    """Test cell reads and writes."""

    def test_get_set(self, mbuild):
        m = mbuild.sparse(3, 3)
        m[1, 2] = 4
        assert m[1, 2] == 4.0
        assert m.value_count == 1
        m[1, 2] = 0
        assert m.value_count == 0

    def test_out_of_range(self, mbuild):
        m = mbuild.dense(2, 2)
        with pytest.raises(IndexOutOfRange):
            m[2, 0]
        with pytest.raises(IndexOutOfRange):
            m[0, -1] = 1.0

    def test_key_must_be_pair(self, mbuild):
        with pytest.raises(TypeError):
            mbuild.dense(2, 2)[0]


class TestRowsAndColumns:
    """Test row, column and diagonal extraction and assignment."""

    def test_dense_row_and_column(self, mbuild, sample_rows):
        m = mbuild.dense_of_array(sample_rows)
        assert m.row(1).kind is StorageKind.DENSE
        assert_vector_equal(m.row(1), [0, 3, 0, 4])
        assert_vector_equal(m.column(3), [0, 4, 6])

    def test_sparse_row_and_column(self, mbuild, sample_rows):
        m = mbuild.sparse_of_array(sample_rows)
        assert m.row(2).kind is StorageKind.SPARSE
        assert m.row(2).value_count == 2
        assert_vector_equal(m.column(0), [1, 0, 5])

    def test_diagonal_extraction(self, square_of_each_kind):
        assert square_of_each_kind.diagonal().to_list() == [1.0, 2.0, 3.0]

    def test_sparse_diagonal_is_sparse(self, mbuild, sample_rows):
        d = mbuild.sparse_of_array(sample_rows).diagonal()
        assert d.kind is StorageKind.SPARSE
        assert d.to_list() == [1.0, 3.0, 0.0]

    def test_set_row_and_column(self, mbuild):
        m = mbuild.sparse(2, 3)
        m.set_row(0, [1, 0, 2])
        m.set_column(1, [5, 6])
        assert_matrix_equal(m, [[1, 5, 2], [0, 6, 0]])

    def test_set_row_wrong_length(self, mbuild, vbuild):
        with pytest.raises(DimensionMismatch):
            mbuild.dense(2, 3).set_row(0, vbuild.dense(2))

    def test_set_diagonal(self, mbuild):
        m = mbuild.dense(2, 3)
        m.set_diagonal([7, 8])
        assert_matrix_equal(m, [[7, 0, 0], [0, 8, 0]])


class TestComposition:
    """Test append, stack and diagonal stack."""

    def test_append(self, mbuild):
        a = mbuild.dense_of_array([[1, 2], [3, 4]])
        b = mbuild.sparse_of_array([[5], [6]])
        assert_matrix_equal(a.append(b), [[1, 2, 5], [3, 4, 6]])

    def test_append_row_mismatch(self, mbuild):
        with pytest.raises(DimensionMismatch):
            mbuild.dense(2, 2).append(mbuild.dense(3, 2))

    def test_stack(self, mbuild):
        a = mbuild.sparse_of_array([[1, 0]])
        b = mbuild.diagonal_identity(2)
        result = a.stack(b)
        assert result.kind is StorageKind.SPARSE
        assert_matrix_equal(result, [[1, 0], [1, 0], [0, 1]])

    def test_stack_column_mismatch(self, mbuild):
        with pytest.raises(DimensionMismatch):
            mbuild.dense(2, 2).stack(mbuild.dense(2, 3))

    def test_diagonal_identities_append_to_sparse(self, mbuild):
        eye = mbuild.diagonal_identity(2)
        result = eye.append(eye)
        assert result.kind is StorageKind.SPARSE
        assert_matrix_equal(result, [[1, 0, 1, 0], [0, 1, 0, 1]])

    def test_diagonal_stack(self, mbuild):
        a = mbuild.dense_of_array([[1, 2]])
        b = mbuild.dense_of_array([[3], [4]])
        assert_matrix_equal(a.diagonal_stack(b), [[1, 2, 0], [0, 0, 3], [0, 0, 4]])


class TestReshaping:
    """Test sub-matrices and row/column insertion and removal."""

    @pytest.mark.parametrize("kind", ['dense', 'sparse'])
    def test_sub_matrix(self, mbuild, sample_rows, kind):
        m = getattr(mbuild, f"{kind}_of_array")(sample_rows)
        result = m.sub_matrix(1, 2, 2, 2)
        assert result.kind is m.kind
        assert_matrix_equal(result, [[0, 4], [0, 6]])

    def test_sub_matrix_out_of_range(self, mbuild):
        with pytest.raises(IndexOutOfRange):
            mbuild.dense(3, 3).sub_matrix(2, 2, 0, 1)

    def test_sub_matrix_negative_count(self, mbuild):
        with pytest.raises(DimensionMismatch):
            mbuild.dense(3, 3).sub_matrix(0, -1, 0, 1)

    def test_set_sub_matrix(self, mbuild):
        m = mbuild.sparse(3, 3)
        m.set_sub_matrix(1, 1, mbuild.dense_of_array([[1, 2], [3, 4]]))
        assert_matrix_equal(m, [[0, 0, 0], [0, 1, 2], [0, 3, 4]])

    def test_set_sub_matrix_does_not_fit(self, mbuild):
        with pytest.raises(IndexOutOfRange):
            mbuild.dense(2, 2).set_sub_matrix(1, 1, mbuild.dense(2, 2))

    @pytest.mark.parametrize("kind", ['dense', 'sparse'])
    def test_insert_and_remove_row(self, mbuild, sample_rows, kind):
        m = getattr(mbuild, f"{kind}_of_array")(sample_rows)
        inserted = m.insert_row(3, [9, 9, 9, 9])
        assert inserted.shape == (4, 4)
        assert_vector_equal(inserted.row(3), [9, 9, 9, 9])
        assert inserted.remove_row(3).equals(m)

    @pytest.mark.parametrize("kind", ['dense', 'sparse'])
    def test_insert_and_remove_column(self, mbuild, sample_rows, kind):
        m = getattr(mbuild, f"{kind}_of_array")(sample_rows)
        inserted = m.insert_column(0, [7, 8, 9])
        assert_vector_equal(inserted.column(0), [7, 8, 9])
        assert_vector_equal(inserted.column(1), [1, 0, 5])
        assert inserted.remove_column(0).equals(m)

    def test_insert_index_out_of_range(self, mbuild):
        with pytest.raises(IndexOutOfRange):
            mbuild.dense(2, 2).insert_row(3, [1, 2])

    def test_remove_index_out_of_range(self, mbuild):
        with pytest.raises(IndexOutOfRange):
            mbuild.dense(2, 2).remove_column(2)


class TestPermutation:
    """Test in-place row and column permutation."""

    def test_permutation_validation(self):
        with pytest.raises(ValueError):
            Permutation([0, 0, 1])

    def test_inverse(self):
        p = Permutation([2, 0, 1])
        assert p.inverse().to_list() == [1, 2, 0]
        assert [p.inverse()[p[i]] for i in range(3)] == [0, 1, 2]

    @pytest.mark.parametrize("kind", ['dense', 'sparse'])
    def test_permute_rows(self, mbuild, kind):
        m = getattr(mbuild, f"{kind}_of_array")([[1, 2], [3, 4], [5, 6]])
        m.permute_rows(Permutation([2, 0, 1]))
        assert_matrix_equal(m, [[3, 4], [5, 6], [1, 2]])

    @pytest.mark.parametrize("kind", ['dense', 'sparse'])
    def test_permute_columns(self, mbuild, kind):
        m = getattr(mbuild, f"{kind}_of_array")([[1, 2, 3]])
        m.permute_columns(Permutation([1, 2, 0]))
        assert_matrix_equal(m, [[3, 1, 2]])

    def test_inverse_restores(self, mbuild, sample_rows):
        m = mbuild.sparse_of_array(sample_rows)
        p = Permutation([1, 2, 0])
        m.permute_rows(p)
        m.permute_rows(p.inverse())
        assert_matrix_equal(m, sample_rows)

    def test_dense_permute_updates_shared_buffer(self, mbuild):
        buffer = [1.0, 2.0, 3.0, 4.0]
        m = mbuild.dense_of_column_major(2, 2, buffer)
        m.permute_rows(Permutation([1, 0]))
        assert buffer == [2.0, 1.0, 4.0, 3.0]

    def test_length_mismatch(self, mbuild):
        with pytest.raises(DimensionMismatch):
            mbuild.dense(3, 3).permute_rows(Permutation([1, 0]))


class TestConversion:
    """Test copies, conversions and equality."""

    def test_layouts(self, mbuild):
        m = mbuild.sparse_of_array([[1, 2], [3, 4]])
        assert m.to_row_wise_array() == [1.0, 2.0, 3.0, 4.0]
        assert m.to_column_wise_array() == [1.0, 3.0, 2.0, 4.0]
        assert m.to_array() == [[1.0, 2.0], [3.0, 4.0]]

    def test_kind_conversion(self, square_of_each_kind):
        dense = square_of_each_kind.to_dense()
        sparse = square_of_each_kind.to_sparse()
        assert dense.kind is StorageKind.DENSE
        assert sparse.kind is StorageKind.SPARSE
        assert dense == square_of_each_kind
        assert sparse == square_of_each_kind

    def test_equality_is_cellwise(self, mbuild):
        assert mbuild.diagonal_identity(3) == mbuild.dense_identity(3)
        assert mbuild.sparse_identity(3) == mbuild.dense_identity(3)
        assert mbuild.dense_identity(3) != mbuild.dense_identity(2)

    def test_copy_is_independent(self, mbuild, sample_rows):
        m = mbuild.sparse_of_array(sample_rows)
        c = m.copy()
        c[0, 0] = 42.0
        assert m[0, 0] == 1.0

    def test_clear(self, mbuild, sample_rows):
        m = mbuild.dense_of_array(sample_rows)
        m.clear()
        assert m == mbuild.dense(3, 4)

    def test_is_symmetric(self, mbuild):
        assert mbuild.sparse_of_array([[1, 2], [2, 1]]).is_symmetric()
        assert not mbuild.sparse_of_array([[1, 2], [0, 1]]).is_symmetric()
        assert not mbuild.dense(2, 3).is_symmetric()

    def test_repr(self, mbuild):
        assert repr(mbuild.sparse(2, 3)) == \
            "Matrix(shape=(2, 3), kind=sparse, value_count=0, dtype=float64)"
