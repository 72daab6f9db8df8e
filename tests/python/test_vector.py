"""
Tests for Vector: element access, arithmetic, products, norms and
sub-vectors over dense and sparse storage.
"""

import math

import pytest

from lina import (
    ArgumentMissing,
    DimensionMismatch,
    ElementTypeMismatch,
    IndexOutOfRange,
    StorageKind,
    VectorBuilder,
)

from conftest import assert_matrix_equal, assert_vector_equal


class TestSparseVector:
    """Test the long sparse vector case."""

    def test_few_nonzeros(self, vbuild):
        v = vbuild.sparse(10000)
        for i in (0, 200, 500, 800):
            v[i] = 1.0
        assert v.value_count == 4
        assert v[201] == 0.0

    def test_zeroing_removes_entries(self, vbuild):
        v = vbuild.sparse(10000)
        for i in (0, 200, 500, 800):
            v[i] = 1.0
        for i in (0, 200, 500, 800):
            v[i] = 0.0
        assert v.value_count == 0
        assert all(v[i] == 0.0 for i in (0, 200, 500, 800))

    def test_multiply_by_zero(self, vbuild):
        v = vbuild.sparse_of_indexed(10000, [(5, 2.0), (9000, 3.0)])
        result = v * 0
        assert result.kind is StorageKind.SPARSE
        assert result.value_count == 0
        assert result.count == 10000

    def test_index_out_of_range(self, vbuild):
        v = vbuild.sparse(3)
        with pytest.raises(IndexOutOfRange):
            v[3]
        with pytest.raises(IndexOutOfRange):
            v[-1] = 1.0


class TestArithmetic:
    """Test elementwise and scalar arithmetic."""

    def test_add_kinds(self, vbuild):
        dense = vbuild.dense_of_array([1, 2, 3])
        sparse = vbuild.sparse_of_indexed(3, [(1, 5.0)])
        assert (dense + sparse).kind is StorageKind.DENSE
        assert (sparse + sparse).kind is StorageKind.SPARSE
        assert_vector_equal(sparse + dense, [1, 7, 3])

    def test_subtract(self, vbuild):
        a = vbuild.sparse_of_array([1, 0, 2])
        b = vbuild.sparse_of_array([1, 3, 0])
        result = a - b
        assert_vector_equal(result, [0, -3, 2])
        assert result.value_count == 2

    def test_pointwise(self, vbuild):
        a = vbuild.dense_of_array([2, 4, 6])
        b = vbuild.dense_of_array([1, 2, 3])
        assert_vector_equal(a.pointwise_multiply(b), [2, 8, 18])
        assert_vector_equal(a.pointwise_divide(b), [2, 2, 2])

    def test_sparse_pointwise_multiply(self, vbuild):
        a = vbuild.sparse_of_array([1, 0, 2, 3])
        b = vbuild.sparse_of_array([0, 5, 2, 1])
        result = a.pointwise_multiply(b)
        assert result.value_count == 2
        assert_vector_equal(result, [0, 0, 4, 3])

    def test_scalar(self, vbuild):
        v = vbuild.dense_of_array([1, -2])
        assert_vector_equal(v * 3, [3, -6])
        assert_vector_equal(3 * v, [3, -6])
        assert_vector_equal(v / 2, [0.5, -1])
        assert_vector_equal(-v, [-1, 2])

    def test_multiply_by_one_copies(self, vbuild):
        v = vbuild.dense_of_array([1, 2])
        result = v * 1
        result[0] = 9.0
        assert v[0] == 1.0

    def test_length_mismatch(self, vbuild):
        with pytest.raises(DimensionMismatch):
            vbuild.dense(2) + vbuild.dense(3)

    def test_algebra_mismatch(self, vbuild):
        with pytest.raises(ElementTypeMismatch):
            vbuild.dense(2) + VectorBuilder('complex128').dense(2)

    def test_conjugate(self):
        v = VectorBuilder('complex128').sparse_of_array([1j, 0, 2])
        assert v.conjugate().to_list() == [-1j, 0j, 2 + 0j]


class TestProducts:
    """Test dot and outer products."""

    def test_dot(self, vbuild):
        a = vbuild.dense_of_array([1, 2, 3])
        b = vbuild.sparse_of_indexed(3, [(2, 4.0)])
        assert a.dot_product(b) == 12.0
        assert b.dot_product(a) == 12.0
        assert a * a == 14.0
        assert a @ a == 14.0

    def test_conjugate_dot(self):
        build = VectorBuilder('complex128')
        a = build.dense_of_array([1j, 2])
        b = build.dense_of_array([1j, 1])
        assert a.conjugate_dot_product(b) == 3 + 0j
        assert a.dot_product(b) == 1 + 0j

    def test_outer_product(self, vbuild):
        a = vbuild.sparse_of_array([1, 0, 2])
        b = vbuild.sparse_of_array([3, 4])
        result = a.outer_product(b)
        assert result.kind is StorageKind.SPARSE
        assert result.value_count == 4
        assert_matrix_equal(result, [[3, 4], [0, 0], [6, 8]])

    def test_outer_product_dense(self, vbuild):
        a = vbuild.dense_of_array([1, 2])
        b = vbuild.sparse_of_array([0, 1])
        assert a.outer_product(b).kind is StorageKind.DENSE


class TestNorms:
    """Test norms and reductions."""

    @pytest.fixture(params=['dense', 'sparse'])
    def v(self, request, vbuild):
        return getattr(vbuild, f"{request.param}_of_array")([3, 0, -4])

    def test_norms(self, v):
        assert v.l1_norm() == 7.0
        assert v.l2_norm() == 5.0
        assert v.infinity_norm() == 4.0
        assert v.norm(3) == pytest.approx((27 + 64) ** (1 / 3))
        assert v.norm(math.inf) == 4.0

    def test_invalid_order(self, v):
        with pytest.raises(ValueError):
            v.norm(0)
        with pytest.raises(ValueError):
            v.norm(-1)

    def test_normalize(self, v):
        assert_vector_equal(v.normalize(), [0.6, 0, -0.8])
        assert_vector_equal(v.normalize(1), [3 / 7, 0, -4 / 7])

    def test_normalize_zero_vector(self, vbuild):
        v = vbuild.dense(3)
        result = v.normalize()
        assert result.to_list() == [0.0, 0.0, 0.0]
        assert result is not v

    def test_sum(self, v):
        assert v.sum() == -1.0

    def test_absolute_maximum_index(self, v):
        assert v.absolute_maximum_index() == 2

    def test_absolute_maximum_index_first_wins(self, vbuild):
        assert vbuild.dense_of_array([1, -5, 5]).absolute_maximum_index() == 1

    def test_absolute_maximum_index_empty(self, vbuild):
        with pytest.raises(ValueError):
            vbuild.dense(0).absolute_maximum_index()


class TestSubVectors:
    """Test sub-vector extraction and assignment."""

    @pytest.mark.parametrize("kind", ['dense', 'sparse'])
    def test_sub_vector(self, vbuild, kind):
        v = getattr(vbuild, f"{kind}_of_array")([0, 1, 2, 3, 4])
        sub = v.sub_vector(1, 3)
        assert sub.kind is v.kind
        assert sub.to_list() == [1.0, 2.0, 3.0]

    def test_sub_vector_out_of_range(self, vbuild):
        with pytest.raises(IndexOutOfRange):
            vbuild.dense(5).sub_vector(3, 3)
        with pytest.raises(IndexOutOfRange):
            vbuild.dense_of_array([1, 2, 3]).sub_vector(2, 5)
        with pytest.raises(IndexOutOfRange):
            vbuild.sparse(5).sub_vector(-1, 2)

    def test_sub_vector_negative_count(self, vbuild):
        with pytest.raises(DimensionMismatch):
            vbuild.dense(5).sub_vector(0, -1)

    def test_set_sub_vector(self, vbuild):
        v = vbuild.sparse(5)
        v.set_sub_vector(2, vbuild.dense_of_array([1, 0, 3]))
        assert v.to_list() == [0.0, 0.0, 1.0, 0.0, 3.0]
        assert v.value_count == 2

    def test_set_sub_vector_replaces_sparse_range(self, vbuild):
        v = vbuild.sparse_of_array([9, 9, 9, 9, 9, 9])
        v.set_sub_vector(1, vbuild.sparse_of_indexed(4, [(2, 5.0)]))
        assert v.to_list() == [9.0, 0.0, 0.0, 5.0, 0.0, 9.0]
        assert v.value_count == 3

    def test_set_sub_vector_does_not_fit(self, vbuild):
        v = vbuild.dense_of_array([1, 2, 3])
        with pytest.raises(IndexOutOfRange):
            v.set_sub_vector(2, vbuild.dense(2))
        with pytest.raises(IndexOutOfRange):
            v.set_sub_vector(-1, vbuild.dense(1))
        assert v.to_list() == [1.0, 2.0, 3.0]


class TestConversion:
    """Test conversion, iteration and equality."""

    def test_dense_sparse_round_trip(self, vbuild):
        v = vbuild.dense_of_array([0, 1, 0, 2])
        sparse = v.to_sparse()
        assert sparse.kind is StorageKind.SPARSE
        assert sparse.value_count == 2
        assert sparse.to_dense() == v

    def test_iteration(self, vbuild):
        v = vbuild.sparse_of_indexed(3, [(1, 2.0)])
        assert list(v) == [0.0, 2.0, 0.0]
        assert len(v) == 3

    def test_clear(self, vbuild):
        v = vbuild.dense_of_array([1, 2])
        v.clear()
        assert v == vbuild.dense(2)

    def test_unhashable(self, vbuild):
        with pytest.raises(TypeError):
            hash(vbuild.dense(2))


class TestScalarShift:
    """Test adding and subtracting a scalar on every element."""

    @pytest.mark.parametrize("kind", ['dense', 'sparse'])
    def test_add_scalar(self, vbuild, kind):
        v = getattr(vbuild, f"{kind}_of_array")([1, 0, -2, 0])
        result = v + 2
        assert result.kind is v.kind
        assert_vector_equal(result, [3, 2, 0, 2])
        assert_vector_equal(2 + v, [3, 2, 0, 2])

    def test_sparse_shift_stores_every_nonzero(self, vbuild):
        result = vbuild.sparse_of_indexed(5, [(1, 1.0)]).add(1)
        assert result.kind is StorageKind.SPARSE
        assert result.value_count == 5
        assert result.to_list() == [1.0, 2.0, 1.0, 1.0, 1.0]

    @pytest.mark.parametrize("kind", ['dense', 'sparse'])
    def test_subtract_scalar(self, vbuild, kind):
        v = getattr(vbuild, f"{kind}_of_array")([1, 0, 3])
        assert_vector_equal(v - 1, [0, -1, 2])
        assert (v - 1).value_count == (3 if kind == 'dense' else 2)

    @pytest.mark.parametrize("kind", ['dense', 'sparse'])
    def test_subtract_from(self, vbuild, kind):
        v = getattr(vbuild, f"{kind}_of_array")([1, 0, 3])
        assert_vector_equal(v.subtract_from(1), [0, 1, -2])
        assert_vector_equal(1 - v, [0, 1, -2])
        assert_vector_equal(v.subtract_from(0), [-1, 0, -3])

    def test_zero_shift_copies(self, vbuild):
        v = vbuild.sparse_of_array([1, 0])
        result = v + 0
        assert result == v
        assert result is not v
        assert result.value_count == 1


class TestMissingScalar:
    """Test that an absent scalar is reported as a missing argument."""

    @pytest.mark.parametrize("kind", ['dense', 'sparse'])
    @pytest.mark.parametrize("method", ['multiply', 'divide', 'add', 'subtract', 'subtract_from'])
    def test_none_scalar(self, vbuild, kind, method):
        v = getattr(vbuild, f"{kind}_of_array")([1, 0, 2])
        with pytest.raises(ArgumentMissing):
            getattr(v, method)(None)


class TestExtremes:
    """Test minimum and maximum searches, unstored zeros included."""

    @pytest.mark.parametrize("kind", ['dense', 'sparse'])
    def test_maximum_and_minimum(self, vbuild, kind):
        v = getattr(vbuild, f"{kind}_of_array")([2, 0, -3, 5, 5, 0])
        assert v.maximum_index() == 3
        assert v.maximum() == 5.0
        assert v.minimum_index() == 2
        assert v.minimum() == -3.0

    @pytest.mark.parametrize("kind", ['dense', 'sparse'])
    def test_unstored_zero_is_the_minimum(self, vbuild, kind):
        v = getattr(vbuild, f"{kind}_of_array")([4, 0, 2])
        assert v.minimum_index() == 1
        assert v.minimum() == 0.0

    @pytest.mark.parametrize("kind", ['dense', 'sparse'])
    def test_absolute_extremes(self, vbuild, kind):
        v = getattr(vbuild, f"{kind}_of_array")([-4, 1, 3, -1])
        assert v.absolute_maximum_index() == 0
        assert v.absolute_maximum() == -4.0
        assert v.absolute_minimum_index() == 1
        assert v.absolute_minimum() == 1.0

    def test_absolute_minimum_of_sparse_finds_gap(self, vbuild):
        v = vbuild.sparse_of_indexed(6, [(0, 3.0), (1, -1.0), (5, 2.0)])
        assert v.absolute_minimum_index() == 2
        assert v.absolute_minimum() == 0.0

    def test_complex_has_no_ordering(self):
        v = VectorBuilder('complex128').dense_of_array([1j, 2])
        with pytest.raises(TypeError):
            v.maximum()
        with pytest.raises(TypeError):
            v.minimum_index()
        assert v.absolute_maximum_index() == 1

    def test_empty(self, vbuild):
        with pytest.raises(ValueError):
            vbuild.dense(0).maximum_index()
        with pytest.raises(ValueError):
            vbuild.sparse(0).absolute_minimum_index()
