"""
Algebraic properties that must hold for every storage kind.
"""

import math

import numpy as np
import pytest

from lina import MatrixBuilder, StorageKind, VectorBuilder

from conftest import assert_matrix_equal

KINDS = ['dense', 'sparse', 'diagonal']


def _of_kind(build, kind, array):
    return getattr(build, f"{kind}_of_array")(array)


def _sample(kind):
    if kind == 'diagonal':
        return np.diag([1.5, -2.0, 0.0, 4.0])[:3]
    rng = np.random.default_rng(7)
    array = rng.standard_normal((3, 4))
    array[array < 0.2] = 0.0
    return array


class TestTransposeInvolution:
    """transpose(transpose(A)) == A."""

    @pytest.mark.parametrize("kind", KINDS)
    def test_involution(self, mbuild, kind):
        m = _of_kind(mbuild, kind, _sample(kind))
        twice = m.transpose().transpose()
        assert twice.kind is m.kind
        assert twice == m

    @pytest.mark.parametrize("kind", KINDS)
    def test_product_transpose(self, mbuild, kind):
        a = _of_kind(mbuild, kind, _sample(kind))
        b = mbuild.dense_of_array(np.arange(8.0).reshape(4, 2))
        left = (a * b).transpose()
        right = b.transpose() * a.transpose()
        assert_matrix_equal(left, right.to_array())


class TestRoundTrip:
    """Building a matrix from its own array gives the same matrix."""

    @pytest.mark.parametrize("kind", KINDS)
    def test_array_round_trip(self, mbuild, kind):
        m = _of_kind(mbuild, kind, _sample(kind))
        again = _of_kind(mbuild, kind, m.to_array())
        assert again.kind is m.kind
        assert again == m

    @pytest.mark.parametrize("kind", ['dense', 'sparse'])
    def test_vector_round_trip(self, vbuild, kind):
        v = getattr(vbuild, f"{kind}_of_array")([0.0, 1.0, 0.0, -3.0])
        assert getattr(vbuild, f"{kind}_of_array")(v.to_list()) == v


class TestTriangleInequality:
    """||x + y|| <= ||x|| + ||y|| for p in {1, 2, inf}."""

    @pytest.mark.parametrize("p", [1, 2, math.inf])
    @pytest.mark.parametrize("seed", [0, 1, 2])
    def test_vectors(self, vbuild, p, seed):
        rng = np.random.default_rng(seed)
        x = vbuild.sparse_of_array(np.where(rng.random(20) < 0.5, 0.0, rng.standard_normal(20)))
        y = vbuild.dense_of_array(rng.standard_normal(20))
        assert (x + y).norm(p) <= x.norm(p) + y.norm(p) + 1e-12

    @pytest.mark.parametrize("p", [1, 2, math.inf, 'fro'])
    def test_matrices(self, mbuild, p):
        a = mbuild.sparse_of_array(_sample('sparse'))
        b = mbuild.diagonal_of_array(_sample('diagonal'))
        assert (a + b).norm(p) <= a.norm(p) + b.norm(p) + 1e-12


class TestValueCountBound:
    """Pointwise results of sparse operands store no more than either operand."""

    @pytest.mark.parametrize("left,right", [('sparse', 'sparse'), ('sparse', 'diagonal'),
                                            ('diagonal', 'sparse'), ('diagonal', 'diagonal')])
    def test_pointwise_multiply(self, mbuild, left, right):
        a = _of_kind(mbuild, left, _sample(left))
        b = _of_kind(mbuild, right, _sample(right))
        result = a.pointwise_multiply(b)
        assert result.value_count <= min(a.value_count, b.value_count)

    def test_sparse_vectors(self, vbuild):
        a = vbuild.sparse_of_array([1, 0, 2, 0, 3])
        b = vbuild.sparse_of_array([0, 4, 5, 0, 6])
        assert a.pointwise_multiply(b).value_count <= min(a.value_count, b.value_count)


class TestCellwiseAgreement:
    """Mixed-kind results agree with numpy cell by cell."""

    @pytest.mark.parametrize("left", KINDS)
    @pytest.mark.parametrize("right", KINDS)
    def test_add_and_subtract(self, mbuild, left, right):
        a_array, b_array = _sample(left), _sample(right)
        a, b = _of_kind(mbuild, left, a_array), _of_kind(mbuild, right, b_array)
        assert_matrix_equal(a + b, a_array + b_array)
        assert_matrix_equal(a - b, a_array - b_array)

    def test_dense_plus_sparse_reads_every_cell(self, mbuild):
        dense = mbuild.dense_of_init(3, 3, lambda r, c: r * 3 + c)
        sparse = mbuild.sparse_of_indexed(3, 3, [(1, 1, 10.0)])
        result = dense + sparse
        assert result.kind is StorageKind.DENSE
        for r in range(3):
            for c in range(3):
                assert result[r, c] == dense[r, c] + sparse[r, c]

    @pytest.mark.parametrize("dtype", ['float32', 'complex64', 'complex128'])
    def test_other_dtypes(self, dtype):
        build = MatrixBuilder(dtype)
        a = build.sparse_of_array([[1, 0], [0, 2]])
        b = build.dense_of_array([[0.5, 1], [1, 0.5]])
        assert_matrix_equal(a * b, np.array([[0.5, 1], [2, 1]], dtype=complex), rtol=1e-6)
        v = VectorBuilder(dtype).dense_of_array([1, 1])
        assert (a * v).to_list() == [1, 2]
