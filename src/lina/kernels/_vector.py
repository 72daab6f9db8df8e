"""
Vector Kernels

Vector-vector elementwise kernels, products, and the matrix-vector
products. Matrix-vector kernels are keyed by (matrix kind, vector kind)
for both matrix*vector and vector*matrix.
"""

from typing import Any, Callable

from .._parallel import map_slices
from ..storage import StorageKind
from ._common import merge_intersection, merge_union, vector_reader, write_pairs, write_rows
from ._registry import ANY, register_kernel

D = StorageKind.DENSE
S = StorageKind.SPARSE

_ELEMENTWISE = (
    ('vector_add', 'add'),
    ('vector_subtract', 'subtract'),
    ('vector_pointwise_multiply', 'multiply'),
    ('vector_pointwise_divide', 'divide'),
)


def _identity(value):
    return value


# =============================================================================
# Elementwise Binary
# =============================================================================

def _dense_dense(method: str):
    def kernel(a, b, out):
        out.data = list(map(getattr(a.algebra, method), a.data, b.data))
    kernel.__name__ = f"dense_vector_{method}"
    return kernel


def _dense_mixed(method: str):
    def kernel(a, b, out):
        fn = getattr(a.algebra, method)
        a_at, b_at = vector_reader(a), vector_reader(b)
        out.data = [fn(a_at(i), b_at(i)) for i in range(a.length)]
    kernel.__name__ = f"dense_mixed_vector_{method}"
    return kernel


for _op, _method in _ELEMENTWISE:
    register_kernel(_op, D, D)(_dense_dense(_method))
    register_kernel(_op, D, ANY)(_dense_mixed(_method))
    register_kernel(_op, ANY, D)(_dense_mixed(_method))


@register_kernel('vector_add', S, S)
def sparse_vector_add(a, b, out):
    write_pairs(out, merge_union(
        list(a.enumerate_nonzero()), list(b.enumerate_nonzero()),
        a.algebra.add, _identity, _identity))


@register_kernel('vector_subtract', S, S)
def sparse_vector_subtract(a, b, out):
    algebra = a.algebra
    write_pairs(out, merge_union(
        list(a.enumerate_nonzero()), list(b.enumerate_nonzero()),
        algebra.subtract, _identity, algebra.negate))


@register_kernel('vector_pointwise_multiply', S, S)
def sparse_vector_pointwise_multiply(a, b, out):
    write_pairs(out, merge_intersection(
        list(a.enumerate_nonzero()), list(b.enumerate_nonzero()), a.algebra.multiply))


@register_kernel('vector_pointwise_divide', S, S)
def sparse_vector_pointwise_divide(a, b, out):
    write_pairs(out, merge_intersection(
        list(a.enumerate_nonzero()), list(b.enumerate_nonzero()), a.algebra.divide))


# =============================================================================
# Unary
# =============================================================================

@register_kernel('vector_map', D)
def dense_vector_map(a, out, fn: Callable[[Any], Any]):
    src, dst = a.data, out.data

    def work(start, stop):
        for k in range(start, stop):
            dst[k] = fn(src[k])

    map_slices(len(src), work)


@register_kernel('vector_map', S)
def sparse_vector_map(a, out, fn: Callable[[Any], Any]):
    out.load_pairs([(i, fn(v)) for i, v in a.enumerate_nonzero()])


# Dense cells are all stored, so the plain map already sees every one.
register_kernel('vector_map_cells', D)(dense_vector_map)


@register_kernel('vector_map_cells', S)
def sparse_vector_map_cells(a, out, fn: Callable[[Any], Any]):
    """Apply fn to unstored zeros too; results equal to zero are dropped."""
    at = vector_reader(a)
    write_pairs(out, [(i, fn(at(i))) for i in range(a.length)])


# =============================================================================
# Products
# =============================================================================

@register_kernel('dot', D, D)
def dense_dot(a, b, conjugate_left: bool = False):
    algebra = a.algebra
    add, mul, conj = algebra.add, algebra.multiply, algebra.conjugate
    acc = algebra.zero
    for x, y in zip(a.data, b.data):
        acc = add(acc, mul(conj(x) if conjugate_left else x, y))
    return acc


@register_kernel('dot', S, S)
def sparse_dot(a, b, conjugate_left: bool = False):
    """Sum over the indices stored in both operands."""
    algebra = a.algebra
    add, mul, conj = algebra.add, algebra.multiply, algebra.conjugate
    if conjugate_left:
        terms = merge_intersection(list(a.enumerate_nonzero()), list(b.enumerate_nonzero()),
                                   lambda x, y: mul(conj(x), y))
    else:
        terms = merge_intersection(list(a.enumerate_nonzero()), list(b.enumerate_nonzero()), mul)
    acc = algebra.zero
    for _, value in terms:
        acc = add(acc, value)
    return acc


@register_kernel('dot', D, ANY)
@register_kernel('dot', ANY, D)
def mixed_dot(a, b, conjugate_left: bool = False):
    """Visit every index of the dense operand, look up the sparse one."""
    algebra = a.algebra
    add, mul, conj = algebra.add, algebra.multiply, algebra.conjugate
    a_at, b_at = vector_reader(a), vector_reader(b)
    acc = algebra.zero
    for i in range(a.length):
        x = a_at(i)
        acc = add(acc, mul(conj(x) if conjugate_left else x, b_at(i)))
    return acc


@register_kernel('outer_product', ANY, ANY)
def outer_product(a, b, out):
    mul = a.algebra.multiply
    right = list(b.enumerate_nonzero())
    rows = [[] for _ in range(a.length)]
    for i, x in a.enumerate_nonzero():
        rows[i] = [(j, mul(x, y)) for j, y in right]
    write_rows(out, rows)


@register_kernel('matrix_vector', D, D)
def dense_matrix_vector(a, v, out):
    algebra = a.algebra
    add, mul = algebra.add, algebra.multiply
    rows = a.rows
    data, x = a.data, v.data
    acc = [algebra.zero] * rows
    for c in range(a.cols):
        base = c * rows
        xc = x[c]
        for r in range(rows):
            acc[r] = add(acc[r], mul(data[base + r], xc))
    out.data = acc


@register_kernel('matrix_vector', ANY, ANY)
def row_matrix_vector(a, v, out):
    algebra = a.algebra
    add, mul, is_zero = algebra.add, algebra.multiply, algebra.is_zero
    v_at = vector_reader(v)
    pairs = []
    for r, entries in enumerate(a.all_row_entries()):
        acc = algebra.zero
        for c, x in entries:
            y = v_at(c)
            if not is_zero(y):
                acc = add(acc, mul(x, y))
        pairs.append((r, acc))
    write_pairs(out, pairs)


@register_kernel('matrix_vector', D, S)
@register_kernel('matrix_vector', S, D)
def mixed_matrix_vector(a, v, out):
    """Every (row, col) cell is visited; the sparse side is looked up by index."""
    algebra = a.algebra
    add, mul = algebra.add, algebra.multiply
    a_at, v_at = a.at, vector_reader(v)
    result = []
    for r in range(a.rows):
        acc = algebra.zero
        for c in range(a.cols):
            acc = add(acc, mul(a_at(r, c), v_at(c)))
        result.append(acc)
    out.data = result


@register_kernel('vector_matrix', D, ANY)
@register_kernel('vector_matrix', S, D)
def mixed_vector_matrix(a, v, out):
    """v * a visiting every cell; a dense result is guaranteed by resolution."""
    algebra = a.algebra
    add, mul = algebra.add, algebra.multiply
    a_at, v_at = a.at, vector_reader(v)
    result = []
    for c in range(a.cols):
        acc = algebra.zero
        for r in range(a.rows):
            acc = add(acc, mul(v_at(r), a_at(r, c)))
        result.append(acc)
    out.data = result


@register_kernel('vector_matrix', ANY, ANY)
def vector_matrix(a, v, out):
    """v * a: scatter each stored v[r] across row r of the matrix."""
    algebra = a.algebra
    add, mul = algebra.add, algebra.multiply
    acc = {}
    for r, x in v.enumerate_nonzero():
        for c, y in a.row_entries(r):
            product = mul(x, y)
            acc[c] = add(acc[c], product) if c in acc else product
    write_pairs(out, sorted(acc.items()))
