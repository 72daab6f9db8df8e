"""
Dense Matrix Kernels

Every kernel here visits each cell of its dense operand unconditionally.
When the other operand is sparse or diagonal it is consulted by index
lookup, never materialized. Element-independent unary kernels split the
output buffer into disjoint slices through map_slices.
"""

from typing import Any, Callable, Optional

from .._parallel import map_slices
from ..storage import StorageKind
from ._registry import ANY, register_kernel

D = StorageKind.DENSE

_ELEMENTWISE = (
    ('add', 'add'),
    ('subtract', 'subtract'),
    ('pointwise_multiply', 'multiply'),
    ('pointwise_divide', 'divide'),
)


# =============================================================================
# Elementwise Binary
# =============================================================================

def _dense_dense(method: str):
    def kernel(a, b, out):
        fn = getattr(a.algebra, method)
        out.data = list(map(fn, a.data, b.data))
    kernel.__name__ = f"dense_{method}"
    return kernel


def _dense_mixed(method: str):
    def kernel(a, b, out):
        fn = getattr(a.algebra, method)
        rows, cols = a.rows, a.cols
        a_at, b_at = a.at, b.at
        data = out.data
        k = 0
        for c in range(cols):
            for r in range(rows):
                data[k] = fn(a_at(r, c), b_at(r, c))
                k += 1
    kernel.__name__ = f"dense_mixed_{method}"
    return kernel


for _op, _method in _ELEMENTWISE:
    register_kernel(_op, D, D)(_dense_dense(_method))
    register_kernel(_op, D, ANY)(_dense_mixed(_method))
    register_kernel(_op, ANY, D)(_dense_mixed(_method))


# =============================================================================
# Matrix Multiply
# =============================================================================

@register_kernel('matrix_multiply', D, D)
def dense_multiply(a, b, out):
    """Plain triple loop over column-major buffers."""
    algebra = a.algebra
    add, mul, zero = algebra.add, algebra.multiply, algebra.zero
    m, n, p = a.rows, a.cols, b.cols
    ad, bd, od = a.data, b.data, out.data
    for j in range(p):
        bcol = j * n
        for i in range(m):
            acc = zero
            for k in range(n):
                acc = add(acc, mul(ad[k * m + i], bd[bcol + k]))
            od[j * m + i] = acc


@register_kernel('matrix_multiply', D, ANY)
@register_kernel('matrix_multiply', ANY, D)
def dense_mixed_multiply(a, b, out):
    """Triple loop over every cell; the non-dense operand is read through at()."""
    algebra = a.algebra
    add, mul, zero = algebra.add, algebra.multiply, algebra.zero
    m, n, p = a.rows, a.cols, b.cols
    a_at, b_at = a.at, b.at
    od = out.data
    for j in range(p):
        for i in range(m):
            acc = zero
            for k in range(n):
                acc = add(acc, mul(a_at(i, k), b_at(k, j)))
            od[j * m + i] = acc


# =============================================================================
# Unary
# =============================================================================

@register_kernel('map', D)
def dense_map(a, out, fn: Callable[[Any], Any]):
    src = a.data
    dst = out.data

    def work(start, stop):
        for k in range(start, stop):
            dst[k] = fn(src[k])

    map_slices(len(src), work)


register_kernel('map_cells', D)(dense_map)


@register_kernel('map_indexed', D)
def dense_map_indexed(a, out, fn: Callable[[int, int, Any], Any]):
    src = a.data
    dst = out.data
    rows = a.rows

    def work(start, stop):
        for k in range(start, stop):
            c, r = divmod(k, rows)
            dst[k] = fn(r, c, src[k])

    map_slices(len(src), work)


@register_kernel('transpose', D)
def dense_transpose(a, out, fn: Optional[Callable[[Any], Any]] = None):
    rows, cols = a.rows, a.cols
    src, dst = a.data, out.data
    for c in range(cols):
        base = c * rows
        for r in range(rows):
            value = src[base + r]
            dst[r * cols + c] = fn(value) if fn is not None else value
