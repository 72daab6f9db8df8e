"""
Diagonal Matrix Kernels

Kernels between two diagonal operands touch only the min(rows, cols)
diagonal slots. Products with a dense operand scale whole rows or
columns of the dense buffer.
"""

from typing import Any, Callable, Optional

from ..storage import StorageKind
from ._registry import register_kernel

D = StorageKind.DENSE
G = StorageKind.DIAGONAL


# =============================================================================
# Elementwise Binary
# =============================================================================

@register_kernel('add', G, G)
def diagonal_add(a, b, out):
    out.data = list(map(a.algebra.add, a.data, b.data))


@register_kernel('subtract', G, G)
def diagonal_subtract(a, b, out):
    out.data = list(map(a.algebra.subtract, a.data, b.data))


@register_kernel('pointwise_multiply', G, G)
def diagonal_pointwise_multiply(a, b, out):
    out.data = list(map(a.algebra.multiply, a.data, b.data))


@register_kernel('pointwise_divide', G, G)
def diagonal_pointwise_divide(a, b, out):
    """Divide slot by slot where both slots are nonzero; other slots stay zero."""
    algebra = a.algebra
    is_zero, div, zero = algebra.is_zero, algebra.divide, algebra.zero
    out.data = [
        zero if is_zero(x) or is_zero(y) else div(x, y)
        for x, y in zip(a.data, b.data)
    ]


# =============================================================================
# Matrix Multiply
# =============================================================================

@register_kernel('matrix_multiply', G, G)
def diagonal_multiply(a, b, out):
    mul = a.algebra.multiply
    n = min(a.rows, a.cols, b.cols)
    for k in range(n):
        out.data[k] = mul(a.data[k], b.data[k])


@register_kernel('matrix_multiply', D, G)
def dense_diagonal_multiply(a, b, out):
    """Scale column k of the dense operand by d[k]; later columns are zero."""
    mul = a.algebra.multiply
    rows = a.rows
    src, dst = a.data, out.data
    for c in range(min(b.rows, b.cols)):
        d = b.data[c]
        base = c * rows
        for r in range(rows):
            dst[base + r] = mul(src[base + r], d)


@register_kernel('matrix_multiply', G, D)
def diagonal_dense_multiply(a, b, out):
    """Scale row k of the dense operand by d[k]; later rows are zero."""
    mul = a.algebra.multiply
    n = min(a.rows, a.cols)
    b_rows, out_rows = b.rows, out.rows
    src, dst = b.data, out.data
    for c in range(b.cols):
        src_base = c * b_rows
        dst_base = c * out_rows
        for r in range(n):
            dst[dst_base + r] = mul(a.data[r], src[src_base + r])


# =============================================================================
# Unary
# =============================================================================

@register_kernel('map', G)
def diagonal_map(a, out, fn: Callable[[Any], Any]):
    out.data = [fn(x) for x in a.data]


@register_kernel('map_indexed', G)
def diagonal_map_indexed(a, out, fn: Callable[[int, int, Any], Any]):
    out.data = [fn(i, i, x) for i, x in enumerate(a.data)]


@register_kernel('transpose', G)
def diagonal_transpose(a, out, fn: Optional[Callable[[Any], Any]] = None):
    out.data = [fn(x) for x in a.data] if fn is not None else list(a.data)
