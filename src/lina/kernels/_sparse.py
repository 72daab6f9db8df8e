"""
Sparse Matrix Kernels

Binary kernels between sparse (or sparse and diagonal) operands walk the
stored entries row by row:

    add / subtract              union of stored column indices
    pointwise multiply / divide intersection of stored column indices

The row-oriented matrix product (Gustavson) is the wildcard fallback. It
only ends up serving sparse and diagonal operand pairs: every pair with
a dense operand has a kernel in _dense or _diagonal.
"""

from typing import Any, Callable, Optional

from ..storage import StorageKind
from ._common import merge_intersection, merge_union, write_rows
from ._registry import ANY, register_kernel

S = StorageKind.SPARSE
G = StorageKind.DIAGONAL

_SPARSE_PAIRS = ((S, S), (S, G), (G, S))


def _identity(value):
    return value


# =============================================================================
# Elementwise Binary
# =============================================================================

def sparse_add(a, b, out):
    add = a.algebra.add
    write_rows(out, [
        merge_union(ra, rb, add, _identity, _identity)
        for ra, rb in zip(a.all_row_entries(), b.all_row_entries())
    ])


def sparse_subtract(a, b, out):
    algebra = a.algebra
    write_rows(out, [
        merge_union(ra, rb, algebra.subtract, _identity, algebra.negate)
        for ra, rb in zip(a.all_row_entries(), b.all_row_entries())
    ])


def sparse_pointwise_multiply(a, b, out):
    mul = a.algebra.multiply
    write_rows(out, [
        merge_intersection(ra, rb, mul)
        for ra, rb in zip(a.all_row_entries(), b.all_row_entries())
    ])


def sparse_pointwise_divide(a, b, out):
    div = a.algebra.divide
    write_rows(out, [
        merge_intersection(ra, rb, div)
        for ra, rb in zip(a.all_row_entries(), b.all_row_entries())
    ])


for _left, _right in _SPARSE_PAIRS:
    register_kernel('add', _left, _right)(sparse_add)
    register_kernel('subtract', _left, _right)(sparse_subtract)
    register_kernel('pointwise_multiply', _left, _right)(sparse_pointwise_multiply)
    register_kernel('pointwise_divide', _left, _right)(sparse_pointwise_divide)


# =============================================================================
# Matrix Multiply
# =============================================================================

@register_kernel('matrix_multiply', ANY, ANY)
def row_multiply(a, b, out):
    """
    Row-by-row product over nonzero entries only.

    For each row of `a`, every stored a[i, k] scatters a[i, k] * b[k, :]
    into an accumulator keyed by column.
    """
    algebra = a.algebra
    add, mul = algebra.add, algebra.multiply
    b_rows = b.all_row_entries()
    result = []
    for entries in a.all_row_entries():
        acc = {}
        for k, x in entries:
            for c, y in b_rows[k]:
                product = mul(x, y)
                acc[c] = add(acc[c], product) if c in acc else product
        result.append(sorted(acc.items()))
    write_rows(out, result)


# =============================================================================
# Unary
# =============================================================================

@register_kernel('map', S)
def sparse_map(a, out, fn: Callable[[Any], Any]):
    """Map stored values only; unstored cells stay zero."""
    out.load_rows([(c, fn(v)) for c, v in entries] for entries in a.all_row_entries())


@register_kernel('map_cells', ANY)
def every_cell_map(a, out, fn: Callable[[Any], Any]):
    """Apply fn to every cell, stored or not. Serves sparse and diagonal sources."""
    zero = a.algebra.zero
    rows = []
    for entries in a.all_row_entries():
        stored = dict(entries)
        rows.append([(c, fn(stored.get(c, zero))) for c in range(a.cols)])
    write_rows(out, rows)


@register_kernel('map_indexed', S)
def sparse_map_indexed(a, out, fn: Callable[[int, int, Any], Any]):
    out.load_rows(
        [(c, fn(r, c, v)) for c, v in entries]
        for r, entries in enumerate(a.all_row_entries())
    )


@register_kernel('transpose', S)
def sparse_transpose(a, out, fn: Optional[Callable[[Any], Any]] = None):
    columns = [[] for _ in range(a.cols)]
    for r, c, v in a.enumerate_nonzero():
        columns[c].append((r, fn(v) if fn is not None else v))
    out.load_rows(columns)
