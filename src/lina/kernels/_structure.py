"""
Structural Kernels

Block composition (append, stack, diagonal stack, Kronecker) and
reshaping (sub-matrix, row/column insertion and removal). All of them
only move stored nonzero entries into a fresh result, so a single generic
implementation serves every storage kind; the result kind has already
been chosen by the resolution table.
"""

from ..storage import StorageKind
from ._registry import ANY, register_kernel

D = StorageKind.DENSE


def _shifted(storage, row_offset, col_offset):
    for r, c, value in storage.enumerate_nonzero():
        yield r + row_offset, c + col_offset, value


def _load_blocks(out, *blocks):
    entries = []
    for storage, row_offset, col_offset in blocks:
        entries.extend(_shifted(storage, row_offset, col_offset))
    out.load_entries(entries)


# =============================================================================
# Block Composition
# =============================================================================

@register_kernel('append', ANY, ANY)
def append(a, b, out):
    """[a | b]"""
    _load_blocks(out, (a, 0, 0), (b, 0, a.cols))


@register_kernel('stack', ANY, ANY)
def stack(a, b, out):
    """[a ; b]"""
    _load_blocks(out, (a, 0, 0), (b, a.rows, 0))


@register_kernel('diagonal_stack', ANY, ANY)
def diagonal_stack(a, b, out):
    """[a 0 ; 0 b]"""
    _load_blocks(out, (a, 0, 0), (b, a.rows, a.cols))


@register_kernel('kronecker', ANY, ANY)
def kronecker(a, b, out):
    mul = a.algebra.multiply
    b_entries = list(b.enumerate_nonzero())
    p, q = b.rows, b.cols
    out.load_entries(
        (ra * p + rb, ca * q + cb, mul(x, y))
        for ra, ca, x in a.enumerate_nonzero()
        for rb, cb, y in b_entries
    )


# =============================================================================
# Reshaping
# =============================================================================

@register_kernel('sub_matrix', ANY)
def sub_matrix(a, out, row_index, col_index):
    col_end = col_index + out.cols
    out.load_entries(
        (r, c - col_index, value)
        for r in range(out.rows)
        for c, value in a.row_entries(row_index + r)
        if col_index <= c < col_end
    )


@register_kernel('sub_matrix', D)
def dense_sub_matrix(a, out, row_index, col_index):
    src_rows = a.rows
    src, dst = a.data, out.data
    k = 0
    for c in range(col_index, col_index + out.cols):
        base = c * src_rows + row_index
        dst[k:k + out.rows] = src[base:base + out.rows]
        k += out.rows


@register_kernel('insert_row', ANY)
def insert_row(a, out, index, values):
    """Copy `a` into `out` with `values` (index, value pairs) as row `index`."""
    entries = [(r + 1 if r >= index else r, c, v) for r, c, v in a.enumerate_nonzero()]
    entries.extend((index, c, v) for c, v in values)
    out.load_entries(entries)


@register_kernel('insert_column', ANY)
def insert_column(a, out, index, values):
    entries = [(r, c + 1 if c >= index else c, v) for r, c, v in a.enumerate_nonzero()]
    entries.extend((r, index, v) for r, v in values)
    out.load_entries(entries)


@register_kernel('remove_row', ANY)
def remove_row(a, out, index):
    out.load_entries(
        (r - 1 if r > index else r, c, v)
        for r, c, v in a.enumerate_nonzero() if r != index
    )


@register_kernel('remove_column', ANY)
def remove_column(a, out, index):
    out.load_entries(
        (r, c - 1 if c > index else c, v)
        for r, c, v in a.enumerate_nonzero() if c != index
    )
