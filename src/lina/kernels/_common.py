"""
Shared kernel helpers: writing results into any storage kind and merging
sorted (index, value) entry lists.
"""

from typing import Any, Callable, Iterable, List, Sequence, Tuple

from ..storage import MatrixStorage, StorageKind, VectorStorage

__all__ = [
    'Entries',
    'write_rows',
    'write_pairs',
    'merge_union',
    'merge_intersection',
    'vector_reader',
]

Entries = List[Tuple[int, Any]]


def write_rows(out: MatrixStorage, rows: Iterable[Sequence[Tuple[int, Any]]]) -> None:
    """Write per-row (col, value) lists into a fresh result storage."""
    if out.kind is StorageKind.SPARSE:
        out.load_rows(rows)
    else:
        out.load_entries(
            (r, c, value) for r, entries in enumerate(rows) for c, value in entries)


def write_pairs(out: VectorStorage, pairs: Iterable[Tuple[int, Any]]) -> None:
    """Write (index, value) pairs into a fresh result vector storage."""
    out.load_pairs(pairs)


def merge_union(
    left: Sequence[Tuple[int, Any]],
    right: Sequence[Tuple[int, Any]],
    both: Callable[[Any, Any], Any],
    only_left: Callable[[Any], Any],
    only_right: Callable[[Any], Any],
) -> Entries:
    """Merge two index-sorted entry lists over the union of their indices."""
    result = []
    i = j = 0
    nl, nr = len(left), len(right)
    while i < nl and j < nr:
        li, lv = left[i]
        ri, rv = right[j]
        if li == ri:
            result.append((li, both(lv, rv)))
            i += 1
            j += 1
        elif li < ri:
            result.append((li, only_left(lv)))
            i += 1
        else:
            result.append((ri, only_right(rv)))
            j += 1
    for li, lv in left[i:]:
        result.append((li, only_left(lv)))
    for ri, rv in right[j:]:
        result.append((ri, only_right(rv)))
    return result


def merge_intersection(
    left: Sequence[Tuple[int, Any]],
    right: Sequence[Tuple[int, Any]],
    both: Callable[[Any, Any], Any],
) -> Entries:
    """Merge two index-sorted entry lists over the intersection of their indices."""
    result = []
    i = j = 0
    nl, nr = len(left), len(right)
    while i < nl and j < nr:
        li = left[i][0]
        ri = right[j][0]
        if li == ri:
            result.append((li, both(left[i][1], right[j][1])))
            i += 1
            j += 1
        elif li < ri:
            i += 1
        else:
            j += 1
    return result


def vector_reader(v: VectorStorage) -> Callable[[int], Any]:
    """Fast index -> value reader for any vector storage."""
    if v.kind is StorageKind.DENSE:
        return v.data.__getitem__
    values = dict(v.enumerate_nonzero())
    zero = v.algebra.zero
    return lambda index: values.get(index, zero)
