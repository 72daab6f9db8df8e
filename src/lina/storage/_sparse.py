"""Sparse Storage.

Only nonzero cells are stored. Indices are kept unique and sorted inside
preallocated parallel lists; `value_count` is the exact number of live
entries and the high-water mark of the used prefix.

Invariants:
    - indices[0:value_count] strictly increasing (per row for matrices)
    - no live entry equals the algebra's zero: writing zero onto an
      existing entry removes it
    - value_count <= capacity (len(indices) == len(values))

Growth Policy:
    When full, capacity grows by 32 / 128 / 512 slots depending on the
    current size, or by a quarter above 1024 slots, never beyond the
    number of cells. Above 1024 live entries the lists shrink back once
    less than half of the capacity is used.
"""

from bisect import bisect_left
from typing import Any, Iterable, Iterator, List, Tuple

from .._algebra import ElementAlgebra
from ._base import MatrixStorage, StorageKind, VectorStorage

__all__ = ['SparseVectorStorage', 'SparseMatrixStorage']


def _growth_size(capacity: int) -> int:
    if capacity > 1024:
        return capacity // 4
    if capacity > 256:
        return 512
    return 128 if capacity > 64 else 32


class _CompactLists:
    """Shared insert/remove machinery over (indices, values) prefix lists."""

    def _ensure_capacity(self, needed: int, limit: int) -> None:
        capacity = len(self.values)
        if needed <= capacity:
            return
        new_capacity = max(needed, min(capacity + _growth_size(capacity), limit))
        extra = new_capacity - capacity
        self.indices.extend([0] * extra)
        self.values.extend([self.algebra.zero] * extra)

    def _insert_slot(self, pos: int, count: int, index: int, value: Any, limit: int) -> None:
        self._ensure_capacity(count + 1, limit)
        indices, values = self.indices, self.values
        indices[pos + 1:count + 1] = indices[pos:count]
        values[pos + 1:count + 1] = values[pos:count]
        indices[pos] = index
        values[pos] = value

    def _remove_slot(self, pos: int, count: int) -> None:
        indices, values = self.indices, self.values
        indices[pos:count - 1] = indices[pos + 1:count]
        values[pos:count - 1] = values[pos + 1:count]
        values[count - 1] = self.algebra.zero
        remaining = count - 1
        if remaining > 1024 and remaining < len(indices) // 2:
            del indices[remaining:]
            del values[remaining:]


class SparseVectorStorage(_CompactLists, VectorStorage):
    """Sorted (index, value) storage for vectors.

    Attributes:
        indices: Index list; the first value_count slots are live.
        values: Value list parallel to indices.
        value_count: Number of live entries.

    Example:
        >>> s = SparseVectorStorage(Float64Algebra(), 10000)
        >>> s.set_at(200, 3.0)
        >>> s.value_count
        1
        >>> s.set_at(200, 0.0)
        >>> s.value_count
        0
    """

    kind = StorageKind.SPARSE

    def __init__(self, algebra: ElementAlgebra, length: int):
        super().__init__(algebra, length)
        self.indices: List[int] = []
        self.values: List[Any] = []
        self._value_count = 0

    @property
    def value_count(self) -> int:
        return self._value_count

    def _find(self, index: int) -> int:
        return bisect_left(self.indices, index, 0, self._value_count)

    def at(self, index: int) -> Any:
        pos = self._find(index)
        if pos < self._value_count and self.indices[pos] == index:
            return self.values[pos]
        return self.algebra.zero

    def set_at(self, index: int, value: Any) -> None:
        count = self._value_count
        pos = self._find(index)
        found = pos < count and self.indices[pos] == index
        if self.algebra.is_zero(value):
            if found:
                self._remove_slot(pos, count)
                self._value_count = count - 1
        elif found:
            self.values[pos] = value
        else:
            self._insert_slot(pos, count, index, value, self.length)
            self._value_count = count + 1

    def enumerate_nonzero(self) -> Iterator[Tuple[int, Any]]:
        for k in range(self._value_count):
            yield self.indices[k], self.values[k]

    def load_pairs(self, pairs: Iterable[Tuple[int, Any]]) -> None:
        """Bulk load sorted (index, value) pairs into an empty storage.

        Zero values are dropped, so value_count stays exact.
        """
        is_zero = self.algebra.is_zero
        indices, values = [], []
        for index, value in pairs:
            if not is_zero(value):
                indices.append(index)
                values.append(value)
        self.indices = indices
        self.values = values
        self._value_count = len(indices)

    def copy(self) -> 'SparseVectorStorage':
        result = SparseVectorStorage(self.algebra, self.length)
        count = self._value_count
        result.indices = self.indices[:count]
        result.values = self.values[:count]
        result._value_count = count
        return result

    def clear(self) -> None:
        self.indices = []
        self.values = []
        self._value_count = 0

    def clear_range(self, start: int, count: int) -> None:
        """Remove every entry with start <= index < start + count."""
        lo = self._find(start)
        hi = self._find(start + count)
        if hi > lo:
            n = self._value_count
            del self.indices[lo:hi]
            del self.values[lo:hi]
            self._value_count = n - (hi - lo)

    def to_list(self) -> List[Any]:
        result = [self.algebra.zero] * self.length
        for k in range(self._value_count):
            result[self.indices[k]] = self.values[k]
        return result


class SparseMatrixStorage(_CompactLists, MatrixStorage):
    """Compressed sparse row (CSR) storage.

    Attributes:
        row_pointers: rows + 1 offsets; row r occupies
                      [row_pointers[r], row_pointers[r + 1]).
        indices: Column index list (first value_count slots live).
        values: Value list parallel to indices.

    value_count is always row_pointers[rows].
    """

    kind = StorageKind.SPARSE

    def __init__(self, algebra: ElementAlgebra, rows: int, cols: int):
        super().__init__(algebra, rows, cols)
        self.row_pointers: List[int] = [0] * (rows + 1)
        self.indices: List[int] = []
        self.values: List[Any] = []

    @property
    def value_count(self) -> int:
        return self.row_pointers[self.rows]

    def row_range(self, row: int) -> Tuple[int, int]:
        return self.row_pointers[row], self.row_pointers[row + 1]

    def _find(self, row: int, col: int) -> Tuple[int, bool]:
        start, end = self.row_pointers[row], self.row_pointers[row + 1]
        pos = bisect_left(self.indices, col, start, end)
        return pos, pos < end and self.indices[pos] == col

    def at(self, row: int, col: int) -> Any:
        pos, found = self._find(row, col)
        return self.values[pos] if found else self.algebra.zero

    def set_at(self, row: int, col: int, value: Any) -> None:
        pos, found = self._find(row, col)
        count = self.value_count
        pointers = self.row_pointers
        if self.algebra.is_zero(value):
            if found:
                self._remove_slot(pos, count)
                for r in range(row + 1, self.rows + 1):
                    pointers[r] -= 1
        elif found:
            self.values[pos] = value
        else:
            self._insert_slot(pos, count, col, value, self.rows * self.cols)
            for r in range(row + 1, self.rows + 1):
                pointers[r] += 1

    def enumerate_nonzero(self) -> Iterator[Tuple[int, int, Any]]:
        pointers, indices, values = self.row_pointers, self.indices, self.values
        for r in range(self.rows):
            for k in range(pointers[r], pointers[r + 1]):
                yield r, indices[k], values[k]

    def row_entries(self, row: int) -> List[Tuple[int, Any]]:
        start, end = self.row_pointers[row], self.row_pointers[row + 1]
        return list(zip(self.indices[start:end], self.values[start:end]))

    def all_row_entries(self) -> List[List[Tuple[int, Any]]]:
        return [self.row_entries(r) for r in range(self.rows)]

    def load_rows(self, rows: Iterable[Iterable[Tuple[int, Any]]]) -> None:
        """Bulk load per-row (col, value) lists, each sorted by column.

        Replaces the whole content; zero values are dropped.
        """
        is_zero = self.algebra.is_zero
        pointers = [0] * (self.rows + 1)
        indices, values = [], []
        r = 0
        for r, entries in enumerate(rows):
            for col, value in entries:
                if not is_zero(value):
                    indices.append(col)
                    values.append(value)
            pointers[r + 1] = len(indices)
        for k in range(r + 2, self.rows + 1):
            pointers[k] = len(indices)
        self.row_pointers = pointers
        self.indices = indices
        self.values = values

    def load_entries(self, entries: Iterable[Tuple[int, int, Any]]) -> None:
        """Bulk load (row, col, value) triples in any order.

        Later duplicates of the same cell overwrite earlier ones.
        """
        per_row = [dict() for _ in range(self.rows)]
        for row, col, value in entries:
            per_row[row][col] = value
        self.load_rows(sorted(cells.items()) for cells in per_row)

    def copy(self) -> 'SparseMatrixStorage':
        result = SparseMatrixStorage(self.algebra, self.rows, self.cols)
        count = self.value_count
        result.row_pointers = list(self.row_pointers)
        result.indices = self.indices[:count]
        result.values = self.values[:count]
        return result

    def clear(self) -> None:
        self.row_pointers = [0] * (self.rows + 1)
        self.indices = []
        self.values = []
