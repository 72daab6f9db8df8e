"""Diagonal Storage.

One slot per diagonal position, min(rows, cols) slots in total. Every
off-diagonal cell reads as zero. Rectangular shapes are allowed; the
diagonal then runs along the shorter dimension.
"""

from typing import Any, Iterable, Iterator, List, Optional, Tuple

from .._algebra import ElementAlgebra
from .._errors import UnsupportedStructuralOperation
from ._base import MatrixStorage, StorageKind

__all__ = ['DiagonalMatrixStorage']


class DiagonalMatrixStorage(MatrixStorage):
    """Diagonal-only matrix storage.

    Attributes:
        data: List of min(rows, cols) diagonal values.

    Writes:
        Writing zero off the diagonal is a no-op. Writing a nonzero off the
        diagonal raises UnsupportedStructuralOperation.
    """

    kind = StorageKind.DIAGONAL
    is_fully_mutable = False

    def __init__(self, algebra: ElementAlgebra, rows: int, cols: int, data: Optional[List[Any]] = None):
        super().__init__(algebra, rows, cols)
        n = min(rows, cols)
        if data is None:
            data = [algebra.zero] * n
        elif len(data) != n:
            raise ValueError(f"Diagonal buffer has wrong length: expected {n}, got {len(data)}")
        self.data = data

    @property
    def order(self) -> int:
        """Number of diagonal slots."""
        return len(self.data)

    def at(self, row: int, col: int) -> Any:
        return self.data[row] if row == col else self.algebra.zero

    def set_at(self, row: int, col: int, value: Any) -> None:
        if row == col:
            self.data[row] = value
        elif not self.algebra.is_zero(value):
            raise UnsupportedStructuralOperation(
                f"Cannot set off-diagonal element ({row}, {col}) of a diagonal matrix")

    def is_mutable_at(self, row: int, col: int) -> bool:
        return row == col

    @property
    def value_count(self) -> int:
        return len(self.data)

    def enumerate_nonzero(self) -> Iterator[Tuple[int, int, Any]]:
        is_zero = self.algebra.is_zero
        for i, value in enumerate(self.data):
            if not is_zero(value):
                yield i, i, value

    def row_entries(self, row: int) -> List[Tuple[int, Any]]:
        if row < len(self.data) and not self.algebra.is_zero(self.data[row]):
            return [(row, self.data[row])]
        return []

    def all_row_entries(self) -> List[List[Tuple[int, Any]]]:
        return [self.row_entries(r) for r in range(self.rows)]

    def load_entries(self, entries: Iterable[Tuple[int, int, Any]]) -> None:
        """Load triples; every nonzero must lie on the diagonal.

        All triples are validated before the first write.
        """
        entries = list(entries)
        is_zero = self.algebra.is_zero
        for row, col, value in entries:
            if row != col and not is_zero(value):
                raise UnsupportedStructuralOperation(
                    f"Cannot set off-diagonal element ({row}, {col}) of a diagonal matrix")
        for row, col, value in entries:
            if row == col:
                self.data[row] = value

    def copy(self) -> 'DiagonalMatrixStorage':
        return DiagonalMatrixStorage(self.algebra, self.rows, self.cols, list(self.data))

    def clear(self) -> None:
        zero = self.algebra.zero
        for i in range(len(self.data)):
            self.data[i] = zero
