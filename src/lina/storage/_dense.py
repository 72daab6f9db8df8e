"""Dense Storage.

Every cell is materialized in one flat Python list. Matrices are laid out
column-major: cell (r, c) lives at data[c * rows + r].

Ownership:
    Storages normally own their list. The of_list() factories accept
    copy=False to wrap a caller-supplied list by reference; writes through
    the storage are then visible in the caller's list and vice versa.
"""

from typing import Any, Iterator, List, Optional, Tuple

from .._algebra import ElementAlgebra
from ._base import MatrixStorage, StorageKind, VectorStorage

__all__ = ['DenseVectorStorage', 'DenseMatrixStorage']


class DenseVectorStorage(VectorStorage):
    """Contiguous vector buffer.

    Attributes:
        data: Flat list of length `length`.
    """

    kind = StorageKind.DENSE

    def __init__(self, algebra: ElementAlgebra, length: int, data: Optional[List[Any]] = None):
        super().__init__(algebra, length)
        if data is None:
            data = [algebra.zero] * length
        elif len(data) != length:
            raise ValueError(f"Buffer has wrong length: expected {length}, got {len(data)}")
        self.data = data

    @classmethod
    def of_list(cls, algebra: ElementAlgebra, values: List[Any], copy: bool = True) -> 'DenseVectorStorage':
        """Create from a list.

        Args:
            algebra: Element algebra.
            values: Source values.
            copy: If False, `values` must be a list and is used by
                  reference without coercion.
        """
        if copy:
            return cls(algebra, len(values), [algebra.coerce(v) for v in values])
        if not isinstance(values, list):
            raise TypeError(f"Reference construction needs a list, got {type(values).__name__}")
        return cls(algebra, len(values), values)

    def at(self, index: int) -> Any:
        return self.data[index]

    def set_at(self, index: int, value: Any) -> None:
        self.data[index] = value

    @property
    def value_count(self) -> int:
        return self.length

    def enumerate_nonzero(self) -> Iterator[Tuple[int, Any]]:
        is_zero = self.algebra.is_zero
        for i, value in enumerate(self.data):
            if not is_zero(value):
                yield i, value

    def copy(self) -> 'DenseVectorStorage':
        return DenseVectorStorage(self.algebra, self.length, list(self.data))

    def clear(self) -> None:
        zero = self.algebra.zero
        for i in range(self.length):
            self.data[i] = zero

    def to_list(self) -> List[Any]:
        return list(self.data)


class DenseMatrixStorage(MatrixStorage):
    """Column-major matrix buffer.

    Attributes:
        data: Flat list of length rows * cols, column-major.
    """

    kind = StorageKind.DENSE

    def __init__(self, algebra: ElementAlgebra, rows: int, cols: int, data: Optional[List[Any]] = None):
        super().__init__(algebra, rows, cols)
        if data is None:
            data = [algebra.zero] * (rows * cols)
        elif len(data) != rows * cols:
            raise ValueError(
                f"Buffer has wrong length: expected {rows * cols}, got {len(data)}")
        self.data = data

    @classmethod
    def of_column_major(
        cls,
        algebra: ElementAlgebra,
        rows: int,
        cols: int,
        values: List[Any],
        copy: bool = True,
    ) -> 'DenseMatrixStorage':
        """Create from a column-major flat list.

        With copy=False the list is wrapped by reference.
        """
        if copy:
            return cls(algebra, rows, cols, [algebra.coerce(v) for v in values])
        if not isinstance(values, list):
            raise TypeError(f"Reference construction needs a list, got {type(values).__name__}")
        return cls(algebra, rows, cols, values)

    @classmethod
    def of_row_major(
        cls,
        algebra: ElementAlgebra,
        rows: int,
        cols: int,
        values: List[Any],
    ) -> 'DenseMatrixStorage':
        """Create from a row-major flat list (always copies)."""
        if len(values) != rows * cols:
            raise ValueError(
                f"Buffer has wrong length: expected {rows * cols}, got {len(values)}")
        coerce = algebra.coerce
        data = [None] * (rows * cols)
        for r in range(rows):
            base = r * cols
            for c in range(cols):
                data[c * rows + r] = coerce(values[base + c])
        return cls(algebra, rows, cols, data)

    def at(self, row: int, col: int) -> Any:
        return self.data[col * self.rows + row]

    def set_at(self, row: int, col: int, value: Any) -> None:
        self.data[col * self.rows + row] = value

    @property
    def value_count(self) -> int:
        return self.rows * self.cols

    def enumerate_nonzero(self) -> Iterator[Tuple[int, int, Any]]:
        is_zero = self.algebra.is_zero
        rows = self.rows
        for k, value in enumerate(self.data):
            if not is_zero(value):
                c, r = divmod(k, rows)
                yield r, c, value

    def row_entries(self, row: int) -> List[Tuple[int, Any]]:
        is_zero = self.algebra.is_zero
        data, rows = self.data, self.rows
        result = []
        for c in range(self.cols):
            value = data[c * rows + row]
            if not is_zero(value):
                result.append((c, value))
        return result

    def copy(self) -> 'DenseMatrixStorage':
        return DenseMatrixStorage(self.algebra, self.rows, self.cols, list(self.data))

    def clear(self) -> None:
        zero = self.algebra.zero
        for k in range(len(self.data)):
            self.data[k] = zero

    def to_column_major(self) -> List[Any]:
        return list(self.data)

    def to_rows(self) -> List[List[Any]]:
        data, rows = self.data, self.rows
        return [[data[c * rows + r] for c in range(self.cols)] for r in range(rows)]

    def to_row_major(self) -> List[Any]:
        data, rows = self.data, self.rows
        return [data[c * rows + r] for r in range(rows) for c in range(self.cols)]
