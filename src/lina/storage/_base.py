"""
Storage Base Classes

This module defines the storage kinds and the per-cell read/write contract
every storage representation implements.

Type Hierarchy:

    VectorStorage (ABC)
    ├── DenseVectorStorage      - contiguous buffer
    └── SparseVectorStorage     - sorted indices + values + value_count
    MatrixStorage (ABC)
    ├── DenseMatrixStorage      - column-major buffer
    ├── SparseMatrixStorage     - compressed sparse rows
    └── DiagonalMatrixStorage   - one slot per diagonal position

Design Philosophy:

1. Closed variant: StorageKind is the tag. Kernels are free functions
   selected by the kinds of their operands; storages only know how to
   read, write and enumerate their own cells.

2. Unchecked access: at()/set_at() do not validate indices. Bounds are
   checked once at the Vector/Matrix boundary before any write.

3. Fresh results: kernels always write into a newly allocated, all-zero
   result storage, so load_entries() may assume every cell starts at zero.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Iterable, Iterator, List, Tuple

from .._algebra import ElementAlgebra

__all__ = [
    'StorageKind',
    'VectorStorage',
    'MatrixStorage',
]


class StorageKind(Enum):
    """Storage representation of a vector or matrix.

    Attributes:
        DENSE: Every cell materialized. Universal fallback, valid for
               every operation.
        SPARSE: Only nonzero cells stored, sorted by index. Unlisted
                cells read as the algebra's zero.
        DIAGONAL: One slot per diagonal position (matrices only).
                  Off-diagonal cells are structurally zero.
    """
    DENSE = 'dense'
    SPARSE = 'sparse'
    DIAGONAL = 'diagonal'

    def __repr__(self) -> str:
        return f"StorageKind.{self.name}"


class VectorStorage(ABC):
    """
    Abstract storage for a vector of fixed length.

    Required Methods (subclasses must implement):
        at(i), set_at(i, value), value_count, enumerate_nonzero(),
        copy(), clear(), load_pairs(pairs)
    """

    kind: StorageKind

    def __init__(self, algebra: ElementAlgebra, length: int):
        if length < 0:
            raise ValueError(f"Vector length must be non-negative, got {length}")
        self.algebra = algebra
        self.length = length

    # =========================================================================
    # Cell Access
    # =========================================================================

    @abstractmethod
    def at(self, index: int) -> Any:
        """Read one cell (no bounds check)."""
        ...

    @abstractmethod
    def set_at(self, index: int, value: Any) -> None:
        """Write one cell (no bounds check)."""
        ...

    @property
    @abstractmethod
    def value_count(self) -> int:
        """Number of materialized cells."""
        ...

    @abstractmethod
    def enumerate_nonzero(self) -> Iterator[Tuple[int, Any]]:
        """Yield (index, value) for every nonzero cell in index order."""
        ...

    @abstractmethod
    def copy(self) -> 'VectorStorage':
        ...

    @abstractmethod
    def clear(self) -> None:
        """Reset every cell to zero."""
        ...

    def load_pairs(self, pairs: Iterable[Tuple[int, Any]]) -> None:
        """Write (index, value) pairs into a storage that is all zero."""
        for index, value in pairs:
            self.set_at(index, value)

    # =========================================================================
    # Conversion and Comparison
    # =========================================================================

    def to_list(self) -> List[Any]:
        result = [self.algebra.zero] * self.length
        for i, value in self.enumerate_nonzero():
            result[i] = value
        return result

    def equals(self, other: 'VectorStorage') -> bool:
        if other is None or self.length != other.length:
            return False
        return self.to_list() == other.to_list()

    def __repr__(self) -> str:
        return (f"{self.__class__.__name__}("
                f"length={self.length}, value_count={self.value_count}, "
                f"dtype={self.algebra.name})")


class MatrixStorage(ABC):
    """
    Abstract storage for a rows x cols matrix.

    Required Methods (subclasses must implement):
        at(r, c), set_at(r, c, value), value_count,
        enumerate_nonzero(), copy(), clear()

    Optional Methods (subclasses may override for speed):
        is_mutable_at(r, c), load_entries(entries), row_entries(r)
    """

    kind: StorageKind
    is_fully_mutable = True

    def __init__(self, algebra: ElementAlgebra, rows: int, cols: int):
        if rows < 0 or cols < 0:
            raise ValueError(f"Invalid shape: ({rows}, {cols})")
        self.algebra = algebra
        self.rows = rows
        self.cols = cols

    @property
    def shape(self) -> Tuple[int, int]:
        return (self.rows, self.cols)

    # =========================================================================
    # Cell Access
    # =========================================================================

    @abstractmethod
    def at(self, row: int, col: int) -> Any:
        ...

    @abstractmethod
    def set_at(self, row: int, col: int, value: Any) -> None:
        ...

    def is_mutable_at(self, row: int, col: int) -> bool:
        """Whether the cell may hold a nonzero value."""
        return True

    @property
    @abstractmethod
    def value_count(self) -> int:
        ...

    @abstractmethod
    def enumerate_nonzero(self) -> Iterator[Tuple[int, int, Any]]:
        """Yield (row, col, value) for every nonzero cell."""
        ...

    @abstractmethod
    def copy(self) -> 'MatrixStorage':
        ...

    @abstractmethod
    def clear(self) -> None:
        ...

    def load_entries(self, entries: Iterable[Tuple[int, int, Any]]) -> None:
        """Write (row, col, value) triples into a storage that is all zero."""
        for row, col, value in entries:
            self.set_at(row, col, value)

    def row_entries(self, row: int) -> List[Tuple[int, Any]]:
        """Nonzero (col, value) pairs of one row in column order."""
        is_zero = self.algebra.is_zero
        result = []
        for c in range(self.cols):
            value = self.at(row, c)
            if not is_zero(value):
                result.append((c, value))
        return result

    def all_row_entries(self) -> List[List[Tuple[int, Any]]]:
        """Nonzero (col, value) pairs of every row."""
        rows: List[List[Tuple[int, Any]]] = [[] for _ in range(self.rows)]
        for r, c, value in self.enumerate_nonzero():
            rows[r].append((c, value))
        for entries in rows:
            entries.sort(key=lambda e: e[0])
        return rows

    # =========================================================================
    # Conversion and Comparison
    # =========================================================================

    def to_rows(self) -> List[List[Any]]:
        zero = self.algebra.zero
        result = [[zero] * self.cols for _ in range(self.rows)]
        for r, c, value in self.enumerate_nonzero():
            result[r][c] = value
        return result

    def to_row_major(self) -> List[Any]:
        zero = self.algebra.zero
        result = [zero] * (self.rows * self.cols)
        for r, c, value in self.enumerate_nonzero():
            result[r * self.cols + c] = value
        return result

    def to_column_major(self) -> List[Any]:
        zero = self.algebra.zero
        result = [zero] * (self.rows * self.cols)
        for r, c, value in self.enumerate_nonzero():
            result[c * self.rows + r] = value
        return result

    def equals(self, other: 'MatrixStorage') -> bool:
        if other is None or self.shape != other.shape:
            return False
        return self.to_row_major() == other.to_row_major()

    def __repr__(self) -> str:
        return (f"{self.__class__.__name__}("
                f"shape={self.shape}, value_count={self.value_count}, "
                f"dtype={self.algebra.name})")
