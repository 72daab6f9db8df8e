"""
Builders

Construction entry points that produce a given storage kind directly,
without going through result-type resolution.

Copy semantics:
    *_of_array, *_of_row_arrays, *_of_column_arrays, dense_of_row_major
    always copy; later changes to the source do not reach the matrix.

Reference semantics:
    dense_of_column_major(..., copy=False) and
    VectorBuilder.dense_of_buffer(..., copy=False) wrap the caller's list;
    writes through either side are visible to the other. The list must
    already hold elements of the builder's type.

Example:
    >>> build = MatrixBuilder('float64')
    >>> eye = build.diagonal_identity(5)
    >>> eye[2, 2], eye[2, 3]
    (1.0, 0.0)
"""

import logging
from typing import Any, Callable, Iterable, List, Optional, Sequence, Tuple

import numpy as np

from ._algebra import ElementAlgebra, algebra_for
from ._errors import (
    DimensionMismatch,
    check_index,
    require_argument,
)
from ._matrix import Matrix
from ._vector import Vector
from .storage import (
    DenseMatrixStorage,
    DenseVectorStorage,
    DiagonalMatrixStorage,
    SparseMatrixStorage,
    SparseVectorStorage,
    StorageKind,
    allocate_matrix,
)

__all__ = ['MatrixBuilder', 'VectorBuilder']

logger = logging.getLogger("lina.builder")

Sampler = Callable[[], Any]


def _check_shape(rows: int, cols: int) -> None:
    if rows < 0 or cols < 0:
        raise DimensionMismatch(f"Invalid shape: ({rows}, {cols})")


def _rectangular(array: Any, what: str = "array") -> List[List[Any]]:
    """Validate a 2-D array-like (nested sequences or numpy array) as rows."""
    require_argument(array, what)
    rows = [list(row) for row in array]
    if rows:
        width = len(rows[0])
        for r, row in enumerate(rows):
            if len(row) != width:
                raise DimensionMismatch(
                    f"{what}: row {r} has {len(row)} values, expected {width}")
    return rows


def _default_sampler(count: int, seed: Optional[int]) -> List[float]:
    return np.random.default_rng(seed).standard_normal(count).tolist()


# =============================================================================
# Matrix Builder
# =============================================================================

class MatrixBuilder:
    """
    Matrix factory bound to one element algebra.

    Args:
        dtype: dtype name, DType, ElementAlgebra, or None for the
               configured default dtype.
    """

    def __init__(self, dtype: Any = None):
        self.algebra: ElementAlgebra = algebra_for(dtype)

    def _built(self, name: str, storage) -> Matrix:
        logger.debug("%s: %s %dx%d (%s)", name, storage.kind.value,
                     storage.rows, storage.cols, self.algebra.name)
        return Matrix(storage)

    # -------------------------------------------------------------------------
    # Uniform fill
    # -------------------------------------------------------------------------

    def dense(self, rows: int, cols: int, value: Any = None) -> Matrix:
        _check_shape(rows, cols)
        storage = DenseMatrixStorage(self.algebra, rows, cols)
        if value is not None:
            storage.data = [self.algebra.coerce(value)] * (rows * cols)
        return self._built("dense", storage)

    def sparse(self, rows: int, cols: int) -> Matrix:
        _check_shape(rows, cols)
        return self._built("sparse", SparseMatrixStorage(self.algebra, rows, cols))

    def diagonal(self, rows: int, cols: int, value: Any = None) -> Matrix:
        _check_shape(rows, cols)
        storage = DiagonalMatrixStorage(self.algebra, rows, cols)
        if value is not None:
            storage.data = [self.algebra.coerce(value)] * min(rows, cols)
        return self._built("diagonal", storage)

    # -------------------------------------------------------------------------
    # Identity
    # -------------------------------------------------------------------------

    def dense_identity(self, order: int) -> Matrix:
        _check_shape(order, order)
        storage = DenseMatrixStorage(self.algebra, order, order)
        for i in range(order):
            storage.set_at(i, i, self.algebra.one)
        return self._built("dense_identity", storage)

    def sparse_identity(self, order: int) -> Matrix:
        _check_shape(order, order)
        storage = SparseMatrixStorage(self.algebra, order, order)
        one = self.algebra.one
        storage.load_rows([(i, one)] for i in range(order))
        return self._built("sparse_identity", storage)

    def diagonal_identity(self, rows: int, cols: Optional[int] = None) -> Matrix:
        """Ones on the diagonal; cols defaults to rows."""
        cols = rows if cols is None else cols
        return self.diagonal(rows, cols, self.algebra.one)

    # -------------------------------------------------------------------------
    # From arrays (copy)
    # -------------------------------------------------------------------------

    def dense_of_array(self, array: Any) -> Matrix:
        """Dense copy of a 2-D array-like (list of rows or numpy array)."""
        rows = _rectangular(array)
        n_rows, n_cols = len(rows), len(rows[0]) if rows else 0
        values = [v for row in rows for v in row]
        return self._built("dense_of_array",
                           DenseMatrixStorage.of_row_major(self.algebra, n_rows, n_cols, values))

    def sparse_of_array(self, array: Any) -> Matrix:
        rows = _rectangular(array)
        n_rows, n_cols = len(rows), len(rows[0]) if rows else 0
        coerce = self.algebra.coerce
        storage = SparseMatrixStorage(self.algebra, n_rows, n_cols)
        storage.load_rows([(c, coerce(v)) for c, v in enumerate(row)] for row in rows)
        return self._built("sparse_of_array", storage)

    def diagonal_of_array(self, array: Any) -> Matrix:
        """
        Diagonal copy of a 2-D array-like.

        Raises:
            UnsupportedStructuralOperation: If any off-diagonal value is nonzero
        """
        rows = _rectangular(array)
        n_rows, n_cols = len(rows), len(rows[0]) if rows else 0
        coerce = self.algebra.coerce
        storage = DiagonalMatrixStorage(self.algebra, n_rows, n_cols)
        storage.load_entries(
            (r, c, coerce(v)) for r, row in enumerate(rows) for c, v in enumerate(row))
        return self._built("diagonal_of_array", storage)

    def dense_of_row_arrays(self, row_arrays: Sequence[Sequence[Any]]) -> Matrix:
        return self.dense_of_array(_rectangular(row_arrays, "row_arrays"))

    def dense_of_column_arrays(self, column_arrays: Sequence[Sequence[Any]]) -> Matrix:
        columns = _rectangular(column_arrays, "column_arrays")
        n_cols, n_rows = len(columns), len(columns[0]) if columns else 0
        values = [v for column in columns for v in column]
        return self._built("dense_of_column_arrays",
                           DenseMatrixStorage.of_column_major(self.algebra, n_rows, n_cols, values))

    def dense_of_row_major(self, rows: int, cols: int, buffer: Sequence[Any]) -> Matrix:
        """Dense copy of a flat row-major buffer."""
        require_argument(buffer, 'buffer')
        _check_shape(rows, cols)
        if len(buffer) != rows * cols:
            raise DimensionMismatch(
                f"dense_of_row_major: buffer of length {len(buffer)} for shape ({rows}, {cols})")
        return self._built("dense_of_row_major",
                           DenseMatrixStorage.of_row_major(self.algebra, rows, cols, list(buffer)))

    def dense_of_column_major(self, rows: int, cols: int, buffer: List[Any], copy: bool = False) -> Matrix:
        """
        Dense matrix over a flat column-major buffer.

        Args:
            copy: If False (default) the list is wrapped by reference and
                  shared with the caller; if True it is copied and coerced.
        """
        require_argument(buffer, 'buffer')
        _check_shape(rows, cols)
        if len(buffer) != rows * cols:
            raise DimensionMismatch(
                f"dense_of_column_major: buffer of length {len(buffer)} for shape ({rows}, {cols})")
        return self._built("dense_of_column_major",
                           DenseMatrixStorage.of_column_major(self.algebra, rows, cols, buffer, copy=copy))

    def sparse_of_indexed(self, rows: int, cols: int, entries: Iterable[Tuple[int, int, Any]]) -> Matrix:
        """Sparse matrix from (row, col, value) triples; later duplicates win."""
        require_argument(entries, 'entries')
        _check_shape(rows, cols)
        coerce = self.algebra.coerce
        triples = []
        for r, c, value in entries:
            check_index(r, rows, "row")
            check_index(c, cols, "column")
            triples.append((r, c, coerce(value)))
        storage = SparseMatrixStorage(self.algebra, rows, cols)
        storage.load_entries(triples)
        return self._built("sparse_of_indexed", storage)

    def diagonal_of_diagonal(self, rows: int, cols: int, values: Sequence[Any]) -> Matrix:
        require_argument(values, 'values')
        _check_shape(rows, cols)
        if len(values) != min(rows, cols):
            raise DimensionMismatch(
                f"diagonal_of_diagonal: {len(values)} values for shape ({rows}, {cols})")
        coerce = self.algebra.coerce
        storage = DiagonalMatrixStorage(self.algebra, rows, cols, [coerce(v) for v in values])
        return self._built("diagonal_of_diagonal", storage)

    def dense_of_init(self, rows: int, cols: int, init: Callable[[int, int], Any]) -> Matrix:
        """Dense matrix with cell (r, c) = init(r, c)."""
        require_argument(init, 'init')
        _check_shape(rows, cols)
        coerce = self.algebra.coerce
        data = [coerce(init(r, c)) for c in range(cols) for r in range(rows)]
        return self._built("dense_of_init", DenseMatrixStorage(self.algebra, rows, cols, data))

    # -------------------------------------------------------------------------
    # Random
    # -------------------------------------------------------------------------

    def random(self, rows: int, cols: int, sampler: Optional[Sampler] = None,
               seed: Optional[int] = None) -> Matrix:
        """
        Dense matrix filled from a sampler.

        Args:
            sampler: Zero-argument callable returning one value per call.
                     Defaults to standard normal draws from
                     numpy.random.default_rng(seed).
            seed: Seed for the default sampler (ignored with a sampler).
        """
        _check_shape(rows, cols)
        count = rows * cols
        values = _default_sampler(count, seed) if sampler is None else [sampler() for _ in range(count)]
        return self._built("random",
                           DenseMatrixStorage.of_column_major(self.algebra, rows, cols, values))

    # -------------------------------------------------------------------------
    # Kind matching
    # -------------------------------------------------------------------------

    def same_as(self, example: Matrix, rows: Optional[int] = None, cols: Optional[int] = None,
                fully_mutable: bool = False) -> Matrix:
        """
        All-zero matrix of the example's storage kind.

        A diagonal example gives a diagonal result unless fully_mutable is
        set, in which case the result is sparse.
        """
        require_argument(example, 'example')
        rows = example.rows if rows is None else rows
        cols = example.cols if cols is None else cols
        _check_shape(rows, cols)
        kind = example.kind
        if kind is StorageKind.DIAGONAL and fully_mutable:
            kind = StorageKind.SPARSE
        return self._built("same_as", allocate_matrix(kind, self.algebra, rows, cols))


# =============================================================================
# Vector Builder
# =============================================================================

class VectorBuilder:
    """Vector factory bound to one element algebra."""

    def __init__(self, dtype: Any = None):
        self.algebra: ElementAlgebra = algebra_for(dtype)

    def _built(self, name: str, storage) -> Vector:
        logger.debug("%s: %s vector of %d (%s)", name, storage.kind.value,
                     storage.length, self.algebra.name)
        return Vector(storage)

    def dense(self, count: int, value: Any = None) -> Vector:
        storage = DenseVectorStorage(self.algebra, count)
        if value is not None:
            storage.data = [self.algebra.coerce(value)] * count
        return self._built("dense", storage)

    def sparse(self, count: int) -> Vector:
        return self._built("sparse", SparseVectorStorage(self.algebra, count))

    def dense_of_array(self, values: Iterable[Any]) -> Vector:
        require_argument(values, 'values')
        return self._built("dense_of_array", DenseVectorStorage.of_list(self.algebra, list(values)))

    def sparse_of_array(self, values: Iterable[Any]) -> Vector:
        require_argument(values, 'values')
        values = list(values)
        coerce = self.algebra.coerce
        storage = SparseVectorStorage(self.algebra, len(values))
        storage.load_pairs((i, coerce(v)) for i, v in enumerate(values))
        return self._built("sparse_of_array", storage)

    def sparse_of_indexed(self, count: int, pairs: Iterable[Tuple[int, Any]]) -> Vector:
        """Sparse vector from (index, value) pairs in any order; later duplicates win."""
        require_argument(pairs, 'pairs')
        coerce = self.algebra.coerce
        cells = {}
        for index, value in pairs:
            check_index(index, count)
            cells[index] = coerce(value)
        storage = SparseVectorStorage(self.algebra, count)
        storage.load_pairs(sorted(cells.items()))
        return self._built("sparse_of_indexed", storage)

    def dense_of_buffer(self, buffer: List[Any], copy: bool = False) -> Vector:
        """Dense vector over a list; shared with the caller unless copy=True."""
        require_argument(buffer, 'buffer')
        return self._built("dense_of_buffer", DenseVectorStorage.of_list(self.algebra, buffer, copy=copy))

    def dense_of_init(self, count: int, init: Callable[[int], Any]) -> Vector:
        require_argument(init, 'init')
        coerce = self.algebra.coerce
        return self._built("dense_of_init",
                           DenseVectorStorage(self.algebra, count, [coerce(init(i)) for i in range(count)]))

    def random(self, count: int, sampler: Optional[Sampler] = None, seed: Optional[int] = None) -> Vector:
        """Dense vector filled from a sampler (standard normal by default)."""
        values = _default_sampler(count, seed) if sampler is None else [sampler() for _ in range(count)]
        return self._built("random", DenseVectorStorage.of_list(self.algebra, values))
