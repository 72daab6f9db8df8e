"""
Matrix

One Matrix class for every storage kind (dense, sparse, diagonal).

Control flow of a binary operation:

    1. validate operands (None, element algebra, dimensions)
    2. resolve the result storage kind (lina._resolve)
    3. allocate a fresh all-zero result of that kind
    4. run the kernel registered for the operand kinds (lina.kernels)

In-place operations (item assignment, set_row, set_column,
set_diagonal, set_sub_matrix, permute_rows, permute_columns, clear)
validate every argument, including the diagonal structure checks,
before the first cell is written. A rejected call leaves the matrix
unchanged.
"""

import math
from typing import Any, List, Sequence, Tuple, Union

import numpy as np

from ._algebra import ElementAlgebra
from ._errors import (
    DimensionMismatch,
    IndexOutOfRange,
    UnsupportedStructuralOperation,
    check_index,
    check_insert_index,
    check_same_algebra,
    check_same_shape,
    check_square,
    require_argument,
)
from ._permutation import Permutation
from ._resolve import (
    OpClass,
    resolve_matrix_kind,
    resolve_matrix_vector_kind,
    resolve_restructured_kind,
    resolve_shifted_kind,
)
from ._vector import Vector, p_norm
from .kernels import get_kernel
from .storage import (
    DenseMatrixStorage,
    DenseVectorStorage,
    DiagonalMatrixStorage,
    MatrixStorage,
    SparseMatrixStorage,
    SparseVectorStorage,
    StorageKind,
    allocate_matrix,
    allocate_vector,
)

__all__ = ['Matrix']

Number = Union[int, float, complex]

D = StorageKind.DENSE
S = StorageKind.SPARSE
G = StorageKind.DIAGONAL


class Matrix:
    """
    Matrix over an element algebra.

    Attributes:
        rows, cols: Dimensions (fixed after construction).
        kind: StorageKind of the backing storage.
        value_count: Materialized cells (rows * cols for dense, stored
                     nonzeros for sparse, diagonal slots for diagonal).

    Example:
        >>> build = MatrixBuilder()
        >>> a = build.dense_of_array([[1, 1, 2], [1, 1, 2], [1, 1, 2]])
        >>> d = build.diagonal_of_diagonal(3, 3, [1, 2, 3])
        >>> (a @ d).kind
        StorageKind.DENSE
        >>> (d + d).kind
        StorageKind.DIAGONAL
        >>> d.append(d).kind
        StorageKind.SPARSE
    """

    __slots__ = ('_storage',)

    def __init__(self, storage: MatrixStorage):
        require_argument(storage, 'storage')
        self._storage = storage

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def storage(self) -> MatrixStorage:
        return self._storage

    @property
    def algebra(self) -> ElementAlgebra:
        return self._storage.algebra

    @property
    def rows(self) -> int:
        return self._storage.rows

    @property
    def cols(self) -> int:
        return self._storage.cols

    @property
    def shape(self) -> Tuple[int, int]:
        return self._storage.shape

    @property
    def kind(self) -> StorageKind:
        return self._storage.kind

    @property
    def value_count(self) -> int:
        return self._storage.value_count

    # =========================================================================
    # Element Access
    # =========================================================================

    def _check_cell(self, key) -> Tuple[int, int]:
        if not isinstance(key, tuple) or len(key) != 2:
            raise TypeError(f"Matrix index must be a (row, col) tuple, got {key!r}")
        row, col = key
        check_index(row, self.rows, "row")
        check_index(col, self.cols, "column")
        return row, col

    def __getitem__(self, key) -> Any:
        row, col = self._check_cell(key)
        return self._storage.at(row, col)

    def __setitem__(self, key, value: Any) -> None:
        """Write one cell. Diagonal storage rejects off-diagonal nonzeros."""
        row, col = self._check_cell(key)
        self._storage.set_at(row, col, self.algebra.coerce(value))

    # =========================================================================
    # Internal Helpers
    # =========================================================================

    def _check_operand(self, other: 'Matrix') -> None:
        require_argument(other, 'other')
        check_same_algebra(self.algebra, other.algebra)

    def _elementwise(self, other: 'Matrix', operation: str, op: OpClass) -> 'Matrix':
        self._check_operand(other)
        check_same_shape(self.shape, other.shape, operation)
        kind = resolve_matrix_kind(op, self.kind, other.kind)
        out = allocate_matrix(kind, self.algebra, self.rows, self.cols)
        get_kernel(operation, self.kind, other.kind)(self._storage, other._storage, out)
        return Matrix(out)

    def _compose(self, other: 'Matrix', operation: str, op: OpClass, rows: int, cols: int) -> 'Matrix':
        kind = resolve_matrix_kind(op, self.kind, other.kind, self.shape, other.shape)
        out = allocate_matrix(kind, self.algebra, rows, cols)
        get_kernel(operation, self.kind, other.kind)(self._storage, other._storage, out)
        return Matrix(out)

    def _map(self, fn) -> 'Matrix':
        out = allocate_matrix(self.kind, self.algebra, self.rows, self.cols)
        get_kernel('map', self.kind)(self._storage, out, fn)
        return Matrix(out)

    def _map_indexed(self, fn) -> 'Matrix':
        out = allocate_matrix(self.kind, self.algebra, self.rows, self.cols)
        get_kernel('map_indexed', self.kind)(self._storage, out, fn)
        return Matrix(out)

    def _map_cells(self, fn) -> 'Matrix':
        kind = resolve_shifted_kind(self.kind)
        out = allocate_matrix(kind, self.algebra, self.rows, self.cols)
        get_kernel('map_cells', self.kind)(self._storage, out, fn)
        return Matrix(out)

    def _restructured(self, operation: str, rows: int, cols: int, *args) -> 'Matrix':
        kind = resolve_restructured_kind(self.kind)
        out = allocate_matrix(kind, self.algebra, rows, cols)
        get_kernel(operation, self.kind)(self._storage, out, *args)
        return Matrix(out)

    def _vector_values(self, values: Union[Vector, Sequence[Any]], expected: int, context: str) -> List[Any]:
        """Coerce a Vector or sequence argument into a list of elements."""
        require_argument(values, 'values')
        if isinstance(values, Vector):
            check_same_algebra(self.algebra, values.algebra)
            result = values.to_list()
        else:
            coerce = self.algebra.coerce
            result = [coerce(v) for v in values]
        if len(result) != expected:
            raise DimensionMismatch(f"{context}: expected {expected} values, got {len(result)}")
        return result

    def _magnitudes(self) -> List[float]:
        absolute = self.algebra.absolute
        return [absolute(v) for _, _, v in self._storage.enumerate_nonzero()]

    # =========================================================================
    # Elementwise Arithmetic
    # =========================================================================

    def add(self, other: Union['Matrix', Number]) -> 'Matrix':
        """
        Add a matrix, or add a scalar to every cell.

        A nonzero scalar reaches every cell, so a diagonal matrix gives a
        sparse result; dense and sparse keep their kind.
        """
        if isinstance(other, Matrix):
            return self._elementwise(other, 'add', OpClass.ADDITIVE)
        require_argument(other, 'other')
        algebra = self.algebra
        scalar = algebra.coerce(other)
        if algebra.is_zero(scalar):
            return self.copy()
        add = algebra.add
        return self._map_cells(lambda x: add(x, scalar))

    def subtract(self, other: Union['Matrix', Number]) -> 'Matrix':
        """Subtract a matrix, or subtract a scalar from every cell."""
        if isinstance(other, Matrix):
            return self._elementwise(other, 'subtract', OpClass.ADDITIVE)
        require_argument(other, 'other')
        algebra = self.algebra
        scalar = algebra.coerce(other)
        if algebra.is_zero(scalar):
            return self.copy()
        sub = algebra.subtract
        return self._map_cells(lambda x: sub(x, scalar))

    def subtract_from(self, scalar: Number) -> 'Matrix':
        """scalar - self[i, j] for every cell."""
        require_argument(scalar, 'scalar')
        algebra = self.algebra
        scalar = algebra.coerce(scalar)
        if algebra.is_zero(scalar):
            return self.negate()
        sub = algebra.subtract
        return self._map_cells(lambda x: sub(scalar, x))

    def pointwise_multiply(self, other: 'Matrix') -> 'Matrix':
        return self._elementwise(other, 'pointwise_multiply', OpClass.POINTWISE)

    def pointwise_divide(self, other: 'Matrix') -> 'Matrix':
        """Divide cell by cell.

        Between two sparse (or sparse and diagonal, or two diagonal)
        operands only cells stored in both are divided; all other cells
        of the result are zero.
        """
        return self._elementwise(other, 'pointwise_divide', OpClass.POINTWISE)

    def scale(self, scalar: Number) -> 'Matrix':
        """Multiply every cell by a scalar, keeping the storage kind."""
        require_argument(scalar, 'scalar')
        algebra = self.algebra
        scalar = algebra.coerce(scalar)
        if algebra.is_zero(scalar):
            return Matrix(allocate_matrix(self.kind, algebra, self.rows, self.cols))
        if algebra.is_one(scalar):
            return self.copy()
        mul = algebra.multiply
        return self._map(lambda x: mul(x, scalar))

    def divide(self, scalar: Number) -> 'Matrix':
        require_argument(scalar, 'scalar')
        algebra = self.algebra
        scalar = algebra.coerce(scalar)
        if algebra.is_one(scalar):
            return self.copy()
        div = algebra.divide
        return self._map(lambda x: div(x, scalar))

    def negate(self) -> 'Matrix':
        return self._map(self.algebra.negate)

    def conjugate(self) -> 'Matrix':
        if not self.algebra.is_complex:
            return self.copy()
        return self._map(self.algebra.conjugate)

    # =========================================================================
    # Products
    # =========================================================================

    def multiply(self, other: Union['Matrix', Vector, Number]):
        """
        Matrix product with a Matrix or a Vector, or scaling by a scalar.

        Returns:
            Matrix for a matrix or scalar operand, Vector for a vector
        """
        if isinstance(other, Matrix):
            return self._multiply_matrix(other)
        if isinstance(other, Vector):
            return self._multiply_vector(other)
        require_argument(other, 'other')
        return self.scale(other)

    def _multiply_matrix(self, other: 'Matrix') -> 'Matrix':
        self._check_operand(other)
        if self.cols != other.rows:
            raise DimensionMismatch(
                f"multiply: shapes {self.shape} and {other.shape} are not aligned")
        return self._compose(other, 'matrix_multiply', OpClass.MATRIX_MULTIPLY,
                             self.rows, other.cols)

    def _multiply_vector(self, vector: Vector) -> Vector:
        check_same_algebra(self.algebra, vector.algebra)
        if self.cols != vector.count:
            raise DimensionMismatch(
                f"multiply: matrix {self.shape} and vector of length {vector.count} are not aligned")
        kind = resolve_matrix_vector_kind(self.kind, vector.kind)
        out = allocate_vector(kind, self.algebra, self.rows)
        get_kernel('matrix_vector', self.kind, vector.kind)(self._storage, vector.storage, out)
        return Vector(out)

    def left_multiply(self, vector: Vector) -> Vector:
        """vector * self (the vector as a row)."""
        require_argument(vector, 'vector')
        check_same_algebra(self.algebra, vector.algebra)
        if self.rows != vector.count:
            raise DimensionMismatch(
                f"left_multiply: vector of length {vector.count} and matrix {self.shape} are not aligned")
        kind = resolve_matrix_vector_kind(self.kind, vector.kind)
        out = allocate_vector(kind, self.algebra, self.cols)
        get_kernel('vector_matrix', self.kind, vector.kind)(self._storage, vector.storage, out)
        return Vector(out)

    def transpose_and_multiply(self, other: 'Matrix') -> 'Matrix':
        """self * other^T."""
        self._check_operand(other)
        if self.cols != other.cols:
            raise DimensionMismatch(
                f"transpose_and_multiply: shapes {self.shape} and {other.shape} are not aligned")
        return self._multiply_matrix(other.transpose())

    def transpose_this_and_multiply(self, other: Union['Matrix', Vector]):
        """self^T * other, for a Matrix or a Vector operand."""
        require_argument(other, 'other')
        if isinstance(other, Vector):
            return self.left_multiply(other)
        self._check_operand(other)
        if self.rows != other.rows:
            raise DimensionMismatch(
                f"transpose_this_and_multiply: shapes {self.shape} and {other.shape} are not aligned")
        return self.transpose()._multiply_matrix(other)

    def conjugate_transpose_and_multiply(self, other: 'Matrix') -> 'Matrix':
        """self * other^H."""
        self._check_operand(other)
        if self.cols != other.cols:
            raise DimensionMismatch(
                f"conjugate_transpose_and_multiply: shapes {self.shape} and {other.shape} are not aligned")
        return self._multiply_matrix(other.conjugate_transpose())

    def conjugate_transpose_this_and_multiply(self, other: Union['Matrix', Vector]):
        """self^H * other, for a Matrix or a Vector operand."""
        require_argument(other, 'other')
        if isinstance(other, Vector):
            return self.conjugate().left_multiply(other)
        self._check_operand(other)
        if self.rows != other.rows:
            raise DimensionMismatch(
                f"conjugate_transpose_this_and_multiply: shapes {self.shape} and {other.shape} are not aligned")
        return self.conjugate_transpose()._multiply_matrix(other)

    def power(self, exponent: int) -> 'Matrix':
        """
        Raise a square matrix to a non-negative integer power.

        Repeated squaring through multiply(), so the result kind follows
        the matrix-multiply row of the resolution table. The zeroth power
        is a diagonal identity.

        Raises:
            NonSquareOperand: If rows != cols
            ValueError: If exponent < 0
        """
        check_square(self.shape, "power")
        if exponent < 0:
            raise ValueError(f"power: exponent must not be negative, got {exponent}")
        if exponent == 0:
            algebra = self.algebra
            return Matrix(DiagonalMatrixStorage(algebra, self.rows, self.cols,
                                                [algebra.one] * self.rows))
        result = None
        base = self
        while True:
            if exponent & 1:
                result = base if result is None else result._multiply_matrix(base)
            exponent >>= 1
            if not exponent:
                break
            base = base._multiply_matrix(base)
        return result.copy() if result is self else result

    def kronecker_product(self, other: 'Matrix') -> 'Matrix':
        self._check_operand(other)
        return self._compose(other, 'kronecker', OpClass.KRONECKER,
                             self.rows * other.rows, self.cols * other.cols)

    # =========================================================================
    # Transposition
    # =========================================================================

    def transpose(self) -> 'Matrix':
        out = allocate_matrix(self.kind, self.algebra, self.cols, self.rows)
        get_kernel('transpose', self.kind)(self._storage, out)
        return Matrix(out)

    def conjugate_transpose(self) -> 'Matrix':
        if not self.algebra.is_complex:
            return self.transpose()
        out = allocate_matrix(self.kind, self.algebra, self.cols, self.rows)
        get_kernel('transpose', self.kind)(self._storage, out, self.algebra.conjugate)
        return Matrix(out)

    # =========================================================================
    # Square-matrix Reductions
    # =========================================================================

    def trace(self) -> Any:
        check_square(self.shape, "trace")
        algebra = self.algebra
        acc = algebra.zero
        for i in range(self.rows):
            acc = algebra.add(acc, self._storage.at(i, i))
        return acc

    def determinant(self) -> Any:
        """
        Determinant of a square matrix.

        Diagonal storage multiplies the diagonal slots. Dense and sparse
        storage run Gaussian elimination with partial pivoting on a dense
        working copy, choosing the pivot of largest magnitude.

        Raises:
            NonSquareOperand: If rows != cols
        """
        check_square(self.shape, "determinant")
        algebra = self.algebra
        if self.kind is G:
            det = algebra.one
            for value in self._storage.data:
                det = algebra.multiply(det, value)
            return det
        return _eliminate(algebra, self._storage.to_rows())

    # =========================================================================
    # Rows, Columns and Diagonal
    # =========================================================================

    def diagonal(self) -> Vector:
        """Diagonal as a vector of length min(rows, cols); sparse for sparse storage."""
        n = min(self.rows, self.cols)
        at = self._storage.at
        if self.kind is S:
            out = SparseVectorStorage(self.algebra, n)
            out.load_pairs((i, at(i, i)) for i in range(n))
            return Vector(out)
        return Vector(DenseVectorStorage(self.algebra, n, [at(i, i) for i in range(n)]))

    def set_diagonal(self, values: Union[Vector, Sequence[Any]]) -> None:
        values = self._vector_values(values, min(self.rows, self.cols), "set_diagonal")
        for i, value in enumerate(values):
            self._storage.set_at(i, i, value)

    def row(self, index: int) -> Vector:
        """Copy of one row; dense for dense storage, sparse otherwise."""
        check_index(index, self.rows, "row")
        if self.kind is D:
            return Vector(DenseVectorStorage(self.algebra, self.cols,
                                             [self._storage.at(index, c) for c in range(self.cols)]))
        out = SparseVectorStorage(self.algebra, self.cols)
        out.load_pairs(self._storage.row_entries(index))
        return Vector(out)

    def column(self, index: int) -> Vector:
        """Copy of one column; dense for dense storage, sparse otherwise."""
        check_index(index, self.cols, "column")
        if self.kind is D:
            start = index * self.rows
            return Vector(DenseVectorStorage(self.algebra, self.rows,
                                             self._storage.data[start:start + self.rows]))
        at = self._storage.at
        out = SparseVectorStorage(self.algebra, self.rows)
        out.load_pairs((r, at(r, index)) for r in range(self.rows))
        return Vector(out)

    def _check_diagonal_line(self, values: List[Any], keep: int, context: str) -> None:
        if self.kind is not G:
            return
        is_zero = self.algebra.is_zero
        for i, value in enumerate(values):
            if i != keep and not is_zero(value):
                raise UnsupportedStructuralOperation(
                    f"{context}: would set off-diagonal element of a diagonal matrix")

    def set_row(self, index: int, values: Union[Vector, Sequence[Any]]) -> None:
        """
        Overwrite one row in place.

        Raises:
            UnsupportedStructuralOperation: For diagonal storage when any
                value off the diagonal is nonzero (nothing is written)
        """
        check_index(index, self.rows, "row")
        values = self._vector_values(values, self.cols, "set_row")
        self._check_diagonal_line(values, index, "set_row")
        for c, value in enumerate(values):
            self._storage.set_at(index, c, value)

    def set_column(self, index: int, values: Union[Vector, Sequence[Any]]) -> None:
        """Overwrite one column in place (same diagonal rule as set_row)."""
        check_index(index, self.cols, "column")
        values = self._vector_values(values, self.rows, "set_column")
        self._check_diagonal_line(values, index, "set_column")
        for r, value in enumerate(values):
            self._storage.set_at(r, index, value)

    # =========================================================================
    # Norms
    # =========================================================================

    def row_norms(self, p: float = 2) -> np.ndarray:
        """p-norm of every row as a float64 array."""
        absolute = self.algebra.absolute
        per_row = [[] for _ in range(self.rows)]
        for r, _, value in self._storage.enumerate_nonzero():
            per_row[r].append(absolute(value))
        return np.array([p_norm(m, p) for m in per_row], dtype=np.float64)

    def column_norms(self, p: float = 2) -> np.ndarray:
        """p-norm of every column as a float64 array."""
        absolute = self.algebra.absolute
        per_col = [[] for _ in range(self.cols)]
        for _, c, value in self._storage.enumerate_nonzero():
            per_col[c].append(absolute(value))
        return np.array([p_norm(m, p) for m in per_col], dtype=np.float64)

    def row_sums(self) -> Vector:
        """Sum of every row as a dense vector."""
        return self._line_sums(0, None)

    def column_sums(self) -> Vector:
        return self._line_sums(1, None)

    def row_absolute_sums(self) -> Vector:
        """Sum of |x| over every row, as a dense vector of the same element type."""
        return self._line_sums(0, self.algebra.absolute)

    def column_absolute_sums(self) -> Vector:
        return self._line_sums(1, self.algebra.absolute)

    def _line_sums(self, axis: int, magnitude) -> Vector:
        algebra = self.algebra
        add, coerce = algebra.add, algebra.coerce
        sums = [algebra.zero] * (self.rows if axis == 0 else self.cols)
        for r, c, value in self._storage.enumerate_nonzero():
            line = r if axis == 0 else c
            sums[line] = add(sums[line], value if magnitude is None else coerce(magnitude(value)))
        return Vector(DenseVectorStorage(algebra, len(sums), sums))

    def normalize_rows(self, p: float = 2) -> 'Matrix':
        """Divide every row by its p-norm; zero rows stay zero."""
        norms = self.row_norms(p)
        return self._normalized(lambda r, c: norms[r])

    def normalize_columns(self, p: float = 2) -> 'Matrix':
        """Divide every column by its p-norm; zero columns stay zero."""
        norms = self.column_norms(p)
        return self._normalized(lambda r, c: norms[c])

    def _normalized(self, norm_of) -> 'Matrix':
        algebra = self.algebra
        coerce, div = algebra.coerce, algebra.divide

        def fn(r, c, x):
            norm = float(norm_of(r, c))
            return x if norm == 0.0 else div(x, coerce(norm))

        return self._map_indexed(fn)

    def l1_norm(self) -> float:
        """Maximum absolute column sum."""
        return float(self.column_norms(1).max(initial=0.0))

    def infinity_norm(self) -> float:
        """Maximum absolute row sum."""
        return float(self.row_norms(1).max(initial=0.0))

    def frobenius_norm(self) -> float:
        return p_norm(self._magnitudes(), 2)

    def l2_norm(self) -> float:
        """Spectral norm (largest singular value)."""
        if self.kind is G:
            return p_norm(self._magnitudes(), math.inf)
        if self.rows == 0 or self.cols == 0:
            return 0.0
        return float(np.linalg.norm(self._to_numpy_working(), 2))

    def norm(self, p: Union[float, str] = 2) -> float:
        """
        Matrix norm for p in {1, 2, inf, 'fro'}.

        Raises:
            ValueError: For any other p
        """
        if p == 'fro':
            return self.frobenius_norm()
        if p == 1:
            return self.l1_norm()
        if p == 2:
            return self.l2_norm()
        if p == math.inf:
            return self.infinity_norm()
        raise ValueError(f"Unsupported matrix norm: {p!r}")

    def _to_numpy_working(self) -> np.ndarray:
        to_complex = self.algebra.to_complex
        array = np.zeros(self.shape, dtype=np.complex128)
        for r, c, value in self._storage.enumerate_nonzero():
            array[r, c] = to_complex(value)
        return array if self.algebra.is_complex else array.real

    # =========================================================================
    # Block Composition
    # =========================================================================

    def append(self, other: 'Matrix') -> 'Matrix':
        """[self | other]; two diagonals give a sparse result."""
        self._check_operand(other)
        if self.rows != other.rows:
            raise DimensionMismatch(
                f"append: row counts {self.rows} and {other.rows} do not match")
        return self._compose(other, 'append', OpClass.APPEND,
                             self.rows, self.cols + other.cols)

    def stack(self, other: 'Matrix') -> 'Matrix':
        """[self ; other]; two diagonals give a sparse result."""
        self._check_operand(other)
        if self.cols != other.cols:
            raise DimensionMismatch(
                f"stack: column counts {self.cols} and {other.cols} do not match")
        return self._compose(other, 'stack', OpClass.STACK,
                             self.rows + other.rows, self.cols)

    def diagonal_stack(self, other: 'Matrix') -> 'Matrix':
        """[self 0 ; 0 other]."""
        self._check_operand(other)
        return self._compose(other, 'diagonal_stack', OpClass.DIAGONAL_STACK,
                             self.rows + other.rows, self.cols + other.cols)

    # =========================================================================
    # Sub-matrices and Reshaping
    # =========================================================================

    def sub_matrix(self, row_index: int, row_count: int, col_index: int, col_count: int) -> 'Matrix':
        """
        Copy of the block starting at (row_index, col_index).

        A diagonal source stays diagonal when the block starts on the
        diagonal (row_index == col_index) and becomes sparse otherwise.
        """
        if row_count < 0 or col_count < 0:
            raise DimensionMismatch(f"sub_matrix: negative size ({row_count}, {col_count})")
        if row_index < 0 or row_index + row_count > self.rows:
            raise IndexOutOfRange(
                f"sub_matrix: rows [{row_index}, {row_index + row_count}) outside [0, {self.rows})")
        if col_index < 0 or col_index + col_count > self.cols:
            raise IndexOutOfRange(
                f"sub_matrix: columns [{col_index}, {col_index + col_count}) outside [0, {self.cols})")
        if self.kind is G and row_index == col_index:
            kind = G
        else:
            kind = resolve_restructured_kind(self.kind)
        out = allocate_matrix(kind, self.algebra, row_count, col_count)
        get_kernel('sub_matrix', self.kind)(self._storage, out, row_index, col_index)
        return Matrix(out)

    def set_sub_matrix(self, row_index: int, col_index: int, block: 'Matrix') -> None:
        """
        Overwrite the block starting at (row_index, col_index) in place.

        Raises:
            UnsupportedStructuralOperation: For diagonal storage when the
                block holds a nonzero that would land off the diagonal
        """
        self._check_operand(block)
        if row_index < 0 or row_index + block.rows > self.rows \
                or col_index < 0 or col_index + block.cols > self.cols:
            raise IndexOutOfRange(
                f"set_sub_matrix: block {block.shape} at ({row_index}, {col_index}) "
                f"does not fit {self.shape}")
        if self.kind is G:
            for r, c, _ in block.storage.enumerate_nonzero():
                if r + row_index != c + col_index:
                    raise UnsupportedStructuralOperation(
                        "set_sub_matrix: would set off-diagonal element of a diagonal matrix")
        source, target = block.storage, self._storage
        for r in range(block.rows):
            for c in range(block.cols):
                target.set_at(row_index + r, col_index + c, source.at(r, c))

    def insert_row(self, index: int, values: Union[Vector, Sequence[Any]]) -> 'Matrix':
        """New matrix with `values` inserted as row `index`; diagonal becomes sparse."""
        check_insert_index(index, self.rows, "row")
        values = self._vector_values(values, self.cols, "insert_row")
        return self._restructured('insert_row', self.rows + 1, self.cols,
                                  index, list(enumerate(values)))

    def insert_column(self, index: int, values: Union[Vector, Sequence[Any]]) -> 'Matrix':
        check_insert_index(index, self.cols, "column")
        values = self._vector_values(values, self.rows, "insert_column")
        return self._restructured('insert_column', self.rows, self.cols + 1,
                                  index, list(enumerate(values)))

    def remove_row(self, index: int) -> 'Matrix':
        check_index(index, self.rows, "row")
        return self._restructured('remove_row', self.rows - 1, self.cols, index)

    def remove_column(self, index: int) -> 'Matrix':
        check_index(index, self.cols, "column")
        return self._restructured('remove_column', self.rows, self.cols - 1, index)

    # =========================================================================
    # Permutation (in place)
    # =========================================================================

    def permute_rows(self, permutation: Permutation) -> None:
        """Move row i to row permutation[i], in place.

        Raises:
            UnsupportedStructuralOperation: For diagonal storage
        """
        self._check_permutation(permutation, self.rows, "permute_rows")
        self._replace_cells((permutation[r], c, v) for r, c, v in self._storage.enumerate_nonzero())

    def permute_columns(self, permutation: Permutation) -> None:
        """Move column j to column permutation[j], in place."""
        self._check_permutation(permutation, self.cols, "permute_columns")
        self._replace_cells((r, permutation[c], v) for r, c, v in self._storage.enumerate_nonzero())

    def _check_permutation(self, permutation: Permutation, size: int, context: str) -> None:
        require_argument(permutation, 'permutation')
        if self.kind is G:
            raise UnsupportedStructuralOperation(
                f"{context}: not supported by diagonal storage, convert to dense or sparse first")
        if len(permutation) != size:
            raise DimensionMismatch(
                f"{context}: permutation of length {len(permutation)} for dimension {size}")

    def _replace_cells(self, entries) -> None:
        entries = list(entries)
        storage = self._storage
        if storage.kind is D:
            fresh = DenseMatrixStorage(self.algebra, self.rows, self.cols)
            fresh.load_entries(entries)
            storage.data[:] = fresh.data
        else:
            fresh = SparseMatrixStorage(self.algebra, self.rows, self.cols)
            fresh.load_entries(entries)
            storage.row_pointers = fresh.row_pointers
            storage.indices = fresh.indices
            storage.values = fresh.values

    # =========================================================================
    # Predicates
    # =========================================================================

    def is_symmetric(self) -> bool:
        if self.rows != self.cols:
            return False
        at = self._storage.at
        return all(value == at(c, r) for r, c, value in self._storage.enumerate_nonzero())

    def equals(self, other: 'Matrix') -> bool:
        """Cell-by-cell equality, independent of storage kind."""
        if not isinstance(other, Matrix) or self.algebra != other.algebra:
            return False
        return self._storage.equals(other._storage)

    # =========================================================================
    # Copy and Conversion
    # =========================================================================

    def clear(self) -> None:
        self._storage.clear()

    def copy(self) -> 'Matrix':
        return Matrix(self._storage.copy())

    def to_array(self) -> List[List[Any]]:
        """2-D list of rows (always a copy)."""
        return self._storage.to_rows()

    def to_row_wise_array(self) -> List[Any]:
        return self._storage.to_row_major()

    def to_column_wise_array(self) -> List[Any]:
        return self._storage.to_column_major()

    def to_numpy(self) -> np.ndarray:
        from ._interop import to_numpy
        return to_numpy(self)

    def to_dense(self) -> 'Matrix':
        return Matrix(DenseMatrixStorage(self.algebra, self.rows, self.cols,
                                         self._storage.to_column_major()))

    def to_sparse(self) -> 'Matrix':
        out = SparseMatrixStorage(self.algebra, self.rows, self.cols)
        out.load_rows(self._storage.all_row_entries())
        return Matrix(out)

    # =========================================================================
    # Operators
    # =========================================================================

    def __add__(self, other) -> 'Matrix':
        return self.add(other)

    def __radd__(self, scalar) -> 'Matrix':
        return self.add(scalar)

    def __sub__(self, other) -> 'Matrix':
        return self.subtract(other)

    def __rsub__(self, scalar) -> 'Matrix':
        return self.subtract_from(scalar)

    def __neg__(self) -> 'Matrix':
        return self.negate()

    def __mul__(self, other):
        return self.multiply(other)

    def __rmul__(self, scalar):
        return self.scale(scalar)

    def __matmul__(self, other):
        if isinstance(other, (Matrix, Vector)):
            return self.multiply(other)
        return NotImplemented

    def __truediv__(self, scalar):
        return self.divide(scalar)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.equals(other)

    __hash__ = None

    def __repr__(self) -> str:
        return (f"Matrix(shape={self.shape}, kind={self.kind.value}, "
                f"value_count={self.value_count}, dtype={self.algebra.name})")


# =============================================================================
# Helpers
# =============================================================================

def _eliminate(algebra: ElementAlgebra, a: List[List[Any]]) -> Any:
    """Determinant by Gaussian elimination with partial pivoting (destroys `a`)."""
    n = len(a)
    sub, mul, div = algebra.subtract, algebra.multiply, algebra.divide
    absolute, is_zero = algebra.absolute, algebra.is_zero
    det = algebra.one
    for k in range(n):
        pivot = max(range(k, n), key=lambda r: absolute(a[r][k]))
        if is_zero(a[pivot][k]):
            return algebra.zero
        if pivot != k:
            a[k], a[pivot] = a[pivot], a[k]
            det = algebra.negate(det)
        p = a[k][k]
        det = mul(det, p)
        row_k = a[k]
        for r in range(k + 1, n):
            factor = div(a[r][k], p)
            if is_zero(factor):
                continue
            row_r = a[r]
            for c in range(k + 1, n):
                row_r[c] = sub(row_r[c], mul(factor, row_k[c]))
    return det
