"""
Vector

One Vector class for every storage kind. The vector holds a storage and
delegates all cell work to the kernels; binary operations ask the
resolution table for the result kind first, allocate a fresh result,
then run the kernel registered for the operand kinds.

All operations return new vectors except item assignment,
set_sub_vector() and clear(), which mutate in place after validating
every argument.
"""

import math
import operator
from typing import Any, Iterator, List, Union

from ._algebra import ElementAlgebra
from ._errors import (
    DimensionMismatch,
    IndexOutOfRange,
    check_index,
    check_same_algebra,
    require_argument,
)
from ._resolve import resolve_outer_kind, resolve_vector_kind
from .kernels import get_kernel
from .storage import (
    DenseVectorStorage,
    SparseVectorStorage,
    StorageKind,
    VectorStorage,
    allocate_matrix,
    allocate_vector,
)

__all__ = ['Vector', 'p_norm']

Number = Union[int, float, complex]


def _same(value):
    return value


def p_norm(magnitudes: List[float], p: float) -> float:
    """
    p-norm of a list of magnitudes: (sum m^p)^(1/p), max m for p = inf.

    Raises:
        ValueError: If p <= 0
    """
    if p == 1:
        return math.fsum(magnitudes)
    if p == 2:
        return math.hypot(*magnitudes)
    if p == math.inf:
        return max(magnitudes, default=0.0)
    if p <= 0:
        raise ValueError(f"Norm order must be positive, got {p}")
    return math.fsum(m ** p for m in magnitudes) ** (1.0 / p)


class Vector:
    """
    Vector over an element algebra, backed by dense or sparse storage.

    Attributes:
        count: Number of elements (fixed after construction).
        kind: StorageKind of the backing storage.
        value_count: Materialized cells (count for dense, stored
                     nonzeros for sparse).

    Example:
        >>> v = VectorBuilder().sparse(10000)
        >>> v[200] = 3.0
        >>> v.value_count
        1
        >>> (v * 0).value_count
        0
    """

    __slots__ = ('_storage',)

    def __init__(self, storage: VectorStorage):
        require_argument(storage, 'storage')
        self._storage = storage

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def storage(self) -> VectorStorage:
        return self._storage

    @property
    def algebra(self) -> ElementAlgebra:
        return self._storage.algebra

    @property
    def count(self) -> int:
        return self._storage.length

    @property
    def kind(self) -> StorageKind:
        return self._storage.kind

    @property
    def value_count(self) -> int:
        return self._storage.value_count

    def __len__(self) -> int:
        return self._storage.length

    def __iter__(self) -> Iterator[Any]:
        at = self._storage.at
        for i in range(self._storage.length):
            yield at(i)

    # =========================================================================
    # Element Access
    # =========================================================================

    def __getitem__(self, index: int) -> Any:
        check_index(index, self.count)
        return self._storage.at(index)

    def __setitem__(self, index: int, value: Any) -> None:
        check_index(index, self.count)
        self._storage.set_at(index, self.algebra.coerce(value))

    # =========================================================================
    # Internal Helpers
    # =========================================================================

    def _check_operand(self, other: 'Vector', context: str) -> None:
        require_argument(other, 'other')
        check_same_algebra(self.algebra, other.algebra)
        if self.count != other.count:
            raise DimensionMismatch(
                f"{context}: vector lengths {self.count} and {other.count} do not match")

    def _binary(self, other: 'Vector', operation: str) -> 'Vector':
        self._check_operand(other, operation)
        kind = resolve_vector_kind(self.kind, other.kind)
        out = allocate_vector(kind, self.algebra, self.count)
        get_kernel(operation, self.kind, other.kind)(self._storage, other._storage, out)
        return Vector(out)

    def _map(self, fn) -> 'Vector':
        out = allocate_vector(self.kind, self.algebra, self.count)
        get_kernel('vector_map', self.kind)(self._storage, out, fn)
        return Vector(out)

    def _map_cells(self, fn) -> 'Vector':
        """Like _map, but fn also sees the unstored zeros of a sparse vector."""
        out = allocate_vector(self.kind, self.algebra, self.count)
        get_kernel('vector_map_cells', self.kind)(self._storage, out, fn)
        return Vector(out)

    def _extreme_index(self, key, prefer) -> int:
        if self.count == 0:
            raise ValueError("extreme value of an empty vector")
        values = self._storage.to_list()
        best_index, best = 0, key(values[0])
        for i in range(1, len(values)):
            candidate = key(values[i])
            if prefer(candidate, best):
                best_index, best = i, candidate
        return best_index

    def _check_ordered(self, context: str) -> None:
        if self.algebra.is_complex:
            raise TypeError(f"{context}: complex elements have no ordering")

    def _absolute_values(self) -> List[float]:
        absolute = self.algebra.absolute
        return [absolute(v) for _, v in self._storage.enumerate_nonzero()]

    # =========================================================================
    # Arithmetic
    # =========================================================================

    def add(self, other: Union['Vector', Number]) -> 'Vector':
        """Add a vector, or add a scalar to every element.

        A sparse vector shifted by a nonzero scalar stays sparse and
        stores every element that did not land on zero.
        """
        if isinstance(other, Vector):
            return self._binary(other, 'vector_add')
        require_argument(other, 'other')
        algebra = self.algebra
        scalar = algebra.coerce(other)
        if algebra.is_zero(scalar):
            return self.copy()
        add = algebra.add
        return self._map_cells(lambda x: add(x, scalar))

    def subtract(self, other: Union['Vector', Number]) -> 'Vector':
        if isinstance(other, Vector):
            return self._binary(other, 'vector_subtract')
        require_argument(other, 'other')
        algebra = self.algebra
        scalar = algebra.coerce(other)
        if algebra.is_zero(scalar):
            return self.copy()
        sub = algebra.subtract
        return self._map_cells(lambda x: sub(x, scalar))

    def subtract_from(self, scalar: Number) -> 'Vector':
        """scalar - self[i] for every element."""
        require_argument(scalar, 'scalar')
        algebra = self.algebra
        scalar = algebra.coerce(scalar)
        if algebra.is_zero(scalar):
            return self.negate()
        sub = algebra.subtract
        return self._map_cells(lambda x: sub(scalar, x))

    def pointwise_multiply(self, other: 'Vector') -> 'Vector':
        return self._binary(other, 'vector_pointwise_multiply')

    def pointwise_divide(self, other: 'Vector') -> 'Vector':
        return self._binary(other, 'vector_pointwise_divide')

    def multiply(self, scalar: Number) -> 'Vector':
        """Scale by a scalar.

        Scaling by zero returns an all-zero vector of the same kind (a
        sparse result stores nothing); scaling by one returns a copy.
        """
        require_argument(scalar, 'scalar')
        algebra = self.algebra
        scalar = algebra.coerce(scalar)
        if algebra.is_zero(scalar):
            return Vector(allocate_vector(self.kind, algebra, self.count))
        if algebra.is_one(scalar):
            return self.copy()
        mul = algebra.multiply
        return self._map(lambda x: mul(x, scalar))

    def divide(self, scalar: Number) -> 'Vector':
        require_argument(scalar, 'scalar')
        algebra = self.algebra
        scalar = algebra.coerce(scalar)
        if algebra.is_one(scalar):
            return self.copy()
        div = algebra.divide
        return self._map(lambda x: div(x, scalar))

    def negate(self) -> 'Vector':
        return self._map(self.algebra.negate)

    def conjugate(self) -> 'Vector':
        if not self.algebra.is_complex:
            return self.copy()
        return self._map(self.algebra.conjugate)

    # =========================================================================
    # Products
    # =========================================================================

    def dot_product(self, other: 'Vector') -> Any:
        """Sum of self[i] * other[i]."""
        self._check_operand(other, 'dot_product')
        return get_kernel('dot', self.kind, other.kind)(self._storage, other._storage)

    def conjugate_dot_product(self, other: 'Vector') -> Any:
        """Sum of conj(self[i]) * other[i]."""
        self._check_operand(other, 'conjugate_dot_product')
        return get_kernel('dot', self.kind, other.kind)(
            self._storage, other._storage, conjugate_left=True)

    def outer_product(self, other: 'Vector') -> 'Matrix':
        """Matrix m[i, j] = self[i] * other[j]; dense if either side is dense."""
        from ._matrix import Matrix

        require_argument(other, 'other')
        check_same_algebra(self.algebra, other.algebra)
        kind = resolve_outer_kind(self.kind, other.kind)
        out = allocate_matrix(kind, self.algebra, self.count, other.count)
        get_kernel('outer_product', self.kind, other.kind)(self._storage, other._storage, out)
        return Matrix(out)

    # =========================================================================
    # Norms and Reductions
    # =========================================================================

    def l1_norm(self) -> float:
        return p_norm(self._absolute_values(), 1)

    def l2_norm(self) -> float:
        return p_norm(self._absolute_values(), 2)

    def infinity_norm(self) -> float:
        return p_norm(self._absolute_values(), math.inf)

    def norm(self, p: float = 2) -> float:
        """p-norm: (sum |x_i|^p)^(1/p), or max |x_i| for p = inf."""
        return p_norm(self._absolute_values(), p)

    def normalize(self, p: float = 2) -> 'Vector':
        """Divide by the p-norm. A zero vector is returned unchanged (as a copy)."""
        norm = self.norm(p)
        if norm == 0.0:
            return self.copy()
        return self.divide(norm)

    def sum(self) -> Any:
        algebra = self.algebra
        add = algebra.add
        acc = algebra.zero
        for _, value in self._storage.enumerate_nonzero():
            acc = add(acc, value)
        return acc

    def absolute_maximum_index(self) -> int:
        """Index of the first element with the largest magnitude.

        Raises:
            ValueError: If the vector is empty
        """
        if self.count == 0:
            raise ValueError("absolute_maximum_index of an empty vector")
        absolute = self.algebra.absolute
        best, best_index = -1.0, 0
        for i, value in self._storage.enumerate_nonzero():
            magnitude = absolute(value)
            if magnitude > best:
                best, best_index = magnitude, i
        return best_index

    def absolute_maximum(self) -> Any:
        return self._storage.at(self.absolute_maximum_index())

    def absolute_minimum_index(self) -> int:
        """Index of the first element with the smallest magnitude.

        Unstored zeros of a sparse vector take part.
        """
        return self._extreme_index(self.algebra.absolute, operator.lt)

    def absolute_minimum(self) -> Any:
        return self._storage.at(self.absolute_minimum_index())

    def maximum_index(self) -> int:
        """Index of the first largest element.

        Raises:
            TypeError: For complex elements
            ValueError: If the vector is empty
        """
        self._check_ordered("maximum_index")
        return self._extreme_index(_same, operator.gt)

    def maximum(self) -> Any:
        return self._storage.at(self.maximum_index())

    def minimum_index(self) -> int:
        """Index of the first smallest element (same errors as maximum_index)."""
        self._check_ordered("minimum_index")
        return self._extreme_index(_same, operator.lt)

    def minimum(self) -> Any:
        return self._storage.at(self.minimum_index())

    # =========================================================================
    # Sub-vectors
    # =========================================================================

    def sub_vector(self, index: int, count: int) -> 'Vector':
        """
        Copy of elements [index, index + count), same storage kind.

        Raises:
            DimensionMismatch: If count < 0
            IndexOutOfRange: If the range does not lie inside the vector
        """
        if count < 0:
            raise DimensionMismatch(f"sub_vector: negative count {count}")
        if index < 0 or index + count > self.count:
            raise IndexOutOfRange(
                f"sub_vector: [{index}, {index + count}) outside [0, {self.count})")
        out = allocate_vector(self.kind, self.algebra, count)
        if self.kind is StorageKind.DENSE:
            out.data = self._storage.data[index:index + count]
        else:
            out.load_pairs(
                (i - index, v) for i, v in self._storage.enumerate_nonzero()
                if index <= i < index + count)
        return Vector(out)

    def set_sub_vector(self, index: int, values: 'Vector') -> None:
        """Overwrite elements [index, index + len(values)) in place."""
        require_argument(values, 'values')
        check_same_algebra(self.algebra, values.algebra)
        if index < 0 or index + values.count > self.count:
            raise IndexOutOfRange(
                f"set_sub_vector: [{index}, {index + values.count}) outside [0, {self.count})")
        storage, source = self._storage, values._storage
        if storage.kind is StorageKind.SPARSE:
            storage.clear_range(index, values.count)
            for i, value in source.enumerate_nonzero():
                storage.set_at(index + i, value)
            return
        for i in range(values.count):
            storage.set_at(index + i, source.at(i))

    # =========================================================================
    # Copy and Conversion
    # =========================================================================

    def clear(self) -> None:
        self._storage.clear()

    def copy(self) -> 'Vector':
        return Vector(self._storage.copy())

    def to_list(self) -> List[Any]:
        return self._storage.to_list()

    def to_numpy(self):
        from ._interop import to_numpy
        return to_numpy(self)

    def to_dense(self) -> 'Vector':
        return Vector(DenseVectorStorage(self.algebra, self.count, self._storage.to_list()))

    def to_sparse(self) -> 'Vector':
        out = SparseVectorStorage(self.algebra, self.count)
        out.load_pairs(self._storage.enumerate_nonzero())
        return Vector(out)

    def equals(self, other: 'Vector') -> bool:
        """Cell-by-cell equality, independent of storage kind."""
        if not isinstance(other, Vector) or self.algebra != other.algebra:
            return False
        return self._storage.equals(other._storage)

    # =========================================================================
    # Operators
    # =========================================================================

    def __add__(self, other) -> 'Vector':
        return self.add(other)

    def __radd__(self, scalar) -> 'Vector':
        return self.add(scalar)

    def __sub__(self, other) -> 'Vector':
        return self.subtract(other)

    def __rsub__(self, scalar) -> 'Vector':
        return self.subtract_from(scalar)

    def __neg__(self) -> 'Vector':
        return self.negate()

    def __mul__(self, other):
        from ._matrix import Matrix
        if isinstance(other, Vector):
            return self.dot_product(other)
        if isinstance(other, Matrix):
            return other.left_multiply(self)
        return self.multiply(other)

    def __rmul__(self, scalar):
        return self.multiply(scalar)

    def __matmul__(self, other):
        from ._matrix import Matrix
        if isinstance(other, Vector):
            return self.dot_product(other)
        if isinstance(other, Matrix):
            return other.left_multiply(self)
        return NotImplemented

    def __truediv__(self, scalar):
        return self.divide(scalar)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Vector):
            return NotImplemented
        return self.equals(other)

    __hash__ = None

    def __repr__(self) -> str:
        return (f"Vector(count={self.count}, kind={self.kind.value}, "
                f"value_count={self.value_count}, dtype={self.algebra.name})")
