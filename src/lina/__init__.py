"""
lina - Generic Linear Algebra with Storage-Aware Dispatch

Matrices and vectors generic over an element algebra (float32, float64,
complex64, complex128, or a user-supplied ElementAlgebra) and backed by
dense, sparse or diagonal storage.

Every binary operation resolves the storage kind of its result from the
operand kinds before computing anything, so sparsity and diagonal
structure survive whenever that is mathematically sound:

    ┌──────────────────────────────────────────────┐
    │            Vector / Matrix surface           │
    ├──────────────────────────────────────────────┤
    │  Result-type resolution (RESULT_KINDS)       │
    ├──────────────────────────────────────────────┤
    │  Kernels keyed by (op, left kind, right kind)│
    ├──────────────────────────────────────────────┤
    │  Storage: DENSE | SPARSE | DIAGONAL          │
    ├──────────────────────────────────────────────┤
    │  ElementAlgebra                              │
    └──────────────────────────────────────────────┘

Example:
    >>> import lina
    >>> build = lina.MatrixBuilder('float64')
    >>> d = build.diagonal_identity(3)
    >>> s = build.sparse_of_indexed(3, 3, [(0, 2, 5.0)])
    >>> (d + s).kind
    StorageKind.SPARSE
    >>> d.append(d).kind
    StorageKind.SPARSE
"""

__version__ = '0.1.0'

from ._algebra import (
    ElementAlgebra,
    Float64Algebra,
    Float32Algebra,
    Complex128Algebra,
    Complex64Algebra,
    algebra_for,
)
from ._dtypes import DType, float32, float64, complex64, complex128
from ._errors import (
    LinaError,
    DimensionMismatch,
    NonSquareOperand,
    ArgumentMissing,
    IndexOutOfRange,
    ElementTypeMismatch,
    UnsupportedStructuralOperation,
)
from ._config import get_config, set_default_dtype, set_parallelism
from .storage import StorageKind
from ._resolve import (
    OpClass,
    RESULT_KINDS,
    resolve_matrix_kind,
    resolve_vector_kind,
    resolve_matrix_vector_kind,
)
from ._permutation import Permutation
from ._vector import Vector
from ._matrix import Matrix
from ._builder import MatrixBuilder, VectorBuilder
from ._interop import to_numpy, from_numpy, to_scipy, from_scipy

__all__ = [
    # Version
    '__version__',

    # Element algebra
    'ElementAlgebra',
    'Float64Algebra',
    'Float32Algebra',
    'Complex128Algebra',
    'Complex64Algebra',
    'algebra_for',

    # Type constants
    'DType',
    'float32',
    'float64',
    'complex64',
    'complex128',

    # Errors
    'LinaError',
    'DimensionMismatch',
    'NonSquareOperand',
    'ArgumentMissing',
    'IndexOutOfRange',
    'ElementTypeMismatch',
    'UnsupportedStructuralOperation',

    # Configuration
    'get_config',
    'set_default_dtype',
    'set_parallelism',

    # Dispatch
    'StorageKind',
    'OpClass',
    'RESULT_KINDS',
    'resolve_matrix_kind',
    'resolve_vector_kind',
    'resolve_matrix_vector_kind',

    # Core classes
    'Permutation',
    'Vector',
    'Matrix',
    'MatrixBuilder',
    'VectorBuilder',

    # Conversion
    'to_numpy',
    'from_numpy',
    'to_scipy',
    'from_scipy',
]
