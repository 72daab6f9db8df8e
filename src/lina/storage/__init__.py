"""Storage representations.

Three concrete backings share one per-cell read/write contract:

    Kind        Vector                  Matrix
    ---------------------------------------------------------
    DENSE       DenseVectorStorage      DenseMatrixStorage (column-major)
    SPARSE      SparseVectorStorage     SparseMatrixStorage (CSR)
    DIAGONAL    -                       DiagonalMatrixStorage

allocate_vector() / allocate_matrix() create an all-zero storage of a
given kind; kernels write their results into such fresh storages.
"""

from .._algebra import ElementAlgebra
from ._base import MatrixStorage, StorageKind, VectorStorage
from ._dense import DenseMatrixStorage, DenseVectorStorage
from ._diagonal import DiagonalMatrixStorage
from ._sparse import SparseMatrixStorage, SparseVectorStorage

__all__ = [
    'StorageKind',
    'VectorStorage',
    'MatrixStorage',
    'DenseVectorStorage',
    'DenseMatrixStorage',
    'SparseVectorStorage',
    'SparseMatrixStorage',
    'DiagonalMatrixStorage',
    'allocate_vector',
    'allocate_matrix',
]


_VECTOR_CLASSES = {
    StorageKind.DENSE: DenseVectorStorage,
    StorageKind.SPARSE: SparseVectorStorage,
}

_MATRIX_CLASSES = {
    StorageKind.DENSE: DenseMatrixStorage,
    StorageKind.SPARSE: SparseMatrixStorage,
    StorageKind.DIAGONAL: DiagonalMatrixStorage,
}


def allocate_vector(kind: StorageKind, algebra: ElementAlgebra, length: int) -> VectorStorage:
    """Allocate an all-zero vector storage of the given kind."""
    if kind not in _VECTOR_CLASSES:
        raise ValueError(f"No vector storage for kind {kind!r}")
    return _VECTOR_CLASSES[kind](algebra, length)


def allocate_matrix(kind: StorageKind, algebra: ElementAlgebra, rows: int, cols: int) -> MatrixStorage:
    """Allocate an all-zero matrix storage of the given kind."""
    return _MATRIX_CLASSES[kind](algebra, rows, cols)
