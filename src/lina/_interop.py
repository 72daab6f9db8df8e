"""
Interop with numpy and scipy.sparse.

numpy is a hard dependency; scipy is optional (pip install lina[interop])
and only imported by to_scipy()/from_scipy().

Dtype mapping:

    numpy dtype         lina dtype
    ---------------------------------
    float32             float32
    complex64           complex64
    other complex       complex128
    everything else     float64
"""

from typing import Any, Optional, Union

import numpy as np

from ._algebra import algebra_for
from ._builder import MatrixBuilder, VectorBuilder
from ._errors import ElementTypeMismatch, require_argument
from ._matrix import Matrix
from ._vector import Vector
from .storage import DiagonalMatrixStorage, SparseMatrixStorage, StorageKind

__all__ = ['to_numpy', 'from_numpy', 'to_scipy', 'from_scipy']


def _infer_dtype(array: np.ndarray) -> str:
    if array.dtype == np.float32:
        return 'float32'
    if array.dtype == np.complex64:
        return 'complex64'
    if np.iscomplexobj(array):
        return 'complex128'
    return 'float64'


def _numpy_dtype(algebra) -> Any:
    return algebra.numpy_dtype if algebra.numpy_dtype is not None else object


def to_numpy(obj: Union[Vector, Matrix]) -> np.ndarray:
    """
    Dense numpy copy of a Vector (1-D) or Matrix (2-D).

    Custom element algebras without a numpy dtype give an object array.
    """
    require_argument(obj, 'obj')
    if not isinstance(obj, (Vector, Matrix)):
        raise TypeError(f"Expected Vector or Matrix, got {type(obj).__name__}")
    algebra = obj.algebra
    dtype = _numpy_dtype(algebra)
    if isinstance(obj, Vector):
        result = np.full(obj.count, algebra.zero, dtype=dtype)
        for i, value in obj.storage.enumerate_nonzero():
            result[i] = value
        return result
    result = np.full(obj.shape, algebra.zero, dtype=dtype)
    for r, c, value in obj.storage.enumerate_nonzero():
        result[r, c] = value
    return result


def from_numpy(
    array: Any,
    kind: Union[StorageKind, str] = StorageKind.DENSE,
    dtype: Optional[Any] = None,
) -> Union[Vector, Matrix]:
    """
    Create a Vector (1-D input) or Matrix (2-D input) from a numpy array.

    Args:
        array: Array-like; copied.
        kind: Target storage kind. Vectors support dense and sparse.
        dtype: Element type; inferred from the array when None.

    Example:
        >>> m = from_numpy(np.eye(3), kind='diagonal')
        >>> m.kind
        StorageKind.DIAGONAL
    """
    require_argument(array, 'array')
    if not isinstance(array, np.ndarray):
        array = np.asarray(array)
    kind = StorageKind(kind) if isinstance(kind, str) else kind
    dtype = _infer_dtype(array) if dtype is None else dtype

    if array.ndim == 1:
        build = VectorBuilder(dtype)
        values = array.tolist()
        if kind is StorageKind.DENSE:
            return build.dense_of_array(values)
        if kind is StorageKind.SPARSE:
            return build.sparse_of_array(values)
        raise ValueError(f"No vector storage for kind {kind!r}")

    if array.ndim == 2:
        build = MatrixBuilder(dtype)
        rows = array.tolist()
        if kind is StorageKind.DENSE:
            return build.dense_of_array(rows)
        if kind is StorageKind.SPARSE:
            return build.sparse_of_array(rows)
        return build.diagonal_of_array(rows)

    raise ValueError(f"Expected 1D or 2D array, got {array.ndim}D")


def to_scipy(matrix: Matrix) -> Any:
    """
    Convert to scipy.sparse.csr_matrix (any storage kind).

    Raises:
        ImportError: If scipy is not installed
        ElementTypeMismatch: For element algebras without a numpy dtype
    """
    try:
        import scipy.sparse as sp
    except ImportError:
        raise ImportError("scipy required for to_scipy()")

    require_argument(matrix, 'matrix')
    algebra = matrix.algebra
    if algebra.numpy_dtype is None:
        raise ElementTypeMismatch(f"Element type {algebra.name} has no numpy dtype")

    indptr = [0]
    indices = []
    data = []
    for entries in matrix.storage.all_row_entries():
        for c, value in entries:
            indices.append(c)
            data.append(value)
        indptr.append(len(indices))
    return sp.csr_matrix(
        (np.array(data, dtype=algebra.numpy_dtype),
         np.array(indices, dtype=np.int64),
         np.array(indptr, dtype=np.int64)),
        shape=matrix.shape,
    )


def from_scipy(mat: Any, dtype: Optional[Any] = None) -> Matrix:
    """
    Create a Matrix from a scipy sparse matrix (copied).

    A dia_matrix holding only the main diagonal becomes diagonal
    storage; every other input becomes sparse (CSR) storage.

    Example:
        >>> import scipy.sparse as sp
        >>> from_scipy(sp.csr_matrix([[1, 0], [0, 2]])).kind
        StorageKind.SPARSE
    """
    try:
        import scipy.sparse as sp
    except ImportError:
        raise ImportError("scipy required for from_scipy()")

    require_argument(mat, 'mat')
    if not sp.issparse(mat):
        raise TypeError(f"Expected a scipy sparse matrix, got {type(mat).__name__}")

    algebra = algebra_for(_infer_dtype(mat.data) if dtype is None else dtype)
    coerce = algebra.coerce
    rows, cols = mat.shape

    if mat.format == 'dia' and list(mat.offsets) in ([0], []):
        values = [coerce(v) for v in mat.diagonal().tolist()]
        return Matrix(DiagonalMatrixStorage(algebra, rows, cols, values))

    csr = sp.csr_matrix(mat, copy=True)
    csr.sum_duplicates()
    csr.sort_indices()
    indptr = csr.indptr.tolist()
    indices = csr.indices.tolist()
    data = csr.data.tolist()
    storage = SparseMatrixStorage(algebra, rows, cols)
    storage.load_rows(
        [(indices[k], coerce(data[k])) for k in range(indptr[r], indptr[r + 1])]
        for r in range(rows)
    )
    return Matrix(storage)
