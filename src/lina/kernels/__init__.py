"""
Storage kernels.

Free functions keyed by (operation, operand storage kinds). Importing
this package registers every kernel; callers look them up with
get_kernel() after the result kind has been resolved.

Operations:

    Matrix binary   add, subtract, pointwise_multiply, pointwise_divide,
                    matrix_multiply, append, stack, diagonal_stack, kronecker
    Matrix unary    map, map_indexed, transpose, sub_matrix, insert_row,
                    insert_column, remove_row, remove_column
    Vector          vector_add, vector_subtract, vector_pointwise_multiply,
                    vector_pointwise_divide, vector_map, dot, outer_product
    Mixed           matrix_vector, vector_matrix
"""

from ._registry import ANY, KernelRegistry, get_kernel, register_kernel
from . import _dense, _diagonal, _sparse, _structure, _vector  # noqa: F401  (registration)

__all__ = [
    'ANY',
    'KernelRegistry',
    'register_kernel',
    'get_kernel',
]
