"""Result-Type Resolution.

Every binary operation asks this module for the storage kind of its
result before any cell is computed. The answer depends only on the
operation class and the operands' storage kinds; the single documented
exception is the diagonal block refinement below.

Rules encoded in RESULT_KINDS:

    - Dense absorbs everything: any Dense operand gives Dense.
    - Sparse absorbs Diagonal: Sparse with Diagonal gives Sparse.
    - Diagonal with Diagonal stays Diagonal for value-preserving
      operations (add, pointwise, matrix multiply, diagonal stack,
      Kronecker) but degrades to Sparse for Append and Stack, whose
      off-diagonal block layout is no longer diagonal.

Diagonal block refinement:
    DiagonalStack of two diagonals is diagonal only when the left block
    is square; Kronecker of two diagonals only when both are square.
    Otherwise the result degrades to Sparse.

A new binary operation must add its rows here before it is implemented.
"""

import logging
from enum import Enum
from typing import Dict, Optional, Tuple

from .storage import StorageKind

__all__ = [
    'OpClass',
    'RESULT_KINDS',
    'VECTOR_RESULT_KINDS',
    'MATRIX_VECTOR_RESULT_KINDS',
    'resolve_matrix_kind',
    'resolve_vector_kind',
    'resolve_matrix_vector_kind',
    'resolve_outer_kind',
    'resolve_restructured_kind',
    'resolve_shifted_kind',
]

logger = logging.getLogger("lina.dispatch")

D = StorageKind.DENSE
S = StorageKind.SPARSE
G = StorageKind.DIAGONAL


class OpClass(Enum):
    """Binary operation classes with their own row in the result table."""
    ADDITIVE = 'additive'
    POINTWISE = 'pointwise'
    MATRIX_MULTIPLY = 'matrix_multiply'
    APPEND = 'append'
    STACK = 'stack'
    DIAGONAL_STACK = 'diagonal_stack'
    KRONECKER = 'kronecker'


def _row(dd, ds, dg, sd, ss, sg, gd, gs, gg) -> Dict[Tuple[StorageKind, StorageKind], StorageKind]:
    return {
        (D, D): dd, (D, S): ds, (D, G): dg,
        (S, D): sd, (S, S): ss, (S, G): sg,
        (G, D): gd, (G, S): gs, (G, G): gg,
    }


#                                       (D,D) (D,S) (D,G) (S,D) (S,S) (S,G) (G,D) (G,S) (G,G)
RESULT_KINDS: Dict[OpClass, Dict[Tuple[StorageKind, StorageKind], StorageKind]] = {
    OpClass.ADDITIVE:        _row(D,    D,    D,    D,    S,    S,    D,    S,    G),
    OpClass.POINTWISE:       _row(D,    D,    D,    D,    S,    S,    D,    S,    G),
    OpClass.MATRIX_MULTIPLY: _row(D,    D,    D,    D,    S,    S,    D,    S,    G),
    OpClass.APPEND:          _row(D,    D,    D,    D,    S,    S,    D,    S,    S),
    OpClass.STACK:           _row(D,    D,    D,    D,    S,    S,    D,    S,    S),
    OpClass.DIAGONAL_STACK:  _row(D,    D,    D,    D,    S,    S,    D,    S,    G),
    OpClass.KRONECKER:       _row(D,    D,    D,    D,    S,    S,    D,    S,    G),
}

# Vector (left, right) for additive and pointwise vector operations.
VECTOR_RESULT_KINDS: Dict[Tuple[StorageKind, StorageKind], StorageKind] = {
    (D, D): D, (D, S): D,
    (S, D): D, (S, S): S,
}

# (matrix kind, vector kind) -> result vector kind, for both matrix*vector
# and vector*matrix.
MATRIX_VECTOR_RESULT_KINDS: Dict[Tuple[StorageKind, StorageKind], StorageKind] = {
    (D, D): D, (D, S): D,
    (S, D): D, (S, S): S,
    (G, D): D, (G, S): S,
}


def resolve_matrix_kind(
    op: OpClass,
    left: StorageKind,
    right: StorageKind,
    left_shape: Optional[Tuple[int, int]] = None,
    right_shape: Optional[Tuple[int, int]] = None,
) -> StorageKind:
    """Storage kind of the result of a binary matrix operation.

    Args:
        op: Operation class.
        left, right: Operand storage kinds.
        left_shape, right_shape: Only consulted for the diagonal block
            refinement of DIAGONAL_STACK and KRONECKER.

    Example:
        >>> resolve_matrix_kind(OpClass.APPEND, StorageKind.DIAGONAL, StorageKind.DIAGONAL)
        StorageKind.SPARSE
    """
    kind = RESULT_KINDS[op][(left, right)]
    if kind is G:
        if op is OpClass.DIAGONAL_STACK and left_shape is not None \
                and left_shape[0] != left_shape[1]:
            kind = S
        elif op is OpClass.KRONECKER and left_shape is not None and right_shape is not None \
                and (left_shape[0] != left_shape[1] or right_shape[0] != right_shape[1]):
            kind = S
    logger.debug("%s(%s, %s) -> %s", op.value, left.value, right.value, kind.value)
    return kind


def resolve_vector_kind(left: StorageKind, right: StorageKind) -> StorageKind:
    """Storage kind of an additive or pointwise vector operation."""
    kind = VECTOR_RESULT_KINDS[(left, right)]
    logger.debug("vector(%s, %s) -> %s", left.value, right.value, kind.value)
    return kind


def resolve_matrix_vector_kind(matrix: StorageKind, vector: StorageKind) -> StorageKind:
    """Storage kind of matrix*vector or vector*matrix."""
    kind = MATRIX_VECTOR_RESULT_KINDS[(matrix, vector)]
    logger.debug("matrix_vector(%s, %s) -> %s", matrix.value, vector.value, kind.value)
    return kind


def resolve_outer_kind(left: StorageKind, right: StorageKind) -> StorageKind:
    """Storage kind of the outer product of two vectors (a matrix)."""
    return VECTOR_RESULT_KINDS[(left, right)]


def resolve_restructured_kind(kind: StorageKind) -> StorageKind:
    """Storage kind after a fully-mutable restructuring (insert, remove,
    permute, off-diagonal sub-matrix). Diagonal cannot hold the result."""
    return S if kind is G else kind


def resolve_shifted_kind(kind: StorageKind) -> StorageKind:
    """Storage kind after adding a scalar to every cell (add, subtract,
    subtract_from with a scalar). Every cell may become nonzero, so a
    diagonal source gives sparse; dense and sparse keep their kind."""
    result = resolve_restructured_kind(kind)
    logger.debug("shift(%s) -> %s", kind.value, result.value)
    return result
