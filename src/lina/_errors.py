"""
Error handling for lina.

Every contract violation maps to one error code and one exception class.
All exceptions derive from LinaError and, where a builtin exception has
the same meaning, from that builtin too, so callers can catch either.
"""

from __future__ import annotations

from typing import Any, Optional, Tuple


# =============================================================================
# Error Codes
# =============================================================================

# Argument errors
LINA_ERROR_ARGUMENT_MISSING = 4
LINA_ERROR_INVALID_ARGUMENT = 10
LINA_ERROR_DIMENSION_MISMATCH = 11
LINA_ERROR_INDEX_OUT_OF_RANGE = 14
LINA_ERROR_NON_SQUARE = 15

# Type errors
LINA_ERROR_TYPE_MISMATCH = 21

# Structural errors
LINA_ERROR_UNSUPPORTED_STRUCTURAL = 40


_ERROR_MESSAGES = {
    LINA_ERROR_ARGUMENT_MISSING: "Argument missing",
    LINA_ERROR_INVALID_ARGUMENT: "Invalid argument",
    LINA_ERROR_DIMENSION_MISMATCH: "Dimension mismatch",
    LINA_ERROR_INDEX_OUT_OF_RANGE: "Index out of range",
    LINA_ERROR_NON_SQUARE: "Matrix must be square",
    LINA_ERROR_TYPE_MISMATCH: "Element type mismatch",
    LINA_ERROR_UNSUPPORTED_STRUCTURAL: "Operation not supported by this storage",
}


# =============================================================================
# Exception Classes
# =============================================================================

class LinaError(Exception):
    """
    Base exception for all lina errors.

    Attributes:
        code: Numeric error code (LINA_ERROR_*)
        message: Human readable message
    """

    code = LINA_ERROR_INVALID_ARGUMENT

    def __init__(self, message: Optional[str] = None, code: Optional[int] = None):
        if code is not None:
            self.code = code
        if message is None:
            message = _ERROR_MESSAGES.get(self.code, f"Unknown error (code={self.code})")
        self.message = message
        super().__init__(message)

    @classmethod
    def from_code(cls, code: int, context: str = "") -> "LinaError":
        """Create exception from error code with optional context."""
        base_msg = _ERROR_MESSAGES.get(code, "Unknown error")
        msg = f"{context}: {base_msg}" if context else base_msg
        return _CODE_TO_CLASS.get(code, cls)(msg, code)


class DimensionMismatch(LinaError, ValueError):
    """Operand or result shapes are incompatible."""
    code = LINA_ERROR_DIMENSION_MISMATCH


class NonSquareOperand(DimensionMismatch):
    """A square matrix was required (determinant, trace, ...)."""
    code = LINA_ERROR_NON_SQUARE


class ArgumentMissing(LinaError, TypeError):
    """A required operand or buffer is None."""
    code = LINA_ERROR_ARGUMENT_MISSING


class IndexOutOfRange(LinaError, IndexError):
    """A row, column or vector position is outside the valid range."""
    code = LINA_ERROR_INDEX_OUT_OF_RANGE


class ElementTypeMismatch(LinaError, TypeError):
    """Operands use different element algebras."""
    code = LINA_ERROR_TYPE_MISMATCH


class UnsupportedStructuralOperation(LinaError):
    """
    The operation cannot be expressed in the operand's storage kind.

    Raised for diagonal storage when an operation would need a nonzero
    off-diagonal cell. Convert to dense or sparse first.
    """
    code = LINA_ERROR_UNSUPPORTED_STRUCTURAL


_CODE_TO_CLASS = {
    LINA_ERROR_DIMENSION_MISMATCH: DimensionMismatch,
    LINA_ERROR_NON_SQUARE: NonSquareOperand,
    LINA_ERROR_ARGUMENT_MISSING: ArgumentMissing,
    LINA_ERROR_INDEX_OUT_OF_RANGE: IndexOutOfRange,
    LINA_ERROR_TYPE_MISMATCH: ElementTypeMismatch,
    LINA_ERROR_UNSUPPORTED_STRUCTURAL: UnsupportedStructuralOperation,
}


# =============================================================================
# Validation Helpers
# =============================================================================

def require_argument(value: Any, name: str) -> None:
    """Raise ArgumentMissing if value is None."""
    if value is None:
        raise ArgumentMissing(f"Argument '{name}' must not be None")


def check_index(index: int, size: int, name: str = "index") -> None:
    """Raise IndexOutOfRange unless 0 <= index < size."""
    if not 0 <= index < size:
        raise IndexOutOfRange(f"{name} {index} out of range [0, {size})")


def check_insert_index(index: int, size: int, name: str = "index") -> None:
    """Raise IndexOutOfRange unless 0 <= index <= size."""
    if not 0 <= index <= size:
        raise IndexOutOfRange(f"{name} {index} out of range [0, {size}]")


def check_same_shape(left: Tuple[int, ...], right: Tuple[int, ...], context: str = "") -> None:
    """Raise DimensionMismatch if the two shapes differ."""
    if tuple(left) != tuple(right):
        prefix = f"{context}: " if context else ""
        raise DimensionMismatch(f"{prefix}shapes {tuple(left)} and {tuple(right)} do not match")


def check_square(shape: Tuple[int, int], context: str = "") -> None:
    """Raise NonSquareOperand unless rows == cols."""
    if shape[0] != shape[1]:
        prefix = f"{context}: " if context else ""
        raise NonSquareOperand(f"{prefix}matrix of shape {tuple(shape)} is not square")


def check_same_algebra(left: Any, right: Any) -> None:
    """Raise ElementTypeMismatch if two algebras differ."""
    if left != right:
        raise ElementTypeMismatch(f"Element types differ: {left.name} vs {right.name}")
