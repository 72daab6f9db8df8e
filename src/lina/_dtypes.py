"""
Names of the built-in element types.

A dtype argument may be a DType member, its string value, or (where an
algebra is accepted) an ElementAlgebra instance. Custom algebras never
get a DType member.
"""

from enum import Enum
from typing import Union

__all__ = ['DType', 'float32', 'float64', 'complex64', 'complex128']


class DType(Enum):
    """Built-in element types, one per shipped ElementAlgebra."""

    float32 = 'float32'
    float64 = 'float64'
    complex64 = 'complex64'
    complex128 = 'complex128'

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return f"DType.{self.name}"


float32 = DType.float32
float64 = DType.float64
complex64 = DType.complex64
complex128 = DType.complex128

_NAMES = frozenset(member.value for member in DType)


def normalize_dtype(dtype: Union[str, DType]) -> str:
    """DType member or string -> string name (not validated)."""
    if isinstance(dtype, DType):
        return dtype.value
    if isinstance(dtype, str):
        return dtype
    raise TypeError(f"dtype must be str or DType, got {type(dtype).__name__}")


def validate_dtype(name: str) -> None:
    """
    Raises:
        ValueError: If name is not one of the built-in element types
    """
    if name not in _NAMES:
        raise ValueError(f"Unknown element type {name!r}; expected one of {sorted(_NAMES)}")
