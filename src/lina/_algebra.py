"""
Element Algebra

The minimal numeric capability set every element type must provide.
Storages, kernels and the Vector/Matrix surface never use Python
arithmetic operators on elements directly; they go through an
ElementAlgebra instance, which is what lets one kernel serve real,
complex and user-defined element types alike.

Built-in algebras:

    Float64Algebra      Python float
    Float32Algebra      Python float, rounded through numpy.float32
    Complex128Algebra   Python complex
    Complex64Algebra    Python complex, rounded through numpy.complex64

Example:

    >>> from fractions import Fraction
    >>> class RationalAlgebra(ElementAlgebra):
    ...     name = 'rational'
    ...     def coerce(self, value): return Fraction(value)
    ...     def add(self, a, b): return a + b
    ...     def subtract(self, a, b): return a - b
    ...     def multiply(self, a, b): return a * b
    ...     def divide(self, a, b): return a / b
    ...     def absolute(self, a): return float(abs(a))
    ...     def conjugate(self, a): return a
"""

import math
from abc import ABC, abstractmethod
from functools import cached_property
from typing import Any, Dict, Optional, Union

import numpy as np

from ._dtypes import DType, normalize_dtype, validate_dtype

__all__ = [
    'ElementAlgebra',
    'Float64Algebra',
    'Float32Algebra',
    'Complex128Algebra',
    'Complex64Algebra',
    'algebra_for',
]


def _ieee_divide(a: float, b: float) -> float:
    """Real division that follows IEEE 754 instead of raising on zero."""
    try:
        return a / b
    except ZeroDivisionError:
        if a != a or a == 0:
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)


def _ieee_complex_divide(a: complex, b: complex) -> complex:
    try:
        return a / b
    except ZeroDivisionError:
        a = complex(a)
        return complex(_ieee_divide(a.real, 0.0), _ieee_divide(a.imag, 0.0))


class ElementAlgebra(ABC):
    """
    Abstract numeric capability set for one element type.

    Required Methods (subclasses must implement):
        coerce(value): Convert an incoming Python value to the element type
        add, subtract, multiply, divide: Binary arithmetic
        absolute(a): Totally ordered real magnitude (float)
        conjugate(a): Identity for real types

    Derived (subclasses may override for speed):
        zero, one, is_zero, is_one, negate, to_complex

    Two algebra instances are considered equal when they are of the
    same class; operands of a binary operation must share an algebra.
    """

    name: str = 'custom'
    is_complex: bool = False
    numpy_dtype: Optional[Any] = None

    # =========================================================================
    # Abstract Primitives
    # =========================================================================

    @abstractmethod
    def coerce(self, value: Any) -> Any:
        ...

    @abstractmethod
    def add(self, a: Any, b: Any) -> Any:
        ...

    @abstractmethod
    def subtract(self, a: Any, b: Any) -> Any:
        ...

    @abstractmethod
    def multiply(self, a: Any, b: Any) -> Any:
        ...

    @abstractmethod
    def divide(self, a: Any, b: Any) -> Any:
        """Divide; division by zero follows the type's own convention."""
        ...

    @abstractmethod
    def absolute(self, a: Any) -> float:
        ...

    @abstractmethod
    def conjugate(self, a: Any) -> Any:
        ...

    # =========================================================================
    # Derived Operations
    # =========================================================================

    @cached_property
    def zero(self) -> Any:
        """Additive identity."""
        return self.coerce(0)

    @cached_property
    def one(self) -> Any:
        """Multiplicative identity."""
        return self.coerce(1)

    def is_zero(self, a: Any) -> bool:
        return a == self.zero

    def is_one(self, a: Any) -> bool:
        return a == self.one

    def negate(self, a: Any) -> Any:
        return self.subtract(self.zero, a)

    def to_complex(self, a: Any) -> complex:
        """Convert to a Python complex (used for numpy conversions)."""
        return complex(a)

    # =========================================================================
    # Magic Methods
    # =========================================================================

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other)

    def __hash__(self) -> int:
        return hash(type(self))

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"


# =============================================================================
# Built-in Algebras
# =============================================================================

class Float64Algebra(ElementAlgebra):
    """Double precision real numbers (Python float)."""

    name = 'float64'
    numpy_dtype = np.float64

    def coerce(self, value: Any) -> float:
        return float(value)

    def add(self, a, b):
        return a + b

    def subtract(self, a, b):
        return a - b

    def multiply(self, a, b):
        return a * b

    def divide(self, a, b):
        return _ieee_divide(a, b)

    def absolute(self, a) -> float:
        return abs(a)

    def conjugate(self, a):
        return a

    def is_zero(self, a) -> bool:
        return a == 0.0

    def is_one(self, a) -> bool:
        return a == 1.0

    def negate(self, a):
        return -a


class Float32Algebra(Float64Algebra):
    """Single precision real numbers, every result rounded to float32."""

    name = 'float32'
    numpy_dtype = np.float32

    def coerce(self, value: Any) -> float:
        return float(np.float32(value))

    def add(self, a, b):
        return float(np.float32(a + b))

    def subtract(self, a, b):
        return float(np.float32(a - b))

    def multiply(self, a, b):
        return float(np.float32(a * b))

    def divide(self, a, b):
        return float(np.float32(_ieee_divide(a, b)))


class Complex128Algebra(ElementAlgebra):
    """Double precision complex numbers (Python complex)."""

    name = 'complex128'
    is_complex = True
    numpy_dtype = np.complex128

    def coerce(self, value: Any) -> complex:
        return complex(value)

    def add(self, a, b):
        return a + b

    def subtract(self, a, b):
        return a - b

    def multiply(self, a, b):
        return a * b

    def divide(self, a, b):
        return _ieee_complex_divide(a, b)

    def absolute(self, a) -> float:
        return abs(a)

    def conjugate(self, a):
        return a.conjugate()

    def is_zero(self, a) -> bool:
        return a == 0j

    def negate(self, a):
        return -a


class Complex64Algebra(Complex128Algebra):
    """Single precision complex numbers, every result rounded to complex64."""

    name = 'complex64'
    numpy_dtype = np.complex64

    def coerce(self, value: Any) -> complex:
        return complex(np.complex64(value))

    def add(self, a, b):
        return complex(np.complex64(a + b))

    def subtract(self, a, b):
        return complex(np.complex64(a - b))

    def multiply(self, a, b):
        return complex(np.complex64(a * b))

    def divide(self, a, b):
        return complex(np.complex64(_ieee_complex_divide(a, b)))

    def absolute(self, a) -> float:
        return float(np.float32(abs(a)))


_BUILTIN: Dict[str, ElementAlgebra] = {
    'float32': Float32Algebra(),
    'float64': Float64Algebra(),
    'complex64': Complex64Algebra(),
    'complex128': Complex128Algebra(),
}


def algebra_for(dtype: Union[str, DType, ElementAlgebra, None] = None) -> ElementAlgebra:
    """
    Resolve a dtype designation to an ElementAlgebra.

    Args:
        dtype: DType, dtype string, an ElementAlgebra instance (returned
               unchanged), or None for the configured default dtype.

    Returns:
        The algebra instance

    Example:
        >>> algebra_for('float32').name
        'float32'
    """
    if isinstance(dtype, ElementAlgebra):
        return dtype
    if dtype is None:
        from ._config import get_config
        dtype = get_config().default_dtype
    dtype_str = normalize_dtype(dtype)
    validate_dtype(dtype_str)
    return _BUILTIN[dtype_str]
