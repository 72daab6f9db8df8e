"""
Tests for element type names.
"""

import pytest

from lina._dtypes import (
    DType,
    complex64,
    complex128,
    float32,
    float64,
    normalize_dtype,
    validate_dtype,
)


class TestDTypeConstants:
    """Test dtype constants."""

    def test_constants_are_enum_members(self):
        assert float32 is DType.float32
        assert float64 is DType.float64
        assert complex64 is DType.complex64
        assert complex128 is DType.complex128

    def test_str(self):
        assert str(DType.float64) == 'float64'
        assert repr(DType.complex64) == 'DType.complex64'


class TestNormalizeDType:
    """Test dtype normalization."""

    def test_normalize_string(self):
        assert normalize_dtype('float32') == 'float32'
        assert normalize_dtype('complex128') == 'complex128'

    def test_normalize_enum(self):
        assert normalize_dtype(DType.complex64) == 'complex64'

    def test_normalize_invalid_type(self):
        with pytest.raises(TypeError):
            normalize_dtype(3)


class TestValidateDType:
    """Test dtype validation."""

    def test_valid(self):
        for name in ('float32', 'float64', 'complex64', 'complex128'):
            validate_dtype(name)

    def test_invalid(self):
        with pytest.raises(ValueError, match="int32"):
            validate_dtype('int32')
