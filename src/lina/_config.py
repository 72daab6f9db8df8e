"""
Global configuration for lina.

Provides:
- Default element type for builders created without an explicit dtype
- Parallelism settings for element-independent bulk operations
- Environment overrides read once at import time
"""

from __future__ import annotations

import os
import warnings
from typing import Optional, Union

from ._dtypes import DType, normalize_dtype, validate_dtype


# =============================================================================
# Defaults
# =============================================================================

_DEFAULT_DTYPE = DType.float64
_DEFAULT_PARALLEL_THRESHOLD = 65536
_DEFAULT_MAX_WORKERS = min(8, os.cpu_count() or 1)


# =============================================================================
# Global Configuration State
# =============================================================================

class _Config:
    """
    Global configuration singleton.

    Attributes:
        default_dtype: DType used when a builder gets no dtype
        parallel_threshold: Minimum element count before bulk work is split
        max_workers: Upper bound on worker threads for bulk work
    """

    def __init__(self):
        self._default_dtype = _DEFAULT_DTYPE
        self._parallel_threshold = _DEFAULT_PARALLEL_THRESHOLD
        self._max_workers = _DEFAULT_MAX_WORKERS

    @property
    def default_dtype(self) -> DType:
        """Get default element type."""
        return self._default_dtype

    @default_dtype.setter
    def default_dtype(self, value: Union[DType, str]):
        dtype_str = normalize_dtype(value)
        validate_dtype(dtype_str)
        self._default_dtype = DType(dtype_str)

    @property
    def parallel_threshold(self) -> int:
        return self._parallel_threshold

    @parallel_threshold.setter
    def parallel_threshold(self, value: int):
        if value < 1:
            raise ValueError(f"parallel_threshold must be positive, got {value}")
        self._parallel_threshold = int(value)

    @property
    def max_workers(self) -> int:
        return self._max_workers

    @max_workers.setter
    def max_workers(self, value: int):
        if value < 1:
            raise ValueError(f"max_workers must be positive, got {value}")
        self._max_workers = int(value)

    def load_environment(self, environ: Optional[dict] = None) -> None:
        """
        Apply LINA_* environment overrides.

        Malformed values are reported with a warning and ignored.
        """
        environ = os.environ if environ is None else environ

        dtype = environ.get('LINA_DEFAULT_DTYPE')
        if dtype:
            try:
                self.default_dtype = dtype
            except (TypeError, ValueError) as e:
                warnings.warn(f"Ignoring LINA_DEFAULT_DTYPE={dtype!r}: {e}")

        for var, attr in (('LINA_PARALLEL_THRESHOLD', 'parallel_threshold'),
                          ('LINA_MAX_WORKERS', 'max_workers')):
            raw = environ.get(var)
            if not raw:
                continue
            try:
                setattr(self, attr, int(raw))
            except ValueError as e:
                warnings.warn(f"Ignoring {var}={raw!r}: {e}")


# Global config instance
_config = _Config()
_config.load_environment()


# =============================================================================
# Public API
# =============================================================================

def get_config() -> _Config:
    """Get global configuration instance."""
    return _config


def set_default_dtype(dtype: Union[DType, str]) -> None:
    """
    Set the element type used by builders created without a dtype.

    Example:
        >>> lina.set_default_dtype('complex128')
        >>> MatrixBuilder().dense(2, 2).algebra.name
        'complex128'
    """
    _config.default_dtype = dtype


def set_parallelism(
    threshold: Optional[int] = None,
    max_workers: Optional[int] = None,
) -> None:
    """
    Tune bulk-operation parallelism.

    Args:
        threshold: Minimum element count before work is split
        max_workers: Maximum number of worker threads (1 disables splitting)
    """
    if threshold is not None:
        _config.parallel_threshold = threshold
    if max_workers is not None:
        _config.max_workers = max_workers
