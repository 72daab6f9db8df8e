"""
Kernel Registry

Kernels are plain functions keyed by an operation name and the storage
kinds of their operands. Registration happens at import time through the
register_kernel decorator; lookup falls back to wildcard entries
(ANY) so one generic kernel can serve every combination that has no
specialised implementation.

Calling conventions:

    unary       fn(a, out, *args)       a, out: storages
    binary      fn(a, b, out, *args)    out is a fresh all-zero storage
    reduction   fn(a, b) -> value
"""

from typing import Callable, Dict, Optional, Tuple

from ..storage import StorageKind

__all__ = [
    'ANY',
    'KernelRegistry',
    'register_kernel',
    'get_kernel',
]

# Wildcard storage kind for generic kernels.
ANY = None

_Key = Tuple[str, Tuple[Optional[StorageKind], ...]]


class KernelRegistry:
    """
    Registry of storage kernels.

    Lookup order for a binary op (left, right):
        (left, right) -> (left, ANY) -> (ANY, right) -> (ANY, ANY)
    """

    def __init__(self):
        self._handlers: Dict[_Key, Callable] = {}

    def register(self, operation: str, kinds: Tuple[Optional[StorageKind], ...], handler: Callable):
        """Register a handler for an operation on a kind combination."""
        self._handlers[(operation, tuple(kinds))] = handler

    def get_handler(self, operation: str, *kinds: StorageKind) -> Callable:
        """Get the most specific handler for an operation.

        Raises:
            KeyError: If no handler, not even a generic one, exists
        """
        for candidate in _candidates(kinds):
            handler = self._handlers.get((operation, candidate))
            if handler is not None:
                return handler
        names = ', '.join(k.value for k in kinds)
        raise KeyError(f"No kernel registered for {operation}({names})")


def _candidates(kinds: Tuple[StorageKind, ...]):
    if len(kinds) == 1:
        return [kinds, (ANY,)]
    left, right = kinds
    return [(left, right), (left, ANY), (ANY, right), (ANY, ANY)]


# Global registry instance
_registry = KernelRegistry()


def register_kernel(operation: str, *kinds: Optional[StorageKind]):
    """Decorator to register a storage kernel."""
    def decorator(func: Callable) -> Callable:
        _registry.register(operation, kinds, func)
        return func
    return decorator


def get_kernel(operation: str, *kinds: StorageKind) -> Callable:
    """Get registered kernel."""
    return _registry.get_handler(operation, *kinds)
