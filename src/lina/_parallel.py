"""
Chunked execution for element-independent bulk operations.

The index range [0, n) is split into disjoint contiguous slices. Each
worker receives one (start, stop) pair and must only write the output
cells in that slice; read-only operands may be shared.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Tuple

from ._config import get_config

__all__ = ['split_range', 'map_slices']

logger = logging.getLogger("lina.parallel")


def split_range(n: int, parts: int) -> List[Tuple[int, int]]:
    """
    Split [0, n) into at most `parts` disjoint contiguous ranges.

    Example:
        >>> split_range(10, 3)
        [(0, 4), (4, 7), (7, 10)]
    """
    if n <= 0:
        return []
    parts = max(1, min(parts, n))
    base, extra = divmod(n, parts)
    ranges = []
    start = 0
    for k in range(parts):
        stop = start + base + (1 if k < extra else 0)
        ranges.append((start, stop))
        start = stop
    return ranges


def map_slices(n: int, fn: Callable[[int, int], None]) -> None:
    """
    Run fn(start, stop) over disjoint slices of [0, n).

    Runs inline below the configured parallel threshold or when only
    one worker is allowed. Exceptions raised by a worker propagate to
    the caller.
    """
    config = get_config()
    if n < config.parallel_threshold or config.max_workers <= 1:
        fn(0, n)
        return

    ranges = split_range(n, config.max_workers)
    logger.debug("Splitting %d elements into %d slices", n, len(ranges))
    with ThreadPoolExecutor(max_workers=len(ranges)) as executor:
        futures = [executor.submit(fn, start, stop) for start, stop in ranges]
        for future in futures:
            future.result()
