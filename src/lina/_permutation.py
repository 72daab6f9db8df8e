"""
Permutation of an index range [0, n).

A Permutation maps position i to position p[i]. Applied to a matrix,
row (or column) i moves to row (or column) p[i].
"""

from typing import Iterable, List

__all__ = ['Permutation']


class Permutation:
    """
    Validated index permutation.

    Args:
        indices: Target position of each index; must contain every value
                 of range(len(indices)) exactly once.

    Raises:
        ValueError: If indices is not a permutation

    Example:
        >>> p = Permutation([2, 0, 1])
        >>> p.inverse()
        Permutation([1, 2, 0])
    """

    def __init__(self, indices: Iterable[int]):
        indices = [int(i) for i in indices]
        seen = [False] * len(indices)
        for i in indices:
            if not 0 <= i < len(indices) or seen[i]:
                raise ValueError(f"Not a permutation: {indices}")
            seen[i] = True
        self._indices = indices

    def inverse(self) -> 'Permutation':
        inv = [0] * len(self._indices)
        for i, target in enumerate(self._indices):
            inv[target] = i
        return Permutation(inv)

    def to_list(self) -> List[int]:
        return list(self._indices)

    def __len__(self) -> int:
        return len(self._indices)

    def __getitem__(self, index: int) -> int:
        return self._indices[index]

    def __iter__(self):
        return iter(self._indices)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Permutation):
            return NotImplemented
        return self._indices == other._indices

    __hash__ = None

    def __repr__(self) -> str:
        return f"Permutation({self._indices})"
