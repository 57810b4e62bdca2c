"""
Weighted quick-union (union by size) over a fixed universe of integer labels.

Elements are labelled ``0..size-1``.  Each union attaches the root of the
smaller component under the root of the larger one, which bounds tree height
at O(log size).  Path compression is not used: weighting alone is enough for
the percolation workload, and it keeps ``find`` free of side effects.
"""

from __future__ import annotations

import numpy as np


class WeightedQuickUnionUF:
    """Disjoint-set forest weighted by component size.

    Parameters
    ----------
    size : int
        Number of elements.  Must be positive.

    Raises
    ------
    ValueError
        If ``size <= 0``.
    """

    def __init__(self, size: int) -> None:
        if size <= 0:
            raise ValueError(f"size must be positive; got {size}.")
        self._parent = np.arange(size, dtype=np.int64)
        self._size = np.ones(size, dtype=np.int64)
        self._count = int(size)

    def __len__(self) -> int:
        return int(self._parent.shape[0])

    @property
    def count(self) -> int:
        """Number of components."""
        return self._count

    def _validate(self, p: int) -> None:
        n = self._parent.shape[0]
        if p < 0 or p >= n:
            raise IndexError(f"index {p} is not between 0 and {n - 1}")

    def find(self, p: int) -> int:
        """Return the root of the component containing ``p``.

        Raises
        ------
        IndexError
            If ``p`` is outside ``[0, size)``.
        """
        self._validate(p)
        parent = self._parent
        while p != parent[p]:
            p = parent[p]
        return int(p)

    def connected(self, p: int, q: int) -> bool:
        """Return True iff ``p`` and ``q`` are in the same component."""
        return self.find(p) == self.find(q)

    def union(self, p: int, q: int) -> None:
        """Merge the components containing ``p`` and ``q``.

        No-op when they already share a root.  On equal sizes the root of
        ``p`` is attached under the root of ``q``.
        """
        root_p = self.find(p)
        root_q = self.find(q)
        if root_p == root_q:
            return

        size = self._size
        if size[root_p] > size[root_q]:
            self._parent[root_q] = root_p
            size[root_p] += size[root_q]
        else:
            self._parent[root_p] = root_q
            size[root_q] += size[root_p]
        self._count -= 1
