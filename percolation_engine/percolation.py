"""
Percolation grid model.

An N-by-N grid of sites, each blocked or open.  Sites are addressed with
1-indexed ``(row, col)``; the connectivity structures use the flat row-major
index from :func:`row_major_index`, plus two virtual nodes:

    N*N     = virtual top    (the surface)
    N*N + 1 = virtual bottom (the underside)

Two disjoint-set structures are maintained side by side:

* ``_full_uf`` holds the virtual top and the grid sites, never the virtual
  bottom.  It answers :meth:`Percolation.is_full`.
* ``_perc_uf`` holds both virtual nodes.  It answers
  :meth:`Percolation.percolates` and nothing else.

Answering fullness from ``_perc_uf`` would report backwash: once the system
percolates, every open site touching the bottom row would look full through
the virtual bottom node.
"""

from __future__ import annotations

import numpy as np

from .union_find import WeightedQuickUnionUF


# ---------------------------------------------------------------------------
# Addressing
# ---------------------------------------------------------------------------


def row_major_index(row: int, col: int, n: int) -> int:
    """Map 1-indexed ``(row, col)`` on an n-by-n grid to ``[0, n*n)``."""
    return (row - 1) * n + (col - 1)


# Offsets of the 4-neighbourhood: up, down, left, right.
_NEIGHBOUR_OFFSETS: tuple[tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))


# ---------------------------------------------------------------------------
# Grid
# ---------------------------------------------------------------------------


class Percolation:
    """N-by-N percolation system with incremental connectivity.

    Parameters
    ----------
    n : int
        Grid dimension.  Must be positive.

    Raises
    ------
    ValueError
        If ``n <= 0``.

    Notes
    -----
    Every site starts blocked.  ``open`` costs O(log n) amortised: a site is
    only unioned with neighbours that are already open at the moment it opens,
    so the grid is never re-scanned.
    """

    def __init__(self, n: int) -> None:
        if n <= 0:
            raise ValueError(f"grid size n must be positive; got {n}.")
        self._n = int(n)
        self._top = self._n * self._n
        self._bottom = self._top + 1
        self._open = np.zeros((self._n, self._n), dtype=bool)
        self._n_open = 0
        self._full_uf = WeightedQuickUnionUF(self._n * self._n + 2)
        self._perc_uf = WeightedQuickUnionUF(self._n * self._n + 2)

    @property
    def n(self) -> int:
        return self._n

    @property
    def number_of_open_sites(self) -> int:
        return self._n_open

    def _validate(self, row: int, col: int) -> None:
        for p in (row, col):
            if p < 1 or p > self._n:
                raise IndexError(f"index {p} is not between 1 and {self._n}")

    # ---------------------------------------------------------------------
    # Mutator
    # ---------------------------------------------------------------------

    def open(self, row: int, col: int) -> None:
        """Open site ``(row, col)`` if it is not open already.

        Raises
        ------
        IndexError
            Unless ``1 <= row <= n`` and ``1 <= col <= n``.  Raised before any
            state changes.
        """
        self._validate(row, col)
        if self._open[row - 1, col - 1]:
            return

        self._open[row - 1, col - 1] = True
        self._n_open += 1
        n = self._n
        site = row_major_index(row, col, n)

        for dr, dc in _NEIGHBOUR_OFFSETS:
            r, c = row + dr, col + dc
            if 1 <= r <= n and 1 <= c <= n and self._open[r - 1, c - 1]:
                neighbour = row_major_index(r, c, n)
                self._perc_uf.union(neighbour, site)
                self._full_uf.union(neighbour, site)

        if row == 1 and not self._full_uf.connected(self._top, site):
            self._perc_uf.union(self._top, site)
            self._full_uf.union(self._top, site)

        # Bottom row joins the virtual bottom in _perc_uf only.
        if row == n:
            self._perc_uf.union(site, self._bottom)

    # ---------------------------------------------------------------------
    # Queries
    # ---------------------------------------------------------------------

    def is_open(self, row: int, col: int) -> bool:
        """Return True iff site ``(row, col)`` is open."""
        self._validate(row, col)
        return bool(self._open[row - 1, col - 1])

    def is_full(self, row: int, col: int) -> bool:
        """Return True iff site ``(row, col)`` is open and connected to the top.

        Connectivity is read from the structure that never contains the
        virtual bottom node, so percolation does not leak fullness upward
        from the bottom row.
        """
        self._validate(row, col)
        if not self._open[row - 1, col - 1]:
            return False
        return self._full_uf.connected(self._top, row_major_index(row, col, self._n))

    def percolates(self) -> bool:
        """Return True iff the virtual top and bottom nodes are connected."""
        return self._perc_uf.connected(self._top, self._bottom)

    # ---------------------------------------------------------------------
    # Snapshots
    # ---------------------------------------------------------------------

    def open_mask(self) -> np.ndarray:
        """Return a copy of the open-state array, shape (n, n), dtype bool.

        Element ``[r, c]`` describes site ``(r + 1, c + 1)``.
        """
        return self._open.copy()

    def full_mask(self) -> np.ndarray:
        """Return a boolean array, shape (n, n), of full sites."""
        n = self._n
        mask = np.zeros((n, n), dtype=bool)
        top_root = self._full_uf.find(self._top)
        for r, c in zip(*np.nonzero(self._open)):
            site = row_major_index(int(r) + 1, int(c) + 1, n)
            mask[r, c] = self._full_uf.find(site) == top_root
        return mask

    def __repr__(self) -> str:
        return (
            f"Percolation(n={self._n}, open_sites={self._n_open}, "
            f"percolates={self.percolates()})"
        )
