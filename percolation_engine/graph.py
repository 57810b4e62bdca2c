"""
Reference connectivity for percolation grids, built with NetworkX.

Recomputes fullness and percolation from scratch by graph traversal over the
open sites.  This is far slower than the incremental union-find grid and is
meant for cross-checking and diagnostics, not for Monte Carlo loops.

Node labels are 1-indexed ``(row, col)`` tuples plus the two string labels
``"top"`` and ``"bottom"`` for the virtual nodes.
"""

from __future__ import annotations

import networkx as nx
import numpy as np


VIRTUAL_TOP = "top"
VIRTUAL_BOTTOM = "bottom"


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _check_mask(open_mask: np.ndarray) -> np.ndarray:
    mask = np.asarray(open_mask, dtype=bool)
    if mask.ndim != 2 or mask.shape[0] != mask.shape[1] or mask.shape[0] == 0:
        raise ValueError(
            f"open_mask must be a non-empty square 2-D array; got shape {mask.shape}."
        )
    return mask


# ---------------------------------------------------------------------------
# Graph construction
# ---------------------------------------------------------------------------


def site_graph(open_mask: np.ndarray, include_bottom: bool = True) -> nx.Graph:
    """Build the undirected 4-neighbour graph of open sites.

    Parameters
    ----------
    open_mask : np.ndarray, shape (n, n), dtype bool
        ``open_mask[r, c]`` is True iff site ``(r + 1, c + 1)`` is open.
    include_bottom : bool, optional
        Whether to add the virtual bottom node and its edges (default True).
        The virtual top node is always present.

    Returns
    -------
    nx.Graph
        Open sites, joined to their open neighbours; top-row sites joined to
        ``"top"`` and, if requested, bottom-row sites joined to ``"bottom"``.

    Raises
    ------
    ValueError
        If ``open_mask`` is not a non-empty square 2-D array.
    """
    mask = _check_mask(open_mask)
    n = mask.shape[0]

    G: nx.Graph = nx.Graph()
    G.add_node(VIRTUAL_TOP)
    if include_bottom:
        G.add_node(VIRTUAL_BOTTOM)

    for r, c in zip(*np.nonzero(mask)):
        site = (int(r) + 1, int(c) + 1)
        G.add_node(site)
        # Only look down and right; the reverse edges are the same edges.
        if r + 1 < n and mask[r + 1, c]:
            G.add_edge(site, (int(r) + 2, int(c) + 1))
        if c + 1 < n and mask[r, c + 1]:
            G.add_edge(site, (int(r) + 1, int(c) + 2))
        if r == 0:
            G.add_edge(VIRTUAL_TOP, site)
        if include_bottom and r == n - 1:
            G.add_edge(site, VIRTUAL_BOTTOM)
    return G


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


def reference_full_mask(open_mask: np.ndarray) -> np.ndarray:
    """Return a boolean array of sites reachable from the top via open sites."""
    mask = _check_mask(open_mask)
    n = mask.shape[0]
    G = site_graph(mask, include_bottom=False)
    full = np.zeros((n, n), dtype=bool)
    for node in nx.node_connected_component(G, VIRTUAL_TOP):
        if node != VIRTUAL_TOP:
            full[node[0] - 1, node[1] - 1] = True
    return full


def reference_percolates(open_mask: np.ndarray) -> bool:
    """Return True iff an open path joins the top row to the bottom row."""
    G = site_graph(open_mask, include_bottom=True)
    return nx.has_path(G, VIRTUAL_TOP, VIRTUAL_BOTTOM)


def cluster_sizes(open_mask: np.ndarray) -> np.ndarray:
    """Sizes of the open clusters (virtual nodes excluded), largest first."""
    mask = _check_mask(open_mask)
    G: nx.Graph = nx.Graph()
    for r, c in zip(*np.nonzero(mask)):
        site = (int(r), int(c))
        G.add_node(site)
        if r + 1 < mask.shape[0] and mask[r + 1, c]:
            G.add_edge(site, (int(r) + 1, int(c)))
        if c + 1 < mask.shape[1] and mask[r, c + 1]:
            G.add_edge(site, (int(r), int(c) + 1))
    sizes = sorted((len(cc) for cc in nx.connected_components(G)), reverse=True)
    return np.array(sizes, dtype=np.int64)
