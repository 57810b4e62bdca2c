"""
percolation_engine — Site Percolation on an N-by-N Grid
=======================================================

Two layers:

  Percolation grid
      Incremental connectivity over open sites using two weighted quick-union
      structures, one for fullness and one for percolation, so that fullness
      never suffers from backwash through the virtual bottom node.

  Threshold estimator
      Monte Carlo wrapper that opens random sites until percolation and
      reports the mean, sample standard deviation and a 95% confidence
      interval of the open fraction.  The random source is injected.

Quick start
-----------
>>> from percolation_engine import Percolation, PercolationStats
>>> import numpy as np
>>> grid = Percolation(2)
>>> grid.open(1, 1); grid.open(2, 1)
>>> grid.percolates()
True
>>> stats = PercolationStats(20, 30, np.random.default_rng(42))
>>> lo, hi = stats.confidence_lo(), stats.confidence_hi()
"""

from .union_find import WeightedQuickUnionUF
from .percolation import Percolation, row_major_index
from .monte_carlo import PercolationStats, run_trial, estimate_threshold
from .graph import site_graph, reference_full_mask, reference_percolates, cluster_sizes
from .utils import confidence_interval, normal_confidence_interval

__all__ = [
    # union-find
    "WeightedQuickUnionUF",
    # grid
    "Percolation", "row_major_index",
    # monte carlo
    "PercolationStats", "run_trial", "estimate_threshold",
    # reference graph
    "site_graph", "reference_full_mask", "reference_percolates", "cluster_sizes",
    # utils
    "confidence_interval", "normal_confidence_interval",
]
