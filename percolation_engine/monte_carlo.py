"""
Monte Carlo estimation of the site percolation threshold.

Each trial builds a fresh :class:`~percolation_engine.percolation.Percolation`
grid and opens uniformly random sites until the system percolates.  The
fraction of open sites at that moment is the trial's threshold sample.

Design principles
-----------------
* No global RNG state: the random source is injected.  Anything exposing
  ``integers(low, high, endpoint=True)`` like ``numpy.random.Generator`` will do.
* Sites are sampled with replacement.  Drawing an already-open site is not
  counted, so the open count equals the number of distinct open sites.
* Trials share nothing; each owns its grid and both connectivity structures.
"""

from __future__ import annotations

import math
import warnings

import numpy as np
from numpy.random import Generator, default_rng

from .percolation import Percolation
from .utils import confidence_interval, normal_confidence_interval


# ---------------------------------------------------------------------------
# Single trial
# ---------------------------------------------------------------------------


def run_trial(n: int, rng: Generator) -> int:
    """Open random sites on a fresh n-by-n grid until it percolates.

    Parameters
    ----------
    n : int
        Grid dimension.
    rng : Generator
        Random source; row and column are drawn as
        ``rng.integers(1, n, endpoint=True)``, in that order.

    Returns
    -------
    int
        Number of sites open when the system first percolates.
    """
    grid = Percolation(n)
    open_count = 0
    while not grid.percolates():
        row = rng.integers(1, n, endpoint=True)
        col = rng.integers(1, n, endpoint=True)
        if not grid.is_open(row, col):
            grid.open(row, col)
            open_count += 1
    return open_count


# ---------------------------------------------------------------------------
# Estimator
# ---------------------------------------------------------------------------


class PercolationStats:
    """Run ``trials`` independent percolation experiments on an n-by-n grid.

    Parameters
    ----------
    n : int
        Grid dimension.  Must be positive.
    trials : int
        Number of independent trials.  Must be positive.
    rng : Generator
        Injected random source, consumed sequentially by the trials.

    Raises
    ------
    ValueError
        If ``n <= 0`` or ``trials <= 0``.

    Notes
    -----
    With ``trials == 1`` the sample standard deviation is undefined:
    :meth:`stddev` returns NaN (with a ``UserWarning``) and both confidence
    bounds are NaN.
    """

    def __init__(self, n: int, trials: int, rng: Generator) -> None:
        if n <= 0 or trials <= 0:
            raise ValueError(
                f"n and trials must be positive; got n={n}, trials={trials}."
            )
        self._n = int(n)
        self._trials = int(trials)

        open_counts = np.empty(self._trials, dtype=np.int64)
        for trial in range(self._trials):
            open_counts[trial] = run_trial(self._n, rng)

        self._open_counts = open_counts
        self._thresholds = open_counts / float(self._n * self._n)
        self._open_counts.flags.writeable = False
        self._thresholds.flags.writeable = False

    @property
    def n(self) -> int:
        return self._n

    @property
    def trials(self) -> int:
        return self._trials

    @property
    def thresholds(self) -> np.ndarray:
        """Per-trial open fraction at percolation, shape (trials,), read-only."""
        return self._thresholds

    @property
    def open_counts(self) -> np.ndarray:
        """Per-trial open-site count at percolation, shape (trials,), read-only."""
        return self._open_counts

    def mean(self) -> float:
        """Sample mean of the percolation threshold."""
        return float(np.mean(self._thresholds))

    def stddev(self) -> float:
        """Sample standard deviation (ddof=1) of the percolation threshold."""
        if self._trials == 1:
            warnings.warn(
                "PercolationStats.stddev: sample standard deviation is undefined "
                "for a single trial; returning NaN.",
                UserWarning,
                stacklevel=2,
            )
            return math.nan
        return float(np.std(self._thresholds, ddof=1))

    def _interval(self) -> tuple[float, float]:
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", UserWarning)
            stddev = self.stddev()
        return normal_confidence_interval(self.mean(), stddev, self._trials)

    def confidence_lo(self) -> float:
        """Low endpoint of the 95% confidence interval."""
        return self._interval()[0]

    def confidence_hi(self) -> float:
        """High endpoint of the 95% confidence interval."""
        return self._interval()[1]

    def summary_dict(self) -> dict:
        """Return a JSON-serialisable summary (no arrays, NaN as None)."""
        lo, hi = self._interval()
        if self._trials >= 2:
            t_lo, t_hi = confidence_interval(self._thresholds)
        else:
            t_lo = t_hi = math.nan
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", UserWarning)
            stddev = self.stddev()
        summary = {
            "n": self._n,
            "trials": self._trials,
            "mean": self.mean(),
            "stddev": stddev,
            "ci_95_low": lo,
            "ci_95_high": hi,
            "ci_95_t_low": t_lo,
            "ci_95_t_high": t_hi,
            "min_threshold": float(np.min(self._thresholds)),
            "max_threshold": float(np.max(self._thresholds)),
            "median_threshold": float(np.median(self._thresholds)),
            "mean_open_sites": float(np.mean(self._open_counts)),
        }
        return {k: (None if isinstance(v, float) and math.isnan(v) else v)
                for k, v in summary.items()}

    def __repr__(self) -> str:
        return f"PercolationStats(n={self._n}, trials={self._trials})"


def estimate_threshold(n: int, trials: int, seed: int) -> PercolationStats:
    """Run :class:`PercolationStats` with a ``default_rng(seed)`` source."""
    return PercolationStats(n, trials, default_rng(seed))
