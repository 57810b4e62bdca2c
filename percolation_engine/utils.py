"""
Shared statistics helpers for the percolation engine.

Currently provides:
  - normal_confidence_interval() : mean -/+ z * stddev / sqrt(m)
  - confidence_interval()        : t-distribution CI for a sample mean

All functions are pure (no global state).
"""

from __future__ import annotations

import math

import numpy as np
import scipy.stats as stats


# 97.5th percentile of the standard normal, rounded as in the usual 95% CI.
Z_95: float = 1.96


# ---------------------------------------------------------------------------
# Normal-approximation interval
# ---------------------------------------------------------------------------


def normal_confidence_interval(
    mean: float,
    stddev: float,
    m: int,
    z: float = Z_95,
) -> tuple[float, float]:
    """Return ``(mean - z*stddev/sqrt(m), mean + z*stddev/sqrt(m))``.

    NaN in ``stddev`` propagates to both bounds.

    Raises
    ------
    ValueError
        If ``m <= 0``.
    """
    if m <= 0:
        raise ValueError(f"m must be positive; got {m}.")
    half_width = z * stddev / math.sqrt(m)
    return mean - half_width, mean + half_width


# ---------------------------------------------------------------------------
# t-distribution interval
# ---------------------------------------------------------------------------


def confidence_interval(
    samples: np.ndarray,
    confidence: float = 0.95,
) -> tuple[float, float]:
    """Compute a confidence interval for the population mean via t-distribution.

    Parameters
    ----------
    samples : np.ndarray, shape (m,)
        Sample array with m >= 2.
    confidence : float, optional
        Confidence level in (0, 1).  Default 0.95.

    Returns
    -------
    (ci_low, ci_high) : tuple of float
        Lower and upper bounds.

    Raises
    ------
    ValueError
        If m < 2 or confidence is not in (0, 1).
    """
    m = len(samples)
    if m < 2:
        raise ValueError("Need at least 2 samples for CI computation.")
    if not (0 < confidence < 1):
        raise ValueError(f"confidence must be in (0, 1); got {confidence}.")
    mean = float(np.mean(samples))
    se = float(stats.sem(samples))
    # Zero-variance sample: degenerate but well-defined CI.
    if se == 0.0:
        return mean, mean
    interval = stats.t.interval(confidence, df=m - 1, loc=mean, scale=se)
    return float(interval[0]), float(interval[1])
