"""
Unit tests for the threshold estimator.

Covers:
  - Argument validation
  - Open-count semantics under a scripted random source (re-draws not counted)
  - Mean / stddev / confidence interval arithmetic
  - Single-trial behaviour (stddev undefined -> NaN)
  - Reproducibility and plausibility under a seeded numpy Generator
"""

from __future__ import annotations

import math
import sys
import unittest
import warnings
from pathlib import Path

import numpy as np
from numpy.random import default_rng

sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from percolation_engine.monte_carlo import PercolationStats, run_trial, estimate_threshold
from percolation_engine.utils import confidence_interval, normal_confidence_interval


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class ScriptedRng:
    """Random source replaying a fixed sequence of draws."""

    def __init__(self, values):
        self._values = list(values)
        self.calls = []

    def integers(self, low, high, endpoint=False):
        self.calls.append((low, high, endpoint))
        return self._values.pop(0)

    @property
    def remaining(self):
        return len(self._values)


# ---------------------------------------------------------------------------
# Single trial
# ---------------------------------------------------------------------------


class TestRunTrial(unittest.TestCase):

    def test_redraw_of_open_site_not_counted(self):
        # (1,1) opened, (1,1) drawn again, then (2,1) completes the path.
        rng = ScriptedRng([1, 1, 1, 1, 2, 1])
        self.assertEqual(run_trial(2, rng), 2)
        self.assertEqual(rng.remaining, 0)

    def test_draws_inclusive_range(self):
        rng = ScriptedRng([1, 1, 2, 1])
        run_trial(2, rng)
        self.assertTrue(all(call == (1, 2, True) for call in rng.calls))

    def test_single_site_grid(self):
        rng = ScriptedRng([1, 1])
        self.assertEqual(run_trial(1, rng), 1)

    def test_seeded_trial_bounds(self):
        n = 10
        count = run_trial(n, default_rng(3))
        self.assertGreaterEqual(count, n)
        self.assertLessEqual(count, n * n)


# ---------------------------------------------------------------------------
# Estimator
# ---------------------------------------------------------------------------


class TestValidation(unittest.TestCase):

    def test_nonpositive_n_raises(self):
        for n in (0, -1):
            with self.assertRaises(ValueError):
                PercolationStats(n, 5, default_rng(0))

    def test_nonpositive_trials_raises(self):
        for t in (0, -3):
            with self.assertRaises(ValueError):
                PercolationStats(5, t, default_rng(0))


class TestScriptedStatistics(unittest.TestCase):

    def setUp(self):
        # Trial 1: (1,1), (1,1) again, (2,1)          -> 2 opens -> 0.50
        # Trial 2: (2,2), (1,1), (1,2)                -> 3 opens -> 0.75
        rng = ScriptedRng([1, 1, 1, 1, 2, 1, 2, 2, 1, 1, 1, 2])
        self.stats = PercolationStats(2, 2, rng)

    def test_thresholds(self):
        np.testing.assert_allclose(self.stats.thresholds, [0.5, 0.75])
        np.testing.assert_array_equal(self.stats.open_counts, [2, 3])

    def test_mean(self):
        self.assertAlmostEqual(self.stats.mean(), 0.625, places=12)

    def test_stddev(self):
        self.assertAlmostEqual(self.stats.stddev(), math.sqrt(2 * 0.125 ** 2), places=12)

    def test_confidence_interval(self):
        half = 1.96 * self.stats.stddev() / math.sqrt(2)
        self.assertAlmostEqual(self.stats.confidence_lo(), 0.625 - half, places=12)
        self.assertAlmostEqual(self.stats.confidence_hi(), 0.625 + half, places=12)

    def test_thresholds_read_only(self):
        with self.assertRaises(ValueError):
            self.stats.thresholds[0] = 0.0


class TestSingleTrial(unittest.TestCase):

    def setUp(self):
        self.stats = PercolationStats(2, 1, ScriptedRng([1, 2, 2, 2]))

    def test_mean_equals_sample(self):
        self.assertEqual(self.stats.mean(), 0.5)
        self.assertEqual(self.stats.mean(), float(self.stats.thresholds[0]))

    def test_stddev_is_nan_with_warning(self):
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            sd = self.stats.stddev()
        self.assertTrue(math.isnan(sd))
        self.assertTrue(any(issubclass(w.category, UserWarning) for w in caught))

    def test_confidence_bounds_nan(self):
        self.assertTrue(math.isnan(self.stats.confidence_lo()))
        self.assertTrue(math.isnan(self.stats.confidence_hi()))

    def test_summary_nan_as_none(self):
        summary = self.stats.summary_dict()
        self.assertIsNone(summary["stddev"])
        self.assertIsNone(summary["ci_95_low"])
        self.assertIsNone(summary["ci_95_t_high"])
        self.assertEqual(summary["mean"], 0.5)


class TestSeededEstimator(unittest.TestCase):

    def test_reproducible(self):
        a = PercolationStats(10, 20, default_rng(42))
        b = PercolationStats(10, 20, default_rng(42))
        np.testing.assert_array_equal(a.thresholds, b.thresholds)

    def test_estimate_threshold_wrapper(self):
        a = estimate_threshold(10, 20, seed=42)
        b = PercolationStats(10, 20, default_rng(42))
        np.testing.assert_array_equal(a.thresholds, b.thresholds)

    def test_threshold_plausible(self):
        stats = estimate_threshold(20, 60, seed=2024)
        # Site percolation threshold on the square lattice is about 0.5927.
        self.assertGreater(stats.mean(), 0.5)
        self.assertLess(stats.mean(), 0.7)
        self.assertLess(stats.confidence_lo(), stats.mean())
        self.assertGreater(stats.confidence_hi(), stats.mean())
        self.assertTrue(np.all((stats.thresholds > 0) & (stats.thresholds <= 1)))

    def test_single_site_grid_threshold_is_one(self):
        stats = PercolationStats(1, 5, default_rng(0))
        np.testing.assert_array_equal(stats.thresholds, np.ones(5))
        self.assertEqual(stats.stddev(), 0.0)

    def test_summary_dict_keys(self):
        summary = estimate_threshold(5, 10, seed=1).summary_dict()
        for key in ("n", "trials", "mean", "stddev", "ci_95_low", "ci_95_high",
                    "ci_95_t_low", "ci_95_t_high", "mean_open_sites"):
            self.assertIn(key, summary)
        self.assertEqual(summary["trials"], 10)


# ---------------------------------------------------------------------------
# Utilities
# ---------------------------------------------------------------------------


class TestIntervals(unittest.TestCase):

    def test_normal_interval(self):
        lo, hi = normal_confidence_interval(0.5, 0.1, 4)
        self.assertAlmostEqual(lo, 0.5 - 0.098, places=12)
        self.assertAlmostEqual(hi, 0.5 + 0.098, places=12)

    def test_normal_interval_nan_propagates(self):
        lo, hi = normal_confidence_interval(0.5, math.nan, 1)
        self.assertTrue(math.isnan(lo) and math.isnan(hi))

    def test_normal_interval_rejects_empty(self):
        with self.assertRaises(ValueError):
            normal_confidence_interval(0.5, 0.1, 0)

    def test_t_interval_wider_than_normal_for_small_m(self):
        samples = np.array([0.55, 0.6, 0.58, 0.62])
        sd = float(np.std(samples, ddof=1))
        n_lo, n_hi = normal_confidence_interval(float(np.mean(samples)), sd, 4)
        t_lo, t_hi = confidence_interval(samples)
        self.assertLess(t_lo, n_lo)
        self.assertGreater(t_hi, n_hi)

    def test_t_interval_zero_variance(self):
        lo, hi = confidence_interval(np.array([0.6, 0.6, 0.6]))
        self.assertEqual((lo, hi), (0.6, 0.6))

    def test_t_interval_needs_two_samples(self):
        with self.assertRaises(ValueError):
            confidence_interval(np.array([0.5]))


if __name__ == "__main__":
    unittest.main()
