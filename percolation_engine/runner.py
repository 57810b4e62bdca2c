"""
Runner script for the percolation engine.

Loads a JSON config and dispatches on ``mode``.

stats
    Threshold estimation over ``trials`` independent grids; outputs
    threshold_distribution.csv, results_summary.csv and summary.json.

trial
    A single grid opened at random until it percolates; outputs
    trial_result.json and grid_state.csv.

Usage
-----
    python -m percolation_engine.runner config.json [--output-dir results/]

All outputs are written to the specified directory.  A config snapshot
with SHA-256 hash is always saved alongside results for reproducibility.
"""

from __future__ import annotations

import argparse
import csv
import hashlib
import json
import math
import sys
import time
from pathlib import Path

import numpy as np

from .config import load_config, build_rng
from .graph import cluster_sizes
from .monte_carlo import PercolationStats
from .percolation import Percolation


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Percolation engine: single trial or threshold estimation."
    )
    parser.add_argument("config", help="Path to JSON configuration file.")
    parser.add_argument(
        "--output-dir",
        default="results",
        help="Directory for output files (default: results/).",
    )
    return parser.parse_args(argv)


# ---------------------------------------------------------------------------
# Filesystem helpers
# ---------------------------------------------------------------------------


def _ensure_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def _write_csv(path: Path, fieldnames: list[str], rows: list[dict]) -> None:
    with path.open("w", newline="") as fh:
        writer = csv.DictWriter(fh, fieldnames=fieldnames)
        writer.writeheader()
        writer.writerows(rows)


def _config_hash(cfg: dict) -> str:
    """Compute a SHA-256 hash of the JSON-serialised config for reproducibility."""
    serialised = json.dumps(cfg, sort_keys=True).encode("utf-8")
    return hashlib.sha256(serialised).hexdigest()


def _save_config_snapshot(output_dir: Path, cfg: dict) -> None:
    snapshot = {
        "config": cfg,
        "sha256": _config_hash(cfg),
    }
    (output_dir / "config_snapshot.json").write_text(json.dumps(snapshot, indent=2))


def _fmt(v: float | None, spec: str = ".6f") -> str:
    return "undefined" if v is None or math.isnan(v) else format(v, spec)


# ---------------------------------------------------------------------------
# Single trial
# ---------------------------------------------------------------------------


def _run_trial(cfg: dict, output_dir: Path) -> None:
    """Open random sites on one grid until it percolates and record the state."""
    n = int(cfg["grid"]["n"])
    rng = build_rng(cfg)
    print(f"[Trial] n={n}")

    t0 = time.perf_counter()
    grid = Percolation(n)
    while not grid.percolates():
        row = rng.integers(1, n, endpoint=True)
        col = rng.integers(1, n, endpoint=True)
        grid.open(row, col)
    elapsed = time.perf_counter() - t0

    open_mask = grid.open_mask()
    full_mask = grid.full_mask()
    sizes = cluster_sizes(open_mask)
    result = {
        "mode": "trial",
        "n": n,
        "open_sites": grid.number_of_open_sites,
        "threshold": grid.number_of_open_sites / (n * n),
        "full_sites": int(np.sum(full_mask)),
        "n_clusters": int(sizes.shape[0]),
        "largest_cluster": int(sizes[0]) if sizes.shape[0] else 0,
        "elapsed_seconds": elapsed,
    }
    (output_dir / "trial_result.json").write_text(json.dumps(result, indent=2))

    _write_csv(
        output_dir / "grid_state.csv",
        ["row", "col", "open", "full"],
        [
            {
                "row": r + 1,
                "col": c + 1,
                "open": int(open_mask[r, c]),
                "full": int(full_mask[r, c]),
            }
            for r in range(n)
            for c in range(n)
        ],
    )

    sep = "-" * 58
    print(sep)
    print("  Percolation Engine — Single Trial")
    print(sep)
    print(f"  Grid                  : {n} x {n}")
    print(f"  Open sites            : {result['open_sites']}")
    print(f"  Threshold             : {result['threshold']:.6f}")
    print(f"  Full sites            : {result['full_sites']}")
    print(f"  Largest cluster       : {result['largest_cluster']}")
    print(f"  Elapsed               : {elapsed:.2f}s")
    print(sep)


# ---------------------------------------------------------------------------
# Threshold estimation
# ---------------------------------------------------------------------------


def _run_stats(cfg: dict, output_dir: Path) -> None:
    """Estimate the percolation threshold over independent trials."""
    n = int(cfg["grid"]["n"])
    trials = int(cfg["trials"])
    rng = build_rng(cfg)
    print(f"[Stats] n={n} | trials={trials}")

    t0 = time.perf_counter()
    stats = PercolationStats(n, trials, rng)
    elapsed = time.perf_counter() - t0

    _write_csv(
        output_dir / "threshold_distribution.csv",
        ["trial", "open_sites", "threshold"],
        [
            {
                "trial": i,
                "open_sites": int(count),
                "threshold": round(float(p), 6),
            }
            for i, (count, p) in enumerate(
                zip(stats.open_counts.tolist(), stats.thresholds.tolist())
            )
        ],
    )

    summary = {"mode": "stats", **stats.summary_dict(), "elapsed_seconds": round(elapsed, 4)}
    _write_csv(
        output_dir / "results_summary.csv",
        ["metric", "value"],
        [{"metric": key, "value": v} for key, v in summary.items()],
    )
    (output_dir / "summary.json").write_text(json.dumps(summary, indent=2))

    sep = "-" * 58
    print(sep)
    print("  Percolation Engine — Threshold Estimation")
    print(sep)
    print(f"  Grid                  : {n} x {n}")
    print(f"  Trials                : {trials}")
    print(f"  Elapsed               : {elapsed:.2f}s")
    print()
    print(f"  mean                    = {_fmt(summary['mean'])}")
    print(f"  stddev                  = {_fmt(summary['stddev'])}")
    print(
        f"  95% confidence interval = "
        f"[{_fmt(summary['ci_95_low'])}, {_fmt(summary['ci_95_high'])}]"
    )
    print(sep)


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)
    output_dir = Path(args.output_dir)
    _ensure_dir(output_dir)

    cfg = load_config(args.config)
    _save_config_snapshot(output_dir, cfg)

    (output_dir / "experiment_metadata.json").write_text(
        json.dumps(
            {
                "config_file": str(Path(args.config).resolve()),
                "output_dir": str(output_dir.resolve()),
                "config_sha256": _config_hash(cfg),
                "timestamp": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()),
            },
            indent=2,
        )
    )

    mode: str = str(cfg.get("mode", "stats"))
    if mode == "stats":
        _run_stats(cfg, output_dir)
    elif mode == "trial":
        _run_trial(cfg, output_dir)
    else:
        print(f"ERROR: Unknown mode {mode!r}. Must be 'stats' or 'trial'.")
        sys.exit(1)

    print(f"  Results saved to : {output_dir.resolve()}")


if __name__ == "__main__":
    main()
