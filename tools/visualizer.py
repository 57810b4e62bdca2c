#!/usr/bin/env python3
"""
visualizer.py — Figures from percolation_engine outputs
=======================================================

Two plot types are produced, depending on which runner mode wrote the
results directory:

  1. **Threshold Distribution** (``stats`` mode) — histogram of the per-trial
     open fraction at percolation, with the sample mean and the 95%
     confidence interval marked.

  2. **Grid State** (``trial`` mode) — the percolated grid with blocked,
     open and full sites in distinct colours.

Usage examples
--------------
python3 tools/visualizer.py --results-dir results/ --output-dir visuals/

python3 tools/visualizer.py -r results/ -o visuals/ --dpi 150 --fmt pdf
"""

from __future__ import annotations

import argparse
import json
import sys
import warnings
from pathlib import Path

import matplotlib
matplotlib.use("Agg")  # Non-interactive; safe for headless/CI environments
import matplotlib.pyplot as plt
import matplotlib.colors as mcolors
import numpy as np
import pandas as pd
import seaborn as sns


# ---------------------------------------------------------------------------
# Style constants
# ---------------------------------------------------------------------------

BLOCKED_COLOR = "#2C3E50"
OPEN_COLOR    = "#FAFAFA"
FULL_COLOR    = "#3498DB"
MEAN_COLOR    = "#C0392B"
CI_COLOR      = "#E67E22"
SPINE_COLOR   = "#CCCCCC"
BACKGROUND    = "#FAFAFA"
ACCENT        = "#2C3E50"
FONTFAMILY    = "DejaVu Sans"

sns.set_theme(style="whitegrid", font=FONTFAMILY)


# ---------------------------------------------------------------------------
# Data loading
# ---------------------------------------------------------------------------


def load_threshold_csv(results_dir: Path) -> pd.DataFrame:
    """Load threshold_distribution.csv written by ``stats`` mode.

    Raises
    ------
    FileNotFoundError, ValueError
    """
    csv_path = results_dir / "threshold_distribution.csv"
    if not csv_path.exists():
        raise FileNotFoundError(f"threshold_distribution.csv not found in: {results_dir}")

    df = pd.read_csv(csv_path)
    if df.empty:
        raise ValueError(f"threshold_distribution.csv in '{results_dir}' is empty.")

    required = {"trial", "open_sites", "threshold"}
    missing = required - set(df.columns)
    if missing:
        raise ValueError(
            f"threshold_distribution.csv is missing required columns: {sorted(missing)}. "
            f"Found: {sorted(df.columns.tolist())}."
        )
    return df


def load_grid_csv(results_dir: Path) -> np.ndarray:
    """Load grid_state.csv written by ``trial`` mode.

    Returns
    -------
    np.ndarray, shape (n, n), dtype int
        0 = blocked, 1 = open, 2 = full.
    """
    csv_path = results_dir / "grid_state.csv"
    if not csv_path.exists():
        raise FileNotFoundError(f"grid_state.csv not found in: {results_dir}")

    df = pd.read_csv(csv_path)
    if df.empty:
        raise ValueError(f"grid_state.csv in '{results_dir}' is empty.")

    n = int(df["row"].max())
    state = np.zeros((n, n), dtype=np.int64)
    rows = df["row"].to_numpy() - 1
    cols = df["col"].to_numpy() - 1
    state[rows, cols] = df["open"].to_numpy() + df["full"].to_numpy()
    return state


def load_summary_json(results_dir: Path) -> dict:
    """Load summary.json, returning an empty dict if not found."""
    summary_path = results_dir / "summary.json"
    if not summary_path.exists():
        return {}
    try:
        return json.loads(summary_path.read_text())
    except json.JSONDecodeError as exc:
        warnings.warn(f"Could not parse summary.json: {exc}")
        return {}


# ---------------------------------------------------------------------------
# Plot 1: Threshold distribution
# ---------------------------------------------------------------------------


def plot_threshold_distribution(
    df: pd.DataFrame,
    summary: dict,
    output_path: Path,
    dpi: int = 120,
) -> None:
    """Histogram of per-trial thresholds with mean and 95% CI markers.

    Parameters
    ----------
    df : pd.DataFrame
        Threshold data (from :func:`load_threshold_csv`).
    summary : dict
        Parsed summary.json; ``mean``, ``ci_95_low`` and ``ci_95_high`` are
        drawn when present and not null.
    output_path : Path
        Destination PNG/PDF/SVG path.
    dpi : int
        Output resolution.
    """
    fig, ax = plt.subplots(figsize=(10, 6), facecolor=BACKGROUND)
    ax.set_facecolor(BACKGROUND)

    sns.histplot(df["threshold"], ax=ax, color=FULL_COLOR, alpha=0.7, kde=len(df) > 2)

    mean = summary.get("mean", float(df["threshold"].mean()))
    ax.axvline(mean, color=MEAN_COLOR, linewidth=1.8, label=f"Mean ({mean:.4f})")

    lo, hi = summary.get("ci_95_low"), summary.get("ci_95_high")
    if lo is not None and hi is not None:
        ax.axvspan(lo, hi, color=CI_COLOR, alpha=0.15, label=f"95% CI [{lo:.4f}, {hi:.4f}]")

    n = summary.get("n")
    title = "Percolation Threshold Distribution"
    if n is not None:
        title += f" — {n} x {n} grid, {len(df)} trials"
    ax.set_title(title, fontsize=13, fontweight="bold", color=ACCENT, pad=14)
    ax.set_xlabel("Open fraction at percolation", fontsize=12, color=ACCENT)
    ax.set_ylabel("Trials", fontsize=12, color=ACCENT)
    ax.legend(fontsize=9, framealpha=0.8)

    for spine in ax.spines.values():
        spine.set_edgecolor(SPINE_COLOR)

    plt.tight_layout()
    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(output_path, dpi=dpi, bbox_inches="tight")
    plt.close(fig)
    print(f"  [visualizer] Threshold Distribution → {output_path}")


# ---------------------------------------------------------------------------
# Plot 2: Grid state
# ---------------------------------------------------------------------------


def plot_grid_state(
    state: np.ndarray,
    output_path: Path,
    dpi: int = 120,
) -> None:
    """Render a grid with blocked, open and full sites.

    Parameters
    ----------
    state : np.ndarray, shape (n, n)
        0 = blocked, 1 = open, 2 = full (from :func:`load_grid_csv`).
    output_path : Path
        Destination path.
    dpi : int
    """
    cmap = mcolors.ListedColormap([BLOCKED_COLOR, OPEN_COLOR, FULL_COLOR])
    norm = mcolors.BoundaryNorm([-0.5, 0.5, 1.5, 2.5], cmap.N)

    fig, ax = plt.subplots(figsize=(8, 8), facecolor=BACKGROUND)
    ax.imshow(state, cmap=cmap, norm=norm, interpolation="nearest")
    ax.set_xticks([])
    ax.set_yticks([])
    ax.grid(False)

    n = state.shape[0]
    n_open = int(np.sum(state >= 1))
    n_full = int(np.sum(state == 2))
    ax.set_title(
        f"Percolated Grid — {n} x {n}\n"
        f"open={n_open} ({n_open / (n * n):.4f}), full={n_full}",
        fontsize=13, fontweight="bold", color=ACCENT, pad=14,
    )

    plt.tight_layout()
    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(output_path, dpi=dpi, bbox_inches="tight")
    plt.close(fig)
    print(f"  [visualizer] Grid State → {output_path}")


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        description=(
            "Generate figures from percolation_engine output directories.\n\n"
            "Produces whichever plots the directory supports:\n"
            "  1. Threshold Distribution (from threshold_distribution.csv)\n"
            "  2. Grid State (from grid_state.csv)"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p.add_argument(
        "--results-dir", "-r",
        type=Path,
        required=True,
        metavar="DIR",
        help="Path to a percolation_engine output directory.",
    )
    p.add_argument(
        "--output-dir", "-o",
        type=Path,
        default=Path("visuals"),
        metavar="DIR",
        help="Directory for output images (default: visuals/).",
    )
    p.add_argument(
        "--dpi",
        type=int,
        default=120,
        help="Output image resolution in DPI (default: 120).",
    )
    p.add_argument(
        "--fmt",
        choices=["png", "pdf", "svg"],
        default="png",
        help="Output image format (default: png).",
    )
    return p


def main(argv: list[str] | None = None) -> list[Path]:
    args = _build_parser().parse_args(argv)

    results_dir = args.results_dir
    output_dir  = args.output_dir
    fmt         = args.fmt
    produced: list[Path] = []

    if (results_dir / "threshold_distribution.csv").exists():
        df = load_threshold_csv(results_dir)
        td_path = output_dir / f"threshold_distribution.{fmt}"
        plot_threshold_distribution(df, load_summary_json(results_dir), td_path, dpi=args.dpi)
        produced.append(td_path)

    if (results_dir / "grid_state.csv").exists():
        gs_path = output_dir / f"grid_state.{fmt}"
        plot_grid_state(load_grid_csv(results_dir), gs_path, dpi=args.dpi)
        produced.append(gs_path)

    sep = "─" * 54
    print(f"\n{sep}")
    print("  visualizer — Output Summary")
    print(sep)
    for p in produced:
        print(f"  ✓  {p}")
    if not produced:
        print(f"  No plottable results found in {results_dir}.", file=sys.stderr)
    print(sep)
    return produced


if __name__ == "__main__":
    if not main():
        sys.exit(1)
