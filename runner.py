"""Repository-level CLI entrypoint for the percolation engine.

This wrapper preserves the documented invocation style:

    python runner.py <config.json> [--output-dir results/]

It delegates execution to :mod:`percolation_engine.runner`.
"""

from __future__ import annotations

import sys
from pathlib import Path

from percolation_engine.runner import main


def _rewrite_config_path_arg(argv: list[str]) -> list[str]:
    """Rewrite config argument to ``percolation_engine/<name>`` when needed.

    Example configs such as ``config_stats.json`` live under
    ``percolation_engine/`` but are usually named from the repository root.
    """
    if len(argv) < 2:
        return argv

    candidate = Path(argv[1])
    if candidate.exists():
        return argv

    alt = Path("percolation_engine") / candidate
    if alt.exists():
        out = list(argv)
        out[1] = str(alt)
        return out

    return argv


if __name__ == "__main__":
    sys.argv = _rewrite_config_path_arg(sys.argv)
    main()
