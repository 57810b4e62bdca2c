"""
Configuration loader for the percolation engine.

Loads JSON config files, validates fields, and builds the seeded numpy random
Generator that the experiments consume.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from numpy.random import Generator, default_rng


# ---------------------------------------------------------------------------
# Types
# ---------------------------------------------------------------------------

ConfigDict = dict[str, Any]


# ---------------------------------------------------------------------------
# Schema constants
# ---------------------------------------------------------------------------

RUN_MODES = {"stats", "trial"}


# ---------------------------------------------------------------------------
# Loader
# ---------------------------------------------------------------------------


def load_config(path: str | Path) -> ConfigDict:
    """Load and validate a JSON configuration file.

    Parameters
    ----------
    path : str or Path
        Path to the JSON configuration file.

    Returns
    -------
    ConfigDict
        Validated configuration dictionary.

    Raises
    ------
    ValueError
        If required fields are missing or values are invalid.
    FileNotFoundError
        If the config file does not exist.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with path.open("r") as fh:
        cfg: ConfigDict = json.load(fh)

    _validate_config(cfg)
    return cfg


def _require_positive_int(value: Any, name: str) -> None:
    # bool is an int subclass; reject it explicitly.
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValueError(f"{name} must be a positive integer, got {value!r}")


def _validate_config(cfg: ConfigDict) -> None:
    """Validate top-level config fields.

    Raises
    ------
    ValueError
        On any validation failure.
    """
    required_top = {"grid", "seed", "mode"}
    missing = required_top - cfg.keys()
    if missing:
        raise ValueError(f"Config missing required fields: {missing}")

    grid_cfg = cfg["grid"]
    if not isinstance(grid_cfg, dict) or "n" not in grid_cfg:
        raise ValueError("grid.n is required")
    _require_positive_int(grid_cfg["n"], "grid.n")

    if cfg["mode"] not in RUN_MODES:
        raise ValueError(
            f"mode must be one of {RUN_MODES}, got {cfg['mode']!r}"
        )

    if cfg["mode"] == "stats":
        if "trials" not in cfg:
            raise ValueError("trials is required when mode is 'stats'")
        _require_positive_int(cfg["trials"], "trials")


def build_rng(cfg: ConfigDict) -> Generator:
    """Build a seeded numpy Generator from a config dict."""
    return default_rng(int(cfg["seed"]))
