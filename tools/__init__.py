"""Command-line tooling built on percolation_engine outputs."""
