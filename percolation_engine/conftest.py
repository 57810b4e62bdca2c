# conftest.py — package directory
#
# Ensures that the repository root is on sys.path when pytest is invoked
# from anywhere in the tree, so "import percolation_engine" and the root
# "runner" wrapper resolve without requiring a package install.
#
# Usage:
#   pytest percolation_engine/tests -v
#   pytest percolation_engine/tests/test_percolation.py -v

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))
