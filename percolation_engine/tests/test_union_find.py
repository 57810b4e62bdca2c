"""Unit tests for the weighted quick-union structure."""

from __future__ import annotations
import math, sys, unittest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent.parent))
from percolation_engine.union_find import WeightedQuickUnionUF


def _depth(uf: WeightedQuickUnionUF, p: int) -> int:
    d = 0
    while uf._parent[p] != p:
        p = int(uf._parent[p])
        d += 1
    return d


class TestConstruction(unittest.TestCase):

    def test_singletons(self):
        uf = WeightedQuickUnionUF(5)
        self.assertEqual(len(uf), 5)
        self.assertEqual(uf.count, 5)
        for p in range(5):
            self.assertEqual(uf.find(p), p)

    def test_zero_size_raises(self):
        with self.assertRaises(ValueError):
            WeightedQuickUnionUF(0)

    def test_negative_size_raises(self):
        with self.assertRaises(ValueError):
            WeightedQuickUnionUF(-1)


class TestUnion(unittest.TestCase):

    def test_union_connects(self):
        uf = WeightedQuickUnionUF(4)
        uf.union(0, 1)
        self.assertTrue(uf.connected(0, 1))
        self.assertTrue(uf.connected(1, 0))
        self.assertFalse(uf.connected(0, 2))

    def test_transitive(self):
        uf = WeightedQuickUnionUF(6)
        uf.union(0, 1)
        uf.union(1, 2)
        uf.union(4, 5)
        self.assertTrue(uf.connected(0, 2))
        self.assertFalse(uf.connected(2, 4))
        self.assertEqual(uf.count, 3)

    def test_redundant_union_is_noop(self):
        uf = WeightedQuickUnionUF(3)
        uf.union(0, 1)
        parents = uf._parent.copy()
        uf.union(1, 0)
        uf.union(0, 1)
        self.assertEqual(uf.count, 2)
        self.assertEqual(parents.tolist(), uf._parent.tolist())

    def test_tie_attaches_first_under_second(self):
        uf = WeightedQuickUnionUF(2)
        uf.union(0, 1)
        self.assertEqual(uf.find(0), 1)

    def test_smaller_goes_under_larger(self):
        uf = WeightedQuickUnionUF(3)
        uf.union(0, 1)          # root 1, size 2
        uf.union(1, 2)          # {2} is smaller, whatever the argument order
        self.assertEqual(uf.find(2), 1)

    def test_sequential_chain_stays_flat(self):
        uf = WeightedQuickUnionUF(64)
        for p in range(63):
            uf.union(p, p + 1)
        self.assertEqual(uf.count, 1)
        self.assertLessEqual(max(_depth(uf, p) for p in range(64)), 1)

    def test_height_logarithmic_balanced_merges(self):
        n = 256
        uf = WeightedQuickUnionUF(n)
        step = 1
        while step < n:
            for p in range(0, n, 2 * step):
                uf.union(p, p + step)
            step *= 2
        self.assertEqual(uf.count, 1)
        self.assertLessEqual(max(_depth(uf, p) for p in range(n)), int(math.log2(n)))


class TestBounds(unittest.TestCase):

    def test_find_out_of_range(self):
        uf = WeightedQuickUnionUF(3)
        with self.assertRaises(IndexError):
            uf.find(3)
        with self.assertRaises(IndexError):
            uf.find(-1)

    def test_union_out_of_range_does_not_mutate(self):
        uf = WeightedQuickUnionUF(3)
        with self.assertRaises(IndexError):
            uf.union(0, 3)
        self.assertEqual(uf.count, 3)
        self.assertEqual(uf.find(0), 0)

    def test_connected_out_of_range(self):
        uf = WeightedQuickUnionUF(3)
        with self.assertRaises(IndexError):
            uf.connected(-1, 0)


if __name__ == "__main__":
    unittest.main()
