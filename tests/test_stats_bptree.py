"""Tests for tree statistics and invariant checks."""

import random
import unittest

import numpy as np

from bplus_index.factory import create_bplustree
from bplus_index.invariants import (
    InvariantError,
    assert_tree_invariants_raise,
    check_leaf_keys_and_values,
)
from bplus_index.tree_stats import bptree_stats_
from scripts.demo_bplus_tree import run_demo
from stats.stats_bplus_tree import random_bptree_of_size, repeated_experiment

from tests.test_base import BPlusTreeTestCase


class TestStatsKnownShape(BPlusTreeTestCase):

    def setUp(self):
        super().setUp()
        self.insert_keys(range(5, 45, 5))

    def test_counts(self):
        stats = bptree_stats_(self.tree)
        self.assertEqual(stats.height, 3)
        self.assertEqual(stats.internal_node_count, 3)
        self.assertEqual(stats.leaf_count, 4)
        self.assertEqual(stats.item_count, 8)
        self.assertEqual(stats.max_fanout, 2)
        self.assertEqual(stats.min_leaf_fill, 2)
        self.assertEqual(stats.max_leaf_fill, 2)
        self.assertEqual(stats.avg_leaf_fill, 2.0)
        self.assertEqual(stats.least_key, 5)
        self.assertEqual(stats.greatest_key, 40)
        self.assertEqual(stats.leaf_depth_hist, {3: 4})

    def test_flags(self):
        stats = bptree_stats_(self.tree)
        assert_tree_invariants_raise(self.tree, stats)
        self.assertTrue(stats.is_balanced)
        self.assertTrue(stats.linked_leaf_nodes)
        self.assertTrue(stats.back_links_ok)


class TestStatsEmptyTree(BPlusTreeTestCase):

    def test_empty(self):
        stats = bptree_stats_(self.tree)
        self.assertEqual(stats.height, 1)
        self.assertEqual(stats.leaf_count, 1)
        self.assertEqual(stats.item_count, 0)
        self.assertIsNone(stats.least_key)
        self.assertEqual(stats.avg_leaf_fill, 0.0)
        assert_tree_invariants_raise(self.tree, stats)


class TestInvariantViolations(unittest.TestCase):
    """Corrupt a tree by hand and check the violation is reported."""

    def setUp(self):
        self.tree = create_bplustree(3)
        for k in range(12):
            self.tree.insert(k, k)

    def assert_violation(self, flag):
        stats = bptree_stats_(self.tree)
        self.assertFalse(getattr(stats, flag))
        with self.assertRaises(InvariantError):
            assert_tree_invariants_raise(self.tree, stats)

    def test_broken_forward_link(self):
        first = next(self.tree.iter_leaf_nodes())
        first.next = None
        self.assert_violation("linked_leaf_nodes")

    def test_broken_back_link(self):
        leaves = list(self.tree.iter_leaf_nodes())
        leaves[2].previous = leaves[0]
        self.assert_violation("back_links_ok")

    def test_unsorted_leaf(self):
        leaves = list(self.tree.iter_leaf_nodes())
        leaves[1].keys.reverse()
        self.assert_violation("leaf_keys_in_order")

    def test_overfull_leaf(self):
        leaf = next(self.tree.iter_leaf_nodes())
        leaf.keys[:0] = [-3, -2]
        leaf.values[:0] = [-3, -2]
        self.tree.count += 2
        self.assert_violation("fanout_ok")

    def test_missing_child(self):
        self.tree.root.children[0].children.pop()
        self.assert_violation("separators_consistent")

    def test_missing_value(self):
        leaf = next(self.tree.iter_leaf_nodes())
        leaf.values[0] = None
        self.assert_violation("all_leaf_values_present")

    def test_count_mismatch(self):
        self.tree.count += 1
        stats = bptree_stats_(self.tree)
        with self.assertRaises(InvariantError):
            assert_tree_invariants_raise(self.tree, stats)


class TestCheckLeafKeysAndValues(BPlusTreeTestCase):

    def test_presence_and_order(self):
        self.insert_keys([4, 2, 2, 9, 1])
        keys, presence_ok, have_values, order_ok = check_leaf_keys_and_values(self.tree, [1, 2, 2, 4, 9])
        self.assertEqual(keys, [1, 2, 2, 4, 9])
        self.assertTrue(presence_ok)
        self.assertTrue(have_values)
        self.assertTrue(order_ok)

    def test_presence_counts_duplicates(self):
        self.insert_keys([4, 2, 2, 9, 1])
        _, presence_ok, _, _ = check_leaf_keys_and_values(self.tree, [1, 2, 4, 9, 9])
        self.assertFalse(presence_ok)


class TestExperimentHelpers(unittest.TestCase):

    def test_random_tree_with_duplicates(self):
        np.random.seed(3)
        tree = random_bptree_of_size(200, 4, duplicate_ratio=0.5)
        self.assertEqual(tree.size(), 200)
        stats = bptree_stats_(tree)
        assert_tree_invariants_raise(tree, stats)
        self.assertEqual(stats.item_count, 200)

    def test_repeated_experiment_logs_summary(self):
        np.random.seed(5)
        with self.assertLogs("stats.stats_bplus_tree", level="INFO") as cm:
            repeated_experiment(size=50, repetitions=2, branching_factor=3)
        self.assertTrue(any("Height amplification" in line for line in cm.output))

    def test_demo_scenario(self):
        random.seed(11)
        tree, filtered = run_demo(inserts=400, branching_factor=3, pivot=0.2, show_steps=False)
        self.assertEqual(tree.size(), 400)
        self.assertTrue(all(v >= 0.2 for v in filtered))
        self.assertEqual(filtered, sorted(filtered))


if __name__ == "__main__":
    unittest.main()
