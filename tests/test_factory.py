"""Tests for the branching-factor class factory."""

import unittest

from bplus_index.bplus_tree_base import BPlusTreeBase, InternalNodeBase, LeafNodeBase
from bplus_index.factory import create_bplustree, make_bplustree_classes


class TestMakeClasses(unittest.TestCase):

    def test_class_names_and_bases(self):
        TreeB, InternalB, LeafB = make_bplustree_classes(5)
        self.assertEqual(TreeB.__name__, "BPlusTree_B5")
        self.assertEqual(InternalB.__name__, "InternalNode_B5")
        self.assertEqual(LeafB.__name__, "LeafNode_B5")
        self.assertTrue(issubclass(TreeB, BPlusTreeBase))
        self.assertTrue(issubclass(InternalB, InternalNodeBase))
        self.assertTrue(issubclass(LeafB, LeafNodeBase))

    def test_branching_factor_bound_on_all_classes(self):
        TreeB, InternalB, LeafB = make_bplustree_classes(7)
        self.assertEqual(TreeB.BRANCHING_FACTOR, 7)
        self.assertEqual(InternalB.BRANCHING_FACTOR, 7)
        self.assertEqual(LeafB.BRANCHING_FACTOR, 7)
        self.assertIs(TreeB.InternalNodeClass, InternalB)
        self.assertIs(TreeB.LeafNodeClass, LeafB)

    def test_classes_are_cached(self):
        self.assertIs(make_bplustree_classes(6)[0], make_bplustree_classes(6)[0])
        self.assertIsNot(make_bplustree_classes(6)[0], make_bplustree_classes(8)[0])

    def test_slots_prevent_stray_attributes(self):
        tree = create_bplustree(3)
        with self.assertRaises(AttributeError):
            tree.root.colour = "red"

    def test_invalid_branching_factors(self):
        for bf in (2, 0, -1, "4", 3.0, True, None):
            with self.subTest(branching_factor=bf):
                with self.assertRaises(ValueError):
                    make_bplustree_classes(bf)


class TestCreateTree(unittest.TestCase):

    def test_fresh_instances(self):
        a = create_bplustree(4)
        b = create_bplustree(4)
        self.assertIsNot(a, b)
        self.assertIs(type(a), type(b))
        a.insert(1, "x")
        self.assertEqual(b.size(), 0)
        self.assertEqual(a.branching_factor, 4)

    def test_repr(self):
        tree = create_bplustree(3)
        for k in range(4):
            tree.insert(k, k)
        self.assertEqual(repr(tree), "BPlusTree_B3(branching_factor=3, size=4, height=2)")


if __name__ == "__main__":
    unittest.main()
