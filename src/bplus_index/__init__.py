"""
bplus_index: in-memory B+-tree index with ordered range search.

Quick-start imports::

    from bplus_index import create_bplustree

    tree = create_bplustree(3)
    tree.insert(5, "five")
    tree.range_search(5, ">=")
"""

# Shared primitives
from bplus_index.base import COMPARATORS, EQ, GE, LE, AbstractOrderedIndex
from bplus_index.bplus_tree_base import (
    BPlusTreeBase,
    InternalNodeBase,
    LeafNodeBase,
    NodeBase,
)
from bplus_index.factory import create_bplustree, make_bplustree_classes

# Stats & invariants
from bplus_index.invariants import (
    InvariantError,
    assert_tree_invariants_raise,
    check_leaf_keys_and_values,
)
from bplus_index.tree_stats import Stats, bptree_stats_

__all__ = [
    # Primitives
    "AbstractOrderedIndex",
    "COMPARATORS",
    "EQ",
    "GE",
    "LE",
    # B+-tree
    "BPlusTreeBase",
    "InternalNodeBase",
    "LeafNodeBase",
    "NodeBase",
    "create_bplustree",
    "make_bplustree_classes",
    # Stats & invariants
    "InvariantError",
    "Stats",
    "assert_tree_invariants_raise",
    "bptree_stats_",
    "check_leaf_keys_and_values",
]
