"""Utility functions for testing B+-tree invariants."""

from typing import Any, Iterable, List, Optional, Tuple

from bplus_index.bplus_tree_base import BPlusTreeBase
from bplus_index.invariants import TREE_FLAGS
from bplus_index.tree_stats import Stats


def assert_tree_invariants_tc(tc, t: BPlusTreeBase, stats: Stats, err_msg: Optional[str] = "") -> None:
    """TestCase version: use inside unittest.TestCase methods."""
    tc.assertIsNotNone(t.root, f"Invariant failed: root is None\n\n{err_msg}")

    for flag in TREE_FLAGS:
        tc.assertTrue(
            getattr(stats, flag),
            f"Invariant failed: {flag} is False \n\n{err_msg}"
        )

    tc.assertEqual(
        stats.item_count, t.size(),
        f"Invariant failed: leaf item_count={stats.item_count} ≠ size()={t.size()}\n\n{err_msg}"
    )
    tc.assertLessEqual(
        stats.max_leaf_fill, t.BRANCHING_FACTOR,
        f"Invariant failed: max_leaf_fill={stats.max_leaf_fill} > B={t.BRANCHING_FACTOR}\n\n{err_msg}"
    )
    tc.assertLessEqual(
        stats.max_fanout, t.BRANCHING_FACTOR,
        f"Invariant failed: max_fanout={stats.max_fanout} > B={t.BRANCHING_FACTOR}\n\n{err_msg}"
    )

    if not t.is_empty():
        tc.assertGreater(
            stats.height, 0,
            f"Invariant failed: height={stats.height} ≤ 0 for non-empty tree\n\n{err_msg}"
        )
        tc.assertEqual(
            stats.height, t.height(),
            f"Invariant failed: stats.height={stats.height} ≠ t.height()={t.height()}\n\n{err_msg}"
        )
        tc.assertIsNotNone(
            stats.least_key,
            f"Invariant failed: least_key is None for non-empty tree\n\n{err_msg}"
        )
        tc.assertIsNotNone(
            stats.greatest_key,
            f"Invariant failed: greatest_key is None for non-empty tree\n\n{err_msg}"
        )


def full_scan(tree: BPlusTreeBase, key: Any, comparator: str) -> List[Any]:
    """Reference range search: filter every entry of the leaf chain, head to tail."""
    if comparator == ">=":
        return [v for k, v in tree.items() if k >= key]
    if comparator == "<=":
        return [v for k, v in tree.items() if k <= key]
    if comparator == "==":
        return [v for k, v in tree.items() if k == key]
    return []


def oracle(entries: Iterable[Tuple[Any, Any]], key: Any, comparator: str) -> List[Any]:
    """Values of all inserted pairs matching the comparator, ignoring order."""
    if comparator == ">=":
        return [v for k, v in entries if k >= key]
    if comparator == "<=":
        return [v for k, v in entries if k <= key]
    if comparator == "==":
        return [v for k, v in entries if k == key]
    return []
