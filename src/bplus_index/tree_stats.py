"""Statistics and invariant checking for B+-tree structures."""

from __future__ import annotations

import collections
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from bplus_index.logging_config import get_logger

if TYPE_CHECKING:
    from bplus_index.bplus_tree_base import BPlusTreeBase, NodeBase

logger = get_logger(__name__)


@dataclass
class Stats:
    """Aggregated statistics for a B+-tree."""

    height: int
    internal_node_count: int
    leaf_count: int
    item_count: int
    max_fanout: int
    min_leaf_fill: int
    max_leaf_fill: int
    least_key: Any | None
    greatest_key: Any | None
    is_balanced: bool
    is_search_tree: bool
    fanout_ok: bool
    separators_consistent: bool
    linked_leaf_nodes: bool
    back_links_ok: bool
    all_leaf_values_present: bool
    leaf_keys_in_order: bool
    leaf_depth_hist: dict[int, int] = field(default_factory=dict)

    @property
    def avg_leaf_fill(self) -> float:
        return self.item_count / self.leaf_count if self.leaf_count else 0.0


def bptree_stats_(t: BPlusTreeBase) -> Stats:
    """
    Returns aggregated statistics for a B+-tree in **O(n)** time.

    The structural flags cover the shape invariants (balanced, bounded
    fan-out, ``len(children) == len(keys) + 1``, keys within their separator
    brackets) and the leaf chain (same leaves as an in-order walk, consistent
    back links, non-decreasing keys, no missing values).
    """
    from bplus_index.bplus_tree_base import InternalNodeBase

    bf = t.BRANCHING_FACTOR
    root = t.root

    stats = Stats(
        height=0,
        internal_node_count=0,
        leaf_count=0,
        item_count=0,
        max_fanout=0,
        min_leaf_fill=0,
        max_leaf_fill=0,
        least_key=None,
        greatest_key=None,
        is_balanced=True,
        is_search_tree=True,
        fanout_ok=True,
        separators_consistent=True,
        linked_leaf_nodes=True,
        back_links_ok=True,
        all_leaf_values_present=True,
        leaf_keys_in_order=True,
    )
    depth_hist = collections.Counter()
    in_order_leaves = []
    leaf_fills = []

    def in_bracket(key, lo, hi) -> bool:
        if lo is not None and key < lo:
            return False
        if hi is not None and key > hi:
            return False
        return True

    # ---------- in-order walk over the node graph -------------------
    def visit(node: NodeBase, depth: int, lo, hi) -> None:
        keys = node.keys
        is_root = node is root

        if isinstance(node, InternalNodeBase):
            children = node.children
            stats.internal_node_count += 1
            stats.max_fanout = max(stats.max_fanout, len(children))

            if len(children) != len(keys) + 1:
                stats.separators_consistent = False
            if len(children) > bf or len(children) < 2:
                stats.fanout_ok = False

            for i in range(1, len(keys)):
                if keys[i] < keys[i - 1]:
                    stats.is_search_tree = False
            for key in keys:
                if not in_bracket(key, lo, hi):
                    stats.is_search_tree = False

            for i, child in enumerate(children):
                child_lo = keys[i - 1] if 0 < i <= len(keys) else lo
                child_hi = keys[i] if i < len(keys) else hi
                visit(child, depth + 1, child_lo, child_hi)
            return

        # ---------- leaf -------------------------------------------
        values = node.values
        stats.leaf_count += 1
        stats.item_count += len(keys)
        depth_hist[depth] += 1
        in_order_leaves.append(node)
        leaf_fills.append(len(keys))

        if len(keys) != len(values):
            stats.separators_consistent = False
        if len(values) > bf or (not is_root and not values):
            stats.fanout_ok = False
        if any(v is None for v in values):
            stats.all_leaf_values_present = False
        for key in keys:
            if not in_bracket(key, lo, hi):
                stats.is_search_tree = False

    visit(root, 1, None, None)

    stats.height = max(depth_hist) if depth_hist else 0
    stats.is_balanced = len(depth_hist) == 1
    stats.leaf_depth_hist = dict(depth_hist)
    stats.min_leaf_fill = min(leaf_fills) if leaf_fills else 0
    stats.max_leaf_fill = max(leaf_fills) if leaf_fills else 0

    # ---------- leaf chain ------------------------------------------
    chain = list(t.iter_leaf_nodes())
    if len(chain) != len(in_order_leaves) or any(a is not b for a, b in zip(chain, in_order_leaves)):
        stats.linked_leaf_nodes = False

    prev_leaf = None
    prev_key = None
    for leaf in chain:
        if leaf.previous is not prev_leaf:
            stats.back_links_ok = False
        for key in leaf.keys:
            if prev_key is not None and key < prev_key:
                stats.leaf_keys_in_order = False
            if stats.least_key is None:
                stats.least_key = key
            stats.greatest_key = key
            prev_key = key
        prev_leaf = leaf

    return stats
