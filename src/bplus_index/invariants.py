"""Shared invariant-checking utilities.

This module provides tree invariant validation that can be used by both
the stats scripts and the test suite.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from bplus_index.logging_config import get_logger

logger = get_logger(__name__)

if TYPE_CHECKING:
    from bplus_index.bplus_tree_base import BPlusTreeBase
    from bplus_index.tree_stats import Stats

TREE_FLAGS = (
    "is_balanced",
    "is_search_tree",
    "fanout_ok",
    "separators_consistent",
    "linked_leaf_nodes",
    "back_links_ok",
    "all_leaf_values_present",
    "leaf_keys_in_order",
)


class InvariantError(Exception):
    """Raised when a B+-tree invariant is violated."""


def assert_tree_invariants_raise(
    t: BPlusTreeBase,
    stats: Stats,
) -> None:
    """Check all invariants, raising :class:`InvariantError` on the first failure."""
    if t.root is None:
        raise InvariantError("Invariant failed: root is None")

    for flag in TREE_FLAGS:
        if not getattr(stats, flag):
            logger.error(f"Invariant failed: {flag} is False")
            raise InvariantError(f"Invariant failed: {flag} is False")

    if stats.item_count != t.size():
        raise InvariantError(
            f"Invariant failed: leaf item_count={stats.item_count} ≠ t.size()={t.size()}"
        )

    if not t.is_empty():
        if stats.height <= 0:
            raise InvariantError(f"Invariant failed: height={stats.height} ≤ 0 for non-empty tree")
        if stats.least_key is None:
            raise InvariantError("Invariant failed: least_key is None for non-empty tree")
        if stats.greatest_key is None:
            raise InvariantError("Invariant failed: greatest_key is None for non-empty tree")


def check_leaf_keys_and_values(
    tree: BPlusTreeBase,
    expected_keys: list[Any] | None = None,
) -> tuple[list[Any], bool, bool, bool]:
    """Traverse leaf nodes and validate keys / values.

    Presence is checked as multiset equality, so duplicate keys count.

    Returns
    -------
    (keys, presence_ok, all_have_values, order_ok)
    """
    keys: list[Any] = []
    all_have_values = True
    order_ok = True

    prev_key = None
    for key, value in tree.items():
        keys.append(key)
        if value is None:
            all_have_values = False
        if prev_key is not None and key < prev_key:
            order_ok = False
        prev_key = key

    presence_ok = True
    if expected_keys is not None:
        if len(keys) != len(expected_keys):
            presence_ok = False
        else:
            presence_ok = sorted(keys) == sorted(expected_keys)

    return keys, presence_ok, all_have_values, order_ok
