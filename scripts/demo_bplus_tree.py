"""
Basic usage scenario for a B+-tree.

Builds a tree with branching factor 3 from repeated random picks of a few
float keys (value = key), printing the structure after every insertion, and
compares ``range_search`` against a plain list holding the same data.
"""

import argparse
import logging
import random

from bplus_index.factory import create_bplustree
from bplus_index.invariants import assert_tree_invariants_raise
from bplus_index.tree_stats import bptree_stats_

logger = logging.getLogger(__name__)

CANDIDATES = (0.0, 0.5, 0.2, 0.8)


def run_demo(inserts: int = 400, branching_factor: int = 3, pivot: float = 0.2, show_steps: bool = True):
    tree = create_bplustree(branching_factor)
    inserted = []

    for _ in range(inserts):
        key = random.choice(CANDIDATES)
        inserted.append(key)
        tree.insert(key, key)
        if show_steps:
            logger.info("Tree structure:\n%s", tree)

    filtered = tree.range_search(pivot, ">=")
    logger.info("Filtered values: %s", filtered)

    expected = sorted(k for k in inserted if k >= pivot)
    if filtered != expected:
        raise AssertionError(f"range_search({pivot}, '>=') disagrees with list filter")

    assert_tree_invariants_raise(tree, bptree_stats_(tree))
    logger.info("size=%d height=%d", tree.size(), tree.height())
    return tree, filtered


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Demonstrate insert and range_search on a B+-tree.")
    parser.add_argument("--inserts", type=int, default=400, help="Number of insertions.")
    parser.add_argument("--branching-factor", type=int, default=3, help="Branching factor (> 2).")
    parser.add_argument("--pivot", type=float, default=0.2, help="Key for range_search(pivot, '>=').")
    parser.add_argument("--quiet", action="store_true", help="Do not print the tree after each insertion.")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducibility.")
    args = parser.parse_args()

    if args.seed is not None:
        random.seed(args.seed)

    logging.basicConfig(level=logging.INFO, format="%(message)s", force=True)
    run_demo(args.inserts, args.branching_factor, args.pivot, show_steps=not args.quiet)
