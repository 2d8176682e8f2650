"""Statistics for B+-trees."""

import argparse
import logging
import math
import os
import random
import time
from datetime import datetime
from statistics import mean

import numpy as np
from tqdm import tqdm

from bplus_index.bplus_tree_base import BPlusTreeBase
from bplus_index.factory import create_bplustree
from bplus_index.invariants import assert_tree_invariants_raise
from bplus_index.tree_stats import bptree_stats_

logger = logging.getLogger(__name__)


def create_bptree(pairs, branching_factor=16):
    """Build a tree by inserting each (key, value) pair in order."""
    tree = create_bplustree(branching_factor)
    tree_insert = tree.insert
    for key, value in pairs:
        tree_insert(key, value)
    return tree


# Create a random B+-tree with n entries; duplicate_ratio controls how many keys repeat.
def random_bptree_of_size(n: int, branching_factor: int, duplicate_ratio: float = 0.0) -> BPlusTreeBase:
    # we need at least n unique values; 2^24 = 16 777 216 > 1 000 000
    space = 1 << 24
    if space <= n:
        raise ValueError(f"Key-space too small! Required: {n + 1}, Available: {space}")

    distinct = max(1, int(round(n * (1.0 - duplicate_ratio))))
    keys = np.random.choice(space, size=distinct, replace=False)
    if distinct < n:
        keys = np.concatenate([keys, np.random.choice(keys, size=n - distinct)])
    np.random.shuffle(keys)

    pairs = [(int(k), f"val_{i}") for i, k in enumerate(keys)]
    return create_bptree(pairs, branching_factor=branching_factor)


def repeated_experiment(
    size: int,
    repetitions: int,
    branching_factor: int,
    duplicate_ratio: float = 0.0,
) -> None:
    """
    Repeatedly builds random B+-trees with ``size`` entries, checks their
    invariants and aggregates shape statistics and timings over all trees.
    """
    t_all_0 = time.perf_counter()

    results = []
    times_build = []
    times_stats = []
    times_range = []

    for _ in tqdm(range(repetitions), desc=f"n={size}, B={branching_factor}", leave=False):
        t0 = time.perf_counter()
        tree = random_bptree_of_size(size, branching_factor, duplicate_ratio)
        times_build.append(time.perf_counter() - t0)

        t0 = time.perf_counter()
        stats = bptree_stats_(tree)
        times_stats.append(time.perf_counter() - t0)

        # Range search around the median key
        t0 = time.perf_counter()
        pivot = stats.least_key + (stats.greatest_key - stats.least_key) // 2
        tree.range_search(pivot, ">=")
        times_range.append(time.perf_counter() - t0)

        results.append(stats)
        assert_tree_invariants_raise(tree, stats)

    # Best possible height: every node full
    perfect_height = math.ceil(math.log(size, branching_factor)) if size > 1 else 1

    def avg_var(values):
        avg = mean(values)
        return avg, mean((v - avg) ** 2 for v in values)

    rows = [
        ("Item count", *avg_var([s.item_count for s in results])),
        ("Leaf count", *avg_var([s.leaf_count for s in results])),
        ("Internal count", *avg_var([s.internal_node_count for s in results])),
        ("Avg leaf fill", *avg_var([s.avg_leaf_fill for s in results])),
        ("Leaf utilization", *avg_var([s.avg_leaf_fill / branching_factor for s in results])),
        ("Max fan-out", *avg_var([s.max_fanout for s in results])),
        ("Height", *avg_var([s.height for s in results])),
        ("Perfect height", perfect_height, None),
        ("Height amplification", *avg_var([s.height / perfect_height for s in results])),
    ]

    header = f"{'Metric':<20} {'Avg':>15} {'(Var)':>15}"
    sep_line = "-" * len(header)

    logger.info(header)
    logger.info(sep_line)
    for name, avg, var in rows:
        if var is None:
            logger.info(f"{name:<20} {avg:>15}")
        else:
            var_str = f"({var:.2f})"
            avg_fmt = f"{avg:15.2f}"
            logger.info(f"{name:<20} {avg_fmt} {var_str:>15}")

    # Performance metrics
    sum_build = sum(times_build)
    sum_stats = sum(times_stats)
    sum_range = sum(times_range)
    total_sum = sum_build + sum_stats + sum_range

    perf_rows = [
        ("Build time (s)", times_build, sum_build),
        ("Stats time (s)", times_stats, sum_stats),
        ("Range time (s)", times_range, sum_range),
    ]

    header = f"{'Metric':<20}{'Avg(s)':>13}{'Var(s)':>13}{'Total(s)':>13}{'%Total':>10}"
    sep = "-" * len(header)

    logger.info("")
    logger.info("Performance summary:")
    logger.info(header)
    logger.info(sep)
    for name, times, total in perf_rows:
        avg, var = avg_var(times)
        pct = (total / total_sum * 100) if total_sum else 0
        logger.info(f"{name:<20}{avg:13.6f}{var:13.6f}{total:13.6f}{pct:10.2f}%")

    logger.info(sep)
    t_all_1 = time.perf_counter() - t_all_0
    logger.info("Execution time: %.3f seconds", t_all_1)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Run statistics experiments for B+-trees.")
    parser.add_argument(
        "--sizes", type=int, nargs="+", default=[10, 100, 1000, 10_000], help="List of tree sizes to test."
    )
    parser.add_argument(
        "--branching-factors", type=int, nargs="+", default=[3, 4, 16, 64],
        help="List of branching factors to test."
    )
    parser.add_argument("--repetitions", type=int, default=10, help="Number of repetitions for each experiment.")
    parser.add_argument(
        "--duplicate-ratio", type=float, default=0.0, help="Share of inserted keys that repeat an earlier key."
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducibility.")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default="INFO",
        help="Set the logging level (default: INFO)",
    )

    args = parser.parse_args()

    if args.seed is not None:
        random.seed(args.seed)
        np.random.seed(args.seed)

    log_dir = os.path.join(os.getcwd(), "stats/logs/bplus_tree_logs")
    os.makedirs(log_dir, exist_ok=True)

    ts = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_path = os.path.join(log_dir, f"run_{ts}.log")

    log_level = getattr(logging, args.log_level)
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=[
            logging.FileHandler(log_path, mode="w"),
            logging.StreamHandler(),
        ],
        force=True,
    )

    # Also apply the chosen level to the library logger
    logging.getLogger("bplus_index").setLevel(log_level)

    for n in args.sizes:
        for B in args.branching_factors:
            logger.info("")
            logger.info("")
            logger.info(
                f"---------------- NOW RUNNING EXPERIMENT: n = {n}, B = {B}, "
                f"repetitions = {args.repetitions} ----------------"
            )
            t0 = time.perf_counter()
            repeated_experiment(
                size=n,
                repetitions=args.repetitions,
                branching_factor=B,
                duplicate_ratio=args.duplicate_ratio,
            )
            elapsed = time.perf_counter() - t0
            logger.info(f"Total experiment time: {elapsed:.3f} seconds")
