"""
Benchmark the ranked AVL tree operations.

For every size, the script inserts that many random keys, then times search, rank and delete queries. The reported
numbers are microseconds per operation, plus the final tree height against log2(n).

Usage:
    python benchmark/ranked_tree_benchmark.py --sizes 1000 10000 100000 --num_queries 1000
"""

import argparse
import logging
import math
import random
import time
from dataclasses import dataclass
from typing import List

from rankavl.dependency import Player, RankedAVLTree

logger = logging.getLogger(__name__)


@dataclass
class BenchmarkResult:
    """Per-operation timing for one tree size."""
    size: int
    height: int
    insert_us: float
    search_us: float
    rank_us: float
    delete_us: float

    @property
    def height_ratio(self) -> float:
        return self.height / math.log2(self.size) if self.size > 1 else 1.0


def run_benchmark(size: int, num_queries: int, rng: random.Random) -> BenchmarkResult:
    avl_tree = RankedAVLTree()
    root = None
    keys = rng.sample(range(size * 10), size)

    start = time.perf_counter()
    for key in keys:
        root = avl_tree.insert(root=root, payload=Player(name=f"p{key}", id=key, score=key), key=key)
    insert_us = (time.perf_counter() - start) / size * 1e6
    height = root.height

    queries = [rng.choice(keys) for _ in range(num_queries)]

    start = time.perf_counter()
    for key in queries:
        avl_tree.search(key=key, root=root)
    search_us = (time.perf_counter() - start) / num_queries * 1e6

    start = time.perf_counter()
    for key in queries:
        avl_tree.get_rank(key=key, root=root)
    rank_us = (time.perf_counter() - start) / num_queries * 1e6

    # Delete distinct keys so every timed call removes a node.
    removed = rng.sample(keys, min(num_queries, size))
    start = time.perf_counter()
    for key in removed:
        root = avl_tree.delete(root=root, key=key)
    delete_us = (time.perf_counter() - start) / len(removed) * 1e6

    return BenchmarkResult(size, height, insert_us, search_us, rank_us, delete_us)


def main():
    parser = argparse.ArgumentParser(description="Time the ranked AVL tree operations.")
    parser.add_argument("--sizes", type=int, nargs="+", default=[1000, 10000, 100000], help="Tree sizes to test.")
    parser.add_argument("--num_queries", type=int, default=1000, help="Number of queries per operation.")
    parser.add_argument("--seed", type=int, default=0, help="Random seed.")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format="%(levelname)s %(message)s")
    rng = random.Random(args.seed)

    results: List[BenchmarkResult] = []
    for size in args.sizes:
        logger.info("Benchmarking size %d.", size)
        results.append(run_benchmark(size=size, num_queries=args.num_queries, rng=rng))

    print(f"{'size':>10} {'height':>7} {'h/log2n':>8} {'insert':>9} {'search':>9} {'rank':>9} {'delete':>9}")
    for r in results:
        print(
            f"{r.size:>10} {r.height:>7} {r.height_ratio:>8.2f} "
            f"{r.insert_us:>9.2f} {r.search_us:>9.2f} {r.rank_us:>9.2f} {r.delete_us:>9.2f}"
        )


if __name__ == "__main__":
    main()
