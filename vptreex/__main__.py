#!/usr/bin/env python
"""Quick-start guide for vptreex library usage.

Run with: python -m vptreex

This module avoids importing vptreex internals to keep startup fast.
"""

from __future__ import annotations

QUICKSTART = """\
================================================================================
                                  VPTREEX
          Vantage-point tree for exact k-NN search in metric spaces
================================================================================

BASIC USAGE (Euclidean k-NN)
----------------------------
    import numpy as np
    from vptreex import VPTree

    points = np.random.randn(10000, 3)
    tree = VPTree.build(points, seed=0)

    # Each neighbour carries the item, its original index and the distance
    for neighbour in tree.query(points[0], k=5):
        print(neighbour.index, neighbour.distance)

CUSTOM METRICS
--------------
Any callable that is non-negative, symmetric and obeys the triangle
inequality can be used:

    from vptreex import build_tree

    tree = build_tree(["kitten", "sitting", "mitten"], "levenshtein", seed=0)
    tree.query("kitchen", k=1)

    tree = build_tree(vectors, lambda a, b: float(abs(a - b).max()))

Built-in metrics: euclidean (default), manhattan, chebyshev, levenshtein.

BATCHED QUERIES
---------------
    from vptreex import VPIndex

    index = VPIndex(metric="euclidean", seed=0).fit(points)
    indices, distances = index.knn(points[:100], k=10, return_distances=True)

CONFIGURATION
-------------
    VPTREEX_LOG_LEVEL           logging level for the "vptreex" logger (INFO)
    VPTREEX_ENABLE_DIAGNOSTICS  sample CPU/RSS in operation logs (1)
    VPTREEX_METRIC              default metric name (euclidean)
    VPTREEX_SEED                default seed for vantage point selection

BENCHMARKING CLI
----------------
    python -m cli.queries --tree-points 8192 --dimension 8 --k 10 --baseline bruteforce

================================================================================
"""


def main() -> None:
    """Print quick-start guide."""
    print(QUICKSTART)


if __name__ == "__main__":
    main()
