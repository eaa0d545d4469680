from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Tuple

import numpy as np
from numpy.random import default_rng

from vptreex.algo.build import build_tree
from vptreex.core.tree import VPTree
from vptreex.queries.knn import SearchStats, knn
from tests.utils.datasets import gaussian_points


@dataclass(frozen=True)
class QueryBenchmarkResult:
    elapsed_seconds: float
    queries: int
    k: int
    latency_ms: float
    queries_per_second: float
    mean_distance_evaluations: float
    build_seconds: float | None = None


def _build_tree(
    *,
    dimension: int,
    tree_points: int,
    seed: int,
    metric: str,
    prebuilt_points: np.ndarray | None = None,
) -> Tuple[VPTree, np.ndarray, float]:
    if prebuilt_points is not None:
        points_np = np.asarray(prebuilt_points, dtype=np.float64)
    else:
        points_np = gaussian_points(default_rng(seed), tree_points, dimension)
    start = time.perf_counter()
    tree = build_tree(points_np, metric, seed=seed)
    build_seconds = time.perf_counter() - start
    return tree, points_np, build_seconds


def benchmark_knn_latency(
    *,
    dimension: int,
    tree_points: int,
    query_count: int,
    k: int,
    seed: int,
    metric: str = "euclidean",
    prebuilt_points: np.ndarray | None = None,
    prebuilt_tree: VPTree | None = None,
    prebuilt_queries: np.ndarray | None = None,
    build_seconds: float | None = None,
) -> Tuple[VPTree, QueryBenchmarkResult, np.ndarray]:
    """Time ``query_count`` searches; also returns the result distances."""

    tree_build_seconds: float | None
    if prebuilt_tree is None:
        tree, _, tree_build_seconds = _build_tree(
            dimension=dimension,
            tree_points=tree_points,
            seed=seed,
            metric=metric,
            prebuilt_points=prebuilt_points,
        )
    else:
        tree = prebuilt_tree
        tree_build_seconds = build_seconds

    if prebuilt_queries is None:
        queries = gaussian_points(default_rng(seed + 1), query_count, dimension)
    else:
        queries = np.asarray(prebuilt_queries, dtype=np.float64)

    stats = SearchStats()
    start = time.perf_counter()
    _, distances = knn(tree, queries, k=k, return_distances=True, stats=stats)
    elapsed = time.perf_counter() - start
    qps = query_count / elapsed if elapsed > 0 else float("inf")
    latency = (elapsed / query_count) * 1e3 if query_count else 0.0
    mean_evals = stats.distance_evaluations / query_count if query_count else 0.0
    return tree, QueryBenchmarkResult(
        elapsed_seconds=elapsed,
        queries=query_count,
        k=k,
        latency_ms=latency,
        queries_per_second=qps,
        mean_distance_evaluations=mean_evals,
        build_seconds=tree_build_seconds,
    ), distances


__all__ = [
    "QueryBenchmarkResult",
    "_build_tree",
    "benchmark_knn_latency",
]
