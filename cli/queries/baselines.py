from __future__ import annotations

import time
from dataclasses import dataclass
from typing import List

import numpy as np

from vptreex.baseline import BruteForceIndex


@dataclass(frozen=True)
class BaselineComparison:
    name: str
    build_seconds: float
    elapsed_seconds: float
    latency_ms: float
    queries_per_second: float
    matches: bool


def _run_bruteforce_baseline(
    points: np.ndarray,
    queries: np.ndarray,
    *,
    k: int,
    metric: str,
    reference_distances: np.ndarray,
) -> BaselineComparison:
    start_build = time.perf_counter()
    index = BruteForceIndex.from_items(points, metric)
    build_seconds = time.perf_counter() - start_build
    start = time.perf_counter()
    distances = [
        [neighbor.distance for neighbor in index.knn(query, k)] for query in queries
    ]
    elapsed = time.perf_counter() - start
    count = queries.shape[0]
    qps = count / elapsed if elapsed > 0 else float("inf")
    latency = (elapsed / count) * 1e3 if count else 0.0
    baseline_distances = np.asarray(distances, dtype=np.float64).reshape(reference_distances.shape)
    return BaselineComparison(
        name="bruteforce",
        build_seconds=build_seconds,
        elapsed_seconds=elapsed,
        latency_ms=latency,
        queries_per_second=qps,
        matches=bool(np.allclose(baseline_distances, reference_distances)),
    )


def run_baseline_comparisons(
    points: np.ndarray,
    queries: np.ndarray,
    *,
    k: int,
    metric: str,
    mode: str,
    reference_distances: np.ndarray,
) -> List[BaselineComparison]:
    """Run the requested baselines; distances are compared to the VP-tree's."""

    if mode == "none":
        return []
    if mode == "bruteforce":
        return [
            _run_bruteforce_baseline(
                points,
                queries,
                k=k,
                metric=metric,
                reference_distances=reference_distances,
            )
        ]
    raise ValueError(f"Unknown baseline mode '{mode}'.")


__all__ = ["BaselineComparison", "run_baseline_comparisons"]
