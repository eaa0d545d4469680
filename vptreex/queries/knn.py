from __future__ import annotations

import heapq
import math
import operator
from dataclasses import dataclass
from typing import Any, Iterable, List, Tuple

import numpy as np

from vptreex.core.tree import LEAF, Neighbor, VPTree
from vptreex.diagnostics import log_operation
from vptreex.logging import get_logger

LOGGER = get_logger("queries.knn")

_ROOT = 0
_INSIDE = 1
_OUTSIDE = 2


@dataclass
class SearchStats:
    """Optional counters filled in by :func:`search`."""

    distance_evaluations: int = 0
    pruned_subtrees: int = 0

    def merge(self, other: "SearchStats") -> None:
        self.distance_evaluations += other.distance_evaluations
        self.pruned_subtrees += other.pruned_subtrees


def _validate_k(k: Any) -> int:
    if isinstance(k, bool):
        raise TypeError("k must be an integer, got bool.")
    try:
        value = operator.index(k)
    except TypeError as exc:
        raise TypeError(f"k must be an integer, got {type(k).__name__}.") from exc
    if value < 0:
        raise ValueError(f"k must be non-negative, got {value}.")
    return value


def _knn_search(
    tree: VPTree,
    target: Any,
    k: int,
    stats: SearchStats | None,
) -> List[Neighbor]:
    """Branch-and-bound walk collecting the ``k`` closest items to ``target``.

    ``best`` is a max-heap of ``(-distance, -original_index, slot)`` so the
    worst kept candidate sits at ``best[0]``; equal distances evict the larger
    original index first. ``tau`` is the distance of that worst candidate once
    the heap holds ``k`` entries.

    Deferred subtrees carry the parent's distance and threshold and are
    tested against ``tau`` only when popped, so the nearer subtree has already
    had its chance to tighten the bound.
    """

    nodes = tree.nodes
    items = tree.items
    indices = tree.indices
    metric = tree.metric

    best: List[Tuple[float, int, int]] = []
    tau = math.inf
    evaluations = 0
    pruned = 0

    stack: List[Tuple[int, float, float, int]] = [(0, 0.0, 0.0, _ROOT)]
    while stack:
        node_index, parent_dist, parent_threshold, side = stack.pop()
        if side == _INSIDE and parent_dist - tau > parent_threshold:
            pruned += 1
            continue
        if side == _OUTSIDE and parent_dist + tau < parent_threshold:
            pruned += 1
            continue

        node = nodes[node_index]
        dist = metric(items[node.item], target)
        evaluations += 1

        if dist < tau:
            heapq.heappush(best, (-dist, -indices[node.item], node.item))
            if len(best) > k:
                heapq.heappop(best)
            if len(best) == k:
                tau = -best[0][0]

        threshold = node.threshold
        if dist < threshold:
            if node.right != LEAF:
                stack.append((node.right, dist, threshold, _OUTSIDE))
            if node.left != LEAF:
                stack.append((node.left, dist, threshold, _INSIDE))
        else:
            if node.left != LEAF:
                stack.append((node.left, dist, threshold, _INSIDE))
            if node.right != LEAF:
                stack.append((node.right, dist, threshold, _OUTSIDE))

    if stats is not None:
        stats.distance_evaluations += evaluations
        stats.pruned_subtrees += pruned

    results: List[Neighbor] = []
    while best:
        neg_dist, _, slot = heapq.heappop(best)
        results.append(Neighbor(item=items[slot], index=indices[slot], distance=-neg_dist))
    results.reverse()
    return results


def search(
    tree: VPTree,
    target: Any,
    k: int,
    *,
    stats: SearchStats | None = None,
) -> List[Neighbor]:
    """Return the ``min(k, n)`` items closest to ``target`` by ascending distance.

    The tree is only read, so concurrent searches on one tree are safe. Any
    exception raised by the metric propagates and no partial result is
    returned.
    """

    count = _validate_k(k)
    if count == 0 or tree.is_empty():
        return []
    return _knn_search(tree, target, count, stats)


def nearest_neighbor(tree: VPTree, target: Any) -> Neighbor | None:
    results = search(tree, target, 1)
    return results[0] if results else None


def knn(
    tree: VPTree,
    queries: Iterable[Any],
    *,
    k: int,
    return_distances: bool = False,
    stats: SearchStats | None = None,
) -> Tuple[np.ndarray, np.ndarray] | np.ndarray:
    """Batched search returning arrays of original indices.

    Output arrays have shape ``(num_queries, min(k, n))``.
    """

    count = _validate_k(k)
    with log_operation(LOGGER, "knn_query") as op_log:
        batch = list(queries)
        width = min(count, tree.num_items)
        indices = np.empty((len(batch), width), dtype=np.int64)
        distances = np.empty((len(batch), width), dtype=np.float64)
        batch_stats = SearchStats()
        for row, target in enumerate(batch):
            neighbors = search(tree, target, count, stats=batch_stats)
            indices[row] = [neighbor.index for neighbor in neighbors]
            distances[row] = [neighbor.distance for neighbor in neighbors]
        op_log.add_metadata(
            queries=len(batch),
            k=count,
            return_distances=bool(return_distances),
            distance_evaluations=batch_stats.distance_evaluations,
        )
    if stats is not None:
        stats.merge(batch_stats)

    if return_distances:
        return indices, distances
    return indices


__all__ = ["SearchStats", "knn", "nearest_neighbor", "search"]
