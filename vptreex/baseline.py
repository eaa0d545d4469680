"""Exhaustive reference index used to verify and benchmark the VP-tree."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, List, Tuple

import numpy as np

from vptreex.core.metrics import DistanceFn, Metric, resolve_metric
from vptreex.core.tree import Neighbor
from vptreex.queries.knn import _validate_k


@dataclass(frozen=True)
class BruteForceIndex:
    items: Tuple[Any, ...]
    metric: Metric

    @classmethod
    def from_items(
        cls,
        items: Iterable[Any],
        metric: Metric | str | DistanceFn | None = None,
    ) -> "BruteForceIndex":
        return cls(items=tuple(items), metric=resolve_metric(metric))

    def distances(self, target: Any) -> np.ndarray:
        return np.fromiter(
            (self.metric(item, target) for item in self.items),
            dtype=np.float64,
            count=len(self.items),
        )

    def knn(self, target: Any, k: int) -> List[Neighbor]:
        """Sort every item by distance, breaking ties by original index."""

        count = _validate_k(k)
        dists = self.distances(target)
        order = np.argsort(dists, kind="stable")[:count]
        return [
            Neighbor(item=self.items[int(idx)], index=int(idx), distance=float(dists[idx]))
            for idx in order
        ]


__all__ = ["BruteForceIndex"]
