from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Iterable, List

from vptreex.algo.build import build_tree
from vptreex.core.metrics import DistanceFn, Metric
from vptreex.core.tree import Neighbor, VPTree
from vptreex.queries.knn import knn as knn_query
from vptreex.queries.knn import nearest_neighbor, search


@dataclass(frozen=True)
class VPIndex:
    """Thin façade around tree construction and query helpers."""

    metric: Metric | str | DistanceFn | None = None
    seed: int | None = None
    tree: VPTree | None = None

    def fit(self, items: Iterable[Any]) -> "VPIndex":
        tree = build_tree(items, self.metric, seed=self.seed)
        return replace(self, tree=tree)

    def search(self, target: Any, k: int) -> List[Neighbor]:
        return search(self._require_tree(), target, k)

    def knn(
        self,
        queries: Iterable[Any],
        *,
        k: int,
        return_distances: bool = False,
    ) -> Any:
        return knn_query(
            self._require_tree(),
            queries,
            k=k,
            return_distances=return_distances,
        )

    def nearest(self, target: Any) -> Neighbor | None:
        return nearest_neighbor(self._require_tree(), target)

    def _require_tree(self) -> VPTree:
        if self.tree is None:
            raise ValueError("VPIndex requires a built tree; call fit() first.")
        return self.tree
