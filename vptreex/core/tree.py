from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, List, Tuple

from vptreex.core.metrics import Metric

if TYPE_CHECKING:  # pragma: no cover - typing only
    from numpy.random import Generator

    from vptreex.core.metrics import DistanceFn

LEAF = -1


@dataclass(frozen=True)
class Node:
    """One vantage point and the distance splitting its two subtrees.

    ``left`` holds items no farther than ``threshold`` from the vantage point,
    ``right`` items no closer. Children are node indices or :data:`LEAF`.
    """

    item: int
    threshold: float = 0.0
    left: int = LEAF
    right: int = LEAF

    @property
    def is_leaf(self) -> bool:
        return self.left == LEAF and self.right == LEAF


@dataclass(frozen=True)
class Neighbor:
    item: Any
    index: int
    distance: float


@dataclass(frozen=True)
class VPTree:
    """Immutable vantage-point tree over ``items``.

    ``items`` is stored in construction order; ``indices[i]`` is the original
    insertion position of ``items[i]``. ``nodes[0]`` is the root.
    """

    items: Tuple[Any, ...]
    indices: Tuple[int, ...]
    nodes: Tuple[Node, ...]
    metric: Metric

    @classmethod
    def build(
        cls,
        items: Any,
        metric: "Metric | str | DistanceFn | None" = None,
        *,
        rng: "Generator | None" = None,
        seed: int | None = None,
    ) -> "VPTree":
        from vptreex.algo.build import build_tree

        return build_tree(items, metric, rng=rng, seed=seed)

    @property
    def num_items(self) -> int:
        return len(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def is_empty(self) -> bool:
        return not self.nodes

    @property
    def root(self) -> Node | None:
        return self.nodes[0] if self.nodes else None

    def item_at(self, node: Node) -> Any:
        return self.items[node.item]

    def original_index(self, node: Node) -> int:
        return self.indices[node.item]

    def subtree_items(self, node_index: int) -> List[int]:
        """Return item slots reachable from ``node_index`` (inclusive)."""

        if node_index == LEAF:
            return []
        slots: List[int] = []
        stack = [node_index]
        while stack:
            node = self.nodes[stack.pop()]
            slots.append(node.item)
            if node.right != LEAF:
                stack.append(node.right)
            if node.left != LEAF:
                stack.append(node.left)
        return slots

    def depth(self) -> int:
        if not self.nodes:
            return 0
        deepest = 0
        stack = [(0, 1)]
        while stack:
            node_index, level = stack.pop()
            deepest = max(deepest, level)
            node = self.nodes[node_index]
            if node.left != LEAF:
                stack.append((node.left, level + 1))
            if node.right != LEAF:
                stack.append((node.right, level + 1))
        return deepest

    def query(self, target: Any, k: int) -> List[Neighbor]:
        from vptreex.queries.knn import search

        return search(self, target, k)


__all__ = ["LEAF", "Neighbor", "Node", "VPTree"]
