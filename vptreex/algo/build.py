from __future__ import annotations

import math
from typing import Any, Iterable, List, Tuple

import numpy as np
from numpy.random import Generator, default_rng

from vptreex import config as vx_config
from vptreex.core.metrics import DistanceFn, Metric, resolve_metric
from vptreex.core.tree import LEAF, Node, VPTree
from vptreex.diagnostics import log_operation
from vptreex.logging import get_logger

LOGGER = get_logger("algo.build")

# (lower, upper, parent node, attach as left child)
_Frame = Tuple[int, int, int, bool]


def _resolve_rng(rng: Generator | None, seed: int | None) -> Generator:
    if rng is not None:
        return rng
    if seed is None:
        seed = vx_config.runtime_config().seed
    return default_rng(seed)


def _read_only_copy(array: np.ndarray) -> np.ndarray:
    owned = np.array(array, copy=True)
    owned.setflags(write=False)
    return owned


def _owned_items(items: Iterable[Any]) -> List[Any]:
    """Copy ``items`` so later changes to the caller's buffers cannot reach the tree."""

    if isinstance(items, np.ndarray):
        return list(_read_only_copy(items))
    return [
        _read_only_copy(item) if isinstance(item, np.ndarray) else item
        for item in items
    ]


def _checked_distance(
    metric: Metric,
    lhs: Any,
    rhs: Any,
    *,
    lhs_index: int,
    rhs_index: int,
) -> float:
    dist = metric(lhs, rhs)
    if not math.isfinite(dist) or dist < 0.0:
        raise ValueError(
            f"Metric '{metric.name}' returned invalid distance {dist!r} "
            f"for items {lhs_index} and {rhs_index}."
        )
    return dist


class _TreeBuilder:
    """Partitions ``values``/``order`` in place and records nodes in pre-order."""

    def __init__(
        self,
        values: List[Any],
        order: List[int],
        metric: Metric,
        rng: Generator,
    ) -> None:
        self._values = values
        self._order = order
        self._metric = metric
        self._rng = rng
        self._drafts: List[List[Any]] = []

    def build(self) -> Tuple[Node, ...]:
        stack: List[_Frame] = [(0, len(self._values), LEAF, True)]
        while stack:
            lower, upper, parent, as_left = stack.pop()
            if lower >= upper:
                continue
            node_index = len(self._drafts)
            if upper - lower == 1:
                self._drafts.append([lower, 0.0, LEAF, LEAF])
            else:
                self._select_root(lower, upper)
                median = (lower + upper) // 2
                threshold = self._partition_by_distance(lower, median, upper)
                self._drafts.append([lower, threshold, LEAF, LEAF])
                # Left range is popped first so nodes land in recursive pre-order.
                stack.append((median, upper, node_index, False))
                stack.append((lower + 1, median, node_index, True))
            if parent != LEAF:
                self._drafts[parent][2 if as_left else 3] = node_index
        return tuple(
            Node(item=item, threshold=threshold, left=left, right=right)
            for item, threshold, left, right in self._drafts
        )

    def _swap(self, i: int, j: int) -> None:
        values, order = self._values, self._order
        values[i], values[j] = values[j], values[i]
        order[i], order[j] = order[j], order[i]

    def _select_root(self, lower: int, upper: int) -> None:
        root = int(self._rng.integers(lower, upper))
        self._swap(lower, root)

    def _partition_by_distance(self, lower: int, median: int, upper: int) -> float:
        """Move the items of ``[lower+1, upper)`` around the distance median.

        Returns the distance from the vantage point at ``lower`` to the item
        that ends up at ``median``.
        """

        values, order = self._values, self._order
        vantage = values[lower]
        vantage_index = order[lower]
        count = upper - lower - 1
        distances = np.fromiter(
            (
                _checked_distance(
                    self._metric,
                    vantage,
                    values[pos],
                    lhs_index=vantage_index,
                    rhs_index=order[pos],
                )
                for pos in range(lower + 1, upper)
            ),
            dtype=np.float64,
            count=count,
        )
        kth = median - (lower + 1)
        permutation = np.argpartition(distances, kth, kind="introselect")
        start = lower + 1
        values[start:upper] = [values[start + int(p)] for p in permutation]
        order[start:upper] = [order[start + int(p)] for p in permutation]
        return float(distances[permutation[kth]])


def build_tree(
    items: Iterable[Any],
    metric: Metric | str | DistanceFn | None = None,
    *,
    rng: Generator | None = None,
    seed: int | None = None,
) -> VPTree:
    """Construct a vantage-point tree over ``items``.

    Parameters
    ----------
    items:
        Any finite iterable. Each element keeps its position in the iterable
        as its externally visible index.
    metric:
        Registered metric name, :class:`Metric`, or plain callable. Defaults to
        the runtime metric (``VPTREEX_METRIC``, Euclidean unless overridden).
    rng, seed:
        Source of randomness for vantage point selection. ``rng`` wins over
        ``seed``; with neither, ``VPTREEX_SEED`` or OS entropy is used.
    """

    resolved = resolve_metric(metric)
    generator = _resolve_rng(rng, seed)
    values = _owned_items(items)
    order = list(range(len(values)))

    with log_operation(LOGGER, "vptree_build") as op_log:
        nodes = _TreeBuilder(values, order, resolved, generator).build()
        tree = VPTree(
            items=tuple(values),
            indices=tuple(order),
            nodes=nodes,
            metric=resolved,
        )
        op_log.add_metadata(items=len(values), depth=tree.depth(), metric=resolved.name)
    return tree


__all__ = ["build_tree"]
