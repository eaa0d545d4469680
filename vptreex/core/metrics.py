from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Tuple

import numpy as np

from vptreex import config as vx_config

DistanceFn = Callable[[Any, Any], float]


@dataclass(frozen=True)
class Metric:
    """Named distance capability used by tree construction and search.

    ``distance`` must be a true metric: non-negative, symmetric and satisfying
    the triangle inequality. Search pruning is only exact under those
    conditions.
    """

    name: str
    distance: DistanceFn

    def __call__(self, lhs: Any, rhs: Any) -> float:
        return float(self.distance(lhs, rhs))


class MetricRegistry:
    """Minimal registry for runtime-selectable metrics."""

    def __init__(self) -> None:
        self._metrics: Dict[str, Metric] = {}

    def register(self, metric: Metric, *, overwrite: bool = False) -> None:
        name = metric.name.lower()
        if not overwrite and name in self._metrics:
            raise ValueError(f"Metric '{metric.name}' already registered.")
        self._metrics[name] = metric

    def get(self, name: str) -> Metric:
        key = name.lower()
        if key not in self._metrics:
            raise KeyError(f"Metric '{name}' not registered.")
        return self._metrics[key]

    def names(self) -> Tuple[str, ...]:
        return tuple(sorted(self._metrics.keys()))


def _vector_pair(lhs: Any, rhs: Any) -> Tuple[np.ndarray, np.ndarray]:
    lhs_arr = np.asarray(lhs, dtype=np.float64)
    rhs_arr = np.asarray(rhs, dtype=np.float64)
    if lhs_arr.shape != rhs_arr.shape:
        raise ValueError(
            f"Metric operands must have identical shapes, got {lhs_arr.shape} and {rhs_arr.shape}."
        )
    return lhs_arr, rhs_arr


def euclidean(lhs: Any, rhs: Any) -> float:
    lhs_arr, rhs_arr = _vector_pair(lhs, rhs)
    diff = lhs_arr - rhs_arr
    return float(np.sqrt(np.sum(diff * diff)))


def manhattan(lhs: Any, rhs: Any) -> float:
    lhs_arr, rhs_arr = _vector_pair(lhs, rhs)
    return float(np.sum(np.abs(lhs_arr - rhs_arr)))


def chebyshev(lhs: Any, rhs: Any) -> float:
    lhs_arr, rhs_arr = _vector_pair(lhs, rhs)
    if lhs_arr.size == 0:
        return 0.0
    return float(np.max(np.abs(lhs_arr - rhs_arr)))


def levenshtein(lhs: str, rhs: str) -> float:
    """Edit distance between two strings (unit insert/delete/substitute costs)."""

    if lhs == rhs:
        return 0.0
    if len(lhs) < len(rhs):
        lhs, rhs = rhs, lhs
    previous = list(range(len(rhs) + 1))
    for i, left_char in enumerate(lhs, start=1):
        current = [i]
        for j, right_char in enumerate(rhs, start=1):
            current.append(
                min(
                    previous[j] + 1,
                    current[j - 1] + 1,
                    previous[j - 1] + (left_char != right_char),
                )
            )
        previous = current
    return float(previous[-1])


def _load_registry() -> MetricRegistry:
    registry = MetricRegistry()
    registry.register(Metric(name="euclidean", distance=euclidean))
    registry.register(Metric(name="manhattan", distance=manhattan))
    registry.register(Metric(name="chebyshev", distance=chebyshev))
    registry.register(Metric(name="levenshtein", distance=levenshtein))
    return registry


_REGISTRY = _load_registry()


def get_metric(name: str | None = None) -> Metric:
    """Return a registered metric, defaulting to the runtime-selected metric."""

    if name is None:
        name = vx_config.runtime_config().metric
    return _REGISTRY.get(name)


def register_metric(metric: Metric, *, overwrite: bool = False) -> None:
    _REGISTRY.register(metric, overwrite=overwrite)


def available_metrics() -> Tuple[str, ...]:
    return _REGISTRY.names()


def resolve_metric(metric: Metric | str | DistanceFn | None = None) -> Metric:
    """Normalise the accepted metric spellings into a :class:`Metric`."""

    if metric is None or isinstance(metric, str):
        return get_metric(metric)
    if isinstance(metric, Metric):
        return metric
    if callable(metric):
        name = getattr(metric, "__name__", type(metric).__name__)
        return Metric(name=name, distance=metric)
    raise TypeError(
        f"Metric must be a registered name, a Metric or a callable, got {type(metric).__name__}."
    )


__all__ = [
    "DistanceFn",
    "Metric",
    "MetricRegistry",
    "available_metrics",
    "chebyshev",
    "euclidean",
    "get_metric",
    "levenshtein",
    "manhattan",
    "register_metric",
    "resolve_metric",
]
