"""Core data structures and distance metrics for the VP-tree."""

from .metrics import (
    DistanceFn,
    Metric,
    MetricRegistry,
    available_metrics,
    get_metric,
    register_metric,
    resolve_metric,
)
from .tree import LEAF, Neighbor, Node, VPTree

__all__ = [
    "LEAF",
    "Neighbor",
    "Node",
    "VPTree",
    "DistanceFn",
    "Metric",
    "MetricRegistry",
    "available_metrics",
    "get_metric",
    "register_metric",
    "resolve_metric",
]
