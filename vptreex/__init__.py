"""vptreex: exact k-nearest-neighbour search in arbitrary metric spaces.

Quick Start
-----------
>>> import numpy as np
>>> from vptreex import VPTree
>>>
>>> points = np.random.randn(10000, 3)
>>> tree = VPTree.build(points, seed=0)
>>> neighbours = tree.query(points[0], k=10)

Custom metrics
--------------
Any callable satisfying the metric axioms can index non-vector data:

>>> from vptreex import build_tree
>>> words = ["kitten", "sitting", "mitten", "fitting"]
>>> tree = build_tree(words, "levenshtein", seed=0)
>>> [n.item for n in tree.query("kitchen", k=2)]

Classes
-------
VPTree : Immutable vantage-point tree (``build`` / ``query``).
VPIndex : Façade bundling metric, seed and tree (``fit`` / ``knn`` / ``nearest``).
Metric : Named distance capability; see ``available_metrics()``.
"""

from importlib.metadata import version as _pkg_version

try:
    __version__ = _pkg_version("vptreex")
except Exception:  # pragma: no cover - best effort during local development
    __version__ = "0.0.1"

from .api import VPIndex
from .algo import build_tree
from .baseline import BruteForceIndex
from .core import (
    LEAF,
    Metric,
    MetricRegistry,
    Neighbor,
    Node,
    VPTree,
    available_metrics,
    get_metric,
    register_metric,
    resolve_metric,
)
from .queries import SearchStats, knn, nearest_neighbor, search

__all__ = [
    "__version__",
    "VPTree",
    "VPIndex",
    "build_tree",
    "search",
    "knn",
    "nearest_neighbor",
    "SearchStats",
    "Neighbor",
    "Node",
    "LEAF",
    "Metric",
    "MetricRegistry",
    "available_metrics",
    "get_metric",
    "register_metric",
    "resolve_metric",
    "BruteForceIndex",
]
