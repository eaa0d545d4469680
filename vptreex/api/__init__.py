"""Public ergonomic façade for vptreex."""

from .index import VPIndex

__all__ = ["VPIndex"]
