from .knn import SearchStats, knn, nearest_neighbor, search

__all__ = ["SearchStats", "knn", "nearest_neighbor", "search"]
