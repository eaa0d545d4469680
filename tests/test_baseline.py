import numpy as np
import pytest
from numpy.random import default_rng

from vptreex.baseline import BruteForceIndex
from tests.utils.datasets import gaussian_points


def test_bruteforce_matches_numpy_reference():
    points = gaussian_points(default_rng(0), 64, 3)
    query = gaussian_points(default_rng(1), 1, 3)[0]
    index = BruteForceIndex.from_items(points)

    results = index.knn(query, 5)
    dists = np.linalg.norm(points - query, axis=1)
    order = np.argsort(dists)[:5]

    assert [r.index for r in results] == order.tolist()
    assert np.allclose([r.distance for r in results], dists[order])


def test_bruteforce_breaks_ties_by_index():
    index = BruteForceIndex.from_items([[1.0], [-1.0], [1.0], [0.0]])

    results = index.knn([0.0], 4)

    assert [r.index for r in results] == [3, 0, 1, 2]


def test_bruteforce_edge_cases():
    index = BruteForceIndex.from_items([], "euclidean")
    assert index.knn([0.0], 3) == []

    index = BruteForceIndex.from_items([[0.0], [2.0]])
    assert index.knn([0.0], 0) == []
    assert len(index.knn([0.0], 9)) == 2
    with pytest.raises(ValueError):
        index.knn([0.0], -1)


@pytest.mark.parametrize("bad", [True, 1.5, "2"])
def test_bruteforce_rejects_non_integral_k(bad):
    index = BruteForceIndex.from_items([[0.0], [2.0]])
    with pytest.raises(TypeError):
        index.knn([0.0], bad)
