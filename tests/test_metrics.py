import math

import numpy as np
import pytest

from vptreex import config as vx_config
from vptreex.core.metrics import (
    Metric,
    MetricRegistry,
    available_metrics,
    chebyshev,
    euclidean,
    get_metric,
    levenshtein,
    manhattan,
    resolve_metric,
)


def test_euclidean_matches_manual():
    assert euclidean([0.0, 0.0], [3.0, 4.0]) == pytest.approx(5.0)
    assert euclidean(np.array([1.0, 2.0, 3.0]), np.array([1.0, 2.0, 3.0])) == 0.0


def test_manhattan_and_chebyshev():
    assert manhattan([0.0, 0.0], [3.0, -4.0]) == pytest.approx(7.0)
    assert chebyshev([0.0, 0.0], [3.0, -4.0]) == pytest.approx(4.0)
    assert chebyshev([], []) == 0.0


def test_vector_metrics_reject_mismatched_shapes():
    with pytest.raises(ValueError):
        euclidean([0.0, 0.0], [1.0, 2.0, 3.0])
    with pytest.raises(ValueError):
        manhattan([0.0], [1.0, 2.0])


@pytest.mark.parametrize(
    ("lhs", "rhs", "expected"),
    [
        ("kitten", "sitting", 3.0),
        ("", "abc", 3.0),
        ("abc", "", 3.0),
        ("flaw", "lawn", 2.0),
        ("same", "same", 0.0),
    ],
)
def test_levenshtein_known_values(lhs, rhs, expected):
    assert levenshtein(lhs, rhs) == expected
    assert levenshtein(rhs, lhs) == expected


def test_builtin_metrics_registered():
    assert available_metrics() == ("chebyshev", "euclidean", "levenshtein", "manhattan")
    assert get_metric("EUCLIDEAN").name == "euclidean"


def test_get_metric_defaults_to_runtime_metric(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("VPTREEX_METRIC", "manhattan")
    vx_config.reset_runtime_config_cache()
    try:
        assert get_metric().name == "manhattan"
    finally:
        monkeypatch.delenv("VPTREEX_METRIC")
        vx_config.reset_runtime_config_cache()


def test_metric_registry_registers_and_retrieves():
    registry = MetricRegistry()
    custom = Metric("Custom", lambda a, b: abs(a - b))
    registry.register(custom)

    assert registry.get("custom") is custom
    assert registry.names() == ("custom",)

    with pytest.raises(ValueError):
        registry.register(Metric("custom", lambda a, b: 0.0))
    replacement = Metric("custom", lambda a, b: 0.0)
    registry.register(replacement, overwrite=True)
    assert registry.get("CUSTOM") is replacement

    with pytest.raises(KeyError):
        registry.get("missing")


def test_metric_call_returns_float():
    metric = Metric("int_abs", lambda a, b: abs(a - b))
    value = metric(3, 7)
    assert isinstance(value, float)
    assert value == 4.0


def test_resolve_metric_accepts_all_spellings():
    named = resolve_metric("chebyshev")
    assert named.name == "chebyshev"

    metric = Metric("custom", lambda a, b: 0.0)
    assert resolve_metric(metric) is metric

    def absolute(a, b):
        return abs(a - b)

    wrapped = resolve_metric(absolute)
    assert wrapped.name == "absolute"
    assert wrapped(1, 4) == 3.0

    class Hamming:
        def __call__(self, a, b):
            return sum(x != y for x, y in zip(a, b))

    assert resolve_metric(Hamming()).name == "Hamming"


def test_resolve_metric_rejects_non_callables():
    with pytest.raises(TypeError):
        resolve_metric(42)
    with pytest.raises(KeyError):
        resolve_metric("no-such-metric")


def test_builtin_metrics_satisfy_triangle_inequality():
    rng = np.random.default_rng(5)
    points = rng.normal(size=(12, 3))
    for fn in (euclidean, manhattan, chebyshev):
        for a in points:
            for b in points:
                assert fn(a, b) == pytest.approx(fn(b, a))
                for c in points:
                    assert fn(a, c) <= fn(a, b) + fn(b, c) + 1e-12
    assert math.isclose(euclidean(points[0], points[1]), float(np.linalg.norm(points[0] - points[1])))
