from __future__ import annotations

import pytest
from typer.testing import CliRunner

from cli.queries.app import QueryCLIOptions, app

_ENV_KEYS = ("VPTREEX_METRIC", "VPTREEX_LOG_LEVEL", "VPTREEX_ENABLE_DIAGNOSTICS")


@pytest.fixture
def restore_env(monkeypatch: pytest.MonkeyPatch):
    # The CLI exports overrides into os.environ; record the keys for restoration.
    for key in _ENV_KEYS:
        monkeypatch.setenv(key, "")
    return monkeypatch


def test_cli_parses_options(monkeypatch: pytest.MonkeyPatch) -> None:
    runner = CliRunner()
    invoked: dict[str, QueryCLIOptions] = {}

    def fake_run_queries(opts: QueryCLIOptions) -> None:
        invoked["options"] = opts

    monkeypatch.setattr("cli.queries.app.run_queries", fake_run_queries)
    result = runner.invoke(
        app,
        [
            "--metric",
            "Manhattan",
            "--tree-points",
            "32",
            "--queries",
            "4",
            "--k",
            "3",
            "--dimension",
            "2",
            "--seed",
            "7",
            "--baseline",
            "bruteforce",
            "--no-diagnostics",
        ],
    )

    assert result.exit_code == 0, result.output
    options = invoked["options"]
    assert options.metric == "manhattan"
    assert options.tree_points == 32
    assert options.queries == 4
    assert options.k == 3
    assert options.dimension == 2
    assert options.seed == 7
    assert options.baseline == "bruteforce"
    assert options.diagnostics is False


def test_cli_rejects_negative_k() -> None:
    result = CliRunner().invoke(app, ["--k", "-1"])

    assert result.exit_code != 0


@pytest.mark.parametrize("metric", ["euclidean", "chebyshev"])
def test_cli_benchmark_agrees_with_bruteforce(restore_env, metric: str) -> None:
    result = CliRunner().invoke(
        app,
        [
            "--metric",
            metric,
            "--tree-points",
            "200",
            "--queries",
            "10",
            "--k",
            "4",
            "--dimension",
            "3",
            "--baseline",
            "bruteforce",
            "--log-level",
            "WARNING",
        ],
    )

    assert result.exit_code == 0, result.output
    assert "vptree | build=" in result.output
    assert "baseline[bruteforce]" in result.output
    assert "matches=yes" in result.output
