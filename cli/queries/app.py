from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional

import typer
from numpy.random import default_rng
from typing_extensions import Annotated

from vptreex import config as vx_config

from cli.runtime import runtime_from_args
from tests.utils.datasets import gaussian_dataset

from .baselines import run_baseline_comparisons
from .benchmark import benchmark_knn_latency


@dataclass
class QueryCLIOptions:
    dimension: int = 8
    tree_points: int = 16_384
    queries: int = 1_024
    k: int = 8
    seed: int = 0
    metric: str = "euclidean"
    log_level: str | None = None
    diagnostics: bool | None = None
    baseline: str = "none"


app = typer.Typer(
    add_completion=False,
    pretty_exceptions_enable=False,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
    help="Benchmark vantage-point tree construction and k-NN query latency.",
)

_SHAPE_PANEL = "Benchmark shape"
_RUNTIME_PANEL = "Runtime controls"
_BASELINE_PANEL = "Baselines"


@app.callback(invoke_without_command=True)
def cli(
    ctx: typer.Context,
    dimension: Annotated[
        int,
        typer.Option(
            "--dimension",
            min=1,
            help="Dimensionality of tree/query points.",
            rich_help_panel=_SHAPE_PANEL,
        ),
    ] = 8,
    tree_points: Annotated[
        int,
        typer.Option(
            "--tree-points",
            min=0,
            help="Number of points indexed before querying.",
            rich_help_panel=_SHAPE_PANEL,
        ),
    ] = 16_384,
    queries: Annotated[
        int,
        typer.Option(
            "--queries",
            min=0,
            help="Number of query points per run.",
            rich_help_panel=_SHAPE_PANEL,
        ),
    ] = 1_024,
    k: Annotated[
        int,
        typer.Option(
            "--k",
            min=0,
            help="Number of neighbours requested per query.",
            rich_help_panel=_SHAPE_PANEL,
        ),
    ] = 8,
    seed: Annotated[
        int,
        typer.Option(
            "--seed",
            help="Seed for point generation and vantage point selection.",
            rich_help_panel=_SHAPE_PANEL,
        ),
    ] = 0,
    metric: Annotated[
        Literal["euclidean", "manhattan", "chebyshev"],
        typer.Option(
            "--metric",
            case_sensitive=False,
            help="Distance metric to benchmark.",
            rich_help_panel=_RUNTIME_PANEL,
        ),
    ] = "euclidean",
    log_level: Annotated[
        Optional[str],
        typer.Option(
            "--log-level",
            help="Override VPTREEX_LOG_LEVEL.",
            rich_help_panel=_RUNTIME_PANEL,
        ),
    ] = None,
    diagnostics: Annotated[
        Optional[bool],
        typer.Option(
            "--diagnostics/--no-diagnostics",
            help="Sample CPU and RSS in operation logs.",
            rich_help_panel=_RUNTIME_PANEL,
        ),
    ] = None,
    baseline: Annotated[
        Literal["none", "bruteforce"],
        typer.Option(
            "--baseline",
            help="Reference implementation to compare against.",
            rich_help_panel=_BASELINE_PANEL,
        ),
    ] = "none",
) -> None:
    if ctx.invoked_subcommand is not None:
        return
    options = QueryCLIOptions(
        dimension=dimension,
        tree_points=tree_points,
        queries=queries,
        k=k,
        seed=seed,
        metric=metric.lower(),
        log_level=log_level,
        diagnostics=diagnostics,
        baseline=baseline,
    )
    run_queries(options)


def run_queries(options: QueryCLIOptions) -> None:
    args = options
    runtime_from_args(args)
    try:
        points_np, queries_np = gaussian_dataset(
            default_rng(args.seed),
            tree_points=args.tree_points,
            queries=args.queries,
            dimension=args.dimension,
        )
        tree, result, distances = benchmark_knn_latency(
            dimension=args.dimension,
            tree_points=args.tree_points,
            query_count=args.queries,
            k=args.k,
            seed=args.seed,
            metric=args.metric,
            prebuilt_points=points_np,
            prebuilt_queries=queries_np,
        )

        typer.echo(
            f"vptree | build={result.build_seconds:.4f}s depth={tree.depth()} "
            f"queries={result.queries} k={result.k} "
            f"time={result.elapsed_seconds:.4f}s "
            f"latency={result.latency_ms:.4f}ms "
            f"throughput={result.queries_per_second:,.1f} q/s "
            f"distance_evals={result.mean_distance_evaluations:.1f}/query"
        )

        baseline_results = run_baseline_comparisons(
            points_np,
            queries_np,
            k=args.k,
            metric=args.metric,
            mode=args.baseline,
            reference_distances=distances,
        )
        for baseline in baseline_results:
            slowdown = (
                baseline.latency_ms / result.latency_ms if result.latency_ms else float("inf")
            )
            typer.echo(
                f"baseline[{baseline.name}] | build={baseline.build_seconds:.4f}s "
                f"time={baseline.elapsed_seconds:.4f}s "
                f"latency={baseline.latency_ms:.4f}ms "
                f"throughput={baseline.queries_per_second:,.1f} q/s "
                f"slowdown={slowdown:.3f}x "
                f"matches={'yes' if baseline.matches else 'NO'}"
            )
            if not baseline.matches:
                raise typer.Exit(code=1)
    finally:
        vx_config.reset_runtime_config_cache()


def main() -> None:
    app()


__all__ = ["QueryCLIOptions", "app", "main", "run_queries"]
